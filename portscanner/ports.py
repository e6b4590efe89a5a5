# ports.py
# "start-end" text -> (start, end). Never fails, falls back to the full range.

import re

MIN_PORT = 1
MAX_PORT = 65535
DEFAULT_PORT_RANGE = f"{MIN_PORT}-{MAX_PORT}"

# ASCII digits only: no whitespace, no "_" separators, no non-ASCII digits
_U16 = re.compile(r"\+?[0-9]+")


def _parse_u16(text):
    if not isinstance(text, str) or not _U16.fullmatch(text):
        return None
    value = int(text)
    if 0 <= value <= 65535:
        return value
    return None


def parse_port_range(text: str) -> tuple[int, int]:
    # e.g., "1-1024", "80", "-443", "abc"
    parts = (text or "").split("-")
    start = _parse_u16(parts[0]) if len(parts) > 0 else None
    end = _parse_u16(parts[1]) if len(parts) > 1 else None
    return (MIN_PORT if start is None else start,
            MAX_PORT if end is None else end)


def port_span(start: int, end: int) -> range:
    """Inclusive range of ports; empty when start > end."""
    return range(start, end + 1)
