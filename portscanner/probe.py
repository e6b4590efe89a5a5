# probe.py
# One bounded TCP connect + banner read for a single (host, port)

import asyncio
import enum
import ipaddress
import logging
import time
from dataclasses import dataclass
from typing import Optional

from .models import NO_SERVICE_INFO, PortResult

logger = logging.getLogger(__name__)

# ------------------ Probe settings ------------------
CONNECT_TIMEOUT = 1.0
READ_TIMEOUT = 1.0
READ_BYTES = 512
PROBE_PAYLOAD = b"GET / HTTP/1.0\r\n\r\n"


class ProbeStatus(enum.Enum):
    OPEN = "open"
    CLOSED = "closed"
    TIMEOUT = "timeout"
    ERROR = "error"
    INVALID_ADDRESS = "invalid_address"


@dataclass(frozen=True)
class ProbeOutcome:
    port: int
    status: ProbeStatus
    result: Optional[PortResult] = None
    detail: str = ""


def compose_address(host: str, port: int) -> Optional[tuple[str, int]]:
    try:
        ip = ipaddress.ip_address(host)
    except ValueError:
        return None
    if not 0 <= port <= 65535:
        return None
    return str(ip), port


def first_line(data: bytes) -> str:
    text = data.decode("utf-8", "replace")
    return text.split("\n", 1)[0].strip()


async def _read_some(reader: asyncio.StreamReader, nbytes: int = READ_BYTES,
                     timeout: float = READ_TIMEOUT) -> bytes:
    try:
        return await asyncio.wait_for(reader.read(nbytes), timeout) or b""
    except (asyncio.TimeoutError, OSError):
        return b""


async def _send_probe(writer: asyncio.StreamWriter) -> None:
    try:
        writer.write(PROBE_PAYLOAD)
        await writer.drain()
    except OSError as e:
        logger.debug("probe write failed: %s", e)


async def _close(writer: asyncio.StreamWriter) -> None:
    writer.close()
    try:
        await writer.wait_closed()
    except OSError:
        pass


async def probe(host: str, port: int, connect_timeout: float = CONNECT_TIMEOUT,
                read_timeout: float = READ_TIMEOUT) -> ProbeOutcome:
    """
    Connect to host:port within `connect_timeout`, send a tiny HTTP line and
    read whatever comes back within `read_timeout`.
    Never raises for network failures; the reason ends up in `status`.
    """
    addr = compose_address(host, port)
    if addr is None:
        return ProbeOutcome(port, ProbeStatus.INVALID_ADDRESS, detail=f"{host}:{port}")

    started = time.perf_counter()
    try:
        reader, writer = await asyncio.wait_for(asyncio.open_connection(*addr), connect_timeout)
    except asyncio.TimeoutError:
        return ProbeOutcome(port, ProbeStatus.TIMEOUT)
    except ConnectionRefusedError:
        return ProbeOutcome(port, ProbeStatus.CLOSED)
    except OSError as e:
        return ProbeOutcome(port, ProbeStatus.ERROR, detail=str(e))
    elapsed_ms = int((time.perf_counter() - started) * 1000)

    try:
        await _send_probe(writer)
        data = await _read_some(reader, READ_BYTES, read_timeout)
    finally:
        await _close(writer)

    banner = first_line(data) if data else NO_SERVICE_INFO
    result = PortResult(port=port, is_open=True, banner=banner, response_time_ms=elapsed_ms)
    return ProbeOutcome(port, ProbeStatus.OPEN, result=result)


async def probe_port(host: str, port: int, connect_timeout: float = CONNECT_TIMEOUT,
                     read_timeout: float = READ_TIMEOUT) -> Optional[PortResult]:
    """PortResult for an open port, None for anything else."""
    outcome = await probe(host, port, connect_timeout, read_timeout)
    return outcome.result
