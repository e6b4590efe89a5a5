# report.py
# Rendering: colored text on stdout or a JSON file on disk

import json
import os

from colorama import Fore

from .console import format_duration, paint, print_success
from .errors import ReportError
from .models import PortResult, ScanReport, UrlReport

OUTPUT_MODES = ("text", "json")
NOT_FOUND = "Not found"

# ------------------ JSON ------------------
def scan_report_filename(ip: str) -> str:
    return f"port_scan_{ip}.json"


URL_REPORT_FILENAME = "url_report.json"


def write_json(path, data):
    try:
        payload = json.dumps(data, indent=2, ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise ReportError(f"Could not serialize report: {e}") from e
    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write(payload)
    except OSError as e:
        raise ReportError(f"Error while writing JSON file {path}: {e}") from e
    return path


# ------------------ Text ------------------
def format_port_line(r: PortResult, color: bool = True) -> str:
    return "[{}] Port {} open (response: {}) - Service: {}".format(
        paint("✓", Fore.GREEN, enabled=color),
        paint(r.port, Fore.CYAN, enabled=color),
        paint(format_duration(r.response_time_ms), Fore.YELLOW, enabled=color),
        paint(r.banner, Fore.MAGENTA, enabled=color),
    )


def _row(label: str, value) -> str:
    return f"{label:<20} {value}"


def _on_off(flag: bool, yes: str = "Enabled", no: str = "Disabled", color: bool = True) -> str:
    return paint(yes, Fore.GREEN, enabled=color) if flag else paint(no, Fore.RED, enabled=color)


def format_url_report(r: UrlReport, color: bool = True) -> list[str]:
    def c(text, fg): return paint(text, fg, enabled=color)
    lines = [
        "",
        "--- General ---",
        _row("URL:", c(r.url, Fore.CYAN)),
        _row("HTTP Status:", c(r.http_status, Fore.GREEN)),
        _row("Response Time:", c(format_duration(r.response_time_ms), Fore.YELLOW)),
        _row("IP Addresses:", c(", ".join(r.ip_addresses), Fore.MAGENTA)),
        "",
        "--- Content ---",
        _row("Page Title:", c(r.page_title or NOT_FOUND, Fore.CYAN)),
        _row("Meta Description:", r.meta_description or NOT_FOUND),
        _row("Content-Type:", r.content_type),
        _row("Content-Length:", f"{r.content_length} bytes"),
        "",
        "--- Server & Technologies ---",
        _row("Server:", c(r.server, Fore.MAGENTA)),
        _row("X-Powered-By:", c(r.powered_by, Fore.BLUE)),
    ]
    if r.technologies:
        lines.append(_row("Technologies:", c(", ".join(r.technologies), Fore.YELLOW)))
    h = r.security_headers
    lines += [
        "",
        "--- Security ---",
        _row("robots.txt:", _on_off(r.robots_txt_found, "Found", NOT_FOUND, color)),
        _row("HSTS (Strict-Transport-Security):", _on_off(h.hsts, color=color)),
        _row("CSP (Content-Security-Policy):", _on_off(h.csp, color=color)),
        _row("X-Frame-Options:", _on_off(h.x_frame_options, color=color)),
    ]
    return lines


# ------------------ Reporter ------------------
def _check_mode(mode: str) -> None:
    if mode not in OUTPUT_MODES:
        raise ReportError(f"Unknown output mode {mode!r} (expected one of: {', '.join(OUTPUT_MODES)})")


def print_hostname(hostname: str) -> None:
    print_success(f"Hostname: {hostname}")


def render_scan_report(report: ScanReport, mode: str = "text", directory: str = ".",
                       header: bool = True):
    """
    text: hostname (unless `header` is False) + one line per open port on stdout.
    json: port_scan_<ip>.json in `directory`, returns its path.
    """
    _check_mode(mode)
    if mode == "json":
        path = os.path.join(directory, scan_report_filename(report.target_address))
        write_json(path, report.to_dict())
        print_success(f"Results saved to: {path}")
        return path

    if header:
        print_hostname(report.target_hostname)
    for r in report.open_ports:
        print(format_port_line(r))
    return None


def render_url_report(report: UrlReport, mode: str = "text", directory: str = "."):
    _check_mode(mode)
    if mode == "json":
        path = os.path.join(directory, URL_REPORT_FILENAME)
        write_json(path, report.to_dict())
        print_success(f"JSON report created: {path}")
        return path

    for line in format_url_report(report):
        print(line)
    return None
