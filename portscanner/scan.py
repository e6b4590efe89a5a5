# scan.py
# Scan orchestration: validate target -> reverse lookup -> fan out probes -> report

import asyncio
import ipaddress
import logging
import socket
from collections import Counter
from typing import Callable, Iterable, Optional

from . import console
from .errors import InvalidTargetError
from .models import HOSTNAME_NOT_FOUND, PortResult, ScanReport
from .ports import DEFAULT_PORT_RANGE, parse_port_range, port_span
from .probe import CONNECT_TIMEOUT, READ_TIMEOUT, ProbeOutcome, ProbeStatus, probe
from .report import print_hostname, render_scan_report

logger = logging.getLogger(__name__)

# 0 = no cap, one in-flight connection per port
DEFAULT_CONCURRENCY = 1000

Resolver = Callable[[str], Optional[str]]


def reverse_lookup(ip: str) -> Optional[str]:
    try:
        return socket.gethostbyaddr(ip)[0]
    except OSError:  # herror, gaierror
        return None


def validate_target(ip: str) -> str:
    try:
        ipaddress.ip_address(ip)
    except ValueError:
        raise InvalidTargetError(ip) from None
    return ip


async def resolve_hostname(ip: str, resolver: Resolver = reverse_lookup) -> str:
    loop = asyncio.get_running_loop()
    try:
        name = await loop.run_in_executor(None, resolver, ip)
    except Exception as e:
        logger.debug("reverse lookup for %s failed: %s", ip, e)
        name = None
    return name or HOSTNAME_NOT_FOUND


async def _guarded(ip: str, port: int, sem: Optional[asyncio.Semaphore],
                   connect_timeout: float, read_timeout: float) -> ProbeOutcome:
    # any failure inside a probe task only drops that port
    try:
        if sem is None:
            return await probe(ip, port, connect_timeout, read_timeout)
        async with sem:
            return await probe(ip, port, connect_timeout, read_timeout)
    except asyncio.CancelledError:
        return ProbeOutcome(port, ProbeStatus.TIMEOUT, detail="cancelled")
    except Exception as e:
        logger.debug("probe task for port %d crashed: %r", port, e)
        return ProbeOutcome(port, ProbeStatus.ERROR, detail=repr(e))


async def scan_ports(ip: str, ports: Iterable[int], concurrency: int = DEFAULT_CONCURRENCY,
                     connect_timeout: float = CONNECT_TIMEOUT,
                     read_timeout: float = READ_TIMEOUT) -> list[PortResult]:
    """
    Probe every port concurrently and return the open ones in the order
    the probes finished.
    """
    sem = asyncio.Semaphore(concurrency) if concurrency and concurrency > 0 else None
    tasks = [
        asyncio.ensure_future(_guarded(ip, p, sem, connect_timeout, read_timeout))
        for p in ports
    ]
    if not tasks:
        return []

    open_ports = []
    stats = Counter()
    try:
        for fut in asyncio.as_completed(tasks):
            outcome = await fut
            stats[outcome.status] += 1
            if outcome.status is ProbeStatus.OPEN and outcome.result is not None:
                logger.debug("port %d open in %d ms", outcome.port, outcome.result.response_time_ms)
                open_ports.append(outcome.result)
    finally:
        # scan cancelled: outstanding probes end up as timeouts
        pending = [t for t in tasks if not t.done()]
        for t in pending:
            t.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    logger.debug("probed %d ports on %s: %s", len(tasks), ip,
                 ", ".join(f"{s.value}={n}" for s, n in stats.items()))
    return open_ports


async def scan(ip: str, port_range: str = DEFAULT_PORT_RANGE, *,
               concurrency: int = DEFAULT_CONCURRENCY,
               connect_timeout: float = CONNECT_TIMEOUT,
               read_timeout: float = READ_TIMEOUT,
               resolver: Resolver = reverse_lookup,
               sort_ports: bool = False,
               on_hostname: Optional[Callable[[str], None]] = None) -> ScanReport:
    """
    `on_hostname` is called with the resolved name before any probe starts.
    """
    logger.debug("validating target %r", ip)
    validate_target(ip)

    hostname = await resolve_hostname(ip, resolver)
    if on_hostname is not None:
        on_hostname(hostname)
    start, end = parse_port_range(port_range)
    logger.debug("scanning %s (%s) ports %d-%d", ip, hostname, start, end)

    report = ScanReport(target_hostname=hostname, target_address=ip)
    for result in await scan_ports(ip, port_span(start, end), concurrency,
                                   connect_timeout, read_timeout):
        report.add(result)
    if sort_ports:
        report.sort_by_port()

    logger.debug("reporting %d open ports for %s", len(report.open_ports), ip)
    return report


def run_port_scan(ip: str, port_range: str = DEFAULT_PORT_RANGE, output: str = "text",
                  directory: str = ".", **scan_options) -> ScanReport:
    """Command entry point: scan `ip` and render the report in `output` mode."""
    console.print_info(f"Starting scan for IP address {ip}...")
    if output == "text":
        scan_options.setdefault("on_hostname", print_hostname)
    report = asyncio.run(scan(ip, port_range, **scan_options))
    render_scan_report(report, output, directory=directory, header=False)
    return report
