# cli.py
# Command line entry point
#   Usage (examples):
#     portscanner --ip 127.0.0.1 --ports 1-1024
#     portscanner --ip 192.168.1.10 --ports 20-443 --output json
#     portscanner --url https://example.com

import argparse
import logging

import colorama

from . import __version__, console
from .errors import PortScannerError
from .ports import DEFAULT_PORT_RANGE
from .probe import CONNECT_TIMEOUT, READ_TIMEOUT
from .report import OUTPUT_MODES
from .scan import DEFAULT_CONCURRENCY, run_port_scan
from .url_check import HTTP_TIMEOUT, run_url_check

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="portscanner",
                                 description="Concurrent TCP port scanner and URL inspector")
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    target = ap.add_mutually_exclusive_group()
    target.add_argument("--ip", help="IP address to scan (e.g., 8.8.8.8)")
    target.add_argument("--url", help="Single URL to inspect (e.g., https://example.com)")
    ap.add_argument("--ports", help=f"Port range to scan, only with --ip (default: {DEFAULT_PORT_RANGE})")
    ap.add_argument("--output", choices=OUTPUT_MODES, default="text", help="Output format (default: text)")
    ap.add_argument("--concurrency", type=int, default=DEFAULT_CONCURRENCY,
                    help=f"Max probes in flight, 0 = one per port at once (default: {DEFAULT_CONCURRENCY})")
    ap.add_argument("--timeout", type=float, default=CONNECT_TIMEOUT,
                    help=f"Connect timeout in seconds (default: {CONNECT_TIMEOUT})")
    ap.add_argument("--read-timeout", type=float, default=READ_TIMEOUT,
                    help=f"Banner read timeout in seconds (default: {READ_TIMEOUT})")
    ap.add_argument("--http-timeout", type=float, default=HTTP_TIMEOUT)
    ap.add_argument("--sort", action="store_true", help="List open ports in ascending order")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")
    return ap


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )


def main(argv=None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)
    if args.ports is not None and not args.ip:
        ap.error("--ports can only be used with --ip")
    if args.concurrency < 0:
        ap.error("--concurrency must be >= 0")

    colorama.just_fix_windows_console()
    setup_logging(args.verbose)

    try:
        if args.ip:
            run_port_scan(
                args.ip,
                args.ports or DEFAULT_PORT_RANGE,
                args.output,
                concurrency=args.concurrency,
                connect_timeout=args.timeout,
                read_timeout=args.read_timeout,
                sort_ports=args.sort,
            )
        elif args.url:
            run_url_check(args.url, args.output, timeout=args.http_timeout)
        else:
            console.print_error("Error: provide either --ip or --url to analyze.")
            console.print_info("Use --help for more information.")
            return 1
    except PortScannerError as e:
        logger.debug("command failed", exc_info=True)
        console.print_error(str(e))
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
