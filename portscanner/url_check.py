# url_check.py
# Single URL inspection: one GET, robots.txt, DNS, headers + HTML metadata

import asyncio
import logging
import socket
import time
from html.parser import HTMLParser
from typing import Optional
from urllib.parse import urljoin, urlparse

import aiohttp

from . import console
from .errors import UrlCheckError
from .models import UNKNOWN, SecurityHeaders, UrlReport
from .report import render_url_report

logger = logging.getLogger(__name__)

HTTP_TIMEOUT = 10.0
USER_AGENT = "portscanner/1.0"

# (technology, tag, attribute, substring); "*" = any tag, "" = attribute present at all
TECH_MARKERS = [
    ("WordPress", "link", "href", "wp-content"),
    ("WordPress", "script", "src", "wp-content"),
    ("jQuery", "script", "src", "jquery"),
    ("React", "*", "data-reactroot", ""),
    ("React", "*", "data-reactid", ""),
    ("Bootstrap", "link", "href", "bootstrap"),
    ("Bootstrap", "script", "src", "bootstrap"),
]


class PageInfoParser(HTMLParser):
    """Collects <title>, meta description and technology fingerprints."""

    def __init__(self):
        super().__init__(convert_charrefs=True)
        self.title: Optional[str] = None
        self.meta_description: Optional[str] = None
        self.technologies: set[str] = set()
        self._in_title = False
        self._title_parts: list[str] = []

    def handle_starttag(self, tag, attrs):
        attrs = {k.lower(): (v or "") for k, v in attrs}
        if tag == "title" and self.title is None:
            self._in_title = True
        elif tag == "meta":
            name = attrs.get("name", "").lower()
            if name == "description" and self.meta_description is None and "content" in attrs:
                self.meta_description = attrs["content"]
            if name == "generator" and "WordPress" in attrs.get("content", ""):
                self.technologies.add("WordPress")
        for tech, marker_tag, attr, needle in TECH_MARKERS:
            if marker_tag not in ("*", tag) or attr not in attrs:
                continue
            if needle in attrs[attr]:
                self.technologies.add(tech)

    def handle_startendtag(self, tag, attrs):
        self.handle_starttag(tag, attrs)

    def handle_data(self, data):
        if self._in_title:
            self._title_parts.append(data)

    def handle_endtag(self, tag):
        if tag == "title" and self._in_title:
            self._in_title = False
            self.title = "".join(self._title_parts).strip()

    def close(self):
        super().close()
        if self._in_title:
            # unterminated <title>
            self._in_title = False
            self.title = "".join(self._title_parts).strip()


def find_page_info(body: str) -> tuple[Optional[str], Optional[str], list[str]]:
    """(title, meta description, sorted technologies) for an HTML document."""
    p = PageInfoParser()
    p.feed(body)
    p.close()
    return p.title, p.meta_description, sorted(p.technologies)


async def resolve_addresses(url: str) -> list[str]:
    parsed = urlparse(url)
    host = parsed.hostname
    if not host:
        return []
    try:
        port = parsed.port or (443 if parsed.scheme == "https" else 80)
    except ValueError:
        return []
    loop = asyncio.get_running_loop()
    try:
        infos = await loop.getaddrinfo(host, port, type=socket.SOCK_STREAM)
    except (socket.gaierror, OSError) as e:
        logger.debug("could not resolve %s: %s", host, e)
        return []
    out = []
    for *_, sockaddr in infos:
        if sockaddr[0] not in out:
            out.append(sockaddr[0])
    return out


async def check_robots_txt(session: aiohttp.ClientSession, url: str, timeout) -> bool:
    robots_url = urljoin(url, "/robots.txt")
    try:
        async with session.get(robots_url, timeout=timeout, allow_redirects=True) as r:
            return 200 <= r.status < 300
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        logger.debug("robots.txt check failed for %s: %s", robots_url, e)
        return False


async def analyze_url(url: str, timeout: float = HTTP_TIMEOUT) -> UrlReport:
    client_timeout = aiohttp.ClientTimeout(total=timeout)
    async with aiohttp.ClientSession(headers={"User-Agent": USER_AGENT}) as s:
        started = time.perf_counter()
        try:
            async with s.get(url, timeout=client_timeout, allow_redirects=True) as r:
                elapsed_ms = int((time.perf_counter() - started) * 1000)
                status = r.status
                hdrs = {k.lower(): v for k, v in r.headers.items()}
                content_length = r.content_length or 0
                body = await r.text(errors="replace")
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            raise UrlCheckError(f"Could not fetch {url}: {str(e) or type(e).__name__}") from e

        ip_addresses = await resolve_addresses(url)
        robots_found = await check_robots_txt(s, url, client_timeout)

    title, meta_description, technologies = find_page_info(body)
    return UrlReport(
        url=url,
        ip_addresses=ip_addresses,
        response_time_ms=elapsed_ms,
        http_status=status,
        content_type=hdrs.get("content-type", UNKNOWN),
        content_length=content_length,
        server=hdrs.get("server", UNKNOWN),
        powered_by=hdrs.get("x-powered-by", UNKNOWN),
        page_title=title,
        meta_description=meta_description,
        robots_txt_found=robots_found,
        technologies=technologies,
        security_headers=SecurityHeaders.from_headers(hdrs),
    )


def run_url_check(url: str, output: str = "text", directory: str = ".",
                  timeout: float = HTTP_TIMEOUT) -> UrlReport:
    console.print_info(f"Analyzing URL: {url}")
    report = asyncio.run(analyze_url(url, timeout))
    render_url_report(report, output, directory=directory)
    return report
