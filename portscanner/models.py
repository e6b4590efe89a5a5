# models.py
# Result records handed from the scanner / URL checker to the reporter.

from dataclasses import dataclass, field
from typing import Optional

NO_SERVICE_INFO = "No service information received"
HOSTNAME_NOT_FOUND = "Hostname not found"
UNKNOWN = "Unknown"


@dataclass(frozen=True)
class PortResult:
    port: int
    is_open: bool
    banner: str
    response_time_ms: int

    def to_dict(self) -> dict:
        return {
            "port": self.port,
            "is_open": self.is_open,
            "service_banner": self.banner,
            "response_time_ms": self.response_time_ms,
        }


@dataclass
class ScanReport:
    target_hostname: str
    target_address: str
    open_ports: list[PortResult] = field(default_factory=list)
    _seen: set[int] = field(default_factory=set, init=False, repr=False, compare=False)

    def __post_init__(self):
        ports = [r.port for r in self.open_ports]
        if len(set(ports)) != len(ports):
            raise ValueError("duplicate port in open_ports")
        self._seen = set(ports)

    def add(self, result: PortResult) -> None:
        # at most one record per port
        if result.port in self._seen:
            raise ValueError(f"duplicate result for port {result.port}")
        self._seen.add(result.port)
        self.open_ports.append(result)

    def sort_by_port(self) -> None:
        self.open_ports.sort(key=lambda r: r.port)

    def to_dict(self) -> dict:
        return {
            "hostname": self.target_hostname,
            "ip_address": self.target_address,
            "open_ports": [r.to_dict() for r in self.open_ports],
        }


@dataclass(frozen=True)
class SecurityHeaders:
    hsts: bool = False
    csp: bool = False
    x_frame_options: bool = False

    @classmethod
    def from_headers(cls, headers: dict) -> "SecurityHeaders":
        """`headers` must already have lower-case keys."""
        return cls(
            hsts="strict-transport-security" in headers,
            csp="content-security-policy" in headers,
            x_frame_options="x-frame-options" in headers,
        )

    def to_dict(self) -> dict:
        return {"hsts": self.hsts, "csp": self.csp, "x_frame_options": self.x_frame_options}


@dataclass
class UrlReport:
    url: str
    ip_addresses: list[str]
    response_time_ms: int
    http_status: int
    content_type: str
    content_length: int
    server: str
    powered_by: str
    page_title: Optional[str]
    meta_description: Optional[str]
    robots_txt_found: bool
    technologies: list[str]
    security_headers: SecurityHeaders

    def to_dict(self) -> dict:
        return {
            "url": self.url,
            "ip_addresses": list(self.ip_addresses),
            "response_time_ms": self.response_time_ms,
            "http_status": self.http_status,
            "content_type": self.content_type,
            "content_length": self.content_length,
            "server": self.server,
            "powered_by": self.powered_by,
            "page_title": self.page_title,
            "meta_description": self.meta_description,
            "robots_txt_found": self.robots_txt_found,
            "technologies": list(self.technologies),
            "security_headers": self.security_headers.to_dict(),
        }
