# errors.py
# Errors that cross the command boundary. Per-port failures never end up here.


class PortScannerError(Exception):
    """Base class for user-visible failures."""


class InvalidTargetError(PortScannerError, ValueError):
    def __init__(self, target):
        super().__init__(f"Invalid IP address format: {target!r}")
        self.target = target


class ReportError(PortScannerError):
    """Report could not be serialized or written to disk."""


class UrlCheckError(PortScannerError):
    pass
