# portscanner
# Concurrent TCP port scanner with banner grabbing + single URL inspection

__version__ = "1.0.0"
