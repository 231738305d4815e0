"""Building blocks for template-driven DNS, file and HTTP scanning requests."""

__version__ = "0.1.0"

__all__ = [
    "actions",
    "clientpool",
    "dnsquery",
    "filefind",
    "httputil",
    "race",
    "rawrequest",
]