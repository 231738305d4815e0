"""Pools of protocol clients keyed by their configuration."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Callable, Sequence

import dns.exception
import dns.message
import dns.query

DEFAULT_RESOLVERS: tuple[str, ...] = (
    "1.1.1.1:53",
    "1.0.0.1:53",
    "8.8.8.8:53",
    "8.8.4.4:53",
)

DEFAULT_MAX_REDIRECTS = 10


def _split_resolver(resolver: str) -> tuple[str, int]:
    if resolver.startswith("["):
        host, _, rest = resolver[1:].partition("]")
        port = rest.lstrip(":")
        return host, int(port) if port else 53
    if resolver.count(":") == 1:
        host, _, port = resolver.partition(":")
        return host, int(port)
    return resolver, 53


@dataclass(frozen=True)
class DnsConfiguration:
    """Custom options for a DNS client."""

    retries: int = 0

    def hash(self) -> str:
        """Key identifying this configuration in the pool."""
        return f"r{self.retries}"


class DnsClient:
    """A DNS client that retries a query across a list of resolvers."""

    def __init__(self, resolvers: Sequence[str], max_retries: int, timeout: float = 3.0) -> None:
        if not resolvers:
            raise ValueError("at least one resolver is required")
        self.resolvers = tuple(resolvers)
        self.max_retries = max_retries
        self.timeout = timeout

    def do(self, message: dns.message.Message) -> dns.message.Message:
        """Send a query, trying resolvers in turn until one answers."""
        last_error: Exception | None = None
        for attempt in range(max(1, self.max_retries)):
            host, port = _split_resolver(self.resolvers[attempt % len(self.resolvers)])
            try:
                return dns.query.udp(message, host, timeout=self.timeout, port=port)
            except (dns.exception.DNSException, OSError) as exc:
                last_error = exc
        assert last_error is not None
        raise last_error


class DnsClientPool:
    """Hands out DNS clients, sharing one per distinct configuration."""

    def __init__(self, resolvers: Sequence[str] | None = None) -> None:
        self.resolvers = tuple(resolvers) if resolvers else DEFAULT_RESOLVERS
        self.normal_client = DnsClient(self.resolvers, 1)
        self._clients: dict[str, DnsClient] = {}
        self._lock = threading.Lock()

    def get(self, configuration: DnsConfiguration) -> DnsClient:
        """Return the client for a configuration, creating it once."""
        if not configuration.retries > 1:
            return self.normal_client
        key = configuration.hash()
        with self._lock:
            client = self._clients.get(key)
            if client is None:
                client = DnsClient(self.resolvers, configuration.retries)
                self._clients[key] = client
        return client


@dataclass(frozen=True)
class HttpConfiguration:
    """Custom options for an HTTP client."""

    threads: int = 0
    max_redirects: int = 0
    cookie_reuse: bool = False
    follow_redirects: bool = False

    def hash(self) -> str:
        """Key identifying this configuration in the pool."""
        follow = "true" if self.follow_redirects else "false"
        cookies = "true" if self.cookie_reuse else "false"
        return f"t{self.threads}m{self.max_redirects}f{follow}r{cookies}"


def make_check_redirect(follow_redirects: bool, max_redirects: int) -> Callable[[Sequence[object]], bool]:
    """Build a check telling whether to follow a redirect given the requests so far."""

    def check(via: Sequence[object]) -> bool:
        if not follow_redirects:
            return False
        limit = DEFAULT_MAX_REDIRECTS if max_redirects == 0 else max_redirects
        return len(via) <= limit

    return check