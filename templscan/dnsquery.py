"""DNS requests built from templates."""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlsplit

import dns.flags
import dns.message
import dns.rdataclass
import dns.rdatatype

from templscan.clientpool import DnsClient, DnsClientPool, DnsConfiguration

_QUESTION_TYPES: dict[str, int] = {
    "A": int(dns.rdatatype.A),
    "NS": int(dns.rdatatype.NS),
    "CNAME": int(dns.rdatatype.CNAME),
    "SOA": int(dns.rdatatype.SOA),
    "PTR": int(dns.rdatatype.PTR),
    "MX": int(dns.rdatatype.MX),
    "TXT": int(dns.rdatatype.TXT),
    "AAAA": int(dns.rdatatype.AAAA),
}

_CLASSES: dict[str, int] = {
    "INET": 1,
    "CSNET": 2,
    "CHAOS": 3,
    "HESIOD": 4,
    "NONE": 254,
    "ANY": 255,
}

_TYPE_PTR = int(dns.rdatatype.PTR)


def question_type_to_int(question_type: str) -> int:
    """Convert a question type name to its number; unknown names give A."""
    return _QUESTION_TYPES.get(question_type.upper().strip(), int(dns.rdatatype.A))


def class_to_int(dns_class: str) -> int:
    """Convert a DNS class name to its number; unknown names give INET."""
    return _CLASSES.get(dns_class.upper().strip(), _CLASSES["INET"])


def is_url(value: str) -> bool:
    """Tell whether a string is an absolute URL with a scheme and a host."""
    try:
        parts = urlsplit(value)
    except ValueError:
        return False
    return bool(parts.scheme) and bool(parts.netloc.rpartition("@")[2])


def extract_domain(url: str) -> str:
    """Return the host name of a URL, without port or brackets."""
    try:
        netloc = urlsplit(url).netloc
    except ValueError:
        return ""
    host = netloc.rpartition("@")[2]
    if host.startswith("["):
        end = host.find("]")
        return host[1:end] if end != -1 else host[1:]
    colon = host.rfind(":")
    if colon != -1 and all(ch.isdigit() for ch in host[colon + 1:]):
        host = host[:colon]
    return host


def _fqdn(name: str) -> str:
    return name if name.endswith(".") else name + "."


def _is_ip(value: str) -> bool:
    try:
        ipaddress.ip_address(value)
    except ValueError:
        return False
    return True


def _replace(template: str, values: dict[str, Any]) -> str:
    for key, value in values.items():
        template = template.replace("{{" + key + "}}", str(value))
    return template


def _section_text(section: list) -> str:
    return "".join(item.to_text() for item in section)


@dataclass
class DnsRequest:
    """A DNS query described by a template."""

    id: str = ""
    name: str = ""
    query_type: str = ""
    dns_class: str = ""
    retries: int = 0
    recursion: bool = False
    template_id: str = ""
    template_info: dict[str, Any] = field(default_factory=dict)
    pool: DnsClientPool | None = None
    client: DnsClient | None = field(default=None, init=False)
    _question: int = field(default=0, init=False, repr=False)
    _class: int = field(default=0, init=False, repr=False)

    def __post_init__(self) -> None:
        self._question = question_type_to_int(self.query_type)
        self._class = class_to_int(self.dns_class)

    def compile(self) -> None:
        """Resolve the client and the numeric type and class of the query."""
        pool = self.pool if self.pool is not None else DnsClientPool()
        self.client = pool.get(DnsConfiguration(retries=self.retries))
        self._class = class_to_int(self.dns_class)
        self._question = question_type_to_int(self.query_type)

    def requests(self) -> int:
        """Number of requests this template performs."""
        return 1

    def make(self, domain: str) -> dns.message.Message:
        """Build the query message for a domain."""
        if self._question != _TYPE_PTR and _is_ip(domain):
            raise ValueError("cannot use IP address as DNS input")
        domain = _fqdn(domain)
        final = _fqdn(_replace(self.name, {"FQDN": domain}))
        message = dns.message.make_query(final, self._question, self._class)
        if self.recursion:
            message.flags |= dns.flags.RD
        else:
            message.flags &= ~dns.flags.RD
        return message

    def response_to_dsl_map(
        self,
        request: dns.message.Message,
        response: dns.message.Message,
        host: str,
        matched: str,
    ) -> dict[str, Any]:
        """Flatten a query and its response into a map for matching."""
        return {
            "host": host,
            "matched": matched,
            "request": request.to_text(),
            "rcode": response.rcode(),
            "question": _section_text(response.question),
            "extra": _section_text(response.additional),
            "answer": _section_text(response.answer),
            "ns": _section_text(response.authority),
            "raw": response.to_text(),
            "template-id": self.template_id,
            "template-info": self.template_info,
        }