"""HTTP requests described by templates, and helpers for their responses."""

from __future__ import annotations

import gzip
import math
import re
import zlib
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping
from urllib.parse import urlsplit, urlunsplit

from templscan.rawrequest import _hostname, _join_host_port, _netloc_host

_URL_WITH_PORT = re.compile(r"\{\{BaseURL\}\}:(\d+)")

ATTACK_TYPES: tuple[str, ...] = ("sniper", "pitchfork", "clusterbomb")


def base_url_with_template_prefs(data: str, url: str) -> tuple[str, str]:
    """Apply a port written in the template after {{BaseURL}} to the base URL.

    Returns the template data with the port removed and the adjusted URL.
    """
    matches = _URL_WITH_PORT.findall(data)
    if not matches:
        return data, url
    port = matches[0]
    parts = urlsplit(url)
    userinfo, at, _ = parts.netloc.rpartition("@")
    host = _join_host_port(_hostname(_netloc_host(parts.netloc)), port)
    netloc = f"{userinfo}{at}{host}"
    path = parts.path or "/"
    data = data.replace(":" + port, "")
    return data, urlunsplit((parts.scheme, netloc, path, parts.query, parts.fragment))


def _values(value: str | Iterable[str]) -> list[str]:
    if isinstance(value, str):
        return [value]
    return list(value)


def headers_to_string(headers: Mapping[str, str | Iterable[str]]) -> str:
    """Render headers as one "Name: value" line per value."""
    return "".join(
        f"{name}: {value}\n"
        for name, values in headers.items()
        for value in _values(values)
    )


def _header(headers: Mapping[str, str | Iterable[str]], name: str) -> str:
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            values = _values(value)
            return values[0] if values else ""
    return ""


def handle_decompression(headers: Mapping[str, str | Iterable[str]], body: bytes) -> bytes:
    """Decompress a gzip-encoded body; other bodies are returned unchanged."""
    encoding = _header(headers, "Content-Encoding").lower().strip()
    if "gzip" not in encoding:
        return body
    try:
        return gzip.decompress(body)
    except (OSError, EOFError, zlib.error) as exc:
        raise ValueError(f"could not decompress body: {exc}") from exc


def parse_custom_headers(options: Iterable[str]) -> dict[str, str]:
    """Turn "Name: value" options into a header map, skipping malformed ones."""
    headers: dict[str, str] = {}
    for option in options:
        name, separator, value = option.partition(":")
        if not separator:
            continue
        headers[name] = value.strip()
    return headers


def get_match_part(part: str, data: Mapping[str, Any]) -> str | None:
    """Return the text of a response part, or None if the part is missing."""
    if part == "header":
        part = "all_headers"
    if part == "all":
        return _to_string(data.get("body")) + _to_string(data.get("all_headers"))
    if part not in data:
        return None
    return _to_string(data[part])


def _to_string(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode(errors="replace")
    return str(value)


def _load_payload(name: str, payload: Any) -> list[str]:
    if isinstance(payload, str):
        try:
            with open(payload, encoding="utf-8") as handle:
                return [line.strip() for line in handle if line.strip()]
        except OSError as exc:
            raise ValueError(f"could not read payload file {payload}: {exc}") from exc
    if isinstance(payload, Iterable):
        return [str(item) for item in payload]
    raise ValueError(f"could not parse payloads: invalid value for {name}")


def _payload_total(attack_type: str, payloads: Mapping[str, list[str]]) -> int:
    lengths = [len(values) for values in payloads.values()]
    if attack_type == "clusterbomb":
        return math.prod(lengths)
    if attack_type == "pitchfork":
        return min(lengths)
    return sum(lengths)


@dataclass
class HttpRequest:
    """An HTTP request described by a template."""

    id: str = ""
    name: str = ""
    path: list[str] = field(default_factory=list)
    raw: list[str] = field(default_factory=list)
    attack_type: str = ""
    method: str = ""
    body: str = ""
    payloads: dict[str, Any] = field(default_factory=dict)
    headers: dict[str, str] = field(default_factory=dict)
    race_number_requests: int = 0
    max_redirects: int = 0
    pipeline_concurrent_connections: int = 0
    pipeline_requests_per_connection: int = 0
    threads: int = 0
    max_size: int = 0
    cookie_reuse: bool = False
    redirects: bool = False
    pipeline: bool = False
    unsafe: bool = False
    race: bool = False
    req_condition: bool = False
    template_id: str = ""
    template_info: dict[str, Any] = field(default_factory=dict)
    custom_headers: dict[str, str] = field(default_factory=dict, init=False)
    payload_values: dict[str, list[str]] = field(default_factory=dict, init=False)
    total_requests: int = field(default=0, init=False)
    _attack: str = field(default="", init=False, repr=False)

    def compile(self, custom_headers: Iterable[str] = ()) -> None:
        """Normalise line endings, load payloads and count the requests."""
        self.custom_headers = parse_custom_headers(custom_headers)
        if self.body and "\r\n" not in self.body:
            self.body = self.body.replace("\n", "\r\n")
        self.raw = [
            item if "\r\n" in item else item.replace("\n", "\r\n") for item in self.raw
        ]
        self.payload_values = {}
        self._attack = ""
        if self.payloads:
            attack = self.attack_type or "sniper"
            if attack not in ATTACK_TYPES:
                raise ValueError(f"could not parse payloads: unknown attack type {attack}")
            self._attack = attack
            self.payload_values = {
                name: _load_payload(name, payload) for name, payload in self.payloads.items()
            }
        self.total_requests = self.requests()

    def requests(self) -> int:
        """Total number of requests this template performs."""
        if self.payload_values:
            return _payload_total(self._attack, self.payload_values) * len(self.raw)
        if self.raw:
            count = len(self.raw)
            if count == 1 and self.race_number_requests != 0:
                count *= self.race_number_requests
            return count
        return len(self.path)

    def can_cluster(self, other: HttpRequest) -> bool:
        """Tell whether two requests are similar enough to be sent as one."""
        if self.payloads or self.raw or self.body or self.unsafe:
            return False
        if (
            self.method != other.method
            or self.max_redirects != other.max_redirects
            or self.cookie_reuse != other.cookie_reuse
            or self.redirects != other.redirects
        ):
            return False
        return list(self.path) == list(other.path) and dict(self.headers) == dict(other.headers)

    def response_to_dsl_map(
        self,
        status_code: int,
        headers: Mapping[str, str | Iterable[str]],
        cookies: Mapping[str, str],
        content_length: int,
        host: str,
        matched: str,
        raw_request: str,
        raw_response: str,
        body: str,
        all_headers: str,
        duration: float,
        extra: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Flatten a response into a map for matching."""
        data: dict[str, Any] = dict(extra or {})
        data["host"] = host
        data["matched"] = matched
        data["request"] = raw_request
        data["response"] = raw_response
        data["content_length"] = content_length
        data["status_code"] = status_code
        data["body"] = body
        for name, value in cookies.items():
            data[name.lower()] = value
        for name, value in headers.items():
            key = name.strip().replace("-", "_").lower()
            data[key] = " ".join(_values(value))
        data["all_headers"] = all_headers
        data["duration"] = float(duration)
        data["template-id"] = self.template_id
        data["template-info"] = self.template_info
        return data