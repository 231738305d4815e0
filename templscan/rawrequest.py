"""Parsing of raw HTTP requests written inside templates."""

from __future__ import annotations

import io
from dataclasses import dataclass, field
from urllib.parse import urlsplit


class RawRequestError(ValueError):
    """Raised when a raw request cannot be parsed."""


@dataclass
class RawRequest:
    """A raw HTTP request broken into its parts."""

    full_url: str = ""
    method: str = ""
    path: str = ""
    data: str = ""
    headers: dict[str, str] = field(default_factory=dict)
    unsafe_headers: list[str] = field(default_factory=list)
    unsafe_raw_bytes: bytes | None = None


def _netloc_host(netloc: str) -> str:
    """Return host[:port] of a netloc, without any user information."""
    return netloc.rpartition("@")[2]


def _valid_optional_port(port: str) -> bool:
    if port == "":
        return True
    if not port.startswith(":"):
        return False
    return all(ch.isdigit() for ch in port[1:])


def _hostname(host: str) -> str:
    """Return the host part of host[:port], stripping IPv6 brackets."""
    colon = host.rfind(":")
    if colon != -1 and _valid_optional_port(host[colon:]):
        host = host[:colon]
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    return host


def _split_host_port(hostport: str) -> tuple[str, str]:
    """Split host:port, raising ValueError on malformed input."""
    last = hostport.rfind(":")
    if last < 0:
        raise ValueError(f"missing port in address {hostport}")
    if hostport.startswith("["):
        end = hostport.find("]")
        if end < 0:
            raise ValueError(f"missing ']' in address {hostport}")
        if end + 1 == len(hostport):
            raise ValueError(f"missing port in address {hostport}")
        if end + 1 != last:
            raise ValueError(f"too many colons in address {hostport}")
        host = hostport[1:end]
    else:
        host = hostport[:last]
        if ":" in host:
            raise ValueError(f"too many colons in address {hostport}")
    port = hostport[last + 1:]
    if "[" in port or "]" in port:
        raise ValueError(f"unexpected bracket in address {hostport}")
    return host, port


def _join_host_port(host: str, port: str) -> str:
    if ":" in host:
        return f"[{host}]:{port}"
    return f"{host}:{port}"


def _parse_url(value: str):
    try:
        return urlsplit(value)
    except ValueError as exc:
        raise RawRequestError(f"could not parse request URL: {exc}") from exc


def parse(request: str, base_url: str, unsafe: bool) -> RawRequest:
    """Parse a raw request as written by the user against a base URL."""
    result = RawRequest()
    if unsafe:
        request = request.replace("\\0", "\x00")
        request = request.replace("\\r", "\r")
        request = request.replace("\\n", "\n")
        result.unsafe_raw_bytes = request.encode()

    reader = io.StringIO(request, newline="\n")
    first_line = reader.readline()
    if not first_line.endswith("\n"):
        raise RawRequestError("could not read request: EOF")

    parts = first_line.split(" ")
    if len(parts) < 3 and not unsafe:
        raise RawRequestError("malformed request supplied")
    result.method = parts[0]

    multipart = False
    value = ""
    while True:
        raw_line = reader.readline()
        at_eof = not raw_line.endswith("\n")
        line = raw_line.strip()
        if not at_eof and line == "":
            break

        key, separator, rest = line.partition(":")
        if separator:
            value = rest
        if "Content-Type" in key and "multipart/" in value:
            multipart = True

        found = key in result.headers
        if unsafe:
            result.unsafe_headers.append(line)
        if unsafe and found:
            result.headers[line] = ""
        else:
            result.headers[key] = value.strip()
        if at_eof:
            break

    if not unsafe and parts[1].startswith("http"):
        parsed_path = _parse_url(parts[1])
        result.path = parts[1]
        result.headers["Host"] = _netloc_host(parsed_path.netloc)
    elif len(parts) > 1:
        result.path = parts[1]

    parsed = _parse_url(base_url)
    base_host = _netloc_host(parsed.netloc)
    base_path = parsed.path

    template_host = result.headers.get("Host", "")
    host_url = base_host
    if ":" in template_host:
        try:
            _, template_port = _split_host_port(template_host)
        except ValueError:
            template_port = ""
        host_url = _join_host_port(_hostname(base_host), template_port)

    if base_path.endswith("/") and result.path.startswith("/"):
        base_path = base_path[:-1]
    result.path = f"{base_path}{result.path}"
    if result.path.endswith("//"):
        result.path = result.path[:-1]
    result.full_url = f"{parsed.scheme}://{host_url.strip()}{result.path}"

    body = reader.read()
    if not multipart and body.endswith("\r\n"):
        body = body[:-2]
    result.data = body
    return result