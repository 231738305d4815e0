# templscan

`templscan` provides building blocks for template-driven scanning requests.
It parses raw HTTP requests and builds DNS queries. It finds local files by
extension rules, compiles HTTP request templates, and turns responses into
flat maps that matchers and extractors can read.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Modules

### `templscan.rawrequest`

`parse(request, base_url, unsafe)` splits a raw HTTP request written in a
template into a `RawRequest` dataclass. The dataclass has these fields:
`method`, `path`, `headers`, `data`, `full_url`, `unsafe_headers` and
`unsafe_raw_bytes`.

- The path is joined to the path of `base_url`.
- A port given in the template's `Host` header replaces the base URL's port.
- A trailing `\r\n` is trimmed from the body unless the request is multipart.
- In unsafe mode, `\0`, `\r` and `\n` escapes are expanded and the raw bytes
  are kept.
- Malformed input raises `RawRequestError`, a subclass of `ValueError`.

### `templscan.race`

`SyncedReader` is a seekable reader over a request body. A read that would
reach the end of the data waits until the gate is opened, so many bodies can
be released at the same moment.

- The gate is opened with `open_gate()` or `open_gate_after(delay)`.
- `set_open_gate(False)` turns the waiting off.
- `new_open_gate_with_timeout(data, delay)` builds a reader whose gate opens
  by itself after `delay` seconds.

### `templscan.actions`

`Action` is a dataclass for one headless browser step. Its fields are
`action_type`, `data`, `name` and `description`, and it has a
`get_arg(name)` method.

`ActionType` enumerates the kinds of step. `action_from_string` and
`action_to_string` convert between template names and types.
`action_from_string` returns `None` for an unknown name.

### `templscan.clientpool`

`DnsClientPool` hands out `DnsClient` objects, one per distinct
`DnsConfiguration`. Configurations with two or fewer retries share the pool's
default client.

`DnsClient.do(message)` sends a query over UDP with dnspython. It tries the
resolvers in turn and raises the last error if none of them answers. The
default resolvers are `1.1.1.1`, `1.0.0.1`, `8.8.8.8` and `8.8.4.4` on port
53.

`HttpConfiguration.hash()` gives the pooling key for HTTP client settings.
`make_check_redirect(follow_redirects, max_redirects)` returns a function
that takes the requests made so far and tells whether to follow a further
redirect. A `max_redirects` of 0 means the default limit of 10.

### `templscan.dnsquery`

`DnsRequest` builds a `dns.message.Message` from a template name.
`{{FQDN}}` is replaced with the target domain.

- `make(domain)` raises `ValueError` if given an IP address, unless the
  query type is PTR.
- `response_to_dsl_map(...)` flattens a query and its response into the keys
  `host`, `matched`, `request`, `rcode`, `question`, `extra`, `answer`,
  `ns`, `raw`, `template-id` and `template-info`.

The module also provides these helpers:

- `question_type_to_int` and `class_to_int`, which default to A and INET
  for unknown names.
- `is_url`.
- `extract_domain`.

### `templscan.filefind`

`FileRequest` decides which files a template runs against.

- `compile()` prepares the extension allow list and deny list. The name
  `all` allows every extension. A default deny list of media, archive and
  office extensions is always included.
- The size limit defaults to 5 MiB.
- `input_paths(target)` yields files from a glob pattern, a single file or a
  directory tree.
- `validate_path(item)` checks one path against the lists.
- `response_to_dsl_map(raw, host, matched)` builds the map for a file's
  contents.

### `templscan.httputil`

`HttpRequest` is the HTTP template dataclass.

- `compile(custom_headers)` normalises line endings to `\r\n`, parses
  `Name: value` custom headers and loads payload lists. A payload given as a
  string is read as a file, one value per line. Attack types are `sniper`,
  `pitchfork` and `clusterbomb`.
- `requests()` counts the requests the template performs.
- `can_cluster(other)` tells whether two requests can be sent as one.
- `response_to_dsl_map(...)` flattens a response into a map. It includes the
  cookies, plus the header names lower-cased with `-` turned into `_`.

The module also provides these helpers:

- `base_url_with_template_prefs(data, url)` applies a `{{BaseURL}}:port`
  written in the template to the base URL.
- `headers_to_string`.
- `handle_decompression(headers, body)` handles gzip bodies.
- `parse_custom_headers`.
- `get_match_part(part, data)` treats `header` as `all_headers` and `all` as
  body plus headers.

## Examples

```python
from templscan.rawrequest import parse

request = parse(
    "GET /hello HTTP/1.1\nHost: {{Hostname}}",
    "https://example.com:8080/test",
    False,
)
print(request.full_url)  # https://example.com:8080/test/hello
```

```python
from templscan.filefind import FileRequest

finder = FileRequest(extensions=["all"], extension_denylist=[".go"])
finder.compile()
for path in finder.input_paths("/some/directory"):
    print(path)
```

```python
from templscan.dnsquery import DnsRequest

query = DnsRequest(name="{{FQDN}}", query_type="A", dns_class="INET")
query.compile()
message = query.make("example.com")
print(message.question[0].name)  # example.com.
```

## What this package does not do

- **No command-line tool.** There is no command to run.
- **No template loading.** It does not read template files.
- **No matching or extraction.** It has no matcher or extractor engine. It
  only builds the maps such an engine would read.
- **No HTTP sending.** It never sends HTTP requests. `HttpRequest` describes
  and counts them, and the helpers process responses you already have.
- **No browser.** It does not drive a headless browser. `Action` only
  describes browser steps.
- **DNS only over UDP.** The only network traffic it makes is the UDP query
  sent by `DnsClient.do`.