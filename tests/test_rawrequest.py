import pytest

from templscan.rawrequest import RawRequest, RawRequestError, parse


def test_parse_raw_request_with_port():
    request = parse(
        "GET /gg/phpinfo.php HTTP/1.1\n"
        "Host: {{Hostname}}:123\n"
        "Origin: {{BaseURL}}\n"
        "Connection: close\n"
        "User-Agent: Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_4) AppleWebKit/537.36 (KHTML, like Gecko)\n"
        "Accept: text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,image/apng,*/*;q=0.8\n"
        "Accept-Language: en-US,en;q=0.9",
        "https://example.com:8080",
        False,
    )
    assert request.full_url == "https://example.com:123/gg/phpinfo.php"
    assert request.path == "/gg/phpinfo.php"


def test_parse_path_suffix():
    request = parse("GET /hello HTTP/1.1\nHost: {{Hostname}}", "https://example.com:8080/test", False)
    assert request.full_url == "https://example.com:8080/test/hello"


@pytest.mark.parametrize(
    "raw, base, expected",
    [
        (
            "GET ?username=test&password=test HTTP/1.1\nHost: {{Hostname}}:123",
            "https://example.com:8080/test",
            "https://example.com:123/test?username=test&password=test",
        ),
        (
            "GET ?username=test&password=test HTTP/1.1\nHost: {{Hostname}}:123",
            "https://example.com:8080/test/",
            "https://example.com:123/test/?username=test&password=test",
        ),
        (
            "GET /?username=test&password=test HTTP/1.1\n\t\tHost: {{Hostname}}:123",
            "https://example.com:8080/test/",
            "https://example.com:123/test/?username=test&password=test",
        ),
    ],
)
def test_parse_query_values(raw, base, expected):
    assert parse(raw, base, False).full_url == expected


def test_parse_get_request():
    request = parse(
        "GET /manager/html HTTP/1.1\n"
        "Host: {{Hostname}}\n"
        "Authorization: Basic {{base64('username:password')}}\n"
        "User-Agent: Mozilla/5.0 (Windows NT 6.1; WOW64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/55.0\n"
        "Accept-Language: en-US,en;q=0.9\n"
        "Connection: close",
        "https://test.com",
        False,
    )
    assert request.method == "GET"
    assert request.path == "/manager/html"
    assert request.headers["Connection"] == "close"


def test_parse_post_request_body():
    request = parse(
        "POST /login HTTP/1.1\n"
        "Host: {{Hostname}}\n"
        "Content-Type: application/x-www-form-urlencoded\n"
        "Connection: close\n"
        "\n"
        "username=admin&password=login",
        "https://test.com",
        False,
    )
    assert request.method == "POST"
    assert request.data == "username=admin&password=login"


def test_body_trailing_crlf_trimmed_unless_multipart():
    plain = parse("POST /u HTTP/1.1\nContent-Type: text/plain\n\nabc\r\n", "https://example.com", False)
    multipart = parse(
        "POST /u HTTP/1.1\nContent-Type: multipart/form-data\n\nabc\r\n", "https://example.com", False
    )
    assert plain.data == "abc"
    assert multipart.data == "abc\r\n"


def test_request_without_newline_is_rejected():
    with pytest.raises(RawRequestError):
        parse("GET / HTTP/1.1", "https://example.com", False)


def test_malformed_request_line_is_rejected():
    with pytest.raises(RawRequestError):
        parse("GET /\nHost: example.com\n", "https://example.com", False)


def test_unsafe_request_keeps_duplicates_and_raw_bytes():
    raw = "GET /a HTTP/1.1\\r\\nHost: x\\r\\nHost: y\\r\\n\\r\\n"
    request = parse(raw, "https://example.com", True)
    assert isinstance(request, RawRequest)
    assert request.unsafe_raw_bytes == b"GET /a HTTP/1.1\r\nHost: x\r\nHost: y\r\n\r\n"
    assert request.unsafe_headers == ["Host: x", "Host: y"]
    assert request.headers["Host"] == "x"
    assert request.headers["Host: y"] == ""
    assert request.full_url == "https://example.com/a"