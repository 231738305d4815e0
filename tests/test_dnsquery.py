import dns.flags
import dns.message
import dns.rrset
import pytest

from templscan.clientpool import DnsClientPool
from templscan.dnsquery import (
    DnsRequest,
    class_to_int,
    extract_domain,
    is_url,
    question_type_to_int,
)


def _request(**kwargs):
    values = dict(
        query_type="A",
        dns_class="INET",
        retries=5,
        id="testing-dns",
        recursion=False,
        name="{{FQDN}}",
        template_id="testing-dns",
        template_info={"severity": "low", "name": "test"},
    )
    values.update(kwargs)
    request = DnsRequest(**values)
    request.compile()
    return request


def _response():
    query = dns.message.make_query("one.one.one.one.", "A", "IN")
    response = dns.message.make_response(query)
    response.answer.append(
        dns.rrset.from_text("one.one.one.one.", 300, "IN", "A", "1.1.1.1")
    )
    return query, response


def test_compile_make():
    request = _request()
    message = request.make("one.one.one.one")
    assert str(message.question[0].name) == "one.one.one.one."
    assert message.question[0].rdtype == 1
    assert message.question[0].rdclass == 1


def test_make_recursion_flag():
    recursive = _request(recursion=True).make("example.com")
    plain = _request(recursion=False).make("example.com")
    assert (recursive.flags & dns.flags.RD) == dns.flags.RD
    assert (plain.flags & dns.flags.RD) == 0
    assert str(recursive.question[0].name) == "example.com."


def test_make_rejects_ip_address():
    with pytest.raises(ValueError, match="IP address"):
        _request().make("1.1.1.1")


def test_make_ptr_accepts_ip_address():
    message = _request(query_type="PTR", name="{{FQDN}}").make("1.1.1.1")
    assert str(message.question[0].name) == "1.1.1.1."
    assert message.question[0].rdtype == 12


def test_requests_is_one():
    assert _request().requests() == 1


def test_compile_uses_pool():
    pool = DnsClientPool()
    many = _request(retries=5, pool=pool)
    assert many.client.max_retries == 5
    single = _request(retries=1, pool=pool)
    assert single.client is pool.normal_client


@pytest.mark.parametrize(
    "name,expected",
    [("A", 1), ("ns", 2), (" cname ", 5), ("SOA", 6), ("PTR", 12),
     ("MX", 15), ("txt", 16), ("AAAA", 28), ("unknown", 1)],
)
def test_question_type_to_int(name, expected):
    assert question_type_to_int(name) == expected


@pytest.mark.parametrize(
    "name,expected",
    [("INET", 1), ("csnet", 2), ("CHAOS", 3), ("hesiod", 4),
     ("NONE", 254), ("any", 255), ("other", 1)],
)
def test_class_to_int(name, expected):
    assert class_to_int(name) == expected


def test_is_url():
    assert is_url("https://example.com") is True
    assert is_url("example.com") is False
    assert is_url("/just/a/path") is False


def test_extract_domain():
    assert extract_domain("https://example.com") == "example.com"
    assert extract_domain("https://example.com:8443/path") == "example.com"
    assert extract_domain("http://[::1]:80/") == "::1"


def test_response_to_dsl_map():
    request = _request()
    query, response = _response()
    event = request.response_to_dsl_map(query, response, "one.one.one.one", "one.one.one.one")
    assert len(event) == 11
    assert event["rcode"] == 0
    assert "1.1.1.1" in event["raw"]
    assert "1.1.1.1" in event["answer"]
    assert event["template-id"] == "testing-dns"
    assert event["host"] == "one.one.one.one"