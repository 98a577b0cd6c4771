import pytest

from summarizer.utils.url_utils import (
    is_blocked_hostname,
    is_private_ipv4,
    media_type_of,
    normalize_url,
    origin_of,
)


@pytest.mark.parametrize(
    'hostname',
    ['localhost', '127.0.0.1', '10.0.0.1', '192.168.1.1', '169.254.1.1', '::1', '[::1]', '0.0.0.0', '172.16.0.1', '172.31.255.255'],
)
def test_blocked_hostnames(hostname: str) -> None:
    assert is_blocked_hostname(hostname) is True


@pytest.mark.parametrize('hostname', ['example.com', '8.8.8.8', '172.15.0.1', '172.32.0.1', '192.169.0.1'])
def test_public_hostnames_are_allowed(hostname: str) -> None:
    assert is_blocked_hostname(hostname) is False


def test_guard_normalizes_case_and_whitespace() -> None:
    assert is_blocked_hostname('  LOCALHOST ') is True
    assert is_blocked_hostname('') is True
    assert is_blocked_hostname(None) is True


def test_ipv6_prefix_heuristic_matches_plain_text_prefixes() -> None:
    assert is_blocked_hostname('fd00::1') is True
    assert is_blocked_hostname('fe80::1') is True
    # Known false positive of the prefix heuristic
    assert is_blocked_hostname('fdic.gov') is True
    # Bracketed literals do not start with the prefix
    assert is_blocked_hostname('[fd00::1]') is False


def test_is_private_ipv4_rejects_non_quads() -> None:
    assert is_private_ipv4('10.0.0') is False
    assert is_private_ipv4('10.0.0.256') is False
    assert is_private_ipv4('ten.0.0.1') is False


def test_normalize_url_adds_root_path_and_lowercases() -> None:
    parsed = normalize_url('HTTPS://Example.COM')
    assert parsed.url == 'https://example.com/'
    assert parsed.scheme == 'https'
    assert parsed.hostname == 'example.com'


def test_normalize_url_drops_default_port_keeps_others() -> None:
    assert normalize_url('http://example.com:80/a?b=1#c').url == 'http://example.com/a?b=1#c'
    assert normalize_url('https://example.com:8443/a').url == 'https://example.com:8443/a'


def test_normalize_url_canonicalizes_numeric_ipv4_hosts() -> None:
    assert normalize_url('http://2130706433/').hostname == '127.0.0.1'
    assert normalize_url('http://0x7f.1/').hostname == '127.0.0.1'
    assert normalize_url('http://127.1/').url == 'http://127.0.0.1/'


def test_normalize_url_brackets_ipv6_hosts() -> None:
    parsed = normalize_url('http://[0:0:0:0:0:0:0:1]:8080/')
    assert parsed.hostname == '[::1]'
    assert parsed.url == 'http://[::1]:8080/'


@pytest.mark.parametrize('raw', ['not a url', 'example.com/path', 'http://', 'http://exa mple.com/', 'http://example.com:99999/'])
def test_normalize_url_rejects_invalid_input(raw: str) -> None:
    with pytest.raises(ValueError):
        normalize_url(raw)


def test_normalize_url_accepts_non_http_schemes_for_later_checks() -> None:
    assert normalize_url('ftp://example.com/file').scheme == 'ftp'
    assert normalize_url('mailto:someone@example.com').scheme == 'mailto'


def test_media_type_and_origin() -> None:
    assert media_type_of('Text/HTML; charset=utf-8') == 'text/html'
    assert media_type_of(None) == ''
    assert origin_of('https://supreme.court.gov.il/Pages/fullsearch.aspx') == 'https://supreme.court.gov.il'


def test_normalize_url_encodes_unicode_hosts_as_a_labels() -> None:
    parsed = normalize_url('http://bücher.de/')
    assert parsed.url == 'http://xn--bcher-kva.de/'
    assert parsed.hostname == 'xn--bcher-kva.de'


def test_normalize_url_maps_fullwidth_hosts_before_the_guard() -> None:
    parsed = normalize_url('http://ｌｏｃａｌｈｏｓｔ/')
    assert parsed.hostname == 'localhost'
    assert is_blocked_hostname(parsed.hostname) is True


def test_normalize_url_percent_encodes_path_and_query() -> None:
    assert normalize_url('https://example.com/a b?q=x y').url == 'https://example.com/a%20b?q=x%20y'
    assert normalize_url('https://example.com/a%20b').url == 'https://example.com/a%20b'


@pytest.mark.parametrize('raw', ['http://xn--/', 'http://www.xn--/'])
def test_normalize_url_rejects_malformed_a_labels(raw: str) -> None:
    with pytest.raises(ValueError):
        normalize_url(raw)
