"""
URL Utilities

- Normalization of caller-supplied URLs into their canonical form
- Hostname guard against requests to loopback and private networks
- Media type parsing for Content-Type headers
"""

import ipaddress
import re
import socket
from dataclasses import dataclass
from urllib.parse import urlsplit, urlunsplit

import httpx
import idna

DEFAULT_PORTS = {'http': 80, 'https': 443}

FORBIDDEN_HOST_CHARS = re.compile(r'[\s<>^|\\"`{}]')
NUMERIC_LABEL = re.compile(r'^(?:0[xX][0-9a-fA-F]*|[0-9]+)$')

# Crude string-prefix heuristic for unique-local (fc00::/7) and link-local
# (fe80::/10) IPv6 literals. It also matches DNS names such as "fdic.gov"
# and is kept exactly as is: do not replace it with a real IPv6 parse.
BLOCKED_HOST_PREFIXES = ('fc', 'fd', 'fe80:')
BLOCKED_HOSTS = {'localhost', '::1', '[::1]'}


@dataclass(frozen=True)
class ParsedUrl:
    url: str
    scheme: str
    hostname: str


def is_private_ipv4(hostname: str) -> bool:
    """
    True for dotted-quad literals in 0/8, 127/8, 10/8, 169.254/16,
    172.16/12 and 192.168/16.

    """
    parts = hostname.split('.')
    if len(parts) != 4:
        return False

    try:
        octets = [int(part) for part in parts]
    except ValueError:
        return False

    if any(octet < 0 or octet > 255 for octet in octets):
        return False

    first, second = octets[0], octets[1]
    if first in (0, 10, 127):
        return True
    if first == 169 and second == 254:
        return True
    if first == 172 and 16 <= second <= 31:
        return True
    if first == 192 and second == 168:
        return True
    return False


def has_blocked_ipv6_prefix(hostname: str) -> bool:
    return hostname.startswith(BLOCKED_HOST_PREFIXES)


def is_blocked_hostname(hostname: str | None) -> bool:
    """
    String based SSRF guard, evaluated before any DNS resolution.

    Names that merely resolve to a private address are not caught.

    """
    normalized = str(hostname or '').strip().lower()
    if not normalized or normalized in BLOCKED_HOSTS:
        return True

    if has_blocked_ipv6_prefix(normalized):
        return True

    return is_private_ipv4(normalized)


def _canonical_ipv4(host: str) -> str | None:
    # Hosts ending in a numeric label are IPv4 in any of the legacy forms
    # (2130706433, 0x7f.1, 0177.0.0.1, 127.1) and serialize as dotted quad.
    stripped = host[:-1] if host.endswith('.') else host
    if not stripped or not NUMERIC_LABEL.match(stripped.rsplit('.', 1)[-1]):
        return None

    try:
        return socket.inet_ntoa(socket.inet_aton(stripped))
    except OSError:
        raise ValueError(f'Invalid IPv4 host: {host}')


def _ascii_host(hostname: str) -> str:
    # Unicode hosts are mapped with UTS #46 (fullwidth forms, case folding)
    # to their A-label form; A-labels already present must decode.
    try:
        if not hostname.isascii():
            return idna.encode(hostname, uts46=True).decode('ascii')
        for label in hostname.split('.'):
            if label.startswith('xn--'):
                idna.decode(label)
    except idna.IDNAError:
        raise ValueError(f'Invalid IDNA host: {hostname}')
    return hostname


def _canonical_host(netloc: str, hostname: str) -> str:
    if '[' in netloc:
        try:
            return f'[{ipaddress.IPv6Address(hostname).compressed}]'
        except ValueError:
            raise ValueError(f'Invalid IPv6 host: {hostname}')

    hostname = _ascii_host(hostname)
    if FORBIDDEN_HOST_CHARS.search(hostname):
        raise ValueError(f'Invalid host: {hostname}')

    return _canonical_ipv4(hostname) or hostname


def normalize_url(raw_url: str) -> ParsedUrl:
    """
    Parse an absolute URL and re-serialize it in canonical form.

    Scheme and host are lower-cased, Unicode hosts converted to IDNA
    A-labels, default ports dropped and an empty path on a host-based URL
    becomes "/". The hostname returned is the one the request will dial.
    Raises ValueError when the input is not an absolute URL.

    """
    parts = urlsplit(raw_url)
    scheme = parts.scheme.lower()
    if not scheme:
        raise ValueError('URL has no scheme')

    if not parts.netloc:
        if scheme in DEFAULT_PORTS:
            raise ValueError('URL has no host')
        return ParsedUrl(url=urlunsplit(parts._replace(scheme=scheme)), scheme=scheme, hostname='')

    hostname = parts.hostname or ''
    if not hostname:
        raise ValueError('URL has no host')

    host = _canonical_host(parts.netloc, hostname)
    port = parts.port

    userinfo, _, _ = parts.netloc.rpartition('@')
    netloc = f'{userinfo}@{host}' if userinfo else host
    if port is not None and port != DEFAULT_PORTS.get(scheme):
        netloc = f'{netloc}:{port}'

    # Serialized the way httpx will send it: path and query percent-encoded
    try:
        target = httpx.URL(urlunsplit((scheme, netloc, parts.path or '/', parts.query, parts.fragment)))
    except httpx.InvalidURL as e:
        raise ValueError(f'Invalid URL: {e}') from e

    dial_host = target.raw_host.decode('ascii')
    if ':' in dial_host:
        dial_host = f'[{dial_host}]'
    return ParsedUrl(url=str(target), scheme=scheme, hostname=dial_host)


def origin_of(url: str) -> str:
    parts = urlsplit(url)
    return f'{parts.scheme}://{parts.netloc}'


def media_type_of(content_type_header: str | None) -> str:
    """
    Media type part of a Content-Type header, lower-cased, parameters dropped.

    """
    return (content_type_header or '').split(';')[0].strip().lower()
