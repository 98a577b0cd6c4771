"""
URL Ingest Service

Fetches a caller-supplied URL and turns it into plain text.

Validation runs before any network I/O, first failing check wins:
- non-empty, at most MAX_URL_LENGTH characters
- absolute URL
- http or https scheme
- host not loopback / private (string based guard)

Only text/html and text/plain responses are accepted. HTML is reduced to
text, plain text is used as is, and the result is capped at MAX_TEXT_CHARS.
"""
import logging
from typing import Any, Optional

from summarizer.config.constants import ALLOWED_CONTENT_TYPES, CONTENT_TYPE_HTML
from summarizer.config.settings import settings
from summarizer.config.web_providers.bounded_fetch import BoundedFetcher
from summarizer.core.errors import InvalidRequestError, UnsupportedContentTypeError, UpstreamHttpError
from summarizer.models.dto import IngestResult, UrlSource
from summarizer.utils.text_utils import collapse_whitespace, extract_text_from_html, truncate_text
from summarizer.utils.url_utils import is_blocked_hostname, media_type_of, normalize_url

logger = logging.getLogger(__name__)

MAX_URL_LENGTH = settings.MAX_URL_LENGTH
MAX_TEXT_CHARS = settings.MAX_TEXT_CHARS


def validate_target_url(url: Any) -> str:
    """
    Validate a caller-supplied URL and return its normalized form.

    """
    if not isinstance(url, str) or not url.strip():
        raise InvalidRequestError("Missing 'url' in request body")

    url = url.strip()
    if len(url) > MAX_URL_LENGTH:
        raise InvalidRequestError(f'URL too long (max {MAX_URL_LENGTH} chars)')

    try:
        parsed = normalize_url(url)
    except ValueError:
        raise InvalidRequestError('Invalid URL')

    if parsed.scheme not in ('http', 'https'):
        raise InvalidRequestError('Only http/https URLs are allowed')

    if is_blocked_hostname(parsed.hostname):
        logger.warning('Blocked URL host %s', parsed.hostname)
        raise InvalidRequestError('URL host is not allowed')

    return parsed.url


async def run_url_ingest(url: Any, fetcher: Optional[BoundedFetcher] = None) -> IngestResult:
    """
    Fetch a URL and extract its text.

    """
    normalized_url = validate_target_url(url)
    fetcher = fetcher or BoundedFetcher()

    logger.info('URL ingest fetching %s', normalized_url)

    async with fetcher.open(normalized_url, method='GET') as response:
        if not response.is_success:
            raise UpstreamHttpError(f'Upstream returned HTTP {response.status_code}')

        content_type = media_type_of(response.headers.get('content-type'))
        if content_type not in ALLOWED_CONTENT_TYPES:
            raise UnsupportedContentTypeError(f'Unsupported content type: {content_type or "unknown"}')

        raw_text = await fetcher.read_body_with_limit(response)

    extracted = extract_text_from_html(raw_text) if content_type == CONTENT_TYPE_HTML else raw_text
    text = truncate_text(collapse_whitespace(extracted), MAX_TEXT_CHARS)

    logger.info('URL ingest extracted %s chars from %s', len(text), normalized_url)
    return IngestResult(normalizedUrl=normalized_url, contentType=content_type, text=text)


async def run_url_ingest_request(body: dict, fetcher: Optional[BoundedFetcher] = None) -> IngestResult:
    # Runner entry point for the request envelope
    return await run_url_ingest(body.get('url'), fetcher=fetcher)


def build_url_source(result: IngestResult) -> UrlSource:
    return UrlSource(url=result.normalizedUrl)
