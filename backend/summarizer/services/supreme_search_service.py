"""
Supreme Court Preset Search Service

Runs the fixed "decisions from the last week" search against the Supreme
Court full-text search form in two strictly ordered steps:

1. GET the landing page and scrape its hidden inputs (view state etc.)
2. POST the form back with the hidden inputs plus the preset values

Form field names come from a SearchFormFields strategy, so changes on the
court's side are handled in configuration, not here.
"""
import logging
from datetime import date, timedelta
from typing import Any, Callable, Optional

from summarizer.config.constants import CONTENT_TYPE_HTML
from summarizer.config.settings import settings
from summarizer.config.web_providers.base import SearchFormFields
from summarizer.config.web_providers.bounded_fetch import BoundedFetcher
from summarizer.config.web_providers.search_form import CandidateFormFields, extract_hidden_fields
from summarizer.core.errors import (
    ForcedFailureError,
    SupremeEmptyResultError,
    SupremeLandingError,
    SupremeSearchError,
    UnsupportedContentTypeError,
)
from summarizer.models.dto import IngestResult, PresetMeta, PresetSource
from summarizer.utils.text_utils import extract_text_from_html, truncate_text
from summarizer.utils.url_utils import media_type_of, origin_of

logger = logging.getLogger(__name__)

SUPREME_SEARCH_URL = settings.SUPREME_SEARCH_URL
MAX_TEXT_CHARS = settings.MAX_TEXT_CHARS


def format_date_dd_mm_yyyy(today: date, days_ago: int = 0) -> str:
    return (today - timedelta(days=days_ago)).strftime('%d/%m/%Y')


async def run_supreme_preset_search(
    fetcher: Optional[BoundedFetcher] = None,
    form_fields: Optional[SearchFormFields] = None,
    today: Optional[date] = None,
) -> IngestResult:
    """
    Search last week's decisions with at least SUPREME_MIN_PAGES pages.

    """
    fetcher = fetcher or BoundedFetcher()
    form_fields = form_fields or CandidateFormFields.from_settings()
    today = today or date.today()

    async with fetcher.open(SUPREME_SEARCH_URL, method='GET') as landing:
        if not landing.is_success:
            raise SupremeLandingError(f'Supreme search landing failed: {landing.status_code}')
        landing_html = await fetcher.read_body_with_limit(landing)

    hidden = extract_hidden_fields(landing_html)
    logger.info('Supreme landing returned %s hidden fields', len(hidden))

    date_from = format_date_dd_mm_yyyy(today, settings.SUPREME_LOOKBACK_DAYS)
    date_to = format_date_dd_mm_yyyy(today)
    payload = form_fields.apply(
        hidden,
        {
            'date_from': date_from,
            'date_to': date_to,
            'min_pages': str(settings.SUPREME_MIN_PAGES),
            'free_text': settings.SUPREME_FREE_TEXT,
            'submit': settings.SUPREME_SUBMIT_LABEL,
        },
    )

    headers = {
        'Content-Type': 'application/x-www-form-urlencoded',
        'Origin': origin_of(SUPREME_SEARCH_URL),
        'Referer': SUPREME_SEARCH_URL,
    }

    async with fetcher.open(SUPREME_SEARCH_URL, method='POST', headers=headers, data=payload) as result:
        if not result.is_success:
            raise SupremeSearchError(f'Supreme search request failed: {result.status_code}')

        content_type = media_type_of(result.headers.get('content-type'))
        if CONTENT_TYPE_HTML not in content_type:
            raise UnsupportedContentTypeError(
                f'Unexpected response from supreme search: {content_type or "unknown"}'
            )

        result_html = await fetcher.read_body_with_limit(result)

    text = truncate_text(extract_text_from_html(result_html), MAX_TEXT_CHARS)
    if not text:
        raise SupremeEmptyResultError('Supreme search returned empty results text')

    meta = PresetMeta(
        preset=settings.SUPREME_PRESET_NAME,
        dateFrom=date_from,
        dateTo=date_to,
        minPages=settings.SUPREME_MIN_PAGES,
    )
    logger.info('Supreme search extracted %s chars (%s - %s)', len(text), date_from, date_to)

    return IngestResult(
        sourceUrl=SUPREME_SEARCH_URL,
        contentType=CONTENT_TYPE_HTML,
        text=text,
        meta=meta.model_dump(exclude_none=True),
    )


def _forced_success_result() -> IngestResult:
    meta = PresetMeta(
        preset='last_week_material_only_criminal_over_2_pages',
        dateFrom='01/01/2025',
        dateTo='08/01/2025',
        minPages=2,
        materiality='מהותיות בלבד',
        section='פלילי',
    )
    return IngestResult(
        sourceUrl=SUPREME_SEARCH_URL,
        contentType=CONTENT_TYPE_HTML,
        text='Synthetic supreme search result for emulator integration test',
        meta=meta.model_dump(exclude_none=True),
    )


def create_supreme_search_runner(
    fetcher: Optional[BoundedFetcher] = None,
    form_fields: Optional[SearchFormFields] = None,
) -> Callable[[dict], Any]:
    """
    Build the runner used by the search endpoint.

    In the test environment the body flags __forceFailure / __forceSuccess
    short-circuit the search; anywhere else they are ignored.

    """

    async def run_supreme_search(body: dict) -> IngestResult:
        if settings.APP_ENV == 'test':
            if body.get('__forceFailure') is True:
                raise ForcedFailureError('Forced supreme search failure for integration test')
            if body.get('__forceSuccess') is True:
                return _forced_success_result()

        return await run_supreme_preset_search(fetcher=fetcher, form_fields=form_fields)

    return run_supreme_search


def build_preset_source(result: IngestResult | None = None) -> PresetSource:
    preset = (result.meta or {}).get('preset') if result else None
    return PresetSource(
        provider=settings.SUPREME_PROVIDER,
        url=result.sourceUrl if result and result.sourceUrl else SUPREME_SEARCH_URL,
        preset=preset or settings.SUPREME_PRESET_NAME,
    )
