import asyncio
from datetime import date
from urllib.parse import parse_qs

import httpx
import pytest

from summarizer.config.settings import settings
from summarizer.config.web_providers.search_form import CandidateFormFields, extract_hidden_fields
from summarizer.core.errors import (
    ForcedFailureError,
    SupremeEmptyResultError,
    SupremeLandingError,
    SupremeSearchError,
    UnsupportedContentTypeError,
)
from summarizer.services.supreme_search_service import (
    SUPREME_SEARCH_URL,
    build_preset_source,
    create_supreme_search_runner,
    run_supreme_preset_search,
)

LANDING_HTML = """
<form method="post">
  <input type="hidden" name="__VIEWSTATE" id="__VIEWSTATE" value="abc123" />
  <input value='xyz' name='__EVENTVALIDATION' type='hidden'>
  <input type="HIDDEN" name="__EMPTY">
  <input type="text" name="txtFreeText" value="ignored">
</form>
"""

RESULT_HTML = '<html><body><script>track()</script><table><tr><td>בג"ץ 1234/25</td><td>החלטה</td></tr></table></body></html>'


def test_extract_hidden_fields_tolerates_attribute_order_and_quotes() -> None:
    assert extract_hidden_fields(LANDING_HTML) == {
        '__VIEWSTATE': 'abc123',
        '__EVENTVALIDATION': 'xyz',
        '__EMPTY': '',
    }
    assert extract_hidden_fields('') == {}


def test_candidate_form_fields_write_every_candidate() -> None:
    fields = CandidateFormFields({'date_from': ['a$dateFrom', 'dateFrom'], 'submit': ['btn']})

    form = fields.apply({'__VIEWSTATE': 'v', 'dateFrom': 'old'}, {'date_from': '01/01/2025', 'submit': 'go', 'unknown': 'x'})

    assert form == {'__VIEWSTATE': 'v', 'dateFrom': '01/01/2025', 'a$dateFrom': '01/01/2025', 'btn': 'go'}


def test_default_candidates_come_from_settings() -> None:
    fields = CandidateFormFields.from_settings()
    assert all(len(names) == 3 for names in fields.candidates.values())
    assert fields.candidates['date_to'][-1] == 'txtDateTo'


def _court_handler(submissions: list, result_status: int = 200, result_type: str = 'text/html; charset=utf-8', result_html: str = RESULT_HTML):
    def handler(request):
        if request.method == 'GET':
            return httpx.Response(200, headers={'content-type': 'text/html'}, text=LANDING_HTML)
        submissions.append(request)
        return httpx.Response(result_status, headers={'content-type': result_type}, text=result_html)

    return handler


def test_preset_search_posts_hidden_fields_and_preset_values(make_fetcher) -> None:
    submissions = []
    fetcher = make_fetcher(_court_handler(submissions))

    result = asyncio.run(run_supreme_preset_search(fetcher=fetcher, today=date(2025, 1, 8)))

    assert result.sourceUrl == SUPREME_SEARCH_URL
    assert result.contentType == 'text/html'
    assert result.text == 'בג"ץ 1234/25 החלטה'
    assert result.meta == {
        'preset': 'last_week_decisions_over_2_pages',
        'dateFrom': '01/01/2025',
        'dateTo': '08/01/2025',
        'minPages': 3,
    }

    assert len(submissions) == 1
    request = submissions[0]
    assert request.headers['origin'] == 'https://supreme.court.gov.il'
    assert request.headers['referer'] == SUPREME_SEARCH_URL
    assert request.headers['content-type'].startswith('application/x-www-form-urlencoded')

    form = {key: values[0] for key, values in parse_qs(request.content.decode(), keep_blank_values=True).items()}
    assert form['__VIEWSTATE'] == 'abc123'
    assert form['__EVENTVALIDATION'] == 'xyz'
    for name in settings.SUPREME_DATE_FROM_FIELDS:
        assert form[name] == '01/01/2025'
    for name in settings.SUPREME_DATE_TO_FIELDS:
        assert form[name] == '08/01/2025'
    for name in settings.SUPREME_MIN_PAGES_FIELDS:
        assert form[name] == '3'
    for name in settings.SUPREME_FREE_TEXT_FIELDS:
        assert form[name] == 'החלטה'
    for name in settings.SUPREME_SUBMIT_FIELDS:
        assert form[name] == 'חפש'


def test_landing_failure_is_502(make_fetcher) -> None:
    fetcher = make_fetcher(lambda request: httpx.Response(503))

    with pytest.raises(SupremeLandingError) as excinfo:
        asyncio.run(run_supreme_preset_search(fetcher=fetcher))

    assert excinfo.value.status == 502
    assert str(excinfo.value) == 'Supreme search landing failed: 503'


def test_search_failure_is_502(make_fetcher) -> None:
    fetcher = make_fetcher(_court_handler([], result_status=500))

    with pytest.raises(SupremeSearchError) as excinfo:
        asyncio.run(run_supreme_preset_search(fetcher=fetcher))

    assert str(excinfo.value) == 'Supreme search request failed: 500'


def test_non_html_search_response_is_415(make_fetcher) -> None:
    fetcher = make_fetcher(_court_handler([], result_type='application/json', result_html='{}'))

    with pytest.raises(UnsupportedContentTypeError) as excinfo:
        asyncio.run(run_supreme_preset_search(fetcher=fetcher))

    assert excinfo.value.status == 415
    assert str(excinfo.value) == 'Unexpected response from supreme search: application/json'


def test_empty_search_result_is_502(make_fetcher) -> None:
    fetcher = make_fetcher(_court_handler([], result_html='<html><script>only()</script></html>'))

    with pytest.raises(SupremeEmptyResultError) as excinfo:
        asyncio.run(run_supreme_preset_search(fetcher=fetcher))

    assert excinfo.value.error_type == 'SupremeEmptyResult'


def test_force_flags_only_apply_in_test_environment(monkeypatch, make_fetcher) -> None:
    submissions = []
    runner = create_supreme_search_runner(fetcher=make_fetcher(_court_handler(submissions)))

    monkeypatch.setattr(settings, 'APP_ENV', 'test')
    with pytest.raises(ForcedFailureError) as excinfo:
        asyncio.run(runner({'__forceFailure': True}))
    assert excinfo.value.error_type == 'ForcedFailure'

    forced = asyncio.run(runner({'__forceSuccess': True}))
    assert forced.meta['preset'] == 'last_week_material_only_criminal_over_2_pages'
    assert submissions == []

    monkeypatch.setattr(settings, 'APP_ENV', 'production')
    result = asyncio.run(runner({'__forceFailure': True}))
    assert result.meta['preset'] == 'last_week_decisions_over_2_pages'
    assert len(submissions) == 1


def test_build_preset_source_without_result() -> None:
    assert build_preset_source().model_dump() == {
        'type': 'preset',
        'provider': 'supreme.court.gov.il',
        'url': SUPREME_SEARCH_URL,
        'preset': 'last_week_decisions_over_2_pages',
    }
