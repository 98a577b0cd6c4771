"""
Summaries API

Routes accept every method; the envelopes answer OPTIONS with 204 and
anything but the expected method with 405.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request

from summarizer.config.web_providers.bounded_fetch import BoundedFetcher
from summarizer.services.request_envelope import (
    SummaryLister,
    SummaryWriter,
    handle_list_summaries_request,
    handle_request,
)
from summarizer.services.supreme_search_service import build_preset_source, create_supreme_search_runner
from summarizer.services.url_ingest_service import build_url_source, run_url_ingest_request

router = APIRouter(tags=['summaries'])
logger = logging.getLogger(__name__)

ALL_METHODS = ['GET', 'HEAD', 'POST', 'PUT', 'PATCH', 'DELETE', 'OPTIONS']


def get_summary_writer(request: Request) -> Optional[SummaryWriter]:
    return getattr(request.app.state, 'summary_writer', None)


def get_summary_lister(request: Request) -> Optional[SummaryLister]:
    return getattr(request.app.state, 'list_summaries', None)


def get_fetcher(request: Request) -> BoundedFetcher:
    fetcher = getattr(request.app.state, 'fetcher', None)
    return fetcher or BoundedFetcher()


@router.api_route('/createSummaryFromUrl', methods=ALL_METHODS)
async def create_summary_from_url(
    request: Request,
    writer: Optional[SummaryWriter] = Depends(get_summary_writer),
    fetcher: BoundedFetcher = Depends(get_fetcher),
):
    """
    Fetch a caller-supplied URL and store its text as a summary document.

    """

    async def runner(body: dict):
        return await run_url_ingest_request(body, fetcher=fetcher)

    return await handle_request(
        request,
        runner,
        build_url_source,
        endpoint_name='createSummaryFromUrl',
        write_summary_doc=writer,
    )


@router.api_route('/searchSupremeLastWeekDecisions', methods=ALL_METHODS)
async def search_supreme_last_week_decisions(
    request: Request,
    writer: Optional[SummaryWriter] = Depends(get_summary_writer),
    fetcher: BoundedFetcher = Depends(get_fetcher),
):
    """
    Run the Supreme Court "last week decisions" preset and store the result.

    """
    return await handle_request(
        request,
        create_supreme_search_runner(fetcher=fetcher),
        build_preset_source,
        endpoint_name='searchSupremeLastWeekDecisions',
        write_summary_doc=writer,
        failure_source_builder=lambda _body: build_preset_source(),
    )


@router.api_route('/listLatestSummaries', methods=ALL_METHODS)
async def list_latest_summaries(
    request: Request,
    lister: Optional[SummaryLister] = Depends(get_summary_lister),
):
    """
    List the latest summary documents, newest first.

    """
    return await handle_list_summaries_request(
        request,
        endpoint_name='listLatestSummaries',
        list_summaries=lister,
    )
