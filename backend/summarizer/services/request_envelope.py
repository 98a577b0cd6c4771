"""
Request Envelope

Shared request handling around every ingestion runner and the listing query:
CORS, method gating, timing, persistence of a success or failure document,
structured endpoint events and a uniform JSON response.

Every POST that reaches a runner produces exactly one stored document,
unless the document writer itself fails; that failure is logged and the
response is still sent with id null.
"""
import json
import logging
import re
import time
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Optional

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError

from summarizer.config.constants import (
    HTTP_METHOD_NOT_ALLOWED,
    HTTP_NO_CONTENT,
    HTTP_OK,
    STATUS_DONE,
    STATUS_FAILED,
)
from summarizer.config.settings import settings
from summarizer.core.errors import (
    InvalidRequestError,
    MisconfigurationError,
    classify_error,
    error_message,
    error_status,
)
from summarizer.models.dto import IngestResult, UrlSource, summary_source_adapter
from summarizer.utils.logging_utils import log_endpoint_event

logger = logging.getLogger(__name__)

Runner = Callable[[dict], Awaitable[IngestResult]]
SourceBuilder = Callable[[IngestResult], Any]
FailureSourceBuilder = Callable[[dict], Any]
SummaryWriter = Callable[[dict], Awaitable[str]]
SummaryLister = Callable[[int], Awaitable[list]]

INGEST_METHODS = 'POST, OPTIONS'
LIST_METHODS = 'GET, OPTIONS'

LIMIT_PATTERN = re.compile(r'[0-9]+')
LIMIT_ERROR = (
    f"Query 'limit' must be a single integer between 1 and {settings.LIST_MAX_LIMIT}"
)


def cors_headers(allowed_methods: str = INGEST_METHODS) -> dict[str, str]:
    return {
        'Access-Control-Allow-Origin': '*',
        'Access-Control-Allow-Methods': allowed_methods,
        'Access-Control-Allow-Headers': 'Content-Type',
    }


def _elapsed_ms(started_at: float) -> int:
    return int((time.monotonic() - started_at) * 1000)


def _endpoint_name(request: Request, endpoint_name: Optional[str]) -> str:
    return endpoint_name or request.url.path or 'unknown'


def _preflight_or_reject(request: Request, allowed_method: str, headers: dict) -> Optional[Response]:
    if request.method == 'OPTIONS':
        return Response(status_code=HTTP_NO_CONTENT, headers=headers)
    if request.method != allowed_method:
        return JSONResponse(
            status_code=HTTP_METHOD_NOT_ALLOWED,
            content={'ok': False, 'error': 'Method not allowed'},
            headers=headers,
        )
    return None


async def read_json_body(request: Request) -> dict:
    """
    Parse the request body as a JSON object. An empty body is {}.

    """
    raw = await request.body()
    if not raw.strip():
        return {}

    try:
        body = json.loads(raw)
    except ValueError:
        raise InvalidRequestError('Request body must be valid JSON')

    if not isinstance(body, dict):
        raise InvalidRequestError('Request body must be a JSON object')
    return body


def _dump_source(source: Any) -> dict:
    if isinstance(source, BaseModel):
        return source.model_dump()
    return source


def build_failure_source(
    body: dict,
    failure_source_builder: Optional[FailureSourceBuilder],
    endpoint: str,
    duration_ms: int,
) -> dict:
    """
    Source for a failed document; falls back to the URL from the body.

    """
    url = body.get('url')
    fallback = UrlSource(url=url if isinstance(url, str) else None).model_dump()
    if failure_source_builder is None:
        return fallback

    try:
        built = failure_source_builder(body)
        if not isinstance(built, (dict, BaseModel)):
            return fallback
        return summary_source_adapter.validate_python(_dump_source(built)).model_dump()
    except ValidationError as e:
        log_endpoint_event(
            logger,
            logging.ERROR,
            endpoint=endpoint,
            status=STATUS_FAILED,
            errorType='ValidationError',
            durationMs=duration_ms,
            message=f'Failure source is not a valid summary source: {e.error_count()} errors',
        )
    except Exception as e:
        log_endpoint_event(
            logger,
            logging.ERROR,
            endpoint=endpoint,
            status=STATUS_FAILED,
            errorType=classify_error(e),
            durationMs=duration_ms,
            message='Failed building failure source',
        )
    return fallback


async def handle_request(
    request: Request,
    runner: Runner,
    source_builder: SourceBuilder,
    endpoint_name: Optional[str] = None,
    write_summary_doc: Optional[SummaryWriter] = None,
    failure_source_builder: Optional[FailureSourceBuilder] = None,
) -> Response:
    """
    Run one ingestion request end to end and persist its outcome.

    """
    headers = cors_headers(INGEST_METHODS)
    rejected = _preflight_or_reject(request, 'POST', headers)
    if rejected is not None:
        return rejected

    endpoint = _endpoint_name(request, endpoint_name)
    started_at = time.monotonic()

    if not callable(write_summary_doc):
        error = MisconfigurationError('Server misconfiguration: writeSummaryDoc missing')
        log_endpoint_event(
            logger,
            logging.ERROR,
            endpoint=endpoint,
            status=STATUS_FAILED,
            errorType=error.error_type,
            message=error.message,
        )
        return JSONResponse(
            status_code=error.status,
            content={
                'ok': False,
                'error': error.message,
                'errorType': error.error_type,
                'id': None,
                'status': STATUS_FAILED,
                'durationMs': _elapsed_ms(started_at),
            },
            headers=headers,
        )

    log_endpoint_event(logger, logging.INFO, endpoint=endpoint, status='started')

    body: dict = {}
    try:
        body = await read_json_body(request)
        result = await runner(body)
        duration_ms = _elapsed_ms(started_at)

        doc = {
            'source': _dump_source(source_builder(result)),
            'status': STATUS_DONE,
            'fetchedAt': datetime.now(timezone.utc),
            'contentType': result.contentType,
            'text': result.text,
            'durationMs': duration_ms,
        }
        if result.meta:
            doc['meta'] = result.meta

        doc_id = await write_summary_doc(doc)
        log_endpoint_event(
            logger,
            logging.INFO,
            endpoint=endpoint,
            status=STATUS_DONE,
            durationMs=duration_ms,
            docId=doc_id,
        )
        return JSONResponse(
            status_code=HTTP_OK,
            content={
                'ok': True,
                'id': doc_id,
                'status': STATUS_DONE,
                'chars': len(result.text),
                'durationMs': duration_ms,
            },
            headers=headers,
        )
    except Exception as e:
        status = error_status(e)
        message = error_message(e)
        error_type = classify_error(e)
        duration_ms = _elapsed_ms(started_at)

        if status >= 500 and not hasattr(e, 'error_type'):
            logger.error('Unclassified failure in %s', endpoint, exc_info=True)

        source = build_failure_source(body, failure_source_builder, endpoint, duration_ms)

        doc_id = None
        try:
            doc_id = await write_summary_doc(
                {
                    'source': source,
                    'status': STATUS_FAILED,
                    'fetchedAt': datetime.now(timezone.utc),
                    'error': message,
                    'errorType': error_type,
                    'durationMs': duration_ms,
                }
            )
        except Exception as write_error:
            log_endpoint_event(
                logger,
                logging.ERROR,
                endpoint=endpoint,
                status=STATUS_FAILED,
                errorType=classify_error(write_error),
                durationMs=duration_ms,
                message='Failed writing failed summary doc',
                error=str(write_error),
            )

        log_endpoint_event(
            logger,
            logging.ERROR,
            endpoint=endpoint,
            status=STATUS_FAILED,
            durationMs=duration_ms,
            errorType=error_type,
            error=message,
            docId=doc_id,
        )
        return JSONResponse(
            status_code=status,
            content={
                'ok': False,
                'error': message,
                'errorType': error_type,
                'id': doc_id,
                'status': STATUS_FAILED,
                'durationMs': duration_ms,
            },
            headers=headers,
        )


def parse_list_limit(raw_limit: Any) -> int:
    """
    Validate the listing limit: absent -> default, else a plain integer in range.

    Arrays, decimals, signs and anything out of range are rejected alike.

    """
    if raw_limit is None:
        return settings.LIST_DEFAULT_LIMIT

    if isinstance(raw_limit, (list, tuple)):
        raise InvalidRequestError(LIMIT_ERROR)

    normalized = str(raw_limit).strip()
    if not LIMIT_PATTERN.fullmatch(normalized):
        raise InvalidRequestError(LIMIT_ERROR)

    limit = int(normalized)
    if limit < 1 or limit > settings.LIST_MAX_LIMIT:
        raise InvalidRequestError(LIMIT_ERROR)
    return limit


def _query_limit(request: Request) -> Any:
    values = request.query_params.getlist('limit')
    if not values:
        return None
    if len(values) > 1:
        return values
    return values[0]


async def handle_list_summaries_request(
    request: Request,
    endpoint_name: Optional[str] = None,
    list_summaries: Optional[SummaryLister] = None,
) -> Response:
    """
    Return the latest stored summaries, newest first.

    """
    headers = cors_headers(LIST_METHODS)
    rejected = _preflight_or_reject(request, 'GET', headers)
    if rejected is not None:
        return rejected

    endpoint = _endpoint_name(request, endpoint_name)
    started_at = time.monotonic()

    if not callable(list_summaries):
        error = MisconfigurationError('Server misconfiguration: listSummaries missing')
        log_endpoint_event(
            logger,
            logging.ERROR,
            endpoint=endpoint,
            status=STATUS_FAILED,
            errorType=error.error_type,
            message=error.message,
        )
        return JSONResponse(
            status_code=error.status,
            content={
                'ok': False,
                'error': error.message,
                'errorType': error.error_type,
                'durationMs': _elapsed_ms(started_at),
            },
            headers=headers,
        )

    try:
        limit = parse_list_limit(_query_limit(request))
        summaries = await list_summaries(limit)
        duration_ms = _elapsed_ms(started_at)
        log_endpoint_event(
            logger,
            logging.INFO,
            endpoint=endpoint,
            status=STATUS_DONE,
            durationMs=duration_ms,
            limit=limit,
            count=len(summaries),
        )
        return JSONResponse(
            status_code=HTTP_OK,
            content={'ok': True, 'count': len(summaries), 'summaries': summaries, 'durationMs': duration_ms},
            headers=headers,
        )
    except Exception as e:
        duration_ms = _elapsed_ms(started_at)
        status = error_status(e)
        error_type = classify_error(e)
        message = error_message(e)
        log_endpoint_event(
            logger,
            logging.ERROR,
            endpoint=endpoint,
            status=STATUS_FAILED,
            durationMs=duration_ms,
            errorType=error_type,
            error=message,
        )
        return JSONResponse(
            status_code=status,
            content={'ok': False, 'error': message, 'errorType': error_type, 'durationMs': duration_ms},
            headers=headers,
        )
