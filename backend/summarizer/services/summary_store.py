"""
Summary Store

MongoDB backed collaborators for the request envelope:
- writer: append one summary document, return its id
- lister: latest summaries, newest fetchedAt first

pymongo is blocking, calls run in a worker thread.
"""
import asyncio
import logging
from datetime import datetime, timezone

from pymongo import DESCENDING
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from summarizer.core.errors import StorageQueryError, StorageWriteError
from summarizer.models.dto import SummaryListItem

logger = logging.getLogger(__name__)


def format_timestamp(value) -> str | None:
    # ISO-8601 in UTC with milliseconds, e.g. 2025-01-08T10:00:00.000Z
    if not isinstance(value, datetime):
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def map_summary_doc(doc: dict) -> dict:
    text = doc.get('text')
    duration = doc.get('durationMs')
    item = SummaryListItem(
        id=str(doc['_id']),
        status=doc.get('status') or None,
        source=doc.get('source') or None,
        contentType=doc.get('contentType') or None,
        error=doc.get('error') or None,
        chars=len(text) if isinstance(text, str) else 0,
        durationMs=int(duration) if isinstance(duration, (int, float)) and not isinstance(duration, bool) else None,
        fetchedAt=format_timestamp(doc.get('fetchedAt')),
    )
    return item.model_dump()


def create_summary_writer(collection: Collection):
    async def write_summary_doc(doc: dict) -> str:
        try:
            # insert_one sets _id on the dict it is given
            result = await asyncio.to_thread(collection.insert_one, dict(doc))
        except PyMongoError as e:
            logger.error('Summary write failed: %s', e)
            raise StorageWriteError(f'Storage write failed: {e}') from e
        return str(result.inserted_id)

    return write_summary_doc


def create_list_latest_summaries(collection: Collection):
    def _query(limit: int) -> list[dict]:
        cursor = collection.find({}).sort('fetchedAt', DESCENDING).limit(limit)
        return [map_summary_doc(doc) for doc in cursor]

    async def list_latest_summaries(limit: int) -> list[dict]:
        try:
            return await asyncio.to_thread(_query, limit)
        except PyMongoError as e:
            message = str(e) or 'Unknown storage error'
            logger.error('Summary query failed: %s', message)
            raise StorageQueryError(f'Storage query failed: {message}') from e

    return list_latest_summaries
