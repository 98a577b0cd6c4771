"""
Main application entry point
Sets up FastAPI app with routers, storage collaborators and health checks
"""
import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from pymongo.errors import PyMongoError

from summarizer.api.summaries import router as summaries_router
from summarizer.config.web_providers.bounded_fetch import BoundedFetcher
from summarizer.core import db
from summarizer.core.errors import MisconfigurationError
from summarizer.services.request_envelope import SummaryLister, SummaryWriter
from summarizer.services.summary_store import create_list_latest_summaries, create_summary_writer

VERSION = '1.0.0'

# Configure logging level from environment
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()
logging.basicConfig(
    level=LOG_LEVEL,
    format='%(asctime)s %(levelname)s %(name)s: %(message)s',
)

# Reduce noisy third-party debug logs
logging.getLogger('pymongo').setLevel(logging.WARNING)
logging.getLogger('httpcore').setLevel(logging.WARNING)
logging.getLogger('httpx').setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Wire MongoDB collaborators unless they were injected
    if app.state.summary_writer is None or app.state.list_summaries is None:
        try:
            collection = db.get_summaries_collection()
        except MisconfigurationError as e:
            logger.error('Storage not wired: %s', e)
            yield
            return
        db.ensure_indexes(collection)
        app.state.mongo_client = db.get_client()
        if app.state.summary_writer is None:
            app.state.summary_writer = create_summary_writer(collection)
        if app.state.list_summaries is None:
            app.state.list_summaries = create_list_latest_summaries(collection)
    yield
    if app.state.mongo_client is not None:
        db.close_client()


def create_app(
    summary_writer: Optional[SummaryWriter] = None,
    list_summaries: Optional[SummaryLister] = None,
    fetcher: Optional[BoundedFetcher] = None,
) -> FastAPI:
    """
    Build the application. Collaborators passed in are used as is,
    missing storage collaborators are wired to MongoDB on startup.

    """
    app = FastAPI(title='Summarizer', version=VERSION, lifespan=lifespan)
    app.state.summary_writer = summary_writer
    app.state.list_summaries = list_summaries
    app.state.fetcher = fetcher or BoundedFetcher()
    app.state.mongo_client = None

    @app.get('/health')
    async def health_check(request: Request):
        """Health check endpoint with database connectivity status"""
        client = request.app.state.mongo_client
        if client is None:
            db_status = 'not_configured'
        else:
            try:
                # Ping MongoDB to check connection
                client.admin.command('ping')
                db_status = 'connected'
            except PyMongoError:
                db_status = 'disconnected'

        return {
            'status': 'degraded' if db_status == 'disconnected' else 'healthy',
            'database': db_status,
            'version': VERSION,
        }

    # Register API routers
    app.include_router(summaries_router)  # Ingestion and listing endpoints
    return app


app = create_app()
