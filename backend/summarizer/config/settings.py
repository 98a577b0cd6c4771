from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    # Runtime environment ("production", "development", "test")
    APP_ENV: str = 'production'

    # DATABASE SETTINGS
    MONGO_URI: Optional[str] = None
    DB_NAME: str = 'summarizer'
    SUMMARIES_COLLECTION: str = 'summaries'

    # MongoDB connection pool settings
    MONGO_MAX_POOL_SIZE: int = 20
    MONGO_MIN_POOL_SIZE: int = 0
    MONGO_SERVER_SELECTION_TIMEOUT_MS: int = 5000

    # ============================================================
    # CENTRALIZED LIMIT SYSTEM
    # ============================================================
    # All limits defined once, used consistently across all services

    # --- URL INGEST LIMITS ---
    # Max length of a caller-supplied URL
    MAX_URL_LENGTH: int = 2048

    # Hard ceiling on downloaded bytes per response (2 MiB)
    MAX_RESPONSE_BYTES: int = 2 * 1024 * 1024

    # Max characters of extracted text kept per document
    MAX_TEXT_CHARS: int = 40000

    # Wall-clock budget for one upstream request, body included
    FETCH_TIMEOUT_MS: int = 15000

    FETCH_USER_AGENT: str = (
        'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 '
        '(KHTML, like Gecko) Chrome/120.0 Safari/537.36'
    )

    # --- LISTING LIMITS ---
    LIST_DEFAULT_LIMIT: int = 20
    LIST_MAX_LIMIT: int = 50

    # ============================================================
    # SUPREME COURT PRESET SEARCH
    # ============================================================
    SUPREME_SEARCH_URL: str = 'https://supreme.court.gov.il/Pages/fullsearch.aspx'
    SUPREME_PROVIDER: str = 'supreme.court.gov.il'
    SUPREME_PRESET_NAME: str = 'last_week_decisions_over_2_pages'
    SUPREME_LOOKBACK_DAYS: int = 7
    SUPREME_MIN_PAGES: int = 3
    SUPREME_FREE_TEXT: str = 'החלטה'
    SUPREME_SUBMIT_LABEL: str = 'חפש'

    # Candidate form field names per logical field.
    # The generated ASP.NET names are not stable, every candidate is written.
    SUPREME_DATE_FROM_FIELDS: list[str] = Field(
        default_factory=lambda: [
            'ctl00$ContentPlaceHolder1$txtDateFrom',
            'ctl00$MainContent$txtDateFrom',
            'txtDateFrom',
        ]
    )
    SUPREME_DATE_TO_FIELDS: list[str] = Field(
        default_factory=lambda: [
            'ctl00$ContentPlaceHolder1$txtDateTo',
            'ctl00$MainContent$txtDateTo',
            'txtDateTo',
        ]
    )
    SUPREME_MIN_PAGES_FIELDS: list[str] = Field(
        default_factory=lambda: [
            'ctl00$ContentPlaceHolder1$txtPagesFrom',
            'ctl00$MainContent$txtPagesFrom',
            'txtPagesFrom',
        ]
    )
    SUPREME_FREE_TEXT_FIELDS: list[str] = Field(
        default_factory=lambda: [
            'ctl00$ContentPlaceHolder1$txtFreeText',
            'ctl00$MainContent$txtFreeText',
            'txtFreeText',
        ]
    )
    SUPREME_SUBMIT_FIELDS: list[str] = Field(
        default_factory=lambda: [
            'ctl00$ContentPlaceHolder1$btnSearch',
            'ctl00$MainContent$btnSearch',
            'btnSearch',
        ]
    )

    class Config:
        env_file = '.env'
        case_sensitive = True

settings = Settings()
