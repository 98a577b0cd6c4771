"""
Structured logging helpers for endpoint events.
"""

from __future__ import annotations

import json
import logging
from typing import Any


def log_event(
    logger: logging.Logger,
    level: int,
    event: str,
    **fields: Any,
) -> None:
    """
    Emit one structured log line as compact JSON.
    """

    payload = {'event': event, **fields}
    logger.log(level, json.dumps(payload, default=str, sort_keys=True, ensure_ascii=False))


def log_endpoint_event(logger: logging.Logger, level: int, **data: Any) -> None:
    """
    Emit an endpoint lifecycle event (started / done / failed).

    endpoint, status, durationMs and errorType are always present.
    """

    duration = data.pop('durationMs', None)
    payload = {
        'endpoint': data.pop('endpoint', None) or 'unknown',
        'status': data.pop('status', None) or 'unknown',
        'durationMs': duration if isinstance(duration, int) else None,
        'errorType': data.pop('errorType', None),
        **data,
    }
    log_event(logger, level, 'endpoint_event', **payload)
