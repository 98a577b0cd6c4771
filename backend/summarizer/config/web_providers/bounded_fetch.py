from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable, Mapping, Optional

import httpx
import idna

from summarizer.config.settings import settings
from summarizer.core.errors import FetchError, FetchTimeoutError, InvalidRequestError, ResponseTooLargeError

logger = logging.getLogger(__name__)

# Hard guards
MAX_RESPONSE_BYTES = settings.MAX_RESPONSE_BYTES
FETCH_TIMEOUT_MS = settings.FETCH_TIMEOUT_MS
USER_AGENT = settings.FETCH_USER_AGENT

ClientFactory = Callable[[], httpx.AsyncClient]


class BoundedFetcher:
    """
    HTTP fetcher with a hard wall-clock timeout and a hard response size ceiling.

    The timeout covers everything done inside the `open()` block, so a
    slow body read is cut off just like a slow connect. Leaving the block
    always closes the transfer.
    """

    def __init__(
        self,
        *,
        timeout_ms: int = FETCH_TIMEOUT_MS,
        max_bytes: int = MAX_RESPONSE_BYTES,
        client_factory: Optional[ClientFactory] = None,
    ) -> None:
        self.timeout_ms = timeout_ms
        self.max_bytes = max_bytes
        self._client_factory = client_factory or self._default_client

    def _default_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            headers={'User-Agent': USER_AGENT},
            timeout=httpx.Timeout(self.timeout_ms / 1000),
        )

    @asynccontextmanager
    async def open(
        self,
        url: str,
        *,
        method: str = 'GET',
        headers: Optional[Mapping[str, str]] = None,
        data: Optional[Mapping[str, str]] = None,
    ) -> AsyncIterator[httpx.Response]:
        timeout_seconds = self.timeout_ms / 1000
        try:
            async with asyncio.timeout(timeout_seconds):
                async with self._client_factory() as client:
                    async with client.stream(
                        method,
                        url,
                        headers=headers,
                        data=data,
                        follow_redirects=True,
                    ) as response:
                        yield response
        except (TimeoutError, httpx.TimeoutException) as e:
            logger.warning('Fetch timed out (method=%s, url=%s)', method, url)
            raise FetchTimeoutError(f'Fetch timed out after {timeout_seconds:g} seconds') from e
        except (httpx.InvalidURL, idna.IDNAError) as e:
            logger.warning('Fetch rejected invalid URL (method=%s, url=%s): %s', method, url, e)
            raise InvalidRequestError('Invalid URL') from e
        except httpx.HTTPError as e:
            logger.warning('Fetch failed (method=%s, url=%s): %s', method, url, e)
            raise FetchError(f'Fetch failed: {e}') from e

    async def read_body_with_limit(self, response: httpx.Response) -> str:
        """
        Stream the body, aborting as soon as it grows past the size ceiling.

        """
        chunks: list[bytes] = []
        total = 0

        async for chunk in response.aiter_bytes():
            total += len(chunk)
            if total > self.max_bytes:
                logger.warning('Response body exceeded %s bytes (url=%s)', self.max_bytes, response.request.url)
                raise ResponseTooLargeError(f'Response body too large (max {self._max_size_label()})')
            chunks.append(chunk)

        return b''.join(chunks).decode('utf-8', errors='replace')

    def _max_size_label(self) -> str:
        mib = self.max_bytes / (1024 * 1024)
        if mib >= 1 and mib == int(mib):
            return f'{int(mib)} MB'
        return f'{self.max_bytes} bytes'
