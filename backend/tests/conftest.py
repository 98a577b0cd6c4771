from typing import Callable

import httpx
import pytest

from summarizer.config.web_providers.bounded_fetch import BoundedFetcher


class FakeSummaryWriter:
    def __init__(self, fail: bool = False) -> None:
        self.docs: list[dict] = []
        self.fail = fail

    async def __call__(self, doc: dict) -> str:
        if self.fail:
            raise RuntimeError('storage offline')
        self.docs.append(doc)
        return f'doc-{len(self.docs)}'


@pytest.fixture
def make_fetcher() -> Callable[..., BoundedFetcher]:
    def _make(handler: Callable, **kwargs) -> BoundedFetcher:
        return BoundedFetcher(
            client_factory=lambda: httpx.AsyncClient(transport=httpx.MockTransport(handler)),
            **kwargs,
        )

    return _make


@pytest.fixture
def writer() -> FakeSummaryWriter:
    return FakeSummaryWriter()


@pytest.fixture
def failing_writer() -> FakeSummaryWriter:
    return FakeSummaryWriter(fail=True)
