import asyncio
from typing import Dict, Iterable, List, Optional

import pytest

from imgpool.pool.image_pool import ImagePool
from imgpool.resource.fetcher import FetchError, ImageFetcher
from imgpool.resource.resource import ImageResource
from imgpool.settings.app_settings import LoaderConfig, PoolConfig


class FakeFetcher(ImageFetcher):
    """
    In-memory fetcher.

    With manual=True every fetch blocks until finish(src) is called, so tests
    decide the completion order.
    """

    def __init__(self, fail: Iterable[str] = (), manual: bool = False, log: Optional[List[str]] = None):
        self.fail = set(fail)
        self.manual = manual
        self.log = log if log is not None else []
        self.started: List[str] = []
        self.active = 0
        self.max_active = 0
        self.closed = False
        self._gates: Dict[str, asyncio.Event] = {}

    def _gate(self, src: str) -> asyncio.Event:
        if src not in self._gates:
            self._gates[src] = asyncio.Event()
        return self._gates[src]

    def finish(self, src: str) -> None:
        self._gate(src).set()

    async def fetch(self, src: str) -> ImageResource:
        self.started.append(src)
        self.log.append(f"start:{src}")
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            if self.manual:
                await self._gate(src).wait()
            else:
                await asyncio.sleep(0)
            if src in self.fail:
                raise FetchError(src, "simulated failure")
            return ImageResource(src=src, data=src.encode(), content_type="image/png")
        finally:
            self.active -= 1

    async def aclose(self) -> None:
        self.closed = True


async def settle(rounds: int = 5) -> None:
    """Let pending tasks and done-callbacks run."""
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture
def pool_config():
    return PoolConfig(flush_on_transition=True, id_prefix="pool", default_pool_name="default")


@pytest.fixture
def loader_config():
    return LoaderConfig(request_limit=2, http_timeout=5.0)


@pytest.fixture
def image_pool(pool_config):
    return ImagePool(pool_config)


@pytest.fixture
def fetcher():
    return FakeFetcher()
