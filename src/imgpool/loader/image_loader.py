"""
ImageLoader - FIFO image fetching under a fixed concurrency quota.

Requests are queued in submission order and dispatched while quota remains.
Each completion, successful or not, releases one unit of quota and drains
the queue again, so at most ``request_limit`` fetches are ever in flight.

All scheduler state is owned by the event loop thread: load() must be called
from a coroutine or callback running on that loop, and completions arrive
through task done-callbacks on the same loop.
"""

import asyncio
import functools
from collections import deque
from typing import Any, Deque, Dict, List, Optional, Sequence, Tuple, Union

from imgpool.loader.load_request import (
    LOAD_FAILED,
    LoadOptions,
    LoadRequest,
    RequestStatus,
    normalize_load_args,
)
from imgpool.logger.logger import get_logger
from imgpool.pool.image_pool import ImagePool
from imgpool.resource.fetcher import HttpImageFetcher, ImageFetcher, RoutingImageFetcher
from imgpool.resource.resource import duplicate_of
from imgpool.settings.app_settings import LoaderConfig, appConfiguration

logger = get_logger(
    "image_loader",
    log_file=appConfiguration.LoggerConfiguration.LogFile,
    level=appConfiguration.LoggerConfiguration.LoaderLevel,
)


class ImageLoader:
    """
    Bounded-concurrency image loader.

    Usage:
        loader = ImageLoader(image_pool, config=LoaderConfig(request_limit=2))

        img = await loader.load("https://example.com/a.png")
        await loader.load("a.png", "gallery", 3)   # deposit 3 instances

        futures, done = loader.load_many(["a.png", "b.png"], callback=print)
        results = await done   # LOAD_FAILED in place of failed items
    """

    def __init__(
        self,
        image_pool: ImagePool,
        fetcher: Optional[ImageFetcher] = None,
        config: Optional[LoaderConfig] = None,
    ):
        """
        Initialize loader.

        Args:
            image_pool: Registry that receives deposited resources
            fetcher: Fetcher used for every request (defaults to http/file routing)
            config: Loader options

        Raises:
            ValueError: If request_limit is not a positive integer
        """
        self.config = config or LoaderConfig()
        self.config.validate()
        self.image_pool = image_pool
        self.fetcher = fetcher or RoutingImageFetcher(
            http=HttpImageFetcher(timeout=self.config.http_timeout)
        )

        self._request_limit = self.config.request_limit
        self._quota = self._request_limit
        self._queue: Deque[LoadRequest] = deque()
        self._running: Dict[int, LoadRequest] = {}
        self._next_request_id = 0
        self._idle_waiters: List["asyncio.Future[None]"] = []

        logger.info(f"[ImageLoader] Initialized with request_limit={self._request_limit}")

    @property
    def request_limit(self) -> int:
        return self._request_limit

    @property
    def quota(self) -> int:
        return self._quota

    @property
    def in_flight(self) -> int:
        return len(self._running)

    @property
    def pending(self) -> int:
        return len(self._queue)

    @property
    def idle(self) -> bool:
        return not self._queue and not self._running

    def load(
        self,
        src: Union[str, Sequence[str]],
        *args: Any,
        **kwargs: Any,
    ) -> Union["asyncio.Future[Any]", List["asyncio.Future[Any]"]]:
        """
        Load one image or a list of images.

        Accepts ``load(src, callback=None, pool_name=None, copies=None)`` with
        the positional shift described in normalize_load_args().

        Args:
            src: Source identifier, or a list of them

        Returns:
            A future for a single source, or the list of per-item futures for
            a list. Futures resolve to the resource or LOAD_FAILED.
        """
        options = normalize_load_args(*args, **kwargs)
        if isinstance(src, (list, tuple)):
            futures, _ = self._load_many(list(src), options)
            return futures
        return self._submit(src, options).future

    def load_many(
        self,
        srcs: Sequence[str],
        *args: Any,
        **kwargs: Any,
    ) -> Tuple[List["asyncio.Future[Any]"], "asyncio.Future[List[Any]]"]:
        """
        Load several images and aggregate their results.

        The callback, if any, is called once with the full result list after
        every item has settled. Failed items appear as LOAD_FAILED.

        Returns:
            (per-item futures, aggregate future of the result list)
        """
        options = normalize_load_args(*args, **kwargs)
        return self._load_many(list(srcs), options)

    def _load_many(
        self,
        srcs: List[str],
        options: LoadOptions,
    ) -> Tuple[List["asyncio.Future[Any]"], "asyncio.Future[List[Any]]"]:
        for src in srcs:
            self._check_src(src)
        loop = asyncio.get_running_loop()
        item_options = options.without_callback()
        futures = [self._submit(src, item_options).future for src in srcs]

        aggregate: "asyncio.Future[List[Any]]" = loop.create_future()
        gathered = asyncio.gather(*futures, return_exceptions=True)
        gathered.add_done_callback(
            functools.partial(self._on_batch_settled, aggregate, options.callback, len(futures))
        )
        return futures, aggregate

    def _on_batch_settled(self, aggregate, callback, count, gathered) -> None:
        if gathered.cancelled():
            results = [LOAD_FAILED] * count
        else:
            results = [
                LOAD_FAILED if isinstance(item, BaseException) else item
                for item in gathered.result()
            ]
        logger.debug(
            f"[ImageLoader] Batch settled: {sum(1 for r in results if r is not LOAD_FAILED)}"
            f"/{len(results)} loaded"
        )
        self._invoke_callback(callback, results)
        if not aggregate.done():
            aggregate.set_result(results)

    def _check_src(self, src: Any) -> None:
        if not isinstance(src, str) or not src:
            raise ValueError(f"src must be a non-empty string, got {src!r}")

    def _submit(self, src: str, options: LoadOptions) -> LoadRequest:
        self._check_src(src)

        loop = asyncio.get_running_loop()
        request = LoadRequest(
            request_id=self._next_request_id,
            src=src,
            options=options,
            future=loop.create_future(),
        )
        self._next_request_id += 1

        self._queue.append(request)
        logger.debug(f"[ImageLoader] Queued #{request.request_id} {src} (pending: {len(self._queue)})")
        self._drain()
        return request

    def _drain(self) -> None:
        while self._queue and self._quota_retrieve():
            self._dispatch(self._queue.popleft())

    def _dispatch(self, request: LoadRequest) -> None:
        request.status = RequestStatus.RUNNING
        self._running[request.request_id] = request
        request.task = asyncio.get_running_loop().create_task(self._fetch(request))
        request.task.add_done_callback(functools.partial(self._on_complete, request))
        logger.debug(
            f"[ImageLoader] Dispatched #{request.request_id} {request.src} "
            f"(in flight: {len(self._running)}, quota: {self._quota})"
        )

    async def _fetch(self, request: LoadRequest) -> Any:
        return await self.fetcher.fetch(request.src)

    def _on_complete(self, request: LoadRequest, task: "asyncio.Task[Any]") -> None:
        if request.is_finished():
            return
        self._running.pop(request.request_id, None)
        request.status = RequestStatus.FINISHED

        result = LOAD_FAILED
        try:
            if task.cancelled():
                logger.warning(f"[ImageLoader] Fetch cancelled: {request.src}")
            elif task.exception() is not None:
                logger.warning(f"[ImageLoader] Fetch failed: {request.src} ({task.exception()})")
            elif task.result() is None:
                logger.warning(f"[ImageLoader] Fetcher returned nothing for {request.src}")
            else:
                result = task.result()
                request.resource = result
                if request.options.deposit:
                    self._deposit(request)
            self._invoke_callback(request.options.callback, result)
        finally:
            # Every completion settles its future and gives its quota back
            if not request.future.done():
                request.future.set_result(result)
            self._quota_release()
            self._drain()
            self._notify_idle()

    def _deposit(self, request: LoadRequest) -> None:
        """Put copy_count instances into the pool; the last one is the original."""
        pool = self.image_pool.pool(request.options.pool_name)
        resource = request.resource
        try:
            for remaining in reversed(range(request.options.copy_count)):
                pool.put(request.src, resource if remaining == 0 else duplicate_of(resource))
        except Exception:
            logger.exception(f"[ImageLoader] Could not deposit {request.src} into {pool.id}")
            return
        logger.debug(
            f"[ImageLoader] Deposited {request.options.copy_count}x {request.src} into {pool.id}"
        )

    def _invoke_callback(self, callback, result) -> None:
        if callback is None:
            return
        try:
            callback(result)
        except Exception:
            logger.exception("[ImageLoader] Load callback raised")

    def _quota_retrieve(self) -> bool:
        if self._quota > 0:
            self._quota -= 1
            return True
        return False

    def _quota_release(self) -> None:
        if self._quota < self._request_limit:
            self._quota += 1

    def _notify_idle(self) -> None:
        if not self.idle:
            return
        waiters, self._idle_waiters = self._idle_waiters, []
        for waiter in waiters:
            if not waiter.done():
                waiter.set_result(None)

    async def wait_idle(self) -> None:
        """Wait until the queue is empty and no fetch is in flight."""
        while not self.idle:
            waiter = asyncio.get_running_loop().create_future()
            self._idle_waiters.append(waiter)
            await waiter

    async def aclose(self) -> None:
        """Close the fetcher. In-flight fetches are not cancelled."""
        await self.fetcher.aclose()
        logger.info("[ImageLoader] Closed")

    def get_stats(self) -> Dict[str, Any]:
        """Get loader statistics."""
        return {
            "request_limit": self._request_limit,
            "quota": self._quota,
            "in_flight": len(self._running),
            "pending": len(self._queue),
            "requests": [
                {"request_id": r.request_id, "src": r.src, "status": r.status.name}
                for r in list(self._running.values()) + list(self._queue)
            ],
        }

    def __repr__(self) -> str:
        return (
            f"ImageLoader(request_limit={self._request_limit}, "
            f"in_flight={len(self._running)}, pending={len(self._queue)})"
        )
