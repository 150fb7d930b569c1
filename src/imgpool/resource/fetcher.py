"""
Image fetchers.

A fetcher turns a source identifier into an ImageResource. Fetchers only
transfer bytes; decoding is left to whoever attaches the image.

- ImageFetcher: Abstract interface used by the loader
- HttpImageFetcher: http(s) sources via a shared httpx.AsyncClient
- FileImageFetcher: local paths, read in a thread pool
- RoutingImageFetcher: Picks one of the above by URL scheme
"""

import asyncio
import mimetypes
import os
from abc import ABC, abstractmethod
from typing import Dict, Optional

import httpx

from imgpool.logger.logger import get_logger
from imgpool.resource.resource import ImageResource
from imgpool.settings import app_settings
from imgpool.settings.app_settings import appConfiguration

logger = get_logger(
    "fetcher",
    log_file=appConfiguration.LoggerConfiguration.LogFile,
    level=appConfiguration.LoggerConfiguration.FetcherLevel,
)

HTTP_HEADERS = {
    "User-Agent": "imgpool/0.1",
    "Accept": "image/*,*/*;q=0.8",
}


class ImageLoadError(Exception):
    """Base error for image pool and loader failures."""


class FetchError(ImageLoadError):
    """Raised by fetchers when a source cannot be retrieved."""

    def __init__(self, src: str, reason: str):
        super().__init__(f"Failed to fetch {src}: {reason}")
        self.src = src
        self.reason = reason


class ImageFetcher(ABC):
    """Base class for image fetchers. Extend this for other transports."""

    @abstractmethod
    async def fetch(self, src: str) -> ImageResource:
        """
        Fetch a single image.

        Args:
            src: Source identifier (URL or path)

        Returns:
            The fetched resource

        Raises:
            FetchError: If the source cannot be retrieved
        """
        pass

    async def aclose(self) -> None:
        """Release transport resources. Default is a no-op."""
        pass


class HttpImageFetcher(ImageFetcher):
    """
    Fetches images over HTTP(S).

    The client is created lazily so it binds to the loop that first uses it.
    A client passed in by the caller is borrowed and never closed here.
    Once closed, the fetcher stays closed: fetch() raises FetchError.
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        if timeout is None:
            timeout = app_settings.appConfiguration.LoaderConfiguration.http_timeout
        self.timeout = timeout
        self._headers = dict(HTTP_HEADERS)
        if headers:
            self._headers.update(headers)
        self._client = client
        self._owns_client = client is None
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def get_http_client(self) -> httpx.AsyncClient:
        if self._closed:
            raise RuntimeError("HttpImageFetcher is closed")
        if self._client is None:
            logger.debug("[HttpImageFetcher] Creating HTTP client")
            self._client = httpx.AsyncClient(
                follow_redirects=True,
                timeout=self.timeout,
                headers=self._headers.copy(),
            )
            self._owns_client = True
        return self._client

    async def fetch(self, src: str) -> ImageResource:
        if self._closed:
            raise FetchError(src, "fetcher is closed")
        client = self.get_http_client()
        try:
            response = await client.get(src)
        except httpx.HTTPError as e:
            raise FetchError(src, f"{type(e).__name__}: {e}") from e

        if response.status_code >= 400:
            raise FetchError(src, f"HTTP {response.status_code}")

        content_type = response.headers.get("content-type")
        if content_type:
            content_type = content_type.split(";")[0].strip()

        logger.debug(f"[HttpImageFetcher] Fetched {src} ({len(response.content)} bytes)")
        return ImageResource(
            src=src,
            data=response.content,
            content_type=content_type,
            metadata={"status_code": response.status_code, "url": str(response.url)},
        )

    async def aclose(self) -> None:
        self._closed = True
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
            logger.debug("[HttpImageFetcher] HTTP client closed")


class FileImageFetcher(ImageFetcher):
    """Reads images from the local filesystem without blocking the loop."""

    def __init__(self, base_dir: Optional[str] = None):
        self.base_dir = base_dir

    def _resolve(self, src: str) -> str:
        path = src[len("file://"):] if src.startswith("file://") else src
        if self.base_dir and not os.path.isabs(path):
            path = os.path.join(self.base_dir, path)
        return path

    def _read(self, path: str) -> bytes:
        with open(path, "rb") as f:
            return f.read()

    async def fetch(self, src: str) -> ImageResource:
        path = self._resolve(src)
        if not os.path.isfile(path):
            raise FetchError(src, f"no such file: {path}")

        loop = asyncio.get_running_loop()
        try:
            data = await loop.run_in_executor(None, self._read, path)
        except OSError as e:
            raise FetchError(src, str(e)) from e

        content_type, _ = mimetypes.guess_type(path)
        logger.debug(f"[FileImageFetcher] Read {path} ({len(data)} bytes)")
        return ImageResource(
            src=src,
            data=data,
            content_type=content_type,
            metadata={"path": path},
        )


class RoutingImageFetcher(ImageFetcher):
    """Sends http(s) sources to an HTTP fetcher and everything else to a file fetcher."""

    def __init__(
        self,
        http: Optional[ImageFetcher] = None,
        file: Optional[ImageFetcher] = None,
    ):
        self.http = http or HttpImageFetcher()
        self.file = file or FileImageFetcher()

    def select(self, src: str) -> ImageFetcher:
        if src.startswith(("http://", "https://")):
            return self.http
        return self.file

    async def fetch(self, src: str) -> ImageResource:
        return await self.select(src).fetch(src)

    async def aclose(self) -> None:
        await self.http.aclose()
        await self.file.aclose()
