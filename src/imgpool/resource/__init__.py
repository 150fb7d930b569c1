"""
Resource module.

- Duplicable / ImageResource: Pooled resource types
- ImageFetcher and implementations: Turn a source into an ImageResource
"""

from imgpool.resource.resource import Duplicable, ImageResource, duplicate_of
from imgpool.resource.fetcher import (
    FetchError,
    FileImageFetcher,
    HttpImageFetcher,
    ImageFetcher,
    ImageLoadError,
    RoutingImageFetcher,
)

__all__ = [
    "Duplicable",
    "ImageResource",
    "duplicate_of",
    "FetchError",
    "FileImageFetcher",
    "HttpImageFetcher",
    "ImageFetcher",
    "ImageLoadError",
    "RoutingImageFetcher",
]
