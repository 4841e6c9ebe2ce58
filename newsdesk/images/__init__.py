"""Image extraction, stock search and re-hosting."""

from .errors import ImageDownloadError, ImageError, ObjectStorageError, StockPhotoError
from .extract import ImageCandidate, extract_feed_image
from .resolver import ImageResolution, ImageResolver, file_extension, source_slug
from .stock import PexelsProvider, StockPhoto, StockPhotoProvider, UnsplashProvider, build_stock_providers
from .storage import MemoryObjectStorage, ObjectStorage, S3ObjectStorage

__all__ = [
    "ImageCandidate",
    "ImageDownloadError",
    "ImageError",
    "ImageResolution",
    "ImageResolver",
    "MemoryObjectStorage",
    "ObjectStorage",
    "ObjectStorageError",
    "PexelsProvider",
    "S3ObjectStorage",
    "StockPhoto",
    "StockPhotoError",
    "StockPhotoProvider",
    "UnsplashProvider",
    "build_stock_providers",
    "extract_feed_image",
    "file_extension",
    "source_slug",
]
