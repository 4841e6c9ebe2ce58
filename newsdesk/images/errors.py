"""Image pipeline error types."""


class ImageError(Exception):
    """Base class for image resolution failures."""


class ImageDownloadError(ImageError):
    """Raised when an image cannot be downloaded."""


class ObjectStorageError(ImageError):
    """Raised when an upload to object storage fails."""


class StockPhotoError(ImageError):
    """Raised when a stock photo search fails."""
