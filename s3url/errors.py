"""Exception types raised by the S3 URL helpers."""

__all__ = [
    'S3URLError',
    'URLFormatError',
    'ObjectStoreConfigError',
    'AllocationError',
]


class S3URLError(ValueError):
    """Base error for S3 URL handling."""


class URLFormatError(S3URLError):
    """The URL has no host, or its host does not match a known S3 shape."""


class ObjectStoreConfigError(S3URLError):
    """Region or bucket could not be resolved from the URL, descriptor or defaults."""


class AllocationError(S3URLError):
    """A descriptor could not be copied."""
