class PrefilterError(Exception):
    """Base exception for every failure the prefilter resolves to an allow."""


class InitializationFailure(PrefilterError):
    """Raised when a learned model asset is missing, corrupt or unloadable."""


class DecodeFailure(PrefilterError):
    """Raised when image bytes cannot be decoded into a raster."""


class BackendRuntimeFailure(PrefilterError):
    """Raised when a detection backend fails while scoring an image."""
