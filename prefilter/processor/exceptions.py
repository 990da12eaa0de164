from prefilter.detection.exceptions import PrefilterError


class DataUnavailable(PrefilterError):
    """Raised when a screenshot has neither bytes nor a readable file."""
