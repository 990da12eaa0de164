from abc import ABC, abstractmethod

from prefilter.detection.models import AnalysisMode, DetectionOutcome


class BaseDetectionBackend(ABC):
    """Contract for all detection backends."""

    name: str = "base"

    @abstractmethod
    def analyze(self, image_bytes: bytes, mode: AnalysisMode) -> DetectionOutcome:
        """Score encoded image bytes per sensitive category.

        Args:
            image_bytes: Encoded image (PNG, JPEG, ...).
            mode: LIGHT or DEEP. OFF never reaches a backend.

        Returns:
            DetectionOutcome whose raw_scores only hold detections.

        Raises:
            DecodeFailure: if the bytes are not a decodable image.
            BackendRuntimeFailure: if scoring fails for any other reason.
        """
