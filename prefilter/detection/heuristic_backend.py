from prefilter.detection.base import BaseDetectionBackend
from prefilter.detection.exceptions import BackendRuntimeFailure
from prefilter.detection.heuristic_scorer import score_card
from prefilter.detection.models import AnalysisMode, DetectionCategory, DetectionOutcome
from prefilter.detection.raster import decode_image
from prefilter.logging.logger import Log


class HeuristicBackend(BaseDetectionBackend):
    """Card detection from pixel statistics alone; needs no model asset.

    LIGHT and DEEP score identically: only the card category is computed.
    """

    name = "heuristic"

    def analyze(self, image_bytes: bytes, mode: AnalysisMode) -> DetectionOutcome:
        with Log.timed("Image decode"):
            image = decode_image(image_bytes)
        try:
            signals = score_card(image)
        except Exception as exc:
            raise BackendRuntimeFailure(f"Heuristic scoring failed: {exc}") from exc

        Log.debug(
            f"Heuristic signals ({mode.value}): aspect={signals.aspect:.3f} "
            f"color={signals.color:.3f} edge={signals.edge:.3f} "
            f"shape={signals.shape:.3f} size={signals.size:.3f} "
            f"combined={signals.combined:.3f}"
        )
        if not signals.is_card:
            return DetectionOutcome(raw_scores={}, backend=self.name)
        return DetectionOutcome(
            raw_scores={DetectionCategory.CREDIT_CARD.value: signals.combined},
            backend=self.name,
        )
