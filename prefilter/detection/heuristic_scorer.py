from dataclasses import dataclass
from typing import ClassVar

from prefilter.detection import signals
from prefilter.detection.raster import RasterImage

SIGNAL_WEIGHTS: dict[str, float] = {
    "aspect": 0.25,
    "color": 0.25,
    "edge": 0.20,
    "shape": 0.15,
    "size": 0.15,
}

# Lower than the learned-model threshold; the heuristic is less precise.
HEURISTIC_THRESHOLD = 0.3


@dataclass(frozen=True)
class CardSignals:
    """The five card signals for one raster and their weighted combination."""

    aspect: float
    color: float
    edge: float
    shape: float
    size: float

    WEIGHTS: ClassVar[dict[str, float]] = SIGNAL_WEIGHTS

    @property
    def combined(self) -> float:
        return (
            self.aspect * self.WEIGHTS["aspect"]
            + self.color * self.WEIGHTS["color"]
            + self.edge * self.WEIGHTS["edge"]
            + self.shape * self.WEIGHTS["shape"]
            + self.size * self.WEIGHTS["size"]
        )

    @property
    def is_card(self) -> bool:
        return self.combined > HEURISTIC_THRESHOLD


def score_card(image: RasterImage) -> CardSignals:
    """Compute every card signal for *image*."""
    return CardSignals(
        aspect=signals.aspect_ratio_score(image.width, image.height),
        color=signals.color_score(image),
        edge=signals.edge_score(image),
        shape=signals.shape_score(image),
        size=signals.size_score(image),
    )
