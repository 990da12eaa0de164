"""Pixel-statistics signals for spotting a photographed payment card.

Every function here is pure: the same raster always yields the same score,
and each score lies in [0, 1]. Sampling strides and thresholds are part of the
scoring contract; changing them changes which images get blocked.
"""

import math

import numpy as np
from numpy.typing import NDArray

from prefilter.detection.raster import RasterImage

# ISO/IEC 7810 ID-1: 85.60mm x 53.98mm
CARD_ASPECT_RATIO = 1.586
ASPECT_TOLERANCE = 0.3

COLOR_TARGET_SAMPLES = 1000
COLOR_AMPLIFICATION = 1.5

EDGE_BORDER = 10
EDGE_INSET = 20
EDGE_STRIDE = 5
SHARP_EDGE_THRESHOLD = 100
EDGE_AMPLIFICATION = 2.0

COMPOSITION_GRID = 20
COMPOSITION_MIN_COLORS = 8
COMPOSITION_MAX_COLORS = 60
COMPOSITION_NORMALIZER = 35.0
COARSE_COLOR_MASK = 0xF0

SYMMETRY_MARGIN = 10
SYMMETRY_ROW_STRIDE = 20
SYMMETRY_COLUMN_STRIDE = 10
SYMMETRY_TOLERANCE = 30

MIN_CARD_SIZE = 150
MAX_CARD_SIZE = 800
IDEAL_CARD_SIZE = 350
OFF_BAND_SIZE_SCORE = 0.3


def aspect_ratio_score(width: int, height: int) -> float:
    """1.0 at the card ratio, falling linearly to 0 at 30% relative deviation."""
    if height <= 0:
        return 0.0
    deviation = abs(width / height - CARD_ASPECT_RATIO) / CARD_ASPECT_RATIO
    return max(0.0, 1.0 - deviation / ASPECT_TOLERANCE)


def color_score(image: RasterImage) -> float:
    """Share of sampled pixels with a plastic-card palette or glossy brightness."""
    total_pixels = image.width * image.height
    step = max(1, total_pixels // COLOR_TARGET_SAMPLES)
    sample = image.signed()[::step, ::step]
    r, g, b = sample[..., 0], sample[..., 1], sample[..., 2]

    matches = int(np.count_nonzero(_card_palette(r, g, b) | _plastic_gloss(r, g, b)))
    ratio = matches / (total_pixels / (step * step))
    return min(1.0, ratio * COLOR_AMPLIFICATION)


def _card_palette(
    r: NDArray[np.int32], g: NDArray[np.int32], b: NDArray[np.int32]
) -> NDArray[np.bool_]:
    total = r + g + b
    extreme = (total < 50) | (total > 680)
    blue = (b > r + 30) & (b > g + 30)
    gold = (r > 180) & (g > 120) & (b < 150)
    silver = (r > 160) & (g > 160) & (b > 160) & (r - g < 20)
    holographic = (np.abs(r - g) < 50) & (np.abs(g - b) < 50) & (r > 100)
    return extreme | blue | gold | silver | holographic


def _plastic_gloss(
    r: NDArray[np.int32], g: NDArray[np.int32], b: NDArray[np.int32]
) -> NDArray[np.bool_]:
    brightness = (r + g + b) / 3
    return (brightness > 120) & (brightness < 240)


def edge_score(image: RasterImage) -> float:
    """Share of border samples that sit on a sharp step towards the interior.

    Each sample compares a pixel EDGE_BORDER px in from a side with the pixel
    EDGE_INSET px further inward. Pairs that would fall outside a small raster
    are not sampled.
    """
    pixels = image.signed()
    width, height = image.width, image.height
    columns = np.arange(EDGE_BORDER, width - EDGE_BORDER, EDGE_STRIDE)
    rows = np.arange(EDGE_BORDER, height - EDGE_BORDER, EDGE_STRIDE)

    edges = 0
    samples = 0
    # top, bottom
    for outer, inner in (
        (EDGE_BORDER, EDGE_BORDER + EDGE_INSET),
        (height - EDGE_BORDER, height - EDGE_BORDER - EDGE_INSET),
    ):
        if columns.size and _within(outer, height) and _within(inner, height):
            edges += _sharp_edges(pixels[outer, columns], pixels[inner, columns])
            samples += columns.size
    # left, right
    for outer, inner in (
        (EDGE_BORDER, EDGE_BORDER + EDGE_INSET),
        (width - EDGE_BORDER, width - EDGE_BORDER - EDGE_INSET),
    ):
        if rows.size and _within(outer, width) and _within(inner, width):
            edges += _sharp_edges(pixels[rows, outer], pixels[rows, inner])
            samples += rows.size

    if samples == 0:
        return 0.0
    return min(1.0, edges / samples * EDGE_AMPLIFICATION)


def _within(index: int, limit: int) -> bool:
    return 0 <= index < limit


def _sharp_edges(outer: NDArray[np.int32], inner: NDArray[np.int32]) -> int:
    difference = np.abs(outer - inner).sum(axis=-1)
    return int(np.count_nonzero(difference > SHARP_EDGE_THRESHOLD))


def composition_score(image: RasterImage) -> float:
    """Rewards a moderate number of distinct coarse colours, as in a card photo."""
    step = max(1, int(math.sqrt(image.width * image.height) // COMPOSITION_GRID))
    sample = image.pixels[step::step, step::step] & COARSE_COLOR_MASK
    if sample.size == 0:
        return 0.0
    packed = (
        (sample[..., 0].astype(np.int32) << 16)
        | (sample[..., 1].astype(np.int32) << 8)
        | sample[..., 2].astype(np.int32)
    )
    distinct = int(np.unique(packed).size)
    if COMPOSITION_MIN_COLORS <= distinct <= COMPOSITION_MAX_COLORS:
        return min(1.0, distinct / COMPOSITION_NORMALIZER)
    return 0.0


def symmetry_score(image: RasterImage) -> float:
    """Fraction of left-quarter pixels matching their horizontal mirror."""
    rows = np.arange(SYMMETRY_MARGIN, image.height - SYMMETRY_MARGIN, SYMMETRY_ROW_STRIDE)
    columns = np.arange(0, image.width // 4, SYMMETRY_COLUMN_STRIDE)
    if rows.size == 0 or columns.size == 0:
        return 0.0

    pixels = image.signed()
    left = pixels[np.ix_(rows, columns)]
    right = pixels[np.ix_(rows, image.width - 1 - columns)]
    similar = np.all(np.abs(left - right) < SYMMETRY_TOLERANCE, axis=-1)
    return int(np.count_nonzero(similar)) / similar.size


def shape_score(image: RasterImage) -> float:
    """Mean of the composition and symmetry scores."""
    return (composition_score(image) + symmetry_score(image)) / 2.0


def size_score(image: RasterImage) -> float:
    """Peaks when the longest side is 350px; flat 0.3 outside 150-800px."""
    longest = max(image.width, image.height)
    if MIN_CARD_SIZE <= longest <= MAX_CARD_SIZE:
        return max(0.0, 1.0 - abs(longest - IDEAL_CARD_SIZE) / IDEAL_CARD_SIZE)
    return OFF_BAND_SIZE_SCORE
