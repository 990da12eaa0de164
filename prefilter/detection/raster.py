import io
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray
from PIL import Image, UnidentifiedImageError

from prefilter.detection.exceptions import DecodeFailure


@dataclass(frozen=True)
class RasterImage:
    """Decoded RGB raster, pixels indexed as [row, column, channel]."""

    pixels: NDArray[np.uint8]

    def __post_init__(self) -> None:
        if self.pixels.ndim != 3 or self.pixels.shape[2] != 3:
            raise ValueError(f"Expected an HxWx3 array, got shape {self.pixels.shape}")

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    def signed(self) -> NDArray[np.int32]:
        """Copy of the pixels widened so channel differences cannot wrap."""
        return self.pixels.astype(np.int32)

    def resized(self, width: int, height: int) -> "RasterImage":
        """Nearest-neighbour resize to the given size."""
        image = Image.fromarray(self.pixels)
        resized = image.resize((width, height), Image.Resampling.NEAREST)
        return RasterImage(np.asarray(resized, dtype=np.uint8))


def decode_image(data: bytes) -> RasterImage:
    """Decode encoded image bytes (PNG, JPEG, ...) into an RGB raster.

    Raises:
        DecodeFailure: if the bytes are empty or not a supported image.
    """
    if not data:
        raise DecodeFailure("No image bytes to decode")
    try:
        with Image.open(io.BytesIO(data)) as image:
            rgb = image.convert("RGB")
        pixels = np.asarray(rgb, dtype=np.uint8)
    except (
        UnidentifiedImageError,
        Image.DecompressionBombError,
        OSError,
        SyntaxError,  # Pillow: corrupt chunk met while loading pixel data
        ValueError,
    ) as exc:
        raise DecodeFailure(f"Image decode failed: {exc}") from exc
    if pixels.ndim != 3 or pixels.shape[0] == 0 or pixels.shape[1] == 0:
        raise DecodeFailure(f"Decoded image has unusable shape {pixels.shape}")
    return RasterImage(pixels)
