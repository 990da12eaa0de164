import io
from collections.abc import Callable

import numpy as np
import pytest
from PIL import Image

from prefilter.detection.raster import RasterImage


def _encode_png(pixels: np.ndarray) -> bytes:
    buf = io.BytesIO()
    Image.fromarray(pixels.astype(np.uint8)).save(buf, format="PNG")
    return buf.getvalue()


def _make_card_pixels(width: int = 159, height: int = 100, frame: int = 15) -> np.ndarray:
    """Silver card face (200, 200, 200) inside a sharp black frame."""
    pixels = np.full((height, width, 3), 200, dtype=np.uint8)
    pixels[:frame, :] = 0
    pixels[-frame:, :] = 0
    pixels[:, :frame] = 0
    pixels[:, -frame:] = 0
    return pixels


def _make_landscape_pixels(width: int = 1920, height: int = 1080) -> np.ndarray:
    """Dark, smooth green gradient: no border, no card palette, no gloss."""
    xs = np.linspace(0.0, 1.0, width, endpoint=False)
    ys = np.linspace(0.0, 1.0, height, endpoint=False)
    pixels = np.empty((height, width, 3), dtype=np.float64)
    pixels[..., 0] = 10 + 80 * xs[np.newaxis, :]
    pixels[..., 1] = 60 + 50 * ys[:, np.newaxis]
    pixels[..., 2] = 30
    return pixels.astype(np.uint8)


@pytest.fixture()
def card_pixels() -> np.ndarray:
    return _make_card_pixels()


@pytest.fixture()
def card_image(card_pixels: np.ndarray) -> RasterImage:
    return RasterImage(card_pixels)


@pytest.fixture()
def card_png_bytes(card_pixels: np.ndarray) -> bytes:
    """159x100 near-ideal card photo encoded as PNG."""
    return _encode_png(card_pixels)


@pytest.fixture(scope="session")
def landscape_pixels() -> np.ndarray:
    return _make_landscape_pixels()


@pytest.fixture(scope="session")
def landscape_png_bytes(landscape_pixels: np.ndarray) -> bytes:
    """1920x1080 landscape-like gradient encoded as PNG."""
    return _encode_png(landscape_pixels)


def _corrupt_second_idat(png: bytes) -> bytes:
    """Overwrite the type of the second IDAT chunk so loading hits a broken chunk."""
    data = bytearray(png)
    offset = 8
    seen = 0
    while offset < len(data):
        length = int.from_bytes(data[offset : offset + 4], "big")
        if data[offset + 4 : offset + 8] == b"IDAT":
            seen += 1
            if seen == 2:
                data[offset + 4 : offset + 8] = b"\x00\x00\x80\x8e"
                return bytes(data)
        offset += 12 + length
    raise AssertionError("PNG has fewer than two IDAT chunks")


@pytest.fixture()
def corrupted_png_bytes() -> bytes:
    """Noisy 320x320 PNG whose pixel data spans several IDAT chunks, one corrupt.

    The header decodes fine; the damage only surfaces once pixels are loaded.
    """
    rng = np.random.default_rng(7)
    noise = rng.integers(0, 256, size=(320, 320, 3), dtype=np.uint8)
    return _corrupt_second_idat(_encode_png(noise))


@pytest.fixture()
def not_an_image_bytes() -> bytes:
    return b"definitely not an image"


@pytest.fixture()
def encode_png() -> Callable[[np.ndarray], bytes]:
    return _encode_png


@pytest.fixture()
def make_card() -> Callable[..., np.ndarray]:
    return _make_card_pixels
