import logging
from pathlib import Path
from typing import Optional, Tuple

from PIL import Image, ImageChops, UnidentifiedImageError

from pagescript.errors import VisualDiffError
from pagescript.models import DiffResult

logger = logging.getLogger(__name__)

HIGHLIGHT_COLOR = (255, 0, 0, 255)


def _open_rgba(path: str) -> Image.Image:
    if not Path(path).is_file():
        raise VisualDiffError(f"Image not found: {path}")
    try:
        with Image.open(path) as img:
            return img.convert("RGBA")
    except (UnidentifiedImageError, OSError) as e:
        raise VisualDiffError(f"Could not read image {path}: {e}") from e


def _pad(img: Image.Image, size: Tuple[int, int]) -> Image.Image:
    if img.size == size:
        return img
    canvas = Image.new("RGBA", size, (0, 0, 0, 0))
    canvas.paste(img, (0, 0))
    return canvas


def _mismatch_mask(actual: Image.Image, expected: Image.Image) -> Image.Image:
    # max over RGBA channels, then binarised
    channels = ImageChops.difference(actual, expected).split()
    combined = channels[0]
    for channel in channels[1:]:
        combined = ImageChops.lighter(combined, channel)
    return combined.point(lambda value: 255 if value > 0 else 0)


def compare_images(actual_path: str, expected_path: str, diff_path: Optional[str] = None) -> DiffResult:
    """
    Pixel-compare a fresh screenshot against a reference image.

    Images of different sizes are compared on a canvas large enough for both,
    so the non-overlapping area counts as mismatched. When diff_path is given,
    a greyscale copy of the screenshot with mismatched pixels painted red is
    written there.
    """
    actual = _open_rgba(actual_path)
    expected = _open_rgba(expected_path)

    size = (max(actual.width, expected.width), max(actual.height, expected.height))
    actual = _pad(actual, size)
    expected = _pad(expected, size)

    mask = _mismatch_mask(actual, expected)
    mismatched = mask.histogram()[255]
    logger.info(f"Compared {actual_path} with {expected_path}: {mismatched} mismatched pixels")

    written = None
    if diff_path:
        base = actual.convert("L").convert("RGBA")
        highlight = Image.new("RGBA", size, HIGHLIGHT_COLOR)
        Path(diff_path).parent.mkdir(parents=True, exist_ok=True)
        Image.composite(highlight, base, mask).save(diff_path)
        written = diff_path
        logger.info(f"Diff image written to {diff_path}")

    return DiffResult(width=size[0], height=size[1], mismatched_pixels=mismatched, diff_path=written)
