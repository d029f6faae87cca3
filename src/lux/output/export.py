"""Image export utilities for rendered images.

Supported formats:
    - PNG (8-bit RGB via Pillow)

Example:
    >>> from src.lux.output.export import save_png
    >>> save_png(pixels, "bin/image.png")  # creates bin/ if needed
"""

import logging
from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

logger = logging.getLogger(__name__)


def save_png(pixels: npt.NDArray[np.uint8], filepath: str | Path) -> Path:
    """Save an RGB8 image as a PNG file.

    Parent directories are created as needed.

    Args:
        pixels: Array of shape (H, W, 3), top row first.
        filepath: Output file path.

    Returns:
        The path written.

    Raises:
        ValueError: If the array is not (H, W, 3) uint8.
        OSError: If the file cannot be written.
    """
    if pixels.ndim != 3 or pixels.shape[2] != 3 or pixels.dtype != np.uint8:
        raise ValueError(f"Expected an (H, W, 3) uint8 array, got {pixels.shape} {pixels.dtype}")

    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)

    pil_image = PILImage.fromarray(pixels)
    pil_image.save(path)
    logger.info("Saved %dx%d image to %s", pixels.shape[1], pixels.shape[0], path)
    return path


def load_png(filepath: str | Path) -> npt.NDArray[np.uint8]:
    """Load a PNG written by ``save_png`` back into an (H, W, 3) uint8 array."""
    with PILImage.open(filepath) as image:
        return np.asarray(image.convert("RGB"), dtype=np.uint8)
