"""Image loading functions for grayscale face crops."""

import io
from pathlib import Path
from typing import BinaryIO

import numpy as np
from PIL import Image, UnidentifiedImageError

from .errors import ImageDecodeError
from .utils import GrayImage


# Pillow mode for 8-bit single-channel images
GRAY_MODE = "L"

# Single-channel modes widened to 8-bit gray on decode; 1-bit maps to 0/255
GRAY_COMPATIBLE_MODES = frozenset({GRAY_MODE, "1"})


def load_gray_image(path: str | Path) -> GrayImage:
    """Load a grayscale image file from disk.

    Args:
        path: Path to the image file (PNG or any format Pillow decodes).

    Returns:
        GrayImage with the decoded 8-bit intensities.

    Raises:
        ImageDecodeError: If the file is missing, empty, undecodable, or
            not single-channel grayscale.

    Examples:
        >>> image = load_gray_image("images/avatar64.png")
        >>> image.width, image.height
        (64, 64)
    """
    path = Path(path)

    if not path.exists():
        raise ImageDecodeError(
            message=f"Image file not found: {path}",
            code="FILE_NOT_FOUND",
            details={"path": str(path)},
        )

    if path.stat().st_size == 0:
        raise ImageDecodeError(
            message=f"Image file is empty: {path}",
            code="EMPTY_FILE",
            details={"path": str(path)},
        )

    with path.open("rb") as f:
        return _decode(f, source=str(path))


def load_gray_image_bytes(data: bytes) -> GrayImage:
    """Load a grayscale image from raw encoded bytes.

    Args:
        data: Raw bytes of an encoded image (e.g. PNG).

    Returns:
        GrayImage with the decoded 8-bit intensities.

    Raises:
        ImageDecodeError: If the bytes are empty, undecodable, or not
            single-channel grayscale.
    """
    if not data:
        raise ImageDecodeError(
            message="Image data is empty",
            code="EMPTY_FILE",
            details={"bytes_length": 0},
        )

    return _decode(io.BytesIO(data), source="bytes")


def load_gray_image_stream(stream: BinaryIO) -> GrayImage:
    """Load a grayscale image from a binary stream such as stdin.

    The stream is read to the end before decoding.
    """
    return load_gray_image_bytes(stream.read())


def _decode(fp: BinaryIO, source: str) -> GrayImage:
    """Decode an image stream and enforce the grayscale-only policy.

    Args:
        fp: Binary file-like object positioned at the image start.
        source: Source description for error messages.

    Returns:
        GrayImage built from the decoded pixels.
    """
    try:
        with Image.open(fp) as img:
            img.load()
            mode = img.mode
            size = img.size
            if mode in GRAY_COMPATIBLE_MODES:
                pixels = np.asarray(img.convert(GRAY_MODE))
            else:
                pixels = None
    except (UnidentifiedImageError, OSError, SyntaxError, EOFError, ValueError) as e:
        raise ImageDecodeError(
            message=f"Failed to decode image: {e}",
            code="INVALID_IMAGE",
            details={"source": source, "error": str(e)},
        ) from e

    if pixels is None:
        raise ImageDecodeError(
            message=f"Please give a gray image as input, got mode {mode}",
            code="UNSUPPORTED_IMAGE_FORMAT",
            details={"source": source, "mode": mode, "expected_mode": GRAY_MODE},
        )

    if pixels.size == 0:
        raise ImageDecodeError(
            message="Image contains no pixels",
            code="INVALID_IMAGE",
            details={"source": source, "size": list(size)},
        )

    return GrayImage(pixels)
