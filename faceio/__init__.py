"""Face image I/O module for decoding and encoding grayscale images.

This module provides the boundary between an encoded face image and the
model input tensor. It handles:
- Loading single-channel grayscale images from files, bytes or streams
- Validating destination tensors against the BCHW layout
- Encoding pixel intensities into a [1, 1, H, W] float tensor

Example:
    >>> from faceio import load_and_encode
    >>> tensor = load_and_encode("images/avatar64.png")
    >>> tensor.shape
    torch.Size([1, 1, 64, 64])
"""

from pathlib import Path
from typing import Union

import torch

from .encode import gray_to_bchw
from .errors import (
    FaceIOError,
    ImageDecodeError,
    TensorEncodeError,
    TensorValidationError,
)
from .loader import load_gray_image, load_gray_image_bytes, load_gray_image_stream
from .utils import (
    DEFAULT_HEIGHT,
    DEFAULT_WIDTH,
    ElementType,
    GrayImage,
    new_input_tensor,
)
from .validate import verify_bchw_tensor


__all__ = [
    # Main integration function
    "load_and_encode",
    # Types
    "GrayImage",
    "ElementType",
    "DEFAULT_HEIGHT",
    "DEFAULT_WIDTH",
    # Errors
    "FaceIOError",
    "ImageDecodeError",
    "TensorValidationError",
    "TensorEncodeError",
    # Loader
    "load_gray_image",
    "load_gray_image_bytes",
    "load_gray_image_stream",
    # Validation
    "verify_bchw_tensor",
    # Encoding
    "gray_to_bchw",
    "new_input_tensor",
]


def load_and_encode(
    image: Union[str, Path, bytes, GrayImage],
    height: int = DEFAULT_HEIGHT,
    width: int = DEFAULT_WIDTH,
    element_type: ElementType = ElementType.FLOAT32,
) -> torch.Tensor:
    """Load a grayscale image and encode it into a fresh input tensor.

    This is the main entry point for the image pipeline. It:
    1. Decodes the image unless it is already a GrayImage, refusing
       anything that is not grayscale
    2. Allocates a [1, 1, height, width] tensor
    3. Validates the tensor and writes the pixels into it

    Args:
        image: File path (str/Path), raw encoded bytes, or a decoded GrayImage.
        height: Model input height. The image must have this many rows.
        width: Model input width. The image must have this many columns.
        element_type: Element type of the allocated tensor.

    Returns:
        Encoded tensor with shape [1, 1, height, width].

    Raises:
        ImageDecodeError: If the image cannot be loaded or is not grayscale.
        TensorValidationError: If the image size does not match height/width.
        TensorEncodeError: If writing the pixels fails.
    """
    if isinstance(image, bytes):
        image = load_gray_image_bytes(image)
    elif not isinstance(image, GrayImage):
        image = load_gray_image(image)

    dst = new_input_tensor(height, width, element_type)
    return gray_to_bchw(image, dst)
