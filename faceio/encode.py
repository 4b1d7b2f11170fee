"""Grayscale image to BCHW tensor encoding."""

from typing import Callable

import numpy as np
import torch

from .errors import TensorEncodeError
from .utils import ElementType, GrayImage
from .validate import verify_bchw_tensor


def _write_float32(pixels: np.ndarray, dst: torch.Tensor) -> None:
    dst[0, 0, :, :].copy_(torch.from_numpy(pixels.astype(np.float32)))


def _write_float64(pixels: np.ndarray, dst: torch.Tensor) -> None:
    dst[0, 0, :, :].copy_(torch.from_numpy(pixels.astype(np.float64)))


# One strategy per element type; both address cells as (0, 0, row, column)
_WRITERS: dict[ElementType, Callable[[np.ndarray, torch.Tensor], None]] = {
    ElementType.FLOAT32: _write_float32,
    ElementType.FLOAT64: _write_float64,
}


def gray_to_bchw(image: GrayImage, dst: torch.Tensor) -> torch.Tensor:
    """Write a grayscale image into a [1, 1, H, W] tensor in place.

    Every pixel intensity lands at dst[0, 0, row, column], converted to the
    tensor's element type. The tensor must already have the exact target
    shape; it is never resized. No reference to dst is kept after return.

    Args:
        image: Decoded grayscale image.
        dst: Caller-owned destination tensor with shape [1, 1, height, width]
            and dtype float32 or float64.

    Returns:
        The same dst tensor, for chaining.

    Raises:
        TensorValidationError: If dst does not have a compatible BCHW layout.
        TensorEncodeError: If encoding fails, with appropriate code:
            - UNSUPPORTED_ELEMENT_TYPE: dst dtype is not float32/float64.
              Nothing has been written.
            - ENCODING_FAILURE: A write failed. dst is left partially written
              and must not be reused.

    Examples:
        >>> import numpy as np
        >>> from faceio.utils import GrayImage, new_input_tensor
        >>> image = GrayImage(np.full((64, 64), 7, dtype=np.uint8))
        >>> gray_to_bchw(image, new_input_tensor(64, 64))[0, 0, 10, 20].item()
        7.0
    """
    verify_bchw_tensor(dst, image.height, image.width, gray_only=True)

    element_type = ElementType.from_dtype(dst.dtype)
    if element_type is None:
        raise TensorEncodeError(
            message=f"{dst.dtype} not handled yet",
            code="UNSUPPORTED_ELEMENT_TYPE",
            details={
                "dtype": str(dst.dtype),
                "supported": [member.value for member in ElementType],
            },
        )

    writer = _WRITERS[element_type]
    try:
        writer(image.pixels, dst)
    except (RuntimeError, IndexError, ValueError) as e:
        raise TensorEncodeError(
            message=f"Failed to write image into tensor: {e}",
            code="ENCODING_FAILURE",
            details={
                "dtype": str(dst.dtype),
                "shape": list(dst.shape),
                "error": str(e),
            },
        ) from e

    return dst
