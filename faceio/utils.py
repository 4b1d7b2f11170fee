"""Image container, element types and tensor helpers."""

from dataclasses import dataclass, field
from enum import Enum

import numpy as np
import torch


# FER+ input resolution
DEFAULT_HEIGHT = 64
DEFAULT_WIDTH = 64


class ElementType(str, Enum):
    """Closed set of tensor element types the encoder can write.

    Each member carries the torch dtype it stands for. Anything outside this
    set is rejected before a single cell is written.
    """

    FLOAT32 = "float32"
    FLOAT64 = "float64"

    @property
    def dtype(self) -> torch.dtype:
        """Return the torch dtype for this element type."""
        return _TORCH_DTYPES[self]

    @classmethod
    def from_dtype(cls, dtype: torch.dtype) -> "ElementType | None":
        """Return the element type for a torch dtype, or None if unsupported.

        Examples:
            >>> ElementType.from_dtype(torch.float64)
            <ElementType.FLOAT64: 'float64'>
            >>> ElementType.from_dtype(torch.int64) is None
            True
        """
        for member, member_dtype in _TORCH_DTYPES.items():
            if member_dtype == dtype:
                return member
        return None


_TORCH_DTYPES: dict[ElementType, torch.dtype] = {
    ElementType.FLOAT32: torch.float32,
    ElementType.FLOAT64: torch.float64,
}


@dataclass(frozen=True)
class GrayImage:
    """Decoded single-channel image with 8-bit intensities.

    The pixel grid is stored row-major as a read-only uint8 array of shape
    [height, width]. Other dtypes are refused, never cast.

    Attributes:
        pixels: Read-only uint8 array of shape [height, width].
    """

    pixels: np.ndarray = field(repr=False)

    def __post_init__(self) -> None:
        pixels = np.array(self.pixels, copy=True)
        if pixels.dtype != np.uint8:
            raise ValueError(f"Gray image pixels must be uint8, got {pixels.dtype}")
        if pixels.ndim != 2:
            raise ValueError(f"Gray image must be 2D [height, width], got shape {list(pixels.shape)}")
        pixels.flags.writeable = False
        object.__setattr__(self, "pixels", pixels)

    @property
    def height(self) -> int:
        """Number of pixel rows."""
        return int(self.pixels.shape[0])

    @property
    def width(self) -> int:
        """Number of pixel columns."""
        return int(self.pixels.shape[1])

    def at(self, row: int, column: int) -> int:
        """Return the intensity at (row, column)."""
        return int(self.pixels[row, column])

    def __repr__(self) -> str:
        return f"GrayImage(width={self.width}, height={self.height})"


def new_input_tensor(
    height: int = DEFAULT_HEIGHT,
    width: int = DEFAULT_WIDTH,
    element_type: ElementType = ElementType.FLOAT32,
) -> torch.Tensor:
    """Allocate a zeroed [1, 1, height, width] tensor for encoding.

    Args:
        height: Number of rows.
        width: Number of columns.
        element_type: Element type of the tensor.

    Returns:
        Zero-filled tensor with the requested shape and dtype.

    Examples:
        >>> new_input_tensor(64, 64).shape
        torch.Size([1, 1, 64, 64])
    """
    return torch.zeros((1, 1, height, width), dtype=ElementType(element_type).dtype)
