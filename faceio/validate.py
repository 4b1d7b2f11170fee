"""Destination tensor validation."""

import torch

from .errors import TensorValidationError


# Axis layout of the destination tensor
BCHW_RANK = 4
SUPPORTED_BATCH_SIZE = 1
GRAY_CHANNELS = 1


def verify_bchw_tensor(
    dst: torch.Tensor,
    height: int,
    width: int,
    gray_only: bool = True,
) -> None:
    """Verify that a tensor can receive an image in BCHW layout.

    Checks run in a fixed order and the first failure is raised:
    - Receiver is a torch.Tensor
    - Exactly 4 axes
    - Batch size of one
    - Single channel (if gray_only=True)
    - Height and width match the image

    Args:
        dst: Destination tensor with shape [batch, channel, height, width].
        height: Image height the tensor must hold.
        width: Image width the tensor must hold.
        gray_only: Refuse tensors with more than one channel.

    Raises:
        TensorValidationError: If validation fails, with appropriate code:
            - INVALID_RECEIVER: dst is None or not a torch.Tensor.
            - RANK_MISMATCH: dst does not have 4 axes.
            - UNSUPPORTED_BATCH_SIZE: Batch axis is not 1.
            - CHANNEL_MISMATCH: Channel axis is not 1.
            - DIMENSION_MISMATCH: Spatial axes differ from height/width.

    Examples:
        >>> import torch
        >>> verify_bchw_tensor(torch.zeros(1, 1, 64, 64), 64, 64)  # No error if valid
    """
    # Receiver must be a tensor the caller owns
    if not isinstance(dst, torch.Tensor):
        raise TensorValidationError(
            message="Cannot decode image into a non tensor or a nil receiver",
            code="INVALID_RECEIVER",
            details={"actual_type": type(dst).__name__},
        )

    shape = list(dst.shape)

    if dst.ndim != BCHW_RANK:
        raise TensorValidationError(
            message=f"Expected a {BCHW_RANK} dimension tensor, but receiver has {dst.ndim}",
            code="RANK_MISMATCH",
            details={"expected_rank": BCHW_RANK, "actual_rank": dst.ndim, "shape": shape},
        )

    if shape[0] != SUPPORTED_BATCH_SIZE:
        raise TensorValidationError(
            message=f"Only batch size of {SUPPORTED_BATCH_SIZE} is supported, got {shape[0]}",
            code="UNSUPPORTED_BATCH_SIZE",
            details={"batch_size": shape[0], "shape": shape},
        )

    if gray_only and shape[1] != GRAY_CHANNELS:
        raise TensorValidationError(
            message=f"Refusing to insert a gray scale image into a tensor with {shape[1]} channels",
            code="CHANNEL_MISMATCH",
            details={"channels": shape[1], "expected_channels": GRAY_CHANNELS, "shape": shape},
        )

    if shape[2] != height or shape[3] != width:
        raise TensorValidationError(
            message=(
                f"Cannot fit image into tensor; image is {height}*{width} "
                f"but tensor is {shape[2]}*{shape[3]}"
            ),
            code="DIMENSION_MISMATCH",
            details={
                "requested_height": height,
                "requested_width": width,
                "actual_height": shape[2],
                "actual_width": shape[3],
            },
        )
