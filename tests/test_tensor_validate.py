"""Tests for faceio.validate module."""

import numpy as np
import pytest
import torch

from faceio import verify_bchw_tensor
from faceio.errors import TensorValidationError


class TestVerifyValid:
    """Tensors that should pass validation."""

    def test_valid_gray_tensor(self):
        """[1, 1, 64, 64] matches a 64x64 image."""
        verify_bchw_tensor(torch.zeros(1, 1, 64, 64), 64, 64)

    def test_float64_tensor(self):
        """Validation does not look at the element type."""
        verify_bchw_tensor(torch.zeros(1, 1, 48, 32, dtype=torch.float64), 48, 32)

    def test_multi_channel_allowed_when_not_gray_only(self):
        """gray_only=False skips the channel check."""
        verify_bchw_tensor(torch.zeros(1, 3, 64, 64), 64, 64, gray_only=False)

    def test_validation_has_no_side_effects(self):
        """The tensor is untouched."""
        dst = torch.full((1, 1, 4, 4), 3.0)

        verify_bchw_tensor(dst, 4, 4)

        assert torch.equal(dst, torch.full((1, 1, 4, 4), 3.0))


class TestInvalidReceiver:
    """Tests for INVALID_RECEIVER."""

    def test_none_receiver(self):
        """None should raise INVALID_RECEIVER."""
        with pytest.raises(TensorValidationError) as exc_info:
            verify_bchw_tensor(None, 64, 64)  # type: ignore

        assert exc_info.value.code == "INVALID_RECEIVER"

    def test_numpy_receiver(self):
        """A numpy array is not an accepted receiver."""
        with pytest.raises(TensorValidationError) as exc_info:
            verify_bchw_tensor(np.zeros((1, 1, 64, 64)), 64, 64)  # type: ignore

        assert exc_info.value.code == "INVALID_RECEIVER"
        assert exc_info.value.details["actual_type"] == "ndarray"

    def test_list_receiver(self):
        """A nested list is not an accepted receiver."""
        with pytest.raises(TensorValidationError) as exc_info:
            verify_bchw_tensor([[[[0.0]]]], 1, 1)  # type: ignore

        assert exc_info.value.code == "INVALID_RECEIVER"


class TestRankMismatch:
    """Tests for RANK_MISMATCH."""

    @pytest.mark.parametrize("shape", [(64, 64), (1, 64, 64), (1, 1, 1, 64, 64), (64,)])
    def test_wrong_rank(self, shape):
        """Any rank other than 4 should raise RANK_MISMATCH."""
        with pytest.raises(TensorValidationError) as exc_info:
            verify_bchw_tensor(torch.zeros(shape), 64, 64)

        assert exc_info.value.code == "RANK_MISMATCH"
        assert exc_info.value.details["actual_rank"] == len(shape)

    def test_scalar_tensor(self):
        """A 0-d tensor should raise RANK_MISMATCH."""
        with pytest.raises(TensorValidationError) as exc_info:
            verify_bchw_tensor(torch.tensor(1.0), 64, 64)

        assert exc_info.value.code == "RANK_MISMATCH"


class TestBatchSize:
    """Tests for UNSUPPORTED_BATCH_SIZE."""

    @pytest.mark.parametrize("batch", [0, 2, 8])
    def test_batch_not_one(self, batch):
        """Batch sizes other than 1 should raise UNSUPPORTED_BATCH_SIZE."""
        with pytest.raises(TensorValidationError) as exc_info:
            verify_bchw_tensor(torch.zeros(batch, 1, 64, 64), 64, 64)

        assert exc_info.value.code == "UNSUPPORTED_BATCH_SIZE"

    def test_batch_checked_before_channels(self):
        """The first failing check wins."""
        with pytest.raises(TensorValidationError) as exc_info:
            verify_bchw_tensor(torch.zeros(2, 3, 10, 10), 64, 64)

        assert exc_info.value.code == "UNSUPPORTED_BATCH_SIZE"


class TestChannelMismatch:
    """Tests for CHANNEL_MISMATCH."""

    def test_two_channels_rejected(self):
        """A [1, 2, 64, 64] tensor is refused in gray-only mode."""
        with pytest.raises(TensorValidationError) as exc_info:
            verify_bchw_tensor(torch.zeros(1, 2, 64, 64), 64, 64, gray_only=True)

        assert exc_info.value.code == "CHANNEL_MISMATCH"
        assert exc_info.value.details["channels"] == 2

    def test_channels_checked_before_dimensions(self):
        """Channel errors take precedence over size errors."""
        with pytest.raises(TensorValidationError) as exc_info:
            verify_bchw_tensor(torch.zeros(1, 3, 10, 10), 64, 64)

        assert exc_info.value.code == "CHANNEL_MISMATCH"


class TestDimensionMismatch:
    """Tests for DIMENSION_MISMATCH."""

    @pytest.mark.parametrize(
        "height,width",
        [(32, 64), (64, 32), (65, 64), (64, 63), (0, 0)],
    )
    def test_mismatched_extent(self, height, width):
        """Any spatial mismatch should raise DIMENSION_MISMATCH."""
        with pytest.raises(TensorValidationError) as exc_info:
            verify_bchw_tensor(torch.zeros(1, 1, 64, 64), height, width)

        assert exc_info.value.code == "DIMENSION_MISMATCH"

    def test_reports_requested_and_actual(self):
        """Details include both extents."""
        with pytest.raises(TensorValidationError) as exc_info:
            verify_bchw_tensor(torch.zeros(1, 1, 48, 40), 64, 32)

        details = exc_info.value.details
        assert details["requested_height"] == 64
        assert details["requested_width"] == 32
        assert details["actual_height"] == 48
        assert details["actual_width"] == 40
        assert "64*32" in exc_info.value.message
        assert "48*40" in exc_info.value.message

    def test_transposed_shape_rejected(self):
        """Height and width are not interchangeable."""
        with pytest.raises(TensorValidationError) as exc_info:
            verify_bchw_tensor(torch.zeros(1, 1, 20, 30), 30, 20)

        assert exc_info.value.code == "DIMENSION_MISMATCH"
