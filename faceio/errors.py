"""Custom exceptions for image decoding and tensor encoding."""

from typing import Any


class FaceIOError(Exception):
    """Base exception for all image I/O and tensor encoding errors.

    Attributes:
        message: Human-readable error description.
        code: Short error code string (e.g., "RANK_MISMATCH").
        details: Optional dictionary with additional context.
    """

    def __init__(
        self,
        message: str,
        code: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize FaceIOError.

        Args:
            message: Human-readable error description.
            code: Short error code string.
            details: Optional dictionary with additional context.
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def __str__(self) -> str:
        """Return formatted error string."""
        if self.details:
            return f"[{self.code}] {self.message} (details: {self.details})"
        return f"[{self.code}] {self.message}"

    def __repr__(self) -> str:
        """Return repr string."""
        return f"{self.__class__.__name__}(message={self.message!r}, code={self.code!r}, details={self.details!r})"


class ImageDecodeError(FaceIOError):
    """Raised when an image cannot be decoded into a grayscale grid.

    Common codes:
        - FILE_NOT_FOUND: Image file does not exist.
        - EMPTY_FILE: File or byte payload has zero bytes.
        - INVALID_IMAGE: Payload is not a decodable image.
        - UNSUPPORTED_IMAGE_FORMAT: Decoded image is not single-channel grayscale.
    """
    pass


class TensorValidationError(FaceIOError):
    """Raised when a destination tensor does not have the BCHW layout.

    Common codes:
        - INVALID_RECEIVER: Destination is not a mutable torch.Tensor.
        - RANK_MISMATCH: Destination does not have exactly 4 axes.
        - UNSUPPORTED_BATCH_SIZE: Batch axis is not 1.
        - CHANNEL_MISMATCH: Channel axis is not 1 in grayscale mode.
        - DIMENSION_MISMATCH: Height/width axes do not match the image.
    """
    pass


class TensorEncodeError(FaceIOError):
    """Raised when pixels cannot be written into a validated tensor.

    Common codes:
        - UNSUPPORTED_ELEMENT_TYPE: Tensor dtype is neither float32 nor float64.
        - ENCODING_FAILURE: A cell write failed; the tensor is left undefined.
    """
    pass
