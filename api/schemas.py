"""Pydantic schemas for API request/response models.

This module defines all the request and response schemas used by the
API endpoints, ensuring consistent serialization and validation.

Example:
    >>> from api.schemas import PredictResponse
    >>> response = PredictResponse(
    ...     emotion="happiness",
    ...     confidence=0.85,
    ...     top=[EmotionSchema(label="happiness", confidence=0.85)],
    ...     model_name="model",
    ...     inference_ms=3.2,
    ... )
"""

from typing import Any

from pydantic import BaseModel, Field


# =============================================================================
# Health Endpoint
# =============================================================================


class HealthResponse(BaseModel):
    """Response schema for /health endpoint."""

    status: str = Field(
        default="ok",
        description="Service status",
        examples=["ok"],
    )
    model_path: str = Field(
        description="Configured model file",
        examples=["model/model.onnx"],
    )
    backend: str = Field(
        description="Inference backend",
        examples=["onnxruntime"],
    )


# =============================================================================
# Predict Endpoint
# =============================================================================


class EmotionSchema(BaseModel):
    """A ranked emotion with its confidence."""

    label: str = Field(
        description="Emotion label",
        examples=["happiness"],
    )
    confidence: float = Field(
        ge=0.0,
        le=1.0,
        description="Softmax probability of the label",
        examples=[0.85],
    )


class PredictResponse(BaseModel):
    """Response schema for /predict endpoint (single face image)."""

    emotion: str = Field(
        description="Most likely emotion label",
        examples=["happiness", "neutral", "surprise"],
    )
    confidence: float = Field(
        ge=0.0,
        le=1.0,
        description="Confidence score for the predicted emotion",
        examples=[0.85],
    )
    top: list[EmotionSchema] = Field(
        description="Top-k emotions, most likely first",
    )
    scores: dict[str, float] | None = Field(
        default=None,
        description="Per-label probability scores (if include_scores=true)",
        examples=[{"neutral": 0.1, "happiness": 0.85, "surprise": 0.05}],
    )
    model_name: str = Field(
        description="Name of the model used for prediction",
        examples=["model"],
    )
    inference_ms: float = Field(
        ge=0.0,
        description="Forward pass time in milliseconds",
        examples=[3.2],
    )


# =============================================================================
# Error Response
# =============================================================================


class ErrorDetail(BaseModel):
    """Detailed error information."""

    code: str = Field(
        description="Error code for programmatic handling",
        examples=["INVALID_IMAGE", "MODEL_LOAD_FAILED"],
    )
    message: str = Field(
        description="Human-readable error message",
        examples=["Failed to decode image"],
    )
    details: dict[str, Any] | None = Field(
        default=None,
        description="Additional error context",
    )


class ApiErrorResponse(BaseModel):
    """Standard error response wrapper."""

    error: ErrorDetail = Field(
        description="Error details",
    )
