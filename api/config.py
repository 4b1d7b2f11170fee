"""Configuration management for the FER API service.

This module provides centralized configuration using pydantic-settings,
loading values from environment variables with sensible defaults.

Example:
    >>> from api.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.app_name)
    FER Service
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    Environment variables use uppercase names matching the attribute names.

    Attributes:
        app_name: Name of the application for OpenAPI docs.
        app_version: API version string.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
        model_path: Path to the ONNX model file.
        backend: Inference backend name.
        input_height: Model input height in pixels.
        input_width: Model input width in pixels.
        element_type: Element type of the input tensor.
        top_k: Number of ranked emotions to report by default.
        max_upload_bytes: Maximum accepted image upload size.
        include_scores_default: Whether to include scores by default.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        protected_namespaces=(),
    )

    # Application settings
    app_name: str = "FER Service"
    app_version: str = "1.0.0"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Model settings
    model_path: str = "model/model.onnx"
    backend: Literal["onnxruntime"] = "onnxruntime"

    # Input tensor settings
    input_height: int = Field(default=64, gt=0)
    input_width: int = Field(default=64, gt=0)
    element_type: Literal["float32", "float64"] = "float32"

    # Response defaults
    top_k: int = Field(default=2, ge=1, le=8)
    max_upload_bytes: int = Field(default=5 * 1024 * 1024, gt=0)
    include_scores_default: bool = False


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.

    Returns:
        Settings instance with values from environment.
    """
    return Settings()
