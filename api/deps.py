"""FastAPI dependencies for the FER API.

This module provides dependency injection functions for:
- Settings access
- Model management

Example:
    >>> from fastapi import Depends
    >>> from api.deps import get_settings

    >>> @app.get("/")
    >>> async def endpoint(settings = Depends(get_settings)):
    ...     return {"model": settings.model_path}
"""

import logging

from model.errors import ModelLoadError
from model.registry import get_model
from model.types import EmotionModel

from .config import Settings, get_settings as _get_settings


logger = logging.getLogger(__name__)


# Re-export get_settings for dependency injection
get_settings = _get_settings


# =============================================================================
# Model Management
# =============================================================================


class ModelManager:
    """Manages model loading and access for the API.

    This class handles:
    - Lazy model loading on first request
    - Caching the loaded model
    - Providing model access to endpoints

    Attributes:
        model_path: Path to the model file.
        backend: Inference backend name.
    """

    def __init__(self, model_path: str, backend: str) -> None:
        """Initialize the model manager.

        Args:
            model_path: Model file to load.
            backend: Inference backend name.
        """
        self.model_path = model_path
        self.backend = backend
        self._model: EmotionModel | None = None

    def load(self) -> None:
        """Load the model if it is not loaded yet.

        Raises:
            ModelLoadError: If the model cannot be loaded.
        """
        if self._model is None:
            logger.info(
                "Loading model: model_path=%s backend=%s",
                self.model_path,
                self.backend,
            )
            self._model = get_model(model_path=self.model_path, backend=self.backend)
            logger.info("Model loaded successfully")

    def try_load(self) -> bool:
        """Load the model, logging instead of raising on failure.

        Used at startup so that a missing model file does not stop the
        service; requests will retry the load and report the error.

        Returns:
            True if the model is loaded.
        """
        try:
            self.load()
        except ModelLoadError as e:
            logger.warning("Model not loaded at startup: code=%s message=%s", e.code, e.message)
        return self.is_loaded

    @property
    def model(self) -> EmotionModel:
        """Get the loaded model, loading if necessary."""
        self.load()
        return self._model

    @property
    def is_loaded(self) -> bool:
        """Check if the model is loaded."""
        return self._model is not None


# Global model manager instance
_model_manager: ModelManager | None = None


def get_model_manager() -> ModelManager:
    """Get the global model manager instance.

    Returns:
        The ModelManager instance.

    Raises:
        RuntimeError: If model manager is not initialized.
    """
    if _model_manager is None:
        raise RuntimeError(
            "Model manager not initialized. Call init_model_manager() first."
        )
    return _model_manager


def init_model_manager(settings: Settings) -> ModelManager:
    """Initialize the global model manager.

    Args:
        settings: Application settings.

    Returns:
        The initialized ModelManager instance.
    """
    global _model_manager
    _model_manager = ModelManager(
        model_path=settings.model_path,
        backend=settings.backend,
    )
    return _model_manager
