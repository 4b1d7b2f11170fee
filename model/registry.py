"""Model registry for loading and caching emotion models.

This module provides a centralized registry for loading pretrained emotion
classifiers. Models are cached to avoid redundant loading on repeated calls.

Example:
    >>> from model.registry import get_model
    >>> fer_model = get_model("model/model.onnx")
    >>> fer_model.set_input(0, tensor)
    >>> fer_model.run()
    >>> fer_model.get_output_tensors()[0].shape
    torch.Size([1, 8])
"""

import logging
import threading
from pathlib import Path
from typing import Final

import numpy as np
import torch

from .errors import InferenceError, ModelLoadError
from .labels import FERPLUS_LABELS
from .types import EmotionModel


logger = logging.getLogger(__name__)


# Default model configuration
DEFAULT_MODEL_PATH: Final[str] = "model/model.onnx"
DEFAULT_BACKEND: Final[str] = "onnxruntime"


class OnnxEmotionModel:
    """ONNX emotion model wrapper backed by onnxruntime.

    The network graph and its execution belong to onnxruntime. This class
    only binds input tensors to the graph inputs, runs the session and hands
    the outputs back as torch tensors.

    Bound inputs and outputs live on the instance, so callers sharing a
    cached model must hold `lock` across set_input, run and
    get_output_tensors.

    Attributes:
        name: Model identifier (file stem).
        labels: Label table matching the output layout.
        lock: Guards one set_input/run/get_output_tensors sequence.
    """

    def __init__(
        self,
        model_path: str | Path,
        labels: tuple[str, ...] = FERPLUS_LABELS,
    ) -> None:
        """Initialize the model.

        Args:
            model_path: Path to the .onnx file.
            labels: Label table in output order.

        Raises:
            ModelLoadError: If model fails to load.
        """
        self._path = Path(model_path)
        self._name = self._path.stem
        self._labels = tuple(labels)
        self._session = None
        self._input_names: list[str] = []
        self._inputs: dict[int, torch.Tensor] = {}
        self._outputs: list[torch.Tensor] = []
        self.lock = threading.Lock()
        self._load_model()

    def _load_model(self) -> None:
        """Deserialize the ONNX graph into an inference session."""
        try:
            import onnxruntime as ort

            self._session = ort.InferenceSession(
                str(self._path),
                providers=["CPUExecutionProvider"],
            )
        except Exception as e:
            raise ModelLoadError(
                message=f"Failed to load ONNX model: {e}",
                code="LOAD_FAILED",
                details={"model_path": str(self._path), "error": str(e)},
            ) from e

        self._input_names = [node.name for node in self._session.get_inputs()]

    @property
    def name(self) -> str:
        """Return the model name/identifier."""
        return self._name

    @property
    def labels(self) -> tuple[str, ...]:
        """Return the label table matching the output layout."""
        return self._labels

    def set_input(self, slot: int, tensor: torch.Tensor) -> None:
        """Bind a tensor to an input slot.

        Args:
            slot: Index of the graph input.
            tensor: Input tensor, e.g. [1, 1, 64, 64] float32.

        Raises:
            InferenceError: If the slot does not exist.
        """
        if not 0 <= slot < len(self._input_names):
            raise InferenceError(
                message=f"Model has no input slot {slot}",
                code="INFERENCE_FAILED",
                details={"slot": slot, "num_inputs": len(self._input_names)},
            )
        self._inputs[slot] = tensor

    def run(self) -> None:
        """Run the forward pass on the bound inputs.

        Raises:
            InferenceError: If an input is unbound or the session fails.
        """
        missing = [slot for slot in range(len(self._input_names)) if slot not in self._inputs]
        if missing:
            raise InferenceError(
                message=f"Model inputs not set: {missing}",
                code="INFERENCE_FAILED",
                details={"missing_slots": missing},
            )

        feeds = {
            name: self._inputs[slot].detach().cpu().numpy()
            for slot, name in enumerate(self._input_names)
        }

        try:
            outputs = self._session.run(None, feeds)
        except Exception as e:
            raise InferenceError(
                message=f"Inference failed: {e}",
                code="INFERENCE_FAILED",
                details={"model_path": str(self._path), "error": str(e)},
            ) from e

        self._outputs = [torch.from_numpy(np.ascontiguousarray(out)) for out in outputs]

    def get_output_tensors(self) -> list[torch.Tensor]:
        """Return the output tensors of the last run.

        Raises:
            InferenceError: If the model has not been run.
        """
        if not self._outputs:
            raise InferenceError(
                message="Model has no outputs; call run() first",
                code="INVALID_OUTPUT",
                details={},
            )
        return list(self._outputs)


# Thread-safe model cache
_model_cache: dict[str, EmotionModel] = {}
_cache_lock = threading.Lock()

# Available inference backends and their implementations
AVAILABLE_BACKENDS: Final[dict[str, type]] = {
    "onnxruntime": OnnxEmotionModel,
}


def get_model(
    model_path: str | Path = DEFAULT_MODEL_PATH,
    backend: str = DEFAULT_BACKEND,
) -> EmotionModel:
    """Get or create a cached model instance.

    This function maintains a cache of loaded models. If a model with the
    given path and backend is already loaded, it returns the cached instance.
    Otherwise, it loads a new model and caches it.

    Args:
        model_path: Path to the serialized model.
        backend: Inference backend. Available:
            - "onnxruntime": ONNX models through onnxruntime

    Returns:
        A loaded model implementing the EmotionModel protocol.

    Raises:
        ModelLoadError: If the backend is unknown, the file is missing, or
            loading fails.

    Examples:
        >>> fer_model = get_model("model/model.onnx")
        >>> fer_model.labels[0]
        'neutral'
    """
    path = Path(model_path)
    cache_key = f"{backend}:{path.resolve()}"

    with _cache_lock:
        if cache_key in _model_cache:
            return _model_cache[cache_key]

        if backend not in AVAILABLE_BACKENDS:
            raise ModelLoadError(
                message=f"Unknown backend: {backend}",
                code="BACKEND_NOT_FOUND",
                details={"backend": backend, "available": list(AVAILABLE_BACKENDS.keys())},
            )

        if not path.is_file():
            raise ModelLoadError(
                message=f"{path} does not exist",
                code="MODEL_NOT_FOUND",
                details={"model_path": str(path)},
            )

        logger.info("Loading model: path=%s backend=%s", path, backend)
        model_class = AVAILABLE_BACKENDS[backend]
        model = model_class(path)

        _model_cache[cache_key] = model
        return model


def clear_cache() -> None:
    """Clear the model cache.

    This releases all cached model instances, freeing memory.
    Useful for testing or when switching between models.
    """
    with _cache_lock:
        _model_cache.clear()


def list_available_backends() -> list[str]:
    """List available backend names.

    Returns:
        List of backends that can be passed to get_model().
    """
    return list(AVAILABLE_BACKENDS.keys())
