"""Model module for facial emotion recognition inference.

This module provides:
- The FER+ emotion label table
- Model registry for loading ONNX emotion classifiers
- Softmax normalization and ranking of model outputs
- Inference functions for images and encoded tensors

Example:
    >>> from model import predict_image, format_result
    >>> result = predict_image("images/avatar64.png")
    >>> print(format_result(result.ranking[0]))
    happiness / 87.65%
"""

from .errors import InferenceError, ModelError, ModelLoadError
from .infer import predict_image, predict_tensor
from .labels import FERPLUS_LABELS, NUM_CLASSES
from .postprocess import classify, format_result, softmax, top_k
from .registry import get_model
from .types import EmotionModel, EmotionScore, PredictionResult

__all__ = [
    # Main inference functions
    "predict_image",
    "predict_tensor",
    # Labels
    "FERPLUS_LABELS",
    "NUM_CLASSES",
    # Output decoding
    "softmax",
    "classify",
    "top_k",
    "format_result",
    # Registry
    "get_model",
    # Types
    "EmotionModel",
    "EmotionScore",
    "PredictionResult",
    # Errors
    "ModelError",
    "ModelLoadError",
    "InferenceError",
]
