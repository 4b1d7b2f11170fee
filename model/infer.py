"""Inference functions for facial emotion recognition.

This module provides high-level inference functions for emotion prediction
on grayscale face images and pre-encoded input tensors.

Example:
    >>> from model import format_result, predict_image, top_k
    >>> result = predict_image("images/avatar64.png", model_path="model/model.onnx")
    >>> for entry in top_k(result.ranking, 2):
    ...     print(format_result(entry))
    happiness / 87.65%
    neutral / 10.02%
"""

import logging
import time
from pathlib import Path
from typing import Union

import torch

from faceio import DEFAULT_HEIGHT, DEFAULT_WIDTH, ElementType, GrayImage, load_and_encode

from .errors import InferenceError
from .postprocess import classify, softmax
from .registry import DEFAULT_BACKEND, DEFAULT_MODEL_PATH, get_model
from .types import EmotionModel, PredictionResult


logger = logging.getLogger(__name__)


def predict_image(
    image: Union[str, Path, bytes, GrayImage],
    model_path: str | Path = DEFAULT_MODEL_PATH,
    backend: str = DEFAULT_BACKEND,
    height: int = DEFAULT_HEIGHT,
    width: int = DEFAULT_WIDTH,
    element_type: ElementType = ElementType.FLOAT32,
    model: EmotionModel | None = None,
) -> PredictionResult:
    """Predict emotion from a grayscale face image.

    This function:
    1. Decodes the image (unless a GrayImage is given)
    2. Allocates a [1, 1, height, width] tensor and encodes the pixels
    3. Runs the model on the tensor
    4. Normalizes and ranks the outputs

    Args:
        image: Path to an image file, raw encoded bytes, or a decoded GrayImage.
        model_path: Path to the model file. Ignored if model is given.
        backend: Inference backend. Ignored if model is given.
        height: Model input height.
        width: Model input width.
        element_type: Element type of the input tensor.
        model: Already loaded model. If None, one is fetched from the registry.

    Returns:
        PredictionResult with the ranked emotions.

    Raises:
        ImageDecodeError: If the image cannot be decoded or is not grayscale.
        TensorValidationError: If the image does not fit the input shape.
        TensorEncodeError: If writing the pixels fails.
        ModelLoadError: If the model cannot be loaded.
        InferenceError: If inference or output decoding fails.
    """
    tensor = load_and_encode(image, height, width, element_type)

    return predict_tensor(
        tensor,
        model_path=model_path,
        backend=backend,
        model=model,
    )


def predict_tensor(
    tensor: torch.Tensor,
    model_path: str | Path = DEFAULT_MODEL_PATH,
    backend: str = DEFAULT_BACKEND,
    model: EmotionModel | None = None,
) -> PredictionResult:
    """Predict emotion from an already encoded input tensor.

    Args:
        tensor: Input tensor with shape [1, 1, H, W].
        model_path: Path to the model file. Ignored if model is given.
        backend: Inference backend. Ignored if model is given.
        model: Already loaded model. If None, one is fetched from the registry.

    Returns:
        PredictionResult with the ranked emotions.

    Raises:
        ModelLoadError: If the model cannot be loaded.
        InferenceError: If inference or output decoding fails.
    """
    if model is None:
        model = get_model(model_path=model_path, backend=backend)

    # Bound inputs and outputs are per instance; one sequence at a time
    with model.lock:
        model.set_input(0, tensor)

        start_time = time.perf_counter()
        model.run()
        inference_ms = (time.perf_counter() - start_time) * 1000

        raw = decode_outputs(model.get_output_tensors()).clone()

    logger.debug("Computation time: model=%s inference_ms=%.2f", model.name, inference_ms)
    labels = model.labels

    ranking = classify(softmax(raw), labels)
    scores = {entry.label: entry.weight for entry in ranking}
    raw_scores = {label: float(value) for label, value in zip(labels, raw.tolist())}

    return PredictionResult(
        emotion=ranking[0].label,
        confidence=ranking[0].weight,
        scores={label: scores[label] for label in labels},
        model_name=model.name,
        ranking=ranking,
        raw_scores=raw_scores,
        inference_ms=inference_ms,
    )


def decode_outputs(outputs: list[torch.Tensor]) -> torch.Tensor:
    """Extract the flat raw score vector from the model outputs.

    Only output tensor 0 is used.

    Raises:
        InferenceError: INVALID_OUTPUT if there is no non-empty output.
    """
    if not outputs:
        raise InferenceError(
            message="Model returned no outputs",
            code="INVALID_OUTPUT",
            details={"num_outputs": 0},
        )

    raw = outputs[0].detach().reshape(-1)
    if raw.numel() == 0:
        raise InferenceError(
            message="Model output tensor is empty",
            code="INVALID_OUTPUT",
            details={"shape": list(outputs[0].shape)},
        )
    return raw
