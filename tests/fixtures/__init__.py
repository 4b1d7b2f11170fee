"""Test fixtures for image and model tests.

This module provides utilities for generating in-memory PNG files and a
scripted stand-in for the ONNX model. No binary files are committed -
fixtures are generated programmatically.
"""

import io
import threading
import time
from pathlib import Path

import numpy as np
import torch
from PIL import Image

from model.errors import InferenceError
from model.labels import FERPLUS_LABELS


def generate_gray_png_bytes(
    width: int = 64,
    height: int = 64,
    value: int | None = None,
    seed: int = 42,
) -> bytes:
    """Generate a single-channel 8-bit PNG as bytes.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        value: Constant intensity for every pixel. If None, random pixels.
        seed: Random seed for reproducibility.

    Returns:
        PNG file as bytes.
    """
    pixels = gray_pixels(width, height, value=value, seed=seed)
    buffer = io.BytesIO()
    Image.fromarray(pixels).save(buffer, format="PNG")
    return buffer.getvalue()


def generate_rgb_png_bytes(width: int = 64, height: int = 64) -> bytes:
    """Generate a 3-channel RGB PNG as bytes."""
    pixels = np.zeros((height, width, 3), dtype=np.uint8)
    pixels[..., 0] = 200
    buffer = io.BytesIO()
    Image.fromarray(pixels).save(buffer, format="PNG")
    return buffer.getvalue()


def generate_gray_alpha_png_bytes(width: int = 64, height: int = 64) -> bytes:
    """Generate a grayscale-with-alpha PNG (mode LA) as bytes."""
    buffer = io.BytesIO()
    Image.new("LA", (width, height), (128, 255)).save(buffer, format="PNG")
    return buffer.getvalue()


def gray_pixels(
    width: int = 64,
    height: int = 64,
    value: int | None = None,
    seed: int = 42,
) -> np.ndarray:
    """Generate a [height, width] uint8 pixel grid.

    Args:
        width: Number of columns.
        height: Number of rows.
        value: Constant intensity. If None, random intensities.
        seed: Random seed for reproducibility.
    """
    if value is not None:
        return np.full((height, width), value, dtype=np.uint8)
    rng = np.random.default_rng(seed)
    return rng.integers(0, 256, size=(height, width), dtype=np.uint8)


class FakeEmotionModel:
    """Scripted model returning fixed logits for any input.

    Implements the EmotionModel protocol without onnxruntime. The last
    bound input is kept in `inputs` for inspection.
    """

    def __init__(
        self,
        logits: list[float],
        labels: tuple[str, ...] = FERPLUS_LABELS,
        name: str = "fake-ferplus",
        fail: bool = False,
    ) -> None:
        self._logits = torch.tensor([logits], dtype=torch.float32)
        self._labels = labels
        self._name = name
        self._fail = fail
        self._outputs: list[torch.Tensor] = []
        self.inputs: dict[int, torch.Tensor] = {}
        self.run_count = 0
        self.lock = threading.Lock()

    @property
    def name(self) -> str:
        return self._name

    @property
    def labels(self) -> tuple[str, ...]:
        return self._labels

    def set_input(self, slot: int, tensor: torch.Tensor) -> None:
        self.inputs[slot] = tensor

    def run(self) -> None:
        self.run_count += 1
        if self._fail:
            raise InferenceError(
                message="Inference failed: scripted failure",
                code="INFERENCE_FAILED",
            )
        self._outputs = [self._logits.clone()]

    def get_output_tensors(self) -> list[torch.Tensor]:
        return list(self._outputs)


class EchoEmotionModel(FakeEmotionModel):
    """Scripted model whose "neutral" score is the mean input intensity.

    run() yields the thread between reading the bound input and publishing
    the outputs, so unsynchronized callers sharing one instance see each
    other's results.
    """

    def __init__(self, labels: tuple[str, ...] = FERPLUS_LABELS) -> None:
        super().__init__([0.0] * len(labels), labels=labels, name="echo")

    def run(self) -> None:
        self.run_count += 1
        mean = float(self.inputs[0].double().mean())
        time.sleep(0.0005)
        logits = torch.zeros(1, len(self.labels))
        logits[0, 0] = mean
        self._outputs = [logits]


def write_mean_onnx_model(
    path: Path,
    height: int = 4,
    width: int = 4,
    num_classes: int = len(FERPLUS_LABELS),
) -> Path:
    """Write a tiny ONNX classifier: Flatten then MatMul.

    Output 0 has shape [1, num_classes]; class 0 is the mean input intensity
    and class 1 the first pixel, every other class is 0. The single input is
    named "input" and takes float32 [1, 1, height, width].
    """
    import onnx
    from onnx import TensorProto, helper, numpy_helper

    weights = np.zeros((height * width, num_classes), dtype=np.float32)
    weights[:, 0] = 1.0 / (height * width)
    weights[0, 1] = 1.0

    graph = helper.make_graph(
        nodes=[
            helper.make_node("Flatten", ["input"], ["flat"], axis=1),
            helper.make_node("MatMul", ["flat", "weights"], ["scores"]),
        ],
        name="mean_classifier",
        inputs=[helper.make_tensor_value_info("input", TensorProto.FLOAT, [1, 1, height, width])],
        outputs=[helper.make_tensor_value_info("scores", TensorProto.FLOAT, [1, num_classes])],
        initializer=[numpy_helper.from_array(weights, name="weights")],
    )
    model = helper.make_model(graph, opset_imports=[helper.make_opsetid("", 13)])
    model.ir_version = 8
    onnx.checker.check_model(model)
    onnx.save(model, str(path))
    return path
