"""Type definitions for model inference."""

import threading
from dataclasses import dataclass, field
from typing import Protocol

import torch


@dataclass(frozen=True)
class EmotionScore:
    """A single emotion label paired with its normalized weight.

    Attributes:
        label: Emotion label (e.g., "neutral", "happiness").
        weight: Probability in [0, 1].
    """

    label: str
    weight: float

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {"label": self.label, "confidence": float(self.weight)}


@dataclass
class PredictionResult:
    """Result of emotion prediction on a single face image.

    Attributes:
        emotion: Top-ranked emotion label.
        confidence: Probability of the top-ranked emotion (0.0 to 1.0).
        scores: Probabilities for every label (sum to 1.0).
        ranking: All labels ordered by descending probability.
        model_name: Name of the model used for prediction.
        raw_scores: Raw model activations before softmax, keyed by label.
        inference_ms: Wall time of the forward pass in milliseconds.
    """

    emotion: str
    confidence: float
    scores: dict[str, float]
    model_name: str
    ranking: list[EmotionScore] = field(default_factory=list)
    raw_scores: dict[str, float] | None = None
    inference_ms: float = 0.0

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization.

        All numeric values are converted to Python native types to ensure
        JSON serialization works correctly.
        """
        def to_native(val):
            if hasattr(val, 'item'):  # numpy/tensor scalar
                return val.item()
            return val

        def convert_scores(scores: dict | None) -> dict | None:
            if scores is None:
                return None
            return {k: float(to_native(v)) for k, v in scores.items()}

        return {
            "emotion": self.emotion,
            "confidence": float(to_native(self.confidence)),
            "scores": convert_scores(self.scores),
            "ranking": [entry.to_dict() for entry in self.ranking],
            "model_name": self.model_name,
            "raw_scores": convert_scores(self.raw_scores),
            "inference_ms": float(to_native(self.inference_ms)),
        }


class EmotionModel(Protocol):
    """Protocol defining the interface for emotion classification models.

    The calling sequence is set_input, run, get_output_tensors. All calls are
    synchronous. Bound state is per instance, so a shared model is used
    only while holding its lock.
    """

    lock: threading.Lock

    @property
    def name(self) -> str:
        """Return the model name/identifier."""
        ...

    @property
    def labels(self) -> tuple[str, ...]:
        """Return the label table matching the model's output layout."""
        ...

    def set_input(self, slot: int, tensor: torch.Tensor) -> None:
        """Bind a tensor to an input slot of the model."""
        ...

    def run(self) -> None:
        """Execute the forward pass on the bound inputs."""
        ...

    def get_output_tensors(self) -> list[torch.Tensor]:
        """Return the output tensors of the last run."""
        ...
