"""Output decoding: softmax normalization and ranking.

Turns the raw activations of the classification head into an ordered list
of (label, probability) pairs.

Example:
    >>> ranking = classify(softmax([2.0, 0, 0, 0, 0, 0, 0, 0]))
    >>> format_result(ranking[0])
    'neutral / 51.35%'
"""

from typing import Sequence, Union

import torch

from .errors import InferenceError
from .labels import DEFAULT_LABELS
from .types import EmotionScore


Scores = Union[torch.Tensor, Sequence[float]]


def softmax(scores: Scores) -> torch.Tensor:
    """Normalize raw scores into a probability distribution.

    Exponentials and their sum are computed in float64 and the final ratio is
    narrowed to the working precision: the input dtype for floating tensors,
    float32 otherwise. The maximum is not subtracted first, so logits large
    enough to overflow exp() in float64 produce NaN.

    Args:
        scores: Raw activations, one per class. Tensors are flattened.

    Returns:
        1-D tensor of probabilities in [0, 1] summing to 1.

    Raises:
        InferenceError: POSTPROCESS_FAILED if scores is empty.

    Examples:
        >>> softmax([0.0, 0.0, 0.0, 0.0]).tolist()
        [0.25, 0.25, 0.25, 0.25]
    """
    if isinstance(scores, torch.Tensor):
        values = scores.detach().reshape(-1)
        working_dtype = scores.dtype if scores.is_floating_point() else torch.float32
    else:
        values = torch.tensor(list(scores), dtype=torch.float64)
        working_dtype = torch.float32

    if values.numel() == 0:
        raise InferenceError(
            message="Cannot normalize an empty score vector",
            code="POSTPROCESS_FAILED",
            details={"num_scores": 0},
        )

    exp = torch.exp(values.to(torch.float64))
    return (exp / exp.sum()).to(working_dtype)


def classify(
    probabilities: Scores,
    labels: Sequence[str] = DEFAULT_LABELS,
) -> list[EmotionScore]:
    """Pair probabilities with labels and order them by descending weight.

    Labels are matched to probabilities by position. The sort is stable, so
    equal weights keep their label-table order.

    Args:
        probabilities: Normalized scores, one per label.
        labels: Label table in model output order.

    Returns:
        List of EmotionScore, most likely first.

    Raises:
        InferenceError: LABEL_MISMATCH if labels and probabilities differ in
            length.
    """
    if isinstance(probabilities, torch.Tensor):
        weights = probabilities.detach().reshape(-1).tolist()
    else:
        weights = [float(p) for p in probabilities]

    if len(weights) != len(labels):
        raise InferenceError(
            message=f"Label table has {len(labels)} entries but model produced {len(weights)} scores",
            code="LABEL_MISMATCH",
            details={"num_labels": len(labels), "num_scores": len(weights)},
        )

    result = [EmotionScore(label=label, weight=weight) for label, weight in zip(labels, weights)]
    return sorted(result, key=lambda entry: entry.weight, reverse=True)


def top_k(ranking: list[EmotionScore], k: int = 2) -> list[EmotionScore]:
    """Return the first k entries of a ranking."""
    return ranking[:k]


def format_result(entry: EmotionScore) -> str:
    """Format a ranked entry as "<label> / <percent>%".

    Examples:
        >>> format_result(EmotionScore("happiness", 0.8765))
        'happiness / 87.65%'
    """
    return f"{entry.label} / {entry.weight * 100:.2f}%"
