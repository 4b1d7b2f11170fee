"""Emotion label table for the FER+ model.

The FER+ network emits one raw score per class, and the position of each
score is its only link to a label. This module holds that positional table.

FER+ output layout:
    0 neutral, 1 happiness, 2 surprise, 3 sadness,
    4 anger, 5 disgust, 6 fear, 7 contempt

Swapping the model means swapping this table in lockstep; nothing at runtime
can detect a reordered output layer.
"""

from typing import Final


# Ordered exactly as the FER+ output layer
FERPLUS_LABELS: Final[tuple[str, ...]] = (
    "neutral",
    "happiness",
    "surprise",
    "sadness",
    "anger",
    "disgust",
    "fear",
    "contempt",
)

NUM_CLASSES: Final[int] = len(FERPLUS_LABELS)

# Default table used when no other is supplied
DEFAULT_LABELS: Final[tuple[str, ...]] = FERPLUS_LABELS

