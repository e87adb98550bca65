# gestures.py
import time
from dataclasses import dataclass, replace
from typing import Iterable, Optional, Sequence, Tuple

import numpy as np

from config import DEFAULT_IGNORED_LABELS, StabilizerConfig


@dataclass(frozen=True)
class ClassificationEvent:
    label: str
    confidence: float
    timestamp: float = 0.0


@dataclass(frozen=True)
class StabilizerState:
    last_label: Optional[str] = None
    run_length: int = 0
    confirmed_label: Optional[str] = None


def advance(state: StabilizerState, event: ClassificationEvent,
            threshold: float, required: int) -> Tuple[StabilizerState, Optional[str]]:
    """
    Apply one classifier event to the stabilizer state.
    Returns the new state and the label confirmed by this event, if any.
    """
    # below threshold: drop the run, keep the last confirmed label
    if event.confidence <= threshold:
        return replace(state, last_label=None, run_length=0), None

    if event.label == state.last_label:
        state = replace(state, run_length=state.run_length + 1)
    else:
        state = replace(state, last_label=event.label, run_length=1)

    if state.run_length >= required and event.label != state.confirmed_label:
        return replace(state, confirmed_label=event.label), event.label
    return state, None


class GestureStabilizer:
    def __init__(self, config: StabilizerConfig = None):
        self.config = config or StabilizerConfig()
        self.state = StabilizerState()

    @property
    def confirmed_label(self) -> Optional[str]:
        return self.state.confirmed_label

    def observe(self, event: ClassificationEvent) -> Optional[str]:
        self.state, emitted = advance(
            self.state,
            event,
            self.config.prediction_threshold,
            self.config.consecutive_frames_required,
        )
        return emitted

    def reset(self):
        self.state = StabilizerState()


def event_from_scores(classes: Sequence[str], probabilities: Sequence[float],
                      timestamp: float = None) -> ClassificationEvent:
    """Reduce a classifier's per-class probabilities to its top prediction."""
    scores = np.asarray(probabilities, dtype=np.float64)
    if scores.ndim != 1 or scores.size == 0:
        raise ValueError("probabilities must be a non-empty 1-D sequence")
    if scores.size != len(classes):
        raise ValueError(f"got {scores.size} probabilities for {len(classes)} classes")

    best = int(np.argmax(scores))
    return ClassificationEvent(
        label=classes[best],
        confidence=float(scores[best]),
        timestamp=time.time() if timestamp is None else timestamp,
    )


def is_ignored_label(label: str, ignored: Iterable[str] = DEFAULT_IGNORED_LABELS) -> bool:
    return label.strip().lower() in {name.lower() for name in ignored}
