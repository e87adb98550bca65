# config.py
import os
from dataclasses import dataclass, field
from typing import Tuple

from dotenv import load_dotenv

load_dotenv()

DEFAULT_IGNORED_LABELS = ("no_gesture", "neutral", "background")


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str, default: Tuple[str, ...]) -> Tuple[str, ...]:
    value = os.getenv(name)
    if value is None:
        return default
    return tuple(part.strip().lower() for part in value.split(",") if part.strip())


@dataclass(frozen=True)
class StabilizerConfig:
    prediction_threshold: float = 0.60
    consecutive_frames_required: int = 5

    def __post_init__(self):
        if not 0.0 <= self.prediction_threshold <= 1.0:
            raise ValueError("prediction_threshold must be between 0 and 1")
        if self.consecutive_frames_required < 1:
            raise ValueError("consecutive_frames_required must be at least 1")


@dataclass(frozen=True)
class CollectorConfig:
    debounce_window: float = 1.5  # seconds

    def __post_init__(self):
        if self.debounce_window < 0:
            raise ValueError("debounce_window cannot be negative")


@dataclass(frozen=True)
class SegmenterConfig:
    pause_threshold: float = 3.0  # seconds
    # False for recognizers that stop after every utterance and get restarted
    continuous: bool = True

    def __post_init__(self):
        if self.pause_threshold < 0:
            raise ValueError("pause_threshold cannot be negative")


@dataclass(frozen=True)
class Settings:
    """Runtime configuration, read from the environment (and .env)."""

    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: Tuple[str, ...] = ("*",)
    stabilizer: StabilizerConfig = field(default_factory=StabilizerConfig)
    collector: CollectorConfig = field(default_factory=CollectorConfig)
    segmenter: SegmenterConfig = field(default_factory=SegmenterConfig)
    pause_check_interval: float = 0.5
    ignored_labels: Tuple[str, ...] = DEFAULT_IGNORED_LABELS

    def __post_init__(self):
        if self.pause_check_interval <= 0:
            raise ValueError("pause_check_interval must be positive")

    @classmethod
    def from_env(cls) -> "Settings":
        origins = os.getenv("CORS_ORIGINS", "*")
        return cls(
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", 8000)),
            cors_origins=tuple(o.strip() for o in origins.split(",") if o.strip()),
            stabilizer=StabilizerConfig(
                prediction_threshold=float(os.getenv("PREDICTION_THRESHOLD", 0.60)),
                consecutive_frames_required=int(os.getenv("CONSECUTIVE_FRAMES_REQUIRED", 5)),
            ),
            collector=CollectorConfig(
                debounce_window=float(os.getenv("DEBOUNCE_WINDOW_SECONDS", 1.5)),
            ),
            segmenter=SegmenterConfig(
                pause_threshold=float(os.getenv("PAUSE_THRESHOLD_SECONDS", 3.0)),
                continuous=_env_bool("CONTINUOUS_DICTATION", True),
            ),
            pause_check_interval=float(os.getenv("PAUSE_CHECK_INTERVAL_SECONDS", 0.5)),
            ignored_labels=_env_list("IGNORED_LABELS", DEFAULT_IGNORED_LABELS),
        )


settings = Settings.from_env()
