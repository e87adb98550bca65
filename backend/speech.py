# speech.py
"""
Dictation segmenting for the doctor side.

The recognizer delivers final and interim fragments. Final fragments are
accumulated into the current sentence; a pause longer than the configured
threshold (or the end of the stream) closes the sentence. Recognizers that
cannot run continuously get restarted after each utterance and tend to send
the words they already delivered again, so every final fragment is checked
against the previous one before it is appended.
"""
import enum
import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from config import SegmenterConfig

TERMINAL_PUNCTUATION = (".", "!", "?")

_WORD_CHARS = re.compile(r"[^\w']+")


class SegmenterState(enum.Enum):
    IDLE = "idle"
    ACCUMULATING = "accumulating"


@dataclass(frozen=True)
class TranscriptFragment:
    text: str
    is_final: bool = False


def normalize_words(text: str) -> List[str]:
    """Lowercased words with punctuation stripped, used for duplicate checks."""
    words = (_WORD_CHARS.sub("", w).lower() for w in text.split())
    return [w for w in words if w]


def finalize_text(text: str) -> str:
    sentence = text.strip()
    sentence = sentence[:1].upper() + sentence[1:]
    if not sentence.endswith(TERMINAL_PUNCTUATION):
        sentence += "."
    return sentence


def _overlap(previous: Sequence[str], current: Sequence[str]) -> int:
    """Length of the longest tail of `previous` that starts `current`."""
    for size in range(min(len(previous), len(current)), 0, -1):
        if list(previous[-size:]) == list(current[:size]):
            return size
    return 0


class SpeechSegmenter:
    def __init__(self, config: SegmenterConfig = None):
        self.config = config or SegmenterConfig()
        self.state = SegmenterState.IDLE
        self.buffer = ""
        self.last_fragment_seen = ""
        self.last_activity: Optional[float] = None
        self.interim_text = ""
        self._restarted = False
        self._sentences: List[str] = []

    @property
    def sentences(self) -> Tuple[str, ...]:
        return tuple(self._sentences)

    def transcript(self) -> Tuple[str, ...]:
        """Finalized sentences plus the sentence still being dictated."""
        if self.buffer.strip():
            return self.sentences + (self.buffer,)
        return self.sentences

    def observe(self, fragment: TranscriptFragment, now: float):
        if not fragment.is_final:
            self.interim_text = fragment.text
            return

        self.interim_text = ""
        new_text = self._new_words(fragment.text)
        self._restarted = False
        if not new_text:
            return

        self.buffer = f"{self.buffer} {new_text}" if self.buffer else new_text
        self.last_activity = now
        self.state = SegmenterState.ACCUMULATING

    def _new_words(self, text: str) -> str:
        raw = text.split()
        current = normalize_words(text)
        if not current:
            return ""
        previous = normalize_words(self.last_fragment_seen)

        if previous and current[:len(previous)] == previous:
            # same words again, or the previous fragment plus a continuation
            self.last_fragment_seen = text.strip()
            skip = len(previous)
        elif previous and previous[:len(current)] == current:
            # an already delivered prefix, nothing new
            return ""
        else:
            skip = _overlap(previous, current) if self._restarted else 0
            self.last_fragment_seen = text.strip()

        return " ".join(self._drop_words(raw, skip))

    @staticmethod
    def _drop_words(raw: Sequence[str], count: int) -> List[str]:
        # skip `count` normalized words; raw tokens made only of punctuation don't count
        kept = list(raw)
        while count > 0 and kept:
            if normalize_words(kept.pop(0)):
                count -= 1
        return kept

    def check_pause(self, now: float) -> Optional[str]:
        if not self.buffer.strip() or self.last_activity is None:
            return None
        if now - self.last_activity <= self.config.pause_threshold:
            return None
        sentence = self._finalize()
        self.last_activity = now
        return sentence

    def on_stream_end(self) -> Optional[str]:
        self.interim_text = ""
        self._restarted = False
        if not self.buffer.strip():
            return None
        return self._finalize()

    def on_restart(self):
        # buffer and last fragment survive so the re-sent tail is recognized
        self.interim_text = ""
        self._restarted = True

    def on_engine_end(self, user_stopped: bool = False) -> Optional[str]:
        if not self.config.continuous and not user_stopped:
            self.on_restart()
            return None
        return self.on_stream_end()

    def clear(self):
        self._sentences.clear()
        self.buffer = ""
        self.last_fragment_seen = ""
        self.interim_text = ""
        self._restarted = False
        self.state = SegmenterState.IDLE

    def _finalize(self) -> str:
        sentence = finalize_text(self.buffer)
        self._sentences.append(sentence)
        self.buffer = ""
        self.last_fragment_seen = ""
        self.state = SegmenterState.IDLE
        return sentence
