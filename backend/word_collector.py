# word_collector.py
from typing import List, Optional, Tuple

from config import CollectorConfig


class WordCollector:
    """Pending symbols for the next sentence, unique and in arrival order."""

    def __init__(self, config: CollectorConfig = None):
        self.config = config or CollectorConfig()
        self._words: List[str] = []
        self.last_admitted: Optional[float] = None

    def __len__(self):
        return len(self._words)

    def __contains__(self, symbol: str):
        return symbol.strip().lower() in {w.lower() for w in self._words}

    def add(self, symbol: str, now: float) -> bool:
        word = symbol.strip()
        if not word:
            return False
        if self.last_admitted is not None and now - self.last_admitted <= self.config.debounce_window:
            return False
        if word in self:
            return False

        self._words.append(word)
        self.last_admitted = now
        return True

    def peek(self) -> Tuple[str, ...]:
        return tuple(self._words)

    def reset(self):
        self._words.clear()
        self.last_admitted = None

    def flush(self, synthesizer) -> str:
        # InvalidInput on an empty set propagates and leaves the set as is
        sentence = synthesizer.synthesize(self.peek())
        self.reset()
        return sentence
