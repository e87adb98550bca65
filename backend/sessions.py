# sessions.py
import asyncio
import time
from typing import Awaitable, Callable, Optional, Tuple

from config import Settings, settings as default_settings
from gestures import ClassificationEvent, GestureStabilizer, is_ignored_label
from phrases import PhraseSynthesizer
from speech import SpeechSegmenter, TranscriptFragment
from word_collector import WordCollector

EventCallback = Callable[[dict], Awaitable[None]]


class PatientSession:
    """Gesture side of a room: stabilizer -> word collector -> synthesizer."""

    def __init__(self, synthesizer: PhraseSynthesizer, config: Settings = None):
        config = config or default_settings
        self.stabilizer = GestureStabilizer(config.stabilizer)
        self.collector = WordCollector(config.collector)
        self.synthesizer = synthesizer
        self.ignored_labels = config.ignored_labels
        self.last_prediction: Optional[ClassificationEvent] = None

    @property
    def words(self) -> Tuple[str, ...]:
        return self.collector.peek()

    def observe(self, event: ClassificationEvent) -> Optional[str]:
        """Feed one classifier event; returns the symbol if it joined the word list."""
        self.last_prediction = event
        confirmed = self.stabilizer.observe(event)
        if confirmed is None or is_ignored_label(confirmed, self.ignored_labels):
            return None
        if self.collector.add(confirmed, event.timestamp):
            return confirmed.strip()
        return None

    def generate(self) -> str:
        words = self.words
        sentence = self.collector.flush(self.synthesizer)
        print(f"✅ Sentence generated for {list(words)}: {sentence}")
        return sentence

    def reset_words(self):
        self.collector.reset()


class DictationSession:
    """
    Owns a SpeechSegmenter. Fragments, restarts, stream ends and pause-timer
    ticks all go through one queue and are applied by a single worker task,
    so the segmenter only ever has one writer.
    """

    def __init__(self, config: Settings = None, on_event: EventCallback = None,
                 clock: Callable[[], float] = time.monotonic):
        config = config or default_settings
        self.segmenter = SpeechSegmenter(config.segmenter)
        self.check_interval = config.pause_check_interval
        self.on_event = on_event
        self.clock = clock
        self.queue: Optional[asyncio.Queue] = None
        self._worker: Optional[asyncio.Task] = None
        self._timer: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._worker is not None and not self._worker.done()

    def start(self):
        if self.running:
            return
        self.cancel()
        self.queue = asyncio.Queue()
        self._worker = asyncio.create_task(self._run())
        self._timer = asyncio.create_task(self._pause_timer())

    async def submit_fragment(self, fragment: TranscriptFragment):
        await self._submit("fragment", fragment)

    async def submit_restart(self):
        await self._submit("restart", None)

    async def submit_end(self, user_stopped: bool = True):
        await self._submit("end", user_stopped)

    async def submit_clear(self):
        await self._submit("clear", None)

    async def tick(self):
        await self._submit("tick", None)

    async def drain(self):
        """Wait until everything queued so far has been applied."""
        if self.queue is not None:
            await self.queue.join()

    async def _submit(self, kind: str, payload):
        if not self.running:
            self.start()
        await self.queue.put((kind, payload))

    async def _pause_timer(self):
        while True:
            await asyncio.sleep(self.check_interval)
            await self.queue.put(("tick", None))

    async def _run(self):
        while True:
            kind, payload = await self.queue.get()
            try:
                for message in self._apply(kind, payload):
                    await self._emit(message)
            finally:
                self.queue.task_done()

    async def _emit(self, message: dict):
        if self.on_event is None:
            return
        try:
            await self.on_event(message)
        except Exception as e:
            print(f"⚠️ Could not deliver {message['type']}: {e}")

    def _apply(self, kind: str, payload):
        segmenter = self.segmenter
        sentence = None

        if kind == "fragment":
            segmenter.observe(payload, self.clock())
            if not payload.is_final:
                return [{"type": "interim_update", "text": segmenter.interim_text}]
            return [self._transcript_message()]
        elif kind == "tick":
            sentence = segmenter.check_pause(self.clock())
        elif kind == "restart":
            segmenter.on_restart()
        elif kind == "end":
            sentence = segmenter.on_engine_end(user_stopped=payload)
        elif kind == "clear":
            segmenter.clear()
            return [self._transcript_message()]

        if sentence is None:
            return []
        print(f"✅ Sentence finalized: {sentence}")
        return [{"type": "sentence", "text": sentence}, self._transcript_message()]

    def _transcript_message(self) -> dict:
        return {"type": "transcript_update", "sentences": list(self.segmenter.transcript())}

    def cancel(self):
        # unfinished text is dropped on purpose; the user ended the session
        for task in (self._timer, self._worker):
            if task is not None and not task.done():
                task.cancel()

    async def close(self):
        self.cancel()
        tasks = [t for t in (self._timer, self._worker) if t is not None]
        await asyncio.gather(*tasks, return_exceptions=True)
        self._timer = self._worker = None
