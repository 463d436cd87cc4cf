"""Audio playback backend using sounddevice and soundfile.

Each loaded item gets its own worker thread that streams decoded blocks to a
PortAudio output stream.  The worker never calls back into the caller:
finished items are queued and handed to end observers by
:meth:`AudioEngine.check_events`, which the owner calls from its own thread.
"""

from __future__ import annotations

import itertools
import logging
import threading
from pathlib import Path

import sounddevice as sd
import soundfile as sf

from coldwave.engine import EndCallback
from coldwave.exceptions import EngineError

log = logging.getLogger(__name__)

# Number of frames to read per chunk during streaming playback.
_BLOCK_SIZE = 2048


class AudioEngine:
    """Streams audio files through PortAudio via sounddevice."""

    def __init__(self, block_size: int = _BLOCK_SIZE) -> None:
        self._block_size = block_size
        self._lock = threading.Lock()
        self._file: sf.SoundFile | None = None
        self._item: Path | None = None
        self._generation = 0
        self._ended: list[int] = []
        self._running = threading.Event()
        self._stop_event = threading.Event()
        self._playback_thread: threading.Thread | None = None
        self._observers: dict[int, tuple[int, EndCallback]] = {}
        self._tokens = itertools.count(1)

    @property
    def current_item(self) -> Path | None:
        return self._item

    @property
    def is_playing(self) -> bool:
        return self._file is not None and self._running.is_set()

    # -- playback controls ---------------------------------------------------

    def load(self, track: Path) -> None:
        """Open *track* and make it the current item, paused at the start."""
        self.stop()
        try:
            soundfile = sf.SoundFile(str(track))
        except (RuntimeError, OSError) as exc:
            raise EngineError(f"Cannot load '{track}': {exc}") from exc

        with self._lock:
            self._file = soundfile
            self._item = Path(track)
            self._generation += 1
        self._stop_event = threading.Event()
        self._start_worker()
        log.debug("Loaded %s", track)

    def play(self) -> None:
        """Start or resume the current item.

        An item that already played to its end is streamed again from its
        current read position.
        """
        if self._file is None:
            return
        if self._playback_thread is None or not self._playback_thread.is_alive():
            self._start_worker()
        self._running.set()

    def pause(self) -> None:
        """Pause the current item."""
        self._running.clear()

    def stop(self) -> None:
        """Stop playback entirely and unload the current item."""
        self._stop_event.set()
        self._running.set()  # unblock the thread if it is waiting on pause
        if self._playback_thread is not None:
            self._playback_thread.join(timeout=2.0)
            self._playback_thread = None
        self._running.clear()
        with self._lock:
            if self._file is not None:
                self._file.close()
            self._file = None
            self._item = None

    def seek(self, seconds: float) -> None:
        """Move the read position of the current item to *seconds*."""
        with self._lock:
            if self._file is None:
                return
            seconds = max(0.0, min(seconds, self._duration()))
            self._file.seek(int(seconds * self._file.samplerate))

    def position(self) -> float:
        with self._lock:
            if self._file is None or not self._file.samplerate:
                return 0.0
            return self._file.tell() / self._file.samplerate

    def duration(self) -> float:
        with self._lock:
            return self._duration()

    def has_item(self) -> bool:
        return self._file is not None

    # -- end-of-item observers -----------------------------------------------

    def add_end_observer(self, callback: EndCallback) -> int:
        """Register a one-shot *callback* for the end of the current item."""
        token = next(self._tokens)
        self._observers[token] = (self._generation, callback)
        return token

    def remove_end_observer(self, token: int) -> None:
        self._observers.pop(token, None)

    def check_events(self) -> None:
        """Fire end observers for items that finished since the last call.

        Must be called periodically (e.g. from the main loop).
        """
        with self._lock:
            ended, self._ended = self._ended, []
        for generation in ended:
            due = [
                (token, callback)
                for token, (observed, callback) in self._observers.items()
                if observed == generation
            ]
            for token, callback in due:
                self._observers.pop(token, None)
                callback()

    # -- internal ------------------------------------------------------------

    def _start_worker(self) -> None:
        with self._lock:
            args = (self._file, self._item, self._generation, self._stop_event)
        self._playback_thread = threading.Thread(
            target=self._stream_file,
            args=args,
            daemon=True,
        )
        self._playback_thread.start()

    def _duration(self) -> float:
        if self._file is None or not self._file.samplerate:
            return 0.0
        return self._file.frames / self._file.samplerate

    def _stream_file(
        self,
        soundfile: sf.SoundFile,
        track: Path,
        generation: int,
        stop_event: threading.Event,
    ) -> None:
        """Worker that streams *soundfile* through an output stream."""
        stream = None
        try:
            while True:
                self._running.wait()
                if stop_event.is_set():
                    return
                if stream is None:
                    stream = sd.OutputStream(
                        samplerate=soundfile.samplerate,
                        channels=soundfile.channels,
                        dtype="float32",
                    )
                    stream.start()
                with self._lock:
                    data = soundfile.read(self._block_size, dtype="float32")
                if len(data) == 0:
                    break
                stream.write(data)
        except Exception:
            if stop_event.is_set():
                return
            # A failing item ends like a finished one so playback moves on.
            log.exception("Playback of %s failed", track)
        finally:
            if stream is not None:
                stream.stop()
                stream.close()

        if not stop_event.is_set():
            with self._lock:
                self._ended.append(generation)
