"""Album playback controller.

States
------
- IDLE    : no album selected (initial state).
- LOADED  : an album and its playlist are set but no track is loaded for the
            current index (empty album, or a failed/out-of-range selection).
- PLAYING : the current track is loaded and playing.
- PAUSED  : the current track is loaded and paused.

Session properties
------------------
- current_album       : Album | None   – album the playlist was taken from.
- playlist            : tuple[Path]    – snapshot taken when the album was selected.
- current_track_index : int            – outside the playlist means "no track".
- is_playing          : bool
- progress_fraction   : float in [0, 1] – approximate, refreshed by polling.

Transitions
-----------
    select_album(album, i) → select_track(i) on the album's fresh playlist
    select_track(i)        → PLAYING if i is a playlist index, otherwise the
                             engine is paused (no wraparound at either end)
    advance_on_track_end() → select_track(current + 1); the last track halts
    next_track()           → select_track(current + 1)
    previous_track()       → select_track(current - 1)
    pause()                → PAUSED (or stays LOADED/IDLE)
    resume()               → PLAYING, only when the current track is loaded
    stop()                 → LOADED (or IDLE), engine item unloaded
    seek_to(fraction)      → same state, engine moved to fraction × duration

None of these raise.  Every call runs under one re-entrant lock, and at most
one end-of-item observer is registered with the engine at any time.
"""

from __future__ import annotations

import logging
import threading
from enum import Enum, auto
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Hashable

from coldwave.exceptions import EngineError

if TYPE_CHECKING:
    from coldwave.album import Album
    from coldwave.engine import PlaybackEngine

log = logging.getLogger(__name__)

NO_TRACKS_LABEL = "Album Tracks"

DEFAULT_PROGRESS_INTERVAL = 0.5


class State(Enum):
    IDLE = auto()
    LOADED = auto()
    PLAYING = auto()
    PAUSED = auto()


Listener = Callable[["PlaybackController"], None]


class PlaybackController:
    """Plays the tracks of one album at a time through a playback engine."""

    def __init__(self, engine: PlaybackEngine) -> None:
        self._engine = engine
        self._lock = threading.RLock()
        self._current_album: Album | None = None
        self._playlist: tuple[Path, ...] = ()
        self._track_index: int = 0
        self._playing: bool = False
        self._progress: float = 0.0
        self._loaded_track: Path | None = None
        self._end_token: Hashable | None = None
        self._selection: int = 0
        self._listeners: list[Listener] = []

    # -- public properties ---------------------------------------------------

    @property
    def engine(self) -> PlaybackEngine:
        return self._engine

    @property
    def current_album(self) -> Album | None:
        return self._current_album

    @property
    def playlist(self) -> tuple[Path, ...]:
        return self._playlist

    @property
    def current_track_index(self) -> int:
        return self._track_index

    @property
    def is_playing(self) -> bool:
        return self._playing

    @property
    def progress_fraction(self) -> float:
        return self._progress

    @property
    def current_track(self) -> Path | None:
        """The playlist entry at the current index, or ``None``."""
        if 0 <= self._track_index < len(self._playlist):
            return self._playlist[self._track_index]
        return None

    @property
    def current_track_name(self) -> str:
        track = self.current_track
        return track.name if track is not None else NO_TRACKS_LABEL

    @property
    def track_names(self) -> list[str]:
        return [track.name for track in self._playlist]

    @property
    def state(self) -> State:
        if self._current_album is None:
            return State.IDLE
        if self._playing:
            return State.PLAYING
        if self._has_current_track_loaded():
            return State.PAUSED
        return State.LOADED

    def elapsed(self) -> float:
        return self._engine.position() if self._engine.has_item() else 0.0

    def duration(self) -> float:
        return self._engine.duration() if self._engine.has_item() else 0.0

    # -- change notification -------------------------------------------------

    def add_listener(self, listener: Listener) -> None:
        """Call *listener* with this controller after every state change."""
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    # -- transitions ---------------------------------------------------------

    def select_album(self, album: Album, track_index: int = 0) -> None:
        """Take a fresh playlist from *album* and play *track_index*."""
        with self._lock:
            self._drop_end_observer()
            self._current_album = album
            self._track_index = -1
            try:
                self._playlist = tuple(album.playlist())
            except OSError as exc:
                log.error("Cannot read playlist of %s: %s", album, exc)
                self._playlist = ()
            log.debug("Selected %s with %d tracks", album, len(self._playlist))
            self.select_track(track_index)

    def select_track(self, index: int) -> None:
        """Play the track at *index*, or pause if there is no such track."""
        with self._lock:
            if 0 <= index < len(self._playlist):
                self._load_and_play(index)
            else:
                log.debug(
                    "Track %d is outside a playlist of %d, pausing.",
                    index,
                    len(self._playlist),
                )
                self._halt()
            self._notify()

    def advance_on_track_end(self) -> None:
        """Handle the end of the current item by moving to the next track.

        After the last track this pauses; it never continues with another
        album and never wraps around.
        """
        with self._lock:
            log.debug("End of track %d, advancing.", self._track_index)
            self.select_track(self._track_index + 1)

    def next_track(self) -> None:
        with self._lock:
            self.select_track(self._track_index + 1)

    def previous_track(self) -> None:
        with self._lock:
            self.select_track(self._track_index - 1)

    def pause(self) -> None:
        with self._lock:
            self._engine.pause()
            self._playing = False
            self._notify()

    def resume(self) -> None:
        """Continue the current track.  Does nothing when it is not loaded."""
        with self._lock:
            if not self._has_current_track_loaded():
                log.debug("Nothing loaded to resume.")
                return
            if self._end_token is None:
                # The item already ended once and replays from its position.
                self._watch_end_of(self._selection)
            self._engine.play()
            self._playing = True
            self._notify()

    def stop(self) -> None:
        """End the session: unload the engine's item and forget it."""
        with self._lock:
            self._drop_end_observer()
            self._engine.stop()
            self._loaded_track = None
            self._playing = False
            self._progress = 0.0
            self._notify()

    def toggle(self) -> None:
        with self._lock:
            if self._playing:
                self.pause()
            else:
                self.resume()

    def seek_to(self, fraction: float) -> None:
        """Move playback of the loaded item to *fraction* of its duration."""
        with self._lock:
            if not self._engine.has_item():
                return
            duration = self._engine.duration()
            if duration <= 0:
                return
            fraction = min(max(fraction, 0.0), 1.0)
            self._engine.seek(fraction * duration)
            self._progress = fraction
            self._notify()

    def update_progress(self) -> float:
        """Refresh :attr:`progress_fraction` from the engine and return it.

        Only reads the engine, so it may run on a timer thread alongside the
        control operations.
        """
        duration = self._engine.duration()
        if duration > 0:
            fraction = self._engine.position() / duration
            self._progress = min(max(fraction, 0.0), 1.0)
        return self._progress

    # -- internal helpers ----------------------------------------------------

    def _has_current_track_loaded(self) -> bool:
        track = self.current_track
        return (
            track is not None
            and track == self._loaded_track
            and self._engine.has_item()
        )

    def _load_and_play(self, index: int) -> None:
        track = self._playlist[index]
        self._drop_end_observer()
        try:
            self._engine.load(track)
        except EngineError as exc:
            log.error("Cannot play %s: %s", track, exc)
            self._loaded_track = None
            self._halt()
            return
        self._track_index = index
        self._loaded_track = track
        self._progress = 0.0
        self._playing = True
        self._engine.play()
        self._watch_end_of(self._selection)

    def _halt(self) -> None:
        self._engine.pause()
        self._playing = False

    def _drop_end_observer(self) -> None:
        self._selection += 1
        if self._end_token is not None:
            self._engine.remove_end_observer(self._end_token)
            self._end_token = None

    def _watch_end_of(self, selection: int) -> None:
        def _on_end() -> None:
            if selection != self._selection:
                log.debug("Ignoring end of a replaced item.")
                return
            self._end_token = None
            self.advance_on_track_end()

        self._end_token = self._engine.add_end_observer(_on_end)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                log.exception("Playback listener %r failed", listener)


class ProgressTicker:
    """Refreshes a controller's progress on a background timer.

    Parameters
    ----------
    controller:
        The controller whose :meth:`~PlaybackController.update_progress` is
        called on every tick.
    interval:
        Seconds between ticks (default 0.5).
    on_tick:
        Optional callback receiving the new fraction after each tick.
    """

    def __init__(
        self,
        controller: PlaybackController,
        *,
        interval: float = DEFAULT_PROGRESS_INTERVAL,
        on_tick: Callable[[float], None] | None = None,
    ) -> None:
        self._controller = controller
        self._interval = interval
        self._on_tick = on_tick
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None

    def start(self) -> None:
        """Start the background timer thread."""
        if self._thread is not None:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._tick_loop, daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """Cancel the timer and wait for its thread to finish."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None

    def _tick_loop(self) -> None:
        while not self._stop_event.wait(self._interval):
            fraction = self._controller.update_progress()
            if self._on_tick is None:
                continue
            try:
                self._on_tick(fraction)
            except Exception:
                log.exception("Progress callback %r failed", self._on_tick)
