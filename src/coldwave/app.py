"""Wiring of library, controller and audio engine for a user interface.

A UI creates one :class:`ColdwaveApp`, calls :meth:`~ColdwaveApp.pump`
from its event loop and reads :meth:`~ColdwaveApp.now_playing` to render.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from coldwave.config import Config
from coldwave.controller import (
    DEFAULT_PROGRESS_INTERVAL,
    PlaybackController,
    ProgressTicker,
)
from coldwave.formatting import format_timestamp
from coldwave.library import MusicLibrary
from coldwave.logging_config import setup_logging

if TYPE_CHECKING:
    from coldwave.album import Album
    from coldwave.engine import PlaybackEngine


@dataclass(frozen=True)
class NowPlaying:
    """Snapshot of the playback session for display."""

    album: Album | None
    track_name: str
    track_index: int
    is_playing: bool
    progress: float
    elapsed: str
    duration: str


class ColdwaveApp:
    """Owns the album collection and the playback session."""

    def __init__(
        self,
        library: MusicLibrary,
        controller: PlaybackController,
        *,
        progress_interval: float = DEFAULT_PROGRESS_INTERVAL,
    ) -> None:
        self.library = library
        self.controller = controller
        self._ticker = ProgressTicker(controller, interval=progress_interval)

    @classmethod
    def from_config(
        cls, config: Config, *, configure_logging: bool = False
    ) -> ColdwaveApp:
        """Build an app playing through the sounddevice backend."""
        from coldwave.audio import AudioEngine

        if configure_logging:
            setup_logging(config.log_level)
        library = MusicLibrary(config.music_dir, strict=not config.skip_unreadable)
        return cls(
            library,
            PlaybackController(AudioEngine()),
            progress_interval=config.progress_interval,
        )

    @property
    def engine(self) -> PlaybackEngine:
        return self.controller.engine

    # -- library -------------------------------------------------------------

    def open_directory(self, path: str | Path) -> tuple[Album, ...]:
        """Point the library at *path* and scan it."""
        self.library.set_root(path)
        return self.library.rescan()

    def visible_albums(self, query: str = "") -> list[Album]:
        return self.library.search(query)

    # -- playback ------------------------------------------------------------

    def play_album(self, album: Album, track_index: int = 0) -> None:
        self.controller.select_album(album, track_index)

    def now_playing(self) -> NowPlaying:
        controller = self.controller
        return NowPlaying(
            album=controller.current_album,
            track_name=controller.current_track_name,
            track_index=controller.current_track_index,
            is_playing=controller.is_playing,
            progress=controller.progress_fraction,
            elapsed=format_timestamp(controller.elapsed()),
            duration=format_timestamp(controller.duration()),
        )

    def pump(self) -> None:
        """Deliver queued engine events on the calling thread."""
        self.engine.check_events()

    # -- lifecycle -----------------------------------------------------------

    def start(self) -> None:
        self._ticker.start()

    def close(self) -> None:
        """Cancel the progress timer and release the engine."""
        self._ticker.stop()
        self.controller.stop()

    def __enter__(self) -> ColdwaveApp:
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
