"""Interface the playback controller expects from an audio backend."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Hashable, Protocol

EndCallback = Callable[[], None]


class PlaybackEngine(Protocol):
    """An audio backend holding at most one loaded item.

    Positions and durations are in seconds.  ``duration()`` returns 0 when
    nothing is loaded or the length is unknown.

    End observers are one-shot and scoped to the item that was loaded when
    they were added: they fire once when that item finishes (or fails while
    playing) and never for a later item.
    """

    def load(self, track: Path) -> None:
        """Make *track* the current item, paused at the start.

        Raises :class:`~coldwave.exceptions.EngineError` on failure.
        """

    def play(self) -> None: ...

    def pause(self) -> None: ...

    def seek(self, seconds: float) -> None: ...

    def position(self) -> float: ...

    def duration(self) -> float: ...

    def has_item(self) -> bool: ...

    def add_end_observer(self, callback: EndCallback) -> Hashable: ...

    def remove_end_observer(self, token: Hashable) -> None: ...

    def stop(self) -> None:
        """Stop playback and unload the current item, releasing it."""

    def check_events(self) -> None:
        """Deliver pending end-of-item notifications on the calling thread."""
