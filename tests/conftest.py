"""Shared fixtures: an on-disk music folder and an in-memory playback engine."""

from __future__ import annotations

import itertools
from pathlib import Path

import pytest

from coldwave.exceptions import EngineError


class FakeEngine:
    """Playback engine that records commands instead of making sound."""

    def __init__(self, duration: float = 200.0) -> None:
        self.loaded: Path | None = None
        self.playing = False
        self.current_position = 0.0
        self.item_duration = duration
        self.fail_on: set[str] = set()
        self.load_calls: list[Path] = []
        self.stop_calls = 0
        self.check_calls = 0
        self.observers: dict[int, object] = {}
        self._tokens = itertools.count(1)

    def load(self, track: Path) -> None:
        self.load_calls.append(track)
        if track.name in self.fail_on:
            self.loaded = None
            self.playing = False
            raise EngineError(f"cannot decode {track.name}")
        self.loaded = track
        self.playing = False
        self.current_position = 0.0

    def play(self) -> None:
        if self.loaded is not None:
            self.playing = True

    def pause(self) -> None:
        self.playing = False

    def seek(self, seconds: float) -> None:
        self.current_position = seconds

    def position(self) -> float:
        return self.current_position

    def duration(self) -> float:
        return self.item_duration if self.loaded is not None else 0.0

    def has_item(self) -> bool:
        return self.loaded is not None

    def stop(self) -> None:
        self.stop_calls += 1
        self.loaded = None
        self.playing = False
        self.current_position = 0.0

    def check_events(self) -> None:
        self.check_calls += 1

    def add_end_observer(self, callback) -> int:
        token = next(self._tokens)
        self.observers[token] = callback
        return token

    def remove_end_observer(self, token: int) -> None:
        self.observers.pop(token, None)

    def finish(self) -> None:
        """Simulate the loaded item playing to its end."""
        self.playing = False
        due, self.observers = self.observers, {}
        for callback in due.values():
            callback()


@pytest.fixture()
def engine():
    return FakeEngine()


@pytest.fixture()
def music_dir(tmp_path):
    """Create a small two-level music library on disk."""
    root = tmp_path / "music"

    album1 = root / "ArtistA" / "Album1"
    album1.mkdir(parents=True)
    (album1 / "x.mp3").touch()
    (album1 / "y.flac").touch()
    (album1 / "cover.jpg").touch()

    album2 = root / "ArtistB" / "Album2"
    album2.mkdir(parents=True)
    (album2 / "z.m4a").touch()

    return root
