"""Stateless helpers for walking the music folder tree.

Listings are returned sorted by name so that album, cover and track order is
the same on every platform.  An unreadable or missing directory raises
:class:`OSError`; nothing here swallows it.
"""

from __future__ import annotations

from pathlib import Path

IMAGE_EXTENSIONS: frozenset[str] = frozenset({".jpg", ".jpeg", ".png"})

AUDIO_EXTENSIONS: frozenset[str] = frozenset({".flac", ".mp3", ".m4a"})


def _listing(path: str | Path) -> list[Path]:
    return sorted(Path(path).iterdir(), key=lambda entry: entry.name)


def list_subdirectories(path: str | Path) -> list[Path]:
    """Return every direct child of *path* that is a directory."""
    return [entry for entry in _listing(path) if entry.is_dir()]


def list_files(path: str | Path) -> list[Path]:
    """Return every direct child of *path* that is a regular file."""
    return [entry for entry in _listing(path) if entry.is_file()]


def is_image(path: str | Path) -> bool:
    return Path(path).suffix.lower() in IMAGE_EXTENSIONS


def is_audio(path: str | Path) -> bool:
    return Path(path).suffix.lower() in AUDIO_EXTENSIONS
