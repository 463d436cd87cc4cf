"""Album records built from ``<artist>/<album>/`` folders.

An album folder holds audio files and, optionally, a cover image::

    Artist/
        Album/
            01 - Intro.flac
            02 - Song.mp3
            cover.jpg

The folder name is the album title and its parent folder is the artist.
"""

from __future__ import annotations

import unicodedata
import zlib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from coldwave import catalog
from coldwave.exceptions import InvalidPathError

PREFERRED_COVER_PREFIXES: tuple[str, ...] = ("cover", "600x600")

PLACEHOLDER_IMAGES: tuple[str, str] = ("record-sleeve-0.png", "record-sleeve-1.png")


def select_cover(files: Iterable[Path]) -> Path | None:
    """Pick the cover image among *files*, in the order given.

    A file whose name starts with one of :data:`PREFERRED_COVER_PREFIXES`
    wins immediately.  Otherwise the last image seen wins.
    """
    candidate: Path | None = None
    for file in files:
        if not catalog.is_image(file):
            continue
        candidate = file
        if file.name.lower().startswith(PREFERRED_COVER_PREFIXES):
            break
    return candidate


def placeholder_index(title: str) -> int:
    """Return 0 or 1, stable across runs for the same *title*."""
    return zlib.crc32(title.encode("utf-8")) % len(PLACEHOLDER_IMAGES)


def split_artist_title(path: str | Path) -> tuple[str, str]:
    """Return ``(artist, title)`` from the two trailing segments of *path*."""
    path = Path(path)
    segments = path.parts[1:] if path.anchor else path.parts
    if len(segments) < 2:
        raise InvalidPathError(
            f"Album path '{path}' needs an artist and an album segment."
        )
    return segments[-2], segments[-1]


def fold(text: str) -> str:
    """Case- and accent-insensitive form of *text* used for searching."""
    decomposed = unicodedata.normalize("NFKD", text)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.casefold()


@dataclass(frozen=True)
class CoverReference:
    """Either a cover image file or one of the placeholder sleeves."""

    path: Path | None = None
    placeholder: int | None = None

    def __post_init__(self) -> None:
        if (self.path is None) == (self.placeholder is None):
            raise ValueError("A cover is either an image path or a placeholder.")

    @classmethod
    def for_album(cls, cover_path: Path | None, title: str) -> CoverReference:
        if cover_path is not None:
            return cls(path=cover_path)
        return cls(placeholder=placeholder_index(title))

    @property
    def is_placeholder(self) -> bool:
        return self.placeholder is not None

    @property
    def image_name(self) -> str:
        """File name of the image to display."""
        if self.path is not None:
            return self.path.name
        return PLACEHOLDER_IMAGES[self.placeholder]  # type: ignore[index]


@dataclass(frozen=True)
class Album:
    """One album folder.  Two albums are equal when their paths are."""

    path: Path
    artist: str = field(compare=False)
    title: str = field(compare=False)
    cover: CoverReference = field(compare=False)

    @classmethod
    def from_directory(cls, path: str | Path) -> Album:
        """Build an album from its folder, choosing the cover on the way.

        Raises :class:`OSError` if the folder cannot be listed and
        :class:`InvalidPathError` if it is not at least two levels deep.
        """
        path = Path(path)
        artist, title = split_artist_title(path)
        cover_path = select_cover(catalog.list_files(path))
        return cls(
            path=path,
            artist=artist,
            title=title,
            cover=CoverReference.for_album(cover_path, title),
        )

    @property
    def id(self) -> str:
        return str(self.path)

    def playlist(self) -> list[Path]:
        """Return the audio files in the folder, re-read from disk each call."""
        return [file for file in catalog.list_files(self.path) if catalog.is_audio(file)]

    def matches_search_term(self, query: str) -> bool:
        if not query:
            return True
        needle = fold(query)
        return needle in fold(self.artist) or needle in fold(self.title)

    def __str__(self) -> str:
        return f"{self.artist} – {self.title}"
