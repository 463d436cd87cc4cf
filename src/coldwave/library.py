"""Music library: discovers albums from the filesystem.

Expected directory layout::

    <root>/
        Artist A/
            Album 1/
                01 - First Track.mp3
                02 - Second Track.flac
                cover.jpg
        Artist B/
            Album 2/
                song.m4a

Only directories exactly two levels below *root* become albums.  Loose files
at the artist or album level are ignored.

Scans are fail-fast by default: an unreadable directory anywhere aborts the
scan with :class:`OSError`.  Pass ``strict=False`` to log and skip unreadable
artist or album folders instead.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Callable

from coldwave import catalog
from coldwave.album import Album
from coldwave.search import filter_albums

log = logging.getLogger(__name__)


def scan_artist(artist_path: str | Path, *, strict: bool = True) -> list[Album]:
    """Return one album per direct subdirectory of *artist_path*."""
    albums: list[Album] = []
    for album_path in catalog.list_subdirectories(artist_path):
        try:
            albums.append(Album.from_directory(album_path))
        except OSError as exc:
            if strict:
                raise
            log.warning("Skipping unreadable album folder %s: %s", album_path, exc)
    return albums


def scan_library(root_path: str | Path, *, strict: bool = True) -> list[Album]:
    """Return every album two levels below *root_path*.

    Albums are ordered by artist folder, then by album folder.
    """
    albums: list[Album] = []
    for artist_path in catalog.list_subdirectories(root_path):
        try:
            albums.extend(scan_artist(artist_path, strict=strict))
        except OSError as exc:
            if strict:
                raise
            log.warning("Skipping unreadable artist folder %s: %s", artist_path, exc)
    return albums


class MusicLibrary:
    """Owns the album collection scanned from a root folder.

    The collection is replaced as a whole on every rescan, never patched.
    """

    def __init__(self, root: str | Path | None = None, *, strict: bool = True) -> None:
        self._root = Path(root) if root is not None else None
        self._strict = strict
        self._albums: tuple[Album, ...] = ()
        self._scan_thread: threading.Thread | None = None

    @property
    def root(self) -> Path | None:
        return self._root

    @property
    def albums(self) -> tuple[Album, ...]:
        return self._albums

    def set_root(self, root: str | Path) -> None:
        self._root = Path(root)

    def rescan(self) -> tuple[Album, ...]:
        """Scan the root folder and replace the collection.

        On error the previous collection is kept and the error propagates.
        """
        if self._root is None:
            raise ValueError("No music folder has been chosen yet.")
        log.info("Scanning music library at %s", self._root)
        albums = tuple(scan_library(self._root, strict=self._strict))
        self._albums = albums
        log.info("Found %d albums in %s", len(albums), self._root)
        return albums

    def rescan_in_background(
        self,
        on_done: Callable[[tuple[Album, ...]], None] | None = None,
        on_error: Callable[[Exception], None] | None = None,
    ) -> None:
        """Run :meth:`rescan` on a daemon thread.

        *on_done* and *on_error* are called from that thread.
        """
        self.wait()

        def _worker() -> None:
            try:
                albums = self.rescan()
            except (OSError, ValueError) as exc:
                log.error("Library scan failed: %s", exc)
                if on_error is not None:
                    on_error(exc)
                return
            if on_done is not None:
                on_done(albums)

        self._scan_thread = threading.Thread(target=_worker, daemon=True)
        self._scan_thread.start()

    def wait(self, timeout: float | None = None) -> None:
        """Block until a background scan (if any) has finished."""
        if self._scan_thread is not None:
            self._scan_thread.join(timeout)
            if not self._scan_thread.is_alive():
                self._scan_thread = None

    def search(self, query: str) -> list[Album]:
        return filter_albums(self._albums, query)

    def find(self, path: str | Path) -> Album | None:
        """Return the album stored at *path*, or ``None``."""
        path = Path(path)
        for album in self._albums:
            if album.path == path:
                return album
        return None
