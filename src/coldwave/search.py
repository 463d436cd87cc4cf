"""Filter albums by a free-text query on artist and title."""

from __future__ import annotations

from typing import Iterable

from coldwave.album import Album


def filter_albums(albums: Iterable[Album], query: str) -> list[Album]:
    """Return the albums matching *query*, in their original order.

    An empty query matches every album.
    """
    return [album for album in albums if album.matches_search_term(query)]
