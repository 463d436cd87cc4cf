"""Tests for album records."""

from __future__ import annotations

import dataclasses
from pathlib import Path

import pytest

from coldwave.album import (
    PLACEHOLDER_IMAGES,
    Album,
    CoverReference,
    placeholder_index,
    select_cover,
    split_artist_title,
)
from coldwave.exceptions import InvalidPathError


def _paths(*names: str) -> list[Path]:
    return [Path("/music/Artist/Album") / name for name in names]


class TestSelectCover:
    def test_preferred_prefix_wins_regardless_of_position(self):
        cover = select_cover(_paths("b.png", "cover.jpg", "a.jpg"))
        assert cover.name == "cover.jpg"

    def test_last_image_wins_without_preferred_name(self):
        cover = select_cover(_paths("a.jpg", "b.png"))
        assert cover.name == "b.png"

    def test_600x600_prefix_is_preferred(self):
        cover = select_cover(_paths("600x600bb.jpg", "zz.png"))
        assert cover.name == "600x600bb.jpg"

    def test_prefix_match_is_case_insensitive(self):
        cover = select_cover(_paths("Cover.PNG", "later.jpg"))
        assert cover.name == "Cover.PNG"

    def test_non_images_ignored(self):
        cover = select_cover(_paths("front.jpg", "cover.txt", "track.mp3"))
        assert cover.name == "front.jpg"

    def test_no_images(self):
        assert select_cover(_paths("track.mp3", "notes.txt")) is None


class TestPlaceholderIndex:
    def test_is_zero_or_one(self):
        for title in ["", "Blue", "Kind of Blue", "Ænima", "1999"]:
            assert placeholder_index(title) in (0, 1)

    def test_is_stable(self):
        assert placeholder_index("Kind of Blue") == placeholder_index("Kind of Blue")

    def test_depends_on_title_only(self, tmp_path):
        for artist in ("Miles Davis", "Somebody Else"):
            (tmp_path / artist / "Blue").mkdir(parents=True)
        first = Album.from_directory(tmp_path / "Miles Davis" / "Blue")
        second = Album.from_directory(tmp_path / "Somebody Else" / "Blue")
        assert first.cover.placeholder == second.cover.placeholder
        assert first.cover.placeholder == placeholder_index("Blue")

    def test_both_placeholders_are_used(self):
        titles = [f"Album {n}" for n in range(20)]
        assert {placeholder_index(title) for title in titles} == {0, 1}


class TestSplitArtistTitle:
    def test_absolute_path(self):
        assert split_artist_title("/music/Miles Davis/Kind of Blue") == (
            "Miles Davis",
            "Kind of Blue",
        )

    def test_relative_path(self):
        assert split_artist_title(Path("Nina Simone") / "Pastel Blues") == (
            "Nina Simone",
            "Pastel Blues",
        )

    @pytest.mark.parametrize("path", ["Album", "/Album", "/"])
    def test_too_short_raises(self, path):
        with pytest.raises(InvalidPathError):
            split_artist_title(path)


class TestCoverReference:
    def test_requires_exactly_one_source(self):
        with pytest.raises(ValueError):
            CoverReference()
        with pytest.raises(ValueError):
            CoverReference(path=Path("cover.jpg"), placeholder=0)

    def test_image_name_for_file(self):
        cover = CoverReference(path=Path("/m/A/B/cover.jpg"))
        assert cover.image_name == "cover.jpg"
        assert not cover.is_placeholder

    def test_image_name_for_placeholder(self):
        cover = CoverReference(placeholder=1)
        assert cover.image_name == PLACEHOLDER_IMAGES[1]
        assert cover.is_placeholder


class TestFromDirectory:
    def test_derives_artist_title_and_cover(self, music_dir):
        album = Album.from_directory(music_dir / "ArtistA" / "Album1")
        assert album.artist == "ArtistA"
        assert album.title == "Album1"
        assert album.cover.path == music_dir / "ArtistA" / "Album1" / "cover.jpg"

    def test_placeholder_without_images(self, music_dir):
        album = Album.from_directory(music_dir / "ArtistB" / "Album2")
        assert album.cover.path is None
        assert album.cover.placeholder == placeholder_index("Album2")

    def test_missing_directory_raises(self, tmp_path):
        with pytest.raises(OSError):
            Album.from_directory(tmp_path / "Artist" / "Ghost")

    def test_is_immutable(self, music_dir):
        album = Album.from_directory(music_dir / "ArtistA" / "Album1")
        with pytest.raises(dataclasses.FrozenInstanceError):
            album.title = "Other"  # type: ignore[misc]


class TestEquality:
    def test_equal_when_paths_match(self):
        path = Path("/music/A/B")
        one = Album(path, "A", "B", CoverReference(placeholder=0))
        two = Album(path, "A", "B", CoverReference(path=path / "cover.jpg"))
        assert one == two
        assert hash(one) == hash(two)

    def test_different_paths_differ(self):
        cover = CoverReference(placeholder=0)
        assert Album(Path("/m/A/B"), "A", "B", cover) != Album(
            Path("/n/A/B"), "A", "B", cover
        )


class TestPlaylist:
    def test_audio_files_in_listing_order(self, music_dir):
        album = Album.from_directory(music_dir / "ArtistA" / "Album1")
        assert [track.name for track in album.playlist()] == ["x.mp3", "y.flac"]

    def test_rereads_disk_each_call(self, music_dir):
        album_dir = music_dir / "ArtistA" / "Album1"
        album = Album.from_directory(album_dir)
        (album_dir / "w.M4A").touch()
        (album_dir / "y.flac").unlink()
        assert [track.name for track in album.playlist()] == ["w.M4A", "x.mp3"]

    def test_subdirectories_are_not_tracks(self, music_dir):
        album_dir = music_dir / "ArtistB" / "Album2"
        (album_dir / "bonus.mp3").mkdir()
        album = Album.from_directory(album_dir)
        assert [track.name for track in album.playlist()] == ["z.m4a"]


class TestMatchesSearchTerm:
    @pytest.fixture()
    def album(self):
        return Album(
            Path("/music/Björk/Homogenic"),
            "Björk",
            "Homogenic",
            CoverReference(placeholder=0),
        )

    def test_empty_query_matches(self, album):
        assert album.matches_search_term("")

    def test_matches_artist_case_insensitively(self, album):
        assert album.matches_search_term("BJÖRK")

    def test_matches_title_substring(self, album):
        assert album.matches_search_term("genic")

    def test_ignores_diacritics(self, album):
        assert album.matches_search_term("bjork")

    def test_no_match(self, album):
        assert not album.matches_search_term("zz_no_match")

    def test_literal_substring_matches(self):
        album = Album(
            Path("/m/zz_no_match band/B"),
            "zz_no_match band",
            "B",
            CoverReference(placeholder=0),
        )
        assert album.matches_search_term("zz_no_match")
