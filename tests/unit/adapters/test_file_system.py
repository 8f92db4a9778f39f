"""
Tests unitaires pour FileSystemAdapter et les fonctions de parsing des noms.
"""

from pathlib import Path

import pytest

from mediashelf.adapters.file_system import (
    AUDIOBOOK_EXTENSIONS,
    EBOOK_EXTENSIONS,
    BookDirectoryKind,
    FileSystemAdapter,
    parse_episode_number,
    parse_season_number,
)


@pytest.fixture
def fs() -> FileSystemAdapter:
    return FileSystemAdapter()


def make_file(path: Path, size: int = 10) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"x" * size)
    return path


class TestNameParsing:
    """Tests pour les numeros de saison et d'episode."""

    @pytest.mark.parametrize(
        "name,expected",
        [("Season 1", 1), ("season 02", 2), ("Season10", 10), ("Specials", None), ("Extras", None)],
    )
    def test_parse_season_number(self, name: str, expected) -> None:
        assert parse_season_number(name) == expected

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("Show S01E05.mkv", 5),
            ("S02E12 - Title.mp4", 12),
            ("Episode 7.avi", 7),
            ("pilot.mkv", 0),
        ],
    )
    def test_parse_episode_number(self, name: str, expected: int) -> None:
        assert parse_episode_number(name) == expected


class TestListing:
    """Tests pour le listage des repertoires."""

    def test_list_entries_sorted_and_hides_dotfiles(self, fs: FileSystemAdapter, tmp_path: Path) -> None:
        make_file(tmp_path / "b.mkv")
        make_file(tmp_path / "a.mkv")
        make_file(tmp_path / ".hidden")

        assert [p.name for p in fs.list_entries(tmp_path)] == ["a.mkv", "b.mkv"]

    def test_list_entries_missing_directory_raises(self, fs: FileSystemAdapter, tmp_path: Path) -> None:
        with pytest.raises(OSError):
            fs.list_entries(tmp_path / "missing")

    def test_list_season_folders(self, fs: FileSystemAdapter, tmp_path: Path) -> None:
        """Seuls les dossiers dont le nom contient un numero de saison sont retenus."""
        (tmp_path / "Season 1").mkdir()
        (tmp_path / "Season 2").mkdir()
        (tmp_path / "Extras").mkdir()
        make_file(tmp_path / "Season 3.txt")

        seasons = fs.list_season_folders(tmp_path)

        assert [(p.name, n) for p, n in seasons] == [("Season 1", 1), ("Season 2", 2)]

    def test_list_episode_files_filters_extensions(self, fs: FileSystemAdapter, tmp_path: Path) -> None:
        make_file(tmp_path / "S01E01.mkv")
        make_file(tmp_path / "S01E02.MP4")
        make_file(tmp_path / "S01E01.srt")

        assert [p.name for p in fs.list_episode_files(tmp_path)] == ["S01E01.mkv", "S01E02.MP4"]

    def test_get_size_missing_file_is_zero(self, fs: FileSystemAdapter, tmp_path: Path) -> None:
        assert fs.get_size(tmp_path / "nope.mkv") == 0


class TestClassifyMovieEntry:
    """Tests pour classify_movie_entry."""

    def test_container_uses_largest_video(self, fs: FileSystemAdapter, tmp_path: Path) -> None:
        movie_dir = tmp_path / "Heat (1995)"
        make_file(movie_dir / "sample.mkv", 5)
        make_file(movie_dir / "heat.mkv", 50)
        make_file(movie_dir / "heat.nfo", 500)

        entry = fs.classify_movie_entry(movie_dir)

        assert entry.is_container is True
        assert entry.title == "Heat (1995)"
        assert entry.file_size == 50
        assert entry.video_file.name == "heat.mkv"

    def test_bare_video_file(self, fs: FileSystemAdapter, tmp_path: Path) -> None:
        entry = fs.classify_movie_entry(make_file(tmp_path / "Alien.1979.mkv", 20))

        assert entry.is_container is False
        assert entry.title == "Alien.1979"
        assert entry.file_size == 20

    def test_directory_without_video_is_not_a_movie(self, fs: FileSystemAdapter, tmp_path: Path) -> None:
        make_file(tmp_path / "Notes" / "readme.txt")

        assert fs.classify_movie_entry(tmp_path / "Notes") is None

    def test_non_video_file_is_not_a_movie(self, fs: FileSystemAdapter, tmp_path: Path) -> None:
        assert fs.classify_movie_entry(make_file(tmp_path / "cover.jpg")) is None


class TestClassifyBookDirectory:
    """Tests pour classify_book_directory."""

    def test_standalone_book(self, fs: FileSystemAdapter, tmp_path: Path) -> None:
        make_file(tmp_path / "Dune" / "dune.epub")

        kind = fs.classify_book_directory(tmp_path / "Dune", EBOOK_EXTENSIONS)

        assert kind == BookDirectoryKind.STANDALONE

    def test_subdirectories_make_a_series(self, fs: FileSystemAdapter, tmp_path: Path) -> None:
        """Un dossier avec sous-dossiers est une serie, meme avec des fichiers directs."""
        make_file(tmp_path / "Mistborn" / "extra.m4b")
        make_file(tmp_path / "Mistborn" / "The Final Empire" / "part1.m4b")

        kind = fs.classify_book_directory(tmp_path / "Mistborn", AUDIOBOOK_EXTENSIONS)

        assert kind == BookDirectoryKind.SERIES

    def test_wrong_extensions_are_ignored(self, fs: FileSystemAdapter, tmp_path: Path) -> None:
        """Un epub dans la bibliotheque audio n'est pas un livre."""
        make_file(tmp_path / "Dune" / "dune.epub")

        kind = fs.classify_book_directory(tmp_path / "Dune", AUDIOBOOK_EXTENSIONS)

        assert kind == BookDirectoryKind.IGNORED
