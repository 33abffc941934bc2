from __future__ import annotations

from savepath.models import Suggestion
from savepath.subfolder import (
    apply_series_subfolder,
    extract_series_name,
    join_subfolder,
    sanitize_subfolder_name,
)


def test_extract_series_name_normalizes_season_token() -> None:
    assert extract_series_name("The.OutCast.2016.S01.Complete.2160p") == "The OutCast 2016 S01"
    assert extract_series_name("Westworld.S03E01.1080p.WEB-DL") == "Westworld S03"
    assert extract_series_name("The.Mandalorian.Season 3.2023.2160p") == "The Mandalorian S03"
    assert extract_series_name("Show_Name_S1_1080p") == "Show Name S01"


def test_extract_series_name_without_prefix_strips_noise() -> None:
    assert extract_series_name("S01.Complete.1080p.x264-GRP") == "S01"


def test_sanitize_removes_illegal_characters() -> None:
    assert sanitize_subfolder_name('Who: What? "Now" S01', "irrelevant") == "Who What Now S01"
    assert sanitize_subfolder_name("A/B\\C|D S02", "irrelevant") == "ABCD S02"


def test_sanitize_short_name_falls_back_to_title_tokens() -> None:
    assert sanitize_subfolder_name("ab", "Ab.Cd.Ef.Gh") == "Ab Cd Ef"


def test_sanitize_truncates_long_names() -> None:
    result = sanitize_subfolder_name("A" * 150, "irrelevant")

    assert len(result) == 100


def test_join_subfolder_detects_separator() -> None:
    assert join_subfolder("/downloads/tv", "Show S01") == "/downloads/tv/Show S01"
    assert join_subfolder("/downloads/tv/", "Show S01") == "/downloads/tv/Show S01"
    assert join_subfolder("D:\\Downloads\\TV", "Show S01") == "D:\\Downloads\\TV\\Show S01"


def test_apply_series_subfolder_noop_cases() -> None:
    base = Suggestion(name="剧集", path="/tv", is_default=False, id=1)
    blank = Suggestion(name="downloader default", path="", is_default=False)

    assert apply_series_subfolder(base, "Show.S01E01", enabled=False) is base
    assert apply_series_subfolder(base, "Some.Movie.2010", enabled=True) is base
    assert apply_series_subfolder(blank, "Show.S01E01", enabled=True) is blank


def test_apply_series_subfolder_returns_new_object() -> None:
    base = Suggestion(name="剧集", path="D:\\TV", is_default=True, id=1)

    result = apply_series_subfolder(base, "Planet.Earth.II.S01E01.2016.2160p", enabled=True)

    assert result is not base
    assert base.path == "D:\\TV"
    assert result.path == "D:\\TV\\Planet Earth II S01"
    assert result.original_path == "D:\\TV"
    assert result.series_subfolder == "Planet Earth II S01"
    assert result.is_default is True
    assert result.id == 1
