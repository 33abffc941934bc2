from __future__ import annotations

import logging
from typing import Any, Dict, List

from savepath.config import InferenceConfig
from savepath.engine import suggest_path
from savepath.models import StoragePath, Suggestion, TorrentDescriptor


def build_paths() -> List[StoragePath]:
    return [
        StoragePath(id=1, name="电影", path="/d/movies", is_default=False),
        StoragePath(id=2, name="剧集", path="/d/tv", is_default=True),
    ]


def test_site_category_selects_matching_path() -> None:
    torrent = TorrentDescriptor(name="Inception.2010.BluRay.2160p", category="电影")

    result = suggest_path(torrent, build_paths(), InferenceConfig())

    assert result == Suggestion(name="电影", path="/d/movies", is_default=False, id=1)
    assert result.original_path is None
    assert result.series_subfolder is None


def test_keyword_scoring_picks_series_path_without_category() -> None:
    torrent = TorrentDescriptor(name="Westworld.S03E01.1080p.WEB-DL")

    result = suggest_path(torrent, build_paths(), InferenceConfig())

    assert result is not None
    assert result.name == "剧集"
    assert result.path == "/d/tv"


def test_exact_category_wins_even_when_keyword_matching_disabled() -> None:
    paths = [
        StoragePath(id=1, name="TV", path="/t"),
        StoragePath(id=2, name="Movies", path="/m"),
    ]
    torrent = TorrentDescriptor(name="Some.Show.S01E01.720p", category="MOVIES")

    for match_by_keyword in (True, False):
        config = InferenceConfig(match_by_keyword=match_by_keyword)
        result = suggest_path(torrent, paths, config)
        assert result is not None
        assert result.name == "Movies"


def test_all_strategies_disabled_returns_none() -> None:
    config = InferenceConfig(
        match_by_category=False,
        match_by_keyword=False,
        fallback_to_default_path=False,
        use_downloader_default=False,
    )
    torrent = TorrentDescriptor(name="Westworld.S03E01.1080p", category="剧集")

    assert suggest_path(torrent, build_paths(), config) is None


def test_empty_path_list_returns_none() -> None:
    torrent = TorrentDescriptor(name="Westworld.S03E01.1080p")

    assert suggest_path(torrent, [], InferenceConfig()) is None
    assert suggest_path(torrent, None) is None


def test_repeated_calls_are_identical_and_inputs_untouched() -> None:
    paths = build_paths()
    snapshot = list(paths)
    torrent = TorrentDescriptor(name="The.OutCast.2016.S01.Complete.2160p")
    config = InferenceConfig(create_series_subfolder=True)

    first = suggest_path(torrent, paths, config)
    second = suggest_path(torrent, paths, config)

    assert first == second
    assert paths == snapshot
    assert paths[1].path == "/d/tv"


def test_series_subfolder_is_appended_for_season_release() -> None:
    paths = [StoragePath(id=7, name="剧集", path="/downloads/tv")]
    torrent = TorrentDescriptor(name="The.OutCast.2016.S01.Complete.2160p")

    result = suggest_path(torrent, paths, InferenceConfig(create_series_subfolder=True))

    assert result is not None
    assert result.path == "/downloads/tv/The OutCast 2016 S01"
    assert result.original_path == "/downloads/tv"
    assert result.series_subfolder == "The OutCast 2016 S01"
    assert result.to_dict() == {
        "name": "剧集",
        "path": "/downloads/tv/The OutCast 2016 S01",
        "is_default": False,
        "id": 7,
        "original_path": "/downloads/tv",
        "series_subfolder": "The OutCast 2016 S01",
    }


def test_series_subfolder_skipped_for_movies() -> None:
    torrent = TorrentDescriptor(name="Avatar.The.Way.of.Water.2022.2160p.BluRay.REMUX")

    result = suggest_path(torrent, build_paths(), InferenceConfig(create_series_subfolder=True))

    assert result == Suggestion(name="电影", path="/d/movies", is_default=False, id=1)
    assert "original_path" not in result.to_dict()


def test_default_path_fallback_prefers_flagged_entry() -> None:
    paths = [
        StoragePath(id=1, name="音乐", path="/m"),
        StoragePath(id=2, name="其他", path="/o"),
        StoragePath(id=3, name="Main", path="/main", is_default=True),
    ]

    result = suggest_path(TorrentDescriptor(name="random.file"), paths)

    assert result is not None
    assert result.name == "Main"


def test_default_path_fallback_by_name() -> None:
    paths = [
        StoragePath(id=1, name="音乐", path="/m"),
        StoragePath(id=2, name="Other", path="/o"),
    ]

    result = suggest_path(TorrentDescriptor(name="random.file"), paths)

    assert result is not None
    assert result.name == "Other"
    assert result.path == "/o"


def test_downloader_default_sentinel() -> None:
    paths = [StoragePath(id=1, name="音乐", path="/m")]
    config = InferenceConfig(create_series_subfolder=True)

    result = suggest_path(TorrentDescriptor(name="random.S01.file"), paths, config)

    assert result == Suggestion(name="downloader default", path="", is_default=False)
    assert result.series_subfolder is None

    config.use_downloader_default = False
    assert suggest_path(TorrentDescriptor(name="random.S01.file"), paths, config) is None


def test_empty_name_falls_through_to_default_path() -> None:
    paths = [
        StoragePath(id=1, name="电影", path="/m"),
        StoragePath(id=2, name="默认", path="/fallback"),
    ]

    result = suggest_path(TorrentDescriptor(name=""), paths)

    assert result is not None
    assert result.name == "默认"


def test_plain_mappings_are_accepted() -> None:
    torrent: Dict[str, Any] = {"title": "Westworld.S03E01.1080p", "category": None}
    paths = [
        {"id": 1, "name": "电影", "path": "/d/movies", "is_default": 0},
        {"id": 2, "name": "剧集", "path": "/d/tv", "is_default": 1},
    ]

    result = suggest_path(torrent, paths)

    assert result is not None
    assert result.name == "剧集"
    assert result.is_default is True


def test_trace_records_strategy_and_scores() -> None:
    trace: Dict[str, Any] = {}

    suggest_path(TorrentDescriptor(name="Westworld.S03E01.1080p.WEB-DL"), build_paths(), trace=trace)

    assert trace["strategy"] == "keyword"
    assert trace["result"]["name"] == "剧集"
    scores = {item["path"]: item["score"] for item in trace["scores"]}
    assert scores == {"电影": 10, "剧集": 33}


def test_injected_logger_receives_messages(caplog) -> None:
    logger = logging.getLogger("tests.savepath.injected")
    caplog.set_level(logging.DEBUG, logger="tests.savepath.injected")

    suggest_path(TorrentDescriptor(name="Westworld.S03E01.1080p"), build_paths(), logger=logger)

    messages = [record.getMessage() for record in caplog.records if record.name == logger.name]
    assert any("Keyword match" in message for message in messages)
    assert any("Strategy keyword" in message for message in messages)


def test_settings_mapping_is_accepted_as_config() -> None:
    torrent = {"name": "Westworld.S03E01.1080p", "category": None}
    paths = [{"id": 2, "name": "剧集", "path": "/t", "is_default": 0}]

    result = suggest_path(torrent, paths, {"create_series_subfolder": "true", "match_by_category": "false"})

    assert result is not None
    assert result.path == "/t/Westworld S03"
    assert result.series_subfolder == "Westworld S03"


def test_null_default_flag_counts_as_not_default() -> None:
    paths = [
        {"id": 1, "name": "电影", "path": "/m", "is_default": None},
        {"id": 2, "name": "Downloads", "path": "/dl", "is_default": True},
    ]

    result = suggest_path({"name": "Unknown.Release"}, paths)

    assert result is not None
    assert result.name == "Downloads"
    assert StoragePath.from_mapping(paths[0]).is_default is False
