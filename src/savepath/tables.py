"""Static lookup tables used when inferring a storage path.

Everything here is read-only: mappings are ``MappingProxyType`` views and
values are tuples, so the tables can be shared between concurrent calls.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Tuple

TV = "剧集"
MOVIE = "电影"
ANIME = "动画"

# Built-in keyword table for the keyword scorer. A non-empty user
# ``category_map`` replaces it entirely.
DEFAULT_CATEGORY_KEYWORDS: Mapping[str, Tuple[str, ...]] = MappingProxyType(
    {
        MOVIE: ("movie", "film", "bluray", "bdrip", "webrip", "web-dl", "hdtv", "remux", "电影"),
        TV: (
            "s0", "s1", "s2", "s3", "s4", "s5",
            "season", "episode", "ep",
            "剧集", "美剧", "日剧", "韩剧", "国产剧",
        ),
        ANIME: ("anime", "animation", "动画", "番剧", "ova", "ona"),
        "音乐": ("music", "flac", "mp3", "aac", "wav", "ape", "album", "discography", "音乐", "专辑"),
        "纪录片": ("documentary", "docu", "nature", "bbc", "discovery", "纪录片"),
        "综艺": ("variety", "show", "reality", "综艺", "真人秀"),
        "软件": ("software", "app", "game", "crack", "keygen", "软件", "游戏"),
        "电子书": ("ebook", "epub", "mobi", "pdf", "azw3", "电子书", "书籍"),
    }
)


# Category aliases, scanned in declaration order. ``labels`` are the names a
# configured path has to match for the bucket to resolve to it.
CATEGORY_ALIASES: Tuple[Tuple[Tuple[str, ...], Tuple[str, ...]], ...] = (
    (
        (MOVIE, "movie"),
        (
            "电影", "movie", "movies", "film", "films", "bluray", "dvd", "uhd",
            "401", "402", "403", "404", "405",
        ),
    ),
    (
        (TV, "series", "tv"),
        (
            "剧集", "电视剧", "连续剧", "tv", "series", "tvshow", "tv show", "drama",
            "美剧", "日剧", "韩剧", "国产剧", "港剧", "台剧", "英剧", "episode",
            "411", "412", "413", "414", "415",
        ),
    ),
    (
        (ANIME, "anime"),
        ("动画", "动漫", "番剧", "anime", "animation", "cartoon", "ova", "ona", "421", "422", "423"),
    ),
    (
        ("音乐", "music"),
        ("音乐", "music", "audio", "album", "flac", "mp3", "ape", "演唱会", "concert", "mv", "431", "432", "433"),
    ),
    (
        ("纪录片", "documentary"),
        ("纪录片", "纪录", "documentary", "docu", "nature", "bbc", "discovery", "451", "452"),
    ),
    (
        ("综艺", "variety"),
        ("综艺", "真人秀", "variety", "reality", "tv show", "441", "442"),
    ),
    (
        ("软件", "游戏", "software", "game"),
        (
            "软件", "游戏", "software", "application", "program", "game", "games", "gaming",
            "461", "462", "471", "472",
        ),
    ),
    (
        ("电子书", "ebook"),
        ("电子书", "书籍", "ebook", "e-book", "book", "books", "epub", "学习", "education", "491", "492"),
    ),
)


# Names a path must match before the structural (regex) bonuses apply.
TV_LABELS: Tuple[str, ...] = (TV, "series", "tv")
MOVIE_LABELS: Tuple[str, ...] = (MOVIE, "movie", "film")
ANIME_LABELS: Tuple[str, ...] = (ANIME, "anime")

# Preferred when several paths share the best keyword score.
SERIES_TIE_BREAK_MARKERS: Tuple[str, ...] = ("剧集", "series")

DEFAULT_PATH_NAMES: Tuple[str, ...] = ("其他", "默认", "default", "other")

DOWNLOADER_DEFAULT_NAME = "downloader default"
