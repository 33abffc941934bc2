from __future__ import annotations

import re
from typing import List, Optional

from .models import EpisodeInfo

SEASON_PATTERN = re.compile(r"S\d{1,2}(?!\d)|Season\s*\d{1,2}", re.IGNORECASE)
EPISODE_PATTERN = re.compile(r"EP\d{1,3}|E\d{1,3}|Episode", re.IGNORECASE)
YEAR_PATTERN = re.compile(r"(?<!\d)(?:19|20)\d{2}(?!\d)")
RELEASE_FORMAT_PATTERN = re.compile(r"bluray|bdrip|remux|hdtv", re.IGNORECASE)
FANSUB_PATTERN = re.compile(r"^\s*\[[^\]]+\].*\d{2}[vp]?\s*$", re.IGNORECASE)
OVA_PATTERN = re.compile(r"(?<![a-z])(?:ova|ona)(?![a-z])", re.IGNORECASE)

SERIES_PREFIX_PATTERN = re.compile(r"^(.+?)\s*(S\d{1,2}(?!\d)|Season\s*\d{1,2})", re.IGNORECASE)

_SXXEXX_PATTERN = re.compile(r"S(\d+)\s*E(\d+)(?:-\s*E?(\d+))?", re.IGNORECASE)
_BARE_EPISODE_PATTERN = re.compile(
    r"(?:^|[\s.\[(])EP?(\d+)(?:-\s*E?(\d+))?(?=$|[\s.\])])", re.IGNORECASE
)
_SEASON_TOKEN_PATTERN = re.compile(r"(?:^|[\s.\[(])(?:S|Season)[\s.]?(\d+)(?=$|[\s.\])])", re.IGNORECASE)
_CROSS_PATTERN = re.compile(r"(?<!\d)(\d{1,2})x(\d{2,3})(?!\d)", re.IGNORECASE)
_SEASON_PACK_PATTERN = re.compile(r"(?:^|[\s.\[(])(?:S|Season)[\s.]?(\d+)(?=[\s.\-\])]|$)", re.IGNORECASE)

_MAX_EPISODE_RANGE = 100


def has_season_identifier(title: Optional[str]) -> bool:
    return bool(title) and SEASON_PATTERN.search(title) is not None


def normalize_season_token(token: str) -> str:
    """Turn ``S1`` / ``Season 1`` into ``S01``."""
    digits = re.search(r"\d+", token)
    if digits is None:
        return token.upper()
    return f"S{int(digits.group(0)):02d}"


def _episode_range(start: int, end: Optional[int], *, bounded: bool) -> List[int]:
    if end is None:
        return [start]
    if end >= start and (not bounded or end - start < _MAX_EPISODE_RANGE):
        return list(range(start, end + 1))
    return [start, end]


def parse_episode(title: Optional[str]) -> Optional[EpisodeInfo]:
    """Extract season and episode numbers from a release title.

    Recognises ``S01E01`` (with ``-E03`` / ``-03`` ranges), standalone
    ``E01``/``EP01`` markers, ``1x01`` and season packs such as ``S01`` or
    ``Season 1``. Returns ``None`` when neither a season nor an episode is
    present.
    """
    if not title:
        return None

    season: Optional[int] = None
    episodes: List[int] = []

    match = _SXXEXX_PATTERN.search(title)
    if match:
        season = int(match.group(1))
        end = int(match.group(3)) if match.group(3) else None
        episodes = _episode_range(int(match.group(2)), end, bounded=True)
    else:
        bare = _BARE_EPISODE_PATTERN.search(title)
        if bare:
            season_match = _SEASON_TOKEN_PATTERN.search(title)
            if season_match:
                season = int(season_match.group(1))
            end = int(bare.group(2)) if bare.group(2) else None
            episodes = _episode_range(int(bare.group(1)), end, bounded=False)
        else:
            cross = _CROSS_PATTERN.search(title)
            if cross:
                season = int(cross.group(1))
                episodes = [int(cross.group(2))]
            else:
                pack = _SEASON_PACK_PATTERN.search(title)
                if pack:
                    season = int(pack.group(1))

    if season is None and not episodes:
        return None
    return EpisodeInfo(season=season, episodes=sorted(set(episodes)))
