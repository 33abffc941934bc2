from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .models import StoragePath, Suggestion, TorrentDescriptor
from .patterns import (
    EPISODE_PATTERN,
    FANSUB_PATTERN,
    OVA_PATTERN,
    RELEASE_FORMAT_PATTERN,
    SEASON_PATTERN,
    YEAR_PATTERN,
)
from .tables import (
    ANIME_LABELS,
    CATEGORY_ALIASES,
    DEFAULT_CATEGORY_KEYWORDS,
    DEFAULT_PATH_NAMES,
    DOWNLOADER_DEFAULT_NAME,
    MOVIE_LABELS,
    SERIES_TIE_BREAK_MARKERS,
    TV_LABELS,
)
from .utils import contains_any, text_matches

LOGGER = logging.getLogger(__name__)

CATEGORY_BONUS = 30
KEYWORD_BONUS = 10
SEASON_BONUS = 15
EPISODE_BONUS = 8
YEAR_BONUS = 5
RELEASE_FORMAT_BONUS = 3
ANIME_NAMING_BONUS = 8
ANIME_SEASON_BONUS = 12
PATH_NAME_BONUS = 15


@dataclass(slots=True)
class PathScore:
    path: StoragePath
    score: int = 0
    reasons: List[str] = field(default_factory=list)

    def add(self, points: int, reason: str) -> None:
        self.score += points
        self.reasons.append(f"+{points} {reason}")


def _matches_any_label(path_name: str, labels: Sequence[str]) -> bool:
    return any(text_matches(path_name, label) for label in labels)


def _alias_hits(alias: str, category: str) -> bool:
    # short latin aliases and site codes must stand alone: "ona" is not "international"
    if alias == category:
        return True
    if alias.isascii() and (alias.isdigit() or len(alias) <= 3):
        return re.search(rf"(?<![a-z0-9]){re.escape(alias)}(?![a-z0-9])", category) is not None
    return alias in category


def match_by_category(
    category: Optional[str],
    paths: Sequence[StoragePath],
    *,
    trace: Optional[Dict[str, Any]] = None,
    logger: Optional[logging.Logger] = None,
) -> Optional[StoragePath]:
    log = logger or LOGGER
    if not category:
        return None
    lowered = category.lower()

    for candidate in paths:
        if text_matches(candidate.name, lowered):
            log.debug("Category %r matched path %r directly", category, candidate.name)
            if trace is not None:
                trace["category"] = {"via": "direct", "path": candidate.name}
            return candidate

    for labels, aliases in CATEGORY_ALIASES:
        alias = next((alias for alias in aliases if _alias_hits(alias, lowered)), None)
        if alias is None:
            continue
        for candidate in paths:
            if _matches_any_label(candidate.name, labels):
                log.debug(
                    "Category %r matched path %r through alias %r (%s)",
                    category,
                    candidate.name,
                    alias,
                    labels[0],
                )
                if trace is not None:
                    trace["category"] = {
                        "via": "alias",
                        "alias": alias,
                        "bucket": labels[0],
                        "path": candidate.name,
                    }
                return candidate

    log.debug("No path matched category %r", category)
    if trace is not None:
        trace["category"] = None
    return None


def score_path(
    candidate: StoragePath,
    name: str,
    category: Optional[str],
    keyword_table: Mapping[str, Sequence[str]],
) -> PathScore:
    """Score one configured path against a lower-cased torrent name."""
    result = PathScore(path=candidate)
    path_name = candidate.name.lower()

    if category and text_matches(category, path_name):
        result.add(CATEGORY_BONUS, f"site category {category!r}")

    for table_category, keywords in keyword_table.items():
        if not text_matches(table_category, path_name):
            continue
        keyword = contains_any(name, (str(item).lower() for item in keywords))
        if keyword:
            result.add(KEYWORD_BONUS, f"keyword {keyword!r} ({table_category})")

    if _matches_any_label(path_name, TV_LABELS):
        if SEASON_PATTERN.search(name):
            result.add(SEASON_BONUS, "season marker")
        if EPISODE_PATTERN.search(name):
            result.add(EPISODE_BONUS, "episode marker")

    if _matches_any_label(path_name, MOVIE_LABELS):
        if YEAR_PATTERN.search(name):
            result.add(YEAR_BONUS, "release year")
        if RELEASE_FORMAT_PATTERN.search(name):
            result.add(RELEASE_FORMAT_BONUS, "release format")

    if _matches_any_label(path_name, ANIME_LABELS):
        if FANSUB_PATTERN.search(name) or OVA_PATTERN.search(name):
            result.add(ANIME_NAMING_BONUS, "fansub naming")
        if SEASON_PATTERN.search(name):
            result.add(ANIME_SEASON_BONUS, "anime season marker")

    if path_name and path_name in name:
        result.add(PATH_NAME_BONUS, "path name in title")

    return result


def _is_series_like(candidate: StoragePath) -> bool:
    lowered = candidate.name.lower()
    return any(marker in lowered for marker in SERIES_TIE_BREAK_MARKERS)


def match_by_keyword(
    torrent: TorrentDescriptor,
    paths: Sequence[StoragePath],
    category_map: Optional[Mapping[str, Sequence[str]]] = None,
    *,
    trace: Optional[Dict[str, Any]] = None,
    logger: Optional[logging.Logger] = None,
) -> Optional[StoragePath]:
    log = logger or LOGGER
    keyword_table = category_map if category_map else DEFAULT_CATEGORY_KEYWORDS
    name = (torrent.name or "").lower()

    scores = [score_path(candidate, name, torrent.category, keyword_table) for candidate in paths]
    if trace is not None:
        trace["scores"] = [
            {"path": item.path.name, "score": item.score, "reasons": list(item.reasons)}
            for item in scores
        ]
    if not scores:
        return None

    best_score = max(item.score for item in scores)
    if best_score <= 0:
        log.debug("No keyword match for %r", torrent.name)
        return None

    tied = [item for item in scores if item.score == best_score]
    best = next((item for item in tied if _is_series_like(item.path)), tied[0])
    log.debug(
        "Keyword match for %r: %s (score %d: %s)",
        torrent.name,
        best.path.name,
        best.score,
        ", ".join(best.reasons),
    )
    return best.path


def find_default_path(paths: Sequence[StoragePath]) -> Optional[StoragePath]:
    flagged = next((candidate for candidate in paths if candidate.is_default), None)
    if flagged is not None:
        return flagged
    return next(
        (candidate for candidate in paths if candidate.name.lower() in DEFAULT_PATH_NAMES),
        None,
    )


def downloader_default() -> Suggestion:
    return Suggestion(name=DOWNLOADER_DEFAULT_NAME, path="", is_default=False)
