from __future__ import annotations

import dataclasses
import logging
import re
from typing import Optional

from .models import Suggestion
from .patterns import SERIES_PREFIX_PATTERN, has_season_identifier, normalize_season_token

LOGGER = logging.getLogger(__name__)

MAX_SUBFOLDER_LENGTH = 100
MIN_SUBFOLDER_LENGTH = 3

_ILLEGAL_CHARACTERS = re.compile(r'[<>:"/\\|?*]')
_SEPARATORS = re.compile(r"[\s._]+")
_TOKEN_SPLIT = re.compile(r"[\s._\-\[\]()【】]+")

_NOISE_PATTERNS = (
    re.compile(r"\[[^\]]*\]|【[^】]*】"),
    re.compile(r"\b(?:x26[45]|h\.?26[45]|hevc|avc|av1|xvid|divx)\b", re.IGNORECASE),
    re.compile(r"\b(?:2160p|1080[pi]|720p|576p|480p|4k|8k|uhd)\b", re.IGNORECASE),
    re.compile(
        r"\b(?:aac(?:2\.0)?|ac3|e-?ac-?3|ddp?(?:\.?[257]\.[01])?|dts(?:-hd(?:\.ma)?|-x)?|truehd|atmos|flac|opus|mp3)\b",
        re.IGNORECASE,
    ),
    re.compile(r"\b(?:19|20)\d{2}\b"),
    re.compile(
        r"\b(?:web-?dl|webrip|web|bluray|blu-ray|bdrip|brrip|remux|hdtv|dvdrip|hdrip|hdr10\+?|hdr|dv|sdr|complete|proper|repack)\b",
        re.IGNORECASE,
    ),
    re.compile(r"-[A-Za-z0-9]+$"),
)


def _clean_words(value: str) -> str:
    return _SEPARATORS.sub(" ", value).strip(" -")


def _strip_noise(title: str) -> str:
    result = title
    for pattern in _NOISE_PATTERNS:
        result = pattern.sub(" ", result)
    return _clean_words(result)


def extract_series_name(title: str) -> str:
    """Best-effort series name, keeping a normalised ``Sxx`` suffix."""
    match = SERIES_PREFIX_PATTERN.match(title)
    if match:
        prefix = _clean_words(match.group(1))
        season = normalize_season_token(match.group(2))
        if prefix:
            return f"{prefix} {season}"
        return season
    return _strip_noise(title)


def sanitize_subfolder_name(name: str, title: str) -> str:
    cleaned = _SEPARATORS.sub(" ", _ILLEGAL_CHARACTERS.sub("", name)).strip()
    if len(cleaned) < MIN_SUBFOLDER_LENGTH:
        tokens = [token for token in _TOKEN_SPLIT.split(title) if token][:3]
        cleaned = _SEPARATORS.sub(" ", _ILLEGAL_CHARACTERS.sub("", " ".join(tokens))).strip()
    return cleaned[:MAX_SUBFOLDER_LENGTH].strip()


def join_subfolder(base: str, subfolder: str) -> str:
    separator = "\\" if "\\" in base else "/"
    return base.rstrip("/\\") + separator + subfolder


def apply_series_subfolder(
    suggestion: Suggestion,
    title: Optional[str],
    *,
    enabled: bool,
    logger: Optional[logging.Logger] = None,
) -> Suggestion:
    """Append a per-series directory to ``suggestion.path`` when applicable.

    The input is returned untouched unless the feature is enabled, the
    suggestion carries a concrete path and the title contains a season marker.
    """
    log = logger or LOGGER
    if not enabled or not suggestion.path or not has_season_identifier(title):
        return suggestion

    subfolder = sanitize_subfolder_name(extract_series_name(title), title)
    if not subfolder:
        log.debug("Could not derive a series folder from %r", title)
        return suggestion

    new_path = join_subfolder(suggestion.path, subfolder)
    log.debug("Series subfolder for %r: %s", title, new_path)
    return dataclasses.replace(
        suggestion,
        path=new_path,
        original_path=suggestion.path,
        series_subfolder=subfolder,
    )
