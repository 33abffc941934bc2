from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from .config import InferenceConfig
from .matcher import downloader_default, find_default_path, match_by_category, match_by_keyword
from .models import StoragePath, Suggestion, TorrentDescriptor
from .subfolder import apply_series_subfolder

LOGGER = logging.getLogger(__name__)

TorrentLike = Union[TorrentDescriptor, Mapping[str, Any]]
PathLike = Union[StoragePath, Mapping[str, Any]]
ConfigLike = Union[InferenceConfig, Mapping[str, Any]]


def _coerce_torrent(torrent: TorrentLike) -> TorrentDescriptor:
    if isinstance(torrent, TorrentDescriptor):
        return torrent
    return TorrentDescriptor.from_mapping(torrent)


def _coerce_paths(paths: Optional[Iterable[PathLike]]) -> List[StoragePath]:
    if not paths:
        return []
    return [item if isinstance(item, StoragePath) else StoragePath.from_mapping(item) for item in paths]


def _coerce_config(config: Optional[ConfigLike]) -> InferenceConfig:
    if config is None:
        return InferenceConfig()
    if isinstance(config, InferenceConfig):
        return config
    return InferenceConfig.from_settings(config)


def suggest_path(
    torrent: TorrentLike,
    paths: Optional[Iterable[PathLike]],
    config: Optional[ConfigLike] = None,
    *,
    logger: Optional[logging.Logger] = None,
    trace: Optional[Dict[str, Any]] = None,
) -> Optional[Suggestion]:
    """Suggest where ``torrent`` should be saved.

    Strategies run in order (site category, keyword scoring, default path,
    downloader default) and the first hit is passed through the series
    subfolder step. ``None`` means every enabled strategy came up empty and
    the caller should ask the user.
    """
    log = logger or LOGGER
    settings = _coerce_config(config)
    descriptor = _coerce_torrent(torrent)
    candidates = _coerce_paths(paths)

    if trace is not None:
        trace["torrent"] = {"name": descriptor.name, "category": descriptor.category}
        trace["strategy"] = None

    if not candidates:
        log.debug("No download paths configured; nothing to suggest for %r", descriptor.name)
        return None

    log.debug(
        "Suggesting path for %r (category=%r) among %s",
        descriptor.name,
        descriptor.category,
        ", ".join(candidate.name for candidate in candidates),
    )

    chosen: Optional[Suggestion] = None
    strategy: Optional[str] = None

    if settings.match_by_category and descriptor.category:
        matched = match_by_category(descriptor.category, candidates, trace=trace, logger=log)
        if matched is not None:
            chosen, strategy = Suggestion.from_storage_path(matched), "category"

    if chosen is None and settings.match_by_keyword:
        matched = match_by_keyword(descriptor, candidates, settings.category_map, trace=trace, logger=log)
        if matched is not None:
            chosen, strategy = Suggestion.from_storage_path(matched), "keyword"

    if chosen is None and settings.fallback_to_default_path:
        matched = find_default_path(candidates)
        if matched is not None:
            chosen, strategy = Suggestion.from_storage_path(matched), "default_path"

    if chosen is None and settings.use_downloader_default:
        chosen, strategy = downloader_default(), "downloader_default"

    if chosen is None:
        log.info("No path suggested for %r; all strategies exhausted", descriptor.name)
        return None

    log.debug("Strategy %s chose %r for %r", strategy, chosen.name, descriptor.name)
    result = apply_series_subfolder(chosen, descriptor.name, enabled=settings.create_series_subfolder, logger=log)
    if trace is not None:
        trace["strategy"] = strategy
        trace["result"] = result.to_dict()
    return result
