from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .models import StoragePath
from .utils import coerce_bool, load_yaml_file


@dataclass(slots=True)
class InferenceConfig:
    match_by_category: bool = True
    match_by_keyword: bool = True
    fallback_to_default_path: bool = True
    use_downloader_default: bool = True
    category_map: Optional[Mapping[str, Tuple[str, ...]]] = None
    create_series_subfolder: bool = False

    @classmethod
    def from_settings(cls, data: Optional[Mapping[str, Any]]) -> "InferenceConfig":
        """Build a config from a settings mapping.

        Values may come straight from the key/value settings table, where
        booleans are stored as ``"true"``/``"false"`` and ``category_map`` is
        a JSON document.
        """
        if not data:
            return cls()
        defaults = cls()
        return cls(
            match_by_category=_bool_setting(data, "match_by_category", defaults.match_by_category),
            match_by_keyword=_bool_setting(data, "match_by_keyword", defaults.match_by_keyword),
            fallback_to_default_path=_bool_setting(
                data, "fallback_to_default_path", defaults.fallback_to_default_path
            ),
            use_downloader_default=_bool_setting(
                data, "use_downloader_default", defaults.use_downloader_default
            ),
            category_map=build_category_map(data.get("category_map")),
            create_series_subfolder=_bool_setting(
                data, "create_series_subfolder", defaults.create_series_subfolder
            ),
        )


@dataclass(slots=True)
class AppConfig:
    inference: InferenceConfig = field(default_factory=InferenceConfig)
    paths: List[StoragePath] = field(default_factory=list)


def _bool_setting(data: Mapping[str, Any], key: str, default: bool) -> bool:
    value = data.get(key)
    if value is None:
        return default
    return coerce_bool(value, field_name=f"settings.{key}")


def build_category_map(value: Any) -> Optional[Mapping[str, Tuple[str, ...]]]:
    if value is None:
        return None
    if isinstance(value, str):
        if not value.strip():
            return None
        try:
            value = json.loads(value)
        except ValueError as exc:
            raise ValueError(f"'settings.category_map' is not valid JSON: {exc}") from exc
    if not isinstance(value, Mapping):
        raise ValueError("'settings.category_map' must be a mapping of category -> keyword list")

    result: Dict[str, Tuple[str, ...]] = {}
    for category, keywords in value.items():
        if isinstance(keywords, str):
            keywords = [keywords]
        if not isinstance(keywords, (list, tuple)):
            raise ValueError(f"'settings.category_map[{category}]' must be a list of keywords")
        cleaned = tuple(str(keyword).strip() for keyword in keywords if str(keyword).strip())
        result[str(category)] = cleaned
    if not result:
        return None
    return MappingProxyType(result)


def _build_paths(entries: Any) -> List[StoragePath]:
    if entries is None:
        return []
    if not isinstance(entries, list):
        raise ValueError("'download_paths' must be provided as a list")
    paths: List[StoragePath] = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise ValueError(f"'download_paths[{index}]' must be a mapping")
        if entry.get("id") is None:
            entry = {**entry, "id": index + 1}
        paths.append(StoragePath.from_mapping(entry))
    return paths


def load_config(path: Path) -> AppConfig:
    data = load_yaml_file(path)
    settings = data.get("settings", {}) or {}
    if not isinstance(settings, dict):
        raise ValueError("'settings' must be provided as a mapping when specified")
    return AppConfig(
        inference=InferenceConfig.from_settings(settings),
        paths=_build_paths(data.get("download_paths")),
    )
