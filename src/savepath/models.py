from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from .utils import coerce_bool


@dataclass(slots=True, frozen=True)
class TorrentDescriptor:
    name: str
    category: Optional[str] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "TorrentDescriptor":
        name = data.get("name")
        if name is None:
            name = data.get("title")
        if name is None:
            raise ValueError("Torrent entries must define a 'name' or 'title'")
        category = data.get("category")
        return cls(name=str(name), category=str(category) if category not in (None, "") else None)


@dataclass(slots=True, frozen=True)
class StoragePath:
    id: Any
    name: str
    path: str
    is_default: bool = False
    description: Optional[str] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "StoragePath":
        if "name" not in data or data["name"] is None:
            raise ValueError(f"Download path entry {data.get('id')!r} is missing a 'name'")
        raw_path = data.get("path")
        raw_default = data.get("is_default")
        return cls(
            id=data.get("id"),
            name=str(data["name"]),
            path="" if raw_path is None else str(raw_path),
            is_default=False if raw_default is None else coerce_bool(raw_default, field_name="is_default"),
            description=data.get("description"),
        )


@dataclass(slots=True, frozen=True)
class Suggestion:
    """Where a torrent should be saved.

    ``original_path`` and ``series_subfolder`` are only set when a series
    subfolder was appended to ``path``.
    """

    name: str
    path: str
    is_default: bool = False
    id: Any = None
    original_path: Optional[str] = None
    series_subfolder: Optional[str] = None

    @classmethod
    def from_storage_path(cls, storage_path: StoragePath) -> "Suggestion":
        return cls(
            name=storage_path.name,
            path=storage_path.path,
            is_default=storage_path.is_default,
            id=storage_path.id,
        )

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "name": self.name,
            "path": self.path,
            "is_default": self.is_default,
        }
        if self.id is not None:
            payload["id"] = self.id
        if self.original_path is not None:
            payload["original_path"] = self.original_path
        if self.series_subfolder is not None:
            payload["series_subfolder"] = self.series_subfolder
        return payload


@dataclass(slots=True)
class EpisodeInfo:
    season: Optional[int] = None
    episodes: List[int] = field(default_factory=list)

    @property
    def is_season_pack(self) -> bool:
        return self.season is not None and not self.episodes
