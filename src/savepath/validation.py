from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

from jsonschema import Draft7Validator

from .utils import parse_bool


@dataclass(slots=True)
class ValidationIssue:
    """Represents a single validation problem."""

    severity: str
    path: str
    message: str
    code: str


@dataclass(slots=True)
class ValidationReport:
    """Aggregates validation warnings and errors."""

    errors: List[ValidationIssue] = field(default_factory=list)
    warnings: List[ValidationIssue] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


_BOOLEAN_SETTING = {"type": ["boolean", "string", "integer"]}

CONFIG_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "settings": {
            "type": ["object", "null"],
            "properties": {
                "match_by_category": _BOOLEAN_SETTING,
                "match_by_keyword": _BOOLEAN_SETTING,
                "fallback_to_default_path": _BOOLEAN_SETTING,
                "use_downloader_default": _BOOLEAN_SETTING,
                "create_series_subfolder": _BOOLEAN_SETTING,
                "category_map": {
                    "oneOf": [
                        {
                            "type": "object",
                            "additionalProperties": {
                                "type": "array",
                                "items": {"type": "string"},
                            },
                        },
                        {"type": "string"},
                        {"type": "null"},
                    ]
                },
            },
            "additionalProperties": True,
        },
        "download_paths": {
            "type": "array",
            "items": {"$ref": "#/definitions/download_path"},
        },
    },
    "required": ["download_paths"],
    "additionalProperties": True,
    "definitions": {
        "download_path": {
            "type": "object",
            "properties": {
                "id": {"type": ["integer", "string"]},
                "name": {"type": "string", "minLength": 1},
                "path": {"type": ["string", "null"]},
                "description": {"type": ["string", "null"]},
                "is_default": {"type": ["boolean", "integer", "string", "null"]},
            },
            "required": ["name"],
            "additionalProperties": True,
        },
    },
}


def _format_jsonschema_path(path: Sequence[Any]) -> str:
    if not path:
        return "<root>"
    tokens: List[str] = []
    for part in path:
        if isinstance(part, int):
            if tokens:
                tokens[-1] = f"{tokens[-1]}[{part}]"
            else:
                tokens.append(f"[{part}]")
        else:
            tokens.append(str(part))
    return ".".join(tokens) if tokens else "<root>"


def validate_config_data(data: Dict[str, Any]) -> ValidationReport:
    report = ValidationReport()
    validator = Draft7Validator(CONFIG_SCHEMA)

    for error in sorted(validator.iter_errors(data), key=lambda exc: _format_jsonschema_path(exc.absolute_path)):
        report.errors.append(
            ValidationIssue(
                severity="error",
                path=_format_jsonschema_path(error.absolute_path),
                message=error.message,
                code="schema",
            )
        )

    _validate_semantics(data, report)
    return report


def _validate_settings(settings: Dict[str, Any], report: ValidationReport) -> None:
    for key in (
        "match_by_category",
        "match_by_keyword",
        "fallback_to_default_path",
        "use_downloader_default",
        "create_series_subfolder",
    ):
        value = settings.get(key)
        if value is not None and parse_bool(value) is None:
            report.errors.append(
                ValidationIssue(
                    severity="error",
                    path=f"settings.{key}",
                    message=f"Cannot interpret {value!r} as a boolean",
                    code="boolean",
                )
            )

    category_map = settings.get("category_map")
    if isinstance(category_map, str) and category_map.strip():
        try:
            category_map = json.loads(category_map)
        except ValueError as exc:
            report.errors.append(
                ValidationIssue(
                    severity="error",
                    path="settings.category_map",
                    message=f"Invalid JSON: {exc}",
                    code="category-map-json",
                )
            )
            return
    if isinstance(category_map, dict):
        for category, keywords in category_map.items():
            if isinstance(keywords, list) and not any(str(item).strip() for item in keywords):
                report.warnings.append(
                    ValidationIssue(
                        severity="warning",
                        path=f"settings.category_map.{category}",
                        message="Category has no keywords and will never score",
                        code="empty-keywords",
                    )
                )


def _validate_semantics(data: Dict[str, Any], report: ValidationReport) -> None:
    settings = data.get("settings") or {}
    if isinstance(settings, dict):
        _validate_settings(settings, report)

    paths = data.get("download_paths") or []
    if not isinstance(paths, list):
        return

    seen_ids: Dict[Any, int] = {}
    default_indices: List[int] = []
    for index, entry in enumerate(paths):
        if not isinstance(entry, dict):
            continue
        path_id = entry.get("id")
        if isinstance(path_id, (int, str)):
            if path_id in seen_ids:
                report.errors.append(
                    ValidationIssue(
                        severity="error",
                        path=f"download_paths[{index}].id",
                        message=f"Duplicate path id {path_id!r} also defined at index {seen_ids[path_id]}",
                        code="duplicate-id",
                    )
                )
            else:
                seen_ids[path_id] = index
        if parse_bool(entry.get("is_default")):
            default_indices.append(index)
        raw_path = entry.get("path")
        if raw_path is None or (isinstance(raw_path, str) and not raw_path.strip()):
            report.warnings.append(
                ValidationIssue(
                    severity="warning",
                    path=f"download_paths[{index}].path",
                    message="Blank path; the download client's own default location will be used",
                    code="blank-path",
                )
            )

    if len(default_indices) > 1:
        report.warnings.append(
            ValidationIssue(
                severity="warning",
                path="download_paths",
                message=(
                    "Multiple paths are flagged is_default; only the first "
                    f"(index {default_indices[0]}) is used"
                ),
                code="multiple-defaults",
            )
        )


__all__ = ["ValidationIssue", "ValidationReport", "validate_config_data", "CONFIG_SCHEMA"]
