from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml


_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


def text_matches(candidate: Optional[str], target: Optional[str]) -> bool:
    """Case-insensitive equality or containment in either direction.

    Blank values never match, otherwise an empty name would be contained in
    every string.
    """
    if not candidate or not target:
        return False
    left = candidate.lower()
    right = target.lower()
    return left == right or right in left or left in right


def contains_any(haystack: str, needles) -> Optional[str]:
    """Return the first non-empty needle found in ``haystack``."""
    for needle in needles:
        if needle and needle in haystack:
            return needle
    return None


def parse_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if value is None:
        return None
    if isinstance(value, (int, float)):
        return bool(value)
    lowered = str(value).strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    return None


def coerce_bool(value: Any, *, field_name: str) -> bool:
    parsed = parse_bool(value)
    if parsed is None:
        raise ValueError(f"'{field_name}' must be a boolean, got {value!r}")
    return parsed


def expand_env(value: Any) -> Any:
    if isinstance(value, str):
        return os.path.expandvars(value)
    if isinstance(value, list):
        return [expand_env(item) for item in value]
    if isinstance(value, dict):
        return {key: expand_env(val) for key, val in value.items()}
    return value


def load_yaml_file(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a mapping at the top level")
    return expand_env(data)
