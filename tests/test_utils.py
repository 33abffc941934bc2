from __future__ import annotations

import pytest

from savepath.utils import coerce_bool, contains_any, load_yaml_file, parse_bool, text_matches


def test_text_matches_equality_and_containment() -> None:
    assert text_matches("Movies", "movies")
    assert text_matches("Movies HD", "movies")
    assert text_matches("剧集", "美剧/剧集")
    assert not text_matches("电影", "剧集")


def test_text_matches_ignores_blank_values() -> None:
    assert not text_matches("", "movies")
    assert not text_matches("movies", None)


def test_contains_any_returns_first_hit() -> None:
    assert contains_any("show.s01e01", ["", "season", "s0", "s01"]) == "s0"
    assert contains_any("show", []) is None


@pytest.mark.parametrize(
    ("value", "expected"),
    [(True, True), ("TRUE", True), ("yes", True), (1, True), ("0", False), ("off", False), ("", False), ("maybe", None), (None, None)],
)
def test_parse_bool(value, expected) -> None:
    assert parse_bool(value) is expected


def test_coerce_bool_rejects_garbage() -> None:
    with pytest.raises(ValueError, match="is_default"):
        coerce_bool("sometimes", field_name="is_default")


def test_load_yaml_file_expands_environment(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("SAVEPATH_ROOT", "/mnt/pool")
    path = tmp_path / "config.yaml"
    path.write_text("root: ${SAVEPATH_ROOT}/downloads\nitems: [\"${SAVEPATH_ROOT}\"]\n", encoding="utf-8")

    assert load_yaml_file(path) == {"root": "/mnt/pool/downloads", "items": ["/mnt/pool"]}


def test_load_yaml_file_requires_mapping(tmp_path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("- one\n- two\n", encoding="utf-8")

    with pytest.raises(ValueError, match="mapping"):
        load_yaml_file(path)
