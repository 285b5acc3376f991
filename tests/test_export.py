"""Tests for seed file serialization and atomic writes."""

import json

import pytest
import yaml

from pg_seedling.seeding.export import export_path, serialize_records, write_atomic

RECORDS = [{"name": "Zoë", "tags": ["a"], "profile": {"age": 30}}]


def test_json_serialization_is_pretty_and_unicode():
    text = serialize_records(RECORDS, "json")

    assert text.startswith("[\n  {")
    assert "Zoë" in text
    assert json.loads(text) == RECORDS


def test_yaml_serialization_preserves_key_order():
    text = serialize_records(RECORDS, "yaml")

    assert text.index("name") < text.index("tags") < text.index("profile")
    assert yaml.safe_load(text) == RECORDS


def test_unknown_format_is_rejected():
    with pytest.raises(ValueError, match="yaml, json"):
        serialize_records(RECORDS, "csv")


def test_export_path_uses_storage_name_and_extension(tmp_path):
    assert export_path(tmp_path, "order_items", "yaml") == tmp_path / "order_items.yaml"


def test_write_atomic_creates_directories_and_replaces(tmp_path):
    path = tmp_path / "db" / "seeds" / "users.json"

    write_atomic(path, "old")
    write_atomic(path, "new")

    assert path.read_text(encoding="utf-8") == "new"
    assert [p.name for p in path.parent.iterdir()] == ["users.json"]


def test_write_atomic_cleans_up_on_failure(tmp_path, monkeypatch):
    path = tmp_path / "users.json"

    def fail_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr("pg_seedling.seeding.export.os.replace", fail_replace)

    with pytest.raises(OSError, match="disk full"):
        write_atomic(path, "data")

    assert list(tmp_path.iterdir()) == []
