"""Serialize generated records to seed files."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Sequence

import yaml

EXPORT_FORMATS = ("yaml", "json")


def serialize_records(records: Sequence[Any], export_format: str) -> str:
    """Render records as a pretty-printed JSON array or its YAML equivalent."""
    if export_format == "json":
        return json.dumps(list(records), indent=2, ensure_ascii=False) + "\n"
    if export_format == "yaml":
        return yaml.safe_dump(
            list(records),
            sort_keys=False,
            allow_unicode=True,
            default_flow_style=False,
        )
    raise ValueError(f"Export format must be one of {', '.join(EXPORT_FORMATS)}")


def export_path(seeds_dir: Path, storage_name: str, export_format: str) -> Path:
    return Path(seeds_dir) / f"{storage_name}.{export_format}"


def write_atomic(path: Path, text: str) -> Path:
    """Write text through a sibling temp file so readers never see a partial file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(text)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    return path
