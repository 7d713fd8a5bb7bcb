"""Build manifests: a JSON sidecar recording how a tables artifact was made.

A manifest names the source file by path and SHA-256, the table stats, the
phase timings and the checkout revision. ``compare_manifests`` reports what
changed between two builds.
"""
from __future__ import annotations

import secrets
import subprocess
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from uniprops.io_utils import load_json, save_json

MANIFEST_VERSION = "1.0"
MANIFEST_SUFFIX = ".manifest.json"


def generate_run_id(source_sha256: str | None = None, *, started: datetime | None = None) -> str:
    """``ucd-<digest8>-<YYYYmmddTHHMMSS>-<nonce>``; in-memory builds use ``mem`` for the digest."""
    digest = source_sha256[:8] if source_sha256 else "mem"
    stamp = (started or datetime.now(UTC)).strftime("%Y%m%dT%H%M%S")
    return f"ucd-{digest}-{stamp}-{secrets.token_hex(3)}"


def manifest_path_for_artifact(artifact_path: Path) -> Path:
    """Return the sidecar manifest path for a tables artifact."""
    return artifact_path.with_name(artifact_path.stem + MANIFEST_SUFFIX)


def checkout_revision(where: Path | None = None) -> str | None:
    """``git describe --always --dirty`` for the checkout holding ``where``.

    Defaults to this package's own directory. None outside a git checkout
    or without a git binary.
    """
    where = where or Path(__file__).resolve().parent
    if where.is_file():
        where = where.parent
    try:
        out = subprocess.check_output(
            ["git", "describe", "--always", "--dirty", "--abbrev=12"],
            cwd=str(where),
            stderr=subprocess.DEVNULL,
            text=True,
        )
    except (OSError, subprocess.CalledProcessError):
        return None
    return out.strip() or None


def build_manifest(
    *,
    run_id: str,
    artifact_path: Path | None,
    input_source: dict[str, Any],
    table_stats: dict[str, Any],
    timings_sec: dict[str, float],
    revision: str | None = None,
    created_at: datetime | None = None,
    notes: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Build canonical manifest payload for one compile pass."""
    created = (created_at or datetime.now(UTC)).replace(microsecond=0)
    return {
        "manifest_version": MANIFEST_VERSION,
        "created_at": created.isoformat(),
        "run_id": run_id,
        "artifact_path": str(artifact_path) if artifact_path is not None else None,
        "revision": revision,
        "input_source": input_source,
        "table_stats": table_stats,
        "timings_sec": timings_sec,
        "notes": notes or {},
    }


def write_manifest(artifact_path: Path, manifest: dict[str, Any]) -> Path:
    """Write the manifest next to its artifact."""
    path = manifest_path_for_artifact(artifact_path)
    save_json(manifest, path, pretty=True)
    return path


def load_manifest(path: Path) -> dict[str, Any]:
    """Load a manifest from JSON."""
    data = load_json(path)
    if not isinstance(data, dict):
        raise ValueError(f"Invalid manifest payload in {path}")
    return data


def _section(payload: dict[str, Any], *keys: str) -> dict[str, Any]:
    node: Any = payload
    for key in keys:
        node = node.get(key) if isinstance(node, dict) else None
    return node if isinstance(node, dict) else {}


def compare_manifests(
    current: dict[str, Any],
    previous: dict[str, Any],
) -> dict[str, Any]:
    """Compare two manifest payloads and produce deterministic deltas."""
    curr_src = _section(current, "input_source")
    prev_src = _section(previous, "input_source")

    stat_delta: dict[str, int] = {}
    for table, key in (
        ("categories", "labels"),
        ("categories", "unique_blocks"),
        ("digits", "ranges"),
        ("digits", "digits"),
    ):
        curr_val = int(_section(current, "table_stats", table).get(key, 0) or 0)
        prev_val = int(_section(previous, "table_stats", table).get(key, 0) or 0)
        stat_delta[f"{table}.{key}"] = curr_val - prev_val

    curr_records = int(curr_src.get("records_included", 0) or 0)
    prev_records = int(prev_src.get("records_included", 0) or 0)

    return {
        "current_run_id": current.get("run_id"),
        "previous_run_id": previous.get("run_id"),
        "source_changed": curr_src.get("sha256") != prev_src.get("sha256"),
        "records_included_delta": curr_records - prev_records,
        "table_stat_delta": stat_delta,
    }
