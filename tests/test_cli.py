"""Subprocess tests for scripts/compile_uniprops.py and scripts/uniprops_query.py."""
from __future__ import annotations

import json
import subprocess
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
COMPILE_SCRIPT = ROOT / "scripts" / "compile_uniprops.py"
QUERY_SCRIPT = ROOT / "scripts" / "uniprops_query.py"
EXCERPT = ROOT / "tests" / "fixtures" / "UnicodeData_excerpt.txt"


def _run(script: Path, *args: str) -> subprocess.CompletedProcess[str]:
    return subprocess.run(
        [sys.executable, str(script), *args],
        cwd=str(ROOT),
        capture_output=True,
        text=True,
        check=False,
    )


def _compile(out: Path, *extra: str) -> subprocess.CompletedProcess[str]:
    return _run(COMPILE_SCRIPT, "--input", str(EXCERPT), "--output", str(out), *extra)


def _query(tables: Path, *chars: str) -> list[dict[str, object]]:
    proc = _run(QUERY_SCRIPT, "--tables", str(tables), *chars)
    assert proc.returncode == 0, proc.stdout + proc.stderr
    return json.loads(proc.stdout)


# ── compile_uniprops.py ─────────────────────────────────────────────


class TestCompileCli:
    def test_compile_summary(self, tmp_path: Path) -> None:
        out = tmp_path / "tables.json"
        proc = _compile(out)
        assert proc.returncode == 0, proc.stdout + proc.stderr
        summary = json.loads(proc.stdout)
        assert summary["status"] == "ok"
        assert summary["records_total"] == 190
        assert summary["records_included"] == 190
        assert summary["table_stats"]["categories"]["labels"] == 12
        assert summary["table_stats"]["digits"]["ranges"] == 10
        assert out.exists()
        assert (tmp_path / "tables.manifest.json").exists()
        assert "Wrote tables artifact" in proc.stderr

    def test_exclude_codepoints(self, tmp_path: Path) -> None:
        out = tmp_path / "tables.json"
        proc = _compile(out, "--exclude-codepoints", "0038,0660..0669")
        assert proc.returncode == 0, proc.stdout + proc.stderr
        assert json.loads(proc.stdout)["records_included"] == 179
        rows = _query(out, "8", "7", "U+0663")
        assert rows == [
            {"codepoint": "U+0038", "category": None, "digit_value": None},
            {"codepoint": "U+0037", "category": "Nd", "digit_value": 7},
            {"codepoint": "U+0663", "category": None, "digit_value": None},
        ]

    def test_exclude_inside_bracketed_range(self, tmp_path: Path) -> None:
        out = tmp_path / "tables.json"
        proc = _compile(out, "--exclude-codepoints", "5B57,AC00..AC01")
        assert proc.returncode == 0, proc.stdout + proc.stderr
        rows = _query(out, "U+5B56", "U+5B57", "U+5B58", "U+AC01", "U+AC02")
        assert [row["category"] for row in rows] == ["Lo", None, "Lo", None, "Lo"]

    def test_compare_with_previous_build(self, tmp_path: Path) -> None:
        first = tmp_path / "full" / "tables.json"
        proc = _compile(first)
        assert proc.returncode == 0, proc.stdout + proc.stderr
        first_run = json.loads(proc.stdout)["run_id"]

        second = tmp_path / "trimmed" / "tables.json"
        proc = _compile(
            second,
            "--exclude-codepoints", "0038",
            "--compare-with", str(tmp_path / "full" / "tables.manifest.json"),
        )
        assert proc.returncode == 0, proc.stdout + proc.stderr
        comparison = json.loads(proc.stdout)["comparison"]
        assert comparison["previous_run_id"] == first_run
        assert comparison["source_changed"] is False
        assert comparison["records_included_delta"] == -1
        assert comparison["table_stat_delta"]["digits.digits"] == -1
        assert comparison["table_stat_delta"]["digits.ranges"] == 1

    def test_compare_with_missing_manifest(self, tmp_path: Path) -> None:
        out = tmp_path / "tables.json"
        proc = _compile(out, "--compare-with", str(tmp_path / "absent.manifest.json"))
        assert proc.returncode == 2
        assert "Manifest not found" in proc.stderr
        assert not out.exists()

    def test_category_filter(self, tmp_path: Path) -> None:
        out = tmp_path / "tables.json"
        proc = _compile(out, "--categories", "Nd")
        assert proc.returncode == 0, proc.stdout + proc.stderr
        rows = _query(out, "A", "U+1D7E1")
        assert rows[0]["category"] is None
        assert rows[1] == {"codepoint": "U+1D7E1", "category": "Nd", "digit_value": 9}

    def test_no_digits(self, tmp_path: Path) -> None:
        out = tmp_path / "tables.json"
        proc = _compile(out, "--no-digits")
        assert proc.returncode == 0, proc.stdout + proc.stderr
        assert json.loads(proc.stdout)["table_stats"]["digits"] is None
        assert _query(out, "5") == [{"codepoint": "U+0035", "category": "Nd", "digit_value": None}]

    def test_missing_input(self, tmp_path: Path) -> None:
        proc = _run(
            COMPILE_SCRIPT,
            "--input", str(tmp_path / "absent.txt"),
            "--output", str(tmp_path / "tables.json"),
        )
        assert proc.returncode == 2
        assert "Input not found" in proc.stderr

    def test_malformed_input(self, tmp_path: Path) -> None:
        src = tmp_path / "UnicodeData.txt"
        src.write_text("0041;LATIN CAPITAL LETTER A;Lu\n", encoding="utf-8")
        proc = _run(COMPILE_SCRIPT, "--input", str(src), "--output", str(tmp_path / "t.json"))
        assert proc.returncode == 1
        assert "line 1" in proc.stderr
        assert not (tmp_path / "t.json").exists()

    def test_consistency_failure(self, tmp_path: Path) -> None:
        src = tmp_path / "UnicodeData.txt"
        src.write_text("0030;DIGIT ZERO;Nd;0;EN;;;0;0;N;;;;;\n", encoding="utf-8")
        out = tmp_path / "t.json"
        proc = _run(COMPILE_SCRIPT, "--input", str(src), "--output", str(out))
        assert proc.returncode == 1
        assert "Consistency check failed" in proc.stderr

        proc = _run(COMPILE_SCRIPT, "--input", str(src), "--output", str(out), "--no-verify")
        assert proc.returncode == 0, proc.stdout + proc.stderr

    def test_reversed_exclusion_range(self, tmp_path: Path) -> None:
        proc = _compile(tmp_path / "t.json", "--exclude-codepoints", "0669..0660")
        assert proc.returncode == 2
        assert "--exclude-codepoints" in proc.stderr


# ── uniprops_query.py ───────────────────────────────────────────────


class TestQueryCli:
    @pytest.fixture()
    def tables(self, tmp_path: Path) -> Path:
        out = tmp_path / "tables.json"
        proc = _compile(out)
        assert proc.returncode == 0, proc.stdout + proc.stderr
        return out

    def test_lookup_rows(self, tables: Path) -> None:
        rows = _query(tables, "A", "0xFF10", "U+FF0F", "U+110000")
        assert rows == [
            {"codepoint": "U+0041", "category": "Lu", "digit_value": None},
            {"codepoint": "U+FF10", "category": "Nd", "digit_value": 0},
            {"codepoint": "U+FF0F", "category": "Po", "digit_value": None},
            {"codepoint": "U+110000", "category": None, "digit_value": None},
        ]

    def test_missing_tables(self, tmp_path: Path) -> None:
        proc = _run(QUERY_SCRIPT, "--tables", str(tmp_path / "absent.json"), "A")
        assert proc.returncode == 2

    def test_corrupt_tables(self, tmp_path: Path) -> None:
        bad = tmp_path / "bad.json"
        bad.write_text('{"format": "other"}', encoding="utf-8")
        proc = _run(QUERY_SCRIPT, "--tables", str(bad), "A")
        assert proc.returncode == 1
        assert "unknown artifact format" in proc.stderr

    def test_bad_char_argument(self, tables: Path) -> None:
        proc = _run(QUERY_SCRIPT, "--tables", str(tables), "AB")
        assert proc.returncode == 2
        assert "expected one character" in proc.stderr
