"""Tests for the damaged export demo."""

from __future__ import annotations

import json
from pathlib import Path


class TestDamagedExportDemo:
    def test_summary(self, tmp_path: Path) -> None:
        from demos.damaged_export_demo.run import run_demo

        summary = run_demo(output_dir=tmp_path)
        assert summary["project"] == "PLANT"
        assert summary["export_version"] == "19.12"
        assert summary["roots"] == ["Detached Scope", "Loop B", "Plant Expansion"]
        assert summary["outline"] == [
            "Detached Scope",
            "Loop B",
            "  Loop A",
            "Plant Expansion",
            "  Civil Works",
            "  Mechanical",
        ]
        assert summary["activities_under_root"] == ["A1000", "A2000"]
        assert summary["critical"] == ["A1000", "A2000"]
        assert summary["lag_hours"] == [0.0]
        assert summary["missing_table"] == "PROJECT"

    def test_summary_file_is_deterministic(self, tmp_path: Path) -> None:
        from demos.damaged_export_demo.run import run_demo

        run_demo(output_dir=tmp_path)
        first = (tmp_path / "damaged_export_summary.json").read_text()
        run_demo(output_dir=tmp_path)
        assert (tmp_path / "damaged_export_summary.json").read_text() == first
        assert json.loads(first)["demo"] == "damaged_export"
