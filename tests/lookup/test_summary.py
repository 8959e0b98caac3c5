"""Tests for altlang.lookup.summary."""

from __future__ import annotations

import json
from pathlib import Path

from altlang.lookup.summary import CoverageAccumulator, write_summary


def test_accumulator_counts_listings_and_found_alternatives() -> None:
    accumulator = CoverageAccumulator()
    accumulator.start_listing("console", ["js", "csharp"])
    accumulator.record("console", "js", True)
    accumulator.record("console", "csharp", False)
    accumulator.start_listing("console", ["js", "csharp"])
    accumulator.record("console", "js", True)
    accumulator.record("console", "csharp", True)

    assert accumulator.total("console") == 2
    assert accumulator.found("console", "js") == 2
    assert accumulator.found("console", "csharp") == 1
    assert accumulator.as_dict() == {
        "console": {
            "total": 2,
            "alternatives": {"js": {"found": 2}, "csharp": {"found": 1}},
        }
    }


def test_alternatives_with_no_hits_are_still_listed() -> None:
    accumulator = CoverageAccumulator()
    accumulator.start_listing("console", ["js"])
    accumulator.record("console", "js", False)
    assert accumulator.as_dict() == {"console": {"total": 1, "alternatives": {"js": {"found": 0}}}}


def test_unknown_languages_report_zero() -> None:
    accumulator = CoverageAccumulator()
    assert not accumulator
    assert accumulator.total("console") == 0
    assert accumulator.found("console", "js") == 0


def test_write_summary_emits_json(tmp_path: Path) -> None:
    accumulator = CoverageAccumulator()
    accumulator.start_listing("console", ["js"])
    accumulator.record("console", "js", True)
    target = tmp_path / "build" / "summary.json"

    assert write_summary(target, accumulator) is True

    assert json.loads(target.read_text(encoding="utf-8")) == {
        "console": {"total": 1, "alternatives": {"js": {"found": 1}}}
    }


def test_write_summary_skips_empty_accumulator(tmp_path: Path) -> None:
    target = tmp_path / "summary.json"
    assert write_summary(target, CoverageAccumulator()) is False
    assert not target.exists()
