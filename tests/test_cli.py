"""Tests for the sheetdiff command line."""

from __future__ import annotations

import json
import os
import sys
from collections.abc import Iterator

import pytest

from conftest import GOLDEN_DIR
from sheetdiff.__main__ import main, parse_spreadsheet_id
from sheetdiff.config import get_settings


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in list(os.environ):
        if name.upper().startswith("SHEETDIFF_"):
            monkeypatch.delenv(name)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def _run(monkeypatch: pytest.MonkeyPatch, *args: str) -> int:
    monkeypatch.setattr(sys, "argv", ["sheetdiff", *args])
    return main()


class TestParseSpreadsheetId:
    def test_plain_id(self) -> None:
        assert parse_spreadsheet_id("abc123") == "abc123"

    def test_url(self) -> None:
        url = "https://docs.google.com/spreadsheets/d/1AbC-d_9/edit#gid=0"
        assert parse_spreadsheet_id(url) == "1AbC-d_9"


class TestCompare:
    def test_full_compare_of_golden_files(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        code = _run(
            monkeypatch,
            "compare",
            "basic_before",
            "basic_after",
            "--tier",
            "FULL",
            "--golden-dir",
            str(GOLDEN_DIR),
        )

        assert code == 0
        output = json.loads(capsys.readouterr().out)
        assert output["tier"] == "FULL"
        assert output["changes"] == [
            {"cell": "Sheet1!B2", "kind": "value", "before": 30, "after": 31}
        ]
        assert output["summary"]["cellsChanged"] == 1
        assert output["sheetChanges"]["sheetsRenamed"] == [
            {"sheetId": 42, "oldTitle": "Summary", "newTitle": "Totals"}
        ]

    def test_downgrade_is_reported(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        code = _run(
            monkeypatch,
            "compare",
            "basic_before",
            "basic_after",
            "--tier",
            "FULL",
            "--cell-budget",
            "5",
            "--golden-dir",
            str(GOLDEN_DIR),
        )

        assert code == 0
        captured = capsys.readouterr()
        assert json.loads(captured.out)["tier"] == "SAMPLE"
        assert "Downgraded from FULL to SAMPLE" in captured.err

    def test_invalid_sample_size_prints_error(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        code = _run(
            monkeypatch,
            "compare",
            "basic_before",
            "basic_after",
            "--sample-size",
            "0",
            "--golden-dir",
            str(GOLDEN_DIR),
        )

        assert code == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Error: sample_size must be positive" in captured.err

    def test_missing_token_fails(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        code = _run(monkeypatch, "compare", "a", "b")

        assert code == 1
        assert "no access token" in capsys.readouterr().err


class TestCapture:
    def test_capture_summary(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        code = _run(
            monkeypatch,
            "capture",
            "basic_after",
            "--tier",
            "SAMPLE",
            "--golden-dir",
            str(GOLDEN_DIR),
        )

        assert code == 0
        output = json.loads(capsys.readouterr().out)
        assert output["documentId"] == "basic_after"
        assert [(s["sheetId"], s["title"]) for s in output["sheets"]] == [
            (0, "Sheet1"),
            (42, "Totals"),
        ]
        assert output["sheets"][0]["sampledRows"] == 3
        assert output["sheets"][0]["cellsCaptured"] is False
