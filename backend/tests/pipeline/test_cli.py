"""Tests for the pipeline CLI."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from pipeline.attribution.models import Snapshot
from pipeline.cli import (
    attribute_document_command,
    attribute_file_command,
    load_snapshots,
    main,
)

HISTORY = [
    {"timestamp": 2000, "author": "bob", "content": "hello world"},
    {"timestamp": 1000, "author": "alice", "content": "hello"},
]


@pytest.fixture
def history_file(tmp_path: Path) -> Path:
    path = tmp_path / "history.json"
    path.write_text(json.dumps(HISTORY), encoding="utf-8")
    return path


class TestLoadSnapshots:
    def test_list_form(self, history_file: Path) -> None:
        snapshots = load_snapshots(history_file)
        assert snapshots[1] == Snapshot(timestamp=1000, author="alice", content="hello")

    def test_object_form(self, tmp_path: Path) -> None:
        path = tmp_path / "wrapped.json"
        path.write_text(json.dumps({"snapshots": HISTORY}), encoding="utf-8")
        assert len(load_snapshots(path)) == 2


class TestAttributeFileCommand:
    """Tests for the ``attribute`` command."""

    def test_json_output(
        self, history_file: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert attribute_file_command(history_file, as_json=True) == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload["length"] == 11
        assert payload["groups"] == [
            {"start": 0, "end": 5, "author": "alice"},
            {"start": 5, "end": 11, "author": "bob"},
        ]
        assert len(payload["spans"]) == 2

    def test_text_output(
        self, history_file: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert attribute_file_command(history_file) == 0
        out = capsys.readouterr().out
        assert "Attributed 11 characters" in out
        assert "' world'" in out

    def test_missing_file(self, tmp_path: Path) -> None:
        assert attribute_file_command(tmp_path / "nope.json") == 1

    def test_empty_history(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.json"
        path.write_text("[]", encoding="utf-8")
        assert attribute_file_command(path) == 1

    def test_malformed_entry(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text('[{"author": "alice"}]', encoding="utf-8")
        assert attribute_file_command(path) == 1


class TestAttributeDocumentCommand:
    """Tests for the ``document`` command."""

    @pytest.mark.asyncio
    async def test_no_backend(self) -> None:
        """No base URL argument and no SYNC_BASE_URL setting -> exit 1."""
        from app.config import settings

        with patch.object(settings, "sync_base_url", None):
            assert await attribute_document_command("a.md", base_url=None) == 1

    @pytest.mark.asyncio
    async def test_fetches_and_attributes(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        snapshots = [
            Snapshot(timestamp=1000, author="alice", content="hello"),
            Snapshot(timestamp=2000, author="bob", content="hello world"),
        ]
        with patch("pipeline.cli.fetch_snapshots", new_callable=AsyncMock) as mock_fetch:
            mock_fetch.return_value = snapshots
            code = await attribute_document_command(
                "a.md", base_url="https://sync.example.test", as_json=True
            )

        assert code == 0
        assert json.loads(capsys.readouterr().out)["length"] == 11


class TestMain:
    def test_attribute_subcommand(
        self, history_file: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        argv = ["pipeline.cli", "attribute", str(history_file), "--json"]
        with patch("sys.argv", argv):
            assert main() == 0
        assert json.loads(capsys.readouterr().out)["length"] == 11

    def test_no_command_prints_help(self) -> None:
        with patch("sys.argv", ["pipeline.cli"]):
            assert main() == 1
