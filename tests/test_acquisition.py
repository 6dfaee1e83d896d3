"""Tests for raw input acquisition."""

import io
import sys
import tempfile
from pathlib import Path

import pytest

from llm_log_inspector.core.errors import AcquisitionError, InvalidInputError
from llm_log_inspector.services import acquisition
from llm_log_inspector.services.acquisition import read_input


class TestReadInput:
    """Tests for read_input."""

    async def test_reads_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "logs.tsv"
            path.write_text("line one\nline two", encoding="utf-8")
            assert await read_input(path) == "line one\nline two"
            assert await read_input(str(path)) == "line one\nline two"

    async def test_missing_file(self):
        with pytest.raises(AcquisitionError) as exc_info:
            await read_input("/nonexistent/logs.tsv")
        assert not isinstance(exc_info.value, InvalidInputError)

    async def test_reads_stdin(self, monkeypatch):
        monkeypatch.setattr("sys.stdin", io.StringIO("from stdin"))
        assert await read_input("-") == "from stdin"

    async def test_no_clipboard_command(self, monkeypatch):
        monkeypatch.setattr(acquisition.shutil, "which", lambda _name: None)
        with pytest.raises(AcquisitionError, match="no clipboard command"):
            await read_input("clipboard")


def _paste_script(tmp_path: Path, body: str) -> str:
    script = tmp_path / "fake-paste"
    script.write_text(f"#!/bin/sh\n{body}\n", encoding="utf-8")
    script.chmod(0o755)
    return str(script)


@pytest.mark.skipif(sys.platform == "win32", reason="needs a POSIX shell")
class TestReadClipboard:
    """Tests for reading through a clipboard command."""

    async def test_returns_command_output(self, monkeypatch, tmp_path):
        script = _paste_script(tmp_path, "printf 'first\\tline\\nsecond'")
        monkeypatch.setattr(acquisition, "CLIPBOARD_COMMANDS", ((script,),))

        assert await read_input("clipboard") == "first\tline\nsecond"

    async def test_failed_command(self, monkeypatch, tmp_path):
        script = _paste_script(tmp_path, "echo 'clipboard is empty' >&2\nexit 1")
        monkeypatch.setattr(acquisition, "CLIPBOARD_COMMANDS", ((script,),))

        with pytest.raises(AcquisitionError, match="clipboard is empty") as exc_info:
            await read_input("clipboard")
        assert not isinstance(exc_info.value, InvalidInputError)

    async def test_skips_missing_commands(self, monkeypatch, tmp_path):
        script = _paste_script(tmp_path, "printf 'pasted'")
        commands = ((str(tmp_path / "not-installed"),), (script,))
        monkeypatch.setattr(acquisition, "CLIPBOARD_COMMANDS", commands)

        assert await read_input("clipboard") == "pasted"
