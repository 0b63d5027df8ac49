"""Tests for the REPL and the `python -m crateroot` entry point."""

import sys

import pytest
from pathlib import Path

from crateroot.__main__ import main
from crateroot.cli import ResolverREPL
from crateroot.resolver import RootResolver
from crateroot.workspace import EditorState


def touch(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("")
    return path


@pytest.fixture
def ws(tmp_path: Path) -> Path:
    root = tmp_path / "ws"
    root.mkdir()
    return root.resolve()


def scripted(lines: list[str]):
    """Replacement for ResolverREPL._read_input that replays lines, then EOF."""
    remaining = list(lines)

    def _read_input():
        return remaining.pop(0) if remaining else None

    return _read_input


class TestResolverREPL:
    @pytest.mark.asyncio
    async def test_remembers_root_between_lines(self, ws: Path, capsys):
        touch(ws / "proj" / "Cargo.toml")
        lib = touch(ws / "proj" / "src" / "lib.rs")
        other = touch(ws / "other.rs")

        state = EditorState(root=str(ws))
        repl = ResolverREPL(RootResolver(state), state)
        repl._read_input = scripted([str(lib), "", str(other), "exit"])
        await repl.start()

        out = capsys.readouterr().out.splitlines()
        roots = [line for line in out if line == str(ws / "proj")]
        assert len(roots) == 2

    @pytest.mark.asyncio
    async def test_dash_clears_document(self, ws: Path, capsys):
        state = EditorState(root=str(ws), active_document=str(ws / "x.rs"))
        repl = ResolverREPL(RootResolver(state), state)
        repl._read_input = scripted(["-"])
        await repl.start()

        assert state.active_document is None
        assert "error: No active document" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_handle_returns_none_on_failure(self, ws: Path):
        state = EditorState(root=str(ws))
        repl = ResolverREPL(RootResolver(state), state)
        assert await repl.handle() is None


class TestMain:
    def test_root_command(self, ws: Path, monkeypatch, capsys):
        touch(ws / "Cargo.toml")
        doc = touch(ws / "src" / "main.rs")
        monkeypatch.chdir(ws)
        monkeypatch.setenv("CRATEROOT_WORKSPACE", str(ws))
        monkeypatch.setattr(sys, "argv", ["crateroot", "root", str(doc)])

        main()
        assert capsys.readouterr().out.strip() == str(ws)

    def test_root_command_failure(self, ws: Path, monkeypatch, capsys):
        monkeypatch.chdir(ws)
        monkeypatch.setenv("CRATEROOT_WORKSPACE", str(ws))
        monkeypatch.setattr(sys, "argv", ["crateroot", "root"])

        with pytest.raises(SystemExit) as exc_info:
            main()
        assert exc_info.value.code == 1
        assert capsys.readouterr().err.strip().endswith("error: No active document")

    def test_tools_command(self, ws: Path, monkeypatch, capsys):
        monkeypatch.chdir(ws)
        monkeypatch.setenv("CARGO_HOME", "/opt/cargo-home")
        monkeypatch.setattr(sys, "argv", ["crateroot", "tools"])

        main()
        out = capsys.readouterr().out
        assert "racer" in out
        assert "/opt/cargo-home" in out

    def test_unknown_command(self, ws: Path, monkeypatch):
        monkeypatch.chdir(ws)
        monkeypatch.setattr(sys, "argv", ["crateroot", "bogus"])

        with pytest.raises(SystemExit):
            main()
