"""Entry point: python -m crateroot [root|repl|sysroot|tools]

- "root [DOCUMENT]": Print the project root for DOCUMENT (default command)
- "repl":            Read documents from stdin, print a root for each
- "sysroot":         Print the Rust toolchain sysroot
- "tools":           Print the configured toolchain paths
"""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

from crateroot.config import CraterootConfig, load_config
from crateroot.errors import ExternalProcessFailed, ResolutionError
from crateroot.paths import ToolPaths
from crateroot.resolver import RootResolver
from crateroot.workspace import EditorState


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


def _build_resolver(config: CraterootConfig, document: str | None = None) -> RootResolver:
    state = EditorState(root=str(config.workspace_root.resolve()), active_document=document)
    return RootResolver(state, marker=config.resolver.marker)


def _fail(message: str) -> None:
    print(f"error: {message}", file=sys.stderr)
    sys.exit(1)


def _run_root(config: CraterootConfig, args: list[str]) -> None:
    document = str(Path(args[0]).resolve()) if args else None
    resolver = _build_resolver(config, document)
    try:
        print(asyncio.run(resolver.resolve_root()))
    except ResolutionError as e:
        _fail(str(e))


def _run_repl(config: CraterootConfig) -> None:
    from crateroot.cli import ResolverREPL

    resolver = _build_resolver(config)
    repl = ResolverREPL(resolver, resolver.workspace)
    try:
        asyncio.run(repl.start())
    except KeyboardInterrupt:
        pass


def _tool_paths(config: CraterootConfig) -> ToolPaths:
    return ToolPaths(config.rust, sysroot_timeout=config.resolver.sysroot_timeout)


def _run_sysroot(config: CraterootConfig) -> None:
    try:
        print(asyncio.run(_tool_paths(config).rustc_sysroot()))
    except ExternalProcessFailed as e:
        _fail(str(e))


def _run_tools(config: CraterootConfig) -> None:
    for name, value in _tool_paths(config).as_dict().items():
        print(f"{name:<14} {value}")


def main() -> None:
    cmd = sys.argv[1] if len(sys.argv) > 1 else "root"
    args = sys.argv[2:]

    config = load_config()
    _setup_logging(config.log_level)

    if cmd == "root":
        _run_root(config, args)
    elif cmd == "repl":
        _run_repl(config)
    elif cmd == "sysroot":
        _run_sysroot(config)
    elif cmd == "tools":
        _run_tools(config)
    else:
        print("Usage: python -m crateroot [root [DOCUMENT]|repl|sysroot|tools]")
        print("  root     — Print the project root for DOCUMENT (default)")
        print("  repl     — Resolve roots for documents read from stdin")
        print("  sysroot  — Print `rustc --print sysroot`")
        print("  tools    — Print configured toolchain paths")
        sys.exit(1)


if __name__ == "__main__":
    main()
