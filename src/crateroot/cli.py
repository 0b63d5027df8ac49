"""Interactive REPL — each input line becomes the active document."""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

from crateroot.errors import ResolutionError
from crateroot.resolver import RootResolver
from crateroot.workspace import EditorState

logger = logging.getLogger(__name__)

_NO_DOCUMENT = "-"


class ResolverREPL:
    """Reads document paths from stdin and prints the resolved root for each.

    A line of "-" clears the active document. The resolver is shared across
    lines, so a previously resolved root is reused when a later document has
    no Cargo.toml of its own.
    """

    def __init__(self, resolver: RootResolver, state: EditorState) -> None:
        self.resolver = resolver
        self.state = state

    async def start(self) -> None:
        loop = asyncio.get_event_loop()

        print(f"crateroot (workspace: {self.state.root}; '-' for no document, 'exit' to quit)")
        print("-" * 48)

        while True:
            try:
                line = await loop.run_in_executor(None, self._read_input)
            except (EOFError, KeyboardInterrupt):
                print()
                break

            if line is None or line.strip().lower() in ("exit", "quit"):
                break

            text = line.strip()
            if not text:
                continue

            self.state.active_document = None if text == _NO_DOCUMENT else str(Path(text).resolve())
            logger.debug("Active document: %s", self.state.active_document)
            await self.handle()

    async def handle(self) -> str | None:
        """Resolve for the current state and print the outcome."""
        try:
            root = await self.resolver.resolve_root()
        except ResolutionError as e:
            print(f"error: {e}")
            return None
        print(root)
        return root

    def _read_input(self) -> str | None:
        sys.stdout.write("\ndocument> ")
        sys.stdout.flush()
        raw = sys.stdin.buffer.readline()
        if not raw:
            return None
        return raw.decode("utf-8", errors="replace").rstrip("\n")

