"""Workspace protocol and filesystem primitives used by the resolver."""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)

# async (path) -> bool
PathExists = Callable[[str], Awaitable[bool]]

# async (start_dir, marker) -> directory containing marker, or None
MarkerFinder = Callable[[str, str], Awaitable["str | None"]]


@runtime_checkable
class Workspace(Protocol):
    """What the host editor knows about the current session."""

    def current_document_path(self) -> str | None:
        """Absolute path of the focused document, or None."""
        ...

    def workspace_root_path(self) -> str:
        """Absolute path of the single workspace root."""
        ...


@dataclass
class EditorState:
    """In-memory workspace for the CLI and tests. Mutate active_document freely."""

    root: str
    active_document: str | None = None

    def current_document_path(self) -> str | None:
        return self.active_document

    def workspace_root_path(self) -> str:
        return self.root


def is_within(candidate: str | Path, root: str | Path) -> bool:
    """True if candidate is root or lies below it, after collapsing ".." segments."""
    try:
        Path(os.path.normpath(candidate)).relative_to(os.path.normpath(root))
    except ValueError:
        return False
    return True


async def path_exists(path: str) -> bool:
    """A path exists if it can be accessed without error."""
    return await asyncio.to_thread(os.access, path, os.F_OK)


def _find_upward(start: Path, marker: str, ceiling: Path | None) -> Path | None:
    current = start
    while True:
        if ceiling is not None and not is_within(current, ceiling):
            return None
        if os.access(current / marker, os.F_OK):
            return current
        parent = current.parent
        if parent == current:
            return None
        current = parent


async def find_marker_upward(
    start_dir: str,
    marker: str,
    *,
    ceiling: str | None = None,
) -> str | None:
    """Return the nearest directory at or above start_dir containing marker.

    Only parents are visited, never siblings. The marker's contents are not
    read. With a ceiling, the walk stops once it leaves that directory.
    """
    found = await asyncio.to_thread(
        _find_upward,
        Path(start_dir),
        marker,
        Path(ceiling) if ceiling is not None else None,
    )
    if found is None:
        logger.debug("%s not found upward from %s", marker, start_dir)
        return None
    return str(found)
