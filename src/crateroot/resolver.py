"""Project root resolution — which directory external tools should run in.

The chain, first success wins:
1. Walk up from the active document to the nearest Cargo.toml inside the
   workspace, and remember the result.
2. Reuse the remembered root if its Cargo.toml is still there.
3. Use the workspace root if it holds a Cargo.toml itself.

When every step fails, the error from step 1 is raised, since it says the
most about why nothing was found.
"""

from __future__ import annotations

import asyncio
import enum
import logging
import os
from pathlib import Path

from crateroot.errors import (
    DocumentOutsideWorkspace,
    MarkerNotFound,
    MarkerOutsideWorkspace,
    NoActiveDocument,
    NoRememberedRoot,
    RememberedRootStale,
    ResolutionError,
    WorkspaceMarkerAbsent,
)
from crateroot.workspace import (
    MarkerFinder,
    PathExists,
    Workspace,
    find_marker_upward,
    is_within,
    path_exists,
)

logger = logging.getLogger(__name__)

DEFAULT_MARKER = "Cargo.toml"


class State(enum.Enum):
    TRY_DOCUMENT = "try_document"
    TRY_REMEMBERED = "try_remembered"
    TRY_WORKSPACE = "try_workspace"
    RESOLVED = "resolved"
    FAILED = "failed"


# Next state when the current strategy fails.
_ON_FAILURE: dict[State, State] = {
    State.TRY_DOCUMENT: State.TRY_REMEMBERED,
    State.TRY_REMEMBERED: State.TRY_WORKSPACE,
    State.TRY_WORKSPACE: State.FAILED,
}


class RootResolver:
    """Resolves the project root for a session. Create one per host session."""

    def __init__(
        self,
        workspace: Workspace,
        *,
        marker: str = DEFAULT_MARKER,
        exists: PathExists = path_exists,
        find_marker: MarkerFinder | None = None,
    ) -> None:
        self.workspace = workspace
        self.marker = marker
        self._exists = exists
        self._find_marker = find_marker or self._find_marker_in_workspace
        self._previous_root: str | None = None
        self._lock = asyncio.Lock()

    @property
    def previous_root(self) -> str | None:
        """Last root derived from an active document."""
        return self._previous_root

    async def resolve_root(self) -> str:
        """Return the project root directory, or raise the most specific ResolutionError."""
        async with self._lock:
            return await self._run()

    async def _run(self) -> str:
        strategies = {
            State.TRY_DOCUMENT: self._from_active_document,
            State.TRY_REMEMBERED: self._from_previous_root,
            State.TRY_WORKSPACE: self._from_workspace_root,
        }
        errors: list[ResolutionError] = []
        state = State.TRY_DOCUMENT
        root: str | None = None

        while state not in (State.RESOLVED, State.FAILED):
            try:
                root = await strategies[state]()
            except ResolutionError as e:
                logger.debug("%s failed: %s", state.value, e)
                errors.append(e)
                state = _ON_FAILURE[state]
            else:
                logger.debug("Resolved root via %s: %s", state.value, root)
                state = State.RESOLVED

        if state is State.FAILED:
            first = errors[0]
            first.attempts = tuple(errors[1:])
            logger.warning("No project root could be determined: %s", first)
            raise first
        return root

    # ── Strategies ────────────────────────────────────────────

    async def _from_active_document(self) -> str:
        document = self.workspace.current_document_path()
        if not document:
            raise NoActiveDocument()

        document = os.path.normpath(document)
        workspace_root = os.path.normpath(self.workspace.workspace_root_path())
        if not is_within(document, workspace_root):
            raise DocumentOutsideWorkspace(document, workspace_root)

        start = os.path.dirname(document)
        found = await self._find_marker(start, self.marker)
        if found is None:
            raise MarkerNotFound(self.marker, start)
        if not is_within(found, workspace_root):
            raise MarkerOutsideWorkspace(self.marker, found)

        self._previous_root = found
        return found

    async def _from_previous_root(self) -> str:
        previous = self._previous_root
        if previous is None:
            raise NoRememberedRoot()
        if not await self._exists(str(Path(previous) / self.marker)):
            raise RememberedRootStale(self.marker, previous)
        return previous

    async def _from_workspace_root(self) -> str:
        workspace_root = self.workspace.workspace_root_path()
        if not await self._exists(str(Path(workspace_root) / self.marker)):
            raise WorkspaceMarkerAbsent(self.marker, workspace_root)
        return workspace_root

    async def _find_marker_in_workspace(self, start_dir: str, marker: str) -> str | None:
        return await find_marker_upward(
            start_dir, marker, ceiling=self.workspace.workspace_root_path()
        )
