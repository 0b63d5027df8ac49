"""Error types for root resolution and toolchain discovery."""

from __future__ import annotations


class ResolutionError(RuntimeError):
    """A strategy could not produce a project root."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        # Failures of the strategies tried after this one, in order.
        self.attempts: tuple[ResolutionError, ...] = ()


class NoActiveDocument(ResolutionError):
    def __init__(self) -> None:
        super().__init__("No active document")


class DocumentOutsideWorkspace(ResolutionError):
    def __init__(self, document: str, workspace: str) -> None:
        super().__init__(
            f"Current document is not in the workspace: {document} (workspace: {workspace})"
        )
        self.document = document
        self.workspace = workspace


class MarkerNotFound(ResolutionError):
    def __init__(self, marker: str, start: str) -> None:
        super().__init__(f"{marker} hasn't been found above {start}")
        self.marker = marker
        self.start = start


class MarkerOutsideWorkspace(ResolutionError):
    def __init__(self, marker: str, found: str) -> None:
        super().__init__(f"{marker} hasn't been found within the workspace (nearest: {found})")
        self.marker = marker
        self.found = found


class NoRememberedRoot(ResolutionError):
    def __init__(self) -> None:
        super().__init__("No previously resolved root")


class RememberedRootStale(ResolutionError):
    def __init__(self, marker: str, root: str) -> None:
        super().__init__(f"{marker} no longer exists in previous root {root}")
        self.marker = marker
        self.root = root


class WorkspaceMarkerAbsent(ResolutionError):
    def __init__(self, marker: str, workspace: str) -> None:
        super().__init__(f"{marker} doesn't exist in the workspace root {workspace}")
        self.marker = marker
        self.workspace = workspace


class ExternalProcessFailed(RuntimeError):
    """An external toolchain binary could not be run or exited non-zero."""

    def __init__(self, command: list[str], message: str, returncode: int | None = None) -> None:
        super().__init__(f"{' '.join(command)}: {message}")
        self.command = command
        self.returncode = returncode


class SysrootTimeout(ExternalProcessFailed):
    def __init__(self, command: list[str], timeout: float) -> None:
        super().__init__(command, f"did not finish within {timeout:g}s")
        self.timeout = timeout
