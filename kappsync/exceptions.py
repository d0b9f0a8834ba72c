"""
Kappsync error taxonomy.

Modules only raise these exceptions; the HTTP layer decides how to render them.
"""

from typing import Optional


class KappsyncError(Exception):
    """Base error for kappsync."""
    pass


class FormatError(KappsyncError):
    """Inline configuration could not be de-indented."""
    pass


class LaunchError(KappsyncError):
    """External tool could not be started or was terminated by a signal."""
    pass


class CaptureError(KappsyncError, IOError):
    """Standard output or error of the external tool could not be captured."""
    pass


class ClassifierError(KappsyncError):
    """External tool exited with a status its contract rules out."""
    pass


class ToolFailedError(KappsyncError):
    """External tool ran and reported failure."""

    def __init__(self, tool: str, exit_status: int, stderr: str):
        self.tool = tool
        self.exit_status = exit_status
        self.stderr = stderr
        super().__init__(
            f"Executing {tool}: exit status {exit_status} (stderr: {stderr})"
        )


class ReconcileError(KappsyncError):
    """A lifecycle event failed; the cause is chained."""

    def __init__(self, action: str, identity: str, cause: Exception):
        self.action = action
        self.identity = identity
        self.cause = cause
        super().__init__(f"{action} {identity}: {cause}")

    @property
    def stderr(self) -> Optional[str]:
        """Captured stderr of the failing tool, if the cause carries one."""
        return getattr(self.cause, "stderr", None)
