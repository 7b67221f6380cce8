"""Errors raised by the automation worker layer."""

from pathlib import Path
from typing import Optional, Sequence


class WorkerError(Exception):
    """Base class for worker errors."""

    pass


class SpawnError(WorkerError):
    """The worker process could not be created."""

    pass


class PathResolutionError(WorkerError):
    """No candidate location matched during path resolution."""

    what = "path"

    def __init__(self, tried: Optional[Sequence[Path]] = None):
        """Initialize resolution error.

        Args:
            tried: Candidate paths that were checked, in order
        """
        self.tried = list(tried or [])
        super().__init__(f"Worker {self.what} not found ({len(self.tried)} locations checked)")


class ScriptNotFoundError(PathResolutionError):
    """The automation script could not be located."""

    what = "script"


class RuntimeNotFoundError(PathResolutionError):
    """The runtime executable could not be located."""

    what = "runtime"


class ProtocolDecodeError(WorkerError):
    """A line from the worker was not a valid protocol message."""

    def __init__(self, message: str, line: Optional[str] = None):
        self.line = line
        super().__init__(message)


class ResponseError(WorkerError):
    """The worker reported a failure."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotRunningError(WorkerError):
    """The worker process is not running."""

    def __init__(self, message: str = "Worker is not running"):
        super().__init__(message)


class HandshakeError(WorkerError):
    """The worker did not announce readiness after start."""

    pass
