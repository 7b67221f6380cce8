"""
Automation worker process management.

Provides:
- Path resolution for the worker runtime and script
- Process lifecycle with readiness handshake
- Line-delimited JSON request/response protocol
"""

from hiworks_commute.worker.errors import (
    HandshakeError,
    NotRunningError,
    ProtocolDecodeError,
    ResponseError,
    RuntimeNotFoundError,
    ScriptNotFoundError,
    SpawnError,
    WorkerError,
)
from hiworks_commute.worker.manager import WorkerManager, WorkerState
from hiworks_commute.worker.paths import PathResolver, ResolvedWorker

__all__ = [
    "WorkerManager",
    "WorkerState",
    "PathResolver",
    "ResolvedWorker",
    "WorkerError",
    "SpawnError",
    "ScriptNotFoundError",
    "RuntimeNotFoundError",
    "ProtocolDecodeError",
    "ResponseError",
    "NotRunningError",
    "HandshakeError",
]
