"""Lifecycle management for the automation worker process.

The manager launches the worker lazily, waits for its readiness line, and
then performs one blocking request/response round trip per command over the
worker's standard input and output. Standard error is left attached to ours
so worker diagnostics stay visible.

Callers must serialize access; the protocol allows a single outstanding
request. ``stop()`` is the only cancellation primitive and may be called from
another thread to unblock a pending read.
"""

import logging
import os
import subprocess
import threading
from dataclasses import dataclass
from enum import Enum
from typing import IO, Any, Callable, Optional

import psutil  # type: ignore[import-untyped]

from hiworks_commute.worker.errors import (
    HandshakeError,
    NotRunningError,
    ProtocolDecodeError,
    SpawnError,
)
from hiworks_commute.worker.paths import PathResolver, ResolvedWorker
from hiworks_commute.worker.platform import Platform, get_platform
from hiworks_commute.worker.protocol import Command, Response, next_request_id

logger = logging.getLogger(__name__)

REDACTED_PARAMS = ("password",)


class WorkerState(Enum):
    """Worker manager states."""

    STOPPED = "stopped"
    RUNNING = "running"


@dataclass
class _RunningWorker:
    """A spawned worker that completed its handshake."""

    process: subprocess.Popen
    stdin: IO[str]
    stdout: IO[str]
    resolved: ResolvedWorker


def _redact(params: dict[str, Any]) -> dict[str, Any]:
    return {key: "***" if key in REDACTED_PARAMS else value for key, value in params.items()}


class WorkerManager:
    """Own the worker process and speak its line protocol."""

    def __init__(
        self,
        resolver: Optional[PathResolver] = None,
        popen: Callable[..., subprocess.Popen] = subprocess.Popen,
    ):
        """Initialize worker manager.

        Args:
            resolver: Path resolver used at start (default: live environment)
            popen: Process factory (default: subprocess.Popen)
        """
        self.resolver = resolver or PathResolver()
        self._popen = popen
        self._worker: Optional[_RunningWorker] = None
        self._starting: Optional[subprocess.Popen] = None
        self._lock = threading.Lock()

    @property
    def state(self) -> WorkerState:
        """Current manager state."""
        return WorkerState.RUNNING if self._worker is not None else WorkerState.STOPPED

    @property
    def is_running(self) -> bool:
        """Whether a worker process is running."""
        return self._worker is not None

    @property
    def pid(self) -> Optional[int]:
        """PID of the running worker, if any."""
        worker = self._worker
        return worker.process.pid if worker else None

    def start(self) -> None:
        """Start the worker if it is not already running.

        Raises:
            ScriptNotFoundError: If the automation script cannot be located
            RuntimeNotFoundError: If the runtime executable cannot be located
            SpawnError: If the process could not be created
            HandshakeError: If the worker did not announce readiness
        """
        if self._worker is not None:
            return

        resolved = self.resolver.resolve()
        process = self._spawn(resolved)

        with self._lock:
            self._starting = process
        try:
            self._handshake(process)
            if process.stdin is None or process.stdout is None:
                raise SpawnError("Worker pipes are not available")
        except BaseException:
            with self._lock:
                self._starting = None
            self._terminate(process)
            raise

        with self._lock:
            # stop() clears _starting when it cancels a start
            cancelled = self._starting is not process
            self._starting = None
            if not cancelled:
                self._worker = _RunningWorker(
                    process=process,
                    stdin=process.stdin,
                    stdout=process.stdout,
                    resolved=resolved,
                )
        if cancelled:
            raise NotRunningError("Worker was stopped while starting")
        logger.info(f"Worker started (PID: {process.pid}, rule: {resolved.rule})")

    def _spawn(self, resolved: ResolvedWorker) -> subprocess.Popen:
        """Launch the worker process with piped stdin/stdout."""
        env = os.environ.copy()
        env.update(resolved.env)

        kwargs: dict[str, Any] = {}
        if get_platform() == Platform.WINDOWS:
            kwargs["creationflags"] = getattr(subprocess, "CREATE_NO_WINDOW", 0)

        try:
            process = self._popen(
                resolved.command,
                cwd=str(resolved.working_dir),
                env=env,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=None,
                text=True,
                encoding="utf-8",
                bufsize=1,
                **kwargs,
            )
        except OSError as e:
            raise SpawnError(f"Failed to start worker: {e}") from e

        logger.debug(f"Spawned worker {resolved.command} in {resolved.working_dir}")
        return process

    def _handshake(self, process: subprocess.Popen) -> None:
        """Consume the readiness line of a freshly spawned worker."""
        if process.stdout is None:
            raise HandshakeError("Worker output is not available")

        try:
            line = process.stdout.readline()
        except (OSError, ValueError) as e:
            raise HandshakeError(f"Failed to read readiness message: {e}") from e

        if not line:
            raise HandshakeError("Worker exited before announcing readiness")

        try:
            response = Response.from_line(line)
        except ProtocolDecodeError as e:
            raise HandshakeError(f"Invalid readiness message: {e}") from e

        if not response.is_ready:
            raise HandshakeError(f"Worker did not report ready: {line.strip()}")

    def send_command(self, action: str, params: Optional[dict[str, Any]] = None) -> Any:
        """Send a command and wait for its response.

        Starts the worker first if necessary.

        Args:
            action: Worker action name (e.g., 'checkIn', 'getStatus')
            params: Action parameters

        Returns:
            Response data, or "success" when the worker sent no data

        Raises:
            ResponseError: If the worker reported a failure
            ProtocolDecodeError: If the response line is malformed
            NotRunningError: If the worker exited or its pipes are closed
        """
        self.start()

        worker = self._worker
        if worker is None:
            raise NotRunningError()

        command = Command(id=next_request_id(), action=action, params=dict(params or {}))
        logger.debug(f"-> #{command.id} {action} {_redact(command.params)}")

        try:
            worker.stdin.write(command.to_line())
            worker.stdin.flush()
        except (OSError, ValueError) as e:
            self._discard(worker)
            raise NotRunningError(f"Worker input is closed: {e}") from e

        try:
            line = worker.stdout.readline()
        except UnicodeDecodeError as e:
            self._discard(worker)
            raise ProtocolDecodeError(f"Worker output is not valid UTF-8: {e}") from e
        except (OSError, ValueError) as e:
            self._discard(worker)
            raise NotRunningError(f"Worker output is closed: {e}") from e

        if not line:
            self._discard(worker)
            raise NotRunningError("Worker exited before responding")

        try:
            response = Response.from_line(line)
            if response.id is not None and response.id != command.id:
                raise ProtocolDecodeError(
                    f"Response id {response.id} does not match request id {command.id}",
                    line=line,
                )
        except ProtocolDecodeError as e:
            # the stream can no longer be trusted to pair requests with responses
            logger.error(f"Protocol error on '{action}': {e}")
            self._discard(worker)
            raise

        logger.debug(f"<- #{command.id} success={response.success} error={response.error}")
        return response.result()

    def stop(self) -> None:
        """Stop the worker process.

        Kills the worker and its descendants, waits for exit, and closes both
        pipes. Stopping a stopped manager does nothing.
        """
        with self._lock:
            worker, self._worker = self._worker, None
            starting, self._starting = self._starting, None

        if starting is not None:
            self._terminate(starting)
        if worker is not None:
            self._terminate(worker.process)
            logger.info(f"Worker stopped (PID: {worker.process.pid})")

    def _discard(self, worker: _RunningWorker) -> None:
        """Drop a worker whose stream is broken or desynchronized."""
        with self._lock:
            if self._worker is worker:
                self._worker = None
        self._terminate(worker.process)
        logger.warning(f"Worker discarded (PID: {worker.process.pid})")

    def _terminate(self, process: subprocess.Popen) -> None:
        """Kill a worker process tree, reap it and close its pipes."""
        try:
            children = psutil.Process(process.pid).children(recursive=True)
        except psutil.Error:
            children = []

        if process.poll() is None:
            try:
                process.kill()
            except ProcessLookupError:
                pass

        for child in children:
            try:
                child.kill()
            except psutil.NoSuchProcess:
                pass

        process.wait()
        if children:
            psutil.wait_procs(children, timeout=5)

        for stream in (process.stdin, process.stdout):
            if stream is None:
                continue
            try:
                stream.close()
            except OSError as e:
                logger.debug(f"Error closing worker pipe: {e}")

    def __enter__(self) -> "WorkerManager":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.stop()

    def __del__(self) -> None:
        # attributes may be missing if __init__ failed
        if getattr(self, "_worker", None) is not None or getattr(self, "_starting", None):
            self.stop()
