"""Line-delimited JSON protocol spoken with the automation worker.

Every message is one UTF-8 JSON object on its own line. The worker announces
itself with ``{"ready": true}`` and then answers each request line with
exactly one response line, in order.
"""

import itertools
import json
import threading
from dataclasses import dataclass, field
from typing import Any, Optional

from hiworks_commute.worker.errors import ProtocolDecodeError, ResponseError

SUCCESS_SENTINEL = "success"
UNKNOWN_ERROR = "unknown error"

_id_counter = itertools.count(1)
_id_lock = threading.Lock()


def next_request_id() -> int:
    """Return the next request id.

    Ids start at 1 and increase for the lifetime of the interpreter.
    """
    with _id_lock:
        return next(_id_counter)


def _loads_object(line: str) -> dict[str, Any]:
    """Decode a single protocol line into a JSON object."""
    try:
        payload = json.loads(line)
    except json.JSONDecodeError as e:
        raise ProtocolDecodeError(f"Invalid JSON from worker: {e}", line=line)

    if not isinstance(payload, dict):
        raise ProtocolDecodeError("Worker message is not a JSON object", line=line)
    return payload


def _check_type(payload: dict[str, Any], key: str, expected: type, line: str) -> None:
    value = payload.get(key)
    if value is None:
        return
    # bool is a subclass of int; ids must not be booleans
    if expected is int and isinstance(value, bool):
        raise ProtocolDecodeError(f"Field '{key}' must be an integer", line=line)
    if not isinstance(value, expected):
        raise ProtocolDecodeError(
            f"Field '{key}' must be of type {expected.__name__}", line=line
        )


@dataclass
class Command:
    """A request sent to the worker."""

    id: int
    action: str
    params: dict[str, Any] = field(default_factory=dict)

    def to_line(self) -> str:
        """Encode as a newline-terminated JSON line."""
        payload = {"id": self.id, "action": self.action, "params": self.params}
        return json.dumps(payload, ensure_ascii=False, separators=(",", ":")) + "\n"

    @classmethod
    def from_line(cls, line: str) -> "Command":
        """Decode a request line.

        Raises:
            ProtocolDecodeError: If the line is not a valid command
        """
        payload = _loads_object(line)
        _check_type(payload, "id", int, line)
        action = payload.get("action")
        if not isinstance(action, str) or not action:
            raise ProtocolDecodeError("Command has no action", line=line)
        params = payload.get("params") or {}
        if not isinstance(params, dict):
            raise ProtocolDecodeError("Command params must be an object", line=line)
        return cls(id=payload.get("id", 0), action=action, params=params)


@dataclass
class Response:
    """A message received from the worker.

    The same shape carries the readiness announcement and command replies.
    """

    id: Optional[int] = None
    success: Optional[bool] = None
    data: Any = None
    ready: Optional[bool] = None
    error: Optional[str] = None
    # true when the message carried a "data" key, even if its value is null
    has_data: Optional[bool] = None

    def __post_init__(self) -> None:
        if self.has_data is None:
            self.has_data = self.data is not None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary, omitting unset fields.

        An explicit null ``data`` is kept.
        """
        result: dict[str, Any] = {}
        if self.id is not None:
            result["id"] = self.id
        if self.success is not None:
            result["success"] = self.success
        if self.has_data:
            result["data"] = self.data
        if self.ready is not None:
            result["ready"] = self.ready
        if self.error is not None:
            result["error"] = self.error
        return result

    def to_line(self) -> str:
        """Encode as a newline-terminated JSON line."""
        return json.dumps(self.to_dict(), ensure_ascii=False, separators=(",", ":")) + "\n"

    @classmethod
    def from_line(cls, line: str) -> "Response":
        """Decode a response line.

        Args:
            line: One line read from the worker's output

        Returns:
            Decoded response

        Raises:
            ProtocolDecodeError: If the line is not valid JSON or has wrong field types
        """
        payload = _loads_object(line)
        _check_type(payload, "id", int, line)
        _check_type(payload, "success", bool, line)
        _check_type(payload, "ready", bool, line)
        _check_type(payload, "error", str, line)

        request_id = payload.get("id")
        if request_id is not None and request_id < 0:
            raise ProtocolDecodeError("Field 'id' must not be negative", line=line)

        return cls(
            id=request_id,
            success=payload.get("success"),
            data=payload.get("data"),
            has_data="data" in payload,
            ready=payload.get("ready"),
            error=payload.get("error"),
        )

    @property
    def is_ready(self) -> bool:
        """Whether this is a readiness announcement."""
        return self.ready is True

    def result(self) -> Any:
        """Resolve the response into a value.

        Returns:
            The ``data`` payload (``None`` for an explicit null), or
            ``"success"`` when the message has no ``data`` key

        Raises:
            ResponseError: If the worker reported an error or ``success: false``
        """
        if self.error is not None:
            raise ResponseError(self.error)

        if self.success is False:
            if isinstance(self.data, str):
                raise ResponseError(self.data)
            raise ResponseError(UNKNOWN_ERROR)

        if not self.has_data:
            return SUCCESS_SENTINEL
        return self.data


READY_LINE = Response(ready=True).to_line()
