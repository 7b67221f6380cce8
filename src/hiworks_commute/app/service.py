"""Attendance actions routed through a single serialized worker."""

import logging
import threading
from dataclasses import dataclass
from typing import Any, Optional

from hiworks_commute.worker.errors import WorkerError
from hiworks_commute.worker.manager import WorkerManager

logger = logging.getLogger(__name__)


class CompanyUrlNotSetError(WorkerError):
    """The company portal URL has not been configured."""

    def __init__(self) -> None:
        super().__init__("Set the company URL first (hiworks-commute account set-url URL)")


@dataclass(frozen=True)
class Action:
    """A worker action and how its result is presented."""

    name: str
    title: str
    default_message: str
    status: Optional[str] = None
    requires_company_url: bool = False


ACTIONS: dict[str, Action] = {
    action.name: action
    for action in (
        Action("checkIn", "Hiworks Check-in", "Checked in", "Working", True),
        Action("checkOut", "Hiworks Check-out", "Checked out", "Off work"),
        Action("setWork", "Hiworks Work", "Status changed to work", "Working"),
        Action("goOut", "Hiworks Out", "Status changed to out", "Out"),
        Action("setMeeting", "Hiworks Meeting", "Status changed to meeting", "In a meeting"),
        Action("setOutwork", "Hiworks Field Work", "Status changed to field work", "Field work"),
        Action("openLogin", "Hiworks", "Browser opened, please log in", None, True),
        Action("getStatus", "Hiworks Status", "Status retrieved"),
        Action("isLoggedIn", "Hiworks", "Login state retrieved"),
        Action("setCompanyUrl", "Hiworks", "Company URL saved"),
        Action("getCompanyUrl", "Hiworks", ""),
        Action("setUsername", "Hiworks", "Username saved"),
        Action("getUsername", "Hiworks", ""),
        Action("setPassword", "Hiworks", "Password saved"),
        Action("hasPassword", "Hiworks", ""),
    )
}


def message_from(result: Any, default: str) -> str:
    """Extract display text from an action result.

    Args:
        result: Value returned by the worker
        default: Text used when the result carries no message

    Returns:
        Message to display
    """
    if isinstance(result, dict):
        message = result.get("message")
        if isinstance(message, str):
            return message
    elif isinstance(result, str):
        return result
    return default


class CommuteService:
    """Serialize all worker access behind one lock.

    The worker protocol allows a single outstanding request, so every call
    takes the service lock for its full round trip.
    """

    def __init__(self, manager: Optional[WorkerManager] = None):
        """Initialize service.

        Args:
            manager: Worker manager to drive (default: new manager)
        """
        self.manager = manager or WorkerManager()
        self.status: Optional[str] = None
        self._lock = threading.Lock()

    def call(self, action: str, params: Optional[dict[str, Any]] = None) -> Any:
        """Send one action to the worker.

        Args:
            action: Worker action name
            params: Action parameters

        Returns:
            Result data from the worker

        Raises:
            WorkerError: If the action failed
        """
        with self._lock:
            return self.manager.send_command(action, params or {})

    def run(self, action: str, params: Optional[dict[str, Any]] = None) -> str:
        """Run a known action and return its display message.

        Checks the company URL first for actions that need the portal, and
        records the resulting attendance status.

        Raises:
            KeyError: If the action is unknown
            CompanyUrlNotSetError: If the action needs a company URL that is not set
            WorkerError: If the action failed
        """
        spec = ACTIONS[action]
        with self._lock:
            if spec.requires_company_url:
                url = self.manager.send_command("getCompanyUrl", {})
                if not url:
                    raise CompanyUrlNotSetError()

            result = self.manager.send_command(action, params or {})

        if spec.status:
            self.status = spec.status
        message = message_from(result, spec.default_message)
        logger.info(f"{action}: {message}")
        return message

    def stop(self) -> None:
        """Stop the worker.

        Does not wait for the service lock, so a blocked call is cancelled.
        """
        self.manager.stop()

    def check_in(self) -> str:
        return self.run("checkIn")

    def check_out(self) -> str:
        return self.run("checkOut")

    def set_work(self) -> str:
        return self.run("setWork")

    def go_out(self) -> str:
        return self.run("goOut")

    def set_meeting(self) -> str:
        return self.run("setMeeting")

    def set_outwork(self) -> str:
        return self.run("setOutwork")

    def open_login(self) -> str:
        return self.run("openLogin")

    def get_status(self) -> Any:
        """Get the current attendance status from the portal."""
        return self.call("getStatus")

    def is_logged_in(self) -> bool:
        return self.call("isLoggedIn") is True

    def set_company_url(self, url: str) -> str:
        return self.run("setCompanyUrl", {"url": url})

    def get_company_url(self) -> Optional[str]:
        result = self.call("getCompanyUrl")
        return result if isinstance(result, str) and result else None

    def set_username(self, username: str) -> str:
        return self.run("setUsername", {"username": username})

    def get_username(self) -> Optional[str]:
        result = self.call("getUsername")
        return result if isinstance(result, str) and result else None

    def set_password(self, password: str) -> str:
        return self.run("setPassword", {"password": password})

    def has_password(self) -> bool:
        return self.call("hasPassword") is True

    def __enter__(self) -> "CommuteService":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.stop()
