"""Application layer: serialized attendance actions and notifications."""

from hiworks_commute.app.notifier import Notifier
from hiworks_commute.app.service import ACTIONS, CommuteService, CompanyUrlNotSetError

__all__ = ["ACTIONS", "CommuteService", "CompanyUrlNotSetError", "Notifier"]
