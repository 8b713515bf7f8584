"""
Owner dashboard: an immutable reducer store (`store`) and the controller that
drives it against the API (`controller`).
"""

from app.dashboard.controller import DashboardController
from app.dashboard.store import (
    DashboardState,
    DashboardStore,
    MessageView,
    PersonView,
    active_messages,
    reduce,
    resolved_messages,
)

__all__ = [
    "DashboardController",
    "DashboardState",
    "DashboardStore",
    "MessageView",
    "PersonView",
    "active_messages",
    "reduce",
    "resolved_messages",
]
