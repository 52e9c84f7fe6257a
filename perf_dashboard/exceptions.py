"""Exceptions shared between the services, the store and the routers.

Each one maps to a single HTTP status in ``main.py``. Numeric form input is
never an error (it is coerced to zero), so there is no validation exception
for counts here.
"""

from __future__ import annotations


class DashboardError(Exception):
    """Base class for errors surfaced to the dashboard user."""

    status_code = 500

    def __init__(self, message: str = "") -> None:
        # Default message is the class docstring (shown in the UI notice)
        self.message = message or (self.__doc__ or "").strip() or self.__class__.__name__
        super().__init__(self.message)


class NotAuthorized(DashboardError):
    """Enter the access code first."""

    status_code = 403


class UnknownConsultant(DashboardError):
    """Consultant is not on the roster."""

    status_code = 400


class PersistenceError(DashboardError):
    """Raised when the entry store cannot read or write."""

    status_code = 503


class LoadError(DashboardError):
    """Failed to load data."""

    status_code = 503
