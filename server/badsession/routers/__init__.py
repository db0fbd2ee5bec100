"""API routers for the BadSession application."""

from badsession.routers import (
    attendance,
    auth,
    dashboard,
    finance,
    matches,
    sessions,
    users,
)  # noqa: F401
