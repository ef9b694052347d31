"""API routers for Bill Tracker.

Each router handles a specific domain of the API.
"""

from billtracker.api.routers.calendar import router as calendar_router
from billtracker.api.routers.database import router as database_router
from billtracker.api.routers.files import router as files_router
from billtracker.api.routers.system import router as system_router

__all__ = [
    "calendar_router",
    "database_router",
    "files_router",
    "system_router",
]
