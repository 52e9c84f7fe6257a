"""Initialize router subpackage."""

from .dashboard import router as dashboard_router  # noqa: F401
from .api import router as api_router  # noqa: F401
