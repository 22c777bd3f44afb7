"""
API route modules.
"""

from api.routes.memos import router as memos_router
from api.routes.users import router as users_router
from api.routes.health import router as health_router

__all__ = ["memos_router", "users_router", "health_router"]
