from .admin import router as admin_router
from .auth import router as auth_router
from .messages import router as messages_router

__all__ = [
    "admin_router",
    "auth_router",
    "messages_router",
]
