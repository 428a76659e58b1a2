"""API routes package."""

from gateway.routes.file_routes import router as file_router
from gateway.routes.public_routes import router as public_router
from gateway.routes.upload_routes import router as upload_router
from gateway.routes.user_routes import router as user_router

__all__ = ["file_router", "public_router", "upload_router", "user_router"]
