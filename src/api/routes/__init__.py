"""API routes package."""

from .health_routes import router as health_router
from .availability_routes import router as availability_router, get_engine

__all__ = ["health_router", "availability_router", "get_engine"]
