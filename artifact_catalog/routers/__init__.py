from .category_router import router as category_router
from .artifact_router import router as artifact_router
from .health_router import router as health_router

__all__ = ["category_router", "artifact_router", "health_router"]
