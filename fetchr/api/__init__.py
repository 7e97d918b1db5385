from fetchr.api.commanders import router as commanders_router
from fetchr.api.health import router as health_router
from fetchr.api.picks import router as picks_router

__all__ = [
    "commanders_router",
    "health_router",
    "picks_router",
]
