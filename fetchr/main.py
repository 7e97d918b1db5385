from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from importlib.metadata import version as pkg_version

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fetchr.api import commanders_router, health_router, picks_router
from fetchr.api.state import store_loader
from fetchr.config import settings
from fetchr.db.database import init_db


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Create tables and load the commander set on startup."""
    await init_db()
    await store_loader.reload()
    yield


app = FastAPI(
    title=settings.app_name,
    version=pkg_version("fetchr"),
    lifespan=lifespan,
)

app.include_router(commanders_router)
app.include_router(health_router)
app.include_router(picks_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Tighten in production
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)
