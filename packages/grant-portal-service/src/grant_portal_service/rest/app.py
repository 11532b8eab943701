"""FastAPI application factory."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from grant_portal_service.db.engine import close_db, init_db
from grant_portal_service.rest.errors import install_error_handlers
from grant_portal_service.rest.routes.admin import router as admin_router
from grant_portal_service.rest.routes.cycles import router as cycles_router
from grant_portal_service.rest.routes.documents import router as documents_router
from grant_portal_service.rest.routes.health import router as health_router
from grant_portal_service.rest.routes.organizations import router as organizations_router
from grant_portal_service.rest.routes.session import pages_router
from grant_portal_service.rest.routes.session import router as session_router
from grant_portal_service.settings import settings


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    await init_db()
    yield
    await close_db()


def include_routes(app: FastAPI) -> None:
    # Public routes
    app.include_router(health_router, tags=["health"])
    app.include_router(pages_router, tags=["session"])

    # Every /api route resolves the caller; guards live on the individual routes
    app.include_router(session_router, prefix="/api", tags=["session"])
    app.include_router(cycles_router, prefix="/api", tags=["cycles"])
    app.include_router(organizations_router, prefix="/api", tags=["organizations"])
    app.include_router(documents_router, prefix="/api", tags=["documents"])
    app.include_router(admin_router, prefix="/api", tags=["admin"])


def create_app() -> FastAPI:
    app = FastAPI(
        title="Grant Portal API",
        description="Letters of intent, applications, and staff review for a grant-making foundation",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    install_error_handlers(app)
    include_routes(app)
    return app
