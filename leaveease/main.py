from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from leaveease.api.v1.auth.router import router as auth_router
from leaveease.core.config import settings
from leaveease.core.logging import RequestLoggingMiddleware, configure_logging
from leaveease.db.init_db import create_tables
from leaveease.api.v1.leaves.router import router as leaves_router
from leaveease.api.v1.ping.router import router as ping_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    await create_tables()
    yield


def create_app() -> FastAPI:
    configure_logging(settings.log_level)

    app = FastAPI(
        title="LeaveEase API",
        description="Employee leave management: submit, review and decide leave requests.",
        version="1.0",
        lifespan=lifespan,
    )

    # CORS: allow frontend to call this API
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    # Routers
    app.include_router(auth_router)
    app.include_router(leaves_router)
    app.include_router(ping_router)

    return app


app = create_app()
