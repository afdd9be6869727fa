import os
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from trackboard.api.routes import activity, boards, epics, items, realtime, reports, sprints, system
from trackboard.core.errors import BoardError
from trackboard.core.logging_config import configure_logging
from trackboard.core.realtime import Broadcaster, ChannelRegistry
from trackboard.db.base import Base
from trackboard.db.session import engine, async_session
import trackboard.db.models  # noqa: F401  registers the tables on Base.metadata

configure_logging()
logger = logging.getLogger("root")

# Detect environment (default to production)
ENV = os.getenv("APP_ENV", "production").lower()
CREATE_SCHEMA = os.getenv("CREATE_SCHEMA", "true").lower() == "true"


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup logic
    if CREATE_SCHEMA:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database initialized")
    app.state.broadcaster = Broadcaster(ChannelRegistry())

    yield  # App runs here

    logger.info(f"Shutting down with {len(app.state.broadcaster.registry)} open subscribers")
    await engine.dispose()


app = FastAPI(
    title="Trackboard API",
    version="0.1",
    lifespan=lifespan,
)

if ENV == "development":
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    logger.info("CORS allowed for development environment")
else:
    origins = [o.strip() for o in os.getenv("CORS_ORIGINS", "").split(",") if o.strip()]
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
    logger.info("Running in production environment - CORS restricted")


@app.exception_handler(BoardError)
async def board_error_handler(request: Request, exc: BoardError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


# API routes
app.include_router(boards.router)
app.include_router(items.board_router)
app.include_router(items.router)
app.include_router(epics.board_router)
app.include_router(epics.router)
app.include_router(sprints.board_router)
app.include_router(sprints.router)
app.include_router(activity.board_router)
app.include_router(activity.router)
app.include_router(reports.router)
app.include_router(system.router)
app.include_router(realtime.router)


@app.api_route("/api/health", methods=["GET", "HEAD"])
async def health():
    status = {
        "api": "ok",
        "database": None,
    }

    http_status = 200

    # --- Database check ---
    try:
        async with async_session() as db:
            await db.execute(text("SELECT 1"))
        status["database"] = "connected"
    except Exception as e:
        status["database"] = f"error: {e}"
        http_status = 503

    return JSONResponse(content=status, status_code=http_status)
