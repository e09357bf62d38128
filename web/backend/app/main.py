from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api import games, health
from .services.session import session_manager

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Lifespan: start TTL cleanup task on boot, cancel on shutdown
# ---------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    task = asyncio.create_task(session_manager.cleanup_loop())
    logger.info("Session cleanup task started")
    try:
        yield
    finally:
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass


# ---------------------------------------------------------------------------
# App
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Chakra API",
    description="Backend game API for the Chakra web interface.",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS — allow a locally served browser client
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ],
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes
app.include_router(health.router, prefix="/api")
app.include_router(games.router,  prefix="/api")


# ---------------------------------------------------------------------------
# Unmatched routes and methods use the same error body as the game routes
# ---------------------------------------------------------------------------

@app.exception_handler(StarletteHTTPException)
async def http_error(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error_code": "NOT_FOUND" if exc.status_code == 404 else "HTTP_ERROR",
            "message": str(exc.detail),
            "details": {"path": request.url.path},
        },
        headers=getattr(exc, "headers", None),
    )
