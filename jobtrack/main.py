"""
JobTrack - Backend API
FastAPI + JWT bearer auth + SQLAlchemy
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .config import get_config
from .db.database import close_db, get_app_engine, init_db
from .errors import NotFoundOrUnauthorized, StorageError, Unauthenticated, ValidationError
from .routers import export, health, jobs, stats

config = get_config()

logging.basicConfig(
    level=config.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables on startup, dispose the engine on shutdown."""
    init_db(get_app_engine())
    logger.info(f"JobTrack API v{app.version} started")
    yield
    close_db()
    logger.info("Shutting down")


app = FastAPI(
    title="JobTrack API",
    description="Job application tracking: listing, statistics and exports",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Error mapping
# ---------------------------------------------------------------------------

@app.exception_handler(Unauthenticated)
async def unauthenticated_handler(request: Request, exc: Unauthenticated):
    return JSONResponse(
        status_code=401,
        content={"detail": str(exc)},
        headers={"WWW-Authenticate": "Bearer"},
    )


@app.exception_handler(ValidationError)
async def validation_handler(request: Request, exc: ValidationError):
    return JSONResponse(
        status_code=422,
        content={"detail": str(exc), "errors": exc.errors},
    )


@app.exception_handler(NotFoundOrUnauthorized)
async def not_found_handler(request: Request, exc: NotFoundOrUnauthorized):
    return JSONResponse(status_code=404, content={"detail": "Job not found"})


@app.exception_handler(StorageError)
async def storage_handler(request: Request, exc: StorageError):
    return JSONResponse(status_code=500, content={"detail": str(exc)})


# Include routers
app.include_router(health.router, tags=["Health"])
app.include_router(jobs.router, prefix="/api/jobs", tags=["Jobs"])
app.include_router(stats.router, prefix="/api/stats", tags=["Stats"])
app.include_router(export.router, prefix="/api/export", tags=["Export"])


@app.get("/")
def root():
    return {
        "name": "JobTrack API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health",
    }
