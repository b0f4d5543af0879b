"""FastAPI application for Pro Fit Agent."""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .config import get_settings
from .logging_config import configure_logging
from .api.routes import activity, coach, messaging, milestones, onboarding, plan, sessions
from .api.exception_handlers import register_exception_handlers

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    configure_logging()
    settings = get_settings()
    logger.info(f"Starting Pro Fit Agent v{__version__}")
    logger.info(f"Database: {settings.database_path}")
    logger.info(f"Advisory mode: {settings.advisory_mode}")
    yield
    logger.info("Shutting down Pro Fit Agent")


app = FastAPI(
    title="Pro Fit Agent API",
    description="Training plan engine and coach for 70.3 triathletes",
    version=__version__,
    lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

ATHLETES_PREFIX = "/api/v1/athletes"
app.include_router(onboarding.router, prefix=ATHLETES_PREFIX, tags=["onboarding"])
app.include_router(plan.router, prefix=ATHLETES_PREFIX, tags=["plan"])
app.include_router(sessions.router, prefix=ATHLETES_PREFIX, tags=["sessions"])
app.include_router(activity.router, prefix=ATHLETES_PREFIX, tags=["activity"])
app.include_router(milestones.router, prefix=ATHLETES_PREFIX, tags=["milestones"])
app.include_router(coach.router, prefix=ATHLETES_PREFIX, tags=["coach"])
app.include_router(messaging.athletes_router, prefix=ATHLETES_PREFIX, tags=["messaging"])
app.include_router(messaging.router, prefix="/api/v1/messaging", tags=["messaging"])


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "Pro Fit Agent API",
        "version": __version__,
        "status": "healthy",
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
