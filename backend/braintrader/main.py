"""
Braintrader - Trading Journal
FastAPI Backend Application
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from braintrader import __version__
from braintrader import models  # noqa: F401  registers tables on Base.metadata
from braintrader.api.api import api_router
from braintrader.api.deps import get_identity_registry, get_record_feed
from braintrader.core.config import settings
from braintrader.core.errors import JournalError
from braintrader.db.base import Base
from braintrader.db.session import engine, redis_client
from braintrader.monitoring.logger import setup_logging
from braintrader.services.notifier import RedisChangeListener

# Set up logging
setup_logging(settings)
logger = logging.getLogger(__name__)


def _resolve(app: FastAPI, dependency):
    # Honour dependency overrides so the listener shares the request-time objects
    return app.dependency_overrides.get(dependency, dependency)()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create all database tables
    Base.metadata.create_all(bind=engine)
    if not settings.secret_is_configured:
        logger.warning("JWT secret key is not configured; sign-in will be refused")
    listener = None
    if settings.publish_changes:
        listener = RedisChangeListener(
            redis_client,
            _resolve(app, get_record_feed),
            _resolve(app, get_identity_registry),
            settings.change_channel_prefix,
        )
        listener.start()
    logger.info("Braintrader API started")
    yield
    if listener is not None:
        listener.stop()
    logger.info("Braintrader API stopped")


app = FastAPI(
    title="Braintrader API",
    description="Trading journal with profit analytics and live dashboards",
    version=__version__,
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(JournalError)
async def journal_error_handler(request: Request, exc: JournalError):
    headers = None
    if exc.status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.user_message}, headers=headers)


# Include routers
app.include_router(api_router, prefix=settings.api_prefix)


@app.get(f"{settings.api_prefix}/health", tags=["Health"])
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "version": __version__}


if __name__ == "__main__":
    # Run the application
    uvicorn.run(
        "braintrader.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
