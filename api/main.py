"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

from api.routes import deck, spreads
from api.session import get_deck_session
from config import config
from logging_config import setup_logging
from tarot.exceptions import EngineNotInitializedError, PersistenceError

logger = logging.getLogger(__name__)

# Initialize rate limiter
limiter = Limiter(
    key_func=get_remote_address,
    enabled=config.rate_limit.enabled,
    default_limits=[f"{config.rate_limit.requests_per_minute}/minute"],
)


def _rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Handle rate limit exceeded errors."""
    return JSONResponse(
        status_code=429,
        content={"detail": f"Rate limit exceeded: {exc.detail}"},
    )


def _persistence_error_handler(request: Request, exc: PersistenceError) -> JSONResponse:
    """The deck changed in memory but the saved copy is stale."""
    logger.error("Request %s %s left deck unsaved: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=503,
        content={"detail": f"Deck state could not be saved: {exc}"},
    )


def _not_initialized_handler(request: Request, exc: EngineNotInitializedError) -> JSONResponse:
    return JSONResponse(status_code=409, content={"detail": str(exc)})


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Configure logging and load the deck before serving."""
    setup_logging(config.logging)
    get_deck_session()
    yield


app = FastAPI(
    title="Tarot Deck",
    description="Physically shuffled tarot deck with persistent piles",
    version="0.1.0",
    lifespan=lifespan,
)

# Add rate limiter to app state and exception handlers
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_exception_handler(PersistenceError, _persistence_error_handler)
app.add_exception_handler(EngineNotInitializedError, _not_initialized_handler)

# CORS middleware with configurable origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors.allowed_origins,
    allow_credentials=config.cors.allow_credentials,
    allow_methods=config.cors.allow_methods,
    allow_headers=config.cors.allow_headers,
)


@app.get("/api/health")
@limiter.limit(f"{config.rate_limit.requests_per_minute}/minute")
async def health_check(request: Request) -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


# Include routers
app.include_router(deck.router, prefix="/api/deck", tags=["deck"])
app.include_router(spreads.router, prefix="/api/spreads", tags=["spreads"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("api.main:app", host=config.host, port=config.port, reload=config.debug)
