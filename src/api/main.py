"""
FastAPI application - Main entry point
"""

from dotenv import load_dotenv

load_dotenv()

import logging
import os
from datetime import datetime
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.error_handler import ErrorHandler
from src.api.security import api_key_protection
from src.forms.context import SessionContext
from src.forms.state_manager import StateManager
from src.utils.config_loader import get_quote_config

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Term Life Quoting API",
    description="Term-life rate quotes, quote comparison and quote request intake",
    version="1.0.0",
    dependencies=[Depends(api_key_protection)],  # protect everything by default
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ============================================================================
# DEPENDENCY INJECTION
# ============================================================================

quote_config = get_quote_config()

# Use real Redis when env is set, else the in-memory stub
if os.getenv("REDIS_URL"):
    from src.database.redis_real import RedisCache

    redis_cache = RedisCache(url=os.environ["REDIS_URL"], default_ttl=quote_config.intake.session_ttl_seconds)
else:
    from src.database.redis import RedisCache

    redis_cache = RedisCache()

# Integration clients: real HTTP when the endpoint is configured, else mocks
if os.getenv("QUOTE_REQUESTS_API_URL"):
    from src.integrations.clients.real_http.quote_requests import RealQuoteRequestClient

    quote_client = RealQuoteRequestClient()
else:
    from src.integrations.clients.mocks.quote_requests import MockQuoteRequestClient

    quote_client = MockQuoteRequestClient()

if os.getenv("TRAINING_PROGRESS_API_URL"):
    from src.integrations.clients.real_http.training_progress import RealTrainingProgressClient

    training_client = RealTrainingProgressClient()
else:
    from src.integrations.clients.mocks.training_progress import MockTrainingProgressClient

    training_client = MockTrainingProgressClient()

state_manager = StateManager(redis_cache, quote_config.intake)
error_handler = ErrorHandler()


def get_redis():
    """Dependency for Redis cache"""
    return redis_cache


def get_config():
    """Dependency for the quoting configuration"""
    return quote_config


def get_quote_client():
    """Dependency for the quote request client"""
    return quote_client


def get_training_client():
    """Dependency for the training progress client"""
    return training_client


def get_state_manager():
    """Dependency for wizard session state"""
    return state_manager


def get_session_context(
    visitor_id: Optional[str] = None,
    redis_cache=Depends(get_redis),
    client=Depends(get_quote_client),
    config=Depends(get_config),
) -> SessionContext:
    """Dependency for a per-request session context (preferences namespaced by visitor)"""
    return SessionContext.create(redis_cache, client, config=config, visitor_id=visitor_id)


# ============================================================================
# ENDPOINTS
# ============================================================================
@app.get("/", tags=["Health"])
async def root():
    """Health check endpoint."""
    return {"service": "Term Life Quoting API", "status": "healthy", "version": "1.0.0", "timestamp": datetime.now().isoformat()}


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check (Redis, quote client mode)."""
    return {
        "status": "healthy",
        "database": {"redis": redis_cache.ping()},
        "quote_requests": "real" if os.getenv("QUOTE_REQUESTS_API_URL") else "mock",
        "timestamp": datetime.now().isoformat(),
    }


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    payload = error_handler.handle_exception(exc, context={"path": request.url.path})
    return JSONResponse(status_code=500, content={"error": "internal_error", "message": payload["message"]})


# ============================================================================
# ROUTERS
# ============================================================================
from src.api.preferences_router import api as preferences_api  # noqa: E402
from src.api.quote_forms_router import api as quote_forms_api  # noqa: E402
from src.api.quotes_router import api as quotes_api  # noqa: E402
from src.api.training_router import api as training_api  # noqa: E402

# API versioning: primary prefix is /api/v1; /api is kept for backward compatibility
for _router in (quotes_api, quote_forms_api, preferences_api, training_api):
    app.include_router(_router, prefix="/api/v1")
    app.include_router(_router, prefix="/api")


# ============================================================================
# STARTUP/SHUTDOWN EVENTS
# ============================================================================
@app.on_event("startup")
async def startup_event():
    """Initialize on startup"""
    logger.info("Starting Term Life Quoting API...")
    logger.info(
        "Quote requests client: %s; training progress client: %s",
        type(quote_client).__name__,
        type(training_client).__name__,
    )

    # Test Redis connection
    if redis_cache.ping():
        logger.info("Redis connection successful")
    else:
        logger.warning("Redis connection failed")


@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown"""
    logger.info("Shutting down Term Life Quoting API...")
