"""
ASGI entry point: ``uvicorn src.main:app``.

Routes live under ``/api`` except the root banner. Errors of every kind
leave through the handlers in ``src.core.handlers`` as the failure
envelope.
"""

import logging

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.middleware import SlowAPIMiddleware

from src.api.routes import auth, entities, health, integrations, invitations, root, workspaces
from src.core import settings
from src.core.handlers import register_exception_handlers
from src.core.lifespan import lifespan
from src.core.logging import setup_logging
from src.core.rate_limit import limiter
from src.middleware import (
    RequestIDMiddleware,
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
)

setup_logging()
logger = logging.getLogger(__name__)

API_ROUTERS = (health, auth, entities, workspaces, invitations, integrations)


def install_middleware(application: FastAPI) -> None:
    """
    Register middleware so that, outermost first, requests pass through
    CORS, RequestID, RequestLogging, SecurityHeaders, SlowAPI.

    ``add_middleware`` wraps whatever is already registered, hence the
    reversed order below.
    """
    # Applies default_limits to every route without its own @limiter.limit
    application.add_middleware(SlowAPIMiddleware)
    application.add_middleware(SecurityHeadersMiddleware, enable_hsts=settings.is_production)
    application.add_middleware(RequestLoggingMiddleware)
    # Must wrap the access log so the request id is set when it logs
    application.add_middleware(RequestIDMiddleware)
    # Outermost so preflights and error responses get CORS headers too
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def build_api_router() -> APIRouter:
    api_router = APIRouter(prefix="/api")
    for module in API_ROUTERS:
        api_router.include_router(module.router)
    return api_router


app = FastAPI(
    title=settings.app_name,
    version=settings.version,
    description=settings.description,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    lifespan=lifespan,
)
# Read by SlowAPIMiddleware and every @limiter.limit decorator
app.state.limiter = limiter

register_exception_handlers(app)
install_middleware(app)

app.include_router(root.router)
app.include_router(build_api_router())
