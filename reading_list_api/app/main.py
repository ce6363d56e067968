"""
Main entrypoint for the Reading List API.

This module assembles the FastAPI application: it sets up logging,
attaches a fresh :class:`BookStore`, registers the error handlers and
includes the routers.  ``create_app`` builds and configures the app,
which is then instantiated at module import time as ``app`` so it can
be served directly, e.g.::

    uvicorn reading_list_api.app.main:app --port 8080
"""

from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.v1.router import health_router, router as v1_router
from .core.config import settings
from .core.errors import register_exception_handlers
from .core.logging_config import setup_logging
from .services.book_store import BookStore


def create_app(store: Optional[BookStore] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    store : Optional[BookStore]
        Store backing the book routes.  A new, empty store is created
        when omitted.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    setup_logging(settings.log_level, settings.log_file)

    app = FastAPI(title=settings.project_name, version=settings.api_version)
    app.state.book_store = store if store is not None else BookStore()

    # The browser front end calls the API from another origin.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(v1_router, prefix="/reading-list")
    app.include_router(health_router, tags=["health"])

    return app


app = create_app()
