"""UrbanMart FastAPI application.

Single-domain web server that processes commands synchronously via HTTP.
Each request runs inside the UrbanMart domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from protean.domain import Domain

from urbanmart import config
from urbanmart.api import routers
from urbanmart.api.errors import register_exception_handlers
from urbanmart.domain import urbanmart
from urbanmart.utils.logging import add_context, clear_context, configure_logging

logger = structlog.get_logger(__name__)


def create_app(domain: Domain = urbanmart, init_domain: bool = False) -> FastAPI:
    """Build the API.

    ``init_domain`` initializes the domain when the app starts up (the
    server entrypoint); tests initialize it themselves.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if init_domain:
            configure_logging()
            # PROTEAN_ENV selects the domain.toml overlay ("production" → PostgreSQL)
            domain.init()
            logger.info("urbanmart_started", domain=domain.name)
        yield

    app = FastAPI(
        title="UrbanMart API",
        description="Marketplace orders, delivery dispatch and delivery organizations",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        """Push the Protean domain context and request log context for each request."""
        clear_context()
        add_context(method=request.method, path=request.url.path)
        with domain.domain_context():
            response = await call_next(request)
        return response

    register_exception_handlers(app)
    for router in routers:
        app.include_router(router)

    @app.get("/health")
    async def health():
        return JSONResponse(content={"status": "ok", "domain": domain.name})

    return app


app = create_app(init_domain=True)
