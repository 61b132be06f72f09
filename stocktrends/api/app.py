"""FastAPI application factory with lifespan, CORS, error handlers, and routers."""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from stocktrends import __version__
from stocktrends.config import get_settings
from stocktrends.errors import StockTrendsError

logger = logging.getLogger(__name__)

_start_time: float = 0.0


def get_uptime() -> float:
    return time.time() - _start_time if _start_time else 0.0


@asynccontextmanager
async def _lifespan(app: FastAPI):
    global _start_time
    _start_time = time.time()

    configured = [name for name, ok in get_settings().configured_providers.items() if ok]
    if configured:
        logger.info("Stock Trends API v%s starting (providers: %s)", __version__, ", ".join(configured))
    else:
        logger.warning("Stock Trends API v%s starting with no provider credentials", __version__)
    yield
    logger.info("Stock Trends API shutting down")


async def _handle_domain_error(request: Request, exc: StockTrendsError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


async def _handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = []
    for err in exc.errors():
        where = ".".join(str(part) for part in err.get("loc", ()) if part != "query")
        problems.append(f"{where}: {err.get('msg', 'invalid value')}" if where else err.get("msg", "invalid value"))
    return JSONResponse(status_code=400, content={"error": "; ".join(problems) or "Invalid request"})


async def _handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": str(exc) or exc.__class__.__name__})


def create_app() -> FastAPI:
    """Build and return the fully-configured FastAPI application."""
    app = FastAPI(
        title="Stock Trends",
        description="Multi-provider price history with period heatmaps",
        version=__version__,
        lifespan=_lifespan,
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, _handle_validation_error)
    app.add_exception_handler(StockTrendsError, _handle_domain_error)
    app.add_exception_handler(Exception, _handle_unexpected)

    # Routers
    from stocktrends.api.routes import stock_data, symbols, system
    app.include_router(stock_data.router, prefix="/api")
    app.include_router(symbols.router, prefix="/api")
    app.include_router(system.router, prefix="/api")

    return app
