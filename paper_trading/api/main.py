"""
FastAPI main application for the paper trading simulator.
"""

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from paper_trading import __version__
from paper_trading.api.session import PortfolioSession
from paper_trading.core.config import Settings
from paper_trading.core.logging_setup import setup_logging

from .routers import pairs, portfolio


def create_app(settings: Settings | None = None, session: PortfolioSession | None = None) -> FastAPI:
    """Build the API application.

    Args:
        settings: Application settings (default: read from environment)
        session: Pre-built portfolio session, mainly for tests
    """
    settings = settings or Settings.from_env()
    setup_logging(settings.log_level)

    app = FastAPI(
        title="Paper Trading API",
        version=__version__,
        description="Virtual leveraged long/short portfolio simulator",
    )

    # For development, use environment-specific origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:3000",  # Development frontend
            "http://localhost:8080",  # Alternative development port
        ],
        allow_credentials=False,
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type", "Accept", "Origin", "X-Requested-With"],
    )

    app.state.session = session or PortfolioSession.from_settings(settings)

    app.include_router(portfolio.router, prefix="/api/portfolio", tags=["portfolio"])
    app.include_router(pairs.router, prefix="/api", tags=["pairs"])

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """Report request validation errors without echoing the rejected input."""
        errors = [{k: v for k, v in error.items() if k != "input"} for error in exc.errors()]
        logger.warning(f"Rejected {request.method} {request.url.path}: {len(errors)} validation error(s)")
        return JSONResponse(status_code=422, content={"detail": jsonable_encoder(errors)})

    @app.get("/")
    async def root() -> dict[str, str]:
        """Root endpoint returning API information."""
        return {"message": "Paper Trading API", "version": __version__, "status": "running"}

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


app = create_app()
