"""
FastAPI dependencies.
"""

from fastapi import Request

from paper_trading.api.session import PortfolioSession


def get_session(request: Request) -> PortfolioSession:
    """Return the application's portfolio session."""
    return request.app.state.session
