"""
Portfolio API endpoints.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse

from paper_trading.api.dependencies import get_session
from paper_trading.api.schemas.api_models import (
    ClosePositionRequest,
    ErrorResponse,
    OpenPositionRequest,
    PortfolioResponse,
    UnrealizedPnLResponse,
)
from paper_trading.api.session import PortfolioSession
from paper_trading.core.exceptions.paper_trading import PositionNotFoundError
from paper_trading.core.models import Portfolio
from paper_trading.core.models.portfolio_metrics import summarize

router = APIRouter()

SessionDep = Annotated[PortfolioSession, Depends(get_session)]


def _portfolio_response(portfolio: Portfolio) -> PortfolioResponse:
    return PortfolioResponse(portfolio=portfolio.to_dict(), summary=summarize(portfolio).to_dict())


@router.get("", response_model=PortfolioResponse)
async def get_portfolio(session: SessionDep) -> PortfolioResponse:
    """Get the current portfolio snapshot and summary."""
    return _portfolio_response(session.portfolio)


@router.post(
    "/positions",
    response_model=PortfolioResponse,
    status_code=status.HTTP_201_CREATED,
    responses={422: {"model": ErrorResponse}},
)
async def open_position(request: OpenPositionRequest, session: SessionDep):
    """Open a position. Declined opens return 422 and leave the portfolio untouched."""
    result = session.open(request.to_params())
    if not result.ok:
        error = ErrorResponse(error="open_declined", message=result.error or "", kind=result.error_kind)
        return JSONResponse(
            status_code=422,
            content=error.model_dump(mode="json"),
        )
    return _portfolio_response(result.portfolio)


@router.post("/positions/{position_id}/close", response_model=PortfolioResponse)
async def close_position(
    position_id: str, request: ClosePositionRequest, session: SessionDep
) -> PortfolioResponse:
    """Close a position. Unknown ids return the unchanged portfolio."""
    return _portfolio_response(session.close(position_id, request.close_price, request.closed_at))


@router.get("/positions/{position_id}/pnl", response_model=UnrealizedPnLResponse)
async def get_unrealized_pnl(
    position_id: str,
    session: SessionDep,
    price: Annotated[float, Query(gt=0, allow_inf_nan=False, description="Current market price")],
) -> UnrealizedPnLResponse:
    """Mark an open position to a price."""
    try:
        pnl = session.unrealized_pnl(position_id, price)
    except PositionNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    return UnrealizedPnLResponse(position_id=position_id, price=price, unrealized_pnl=pnl)


@router.post("/reset", response_model=PortfolioResponse)
async def reset_portfolio(session: SessionDep) -> PortfolioResponse:
    """Reset the portfolio to the starting balance."""
    return _portfolio_response(session.reset())
