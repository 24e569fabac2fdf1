"""
Trading pair and form-default endpoints.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from paper_trading.api.dependencies import get_session
from paper_trading.api.schemas.api_models import (
    AddPairRequest,
    AddPairResponse,
    MetaResponse,
    PairsResponse,
)
from paper_trading.api.session import PortfolioSession
from paper_trading.core.constants import DEFAULT_BALANCE, LEVERAGE_OPTIONS, SETUP_TAGS
from paper_trading.core.exceptions.paper_trading import ValidationError

router = APIRouter()

SessionDep = Annotated[PortfolioSession, Depends(get_session)]


@router.get("/pairs", response_model=PairsResponse)
async def get_pairs(session: SessionDep) -> PairsResponse:
    """Get every known trading pair."""
    return PairsResponse(pairs=session.known_pairs())


@router.post("/pairs", response_model=AddPairResponse)
async def add_pair(request: AddPairRequest, session: SessionDep) -> AddPairResponse:
    """Register a custom trading pair."""
    try:
        added = session.add_pair(request.pair)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    return AddPairResponse(pair=request.pair.strip(), added=added)


@router.get("/meta", response_model=MetaResponse)
async def get_meta() -> MetaResponse:
    """Get defaults offered to trading forms."""
    return MetaResponse(
        starting_balance=DEFAULT_BALANCE,
        leverage_options=list(LEVERAGE_OPTIONS),
        setup_tags=list(SETUP_TAGS),
    )
