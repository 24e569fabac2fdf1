"""
Pydantic schemas for API request/response models.
"""

from pydantic import BaseModel, Field, field_validator

from paper_trading.core.constants import SETUP_TAGS
from paper_trading.core.enums import Direction, OpenErrorKind
from paper_trading.core.models import OpenPositionParams
from paper_trading.core.utils.formatting import format_timestamp


class OpenPositionRequest(BaseModel):
    """Request model for opening a position.

    Numeric bounds are left to the engine, which declines bad values with
    a typed error instead of a schema failure.
    """

    pair: str = Field(..., min_length=1, description="Trading pair, e.g. BTC/USDT")
    direction: Direction = Field(..., description="Long or Short")
    leverage: float = Field(default=1.0, description="Leverage multiplier")
    size_usdt: float = Field(..., description="Notional position size in quote currency")
    entry_price: float = Field(..., description="Entry price")
    stop_loss: float = Field(..., description="Stop-loss price")
    take_profit: float = Field(..., description="Take-profit price")
    tags: list[str] = Field(default_factory=list, description=f"Setup tags, e.g. {', '.join(SETUP_TAGS)}")
    notes: str = ""
    opened_at: str | None = Field(default=None, description="Display timestamp (default now)")

    @field_validator("pair")
    @classmethod
    def normalize_pair(cls, v: str) -> str:
        """Strip whitespace around the pair."""
        if not v.strip():
            raise ValueError("pair must not be blank")
        return v.strip()

    def to_params(self) -> OpenPositionParams:
        """Convert request to engine parameters."""
        return OpenPositionParams(
            pair=self.pair,
            direction=self.direction,
            leverage=self.leverage,
            size_usdt=self.size_usdt,
            entry_price=self.entry_price,
            stop_loss=self.stop_loss,
            take_profit=self.take_profit,
            tags=tuple(self.tags),
            notes=self.notes,
            opened_at=self.opened_at or format_timestamp(),
        )


class ClosePositionRequest(BaseModel):
    """Request model for closing a position."""

    close_price: float = Field(..., gt=0, allow_inf_nan=False, description="Close price")
    closed_at: str | None = Field(default=None, description="Display timestamp (default now)")


class AddPairRequest(BaseModel):
    """Request model for registering a custom pair."""

    pair: str = Field(..., min_length=1)


class PortfolioResponse(BaseModel):
    """Portfolio snapshot in persisted format plus its summary."""

    portfolio: dict
    summary: dict


class UnrealizedPnLResponse(BaseModel):
    """Mark-to-market value of one open position."""

    position_id: str
    price: float
    unrealized_pnl: float


class PairsResponse(BaseModel):
    """Response model for known pairs."""

    pairs: list[str]


class AddPairResponse(BaseModel):
    """Response model for pair registration."""

    pair: str
    added: bool


class MetaResponse(BaseModel):
    """Defaults offered to trading forms."""

    starting_balance: float
    leverage_options: list[int]
    setup_tags: list[str]


class ErrorResponse(BaseModel):
    """Response model for errors."""

    error: str
    message: str
    kind: OpenErrorKind | None = None
