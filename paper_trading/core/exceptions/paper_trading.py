"""
Custom exception hierarchy for the paper trading engine.

This module defines domain-specific exceptions for better error handling.
"""


class PaperTradingException(Exception):
    """Base exception for all paper-trading errors."""

    pass


class ValidationError(PaperTradingException):
    """Raised when input validation fails."""

    pass


class PortfolioError(PaperTradingException):
    """Raised when portfolio operations fail."""

    pass


class InsufficientFundsError(PortfolioError):
    """Raised when the free balance cannot cover the required margin."""

    def __init__(self, required: float, available: float, operation: str = "operation"):
        self.required = required
        self.available = available
        self.operation = operation
        super().__init__(
            f"Insufficient funds for {operation}: required={required:.2f}, available={available:.2f}"
        )


class PositionNotFoundError(PortfolioError):
    """Raised when trying to operate on a non-existent open position."""

    def __init__(self, position_id: str):
        self.position_id = position_id
        super().__init__(f"Open position not found: {position_id}")


class StorageError(PaperTradingException):
    """Raised when persisting portfolio state fails."""

    pass


class ConfigurationError(PaperTradingException):
    """Raised when configuration is invalid."""

    pass
