"""
Core constants and limits.

Defines the fixed values shared by the engine, the portfolio store and
the presentation adapters.
"""

# Portfolio
DEFAULT_BALANCE = 1000.0  # Starting free balance of a fresh portfolio

# Storage keys (single portfolio per storage scope)
PAPER_STORAGE_KEY = "smc_paper_v1"
PAIRS_STORAGE_KEY = "smc_pairs_v1"

# Precision
PNL_DECIMALS = 4  # Realized PnL is stored with 4 decimal places
RR_DECIMALS = 2  # Risk:reward label precision
BREAKEVEN_TOLERANCE = 0.0001  # Relative to entry price (0.01%)

# Risk:reward label when the stop-loss sits on the entry price
NO_RR_LABEL = "—"

# Presentation defaults
LEVERAGE_OPTIONS = (1, 2, 3, 5, 10, 20)
SETUP_TAGS = ("OB", "FVG", "CHoCH", "BOS", "Liquidity", "MSS", "EQH", "EQL")
DEFAULT_PAIRS = (
    "BTC/USDT",
    "ETH/USDT",
    "SOL/USDT",
    "BNB/USDT",
    "XRP/USDT",
    "DOGE/USDT",
    "ADA/USDT",
    "AVAX/USDT",
    "LINK/USDT",
    "DOT/USDT",
    "MATIC/USDT",
    "TON/USDT",
    "NEAR/USDT",
    "ARB/USDT",
    "OP/USDT",
)
OPENED_AT_FORMAT = "%b %d, %Y %H:%M"  # e.g. "Mar 05, 2025 14:30"
