"""Affordability checks run before any ledger mutation.

Each check raises without touching the team, so a failed action leaves the
ledger exactly as it was.
"""

from src.ms_account.domain.models import Team
from src.ms_common.errors import (
    InsufficientFundsError,
    InsufficientHoldingsError,
    InsufficientShortPositionError,
    OverCollateralizedError,
)


def check_funds(team: Team, amount: float) -> None:
    if team.cash < amount:
        raise InsufficientFundsError(amount, team.cash)


def check_holdings(team: Team, symbol: str, quantity: int) -> None:
    """Long book only; short positions never satisfy a sell."""
    held = team.held(symbol)
    if held < quantity:
        raise InsufficientHoldingsError(symbol, quantity, held)


def check_short_position(team: Team, symbol: str, quantity: int) -> None:
    shorted = team.shorted(symbol)
    if shorted < quantity:
        raise InsufficientShortPositionError(symbol, quantity, shorted)


def check_collateral(team: Team, proceeds: float) -> None:
    """A short may not raise cash above what is already held (100% cap)."""
    if proceeds > team.cash:
        raise OverCollateralizedError(proceeds, team.cash)
