"""Domain model for ms_game — the single per-session GameConfig."""

from dataclasses import dataclass

from src.ms_common.enums import Phase


@dataclass
class GameConfig:
    phase: Phase = Phase.WAITING
    current_round: int = 0
    total_rounds: int = 0
    time_remaining: int = 0  # seconds left in the current phase/round
    trading_round_time: int = 0
    portfolio_allocation_time: int = 600
    starting_balance: float = 100_000
    circuit_limit_frozen: bool = False
    market_trading_enabled: bool = True
    short_selling_frozen: bool = False
