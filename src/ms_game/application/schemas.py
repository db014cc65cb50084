"""Pydantic schemas for ms_game API and realtime payloads."""

from pydantic import BaseModel, Field

from src.ms_common.enums import Phase
from src.ms_common.schemas import InboundModel
from src.ms_game.domain.models import GameConfig


class StartPhaseRequest(InboundModel):
    phase: Phase
    duration: int = Field(..., ge=0, description="Seconds on the clock")
    rounds: int | None = Field(None, ge=1)
    trading_round_time: int | None = Field(None, ge=1)


class GameConfigResponse(BaseModel):
    phase: Phase
    current_round: int
    total_rounds: int
    time_remaining: int
    trading_round_time: int
    portfolio_allocation_time: int
    starting_balance: float
    circuit_limit_frozen: bool
    market_trading_enabled: bool
    short_selling_frozen: bool

    @classmethod
    def from_domain(cls, config: GameConfig) -> "GameConfigResponse":
        return cls(
            phase=config.phase,
            current_round=config.current_round,
            total_rounds=config.total_rounds,
            time_remaining=config.time_remaining,
            trading_round_time=config.trading_round_time,
            portfolio_allocation_time=config.portfolio_allocation_time,
            starting_balance=config.starting_balance,
            circuit_limit_frozen=config.circuit_limit_frozen,
            market_trading_enabled=config.market_trading_enabled,
            short_selling_frozen=config.short_selling_frozen,
        )


class ToggleResponse(BaseModel):
    enabled: bool | None = None
    frozen: bool | None = None
