"""Phase/round state transitions as pure functions.

Nothing here touches a clock: ``tick`` is one elapsed second. The stateful
``PhaseController`` decides when to call it.
"""

from dataclasses import replace

from src.ms_common.enums import Phase
from src.ms_game.domain.models import GameConfig

TICKING_PHASES: frozenset[Phase] = frozenset({Phase.PORTFOLIO_ALLOCATION, Phase.TRADING})


def start_phase(
    config: GameConfig,
    phase: Phase,
    duration: int,
    rounds: int | None = None,
    trading_round_time: int | None = None,
) -> GameConfig:
    """Enter ``phase`` with ``duration`` seconds on the clock."""
    if phase == Phase.TRADING:
        current_round = 1
        total_rounds = rounds or 1
        round_time = trading_round_time or duration
    else:
        current_round = 0
        total_rounds = 0
        round_time = config.trading_round_time

    allocation_time = config.portfolio_allocation_time
    if phase in TICKING_PHASES:
        allocation_time = duration

    return replace(
        config,
        phase=phase,
        time_remaining=duration,
        current_round=current_round,
        total_rounds=total_rounds,
        trading_round_time=round_time,
        portfolio_allocation_time=allocation_time,
    )


def is_ticking(config: GameConfig) -> bool:
    return config.phase in TICKING_PHASES and config.time_remaining > 0


def tick(config: GameConfig) -> GameConfig:
    """Advance the countdown by one second and apply end-of-phase rules.

    portfolio_allocation -> waiting when the clock runs out.
    trading -> next round while rounds remain, else ended.
    waiting/ended (or a clock already at zero) are left unchanged.
    """
    if not is_ticking(config):
        return config

    remaining = config.time_remaining - 1
    if remaining > 0:
        return replace(config, time_remaining=remaining)

    if config.phase == Phase.PORTFOLIO_ALLOCATION:
        return replace(config, phase=Phase.WAITING, time_remaining=0)

    if config.current_round < config.total_rounds:
        return replace(
            config,
            current_round=config.current_round + 1,
            time_remaining=config.trading_round_time,
        )
    return replace(config, phase=Phase.ENDED, time_remaining=0)
