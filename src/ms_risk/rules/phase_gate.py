from src.ms_common.enums import Phase
from src.ms_common.errors import ShortSellingFrozenError, WrongPhaseError
from src.ms_game.domain.models import GameConfig


def check_short_allowed(config: GameConfig) -> None:
    """Short selling needs the freeze off and the trading phase running."""
    if config.short_selling_frozen:
        raise ShortSellingFrozenError()
    if config.phase != Phase.TRADING:
        raise WrongPhaseError(Phase.TRADING.value, config.phase.value)
