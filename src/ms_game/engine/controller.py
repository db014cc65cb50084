"""Owner of the GameConfig and the single phase ticker."""

import logging

from src.ms_common.clock import Scheduler, TimerHandle
from src.ms_common.enums import Notification, Phase
from src.ms_common.notifier import Notifier
from src.ms_game.application.schemas import GameConfigResponse
from src.ms_game.domain import timer
from src.ms_game.domain.models import GameConfig

logger = logging.getLogger(__name__)


class PhaseController:
    """Drives ``timer.tick`` once per interval while a phase is ticking.

    At most one ticker is armed at any time: starting a phase, resetting or
    shutting down cancels the previous handle before anything else.
    """

    def __init__(
        self,
        config: GameConfig,
        scheduler: Scheduler,
        notifier: Notifier,
        tick_interval: float = 1.0,
    ) -> None:
        self.config = config
        self._scheduler = scheduler
        self._notifier = notifier
        self._tick_interval = tick_interval
        self._ticker: TimerHandle | None = None

    @property
    def is_running(self) -> bool:
        return self._ticker is not None

    def payload(self) -> dict:
        return GameConfigResponse.from_domain(self.config).model_dump(mode="json")

    def start_phase(
        self,
        phase: Phase,
        duration: int,
        rounds: int | None = None,
        trading_round_time: int | None = None,
    ) -> GameConfig:
        self.stop()
        self.config = timer.start_phase(
            self.config, phase, duration, rounds, trading_round_time
        )
        logger.info(
            "Phase started: %s duration=%ds rounds=%d",
            phase.value,
            duration,
            self.config.total_rounds,
        )
        if timer.is_ticking(self.config):
            self._arm()
        self._notifier.emit(Notification.PHASE_CHANGE, self.payload())
        return self.config

    def replace_config(self, config: GameConfig) -> None:
        """Install a fresh config (reset). Cancels the ticker."""
        self.stop()
        self.config = config

    def stop(self) -> None:
        if self._ticker is not None:
            self._ticker.cancel()
            self._ticker = None

    def _arm(self) -> None:
        self._ticker = self._scheduler.call_later(self._tick_interval, self._on_tick)

    def _on_tick(self) -> None:
        self._ticker = None
        before = self.config
        self.config = timer.tick(before)
        after = self.config

        self._notifier.emit(Notification.TIMER_UPDATE, self.payload())
        if after.phase != before.phase or after.current_round != before.current_round:
            if after.phase != before.phase:
                logger.info("Phase ended: %s -> %s", before.phase.value, after.phase.value)
            else:
                logger.info("Trading round %d started", after.current_round)
            self._notifier.emit(Notification.PHASE_CHANGE, self.payload())
            self._announce(before, after)

        if timer.is_ticking(after):
            self._arm()

    def _announce(self, before: GameConfig, after: GameConfig) -> None:
        """Broadcast the toast clients show when a phase or round rolls over."""
        if after.phase == Phase.ENDED:
            message, kind = "Game ended", "success"
        elif before.phase == Phase.PORTFOLIO_ALLOCATION:
            message, kind = "Portfolio Allocation phase ended", "info"
        else:
            message, kind = f"Trading Round {after.current_round} started", "info"
        self._notifier.emit(Notification.NOTIFICATION, {"message": message, "type": kind})
