"""PhaseController on manual time."""

import pytest

from src.ms_common.clock import ManualScheduler
from src.ms_common.enums import Notification, Phase
from src.ms_common.notifier import RecordingNotifier
from src.ms_game.domain.models import GameConfig
from src.ms_game.engine.controller import PhaseController


@pytest.fixture
def controller(scheduler: ManualScheduler, notifier: RecordingNotifier) -> PhaseController:
    return PhaseController(GameConfig(), scheduler, notifier, tick_interval=1.0)


class TestPhaseController:
    def test_start_phase_broadcasts_and_arms_ticker(
        self, controller: PhaseController, scheduler: ManualScheduler, notifier: RecordingNotifier
    ) -> None:
        controller.start_phase(Phase.PORTFOLIO_ALLOCATION, 10)
        assert notifier.names() == ["phase_change"]
        assert controller.is_running
        assert scheduler.pending == 1

    def test_ticks_once_per_second(
        self, controller: PhaseController, scheduler: ManualScheduler, notifier: RecordingNotifier
    ) -> None:
        controller.start_phase(Phase.PORTFOLIO_ALLOCATION, 10)
        scheduler.advance(3)
        assert controller.config.time_remaining == 7
        assert len(notifier.of(Notification.TIMER_UPDATE)) == 3

    def test_allocation_returns_to_waiting_and_stops(
        self, controller: PhaseController, scheduler: ManualScheduler, notifier: RecordingNotifier
    ) -> None:
        controller.start_phase(Phase.PORTFOLIO_ALLOCATION, 5)
        scheduler.advance(5)
        assert controller.config.phase == Phase.WAITING
        assert not controller.is_running
        assert scheduler.pending == 0
        last_change = notifier.of(Notification.PHASE_CHANGE)[-1]
        assert last_change.payload["phase"] == "waiting"

    def test_trading_three_rounds_then_ended(
        self, controller: PhaseController, scheduler: ManualScheduler, notifier: RecordingNotifier
    ) -> None:
        controller.start_phase(Phase.TRADING, 600, rounds=3)
        scheduler.advance(600)
        assert controller.config.current_round == 2
        assert controller.config.time_remaining == 600

        scheduler.advance(1200)
        assert controller.config.phase == Phase.ENDED
        assert not controller.is_running

        ticks = len(notifier.of(Notification.TIMER_UPDATE))
        scheduler.advance(100)
        assert len(notifier.of(Notification.TIMER_UPDATE)) == ticks
        assert ticks == 1800

    def test_new_phase_supersedes_previous_ticker(
        self, controller: PhaseController, scheduler: ManualScheduler
    ) -> None:
        controller.start_phase(Phase.PORTFOLIO_ALLOCATION, 100)
        scheduler.advance(10)
        controller.start_phase(Phase.TRADING, 50, rounds=1)
        assert scheduler.pending == 1
        scheduler.advance(10)
        assert controller.config.phase == Phase.TRADING
        assert controller.config.time_remaining == 40

    def test_waiting_phase_does_not_tick(
        self, controller: PhaseController, scheduler: ManualScheduler
    ) -> None:
        controller.start_phase(Phase.WAITING, 30)
        assert not controller.is_running
        scheduler.advance(30)
        assert controller.config.time_remaining == 30

    def test_replace_config_stops_ticker(
        self, controller: PhaseController, scheduler: ManualScheduler
    ) -> None:
        controller.start_phase(Phase.TRADING, 50, rounds=2)
        controller.replace_config(GameConfig())
        assert scheduler.pending == 0
        assert controller.config.phase == Phase.WAITING


class TestAnnouncements:
    def test_allocation_end_is_announced(
        self, controller: PhaseController, scheduler: ManualScheduler, notifier: RecordingNotifier
    ) -> None:
        controller.start_phase(Phase.PORTFOLIO_ALLOCATION, 2)
        scheduler.advance(2)
        assert notifier.names()[-2:] == ["phase_change", "notification"]
        [toast] = notifier.of(Notification.NOTIFICATION)
        assert toast.payload == {"message": "Portfolio Allocation phase ended", "type": "info"}
        assert toast.team_ids is None

    def test_rounds_and_game_end_are_announced(
        self, controller: PhaseController, scheduler: ManualScheduler, notifier: RecordingNotifier
    ) -> None:
        controller.start_phase(Phase.TRADING, 3, rounds=3)
        scheduler.advance(9)
        assert [e.payload for e in notifier.of(Notification.NOTIFICATION)] == [
            {"message": "Trading Round 2 started", "type": "info"},
            {"message": "Trading Round 3 started", "type": "info"},
            {"message": "Game ended", "type": "success"},
        ]

    def test_plain_ticks_are_not_announced(
        self, controller: PhaseController, scheduler: ManualScheduler, notifier: RecordingNotifier
    ) -> None:
        controller.start_phase(Phase.TRADING, 60, rounds=2)
        scheduler.advance(59)
        assert notifier.of(Notification.NOTIFICATION) == []
