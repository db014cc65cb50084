"""Broadcasts ledger changes: trades, team snapshots and the leaderboard."""

from collections.abc import Iterable

from src.ms_account.application.schemas import LeaderboardEntry, TeamResponse, TradeResponse
from src.ms_account.domain.ledger import TeamLedger
from src.ms_account.domain.models import Team, Trade
from src.ms_common.enums import Notification
from src.ms_common.notifier import Notifier
from src.ms_market.domain.registry import InstrumentRegistry


class LedgerPublisher:
    def __init__(
        self, ledger: TeamLedger, registry: InstrumentRegistry, notifier: Notifier
    ) -> None:
        self._ledger = ledger
        self._registry = registry
        self._notifier = notifier

    def leaderboard(self) -> list[dict]:
        return [
            LeaderboardEntry(id=t.id, name=t.name, portfolio_value=value).model_dump()
            for t, value in self._ledger.leaderboard(self._registry)
        ]

    def team_created(self, team: Team) -> None:
        self._notifier.emit(Notification.TEAM_CREATED, team_payload(team))

    def team_updated(self, team: Team) -> None:
        self._notifier.emit(Notification.TEAM_UPDATED, team_payload(team))

    def publish(self, teams: Iterable[Team], trades: Iterable[Trade]) -> None:
        """trade_executed per leg, team_updated per team, one leaderboard."""
        for trade in trades:
            self._notifier.emit(Notification.TRADE_EXECUTED, trade_payload(trade))
        for team in teams:
            self.team_updated(team)
        self._notifier.emit(Notification.LEADERBOARD_UPDATE, self.leaderboard())


def team_payload(team: Team) -> dict:
    return TeamResponse.from_domain(team).model_dump(mode="json")


def trade_payload(trade: Trade) -> dict:
    return TradeResponse.from_domain(trade).model_dump(mode="json")
