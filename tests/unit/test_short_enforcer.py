"""Unit tests for forced short cover."""

import pytest

from src.ms_account.domain.ledger import TeamLedger
from src.ms_common.enums import TradeAction
from src.ms_market.domain.registry import InstrumentRegistry
from src.ms_risk.short_enforcer import FORCED_COVER_NOTE, force_cover_all


@pytest.fixture
def registry() -> InstrumentRegistry:
    return InstrumentRegistry()


class TestForceCoverAll:
    def test_covers_at_live_price(self, registry: InstrumentRegistry) -> None:
        ledger = TeamLedger()
        team = ledger.create_team("Alpha", 100_000)
        ledger.add_short(team, "ONGC", 100)
        ledger.add_short(team, "ITC", 10)
        registry.update_price("ONGC", 260)

        affected = force_cover_all(ledger, registry)

        assert team.cash == 100_000 - 100 * 260 - 10 * 415
        assert team.short_holdings == {}
        [(covered, trades)] = affected
        assert covered is team
        assert {t.symbol: t.price for t in trades} == {"ONGC": 260, "ITC": 415}
        assert all(t.action == TradeAction.COVER_SHORT_FORCED for t in trades)
        assert all(t.note == FORCED_COVER_NOTE for t in trades)

    def test_cash_may_go_negative(self, registry: InstrumentRegistry) -> None:
        ledger = TeamLedger()
        team = ledger.create_team("Broke", 0)
        ledger.add_short(team, "GOLD", 1)

        force_cover_all(ledger, registry)

        assert team.cash == -122_500
        assert team.short_holdings == {}

    def test_long_book_untouched(self, registry: InstrumentRegistry) -> None:
        ledger = TeamLedger()
        team = ledger.create_team("Alpha", 1000)
        ledger.add_long(team, "ITC", 3)
        ledger.add_short(team, "ITC", 1)

        force_cover_all(ledger, registry)

        assert team.holdings == {"ITC": 3}

    def test_no_shorts_is_noop(self, registry: InstrumentRegistry) -> None:
        ledger = TeamLedger()
        team = ledger.create_team("Alpha", 1000)
        ledger.add_long(team, "ITC", 1)

        assert force_cover_all(ledger, registry) == []
        assert team.cash == 1000
        assert ledger.trade_log == []
