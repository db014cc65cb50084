"""Unit tests for bilateral trade requests on manual time."""

import pytest

from src.ms_account.domain.models import Team
from src.ms_common.clock import ManualScheduler
from src.ms_common.enums import Notification, Phase, RequestAction, RequestState, TradeAction
from src.ms_common.errors import (
    CircuitViolationError,
    InsufficientFundsError,
    InsufficientHoldingsError,
    SelfTradeRequestError,
    StockNotFoundError,
    TeamNotFoundError,
    TradeRequestNotFoundError,
)
from src.ms_common.notifier import RecordingNotifier
from src.ms_session.platform import PlatformSession


@pytest.fixture
def alpha(session: PlatformSession) -> Team:
    return session.create_team("Alpha")


@pytest.fixture
def beta(session: PlatformSession) -> Team:
    """Beta holds 20 TATAMOTORS bought at the live price."""
    team = session.create_team("Beta")
    session.execute_trade(team.id, TradeAction.BUY, "TATAMOTORS", 20, 400)
    return team


class TestPropose:
    def test_propose_notifies_both_parties(
        self, session: PlatformSession, notifier: RecordingNotifier, alpha: Team, beta: Team
    ) -> None:
        notifier.clear()
        req = session.send_trade_request(
            alpha.id, beta.id, RequestAction.BUY, "TATAMOTORS", 10, 410
        )
        assert req.state == RequestState.PENDING
        assert req.buyer_id == alpha.id
        assert req.seller_id == beta.id
        assert session.negotiation.get(req.id) is req

        sent = notifier.of(Notification.TRADE_REQUEST_SENT)
        received = notifier.of(Notification.TRADE_REQUEST_RECEIVED)
        assert [e.team_ids for e in sent] == [(alpha.id,)]
        assert [e.team_ids for e in received] == [(beta.id,)]
        assert received[0].payload["id"] == req.id

    def test_expires_twenty_seconds_after_creation(
        self, session: PlatformSession, scheduler: ManualScheduler, alpha: Team, beta: Team
    ) -> None:
        req = session.send_trade_request(
            alpha.id, beta.id, RequestAction.BUY, "TATAMOTORS", 1, 400
        )
        assert (req.expires_at - req.created_at).total_seconds() == 20
        assert req.created_at == scheduler.now()

    def test_circuit_band_is_inclusive(
        self, session: PlatformSession, alpha: Team, beta: Team
    ) -> None:
        for price in (368, 432):
            session.send_trade_request(
                alpha.id, beta.id, RequestAction.BUY, "TATAMOTORS", 1, price
            )
        assert len(session.negotiation.pending()) == 2

    def test_price_ten_percent_above_rejected(
        self, session: PlatformSession, notifier: RecordingNotifier, alpha: Team, beta: Team
    ) -> None:
        notifier.clear()
        with pytest.raises(CircuitViolationError) as exc_info:
            session.send_trade_request(
                alpha.id, beta.id, RequestAction.BUY, "TATAMOTORS", 1, 440
            )
        assert exc_info.value.code == 6002
        assert session.negotiation.pending() == []
        assert notifier.events == []

    def test_frozen_circuit_allows_any_price(
        self, session: PlatformSession, alpha: Team, beta: Team
    ) -> None:
        session.toggle_circuit_freeze()
        req = session.send_trade_request(
            alpha.id, beta.id, RequestAction.BUY, "TATAMOTORS", 1, 1000
        )
        assert req.price == 1000

    def test_self_trade_rejected(self, session: PlatformSession, alpha: Team) -> None:
        with pytest.raises(SelfTradeRequestError):
            session.send_trade_request(
                alpha.id, alpha.id, RequestAction.BUY, "TATAMOTORS", 1, 400
            )

    def test_unknown_parties_and_symbol(
        self, session: PlatformSession, alpha: Team, beta: Team
    ) -> None:
        with pytest.raises(TeamNotFoundError):
            session.send_trade_request(
                alpha.id, "nobody", RequestAction.BUY, "TATAMOTORS", 1, 400
            )
        with pytest.raises(StockNotFoundError):
            session.send_trade_request(alpha.id, beta.id, RequestAction.BUY, "NOPE", 1, 400)

    def test_affordability_not_checked_at_proposal(
        self, session: PlatformSession, alpha: Team, beta: Team
    ) -> None:
        # Beta has no ITC; the seller's book is only checked on acceptance.
        req = session.send_trade_request(alpha.id, beta.id, RequestAction.BUY, "ITC", 5, 415)
        assert req.state == RequestState.PENDING


class TestAccept:
    def test_accept_settles_both_sides(
        self, session: PlatformSession, notifier: RecordingNotifier, alpha: Team, beta: Team
    ) -> None:
        req = session.send_trade_request(
            alpha.id, beta.id, RequestAction.BUY, "TATAMOTORS", 10, 410
        )
        alpha_cash, beta_cash = alpha.cash, beta.cash
        notifier.clear()

        session.respond_trade_request(req.id, True, beta.id)

        assert req.state == RequestState.ACCEPTED
        assert alpha_cash - alpha.cash == 4100
        assert beta.cash - beta_cash == 4100
        assert alpha.holdings == {"TATAMOTORS": 10}
        assert beta.holdings == {"TATAMOTORS": 10}
        assert session.negotiation.pending() == []

        buy_leg, sell_leg = alpha.trades[-1], beta.trades[-1]
        assert buy_leg.action == TradeAction.BUY
        assert sell_leg.action == TradeAction.SELL
        assert buy_leg.counterparty == "Beta"
        assert sell_leg.counterparty == "Alpha"

        completed = notifier.of(Notification.TRADE_REQUEST_COMPLETED)
        assert [e.team_ids for e in completed] == [(alpha.id, beta.id)]
        assert len(notifier.of(Notification.TRADE_EXECUTED)) == 2
        assert len(notifier.of(Notification.LEADERBOARD_UPDATE)) == 1

    def test_sell_request_moves_shares_from_requester(
        self, session: PlatformSession, alpha: Team, beta: Team
    ) -> None:
        req = session.send_trade_request(
            beta.id, alpha.id, RequestAction.SELL, "TATAMOTORS", 5, 400
        )
        session.respond_trade_request(req.id, True, alpha.id)
        assert alpha.holdings == {"TATAMOTORS": 5}
        assert beta.holdings == {"TATAMOTORS": 15}

    def test_accept_is_at_most_once(
        self, session: PlatformSession, alpha: Team, beta: Team
    ) -> None:
        req = session.send_trade_request(
            alpha.id, beta.id, RequestAction.BUY, "TATAMOTORS", 1, 400
        )
        session.respond_trade_request(req.id, True, beta.id)
        with pytest.raises(TradeRequestNotFoundError):
            session.respond_trade_request(req.id, True, beta.id)
        assert alpha.holdings == {"TATAMOTORS": 1}

    def test_only_recipient_may_respond(
        self, session: PlatformSession, alpha: Team, beta: Team
    ) -> None:
        req = session.send_trade_request(
            alpha.id, beta.id, RequestAction.BUY, "TATAMOTORS", 1, 400
        )
        with pytest.raises(TradeRequestNotFoundError):
            session.respond_trade_request(req.id, True, alpha.id)
        assert req.state == RequestState.PENDING

    def test_seller_short_does_not_count(
        self, session: PlatformSession, alpha: Team, beta: Team
    ) -> None:
        session.start_phase(Phase.TRADING, 600)
        session.execute_trade(alpha.id, TradeAction.SHORT_SELL, "ITC", 5, 415)
        req = session.send_trade_request(beta.id, alpha.id, RequestAction.BUY, "ITC", 5, 415)
        with pytest.raises(InsufficientHoldingsError):
            session.respond_trade_request(req.id, True, alpha.id)
        assert alpha.short_holdings == {"ITC": 5}

    def test_failed_settlement_keeps_request_pending(
        self, session: PlatformSession, notifier: RecordingNotifier, alpha: Team, beta: Team
    ) -> None:
        req = session.send_trade_request(
            alpha.id, beta.id, RequestAction.BUY, "TATAMOTORS", 20, 400
        )
        session.allocate_funds(alpha.id, -alpha.cash + 100)
        before = (alpha.cash, dict(alpha.holdings), beta.cash, dict(beta.holdings))
        notifier.clear()

        with pytest.raises(InsufficientFundsError):
            session.respond_trade_request(req.id, True, beta.id)

        assert (alpha.cash, dict(alpha.holdings), beta.cash, dict(beta.holdings)) == before
        assert req.state == RequestState.PENDING
        assert session.negotiation.get(req.id) is req
        failed = notifier.of(Notification.TRADE_REQUEST_FAILED)
        assert len(failed) == 1
        assert failed[0].team_ids == (alpha.id, beta.id)
        assert failed[0].payload["code"] == 2001

    def test_price_move_after_proposal_blocks_settlement(
        self, session: PlatformSession, alpha: Team, beta: Team
    ) -> None:
        req = session.send_trade_request(
            alpha.id, beta.id, RequestAction.BUY, "TATAMOTORS", 1, 430
        )
        session.update_stock_price("TATAMOTORS", 300)
        with pytest.raises(CircuitViolationError):
            session.respond_trade_request(req.id, True, beta.id)
        assert alpha.holdings == {}


class TestRejectCancelExpire:
    def test_decline_ends_cancelled(
        self,
        session: PlatformSession,
        scheduler: ManualScheduler,
        notifier: RecordingNotifier,
        alpha: Team,
        beta: Team,
    ) -> None:
        req = session.send_trade_request(
            alpha.id, beta.id, RequestAction.BUY, "TATAMOTORS", 1, 400
        )
        notifier.clear()
        session.respond_trade_request(req.id, False, beta.id)
        assert req.state == RequestState.CANCELLED
        [cancelled] = notifier.of(Notification.TRADE_REQUEST_CANCELLED)
        assert cancelled.team_ids == (alpha.id, beta.id)
        assert cancelled.payload["state"] == "cancelled"
        assert session.negotiation.pending() == []
        assert scheduler.pending == 0
        assert alpha.holdings == {}
        assert beta.holdings == {"TATAMOTORS": 20}

    def test_cancel_by_requester(
        self, session: PlatformSession, scheduler: ManualScheduler, alpha: Team, beta: Team
    ) -> None:
        req = session.send_trade_request(
            alpha.id, beta.id, RequestAction.BUY, "TATAMOTORS", 1, 400
        )
        with pytest.raises(TradeRequestNotFoundError):
            session.cancel_trade_request(req.id, beta.id)
        session.cancel_trade_request(req.id, alpha.id)
        assert req.state == RequestState.CANCELLED
        assert scheduler.pending == 0

    def test_expires_after_ttl(
        self,
        session: PlatformSession,
        scheduler: ManualScheduler,
        notifier: RecordingNotifier,
        alpha: Team,
        beta: Team,
    ) -> None:
        req = session.send_trade_request(
            alpha.id, beta.id, RequestAction.BUY, "TATAMOTORS", 1, 400
        )
        scheduler.advance(19.9)
        assert req.state == RequestState.PENDING

        scheduler.advance(0.1)
        assert req.state == RequestState.EXPIRED
        expired = notifier.of(Notification.TRADE_REQUEST_EXPIRED)
        assert [e.team_ids for e in expired] == [(alpha.id, beta.id)]
        with pytest.raises(TradeRequestNotFoundError):
            session.respond_trade_request(req.id, True, beta.id)
        assert alpha.holdings == {}

    def test_respond_before_deadline_wins(
        self, session: PlatformSession, scheduler: ManualScheduler, alpha: Team, beta: Team
    ) -> None:
        req = session.send_trade_request(
            alpha.id, beta.id, RequestAction.BUY, "TATAMOTORS", 1, 400
        )
        scheduler.advance(19)
        session.respond_trade_request(req.id, True, beta.id)
        scheduler.advance(5)
        assert req.state == RequestState.ACCEPTED
        assert scheduler.pending == 0

    def test_late_callback_still_honours_deadline(
        self, session: PlatformSession, scheduler: ManualScheduler, alpha: Team, beta: Team
    ) -> None:
        req = session.send_trade_request(
            alpha.id, beta.id, RequestAction.BUY, "TATAMOTORS", 1, 400
        )
        # Clock reaches the deadline but the callback has not run yet.
        scheduler._now = req.expires_at
        with pytest.raises(TradeRequestNotFoundError):
            session.respond_trade_request(req.id, True, beta.id)
        assert req.state == RequestState.EXPIRED
        assert alpha.holdings == {}

    def test_expire_after_close_is_noop(
        self, session: PlatformSession, notifier: RecordingNotifier, alpha: Team, beta: Team
    ) -> None:
        req = session.send_trade_request(
            alpha.id, beta.id, RequestAction.BUY, "TATAMOTORS", 1, 400
        )
        session.respond_trade_request(req.id, False, beta.id)
        notifier.clear()
        session.negotiation.expire(req.id)
        assert req.state == RequestState.CANCELLED
        assert notifier.events == []


class TestQueries:
    def test_pending_for_team(
        self, session: PlatformSession, alpha: Team, beta: Team
    ) -> None:
        gamma = session.create_team("Gamma")
        first = session.send_trade_request(
            alpha.id, beta.id, RequestAction.BUY, "TATAMOTORS", 1, 400
        )
        second = session.send_trade_request(
            gamma.id, alpha.id, RequestAction.SELL, "ITC", 1, 415
        )
        assert session.negotiation.pending_for(alpha.id) == [first, second]
        assert session.negotiation.pending_for(beta.id) == [first]
        assert session.negotiation.pending_for(gamma.id) == [second]

    def test_clear_cancels_timers(
        self, session: PlatformSession, scheduler: ManualScheduler, alpha: Team, beta: Team
    ) -> None:
        session.send_trade_request(alpha.id, beta.id, RequestAction.BUY, "TATAMOTORS", 1, 400)
        session.negotiation.clear()
        assert session.negotiation.pending() == []
        assert scheduler.pending == 0
