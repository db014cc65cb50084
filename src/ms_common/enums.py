"""Global enums — values are the wire strings clients send and receive."""

from enum import Enum


class Phase(str, Enum):
    WAITING = "waiting"
    PORTFOLIO_ALLOCATION = "portfolio_allocation"
    TRADING = "trading"
    ENDED = "ended"


class TradeAction(str, Enum):
    BUY = "buy"
    SELL = "sell"
    SHORT_SELL = "short_sell"
    COVER_SHORT = "cover_short"
    COVER_SHORT_FORCED = "cover_short_forced"
    FUND_ALLOCATION = "fund_allocation"


# Actions a team may submit directly to the execution engine
DIRECT_TRADE_ACTIONS: frozenset[TradeAction] = frozenset({
    TradeAction.BUY,
    TradeAction.SELL,
    TradeAction.SHORT_SELL,
    TradeAction.COVER_SHORT,
})


class RequestAction(str, Enum):
    """Side of a trade request, from the requester's point of view."""
    BUY = "buy"
    SELL = "sell"


class RequestState(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    EXPIRED = "expired"
    CANCELLED = "cancelled"


class Notification(str, Enum):
    """Outbound event names pushed over the realtime channel."""
    GAME_STATE = "game_state"
    TEAM_CREATED = "team_created"
    TEAM_UPDATED = "team_updated"
    TRADE_EXECUTED = "trade_executed"
    LEADERBOARD_UPDATE = "leaderboard_update"
    STOCK_PRICE_UPDATE = "stock_price_update"
    STOCKS_UPDATE = "stocks_update"
    TRADE_REQUEST_SENT = "trade_request_sent"
    TRADE_REQUEST_RECEIVED = "trade_request_received"
    TRADE_REQUEST_COMPLETED = "trade_request_completed"
    TRADE_REQUEST_CANCELLED = "trade_request_cancelled"
    TRADE_REQUEST_EXPIRED = "trade_request_expired"
    TRADE_REQUEST_FAILED = "trade_request_failed"
    PHASE_CHANGE = "phase_change"
    TIMER_UPDATE = "timer_update"
    CONFIG_UPDATE = "config_update"
    PLATFORM_RESET = "platform_reset"
    NOTIFICATION = "notification"
