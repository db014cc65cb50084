"""Unified error codes and custom exceptions.

Every error is recoverable and local to the caller: REST handlers turn it
into an error envelope, the WebSocket dispatcher into a failed ack.

Error code ranges:
  1xxx: Team
  2xxx: Funds
  3xxx: Instrument
  4xxx: Trade / phase
  5xxx: Position
  6xxx: Negotiation
  9xxx: System
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


class NotFoundError(AppError):
    """Unknown team, stock or trade request."""

    def __init__(self, code: int, message: str) -> None:
        super().__init__(code, message, 404)


# --- 1xxx: Team ---

class TeamNotFoundError(NotFoundError):
    def __init__(self, team_id: str) -> None:
        super().__init__(1001, f"Team not found: {team_id}")


class InvalidJoinCodeError(AppError):
    def __init__(self) -> None:
        super().__init__(1002, "Invalid join code", 404)


class AdminAuthRequiredError(AppError):
    def __init__(self) -> None:
        super().__init__(1003, "Invalid admin password", 401)


# --- 2xxx: Funds ---

class InsufficientFundsError(AppError):
    def __init__(self, required: float, available: float) -> None:
        super().__init__(
            2001,
            f"Insufficient funds: required {required:.2f}, available {available:.2f}",
            422,
        )


class OverCollateralizedError(AppError):
    def __init__(self, proceeds: float, cash: float) -> None:
        super().__init__(
            2002,
            f"Cannot short more than 100% of remaining cash: "
            f"proceeds {proceeds:.2f} exceed cash {cash:.2f}",
            422,
        )


# --- 3xxx: Instrument ---

class StockNotFoundError(NotFoundError):
    def __init__(self, symbol: str) -> None:
        super().__init__(3001, f"Stock not found: {symbol}")


# --- 4xxx: Trade / phase ---

class InvalidQuantityError(AppError):
    def __init__(self, quantity: int) -> None:
        super().__init__(4001, f"Quantity must be a positive integer, got {quantity}", 422)


class InvalidPriceError(AppError):
    def __init__(self, price: float) -> None:
        super().__init__(4002, f"Price must be positive, got {price}", 422)


class WrongPhaseError(AppError):
    def __init__(self, required: str, current: str) -> None:
        super().__init__(
            4003,
            f"Action only allowed in {required} phase (current phase: {current})",
            422,
        )


class ShortSellingFrozenError(AppError):
    def __init__(self) -> None:
        super().__init__(4004, "Short selling is frozen", 422)


# --- 5xxx: Position ---

class InsufficientHoldingsError(AppError):
    def __init__(self, symbol: str, required: int, available: int) -> None:
        super().__init__(
            5001,
            f"Insufficient holdings of {symbol}: required {required}, available {available}",
            422,
        )


class InsufficientShortPositionError(AppError):
    def __init__(self, symbol: str, required: int, available: int) -> None:
        super().__init__(
            5002,
            f"Insufficient short position in {symbol}: "
            f"required {required}, available {available}",
            422,
        )


# --- 6xxx: Negotiation ---

class TradeRequestNotFoundError(NotFoundError):
    def __init__(self, request_id: str) -> None:
        super().__init__(6001, f"Trade request not found or no longer pending: {request_id}")


class CircuitViolationError(AppError):
    def __init__(self, price: float, lower: float, upper: float) -> None:
        self.lower = lower
        self.upper = upper
        super().__init__(
            6002,
            f"Price {price:.2f} outside circuit limit [{lower:.2f}, {upper:.2f}]",
            422,
        )


class SelfTradeRequestError(AppError):
    def __init__(self) -> None:
        super().__init__(6003, "A team cannot send a trade request to itself", 422)


# --- 9xxx: System ---

class InvalidPayloadError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(9003, f"Invalid payload: {detail}", 422)
