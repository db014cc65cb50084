"""Circuit limit guard for negotiated trades.

Direct engine trades are admin-priced and never pass through here.
"""

from src.ms_common.errors import CircuitViolationError

DEFAULT_CIRCUIT_LIMIT_PCT: float = 0.08


def circuit_bounds(
    current_price: float, pct: float = DEFAULT_CIRCUIT_LIMIT_PCT
) -> tuple[float, float]:
    """Inclusive [lower, upper] band around the live price."""
    return current_price * (1 - pct), current_price * (1 + pct)


def check_circuit_limit(
    price: float,
    current_price: float,
    frozen: bool,
    pct: float = DEFAULT_CIRCUIT_LIMIT_PCT,
) -> None:
    """Raise CircuitViolationError(6002) if price is outside the band.

    A frozen circuit limit bypasses the check entirely.
    """
    if frozen:
        return
    lower, upper = circuit_bounds(current_price, pct)
    if not (lower <= price <= upper):
        raise CircuitViolationError(price, lower, upper)
