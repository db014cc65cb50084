from src.ms_common.errors import InvalidPriceError, InvalidQuantityError


def check_quantity(quantity: int) -> None:
    """Raise InvalidQuantityError(4001) unless quantity is a positive integer."""
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise InvalidQuantityError(quantity)


def check_price(price: float) -> None:
    """Raise InvalidPriceError(4002) unless price is positive."""
    if not price > 0:
        raise InvalidPriceError(price)
