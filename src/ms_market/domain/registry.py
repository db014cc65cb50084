"""The fixed symbol list and its live prices."""

import logging
from collections.abc import Iterable

from src.ms_common.errors import StockNotFoundError
from src.ms_market.domain.models import DEFAULT_INSTRUMENTS, Instrument

logger = logging.getLogger(__name__)


class InstrumentRegistry:
    def __init__(
        self, defaults: Iterable[tuple[str, str, float]] = DEFAULT_INSTRUMENTS
    ) -> None:
        self._defaults = tuple(defaults)
        self._instruments: dict[str, Instrument] = {}
        self.reset()

    def reset(self) -> None:
        """Restore the default instrument list at opening prices."""
        self._instruments = {
            symbol: Instrument(symbol=symbol, display_name=name, price=price)
            for symbol, name, price in self._defaults
        }

    def get(self, symbol: str) -> Instrument | None:
        return self._instruments.get(symbol)

    def require(self, symbol: str) -> Instrument:
        instrument = self._instruments.get(symbol)
        if instrument is None:
            raise StockNotFoundError(symbol)
        return instrument

    def price_of(self, symbol: str) -> float:
        return self.require(symbol).price

    def instruments(self) -> list[Instrument]:
        return list(self._instruments.values())

    def update_price(self, symbol: str, price: float) -> Instrument | None:
        """Admin price update. Trusted input; unknown symbols are ignored."""
        instrument = self._instruments.get(symbol)
        if instrument is None:
            logger.info("Ignoring price update for unknown symbol %s", symbol)
            return None
        logger.info("Price update %s: %.2f -> %.2f", symbol, instrument.price, price)
        instrument.price = price
        return instrument
