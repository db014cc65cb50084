"""Pydantic schemas for ms_market API."""

from pydantic import BaseModel, Field

from src.ms_common.schemas import InboundModel

from src.ms_market.domain.models import Instrument


class UpdatePriceRequest(InboundModel):
    price: float = Field(..., gt=0, description="New live price")


class WsUpdatePriceRequest(UpdatePriceRequest):
    symbol: str


class StockResponse(BaseModel):
    symbol: str
    name: str
    price: float

    @classmethod
    def from_domain(cls, instrument: Instrument) -> "StockResponse":
        return cls(
            symbol=instrument.symbol,
            name=instrument.display_name,
            price=instrument.price,
        )
