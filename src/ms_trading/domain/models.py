"""Domain model for negotiated trade requests."""

from dataclasses import dataclass
from datetime import datetime

from src.ms_common.enums import RequestAction, RequestState


@dataclass
class TradeRequest:
    id: str
    from_team_id: str
    from_team_name: str
    to_team_id: str
    to_team_name: str
    action: RequestAction  # requester's side
    symbol: str
    quantity: int
    price: float
    created_at: datetime
    expires_at: datetime
    state: RequestState = RequestState.PENDING

    @property
    def total(self) -> float:
        return self.quantity * self.price

    @property
    def buyer_id(self) -> str:
        return self.from_team_id if self.action == RequestAction.BUY else self.to_team_id

    @property
    def seller_id(self) -> str:
        return self.to_team_id if self.action == RequestAction.BUY else self.from_team_id

    @property
    def parties(self) -> tuple[str, str]:
        return self.from_team_id, self.to_team_id
