"""Notifier protocol: the seam between the trading core and fan-out.

The core never awaits delivery: ``emit`` only hands the event over.
``team_ids=None`` means broadcast to every observer; otherwise the event
goes to the listed team channels only.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from src.ms_common.enums import Notification


class Notifier(Protocol):
    def emit(
        self,
        event: Notification,
        payload: Any,
        team_ids: Sequence[str] | None = None,
    ) -> None: ...


@dataclass
class EmittedEvent:
    event: Notification
    payload: Any
    team_ids: tuple[str, ...] | None


class RecordingNotifier:
    """Keeps every emitted event in memory. Used by tests and offline runs."""

    def __init__(self) -> None:
        self.events: list[EmittedEvent] = []

    def emit(
        self,
        event: Notification,
        payload: Any,
        team_ids: Sequence[str] | None = None,
    ) -> None:
        self.events.append(
            EmittedEvent(event, payload, tuple(team_ids) if team_ids is not None else None)
        )

    def of(self, event: Notification) -> list[EmittedEvent]:
        return [e for e in self.events if e.event == event]

    def names(self) -> list[str]:
        return [e.event.value for e in self.events]

    def clear(self) -> None:
        self.events.clear()
