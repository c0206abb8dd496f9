"""Notification gateway port.

Order-status notifications are pushed to a per-user channel.  The real
socket transport lives outside this service; adapters only hand the
payload over (or park it in an inbox the client polls).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class NotificationEvent:
    order_id: str
    status: str
    message: str

    def to_dict(self) -> dict:
        return asdict(self)


class NotificationGateway(ABC):
    """Abstract interface for notification delivery adapters."""

    @abstractmethod
    def publish(self, user_id: str, event: NotificationEvent) -> None:
        """Deliver ``event`` on the channel of ``user_id``."""
        ...

    @abstractmethod
    def drain(self, user_id: str) -> list[dict]:
        """Return and clear the pending notifications of ``user_id``."""
        ...
