"""Interfaces the dispatcher expects from delivery transports."""

from __future__ import annotations

from typing import Protocol

from charter_notifications.domain.entities import ChannelPayload, PushReceipt


class PushGateway(Protocol):
    """Push delivery service; raises ``GatewayError`` when a message is rejected."""

    def send_push(self, token: str, payload: ChannelPayload) -> PushReceipt: ...


class ChannelSender(Protocol):
    """Email or SMS transport; returns ``True`` when the message was accepted."""

    def send(self, address: str, payload: ChannelPayload) -> bool: ...


__all__ = ["ChannelSender", "PushGateway"]
