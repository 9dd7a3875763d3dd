from __future__ import annotations

import asyncio
import json
import logging

from fastapi import WebSocket

logger = logging.getLogger(__name__)

TERMINAL_ROLE = "terminal"
KITCHEN_ROLE = "kitchen"
DASHBOARD_ROLE = "dashboard"

# None subscribes the role to every event type.
ROLE_SUBSCRIPTIONS: dict[str, frozenset[str] | None] = {
    TERMINAL_ROLE: None,
    DASHBOARD_ROLE: None,
    KITCHEN_ROLE: frozenset(
        {"order.placed", "order.items_changed", "order.cancelled", "order.deleted"}
    ),
}


def is_known_role(role: str) -> bool:
    return role in ROLE_SUBSCRIPTIONS


def _event_type(message_json_str: str) -> str | None:
    try:
        envelope = json.loads(message_json_str)
    except ValueError:
        return None
    if not isinstance(envelope, dict):
        return None
    event_type = envelope.get("event_type")
    return event_type if isinstance(event_type, str) else None


def wants_event(role: str, event_type: str | None) -> bool:
    subscriptions = ROLE_SUBSCRIPTIONS.get(role)
    if subscriptions is None:
        return is_known_role(role)
    return event_type in subscriptions


class ConnectionManager:
    """Live WebSocket terminals keyed by socket, each with its screen role."""

    def __init__(self) -> None:
        self._connections: dict[WebSocket, str] = {}
        self._lock = asyncio.Lock()

    async def register(self, websocket: WebSocket, role: str) -> None:
        await websocket.accept()
        async with self._lock:
            self._connections[websocket] = role
        logger.info("ws_client_connected", extra={"role": role})

    async def unregister(self, websocket: WebSocket) -> None:
        async with self._lock:
            role = self._connections.pop(websocket, None)
        if role is not None:
            logger.info("ws_client_disconnected", extra={"role": role})

    async def connection_counts(self) -> dict[str, int]:
        async with self._lock:
            roles = list(self._connections.values())
        return {role: roles.count(role) for role in sorted(set(roles))}

    async def broadcast(self, message_json_str: str) -> int:
        """Send an event envelope to every terminal subscribed to its type.

        Returns the number of sockets that received it.
        """
        event_type = _event_type(message_json_str)
        async with self._lock:
            targets = [
                websocket
                for websocket, role in self._connections.items()
                if wants_event(role, event_type)
            ]

        stale: list[WebSocket] = []
        for websocket in targets:
            try:
                await websocket.send_text(message_json_str)
            except Exception:
                stale.append(websocket)

        for websocket in stale:
            await self.unregister(websocket)
        return len(targets) - len(stale)
