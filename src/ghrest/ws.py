"""WebSocket fan-out of received webhook deliveries."""

import json
import logging

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class WebSocketManager:
    """Tracks subscribed WebSocket clients and relays deliveries to them."""

    def __init__(self) -> None:
        self.connections: list[WebSocket] = []

    async def connect(self, ws: WebSocket) -> None:
        """Accept a WebSocket and subscribe it to deliveries."""
        await ws.accept()
        self.connections.append(ws)
        logger.debug("WebSocket subscriber connected (%d total)", len(self.connections))

    async def disconnect(self, ws: WebSocket) -> None:
        """Unsubscribe a WebSocket; unknown sockets are ignored."""
        if ws in self.connections:
            self.connections.remove(ws)

    async def broadcast(self, event: str, delivery: str | None, data: dict) -> int:
        """Send one delivery to every subscriber; return how many received it.

        Subscribers whose send fails are dropped.
        """
        message = json.dumps({"event": event, "delivery": delivery, "data": data})
        dropped: list[WebSocket] = []
        for ws in self.connections:
            try:
                await ws.send_text(message)
            except Exception:  # noqa: BLE001
                logger.debug("Dropping WebSocket subscriber after failed send")
                dropped.append(ws)
        for ws in dropped:
            await self.disconnect(ws)
        return len(self.connections)
