"""
WebSocket Connection Manager for Real-Time Events

Clients subscribe to rooms. A cart page joins ``cart:<session_id>`` and
re-reads the cart whenever a ``cartUpdated`` event arrives; the admin panel
joins ``admin`` to hear about new orders. Events are advisory: a missed
event only means a stale view, the persisted cart stays authoritative.
"""
from typing import Dict, Set
from fastapi import WebSocket
import logging

from storefront.core.datetime_utils import utc_now

logger = logging.getLogger(__name__)

CART_UPDATED_EVENT = "cartUpdated"
ORDER_CREATED_EVENT = "orderCreated"
ADMIN_ROOM = "admin"


def cart_room(session_id: str) -> str:
    return f"cart:{session_id}"


class ConnectionManager:
    """Manages WebSocket connections and room broadcasts"""

    def __init__(self):
        # Structure: {room_name: {websockets}}
        self.rooms: Dict[str, Set[WebSocket]] = {}

    async def connect(self, websocket: WebSocket, room_name: str):
        """Accept a new WebSocket connection and subscribe it to a room"""
        await websocket.accept()
        await self.join_room(websocket, room_name)

        await self.send_personal_message(
            {
                "event": "connected",
                "room": room_name,
                "timestamp": utc_now().isoformat()
            },
            websocket
        )

    def disconnect(self, websocket: WebSocket):
        """Remove a WebSocket connection from every room"""
        for room_name in list(self.rooms):
            self.rooms[room_name].discard(websocket)
            if not self.rooms[room_name]:
                del self.rooms[room_name]
        logger.info("WebSocket disconnected")

    async def send_personal_message(self, message: dict, websocket: WebSocket):
        """Send message to a specific WebSocket connection"""
        try:
            if websocket.client_state.name != "CONNECTED":
                logger.warning(f"WebSocket is not connected (state: {websocket.client_state.name}), skipping message")
                return
            await websocket.send_json(message)
        except Exception as e:
            logger.error(f"Error sending personal message: {e}")

    async def join_room(self, websocket: WebSocket, room_name: str):
        """Add a websocket to a room"""
        if room_name not in self.rooms:
            self.rooms[room_name] = set()
        self.rooms[room_name].add(websocket)
        logger.info(f"WebSocket joined room: {room_name}")

    async def broadcast_to_room(self, message: dict, room_name: str) -> int:
        """Broadcast message to all websockets in a room, returns delivered count"""
        if room_name not in self.rooms:
            return 0

        disconnected = []
        sent = 0
        for websocket in list(self.rooms[room_name]):
            try:
                if websocket.client_state.name != "CONNECTED":
                    disconnected.append(websocket)
                    continue

                await websocket.send_json(message)
                sent += 1
            except Exception as e:
                logger.error(f"Error broadcasting to room {room_name}: {e}")
                disconnected.append(websocket)

        # Clean up disconnected websockets
        for ws in disconnected:
            self.rooms[room_name].discard(ws)
        if not self.rooms[room_name]:
            del self.rooms[room_name]

        return sent

    async def notify_cart_updated(self, session_id: str, item_count: int) -> int:
        """Fire the cartUpdated signal for one cart"""
        return await self.broadcast_to_room(
            {
                "event": CART_UPDATED_EVENT,
                "session_id": session_id,
                "item_count": item_count,
                "timestamp": utc_now().isoformat()
            },
            cart_room(session_id)
        )

    async def notify_order_created(self, order_id: str, total: int) -> int:
        return await self.broadcast_to_room(
            {
                "event": ORDER_CREATED_EVENT,
                "order_id": order_id,
                "total": total,
                "timestamp": utc_now().isoformat()
            },
            ADMIN_ROOM
        )

    def get_connection_count(self) -> dict:
        """Get statistics about active connections"""
        stats = {
            "total": len({ws for sockets in self.rooms.values() for ws in sockets}),
            "rooms": len(self.rooms),
        }
        return stats


# Global connection manager instance
connection_manager = ConnectionManager()
