"""
WebSocket handling for real-time table communication.

Each connection subscribes to one table, optionally as one seat, and
receives a state message after every game event. Clients send:

    {"type": "start_hand"}
    {"type": "action", "seat": 0, "action": "RAISE", "amount": 40}
    {"type": "get_state"}
"""

from __future__ import annotations
from typing import Any, Dict, Optional
import asyncio
import logging

from fastapi import WebSocket, WebSocketDisconnect

from pokerfish.core.game import HandStartError, IllegalActionError
from pokerfish.core.rules import Action
from pokerfish.server.session import TableSession


logger = logging.getLogger(__name__)


def handle_message(
    session: TableSession,
    message: Dict[str, Any],
    seat: Optional[int] = None,
) -> Optional[Dict[str, Any]]:
    """
    Handle a message from a client.

    Args:
        session: The table the connection is subscribed to
        message: The message dict with 'type' and optional data
        seat: Seat bound to the connection, if any

    Returns:
        Reply dict, or None when the state feed already carries the answer
    """
    msg_type = message.get("type", "")

    if msg_type == "action":
        action_seat = message.get("seat", seat)
        if action_seat is None:
            return {"type": "error", "message": "seat required"}
        try:
            action = Action.from_dict(message)
            result = session.submit_action(int(action_seat), action)
        except (IllegalActionError, ValueError) as e:
            logger.warning(f"Table {session.table_id}: rejected action from seat {action_seat}: {e}")
            return {"type": "error", "message": str(e)}
        return {
            "type": "action_result",
            "success": result.success,
            "action": result.action_type.value if result.action_type else None,
            "amount": result.amount,
        }

    if msg_type == "start_hand":
        try:
            hand_number = session.start_hand()
        except HandStartError as e:
            logger.warning(f"Table {session.table_id}: {e}")
            return {"type": "error", "message": str(e)}
        return {"type": "hand_started", "hand_number": hand_number}

    if msg_type == "get_state":
        return {"type": "state", **session.get_view(seat)}

    return {"type": "error", "message": f"Unknown message type: {msg_type}"}


async def _pump(queue: asyncio.Queue, websocket: WebSocket) -> None:
    while True:
        message = await queue.get()
        await websocket.send_json(message)


async def websocket_endpoint(websocket: WebSocket, table_id: str, seat: Optional[int] = None):
    """
    WebSocket endpoint for one table.

    Protocol:
    1. Client connects to /ws/{table_id}?seat=N
    2. Server sends the current state, then one state message per game event
    3. Client sends actions and start requests; replies arrive in order
       with the state messages
    """
    await websocket.accept()

    try:
        session = websocket.app.state.tables.get_table(table_id)
    except KeyError:
        logger.warning(f"WebSocket for unknown table {table_id}")
        await websocket.send_json({"type": "error", "message": f"Table {table_id} not found"})
        await websocket.close()
        return

    queue = session.subscribe(seat)
    sender = asyncio.create_task(_pump(queue, websocket))
    logger.info(f"WebSocket connected to {table_id} (seat {seat})")

    try:
        while True:
            message = await websocket.receive_json()
            reply = handle_message(session, message, seat)
            if reply is not None:
                queue.put_nowait(reply)
    except WebSocketDisconnect:
        logger.info(f"WebSocket disconnected from {table_id} (seat {seat})")
    finally:
        sender.cancel()
        session.unsubscribe(queue)
