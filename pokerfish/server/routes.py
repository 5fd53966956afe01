"""
HTTP API Routes for Pokerfish.

These routes create tables, start hands, accept human actions and serve
table views. Live updates are streamed over the WebSocket endpoint.
"""

from typing import Any, Dict, Optional
import logging

from fastapi import APIRouter, Body, HTTPException, Request

from pokerfish.core.game import HandStartError, IllegalActionError
from pokerfish.core.rules import Action
from pokerfish.server.schemas import (
    ActionRequest, ActionResultSchema, TableConfig, TableCreatedSchema,
)
from pokerfish.server.session import TableManager, TableSession


logger = logging.getLogger(__name__)

router = APIRouter()


def get_manager(request: Request) -> TableManager:
    return request.app.state.tables


def get_session(request: Request, table_id: str) -> TableSession:
    """Look up a table or answer 404."""
    try:
        return get_manager(request).get_table(table_id)
    except KeyError:
        logger.warning(f"Unknown table {table_id}")
        raise HTTPException(status_code=404, detail=f"Table {table_id} not found")


@router.post("/tables", response_model=TableCreatedSchema)
async def create_table(
    request: Request,
    config: Optional[TableConfig] = Body(default=None),
) -> Dict[str, Any]:
    """
    Create a new table.

    Out-of-range settings are clamped; an empty body gives the default table.
    """
    session = get_manager(request).create_table(config or TableConfig())
    return session.summary()


@router.get("/tables/{table_id}")
async def get_table(request: Request, table_id: str, seat: Optional[int] = None) -> Dict[str, Any]:
    """Table view as seen from a seat (all hole cards masked without one)."""
    session = get_session(request, table_id)
    return session.get_view(seat)


@router.delete("/tables/{table_id}")
async def close_table(request: Request, table_id: str) -> Dict[str, Any]:
    get_session(request, table_id)
    get_manager(request).close_table(table_id)
    return {"success": True, "message": f"Table {table_id} closed"}


@router.post("/tables/{table_id}/hands")
async def start_hand(request: Request, table_id: str, seat: Optional[int] = None) -> Dict[str, Any]:
    """
    Start a new hand.

    Deals cards, posts blinds and schedules the first agent turn.
    """
    session = get_session(request, table_id)
    try:
        hand_number = session.start_hand()
    except HandStartError as e:
        logger.warning(f"Table {table_id}: {e}")
        raise HTTPException(status_code=400, detail=str(e))

    return {
        "success": True,
        "message": f"Hand #{hand_number} started",
        "hand_number": hand_number,
        "state": session.get_view(seat),
    }


@router.post("/tables/{table_id}/actions", response_model=ActionResultSchema)
async def take_action(request: Request, table_id: str, req: ActionRequest) -> Dict[str, Any]:
    """
    Take an action for a human seat.

    The response carries the table view for that seat after the action.
    """
    session = get_session(request, table_id)
    try:
        action = Action.from_dict({"action": req.action, "amount": req.amount})
        result = session.submit_action(req.seat, action)
    except (IllegalActionError, ValueError) as e:
        logger.warning(f"Table {table_id}: rejected {req.action} from seat {req.seat}: {e}")
        raise HTTPException(status_code=400, detail=str(e))

    return {
        "success": result.success,
        "message": result.message,
        "action_type": result.action_type.value if result.action_type else None,
        "amount": result.amount,
        "state": session.get_view(req.seat),
    }


@router.get("/tables/{table_id}/agents/{seat}/stats")
async def get_agent_stats(request: Request, table_id: str, seat: int) -> Dict[str, Any]:
    session = get_session(request, table_id)
    try:
        return session.get_agent_stats(seat)
    except KeyError:
        logger.warning(f"Table {table_id}: no agent on seat {seat}")
        raise HTTPException(status_code=404, detail=f"No agent on seat {seat}")
