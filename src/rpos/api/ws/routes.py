from __future__ import annotations

import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status

from rpos.api.ws.manager import TERMINAL_ROLE, ConnectionManager, is_known_role

router = APIRouter()
logger = logging.getLogger(__name__)


@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket) -> None:
    role = websocket.query_params.get("role", TERMINAL_ROLE).strip().lower()
    if not is_known_role(role):
        logger.warning("ws_unknown_role", extra={"role": role})
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    manager: ConnectionManager = websocket.app.state.ws_manager
    await manager.register(websocket=websocket, role=role)
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        await manager.unregister(websocket)
    except Exception:
        logger.exception("ws_connection_error", extra={"role": role})
        await manager.unregister(websocket)
