import logging

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect, status

from trackboard.api.deps import get_broadcaster
from trackboard.core.errors import SubscriptionRequired
from trackboard.core.realtime import Broadcaster, answer_keepalive

logger = logging.getLogger(__name__)

router = APIRouter(tags=["realtime"])


@router.websocket("/ws")
async def board_channel(websocket: WebSocket, broadcaster: Broadcaster = Depends(get_broadcaster)):
    """
    Subscribe to one board's events: ``/ws?boardId=<id>``.
    The only inbound message understood is ``{"type": "ping"}``.
    """
    board_id = websocket.query_params.get("boardId")
    registry = broadcaster.registry

    await websocket.accept()
    try:
        registry.subscribe(board_id, websocket)
    except SubscriptionRequired as e:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION, reason=e.detail)
        return

    logger.info(f"Subscriber connected to board {board_id} ({len(registry)} open)")
    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
            # binary frames carry no text and are ignored
            if message.get("text") is not None:
                await answer_keepalive(websocket, message["text"])
    except WebSocketDisconnect:
        pass
    finally:
        registry.unsubscribe(websocket)
        logger.info(f"Subscriber left board {board_id} ({len(registry)} open)")
