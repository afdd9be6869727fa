"""
Per-board realtime fan-out.

ChannelRegistry maps a board id to the connections subscribed to it and
Broadcaster pushes serialized events to those connections. Both are plain
objects owned by the application (see trackboard.main) rather than module
globals. Registry mutations never await, so on a single event loop each
subscribe/unsubscribe is one atomic step.

Delivery is best-effort and at-most-once: a connection that is closed or
fails a send is dropped from the registry and misses the event.
"""
import json
import logging
from typing import Any, Dict, Hashable, Optional, Set, Tuple

from starlette.websockets import WebSocketState

from trackboard.core.common import utcnow
from trackboard.core.errors import SubscriptionRequired

logger = logging.getLogger(__name__)


def is_open(connection) -> bool:
    return (
        connection.client_state == WebSocketState.CONNECTED
        and connection.application_state == WebSocketState.CONNECTED
    )


class ChannelRegistry:
    def __init__(self):
        self._by_board: Dict[str, Set[Hashable]] = {}
        self._board_of: Dict[Hashable, str] = {}

    def subscribe(self, board_id: Optional[str], connection) -> None:
        if not board_id:
            raise SubscriptionRequired()
        # a connection follows exactly one board
        self.unsubscribe(connection)
        self._by_board.setdefault(board_id, set()).add(connection)
        self._board_of[connection] = board_id

    def unsubscribe(self, connection) -> Optional[str]:
        """Drop ``connection`` from its board. Returns that board id, if any."""
        board_id = self._board_of.pop(connection, None)
        if board_id is None:
            return None
        members = self._by_board.get(board_id)
        if members is not None:
            members.discard(connection)
            if not members:
                del self._by_board[board_id]
        return board_id

    def connections(self, board_id: str) -> Tuple[Any, ...]:
        return tuple(self._by_board.get(board_id, ()))

    def board_of(self, connection) -> Optional[str]:
        return self._board_of.get(connection)

    def boards(self) -> Tuple[str, ...]:
        return tuple(self._by_board)

    def __len__(self) -> int:
        return len(self._board_of)


class Broadcaster:
    def __init__(self, registry: Optional[ChannelRegistry] = None):
        self.registry = registry if registry is not None else ChannelRegistry()

    async def publish(self, board_id: str, event: Dict[str, Any]) -> int:
        """Send ``event`` to every open subscriber of ``board_id``; returns the delivery count."""
        targets = self.registry.connections(board_id)
        if not targets:
            return 0

        data = json.dumps(event, default=str)
        delivered = 0
        for connection in targets:
            if not is_open(connection):
                self.registry.unsubscribe(connection)
                continue
            try:
                await connection.send_text(data)
            except Exception as e:
                logger.warning(f"Dropping subscriber of board {board_id} after failed send: {e}")
                self.registry.unsubscribe(connection)
                continue
            delivered += 1

        logger.debug(f"Published {event.get('type')} to {delivered}/{len(targets)} subscribers of board {board_id}")
        return delivered


async def answer_keepalive(connection, raw: str) -> bool:
    """Reply to a ``{"type": "ping"}`` message with a pong. Anything else is ignored."""
    try:
        message = json.loads(raw)
    except (TypeError, ValueError):
        logger.debug("Ignoring malformed realtime message")
        return False

    if not isinstance(message, dict) or message.get("type") != "ping":
        return False

    await connection.send_text(json.dumps({"type": "pong", "at": utcnow().isoformat()}))
    return True
