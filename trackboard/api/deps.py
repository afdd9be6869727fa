from starlette.requests import HTTPConnection

from trackboard.core.realtime import Broadcaster


def get_broadcaster(conn: HTTPConnection) -> Broadcaster:
    """The application's broadcaster; works for both HTTP and WebSocket routes."""
    return conn.app.state.broadcaster
