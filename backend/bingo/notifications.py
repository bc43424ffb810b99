from typing import Any, Dict, Optional

WS_NAMESPACE = '/ws'


def game_room(game_id) -> str:
    return f"game:{game_id}"


class NotificationSink:
    """Receives one event per successful game operation. Default: drop it."""

    def emit(self, event: str, payload: Dict[str, Any], game_id: Optional[int] = None) -> None:
        return None


class SocketIONotifier(NotificationSink):
    """Push game events to Socket.IO clients.

    Events for a game go to its room; ``session_created`` is broadcast on the
    namespace so lobby screens can list new games.
    """

    def __init__(self, socketio, namespace: str = WS_NAMESPACE):
        self.socketio = socketio
        self.namespace = namespace

    def emit(self, event, payload, game_id=None):
        if event == 'session_created' or game_id is None:
            self.socketio.emit(event, payload, namespace=self.namespace)
            return
        self.socketio.emit(event, payload, to=game_room(game_id), namespace=self.namespace)
