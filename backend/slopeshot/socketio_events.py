from flask import current_app, request
from flask_login import current_user
from flask_socketio import emit, join_room
from slopeshot import socketio
from slopeshot.errors import GameError
from slopeshot.sessions import GameSessionHandler


def room_channel(code: str) -> str:
    return f"room:{code}"


class SocketIOOutbox:
    """Delivers game events through Flask-SocketIO.

    Player ids are Socket.IO session ids, so a private message is an emit
    addressed to the sid.
    """

    def __init__(self, sio, namespace: str = '/'):
        self.sio = sio
        self.namespace = namespace

    def _emit(self, event, payload, to):
        # Use socketio.emit since this may be called from a background task
        if payload is None:
            self.sio.emit(event, to=to, namespace=self.namespace)
        else:
            self.sio.emit(event, payload, to=to, namespace=self.namespace)

    def to_room(self, code, event, payload=None):
        self._emit(event, payload, room_channel(code))

    def to_player(self, player_id, event, payload=None):
        self._emit(event, payload, player_id)

    def subscribe(self, player_id, code):
        join_room(room_channel(code), sid=player_id, namespace=self.namespace)


def defer_with_socketio(delay_sec: float, fn, *args) -> None:
    def _runner():
        if delay_sec:
            socketio.sleep(delay_sec)
        fn(*args)

    socketio.start_background_task(_runner)


def _sessions() -> GameSessionHandler:
    return current_app.extensions['slopeshot']


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _report(exc: GameError) -> None:
    current_app.logger.info(f"[rejected] sid={_get_sid()} {type(exc).__name__}: {exc}")
    emit('error', str(exc))


def handle_connect(auth=None):
    display_name = current_user.name if current_user.is_authenticated else None
    _sessions().connect(_get_sid(), display_name)


def handle_disconnect(*_args):
    _sessions().disconnect(_get_sid())


def handle_create_room(data=None):
    try:
        _sessions().create_room(_get_sid(), data or {})
    except GameError as exc:
        _report(exc)


def handle_join_room(data=None):
    try:
        _sessions().join_room(_get_sid(), data or {})
    except GameError as exc:
        _report(exc)


def handle_shoot(data=None):
    try:
        _sessions().shoot(_get_sid(), data)
    except GameError as exc:
        _report(exc)


def handle_ping(data=None):
    emit('pong', data or {})


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register Socket.IO event handlers on ``namespace``.

    Handlers resolve the session handler from ``current_app`` on every
    event, so one ``socketio`` object can serve several app instances.
    """
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('createRoom', handle_create_room, namespace=namespace)
    socketio.on_event('joinRoom', handle_join_room, namespace=namespace)
    socketio.on_event('shoot', handle_shoot, namespace=namespace)
    socketio.on_event('ping', handle_ping, namespace=namespace)
