"""Per-connection state and dispatch of inbound game events.

A connection starts ``UNBOUND``, becomes ``BOUND`` to exactly one room and
player when it creates or joins a room, and ends ``TERMINATED`` when the
transport closes. Only the binding decides which room a shot lands in.
"""
import enum
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from slopeshot.errors import AlreadyBound
from slopeshot.messages import CreateRoomMessage, JoinRoomMessage, ShootMessage, parse_message
from slopeshot.services.games import RoomRegistry, RoundController, ShotJudge, ShotOutcome

logger = logging.getLogger(__name__)


class SessionState(str, enum.Enum):
    UNBOUND = 'unbound'
    BOUND = 'bound'
    TERMINATED = 'terminated'


@dataclass
class Session:
    sid: str
    display_name: str
    state: SessionState = SessionState.UNBOUND
    room_code: Optional[str] = None


def default_player_name(sid: str) -> str:
    return f'Player {sid[:4]}'


class GameSessionHandler:
    def __init__(
        self,
        registry: RoomRegistry,
        rounds: RoundController,
        judge: ShotJudge,
        outbox,
        lobby_code: Optional[str] = None,
    ):
        self.registry = registry
        self.rounds = rounds
        self.judge = judge
        self.outbox = outbox
        self.lobby_code = lobby_code
        self._sessions: Dict[str, Session] = {}

    def session(self, sid: str) -> Optional[Session]:
        return self._sessions.get(sid)

    def connect(self, sid: str, display_name: Optional[str] = None) -> Session:
        with self.registry.lock:
            session = Session(sid=sid, display_name=display_name or default_player_name(sid))
            self._sessions[sid] = session
            logger.info(f"[connect] sid={sid} name={session.display_name!r}")
            if self.lobby_code:
                self._enter_lobby(session)
            return session

    def _enter_lobby(self, session: Session) -> None:
        room = self.registry.open_room(self.lobby_code)
        self.registry.join_room(room.code, session.sid, session.display_name)
        self._bind(session, room.code)
        if room.current_round is None:
            self.rounds.start_round(room.code)
        else:
            self.outbox.to_player(session.sid, 'newRound', room.current_round.to_payload())
        self.outbox.to_room(room.code, 'updatePlayers', room.roster())

    def _require_unbound(self, sid: str) -> Session:
        session = self._sessions.get(sid)
        if session is None:
            # Event raced ahead of connect; treat as a fresh anonymous connection
            session = Session(sid=sid, display_name=default_player_name(sid))
            self._sessions[sid] = session
        if session.state is not SessionState.UNBOUND:
            raise AlreadyBound()
        return session

    def _bind(self, session: Session, code: str) -> None:
        session.state = SessionState.BOUND
        session.room_code = code
        self.outbox.subscribe(session.sid, code)
        self.outbox.to_player(session.sid, 'roomJoined', code)

    def create_room(self, sid: str, data: Any) -> str:
        msg = parse_message(CreateRoomMessage, data)
        with self.registry.lock:
            session = self._require_unbound(sid)
            name = msg.name or session.display_name
            code, room = self.registry.create_room(sid, name)
            self._bind(session, code)
            self.rounds.start_round(code)
            self.outbox.to_room(code, 'updatePlayers', room.roster())
            return code

    def join_room(self, sid: str, data: Any) -> str:
        msg = parse_message(JoinRoomMessage, data)
        with self.registry.lock:
            session = self._require_unbound(sid)
            name = msg.name or session.display_name
            room = self.registry.join_room(msg.room_code, sid, name)
            self._bind(session, room.code)
            if room.current_round is None:
                self.rounds.start_round(room.code)
            else:
                # Late joiners get the puzzle already on screen for everyone else
                self.outbox.to_player(sid, 'newRound', room.current_round.to_payload())
            self.outbox.to_room(room.code, 'updatePlayers', room.roster())
            return room.code

    def shoot(self, sid: str, data: Any) -> ShotOutcome:
        msg = parse_message(ShootMessage, data)
        with self.registry.lock:
            session = self._sessions.get(sid)
            if session is None or session.state is not SessionState.BOUND:
                logger.debug(f"[shot-ignored] sid={sid} not in a room")
                return ShotOutcome.IGNORED
            return self.judge.resolve_shot(session.room_code, sid, msg.k)

    def disconnect(self, sid: str) -> None:
        with self.registry.lock:
            session = self._sessions.pop(sid, None)
            if session is None:
                return
            code = session.room_code
            was_bound = session.state is SessionState.BOUND
            session.state = SessionState.TERMINATED
            session.room_code = None
            logger.info(f"[disconnect] sid={sid} room={code}")
            if not was_bound:
                return
            room = self.registry.remove_player(code, sid)
            if room is not None:
                self.outbox.to_room(code, 'updatePlayers', room.roster())
