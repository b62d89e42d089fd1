import logging
import random
import threading
from typing import Dict, List, Optional, Tuple

from slopeshot.errors import RoomCapacityExceeded, RoomNotFound
from slopeshot.models import Player, Room

logger = logging.getLogger(__name__)

CODE_MIN = 1000
CODE_MAX = 9999


class RoomRegistry:
    """Owns every live room, keyed by its 4-digit code.

    Callers must not hold on to a ``Room`` between operations: rooms are
    looked up by code each time because they can vanish when the last
    player leaves. All mutation happens under ``lock``.
    """

    def __init__(self, starting_lives: int = 3, rng: Optional[random.Random] = None):
        self.starting_lives = starting_lives
        self.lock = threading.RLock()
        self._rooms: Dict[str, Room] = {}
        self._rng = rng or random.Random()

    def __len__(self):
        return len(self._rooms)

    def __contains__(self, code):
        return code in self._rooms

    def codes(self) -> List[str]:
        return list(self._rooms)

    def get(self, code: str) -> Optional[Room]:
        return self._rooms.get(code)

    def _new_code(self) -> str:
        # Fixed-code rooms (the lobby) don't use up the numeric code space
        taken = sum(1 for c in self._rooms if c.isdigit() and CODE_MIN <= int(c) <= CODE_MAX)
        if taken > CODE_MAX - CODE_MIN:
            raise RoomCapacityExceeded()
        while True:
            code = str(self._rng.randint(CODE_MIN, CODE_MAX))
            if code not in self._rooms:
                return code

    def _add_player(self, room: Room, player_id: str, name: str) -> Player:
        player = Player(id=player_id, name=name, lives=self.starting_lives, score=0)
        room.players[player_id] = player
        return player

    def create_room(self, player_id: str, name: str) -> Tuple[str, Room]:
        """Create a room with a fresh code and seat its creator."""
        with self.lock:
            code = self._new_code()
            room = Room(code=code)
            self._rooms[code] = room
            self._add_player(room, player_id, name)
        logger.info(f"[room-create] room={code} creator={player_id}")
        return code, room

    def open_room(self, code: str) -> Room:
        """Get the room under a fixed code, creating it empty if needed."""
        with self.lock:
            room = self._rooms.get(code)
            if room is None:
                room = Room(code=code)
                self._rooms[code] = room
                logger.info(f"[room-create] room={code} fixed code")
            return room

    def join_room(self, code: str, player_id: str, name: str) -> Room:
        with self.lock:
            room = self._rooms.get(code)
            if room is None:
                raise RoomNotFound(code)
            self._add_player(room, player_id, name)
        logger.info(f"[room-join] room={code} player={player_id} players={len(room.players)}")
        return room

    def remove_player(self, code: str, player_id: str) -> Optional[Room]:
        """Drop a player; delete the room once nobody is left.

        Returns the room if it is still live, otherwise None.
        """
        with self.lock:
            room = self._rooms.get(code)
            if room is None:
                return None
            room.players.pop(player_id, None)
            if room.players:
                return room
            del self._rooms[code]
        logger.info(f"[room-delete] room={code} last player left")
        return None
