import logging
import random
from typing import Callable, Optional

from slopeshot.models import RoundState
from .geometry import generate_round
from .registry import RoomRegistry

logger = logging.getLogger(__name__)


class RoundController:
    """Starts rounds for a room and queues the next one after a hit.

    ``outbox`` needs ``to_room(code, event, payload)``; ``defer`` is called
    as ``defer(delay_sec, fn, *args)`` and must run ``fn`` later, off the
    caller's stack.
    """

    def __init__(
        self,
        registry: RoomRegistry,
        outbox,
        defer: Callable,
        grid_max: int = 10,
        next_round_delay: float = 1.5,
        rng: Optional[random.Random] = None,
    ):
        self.registry = registry
        self.outbox = outbox
        self.defer = defer
        self.grid_max = grid_max
        self.next_round_delay = next_round_delay
        self._rng = rng

    def start_round(self, code: str) -> Optional[RoundState]:
        with self.registry.lock:
            room = self.registry.get(code)
            if room is None:
                return None
            round_state = generate_round(self.grid_max, self._rng)
            room.begin_round(round_state)
            self.outbox.to_room(code, 'newRound', round_state.to_payload())
        logger.info(
            f"[round-start] room={code} round={room.round_number} "
            f"target=({round_state.target.x}, {round_state.target.y}) b={round_state.intercept}"
        )
        return round_state

    def schedule_next_round(self, code: str) -> None:
        room = self.registry.get(code)
        if room is None:
            return
        expected_round = room.round_number
        logger.info(f"[timer-set] room={code} round={expected_round} delay={self.next_round_delay}s")
        self.defer(self.next_round_delay, self._fire_next_round, code, room.token, expected_round)

    def _fire_next_round(self, code: str, token: str, expected_round: int) -> None:
        # The room may have emptied (and its code been reused) while we slept
        with self.registry.lock:
            room = self.registry.get(code)
            if room is None or room.token != token:
                logger.info(f"[timer-abort] room={code} no longer exists")
                return
            if room.round_number != expected_round or room.solved_by is None:
                logger.info(
                    f"[timer-abort] room={code} expected solved round={expected_round} "
                    f"actual round={room.round_number}"
                )
                return
            self.start_round(code)
