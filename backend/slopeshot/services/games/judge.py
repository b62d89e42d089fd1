import enum
import logging

from .registry import RoomRegistry
from .rounds import RoundController

logger = logging.getLogger(__name__)

DEFAULT_TOLERANCE = 0.01


class ShotOutcome(str, enum.Enum):
    HIT = 'hit'
    MISS = 'miss'
    IGNORED = 'ignored'


class ShotJudge:
    def __init__(self, registry: RoomRegistry, rounds: RoundController, outbox, tolerance: float = DEFAULT_TOLERANCE):
        self.registry = registry
        self.rounds = rounds
        self.outbox = outbox
        self.tolerance = tolerance

    def resolve_shot(self, code: str, player_id: str, guessed_slope: float) -> ShotOutcome:
        """Judge one guess against the room's active round.

        A hit scores a point for the shooter and queues the next round;
        a miss costs a life and is reported privately to the shooter.
        Shots from unknown or dead players, or with no open round, are
        ignored without any state change.
        """
        with self.registry.lock:
            room = self.registry.get(code)
            player = room.players.get(player_id) if room else None
            if player is None or not player.is_alive or not room.round_open:
                logger.debug(f"[shot-ignored] room={code} player={player_id}")
                return ShotOutcome.IGNORED

            round_state = room.current_round
            true_slope = round_state.slope

            if abs(true_slope - guessed_slope) < self.tolerance:
                player.score += 1
                room.solved_by = player.id
                self.outbox.to_room(code, 'hit', {
                    'playerId': player.id,
                    'playerName': player.name,
                    'alien': round_state.target.to_dict(),
                })
                self.outbox.to_room(code, 'updatePlayers', room.roster())
                logger.info(f"[shot-hit] room={code} player={player.id} slope={guessed_slope} score={player.score}")
                self.rounds.schedule_next_round(code)
                return ShotOutcome.HIT

            player.lives -= 1
            self.outbox.to_player(player.id, 'myMiss', {
                'yourSlope': guessed_slope,
                'correctSlope': true_slope,
                'lives': player.lives,
            })
            self.outbox.to_room(code, 'updatePlayers', room.roster())
            logger.info(f"[shot-miss] room={code} player={player.id} slope={guessed_slope} lives={player.lives}")
            if player.lives == 0:
                self.outbox.to_player(player.id, 'gameOver')
                logger.info(f"[game-over] room={code} player={player.id}")
            return ShotOutcome.MISS
