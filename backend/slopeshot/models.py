import uuid
from dataclasses import dataclass, field
from fractions import Fraction
from typing import Dict, Optional

from flask_login import UserMixin


class GuestUser(UserMixin):
    """Identity handed to the game core by the login layer.

    Guests only carry a display name; they live in memory for the lifetime
    of the process.
    """

    def __init__(self, user_id: str, name: str):
        self.id = user_id
        self.name = name

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
        }


@dataclass(frozen=True)
class Point:
    x: int
    y: int

    def to_dict(self):
        return {'x': self.x, 'y': self.y}


@dataclass(frozen=True)
class RoundState:
    """One puzzle: a target lattice point and the line's y-intercept.

    The slope is never stored; it is derived from the target so it can't
    drift out of sync with what players were shown.
    """
    target: Point
    intercept: int

    @property
    def exact_slope(self) -> Fraction:
        assert self.target.x != 0, 'generated targets never sit on the y-axis'
        return Fraction(self.target.y - self.intercept, self.target.x)

    @property
    def slope(self) -> float:
        assert self.target.x != 0, 'generated targets never sit on the y-axis'
        return (self.target.y - self.intercept) / self.target.x

    def to_payload(self):
        # Slope is deliberately absent: players have to work it out
        return {
            'alien': self.target.to_dict(),
            'b': self.intercept,
        }


@dataclass
class Player:
    id: str
    name: str
    lives: int = 3
    score: int = 0

    @property
    def is_alive(self) -> bool:
        return self.lives > 0

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'lives': self.lives,
            'score': self.score,
        }


@dataclass
class Room:
    code: str
    players: Dict[str, Player] = field(default_factory=dict)
    current_round: Optional[RoundState] = None
    round_number: int = 0
    # Distinguishes this room from a later one that reuses the same code
    token: str = field(default_factory=lambda: uuid.uuid4().hex)
    # Player id that hit the current round; None while the round is open
    solved_by: Optional[str] = None

    @property
    def round_open(self) -> bool:
        return self.current_round is not None and self.solved_by is None

    def begin_round(self, round_state: RoundState) -> None:
        self.current_round = round_state
        self.round_number += 1
        self.solved_by = None

    def roster(self):
        return {pid: p.to_dict() for pid, p in self.players.items()}
