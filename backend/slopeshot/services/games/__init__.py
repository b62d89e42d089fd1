"""Game domain services: round generation, rooms, rounds and shot judging.

This package contains the transport-free core. Socket handlers call into
it and hand it an outbox for anything that has to reach clients, keeping
Socket.IO concerns out of the game mechanics.
"""

from .geometry import generate_round
from .judge import ShotJudge, ShotOutcome
from .registry import RoomRegistry
from .rounds import RoundController

__all__ = [
    'generate_round',
    'RoomRegistry',
    'RoundController',
    'ShotJudge',
    'ShotOutcome',
]
