"""Errors raised by the game core.

Every error here is scoped to the connection that caused it; the socket
layer reports ``str(exc)`` back to that connection as an ``error`` event.
"""


class GameError(Exception):
    """Base class for recoverable, connection-scoped game errors."""
    default_message = 'Game error'

    def __init__(self, message=None):
        super().__init__(message or self.default_message)


class RoomNotFound(GameError):
    default_message = 'Room not found'

    def __init__(self, code=None):
        self.code = code
        super().__init__(f'Room {code} not found' if code else None)


class AlreadyBound(GameError):
    default_message = 'This connection is already in a room'


class InvalidMessage(GameError):
    default_message = 'Invalid message'


class RoomCapacityExceeded(GameError):
    default_message = 'No free room codes, try again later'
