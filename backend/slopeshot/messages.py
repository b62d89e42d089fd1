"""Pydantic models for inbound Socket.IO events.

Keep wire validation here; the session handler only ever sees validated
models. Field aliases match the camelCase names the browser client sends.
"""
from typing import Any, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from slopeshot.errors import InvalidMessage

NAME_MAX_LENGTH = 32

M = TypeVar('M', bound=BaseModel)


class InboundMessage(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra='ignore', str_strip_whitespace=True)


class CreateRoomMessage(InboundMessage):
    name: Optional[str] = Field(default=None, max_length=NAME_MAX_LENGTH)

    @field_validator('name')
    @classmethod
    def blank_name_is_missing(cls, v):
        return v or None


class JoinRoomMessage(CreateRoomMessage):
    room_code: str = Field(alias='roomCode', min_length=1, max_length=16)

    @field_validator('room_code', mode='before')
    @classmethod
    def accept_numeric_code(cls, v):
        # Clients that parse the code out of an input box sometimes send a number
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class ShootMessage(InboundMessage):
    k: float = Field(allow_inf_nan=False)

    @field_validator('k', mode='before')
    @classmethod
    def reject_bool(cls, v):
        # pydantic would otherwise read true/false as 1.0/0.0
        if isinstance(v, bool):
            raise ValueError('k must be a number')
        return v


def parse_message(model: Type[M], data: Any) -> M:
    """Validate an inbound payload, raising ``InvalidMessage`` on bad input."""
    if not isinstance(data, dict):
        raise InvalidMessage(f'{model.__name__} payload must be an object')
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        first = exc.errors()[0]
        field = '.'.join(str(part) for part in first.get('loc', ())) or 'payload'
        raise InvalidMessage(f"Invalid {field}: {first.get('msg')}") from exc
