import json
from functools import lru_cache
from typing import Any, Protocol, Type, TypeVar, runtime_checkable

from pydantic import BaseModel, TypeAdapter, ValidationError

from ..models.errors import EncodingError

T = TypeVar("T")


@runtime_checkable
class DataEncoder(Protocol):
    def encode(self, value: Any) -> bytes: ...


@runtime_checkable
class DataDecoder(Protocol):
    def decode(self, response_type: Type[T], data: bytes) -> T: ...


@lru_cache(maxsize=128)
def _adapter(tp: Any) -> TypeAdapter:
    return TypeAdapter(tp)


class JSONEncoder:
    """Encode pydantic models, dataclasses and plain values as compact JSON.

    Models are dumped by alias so wire names survive the round trip.
    """

    def __init__(self, by_alias: bool = True, exclude_none: bool = False):
        self.by_alias = by_alias
        self.exclude_none = exclude_none

    def encode(self, value: Any) -> bytes:
        try:
            if isinstance(value, BaseModel):
                return value.model_dump_json(
                    by_alias=self.by_alias, exclude_none=self.exclude_none
                ).encode("utf-8")
            return _adapter(type(value)).dump_json(
                value, by_alias=self.by_alias, exclude_none=self.exclude_none
            )
        except (ValidationError, TypeError, ValueError) as e:
            raise EncodingError(e) from e


class JSONDecoder:
    """Validate JSON bytes into ``response_type``.

    Raises ``pydantic.ValidationError`` when the payload does not match.
    """

    def decode(self, response_type: Type[T], data: bytes) -> T:
        return _adapter(response_type).validate_json(data)


def to_dictionary(value: Any, encoder: DataEncoder) -> dict[str, Any] | None:
    """Round-trip ``value`` through ``encoder`` into a JSON object, if it is one."""
    if isinstance(value, dict):
        return value
    try:
        decoded = json.loads(encoder.encode(value))
    except (EncodingError, ValueError):
        return None
    return decoded if isinstance(decoded, dict) else None
