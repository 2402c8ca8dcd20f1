from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, model_validator

from .errors import ApiErrorResponse, RequestError

T = TypeVar("T")
E = TypeVar("E")
U = TypeVar("U")


class Success(BaseModel):
    """Marker type for responses that carry no meaningful payload.

    Any JSON document validates into an empty ``Success`` instance.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _discard_payload(cls, data: Any) -> dict:
        return {}


@dataclass(frozen=True)
class NoContent:
    """Expect no meaningful payload; an empty body decodes as ``{}``."""

    @property
    def response_type(self) -> Type[Success]:
        return Success


@dataclass(frozen=True)
class Typed(Generic[T]):
    response_type: Type[T]


Expectation = Union[NoContent, Typed[Any]]


def expectation_for(response_type: Optional[type]) -> Expectation:
    """Resolve the response expectation once, when the request is built."""
    if response_type is None or response_type is Success:
        return NoContent()
    return Typed(response_type)


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def is_ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value

    def map(self, fn: Callable[[T], U]) -> "Ok[U]":
        return Ok(fn(self.value))


@dataclass(frozen=True)
class ApiError(Generic[E]):
    """The server answered with a body matching the configured API error type."""

    value: E

    @property
    def is_ok(self) -> bool:
        return False

    def unwrap(self):
        raise ApiErrorResponse(self.value)

    def map(self, fn: Callable[[Any], Any]) -> "ApiError[E]":
        return self


@dataclass(frozen=True)
class Failure:
    error: RequestError

    @property
    def is_ok(self) -> bool:
        return False

    def unwrap(self):
        raise self.error

    def map(self, fn: Callable[[Any], Any]) -> "Failure":
        return self


Result = Union[Ok[T], ApiError[E], Failure]
