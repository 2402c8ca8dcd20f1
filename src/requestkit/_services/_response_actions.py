from logging import getLogger
from typing import Any, Callable, Iterable, Mapping, Optional, Protocol, Tuple

from .._utils._delivery import DeliveryContext

Action = Callable[[], None]
ResponseCode = int

logger = getLogger("requestkit.actions")


class ResponseActionsProvider(Protocol):
    @property
    def actions(self) -> Mapping[ResponseCode, Iterable[Action]]: ...


class ResponseActions:
    """Side effects keyed by status code.

    Actions fire whenever their status is observed, whatever the response is
    later classified as. An action that raises is logged and skipped.
    """

    def __init__(self, actions: Optional[Mapping[ResponseCode, Iterable[Action]]] = None):
        self._actions: dict[ResponseCode, Tuple[Action, ...]] = {
            int(code): tuple(entries) for code, entries in (actions or {}).items()
        }

    @classmethod
    def from_provider(cls, provider: Any) -> "ResponseActions":
        """Snapshot a provider: a mapping, a callable returning one, or an object
        exposing ``actions``."""
        if provider is None:
            return cls()
        if isinstance(provider, Mapping):
            return cls(provider)
        if hasattr(provider, "actions"):
            return cls(provider.actions)
        return cls(provider())

    def actions_for(self, status_code: ResponseCode) -> Tuple[Action, ...]:
        return self._actions.get(status_code, ())

    def fire(self, status_code: ResponseCode, delivery: DeliveryContext) -> int:
        actions = self.actions_for(status_code)
        for action in actions:
            delivery.dispatch(_isolated(status_code, action))
        return len(actions)

    def __len__(self) -> int:
        return len(self._actions)


def _isolated(status_code: ResponseCode, action: Action) -> Action:
    def run() -> None:
        try:
            action()
        except Exception:
            logger.exception(f"Response action for status {status_code} failed")

    return run
