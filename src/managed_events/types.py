from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar, Union

P = TypeVar("P")

# Event names are plain, case-sensitive strings; no validation is applied.
EventName = str

Listener = Callable[[Any], None]


@dataclass(frozen=True)
class EventKey(Generic[P]):
    """A named event carrying its payload type for static checkers.

    The bus only ever looks at ``name``; ``EventKey("PlayerDied")`` and the
    string ``"PlayerDied"`` refer to the same event.

        PLAYER_DIED: EventKey[Player] = EventKey("PlayerDied")
        manager.trigger(PLAYER_DIED, player)
    """

    name: str

    def __str__(self) -> str:
        return self.name


EventRef = Union[str, EventKey[Any]]


def event_name(event: EventRef) -> EventName:
    """Return the lookup key for a string or :class:`EventKey`."""
    if isinstance(event, EventKey):
        return event.name
    return event


def listener_name(listener: Any) -> str:
    return getattr(listener, "__qualname__", None) or getattr(listener, "__name__", None) or repr(listener)


__all__ = ["EventKey", "EventName", "EventRef", "Listener", "event_name", "listener_name"]
