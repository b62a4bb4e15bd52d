from __future__ import annotations

import logging
from collections.abc import MutableMapping
from pathlib import Path
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple, Union

import yaml

from .errors import BindingError
from .types import EventName, EventRef, Listener, event_name

logger = logging.getLogger(__name__)


class BindingSet(MutableMapping):
    """Ordered mapping of event name -> listener declared by one subscriber.

    Keys may be given as plain strings or :class:`~managed_events.types.EventKey`
    and are stored by name. Each name maps to a single listener; assigning a
    name again replaces its listener.
    """

    def __init__(self, bindings: Optional[Mapping[EventRef, Listener]] = None) -> None:
        self._bindings: Dict[EventName, Listener] = {}
        if bindings:
            for event, listener in bindings.items():
                self[event] = listener

    def __getitem__(self, event: EventRef) -> Listener:
        return self._bindings[event_name(event)]

    def __setitem__(self, event: EventRef, listener: Listener) -> None:
        if not callable(listener):
            raise BindingError(f"Listener for '{event_name(event)}' is not callable: {listener!r}")
        self._bindings[event_name(event)] = listener

    def __delitem__(self, event: EventRef) -> None:
        del self._bindings[event_name(event)]

    def __iter__(self) -> Iterator[EventName]:
        return iter(self._bindings)

    def __len__(self) -> int:
        return len(self._bindings)

    def __repr__(self) -> str:
        return f"BindingSet({list(self._bindings)!r})"

    def pairs(self) -> Tuple[Tuple[EventName, Listener], ...]:
        return tuple(self._bindings.items())

    @classmethod
    def from_methods(cls, owner: Any, methods: Mapping[EventRef, str]) -> "BindingSet":
        """Bind event names to methods of ``owner`` looked up by name.

        Each bound method is fetched once, so the same object is later used for
        both subscribing and unsubscribing.
        """
        out = cls()
        for event, method_name in methods.items():
            listener = getattr(owner, str(method_name), None)
            if listener is None or not callable(listener):
                raise BindingError(
                    f"{type(owner).__name__} has no method '{method_name}' for event '{event_name(event)}'"
                )
            out[event] = listener
        return out


def load_bindings(
    owner: Any,
    path: Optional[Union[str, Path]] = None,
    *,
    text: Optional[str] = None,
) -> BindingSet:
    """Load a YAML binding declaration for ``owner``.

    The document maps event names to method names under an ``events`` key:

        events:
          PlayerDied: on_death
          LevelLoaded: on_level_loaded
    """
    if (path is None) == (text is None):
        raise ValueError("Provide exactly one of path or text")
    if path is not None:
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
        logger.debug("Loaded event bindings from path: %s", path)

    try:
        raw = yaml.safe_load(text) or {}
    except yaml.YAMLError as exc:
        raise BindingError(f"Invalid binding declaration: {exc}") from exc
    if not isinstance(raw, dict):
        raise BindingError("Binding declaration must be a mapping")
    events = raw.get("events") or {}
    if not isinstance(events, dict):
        raise BindingError("'events' must map event names to method names")
    return BindingSet.from_methods(owner, {str(k): str(v) for k, v in events.items()})


__all__ = ["BindingSet", "load_bindings"]
