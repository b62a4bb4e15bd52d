from __future__ import annotations

import logging
from collections import deque
from threading import RLock
from typing import Any, Deque, Dict, List, Optional, Tuple

from .settings import BusSettings
from .types import EventName, EventRef, Listener, event_name, listener_name

logger = logging.getLogger(__name__)


def _same_listener(registered: Listener, listener: Listener) -> bool:
    """Match by identity; a bound method matches when its object and function are the same."""
    if registered is listener:
        return True
    self_a = getattr(registered, "__self__", None)
    func_a = getattr(registered, "__func__", None)
    if self_a is None or func_a is None:
        return False
    return self_a is getattr(listener, "__self__", None) and func_a is getattr(listener, "__func__", None)


class EventManager:
    """Thread-safe registry of named events and their listeners.

    - ``subscribe`` appends a listener to the event's binding. The same
      listener may be registered several times and is then invoked once per
      registration.
    - ``unsubscribe`` removes one registration and ignores unknown names and
      listeners.
    - ``trigger`` calls every listener bound to the name, in subscription
      order, on the calling thread, before returning.

    ``post``/``dispatch_pending`` are a separate queued variant: events are
    held until the owner of the manager drains them, e.g. once per frame.
    """

    def __init__(self, settings: Optional[BusSettings] = None) -> None:
        self.settings = settings or BusSettings()
        self._lock = RLock()
        self._bindings: Dict[EventName, List[Listener]] = {}
        self._pending: Deque[Tuple[EventName, Any]] = deque()

    # ------------------------ Subscriptions ------------------------
    def subscribe(self, event: EventRef, listener: Listener) -> None:
        """Register ``listener`` for ``event``; duplicates are kept."""
        if not callable(listener):
            raise TypeError("listener must be callable")
        name = event_name(event)
        with self._lock:
            binding = self._bindings.get(name)
            if binding is None:
                self._bindings[name] = [listener]
            else:
                binding.append(listener)
        logger.debug("Subscribed %s to '%s'", listener_name(listener), name)

    def unsubscribe(self, event: EventRef, listener: Listener) -> None:
        """Remove one registration of ``listener`` from ``event``. Silently ignores if not present."""
        name = event_name(event)
        with self._lock:
            binding = self._bindings.get(name)
            if not binding:
                return
            index = next((i for i, l in enumerate(binding) if _same_listener(l, listener)), None)
            if index is None:
                return
            del binding[index]
            if not binding:
                del self._bindings[name]
        logger.debug("Unsubscribed %s from '%s'", listener_name(listener), name)

    # ------------------------ Dispatch ------------------------
    def trigger(self, event: EventRef, payload: Any = None) -> None:
        """Invoke every listener bound to ``event`` with ``payload``.

        Listeners run on the calling thread against a snapshot of the binding,
        so a listener may trigger, subscribe or unsubscribe without
        deadlocking; changes apply from the next trigger on.
        """
        name = event_name(event)
        with self._lock:
            listeners = list(self._bindings.get(name, ()))
        if not listeners:
            logger.debug("Triggered '%s' with no listeners", name)
            return
        if self.settings.log_payloads:
            logger.debug("Triggering '%s' for %d listeners with payload: %r", name, len(listeners), payload)
        else:
            logger.debug("Triggering '%s' for %d listeners", name, len(listeners))
        for listener in listeners:
            if not self.settings.catch_listener_errors:
                listener(payload)
                continue
            try:
                listener(payload)
            except Exception:  # noqa: BLE001 - log any exception from listeners
                logger.exception("Error in listener %s for '%s'", listener_name(listener), name)

    def post(self, event: EventRef, payload: Any = None) -> bool:
        """Queue ``event`` for the next :meth:`dispatch_pending` call.

        Returns False (and logs a warning) when the queue is at ``max_pending``.
        """
        name = event_name(event)
        with self._lock:
            limit = self.settings.max_pending
            if limit and len(self._pending) >= limit:
                logger.warning("Pending queue full (%d); dropping '%s'", limit, name)
                return False
            self._pending.append((name, payload))
        return True

    def dispatch_pending(self) -> int:
        """Trigger the events that were queued when this call started.

        Events posted by listeners during the drain stay queued for the next
        call. Returns the number of events dispatched.
        """
        with self._lock:
            batch = list(self._pending)
            self._pending.clear()
        for name, payload in batch:
            self.trigger(name, payload)
        return len(batch)

    @property
    def pending_count(self) -> int:
        with self._lock:
            return len(self._pending)

    # ------------------------ Introspection ------------------------
    def listener_count(self, event: EventRef) -> int:
        with self._lock:
            return len(self._bindings.get(event_name(event), ()))

    def has_listeners(self, event: EventRef) -> bool:
        return self.listener_count(event) > 0

    def event_names(self) -> List[EventName]:
        """Names that currently have at least one listener, in first-subscribed order."""
        with self._lock:
            return list(self._bindings)

    def clear(self, event: Optional[EventRef] = None) -> None:
        """Remove all listeners for ``event``, or for every event (useful in tests)."""
        with self._lock:
            if event is None:
                self._bindings.clear()
                self._pending.clear()
            else:
                self._bindings.pop(event_name(event), None)

    def __repr__(self) -> str:
        with self._lock:
            total = sum(len(v) for v in self._bindings.values())
            return f"<EventManager events={len(self._bindings)} listeners={total} pending={len(self._pending)}>"


__all__ = ["EventManager"]
