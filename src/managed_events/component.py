from __future__ import annotations

import logging
from enum import Enum
from typing import Mapping, Optional, Union

from .bindings import BindingSet
from .bus import EventManager
from .registry import current_event_manager, get_event_manager
from .types import EventRef, Listener

logger = logging.getLogger(__name__)

NO_EVENTS_MESSAGE = (
    "%s doesn't have any events; declare bindings by overriding set_events() "
    "or use a plain object instead"
)


class SubscriptionState(str, Enum):
    UNINITIALIZED = "uninitialized"
    CONFIGURED = "configured"
    SUBSCRIBED = "subscribed"


class EventSubscription:
    """Subscribe a fixed set of bindings while its owner is active.

    The bindings are captured once. Every :meth:`activate` subscribes each
    (name, listener) pair and every :meth:`deactivate` unsubscribes them again,
    so an owner can be enabled and disabled any number of times.

        sub = EventSubscription({"PlayerDied": hud.on_death}, owner="hud")
        with sub:
            manager.trigger("PlayerDied", player)
    """

    def __init__(
        self,
        bindings: Union[BindingSet, Mapping[EventRef, Listener], None] = None,
        manager: Optional[EventManager] = None,
        owner: Optional[str] = None,
    ) -> None:
        if isinstance(bindings, BindingSet):
            self.bindings = bindings
        else:
            self.bindings = BindingSet(bindings)
        self.owner = owner or "EventSubscription"
        self._manager = manager
        self._active_manager: Optional[EventManager] = None
        self.state = SubscriptionState.CONFIGURED

    @property
    def active(self) -> bool:
        return self.state is SubscriptionState.SUBSCRIBED

    def activate(self) -> None:
        if self.active:
            logger.debug("%s already subscribed; ignoring activate", self.owner)
            return
        if not self.bindings:
            logger.warning(NO_EVENTS_MESSAGE, self.owner)
            return
        manager = self._manager or get_event_manager()
        for name, listener in self.bindings.pairs():
            manager.subscribe(name, listener)
        self._active_manager = manager
        self.state = SubscriptionState.SUBSCRIBED
        logger.debug("%s subscribed to %d events", self.owner, len(self.bindings))

    def deactivate(self) -> None:
        manager = self._active_manager or self._manager or current_event_manager()
        if manager is not None:
            for name, listener in self.bindings.pairs():
                manager.unsubscribe(name, listener)
        self._active_manager = None
        self.state = SubscriptionState.CONFIGURED

    def __enter__(self) -> "EventSubscription":
        self.activate()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.deactivate()


class EventManagedComponent:
    """Base class for components that listen to events while enabled.

    Subclasses override :meth:`set_events` to return their bindings. The host
    lifecycle calls :meth:`awake` once after construction, then
    :meth:`on_enable` / :meth:`on_disable` whenever the component becomes
    active or inactive.
    """

    def __init__(self, manager: Optional[EventManager] = None, name: Optional[str] = None) -> None:
        self.name = name or type(self).__name__
        self.events: Optional[BindingSet] = None
        self._manager = manager
        self._subscription: Optional[EventSubscription] = None

    @property
    def state(self) -> SubscriptionState:
        if self._subscription is None:
            return SubscriptionState.UNINITIALIZED
        return self._subscription.state

    # Lifecycle
    def awake(self) -> None:
        if self._subscription is not None:
            return
        bindings = self.set_events()
        self.events = bindings if isinstance(bindings, BindingSet) else BindingSet(bindings)
        self._subscription = EventSubscription(self.events, manager=self._manager, owner=self.name)

    def set_events(self) -> Union[BindingSet, Mapping[EventRef, Listener]]:
        """Return this component's event bindings. Called once from awake()."""
        logger.warning(NO_EVENTS_MESSAGE, self.name)
        return BindingSet()

    def on_enable(self) -> None:
        if self._subscription is None:
            self.awake()
        self._subscription.activate()

    def on_disable(self) -> None:
        if self._subscription is None:
            return
        self._subscription.deactivate()


__all__ = [
    "EventManagedComponent",
    "EventSubscription",
    "NO_EVENTS_MESSAGE",
    "SubscriptionState",
]
