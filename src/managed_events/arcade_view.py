from __future__ import annotations

import logging
from typing import Mapping, Optional, Union

import arcade

from .bindings import BindingSet
from .bus import EventManager
from .component import NO_EVENTS_MESSAGE, EventSubscription
from .registry import HOST_ATTRIBUTE, find_event_manager, get_event_manager
from .types import EventRef, Listener

logger = logging.getLogger(__name__)


class EventManagedView(arcade.View):
    """An arcade View that listens to events while it is shown.

    Bindings come from :meth:`set_events`, called once from ``__init__``.
    ``on_show_view`` subscribes them and ``on_hide_view`` unsubscribes them.
    The manager is the one passed in, else the one attached to the window as
    ``window.event_manager``, else the process-wide default.
    """

    def __init__(self, window: Optional[arcade.Window] = None, manager: Optional[EventManager] = None) -> None:
        super().__init__(window)
        if manager is None:
            if hasattr(self.window, HOST_ATTRIBUTE):
                manager = find_event_manager(self.window)
            if manager is None:
                logger.debug(
                    "%s: no event manager on %s; using the process-wide manager",
                    type(self).__name__,
                    type(self.window).__name__,
                )
                manager = get_event_manager()
        bindings = self.set_events()
        self.events = bindings if isinstance(bindings, BindingSet) else BindingSet(bindings)
        self._subscription = EventSubscription(self.events, manager=manager, owner=type(self).__name__)

    def set_events(self) -> Union[BindingSet, Mapping[EventRef, Listener]]:
        logger.warning(NO_EVENTS_MESSAGE, type(self).__name__)
        return BindingSet()

    @property
    def subscription(self) -> EventSubscription:
        return self._subscription

    def on_show_view(self) -> None:
        self._subscription.activate()

    def on_hide_view(self) -> None:
        self._subscription.deactivate()


__all__ = ["EventManagedView"]
