"""Process-wide access to the shared :class:`EventManager`.

Applications that build their own manager at startup hand it over with
:func:`install_event_manager`; everything else gets a lazily created default
from :func:`get_event_manager`.
"""
from __future__ import annotations

import logging
from threading import Lock
from typing import Any, Optional

from .bus import EventManager
from .settings import BusSettings

logger = logging.getLogger(__name__)

# Attribute a host container (window, app, scene) exposes its manager under.
HOST_ATTRIBUTE = "event_manager"

_default_manager: Optional[EventManager] = None
_manager_lock = Lock()


def get_event_manager() -> EventManager:
    """Return the process-wide EventManager, creating one if necessary."""
    global _default_manager
    manager = _default_manager
    if manager is not None:
        return manager
    with _manager_lock:
        if _default_manager is None:
            _default_manager = EventManager(BusSettings.from_sources())
            logger.debug("Created default event manager")
        return _default_manager


def current_event_manager() -> Optional[EventManager]:
    """Return the process-wide manager if one exists, without creating it."""
    return _default_manager


def install_event_manager(manager: EventManager) -> EventManager:
    """Make ``manager`` the process-wide instance.

    Only one manager may be installed. If a different one is already in place
    a warning is logged and the existing manager is kept and returned.
    """
    global _default_manager
    with _manager_lock:
        if _default_manager is not None and _default_manager is not manager:
            logger.warning("An event manager is already installed; keeping %r", _default_manager)
            return _default_manager
        _default_manager = manager
        return manager


def reset_event_manager() -> None:
    """Forget the process-wide manager (useful in tests)."""
    global _default_manager
    with _manager_lock:
        _default_manager = None


def find_event_manager(host: Any) -> Optional[EventManager]:
    """Return the EventManager attached to ``host``, or None.

    Hosted setups attach the manager to a container object such as the game
    window. A missing manager is logged as an error rather than raised.
    """
    manager = getattr(host, HOST_ATTRIBUTE, None)
    if isinstance(manager, EventManager):
        return manager
    logger.error(
        "There needs to be one EventManager attached to %s as '%s'",
        type(host).__name__,
        HOST_ATTRIBUTE,
    )
    return None


__all__ = [
    "HOST_ATTRIBUTE",
    "current_event_manager",
    "find_event_manager",
    "get_event_manager",
    "install_event_manager",
    "reset_event_manager",
]
