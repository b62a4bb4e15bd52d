from .bindings import BindingSet, load_bindings
from .bus import EventManager
from .component import EventManagedComponent, EventSubscription, SubscriptionState
from .errors import BindingError, ManagedEventsError, SettingsError
from .logging_config import configure_logging
from .registry import (
    current_event_manager,
    find_event_manager,
    get_event_manager,
    install_event_manager,
    reset_event_manager,
)
from .settings import BusSettings
from .types import EventKey, EventName, Listener

__all__ = [
    "BindingError",
    "BindingSet",
    "BusSettings",
    "EventKey",
    "EventManagedComponent",
    "EventManager",
    "EventName",
    "EventSubscription",
    "Listener",
    "ManagedEventsError",
    "SettingsError",
    "SubscriptionState",
    "configure_logging",
    "current_event_manager",
    "find_event_manager",
    "get_event_manager",
    "install_event_manager",
    "load_bindings",
    "reset_event_manager",
]

__version__ = "0.1.0"
