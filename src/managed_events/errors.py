class ManagedEventsError(Exception):
    """Base error for managed_events exceptions."""


class BindingError(ManagedEventsError):
    """Raised when an event binding declaration cannot be resolved."""


class SettingsError(ManagedEventsError):
    """Raised when an explicitly requested settings file cannot be read."""
