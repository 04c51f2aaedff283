"""Custom exceptions raised by event-mixin."""


class EmitterError(Exception):
    """Base error for all emitter related exceptions."""


class EventNameError(EmitterError, TypeError):
    """Raised when an event name argument is not a string."""


class ListenerError(EmitterError, TypeError):
    """Raised when a listener argument is not callable."""


class MultipleEventNamesError(EmitterError, ValueError):
    """Raised when ``once`` receives more than one event name."""


class ConfigurationError(EmitterError, ValueError):
    """Raised when emitter settings are invalid."""


class ScenarioError(EmitterError, ValueError):
    """Raised when a replay scenario fails schema validation."""
