"""Core module exceptions"""

from typing import Iterable

def _quote_names(names: Iterable[str]) -> str:
    return ", ".join(f"'{name}'" for name in names)

class CoreError(Exception):
    """Base class for core module errors"""
    pass

class ConfigurationError(CoreError):
    """Base class for workflow configuration errors"""
    pass

class InvalidModeError(ConfigurationError):
    """Raised when the configured mode name is not a known built-in"""
    def __init__(self, mode: str, valid_modes: Iterable[str]):
        self.mode = mode
        self.valid_modes = list(valid_modes)
        super().__init__(
            f"Invalid mode: {mode}. Valid modes are: {_quote_names(self.valid_modes)}."
        )

class UnknownModeError(ConfigurationError):
    """Raised when a mode lookup finds no registered implementation"""
    def __init__(self, mode: str, valid_modes: Iterable[str]):
        self.mode = mode
        self.valid_modes = list(valid_modes)
        super().__init__(
            f"Invalid mode '{mode}'. Valid modes are: {_quote_names(self.valid_modes)}. "
            "Please check your workflow configuration."
        )

class UnsupportedEventError(CoreError):
    """Raised for event kinds outside the supported set"""
    def __init__(self, event_name: str):
        self.event_name = event_name
        super().__init__(f"Unsupported event type: {event_name}")

class ModeError(CoreError):
    """Raised by a mode when the context does not fit it"""
    pass

class ServiceConnectionError(CoreError):
    """Raised when there are issues with service connections"""
    pass
