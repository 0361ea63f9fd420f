"""
Core module for triggerpal: event types and errors shared by the normalizer and modes.
"""
from triggerpal.core.exceptions import CoreError

__all__ = ['CoreError']
