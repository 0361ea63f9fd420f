"""Execution modes.

Import concrete modes from their modules (``triggerpal.modes.tag``,
``triggerpal.modes.review``); the registry loads built-ins on demand.
"""
