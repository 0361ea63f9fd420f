"""triggerpal: decides, per GitHub event, whether and how a coding agent runs."""

__version__ = "0.1.0"
