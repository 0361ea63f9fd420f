"""Mode registry for triggerpal.

Maps mode names to Mode implementations. Built-in modes are imported on the
first lookup so this module stays free of imports from the mode modules.

To add a built-in mode:
1. Add the mode name to VALID_MODES below
2. Implement it in its own module under triggerpal.modes
3. Seed it in ModeRegistry._load_builtins()
"""

import logging
from typing import TYPE_CHECKING, Dict, List

from triggerpal.core.exceptions import UnknownModeError

if TYPE_CHECKING:
    from triggerpal.modes.base import Mode

logger = logging.getLogger(__name__)

DEFAULT_MODE = "tag"
VALID_MODES = ("tag",)


class ModeRegistry:
    """Name to Mode bindings, seeded lazily with the built-in modes"""

    def __init__(self):
        self._modes: Dict[str, "Mode"] = {}
        self._initialized = False

    def _load_builtins(self) -> None:
        from triggerpal.modes.tag import tag_mode

        # Modes registered before seeding take precedence
        self._modes.setdefault(tag_mode.name, tag_mode)

    def _ensure_initialized(self) -> None:
        if not self._initialized:
            self._load_builtins()
            self._initialized = True
            logger.debug(
                "Mode registry initialized",
                extra={'registered_modes': list(self._modes)}
            )

    def register(self, mode: "Mode") -> None:
        """Register a mode, replacing any previous binding for its name"""
        if mode.name in self._modes:
            logger.debug("Replacing registered mode", extra={'mode': mode.name})
        self._modes[mode.name] = mode

    def get(self, name: str) -> "Mode":
        """Return the mode bound to ``name``.

        Raises:
            UnknownModeError: nothing is registered under ``name``
        """
        self._ensure_initialized()
        mode = self._modes.get(name)
        if mode is None:
            raise UnknownModeError(name, self._modes.keys())
        return mode

    def names(self) -> List[str]:
        """Names currently bound, built-ins included"""
        self._ensure_initialized()
        return list(self._modes)

    @staticmethod
    def is_valid_name(name: str) -> bool:
        """Check against the built-in names only.

        Modes added through register() are not accepted here; this check
        guards the MODE input before any registration happens.
        """
        return name in VALID_MODES

    def reset(self) -> None:
        """Drop every binding; the next get() seeds the built-ins again"""
        self._modes.clear()
        self._initialized = False


# Process-wide registry used by the CLI
default_registry = ModeRegistry()


def register_mode(mode: "Mode") -> None:
    default_registry.register(mode)


def get_mode(name: str) -> "Mode":
    return default_registry.get(name)


def is_valid_mode(name: str) -> bool:
    return ModeRegistry.is_valid_name(name)


def reset_registry() -> None:
    default_registry.reset()
