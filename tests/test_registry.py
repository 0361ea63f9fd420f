import pytest

from conftest import StubMode, make_context
from triggerpal.core.exceptions import ConfigurationError, UnknownModeError
from triggerpal.modes.registry import (
    DEFAULT_MODE,
    VALID_MODES,
    ModeRegistry,
    get_mode,
    is_valid_mode,
    register_mode,
    reset_registry,
)
from triggerpal.modes.review import ReviewMode
from triggerpal.modes.tag import TagMode, tag_mode


def test_get_returns_builtin_tag_mode(registry):
    mode = registry.get("tag")

    assert mode is tag_mode
    assert isinstance(mode, TagMode)
    assert mode.name == "tag"


def test_default_mode_is_a_valid_mode():
    assert DEFAULT_MODE in VALID_MODES


def test_unknown_mode_error_lists_valid_names(registry):
    with pytest.raises(UnknownModeError) as exc_info:
        registry.get("non-existent")

    assert str(exc_info.value) == (
        "Invalid mode 'non-existent'. Valid modes are: 'tag'. "
        "Please check your workflow configuration."
    )
    assert isinstance(exc_info.value, ConfigurationError)


def test_unknown_mode_error_includes_registered_modes(registry):
    registry.get("tag")
    registry.register(StubMode("custom"))

    with pytest.raises(UnknownModeError, match="'tag', 'custom'"):
        registry.get("invalid")


def test_register_then_get(registry):
    mode = StubMode("test", description="Mock mode for testing")
    registry.register(mode)

    assert registry.get("test") is mode
    assert registry.get("test").description == "Mock mode for testing"


def test_last_registration_wins(registry):
    original = registry.get("tag")
    assert original.description == "Traditional implementation mode triggered by @claude mentions"

    v1 = StubMode("tag", description="Custom tag mode v1", trigger=lambda ctx: True, allowed_tools=["tool1"])
    v2 = StubMode("tag", description="Custom tag mode v2", allowed_tools=["tool2"], disallowed_tools=["tool1"])

    registry.register(v1)
    assert registry.get("tag").description == "Custom tag mode v1"

    registry.register(v2)
    mode = registry.get("tag")
    assert mode.description == "Custom tag mode v2"
    assert mode.should_trigger(make_context()) is False
    assert mode.get_allowed_tools() == ["tool2"]


def test_registration_before_first_lookup_is_not_overwritten(registry):
    override = StubMode("tag", description="Override")
    registry.register(override)

    assert registry.get("tag") is override


def test_reset_restores_builtins(registry):
    registry.register(StubMode("tag", description="Override"))
    registry.register(StubMode("extra"))

    registry.reset()

    assert registry.get("tag") is tag_mode
    with pytest.raises(UnknownModeError):
        registry.get("extra")


def test_names_after_registration(registry):
    registry.register(ReviewMode())

    assert sorted(registry.names()) == ["review", "tag"]


def test_is_valid_name_is_static():
    registry = ModeRegistry()
    registry.register(ReviewMode())

    assert registry.is_valid_name("tag")
    assert not registry.is_valid_name("review")
    assert not registry.is_valid_name("invalid")
    assert not registry.is_valid_name("freeform")


def test_registries_are_independent():
    first, second = ModeRegistry(), ModeRegistry()
    first.register(StubMode("only-in-first"))

    assert first.get("only-in-first").name == "only-in-first"
    with pytest.raises(UnknownModeError):
        second.get("only-in-first")


def test_module_level_helpers_use_default_registry():
    mode = StubMode("helper")
    register_mode(mode)
    assert get_mode("helper") is mode
    assert is_valid_mode("tag")
    assert not is_valid_mode("helper")

    reset_registry()
    with pytest.raises(UnknownModeError):
        get_mode("helper")
    assert get_mode("tag") is tag_mode
