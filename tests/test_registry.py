"""Tests for the command registry (core/registry.py)."""

from __future__ import annotations

import pytest

from conftest import RecordingHandler
from cmdsig.core.protocols import CommandHandler
from cmdsig.core.registry import CommandRegistry
from cmdsig.core.signature_parser import parse
from cmdsig.exceptions import DuplicateCommandError, SignatureSyntaxError


@pytest.fixture
def registry() -> CommandRegistry:
    registry = CommandRegistry()
    registry.register("greet { name? }", RecordingHandler(), aliases=("hello",))
    registry.register("make:model { name }", RecordingHandler(), description="Create a model")
    registry.register("make:migration { name }", RecordingHandler())
    return registry


class TestRegister:
    def test_accepts_expression(self, registry: CommandRegistry) -> None:
        entry = registry.resolve("make:model")
        assert entry is not None
        assert entry.signature == parse("make:model { name }")
        assert entry.description == "Create a model"

    def test_accepts_parsed_signature(self) -> None:
        registry = CommandRegistry()
        entry = registry.register(parse("serve"), RecordingHandler())
        assert registry.resolve("serve") is entry

    def test_malformed_expression_fails_at_registration(self) -> None:
        registry = CommandRegistry()
        with pytest.raises(SignatureSyntaxError):
            registry.register("broken { name", RecordingHandler())
        assert len(registry) == 0

    def test_duplicate_name(self, registry: CommandRegistry) -> None:
        with pytest.raises(DuplicateCommandError) as exc_info:
            registry.register("greet", RecordingHandler())
        assert exc_info.value.name == "greet"

    def test_name_clashing_with_alias(self, registry: CommandRegistry) -> None:
        with pytest.raises(DuplicateCommandError, match="hello"):
            registry.register("hello", RecordingHandler())

    def test_alias_clashing_with_name(self, registry: CommandRegistry) -> None:
        with pytest.raises(DuplicateCommandError, match="greet"):
            registry.register("welcome", RecordingHandler(), aliases=("greet",))

    def test_repeated_alias(self) -> None:
        with pytest.raises(DuplicateCommandError):
            CommandRegistry().register("greet", RecordingHandler(), aliases=("hi", "hi"))

    def test_alias_equal_to_own_name(self) -> None:
        with pytest.raises(DuplicateCommandError):
            CommandRegistry().register("greet", RecordingHandler(), aliases=("greet",))

    def test_failed_registration_leaves_registry_unchanged(self, registry: CommandRegistry) -> None:
        with pytest.raises(DuplicateCommandError):
            registry.register("welcome", RecordingHandler(), aliases=("hello",))
        assert "welcome" not in registry
        assert len(registry) == 3


class TestLookup:
    def test_resolve_alias(self, registry: CommandRegistry) -> None:
        assert registry.resolve("hello") is registry.resolve("greet")

    def test_resolve_unknown(self, registry: CommandRegistry) -> None:
        assert registry.resolve("deploy") is None

    def test_contains(self, registry: CommandRegistry) -> None:
        assert "greet" in registry
        assert "hello" in registry
        assert "deploy" not in registry

    def test_names_are_sorted_primary_names(self, registry: CommandRegistry) -> None:
        assert registry.names() == ["greet", "make:migration", "make:model"]

    def test_iteration_follows_names(self, registry: CommandRegistry) -> None:
        assert [entry.signature.name for entry in registry] == registry.names()

    def test_len_counts_commands_not_aliases(self, registry: CommandRegistry) -> None:
        assert len(registry) == 3


class TestSuggest:
    def test_close_match(self, registry: CommandRegistry) -> None:
        assert registry.suggest("gret") == ["greet"]

    def test_suggests_aliases(self, registry: CommandRegistry) -> None:
        assert "hello" in registry.suggest("helo")

    def test_no_match(self, registry: CommandRegistry) -> None:
        assert registry.suggest("zzzzzz") == []

    def test_limit(self, registry: CommandRegistry) -> None:
        assert len(registry.suggest("make:mode", limit=1)) == 1


def test_recording_handler_satisfies_protocol() -> None:
    assert isinstance(RecordingHandler(), CommandHandler)
