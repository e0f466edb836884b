"""Tests for domain models (core/models.py).

Signature models are frozen dataclasses; these tests verify
immutability, derived optionality, and read-only binding results.
"""

from __future__ import annotations

import pytest

from cmdsig.core.models import (
    ArgumentSpec,
    BoundInvocation,
    CommandSignature,
    FlagSpec,
    PromptKind,
    PromptSession,
    PromptState,
)


# ---------------------------------------------------------------------------
# ArgumentSpec
# ---------------------------------------------------------------------------

class TestArgumentSpec:
    def test_required_by_default(self) -> None:
        assert ArgumentSpec("name").optional is False

    def test_marker_makes_optional(self) -> None:
        assert ArgumentSpec("name", marked_optional=True).optional is True

    def test_default_implies_optional(self) -> None:
        spec = ArgumentSpec("name", default="virk")
        assert spec.marked_optional is False
        assert spec.optional is True

    def test_key_is_camel(self) -> None:
        assert ArgumentSpec("file-path").key == "filePath"

    @pytest.mark.parametrize("default", ["", "  padded", "@value"])
    def test_unspellable_default_rejected(self, default: str) -> None:
        with pytest.raises(ValueError):
            ArgumentSpec("name", default=default)

    def test_frozen(self) -> None:
        with pytest.raises(AttributeError):
            ArgumentSpec("name").name = "other"  # type: ignore[misc]


# ---------------------------------------------------------------------------
# FlagSpec
# ---------------------------------------------------------------------------

class TestFlagSpec:
    def test_absent_boolean_flag_is_false(self) -> None:
        assert FlagSpec("log").absent_value is False

    def test_absent_value_flag_is_none(self) -> None:
        assert FlagSpec("driver", expects_value=True).absent_value is None

    def test_absent_value_flag_uses_default(self) -> None:
        assert FlagSpec("driver", expects_value=True, default="mysql").absent_value == "mysql"

    def test_boolean_flag_cannot_have_default(self) -> None:
        with pytest.raises(ValueError, match="takes no value"):
            FlagSpec("log", default="true")

    @pytest.mark.parametrize("default", ["", "mysql ", "@value"])
    def test_unspellable_default_rejected(self, default: str) -> None:
        with pytest.raises(ValueError):
            FlagSpec("driver", expects_value=True, default=default)


# ---------------------------------------------------------------------------
# CommandSignature
# ---------------------------------------------------------------------------

class TestCommandSignature:
    def test_namespace(self) -> None:
        assert CommandSignature("migration:run").namespace == "migration"

    def test_no_namespace(self) -> None:
        assert CommandSignature("serve").namespace is None

    def test_find_flag_by_any_spelling(self) -> None:
        flag = FlagSpec("file-path", expects_value=True)
        signature = CommandSignature("copy", flags=(flag,))
        assert signature.find_flag("file-path") is flag
        assert signature.find_flag("filePath") is flag
        assert signature.find_flag("other") is None

    def test_equality(self) -> None:
        a = CommandSignature("greet", arguments=(ArgumentSpec("name"),))
        b = CommandSignature("greet", arguments=(ArgumentSpec("name"),))
        assert a == b


# ---------------------------------------------------------------------------
# BoundInvocation
# ---------------------------------------------------------------------------

class TestBoundInvocation:
    def test_mappings_are_read_only(self) -> None:
        invocation = BoundInvocation("greet", arguments={"name": "virk"})
        with pytest.raises(TypeError):
            invocation.arguments["name"] = "other"  # type: ignore[index]

    def test_source_dict_is_copied(self) -> None:
        source = {"name": "virk"}
        invocation = BoundInvocation("greet", arguments=source)
        source["name"] = "changed"
        assert invocation.arguments["name"] == "virk"

    def test_lookup_by_any_spelling(self) -> None:
        invocation = BoundInvocation("copy", flags={"filePath": "/tmp/a"})
        assert invocation.flag("file-path") == "/tmp/a"
        assert invocation.flag("filePath") == "/tmp/a"

    def test_equality(self) -> None:
        a = BoundInvocation("greet", arguments={"name": "virk"}, flags={"log": True})
        b = BoundInvocation("greet", arguments={"name": "virk"}, flags={"log": True})
        assert a == b


# ---------------------------------------------------------------------------
# PromptSession
# ---------------------------------------------------------------------------

class TestPromptSession:
    def test_starts_idle(self) -> None:
        session = PromptSession(PromptKind.FREE_TEXT, "Name?")
        assert session.state is PromptState.IDLE
        assert session.error is None
        assert session.selected == set()
