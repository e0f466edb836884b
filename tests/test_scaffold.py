"""Smoke tests: verify package wiring.

These tests prove that:
* The public API is importable.
* The exception hierarchy is correctly structured.
* Version is accessible.
* Exit codes are defined.
"""

from __future__ import annotations

import pytest

from cmdsig import Application, __version__, parse
from cmdsig.cli import exit_codes
from cmdsig.exceptions import (
    BindingError,
    CmdsigError,
    DuplicateCommandError,
    EnvironmentError,
    HandlerExecutionError,
    MissingArgumentError,
    MissingFlagValueError,
    PromptCancelledError,
    SignatureSyntaxError,
    UnexpectedArgumentError,
    UnknownCommandError,
    UnknownFlagError,
)


# ---------------------------------------------------------------------------
# Version and public API
# ---------------------------------------------------------------------------

class TestVersion:
    def test_version_is_string(self) -> None:
        assert isinstance(__version__, str)

    def test_version_is_semver_like(self) -> None:
        parts = __version__.split(".")
        assert len(parts) == 3
        assert all(part.isdigit() for part in parts)

    def test_public_api_exports(self) -> None:
        assert callable(parse)
        assert isinstance(Application, type)


# ---------------------------------------------------------------------------
# Exception hierarchy
# ---------------------------------------------------------------------------

class TestExceptions:
    @pytest.mark.parametrize(
        "exc_class",
        [
            SignatureSyntaxError,
            DuplicateCommandError,
            UnknownCommandError,
            BindingError,
            HandlerExecutionError,
            PromptCancelledError,
            EnvironmentError,
        ],
    )
    def test_all_exceptions_inherit_from_base(self, exc_class: type[CmdsigError]) -> None:
        assert issubclass(exc_class, CmdsigError)

    @pytest.mark.parametrize(
        "exc_class",
        [MissingArgumentError, UnexpectedArgumentError, UnknownFlagError, MissingFlagValueError],
    )
    def test_binding_errors_share_a_base(self, exc_class: type[BindingError]) -> None:
        assert issubclass(exc_class, BindingError)

    def test_hint_is_stored(self) -> None:
        err = CmdsigError("boom", hint="try this")
        assert str(err) == "boom"
        assert err.hint == "try this"

    def test_hint_defaults_to_none(self) -> None:
        assert CmdsigError("boom").hint is None

    def test_binding_error_names_offender(self) -> None:
        err = MissingFlagValueError("driver")
        assert err.name == "driver"
        assert "--driver" in str(err)

    def test_unknown_command_suggestions_become_hint(self) -> None:
        err = UnknownCommandError("gret", suggestions=["greet"])
        assert err.suggestions == ("greet",)
        assert err.hint == "Did you mean 'greet'?"

    def test_unknown_command_without_suggestions_has_no_hint(self) -> None:
        assert UnknownCommandError("x").hint is None

    def test_handler_error_keeps_cause_hint(self) -> None:
        cause = EnvironmentError("no editor", hint="set EDITOR")
        err = HandlerExecutionError("notes:add", cause)
        assert "notes:add" in str(err)
        assert "EnvironmentError" in str(err)
        assert err.hint == "set EDITOR"


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

class TestExitCodes:
    def test_success_is_zero(self) -> None:
        assert exit_codes.SUCCESS == 0

    def test_general_error_is_one(self) -> None:
        assert exit_codes.GENERAL_ERROR == 1

    def test_unexpected_error_is_two(self) -> None:
        assert exit_codes.UNEXPECTED_ERROR == 2

    def test_usage_error_is_64(self) -> None:
        assert exit_codes.USAGE_ERROR == 64

    def test_keyboard_interrupt_is_130(self) -> None:
        assert exit_codes.KEYBOARD_INTERRUPT == 130
