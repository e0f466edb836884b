"""Interactive prompt engine: one state machine per question.

States
------
``IDLE → RENDERING → AWAITING_INPUT → VALIDATING`` then either back to
``RENDERING`` (invalid input, or a multi-choice toggle), ``RESOLVED`` or
``CANCELLED``.

The engine never touches a terminal.  Questions go to a
:class:`~cmdsig.core.protocols.PromptDisplay`, answers come from an
:class:`~cmdsig.core.protocols.InputSource` and external-editor prompts
are delegated to an :class:`~cmdsig.core.protocols.EditorLauncher`, so
every path can be driven by scripted input in tests.

Prompts are strictly sequential: a second prompt cannot start while one
is awaiting input.
"""

from __future__ import annotations

import logging
from collections.abc import Hashable, Iterable, Sequence
from typing import Any, NoReturn

from cmdsig.core.models import Choice, PromptKind, PromptSession, PromptState, Validator
from cmdsig.core.protocols import EditorLauncher, InputSource, PromptDisplay
from cmdsig.exceptions import EnvironmentError, PromptCancelledError

logger = logging.getLogger(__name__)

INPUT_MARKER: str = "› "

_YES_WORDS = frozenset({"y", "yes"})
_NO_WORDS = frozenset({"n", "no"})
_PENDING = object()


class _InvalidInput(Exception):
    """Internal signal: reject the answer and re-render with *message*."""


class PromptEngine:
    """Drive :class:`PromptSession` objects to a resolved value."""

    def __init__(
        self,
        input_source: InputSource,
        display: PromptDisplay,
        *,
        editor: EditorLauncher | None = None,
    ) -> None:
        self._input = input_source
        self._display = display
        self._editor = editor
        self._active: PromptSession | None = None

    def run(self, session: PromptSession) -> Any:
        """Run *session* to completion and return its value.

        Raises
        ------
        PromptCancelledError
            When the input source signals interruption, or the editor
            exits with a non-zero status.
        RuntimeError
            When another prompt is still in progress, or *session* has
            already been run.
        """
        if self._active is not None:
            raise RuntimeError(f"Prompt {self._active.text!r} is still awaiting input.")
        if session.state is not PromptState.IDLE:
            raise RuntimeError(f"Prompt {session.text!r} has already run.")

        self._active = session
        try:
            if session.kind is PromptKind.EXTERNAL_EDITOR:
                return self._run_editor(session)
            return self._run_terminal(session)
        finally:
            self._active = None

    # ------------------------------------------------------------------
    # Loops
    # ------------------------------------------------------------------

    def _run_terminal(self, session: PromptSession) -> Any:
        if session.kind is PromptKind.MULTI_CHOICE:
            session.selected = set(session.preselected)

        while True:
            self._transition(session, PromptState.RENDERING)
            self._render(session)

            self._transition(session, PromptState.AWAITING_INPUT)
            line = self._read(session)
            if line is None:
                self._cancel(session)

            self._transition(session, PromptState.VALIDATING)
            try:
                value = self._validate(session, line)
            except _InvalidInput as exc:
                session.error = str(exc)
                continue
            session.error = None
            if value is not _PENDING:
                return self._resolve(session, value)

    def _run_editor(self, session: PromptSession) -> str:
        if self._editor is None:
            raise EnvironmentError(
                "No external editor is configured.",
                hint="Set the VISUAL or EDITOR environment variable.",
            )

        buffer = session.default or ""
        while True:
            self._transition(session, PromptState.RENDERING)
            self._render(session)

            self._transition(session, PromptState.AWAITING_INPUT)
            try:
                status, buffer = self._editor.edit(buffer)
            except KeyboardInterrupt:
                self._cancel(session)
            if status != 0:
                logger.debug("Editor exited with status %s", status)
                self._cancel(session)

            self._transition(session, PromptState.VALIDATING)
            try:
                self._check_custom(session, buffer)
            except _InvalidInput as exc:
                session.error = str(exc)
                continue
            session.error = None
            return self._resolve(session, buffer)

    # ------------------------------------------------------------------
    # States
    # ------------------------------------------------------------------

    def _transition(self, session: PromptSession, state: PromptState) -> None:
        logger.debug("Prompt %r: %s -> %s", session.text, session.state.value, state.value)
        session.state = state

    def _read(self, session: PromptSession) -> str | None:
        try:
            return self._input.read_line(
                INPUT_MARKER,
                secret=session.kind is PromptKind.SECURE,
            )
        except (KeyboardInterrupt, EOFError):
            return None

    def _resolve(self, session: PromptSession, value: Any) -> Any:
        session.result = value
        self._transition(session, PromptState.RESOLVED)
        return value

    def _cancel(self, session: PromptSession) -> NoReturn:
        self._transition(session, PromptState.CANCELLED)
        raise PromptCancelledError(f"Prompt cancelled: {session.text}")

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _render(self, session: PromptSession) -> None:
        lines = [f"? {session.text}{_suffix(session)}"]

        if session.kind is PromptKind.SINGLE_CHOICE:
            for number, choice in enumerate(session.choices, start=1):
                marker = "›" if session.default is not None and choice.value == session.default else " "
                lines.append(f"  {marker} {number}) {choice.label}")
        elif session.kind is PromptKind.MULTI_CHOICE:
            for number, choice in enumerate(session.choices, start=1):
                marker = "x" if choice.value in session.selected else " "
                lines.append(f"  [{marker}] {number}) {choice.label}")
            lines.append("  Toggle entries by number or label, press Enter to confirm.")
        elif session.kind is PromptKind.EXTERNAL_EDITOR:
            lines.append("  Opening editor, save and close it to continue.")

        if session.error:
            lines.append(f"! {session.error}")
        self._display.show("\n".join(lines))

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def _validate(self, session: PromptSession, line: str) -> Any:
        kind = session.kind
        if kind is PromptKind.FREE_TEXT:
            return self._validate_text(session, line)
        if kind is PromptKind.SECURE:
            self._check_custom(session, line)
            return line
        if kind is PromptKind.CONFIRM:
            return self._validate_confirm(session, line)
        if kind is PromptKind.SINGLE_CHOICE:
            return self._validate_single(session, line)
        if kind is PromptKind.MULTI_CHOICE:
            return self._validate_multiple(session, line)
        raise ValueError(f"Unsupported prompt kind: {kind}")

    def _validate_text(self, session: PromptSession, line: str) -> str:
        text = line.strip()
        if not text:
            if session.default is not None:
                return session.default
            raise _InvalidInput("A value is required.")
        self._check_custom(session, text)
        return text

    def _check_custom(self, session: PromptSession, text: str) -> None:
        if session.validate is None:
            return
        verdict = session.validate(text)
        if verdict is not True:
            raise _InvalidInput(verdict if isinstance(verdict, str) and verdict else "Invalid value.")

    def _validate_confirm(self, session: PromptSession, line: str) -> bool:
        answer = line.strip().lower()
        if not answer and session.default is not None:
            return bool(session.default)

        yes_words, no_words = set(_YES_WORDS), set(_NO_WORDS)
        if session.choices:
            yes_words.add(session.choices[0].label.lower())
            no_words.add(session.choices[1].label.lower())
        if answer in yes_words:
            return True
        if answer in no_words:
            return False
        raise _InvalidInput(f"Please answer {_confirm_labels(session, sep=' or ')}.")

    def _validate_single(self, session: PromptSession, line: str) -> Hashable:
        answer = line.strip()
        if not answer and session.default is not None:
            return session.default
        choice = _match_choice(session.choices, answer)
        if choice is None:
            raise _InvalidInput(f"{answer!r} is not one of the listed choices.")
        return choice.value

    def _validate_multiple(self, session: PromptSession, line: str) -> Any:
        answer = line.strip()
        if not answer:
            return frozenset(session.selected)

        whole = _match_choice(session.choices, answer)
        if whole is not None:
            session.selected ^= {whole.value}
            return _PENDING

        matched: list[Choice] = []
        for token in _split_selection(answer):
            choice = _match_choice(session.choices, token)
            if choice is None:
                raise _InvalidInput(f"{token!r} is not one of the listed choices.")
            matched.append(choice)
        for choice in matched:
            session.selected ^= {choice.value}
        return _PENDING


# ---------------------------------------------------------------------------
# Handler-facing API
# ---------------------------------------------------------------------------

class Prompter:
    """Ask questions from inside a command handler.

    Every method builds one :class:`PromptSession` and blocks until it
    resolves.  A cancelled prompt raises
    :class:`~cmdsig.exceptions.PromptCancelledError`; the handler decides
    whether to retry, skip or abort.
    """

    def __init__(
        self,
        input_source: InputSource,
        display: PromptDisplay,
        *,
        editor: EditorLauncher | None = None,
    ) -> None:
        self._engine = PromptEngine(input_source, display, editor=editor)

    def ask(
        self,
        text: str,
        *,
        default: str | None = None,
        validate: Validator | None = None,
    ) -> str:
        """Free-text question; empty input resolves to *default*."""
        return self._engine.run(
            PromptSession(PromptKind.FREE_TEXT, text, default=default, validate=validate)
        )

    def secure(self, text: str, *, validate: Validator | None = None) -> str:
        """Like :meth:`ask` but the answer is never echoed."""
        return self._engine.run(PromptSession(PromptKind.SECURE, text, validate=validate))

    def confirm(self, text: str, *, default: bool | None = None) -> bool:
        """Yes/no question."""
        return self._engine.run(PromptSession(PromptKind.CONFIRM, text, default=default))

    def toggle(
        self,
        text: str,
        labels: tuple[str, str] = ("Yes", "No"),
        *,
        default: bool | None = None,
    ) -> bool:
        """Yes/no question answered with custom labels."""
        yes, no = labels
        return self._engine.run(
            PromptSession(
                PromptKind.CONFIRM,
                text,
                choices=(Choice(yes, True), Choice(no, False)),
                default=default,
            )
        )

    def choice(
        self,
        text: str,
        choices: Sequence[Any],
        *,
        default: Hashable | None = None,
    ) -> Hashable:
        """Pick exactly one entry; returns its value."""
        normalized = _to_choices(choices)
        if default is not None and default not in {c.value for c in normalized}:
            raise ValueError(f"Default {default!r} is not one of the choice values.")
        return self._engine.run(
            PromptSession(PromptKind.SINGLE_CHOICE, text, choices=normalized, default=default)
        )

    def multiple(
        self,
        text: str,
        choices: Sequence[Any],
        *,
        preselected: Iterable[Hashable] = (),
    ) -> frozenset[Hashable]:
        """Pick any number of entries; returns the set of values."""
        normalized = _to_choices(choices)
        marked = frozenset(preselected)
        unknown = marked - {c.value for c in normalized}
        if unknown:
            raise ValueError(f"Preselected values {sorted(map(repr, unknown))} are not choices.")
        return self._engine.run(
            PromptSession(PromptKind.MULTI_CHOICE, text, choices=normalized, preselected=marked)
        )

    def edit(
        self,
        text: str,
        *,
        initial: str = "",
        validate: Validator | None = None,
    ) -> str:
        """Collect long-form text in the external editor."""
        return self._engine.run(
            PromptSession(PromptKind.EXTERNAL_EDITOR, text, default=initial, validate=validate)
        )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _to_choices(choices: Sequence[Any]) -> tuple[Choice, ...]:
    if not choices:
        raise ValueError("A choice prompt needs at least one choice.")
    normalized: list[Choice] = []
    for entry in choices:
        if isinstance(entry, Choice):
            normalized.append(entry)
        elif isinstance(entry, tuple):
            label, value = entry
            normalized.append(Choice(str(label), value))
        else:
            normalized.append(Choice(str(entry), entry))
    return tuple(normalized)


def _match_choice(choices: Sequence[Choice], token: str) -> Choice | None:
    """Match a label, a 1-based index or a value's string form.

    Labels take precedence, so a numeric label such as ``"8080"`` is
    never mistaken for an index.
    """
    lowered = token.lower()
    for choice in choices:
        if choice.label.lower() == lowered:
            return choice
    if token.isdigit():
        number = int(token)
        if 1 <= number <= len(choices):
            return choices[number - 1]
    for choice in choices:
        if str(choice.value).lower() == lowered:
            return choice
    return None


def _split_selection(answer: str) -> list[str]:
    if "," in answer:
        return [part.strip() for part in answer.split(",") if part.strip()]
    return answer.split()


def _confirm_labels(session: PromptSession, *, sep: str = "/") -> str:
    if session.choices:
        return sep.join(choice.label for choice in session.choices[:2])
    return sep.join(("yes", "no"))


def _suffix(session: PromptSession) -> str:
    if session.kind is PromptKind.CONFIRM:
        if session.choices:
            return f" ({_confirm_labels(session)})"
        if session.default is None:
            return " (y/n)"
        return " (Y/n)" if session.default else " (y/N)"
    if session.kind is PromptKind.FREE_TEXT and session.default is not None:
        return f" ({session.default})"
    return ""
