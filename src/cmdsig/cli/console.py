"""Output collaborator: leveled messages, tables and prompt text.

Rich is imported lazily so that a missing or broken Rich install only
degrades output to plain ``print`` on stderr instead of breaking the
dispatcher.
"""

from __future__ import annotations

import sys
from collections.abc import Sequence
from typing import Any

from cmdsig.exceptions import EnvironmentError

LEVEL_STYLES: dict[str, tuple[str, str]] = {
    "error": ("Error:", "bold red"),
    "warn": ("Warning:", "bold yellow"),
    "info": ("", ""),
    "success": ("", "bold green"),
}


def _load_rich_console_class() -> type[Any]:
	"""Return ``rich.console.Console`` class or raise ``EnvironmentError``."""
	try:
		from rich.console import Console
	except ModuleNotFoundError as exc:
		raise EnvironmentError(
			"rich is not installed. Install with: pip install rich",
		) from exc
	return Console


def get_rich_console(*, ansi: bool = True) -> Any:
	"""Create a Rich console instance targeting stderr."""
	console_class = _load_rich_console_class()
	if ansi:
		return console_class(stderr=True)
	return console_class(stderr=True, color_system=None, highlight=False)


class ConsoleOutput:
	"""Render framework and handler output on stderr.

	Satisfies :class:`~cmdsig.core.protocols.PromptDisplay` through
	:meth:`show`.

	Parameters
	----------
	ansi:
		``False`` strips colour and styling (the ``--no-ansi`` switch).
	"""

	def __init__(self, *, ansi: bool = True) -> None:
		self._ansi = ansi

	@property
	def ansi(self) -> bool:
		return self._ansi

	@ansi.setter
	def ansi(self, value: bool) -> None:
		self._ansi = value

	def _rich(self) -> Any | None:
		try:
			return get_rich_console(ansi=self._ansi)
		except EnvironmentError:
			return None

	# ------------------------------------------------------------------
	# Leveled messages
	# ------------------------------------------------------------------

	def log(self, level: str, message: str, *, hint: str | None = None) -> None:
		"""Print *message* at *level* (``error``, ``warn``, ``info``, ``success``)."""
		prefix, style = LEVEL_STYLES.get(level, ("", ""))
		rich_console = self._rich()
		if rich_console is None:
			print(f"{prefix} {message}".strip(), file=sys.stderr)
			if hint:
				print(f"Hint: {hint}", file=sys.stderr)
			return

		from rich.markup import escape

		body = escape(message)
		if prefix:
			body = f"[{style}]{prefix}[/{style}] {body}"
		elif style:
			body = f"[{style}]{body}[/{style}]"
		rich_console.print(body)
		if hint:
			rich_console.print(f"[yellow]Hint:[/yellow] {escape(hint)}")

	def error(self, message: str, *, hint: str | None = None) -> None:
		self.log("error", message, hint=hint)

	def warn(self, message: str, *, hint: str | None = None) -> None:
		self.log("warn", message, hint=hint)

	def info(self, message: str) -> None:
		self.log("info", message)

	def success(self, message: str) -> None:
		self.log("success", message)

	# ------------------------------------------------------------------
	# Tables and raw text
	# ------------------------------------------------------------------

	def table(
		self,
		header: Sequence[str],
		rows: Sequence[Sequence[str]],
		*,
		title: str | None = None,
	) -> None:
		"""Render *rows* under *header*."""
		rich_console = self._rich()
		if rich_console is None:
			_print_plain_table(header, rows, title=title)
			return

		from rich.table import Table

		table = Table(
			title=title,
			title_justify="left",
			show_header=True,
			header_style="bold cyan",
			border_style="dim",
		)
		for column in header:
			table.add_column(column)
		for row in rows:
			table.add_row(*row)
		rich_console.print(table)

	def show(self, text: str) -> None:
		"""Print *text* verbatim (no markup), used for prompt rendering."""
		rich_console = self._rich()
		if rich_console is None:
			print(text, file=sys.stderr)
			return
		rich_console.print(text, markup=False, highlight=False)


def _print_plain_table(
	header: Sequence[str],
	rows: Sequence[Sequence[str]],
	*,
	title: str | None = None,
) -> None:
	"""Render a table without Rich."""
	widths = [len(column) for column in header]
	for row in rows:
		widths = [max(width, len(cell)) for width, cell in zip(widths, row)]

	if title:
		print(title, file=sys.stderr)
	print("  ".join(f"{c:<{w}}" for c, w in zip(header, widths)), file=sys.stderr)
	print("  ".join("-" * w for w in widths), file=sys.stderr)
	for row in rows:
		print("  ".join(f"{c:<{w}}" for c, w in zip(row, widths)), file=sys.stderr)
