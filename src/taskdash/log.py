"""Console logging for taskdash, colored via Rich.

Store and CLI code report through these helpers instead of ``print``.
Anything user-supplied (titles, ids, paths) should go through :func:`plain`
first so Rich does not read brackets in it as markup.
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape

console = Console(highlight=False)
_err_console = Console(highlight=False, stderr=True)

_verbose = False


def set_verbose(enabled: bool) -> None:
    global _verbose
    _verbose = enabled


def plain(text: object) -> str:
    """Escape *text* for safe interpolation into a markup message."""
    return escape(str(text))


def _emit(target: Console, tag: str, style: str, msg: str) -> None:
    target.print(f"[{style}]\\[{tag}][/{style}] {msg}")


def info(msg: str) -> None:
    _emit(console, "INFO", "blue", msg)


def success(msg: str) -> None:
    _emit(console, "OK", "green", msg)


def warn(msg: str) -> None:
    _emit(console, "WARN", "yellow", msg)


def error(msg: str) -> None:
    _emit(_err_console, "ERROR", "red", msg)


def debug(msg: str) -> None:
    if _verbose:
        console.print(f"[dim]\\[DEBUG] {msg}[/dim]")
