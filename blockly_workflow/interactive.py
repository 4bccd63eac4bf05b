"""Interactive prompt helpers built on InquirerPy."""

from __future__ import annotations

import sys

from InquirerPy import inquirer

from .exceptions import UserAbort, UsageError

_ANSWERS = {"y": True, "n": False}


def _ensure_tty() -> None:
    if not sys.stdin.isatty():
        raise UsageError("Confirmation requires an interactive terminal.")


def is_answer(value: str) -> bool:
    return value.strip().lower() in _ANSWERS


def confirm(message: str) -> bool:
    """Ask a yes/no question and keep asking until the reply is `y` or `n` (any case)."""
    _ensure_tty()
    try:
        reply = inquirer.text(
            message=f"{message} [y/n]",
            validate=is_answer,
            invalid_message="Please answer y or n.",
        ).execute()
    except KeyboardInterrupt as exc:  # pragma: no cover - user cancel
        raise UserAbort("User cancelled the prompt.") from exc
    return _ANSWERS[reply.strip().lower()]
