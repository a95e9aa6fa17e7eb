"""Selection logic for interactive choices.

Decision logic is kept separate from terminal rendering: a ``Prompter``
supplies raw answers, and ``parse_selection`` turns an answer into a
list index or raises ``InvalidSelectionError``.
"""

from collections.abc import Sequence
from typing import Protocol

from ..errors import InvalidSelectionError


class Prompter(Protocol):
    """Source of operator answers."""

    def choose(self, title: str, options: Sequence[str]) -> str:
        """Present numbered options and return the raw answer."""
        ...

    def ask(self, question: str, default: str | None = None) -> str:
        """Ask a free-text question."""
        ...

    def confirm(self, question: str, default: bool = False) -> bool:
        """Ask a yes/no question."""
        ...


def parse_selection(answer: str, count: int) -> int:
    """Convert a 1-based answer into a 0-based index.

    Args:
        answer: Raw answer, e.g. ``"2"``
        count: Number of options offered

    Returns:
        Index into the options

    Raises:
        InvalidSelectionError: If the answer is not a number in ``1..count``
    """
    text = answer.strip()
    try:
        choice = int(text)
    except ValueError:
        raise InvalidSelectionError(f"Selection is not a number: {text!r}") from None
    if not 1 <= choice <= count:
        raise InvalidSelectionError(f"Selection {choice} is out of range (1-{count})")
    return choice - 1


def select(prompter: Prompter, title: str, options: Sequence[str]) -> int:
    """Ask ``prompter`` to pick one of ``options`` and return its index.

    Raises:
        InvalidSelectionError: If there is nothing to choose from or the answer is invalid
    """
    if not options:
        raise InvalidSelectionError(f"Nothing to select for: {title}")
    return parse_selection(prompter.choose(title, options), len(options))
