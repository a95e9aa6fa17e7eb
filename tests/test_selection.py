"""Tests for selection logic."""

from collections.abc import Sequence

import pytest

from buildforge.core.selection import parse_selection, select
from buildforge.errors import InvalidSelectionError


class StubPrompter:
    def __init__(self, answer: str) -> None:
        self.answer = answer
        self.seen: list[tuple[str, list[str]]] = []

    def choose(self, title: str, options: Sequence[str]) -> str:
        self.seen.append((title, list(options)))
        return self.answer

    def ask(self, question: str, default: str | None = None) -> str:
        return self.answer

    def confirm(self, question: str, default: bool = False) -> bool:
        return default


class TestParseSelection:
    """Tests for parse_selection."""

    @pytest.mark.parametrize(("answer", "index"), [("1", 0), ("3", 2), (" 2 ", 1)])
    def test_valid_answers(self, answer: str, index: int) -> None:
        assert parse_selection(answer, 3) == index

    @pytest.mark.parametrize("answer", ["0", "4", "-1", "99"])
    def test_out_of_range(self, answer: str) -> None:
        with pytest.raises(InvalidSelectionError, match="out of range"):
            parse_selection(answer, 3)

    @pytest.mark.parametrize("answer", ["", "two", "1.5"])
    def test_not_a_number(self, answer: str) -> None:
        with pytest.raises(InvalidSelectionError, match="not a number"):
            parse_selection(answer, 3)


class TestSelect:
    """Tests for select."""

    def test_returns_index_of_choice(self) -> None:
        prompter = StubPrompter("2")
        assert select(prompter, "Pick", ["a", "b", "c"]) == 1
        assert prompter.seen == [("Pick", ["a", "b", "c"])]

    def test_no_options(self) -> None:
        prompter = StubPrompter("1")
        with pytest.raises(InvalidSelectionError, match="Nothing to select"):
            select(prompter, "Pick", [])
        assert prompter.seen == []
