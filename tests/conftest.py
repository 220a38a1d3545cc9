"""Shared test doubles for the session page wrapper."""
from typing import Optional
from unittest.mock import Mock

import pytest

from formpilot.browser.page import Page
from formpilot.core.config import FillConfig, RunConfig, Settings
from formpilot.core.errors import AmbiguousElementError, ElementNotFoundError


class FakeInput:
    """Input element that records keystrokes.

    ``max_length`` drops characters past that length on every fill, so the
    value never converges. ``truncated_fills`` makes the first N fills read
    back one character short.
    """

    def __init__(self, max_length: Optional[int] = None, truncated_fills: int = 0) -> None:
        self.value = ""
        self.fills = 0
        self.max_length = max_length
        self.truncated_fills = truncated_fills
        self.typed: list[str] = []

    def clear(self) -> None:
        self.value = ""
        self.fills += 1

    def type(self, char: str) -> None:
        self.typed.append(char)
        if self.max_length is None or len(self.value) < self.max_length:
            self.value += char

    def read(self) -> str:
        if self.fills <= self.truncated_fills:
            return self.value[:-1]
        return self.value


class FakeForm:
    """A page of fake inputs behind a ``Mock(spec=Page)``."""

    def __init__(self) -> None:
        self.inputs: dict[str, FakeInput] = {}
        self.ambiguous: dict[str, int] = {}
        self.focused: Optional[FakeInput] = None
        self.selected = False

        self.page = Mock(spec=Page)
        self.page.find_visible.side_effect = self._find
        self.page.focus.side_effect = self._focus
        self.page.select_all.side_effect = self._select_all
        self.page.press.side_effect = self._press
        self.page.type_char.side_effect = self._type_char
        self.page.read_value.side_effect = lambda element: element.read()
        self.page.goto.return_value = True

    def add(self, locator: str, **kwargs) -> FakeInput:
        element = FakeInput(**kwargs)
        self.inputs[locator] = element
        return element

    def _find(self, locator: str, timeout_ms: int, require_enabled: bool = True) -> FakeInput:
        if locator in self.ambiguous:
            raise AmbiguousElementError(locator, self.ambiguous[locator])
        if locator not in self.inputs:
            raise ElementNotFoundError(locator, f"not visible after {timeout_ms}ms")
        return self.inputs[locator]

    def _focus(self, element: FakeInput) -> None:
        self.focused = element
        self.selected = False

    def _select_all(self, element: FakeInput) -> None:
        self.focused = element
        self.selected = True

    def _press(self, key: str) -> None:
        if key == "Delete" and self.focused is not None and self.selected:
            self.focused.clear()
            self.selected = False

    def _type_char(self, element: FakeInput, char: str, delay_ms: int = 0) -> None:
        element.type(char)


@pytest.fixture
def fake_form() -> FakeForm:
    """An empty fake form."""
    return FakeForm()


@pytest.fixture
def fill_config() -> FillConfig:
    """Fill configuration with the default three attempts."""
    return FillConfig()


@pytest.fixture
def settings() -> Settings:
    """Settings with discovery off and no file output."""
    return Settings(run=RunConfig(discovery=False), defaults={})
