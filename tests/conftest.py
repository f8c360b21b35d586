"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from currency_textual.currency import resolve_settings
from currency_textual.models import CurrencySettings
from currency_textual.transformer import AmountTransformer, EditableText


class FakeHost:
    """An in-memory text field driving an AmountTransformer like a real widget.

    ``set_amount`` renders the amount with *formatter* and echoes the write
    back through the transformer's lifecycle, the way a text field notifies
    its watchers of programmatic changes.
    """

    def __init__(
        self,
        fraction_digits: int = 2,
        allow_negative: bool = False,
        formatter: Callable[[int], str] = str,
    ) -> None:
        self.text = ""
        self.selection = (0, 0)
        self.allow_negative = allow_negative
        self.formatter = formatter
        self.amounts: list[int] = []
        self.echoes = 0
        self.transformer = AmountTransformer(self, fraction_digits)

    @property
    def amount(self) -> int | None:
        return self.amounts[-1] if self.amounts else None

    @property
    def selection_range(self) -> tuple[int, int]:
        return self.selection

    @property
    def text_length(self) -> int:
        return len(self.text)

    def set_selection(self, start: int, end: int) -> None:
        self.selection = (start, end)

    def set_amount(self, minor_units: int) -> None:
        self.amounts.append(minor_units)
        old, new = self.text, self.formatter(minor_units)
        self.transformer.before_change(old, 0, len(old), len(new))
        self.text = new
        self.transformer.on_change(new, 0, len(old), len(new))
        self.echoes += 1
        self.transformer.after_change(EditableText(new))

    def edit(self, start: int, end: int, inserted: str = "") -> None:
        """Replace ``text[start:end]`` with *inserted* as a user edit."""
        old = self.text
        edited = f"{old[:start]}{inserted}{old[end:]}"
        self.transformer.before_change(old, start, end - start, len(inserted))
        self.selection = (start + len(inserted), start + len(inserted))
        self.transformer.on_change(edited, start, end - start, len(inserted))
        self.transformer.after_change(EditableText(edited))

    def type(self, chars: str) -> None:
        """Type *chars* one at a time at the end of the text."""
        for char in chars:
            end = len(self.text)
            self.edit(end, end, char)

    def backspace_at(self, index: int) -> None:
        """Delete the character at *index*."""
        self.edit(index, index + 1)


@pytest.fixture
def host() -> FakeHost:
    """A fake host with two fraction digits that displays raw digits."""
    return FakeHost()


@pytest.fixture
def make_host() -> Callable[..., FakeHost]:
    """Factory for fake hosts with custom settings."""
    return FakeHost


@pytest.fixture
def usd_settings() -> CurrencySettings:
    """US dollar settings, negatives disallowed."""
    return resolve_settings("en_US")


@pytest.fixture
def signed_usd_settings() -> CurrencySettings:
    """US dollar settings with negative amounts allowed."""
    return resolve_settings("en_US", allow_negative=True)


@pytest.fixture
def eur_de_settings() -> CurrencySettings:
    """Euro settings formatted in de_DE, with the symbol after the amount."""
    return resolve_settings("de_DE")


@pytest.fixture
def jpy_settings() -> CurrencySettings:
    """Japanese yen settings (no fraction digits) formatted in en_US."""
    return resolve_settings("en_US", currency="JPY")
