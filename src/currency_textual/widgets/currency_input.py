"""Currency input widget that reformats the amount on every keystroke."""

from __future__ import annotations

from decimal import Decimal

from textual.message import Message
from textual.widgets import Input
from textual.widgets.input import Selection

from currency_textual.currency import DEFAULT_LOCALE, format_amount, resolve_settings, to_decimal
from currency_textual.errors import UnparseableInputError
from currency_textual.models import CurrencySettings, EditDelta
from currency_textual.transformer import AmountTransformer, EditableText, digits_end, parse_amount

_DIGITS = frozenset("0123456789")


def _digits_right_of(text: str, index: int) -> int:
    """Count the digits of *text* at or after *index*."""
    return sum(1 for char in text[index:] if char in _DIGITS)


def _caret_before_digits(text: str, count: int) -> int:
    """Return the caret position in *text* that has *count* digits to its right.

    With no digits to the right the caret sits just after the last digit, so
    a trailing currency symbol stays to its right.  When *text* has fewer
    digits than *count* the caret goes before the first digit.
    """
    if count <= 0:
        return digits_end(text)
    position = 0
    seen = 0
    for index in range(len(text) - 1, -1, -1):
        if text[index] in _DIGITS:
            position = index
            seen += 1
            if seen == count:
                break
    return position


class CurrencyInput(Input):
    """An Input that holds an integer amount of minor currency units.

    Every user edit (typing, pasting, backspace, delete) is handed to an
    :class:`AmountTransformer` instead of being applied directly.  The
    transformer parses the edited text, and the field then shows the
    formatted amount, e.g. typing ``1``, ``2``, ``5`` at the end of the field
    displays ``$0.01``, ``$0.12``, ``$1.25``.  Edits that do not parse leave
    the field unchanged.
    """

    class AmountChanged(Message):
        """Posted when the amount held by a CurrencyInput changes."""

        def __init__(self, currency_input: CurrencyInput, amount: int) -> None:
            super().__init__()
            self.currency_input = currency_input
            self.amount = amount

        @property
        def control(self) -> CurrencyInput:
            """The CurrencyInput that changed."""
            return self.currency_input

    def __init__(
        self,
        settings: CurrencySettings | None = None,
        amount: int | None = None,
        **kwargs,
    ) -> None:
        """Initialize the field.

        Args:
            settings: Currency settings; defaults to US dollars.
            amount: Initial amount in minor units.  When omitted the field
                starts empty and shows the formatted zero as placeholder.
            **kwargs: Passed through to :class:`~textual.widgets.Input`.
        """
        self.settings = settings or resolve_settings(DEFAULT_LOCALE)
        if amount is not None and amount < 0 and not self.settings.allow_negative:
            raise ValueError(f"Negative amount {amount} not allowed")
        self._amount = amount or 0
        self._edit_cursor: int | None = None
        self._transformer = AmountTransformer(self, self.settings.fraction_digits)
        kwargs.setdefault("placeholder", format_amount(0, self.settings))
        kwargs.setdefault("select_on_focus", False)
        if amount is not None:
            kwargs["value"] = format_amount(amount, self.settings)
        super().__init__(**kwargs)

    @property
    def amount(self) -> int:
        """The current amount in minor currency units."""
        return self._amount

    @property
    def decimal_amount(self) -> Decimal:
        """The current amount in major units, e.g. ``Decimal('1.25')``."""
        return to_decimal(self._amount, self.settings.fraction_digits)

    @property
    def last_good_input(self) -> str:
        """The digits of the last edit that parsed."""
        return self._transformer.last_good_input

    @property
    def transformer(self) -> AmountTransformer:
        """The transformer interpreting this field's edits."""
        return self._transformer

    @property
    def allow_negative(self) -> bool:
        """Whether a leading minus sign is accepted."""
        return self.settings.allow_negative

    @property
    def text_length(self) -> int:
        """Number of caret stops in the displayed text.

        There is one stop before each character plus one after the last, so
        a restored cursor may sit at the very end of the text.
        """
        return len(self.value) + 1

    @property
    def selection_range(self) -> tuple[int, int]:
        """The selection, or the cursor of the edit being processed."""
        if self._edit_cursor is not None:
            return self._edit_cursor, self._edit_cursor
        start, end = self.selection
        return min(start, end), max(start, end)

    def set_selection(self, start: int, end: int) -> None:
        """Move the selection to ``[start, end]``."""
        self.selection = Selection(start, end)

    def set_amount(self, minor_units: int) -> None:
        """Store a new amount and display it formatted.

        Args:
            minor_units: The amount in minor currency units.

        Raises:
            ValueError: If the amount is negative and negatives are not allowed.
        """
        if minor_units < 0 and not self.allow_negative:
            raise ValueError(f"Negative amount {minor_units} not allowed")

        previous = self._amount
        self._amount = minor_units
        text = format_amount(minor_units, self.settings)
        if self._transformer.ignoring_echo:
            self._write_echo(text)
        else:
            self.value = text
            self.cursor_position = len(text)

        if minor_units != previous:
            self.post_message(self.AmountChanged(self, minor_units))

    def _write_echo(self, text: str) -> None:
        """Write the formatted text, reporting the write to the transformer."""
        old = self.value
        self._transformer.before_change(old, 0, len(old), len(text))
        self.value = text
        self._transformer.on_change(text, 0, len(old), len(text))
        self._transformer.after_change(EditableText(text))

    def _edit(self, text: str, start: int, end: int) -> None:
        """Route a user edit of ``value[start:end]`` through the transformer."""
        value = self.value
        start, end = sorted((max(0, start), min(len(value), end)))
        sel_start, sel_end = self.selection_range
        delta = EditDelta(
            cursor_start_before=sel_start,
            cursor_end_before=sel_end,
            deletion_start=start,
            deletion_count=end - start,
            inserted_count=len(text),
        )
        if delta.is_deletion and delta.deletion_count == 0:
            return

        edited = f"{value[:start]}{text}{value[end:]}"
        self._transformer.before_change(
            value, delta.deletion_start, delta.deletion_count, delta.inserted_count
        )
        self._transformer.on_change(
            edited, delta.deletion_start, delta.deletion_count, delta.inserted_count
        )
        self._edit_cursor = self._caret_after_edit(edited, start + delta.inserted_count)
        try:
            self._transformer.after_change(EditableText(edited))
        finally:
            self._edit_cursor = None

    def _caret_after_edit(self, edited: str, caret: int) -> int:
        """Map the caret of the edited text into the text that will be displayed.

        The caret keeps the same number of digits to its right, so digits
        typed at the end keep entering right to left even though the
        reformatted text has a different length.

        Args:
            edited: The field text with the user's edit applied.
            caret: The caret position in *edited*.

        Returns:
            The caret position in the reformatted text, or *caret* itself when
            the edit will be rejected.
        """
        padded = EditableText(edited)
        self._transformer.restore_fraction_slots(padded)
        try:
            amount, _ = parse_amount(str(padded), self.allow_negative)
        except UnparseableInputError:
            return caret
        return _caret_before_digits(
            format_amount(amount, self.settings), _digits_right_of(edited, caret)
        )

    def replace(self, text: str, start: int, end: int) -> None:
        """Replace ``value[start:end]`` with *text* as a user edit."""
        self._edit(text, start, end)

    def insert(self, text: str, index: int) -> None:
        """Insert *text* at *index* as a user edit."""
        self._edit(text, index, index)

    def delete(self, start: int, end: int) -> None:
        """Delete ``value[start:end]`` as a user edit."""
        self._edit("", start, end)

    def clear(self) -> None:
        """Reset the amount to zero."""
        self.set_amount(0)
