"""Keystroke-by-keystroke translation between field text and minor-unit amounts.

The :class:`AmountTransformer` observes a text field's edit lifecycle.  For
every user edit it parses the edited text into an integer amount of minor
currency units, hands that amount to the host for formatting, and restores a
cursor position that stays within the new text.
"""

from __future__ import annotations

import re
from typing import Protocol

from textual import log

from currency_textual.errors import UnparseableInputError

# Past this many characters an amount can no longer be formatted without
# losing precision downstream.
MAX_RAW_INPUT_LENGTH = 15

_NON_DIGITS = re.compile(r"[^0-9]")
_NON_SIGNED_DIGITS = re.compile(r"[^0-9-]")
_LAST_DIGIT = re.compile(r"[0-9][^0-9]*$")


class AmountHost(Protocol):
    """The text field an :class:`AmountTransformer` is attached to."""

    @property
    def selection_range(self) -> tuple[int, int]: ...

    @property
    def text_length(self) -> int: ...

    @property
    def allow_negative(self) -> bool: ...

    def set_selection(self, start: int, end: int) -> None: ...

    def set_amount(self, minor_units: int) -> None: ...


class EditableText:
    """A mutable text buffer holding the field contents after a user edit."""

    def __init__(self, text: str = "") -> None:
        self._text = text

    def insert(self, index: int, text: str) -> None:
        """Insert *text* before position *index*."""
        index = max(0, min(index, len(self._text)))
        self._text = f"{self._text[:index]}{text}{self._text[index:]}"

    def __len__(self) -> int:
        return len(self._text)

    def __str__(self) -> str:
        return self._text

    def __repr__(self) -> str:
        return f"EditableText({self._text!r})"


def digits_end(text: str) -> int:
    """Return the index just past the last digit of *text* (0 if it has none)."""
    match = _LAST_DIGIT.search(text)
    return match.start() + 1 if match else 0


def deleted_fraction_mask(
    text: str, start: int, remove_count: int, fraction_digits: int
) -> int:
    """Compute which fractional-digit slots a deletion removes.

    Bit ``i`` is set when the character ``i`` places before the end of the
    digits of *text* (0 being the last digit) lies in
    ``[start, start + remove_count)``.  A trailing currency symbol such as
    ``" €"`` is skipped, so only the last *fraction_digits* characters up to
    the final digit are considered.

    Args:
        text: The field text before the deletion.
        start: Index of the first removed character.
        remove_count: Number of removed characters.
        fraction_digits: Number of minor-unit digits of the currency.

    Returns:
        The bitset of deleted fractional slots.
    """
    mask = 0
    last = digits_end(text) - 1
    for i in range(fraction_digits):
        pos = last - i
        if start <= pos < start + remove_count:
            mask |= 1 << i
    return mask


def clean_raw_text(raw: str, allow_negative: bool) -> str:
    """Strip everything but digits (and ``-`` when negatives are allowed)."""
    pattern = _NON_SIGNED_DIGITS if allow_negative else _NON_DIGITS
    return pattern.sub("", raw)


def parse_amount(raw: str, allow_negative: bool) -> tuple[int, str]:
    """Parse field text into a minor-unit amount.

    Args:
        raw: The field text, including any symbols and separators.
        allow_negative: Whether a ``-`` sign is honoured.

    Returns:
        A ``(minor_units, cleaned)`` tuple where *cleaned* is the digit
        string the amount was parsed from.

    Raises:
        UnparseableInputError: If the cleaned text is empty, a lone sign,
            too long, or not a well-formed integer (e.g. ``"1-2"``).
    """
    cleaned = clean_raw_text(raw, allow_negative)
    if not cleaned or cleaned == "-":
        raise UnparseableInputError(f"No digits in {raw!r}")
    if len(cleaned) >= MAX_RAW_INPUT_LENGTH:
        raise UnparseableInputError(
            f"Input has {len(cleaned)} characters, limit is {MAX_RAW_INPUT_LENGTH - 1}"
        )
    try:
        return int(cleaned), cleaned
    except ValueError as exc:
        raise UnparseableInputError(f"Malformed amount {cleaned!r}") from exc


def clamp_selection(index: int, length: int) -> int:
    """Clamp a cursor index into ``[0, length - 1]``."""
    index = index if index < length else length - 1
    return max(index, 0)


class AmountTransformer:
    """Interprets edits of a host field as a right-to-left monetary amount.

    The host calls :meth:`before_change`, :meth:`on_change` and
    :meth:`after_change` for every mutation of its text, including the
    mutations it makes itself from :meth:`AmountHost.set_amount`.  Those
    self-inflicted calls are recognised with a latch: it is armed before the
    host is asked to redisplay and disarmed by the echo that follows.
    """

    def __init__(self, host: AmountHost, fraction_digits: int) -> None:
        """Initialize the transformer.

        Args:
            host: The field whose edits are interpreted.
            fraction_digits: Number of minor-unit digits of the active currency.
        """
        if fraction_digits < 0:
            raise ValueError(f"fraction_digits must be >= 0, got {fraction_digits}")
        self.host = host
        self.fraction_digits = fraction_digits
        self.ignoring_echo = False
        self.deleted_fraction_mask = 0
        self._last_good_input = ""

    @property
    def last_good_input(self) -> str:
        """The last cleaned raw string that parsed successfully."""
        return self._last_good_input

    def before_change(
        self, text: str, start: int, remove_count: int, insert_count: int
    ) -> None:
        """Record which fractional digits a pure deletion is about to remove."""
        self.deleted_fraction_mask = 0
        if insert_count == 0:
            self.deleted_fraction_mask = deleted_fraction_mask(
                text, start, remove_count, self.fraction_digits
            )

    def restore_fraction_slots(self, editable: EditableText) -> None:
        """Re-pad emptied fractional slots with ``"0"``.

        The remaining digits keep their place value: deleting the ``5`` of
        ``10.50`` yields ``10.00`` rather than ``1.00``.
        """
        for i in range(self.fraction_digits):
            if self.deleted_fraction_mask & (1 << i):
                editable.insert(digits_end(str(editable)) - i - 1, "0")

    def on_change(self, text: str, start: int, before: int, count: int) -> None:
        """Called while the host mutates its text; nothing to do here."""

    def after_change(self, editable: EditableText) -> None:
        """Turn the edited text into a new amount and restore the cursor."""
        if self.ignoring_echo:
            self.ignoring_echo = False
            return

        self.ignoring_echo = True
        start, end = self.host.selection_range

        self.restore_fraction_slots(editable)
        raw = str(editable)
        try:
            amount, cleaned = parse_amount(raw, self.host.allow_negative)
        except UnparseableInputError as exc:
            log.debug(f"Discarding edit: {exc}")
            # The host keeps its text, so no echo will come to disarm us.
            self.ignoring_echo = False
            return

        self.host.set_amount(amount)
        self._last_good_input = cleaned

        length = self.host.text_length
        self.host.set_selection(
            clamp_selection(start, length), clamp_selection(end, length)
        )
