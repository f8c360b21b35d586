"""Data models for edits and currency settings."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class EditDelta:
    """A single user edit, as seen by the host field before it is applied."""

    cursor_start_before: int
    cursor_end_before: int
    deletion_start: int
    deletion_count: int
    inserted_count: int

    @property
    def is_deletion(self) -> bool:
        """Return True when the edit removes text without inserting any."""
        return self.inserted_count == 0


@dataclass(frozen=True)
class CurrencySettings:
    """Construction-time configuration for an amount field.

    ``fraction_digits`` is the number of minor-unit digits of ``currency``
    (2 for USD, 0 for JPY).  It never changes after construction.
    """

    locale: str
    currency: str
    fraction_digits: int
    allow_negative: bool = False
