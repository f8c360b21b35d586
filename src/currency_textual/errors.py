"""Custom exceptions for amount parsing and currency lookup."""


class UnparseableInputError(ValueError):
    """Raised when raw field text cannot be turned into a minor-unit amount."""


class UnsupportedLocaleError(ValueError):
    """Raised when a locale has no known currency."""
