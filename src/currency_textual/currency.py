"""Locale to currency lookup and amount formatting, backed by Babel's CLDR data."""

from __future__ import annotations

from decimal import Decimal

from babel import Locale, UnknownLocaleError
from babel.numbers import format_currency, get_currency_precision, get_territory_currencies
from textual import log

from currency_textual.errors import UnsupportedLocaleError
from currency_textual.models import CurrencySettings

DEFAULT_LOCALE = "en_US"


def normalize_locale(locale: str) -> str:
    """Accept BCP 47 style tags (``en-US``) as well as ``en_US``."""
    return locale.strip().replace("-", "_")


def _parse_locale(locale: str) -> Locale:
    try:
        return Locale.parse(normalize_locale(locale))
    except (UnknownLocaleError, ValueError, TypeError, AttributeError) as exc:
        raise UnsupportedLocaleError(f"Unknown locale: {locale!r}") from exc


def currency_for_locale(locale: str) -> str:
    """Return the ISO 4217 code in use in the locale's territory.

    Args:
        locale: A locale identifier, e.g. ``'en_US'`` or ``'de-DE'``.

    Returns:
        The currency code, e.g. ``'USD'``.

    Raises:
        UnsupportedLocaleError: If the locale is unknown, has no territory
            (``'en'``), or its territory has no tender currency.
    """
    parsed = _parse_locale(locale)
    if not parsed.territory:
        raise UnsupportedLocaleError(f"Locale {locale!r} has no territory")

    currencies = get_territory_currencies(parsed.territory)
    if not currencies:
        raise UnsupportedLocaleError(f"No currency in use for locale {locale!r}")
    return currencies[0]


def fraction_digits_for(currency: str) -> int:
    """Return the number of minor-unit digits of a currency (2 for USD, 0 for JPY)."""
    return get_currency_precision(currency.upper())


def _settings_for(locale: str, currency: str | None, allow_negative: bool) -> CurrencySettings:
    if currency:
        _parse_locale(locale)
        code = currency.upper()
    else:
        code = currency_for_locale(locale)
    return CurrencySettings(
        locale=normalize_locale(locale),
        currency=code,
        fraction_digits=fraction_digits_for(code),
        allow_negative=allow_negative,
    )


def resolve_settings(
    locale: str,
    default_locale: str = DEFAULT_LOCALE,
    allow_negative: bool = False,
    currency: str | None = None,
) -> CurrencySettings:
    """Build the settings for an amount field from explicit configuration.

    When *locale* is unsupported, the currency and locale of
    *default_locale* are used instead and a warning is logged.

    Args:
        locale: The locale the field should display in.
        default_locale: Fallback locale when *locale* is unsupported.
        allow_negative: Whether the field accepts a leading ``-``.
        currency: Optional ISO 4217 code overriding the locale's currency.

    Returns:
        The resolved :class:`CurrencySettings`.

    Raises:
        UnsupportedLocaleError: If *default_locale* is unsupported as well.
    """
    try:
        return _settings_for(locale, currency, allow_negative)
    except UnsupportedLocaleError as exc:
        log.warning(f"{exc}; falling back to {default_locale}")
    return _settings_for(default_locale, currency, allow_negative)


def to_decimal(minor_units: int, fraction_digits: int) -> Decimal:
    """Convert a minor-unit amount to its major-unit value (125, 2 -> 1.25)."""
    return Decimal(minor_units).scaleb(-fraction_digits)


def format_amount(minor_units: int, settings: CurrencySettings) -> str:
    """Format a minor-unit amount for display in the settings' locale.

    Args:
        minor_units: The amount in minor currency units.
        settings: The field's currency settings.

    Returns:
        The pretty-printed amount with grouping and currency symbol,
        e.g. ``'$1,234.50'``.
    """
    return format_currency(
        to_decimal(minor_units, settings.fraction_digits),
        settings.currency,
        locale=settings.locale,
    )
