"""Configuration resolution for currency-textual.

Priority order (highest to lowest):
1. --locale / --default-locale / --currency / --allow-negative CLI arguments
2. CURRENCY_TEXTUAL_LOCALE environment variable (locale only)
3. ~/.config/currency-textual/config.toml -> locale, default_locale, currency,
   allow_negative
4. en_US, the locale's own currency, negatives disallowed
"""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from currency_textual.currency import DEFAULT_LOCALE, resolve_settings
from currency_textual.errors import UnsupportedLocaleError
from currency_textual.models import CurrencySettings

_CONFIG_PATH = Path.home() / ".config" / "currency-textual" / "config.toml"

_TRUE_STRINGS = frozenset({"1", "true", "yes", "on"})


def _load_config_dict() -> dict:
    """Load the full config.toml as a dict, or return empty dict on failure."""
    if not _CONFIG_PATH.exists():
        return {}
    try:
        if sys.version_info >= (3, 11):
            import tomllib
        else:
            import tomli as tomllib

        with open(_CONFIG_PATH, "rb") as f:
            return tomllib.load(f)
    except (OSError, ValueError):
        return {}


def _as_bool(value: object) -> bool:
    """Interpret a config value written either as a TOML bool or a string."""
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUE_STRINGS


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        argv: Arguments to parse. Defaults to sys.argv[1:].

    Returns:
        Parsed namespace with 'locale', 'default_locale', 'currency' and
        'allow_negative' attributes.
    """
    parser = argparse.ArgumentParser(
        prog="currency-textual",
        description="Type a monetary amount and watch it reformat as you go.",
    )
    parser.add_argument(
        "-l",
        "--locale",
        help="Locale to format amounts in (e.g. en_US, de_DE).",
        default=None,
    )
    parser.add_argument(
        "--default-locale",
        help="Fallback locale when --locale is unsupported.",
        default=None,
    )
    parser.add_argument(
        "-c",
        "--currency",
        help="ISO 4217 currency code overriding the locale's currency.",
        default=None,
    )
    parser.add_argument(
        "--allow-negative",
        action="store_true",
        default=None,
        help="Accept a leading minus sign.",
    )
    return parser.parse_args(argv)


def resolve_currency_settings(
    cli_locale: str | None = None,
    cli_default_locale: str | None = None,
    cli_currency: str | None = None,
    cli_allow_negative: bool | None = None,
) -> CurrencySettings:
    """Resolve the amount field settings using the priority chain.

    Args:
        cli_locale: Value from the --locale CLI argument, if provided.
        cli_default_locale: Value from --default-locale, if provided.
        cli_currency: Value from --currency, if provided.
        cli_allow_negative: True when --allow-negative was given.

    Returns:
        The resolved currency settings.

    Raises:
        SystemExit: If neither the locale nor the default locale is supported.
    """
    config = _load_config_dict()

    locale = (
        cli_locale
        or os.environ.get("CURRENCY_TEXTUAL_LOCALE")
        or config.get("locale")
        or DEFAULT_LOCALE
    )
    default_locale = cli_default_locale or config.get("default_locale") or DEFAULT_LOCALE
    currency = cli_currency or config.get("currency")
    if cli_allow_negative is not None:
        allow_negative = cli_allow_negative
    else:
        allow_negative = _as_bool(config.get("allow_negative", False))

    try:
        return resolve_settings(
            str(locale),
            default_locale=str(default_locale),
            allow_negative=allow_negative,
            currency=str(currency) if currency else None,
        )
    except UnsupportedLocaleError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
