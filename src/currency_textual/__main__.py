"""Entry point for currency-textual."""

from currency_textual.app import CurrencyTextualApp
from currency_textual.config import parse_args, resolve_currency_settings


def main() -> None:
    """Run the currency-textual application."""
    args = parse_args()
    settings = resolve_currency_settings(
        cli_locale=args.locale,
        cli_default_locale=args.default_locale,
        cli_currency=args.currency,
        cli_allow_negative=args.allow_negative,
    )
    app = CurrencyTextualApp(settings=settings)
    app.run()


if __name__ == "__main__":
    main()
