"""Demo Textual application for currency-textual."""

from __future__ import annotations

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.widgets import Label, Static

from currency_textual.models import CurrencySettings
from currency_textual.widgets.currency_input import CurrencyInput

_FOOTER_TEXT = "\\[ctrl+r] Reset  \\[ctrl+q] Quit"


class CurrencyTextualApp(App):
    """A single amount field that reformats as the user types."""

    TITLE = "currency-textual"
    CSS_PATH = "styles/app.tcss"

    BINDINGS = [
        Binding("ctrl+r", "reset", "Reset"),
        Binding("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, settings: CurrencySettings) -> None:
        """Initialize the app.

        Args:
            settings: Currency settings for the amount field.
        """
        super().__init__()
        self.settings = settings
        self.status_text = self._status_text(0, "")

    def compose(self) -> ComposeResult:
        """Create the app layout."""
        with Vertical(id="amount-panel"):
            yield Label(f"Amount ({self.settings.currency}, {self.settings.locale})")
            yield CurrencyInput(settings=self.settings, id="amount")
            yield Static(self.status_text, id="status-bar")
        yield Static(_FOOTER_TEXT, id="footer-bar")

    def on_mount(self) -> None:
        """Focus the amount field on startup."""
        self.query_one("#amount", CurrencyInput).focus()

    @staticmethod
    def _status_text(amount: int, raw: str) -> str:
        """Describe the stored amount and the digits it came from."""
        return f"Minor units: {amount}  Last input: {raw or '-'}"

    def on_currency_input_amount_changed(self, event: CurrencyInput.AmountChanged) -> None:
        """Refresh the status line whenever the amount changes."""
        self.status_text = self._status_text(
            event.amount, event.currency_input.last_good_input
        )
        self.query_one("#status-bar", Static).update(self.status_text)

    def action_reset(self) -> None:
        """Reset the amount field to zero."""
        self.query_one("#amount", CurrencyInput).clear()
        self.notify("Amount reset", timeout=2)
