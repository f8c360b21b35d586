"""Live currency formatting for Textual input fields."""

__version__ = "0.1.0"
