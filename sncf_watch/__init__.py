"""Watch SNCF Connect for new train offers and announce them on Telegram."""

__version__ = "0.1.0"
