"""TipBuddy API: tip tracking backend with a self-refreshing demo account."""

__version__ = "1.0.0"
