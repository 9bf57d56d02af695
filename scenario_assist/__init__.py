"""Scenario analysis engine for recorded mobile no-code automation flows."""

__version__ = "1.0.0"
