"""Marketplace backend core: event dispatch, notifications and listing rules."""

__version__ = "0.1.0"
