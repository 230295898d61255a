"""Pickban: automated champion select decisions."""

__version__ = "0.1.0"
