"""Utility modules for pickban."""

from pickban.utils.errors import format_error

__all__ = [
    "format_error",
]
