"""Shared utilities."""
from .logger import get_logger
from .formatting import format_currency, format_percent, format_signed_currency, ordinal_suffix

__all__ = [
    "get_logger",
    "format_currency",
    "format_percent",
    "format_signed_currency",
    "ordinal_suffix",
]
