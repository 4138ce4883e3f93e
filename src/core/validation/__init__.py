"""Reusable field validation rules and error formatting."""

from src.core.validation.errors import error_field, error_message, field_errors
from src.core.validation.rules import FutureDateRule, MaxWordsRule, SlugFormatRule

__all__ = [
    "FutureDateRule",
    "MaxWordsRule",
    "SlugFormatRule",
    "error_field",
    "error_message",
    "field_errors",
]
