"""Field-level validation rules.

Each rule is a callable taking the field value and returning it, possibly
converted. Failures raise ``PydanticCustomError`` so the rules plug straight
into pydantic ``field_validator``s and ``AfterValidator``s.
"""

import re
from datetime import date, datetime
from typing import Any, Callable, Optional

from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticCustomError

from src.core.utils.utils import word_count

_date_adapter = TypeAdapter(date)
_datetime_adapter = TypeAdapter(datetime)


class SlugFormatRule:
    """Lowercase letters, digits and hyphens only."""

    PATTERN = re.compile(r"^[a-z0-9-]+$")

    def __init__(self, attribute: str = "Slug"):
        self.attribute = attribute

    def __call__(self, value: Any) -> str:
        if not isinstance(value, str) or not self.PATTERN.match(value):
            raise PydanticCustomError(
                "slug_format",
                "The {attribute} syntax is invalid. It should only contain "
                "lowercase letters, numbers, and hyphens.",
                {"attribute": self.attribute},
            )
        return value


class FutureDateRule:
    """A parseable date that is today or later.

    Only the date part is compared, so any time of day on ``today`` passes.
    """

    def __init__(
        self,
        attribute: str = "date",
        today: Optional[Callable[[], date]] = None,
    ):
        self.attribute = attribute
        self.today = today or date.today

    def parse(self, value: Any) -> date:
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        if isinstance(value, str):
            text = value.strip()
            try:
                return _date_adapter.validate_python(text)
            except ValidationError:
                pass
            try:
                return _datetime_adapter.validate_python(text).date()
            except ValidationError:
                pass
        raise PydanticCustomError(
            "date_format",
            "The {attribute} format is invalid.",
            {"attribute": self.attribute},
        )

    def __call__(self, value: Any) -> date:
        parsed = self.parse(value)
        if parsed < self.today():
            raise PydanticCustomError(
                "future_date",
                "The {attribute} must be a date in the future.",
                {"attribute": self.attribute},
            )
        return parsed


class MaxWordsRule:
    """Whitespace-delimited word count must not exceed ``max_words``."""

    def __init__(self, max_words: int = 10, attribute: str = "field"):
        self.max_words = max_words
        self.attribute = attribute

    def __call__(self, value: Any) -> str:
        if not isinstance(value, str):
            raise PydanticCustomError(
                "text_type",
                "The {attribute} field must be text.",
                {"attribute": self.attribute},
            )
        count = word_count(value)
        if count > self.max_words:
            raise PydanticCustomError(
                "max_words",
                "The {attribute} field must not exceed {max_words} words. "
                "Current count: {count} words.",
                {"attribute": self.attribute, "max_words": self.max_words, "count": count},
            )
        return value
