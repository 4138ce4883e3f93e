"""Turn pydantic validation errors into ``{field: [message]}`` dicts."""

from typing import Any, Dict, List, Mapping, Optional

from pydantic import ValidationError

# Fallback templates per pydantic error type; ``{attribute}`` is the field label
DEFAULT_MESSAGES: Dict[str, str] = {
    "required": "The {attribute} field is required.",
    "string_type": "The {attribute} field must be a string.",
    "string_too_long": "The {attribute} field may not be greater than {max_length} characters.",
    "bool_parsing": "The {attribute} field must be true or false.",
    "bool_type": "The {attribute} field must be true or false.",
    "model_type": "The request body must be an object.",
    "dict_type": "The request body must be an object.",
}

_LOCATION_PREFIXES = ("body", "query", "path")


def error_field(error: Mapping[str, Any]) -> str:
    """Field an error belongs to.

    ``("body", "title")`` gives ``"title"``. Model-level errors carry their
    field in ``ctx["field"]``.
    """
    parts = [str(part) for part in error.get("loc", ()) if part not in _LOCATION_PREFIXES]
    if parts:
        return ".".join(parts)
    ctx = error.get("ctx") or {}
    return ctx.get("field") or "request"


def error_message(
    error: Mapping[str, Any],
    field: str,
    messages: Optional[Mapping[str, str]] = None,
    labels: Optional[Mapping[str, str]] = None,
) -> str:
    kind = "required" if error.get("type") == "missing" else str(error.get("type"))
    template = (messages or {}).get(f"{field}.{kind}") or DEFAULT_MESSAGES.get(kind)
    if template is None:
        return error.get("msg", "Invalid value")
    attribute = (labels or {}).get(field, field.replace("_", " "))
    return template.format(**{**(error.get("ctx") or {}), "attribute": attribute})


def field_errors(
    exc: ValidationError,
    messages: Optional[Mapping[str, str]] = None,
    labels: Optional[Mapping[str, str]] = None,
) -> Dict[str, List[str]]:
    """One message per field: the first failure pydantic reported for it."""
    errors: Dict[str, List[str]] = {}
    for error in exc.errors():
        field = error_field(error)
        if field not in errors:
            errors[field] = [error_message(error, field, messages, labels)]
    return errors
