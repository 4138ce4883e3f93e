import re
import unicodedata
from typing import Optional

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_SPACED_COMMA = re.compile(r"\s*,\s*")
_REPEATED_COMMA = re.compile(r",{2,}")


def slugify(text: str, separator: str = "-") -> str:
    """Lowercase ASCII slug: accents folded, runs of other characters become one separator."""
    ascii_text = (
        unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    )
    return _NON_ALNUM.sub(separator, ascii_text.lower()).strip(separator)


def normalize_csv(value: Optional[str]) -> Optional[str]:
    """Collapse a comma separated list: no blank items, no stray commas."""
    if value is None:
        return None
    cleaned = _SPACED_COMMA.sub(",", value.strip())
    cleaned = _REPEATED_COMMA.sub(",", cleaned)
    cleaned = cleaned.strip(",")
    return cleaned or None


def is_blank(value: object) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def word_count(value: str) -> int:
    return len(value.split())
