"""String processing utilities for the climate actions tools.

Spreadsheet cells arrive as loosely formatted text; these helpers turn them
into the shapes the record schema expects and provide the collation key used
for display ordering.
"""

import unicodedata

from utils.patterns import CURRENCY_SYMBOLS, TAG_SEPARATOR, WHITESPACE


def safe_int(val, default: int | None = None) -> int | None:
    """Safely convert a cell value to int with fallback default.

    Handles:
    - None, empty strings -> default
    - Numeric types -> int (floats are truncated)
    - Strings with currency symbols, whitespace, commas
    - Invalid input -> default

    Examples:
        "250000" -> 250000
        "$1,200,000" -> 1200000
        "12.9" -> 12
        "n/a" -> None
    """
    if val is None or val == '':
        return default
    if isinstance(val, bool):
        return default
    if isinstance(val, (int, float)):
        return int(val)
    s = CURRENCY_SYMBOLS.sub('', str(val))
    if not s:
        return default
    try:
        return int(s)
    except ValueError:
        pass
    try:
        return int(float(s))
    except ValueError:
        return default


def normalize_whitespace(s: str) -> str:
    """Normalize multiple whitespace characters to single spaces.

    Example:
        "Bus   rapid\\n transit" -> "Bus rapid transit"
    """
    return WHITESPACE.sub(' ', s).strip()


def split_tags(raw: str | None) -> list[str] | None:
    """Split a semicolon-separated tag cell into a list.

    Returns None for a blank cell so the optional field stays absent.

    Example:
        "solar; schools;" -> ["solar", "schools"]
    """
    if raw is None or not raw.strip():
        return None
    tags = [t.strip() for t in TAG_SEPARATOR.split(raw) if t.strip()]
    return tags or None


def collation_key(s: str) -> tuple[str, str]:
    """Return a sort key that orders text the way a person reads it.

    Accents and case only break ties: "Álvaro" sorts next to "Alvaro",
    and "recife" next to "Recife". The second element keeps the order
    deterministic when two strings differ only by accent or case.
    """
    decomposed = unicodedata.normalize("NFKD", s)
    base = "".join(c for c in decomposed if not unicodedata.combining(c))
    return (base.casefold(), s)
