"""Pre-compiled regex patterns for the climate actions tools.

All patterns are compiled once at module import.

Usage:
    from utils.patterns import WHITESPACE, TAG_SEPARATOR

    tags = [t.strip() for t in TAG_SEPARATOR.split(raw) if t.strip()]
"""

import re

# Whitespace normalization: multiple spaces/tabs/newlines
WHITESPACE = re.compile(r'\s+')

# Tags are stored as one spreadsheet cell separated by semicolons
# Examples: "solar; schools", "bus;bike lanes"
TAG_SEPARATOR = re.compile(r'\s*;\s*')

# Currency symbols and thousands separators stripped before integer parsing
CURRENCY_SYMBOLS = re.compile(r'R\$|[\$€£¥₹₽,\s]')

# ISO calendar date prefix: "2025-03-14" or "2025-03-14T10:00:00Z"
ISO_DATE = re.compile(r'^\d{4}-\d{2}-\d{2}')
