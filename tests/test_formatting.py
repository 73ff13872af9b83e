"""
Unit tests for utils/formatting.py

Tests all public functions: format_usd, safe_percent, format_percent,
format_share, format_count. No network or file I/O required.
"""
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from utils.formatting import (
    format_count,
    format_percent,
    format_share,
    format_usd,
    safe_percent,
)


# ── format_usd ────────────────────────────────────────────────────────────────

def test_format_usd_none():
    assert format_usd(None) == "-"


def test_format_usd_standard():
    assert format_usd(250000) == "$250,000"


def test_format_usd_with_precision():
    assert format_usd(1234, precision=2) == "$1,234.00"


def test_format_usd_millions():
    assert format_usd(4_500_000) == "$4.5M"


def test_format_usd_billions():
    assert format_usd(1_200_000_000) == "$1.2B"


# ── safe_percent ──────────────────────────────────────────────────────────────

@pytest.mark.parametrize("part,total,expected", [
    (1, 4, 25.0),
    (3, 3, 100.0),
    (0, 5, 0.0),
    (0, 0, 0.0),
    (2, 0, 0.0),
])
def test_safe_percent(part, total, expected):
    assert safe_percent(part, total) == expected


# ── format_percent / format_share ─────────────────────────────────────────────

def test_format_percent_default_precision():
    assert format_percent(42.4) == "42%"


def test_format_percent_precision():
    assert format_percent(42.5, 1) == "42.5%"
    assert format_percent(12.25, 2) == "12.25%"


def test_format_percent_none():
    assert format_percent(None) == "-"


def test_format_share():
    assert format_share(1, 3) == "33% of total"
    assert format_share(2, 3) == "67% of total"


def test_format_share_empty_total():
    assert format_share(0, 0) == "0% of total"


# ── format_count ──────────────────────────────────────────────────────────────

def test_format_count():
    assert format_count(1234) == "1,234"
    assert format_count(0) == "0"


def test_format_count_none():
    assert format_count(None) == "-"
