"""Shared utilities for the climate actions tools."""

# String utilities
from utils.strings import collation_key, normalize_whitespace, safe_int, split_tags

# Output formatting
from utils.formatting import (
    format_count,
    format_percent,
    format_share,
    format_usd,
    safe_percent,
)

# Caching
from utils.cache import TTLCache

# Configuration
from utils.config import AppConfig, ClientConfig

# HTTP utilities
from utils.http import RetryStrategy, SessionManager, get_json, post_json

# Validation reporting
from utils.validation import ValidationIssue, ValidationRegistry, ValidationResult

__all__ = [
    # Strings
    "collation_key",
    "normalize_whitespace",
    "safe_int",
    "split_tags",
    # Formatting
    "format_count",
    "format_percent",
    "format_share",
    "format_usd",
    "safe_percent",
    # Cache
    "TTLCache",
    # Config
    "AppConfig",
    "ClientConfig",
    # HTTP
    "RetryStrategy",
    "SessionManager",
    "get_json",
    "post_json",
    # Validation
    "ValidationIssue",
    "ValidationRegistry",
    "ValidationResult",
]
