"""Shared utilities for the program report navigator."""

# Pattern definitions
from utils.patterns import MASKED_NAME_CHARS, MASKED_CUSTOMER_CHARS

# String utilities
from utils.strings import mask_name

# HTTP utilities
from utils.http import SessionManager

# Configuration
from utils.config import (
    Config,
    AppConfig,
    NavConfig,
    QuickbaseConfig,
    DEFAULT_BUCKETS,
    parse_buckets,
    parse_static_items,
)

__all__ = [
    # Patterns
    "MASKED_NAME_CHARS",
    "MASKED_CUSTOMER_CHARS",
    # Strings
    "mask_name",
    # HTTP
    "SessionManager",
    # Config
    "Config",
    "AppConfig",
    "NavConfig",
    "QuickbaseConfig",
    "DEFAULT_BUCKETS",
    "parse_buckets",
    "parse_static_items",
]
