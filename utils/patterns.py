"""Pre-compiled regex patterns for the program report navigator.

All patterns are compiled once at module import.

Usage:
    from utils.patterns import MASKED_NAME_CHARS

    MASKED_NAME_CHARS.sub("X", text)
"""

import re

# Characters hidden when menu names are masked: letters, digits, apostrophes.
# Separators (spaces, punctuation) are kept so the name's shape stays readable.
MASKED_NAME_CHARS = re.compile(r"[a-zA-Z'0-9]")

# Customer names also mask hyphens (e.g. "Smith-Jones Co").
MASKED_CUSTOMER_CHARS = re.compile(r"[a-zA-Z'0-9-]")