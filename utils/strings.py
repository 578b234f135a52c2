"""String processing utilities for the program report navigator."""

from utils.patterns import MASKED_CUSTOMER_CHARS, MASKED_NAME_CHARS


def mask_name(s: str, customer: bool = False) -> str:
    """Replace identifying characters in a display name with ``X``.

    Letters, digits and apostrophes are masked; customer names additionally
    mask hyphens.  Spaces and other punctuation survive.

    Example:
        "Acme 2023" -> "XXXX XXXX"

    Args:
        s: Name to mask (None is treated as empty)
        customer: Use the customer-name character set

    Returns:
        Masked name
    """
    if not s:
        return ""
    pattern = MASKED_CUSTOMER_CHARS if customer else MASKED_NAME_CHARS
    return pattern.sub("X", s)
