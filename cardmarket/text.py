"""
Search text normalization.

Catalog filters match case- and diacritic-insensitively, so both the stored
search columns and incoming filter strings pass through the same folding.
"""

import unicodedata


def normalize_search_text(value: str) -> str:
    """
    Fold text for substring matching.

    Decomposes to NFKD, drops combining marks and casefolds, so
    "Ángel" and "ANGEL" both become "angel".
    """
    decomposed = unicodedata.normalize("NFKD", value)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.casefold()
