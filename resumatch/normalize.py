import re
from typing import List

# Anything that is not a letter, digit or whitespace. \w also admits "_".
_NON_WORD = re.compile(r"[^\w\s]|_")

MIN_TOKEN_LENGTH = 3


def normalize(text: str) -> List[str]:
    """
    Turn raw document text into the token sequence used for scoring.

    Lower-cases, replaces punctuation with spaces, splits on whitespace and
    drops tokens shorter than three characters. Duplicates are kept.
    """
    if not text:
        return []
    cleaned = _NON_WORD.sub(" ", text.lower())
    return [tok for tok in cleaned.split() if len(tok) >= MIN_TOKEN_LENGTH]


def normalize_label(value, default: str = "Unknown") -> str:
    """Collapse a missing or blank extracted label to ``default``."""
    if value is None:
        return default
    if not isinstance(value, str):
        value = str(value)
    value = value.strip()
    return value if value else default
