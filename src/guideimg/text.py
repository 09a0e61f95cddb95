"""Text normalisation shared by every matcher."""

import re

_PUNCTUATION = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")


def normalise_text(text: str) -> str:
    """Normalise text for title matching.

    Lowercases, removes punctuation, collapses whitespace runs and trims.
    The result is stable under repeated application.
    """
    text = _PUNCTUATION.sub("", text.lower())
    return _WHITESPACE.sub(" ", text).strip()
