"""
Text normalization utilities used across the talent directory.

Name matching in the directory folds compatibility variants (full-width
and half-width forms), drops every whitespace character and lower-cases,
so that "ＪＡＮＥ　ＤＯＥ", "Jane Doe" and "janedoe" compare equal.  The
softer helpers below are used when cleaning cells read from roster files,
where we want to keep the original casing for display.
"""

import re
import unicodedata

WHITESPACE_RE = re.compile(r"\s+")


# ---------------------------
# Basic helpers
# ---------------------------

def normalize_unicode(text: str) -> str:
    """Canonical (NFC) composition; keeps full-width characters as they are."""
    if not text:
        return ""
    return unicodedata.normalize("NFC", text)


def normalize_whitespace(text: str) -> str:
    """Single spaces between words, none at the edges."""
    if not text:
        return ""
    return WHITESPACE_RE.sub(" ", text).strip()


def basic_clean(text) -> str:
    """
    Cleaning used for display fields read from external sources:

    - coerce to str
    - normalize unicode
    - normalize whitespace
    """
    if text is None:
        return ""
    text = normalize_unicode(str(text))
    return normalize_whitespace(text)


# ---------------------------
# Comparison form
# ---------------------------

def normalize_name(text: str) -> str:
    """
    Canonical comparison form for names and keywords.

    NFKC folds width variants ("ｱ" -> "ア", "１" -> "1"), then all
    whitespace is removed and the result is lower-cased.
    """
    if not text:
        return ""
    folded = unicodedata.normalize("NFKC", text)
    return WHITESPACE_RE.sub("", folded).lower()


if __name__ == "__main__":
    sample = "  ＪＡＮＥ　Doe  "
    print("RAW:", repr(sample))
    print("BASIC CLEAN:", repr(basic_clean(sample)))
    print("NAME:", repr(normalize_name(sample)))
