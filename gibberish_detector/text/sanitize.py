"""Normalize raw text into the canonical character stream used for bigram counting."""
from __future__ import annotations
import re
import unicodedata
from typing import Iterator

from ..errors import InputTypeError

LINE_BREAKS = re.compile(r"\r\n|[\r\n\t\v\f\x85\u2028\u2029]")
TERMINATORS = re.compile(r"[!?.]")
MULTI_SPACE = re.compile(r" {2,}")
NON_ASCII = re.compile(r"[^\x00-\x7f]")
# digits and ASCII punctuation, backslash excluded
NOISE = re.compile(r"[0-9!\"#$%&'()*+,\-./:;<=>?@\[\]^_`{|}~]")


def to_latin(t: str) -> str:
    """Strip diacritics, then drop anything left outside ASCII."""
    t = unicodedata.normalize("NFD", t)
    t = "".join(ch for ch in t if not unicodedata.combining(ch))
    return NON_ASCII.sub("", t)


def sanitize(text) -> str:
    """
    Return the case-preserving cleaned form of text.

    None, False and "" give "". Any other non-str value raises InputTypeError,
    including empty lists and dicts.
    """
    if text is None or text is False or (isinstance(text, str) and not text):
        return ""
    if not isinstance(text, str):
        raise InputTypeError(f"expected text as str, got {type(text).__name__}")

    t = LINE_BREAKS.sub(" ", text)
    # sentence boundaries count as word boundaries
    t = TERMINATORS.sub(" ", t)
    t = MULTI_SPACE.sub(" ", t)
    t = to_latin(t)
    t = NOISE.sub("", t)
    return MULTI_SPACE.sub(" ", t)


def pairs(text) -> Iterator[str]:
    """Yield each adjacent character pair of the sanitized, lowercased text."""
    t = sanitize(text).lower()
    for i in range(len(t) - 1):
        yield t[i:i + 2]
