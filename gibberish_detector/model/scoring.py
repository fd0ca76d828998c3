from __future__ import annotations
from typing import Dict, Optional

from ..text.sanitize import pairs
from .schema import BigramTable, coerce_table


def score_table(text, table: BigramTable, use_cache: bool = True) -> Optional[float]:
    """
    Average table weight over every adjacent pair of text.

    Pairs missing from the table weigh 0 but still count toward the average,
    so text full of unseen pairs scores low. Text with no pairs at all
    (empty or one character after cleaning) returns None.
    """
    cache: Optional[Dict[str, int]] = {} if use_cache else None
    total = 0
    count = 0
    for pair in pairs(text):
        count += 1
        if cache is None:
            total += table.get(pair, 0)
            continue
        weight = cache.get(pair)
        if weight is None:
            weight = cache[pair] = table.get(pair, 0)
        total += weight
    if count == 0:
        return None
    return total / count


def score(text, table_or_model, use_cache: bool = True) -> Optional[float]:
    """Score text against a table, a matrix list, or a whole model (its table is used)."""
    return score_table(text, coerce_table(table_or_model), use_cache)


def is_gibberish_score(value: Optional[float], threshold: float) -> bool:
    # no pairs means legitimacy can't be shown
    if value is None:
        return True
    return value <= threshold
