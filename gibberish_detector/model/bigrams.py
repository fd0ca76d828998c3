from __future__ import annotations
import logging
from collections import Counter
from typing import List

from ..errors import InputTypeError
from ..text.sanitize import pairs
from .schema import BigramTable, GibberishModel, Baseline

logger = logging.getLogger(__name__)


def build_table(corpus) -> BigramTable:
    """Count every adjacent pair of the cleaned corpus. Under two characters gives {}."""
    return dict(Counter(pairs(corpus)))


def split_lines(lines) -> List[str]:
    """Accept a newline-delimited string or a list/tuple of strings; trim each line."""
    if isinstance(lines, str):
        raw = lines.split("\n")
    elif isinstance(lines, (list, tuple)):
        raw = list(lines)
    else:
        raise InputTypeError(f"expected lines as str or list of str, got {type(lines).__name__}")
    out: List[str] = []
    for line in raw:
        if not isinstance(line, str):
            raise InputTypeError(f"expected each line as str, got {type(line).__name__}")
        out.append(line.strip())
    return out


def train(corpus, good_lines, bad_lines) -> GibberishModel:
    """Build the bigram table from corpus, then calibrate both baselines against it."""
    from .baseline import calibrate

    table = build_table(corpus)
    good = calibrate(good_lines, table)
    bad = calibrate(bad_lines, table)
    model = GibberishModel(table=table, baseline=Baseline(good=good, bad=bad))

    logger.info(
        "Trained model: %d distinct pairs from %d observations",
        len(table), sum(table.values()),
    )
    if not model.well_calibrated:
        logger.warning(
            "Model is not well calibrated: good.min=%.3f <= bad.max=%.3f",
            good.min, bad.max,
        )
    return model
