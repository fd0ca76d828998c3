"""Baseline calibration and threshold strategies."""
from __future__ import annotations
import logging
from typing import Callable, Dict, List, Union

from ..errors import CalibrationError, ConfigError
from .bigrams import split_lines
from .schema import BigramTable, GibberishModel, Stats
from .scoring import score_table

logger = logging.getLogger(__name__)

ThresholdFn = Callable[[GibberishModel], float]


def calibrate(lines, table: BigramTable) -> Stats:
    """Score each labeled line and reduce to min/max/avg. Lines with no pairs are skipped."""
    lines = split_lines(lines)
    if not lines:
        raise CalibrationError("Cannot calibrate against an empty line set")

    scores: List[float] = []
    for line in lines:
        s = score_table(line, table)
        if s is None:
            logger.debug("Skipping line with no character pairs: %r", line)
            continue
        scores.append(s)
    if not scores:
        raise CalibrationError(f"None of the {len(lines)} lines has a character pair to score")

    return Stats(min=min(scores), max=max(scores), avg=sum(scores) / len(scores))


def calculate_threshold(model: GibberishModel) -> float:
    """Midpoint between the weakest good line and the strongest bad line."""
    return (model.baseline.good.min + model.baseline.bad.max) / 2


def avg_midpoint(model: GibberishModel) -> float:
    return (model.baseline.good.avg + model.baseline.bad.avg) / 2


def good_min(model: GibberishModel) -> float:
    return model.baseline.good.min


def bad_max(model: GibberishModel) -> float:
    return model.baseline.bad.max


THRESHOLD_STRATEGIES: Dict[str, ThresholdFn] = {
    "midpoint": calculate_threshold,
    "avg_midpoint": avg_midpoint,
    "good_min": good_min,
    "bad_max": bad_max,
}


def resolve_threshold(strategy: Union[str, ThresholdFn]) -> ThresholdFn:
    if isinstance(strategy, str):
        fn = THRESHOLD_STRATEGIES.get(strategy)
        if fn is None:
            raise ConfigError(
                f"Unknown threshold strategy {strategy!r}; expected one of {sorted(THRESHOLD_STRATEGIES)}"
            )
        return fn
    if callable(strategy):
        return strategy
    raise ConfigError(f"threshold must be a strategy name or a callable, got {type(strategy).__name__}")
