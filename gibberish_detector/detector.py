"""
Gibberish Detector facade

Ties the pieces together:
  1. Sanitize: canonical lowercase character stream
  2. Score: average bigram weight against the model table
  3. Threshold: strategy applied to the model baseline
  4. Verdict: score at or below the threshold is gibberish

Usage:
    detector = Detector()
    detector.detect("nakjsfnzgfaekjajdgli")   # True
    strict = detector.with_options(threshold="good_min")
"""
from __future__ import annotations

import math
import logging
from typing import Any, Optional

from .config import DetectorConfig, Settings
from .errors import ConfigError, InputLengthError, ModelValidationError
from .model import schema
from .model.bigrams import train
from .model.schema import GibberishModel, coerce_model, coerce_table
from .model.scoring import is_gibberish_score, score_table
from .model.store import load_model

logger = logging.getLogger(__name__)


class Detector:
    """
    Holds one validated DetectorConfig. Create via Detector(), Detector(**options)
    or from_config(). Never mutated: with_options() returns a new Detector.
    """

    train = staticmethod(train)
    is_valid_model = staticmethod(schema.is_valid_model)
    is_valid_matrix = staticmethod(schema.is_valid_matrix)

    def __init__(self, config: Optional[DetectorConfig] = None, **options):
        if config is not None and options:
            raise ConfigError("Pass either a DetectorConfig or keyword options, not both")
        self._config = config if config is not None else DetectorConfig.build(**options)

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    @classmethod
    def from_config(cls, cfg: Settings, model_path: Optional[str] = None) -> "Detector":
        """Build from file/env Settings; model_path beats cfg.detector.model_path."""
        d = cfg.detector
        options: dict = {
            "threshold": d.threshold,
            "use_cache": d.use_cache,
            "max_input_chars": d.max_input_chars,
        }
        path = model_path or d.model_path
        if path:
            logger.info("Loading model from %s", path)
            options["model"] = load_model(path)
        return cls(DetectorConfig.build(**options))

    def with_options(self, **changes) -> "Detector":
        return Detector(self._config.replace(**changes))

    @property
    def config(self) -> DetectorConfig:
        return self._config

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def threshold(self, model: Any = None) -> float:
        model = self._config.model if model is None else coerce_model(model)
        value = self._config.threshold_fn(model)
        if isinstance(value, bool) or not isinstance(value, (int, float)) or math.isnan(value):
            raise ConfigError(f"threshold function returned {value!r}, expected a real number")
        return float(value)

    def score(self, text, matrix_or_model: Any = None) -> Optional[float]:
        """Average bigram weight of text; None when it has no character pairs."""
        self._check_length(text)
        if matrix_or_model is None:
            table = self._config.model.table
        else:
            table = coerce_table(matrix_or_model)
        return score_table(text, table, self._config.use_cache)

    def detect(self, text, model: Any = None) -> bool:
        """True when text is classified as gibberish."""
        if model is None:
            use_model: GibberishModel = self._config.model
        elif not schema.is_valid_model(model):
            raise ModelValidationError("Malformed learning model provided")
        else:
            use_model = coerce_model(model)

        self._check_length(text)
        value = score_table(text, use_model.table, self._config.use_cache)
        return is_gibberish_score(value, self.threshold(use_model))

    is_gibberish = detect

    def _check_length(self, text) -> None:
        limit = self._config.max_input_chars
        if limit is not None and isinstance(text, str) and len(text) > limit:
            raise InputLengthError(f"Input of {len(text)} chars exceeds max_input_chars={limit}")
