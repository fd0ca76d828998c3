"""Error kinds raised by the detector. All are raised at the point of detection."""
from __future__ import annotations


class GibberishError(Exception):
    """Base class for every error raised by gibberish_detector."""


class InputTypeError(GibberishError, TypeError):
    """Text or line-set input of a type that cannot be treated as a string."""


class InputLengthError(GibberishError, ValueError):
    """Text longer than the configured max_input_chars ceiling."""


class ModelValidationError(GibberishError, ValueError):
    """Matrix or baseline that does not match the model contract."""


class ConfigError(GibberishError, ValueError):
    """Threshold strategy, cache flag or settings value that fails validation."""


class CalibrationError(GibberishError, ValueError):
    """Good/bad line set that cannot be reduced to baseline stats."""
