from __future__ import annotations
from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, ValidationError, field_validator

from .errors import ConfigError, ModelValidationError
from .model.baseline import ThresholdFn, resolve_threshold
from .model.schema import GibberishModel, coerce_model, describe
from .model.store import load_default_model


class DetectorConfig(BaseModel):
    """
    Immutable detector settings. Build with DetectorConfig.build(); "changing"
    a setting means replace(), which validates and returns a new value.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    model: GibberishModel = Field(default_factory=load_default_model)
    # strategy name (see THRESHOLD_STRATEGIES) or a Model -> float callable
    threshold: Any = "midpoint"
    use_cache: StrictBool = True
    max_input_chars: Optional[StrictInt] = Field(default=None, gt=0)

    @field_validator("model", mode="before")
    @classmethod
    def _model(cls, v):
        return coerce_model(v)

    @field_validator("threshold")
    @classmethod
    def _threshold(cls, v):
        resolve_threshold(v)
        return v

    @property
    def threshold_fn(self) -> ThresholdFn:
        return resolve_threshold(self.threshold)

    @classmethod
    def build(cls, **options) -> "DetectorConfig":
        try:
            return cls(**options)
        except ValidationError as e:
            field = e.errors()[0]["loc"][:1]
            if field == ("model",):
                raise ModelValidationError(f"Invalid model: {describe(e)}") from None
            raise ConfigError(f"Invalid detector config: {describe(e)}") from None

    def options(self) -> Dict[str, Any]:
        return {name: getattr(self, name) for name in type(self).model_fields}

    def replace(self, **changes) -> "DetectorConfig":
        return DetectorConfig.build(**{**self.options(), **changes})


class DetectorSettings(BaseModel):
    model_path: Optional[str] = None  # None -> bundled model
    threshold: str = "midpoint"
    use_cache: bool = True
    max_input_chars: Optional[int] = 100_000


class ScanSettings(BaseModel):
    text_column: str = "text"
    score_column: str = "gibberish_score"
    verdict_column: str = "is_gibberish"


class Settings(BaseModel):
    detector: DetectorSettings = Field(default_factory=DetectorSettings)
    scan: ScanSettings = Field(default_factory=ScanSettings)
