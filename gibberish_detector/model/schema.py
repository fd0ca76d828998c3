"""
Model value types and the portable {matrix, baseline} form.

In memory a model holds its table as a read-only mapping (pair -> count). The serialized
form keeps the matrix as a list of {"x": pair, "y": count} records, which is
what ships on disk and what external callers usually hand us.
"""
from __future__ import annotations
from types import MappingProxyType
from typing import Annotated, Any, Dict, List, Mapping

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from ..errors import ModelValidationError

PairKey = Annotated[str, Field(strict=True, min_length=2, max_length=2)]
PairCount = Annotated[int, Field(strict=True, gt=0)]
Score = Annotated[float, Field(strict=True, allow_inf_nan=False)]

BigramTable = Mapping[str, int]


class Stats(BaseModel):
    model_config = ConfigDict(frozen=True)

    min: Score
    max: Score
    avg: Score


class Baseline(BaseModel):
    model_config = ConfigDict(frozen=True)

    good: Stats
    bad: Stats


class MatrixEntry(BaseModel):
    x: PairKey
    y: PairCount


class ModelPayload(BaseModel):
    matrix: List[MatrixEntry]
    baseline: Baseline

    @field_validator("matrix")
    @classmethod
    def _unique_pairs(cls, v: List[MatrixEntry]) -> List[MatrixEntry]:
        seen = set()
        for entry in v:
            if entry.x in seen:
                raise ValueError(f"duplicate pair {entry.x!r}")
            seen.add(entry.x)
        return v


class GibberishModel(BaseModel):
    """Trained artifact: bigram table plus good/bad baseline stats. Read-only."""
    model_config = ConfigDict(frozen=True)

    table: Dict[PairKey, PairCount]
    baseline: Baseline

    @field_validator("table")
    @classmethod
    def _read_only(cls, v: Dict[str, int]) -> BigramTable:
        return MappingProxyType(dict(v))

    @property
    def well_calibrated(self) -> bool:
        return self.baseline.good.min > self.baseline.bad.max

    def to_payload(self) -> Dict[str, Any]:
        ordered = sorted(self.table.items(), key=lambda kv: (-kv[1], kv[0]))
        return {
            "matrix": [{"x": k, "y": v} for k, v in ordered],
            "baseline": self.baseline.model_dump(),
        }

    @classmethod
    def from_payload(cls, payload: Any) -> "GibberishModel":
        try:
            p = ModelPayload.model_validate(payload)
        except ValidationError as e:
            raise ModelValidationError(f"Malformed model: {describe(e)}") from None
        return cls(table={e.x: e.y for e in p.matrix}, baseline=p.baseline)


_TABLE = TypeAdapter(Dict[PairKey, PairCount])
_MATRIX = TypeAdapter(List[MatrixEntry])


def describe(e: ValidationError) -> str:
    err = e.errors()[0]
    loc = ".".join(str(p) for p in err["loc"])
    return f"{loc}: {err['msg']}" if loc else err["msg"]


def is_valid_matrix(candidate: Any) -> bool:
    """True for a pair->count mapping or a list of {"x", "y"} records."""
    try:
        coerce_table(candidate, allow_model=False)
    except ModelValidationError:
        return False
    return True


def is_valid_model(candidate: Any) -> bool:
    if isinstance(candidate, GibberishModel):
        # re-check in place; the instance may have been built with model_construct()
        candidate = {
            "matrix": [{"x": k, "y": v} for k, v in candidate.table.items()],
            "baseline": candidate.baseline.model_dump(),
        }
    if not isinstance(candidate, Mapping):
        return False
    try:
        GibberishModel.from_payload(candidate)
    except ModelValidationError:
        return False
    return True


def coerce_model(candidate: Any) -> GibberishModel:
    if isinstance(candidate, GibberishModel):
        return candidate
    if isinstance(candidate, Mapping):
        return GibberishModel.from_payload(candidate)
    raise ModelValidationError(f"Malformed model: expected a mapping, got {type(candidate).__name__}")


def coerce_table(candidate: Any, allow_model: bool = True) -> BigramTable:
    """
    Resolve a table from whatever the caller passed.

    A full model (instance or payload) is accepted for convenience unless
    allow_model is False; its table is used.
    """
    if isinstance(candidate, GibberishModel):
        if allow_model:
            return candidate.table
        raise ModelValidationError("Malformed matrix: got a model")
    if isinstance(candidate, Mapping):
        if "matrix" in candidate:
            if allow_model:
                return GibberishModel.from_payload(candidate).table
            raise ModelValidationError("Malformed matrix: got a model")
        try:
            return MappingProxyType(_TABLE.validate_python(dict(candidate)))
        except ValidationError as e:
            raise ModelValidationError(f"Malformed matrix: {describe(e)}") from None
    if isinstance(candidate, (list, tuple)):
        try:
            entries = _MATRIX.validate_python(list(candidate))
        except ValidationError as e:
            raise ModelValidationError(f"Malformed matrix: {describe(e)}") from None
        table: Dict[str, int] = {}
        for entry in entries:
            if entry.x in table:
                raise ModelValidationError(f"Malformed matrix: duplicate pair {entry.x!r}")
            table[entry.x] = entry.y
        return MappingProxyType(table)
    raise ModelValidationError(f"Malformed matrix: expected a mapping or list, got {type(candidate).__name__}")
