"""Batch-classify a text column of a CSV/Excel file."""
from __future__ import annotations
import os
import logging
import pandas as pd
from typing import Tuple

from .config import ScanSettings
from .detector import Detector
from .errors import ConfigError
from .model.scoring import is_gibberish_score

logger = logging.getLogger(__name__)


def read_table(path: str) -> pd.DataFrame:
    ext = os.path.splitext(path)[1].lower()
    if ext == ".xlsx":
        return pd.read_excel(path)
    if ext == ".csv":
        return pd.read_csv(path)
    raise ConfigError(f"Unsupported input file type: {path} (expected .csv or .xlsx)")


def write_table(df: pd.DataFrame, path: str) -> str:
    parent = os.path.dirname(path)
    ext = os.path.splitext(path)[1].lower()
    if ext not in (".csv", ".xlsx"):
        raise ConfigError(f"Unsupported output file type: {path} (expected .csv or .xlsx)")
    if parent:
        os.makedirs(parent, exist_ok=True)
    if ext == ".xlsx":
        df.to_excel(path, index=False)
    else:
        df.to_csv(path, index=False)
    return path


def score_frame(df: pd.DataFrame, detector: Detector, settings: ScanSettings) -> pd.DataFrame:
    """Return a copy of df with score and verdict columns appended."""
    df = df.copy()
    df.columns = [str(c).strip() for c in df.columns]
    col = settings.text_column
    if col not in df.columns:
        raise ConfigError(f"Missing text column [{col}]; found: {list(df.columns)}")

    threshold = detector.threshold()
    texts = df[col].apply(lambda x: "" if pd.isna(x) else str(x))
    scores = [detector.score(t) for t in texts]
    df[settings.score_column] = scores
    df[settings.verdict_column] = [is_gibberish_score(s, threshold) for s in scores]
    return df


def run_scan(detector: Detector, input_path: str, output_path: str, settings: ScanSettings) -> Tuple[str, int, int]:
    df = score_frame(read_table(input_path), detector, settings)
    flagged = int(df[settings.verdict_column].sum())
    logger.info("Scanned %d rows from %s: %d flagged", len(df), input_path, flagged)
    return write_table(df, output_path), len(df), flagged
