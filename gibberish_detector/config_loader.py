"""
Settings loader with environment variable override support.

Env vars override YAML values, so one configs/detector.yaml serves every
deployment.

Override keys (all optional):
  GIBDETECT_MODEL_PATH        e.g. /srv/models/forum.json
  GIBDETECT_THRESHOLD         midpoint | avg_midpoint | good_min | bad_max
  GIBDETECT_USE_CACHE         true | false
  GIBDETECT_MAX_INPUT_CHARS   e.g. 50000, or "none" to disable the ceiling
  GIBDETECT_TEXT_COLUMN       column read by `gibdetect scan`
"""
from __future__ import annotations

import os
from typing import Optional

import yaml
from pydantic import ValidationError

from .config import Settings
from .errors import ConfigError
from .model.schema import describe


def _apply_env_overrides(raw: dict) -> dict:
    """Patch raw YAML dict with environment variable values where set."""

    def env(key: str, default=None):
        return os.environ.get(key, default)

    model_path = env("GIBDETECT_MODEL_PATH")
    if model_path:
        raw.setdefault("detector", {})["model_path"] = model_path

    threshold = env("GIBDETECT_THRESHOLD")
    if threshold:
        raw.setdefault("detector", {})["threshold"] = threshold

    use_cache = env("GIBDETECT_USE_CACHE")
    if use_cache:
        raw.setdefault("detector", {})["use_cache"] = use_cache

    max_chars = env("GIBDETECT_MAX_INPUT_CHARS")
    if max_chars:
        raw.setdefault("detector", {})["max_input_chars"] = (
            None if max_chars.strip().lower() == "none" else max_chars
        )

    text_column = env("GIBDETECT_TEXT_COLUMN")
    if text_column:
        raw.setdefault("scan", {})["text_column"] = text_column

    return raw


def load_config(path: Optional[str] = None) -> Settings:
    raw: dict = {}
    if path:
        try:
            with open(path, "r", encoding="utf-8") as f:
                raw = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Config {path} is not valid YAML: {e}") from None
        if not isinstance(raw, dict):
            raise ConfigError(f"Config {path} must be a mapping at the top level")
    raw = _apply_env_overrides(raw)
    try:
        return Settings.model_validate(raw)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings: {describe(e)}") from None
