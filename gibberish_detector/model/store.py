"""Load and save models as JSON; locate the bundled model and its training data."""
from __future__ import annotations
import os
import json
from functools import lru_cache

from ..errors import ModelValidationError
from .schema import GibberishModel

DATA_DIR = os.path.normpath(os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", "data"))
DEFAULT_MODEL_PATH = os.path.join(DATA_DIR, "model.json")
DEFAULT_CORPUS_PATH = os.path.join(DATA_DIR, "corpus.txt")
DEFAULT_GOOD_PATH = os.path.join(DATA_DIR, "good.txt")
DEFAULT_BAD_PATH = os.path.join(DATA_DIR, "bad.txt")


def read_text(path: str) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def load_model(path: str) -> GibberishModel:
    try:
        payload = json.loads(read_text(path))
    except json.JSONDecodeError as e:
        raise ModelValidationError(f"Model file {path} is not valid JSON: {e}") from None
    return GibberishModel.from_payload(payload)


def save_model(model: GibberishModel, path: str) -> str:
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(model.to_payload(), f, indent=2)
        f.write("\n")
    return path


@lru_cache(maxsize=1)
def load_default_model() -> GibberishModel:
    return load_model(DEFAULT_MODEL_PATH)
