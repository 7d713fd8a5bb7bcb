"""Process-wide compiled tables, loaded once from an artifact.

The artifact path is read from ``UNIPROPS_TABLES``. Loading happens on the
first query and is cached for the life of the process; call
``reset_default_classifier`` after changing the variable (tests do).
"""
from __future__ import annotations

import logging
import os
from functools import cache
from pathlib import Path

from uniprops.artifact import DEFAULT_ARTIFACT_NAME, load_tables
from uniprops.classifier import CharacterClassifier
from uniprops.types import CategoryLabel

log = logging.getLogger(__name__)

ENV_VAR = "UNIPROPS_TABLES"


def artifact_path_from_env() -> Path:
    return Path(os.environ.get(ENV_VAR, DEFAULT_ARTIFACT_NAME))


@cache
def default_classifier() -> CharacterClassifier:
    path = artifact_path_from_env()
    if not path.exists():
        raise FileNotFoundError(
            f"compiled tables not found at {path}; set {ENV_VAR} or run scripts/compile_uniprops.py",
        )
    tables = load_tables(path)
    log.debug("Loaded compiled tables from %s", path)
    return CharacterClassifier(tables)


def reset_default_classifier() -> None:
    default_classifier.cache_clear()


def from_char(c: int | str) -> CategoryLabel | None:
    """General category of ``c`` from the process-wide tables."""
    return default_classifier().category(c)


def get_digit_value(c: int | str) -> int | None:
    """Decimal digit value of ``c`` from the process-wide tables."""
    return default_classifier().digit_value(c)
