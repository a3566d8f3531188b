"""Definitions loader — JSON or YAML documents into an ``Environment``."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from alias_graph.environment import Environment
from alias_graph.errors import DefinitionsError
from alias_graph.loader.schema import AliasEntry, DefinitionsDocument, ModuleAliasEntry

logger = logging.getLogger(__name__)

_YAML_SUFFIXES = {".yaml", ".yml"}


def parse_document(data: Any) -> DefinitionsDocument:
    """Validate already-decoded data as a definitions document."""
    if data is None:
        data = {}
    try:
        return DefinitionsDocument.model_validate(data)
    except ValidationError as e:
        raise DefinitionsError(f"Invalid definitions document: {e}") from e


def read_document(path: Path) -> DefinitionsDocument:
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise DefinitionsError(f"Cannot read {path}: {e}") from e

    if path.suffix.lower() in _YAML_SUFFIXES:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise DefinitionsError(f"Invalid YAML in {path}: {e}") from e
    else:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise DefinitionsError(f"Invalid JSON in {path}: {e}") from e

    return parse_document(data)


def load_definitions(path: Path) -> Environment:
    """Read *path* and build the alias environment it describes."""
    document = read_document(path)
    env = document.to_environment()
    logger.info(
        "loaded %d aliases and %d module aliases from %s",
        len(document.aliases), len(document.module_aliases), path,
    )
    return env


__all__ = [
    "AliasEntry",
    "DefinitionsDocument",
    "ModuleAliasEntry",
    "load_definitions",
    "parse_document",
    "read_document",
]
