"""YAML/JSON loaders for engine config, enrollment forms and backend records."""

import logging
import os
from pathlib import Path
from typing import Any, Optional

import pydantic
import yaml

from . import constants
from .schema import EngineConfig, EnrollmentRecord, RawEnrollmentForm

logger = logging.getLogger(__name__)


def find_config_file() -> Optional[Path]:
    """
    Locate the engine config file.

    Search order (highest to lowest priority):
    1. ENROLLSCHED_CONFIG environment variable
    2. enrollsched.yaml in current directory

    Returns:
        Path to the config file, or None if not found
    """
    if env_file := os.getenv(constants.ENV_CONFIG_FILE):
        path = Path(env_file)
        if path.is_file():
            return path
        logger.warning("ENROLLSCHED_CONFIG points to non-existent file: %s", env_file)

    cwd_file = Path.cwd() / constants.CONFIG_FILENAME
    if cwd_file.is_file():
        return cwd_file

    return None


def load_config(filepath: Optional[Path] = None) -> EngineConfig:
    """
    Load engine config, falling back to defaults.

    Args:
        filepath: Optional explicit config path. If None, uses find_config_file().

    Returns:
        EngineConfig (defaults when no file is found or the file is invalid)
    """
    path = filepath or find_config_file()
    if path is None:
        logger.debug("No config file found, using defaults")
        return EngineConfig()

    try:
        data = load_document(path)
        if data is None:
            logger.warning("Empty config file: %s", path)
            return EngineConfig()
        config = EngineConfig(**data)
        logger.debug("Loaded config from: %s", path)
        return config
    except (OSError, yaml.YAMLError, pydantic.ValidationError, TypeError) as e:
        logger.warning("Failed to load config from '%s', using defaults: %s", path, e)
        return EngineConfig()


def load_document(filepath: Path) -> Any:
    """
    Read a YAML or JSON document (JSON is parsed as YAML).

    Raises:
        OSError: If the file cannot be read
        yaml.YAMLError: If the document cannot be parsed
    """
    with Path(filepath).open(encoding="utf-8") as f:
        return yaml.safe_load(f)


def load_form(filepath: Path) -> RawEnrollmentForm:
    """
    Load an enrollment form snapshot.

    Raises:
        OSError, yaml.YAMLError: If the file cannot be read or parsed
        ValueError: If the document is not a mapping
        pydantic.ValidationError: If the form fields have the wrong shape
    """
    data = load_document(filepath)
    if not isinstance(data, dict):
        raise ValueError(f"Form file must contain a mapping: {filepath}")
    logger.info("Loaded form from: %s", filepath)
    return RawEnrollmentForm(**data)


def load_enrollments(filepath: Path) -> list[EnrollmentRecord]:
    """
    Load one or more enrollment records as returned by the backend.

    Accepts a single record, a list of records, or a mapping with an
    ``enrollments`` (or ``data``) list.

    Raises:
        OSError, yaml.YAMLError: If the file cannot be read or parsed
        ValueError: If the document has no recognizable records
        pydantic.ValidationError: If a record violates the schedule schema
    """
    data = load_document(filepath)
    if data is None:
        logger.warning("Empty enrollments file: %s", filepath)
        return []

    if isinstance(data, dict):
        for key in ("enrollments", "data"):
            if isinstance(data.get(key), list):
                data = data[key]
                break
        else:
            data = [data]

    if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
        raise ValueError(f"Enrollments file must contain records: {filepath}")

    records = [EnrollmentRecord(**item) for item in data]
    logger.info("Loaded %d enrollment(s) from: %s", len(records), filepath)
    return records
