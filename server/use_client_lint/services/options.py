import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import ValidationError

from use_client_lint.config import CONFIG_FILE_NAMES
from use_client_lint.models import LintOptions

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """An options file could not be read or does not describe valid options."""


def find_config_file(start: Path) -> Optional[Path]:
    """Nearest options file in `start` (or its directory, for a file) and its parents."""
    current = start.resolve()
    if not current.is_dir():
        current = current.parent
    for directory in [current, *current.parents]:
        for name in CONFIG_FILE_NAMES:
            candidate = directory / name
            if candidate.is_file():
                return candidate
    return None


def read_options_file(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Could not read {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected a JSON object of rule options")
    return data


def load_options(
    config_path: Optional[Path] = None,
    start: Optional[Path] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> LintOptions:
    """
    Build the rule options from an options file plus explicit overrides.

    With no `config_path`, the nearest options file above `start` is used if
    there is one. Overrides use field names (snake_case) and win over file
    values key by key.
    """
    data: Dict[str, Any] = {}
    if config_path is None and start is not None:
        config_path = find_config_file(start)
    if config_path is not None:
        logger.info("Using options from %s", config_path)
        data.update(_validate(read_options_file(config_path), config_path).model_dump())
    if overrides:
        data.update(overrides)
    return _validate(data, config_path)


def _validate(data: Dict[str, Any], source: Optional[Path]) -> LintOptions:
    try:
        return LintOptions.model_validate(data)
    except ValidationError as e:
        where = str(source) if source is not None else "options"
        raise ConfigError(f"{where}: invalid rule options\n{e}") from e
