"""Load ``seminar.yaml``: file discovery, ${ENV} expansion, env overrides.

A committee usually keeps one config per seminar series next to its
database. Without any file every setting falls back to
``seminar.config.defaults``.
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml

from seminar.config.schema import SeminarConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATHS = [
    Path("seminar.yaml"),
    Path("~/.seminar/config.yaml"),
]

# Environment variables that override a single dotted setting.
ENV_OVERRIDES = {
    "SEMINAR_DATABASE_PATH": ("database", "path"),
    "SEMINAR_REPORT_DIR": ("output", "report_dir"),
}

_ENV_PATTERN = re.compile(r"\$\{(\w+)\}")


def _expand_env_vars(value: Any) -> Any:
    """Replace ${NAME} in every string of a parsed YAML tree.

    Unset variables expand to an empty string.
    """
    if isinstance(value, str):
        return _ENV_PATTERN.sub(lambda m: os.environ.get(m.group(1), ""), value)
    if isinstance(value, dict):
        return {k: _expand_env_vars(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_expand_env_vars(v) for v in value]
    return value


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    for env_name, (section, key) in ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value:
            logger.debug("%s overrides %s.%s", env_name, section, key)
            block = raw.get(section) or {}
            raw[section] = {**block, key: value}
    return raw


def _find_config_file(explicit_path: str | Path | None = None) -> Path | None:
    """First existing config file, or None to run on defaults."""
    if explicit_path is not None:
        path = Path(explicit_path).expanduser()
        if not path.exists():
            logger.warning("Config file not found: %s", path)
            return None
        return path

    for candidate in DEFAULT_CONFIG_PATHS:
        path = candidate.expanduser()
        if path.exists():
            return path
    return None


def load_config(path: str | Path | None = None) -> SeminarConfig:
    """Build the validated configuration.

    Looks at ``path`` if given, else ``./seminar.yaml``, else
    ``~/.seminar/config.yaml``. ``${VAR}`` references in string values are
    expanded, then ``SEMINAR_DATABASE_PATH`` / ``SEMINAR_REPORT_DIR`` win
    over whatever the file says.

    Raises pydantic's ``ValidationError`` for out-of-range settings.
    """
    config_path = _find_config_file(path)
    raw: dict[str, Any] = {}
    if config_path is not None:
        logger.info("Loading config from %s", config_path)
        raw = _expand_env_vars(yaml.safe_load(config_path.read_text()) or {})
    else:
        logger.info("No seminar.yaml found, using defaults")

    config = SeminarConfig.model_validate(_apply_env_overrides(raw))
    logger.debug(
        "Config v%d: scores %d-%d, %d boards",
        config.version, config.scoring.min_score, config.scoring.max_score, config.boards.count,
    )
    return config


def write_config(config: SeminarConfig, path: str | Path) -> Path:
    """Dump ``config`` as YAML so a committee can edit it."""
    path = Path(path).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(config.model_dump(), sort_keys=False))
    logger.info("Wrote config to %s", path)
    return path


def resolve_path(path_str: str) -> Path:
    """Expand ``~`` and make a configured path absolute."""
    return Path(path_str).expanduser().resolve()
