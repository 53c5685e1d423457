"""YAML config loading with env var expansion."""

import os
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import JJAnalyzeConfig

CONFIG_FILENAME = "jj-analyze.yaml"
USER_CONFIG_PATH = Path(".jj-analyze") / "config.yaml"

_ENV_VAR = re.compile(r"\$\{(\w+)\}")


def _search_paths(cli_path: str | None) -> list[Path]:
    """An explicit ``--config`` is the only candidate and must exist."""
    if cli_path:
        path = Path(cli_path)
        if not path.is_file():
            raise ValueError(f"Config file not found: {cli_path}")
        return [path]
    return [Path(CONFIG_FILENAME), Path.home() / USER_CONFIG_PATH]


def _read_config(path: Path) -> JJAnalyzeConfig | None:
    try:
        raw = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise ValueError(f"Invalid config in {path}: expected a mapping")
    try:
        return JJAnalyzeConfig.model_validate(_expand_env_vars(raw))
    except ValidationError as e:
        raise ValueError(f"Invalid config in {path}: {e}") from e


def load_config(cli_path: str | None = None) -> JJAnalyzeConfig:
    """First non-empty config among ``--config``, ``./jj-analyze.yaml`` and
    ``~/.jj-analyze/config.yaml``, else defaults."""
    for path in _search_paths(cli_path):
        if not path.is_file():
            continue
        config = _read_config(path)
        if config is not None:
            return config
    return JJAnalyzeConfig()


def _expand_env_vars(obj: object) -> object:
    """Substitute ``${VAR}`` in every string; unset variables expand to ''."""
    if isinstance(obj, str):
        return _ENV_VAR.sub(lambda m: os.environ.get(m.group(1), ""), obj)
    if isinstance(obj, dict):
        return {key: _expand_env_vars(value) for key, value in obj.items()}
    if isinstance(obj, list):
        return [_expand_env_vars(item) for item in obj]
    return obj


# Default YAML template for `jj-analyze config init`
DEFAULT_CONFIG_TEMPLATE = """\
# jj-analyze.yaml

# Analysis
analyze:
  context: "lazy"              # eager | lazy | predicate
  enabled: true                # false prints the plain tree without cost/context colors

# Output
ui:
  color: "auto"                # auto | always | never

# Logging
log_level: "warn"              # debug | info | warn | error
"""
