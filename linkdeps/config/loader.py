"""Locate, read and validate the link-deps YAML config."""

import os
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import LinkDepsConfig

CONFIG_FILENAME = "link-deps.yaml"
USER_CONFIG_PATH = Path("~/.link-deps/config.yaml")

# ${NAME} or ${NAME:-fallback}
_ENV_REF = re.compile(r"\$\{(\w+)(?::-([^}]*))?\}")


def _candidate_paths(cli_path: str | None) -> list[Path]:
    """Config files in priority order; an explicit path always wins."""
    candidates = [Path(CONFIG_FILENAME), USER_CONFIG_PATH.expanduser()]
    if cli_path:
        candidates.insert(0, Path(cli_path))
    return candidates


def _read_yaml(path: Path) -> dict | None:
    """Parsed mapping from *path*, or None when the file is empty."""
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e
    if data is None:
        return None
    if not isinstance(data, dict):
        raise ValueError(
            f"Invalid config in {path}: expected a mapping, got {type(data).__name__}"
        )
    return data


def load_config(cli_path: str | None = None) -> LinkDepsConfig:
    """First non-empty config file wins: --config, ./link-deps.yaml, user config.

    Falls back to built-in defaults when none of them exists. Raises
    ValueError naming the offending file for unparsable or invalid settings.
    """
    for path in _candidate_paths(cli_path):
        if not path.is_file():
            continue
        data = _read_yaml(path)
        if data is None:
            continue
        try:
            return LinkDepsConfig.model_validate(_expand_env_vars(data))
        except ValidationError as e:
            raise ValueError(f"Invalid config in {path}: {e}") from e
    return LinkDepsConfig()


def _expand_env_vars(value: object) -> object:
    """Substitute ${NAME} and ${NAME:-fallback} inside every string value."""
    if isinstance(value, dict):
        return {key: _expand_env_vars(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_expand_env_vars(item) for item in value]
    if isinstance(value, str):
        return _ENV_REF.sub(lambda m: os.environ.get(m.group(1), m.group(2) or ""), value)
    return value

# Default YAML template for `link-deps config init`
DEFAULT_CONFIG_TEMPLATE = """\
# link-deps.yaml

# Change detection
fingerprint:
  algorithm: "sha1"            # any hashlib algorithm name
  workers: 8                   # concurrent file reads per dependency
  marker_file: ".link-deps-hash"
  always_exclude: [".git"]
  package_cache_dir: "node_modules"

# Package manager used for install / run / pack / add
package_manager:
  name: "auto"                 # auto | npm | yarn | pnpm

# Synchronization
sync:
  manifest_file: "package.json"
  link_key: "linkDependencies"
  install_dir: "node_modules"
  continue_on_error: false     # keep syncing siblings after a build/pack failure

# Watch mode
watch:
  debounce_seconds: 0.5
  # ignore_parts: [".git", "node_modules"]

# Logging
log_level: "info"              # debug | info | warn | error
log_format: "text"             # text | json
"""
