"""Configuration loading (``xerlens.yaml``), with defaults."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from xerlens.errors import ConfigError

CONFIG_FILE_NAME = "xerlens.yaml"

DEFAULT_CONFIG = {
    "encoding": "utf-8-sig",
    "encoding_errors": "replace",
    "log_dir": None,
    "logging_fsync": False,
    "logging_tail_bytes": 2_097_152,  # 2 MB
    "export_format": "csv",
}


def load_config(config_dir: Path) -> dict[str, Any]:
    """Load configuration from ``xerlens.yaml``, with defaults.

    A relative ``log_dir`` is resolved against *config_dir*.

    Args:
        config_dir: Directory that may contain ``xerlens.yaml``.

    Returns:
        Merged configuration dict.

    Raises:
        ConfigError: If the file is not valid YAML or not a mapping.
    """
    config = dict(DEFAULT_CONFIG)
    config_path = config_dir / CONFIG_FILE_NAME
    if config_path.exists():
        try:
            user_config = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(str(config_path), str(exc)) from exc
        if not isinstance(user_config, dict):
            raise ConfigError(str(config_path), "top level must be a mapping")
        config.update(user_config)

    log_dir = config.get("log_dir")
    if log_dir is not None:
        log_path = Path(log_dir)
        if not log_path.is_absolute():
            log_path = config_dir / log_path
        config["log_dir"] = log_path

    return config


def read_export_text(path: Path, config: dict[str, Any]) -> str:
    """Read and decode an export file using the configured encoding."""
    data = path.read_bytes()
    return data.decode(config["encoding"], errors=config["encoding_errors"])
