"""Configuration loader: YAML files + environment variables, JSON purifier rule-sets."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv

from htmlfield.core.models import AppConfig, FieldSettings

logger = logging.getLogger(__name__)

PURIFIER_CONFIG_DIR = "htmlpurifier"
DEFAULT_CONFIG_FILE = "Default.json"


def _find_project_root() -> Path:
    """Walk up from cwd to find a directory containing pyproject.toml."""
    cwd = Path.cwd()
    for p in [cwd, *cwd.parents]:
        if (p / "pyproject.toml").exists():
            return p
    return cwd


def load_config(config_path: Optional[str] = None) -> AppConfig:
    """Load configuration from YAML + environment variables.

    Priority: env vars > .env file > YAML defaults.
    """
    root = _find_project_root()
    load_dotenv(root / ".env")

    yaml_path = Path(config_path) if config_path else root / "config" / "htmlfield.yaml"
    yaml_data: dict = {}
    if yaml_path.exists():
        with open(yaml_path) as f:
            yaml_data = yaml.safe_load(f) or {}

    field_data = dict(yaml_data.get("field", {}))
    purifier_config = os.getenv("HTMLFIELD_PURIFIER_CONFIG")
    if purifier_config:
        field_data["purifier_config"] = purifier_config
    field = FieldSettings(**field_data)

    return AppConfig(
        field=field,
        config_path=os.getenv("HTMLFIELD_CONFIG_PATH", yaml_data.get("config_path", str(root / "config"))),
        page_trigger=os.getenv("HTMLFIELD_PAGE_TRIGGER", yaml_data.get("page_trigger", "p")),
        catalog_path=os.getenv(
            "HTMLFIELD_CATALOG_PATH", yaml_data.get("catalog_path", str(root / "config" / "catalog.yaml"))
        ),
    )


def load_purifier_config(
    config_path: str | Path,
    file_name: Optional[str] = None,
    directory: str = PURIFIER_CONFIG_DIR,
) -> Optional[dict[str, Any]]:
    """Load a JSON rule-set from ``<config_path>/<directory>/<file_name>``.

    Falls back to ``Default.json``; returns None when neither exists.
    """
    file_name = file_name or DEFAULT_CONFIG_FILE
    path = Path(config_path) / directory / file_name

    if not path.is_file():
        if file_name != DEFAULT_CONFIG_FILE:
            logger.debug("Purifier config %s not found, trying %s", path, DEFAULT_CONFIG_FILE)
            return load_purifier_config(config_path, None, directory)
        return None

    try:
        return json.loads(path.read_text())
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in purifier config {path}: {exc}") from exc


def available_policies(config_path: str | Path, directory: str = PURIFIER_CONFIG_DIR) -> dict[str, str]:
    """Return {file_name: label} for the selectable rule-sets; ``""`` is the default."""
    options = {"": "Default"}
    path = Path(config_path) / directory
    if path.is_dir():
        for file in path.glob("*.json"):
            if file.name != DEFAULT_CONFIG_FILE:
                options[file.name] = file.stem
    return dict(sorted(options.items()))
