#!/usr/bin/env python3
"""
config_utils.py - Locate MissionXML settings.

Checks (in order):
1. MISSIONXML_STORE and MISSIONXML_EXPORT_DIR environment variables
2. missionxml.yaml in the working directory
3. Built-in defaults

missionxml.yaml:

    store_path: .missionxml/editing_state.json
    export_dir: exports
    assessment_key: MissionEditingAssessmentSA
    overview_key: MissionEditingOverviewSA

Relative paths are resolved against the directory holding missionxml.yaml.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from missionxml.errors import ConfigurationError


CONFIG_FILENAME = "missionxml.yaml"

DEFAULT_STORE_PATH = Path(".missionxml") / "editing_state.json"
DEFAULT_EXPORT_DIR = Path("exports")

# Keys the editor has always used for the staged mission
DEFAULT_ASSESSMENT_KEY = "MissionEditingAssessmentSA"
DEFAULT_OVERVIEW_KEY = "MissionEditingOverviewSA"

KNOWN_KEYS = {"store_path", "export_dir", "assessment_key", "overview_key"}


@dataclass(frozen=True)
class MissionConfig:
    store_path: Path
    export_dir: Path
    assessment_key: str = DEFAULT_ASSESSMENT_KEY
    overview_key: str = DEFAULT_OVERVIEW_KEY


def load_config_file(config_file: Path) -> Dict[str, Any]:
    """Read missionxml.yaml; a missing file is an empty config."""
    if not config_file.is_file():
        return {}

    try:
        data = yaml.safe_load(config_file.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_file}: {e}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"{config_file} must contain a mapping, got {type(data).__name__}")

    unknown = set(data) - KNOWN_KEYS
    if unknown:
        raise ConfigurationError(
            f"Unknown setting(s) in {config_file}: {', '.join(sorted(unknown))}"
        )

    for key, value in data.items():
        if not isinstance(value, str) or not value.strip():
            raise ConfigurationError(f"'{key}' in {config_file} must be a non-empty string")

    return data


def load_config(
    root: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> MissionConfig:
    """
    Build the effective configuration.

    Args:
        root: Directory to look for missionxml.yaml in (default: cwd)
        environ: Environment mapping (default: os.environ)
    """
    root = Path(root) if root is not None else Path.cwd()
    environ = os.environ if environ is None else environ

    data = load_config_file(root / CONFIG_FILENAME)

    store_path = Path(environ.get("MISSIONXML_STORE") or data.get("store_path") or DEFAULT_STORE_PATH)
    export_dir = Path(environ.get("MISSIONXML_EXPORT_DIR") or data.get("export_dir") or DEFAULT_EXPORT_DIR)

    if not store_path.is_absolute():
        store_path = root / store_path
    if not export_dir.is_absolute():
        export_dir = root / export_dir

    return MissionConfig(
        store_path=store_path,
        export_dir=export_dir,
        assessment_key=data.get("assessment_key", DEFAULT_ASSESSMENT_KEY),
        overview_key=data.get("overview_key", DEFAULT_OVERVIEW_KEY),
    )
