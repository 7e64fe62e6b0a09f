from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

import yaml


DEFAULT_CONFIG_PATH = "config/params.yaml"
API_KEY_ENV = "TOMTOM_API_KEY"


@dataclass(frozen=True)
class TomTomConfig:
    """
    Explicit client configuration.

    Params:
        api_key: TomTom developer key (required)
        base_url: API root; endpoint paths are appended to it
        timeout: per-request transport timeout (s)
    """
    api_key: str
    base_url: str = "https://api.tomtom.com"
    timeout: float = 10.0

    def __post_init__(self) -> None:
        if not self.api_key:
            raise ValueError(
                "TomTom API key is required. "
                f"Set {API_KEY_ENV} environment variable or tomtom.api_key in the config file"
            )
        if self.timeout <= 0:
            raise ValueError("timeout must be > 0")


def read_yaml(path: str) -> Dict:
    """Parsed YAML mapping, or {} when the file is missing or empty."""
    if not Path(path).exists():
        return {}
    with open(path, "r") as f:
        return yaml.safe_load(f) or {}


def load_config(path: str = DEFAULT_CONFIG_PATH, api_key: Optional[str] = None) -> TomTomConfig:
    """
    Build a TomTomConfig from the `tomtom:` section of a YAML file.
    Key precedence:
      - explicit `api_key` arg
      - tomtom.api_key in the file
      - env TOMTOM_API_KEY
    Missing file -> defaults (the key must then come from the arg or env).
    """
    section = read_yaml(path).get("tomtom", {}) or {}
    kwargs = {
        "api_key": api_key or section.get("api_key") or os.getenv(API_KEY_ENV) or "",
    }
    if section.get("base_url"):
        kwargs["base_url"] = str(section["base_url"]).rstrip("/")
    if section.get("timeout") is not None:
        kwargs["timeout"] = float(section["timeout"])
    return TomTomConfig(**kwargs)
