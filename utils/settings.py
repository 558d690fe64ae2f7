"""
Settings Module
Checker configuration read from the environment and an optional JSON settings file.
"""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from comparator.structural_matcher import DEFAULT_THRESHOLD, MatchConfig

ENV_ENABLED = 'REUSE_CHECK_ENABLED'
ENV_THRESHOLD = 'REUSE_CHECK_THRESHOLD'
ENV_CATALOG = 'REUSE_CHECK_CATALOG'

_TRUE_VALUES = {'1', 'true', 'yes', 'on'}
_FALSE_VALUES = {'0', 'false', 'no', 'off'}


@dataclass(frozen=True)
class CheckerSettings:
    enabled: bool = True
    threshold: float = DEFAULT_THRESHOLD
    catalog_path: Optional[str] = None

    def __post_init__(self):
        # Validates the threshold eagerly so bad settings fail at load time
        MatchConfig(threshold=self.threshold)

    def to_match_config(self) -> MatchConfig:
        return MatchConfig(threshold=self.threshold)


def _parse_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean, got {value!r}")


def _parse_threshold(name: str, value: Any) -> float:
    if isinstance(value, bool):
        raise ValueError(f"{name} must be a number, got {value!r}")
    if isinstance(value, (int, float)):
        return value
    try:
        return float(str(value).strip())
    except ValueError:
        raise ValueError(f"{name} must be a number, got {value!r}") from None


def load_settings(settings_path: Union[str, Path, None] = None,
                  environ: Optional[Mapping[str, str]] = None) -> CheckerSettings:
    """Build settings from a JSON file, then apply environment overrides."""
    environ = os.environ if environ is None else environ
    values: Dict[str, Any] = {}

    if settings_path is not None:
        with open(settings_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Settings file {settings_path} must contain a JSON object")
        if 'enabled' in data:
            values['enabled'] = _parse_bool('enabled', data['enabled'])
        if 'threshold' in data:
            values['threshold'] = _parse_threshold('threshold', data['threshold'])
        if data.get('catalog_path'):
            values['catalog_path'] = str(data['catalog_path'])

    if environ.get(ENV_ENABLED):
        values['enabled'] = _parse_bool(ENV_ENABLED, environ[ENV_ENABLED])
    if environ.get(ENV_THRESHOLD):
        values['threshold'] = _parse_threshold(ENV_THRESHOLD, environ[ENV_THRESHOLD])
    if environ.get(ENV_CATALOG):
        values['catalog_path'] = environ[ENV_CATALOG]

    return CheckerSettings(**values)
