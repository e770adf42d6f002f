"""
Configuration loader for the sync trigger.
"""

import copy
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ..core.exceptions import TriggerConfigError


logger = logging.getLogger(__name__)

_TRUE_VALUES = {"1", "true", "yes", "on"}

DEFAULT_CONFIG: Dict[str, Any] = {
    "api": {
        "spec_path": "spec.json",
        "server": 0,
        "other_server": None,
        "headers": {},
        "timeout": 30,
        "max_retries": 3,
        "rate_limit_delay": 0.0,
    },
    "trigger": {
        "operation_id": None,
        "snapshot_key": None,
        "standard_snapshot_key": "updated_at",
        "array_splitting_key": None,
        "sync_param": None,
        "skip_snapshot": False,
        "verbose": False,
    },
    "state": {
        "type": "json",
        "path": "state/snapshots.json",
    },
    "output": {
        "type": "jsonl",
        "path": "out/events.jsonl",
    },
    "runner": {
        "interval_seconds": 60.0,
        "max_cycles": None,
    },
}


@dataclass
class ApiSettings:
    """
    How to reach the remote API.

    Attributes:
        spec_path: Path to the OpenAPI document
        server: Index into the document's servers list
        other_server: Explicit base URL, appended to the servers list
        headers: Static headers sent with every request
        timeout: Request timeout in seconds
        max_retries: Maximum attempts per request
        rate_limit_delay: Minimum seconds between requests
    """
    spec_path: Optional[str] = "spec.json"
    server: int = 0
    other_server: Optional[str] = None
    headers: Dict[str, str] = field(default_factory=dict)
    timeout: int = 30
    max_retries: int = 3
    rate_limit_delay: float = 0.0


@dataclass
class TriggerSettings:
    """
    Per-trigger node settings.

    Attributes:
        operation_id: API operation polled by this trigger
        snapshot_key: Dotted path to the record-level timestamp
        standard_snapshot_key: Fallback dotted path when snapshot_key is falsy
        array_splitting_key: Dotted path to the records inside the response
        sync_param: Request parameter that receives the current watermark
        skip_snapshot: Return extracted data instead of emitting events
        verbose: Log at DEBUG level
    """
    operation_id: Optional[str] = None
    snapshot_key: Optional[str] = None
    standard_snapshot_key: Optional[str] = "updated_at"
    array_splitting_key: Optional[str] = None
    sync_param: Optional[str] = None
    skip_snapshot: bool = False
    verbose: bool = False


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge override into a copy of base."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class TriggerConfig:
    """
    Configuration for the sync trigger.

    Loads a YAML configuration file on top of the defaults and applies
    environment variable overrides.
    """

    def __init__(self, config_path: Optional[Path] = None, overrides: Optional[Dict[str, Any]] = None):
        """
        Initialize configuration.

        Args:
            config_path: Path to YAML config file (optional)
            overrides: Nested dict merged over the loaded config (optional)
        """
        self.config_path = Path(config_path) if config_path else None
        loaded = self._load_config() if self.config_path else {}
        self.config = _merge(DEFAULT_CONFIG, loaded)
        if overrides:
            self.config = _merge(self.config, overrides)
        self._apply_env_overrides()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from YAML file."""
        if not self.config_path.exists():
            raise TriggerConfigError(f"Config file not found: {self.config_path}")

        logger.info(f"Loading config from: {self.config_path}")

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise TriggerConfigError(f"Invalid YAML in {self.config_path}: {e}") from e

        if config is None:
            return {}
        if not isinstance(config, dict):
            raise TriggerConfigError(f"Config root must be a mapping: {self.config_path}")
        return config

    def _apply_env_overrides(self) -> None:
        """Apply environment variable overrides to loaded config."""
        other_server = os.environ.get("TRIGGER_OTHER_SERVER")
        if other_server:
            self.config["api"]["other_server"] = other_server

        state_path = os.environ.get("TRIGGER_STATE_PATH")
        if state_path:
            self.config["state"]["path"] = state_path

        verbose = os.environ.get("TRIGGER_VERBOSE") or os.environ.get("debug")
        if verbose and verbose.lower() in _TRUE_VALUES:
            self.config["trigger"]["verbose"] = True

    def get_api_settings(self) -> ApiSettings:
        """Typed view of the 'api' section."""
        section = self.config.get("api") or {}
        try:
            return ApiSettings(
                spec_path=section.get("spec_path"),
                server=int(section.get("server") or 0),
                other_server=section.get("other_server"),
                headers=dict(section.get("headers") or {}),
                timeout=int(section.get("timeout", 30)),
                max_retries=int(section.get("max_retries", 3)),
                rate_limit_delay=float(section.get("rate_limit_delay", 0.0)),
            )
        except (TypeError, ValueError) as e:
            raise TriggerConfigError(f"Invalid 'api' configuration: {e}") from e

    def get_trigger_settings(self) -> TriggerSettings:
        """Typed view of the 'trigger' section."""
        section = self.config.get("trigger") or {}
        return TriggerSettings(
            operation_id=section.get("operation_id"),
            snapshot_key=section.get("snapshot_key"),
            standard_snapshot_key=section.get("standard_snapshot_key"),
            array_splitting_key=section.get("array_splitting_key"),
            sync_param=section.get("sync_param"),
            skip_snapshot=bool(section.get("skip_snapshot", False)),
            verbose=bool(section.get("verbose", False)),
        )

    def get_state_config(self) -> Dict[str, Any]:
        """Get snapshot store configuration."""
        return self.config.get("state", {})

    def get_output_config(self) -> Dict[str, Any]:
        """Get event sink configuration."""
        return self.config.get("output", {})

    def get_runner_config(self) -> Dict[str, Any]:
        """Get polling runner configuration."""
        return self.config.get("runner", {})

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value by dotted key."""
        keys = key.split(".")
        value = self.config

        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
            else:
                return default

        return value if value is not None else default

    def redacted(self) -> Dict[str, Any]:
        """Config copy safe for logging (header values masked)."""
        safe = copy.deepcopy(self.config)
        api = safe.get("api")
        if isinstance(api, dict) and api.get("headers"):
            api["headers"] = {name: "***" for name in api["headers"]}
        return safe
