"""
Configuration loading for the sync trigger.
"""

from .config_loader import TriggerConfig, ApiSettings, TriggerSettings, DEFAULT_CONFIG

__all__ = ["TriggerConfig", "ApiSettings", "TriggerSettings", "DEFAULT_CONFIG"]
