"""Utility modules for Scenario Assist."""

from scenario_assist.utils.config import settings, validate_settings
from scenario_assist.utils.logging import setup_logging, redact_dict, summarize_action_types

__all__ = [
    'settings',
    'validate_settings',
    'setup_logging',
    'redact_dict',
    'summarize_action_types',
]
