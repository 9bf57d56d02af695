"""
Defensive parsing of stored scenario steps.

Steps come from the scenario store as a list or as JSON text written by
older clients. Bad input degrades to fewer (or zero) actions; nothing
here raises.
"""

import json
import logging
from typing import Any, List

from pydantic import ValidationError

from scenario_assist.models.actions import RecordedAction, RecordedScenario

logger = logging.getLogger(__name__)


def parse_recorded_actions(raw_steps: Any) -> List[RecordedAction]:
    """
    Parse stored steps into actions.

    Args:
        raw_steps: A list of step mappings, JSON text of such a list,
            or anything else

    Returns:
        Actions in their stored order. Malformed optional fields read as
        missing; only entries without a known action type are skipped
    """
    if isinstance(raw_steps, (str, bytes)):
        try:
            raw_steps = json.loads(raw_steps)
        except (ValueError, TypeError) as e:
            logger.warning(f"Scenario steps are not valid JSON, treating as empty: {e}")
            return []

    if not isinstance(raw_steps, list):
        if raw_steps is not None:
            logger.warning(f"Scenario steps are {type(raw_steps).__name__}, expected a list")
        return []

    actions = []
    for position, item in enumerate(raw_steps):
        if isinstance(item, RecordedAction):
            actions.append(item)
            continue
        if not isinstance(item, dict):
            logger.warning(f"Skipping step {position + 1}: not an object")
            continue
        try:
            actions.append(RecordedAction.model_validate(item))
        except ValidationError as e:
            logger.warning(f"Skipping step {position + 1}: missing or unknown action type ({e.error_count()} error(s))")

    return actions


def scenario_actions(scenario: RecordedScenario) -> List[RecordedAction]:
    """Actions of a saved scenario."""
    return parse_recorded_actions(scenario.steps)
