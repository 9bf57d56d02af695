"""Explanation endpoints: script walkthrough, replay failures, organization."""

import logging
from fastapi import APIRouter

from scenario_assist.models.insights import (
    ReplayFailureExplanation,
    ScenarioOrganizationSuggestion,
    ScriptExplanation,
)
from scenario_assist.models.requests import (
    OrganizationRequest,
    ReplayFailureRequest,
    ScenarioStepsRequest,
)
from scenario_assist.services.explainer import (
    explain_recorded_script,
    explain_replay_failure,
    suggest_scenario_organization,
)
from scenario_assist.services.scenario_parser import parse_recorded_actions

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/script", response_model=ScriptExplanation)
async def explain_script(request: ScenarioStepsRequest):
    """Plain-English walkthrough of the enabled steps."""
    actions = parse_recorded_actions(request.steps)
    return explain_recorded_script(actions)


@router.post("/failure", response_model=ReplayFailureExplanation)
async def explain_failure(request: ReplayFailureRequest):
    """Classify a replay failure message and list remediation steps."""
    failed_action = None
    if request.failed_action is not None:
        parsed = parse_recorded_actions([request.failed_action])
        failed_action = parsed[0] if parsed else None

    explanation = explain_replay_failure(request.message, failed_action)
    logger.info(
        f"Replay failure explained: category={explanation.category.value}, "
        f"confidence={explanation.confidence}"
    )
    return explanation


@router.post("/organize", response_model=ScenarioOrganizationSuggestion)
async def organize_scenario(request: OrganizationRequest):
    """Suggest a scenario name, tags and suites."""
    actions = parse_recorded_actions(request.steps)
    return suggest_scenario_organization(actions, request.app_package, request.current_name)
