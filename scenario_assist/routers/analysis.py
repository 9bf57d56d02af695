"""Scenario analysis endpoints: issues, suggestions and locator insights."""

import logging
from typing import List
from fastapi import APIRouter

from scenario_assist.models.insights import LowScoreLocatorInsight, RecorderAISuggestion
from scenario_assist.models.requests import (
    NormalizedStepsResponse,
    ScenarioAnalysisResponse,
    ScenarioStepsRequest,
)
from scenario_assist.services.risk_analyzer import analyze_scenario_actions, get_readiness_score
from scenario_assist.services.scenario_parser import parse_recorded_actions
from scenario_assist.services.stability import normalize_actions_for_locator_healing
from scenario_assist.services.suggestion_engine import (
    build_low_score_locator_insights,
    build_recorder_ai_suggestions,
)
from scenario_assist.utils.logging import summarize_action_types

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/issues", response_model=ScenarioAnalysisResponse)
async def analyze_issues(request: ScenarioStepsRequest):
    """
    Scan a scenario for structural risks.

    Returns the issue list and the readiness score derived from it.
    """
    actions = parse_recorded_actions(request.steps)
    issues = analyze_scenario_actions(actions)
    score = get_readiness_score(issues)

    logger.info(
        f"Scenario analyzed: steps={summarize_action_types(actions)}, "
        f"issues={len(issues)}, readiness={score}"
    )

    return ScenarioAnalysisResponse(
        step_count=len(actions),
        readiness_score=score,
        issues=issues,
    )


@router.post("/suggestions", response_model=List[RecorderAISuggestion])
async def recorder_suggestions(request: ScenarioStepsRequest):
    """Advisory, step-targeted improvements for the recorder."""
    actions = parse_recorded_actions(request.steps)
    suggestions = build_recorder_ai_suggestions(actions)
    logger.info(f"Built {len(suggestions)} suggestion(s) for {len(actions)} step(s)")
    return suggestions


@router.post("/locator-insights", response_model=List[LowScoreLocatorInsight])
async def locator_insights(request: ScenarioStepsRequest):
    """Resolution hints for steps with a critical locator score."""
    actions = parse_recorded_actions(request.steps)
    return build_low_score_locator_insights(actions)


@router.post("/normalize-locators", response_model=NormalizedStepsResponse)
async def normalize_locators(request: ScenarioStepsRequest):
    """
    Return copies of the steps with locator bundles filled in.

    The caller decides whether to save them; nothing is persisted here.
    """
    actions = parse_recorded_actions(request.steps)
    return NormalizedStepsResponse(steps=normalize_actions_for_locator_healing(actions))
