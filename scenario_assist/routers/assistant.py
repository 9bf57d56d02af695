"""Assistant endpoints: prompt rendering, coaching and capability cards."""

import logging
from typing import List
from fastapi import APIRouter

from scenario_assist.models.insights import CoachHint, IntegrationArea, MobilePromptInput
from scenario_assist.models.requests import (
    CoachAnswerResponse,
    CoachHintsRequest,
    CoachQuestionRequest,
    PromptRequest,
    PromptResponse,
)
from scenario_assist.services.coach import (
    MOBILE_AI_INTEGRATION_AREAS,
    answer_recorder_question,
    build_contextual_coach_hints,
)
from scenario_assist.services.prompt_builder import build_mobile_automation_assistant_prompt
from scenario_assist.services.scenario_parser import parse_recorded_actions
from scenario_assist.utils.logging import redact_dict

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/integration-areas", response_model=List[IntegrationArea])
async def integration_areas():
    """Assistant capabilities and whether they are available yet."""
    return MOBILE_AI_INTEGRATION_AREAS


@router.post("/prompt", response_model=PromptResponse)
async def render_prompt(request: PromptRequest):
    """
    Render the assistant prompt for copy/paste or a backend call.

    Identical input always yields an identical prompt.
    """
    steps = parse_recorded_actions(request.steps)
    prompt_input = MobilePromptInput(
        objective=request.objective,
        app_package=request.app_package,
        scenario_name=request.scenario_name,
        selected_device=request.selected_device,
        additional_constraints=request.additional_constraints,
        steps=steps,
        include_device_context=request.include_device_context,
        include_safety_rules=request.include_safety_rules,
    )
    logger.info(
        "Rendering assistant prompt: "
        f"{redact_dict(request.model_dump(exclude={'steps', 'objective', 'additional_constraints'}))}"
    )
    return PromptResponse(prompt=build_mobile_automation_assistant_prompt(prompt_input))


@router.post("/coach/hints", response_model=List[CoachHint])
async def coach_hints(request: CoachHintsRequest):
    """Contextual hints for the recorder panel."""
    actions = parse_recorded_actions(request.steps)
    return build_contextual_coach_hints(request.context, actions)


@router.post("/coach/ask", response_model=CoachAnswerResponse)
async def coach_ask(request: CoachQuestionRequest):
    """Answer a recorder question from the supplied recorder state."""
    return CoachAnswerResponse(answer=answer_recorder_question(request.question, request.context))
