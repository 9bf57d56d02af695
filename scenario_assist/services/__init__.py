"""Analysis services for Scenario Assist."""

from scenario_assist.services.stability import (
    has_stable_locator,
    locator_score,
    is_weak_class_only_xpath,
    normalize_actions_for_locator_healing,
)
from scenario_assist.services.risk_analyzer import analyze_scenario_actions, get_readiness_score
from scenario_assist.services.suggestion_engine import (
    build_recorder_ai_suggestions,
    build_low_score_locator_insights,
)
from scenario_assist.services.explainer import (
    explain_recorded_script,
    explain_replay_failure,
    suggest_scenario_organization,
)
from scenario_assist.services.prompt_builder import build_mobile_automation_assistant_prompt
from scenario_assist.services.coach import (
    MOBILE_AI_INTEGRATION_AREAS,
    answer_recorder_question,
    build_contextual_coach_hints,
)
from scenario_assist.services.flow_inference import FlowPatternLoader, get_flow_pattern_table, infer_flow_from_text
from scenario_assist.services.scenario_parser import parse_recorded_actions, scenario_actions

__all__ = [
    "has_stable_locator",
    "locator_score",
    "is_weak_class_only_xpath",
    "normalize_actions_for_locator_healing",
    "analyze_scenario_actions",
    "get_readiness_score",
    "build_recorder_ai_suggestions",
    "build_low_score_locator_insights",
    "explain_recorded_script",
    "explain_replay_failure",
    "suggest_scenario_organization",
    "build_mobile_automation_assistant_prompt",
    "MOBILE_AI_INTEGRATION_AREAS",
    "answer_recorder_question",
    "build_contextual_coach_hints",
    "FlowPatternLoader",
    "get_flow_pattern_table",
    "infer_flow_from_text",
    "parse_recorded_actions",
    "scenario_actions",
]
