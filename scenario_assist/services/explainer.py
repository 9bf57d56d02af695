"""
Script and replay-failure explanations.

Turns recorded steps into plain English, classifies replay failure
messages into known categories with remediation steps, and proposes
scenario naming, tags and suites.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from scenario_assist.models.actions import ActionType, RecordedAction
from scenario_assist.models.insights import (
    FailureCategory,
    ReplayFailureExplanation,
    RiskyStep,
    ScenarioOrganizationSuggestion,
    ScriptExplanation,
)
from scenario_assist.services.flow_inference import infer_flow_from_text
from scenario_assist.services.risk_analyzer import LONG_WAIT_MS
from scenario_assist.services.stability import derive_locator_suggestion, has_stable_locator, requires_locator
from scenario_assist.services.step_labels import format_number, get_friendly_step_name, normalize_text, to_wait_ms

logger = logging.getLogger(__name__)

TRANSITION_TYPES = frozenset({
    ActionType.TAP,
    ActionType.INPUT,
    ActionType.OPEN_APP,
    ActionType.SCROLL,
    ActionType.SWIPE,
})

MIN_TRANSITIONS_WITHOUT_WAIT = 3
SMOKE_MAX_STEPS = 8
DEFAULT_FLOW_LABEL = "Core Flow"


@dataclass(frozen=True)
class FailureRule:
    """Substring rule mapping a failure message to a category."""
    category: FailureCategory
    needles: Tuple[str, ...]
    title: str
    explanation: str
    fixes: Tuple[str, ...]
    confidence: float


# Checked in order; the first rule with a matching needle wins
FAILURE_RULES: Tuple[FailureRule, ...] = (
    FailureRule(
        category=FailureCategory.ELEMENT_RESOLUTION,
        needles=("not found", "locator", "element not found"),
        title="Element resolution failed",
        explanation="Replay could not find the target element with the current locator.",
        fixes=(
            "Open Inspector and capture a stable locator (id/accessibilityId/xpath).",
            "Avoid pure coordinate locators for dynamic screens.",
            "Re-run only the failed step to confirm locator validity.",
        ),
        confidence=0.92,
    ),
    FailureRule(
        category=FailureCategory.TIMING,
        needles=("timeout", "timed out"),
        title="Timing issue detected",
        explanation="The step likely ran before the UI was fully ready.",
        fixes=(
            "Insert a short wait before the failed step.",
            "Prefer explicit assertions to confirm screen readiness.",
            "Increase replay settle delay for slower devices.",
        ),
        confidence=0.88,
    ),
    FailureRule(
        category=FailureCategory.CONNECTIVITY,
        needles=("connection", "device", "adb"),
        title="Device connectivity issue",
        explanation="Replay failed due to a device/agent communication issue.",
        fixes=(
            "Confirm device is connected and visible in setup status.",
            "Restart local helper if connection remains unstable.",
            "Retry replay after device reconnects.",
        ),
        confidence=0.84,
    ),
    FailureRule(
        category=FailureCategory.MANUAL_STOP,
        needles=("stopped by user",),
        title="Replay stopped manually",
        explanation="Execution was intentionally interrupted.",
        fixes=(
            "Use Continue From Here to resume from the failed step.",
            "Use Restart Replay to re-run from step 1 if needed.",
        ),
        confidence=0.99,
    ),
)


def _plain_english_step(action: RecordedAction, index: int) -> str:
    friendly = get_friendly_step_name(action, index)
    if action.type == ActionType.INPUT and action.value:
        return f'{index + 1}. {friendly} with value "{action.value}".'
    return f"{index + 1}. {friendly}."


def _is_long_wait(action: RecordedAction) -> bool:
    wait_ms = to_wait_ms(action)
    return wait_ms is not None and wait_ms > LONG_WAIT_MS


def explain_recorded_script(actions: List[RecordedAction]) -> ScriptExplanation:
    """
    Describe the enabled steps in plain English.

    Step numbers and risky-step indices refer to positions in the
    enabled-only list, which is what replay executes.
    """
    enabled = [action for action in actions if action.enabled]
    if not enabled:
        return ScriptExplanation(summary="No executable steps are available yet.")

    plain_steps = [_plain_english_step(action, index) for index, action in enumerate(enabled)]
    risky_steps: List[RiskyStep] = []

    for index, action in enumerate(enabled):
        if requires_locator(action) and not has_stable_locator(action):
            risky_steps.append(RiskyStep(
                step_index=index,
                reason="No stable locator is available for this interaction.",
            ))

        if _is_long_wait(action):
            risky_steps.append(RiskyStep(
                step_index=index,
                reason=f"Long static wait ({format_number(to_wait_ms(action))}ms) may hide timing issues.",
            ))

        if action.type == ActionType.INPUT and not (action.value or "").strip():
            risky_steps.append(RiskyStep(
                step_index=index,
                reason="Input step has no configured value.",
            ))

    recommendations = []
    if not any(action.type == ActionType.ASSERT for action in enabled):
        recommendations.append("Add at least one assertion to verify expected screen outcome.")

    has_waits = any(action.type == ActionType.WAIT for action in enabled)
    transitions = sum(1 for action in enabled if action.type in TRANSITION_TYPES)
    if not has_waits and transitions >= MIN_TRANSITIONS_WITHOUT_WAIT:
        recommendations.append("Add short waits or readiness assertions after navigation-heavy actions.")

    if any(_is_long_wait(action) for action in enabled):
        recommendations.append("Replace long waits with condition-based checks where possible.")

    return ScriptExplanation(
        summary=(
            f"Script has {len(enabled)} executable step(s). "
            f"{len(risky_steps)} potential risk area(s) detected."
        ),
        plain_english_steps=plain_steps,
        risky_steps=risky_steps,
        wait_recommendations=recommendations,
    )


def explain_replay_failure(
    error_message: Optional[str],
    failed_action: Optional[RecordedAction] = None
) -> ReplayFailureExplanation:
    """
    Classify a replay failure message.

    Args:
        error_message: Raw failure text from the replay engine
        failed_action: Step that failed, used to propose a locator

    Returns:
        Explanation whose confidence reflects how specific the match was
    """
    message = normalize_text(error_message)

    if not message:
        return ReplayFailureExplanation(
            category=FailureCategory.NO_DETAILS,
            title="Replay failure detected",
            explanation="The replay failed but no detailed error message was available.",
            suggested_fixes=["Re-run the failed step and inspect the locator and screen state."],
            confidence=0.45,
        )

    for rule in FAILURE_RULES:
        if not any(needle in message for needle in rule.needles):
            continue

        fixes = list(rule.fixes)
        if rule.category == FailureCategory.ELEMENT_RESOLUTION and failed_action is not None:
            suggestion = derive_locator_suggestion(failed_action)
            if suggestion and suggestion.value:
                fixes.insert(0, f"Try this locator: {suggestion.strategy or 'locator'} = {suggestion.value}")

        logger.debug(f"Replay failure classified as {rule.category.value}")
        return ReplayFailureExplanation(
            category=rule.category,
            title=rule.title,
            explanation=rule.explanation,
            suggested_fixes=fixes,
            confidence=rule.confidence,
        )

    return ReplayFailureExplanation(
        category=FailureCategory.EXECUTION_ERROR,
        title="Execution error",
        explanation=error_message,
        suggested_fixes=[
            "Re-run the failed step in isolation to confirm reproducibility.",
            "Review locator and action value for the failed step.",
            "Check whether app screen changed unexpectedly before this step.",
        ],
        confidence=0.6,
    )


def suggest_scenario_organization(
    actions: List[RecordedAction],
    app_package: Optional[str] = None,
    current_name: Optional[str] = None
) -> ScenarioOrganizationSuggestion:
    """Propose a name, tags and suites based on the enabled steps."""
    enabled = [action for action in actions if action.enabled]
    flow = infer_flow_from_text(enabled) or DEFAULT_FLOW_LABEL
    app_label = (app_package.split(".")[-1] or "app") if app_package else "app"
    is_smoke = len(enabled) <= SMOKE_MAX_STEPS
    flow_lower = flow.lower()

    tags = ["smoke" if is_smoke else "regression"]
    if "login" in flow_lower:
        tags.append("login")
    if "checkout" in flow_lower:
        tags.append("checkout")
    if any(action.type == ActionType.ASSERT for action in enabled):
        tags.append("validated")
    if any(action.type == ActionType.INPUT for action in enabled):
        tags.append("form")
    if any(action.type == ActionType.OPEN_APP for action in enabled):
        tags.append("launch")

    name = (current_name or "").strip() or f"{flow} - {app_label}"

    return ScenarioOrganizationSuggestion(
        suggested_name=name,
        tags=tags,
        suite_recommendations=[
            f"{flow} Suite",
            "Smoke Suite" if is_smoke else "Regression Suite",
        ],
        rationale="Grouping by user journey + run frequency improves discoverability and reuse.",
    )
