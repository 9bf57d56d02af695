"""Recorder coaching: canned Q&A, contextual hints and capability cards."""

from typing import List

from scenario_assist.models.actions import ActionType, RecordedAction
from scenario_assist.models.insights import (
    CoachHint,
    IntegrationArea,
    IssueSeverity,
    RecorderAskAIContext,
)
from scenario_assist.services.explainer import explain_replay_failure
from scenario_assist.services.risk_analyzer import LONG_WAIT_MS
from scenario_assist.services.stability import has_stable_locator, requires_locator
from scenario_assist.services.step_labels import normalize_text, to_wait_ms

MOBILE_AI_INTEGRATION_AREAS: List[IntegrationArea] = [
    IntegrationArea(
        id="scenario_review",
        title="Scenario Health Review",
        description="Analyze recorded steps for flaky selectors, weak assertions, and risky waits.",
        status="safe_now",
    ),
    IntegrationArea(
        id="prompt_studio",
        title="Prompt Studio",
        description="Generate a structured assistant prompt from saved scenarios and device context.",
        status="safe_now",
    ),
    IntegrationArea(
        id="human_in_loop",
        title="Human-in-the-Loop Suggestions",
        description="Show AI-ready recommendations without auto-applying step mutations.",
        status="safe_now",
    ),
    IntegrationArea(
        id="step_generation",
        title="Natural Language to Steps",
        description="Generate new mobile steps from plain English and require approval before merge.",
        status="next_phase",
    ),
    IntegrationArea(
        id="failure_healing",
        title="Failure Auto-Heal",
        description="Use replay failures and hierarchy snapshots to suggest locator repairs.",
        status="next_phase",
    ),
    IntegrationArea(
        id="ux_coach",
        title="In-Flow UX Assistant",
        description="Inline coaching during recording for better coverage and stronger validation.",
        status="next_phase",
    ),
]


def answer_recorder_question(question: str, context: RecorderAskAIContext) -> str:
    """Answer a free-text recorder question from the current recorder state."""
    q = normalize_text(question)

    if not q:
        return "Ask about recording, locator stability, replay failures, or script behavior."

    if "record" in q and ("not capturing" in q or "not working" in q or "why" in q):
        if context.recording:
            recording_state = "paused" if context.is_paused else "active"
        else:
            recording_state = "stopped"
        checks = [
            f"Agent connection: {context.connection_status or 'unknown'}",
            f"Device selected: {'yes' if context.selected_device else 'no'}",
            f"Recording state: {recording_state}",
        ]
        return (
            "Recording diagnostics:\n- " + "\n- ".join(checks)
            + "\n- Ensure setup is complete and recording is not paused."
            + "\n- Tap inside live preview after pressing Start Recording."
        )

    if "replay" in q and ("fail" in q or "why" in q):
        if context.latest_failure:
            base = explain_replay_failure(context.latest_failure).explanation
        else:
            base = "Replay can fail due to unstable locators, timing, or device connectivity."
        return (
            f"Replay failure guidance:\n- {base}"
            '\n- Use "Why did this fail?" on the failed step for targeted fixes.'
            "\n- Re-run the failed step before re-running the full flow."
        )

    if "button" in q or "what does this" in q:
        return (
            "Use Setup to connect device/appium, Recorder to capture/edit steps, Script to review/export "
            "Java code, and History to debug replay outcomes."
        )

    if "locator" in q:
        return (
            "Prefer id/accessibilityId first, then stable xpath. Keep coordinates only as fallback. "
            "Apply locator suggestions from the AI panel only after reviewing them."
        )

    return (
        "I can help with recording readiness, locator stability, replay failures, script explanation, "
        "and scenario organization."
    )


def build_contextual_coach_hints(
    context: RecorderAskAIContext,
    actions: List[RecordedAction]
) -> List[CoachHint]:
    """Hints for the recorder panel, in display order."""
    hints = []

    if not context.selected_device:
        hints.append(CoachHint(
            id="coach_select_device",
            priority=IssueSeverity.HIGH,
            title="Select a device to begin",
            detail="Open Setup and connect a real device/emulator first.",
        ))

    if not context.recording and not actions:
        hints.append(CoachHint(
            id="coach_start_recording",
            priority=IssueSeverity.HIGH,
            title="Start your first recording",
            detail="Tap Start Recording, then interact with the app screen to capture steps.",
        ))

    if context.recording and context.is_paused:
        hints.append(CoachHint(
            id="coach_resume_recording",
            priority=IssueSeverity.MEDIUM,
            title="Recording is paused",
            detail="Resume recording to continue capturing actions.",
        ))

    if actions and not any(action.type == ActionType.ASSERT for action in actions):
        hints.append(CoachHint(
            id="coach_add_assertion",
            priority=IssueSeverity.HIGH,
            title="Add at least one assertion",
            detail="Assertions validate outcome and reduce false positives.",
        ))

    unstable_count = sum(
        1 for action in actions if requires_locator(action) and not has_stable_locator(action)
    )
    if unstable_count > 0:
        hints.append(CoachHint(
            id="coach_stabilize_locators",
            priority=IssueSeverity.MEDIUM,
            title="Stabilize fragile locators",
            detail=f"{unstable_count} step(s) rely on weak selectors. Prefer id/accessibilityId/xpath from Inspector.",
        ))

    long_waits = [action for action in actions if (to_wait_ms(action) or 0) > LONG_WAIT_MS]
    if long_waits:
        hints.append(CoachHint(
            id="coach_reduce_waits",
            priority=IssueSeverity.LOW,
            title="Reduce long static waits",
            detail="Replace long waits with readiness assertions where possible.",
        ))

    if context.last_replay_status == "FAIL" and context.latest_failure:
        hints.append(CoachHint(
            id="coach_replay_failed",
            priority=IssueSeverity.HIGH,
            title="Replay failed recently",
            detail="Use 'Why did this fail?' and re-run only the failed step before full replay.",
        ))

    return hints
