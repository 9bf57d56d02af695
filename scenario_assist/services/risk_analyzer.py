"""
Scenario risk analysis.

Scans an ordered action list for structural problems (missing
assertions, long or stacked waits, unstable locators, empty inputs)
and turns the resulting issue list into a 0-100 readiness score.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List

from scenario_assist.models.actions import ActionType, RecordedAction
from scenario_assist.models.insights import AssistantIssue, IssueSeverity
from scenario_assist.services.stability import has_stable_locator, requires_locator
from scenario_assist.services.step_labels import format_number, to_wait_ms

logger = logging.getLogger(__name__)

LONG_WAIT_MS = 5000
CONSECUTIVE_WAIT_THRESHOLD = 2

SEVERITY_PENALTIES: Dict[IssueSeverity, int] = {
    IssueSeverity.HIGH: 15,
    IssueSeverity.MEDIUM: 8,
    IssueSeverity.LOW: 3,
}


@dataclass
class ScanAccumulator:
    """
    State carried through the forward pass over the steps.

    `consecutive_waits` counts numeric wait steps since the last
    non-wait step; every wait at or past the threshold is reported,
    not just the first one of a run.
    """
    issues: List[AssistantIssue] = field(default_factory=list)
    consecutive_waits: int = 0

    def record_wait(self) -> bool:
        """Count a wait step; True when it completes a consecutive run."""
        self.consecutive_waits += 1
        return self.consecutive_waits >= CONSECUTIVE_WAIT_THRESHOLD

    def break_wait_run(self) -> None:
        self.consecutive_waits = 0


def _step_key(action: RecordedAction, index: int) -> str:
    return f"{action.id or 'step'}-{index}"


def _check_step(action: RecordedAction, index: int, acc: ScanAccumulator) -> None:
    key = _step_key(action, index)
    step_no = index + 1

    if requires_locator(action) and not has_stable_locator(action):
        acc.issues.append(AssistantIssue(
            id=f"locator_risk_{key}",
            severity=IssueSeverity.HIGH,
            title=f"Unstable locator at step {step_no}",
            detail=f'The "{action.type.value}" action has no stable selector strategy and may fail after UI shifts.',
            recommendation="Prefer resource-id, accessibility-id, text, or a resilient XPath bundle over coordinates.",
            step_index=index,
        ))

    wait_ms = to_wait_ms(action)
    if wait_ms is not None:
        if wait_ms > LONG_WAIT_MS:
            acc.issues.append(AssistantIssue(
                id=f"long_wait_{key}",
                severity=IssueSeverity.MEDIUM,
                title=f"Long wait at step {step_no}",
                detail=f"Wait duration is {format_number(wait_ms)}ms, which can slow execution and mask timing issues.",
                recommendation="Replace long static waits with assertions or shorter conditional waits.",
                step_index=index,
            ))

        if acc.record_wait():
            acc.issues.append(AssistantIssue(
                id=f"consecutive_wait_{key}",
                severity=IssueSeverity.MEDIUM,
                title=f"Consecutive waits near step {step_no}",
                detail="Multiple wait steps in sequence increase run time and flakiness.",
                recommendation="Merge duplicate waits and validate readiness with explicit assertions.",
                step_index=index,
            ))
    else:
        acc.break_wait_run()

    if action.type == ActionType.INPUT and not (action.value or "").strip():
        acc.issues.append(AssistantIssue(
            id=f"empty_input_{key}",
            severity=IssueSeverity.MEDIUM,
            title=f"Empty input value at step {step_no}",
            detail="Input action exists but no value is configured.",
            recommendation="Provide a test value or parameterize the value before replay.",
            step_index=index,
        ))


def analyze_scenario_actions(actions: List[RecordedAction]) -> List[AssistantIssue]:
    """
    Find structural risks in a scenario.

    Args:
        actions: Steps in execution order; never modified

    Returns:
        Issues in detection order: aggregate checks first, then per-step
        findings in step order
    """
    if not actions:
        return [AssistantIssue(
            id="empty_scenario",
            severity=IssueSeverity.MEDIUM,
            title="No steps available",
            detail="There are no recorded steps to analyze.",
            recommendation="Record and save a scenario before asking AI for optimization.",
        )]

    acc = ScanAccumulator()

    disabled_steps = sum(1 for action in actions if not action.enabled)
    if disabled_steps > 0:
        acc.issues.append(AssistantIssue(
            id="disabled_steps",
            severity=IssueSeverity.LOW,
            title="Disabled steps detected",
            detail=f"{disabled_steps} step(s) are currently disabled and may hide gaps during replay.",
            recommendation="Review disabled steps and either remove or re-enable them intentionally.",
        ))

    if not any(action.type == ActionType.ASSERT for action in actions):
        acc.issues.append(AssistantIssue(
            id="missing_assertions",
            severity=IssueSeverity.HIGH,
            title="No assertions found",
            detail="The scenario verifies actions but does not validate outcomes.",
            recommendation="Add assertions at key checkpoints (screen loaded, text visible, state changes).",
        ))

    for index, action in enumerate(actions):
        _check_step(action, index, acc)

    logger.debug(f"Scenario analysis found {len(acc.issues)} issue(s) across {len(actions)} step(s)")
    return acc.issues


def get_readiness_score(issues: List[AssistantIssue]) -> int:
    """100 minus 15/8/3 per high/medium/low issue, clamped to 0-100."""
    score = 100
    for issue in issues:
        score -= SEVERITY_PENALTIES.get(issue.severity, 0)
    return max(0, min(100, score))
