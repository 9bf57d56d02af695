"""
Recorder suggestion engine.

Builds step-targeted, advisory suggestions (rename, locator hardening,
fallbacks, duplicates, assertions, flow grouping). Nothing here edits
the recording; each suggestion waits for a human to accept it.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from scenario_assist.models.actions import ActionType, LocatorStrategy, RecordedAction
from scenario_assist.models.insights import (
    IssueSeverity,
    LowScoreLocatorInsight,
    RecorderAISuggestion,
    RecorderSuggestionType,
)
from scenario_assist.services.flow_inference import infer_flow_from_text
from scenario_assist.services.stability import (
    HIGH_RISK_SCORE,
    SUGGESTION_SCORE,
    build_contextual_xpath,
    derive_locator_suggestion,
    derive_stable_locator,
    has_fallback_candidates,
    has_stable_locator,
    infer_locator_strategy,
    is_critical_score,
    is_weak_class_only_xpath,
    legacy_locator,
    locator_score,
    requires_locator,
    suggest_replacement_locator,
)
from scenario_assist.services.step_labels import (
    format_number,
    get_friendly_step_name,
    get_step_target,
    looks_generic_description,
    normalize_text,
)

logger = logging.getLogger(__name__)

DUPLICATE_EXEMPT_TYPES = frozenset({
    ActionType.WAIT,
    ActionType.SWIPE,
    ActionType.SCROLL,
    ActionType.PRESS_KEY,
    ActionType.HIDE_KEYBOARD,
})

# Repeats further apart than this are usually intentional
DUPLICATE_MAX_DISTANCE = 3

MAX_ASSERTION_LABEL_LENGTH = 80


@dataclass
class AssertionCandidate:
    """First step worth anchoring a contextual assertion to."""
    index: int
    label: str
    locator: str
    strategy: Optional[str]


def make_action_signature(action: RecordedAction) -> str:
    """Type, locator, value and coordinates, lowercased."""
    coords = ""
    if action.coordinates:
        c = action.coordinates
        end_x = format_number(c.end_x) if c.end_x is not None else ""
        end_y = format_number(c.end_y) if c.end_y is not None else ""
        coords = f"{format_number(c.x)},{format_number(c.y)},{end_x},{end_y}"
    return f"{action.type.value}::{legacy_locator(action)}::{action.value or ''}::{coords}".lower()


def get_target_fingerprint(action: RecordedAction) -> str:
    """Normalized identity of the element a step acts on."""
    bundle = action.locator_bundle
    primary = bundle.primary.value if bundle and bundle.primary else ""
    parts = [
        primary,
        legacy_locator(action),
        action.element_id or "",
        action.element_content_desc or "",
        action.element_text or "",
    ]
    return normalize_text("|".join(parts))


def should_flag_duplicate(
    current: RecordedAction,
    previous: RecordedAction,
    current_index: int,
    previous_index: int
) -> bool:
    """True when `current` repeats `previous` closely enough to be noise."""
    if current.type in DUPLICATE_EXEMPT_TYPES:
        return False
    if current.type != previous.type:
        return False
    if current_index - previous_index > DUPLICATE_MAX_DISTANCE:
        return False

    if current.type == ActionType.INPUT:
        current_value = normalize_text(current.value)
        previous_value = normalize_text(previous.value)
        if not current_value or not previous_value or current_value != previous_value:
            return False

    current_target = get_target_fingerprint(current)
    previous_target = get_target_fingerprint(previous)
    if not current_target or not previous_target:
        return False
    return current_target == previous_target


def _assertion_candidate(action: RecordedAction, index: int, label: str) -> Optional[AssertionCandidate]:
    if not label or len(label) > MAX_ASSERTION_LABEL_LENGTH or action.type == ActionType.WAIT:
        return None

    has_text_strategy = bool(
        action.locator_strategy and action.locator_strategy != LocatorStrategy.COORDINATES.value
    )
    if action.locator and has_text_strategy:
        locator = action.locator
    else:
        locator = (
            action.smart_xpath or action.xpath or action.element_id or action.element_content_desc or ""
        )

    if has_text_strategy:
        strategy = action.locator_strategy
    elif locator.startswith("//"):
        strategy = LocatorStrategy.XPATH.value
    elif action.element_content_desc:
        strategy = LocatorStrategy.ACCESSIBILITY_ID.value
    elif action.element_id:
        strategy = LocatorStrategy.ID.value
    else:
        strategy = None

    return AssertionCandidate(index=index, label=label, locator=locator, strategy=strategy)


def _naming_suggestions(action: RecordedAction, index: int, key: str) -> List[RecorderAISuggestion]:
    suggestions = []
    friendly_name = get_friendly_step_name(action, index)
    current = normalize_text(action.description)

    if looks_generic_description(action) and normalize_text(friendly_name) != current:
        suggestions.append(RecorderAISuggestion(
            id=f"rename_{key}",
            type=RecorderSuggestionType.RENAME_STEP,
            severity=IssueSeverity.LOW,
            title=f"Improve step {index + 1} name",
            detail=f'Current label is generic. Suggested: "{friendly_name}".',
            reason="Human-readable steps are easier to review and debug.",
            confidence=0.86,
            impact="Improves script readability without changing behavior.",
            step_index=index,
            suggested_value=friendly_name,
        ))

    # Deliberately not deduplicated against the rename above
    if get_step_target(action) and normalize_text(friendly_name) != current:
        suggestions.append(RecorderAISuggestion(
            id=f"hint_{key}",
            type=RecorderSuggestionType.ACTION_HINT,
            severity=IssueSeverity.LOW,
            title=f"Use precise label for step {index + 1}",
            detail=f"Prefill: {friendly_name}",
            reason="Specific, intent-rich labels make scripts easier to reuse and debug.",
            confidence=0.9,
            impact="Improves readability and aligns generated script with UI intent.",
            step_index=index,
            suggested_value=friendly_name,
        ))

    return suggestions


def _locator_suggestions(action: RecordedAction, index: int, key: str) -> List[RecorderAISuggestion]:
    suggestions = []
    score = locator_score(action)
    critical = is_critical_score(score)
    high_risk = critical or score < HIGH_RISK_SCORE

    if not has_stable_locator(action) or score < SUGGESTION_SCORE:
        replacement = suggest_replacement_locator(action)
        if replacement:
            detail = (
                f"Suggested stable locator: {replacement.strategy or 'locator'} = {replacement.value}. "
                "Use parent/child or ancestor context instead of generic class-only XPath."
            )
        else:
            detail = (
                "No strong locator candidate found. Keep coordinate fallback but capture a stable "
                "selector from Inspector with parent/ancestor context."
            )

        if critical or is_weak_class_only_xpath(legacy_locator(action)):
            reason = "Low score and generic selectors are highly likely to break after minor UI changes."
        else:
            reason = "Locator stability is the main predictor of replay flakiness."

        suggestions.append(RecorderAISuggestion(
            id=f"locator_{key}",
            type=RecorderSuggestionType.LOCATOR_WARNING,
            severity=IssueSeverity.HIGH if high_risk else IssueSeverity.MEDIUM,
            title=(
                f"Critical locator risk at step {index + 1} (<=10 score)"
                if critical else f"Step {index + 1} locator may be fragile"
            ),
            detail=detail,
            reason=reason,
            confidence=0.94 if high_risk else 0.76,
            impact="Can reduce replay failures after UI layout shifts.",
            step_index=index,
            suggested_value=replacement.value if replacement else None,
            suggested_locator_strategy=replacement.strategy if replacement else None,
        ))

    if not has_fallback_candidates(action):
        suggestions.append(RecorderAISuggestion(
            id=f"fallbacks_{key}",
            type=RecorderSuggestionType.ENSURE_FALLBACKS,
            severity=IssueSeverity.HIGH if critical else IssueSeverity.MEDIUM,
            title=f"Add self-healing fallbacks for step {index + 1}",
            detail=(
                "No locator fallbacks are stored. Populate fallback candidates "
                "(id/accessibilityId/text/xpath/coordinates) to enable replay self-healing."
            ),
            reason="Fallback candidates let replay recover when the primary locator fails.",
            confidence=0.88,
            impact="Improves resilience and lowers hard failures on dynamic screens.",
            step_index=index,
        ))

    return suggestions


def build_recorder_ai_suggestions(actions: List[RecordedAction]) -> List[RecorderAISuggestion]:
    """
    Build advisory suggestions for a recorded scenario.

    Args:
        actions: Steps in execution order, disabled ones included

    Returns:
        Per-step suggestions in step order, followed by the contextual
        assertion, flow grouping and outcome-guard suggestions
    """
    suggestions: List[RecorderAISuggestion] = []
    if not actions:
        return suggestions

    seen_signatures: Dict[str, List[int]] = {}
    has_assertion = any(action.type == ActionType.ASSERT for action in actions)
    assertion_candidate: Optional[AssertionCandidate] = None

    for index, action in enumerate(actions):
        key = f"{action.id or 'step'}-{index}"

        suggestions.extend(_naming_suggestions(action, index, key))

        if requires_locator(action):
            suggestions.extend(_locator_suggestions(action, index, key))

        if action.enabled:
            signature = make_action_signature(action)
            previous_indices = seen_signatures.get(signature, [])
            previous_index = next(
                (
                    prev for prev in reversed(previous_indices)
                    if should_flag_duplicate(action, actions[prev], index, prev)
                ),
                None,
            )
            if previous_index is not None:
                suggestions.append(RecorderAISuggestion(
                    id=f"dup_{key}",
                    type=RecorderSuggestionType.DUPLICATE_STEP,
                    severity=IssueSeverity.LOW,
                    title=f"Possible duplicate step at {index + 1}",
                    detail=f"This repeats the same target interaction as step {previous_index + 1}.",
                    reason="Near-duplicate interactions often add noise and increase replay time.",
                    confidence=0.76,
                    impact="Disabling duplicates can shorten replay time safely.",
                    step_index=index,
                    related_step_index=previous_index,
                ))
            seen_signatures[signature] = previous_indices + [index]

        if not has_assertion and assertion_candidate is None:
            label = get_step_target(action) or get_friendly_step_name(action, index)
            assertion_candidate = _assertion_candidate(action, index, label)

    if not has_assertion and assertion_candidate is not None:
        candidate = assertion_candidate
        suggestions.append(RecorderAISuggestion(
            id=f"context_assert_{candidate.index}",
            type=RecorderSuggestionType.CONTEXT_ASSERTION,
            severity=IssueSeverity.MEDIUM,
            title=f'Verify "{candidate.label}" appears',
            detail=f'Add an assertion after step {candidate.index + 1} to confirm "{candidate.label}" is visible.',
            reason="Contextual assertions reduce false positives and catch UI regressions early.",
            confidence=0.82,
            impact="Adds validation without changing flow.",
            step_index=candidate.index,
            suggested_value=f'Assert "{candidate.label}" is visible',
            suggested_locator_strategy=candidate.strategy,
            suggested_locator=candidate.locator,
        ))

    flow_label = infer_flow_from_text(actions)
    if flow_label:
        suggestions.append(RecorderAISuggestion(
            id=f"flow_{normalize_text(flow_label).replace(' ', '_')}",
            type=RecorderSuggestionType.GROUP_FLOW,
            severity=IssueSeverity.LOW,
            title=f'Group steps as "{flow_label}"',
            detail="These actions appear to belong to one reusable flow.",
            reason="Grouping improves scenario reuse and suite organization.",
            confidence=0.73,
            impact="Helps organize scenarios without changing execution.",
            suggested_value=flow_label,
        ))

    if not has_assertion:
        suggestions.append(RecorderAISuggestion(
            id="add_assertion_outcome_guard",
            type=RecorderSuggestionType.ADD_ASSERTION,
            severity=IssueSeverity.HIGH,
            title="Add at least one assertion",
            detail="Assertions validate expected outcomes and prevent false positive passes.",
            reason="Action-only flows can pass even when UI state is wrong.",
            confidence=0.95,
            impact="Improves replay trustworthiness and defect detection.",
        ))

    logger.debug(f"Built {len(suggestions)} suggestion(s) for {len(actions)} step(s)")
    return suggestions


def build_low_score_locator_insights(actions: List[RecordedAction]) -> List[LowScoreLocatorInsight]:
    """Resolution hints for locator-requiring steps scoring 10 or less."""
    insights = []
    for index, action in enumerate(actions):
        if not requires_locator(action):
            continue
        score = locator_score(action)
        if not is_critical_score(score):
            continue

        suggestion = derive_locator_suggestion(action)
        contextual = build_contextual_xpath(action)
        weak_locator = legacy_locator(action)

        if suggestion and suggestion.value:
            resolution = (
                f"Use {suggestion.strategy or 'locator'} = {suggestion.value}; add fallback candidates "
                "and avoid generic class-only XPath."
            )
        elif contextual:
            resolution = (
                f"Use contextual XPath: {contextual}; add fallback candidates from id/accessibilityId/text "
                "and keep coordinates only as last fallback."
            )
        else:
            resolution = "Capture locator again using Inspector and anchor by id/accessibility/text with ancestor context."

        suggested_locator = (suggestion.value if suggestion else None) or contextual
        suggested_strategy = suggestion.strategy if suggestion and suggestion.value else None
        if suggested_locator and not suggested_strategy:
            suggested_strategy = infer_locator_strategy(suggested_locator)
        stable = derive_stable_locator(action)

        insights.append(LowScoreLocatorInsight(
            step_index=index,
            score=score,
            title=f"Step {index + 1} has critical locator score ({score}/100)",
            issue=(
                f"Current locator is fragile: {weak_locator}"
                if weak_locator else "Current step depends on weak/non-stable targeting."
            ),
            resolution=resolution,
            suggested_locator=suggested_locator,
            suggested_locator_strategy=suggested_strategy,
            stable_locator=stable.value if stable else None,
            stable_locator_strategy=stable.strategy if stable else None,
        ))
    return insights
