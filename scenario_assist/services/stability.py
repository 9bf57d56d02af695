"""
Locator stability evaluation.

Decides whether a recorded step can be found again at replay time and
how much to trust its locator. Every function here is pure and never
raises on incomplete action data; missing fields read as "unstable".
"""

import logging
import re
from dataclasses import dataclass
from typing import List, Optional

from scenario_assist.models.actions import (
    ActionType,
    LocatorBundle,
    LocatorCandidate,
    LocatorStrategy,
    RecordedAction,
)
from scenario_assist.services.step_labels import format_number

logger = logging.getLogger(__name__)

LOCATOR_REQUIRED_TYPES = frozenset({
    ActionType.TAP,
    ActionType.INPUT,
    ActionType.LONG_PRESS,
    ActionType.ASSERT,
})

# Score thresholds
DEFAULT_STABLE_SCORE = 70
DEFAULT_UNSTABLE_SCORE = 35
CRITICAL_SCORE = 10
HIGH_RISK_SCORE = 40
SUGGESTION_SCORE = 60

# Default candidate scores when rebuilding a bundle from legacy fields
PRIMARY_CANDIDATE_SCORE = 90
FALLBACK_CANDIDATE_SCORE = 60
LEGACY_LOCATOR_SCORE = 65
SMART_XPATH_SCORE = 74
XPATH_SCORE = 68
ELEMENT_ID_SCORE = 88
CONTENT_DESC_SCORE = 84
ELEMENT_TEXT_SCORE = 56
COORDINATES_SCORE = 30

_CLASS_PREDICATE = re.compile(r"@class\s*=")
_DISCRIMINATOR = re.compile(
    r"@resource-id=|@content-desc=|@text=|contains\(@text|contains\(@resource-id|contains\(@content-desc"
)
_COORDINATE_PAIR = re.compile(r"^\d+\s*,\s*\d+$")

_KNOWN_STRATEGIES = {strategy.value for strategy in LocatorStrategy}
_SUGGESTABLE_STRATEGIES = {
    LocatorStrategy.ACCESSIBILITY_ID.value,
    LocatorStrategy.ID.value,
    LocatorStrategy.TEXT.value,
    LocatorStrategy.XPATH.value,
    LocatorStrategy.COORDINATES.value,
}


@dataclass(frozen=True)
class LocatorSuggestion:
    """A locator value with the strategy it should be replayed with."""
    value: str
    strategy: Optional[str] = None


def requires_locator(action: RecordedAction) -> bool:
    """Only tap, input, longPress and assert need a resolvable target."""
    return action.type in LOCATOR_REQUIRED_TYPES


def has_fallback_candidates(action: RecordedAction) -> bool:
    bundle = action.locator_bundle
    return bool(bundle and any(candidate.value for candidate in bundle.fallbacks))


def has_stable_locator(action: RecordedAction) -> bool:
    """
    Check whether the action carries any non-coordinate way to find its target.

    Sources, in priority order: bundle primary, a bundle fallback, element
    id/content-desc/text, smart XPath or XPath, a legacy locator with a
    non-coordinate strategy, and finally a legacy locator that is an XPath.
    """
    bundle = action.locator_bundle
    if bundle and bundle.primary and bundle.primary.value:
        return True
    if has_fallback_candidates(action):
        return True
    if action.element_id or action.element_content_desc or action.element_text:
        return True
    if action.smart_xpath or action.xpath:
        return True
    if action.locator_strategy and action.locator_strategy != LocatorStrategy.COORDINATES.value and action.locator:
        return True
    if action.locator and action.locator.startswith("//"):
        return True
    return False


def locator_score(action: RecordedAction) -> int:
    """Cached reliability score, or 70/35 depending on locator stability."""
    if action.reliability_score is not None:
        return int(round(max(0.0, min(100.0, action.reliability_score))))
    return DEFAULT_STABLE_SCORE if has_stable_locator(action) else DEFAULT_UNSTABLE_SCORE


def is_critical_score(score: int) -> bool:
    return score <= CRITICAL_SCORE


def is_weak_class_only_xpath(locator: Optional[str]) -> bool:
    """
    Flag XPaths that only filter on @class.

    Sibling nodes commonly share a class, so such a locator tends to
    resolve to the wrong element once the layout shifts.
    """
    raw = (locator or "").strip()
    if not raw.startswith("//"):
        return False
    return bool(_CLASS_PREDICATE.search(raw)) and not _DISCRIMINATOR.search(raw)


def legacy_locator(action: RecordedAction) -> str:
    """The raw locator string recorded for the step, if any."""
    return action.locator or action.smart_xpath or action.xpath or ""


def derive_locator_suggestion(action: RecordedAction) -> Optional[LocatorSuggestion]:
    """Best existing locator to propose for the step."""
    bundle = action.locator_bundle
    primary = bundle.primary if bundle else None
    if primary and primary.value:
        if primary.strategy in _SUGGESTABLE_STRATEGIES:
            strategy = primary.strategy
        elif primary.value.startswith("//"):
            strategy = LocatorStrategy.XPATH.value
        else:
            strategy = action.locator_strategy or None
        return LocatorSuggestion(value=primary.value, strategy=strategy)

    if action.smart_xpath and action.smart_xpath.startswith("//"):
        return LocatorSuggestion(value=action.smart_xpath, strategy=LocatorStrategy.XPATH.value)
    if action.xpath and action.xpath.startswith("//"):
        return LocatorSuggestion(value=action.xpath, strategy=LocatorStrategy.XPATH.value)
    if action.element_id:
        return LocatorSuggestion(value=action.element_id, strategy=LocatorStrategy.ID.value)
    if action.element_content_desc:
        return LocatorSuggestion(value=action.element_content_desc, strategy=LocatorStrategy.ACCESSIBILITY_ID.value)
    if action.element_text:
        return LocatorSuggestion(value=action.element_text, strategy=LocatorStrategy.TEXT.value)
    return None


def build_contextual_xpath(action: RecordedAction) -> Optional[str]:
    """
    Synthesize an XPath from captured element attributes.

    Prefers resource-id, then class + content-desc, then class + text,
    then bare text or content-desc.
    """
    cls = (action.element_class or "").strip()
    txt = (action.element_text or "").strip()
    a11y = (action.element_content_desc or "").strip()
    element_id = (action.element_id or "").strip()

    if element_id:
        return f'//*[@resource-id="{element_id}"]'
    if cls and a11y:
        return f'//{cls}[@content-desc="{a11y}"]'
    if cls and txt:
        return f'//{cls}[normalize-space(@text)="{txt}"]'
    if txt:
        return f'//*[@text="{txt}"]'
    if a11y:
        return f'//*[@content-desc="{a11y}"]'
    return None


def suggest_replacement_locator(action: RecordedAction) -> Optional[LocatorSuggestion]:
    """Existing locator if any, otherwise a synthesized contextual XPath."""
    suggestion = derive_locator_suggestion(action)
    if suggestion:
        return suggestion
    contextual = build_contextual_xpath(action)
    if not contextual:
        return None
    return LocatorSuggestion(value=contextual, strategy=LocatorStrategy.XPATH.value)


def derive_stable_locator(action: RecordedAction) -> Optional[LocatorSuggestion]:
    """Locator built from element attributes, skipping class-only XPaths."""
    if action.element_id:
        return LocatorSuggestion(value=action.element_id, strategy=LocatorStrategy.ID.value)
    if action.element_content_desc:
        return LocatorSuggestion(value=action.element_content_desc, strategy=LocatorStrategy.ACCESSIBILITY_ID.value)
    if action.element_text and action.element_class:
        return LocatorSuggestion(
            value=f'//{action.element_class}[normalize-space(@text)="{action.element_text}"]',
            strategy=LocatorStrategy.XPATH.value,
        )
    if action.element_text:
        return LocatorSuggestion(value=action.element_text, strategy=LocatorStrategy.TEXT.value)

    for candidate in (action.smart_xpath, action.xpath):
        raw = (candidate or "").strip()
        if raw.startswith("//") and not is_weak_class_only_xpath(raw):
            return LocatorSuggestion(value=raw, strategy=LocatorStrategy.XPATH.value)
    return None


def normalize_locator_strategy(strategy: Optional[str]) -> Optional[str]:
    """Return the strategy if it is a known tag, else None."""
    raw = (strategy or "").strip()
    return raw if raw in _KNOWN_STRATEGIES else None


def infer_locator_strategy(locator: Optional[str], explicit: Optional[str] = None) -> str:
    """Guess how a raw locator string should be interpreted."""
    normalized = normalize_locator_strategy(explicit)
    if normalized:
        return normalized
    raw = (locator or "").strip()
    if not raw or raw.startswith("//"):
        return LocatorStrategy.XPATH.value
    if _COORDINATE_PAIR.match(raw):
        return LocatorStrategy.COORDINATES.value
    return LocatorStrategy.ID.value


def _push_unique_candidate(
    candidates: List[LocatorCandidate],
    strategy: str,
    value: Optional[str],
    score: float,
    source: str = "legacy",
    reason: Optional[str] = None,
) -> None:
    text = (value or "").strip()
    if not text:
        return
    if any(c.strategy == strategy and c.value == text for c in candidates):
        return
    candidates.append(LocatorCandidate(strategy=strategy, value=text, score=score, source=source, reason=reason))


def build_locator_candidates(action: RecordedAction) -> List[LocatorCandidate]:
    """All known ways to find the step's target, best score first."""
    candidates: List[LocatorCandidate] = []
    bundle = action.locator_bundle

    if bundle and bundle.primary and bundle.primary.strategy and bundle.primary.value:
        primary = bundle.primary
        _push_unique_candidate(
            candidates,
            primary.strategy,
            primary.value,
            primary.score or PRIMARY_CANDIDATE_SCORE,
            primary.source or "inspector",
            primary.reason,
        )
    if bundle:
        for fallback in bundle.fallbacks:
            if not fallback.strategy or not fallback.value:
                continue
            _push_unique_candidate(
                candidates,
                fallback.strategy,
                fallback.value,
                fallback.score or FALLBACK_CANDIDATE_SCORE,
                fallback.source or "legacy",
                fallback.reason,
            )

    strategy = normalize_locator_strategy(action.locator_strategy)
    if strategy and action.locator:
        _push_unique_candidate(candidates, strategy, action.locator, LEGACY_LOCATOR_SCORE)
    _push_unique_candidate(candidates, LocatorStrategy.XPATH.value, action.smart_xpath, SMART_XPATH_SCORE, "inspector")
    _push_unique_candidate(candidates, LocatorStrategy.XPATH.value, action.xpath, XPATH_SCORE)
    _push_unique_candidate(candidates, LocatorStrategy.ID.value, action.element_id, ELEMENT_ID_SCORE, "inspector")
    _push_unique_candidate(
        candidates, LocatorStrategy.ACCESSIBILITY_ID.value, action.element_content_desc, CONTENT_DESC_SCORE, "inspector"
    )
    _push_unique_candidate(candidates, LocatorStrategy.TEXT.value, action.element_text, ELEMENT_TEXT_SCORE, "inspector")
    if action.coordinates:
        _push_unique_candidate(
            candidates,
            LocatorStrategy.COORDINATES.value,
            f"{format_number(action.coordinates.x)},{format_number(action.coordinates.y)}",
            COORDINATES_SCORE,
        )

    # Stable sort keeps insertion order between equal scores
    return sorted(candidates, key=lambda c: c.score or 0, reverse=True)


def ensure_locator_bundle(action: RecordedAction) -> RecordedAction:
    """Copy of the action with a populated locator bundle, when one can be built."""
    if not requires_locator(action):
        return action
    candidates = build_locator_candidates(action)
    if not candidates:
        return action

    existing = action.locator_bundle.primary if action.locator_bundle else None
    primary = existing if existing and existing.strategy and existing.value else candidates[0]
    fallbacks = [
        c for c in candidates
        if not (c.strategy == primary.strategy and c.value == primary.value)
    ]
    fingerprint = (
        (action.locator_bundle.fingerprint if action.locator_bundle else None)
        or action.element_fingerprint
        or f"{action.type.value}:{action.id}"
    )

    return action.model_copy(update={
        "locator_bundle": LocatorBundle(version=1, fingerprint=fingerprint, primary=primary, fallbacks=fallbacks),
        "locator": action.locator or primary.value,
        "locator_strategy": action.locator_strategy or primary.strategy,
    })


def normalize_actions_for_locator_healing(actions: List[RecordedAction]) -> List[RecordedAction]:
    """New action list where every locator-requiring step has a bundle."""
    normalized = [ensure_locator_bundle(action) for action in actions]
    healed = sum(1 for before, after in zip(actions, normalized) if before is not after)
    logger.debug(f"Locator bundles built for {healed} of {len(actions)} step(s)")
    return normalized
