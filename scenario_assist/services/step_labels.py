"""Human-readable labels for recorded steps."""

import math
import re
from typing import Optional, Union

from scenario_assist.models.actions import ActionType, RecordedAction

GENERIC_DESCRIPTION_PATTERNS = [
    re.compile(r"^step\s+\d+$"),
    re.compile(r"^(tap|input|wait|assert|swipe|scroll|longpress|doubletap)(\s+step)?$"),
    re.compile(r"^(action|interaction)\s+\d+$"),
    re.compile(r"^tap at \(\d+,\s*\d+\)$"),
    re.compile(r"^swipe from \(\d+,\s*\d+\) to \(\d+,\s*\d+\)$"),
]

_WHITESPACE = re.compile(r"\s+")


def normalize_text(value: Optional[str]) -> str:
    """Lowercase and collapse whitespace."""
    return _WHITESPACE.sub(" ", (value or "").lower()).strip()


def format_number(value: Union[int, float]) -> str:
    """Render 6000.0 as '6000' and 1.5 as '1.5'."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def to_wait_ms(action: RecordedAction) -> Optional[float]:
    """
    Wait duration of a wait step in milliseconds.

    Returns None for non-wait steps and for values that are not a
    finite, non-negative number. A blank value reads as 0.
    """
    if action.type != ActionType.WAIT:
        return None
    raw = (action.value or "").strip() or "0"
    # float() also takes digit separators, which recorded values never use
    if "_" in raw:
        return None
    try:
        wait_ms = float(raw)
    except ValueError:
        return None
    if not math.isfinite(wait_ms) or wait_ms < 0:
        return None
    return wait_ms


def get_step_target(action: RecordedAction) -> str:
    """Best label for the element a step acts on."""
    if action.element_text:
        return action.element_text
    if action.element_content_desc:
        return action.element_content_desc
    if action.element_id:
        return action.element_id.split("/")[-1] or action.element_id
    return ""


def looks_generic_description(action: RecordedAction) -> bool:
    """True when the description says nothing about intent."""
    desc = normalize_text(action.description)
    if not desc:
        return True
    if desc == f"{normalize_text(action.type.value)} action":
        return True
    return any(pattern.search(desc) for pattern in GENERIC_DESCRIPTION_PATTERNS)


def get_friendly_step_name(action: RecordedAction, index: int) -> str:
    """Intent-rich name for a step, e.g. 'Tap "Login"'."""
    target = get_step_target(action)
    target_label = f'"{target}"' if target else "target element"
    action_type = action.type

    if action_type == ActionType.TAP:
        return f"Tap {target_label}"
    if action_type == ActionType.INPUT:
        return f"Enter text in {target_label}"
    if action_type == ActionType.LONG_PRESS:
        return f"Long press {target_label}"
    if action_type == ActionType.DOUBLE_TAP:
        return f"Double tap {target_label}"
    if action_type == ActionType.WAIT:
        wait_ms = to_wait_ms(action)
        return f"Wait {format_number(wait_ms)}ms" if wait_ms is not None else "Wait for screen to settle"
    if action_type == ActionType.ASSERT:
        return f'Verify "{target}" is visible' if target else "Verify expected screen state"
    if action_type == ActionType.OPEN_APP:
        return f"Open app {action.value}" if action.value else "Open app"
    if action_type == ActionType.STOP_APP:
        return f"Stop app {action.value}" if action.value else "Stop app"
    if action_type == ActionType.CLEAR_CACHE:
        return f"Clear data for {action.value}" if action.value else "Clear app data"
    if action_type == ActionType.SWIPE:
        return action.description or "Swipe on screen"
    if action_type == ActionType.SCROLL:
        return action.description or "Scroll screen"
    if action_type == ActionType.HIDE_KEYBOARD:
        return "Hide keyboard"
    if action_type == ActionType.PRESS_KEY:
        return action.description or "Press device key"
    return action.description or f"Step {index + 1}"
