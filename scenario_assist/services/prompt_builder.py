"""
Assistant prompt rendering.

Produces the same text for the same input so the UI can cache and diff
it. Every section is always present; toggled-off sections carry an
"intentionally omitted" placeholder instead of disappearing.
"""

from typing import Optional

from scenario_assist.models.actions import RecordedAction, SelectedDevice
from scenario_assist.models.insights import MobilePromptInput

DEFAULT_OBJECTIVE = "Improve and stabilize this mobile no-code automation flow while preserving behavior."

SAFETY_RULES = (
    "- Do not remove or reorder existing steps unless required for stability.",
    "- Keep output backward-compatible with current no-code replay behavior.",
    "- Prefer incremental edits over full rewrites.",
    "- Preserve selectors already proven stable unless a stronger fallback is required.",
    "- Maintain user-friendly UX: short labels, clear intent, minimal cognitive load.",
)

DEVICE_CONTEXT_OMITTED = "Device context intentionally omitted."
SAFETY_RULES_OMITTED = "Safety rules intentionally omitted."

PROMPT_TEMPLATE = """You are an AI assistant embedded in a no-code mobile automation module.

## Goal
{objective}

## Current Context
Project Area: Mobile No-Code Automation
Scenario: {scenario}
App Package: {app_package}

## Device Context
{device_context}

## Recorded Steps
{steps}

## Non-Breaking Constraints
{safety_rules}

## Additional User Constraints
{constraints}

## What You Must Produce
1. A risk analysis of current steps (flaky selectors, missing validations, timing risks).
2. A prioritized list of safe, incremental improvements (low-risk first).
3. Suggested step-level edits with clear reason per edit.
4. A UX guidance section to keep the flow clean and user-friendly for non-technical users.

## Response Format (strict)
### Functional Safety Check
- ...

### Incremental Improvements
- Priority: High | Step X | Change | Why
- Priority: Medium | Step Y | Change | Why

### Updated Step Suggestions
- Step X: ...

### UI/UX Guidance
- ...

### Open Questions
- ..."""


def summarize_step(step: RecordedAction, index: int) -> str:
    """One prompt line: index, type, description, best locator, value."""
    locator = (
        step.element_id
        or step.element_content_desc
        or step.element_text
        or step.locator
        or "N/A"
    )
    value = f" | value: {step.value}" if step.value else ""
    return f"{index + 1}. {step.type.value} | desc: {step.description} | locator: {locator}{value}"


def _device_context(device: Optional[SelectedDevice]) -> str:
    if device is None:
        return "\n".join([
            "Device: Not selected",
            "OS Version: Unknown",
            "Real Device: Unknown",
        ])
    return "\n".join([
        f"Device: {device.name or device.device or 'Not selected'}",
        f"OS Version: {device.os_version or 'Unknown'}",
        f"Real Device: {'Yes' if device.real_mobile else 'No (Emulator)'}",
    ])


def build_mobile_automation_assistant_prompt(prompt_input: Optional[MobilePromptInput] = None) -> str:
    """Render the assistant prompt; never fails, all inputs optional."""
    prompt_input = prompt_input or MobilePromptInput()

    if prompt_input.steps:
        steps = "\n".join(summarize_step(step, index) for index, step in enumerate(prompt_input.steps))
    else:
        steps = "No recorded steps yet."

    device_context = (
        _device_context(prompt_input.selected_device)
        if prompt_input.include_device_context else DEVICE_CONTEXT_OMITTED
    )
    safety_rules = "\n".join(SAFETY_RULES) if prompt_input.include_safety_rules else SAFETY_RULES_OMITTED

    return PROMPT_TEMPLATE.format(
        objective=prompt_input.objective.strip() or DEFAULT_OBJECTIVE,
        scenario=prompt_input.scenario_name or "Unsaved / ad-hoc scenario",
        app_package=prompt_input.app_package or "Not set",
        device_context=device_context,
        steps=steps,
        safety_rules=safety_rules,
        constraints=(prompt_input.additional_constraints or "").strip() or "No additional constraints provided.",
    )
