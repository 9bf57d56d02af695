"""Models for analysis results produced from a recorded scenario."""

from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field

from scenario_assist.models.actions import RecordedAction, SelectedDevice


class IssueSeverity(str, Enum):
    """Severity attached to issues and suggestions."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class RecorderSuggestionType(str, Enum):
    """Kinds of recorder suggestions."""
    RENAME_STEP = "rename_step"
    DUPLICATE_STEP = "duplicate_step"
    GROUP_FLOW = "group_flow"
    LOCATOR_WARNING = "locator_warning"
    ENSURE_FALLBACKS = "ensure_fallbacks"
    ADD_ASSERTION = "add_assertion"
    CONTEXT_ASSERTION = "context_assertion"
    ACTION_HINT = "action_hint"


class FailureCategory(str, Enum):
    """Replay failure classes recognised from the failure message."""
    NO_DETAILS = "no_details"
    ELEMENT_RESOLUTION = "element_resolution"
    TIMING = "timing"
    CONNECTIVITY = "connectivity"
    MANUAL_STOP = "manual_stop"
    EXECUTION_ERROR = "execution_error"


class _Output(BaseModel):
    class Config:
        populate_by_name = True


class AssistantIssue(_Output):
    """A structural risk found in a scenario."""
    id: str = Field(..., description="Stable issue identifier")
    severity: IssueSeverity
    title: str
    detail: str
    recommendation: str
    step_index: Optional[int] = Field(None, alias="stepIndex", description="0-based step index")


class RecorderAISuggestion(_Output):
    """Advisory, step-targeted improvement awaiting human approval."""
    id: str
    type: RecorderSuggestionType
    severity: IssueSeverity
    title: str
    detail: str
    reason: str
    confidence: float = Field(..., ge=0, le=1)
    impact: str
    step_index: Optional[int] = Field(None, alias="stepIndex")
    related_step_index: Optional[int] = Field(None, alias="relatedStepIndex")
    suggested_value: Optional[str] = Field(None, alias="suggestedValue")
    suggested_locator_strategy: Optional[str] = Field(None, alias="suggestedLocatorStrategy")
    suggested_locator: Optional[str] = Field(None, alias="suggestedLocator")


class LowScoreLocatorInsight(_Output):
    """Resolution hint for a step whose locator score is critical."""
    step_index: int = Field(..., alias="stepIndex")
    score: int
    title: str
    issue: str
    resolution: str
    suggested_locator: Optional[str] = Field(None, alias="suggestedLocator")
    suggested_locator_strategy: Optional[str] = Field(None, alias="suggestedLocatorStrategy")
    stable_locator: Optional[str] = Field(
        None,
        alias="stableLocator",
        description="Locator rebuilt from element attributes, never a class-only XPath"
    )
    stable_locator_strategy: Optional[str] = Field(None, alias="stableLocatorStrategy")


class RiskyStep(_Output):
    step_index: int = Field(..., alias="stepIndex")
    reason: str


class ScriptExplanation(_Output):
    """Plain-language walkthrough of the executable steps."""
    summary: str
    plain_english_steps: List[str] = Field(default_factory=list, alias="plainEnglishSteps")
    risky_steps: List[RiskyStep] = Field(default_factory=list, alias="riskySteps")
    wait_recommendations: List[str] = Field(default_factory=list, alias="waitRecommendations")


class ReplayFailureExplanation(_Output):
    """Classified replay failure with ordered remediation steps."""
    category: FailureCategory
    title: str
    explanation: str
    suggested_fixes: List[str] = Field(default_factory=list, alias="suggestedFixes")
    confidence: float = Field(..., ge=0, le=1)


class ScenarioOrganizationSuggestion(_Output):
    """Proposed name, tags and suites for a scenario."""
    suggested_name: str = Field(..., alias="suggestedName")
    tags: List[str] = Field(default_factory=list)
    suite_recommendations: List[str] = Field(default_factory=list, alias="suiteRecommendations")
    rationale: str


class IntegrationArea(_Output):
    """Assistant capability card shown in the mobile module."""
    id: str
    title: str
    description: str
    status: str = Field(..., description="safe_now or next_phase")


class CoachHint(_Output):
    """Contextual coaching hint for the recorder."""
    id: str
    priority: IssueSeverity
    title: str
    detail: str


class RecorderAskAIContext(_Output):
    """Recorder state snapshot used to answer questions and coach."""
    recording: bool = False
    is_paused: bool = Field(default=False, alias="isPaused")
    replaying: bool = False
    has_actions: bool = Field(default=False, alias="hasActions")
    connection_status: Optional[str] = Field(
        None,
        alias="connectionStatus",
        description="disconnected, connecting, connected"
    )
    selected_device: Optional[SelectedDevice] = Field(None, alias="selectedDevice")
    last_replay_status: Optional[str] = Field(None, alias="lastReplayStatus", description="PASS or FAIL")
    latest_failure: Optional[str] = Field(None, alias="latestFailure")


class MobilePromptInput(_Output):
    """Everything the assistant prompt is rendered from; all optional."""
    objective: str = ""
    app_package: Optional[str] = Field(None, alias="appPackage")
    scenario_name: Optional[str] = Field(None, alias="scenarioName")
    selected_device: Optional[SelectedDevice] = Field(None, alias="selectedDevice")
    additional_constraints: Optional[str] = Field(None, alias="additionalConstraints")
    steps: List[RecordedAction] = Field(default_factory=list)
    include_device_context: bool = Field(default=True, alias="includeDeviceContext")
    include_safety_rules: bool = Field(default=True, alias="includeSafetyRules")
