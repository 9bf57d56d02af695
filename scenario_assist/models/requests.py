"""Request and response envelopes for the analysis API."""

from typing import Any, List, Optional
from pydantic import BaseModel, Field

from scenario_assist.models.actions import RecordedAction, SelectedDevice
from scenario_assist.models.insights import AssistantIssue, RecorderAskAIContext


class _Envelope(BaseModel):
    class Config:
        populate_by_name = True


class ScenarioStepsRequest(_Envelope):
    """Steps to analyze, as a list or JSON-encoded text."""
    steps: Any = Field(default_factory=list, description="Recorded steps (list or JSON string)")

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "steps": [
                    {"id": "a1", "type": "tap", "description": "Tap Login", "locator": "", "elementId": "com.app:id/login"},
                    {"id": "a2", "type": "wait", "description": "Wait", "locator": "", "value": "6000"},
                    {"id": "a3", "type": "assert", "description": "Verify home", "locator": "", "elementText": "Welcome"},
                ]
            }
        }


class ScenarioAnalysisResponse(_Envelope):
    """Issues found in a scenario with its readiness score."""
    step_count: int = Field(..., alias="stepCount")
    readiness_score: int = Field(..., alias="readinessScore", ge=0, le=100)
    issues: List[AssistantIssue] = Field(default_factory=list)


class NormalizedStepsResponse(_Envelope):
    steps: List[RecordedAction] = Field(default_factory=list)


class ReplayFailureRequest(_Envelope):
    """Replay failure message and, optionally, the step that failed."""
    message: Optional[str] = Field(None, description="Failure text from the replay engine")
    failed_action: Any = Field(None, alias="failedAction", description="Step that failed")


class OrganizationRequest(ScenarioStepsRequest):
    app_package: Optional[str] = Field(None, alias="appPackage")
    current_name: Optional[str] = Field(None, alias="currentName")


class PromptRequest(ScenarioStepsRequest):
    """Prompt inputs; every field is optional."""
    objective: str = ""
    app_package: Optional[str] = Field(None, alias="appPackage")
    scenario_name: Optional[str] = Field(None, alias="scenarioName")
    selected_device: Optional[SelectedDevice] = Field(None, alias="selectedDevice")
    additional_constraints: Optional[str] = Field(None, alias="additionalConstraints")
    include_device_context: bool = Field(default=True, alias="includeDeviceContext")
    include_safety_rules: bool = Field(default=True, alias="includeSafetyRules")


class PromptResponse(_Envelope):
    prompt: str


class CoachHintsRequest(ScenarioStepsRequest):
    context: RecorderAskAIContext = Field(default_factory=RecorderAskAIContext)


class CoachQuestionRequest(_Envelope):
    question: str = ""
    context: RecorderAskAIContext = Field(default_factory=RecorderAskAIContext)


class CoachAnswerResponse(_Envelope):
    answer: str
