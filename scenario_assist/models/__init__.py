"""Data models for Scenario Assist."""

from scenario_assist.models.actions import (
    ActionType,
    LocatorStrategy,
    LocatorCandidate,
    LocatorBundle,
    Coordinates,
    ElementMetadata,
    RecordedAction,
    RecordedScenario,
    SelectedDevice,
)
from scenario_assist.models.insights import (
    IssueSeverity,
    RecorderSuggestionType,
    FailureCategory,
    AssistantIssue,
    RecorderAISuggestion,
    LowScoreLocatorInsight,
    RiskyStep,
    ScriptExplanation,
    ReplayFailureExplanation,
    ScenarioOrganizationSuggestion,
    IntegrationArea,
    CoachHint,
    RecorderAskAIContext,
    MobilePromptInput,
)

__all__ = [
    'ActionType',
    'LocatorStrategy',
    'LocatorCandidate',
    'LocatorBundle',
    'Coordinates',
    'ElementMetadata',
    'RecordedAction',
    'RecordedScenario',
    'SelectedDevice',
    'IssueSeverity',
    'RecorderSuggestionType',
    'FailureCategory',
    'AssistantIssue',
    'RecorderAISuggestion',
    'LowScoreLocatorInsight',
    'RiskyStep',
    'ScriptExplanation',
    'ReplayFailureExplanation',
    'ScenarioOrganizationSuggestion',
    'IntegrationArea',
    'CoachHint',
    'RecorderAskAIContext',
    'MobilePromptInput',
]
