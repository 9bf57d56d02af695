"""Models for recorded mobile actions and their locators."""

import math
from datetime import datetime
from enum import Enum
from typing import Any, List, Optional
from pydantic import BaseModel, Field, ValidationError, field_validator


class ActionType(str, Enum):
    """Supported interaction and system action types."""
    TAP = "tap"
    DOUBLE_TAP = "doubleTap"
    LONG_PRESS = "longPress"
    INPUT = "input"
    SCROLL = "scroll"
    SWIPE = "swipe"
    WAIT = "wait"
    ASSERT = "assert"
    OPEN_APP = "openApp"
    STOP_APP = "stopApp"
    CLEAR_CACHE = "clearCache"
    HIDE_KEYBOARD = "hideKeyboard"
    PRESS_KEY = "pressKey"
    # Emitted by older helper builds
    UNINSTALL_APP = "uninstallApp"


class LocatorStrategy(str, Enum):
    """How a locator value is interpreted at replay time."""
    ID = "id"
    ACCESSIBILITY_ID = "accessibilityId"
    TEXT = "text"
    XPATH = "xpath"
    COORDINATES = "coordinates"
    ANDROID_UI_AUTOMATOR = "androidUiAutomator"


def _number_to_text(value: Any) -> Any:
    """Stringify numeric payloads the way the recorder stores them."""
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float)):
        return str(value)
    return value


def _text_or_none(value: Any) -> Optional[str]:
    """Numbers become text; anything else that is not text reads as missing."""
    if isinstance(value, bool):
        return None
    value = _number_to_text(value)
    return value if isinstance(value, str) else None


def _finite_number_or_none(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value if math.isfinite(value) else None


class LocatorCandidate(BaseModel):
    """One way of finding the target element."""
    strategy: str = Field(default="", description="Locator strategy tag")
    value: str = Field(default="", description="Locator value")
    score: Optional[float] = Field(None, description="Reliability score 0-100")
    source: Optional[str] = Field(None, description="inspector, legacy, healed, ...")
    reason: Optional[str] = Field(None, description="Why the candidate was chosen")

    class Config:
        frozen = True

    @field_validator("strategy", "value", mode="before")
    @classmethod
    def _coerce_text(cls, value):
        return _text_or_none(value) or ""

    @field_validator("source", "reason", mode="before")
    @classmethod
    def _coerce_optional_text(cls, value):
        return _text_or_none(value)

    @field_validator("score", mode="before")
    @classmethod
    def _ignore_non_numeric_score(cls, value):
        return _finite_number_or_none(value)


class LocatorBundle(BaseModel):
    """Primary locator plus ranked fallbacks used for self-healing."""
    version: int = Field(default=1, description="Bundle schema version")
    fingerprint: Optional[str] = Field(None, description="Element fingerprint")
    primary: Optional[LocatorCandidate] = Field(None, description="Preferred candidate")
    fallbacks: List[LocatorCandidate] = Field(
        default_factory=list,
        description="Alternate candidates, best first"
    )

    class Config:
        frozen = True

    @field_validator("fallbacks", mode="before")
    @classmethod
    def _drop_null_fallbacks(cls, value):
        if value is None:
            return []
        if isinstance(value, list):
            return [item for item in value if isinstance(item, (dict, LocatorCandidate))]
        return []

    @field_validator("version", mode="before")
    @classmethod
    def _default_version(cls, value):
        return value if isinstance(value, int) and not isinstance(value, bool) else 1

    @field_validator("fingerprint", mode="before")
    @classmethod
    def _coerce_fingerprint(cls, value):
        return _text_or_none(value)

    @field_validator("primary", mode="before")
    @classmethod
    def _ignore_non_mapping_primary(cls, value):
        return value if isinstance(value, (dict, LocatorCandidate)) else None


class Coordinates(BaseModel):
    """Screen coordinates for gesture-based actions."""
    x: float
    y: float
    end_x: Optional[float] = Field(None, alias="endX")
    end_y: Optional[float] = Field(None, alias="endY")

    class Config:
        frozen = True
        populate_by_name = True


class ElementMetadata(BaseModel):
    """Raw element attributes as reported by the helper agent."""
    resource_id: Optional[str] = Field(None, alias="resourceId")
    text: Optional[str] = None
    class_name: Optional[str] = Field(None, alias="class")
    content_desc: Optional[str] = Field(None, alias="contentDesc")
    bounds: Optional[str] = None

    class Config:
        frozen = True
        populate_by_name = True


class RecordedAction(BaseModel):
    """A single recorded step of a scenario."""
    id: str = Field(default="", description="Unique identifier for the action")
    type: ActionType = Field(..., description="Type of action to perform")
    description: str = Field(default="", description="Human-readable label")
    locator: str = Field(default="", description="Legacy raw locator")
    locator_strategy: Optional[str] = Field(
        None,
        alias="locatorStrategy",
        description="id, accessibilityId, text, xpath or coordinates"
    )
    locator_bundle: Optional[LocatorBundle] = Field(None, alias="locatorBundle")
    smart_xpath: Optional[str] = Field(None, alias="smartXPath")
    xpath: Optional[str] = None
    value: Optional[str] = Field(None, description="Payload; meaning depends on type")
    enabled: bool = Field(default=True, description="Whether the action is replayed")
    coordinates: Optional[Coordinates] = None
    timestamp: Optional[float] = None

    # Element metadata captured at record time
    element_id: Optional[str] = Field(None, alias="elementId")
    element_text: Optional[str] = Field(None, alias="elementText")
    element_class: Optional[str] = Field(None, alias="elementClass")
    element_content_desc: Optional[str] = Field(None, alias="elementContentDesc")
    element_fingerprint: Optional[str] = Field(None, alias="elementFingerprint")
    element_metadata: Optional[ElementMetadata] = Field(None, alias="elementMetadata")

    reliability_score: Optional[float] = Field(None, alias="reliabilityScore")
    assertion_type: Optional[str] = Field(
        None,
        alias="assertionType",
        description="visible, text_equals, enabled, disabled, toast, screen_loaded"
    )

    class Config:
        frozen = True
        populate_by_name = True

    @field_validator("id", "description", "locator", mode="before")
    @classmethod
    def _coerce_required_text(cls, value):
        return _text_or_none(value) or ""

    @field_validator(
        "locator_strategy",
        "smart_xpath",
        "xpath",
        "element_id",
        "element_text",
        "element_class",
        "element_content_desc",
        "element_fingerprint",
        "assertion_type",
        mode="before",
    )
    @classmethod
    def _coerce_optional_text(cls, value):
        return _text_or_none(value)

    @field_validator("value", mode="before")
    @classmethod
    def _coerce_value(cls, value):
        value = _number_to_text(value)
        return value if isinstance(value, str) else None

    @field_validator("enabled", mode="before")
    @classmethod
    def _default_enabled(cls, value):
        # Only an explicit false disables a step
        return value is not False

    @field_validator("reliability_score", "timestamp", mode="before")
    @classmethod
    def _ignore_non_numeric(cls, value):
        return _finite_number_or_none(value)

    @field_validator("coordinates", "locator_bundle", "element_metadata", mode="wrap")
    @classmethod
    def _drop_malformed_nested(cls, value, handler):
        # A broken sub-record reads as missing; the step itself is kept
        if not isinstance(value, (dict, BaseModel)):
            return None
        try:
            return handler(value)
        except ValidationError:
            return None


class SelectedDevice(BaseModel):
    """Device currently chosen for recording or replay."""
    id: Optional[str] = None
    device: str = Field(default="", description="ADB serial or AVD name")
    name: Optional[str] = None
    os_version: str = Field(default="", description="Android version")
    real_mobile: bool = Field(default=False, description="Physical device vs emulator")


class RecordedScenario(BaseModel):
    """A saved scenario row as returned by the scenario store."""
    id: Optional[str] = None
    name: str = Field(default="", description="Scenario name")
    description: Optional[str] = None
    steps: Any = Field(
        default_factory=list,
        description="Stored steps: a list or JSON-encoded text"
    )
    app_package: Optional[str] = None
    manual_script: Optional[str] = None
    user_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
