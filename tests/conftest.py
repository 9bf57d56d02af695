"""Shared fixtures for Scenario Assist tests."""

import pytest

from scenario_assist.models.actions import RecordedAction


def make_action(type_: str, **fields) -> RecordedAction:
    """Build an action from camelCase wire fields."""
    data = {"id": fields.pop("id", f"{type_}-step"), "type": type_, "description": "", "locator": ""}
    data.update(fields)
    return RecordedAction.model_validate(data)


@pytest.fixture
def action_factory():
    return make_action


@pytest.fixture
def login_actions():
    """A small login scenario without assertions."""
    return [
        make_action("openApp", id="s1", description="Open app", value="com.example.shop"),
        make_action("input", id="s2", description="Enter username", value="qa_user",
                    elementId="com.example.shop:id/username"),
        make_action("input", id="s3", description="Enter password", value="hunter2",
                    elementId="com.example.shop:id/password"),
        make_action("tap", id="s4", description="Tap Login", elementText="Login",
                    elementId="com.example.shop:id/login_button"),
    ]
