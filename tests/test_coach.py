"""Tests for recorder coaching."""

from conftest import make_action
from scenario_assist.models.insights import IssueSeverity, RecorderAskAIContext
from scenario_assist.services.coach import (
    MOBILE_AI_INTEGRATION_AREAS,
    answer_recorder_question,
    build_contextual_coach_hints,
)


def _context(**fields) -> RecorderAskAIContext:
    return RecorderAskAIContext.model_validate(fields)


class TestAnswerRecorderQuestion:
    """Tests for answer_recorder_question."""

    def test_blank_question(self):
        """Blank questions get a prompt for a topic."""
        answer = answer_recorder_question("  ", _context())
        assert answer.startswith("Ask about recording")

    def test_recording_diagnostics(self):
        """Recording questions report the recorder state."""
        context = _context(recording=True, isPaused=True, connectionStatus="connected")
        answer = answer_recorder_question("Why is record not capturing taps?", context)
        assert answer.startswith("Recording diagnostics:")
        assert "Agent connection: connected" in answer
        assert "Device selected: no" in answer
        assert "Recording state: paused" in answer

    def test_recording_stopped_and_unknown_connection(self):
        """Missing status reads as unknown."""
        answer = answer_recorder_question("record not working", _context())
        assert "Agent connection: unknown" in answer
        assert "Recording state: stopped" in answer

    def test_replay_failure_uses_latest_failure(self):
        """The latest failure is classified."""
        context = _context(latestFailure="Timed out waiting for element")
        answer = answer_recorder_question("Why did replay fail?", context)
        assert answer.startswith("Replay failure guidance:")
        assert "The step likely ran before the UI was fully ready." in answer

    def test_replay_failure_without_details(self):
        """Without a failure the generic causes are listed."""
        answer = answer_recorder_question("replay failed", _context())
        assert "unstable locators, timing, or device connectivity" in answer

    def test_button_question(self):
        """UI questions describe the main areas."""
        assert answer_recorder_question("What does this button do?", _context()).startswith("Use Setup")

    def test_locator_question(self):
        """Locator questions give the preference order."""
        assert answer_recorder_question("Best locator?", _context()).startswith("Prefer id/accessibilityId")

    def test_fallback_answer(self):
        """Anything else lists what can be answered."""
        assert answer_recorder_question("hello", _context()).startswith("I can help with")


class TestContextualCoachHints:
    """Tests for build_contextual_coach_hints."""

    def test_fresh_recorder(self):
        """No device and no steps."""
        hints = build_contextual_coach_hints(_context(), [])
        assert [h.id for h in hints] == ["coach_select_device", "coach_start_recording"]
        assert all(h.priority == IssueSeverity.HIGH for h in hints)

    def test_paused_recording(self):
        """A paused recording is pointed out."""
        context = _context(recording=True, isPaused=True, selectedDevice={"device": "emulator-5554"})
        assert [h.id for h in build_contextual_coach_hints(context, [])] == ["coach_resume_recording"]

    def test_scenario_problems(self):
        """Step-level problems and a recent failure, in display order."""
        context = _context(
            selectedDevice={"device": "emulator-5554"},
            lastReplayStatus="FAIL",
            latestFailure="Element not found",
        )
        actions = [
            make_action("tap", coordinates={"x": 1, "y": 1}),
            make_action("wait", value="8000"),
        ]
        hints = build_contextual_coach_hints(context, actions)
        assert [h.id for h in hints] == [
            "coach_add_assertion",
            "coach_stabilize_locators",
            "coach_reduce_waits",
            "coach_replay_failed",
        ]
        assert hints[1].detail.startswith("1 step(s) rely on weak selectors")

    def test_healthy_scenario(self):
        """A stable, asserted scenario needs no hints."""
        context = _context(selectedDevice={"device": "emulator-5554"}, lastReplayStatus="PASS")
        actions = [make_action("tap", elementText="Go"), make_action("assert", elementText="Done")]
        assert build_contextual_coach_hints(context, actions) == []


class TestIntegrationAreas:
    """Tests for the capability cards."""

    def test_cards(self):
        """Six cards, half available now."""
        assert len(MOBILE_AI_INTEGRATION_AREAS) == 6
        statuses = [area.status for area in MOBILE_AI_INTEGRATION_AREAS]
        assert statuses.count("safe_now") == 3
        assert statuses.count("next_phase") == 3
        assert len({area.id for area in MOBILE_AI_INTEGRATION_AREAS}) == 6
