"""Tests for the recorder suggestion engine."""

from conftest import make_action
from scenario_assist.models.insights import IssueSeverity, RecorderSuggestionType
from scenario_assist.services.suggestion_engine import (
    build_low_score_locator_insights,
    build_recorder_ai_suggestions,
    get_target_fingerprint,
    make_action_signature,
)


def _of_type(suggestions, suggestion_type):
    return [s for s in suggestions if s.type == suggestion_type]


def _assert_step(text="Home"):
    return make_action("assert", elementText=text, description=f'Verify "{text}" is visible')


class TestSuggestionOrder:
    """Tests for the overall suggestion list."""

    def test_empty_scenario(self):
        """No actions, no suggestions."""
        assert build_recorder_ai_suggestions([]) == []

    def test_login_scenario(self, login_actions):
        """Hints and fallbacks per step, then scenario-level suggestions."""
        suggestions = build_recorder_ai_suggestions(login_actions)
        assert [s.type.value for s in suggestions] == [
            "action_hint", "ensure_fallbacks",
            "action_hint", "ensure_fallbacks",
            "action_hint", "ensure_fallbacks",
            "context_assertion",
            "group_flow",
            "add_assertion",
        ]

    def test_does_not_mutate_input(self, login_actions):
        """Suggestions never touch the actions."""
        snapshot = [a.model_dump() for a in login_actions]
        build_recorder_ai_suggestions(login_actions)
        assert [a.model_dump() for a in login_actions] == snapshot


class TestNamingSuggestions:
    """Tests for rename and action-hint suggestions."""

    def test_generic_name_gets_rename_and_hint(self):
        """A generic label with a target yields both suggestions."""
        actions = [make_action("tap", id="t", description="tap", elementText="Login"), _assert_step()]
        suggestions = build_recorder_ai_suggestions(actions)

        [rename] = _of_type(suggestions, RecorderSuggestionType.RENAME_STEP)
        [hint] = _of_type(suggestions, RecorderSuggestionType.ACTION_HINT)
        assert rename.id == "rename_t-0"
        assert rename.suggested_value == 'Tap "Login"'
        assert rename.severity == IssueSeverity.LOW
        assert hint.suggested_value == 'Tap "Login"'
        assert hint.detail == 'Prefill: Tap "Login"'

    def test_matching_description_gets_nothing(self):
        """A description equal to the friendly name is left alone."""
        actions = [make_action("tap", description='Tap "Login"', elementText="Login"), _assert_step()]
        suggestions = build_recorder_ai_suggestions(actions)
        assert not _of_type(suggestions, RecorderSuggestionType.RENAME_STEP)
        assert not _of_type(suggestions, RecorderSuggestionType.ACTION_HINT)

    def test_coordinate_description_is_generic(self):
        """Templated coordinate labels are renamed."""
        actions = [make_action("tap", description="Tap at (120, 480)", coordinates={"x": 120, "y": 480}), _assert_step()]
        [rename] = _of_type(build_recorder_ai_suggestions(actions), RecorderSuggestionType.RENAME_STEP)
        assert rename.step_index == 0

    def test_wait_rename_uses_duration(self):
        """Unlabelled waits are named after their duration."""
        actions = [make_action("wait", value="1500"), _assert_step()]
        [rename] = _of_type(build_recorder_ai_suggestions(actions), RecorderSuggestionType.RENAME_STEP)
        assert rename.suggested_value == "Wait 1500ms"

    def test_element_id_suffix_used_as_target(self):
        """Resource ids are shortened to their last path segment."""
        actions = [make_action("tap", description="Step 3", elementId="com.app:id/submit"), _assert_step()]
        [hint] = _of_type(build_recorder_ai_suggestions(actions), RecorderSuggestionType.ACTION_HINT)
        assert hint.suggested_value == 'Tap "submit"'


class TestLocatorSuggestions:
    """Tests for locator warnings and fallback suggestions."""

    def test_coordinate_only_tap(self):
        """Unstable locator: high warning without a replacement, medium fallbacks."""
        actions = [make_action("tap", id="t", coordinates={"x": 5, "y": 5}), _assert_step()]
        suggestions = build_recorder_ai_suggestions(actions)

        [warning] = _of_type(suggestions, RecorderSuggestionType.LOCATOR_WARNING)
        assert warning.severity == IssueSeverity.HIGH
        assert warning.confidence == 0.94
        assert warning.suggested_value is None
        assert warning.detail.startswith("No strong locator candidate found")
        assert warning.title == "Step 1 locator may be fragile"

        fallbacks = [s for s in _of_type(suggestions, RecorderSuggestionType.ENSURE_FALLBACKS) if s.step_index == 0]
        assert fallbacks[0].severity == IssueSeverity.MEDIUM

    def test_critical_score(self):
        """A score of 10 or less is critical."""
        actions = [make_action("tap", elementId="com.app:id/pay", reliabilityScore=5), _assert_step()]
        suggestions = build_recorder_ai_suggestions(actions)

        [warning] = _of_type(suggestions, RecorderSuggestionType.LOCATOR_WARNING)
        assert warning.title == "Critical locator risk at step 1 (<=10 score)"
        assert warning.severity == IssueSeverity.HIGH
        assert warning.suggested_value == "com.app:id/pay"
        assert warning.suggested_locator_strategy == "id"
        assert warning.reason.startswith("Low score and generic selectors")

        fallbacks = [s for s in _of_type(suggestions, RecorderSuggestionType.ENSURE_FALLBACKS) if s.step_index == 0]
        assert fallbacks[0].severity == IssueSeverity.HIGH

    def test_mid_score_is_medium(self):
        """Scores between 40 and 60 give a medium warning."""
        actions = [make_action("tap", elementText="Pay", reliabilityScore=50), _assert_step()]
        [warning] = _of_type(build_recorder_ai_suggestions(actions), RecorderSuggestionType.LOCATOR_WARNING)
        assert warning.severity == IssueSeverity.MEDIUM
        assert warning.confidence == 0.76
        assert warning.suggested_locator_strategy == "text"

    def test_weak_xpath_prefers_content_desc(self):
        """Weak class-only XPaths get a synthesized replacement."""
        action = make_action(
            "tap",
            locator='//*[@class="android.widget.Button"]',
            reliabilityScore=30,
            elementClass="android.widget.Button",
            elementContentDesc="Checkout",
        )
        [warning] = _of_type(build_recorder_ai_suggestions([action, _assert_step()]),
                             RecorderSuggestionType.LOCATOR_WARNING)
        # content-desc is a direct candidate before any synthesized XPath
        assert warning.suggested_value == "Checkout"
        assert warning.suggested_locator_strategy == "accessibilityId"
        assert warning.reason.startswith("Low score and generic selectors")

    def test_stable_with_fallbacks_is_quiet(self):
        """A good bundle needs neither warning nor fallbacks."""
        action = make_action("tap", description='Tap "OK"', elementText="OK", locatorBundle={
            "primary": {"strategy": "id", "value": "com.app:id/ok", "score": 90},
            "fallbacks": [{"strategy": "text", "value": "OK", "score": 56}],
        })
        suggestions = build_recorder_ai_suggestions([action, _assert_step()])
        assert not [s for s in suggestions if s.step_index == 0]


class TestDuplicateDetection:
    """Tests for duplicate-step detection."""

    def test_consecutive_identical_taps(self):
        """Back-to-back taps on the same element are flagged."""
        actions = [
            make_action("tap", id="a", elementId="com.app:id/ok"),
            make_action("tap", id="b", elementId="com.app:id/ok"),
        ]
        [dup] = _of_type(build_recorder_ai_suggestions(actions), RecorderSuggestionType.DUPLICATE_STEP)
        assert dup.id == "dup_b-1"
        assert dup.step_index == 1
        assert dup.related_step_index == 0

    def test_far_apart_taps_not_flagged(self):
        """Four distinct steps in between make the repeat intentional."""
        actions = [make_action("tap", elementId="com.app:id/ok")]
        actions += [_assert_step(f"Screen {n}") for n in range(4)]
        actions.append(make_action("tap", elementId="com.app:id/ok"))
        assert not _of_type(build_recorder_ai_suggestions(actions), RecorderSuggestionType.DUPLICATE_STEP)

    def test_three_apart_is_flagged(self):
        """Exactly three steps apart still counts."""
        actions = [make_action("tap", elementId="com.app:id/ok")]
        actions += [_assert_step(f"Screen {n}") for n in range(2)]
        actions.append(make_action("tap", elementId="com.app:id/ok"))
        [dup] = _of_type(build_recorder_ai_suggestions(actions), RecorderSuggestionType.DUPLICATE_STEP)
        assert dup.related_step_index == 0

    def test_nearest_prior_match_reported(self):
        """With several earlier matches, the closest is related."""
        actions = [make_action("tap", elementId="com.app:id/ok") for _ in range(3)]
        dups = _of_type(build_recorder_ai_suggestions(actions), RecorderSuggestionType.DUPLICATE_STEP)
        assert [(d.step_index, d.related_step_index) for d in dups] == [(1, 0), (2, 1)]

    def test_exempt_types(self):
        """Identical waits are never duplicates."""
        actions = [make_action("wait", value="500"), make_action("wait", value="500")]
        assert not _of_type(build_recorder_ai_suggestions(actions), RecorderSuggestionType.DUPLICATE_STEP)

    def test_disabled_steps_skipped(self):
        """A disabled repeat is not reported."""
        actions = [
            make_action("tap", elementId="com.app:id/ok"),
            make_action("tap", elementId="com.app:id/ok", enabled=False),
        ]
        assert not _of_type(build_recorder_ai_suggestions(actions), RecorderSuggestionType.DUPLICATE_STEP)

    def test_input_requires_same_value(self):
        """Inputs with the same value repeat, blank values do not."""
        same = [make_action("input", elementId="com.app:id/q", value="shoes") for _ in range(2)]
        blank = [make_action("input", elementId="com.app:id/q", value="") for _ in range(2)]
        assert _of_type(build_recorder_ai_suggestions(same), RecorderSuggestionType.DUPLICATE_STEP)
        assert not _of_type(build_recorder_ai_suggestions(blank), RecorderSuggestionType.DUPLICATE_STEP)

    def test_signature_and_fingerprint(self):
        """Signatures are lowercased, fingerprints normalized."""
        action = make_action("tap", locator="//*[@text='OK']", value="X",
                             coordinates={"x": 10, "y": 20}, elementText="  OK  Button ")
        assert make_action_signature(action) == "tap:://*[@text='ok']::x::10,20,,"
        assert get_target_fingerprint(action) == "|//*[@text='ok']||| ok button"


class TestAssertionSuggestions:
    """Tests for contextual and outcome-guard assertion suggestions."""

    def test_contextual_assertion_prefills_locator(self):
        """The first labelled step anchors the contextual assertion."""
        actions = [
            make_action("wait", value="500"),
            make_action("tap", elementText="Login", elementId="com.app:id/login"),
        ]
        suggestions = build_recorder_ai_suggestions(actions)

        [context] = _of_type(suggestions, RecorderSuggestionType.CONTEXT_ASSERTION)
        assert context.id == "context_assert_1"
        assert context.title == 'Verify "Login" appears'
        assert context.suggested_value == 'Assert "Login" is visible'
        assert context.suggested_locator == "com.app:id/login"
        assert context.suggested_locator_strategy == "id"
        assert context.severity == IssueSeverity.MEDIUM

        [guard] = _of_type(suggestions, RecorderSuggestionType.ADD_ASSERTION)
        assert guard.id == "add_assertion_outcome_guard"
        assert guard.severity == IssueSeverity.HIGH

    def test_long_labels_are_skipped(self):
        """Labels over 80 characters cannot anchor the assertion."""
        actions = [
            make_action("tap", elementText="x" * 81),
            make_action("tap", elementContentDesc="Cart"),
        ]
        [context] = _of_type(build_recorder_ai_suggestions(actions), RecorderSuggestionType.CONTEXT_ASSERTION)
        assert context.step_index == 1
        assert context.suggested_locator_strategy == "accessibilityId"

    def test_no_assertion_suggestions_when_asserted(self):
        """Scenarios with an assert get neither assertion suggestion."""
        actions = [make_action("tap", elementText="Login"), _assert_step()]
        suggestions = build_recorder_ai_suggestions(actions)
        assert not _of_type(suggestions, RecorderSuggestionType.CONTEXT_ASSERTION)
        assert not _of_type(suggestions, RecorderSuggestionType.ADD_ASSERTION)


class TestFlowGrouping:
    """Tests for the flow grouping suggestion."""

    def test_checkout_flow(self):
        """Checkout keywords group the steps."""
        actions = [
            make_action("tap", description="Open cart", elementText="Cart"),
            make_action("tap", description="Proceed to checkout", elementText="Checkout"),
            make_action("input", description="Card number", value="4111", elementId="com.app:id/card"),
            make_action("tap", description="Confirm payment", elementText="Pay"),
        ]
        [group] = _of_type(build_recorder_ai_suggestions(actions), RecorderSuggestionType.GROUP_FLOW)
        assert group.id == "flow_checkout_flow"
        assert group.suggested_value == "Checkout Flow"

    def test_short_scenarios_not_grouped(self):
        """Fewer than four steps never group."""
        actions = [make_action("tap", description="login with password", elementText="Login")] * 3
        assert not _of_type(build_recorder_ai_suggestions(actions), RecorderSuggestionType.GROUP_FLOW)


class TestLowScoreLocatorInsights:
    """Tests for build_low_score_locator_insights."""

    def test_only_critical_steps(self):
        """Steps scoring above 10 are skipped."""
        actions = [
            make_action("tap", elementId="com.app:id/ok", reliabilityScore=40),
            make_action("tap", locator='//*[@class="android.widget.Button"]', reliabilityScore=4,
                        elementClass="android.widget.Button", elementText="Buy"),
            make_action("wait", value="100", reliabilityScore=0),
        ]
        [insight] = build_low_score_locator_insights(actions)
        assert insight.step_index == 1
        assert insight.score == 4
        assert insight.title == "Step 2 has critical locator score (4/100)"
        assert insight.issue == 'Current locator is fragile: //*[@class="android.widget.Button"]'
        assert insight.resolution.startswith("Use text = Buy;")
        assert insight.suggested_locator == "Buy"
        assert insight.suggested_locator_strategy == "text"
        assert insight.stable_locator == '//android.widget.Button[normalize-space(@text)="Buy"]'
        assert insight.stable_locator_strategy == "xpath"

    def test_nothing_known(self):
        """Without any metadata the user is sent back to the Inspector."""
        [insight] = build_low_score_locator_insights([make_action("tap", reliabilityScore=0)])
        assert insight.issue == "Current step depends on weak/non-stable targeting."
        assert insight.resolution.startswith("Capture locator again")
        assert insight.suggested_locator is None
        assert insight.suggested_locator_strategy is None
        assert insight.stable_locator is None
        assert insight.stable_locator_strategy is None

    def test_unknown_primary_strategy_is_inferred(self):
        """A bundle primary with an unknown tag gets a strategy guessed from its value."""
        bundle = {"primary": {"strategy": "magic", "value": "com.app:id/pay"}}
        [insight] = build_low_score_locator_insights([
            make_action("tap", locatorBundle=bundle, reliabilityScore=2),
        ])
        assert insight.suggested_locator == "com.app:id/pay"
        assert insight.suggested_locator_strategy == "id"
        assert insight.stable_locator is None

    def test_stable_locator_skips_class_only_xpath(self):
        """A class-only smart XPath is never offered as the stable locator."""
        [insight] = build_low_score_locator_insights([
            make_action("tap", smartXPath='//*[@class="android.widget.Button"]',
                        elementContentDesc="Checkout", reliabilityScore=5),
        ])
        assert insight.suggested_locator == '//*[@class="android.widget.Button"]'
        assert insight.stable_locator == "Checkout"
        assert insight.stable_locator_strategy == "accessibilityId"
