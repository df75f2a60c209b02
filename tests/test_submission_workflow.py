"""Tests for the submission state machine over the in-memory browser."""

import pytest

from conftest import FakeElement
from autoply.browser.session import BrowserSession
from autoply.config import ApplicationConfig
from autoply.core.models import FillResult, OutcomeStatus, Platform
from autoply.jobs.submission import SubmissionState, SubmissionStateMachine, submit_application
from autoply.platforms import get_adapter
from autoply.platforms.base import AdapterSpec, PlatformAdapter
from autoply.platforms.greenhouse import GREENHOUSE_SPEC, GreenhouseAdapter

URL = "https://boards.greenhouse.io/acme/jobs/1"


class ActionElement(FakeElement):
    """Element that changes the page when clicked."""

    def __init__(self, text, on_click, **kwargs):
        super().__init__(text, **kwargs)
        self.on_click = on_click

    async def click(self):
        await super().click()
        self.on_click()


class StubAdapter(PlatformAdapter):
    """Adapter that never offers a submit control; each step reports ``errors``."""

    def __init__(self, errors=()):
        super().__init__(AdapterSpec(platform=Platform.GENERIC, display_name="Stub", question_prefix="stub"))
        self.errors = list(errors)
        self.fill_calls = 0

    async def fill_step(self, session, options, filler):
        self.fill_calls += 1
        return FillResult(errors=list(self.errors), success=not self.errors)

    async def find_submit_control(self, session):
        return None


class FaultyAdapter(GreenhouseAdapter):
    """Greenhouse adapter raising at a chosen capability."""

    def __init__(self, fault):
        super().__init__(GREENHOUSE_SPEC)
        self.fault = fault
        self.fill_calls = 0

    async def fill_step(self, session, options, filler):
        self.fill_calls += 1
        if self.fault == "fill" or (self.fault == "second_fill" and self.fill_calls == 2):
            raise RuntimeError("fill exploded")
        return await super().fill_step(session, options, filler)

    async def detect_outcome(self, session):
        if self.fault == "detect":
            raise RuntimeError("detect exploded")
        return await super().detect_outcome(session)


def with_application(app_config, **overrides):
    application = app_config.application.model_dump()
    application.update(overrides)
    return app_config.model_copy(update={"application": ApplicationConfig(**application)})


def greenhouse_form(page, after_submit=None):
    """Single-step Greenhouse form; ``after_submit`` runs when submit is clicked."""
    page.add("#application_form", FakeElement())
    page.add("#first_name", FakeElement()).add("#last_name", FakeElement()).add("#email", FakeElement())
    submit = ActionElement("Submit Application", lambda: after_submit(page) if after_submit else None)
    page.add("#submit_app", submit)
    return submit


def show_confirmation(page):
    page.add(".confirmation", FakeElement("Thank you for applying to Acme!"))


class TestSubmissionStateMachine:
    """Terminal outcomes of the submission flow."""

    @pytest.mark.asyncio
    async def test_single_step_success(self, fake_playwright, page, app_config, options):
        submit = greenhouse_form(page, show_confirmation)
        machine = SubmissionStateMachine(get_adapter(Platform.GREENHOUSE), config=app_config)

        outcome = await machine.run(URL, options)

        assert outcome.status == OutcomeStatus.SUCCEEDED
        assert outcome.success is True
        assert outcome.message == "Thank you for applying to Acme!"
        assert outcome.steps == 1
        assert outcome.errors == []
        assert outcome.screenshot_ref is None
        assert submit.actions == [("click",)]
        assert page.selectors["#first_name"][0].value == "Ada"
        assert page.close_calls == 1
        assert fake_playwright.stop_calls == 1

    @pytest.mark.asyncio
    async def test_multi_step_form(self, fake_playwright, page, app_config, options):
        page.add("#application_form", FakeElement())

        def advance(current):
            current.selectors.pop('button:has-text("Next")')
            current.add("#submit_app", ActionElement("Submit", lambda: show_confirmation(current)))

        page.add('button:has-text("Next")', ActionElement("Next", lambda: advance(page)))

        outcome = await submit_application(URL, options, config=app_config)

        assert outcome.status == OutcomeStatus.SUCCEEDED
        assert outcome.steps == 2

    @pytest.mark.asyncio
    async def test_submit_preferred_over_next(self, fake_playwright, page, app_config, options):
        greenhouse_form(page, show_confirmation)
        next_button = FakeElement("Next")
        page.add('button:has-text("Next")', next_button)

        outcome = await submit_application(URL, options, config=app_config)

        assert outcome.steps == 1
        assert next_button.actions == []

    @pytest.mark.asyncio
    async def test_step_cap(self, fake_playwright, page, app_config, options):
        page.add("form", FakeElement())
        page.add('button:has-text("Continue")', FakeElement("Continue"))
        adapter = StubAdapter()

        outcome = await SubmissionStateMachine(adapter, config=app_config).run(URL, options)

        assert outcome.status == OutcomeStatus.FAILED
        assert outcome.message == "Could not complete application within 3 steps"
        assert outcome.errors == []
        assert adapter.fill_calls == 3

    @pytest.mark.asyncio
    async def test_step_cap_keeps_fill_errors(self, fake_playwright, page, app_config, options):
        page.add("form", FakeElement())
        next_button = FakeElement("Next")
        page.add('button:has-text("Next")', next_button)
        adapter = StubAdapter(errors=["Failed to fill phone"])

        outcome = await SubmissionStateMachine(adapter, config=app_config).run(URL, options)

        assert outcome.status == OutcomeStatus.FAILED
        assert outcome.success is False
        assert outcome.message == "Could not complete application within 3 steps"
        assert outcome.steps == 3
        assert adapter.fill_calls == 3
        assert outcome.errors == ["Failed to fill phone"] * 3
        assert len(next_button.actions) == 3
        assert page.close_calls == 1

    @pytest.mark.asyncio
    async def test_missing_controls(self, fake_playwright, page, app_config, options):
        page.add("#application_form", FakeElement())

        outcome = await submit_application(URL, options, config=app_config)

        assert outcome.status == OutcomeStatus.FAILED
        assert outcome.message == "Could not find a next or submit control"
        assert outcome.steps == 1

    @pytest.mark.asyncio
    async def test_auth_gate_blocks(self, fake_playwright, page, app_config, options):
        page.add("form", FakeElement())
        page.add('button:has-text("Sign in")', FakeElement("Sign in"))

        outcome = await submit_application("https://www.linkedin.com/jobs/view/1", options, config=app_config)

        assert outcome.status == OutcomeStatus.BLOCKED
        assert outcome.success is False
        assert outcome.message.startswith("LinkedIn requires sign-in")
        assert outcome.errors == ["Authentication required"]
        assert outcome.steps == 0
        assert page.close_calls == 1

    @pytest.mark.asyncio
    async def test_error_marker_fails(self, fake_playwright, page, app_config, options):
        greenhouse_form(page, lambda p: p.add(".error-message", FakeElement("Email is invalid")))

        outcome = await submit_application(URL, options, config=app_config)

        assert outcome.status == OutcomeStatus.FAILED
        assert outcome.message == "Email is invalid"
        assert outcome.errors == ["Email is invalid"]

    @pytest.mark.asyncio
    async def test_submit_click_failure(self, fake_playwright, page, app_config, options):
        submit = greenhouse_form(page)
        submit.failing_actions.add("click")

        outcome = await submit_application(URL, options, config=app_config)

        assert outcome.status == OutcomeStatus.FAILED
        assert outcome.message == "Could not click the submit control"
        assert outcome.errors == ["click failed: click failed"]

    @pytest.mark.asyncio
    async def test_ambiguous_counts_as_success_by_default(self, fake_playwright, page, app_config, options):
        greenhouse_form(page)

        outcome = await submit_application(URL, options, config=app_config)

        assert outcome.status == OutcomeStatus.AMBIGUOUS
        assert outcome.success is True

    @pytest.mark.asyncio
    async def test_ambiguous_policy_is_configurable(self, fake_playwright, page, app_config, options):
        greenhouse_form(page)
        config = with_application(app_config, ambiguous_is_success=False)

        outcome = await submit_application(URL, options, config=config)

        assert outcome.status == OutcomeStatus.AMBIGUOUS
        assert outcome.success is False

    @pytest.mark.asyncio
    async def test_confirmation_url_succeeds(self, fake_playwright, page, app_config, options):
        greenhouse_form(page, lambda p: setattr(p, "url", URL + "/thank-you"))

        outcome = await submit_application(URL, options, config=app_config)

        assert outcome.status == OutcomeStatus.SUCCEEDED

    @pytest.mark.asyncio
    async def test_state_history(self, fake_playwright, page, app_config, options):
        greenhouse_form(page, show_confirmation)
        machine = SubmissionStateMachine(get_adapter(Platform.GREENHOUSE), config=app_config)
        states = []
        original = machine._transition
        machine._transition = lambda run, state: (states.append(state), original(run, state))

        await machine.run(URL, options)

        assert states == [
            SubmissionState.NAVIGATING,
            SubmissionState.AWAITING_FORM,
            SubmissionState.FILLING_STEP,
            SubmissionState.SUBMITTING,
            SubmissionState.AWAITING_CONFIRMATION,
            SubmissionState.SUCCEEDED,
        ]


class TestScreenshots:
    """Post-submit screenshot capture."""

    @pytest.mark.asyncio
    async def test_screenshot_saved_under_directory(self, fake_playwright, page, app_config, options, tmp_path):
        greenhouse_form(page, show_confirmation)
        config = with_application(app_config, save_screenshots=True, screenshot_dir=str(tmp_path / "shots"))

        outcome = await submit_application(URL, options, config=config)

        assert outcome.screenshot_ref.startswith(str(tmp_path / "shots" / "greenhouse_"))
        assert outcome.screenshot_ref.endswith(".png")
        assert page.screenshots == [(outcome.screenshot_ref, True)]

    @pytest.mark.asyncio
    async def test_explicit_screenshot_path(self, fake_playwright, page, app_config, options, tmp_path):
        greenhouse_form(page, show_confirmation)
        config = with_application(app_config, save_screenshots=True)
        path = str(tmp_path / "final.png")

        outcome = await submit_application(URL, options.model_copy(update={"screenshot_path": path}), config=config)

        assert outcome.screenshot_ref == path

    @pytest.mark.asyncio
    async def test_screenshot_failure_is_a_soft_error(self, fake_playwright, page, app_config, options):
        greenhouse_form(page, show_confirmation)
        page.screenshot_fails = True
        config = with_application(app_config, save_screenshots=True)

        outcome = await submit_application(URL, options, config=config)

        assert outcome.status == OutcomeStatus.SUCCEEDED
        assert outcome.screenshot_ref is None
        assert outcome.errors == ["Failed to save screenshot"]


class TestResourceRelease:
    """The session is disposed exactly once whatever fails."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("fault", ["navigate", "fill", "detect"])
    async def test_fault_injection(self, fake_playwright, page, app_config, options, fault):
        greenhouse_form(page, show_confirmation)
        if fault == "navigate":
            page.goto_failures = 2

        outcome = await SubmissionStateMachine(FaultyAdapter(fault), config=app_config).run(URL, options)

        assert outcome.status == OutcomeStatus.FAILED
        assert outcome.success is False
        assert outcome.errors
        assert page.close_calls == 1
        assert fake_playwright.browser.close_calls == 1
        assert fake_playwright.stop_calls == 1

    @pytest.mark.asyncio
    async def test_fault_on_second_step(self, fake_playwright, page, app_config, options):
        page.add("#application_form", FakeElement())
        page.add('button:has-text("Next")', FakeElement("Next"))
        adapter = FaultyAdapter("second_fill")

        outcome = await SubmissionStateMachine(adapter, config=app_config).run(URL, options)

        assert outcome.status == OutcomeStatus.FAILED
        assert outcome.errors == ["fill exploded"]
        assert adapter.fill_calls == 2
        assert page.close_calls == 1
        assert fake_playwright.stop_calls == 1

    @pytest.mark.asyncio
    async def test_initialization_failure(self, fake_playwright, app_config, options):
        fake_playwright.browser.context_error = RuntimeError("no display")

        outcome = await submit_application(URL, options, config=app_config)

        assert outcome.status == OutcomeStatus.FAILED
        assert "no display" in outcome.message
        assert fake_playwright.stop_calls == 1

    @pytest.mark.asyncio
    async def test_custom_session_factory(self, fake_playwright, page, app_config, options):
        greenhouse_form(page, show_confirmation)
        created = []

        def factory():
            created.append(BrowserSession(app_config.browser))
            return created[-1]

        outcome = await submit_application(URL, options, config=app_config, session_factory=factory)

        assert outcome.success
        assert len(created) == 1
        assert created[0].is_disposed

    @pytest.mark.asyncio
    async def test_unknown_platform_never_raises(self, app_config, options):
        outcome = await submit_application(URL, options, platform="monster", config=app_config)

        assert outcome.status == OutcomeStatus.FAILED
        assert outcome.errors == ["No adapter available for platform: monster"]
