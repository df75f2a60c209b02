"""Write path: drive an application form through its steps to a terminal outcome."""

import asyncio
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, List, Optional, Tuple, Union

from autoply.browser.forms import FormFiller, create_form_filler
from autoply.browser.session import BrowserSession
from autoply.config import AppConfig, load_app_config
from autoply.core.errors import (
    ActionFailed,
    AuthGateBlocked,
    StepLimitExceeded,
    SubmitControlNotFound,
    UnsupportedPlatform,
)
from autoply.core.models import FillResult, OutcomeStatus, Platform, SubmissionOptions, SubmissionOutcome
from autoply.platforms import PlatformAdapter, detect_platform, get_adapter
from autoply.utils.logging import get_logger, log_step_context

logger = get_logger(__name__)

SessionFactory = Callable[[], BrowserSession]
FillerFactory = Callable[[BrowserSession, SubmissionOptions], FormFiller]

AUTH_GATE_MESSAGE = (
    "{name} requires sign-in before applying. Log in once in a browser and "
    "set AUTOPLY_BROWSER_STORAGE_STATE to the saved session state."
)


class SubmissionState(str, Enum):
    """States of one submission run."""
    NOT_STARTED = "not_started"
    NAVIGATING = "navigating"
    AWAITING_FORM = "awaiting_form"
    BLOCKED = "blocked"
    FILLING_STEP = "filling_step"
    SUBMITTING = "submitting"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    AMBIGUOUS = "ambiguous"


@dataclass
class SubmissionRun:
    """Mutable state of a single call; never shared between calls."""
    url: str
    platform: Platform
    state: SubmissionState = SubmissionState.NOT_STARTED
    steps: int = 0
    fill: FillResult = field(default_factory=FillResult)
    history: List[SubmissionState] = field(default_factory=list)


class SubmissionStateMachine:
    """
    Multi-step submission driver over one PlatformAdapter.

    Each ``run`` opens its own BrowserSession and always disposes it. Soft
    fill errors accumulate; an auth gate, a missing control, a failed submit
    click or the step cap end the run early. ``run`` never raises.
    """

    def __init__(
        self,
        adapter: PlatformAdapter,
        config: Optional[AppConfig] = None,
        session_factory: Optional[SessionFactory] = None,
        filler_factory: Optional[FillerFactory] = None,
    ):
        self.adapter = adapter
        self.config = config or load_app_config()
        self.max_steps = self.config.application.max_steps
        self.session_factory = session_factory or (lambda: BrowserSession(self.config.browser))
        self.filler_factory = filler_factory or create_form_filler
        self.logger = get_logger(__name__, component="submission_state_machine", platform=adapter.platform.value)

    def _transition(self, run: SubmissionRun, state: SubmissionState) -> None:
        run.history.append(state)
        run.state = state
        self.logger.info(
            "Submission state changed",
            state=state.value,
            **log_step_context(run.platform.value, run.url, run.steps)
        )

    async def run(self, url: str, options: SubmissionOptions) -> SubmissionOutcome:
        run = SubmissionRun(url=url, platform=self.adapter.platform)
        try:
            async with self.session_factory() as session:
                return await self._drive(session, run, options)
        except Exception as e:
            self.logger.error(
                "Submission failed with an unexpected error",
                url=url,
                state=run.state.value,
                error=str(e),
                error_type=type(e).__name__
            )
            self._transition(run, SubmissionState.FAILED)
            message = str(e) or type(e).__name__
            return self._outcome(run, OutcomeStatus.FAILED, message, extra_errors=[message])

    async def _drive(self, session: BrowserSession, run: SubmissionRun, options: SubmissionOptions) -> SubmissionOutcome:
        self._transition(run, SubmissionState.NAVIGATING)
        await session.human.delay()
        await session.navigate(run.url)
        await session.human.delay(short=True)
        await session.human.scroll(session)

        self._transition(run, SubmissionState.AWAITING_FORM)
        try:
            submit = await self._advance_to_submit(session, run, options)
        except AuthGateBlocked as e:
            self._transition(run, SubmissionState.BLOCKED)
            return self._outcome(run, OutcomeStatus.BLOCKED, str(e), extra_errors=["Authentication required"])
        except (StepLimitExceeded, SubmitControlNotFound) as e:
            self._transition(run, SubmissionState.FAILED)
            return self._outcome(run, OutcomeStatus.FAILED, str(e))

        self._transition(run, SubmissionState.SUBMITTING)
        await session.human.delay(short=True)
        try:
            await session.act(submit, "click", critical=True)
        except ActionFailed as e:
            self._transition(run, SubmissionState.FAILED)
            return self._outcome(
                run, OutcomeStatus.FAILED, "Could not click the submit control", extra_errors=[str(e)]
            )

        self._transition(run, SubmissionState.AWAITING_CONFIRMATION)
        await session.wait_for_load_state(timeout=session.config.form_timeout)
        await session.human.delay()
        detected = await self.adapter.detect_outcome(session)
        screenshot_ref = await self._capture(session, run, options)

        self._transition(run, SubmissionState(detected.status.value))
        extra = [detected.message] if detected.status == OutcomeStatus.FAILED else []
        if screenshot_ref is None and self.config.application.save_screenshots:
            extra.append("Failed to save screenshot")
        return self._outcome(run, detected.status, detected.message, extra_errors=extra, screenshot_ref=screenshot_ref)

    async def _advance_to_submit(self, session: BrowserSession, run: SubmissionRun, options: SubmissionOptions) -> Any:
        """Open the form and fill steps until a submit control is ready."""
        await self.adapter.locate_apply_entry(session)
        if not await self.adapter.wait_for_form(session):
            self.logger.warning("Continuing without a recognized form container", url=run.url)

        if await self.adapter.check_auth_gate(session):
            raise AuthGateBlocked(AUTH_GATE_MESSAGE.format(name=self.adapter.spec.display_name))

        filler = self.filler_factory(session, options)
        while run.steps < self.max_steps:
            run.steps += 1
            self._transition(run, SubmissionState.FILLING_STEP)
            run.fill = run.fill.merge(await self.adapter.fill_step(session, options, filler))

            submit, next_control = await self._find_control(session)
            if submit is not None:
                return submit
            if next_control is None:
                raise SubmitControlNotFound("Could not find a next or submit control")

            await session.human.delay(short=True)
            if not await session.act(next_control, "click"):
                raise SubmitControlNotFound(f"Could not advance past step {run.steps}")
            await session.wait_for_load_state(timeout=session.config.form_timeout)

        raise StepLimitExceeded(self.max_steps)

    async def _find_control(self, session: BrowserSession) -> Tuple[Optional[Any], Optional[Any]]:
        """Poll for a submit control, then a next control; submit wins."""
        loop = asyncio.get_running_loop()
        deadline = loop.time() + session.config.selector_timeout
        while True:
            submit = await self.adapter.find_submit_control(session)
            if submit is not None:
                return submit, None
            next_control = await self.adapter.find_next_control(session)
            if next_control is not None:
                return None, next_control
            if loop.time() >= deadline:
                return None, None
            await asyncio.sleep(session.resolver.poll_interval)

    async def _capture(self, session: BrowserSession, run: SubmissionRun, options: SubmissionOptions) -> Optional[str]:
        if not self.config.application.save_screenshots:
            return None
        path = options.screenshot_path or str(
            Path(self.config.application.screenshot_dir) / f"{run.platform.value}_{int(time.time() * 1000)}.png"
        )
        return await session.screenshot(path)

    def _outcome(
        self,
        run: SubmissionRun,
        status: OutcomeStatus,
        message: str,
        extra_errors: Optional[List[str]] = None,
        screenshot_ref: Optional[str] = None,
    ) -> SubmissionOutcome:
        if status == OutcomeStatus.AMBIGUOUS:
            success = self.config.application.ambiguous_is_success
        else:
            success = status == OutcomeStatus.SUCCEEDED

        outcome = SubmissionOutcome(
            success=success,
            status=status,
            message=message,
            errors=run.fill.errors + (extra_errors or []),
            screenshot_ref=screenshot_ref,
            steps=run.steps,
        )
        self.logger.info(
            "Submission finished",
            status=status.value,
            success=success,
            steps=run.steps,
            errors=len(outcome.errors)
        )
        return outcome


async def submit_application(
    url: str,
    options: SubmissionOptions,
    platform: Optional[Union[str, Platform]] = None,
    config: Optional[AppConfig] = None,
    session_factory: Optional[SessionFactory] = None,
    filler_factory: Optional[FillerFactory] = None,
) -> SubmissionOutcome:
    """
    Submit an application and report the outcome. Never raises.

    Args:
        url: Posting or application URL
        options: Profile, documents and pre-answered questions
        platform: Platform id; detected from the URL when None
        config: Configuration, from settings when None
        session_factory: Override for session creation
        filler_factory: Override for the FormFiller collaborator

    Returns:
        SubmissionOutcome describing the terminal state
    """
    try:
        adapter = get_adapter(platform or detect_platform(url))
    except UnsupportedPlatform as e:
        logger.error("Cannot submit application", url=url, error=str(e))
        return SubmissionOutcome(success=False, status=OutcomeStatus.FAILED, message=str(e), errors=[str(e)])

    machine = SubmissionStateMachine(
        adapter,
        config=config,
        session_factory=session_factory,
        filler_factory=filler_factory,
    )
    return await machine.run(url, options)
