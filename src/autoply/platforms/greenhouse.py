"""Greenhouse job boards (boards.greenhouse.io)."""

import re
from typing import Optional

from autoply.browser.forms import FormFiller, find_best_option
from autoply.browser.session import BrowserSession
from autoply.core.models import ApplicantProfile, FillResult, Platform, SubmissionOptions
from autoply.platforms.base import AdapterSpec, PlatformAdapter

GREENHOUSE_SPEC = AdapterSpec(
    platform=Platform.GREENHOUSE,
    display_name="Greenhouse",
    question_prefix="greenhouse",
    ready=("#app_body", ".app-body", '[data-mapped="true"]', "h1"),
    title=("h1.app-title", 'h1[class*="job-title"]', ".job-title h1", "h1"),
    company=(".company-name", '[class*="company"]'),
    description=("#content", ".content", '[class*="job-description"]'),
    location=(".location", '[class*="location"]'),
    company_url_patterns=(r"boards[^/]*/([^/?#]+)",),
    question_containers=(
        '[class*="custom-question"]',
        "[data-question]",
        "#custom_fields .field",
        '.field:has(select), .field:has(input[type="radio"])',
        '[id*="question"], [class*="question"]',
    ),
    question_label=("label", ".field-label", "legend"),
    apply_entry=(
        "#apply_button",
        'a[href*="#app"]',
        'button:has-text("Apply")',
        'a:has-text("Apply for this job")',
        ".application-button",
        '[data-test="apply-button"]',
    ),
    form=("#application_form", "#application", 'form[id*="application"]', ".application-form", "#main_fields"),
    first_name=("#first_name", 'input[name="job_application[first_name]"]'),
    last_name=("#last_name", 'input[name="job_application[last_name]"]'),
    email=("#email", 'input[name="job_application[email]"]'),
    phone=("#phone", 'input[name="job_application[phone]"]'),
    resume=(
        '#resume_upload input[type="file"]',
        '#s3_upload_for_resume input[type="file"]',
        'input[type="file"][name*="resume"]',
        '[data-field="resume"] input[type="file"]',
    ),
    cover_letter=(
        '#cover_letter_upload input[type="file"]',
        '#s3_upload_for_cover_letter input[type="file"]',
        'input[type="file"][name*="cover"]',
        '[data-field="cover_letter"] input[type="file"]',
    ),
    submit_controls=(
        "#submit_app",
        'button[type="submit"]',
        'input[type="submit"]',
        'button:has-text("Submit Application")',
    ),
    success_markers=(
        ".confirmation",
        "#confirmation",
        '[class*="thank"]',
        'h1:has-text("Thank")',
        'h2:has-text("Thank")',
    ),
    error_markers=(
        ".error-message",
        ".field-error",
        ".form-error",
        ".flash-error",
        '[role="alert"]',
        ".application--error",
    ),
)

# Answers for common screening selects left empty by the filler
DEFAULT_ANSWERS = [
    (re.compile(r"relocat|willing.*move|open.*move", re.IGNORECASE), "Yes"),
    (re.compile(r"open.*working.*in-person|work.*office|hybrid", re.IGNORECASE), "Yes"),
    (re.compile(r"authorized.*work|legally.*work|eligible.*work|right.*work", re.IGNORECASE), "Yes"),
    (re.compile(r"sponsor", re.IGNORECASE), "No"),
    (re.compile(r"18.*years|legal.*age|at.*least.*18", re.IGNORECASE), "Yes"),
    (re.compile(r"background.*check|consent.*check", re.IGNORECASE), "Yes"),
    (re.compile(r"how.*hear|where.*find|referral", re.IGNORECASE), "Job Board"),
    (re.compile(r"gender|pronouns|race|ethnicity|hispanic|latino", re.IGNORECASE), "Decline to self identify"),
    (re.compile(r"veteran|military", re.IGNORECASE), "I am not"),
    (re.compile(r"disability|disabled", re.IGNORECASE), "I don't wish to answer"),
    (re.compile(r"\bai\b.*policy|acknowledge|agree.*policy|consent.*\bai\b", re.IGNORECASE), "I acknowledge"),
    (re.compile(r"interviewed.*before|applied.*before", re.IGNORECASE), "No"),
]

LOCATION_INPUTS = (
    "#job_application_location",
    'input[name*="location"]',
    'input[id*="location"]',
    'input[placeholder*="City"]',
    'input[placeholder*="Location"]',
    'input[autocomplete="address-level2"]',
)
LOCATION_SUGGESTIONS = ('[class*="autocomplete"] li', '[class*="suggestion"]', '[role="option"]')

# React-Select widgets rendered in place of native selects on newer boards
REACT_SELECT_CONTAINER = "div.select:has(.select__control)"
REACT_SELECT_LABELS = (".select__label", "label")


def default_answer(label: str) -> Optional[str]:
    for pattern, answer in DEFAULT_ANSWERS:
        if pattern.search(label):
            return answer
    return None


class GreenhouseAdapter(PlatformAdapter):
    """Greenhouse forms are single-page, with an intl-tel-input phone widget."""

    async def fill_phone_country(self, session: BrowserSession, profile: ApplicantProfile) -> FillResult:
        result = FillResult()
        if not profile.phone_country:
            return result

        flag = await session.resolver.resolve((".iti__selected-flag", ".iti__flag-container"), timeout=0)
        if flag is None or not await session.act(flag, "click"):
            return result

        country = await session.resolver.resolve(
            (f'.iti__country:has-text("{profile.phone_country}")',),
            predicate=session.is_visible,
        )
        if country is not None:
            result.record("phone_country", await session.act(country, "click"))
        return result

    async def fill_step(self, session: BrowserSession, options: SubmissionOptions, filler: FormFiller) -> FillResult:
        result = await super().fill_step(session, options, filler)
        result = result.merge(await self.fill_location(session, options.profile))
        return result.merge(await self.fill_screening_selects(session))

    async def fill_location(self, session: BrowserSession, profile: ApplicantProfile) -> FillResult:
        """Type the location and confirm the first autocomplete suggestion, or Tab out."""
        result = FillResult()
        if not profile.location:
            return result

        field = await session.resolver.resolve(LOCATION_INPUTS, predicate=session.is_visible, timeout=0)
        if field is None:
            return result

        await session.act(field, "click")
        filled = await session.act(field, "fill", profile.location)
        result.record("location", filled, None if filled else "Failed to fill location")
        if not filled:
            return result
        await session.human.delay(short=True)

        suggestion = await session.resolver.resolve(LOCATION_SUGGESTIONS, predicate=session.is_visible)
        if suggestion is not None:
            await session.act(suggestion, "click")
            await session.human.delay(short=True)
        else:
            await session.act(field, "press", "Tab")
        return result

    async def fill_screening_selects(self, session: BrowserSession) -> FillResult:
        """Answer still-empty screening dropdowns, React-Select first, with conservative defaults."""
        result = await self.fill_react_selects(session)

        for select in await session.query_all("select"):
            if await session.input_value(select):
                continue
            label = await session.label_for(select)
            answer = default_answer(label) if label else None
            if answer is None:
                continue
            option = find_best_option(answer, await session.option_texts(select))
            if option:
                result.record(label[:50], await session.act(select, "select", option))
        return result

    async def fill_react_selects(self, session: BrowserSession) -> FillResult:
        """
        Answer React-Select dropdowns, which are div widgets rather than <select>.

        A widget already showing a single value is left alone. The menu is
        opened through its control, and closed with Escape when no option
        matches the default answer.
        """
        result = FillResult()
        for container in await session.query_all(REACT_SELECT_CONTAINER):
            if await session.query(".select__single-value", container) is not None:
                continue
            label = await session.resolver.first_text(REACT_SELECT_LABELS, root=container)
            answer = default_answer(label) if label else None
            if answer is None:
                continue

            control = await session.query(".select__control", container)
            if control is None or not await session.act(control, "click"):
                continue
            await session.human.delay(short=True)

            options = await session.query_all(".select__option")
            texts = [await session.text(option) for option in options]
            choice = find_best_option(answer, texts)
            if choice is None:
                self.logger.debug("No matching dropdown option", label=label[:50], answer=answer)
                await session.act(control, "press", "Escape")
                continue

            clicked = await session.act(options[texts.index(choice)], "click")
            result.record(label[:50], clicked)
            if clicked:
                await session.human.delay(short=True)
        return result


ADAPTER = GreenhouseAdapter(GREENHOUSE_SPEC)
