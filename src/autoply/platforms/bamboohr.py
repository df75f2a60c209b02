"""BambooHR career pages (<company>.bamboohr.com)."""

import re
from datetime import date
from typing import Optional

from autoply.browser.forms import FormFiller
from autoply.browser.session import BrowserSession
from autoply.core.models import ApplicantProfile, FillResult, Platform, SubmissionOptions
from autoply.platforms.base import AdapterSpec, PlatformAdapter

DESCRIPTION_LIMIT = 4000

BAMBOOHR_SPEC = AdapterSpec(
    platform=Platform.BAMBOOHR,
    display_name="BambooHR",
    question_prefix="bamboohr",
    ready=('[class*="JobDetails"]', '[class*="jobDetails"]', ".fab-Page", "h2"),
    title=('[class*="JobDetails"] h2', "h2"),
    location=('[class*="JobDetails"] [class*="location"]', '[class*="Location"]'),
    company_url_patterns=(r"//([^./]+)\.bamboohr\.com",),
    company_case="first",
    question_containers=('[class*="question"], [class*="custom-field"], .field-group, [class*="Question"]',),
    question_label=("label", ".question-text", '[class*="label"]'),
    apply_entry=(
        'button:has-text("Apply for this Job")',
        'a:has-text("Apply for this Job")',
        'button:has-text("Apply")',
        'a:has-text("Apply")',
    ),
    form=("form", '[class*="ApplicationForm"]'),
    first_name=('input[name="firstName"]', 'input[id*="firstName"]'),
    last_name=('input[name="lastName"]', 'input[id*="lastName"]'),
    email=('input[name="email"]', 'input[type="email"]'),
    phone=('input[name="phone"]', 'input[type="tel"]'),
    submit_controls=(
        'button:has-text("Submit Application")',
        'button:has-text("Submit")',
        'button[type="submit"]',
    ),
    success_markers=('h2:has-text("Thank you")', 'h1:has-text("Thank you")', '[class*="Success"]'),
    error_markers=('[class*="fab-FormField--error"]', '[role="alert"]'),
)

LABELLED_INPUT = 'input:not([type="hidden"]):not([type="submit"]), textarea'
COUNTRY_CONTAINERS = '[class*="Country"], [class*="country"]'
COUNTRY_TRIGGERS = ('[role="combobox"]', '[class*="control"]', '[class*="indicator"]')

SCHOOL_LABEL = re.compile(r"college|university|school|institution", re.IGNORECASE)
DEGREE_LABEL = re.compile(r"degree|qualification", re.IGNORECASE)
DISCIPLINE_LABEL = re.compile(r"field.*study|major|discipline", re.IGNORECASE)
AVAILABLE_DATE_LABEL = re.compile(r"date.*available|available.*date|start.*date", re.IGNORECASE)
COUNTRY_LABEL = re.compile(r"country", re.IGNORECASE)
STATE_LABEL = re.compile(r"^state", re.IGNORECASE)
PLACEHOLDER_OPTION = re.compile(r"select|^--", re.IGNORECASE)


class BambooHRAdapter(PlatformAdapter):
    """BambooHR pages have no stable description container; the page body is used."""

    async def extract_description(self, session: BrowserSession) -> str:
        return (await session.body_text())[:DESCRIPTION_LIMIT].strip()

    async def fill_step(self, session: BrowserSession, options: SubmissionOptions, filler: FormFiller) -> FillResult:
        result = await super().fill_step(session, options, filler)
        result = result.merge(await self.fill_date_available(session))
        return result.merge(await self.fill_country_and_state(session, options.profile))

    async def fill_education(self, session: BrowserSession, profile: ApplicantProfile) -> FillResult:
        """Education inputs carry generated ids on BambooHR, so they are found by label."""
        result = FillResult()
        for key, pattern, value in (
            ("institution", SCHOOL_LABEL, profile.institution),
            ("degree", DEGREE_LABEL, profile.degree),
            ("field_of_study", DISCIPLINE_LABEL, profile.field_of_study),
        ):
            if not value:
                continue
            filled = await self.fill_by_label(session, pattern, value)
            if filled is not None:
                result.record(key, filled, None if filled else f"Failed to fill {key}")
        return result

    async def fill_by_label(self, session: BrowserSession, pattern: "re.Pattern[str]", value: str) -> Optional[bool]:
        """
        Fill the first visible, empty input whose label matches.

        Returns None when no such input exists, otherwise whether the fill worked.
        """
        for label in await session.query_all("label"):
            if not pattern.search(await session.text(label)):
                continue
            target = await session.attribute(label, "for")
            field = await session.query(f'[id="{target}"]') if target else None
            if field is None:
                field = await session.query(LABELLED_INPUT, label)
            if field is None or not await session.is_visible(field) or await session.input_value(field):
                continue

            filled = await session.act(field, "fill", value)
            if filled:
                await session.human.delay(short=True)
            return filled
        return None

    async def fill_date_available(self, session: BrowserSession) -> FillResult:
        """Availability date set to today: ISO for date inputs, MM/DD/YYYY for labelled text inputs."""
        result = FillResult()
        today = date.today()

        for field in await session.query_all('input[type="date"]'):
            if not await session.is_visible(field) or await session.input_value(field):
                continue
            result.record("date_available", await session.act(field, "fill", today.isoformat()))
            return result

        filled = await self.fill_by_label(session, AVAILABLE_DATE_LABEL, today.strftime("%m/%d/%Y"))
        if filled is not None:
            result.record("date_available", filled)
        return result

    async def fill_country_and_state(self, session: BrowserSession, profile: ApplicantProfile) -> FillResult:
        """
        Country from the last comma-separated part of the profile location.

        The country goes first since it can repopulate the state select,
        which then takes its first real option when still empty.
        """
        result = FillResult()
        country = (profile.location or "").split(",")[-1].strip()

        country_select = state_select = None
        for select in await session.query_all("select"):
            label = (await session.label_for(select)).strip()
            if COUNTRY_LABEL.search(label):
                country_select = select
            elif STATE_LABEL.search(label):
                state_select = select

        if country and country_select is not None:
            wanted = country.lower()
            match = next((o for o in await session.option_texts(country_select) if wanted in o.lower()), None)
            if match:
                result.record("country", await session.act(country_select, "select", match))
                await session.human.delay(short=True)
        elif country:
            result = result.merge(await self.fill_custom_country(session, country))

        if state_select is not None and not await session.input_value(state_select):
            choices = [o for o in await session.option_texts(state_select) if not PLACEHOLDER_OPTION.search(o)]
            if choices:
                result.record("state", await session.act(state_select, "select", choices[0]))
        return result

    async def fill_custom_country(self, session: BrowserSession, country: str) -> FillResult:
        """Country picked from a div-based dropdown when the form has no native select."""
        result = FillResult()
        for container in await session.query_all(COUNTRY_CONTAINERS):
            trigger = await session.resolver.resolve(COUNTRY_TRIGGERS, root=container, timeout=0)
            if trigger is None or not await session.act(trigger, "click"):
                continue
            await session.human.delay(short=True)

            option = await session.resolver.resolve(
                (f'[role="option"]:has-text("{country}")', f'[class*="option"]:has-text("{country}")'),
                predicate=session.is_visible,
            )
            if option is not None:
                result.record("country", await session.act(option, "click"))
                return result
            await session.act(trigger, "press", "Escape")
        return result


ADAPTER = BambooHRAdapter(BAMBOOHR_SPEC)
