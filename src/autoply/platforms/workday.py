"""Workday career sites (<tenant>.myworkdayjobs.com)."""

from autoply.browser.session import BrowserSession
from autoply.core.models import ApplicantProfile, FillResult, Platform
from autoply.platforms.base import AdapterSpec, PlatformAdapter

WORKDAY_SPEC = AdapterSpec(
    platform=Platform.WORKDAY,
    display_name="Workday",
    question_prefix="workday",
    ready=(
        '[data-automation-id="jobPostingHeader"]',
        '[data-automation-id="jobPostingDescription"]',
    ),
    title=(
        '[data-automation-id="jobPostingHeader"] h2',
        '[data-automation-id="jobTitle"]',
        "h1[data-automation-id]",
    ),
    company=('[data-automation-id="jobPostingCompanyName"]', '[data-automation-id="companyName"]'),
    description=(
        '[data-automation-id="jobPostingDescription"]',
        '[data-automation-id="jobDescription"]',
        ".job-description",
    ),
    location=(
        '[data-automation-id="locations"]',
        '[data-automation-id="jobPostingLocation"]',
        '[data-automation-id="location"]',
    ),
    job_type=('[data-automation-id="time"]',),
    company_url_patterns=(r"//([^./]+)\.(?:wd\d+\.)?myworkdayjobs\.com",),
    question_containers=('[data-automation-id*="question"], [data-automation-id*="formField"]',),
    question_label=("label", '[data-automation-id*="label"]'),
    apply_entry=('[data-automation-id="jobPostingApplyButton"]', 'button:has-text("Apply")', 'a:has-text("Apply")'),
    form=('[data-automation-id="applicationForm"]', '[data-automation-id*="input"]'),
    auth_gate=('[data-automation-id="signInLink"]', 'button:has-text("Sign In")'),
    first_name=('[data-automation-id="legalNameSection_firstName"]',),
    last_name=('[data-automation-id="legalNameSection_lastName"]',),
    email=('[data-automation-id="email"]',),
    phone=('[data-automation-id="phone-number"]',),
    resume=('[data-automation-id="file-upload-input-ref"]',),
    next_controls=('[data-automation-id="bottom-navigation-next-button"]', 'button:has-text("Next")'),
    submit_controls=('[data-automation-id="submit"]', 'button:has-text("Submit")'),
    success_markers=('[data-automation-id="confirmationMessage"]', 'h2:has-text("Thank you")'),
    error_markers=('[data-automation-id="errorMessage"]', '[data-automation-id="errorBanner"]'),
)


class WorkdayAdapter(PlatformAdapter):
    """Workday runs a multi-step wizard with a searchable phone-country widget."""

    async def fill_phone_country(self, session: BrowserSession, profile: ApplicantProfile) -> FillResult:
        result = FillResult()
        if not profile.phone_country:
            return result

        widget = await session.resolver.resolve(('[data-automation-id="countryPhoneCode"]',), timeout=0)
        if widget is None:
            return result

        search = await session.query("input", widget)
        if search is None or not await session.act(search, "fill", profile.phone_country):
            result.record("phone_country", False)
            return result

        await session.human.delay(short=True)
        result.record("phone_country", await session.act(search, "press", "Enter"))
        return result


ADAPTER = WorkdayAdapter(WORKDAY_SPEC)
