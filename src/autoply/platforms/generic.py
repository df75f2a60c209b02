"""Fallback adapter for career pages on unrecognized hosts."""

from urllib.parse import urlparse

from autoply.browser.session import BrowserSession
from autoply.core.models import Platform
from autoply.platforms.base import UNKNOWN_COMPANY, UNKNOWN_TITLE, AdapterSpec, PlatformAdapter

DESCRIPTION_LIMIT = 4000

GENERIC_SPEC = AdapterSpec(
    platform=Platform.GENERIC,
    display_name="the employer",
    question_prefix="generic",
    title=("h1",),
    question_containers=('[class*="question"], [class*="custom-field"], .field-group',),
    question_label=("label", ".question-label", ".question-text"),
    apply_entry=(
        'a:has-text("Apply")',
        'button:has-text("Apply")',
        'a:has-text("Apply Now")',
        'button:has-text("Apply Now")',
        'button:has-text("Submit Application")',
        'a:has-text("Submit Application")',
    ),
    form=("form", '[class*="application"]', '[class*="apply"]'),
    first_name=('input[name*="first"]', 'input[id*="first"]'),
    last_name=('input[name*="last"]', 'input[id*="last"]'),
    full_name=('input[name="name"]', 'input[name*="full"]'),
    submit_controls=(
        'button[type="submit"]',
        'input[type="submit"]',
        'button:has-text("Submit")',
        'button:has-text("Apply")',
    ),
)


class GenericAdapter(PlatformAdapter):
    """Page title, body text and host name stand in for platform selectors."""

    async def extract_description(self, session: BrowserSession) -> str:
        return (await session.body_text())[:DESCRIPTION_LIMIT].strip()

    async def fallback_title(self, session: BrowserSession) -> str:
        return (await session.page_title()).strip() or UNKNOWN_TITLE

    def company_from_url(self, url: str) -> str:
        host = urlparse(url).hostname or ""
        if host.startswith("www."):
            host = host[4:]
        return host or UNKNOWN_COMPANY


ADAPTER = GenericAdapter(GENERIC_SPEC)
