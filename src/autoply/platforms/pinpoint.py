"""Pinpoint career sites (<company>.pinpointhq.com)."""

from autoply.core.models import Platform
from autoply.platforms.base import AdapterSpec, PlatformAdapter

PINPOINT_SPEC = AdapterSpec(
    platform=Platform.PINPOINT,
    display_name="Pinpoint",
    question_prefix="pinpoint",
    ready=(".job-page", ".job-content", '[class*="vacancy"]'),
    title=("h1.job-title", 'h1[class*="title"]', ".vacancy-title"),
    description=(".job-description", ".job-content", ".vacancy-description", '[class*="description"]'),
    location=(".job-location", '[class*="location"]', ".vacancy-location"),
    company_url_patterns=(r"//([^./]+)\.pinpointhq\.com",),
    company_case="capitalize",
    question_containers=('[class*="question"], [class*="custom-field"]',),
    question_label=("label", ".question-text", '[class*="label"]'),
    apply_entry=('a:has-text("Apply for this job")', 'a:has-text("Apply")', 'button:has-text("Apply")'),
    form=('form[action*="applications"]', "form"),
    first_name=('input[name*="first_name"]',),
    last_name=('input[name*="last_name"]',),
    email=('input[name*="email"]', 'input[type="email"]'),
    phone=('input[name*="phone"]', 'input[type="tel"]'),
)

ADAPTER = PlatformAdapter(PINPOINT_SPEC)
