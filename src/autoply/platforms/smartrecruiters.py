"""SmartRecruiters postings (jobs.smartrecruiters.com)."""

from autoply.core.models import Platform
from autoply.platforms.base import AdapterSpec, PlatformAdapter

SMARTRECRUITERS_SPEC = AdapterSpec(
    platform=Platform.SMARTRECRUITERS,
    display_name="SmartRecruiters",
    question_prefix="sr",
    ready=(".job-sections", ".job-ad-container"),
    title=("h1.job-title", ".job-details h1", 'h1[class*="title"]'),
    company=(".company-name", 'h2[class*="company"]'),
    description=(".job-sections .job-section", ".job-description", '[class*="description"]'),
    join_description=True,
    location=(".job-location", '[class*="location"]'),
    company_url_patterns=(r"jobs\.smartrecruiters\.com/([^/?#]+)",),
    question_containers=('.question-container, [class*="application-question"]',),
    question_label=("label", ".question-label"),
    apply_entry=("a.apply-button", 'button:has-text("Apply")', 'a:has-text("Apply now")'),
    form=(".application-form", "form"),
    first_name=('input[name*="firstName"]',),
    last_name=('input[name*="lastName"]',),
    email=('input[name*="email"]', 'input[type="email"]'),
    phone=('input[name*="phone"]', 'input[type="tel"]'),
    submit_controls=('button[type="submit"]', 'button:has-text("Submit")', 'button:has-text("Apply")'),
    success_markers=('[class*="success"]', 'h1:has-text("Thank")', 'h2:has-text("Thank")'),
)

ADAPTER = PlatformAdapter(SMARTRECRUITERS_SPEC)
