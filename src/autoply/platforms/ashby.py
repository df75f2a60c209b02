"""Ashby job boards (jobs.ashbyhq.com)."""

from autoply.core.models import Platform
from autoply.platforms.base import AdapterSpec, PlatformAdapter

ASHBY_SPEC = AdapterSpec(
    platform=Platform.ASHBY,
    display_name="Ashby",
    question_prefix="ashby",
    ready=('[data-testid="job-post-title"]', ".ashby-job-posting-heading", "h1"),
    title=('[data-testid="job-post-title"]', ".ashby-job-posting-heading h1", "h1"),
    company=('[data-testid="company-name"]', ".ashby-company-name", '[class*="companyName"]'),
    description=(
        '[data-testid="job-post-description"]',
        ".ashby-job-posting-description",
        '[class*="jobDescription"]',
    ),
    location=('[data-testid="job-post-location"]', ".ashby-job-posting-location", '[class*="location"]'),
    company_url_patterns=(r"jobs\.ashbyhq\.com/([^/?#]+)",),
    question_containers=(
        '[data-testid*="question"], [class*="customQuestion"], .ashby-application-form-field',
    ),
    question_label=("label", '[class*="label"]', '[data-testid*="label"]'),
    apply_entry=('a:has-text("Apply for this Job")', 'button:has-text("Apply")', 'a[href$="/application"]'),
    form=(".ashby-application-form-container", "form"),
    full_name=('input[name="_systemfield_name"]', 'input[name*="name"]'),
    email=('input[name="_systemfield_email"]', 'input[type="email"]'),
    phone=('input[type="tel"]', 'input[name*="phone"]'),
    resume=('input[type="file"][id*="resume"]', '#_systemfield_resume'),
    submit_controls=('button:has-text("Submit Application")', 'button[type="submit"]'),
    success_markers=('[class*="success"]', 'h2:has-text("Thank")', 'h1:has-text("Thank")'),
    error_markers=('[class*="error"]', '[role="alert"]'),
)

ADAPTER = PlatformAdapter(ASHBY_SPEC)
