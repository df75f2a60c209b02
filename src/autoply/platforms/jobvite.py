"""Jobvite career sites (jobs.jobvite.com)."""

from autoply.core.models import Platform
from autoply.platforms.base import AdapterSpec, PlatformAdapter

JOBVITE_SPEC = AdapterSpec(
    platform=Platform.JOBVITE,
    display_name="Jobvite",
    question_prefix="jobvite",
    ready=(".jv-page-body", ".jv-job-detail"),
    title=(".jv-header h1", ".jv-job-detail-name", "h1.job-title"),
    company=(".jv-company-name", ".company-name"),
    description=(".jv-job-detail-description", ".job-description"),
    location=(".jv-job-detail-location", ".job-location"),
    company_url_patterns=(r"jobs\.jobvite\.com/([^/?#]+)",),
    question_containers=('.jv-question, [class*="custom-question"]',),
    question_label=("label", ".question-text"),
    apply_entry=("a.jv-button-apply", 'a:has-text("Apply")', 'button:has-text("Apply")'),
    form=(".jv-apply-form", "form"),
    first_name=('input[name*="firstName"]', 'input[id*="firstName"]'),
    last_name=('input[name*="lastName"]', 'input[id*="lastName"]'),
    resume=('input[type="file"][name*="resume"]',),
    success_markers=(".jv-confirmation", 'h1:has-text("Thank")', 'h2:has-text("Thank")'),
    error_markers=(".jv-error", '[role="alert"]'),
)

ADAPTER = PlatformAdapter(JOBVITE_SPEC)
