"""Teamtailor career sites (<company>.teamtailor.com)."""

from autoply.core.models import Platform
from autoply.platforms.base import AdapterSpec, PlatformAdapter

TEAMTAILOR_SPEC = AdapterSpec(
    platform=Platform.TEAMTAILOR,
    display_name="Teamtailor",
    question_prefix="teamtailor",
    ready=(".job-ad", ".careersite-job", '[class*="job-page"]'),
    title=('h1[class*="title"]', ".job-header h1", ".careersite-job__title"),
    description=(".job-ad__content", ".careersite-job__content", '[class*="job-description"]'),
    join_description=True,
    location=('[class*="location"]', ".job-header__location", ".careersite-job__location"),
    job_type=('[class*="employment-type"]', ".job-header__employment-type"),
    company_url_patterns=(r"//([^./]+)\.teamtailor\.com",),
    company_case="capitalize",
    question_containers=('.application-form__question, [class*="custom-question"], [class*="form-group"]',),
    question_label=("label", ".question-label"),
    skip_question_labels=("name", "email", "phone", "resume", "cv", "cover letter"),
    apply_entry=('a:has-text("Apply for this job")', 'button:has-text("Apply")', 'a[href*="/applications/new"]'),
    form=(".application-form", "form"),
    first_name=('input[name*="first_name"]',),
    last_name=('input[name*="last_name"]',),
    email=('input[name*="email"]', 'input[type="email"]'),
    phone=('input[name*="phone"]', 'input[type="tel"]'),
)

ADAPTER = PlatformAdapter(TEAMTAILOR_SPEC)
