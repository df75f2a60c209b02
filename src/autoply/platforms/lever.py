"""Lever postings (jobs.lever.co)."""

from autoply.core.models import Platform
from autoply.platforms.base import AdapterSpec, PlatformAdapter

LEVER_SPEC = AdapterSpec(
    platform=Platform.LEVER,
    display_name="Lever",
    question_prefix="lever",
    ready=(".posting-headline", ".content"),
    title=(".posting-headline h2", "h1.posting-title"),
    company=(".posting-headline .company", ".main-header-content h1"),
    description=(".posting-description", ".section-wrapper"),
    join_description=True,
    location=(".posting-categories .location", ".sort-by-commitment"),
    job_type=(".posting-categories .commitment",),
    company_url_patterns=(r"jobs\.lever\.co/([^/?#]+)",),
    question_containers=(".custom-question, .application-question, [class*=\"custom-field\"]",),
    question_label=("label", ".question-label", ".application-label"),
    radio_labels_as_options=True,
    apply_entry=(
        "a.posting-btn-submit",
        'a[href*="apply"]',
        ".apply-button",
        'a:has-text("Apply for this job")',
        'a:has-text("Apply now")',
        ".postings-btn-wrapper a",
    ),
    form=(".application-form", "#application-form", 'form[class*="application"]', ".posting-application"),
    full_name=('input[name="name"]',),
    email=('input[name="email"]', 'input[type="email"]'),
    phone=('input[name="phone"]', 'input[type="tel"]'),
    resume=('input[type="file"][name="resume"]', '.resume-upload input[type="file"]'),
    cover_letter=(
        'input[type="file"][name*="cover"]',
        '[class*="cover-letter"] input[type="file"]',
        '#cover-letter-upload input[type="file"]',
    ),
    submit_controls=(
        'button[type="submit"]',
        'button:has-text("Submit application")',
        'button:has-text("Submit")',
        '.postings-btn[type="submit"]',
        'input[type="submit"]',
    ),
    success_markers=(
        ".application-confirmation",
        ".thank-you",
        'h1:has-text("Thank")',
        'h2:has-text("Thank")',
    ),
    error_markers=(".error-message", ".application-error", '[role="alert"]'),
)

ADAPTER = PlatformAdapter(LEVER_SPEC)
