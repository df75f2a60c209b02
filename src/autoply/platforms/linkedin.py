"""LinkedIn job pages and Easy Apply (linkedin.com/jobs)."""

from autoply.core.models import Platform
from autoply.platforms.base import UNKNOWN_COMPANY, AdapterSpec, PlatformAdapter

LINKEDIN_SPEC = AdapterSpec(
    platform=Platform.LINKEDIN,
    display_name="LinkedIn",
    question_prefix="linkedin",
    ready=(".job-view-layout", ".jobs-unified-top-card"),
    title=(
        ".job-details-jobs-unified-top-card__job-title",
        ".jobs-unified-top-card__job-title",
        "h1.t-24",
    ),
    company=(
        ".job-details-jobs-unified-top-card__company-name",
        ".jobs-unified-top-card__company-name",
        "a.ember-view.t-black.t-normal",
    ),
    description=(".jobs-description-content__text", ".jobs-box__html-content", ".description__text"),
    location=(
        ".job-details-jobs-unified-top-card__primary-description-container",
        ".jobs-unified-top-card__bullet",
    ),
    job_type=(
        ".job-details-jobs-unified-top-card__job-insight",
        ".jobs-unified-top-card__workplace-type",
    ),
    question_containers=('.jobs-easy-apply-form-section__grouping, [class*="fb-form-element"]',),
    question_label=("label", ".fb-form-element-label", '[class*="artdeco-text-input--label"]'),
    radio_labels_as_options=True,
    apply_entry=("button.jobs-apply-button", 'button:has-text("Easy Apply")'),
    form=(".jobs-easy-apply-modal", '[data-test-modal-id="easy-apply-modal"]', "form"),
    auth_gate=(
        'a[href*="/login"]:has-text("Sign in")',
        'button:has-text("Sign in")',
        ".join-form",
    ),
    first_name=('input[id*="firstName"]',),
    last_name=('input[id*="lastName"]',),
    email=('select[id*="emailAddress"]', 'input[type="email"]'),
    phone=('input[id*="phoneNumber"]', 'input[type="tel"]'),
    resume=('input[type="file"][name="file"]', '.jobs-document-upload input[type="file"]'),
    next_controls=(
        'button[aria-label="Continue to next step"]',
        'button[aria-label="Review your application"]',
        'button:has-text("Next")',
        'button:has-text("Review")',
    ),
    submit_controls=('button[aria-label="Submit application"]', 'button:has-text("Submit application")'),
    success_markers=(
        ".artdeco-inline-feedback--success",
        'h3:has-text("Your application was sent")',
        '[data-test-modal-id="post-apply-modal"]',
    ),
    error_markers=(".artdeco-inline-feedback--error", '[role="alert"]'),
)


class LinkedInAdapter(PlatformAdapter):
    """LinkedIn shows the company only in the DOM; job URLs carry no company slug."""

    def company_from_url(self, url: str) -> str:
        return UNKNOWN_COMPANY


ADAPTER = LinkedInAdapter(LINKEDIN_SPEC)
