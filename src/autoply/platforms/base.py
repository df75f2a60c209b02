"""Platform adapter contract and the shared capability implementation."""

import re
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from autoply.browser.forms import COVER_LETTER_PATTERN, RESUME_PATTERN, FormFiller
from autoply.browser.session import BrowserSession
from autoply.core.models import (
    ApplicantProfile,
    CustomQuestion,
    DetectedOutcome,
    FieldType,
    FillResult,
    FormField,
    JobPosting,
    OutcomeStatus,
    Platform,
    QuestionType,
    SubmissionOptions,
)
from autoply.utils.logging import get_logger

Selectors = Tuple[str, ...]

UNKNOWN_TITLE = "Unknown Position"
UNKNOWN_COMPANY = "Unknown Company"

# Shared path fallback for board-style URLs such as /boards/<company>/jobs/<id>
BOARD_PATH_PATTERN = r"/boards/([^/?#]+)"

SUBMIT_WORDS = re.compile(r"\b(submit|send application|complete application|finish)\b", re.IGNORECASE)
NEXT_WORDS = re.compile(r"\b(next|continue|review|proceed|save and continue)\b", re.IGNORECASE)
CONFIRMATION_URL = re.compile(r"thank|confirm|success|submitted", re.IGNORECASE)

REQUIRED_MARKER = '[required], .required, [aria-required="true"]'
INPUT_SELECTOR = 'input:not([type="hidden"]):not([type="submit"]):not([type="button"])'

LINKEDIN_INPUTS = ('input[name*="linkedin"]', 'input[id*="linkedin"]', 'input[placeholder*="LinkedIn"]')
GITHUB_INPUTS = ('input[name*="github"]', 'input[id*="github"]', 'input[placeholder*="GitHub"]')
PORTFOLIO_INPUTS = (
    'input[name*="website"]',
    'input[name*="portfolio"]',
    'input[id*="website"]',
    'input[placeholder*="Website"]',
)
SCHOOL_INPUTS = ('input[name*="school"]', 'input[name*="institution"]', 'input[id*="school"]')
DEGREE_INPUTS = ('input[name*="degree"]', 'input[id*="degree"]')
DISCIPLINE_INPUTS = ('input[name*="field_of_study"]', 'input[name*="major"]', 'input[id*="discipline"]')

DEFAULT_NEXT = (
    'button:has-text("Next")',
    'button:has-text("Continue")',
    'button:has-text("Review")',
    'button[type="submit"]',
)
DEFAULT_SUBMIT = (
    'button[type="submit"]',
    'input[type="submit"]',
    'button:has-text("Submit Application")',
    'button:has-text("Submit")',
)
DEFAULT_SUCCESS = (
    ".confirmation",
    "#confirmation",
    '[class*="thank"]',
    'h1:has-text("Thank")',
    'h2:has-text("Thank")',
)
DEFAULT_ERROR = (
    ".error-message",
    ".field-error",
    ".form-error",
    '[role="alert"]',
)

FIELD_TYPES = {member.value: member for member in FieldType}


def format_company(slug: str, case: str = "title") -> str:
    """
    Turn a URL slug into a company name.

    Hyphens become spaces, then the casing rule applies:
    ``title`` uppercases the first letter of each word and keeps the rest,
    ``capitalize`` also lowercases the rest of each word, ``first`` only
    uppercases the first character.
    """
    name = slug.replace("-", " ").strip()
    if case == "capitalize":
        return " ".join(word[:1].upper() + word[1:].lower() for word in name.split(" "))
    if case == "first":
        return name[:1].upper() + name[1:]
    return re.sub(r"\b\w", lambda match: match.group(0).upper(), name)


@dataclass(frozen=True)
class AdapterSpec:
    """Selector candidates and URL rules describing one platform."""

    platform: Platform
    display_name: str
    question_prefix: str

    # Posting view
    ready: Selectors = ()
    title: Selectors = ()
    company: Selectors = ()
    description: Selectors = ()
    location: Selectors = ()
    job_type: Selectors = ()
    join_description: bool = False
    company_url_patterns: Selectors = ()
    company_case: str = "title"

    # Custom questions
    question_containers: Selectors = ()
    question_label: Selectors = ("label",)
    skip_question_labels: Selectors = ()
    radio_labels_as_options: bool = False

    # Application flow
    apply_entry: Selectors = ()
    form: Selectors = ("form",)
    auth_gate: Selectors = ()
    first_name: Selectors = ()
    last_name: Selectors = ()
    full_name: Selectors = ()
    email: Selectors = ('input[type="email"]', 'input[name*="email"]')
    phone: Selectors = ('input[type="tel"]', 'input[name*="phone"]')
    resume: Selectors = ()
    cover_letter: Selectors = ()
    next_controls: Selectors = DEFAULT_NEXT
    submit_controls: Selectors = DEFAULT_SUBMIT
    success_markers: Selectors = DEFAULT_SUCCESS
    error_markers: Selectors = DEFAULT_ERROR


class PlatformAdapter:
    """
    Capability set over a BrowserSession for one platform.

    Adapters hold no session state: every capability takes the session it
    works on, so a single adapter instance serves any number of calls.
    """

    def __init__(self, spec: AdapterSpec):
        self.spec = spec
        self.platform = spec.platform
        self.logger = get_logger(__name__, component="platform_adapter", platform=spec.platform.value)

    # ---- posting view ----

    async def wait_for_ready(self, session: BrowserSession) -> bool:
        """Bounded wait for the posting's ready markers. Never raises."""
        if not self.spec.ready:
            return await session.wait_for_load_state(timeout=session.config.ready_timeout)

        marker = await session.resolver.resolve(self.spec.ready, timeout=session.config.ready_timeout)
        if marker is None:
            self.logger.warning("Ready marker not found", candidates=list(self.spec.ready))
        return marker is not None

    async def extract(self, session: BrowserSession, url: str) -> JobPosting:
        """Map the rendered posting onto a JobPosting with per-field defaults."""
        title = await self._field_text(session, "title", self.spec.title)
        company = await self._field_text(session, "company", self.spec.company)
        description = await self.extract_description(session)
        location = await self._field_text(session, "location", self.spec.location)
        job_type = await self._field_text(session, "job_type", self.spec.job_type)

        posting = JobPosting(
            url=url,
            platform=self.platform,
            title=title or await self.fallback_title(session),
            company=company or self.company_from_url(url),
            description=description,
            location=location or None,
            job_type=job_type or None,
            remote=self.derive_remote(location, job_type),
            form_fields=await self.extract_form_fields(session),
            custom_questions=await self.classify_custom_questions(session),
        )
        self.logger.info(
            "Extracted posting",
            title=posting.title,
            company=posting.company,
            form_fields=len(posting.form_fields),
            custom_questions=len(posting.custom_questions)
        )
        return posting

    async def _field_text(self, session: BrowserSession, name: str, candidates: Selectors) -> str:
        if not candidates:
            return ""
        text = await session.resolver.first_text(candidates)
        if not text:
            self.logger.debug("extraction_field_miss", field=name)
        return text

    async def extract_description(self, session: BrowserSession) -> str:
        if not self.spec.description:
            return ""
        if self.spec.join_description:
            parts = []
            for selector in self.spec.description:
                parts.extend(await session.texts(selector))
            return "\n\n".join(parts).strip()
        return await self._field_text(session, "description", self.spec.description)

    async def fallback_title(self, session: BrowserSession) -> str:
        return UNKNOWN_TITLE

    def company_from_url(self, url: str) -> str:
        """Company derived from the URL, or Unknown Company when no pattern matches."""
        for pattern in self.spec.company_url_patterns + (BOARD_PATH_PATTERN,):
            match = re.search(pattern, url)
            if match:
                return format_company(match.group(1), self.spec.company_case)
        return UNKNOWN_COMPANY

    @staticmethod
    def derive_remote(location: str, job_type: str) -> Optional[bool]:
        if not location and not job_type:
            return None
        return "remote" in f"{location} {job_type}".lower()

    async def extract_form_fields(self, session: BrowserSession, root: Optional[Any] = None) -> List[FormField]:
        """Standard inputs, textareas and selects currently on the page."""
        fields = []

        for element in await session.query_all(INPUT_SELECTOR, root):
            input_type = (await session.attribute(element, "type") or "text").lower()
            field = await self._form_field(session, element, FIELD_TYPES.get(input_type, FieldType.TEXT))
            if field:
                fields.append(field)

        for element in await session.query_all("textarea", root):
            field = await self._form_field(session, element, FieldType.TEXTAREA)
            if field:
                fields.append(field)

        for element in await session.query_all("select", root):
            field = await self._form_field(session, element, FieldType.SELECT)
            if field:
                field.options = await session.option_texts(element)
                fields.append(field)

        return fields

    async def _form_field(self, session: BrowserSession, element: Any, field_type: FieldType) -> Optional[FormField]:
        name = await session.attribute(element, "name") or ""
        label = await session.label_for(element)
        if not name and not label:
            return None
        required = await session.attribute(element, "required") is not None
        return FormField(name=name, type=field_type, label=label, required=required)

    async def classify_custom_questions(self, session: BrowserSession) -> List[CustomQuestion]:
        """
        Classify each question container by the controls it holds.

        Control kinds are probed in the order textarea, select, radio,
        checkbox; a container holding none of them is a text question.
        The id uses the container's position so answers can be replayed.
        """
        if not self.spec.question_containers:
            return []

        questions = []
        containers = await session.resolver.resolve_all(self.spec.question_containers)
        for index, container in enumerate(containers):
            text = await session.resolver.first_text(self.spec.question_label, root=container)
            if not text:
                continue
            lowered = text.lower()
            if any(skip in lowered for skip in self.spec.skip_question_labels):
                continue

            question_type, options = await self._classify_controls(session, container)
            questions.append(CustomQuestion(
                id=f"{self.spec.question_prefix}_q_{index}",
                question=text,
                type=question_type,
                required=await self._is_required(session, container),
                options=options or None,
            ))
        return questions

    async def _classify_controls(self, session: BrowserSession, container: Any) -> Tuple[QuestionType, List[str]]:
        if await session.query("textarea", container) is not None:
            return QuestionType.TEXTAREA, []

        if await session.query("select", container) is not None:
            return QuestionType.SELECT, await session.texts("select option", container)

        radios = await session.query_all('input[type="radio"]', container)
        if radios:
            if self.spec.radio_labels_as_options:
                return QuestionType.RADIO, await session.texts('label:has(input[type="radio"])', container)
            return QuestionType.RADIO, await self._values(session, radios)

        checkboxes = await session.query_all('input[type="checkbox"]', container)
        if checkboxes:
            return QuestionType.CHECKBOX, await self._values(session, checkboxes)

        return QuestionType.TEXT, []

    @staticmethod
    async def _values(session: BrowserSession, controls: List[Any]) -> List[str]:
        values = []
        for control in controls:
            value = await session.attribute(control, "value")
            if value:
                values.append(value)
        return values

    @staticmethod
    async def _is_required(session: BrowserSession, container: Any) -> bool:
        if await session.attribute(container, "aria-required") == "true":
            return True
        return await session.query(REQUIRED_MARKER, container) is not None

    # ---- application flow ----

    async def locate_apply_entry(self, session: BrowserSession) -> bool:
        """Click the control leading from the posting to the application form."""
        if not self.spec.apply_entry:
            return False

        button = await session.resolver.resolve(self.spec.apply_entry, predicate=session.resolver.actionable)
        if button is None:
            self.logger.info("No apply entry found; form may be embedded")
            return False

        await session.human.delay(short=True)
        clicked = await session.act(button, "click")
        if clicked:
            await session.wait_for_load_state(timeout=session.config.form_timeout)
        return clicked

    async def wait_for_form(self, session: BrowserSession) -> bool:
        form = await session.resolver.resolve(self.spec.form, timeout=session.config.form_timeout)
        if form is None:
            self.logger.warning("Application form not found", candidates=list(self.spec.form))
            return False
        await session.human.delay(short=True)
        return True

    async def check_auth_gate(self, session: BrowserSession) -> bool:
        """True when a visible sign-in wall stands in front of the form."""
        if not self.spec.auth_gate:
            return False
        gate = await session.resolver.resolve(self.spec.auth_gate, predicate=session.is_visible, timeout=0)
        return gate is not None

    async def fill_step(self, session: BrowserSession, options: SubmissionOptions, filler: FormFiller) -> FillResult:
        """Fill the current form step: platform fields first, then the filler."""
        result = await self.fill_identity(session, options.profile)
        result = result.merge(await self.fill_phone_country(session, options.profile))
        result = result.merge(await self.upload_documents(session, options))
        result = result.merge(await self.fill_profile_urls(session, options.profile))
        result = result.merge(await self.fill_education(session, options.profile))

        fields = [field for field in await self.extract_form_fields(session) if field.type != FieldType.FILE]
        if fields:
            result = result.merge(await filler.fill_form(fields))

        questions = await self.classify_custom_questions(session)
        if questions:
            result = result.merge(await filler.fill_custom_questions(questions))

        await session.human.delay(short=True)
        return result

    async def fill_identity(self, session: BrowserSession, profile: ApplicantProfile) -> FillResult:
        """Name, email and phone, splitting the name when the form asks for parts."""
        result = FillResult()
        first = await session.resolver.resolve(self.spec.first_name, timeout=0) if self.spec.first_name else None
        if first is not None:
            await self._fill(session, result, "first_name", first, profile.first_name)
            await self._fill_candidates(session, result, "last_name", self.spec.last_name, profile.last_name)
        else:
            await self._fill_candidates(session, result, "full_name", self.spec.full_name, profile.name)

        await self._fill_candidates(session, result, "email", self.spec.email, profile.email)
        await self._fill_candidates(session, result, "phone", self.spec.phone, profile.phone)
        return result

    async def fill_phone_country(self, session: BrowserSession, profile: ApplicantProfile) -> FillResult:
        """Platform phone-country widget; most platforms have none."""
        return FillResult()

    async def fill_profile_urls(self, session: BrowserSession, profile: ApplicantProfile) -> FillResult:
        result = FillResult()
        await self._fill_candidates(session, result, "linkedin", LINKEDIN_INPUTS, profile.linkedin_url)
        await self._fill_candidates(session, result, "github", GITHUB_INPUTS, profile.github_url)
        await self._fill_candidates(session, result, "portfolio", PORTFOLIO_INPUTS, profile.portfolio_url)
        return result

    async def fill_education(self, session: BrowserSession, profile: ApplicantProfile) -> FillResult:
        """Most recent school, degree and discipline when the form asks for them."""
        result = FillResult()
        await self._fill_candidates(session, result, "institution", SCHOOL_INPUTS, profile.institution)
        await self._fill_candidates(session, result, "degree", DEGREE_INPUTS, profile.degree)
        await self._fill_candidates(session, result, "field_of_study", DISCIPLINE_INPUTS, profile.field_of_study)
        return result

    async def upload_documents(self, session: BrowserSession, options: SubmissionOptions) -> FillResult:
        result = FillResult()
        if options.resume_path:
            resume_input = await self.find_resume_input(session)
            if resume_input is not None:
                uploaded = await session.act(resume_input, "upload", options.resume_path)
                result.record("resume", uploaded, None if uploaded else "Failed to upload resume")

        if options.cover_letter_path:
            cover_input = await self.find_cover_letter_input(session)
            if cover_input is not None:
                uploaded = await session.act(cover_input, "upload", options.cover_letter_path)
                result.record("cover_letter", uploaded, None if uploaded else "Failed to upload cover letter")
        return result

    async def find_resume_input(self, session: BrowserSession) -> Optional[Any]:
        """
        Locate the resume file input.

        Tries platform selectors, then name/id/label hints, then the accept
        attribute, and finally the first file input on the page.
        """
        if self.spec.resume:
            handle = await session.resolver.resolve(self.spec.resume, timeout=0)
            if handle is not None:
                return handle

        file_inputs = await session.query_all('input[type="file"]')
        if not file_inputs:
            return None

        for handle in file_inputs:
            hints = await self._file_input_hints(session, handle)
            if RESUME_PATTERN.search(hints) and not COVER_LETTER_PATTERN.search(hints):
                return handle

        for handle in file_inputs:
            accept = (await session.attribute(handle, "accept") or "").lower()
            hints = await self._file_input_hints(session, handle)
            if ("pdf" in accept or "doc" in accept) and not COVER_LETTER_PATTERN.search(hints):
                return handle

        self.logger.debug("Falling back to first file input for resume")
        return file_inputs[0]

    async def find_cover_letter_input(self, session: BrowserSession) -> Optional[Any]:
        if self.spec.cover_letter:
            handle = await session.resolver.resolve(self.spec.cover_letter, timeout=0)
            if handle is not None:
                return handle
        for handle in await session.query_all('input[type="file"]'):
            if COVER_LETTER_PATTERN.search(await self._file_input_hints(session, handle)):
                return handle
        return None

    @staticmethod
    async def _file_input_hints(session: BrowserSession, handle: Any) -> str:
        name = await session.attribute(handle, "name") or ""
        element_id = await session.attribute(handle, "id") or ""
        label = await session.label_for(handle)
        return f"{name} {element_id} {label}"

    async def _fill_candidates(
        self, session: BrowserSession, result: FillResult, key: str, candidates: Selectors, value: Optional[str]
    ) -> None:
        if not value or not candidates:
            return
        handle = await session.resolver.resolve(candidates, timeout=0)
        if handle is None:
            return
        await self._fill(session, result, key, handle, value)

    async def _fill(self, session: BrowserSession, result: FillResult, key: str, handle: Any, value: Optional[str]) -> None:
        if not value:
            return
        filled = await session.act(handle, "fill", value)
        result.record(key, filled, None if filled else f"Failed to fill {key}")
        if filled:
            await session.human.delay(short=True)

    async def find_next_control(self, session: BrowserSession) -> Optional[Any]:
        """Visible, enabled step-advance control whose label is not submit vocabulary."""
        async def is_next(handle: Any) -> bool:
            if not await session.resolver.actionable(handle):
                return False
            return not SUBMIT_WORDS.search(await session.control_label(handle))

        return await session.resolver.resolve(self.spec.next_controls, predicate=is_next, timeout=0)

    async def find_submit_control(self, session: BrowserSession) -> Optional[Any]:
        """Visible, enabled final-submit control; next/continue labels are rejected."""
        async def is_submit(handle: Any) -> bool:
            if not await session.resolver.actionable(handle):
                return False
            label = await session.control_label(handle)
            return not (NEXT_WORDS.search(label) and not SUBMIT_WORDS.search(label))

        return await session.resolver.resolve(self.spec.submit_controls, predicate=is_submit, timeout=0)

    async def detect_outcome(self, session: BrowserSession) -> DetectedOutcome:
        """Classify the post-submit page: success marker, error marker, URL, else ambiguous."""
        marker = await session.resolver.resolve(self.spec.success_markers, predicate=session.is_visible, timeout=0)
        if marker is not None:
            message = await session.text(marker) or f"Application submitted to {self.spec.display_name}"
            return DetectedOutcome(status=OutcomeStatus.SUCCEEDED, message=message)

        error = await session.resolver.resolve(self.spec.error_markers, predicate=session.is_visible, timeout=0)
        if error is not None:
            message = await session.text(error) or "The form reported an error"
            return DetectedOutcome(status=OutcomeStatus.FAILED, message=message)

        if CONFIRMATION_URL.search(session.current_url()):
            return DetectedOutcome(status=OutcomeStatus.SUCCEEDED, message="Reached a confirmation page")

        return DetectedOutcome(
            status=OutcomeStatus.AMBIGUOUS,
            message="Submission completed without a confirmation signal"
        )
