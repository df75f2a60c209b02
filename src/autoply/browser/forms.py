"""Form filling driven by an applicant profile and a pre-answered question map."""

import re
from typing import Any, List, Optional, Protocol, Sequence

from autoply.browser.session import BrowserSession
from autoply.core.models import CustomQuestion, FieldType, FillResult, FormField, QuestionType, SubmissionOptions
from autoply.utils.logging import get_logger


def _pattern(expression: str) -> "re.Pattern[str]":
    return re.compile(expression, re.IGNORECASE)


# Checked in order; the first match decides the value source
FIELD_PATTERNS = [
    ("first_name", _pattern(r"first[\s_-]?name|given[\s_-]?name|\bfname\b")),
    ("last_name", _pattern(r"last[\s_-]?name|surname|family[\s_-]?name|\blname\b")),
    ("full_name", _pattern(r"full[\s_-]?name|\bname\b|your[\s_-]?name|candidate[\s_-]?name")),
    ("email", _pattern(r"e?[\s_-]?mail|email[\s_-]?address")),
    ("phone", _pattern(r"phone|\btel\b|mobile|cell|contact[\s_-]?number")),
    ("location", _pattern(r"location|city|address|where.*based|current[\s_-]?location")),
    ("linkedin", _pattern(r"linkedin|li[\s_-]?url|li[\s_-]?profile")),
    ("github", _pattern(r"github|gh[\s_-]?url|gh[\s_-]?profile")),
    ("portfolio", _pattern(r"portfolio|website|personal[\s_-]?site|\burl\b|homepage")),
    ("work_authorization", _pattern(
        r"work[\s_-]?auth|authorized[\s_-]?to[\s_-]?work|legally[\s_-]?authorized|eligib|"
        r"visa[\s_-]?status|right[\s_-]?to[\s_-]?work"
    )),
    ("sponsorship", _pattern(r"sponsor")),
    ("years_experience", _pattern(
        r"years?[\s_-]?(?:of[\s_-]?)?experience|experience[\s_-]?years|how[\s_-]?many[\s_-]?years"
    )),
    ("current_company", _pattern(r"current[\s_-]?company|employer|where.*work")),
    ("current_title", _pattern(r"current[\s_-]?title|current[\s_-]?role|job[\s_-]?title")),
    ("start_date", _pattern(
        r"start[\s_-]?date|when.*start|available.*start|availability|earliest[\s_-]?start|"
        r"notice[\s_-]?period|how[\s_-]?soon"
    )),
    ("referral", _pattern(r"referral|how.*hear|where.*find|referred[\s_-]?by")),
    ("relocation", _pattern(r"relocation|willing[\s_-]?to[\s_-]?relocate|open[\s_-]?to[\s_-]?relocate")),
]

RESUME_PATTERN = _pattern(r"resume|\bcv\b|curriculum[\s_-]?vitae")
COVER_LETTER_PATTERN = _pattern(r"cover[\s_-]?letter|covering[\s_-]?letter|motivation[\s_-]?letter")

STANDARD_ANSWERS = {
    "work_authorization": "Yes",
    "sponsorship": "No",
    "start_date": "2 weeks",
    "referral": "Online Job Board",
    "relocation": "Yes",
}

QUESTION_CONTAINERS = [
    '[class*="question"]',
    '[class*="field"]',
    ".form-group",
    '[class*="form-element"]',
    "fieldset",
]

TRUTHY = {"yes", "true", "1", "checked", "y"}


def find_best_option(value: str, options: Sequence[str]) -> Optional[str]:
    """Pick the option that best matches a desired answer."""
    wanted = value.lower().strip()
    if not wanted:
        return None

    for option in options:
        if option.lower().strip() == wanted:
            return option

    for option in options:
        candidate = option.lower().strip()
        if candidate and (wanted in candidate or candidate in wanted):
            return option

    if wanted in ("yes", "true", "y"):
        for option in options:
            if re.fullmatch(r"(yes|true|y|affirmative|correct)", option.strip(), re.IGNORECASE):
                return option
    if wanted in ("no", "false", "n"):
        for option in options:
            if re.fullmatch(r"(no|false|n|negative)", option.strip(), re.IGNORECASE):
                return option
    return None


class FormFiller(Protocol):
    """Fills standard fields and answers custom questions on the current step."""

    async def fill_form(self, fields: List[FormField]) -> FillResult:
        ...

    async def fill_custom_questions(self, questions: List[CustomQuestion]) -> FillResult:
        ...


class ProfileFormFiller:
    """
    Default FormFiller backed by an ApplicantProfile.

    Standard fields are matched to profile attributes by label and name
    patterns. Custom questions take their answer from ``options.answers``
    keyed by question id, falling back to the same pattern table.
    """

    def __init__(self, session: BrowserSession, options: SubmissionOptions):
        self.session = session
        self.options = options
        self.profile = options.profile
        self.logger = get_logger(__name__, component="form_filler")

    def value_for_text(self, text: str) -> Optional[str]:
        """Profile value for a label or name, or None when nothing matches."""
        for key, pattern in FIELD_PATTERNS:
            if not pattern.search(text):
                continue
            if key in STANDARD_ANSWERS:
                return STANDARD_ANSWERS[key]
            if key == "first_name":
                return self.profile.first_name or None
            if key == "last_name":
                return self.profile.last_name or None
            if key == "full_name":
                return self.profile.name
            if key == "linkedin":
                return self.profile.linkedin_url
            if key == "github":
                return self.profile.github_url
            if key == "portfolio":
                return self.profile.portfolio_url
            if key == "years_experience":
                years = self.profile.years_experience
                return str(years) if years is not None else None
            return getattr(self.profile, key)
        return None

    def document_for(self, text: str) -> Optional[str]:
        if COVER_LETTER_PATTERN.search(text):
            return self.options.cover_letter_path
        if RESUME_PATTERN.search(text):
            return self.options.resume_path
        return None

    async def fill_form(self, fields: List[FormField]) -> FillResult:
        """Fill every standard field the profile has a value for."""
        result = FillResult()
        for field in fields:
            key = field.label or field.name
            value = self._field_value(field)
            if value is None:
                result.record(key, False)
                continue

            element = await self._locate_field(field)
            if element is None:
                result.record(key, False)
                continue

            filled = await self._fill_element(field, element, value)
            result.record(key, filled, None if filled else f"Failed to fill {key}")
            if filled:
                await self.session.human.delay(short=True)

        self.logger.info(
            "Filled standard fields",
            filled=len(result.filled_fields),
            skipped=len(result.skipped_fields),
            errors=len(result.errors)
        )
        return result

    def _field_value(self, field: FormField) -> Optional[str]:
        combined = f"{field.label} {field.name}"
        if field.type == FieldType.FILE:
            return self.document_for(combined)
        return self.value_for_text(combined)

    async def _locate_field(self, field: FormField) -> Optional[Any]:
        candidates = []
        if field.name:
            candidates.append(f'[name="{field.name}"]')
            candidates.append(f'[id="{field.name}"]')
        element = await self.session.resolver.resolve(candidates, timeout=0) if candidates else None
        if element is None and field.label:
            element = await self._find_input_by_label(field.label)
        return element

    async def _find_input_by_label(self, label_text: str) -> Optional[Any]:
        wanted = label_text.lower()
        for label in await self.session.query_all("label"):
            if wanted not in (await self.session.text(label)).lower():
                continue
            target = await self.session.attribute(label, "for")
            if target:
                return await self.session.query(f'[id="{target}"]')
            nested = await self.session.query("input, textarea, select", label)
            if nested is not None:
                return nested
        return None

    async def _fill_element(self, field: FormField, element: Any, value: str) -> bool:
        if field.type == FieldType.FILE:
            return await self.session.act(element, "upload", value)
        if field.type == FieldType.SELECT:
            options = field.options or await self.session.option_texts(element)
            return await self.session.act(element, "select", find_best_option(value, options) or value)
        if field.type == FieldType.CHECKBOX:
            return await self.session.act(element, "check" if value.lower() in TRUTHY else "uncheck")
        if field.type == FieldType.RADIO:
            radios = await self.session.query_all(f'input[type="radio"][name="{field.name}"]')
            return await self._check_matching(radios, [value])
        return await self.session.act(element, "fill", value)

    async def _check_matching(self, controls: List[Any], wanted: List[str]) -> bool:
        checked = False
        for control in controls:
            control_value = (await self.session.attribute(control, "value") or "").lower()
            control_label = (await self.session.label_for(control)).lower()
            for answer in wanted:
                answer = answer.lower()
                if answer and (control_value == answer or answer in control_label):
                    checked = await self.session.act(control, "check") or checked
                    break
        return checked

    async def fill_custom_questions(self, questions: List[CustomQuestion]) -> FillResult:
        """Answer custom questions from the answer map."""
        result = FillResult()
        for question in questions:
            key = question.question[:50]
            answer = self.options.answers.get(question.id) or self.value_for_text(question.question)
            if not answer:
                result.record(key, False)
                continue

            container = await self._find_question_container(question.question)
            if container is None:
                result.record(key, False)
                continue

            filled = await self._answer(question, container, answer)
            error = None
            if not filled and question.required:
                error = f'Failed to answer "{question.question[:30]}..."'
            result.record(key, filled, error)
            if filled:
                await self.session.human.delay(short=True)

        self.logger.info(
            "Answered custom questions",
            answered=len(result.filled_fields),
            skipped=len(result.skipped_fields)
        )
        return result

    async def _find_question_container(self, question_text: str) -> Optional[Any]:
        wanted = question_text.lower().strip()[:50]
        for selector in QUESTION_CONTAINERS:
            for container in await self.session.query_all(selector):
                if wanted in (await self.session.text(container)).lower():
                    return container
        return None

    async def _answer(self, question: CustomQuestion, container: Any, answer: str) -> bool:
        if question.type == QuestionType.TEXTAREA:
            control = await self.session.query("textarea", container)
            return control is not None and await self.session.act(control, "fill", answer)

        if question.type == QuestionType.SELECT:
            control = await self.session.query("select", container)
            if control is None:
                return False
            option = find_best_option(answer, question.options or [])
            return option is not None and await self.session.act(control, "select", option)

        if question.type == QuestionType.RADIO:
            option = find_best_option(answer, question.options or []) or answer
            radios = await self.session.query_all('input[type="radio"]', container)
            return await self._check_matching(radios, [option])

        if question.type == QuestionType.CHECKBOX:
            boxes = await self.session.query_all('input[type="checkbox"]', container)
            return await self._check_matching(boxes, [part.strip() for part in answer.split(",")])

        control = await self.session.query('input[type="text"], input:not([type])', container)
        return control is not None and await self.session.act(control, "fill", answer)


def create_form_filler(session: BrowserSession, options: SubmissionOptions) -> ProfileFormFiller:
    """
    Factory function to create the default form filler.

    Args:
        session: Browser session the form lives in
        options: Profile, documents and pre-answered questions

    Returns:
        Configured ProfileFormFiller
    """
    return ProfileFormFiller(session, options)
