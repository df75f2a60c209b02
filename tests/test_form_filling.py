"""Tests for the profile-backed form filler."""

import pytest

from conftest import FakeElement
from autoply.browser.forms import ProfileFormFiller, create_form_filler, find_best_option
from autoply.core.models import CustomQuestion, FieldType, FormField, QuestionType, SubmissionOptions


@pytest.fixture
def filler(session, options):
    return create_form_filler(session, options)


class TestBestOption:
    """Option matching for selects and radios."""

    def test_exact_match_is_case_insensitive(self):
        assert find_best_option("no", ["Yes", "No"]) == "No"

    def test_contains_match(self):
        assert find_best_option("Job Board", ["LinkedIn", "Online Job Board", "Friend"]) == "Online Job Board"

    def test_yes_variants(self):
        assert find_best_option("yes", ["Correct", "Incorrect"]) == "Correct"

    def test_no_variants(self):
        assert find_best_option("false", ["Affirmative", "Negative"]) == "Negative"

    def test_no_match(self):
        assert find_best_option("Maybe", ["Yes", "No"]) is None
        assert find_best_option("", ["Yes"]) is None


class TestValueLookup:
    """Profile values for labels and names."""

    def test_identity_values(self, filler):
        assert filler.value_for_text("First Name") == "Ada"
        assert filler.value_for_text("Last name") == "Lovelace King"
        assert filler.value_for_text("Email address") == "ada@example.com"
        assert filler.value_for_text("Mobile phone") == "+1 555 0100"
        assert filler.value_for_text("LinkedIn Profile") == "https://linkedin.com/in/ada"
        assert filler.value_for_text("Years of experience") == "7"

    def test_standard_answers(self, filler):
        assert filler.value_for_text("Will you require sponsorship?") == "No"
        assert filler.value_for_text("How did you hear about us?") == "Online Job Board"
        assert filler.value_for_text("Are you legally authorized to work here?") == "Yes"

    def test_unknown_label(self, filler):
        assert filler.value_for_text("Favourite colour") is None

    def test_missing_profile_value(self, filler):
        assert filler.value_for_text("Portfolio website") is None

    def test_documents(self, session, profile):
        filler = ProfileFormFiller(
            session, SubmissionOptions(profile=profile, resume_path="cv.pdf", cover_letter_path="cl.pdf")
        )

        assert filler.document_for("Upload your resume") == "cv.pdf"
        assert filler.document_for("Cover letter (optional)") == "cl.pdf"
        assert filler.document_for("Transcript") is None


class TestFillForm:
    """Standard field filling."""

    @pytest.mark.asyncio
    async def test_fills_by_name(self, filler, page):
        email = FakeElement()
        page.add('[name="email"]', email)

        result = await filler.fill_form([FormField(name="email", type=FieldType.EMAIL, label="Email")])

        assert email.value == "ada@example.com"
        assert result.filled_fields == {"Email"}
        assert result.success

    @pytest.mark.asyncio
    async def test_fills_by_label(self, filler, page):
        city = FakeElement()
        page.add("label", FakeElement("Current location", attrs={"for": "loc-1"}))
        page.add('[id="loc-1"]', city)

        result = await filler.fill_form([FormField(name="", label="Current location")])

        assert city.value == "London"
        assert result.filled_fields == {"Current location"}

    @pytest.mark.asyncio
    async def test_select_uses_best_option(self, filler, page):
        select = FakeElement(tag="select")
        page.add('[name="sponsor"]', select)
        field = FormField(name="sponsor", type=FieldType.SELECT, label="Visa sponsorship", options=["Yes", "No"])

        await filler.fill_form([field])

        assert select.actions == [("select", "No")]

    @pytest.mark.asyncio
    async def test_unmatched_and_missing_fields_are_skipped(self, filler):
        result = await filler.fill_form([
            FormField(name="colour", label="Favourite colour"),
            FormField(name="email", label="Email"),
        ])

        assert result.skipped_fields == {"Favourite colour", "Email"}
        assert result.errors == []
        assert result.success

    @pytest.mark.asyncio
    async def test_failed_fill_records_error(self, filler, page):
        email = FakeElement()
        email.failing_actions.add("fill")
        page.add('[name="email"]', email)

        result = await filler.fill_form([FormField(name="email", label="Email")])

        assert result.errors == ["Failed to fill Email"]
        assert result.success is False


class TestCustomQuestions:
    """Custom question answering from the answer map."""

    @pytest.mark.asyncio
    async def test_textarea_answer_from_map(self, session, page, profile):
        textarea = FakeElement()
        page.add('[class*="question"]', FakeElement("Why do you want to join?", selectors={"textarea": [textarea]}))
        options = SubmissionOptions(profile=profile, answers={"greenhouse_q_0": "The mission."})
        question = CustomQuestion(id="greenhouse_q_0", question="Why do you want to join?", type=QuestionType.TEXTAREA)

        result = await create_form_filler(session, options).fill_custom_questions([question])

        assert textarea.value == "The mission."
        assert result.filled_fields == {"Why do you want to join?"}

    @pytest.mark.asyncio
    async def test_radio_answer_from_pattern_table(self, filler, page):
        yes = FakeElement(attrs={"value": "yes"})
        no = FakeElement(attrs={"value": "no"})
        page.add("fieldset", FakeElement(
            "Will you now or in the future require sponsorship?",
            selectors={'input[type="radio"]': [yes, no]},
        ))
        question = CustomQuestion(
            id="lever_q_3",
            question="Will you now or in the future require sponsorship?",
            type=QuestionType.RADIO,
            options=["Yes", "No"],
        )

        result = await filler.fill_custom_questions([question])

        assert no.actions == [("check",)]
        assert yes.actions == []
        assert result.success

    @pytest.mark.asyncio
    async def test_checkbox_answers_are_comma_separated(self, session, page, profile):
        boxes = [FakeElement(attrs={"value": v}) for v in ("python", "go", "rust")]
        page.add(".form-group", FakeElement("Languages you use", selectors={'input[type="checkbox"]': boxes}))
        options = SubmissionOptions(profile=profile, answers={"q": "Python, Rust"})
        question = CustomQuestion(id="q", question="Languages you use", type=QuestionType.CHECKBOX)

        await create_form_filler(session, options).fill_custom_questions([question])

        assert [box.actions for box in boxes] == [[("check",)], [], [("check",)]]

    @pytest.mark.asyncio
    async def test_required_unanswerable_question_is_an_error(self, session, page, profile):
        page.add('[class*="question"]', FakeElement("Pick a team", selectors={"select": [FakeElement()]}))
        options = SubmissionOptions(profile=profile, answers={"q": "Marketing"})
        question = CustomQuestion(
            id="q", question="Pick a team", type=QuestionType.SELECT, required=True, options=["Platform", "Data"]
        )

        result = await create_form_filler(session, options).fill_custom_questions([question])

        assert result.success is False
        assert result.errors == ['Failed to answer "Pick a team..."']

    @pytest.mark.asyncio
    async def test_optional_unanswered_question_is_skipped(self, filler):
        question = CustomQuestion(id="q", question="Favourite colour", type=QuestionType.TEXT)

        result = await filler.fill_custom_questions([question])

        assert result.skipped_fields == {"Favourite colour"}
        assert result.success
