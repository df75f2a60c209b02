"""Core data models for Autoply."""

from enum import Enum
from typing import Dict, List, Optional, Set

from pydantic import BaseModel, ConfigDict, Field


class Platform(str, Enum):
    """Supported job-application platforms."""
    GREENHOUSE = "greenhouse"
    LEVER = "lever"
    LINKEDIN = "linkedin"
    ASHBY = "ashby"
    JOBVITE = "jobvite"
    SMARTRECRUITERS = "smartrecruiters"
    PINPOINT = "pinpoint"
    TEAMTAILOR = "teamtailor"
    WORKDAY = "workday"
    BAMBOOHR = "bamboohr"
    GENERIC = "generic"


class FieldType(str, Enum):
    """Input kinds found on application forms."""
    TEXT = "text"
    EMAIL = "email"
    TEL = "tel"
    NUMBER = "number"
    URL = "url"
    DATE = "date"
    SELECT = "select"
    TEXTAREA = "textarea"
    FILE = "file"
    CHECKBOX = "checkbox"
    RADIO = "radio"


class QuestionType(str, Enum):
    """Answer control kinds for custom questions."""
    TEXT = "text"
    TEXTAREA = "textarea"
    SELECT = "select"
    RADIO = "radio"
    CHECKBOX = "checkbox"


class OutcomeStatus(str, Enum):
    """Terminal states of a submission."""
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    AMBIGUOUS = "ambiguous"
    BLOCKED = "blocked"


class FormField(BaseModel):
    """A standard input discovered on an application form."""
    name: str = Field(..., description="Input name or id")
    type: FieldType = Field(FieldType.TEXT, description="Input kind")
    label: str = Field("", description="Visible label text")
    required: bool = Field(False, description="Whether the field is required")
    options: Optional[List[str]] = Field(None, description="Choices for select inputs")


class CustomQuestion(BaseModel):
    """A platform-specific question outside the standard identity fields."""
    id: str = Field(..., description="Stable id of the form <prefix>_q_<index>")
    question: str = Field(..., description="Question text")
    type: QuestionType = Field(QuestionType.TEXT, description="Answer control kind")
    required: bool = Field(False, description="Whether an answer is required")
    options: Optional[List[str]] = Field(None, description="Choices for select, radio and checkbox")


class JobPosting(BaseModel):
    """Structured job posting extracted from a rendered page."""

    model_config = ConfigDict(frozen=True)

    url: str = Field(..., description="Posting URL")
    platform: Platform = Field(..., description="Platform the posting was extracted from")
    title: str = Field("Unknown Position", description="Job title")
    company: str = Field("Unknown Company", description="Hiring company")
    description: str = Field("", description="Full description text")
    requirements: List[str] = Field(default_factory=list, description="Requirement bullets")
    qualifications: List[str] = Field(default_factory=list, description="Qualification bullets")
    location: Optional[str] = Field(None, description="Job location")
    job_type: Optional[str] = Field(None, description="Employment type")
    remote: Optional[bool] = Field(None, description="Whether the role is remote")
    form_fields: List[FormField] = Field(default_factory=list, description="Standard form inputs")
    custom_questions: List[CustomQuestion] = Field(default_factory=list, description="Custom questions")


class FillResult(BaseModel):
    """Outcome of filling one group of inputs."""
    success: bool = Field(True, description="Whether every attempted input was filled")
    filled_fields: Set[str] = Field(default_factory=set, description="Inputs that were filled")
    skipped_fields: Set[str] = Field(default_factory=set, description="Inputs left untouched")
    errors: List[str] = Field(default_factory=list, description="Soft fill errors")

    def merge(self, other: "FillResult") -> "FillResult":
        """Combine two results without mutating either."""
        filled = self.filled_fields | other.filled_fields
        return FillResult(
            success=self.success and other.success,
            filled_fields=filled,
            skipped_fields=(self.skipped_fields | other.skipped_fields) - filled,
            errors=self.errors + other.errors,
        )

    def record(self, name: str, ok: bool, error: Optional[str] = None) -> None:
        """Track a single input attempt."""
        if ok:
            self.filled_fields.add(name)
            self.skipped_fields.discard(name)
            return
        self.skipped_fields.add(name)
        if error:
            self.errors.append(error)
            self.success = False


class DetectedOutcome(BaseModel):
    """Post-submit page state read by an adapter."""
    status: OutcomeStatus = Field(..., description="Succeeded, failed or ambiguous")
    message: str = Field("", description="Marker text or explanation")


class SubmissionOutcome(BaseModel):
    """Terminal result of a submission attempt."""
    success: bool = Field(..., description="Whether the application is considered submitted")
    status: OutcomeStatus = Field(..., description="Terminal state")
    message: str = Field("", description="Human readable summary")
    errors: List[str] = Field(default_factory=list, description="Accumulated soft errors")
    screenshot_ref: Optional[str] = Field(None, description="Path of the captured screenshot")
    steps: int = Field(0, description="Number of form steps filled")


class ApplicantProfile(BaseModel):
    """Applicant data used to fill standard fields."""
    name: str = Field(..., description="Full name")
    email: str = Field(..., description="Email address")
    phone: Optional[str] = Field(None, description="Phone number")
    phone_country: Optional[str] = Field(None, description="Phone country name or dial code")
    location: Optional[str] = Field(None, description="Current location")
    linkedin_url: Optional[str] = Field(None, description="LinkedIn profile URL")
    github_url: Optional[str] = Field(None, description="GitHub profile URL")
    portfolio_url: Optional[str] = Field(None, description="Portfolio or personal site URL")
    current_company: Optional[str] = Field(None, description="Current employer")
    current_title: Optional[str] = Field(None, description="Current job title")
    years_experience: Optional[int] = Field(None, description="Total years of experience")
    institution: Optional[str] = Field(None, description="Most recent educational institution")
    degree: Optional[str] = Field(None, description="Most recent degree")
    field_of_study: Optional[str] = Field(None, description="Most recent field of study")

    @property
    def first_name(self) -> str:
        return self.name.split(None, 1)[0] if self.name.strip() else ""

    @property
    def last_name(self) -> str:
        parts = self.name.split(None, 1)
        return parts[1] if len(parts) > 1 else ""


class SubmissionOptions(BaseModel):
    """Inputs for one submission."""
    profile: ApplicantProfile = Field(..., description="Applicant data")
    resume_path: Optional[str] = Field(None, description="Resume document path")
    cover_letter_path: Optional[str] = Field(None, description="Cover letter document path")
    answers: Dict[str, str] = Field(default_factory=dict, description="Answers keyed by question id")
    screenshot_path: Optional[str] = Field(None, description="Explicit screenshot destination")
