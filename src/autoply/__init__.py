"""
Autoply: job-posting extraction and application submission across hiring platforms.

Each supported platform is a PlatformAdapter registered by id. The read path
(``scrape``) extracts a JobPosting; the write path (``submit_application``)
drives the application form through a bounded state machine.
"""

__version__ = "0.1.0"

from autoply.core.models import ApplicantProfile, JobPosting, SubmissionOptions, SubmissionOutcome
from autoply.jobs.extraction import ExtractionPipeline, scrape
from autoply.jobs.submission import SubmissionStateMachine, submit_application
from autoply.platforms import detect_platform, get_adapter

__all__ = [
    "ApplicantProfile",
    "JobPosting",
    "SubmissionOptions",
    "SubmissionOutcome",
    "ExtractionPipeline",
    "SubmissionStateMachine",
    "scrape",
    "submit_application",
    "detect_platform",
    "get_adapter",
]
