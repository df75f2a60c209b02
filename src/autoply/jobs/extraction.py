"""Read path: load a posting page and extract a normalized JobPosting."""

from typing import Callable, Optional, Union

from autoply.browser.session import BrowserSession
from autoply.config import AppConfig, load_app_config
from autoply.core.models import JobPosting, Platform
from autoply.jobs.sections import extract_qualifications, extract_requirements
from autoply.platforms import PlatformAdapter, detect_platform, get_adapter
from autoply.utils.logging import get_logger

SessionFactory = Callable[[], BrowserSession]


class ExtractionPipeline:
    """
    Drive one adapter through ready-wait and extraction in a fresh session.

    The session is released on every exit path. Only InitializationError and
    NavigationError escape; missing page elements become default values.
    """

    def __init__(
        self,
        adapter: PlatformAdapter,
        config: Optional[AppConfig] = None,
        session_factory: Optional[SessionFactory] = None,
    ):
        self.adapter = adapter
        self.config = config or load_app_config()
        self.session_factory = session_factory or (lambda: BrowserSession(self.config.browser))
        self.logger = get_logger(__name__, component="extraction_pipeline", platform=adapter.platform.value)

    async def run(self, url: str) -> JobPosting:
        self.logger.info("Starting extraction", url=url)

        async with self.session_factory() as session:
            await session.human.delay()
            await session.navigate(url)

            await session.human.delay(short=True)
            await session.human.move_mouse(session)
            await session.human.scroll(session)

            if not await self.adapter.wait_for_ready(session):
                self.logger.warning("Posting not ready within timeout; extracting anyway", url=url)
            posting = await self.adapter.extract(session, url)

        return self.derive_sections(posting)

    def derive_sections(self, posting: JobPosting) -> JobPosting:
        """Fill requirements and qualifications from the description."""
        requirements = extract_requirements(posting.description) or posting.requirements
        qualifications = extract_qualifications(posting.description) or posting.qualifications
        self.logger.debug(
            "Derived description sections",
            requirements=len(requirements),
            qualifications=len(qualifications)
        )
        return posting.model_copy(update={
            "requirements": list(requirements),
            "qualifications": list(qualifications),
        })


async def scrape(
    url: str,
    platform: Optional[Union[str, Platform]] = None,
    config: Optional[AppConfig] = None,
    session_factory: Optional[SessionFactory] = None,
) -> JobPosting:
    """
    Extract a job posting.

    Args:
        url: Posting URL
        platform: Platform id; detected from the URL when None
        config: Configuration, from settings when None
        session_factory: Override for session creation

    Returns:
        The extracted JobPosting

    Raises:
        InitializationError: The browser could not start
        NavigationError: The page could not be loaded
        UnsupportedPlatform: Unknown platform id
    """
    adapter = get_adapter(platform or detect_platform(url))
    pipeline = ExtractionPipeline(adapter, config=config, session_factory=session_factory)
    return await pipeline.run(url)
