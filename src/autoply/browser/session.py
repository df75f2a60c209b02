"""Browser session wrapping one Playwright browser, context and page."""

from pathlib import Path
from typing import Any, List, Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

from autoply.browser.selectors import SelectorResolver
from autoply.browser.stealth import HumanBehaviorSimulator, StealthConfig, apply_fingerprint_mask
from autoply.config import BrowserConfig, load_app_config
from autoply.core.errors import ActionFailed, InitializationError, NavigationError
from autoply.utils.logging import get_logger

LAUNCH_ARGS = ["--disable-blink-features=AutomationControlled"]
ACTIONS = ("click", "fill", "select", "upload", "check", "uncheck", "press", "type")
ENCLOSING_LABEL_SCRIPT = "el => el.closest('label')?.textContent?.trim() ?? ''"


class BrowserSession:
    """
    One isolated browser context and page for a single extraction or submission.

    Use as an async context manager so the browser is always released:

        async with BrowserSession(config) as session:
            await session.navigate(url)
    """

    def __init__(
        self,
        config: Optional[BrowserConfig] = None,
        stealth_config: Optional[StealthConfig] = None,
        human: Optional[HumanBehaviorSimulator] = None,
    ):
        self.config = config or load_app_config().browser
        self.stealth_config = stealth_config or StealthConfig()
        self.logger = get_logger(__name__, component="browser_session")

        self.resolver = SelectorResolver(self, timeout=self.config.selector_timeout)
        self.human = human or HumanBehaviorSimulator(self.stealth_config, humanize=self.config.humanize)

        self.playwright = None
        self.browser = None
        self.context = None
        self.page = None

        self.is_initialized = False
        self.is_disposed = False

    async def __aenter__(self) -> "BrowserSession":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        await self.dispose()
        return False

    async def initialize(self) -> "BrowserSession":
        """Launch the browser, open an isolated context and apply the fingerprint mask."""
        if self.is_initialized:
            return self

        try:
            self.playwright = await async_playwright().start()
            self.browser = await self.playwright.chromium.launch(
                headless=self.config.headless,
                args=LAUNCH_ARGS,
            )

            context_options = {
                "viewport": {
                    "width": self.stealth_config.viewport_width,
                    "height": self.stealth_config.viewport_height,
                },
                "user_agent": self.stealth_config.user_agent,
                "locale": self.config.locale,
            }
            if self.config.storage_state:
                context_options["storage_state"] = self.config.storage_state

            self.context = await self.browser.new_context(**context_options)
            await apply_fingerprint_mask(self.context, self.stealth_config)

            self.page = await self.context.new_page()
            self.page.set_default_timeout(self.config.timeout)
        except Exception as e:
            self.logger.error(
                "Failed to initialize browser session",
                error=str(e),
                error_type=type(e).__name__
            )
            await self.dispose()
            raise InitializationError(f"Failed to initialize browser: {e}") from e

        self.is_initialized = True
        self.logger.info(
            "Browser session initialized",
            headless=self.config.headless,
            storage_state=bool(self.config.storage_state)
        )
        return self

    def _require_page(self):
        if self.page is None:
            raise InitializationError("Browser session is not initialized")
        return self.page

    async def navigate(self, url: str, attempts: int = 2) -> None:
        """Load a URL and wait for network idle, retrying once before failing."""
        page = self._require_page()
        last_error = None

        for attempt in range(1, attempts + 1):
            try:
                await page.goto(url, wait_until="networkidle", timeout=self.config.timeout)
                self.logger.info("Navigated", url=url, attempt=attempt)
                return
            except PlaywrightError as e:
                last_error = e
                self.logger.warning("Navigation attempt failed", url=url, attempt=attempt, error=str(e))

        raise NavigationError(url, str(last_error))

    async def query(self, selector: str, root: Optional[Any] = None) -> Optional[Any]:
        """First element matching a selector, or None."""
        scope = root if root is not None else self._require_page()
        try:
            return await scope.query_selector(selector)
        except PlaywrightError as e:
            self.logger.debug("Selector query failed", selector=selector, error=str(e))
            return None

    async def query_all(self, selector: str, root: Optional[Any] = None) -> List[Any]:
        """All elements matching a selector."""
        scope = root if root is not None else self._require_page()
        try:
            return await scope.query_selector_all(selector)
        except PlaywrightError as e:
            self.logger.debug("Selector query failed", selector=selector, error=str(e))
            return []

    async def act(self, handle: Any, action: str, value: Optional[str] = None, critical: bool = False) -> bool:
        """
        Perform an action on an element.

        Args:
            handle: Element handle
            action: One of click, fill, select, upload, check, uncheck, press, type
            value: Text, option label, key or file path depending on the action
            critical: Raise ActionFailed instead of returning False

        Returns:
            True if the action completed
        """
        if action not in ACTIONS:
            raise ValueError(f"Unknown element action: {action}")

        try:
            if action == "click":
                await handle.click()
            elif action == "fill":
                await handle.fill(value or "")
            elif action == "select":
                await handle.select_option(label=value)
            elif action == "upload":
                await handle.set_input_files(value)
            elif action == "check":
                await handle.check()
            elif action == "uncheck":
                await handle.uncheck()
            elif action == "press":
                await handle.press(value)
            elif action == "type":
                await handle.type(value or "", delay=50)
            return True
        except PlaywrightError as e:
            self.logger.warning("Element action failed", action=action, error=str(e))
            if critical:
                raise ActionFailed(action, str(e)) from e
            return False

    async def text(self, handle: Any) -> str:
        try:
            return ((await handle.inner_text()) or "").strip()
        except PlaywrightError:
            return ""

    async def texts(self, selector: str, root: Optional[Any] = None) -> List[str]:
        """Non-empty texts of every element matching a selector."""
        result = []
        for handle in await self.query_all(selector, root):
            text = await self.text(handle)
            if text:
                result.append(text)
        return result

    async def attribute(self, handle: Any, name: str) -> Optional[str]:
        try:
            return await handle.get_attribute(name)
        except PlaywrightError:
            return None

    async def is_visible(self, handle: Any) -> bool:
        try:
            return await handle.is_visible()
        except PlaywrightError:
            return False

    async def is_enabled(self, handle: Any) -> bool:
        try:
            return await handle.is_enabled()
        except PlaywrightError:
            return False

    async def input_value(self, handle: Any) -> str:
        try:
            return await handle.input_value()
        except PlaywrightError:
            return ""

    async def control_label(self, handle: Any) -> str:
        """Visible label of a button-like control."""
        text = await self.text(handle)
        if text:
            return text
        for name in ("value", "aria-label", "title"):
            value = await self.attribute(handle, name)
            if value:
                return value.strip()
        return ""

    async def label_for(self, handle: Any) -> str:
        """Label text for an input: label[for], enclosing label, aria-label, placeholder."""
        element_id = await self.attribute(handle, "id")
        if element_id:
            label = await self.query(f'label[for="{element_id}"]')
            if label is not None:
                text = await self.text(label)
                if text:
                    return text
        try:
            wrapping = await handle.evaluate(ENCLOSING_LABEL_SCRIPT)
        except PlaywrightError:
            wrapping = ""
        if wrapping:
            return wrapping.strip()
        for name in ("aria-label", "placeholder"):
            value = await self.attribute(handle, name)
            if value:
                return value.strip()
        return ""

    async def option_texts(self, select_handle: Any) -> List[str]:
        return await self.texts("option", select_handle)

    async def page_title(self) -> str:
        try:
            return await self._require_page().title()
        except PlaywrightError:
            return ""

    async def body_text(self) -> str:
        try:
            return await self._require_page().inner_text("body")
        except PlaywrightError:
            return ""

    def current_url(self) -> str:
        return self.page.url if self.page is not None else ""

    async def wait_for_load_state(self, state: str = "networkidle", timeout: Optional[float] = None) -> bool:
        """Wait for a load state; timeout in seconds."""
        timeout_ms = (timeout if timeout is not None else self.config.timeout / 1000) * 1000
        try:
            await self._require_page().wait_for_load_state(state, timeout=timeout_ms)
            return True
        except PlaywrightError as e:
            self.logger.debug("Load state not reached", state=state, error=str(e))
            return False

    async def mouse_move(self, x: int, y: int) -> bool:
        try:
            await self._require_page().mouse.move(x, y)
            return True
        except PlaywrightError:
            return False

    async def mouse_wheel(self, delta_x: int, delta_y: int) -> bool:
        try:
            await self._require_page().mouse.wheel(delta_x, delta_y)
            return True
        except PlaywrightError:
            return False

    async def screenshot(self, path: str) -> Optional[str]:
        """Save a full-page screenshot and return its path, or None on failure."""
        try:
            Path(path).parent.mkdir(parents=True, exist_ok=True)
            await self._require_page().screenshot(path=path, full_page=True)
            self.logger.info("Screenshot saved", path=path)
            return path
        except (PlaywrightError, OSError) as e:
            self.logger.warning("Failed to take screenshot", path=path, error=str(e))
            return None

    async def dispose(self) -> None:
        """Release page, context, browser and driver. Safe to call more than once."""
        if self.is_disposed:
            return
        self.is_disposed = True

        for name in ("page", "context", "browser"):
            resource = getattr(self, name)
            if resource is None:
                continue
            try:
                await resource.close()
            except Exception as e:
                self.logger.warning("Failed to close browser resource", resource=name, error=str(e))
            setattr(self, name, None)

        if self.playwright is not None:
            try:
                await self.playwright.stop()
            except Exception as e:
                self.logger.warning("Failed to stop playwright", error=str(e))
            self.playwright = None

        self.is_initialized = False
        self.logger.info("Browser session disposed")


def create_browser_session(
    config: Optional[BrowserConfig] = None,
    stealth_config: Optional[StealthConfig] = None
) -> BrowserSession:
    """
    Factory function to create a browser session.

    Args:
        config: Browser configuration, from settings when None
        stealth_config: Fingerprint and timing configuration

    Returns:
        Configured, not yet initialized BrowserSession
    """
    return BrowserSession(config=config, stealth_config=stealth_config)
