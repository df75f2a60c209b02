"""Shared fixtures: an in-memory stand-in for the Playwright object graph."""

from typing import Dict, List, Optional

import pytest
from playwright.async_api import Error as PlaywrightError

from autoply.browser.session import BrowserSession
from autoply.config import AppConfig, ApplicationConfig, BrowserConfig
from autoply.core.models import ApplicantProfile, SubmissionOptions


class FakeScope:
    """Answers selector queries from an exact-string lookup table."""

    def __init__(self, selectors: Optional[Dict[str, list]] = None):
        self.selectors = selectors or {}
        self.fail_queries = False

    def add(self, selector: str, *elements: "FakeElement") -> "FakeScope":
        self.selectors.setdefault(selector, []).extend(elements)
        return self

    async def query_selector(self, selector: str):
        if self.fail_queries:
            raise PlaywrightError("query failed")
        matches = self.selectors.get(selector, [])
        return matches[0] if matches else None

    async def query_selector_all(self, selector: str):
        if self.fail_queries:
            raise PlaywrightError("query failed")
        return list(self.selectors.get(selector, []))


class FakeElement(FakeScope):
    """Element handle recording the actions performed on it."""

    def __init__(
        self,
        text: str = "",
        attrs: Optional[Dict[str, str]] = None,
        tag: str = "div",
        visible: bool = True,
        enabled: bool = True,
        value: str = "",
        selectors: Optional[Dict[str, list]] = None,
        enclosing_label: str = "",
    ):
        super().__init__(selectors)
        self.text = text
        self.enclosing_label = enclosing_label
        self.attrs = dict(attrs or {})
        self.tag = tag
        self.visible = visible
        self.enabled = enabled
        self.value = value
        self.actions: List[tuple] = []
        self.failing_actions = set()

    def _record(self, *action):
        if action[0] in self.failing_actions:
            raise PlaywrightError(f"{action[0]} failed")
        self.actions.append(action)

    async def click(self):
        self._record("click")

    async def fill(self, value):
        self._record("fill", value)
        self.value = value

    async def select_option(self, label=None):
        self._record("select", label)
        self.value = label

    async def set_input_files(self, files):
        self._record("upload", files)

    async def check(self):
        self._record("check")

    async def uncheck(self):
        self._record("uncheck")

    async def press(self, key):
        self._record("press", key)

    async def type(self, text, delay=0):
        self._record("type", text)

    async def inner_text(self):
        return self.text

    async def get_attribute(self, name):
        return self.attrs.get(name)

    async def is_visible(self):
        return self.visible

    async def is_enabled(self):
        return self.enabled

    async def input_value(self):
        return self.value

    async def evaluate(self, expression):
        # The only script run on elements looks up the enclosing <label>
        return self.enclosing_label


class FakeMouse:
    def __init__(self):
        self.moves = []
        self.wheels = []

    async def move(self, x, y):
        self.moves.append((x, y))

    async def wheel(self, delta_x, delta_y):
        self.wheels.append((delta_x, delta_y))


class FakePage(FakeScope):
    """Page with navigation, load states, screenshots and a mouse."""

    def __init__(self, selectors=None, title: str = "", body: str = "", final_url: Optional[str] = None):
        super().__init__(selectors)
        self.page_title = title
        self.body = body
        self.final_url = final_url
        self.url = "about:blank"
        self.mouse = FakeMouse()
        self.goto_calls = []
        self.goto_failures = 0
        self.screenshots = []
        self.screenshot_fails = False
        self.default_timeout = None
        self.close_calls = 0
        self.load_states = []
        self.on_load_state = None

    async def goto(self, url, wait_until=None, timeout=None):
        self.goto_calls.append((url, wait_until, timeout))
        if self.goto_failures > 0:
            self.goto_failures -= 1
            raise PlaywrightError("net::ERR_CONNECTION_RESET")
        self.url = url

    async def title(self):
        return self.page_title

    async def inner_text(self, selector):
        return self.body

    async def wait_for_load_state(self, state=None, timeout=None):
        self.load_states.append((state, timeout))
        if self.on_load_state is not None:
            self.on_load_state(self)

    async def screenshot(self, path=None, full_page=False):
        if self.screenshot_fails:
            raise PlaywrightError("screenshot failed")
        self.screenshots.append((path, full_page))

    def set_default_timeout(self, timeout):
        self.default_timeout = timeout

    async def close(self):
        self.close_calls += 1


class FakeContext:
    def __init__(self, page: FakePage):
        self.page = page
        self.init_scripts = []
        self.close_calls = 0

    async def add_init_script(self, script):
        self.init_scripts.append(script)

    async def new_page(self):
        return self.page

    async def close(self):
        self.close_calls += 1


class FakeBrowser:
    def __init__(self, page: FakePage):
        self.context = FakeContext(page)
        self.context_options = None
        self.context_error: Optional[Exception] = None
        self.close_calls = 0

    async def new_context(self, **options):
        if self.context_error is not None:
            raise self.context_error
        self.context_options = options
        return self.context

    async def close(self):
        self.close_calls += 1


class FakeChromium:
    def __init__(self, browser: FakeBrowser):
        self.browser = browser
        self.launch_options = None

    async def launch(self, **options):
        self.launch_options = options
        return self.browser


class FakePlaywright:
    def __init__(self, page: FakePage):
        self.page = page
        self.browser = FakeBrowser(page)
        self.chromium = FakeChromium(self.browser)
        self.stop_calls = 0

    async def stop(self):
        self.stop_calls += 1


class FakeDriver:
    """Return value of ``async_playwright()``."""

    def __init__(self, playwright: FakePlaywright):
        self.playwright = playwright

    async def start(self):
        return self.playwright


@pytest.fixture
def page():
    return FakePage()


@pytest.fixture
def fake_playwright(monkeypatch, page):
    """Route BrowserSession.initialize to the in-memory page."""
    playwright = FakePlaywright(page)
    monkeypatch.setattr("autoply.browser.session.async_playwright", lambda: FakeDriver(playwright))
    return playwright


@pytest.fixture
def app_config(tmp_path):
    """Configuration with zero timeouts and no sleeping."""
    return AppConfig(
        browser=BrowserConfig(
            headless=True,
            timeout=1000,
            humanize=False,
            selector_timeout=0,
            ready_timeout=0,
            form_timeout=0,
        ),
        application=ApplicationConfig(
            save_screenshots=False,
            screenshot_dir=str(tmp_path / "screenshots"),
            max_steps=3,
        ),
    )


@pytest.fixture
def session(page, app_config):
    """BrowserSession attached to the fake page without launching anything."""
    browser_session = BrowserSession(app_config.browser)
    browser_session.page = page
    browser_session.is_initialized = True
    return browser_session


@pytest.fixture
def profile():
    return ApplicantProfile(
        name="Ada Lovelace King",
        email="ada@example.com",
        phone="+1 555 0100",
        location="London",
        linkedin_url="https://linkedin.com/in/ada",
        github_url="https://github.com/ada",
        years_experience=7,
    )


@pytest.fixture
def options(profile):
    return SubmissionOptions(profile=profile)
