"""Browser session, selector resolution, human behavior and form filling."""

from autoply.browser.forms import FormFiller, ProfileFormFiller, create_form_filler
from autoply.browser.selectors import SelectorResolver
from autoply.browser.session import BrowserSession, create_browser_session
from autoply.browser.stealth import HumanBehaviorSimulator, StealthConfig, apply_fingerprint_mask

__all__ = [
    "BrowserSession", "create_browser_session",
    "SelectorResolver",
    "HumanBehaviorSimulator", "StealthConfig", "apply_fingerprint_mask",
    "FormFiller", "ProfileFormFiller", "create_form_filler",
]
