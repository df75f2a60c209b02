"""Exception hierarchy for Autoply.

Only fatal conditions are exceptions. Missing extraction fields and failed
fills are reported as values (defaults and ``FillResult.errors``).
"""


class AutoplyError(Exception):
    """Base class for all Autoply errors."""


class InitializationError(AutoplyError):
    """The browser process or context could not be started."""


class NavigationError(AutoplyError):
    """The target URL could not be loaded."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to navigate to {url}: {reason}")


class UnsupportedPlatform(AutoplyError):
    """No adapter is registered for the requested platform."""


class ActionFailed(AutoplyError):
    """A critical element action did not complete."""

    def __init__(self, action: str, reason: str):
        self.action = action
        self.reason = reason
        super().__init__(f"{action} failed: {reason}")


class AuthGateBlocked(AutoplyError):
    """The form sits behind a sign-in wall."""


class SubmitControlNotFound(AutoplyError):
    """Neither a next nor a submit control was found on the current step."""


class StepLimitExceeded(AutoplyError):
    """The form did not reach a submit control within the step cap."""

    def __init__(self, max_steps: int):
        self.max_steps = max_steps
        super().__init__(f"Could not complete application within {max_steps} steps")
