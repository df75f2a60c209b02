"""Human behavior simulation and fingerprint masking for browser sessions."""

import asyncio
import json
import random
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Awaitable, Callable, List, Optional, Tuple

import structlog
from playwright.async_api import BrowserContext

if TYPE_CHECKING:
    from autoply.browser.session import BrowserSession

logger = structlog.get_logger(__name__)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


@dataclass
class StealthConfig:
    """Timing bands and fingerprint values used by the simulator."""
    short_delay: Tuple[float, float] = (0.3, 0.8)
    long_delay: Tuple[float, float] = (1.0, 3.0)
    scroll_count: Tuple[int, int] = (2, 4)
    scroll_distance: Tuple[int, int] = (100, 400)
    scroll_pause: Tuple[float, float] = (0.5, 1.5)
    mouse_x: Tuple[int, int] = (100, 600)
    mouse_y: Tuple[int, int] = (100, 400)
    viewport_width: int = 1920
    viewport_height: int = 1080
    user_agent: str = DEFAULT_USER_AGENT
    languages: List[str] = field(default_factory=lambda: ["en-US", "en"])


def fingerprint_script(config: Optional[StealthConfig] = None) -> str:
    """Build the init script that hides common automation signals."""
    config = config or StealthConfig()
    return """
        // Remove webdriver flag
        Object.defineProperty(navigator, 'webdriver', {
            get: () => undefined,
        });

        // Plausible plugin list
        Object.defineProperty(navigator, 'plugins', {
            get: () => [
                { name: 'Chrome PDF Plugin', filename: 'internal-pdf-viewer' },
                { name: 'Chrome PDF Viewer', filename: 'mhjfbmdgcfjbbpaeojofohoefgiehjai' },
                { name: 'Native Client', filename: 'internal-nacl-plugin' },
            ],
        });

        Object.defineProperty(navigator, 'languages', {
            get: () => %s,
        });

        // Notifications permission probe
        const originalQuery = window.navigator.permissions.query;
        window.navigator.permissions.query = (parameters) => (
            parameters.name === 'notifications' ?
                Promise.resolve({ state: 'prompt' }) :
                originalQuery(parameters)
        );

        window.chrome = {
            runtime: {},
        };
    """ % json.dumps(config.languages)


async def apply_fingerprint_mask(context: BrowserContext, config: Optional[StealthConfig] = None) -> None:
    """Register the fingerprint script on a browser context."""
    await context.add_init_script(fingerprint_script(config))
    logger.debug("Fingerprint mask applied")


class HumanBehaviorSimulator:
    """
    Randomized pauses, scrolling and pointer movement between automated actions.

    The simulator keeps no per-session state; every call reads only its
    configuration and random source, so one instance may serve any session.
    """

    def __init__(
        self,
        config: Optional[StealthConfig] = None,
        humanize: bool = True,
        rng: Optional[random.Random] = None,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
    ):
        """
        Args:
            config: Timing bands
            humanize: When False, choices are still drawn but sleeps are skipped
            rng: Random source, injectable for deterministic tests
            sleep: Awaitable sleep function
        """
        self.config = config or StealthConfig()
        self.humanize = humanize
        self.rng = rng or random.Random()
        self._sleep = sleep or asyncio.sleep
        self.logger = structlog.get_logger(__name__, component="human_behavior")

    def pick_delay(self, short: bool = False) -> float:
        """Draw a delay in seconds from the short or long band."""
        low, high = self.config.short_delay if short else self.config.long_delay
        return self.rng.uniform(low, high)

    async def pause(self, seconds: float) -> None:
        if self.humanize and seconds > 0:
            await self._sleep(seconds)

    async def delay(self, short: bool = False) -> float:
        """Wait a randomized human-like interval and return its length."""
        seconds = self.pick_delay(short)
        await self.pause(seconds)
        return seconds

    async def scroll(self, session: "BrowserSession") -> List[int]:
        """Scroll down in a few randomized wheel movements."""
        count = self.rng.randint(*self.config.scroll_count)
        distances = []
        for _ in range(count):
            distance = self.rng.randint(*self.config.scroll_distance)
            await session.mouse_wheel(0, distance)
            distances.append(distance)
            await self.pause(self.rng.uniform(*self.config.scroll_pause))

        self.logger.debug("Simulated scrolling", scrolls=count, total_distance=sum(distances))
        return distances

    async def move_mouse(self, session: "BrowserSession") -> Tuple[int, int]:
        """Move the pointer to a random point in the upper page area."""
        x = self.rng.randint(*self.config.mouse_x)
        y = self.rng.randint(*self.config.mouse_y)
        await session.mouse_move(x, y)
        return x, y
