"""Ordered selector fallback resolution."""

import asyncio
from typing import TYPE_CHECKING, Any, Awaitable, Callable, List, Optional, Sequence

from autoply.utils.logging import get_logger

if TYPE_CHECKING:
    from autoply.browser.session import BrowserSession

Predicate = Callable[[Any], Awaitable[bool]]


class SelectorResolver:
    """
    Resolve an element from an ordered list of candidate selectors.

    Candidates are tried in order and the first match wins. A missing element
    is a normal outcome: ``resolve`` returns None and ``resolve_all`` an empty
    list, they never raise.
    """

    def __init__(self, session: "BrowserSession", timeout: float = 5.0, poll_interval: float = 0.25):
        self.session = session
        self.timeout = timeout
        self.poll_interval = poll_interval
        self.logger = get_logger(__name__, component="selector_resolver")

    async def resolve(
        self,
        candidates: Sequence[str],
        root: Optional[Any] = None,
        predicate: Optional[Predicate] = None,
        timeout: Optional[float] = None,
    ) -> Optional[Any]:
        """
        Return the first element matched by the candidates, polling until timeout.

        Args:
            candidates: Selectors in priority order
            root: Element to search within (page when None)
            predicate: Async filter an element must satisfy, e.g. actionable
            timeout: Seconds to keep polling; 0 means a single pass

        Returns:
            Element handle or None
        """
        limit = self.timeout if timeout is None else timeout
        loop = asyncio.get_running_loop()
        deadline = loop.time() + limit

        while True:
            handle = await self._first_match(candidates, root, predicate)
            if handle is not None:
                return handle

            remaining = deadline - loop.time()
            if remaining <= 0:
                self.logger.debug("No candidate matched", candidates=list(candidates), timeout=limit)
                return None
            await asyncio.sleep(min(self.poll_interval, remaining))

    async def _first_match(
        self, candidates: Sequence[str], root: Optional[Any], predicate: Optional[Predicate]
    ) -> Optional[Any]:
        for index, selector in enumerate(candidates):
            if predicate is None:
                handle = await self.session.query(selector, root)
                handles = [handle] if handle is not None else []
            else:
                handles = await self.session.query_all(selector, root)

            for handle in handles:
                if predicate is None or await predicate(handle):
                    if index > 0:
                        self.logger.debug("Resolved via fallback selector", selector=selector, position=index)
                    return handle
        return None

    async def resolve_all(self, candidates: Sequence[str], root: Optional[Any] = None) -> List[Any]:
        """Return every match of the first candidate that matches anything."""
        for selector in candidates:
            handles = await self.session.query_all(selector, root)
            if handles:
                return handles
        return []

    async def first_text(self, candidates: Sequence[str], root: Optional[Any] = None) -> str:
        """Text of the first matching element, or an empty string."""
        handle = await self.resolve(candidates, root=root, timeout=0)
        if handle is None:
            return ""
        return await self.session.text(handle)

    async def actionable(self, handle: Any) -> bool:
        """Predicate: the element is visible and enabled."""
        return await self.session.is_visible(handle) and await self.session.is_enabled(handle)
