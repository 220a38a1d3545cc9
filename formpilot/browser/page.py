"""Page wrapper exposing the element access surface used by the filler."""
import logging
from pathlib import Path
from typing import Optional

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Locator
from playwright.sync_api import Page as PlaywrightPage
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from ..core.errors import AmbiguousElementError, ElementNotFoundError

logger = logging.getLogger(__name__)

PAGE_LOAD_TIMEOUT_MS: int = 30000
MEDIUM_WAIT_MS: int = 1500
MAX_NAVIGATION_RETRIES: int = 3


class Page:
    """Wrapper around Playwright Page with element access utilities."""

    def __init__(
        self, page: PlaywrightPage, load_timeout_ms: int = PAGE_LOAD_TIMEOUT_MS
    ) -> None:
        """Initialize page wrapper.

        Args:
            page: Playwright Page instance.
            load_timeout_ms: Navigation timeout in milliseconds.
        """
        self._page = page
        self._load_timeout_ms = load_timeout_ms

    @property
    def url(self) -> str:
        """Get current page URL."""
        return self._page.url

    @property
    def raw(self) -> PlaywrightPage:
        """Access underlying Playwright page for advanced operations."""
        return self._page

    def goto(
        self,
        url: str,
        wait_until: str = "domcontentloaded",
        max_retries: int = MAX_NAVIGATION_RETRIES,
    ) -> bool:
        """Navigate to URL with retry logic.

        Returns True if navigation succeeded, False if all retries failed.
        """
        for attempt in range(max_retries):
            try:
                logger.info(f"Navigating to: {url} (attempt {attempt + 1})")
                self._page.goto(url, wait_until=wait_until, timeout=self._load_timeout_ms)
                return True
            except PlaywrightError as e:
                if not self._handle_navigation_error(e, url, attempt, max_retries):
                    return False
        return False

    def _handle_navigation_error(
        self, error: Exception, url: str, attempt: int, max_retries: int
    ) -> bool:
        """Handle navigation error. Returns True if another attempt should follow."""
        error_msg = str(error).lower()
        if "err_aborted" in error_msg or "aborted" in error_msg:
            logger.warning(f"Navigation aborted (attempt {attempt + 1}): {error}")
            self.wait(MEDIUM_WAIT_MS)
        if attempt < max_retries - 1:
            logger.warning(f"Navigation failed (attempt {attempt + 1}): {error}")
            self.wait(MEDIUM_WAIT_MS)
            return True
        logger.error(f"Navigation failed after {max_retries} attempts: {error}")
        return False

    def wait(self, ms: int) -> None:
        """Wait for specified milliseconds.

        Args:
            ms: Milliseconds to wait.
        """
        if ms > 0:
            self._page.wait_for_timeout(ms)

    def wait_for(self, locator: str, timeout_ms: int) -> Locator:
        """Wait until the first element matching ``locator`` is visible.

        Raises:
            ElementNotFoundError: If nothing became visible in time.
            AmbiguousElementError: If the wait timed out on a locator that
                matches several elements.
        """
        loc = self._page.locator(locator)
        try:
            loc.first.wait_for(state="visible", timeout=timeout_ms)
        except PlaywrightTimeoutError:
            count = loc.count()
            if count > 1:
                raise AmbiguousElementError(locator, count) from None
            raise ElementNotFoundError(
                locator, f"not visible after {timeout_ms}ms"
            ) from None
        return loc

    def find_visible(
        self, locator: str, timeout_ms: int, require_enabled: bool = True
    ) -> Locator:
        """Resolve ``locator`` to exactly one visible element.

        Raises:
            ElementNotFoundError: No visible match in time, or the match is disabled.
            AmbiguousElementError: More than one element matches.
        """
        loc = self.wait_for(locator, timeout_ms)
        count = loc.count()
        if count > 1:
            raise AmbiguousElementError(locator, count)
        if count == 0:
            raise ElementNotFoundError(locator, "detached after becoming visible")
        if require_enabled and not loc.is_enabled():
            raise ElementNotFoundError(locator, "is disabled")
        return loc

    def read_value(self, element: Locator) -> str:
        """Read the current value of an input element."""
        return element.input_value()

    def focus(self, element: Locator) -> None:
        element.focus()

    def select_all(self, element: Locator) -> None:
        """Select all existing content of a focused input."""
        element.click(click_count=3)
        self._page.keyboard.press("ControlOrMeta+A")

    def press(self, key: str) -> None:
        self._page.keyboard.press(key)

    def type_char(self, element: Locator, char: str, delay_ms: int = 0) -> None:
        """Type a single character into the focused element."""
        self._page.keyboard.type(char, delay=delay_ms)

    def click(self, element: Locator, timeout_ms: Optional[int] = None) -> None:
        element.click(timeout=timeout_ms)

    def screenshot(self, path: Path) -> None:
        """Take a screenshot.

        Args:
            path: File path to save screenshot.
        """
        path.parent.mkdir(parents=True, exist_ok=True)
        self._page.screenshot(path=str(path))
