"""Browser session management: local launch or Chrome CDP attach."""
import json
import logging
import time
import urllib.request
from types import TracebackType
from typing import Optional

from playwright.sync_api import Browser, BrowserContext, Playwright, sync_playwright

from ..core.config import BrowserConfig
from ..core.errors import BrowserUnavailableError
from .page import Page

logger = logging.getLogger(__name__)


class BrowserConnection:
    """Owns one browser and one page for the duration of a run.

    Use as a context manager; the browser is released on every exit path.
    """

    def __init__(self, config: Optional[BrowserConfig] = None) -> None:
        """Initialize browser connection settings.

        Args:
            config: Browser configuration. Defaults are used when omitted.
        """
        self.config = config or BrowserConfig()
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._page: Optional[Page] = None
        self._attached = False

    @property
    def browser(self) -> Browser:
        """Get the connected browser instance.

        Raises:
            RuntimeError: If not connected.
        """
        if not self._browser:
            raise RuntimeError("Not connected. Call connect() first.")
        return self._browser

    @property
    def page(self) -> Page:
        """Get the session page, creating it on first use."""
        if self._page is None:
            self._page = Page(self._new_raw_page(), load_timeout_ms=self.config.timeout)
        return self._page

    def _new_raw_page(self):
        if self._context is None:
            if self._attached and self.browser.contexts:
                self._context = self.browser.contexts[0]
            else:
                self._context = self.browser.new_context(**self._context_options())
        if self._attached and self._context.pages:
            return self._context.pages[0]
        return self._context.new_page()

    def _context_options(self) -> dict:
        if self.config.maximize and not self.config.headless:
            return {"no_viewport": True}
        return {
            "viewport": {
                "width": self.config.viewport_width,
                "height": self.config.viewport_height,
            }
        }

    def _check_cdp_endpoint(self) -> bool:
        """Verify CDP endpoint is responding."""
        try:
            url = f"http://127.0.0.1:{self.config.cdp_port}/json/version"
            with urllib.request.urlopen(url, timeout=5) as resp:
                data = json.loads(resp.read().decode())
                logger.debug(f"CDP ready: {data.get('Browser', 'unknown')}")
                return True
        except Exception as e:
            logger.debug(f"CDP not ready: {e}")
            return False

    def connect(self) -> bool:
        """Launch or attach to the browser.

        Returns:
            True if connection successful, False otherwise.
        """
        if self.config.cdp_port is not None:
            return self._connect_cdp()
        return self._launch()

    def _launch(self) -> bool:
        args = ["--start-maximized"] if self.config.maximize else []
        try:
            self._playwright = sync_playwright().start()
            self._browser = self._playwright.chromium.launch(
                headless=self.config.headless,
                channel=self.config.channel,
                args=args,
            )
            logger.info(
                f"Browser launched{' (maximized)' if self.config.maximize else ''}"
            )
            return True
        except Exception as e:
            logger.error(f"Browser launch failed: {e}")
            self._cleanup()
            return False

    def _connect_cdp(self) -> bool:
        """Connect to Chrome with exponential backoff retry."""
        for attempt in range(self.config.connect_retries):
            wait_time = min(self.config.retry_delay * (2**attempt), 30)

            if not self._check_cdp_endpoint():
                logger.info(
                    f"Attempt {attempt + 1}/{self.config.connect_retries}: "
                    f"CDP not ready, waiting {wait_time:.1f}s"
                )
                time.sleep(wait_time)
                continue

            try:
                self._playwright = sync_playwright().start()
                self._browser = self._playwright.chromium.connect_over_cdp(
                    f"http://127.0.0.1:{self.config.cdp_port}"
                )
                self._attached = True
                logger.info("Connected to Chrome successfully")
                return True
            except Exception as e:
                logger.warning(f"Connection failed: {e}")
                self._cleanup()
                time.sleep(wait_time)

        logger.error("Failed to connect after all retries")
        return False

    def _cleanup(self) -> None:
        """Clean up playwright resources."""
        if self._browser and not self._attached:
            try:
                self._browser.close()
            except Exception as e:
                logger.debug(f"Browser close failed: {e}")
        if self._playwright:
            try:
                self._playwright.stop()
            except Exception as e:
                logger.debug(f"Playwright stop failed: {e}")
        self._playwright = None
        self._browser = None
        self._context = None
        self._page = None
        self._attached = False

    def disconnect(self) -> None:
        """Close the browser session."""
        logger.info("Closing browser session")
        self._cleanup()

    def __enter__(self) -> "BrowserConnection":
        if not self.connect():
            raise BrowserUnavailableError("Could not start or attach to a browser")
        return self

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        self.disconnect()
