"""Slow, keystroke-level field filling."""
import logging

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Locator

from ..browser.page import Page
from ..core.config import FillConfig
from ..core.errors import FillError

logger = logging.getLogger(__name__)


def display_value(text: str, secret: bool) -> str:
    """Value as it may appear in logs."""
    return "*" * len(text) if secret else text


class FieldFiller:
    """Drives one input through a clear-then-type sequence.

    Characters are typed one at a time so per-keystroke listeners see
    every change.
    """

    def __init__(self, page: Page, config: FillConfig | None = None) -> None:
        self._page = page
        self._config = config or FillConfig()

    def fill(self, locator: str, text: str, *, secret: bool = False) -> Locator:
        """Clear the element at ``locator`` and type ``text`` into it.

        Returns:
            The resolved element, for read-back.

        Raises:
            ElementNotFoundError: Element did not become visible in time.
            AmbiguousElementError: Locator matched more than one element.
            FillError: The browser rejected an interaction mid-fill.
        """
        cfg = self._config
        logger.info(
            f"Slow fill: {display_value(text, secret)!r} into {locator}"
        )
        try:
            element = self._page.find_visible(locator, cfg.visible_timeout_ms)
            self._page.wait(cfg.pre_focus_wait_ms)
            self._page.focus(element)
            self._page.wait(cfg.focus_wait_ms)
            self._clear(element)
            self._type(element, text, secret)
            self._page.wait(cfg.settle_ms)
        except PlaywrightError as e:
            raise FillError(f"Fill of {locator} interrupted: {e}") from e
        return element

    def _clear(self, element: Locator) -> None:
        """Select existing content and delete it with an explicit key press."""
        self._page.select_all(element)
        self._page.wait(self._config.select_wait_ms)
        self._page.press("Delete")
        self._page.wait(self._config.clear_wait_ms)

    def _type(self, element: Locator, text: str, secret: bool) -> None:
        cfg = self._config
        for i, char in enumerate(text):
            self._page.type_char(element, char, cfg.key_delay_ms)
            self._page.wait(cfg.char_pause_ms)

            if i % cfg.progress_every == 0 and logger.isEnabledFor(logging.DEBUG):
                current = self._page.read_value(element)
                logger.debug(f"  Progress: {display_value(current, secret)!r}")
