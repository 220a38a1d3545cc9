"""Read-back verification with a bounded fill/verify retry loop."""
import logging
from enum import Enum
from typing import Optional

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Locator

from ..browser.page import Page
from ..core.config import FillConfig
from ..core.errors import AmbiguousElementError, FillError, VerificationMismatch
from ..schema.models import FieldDescriptor, FillOutcome
from .keystrokes import FieldFiller, display_value

logger = logging.getLogger(__name__)


class FillState(Enum):
    """Per-field state of the fill/verify loop."""
    UNATTEMPTED = "unattempted"
    FILLING = "filling"
    VERIFYING = "verifying"
    VERIFIED = "verified"
    EXHAUSTED = "exhausted"


class FieldVerifier:
    """Fills a field and confirms the value took, retrying on mismatch."""

    def __init__(
        self,
        page: Page,
        config: Optional[FillConfig] = None,
        filler: Optional[FieldFiller] = None,
    ) -> None:
        self._page = page
        self._config = config or FillConfig()
        self._filler = filler or FieldFiller(page, self._config)

    def verify_with_retry(
        self,
        field: FieldDescriptor,
        expected: str,
        max_attempts: Optional[int] = None,
    ) -> FillOutcome:
        """Fill ``field`` with ``expected`` until the read-back matches exactly.

        Field-level failures never raise; they come back as an unverified
        outcome. An ambiguous locator is not retried.

        Args:
            field: Field to fill.
            expected: Exact value that must be read back.
            max_attempts: Attempt budget, defaults to ``FillConfig.max_attempts``.

        Returns:
            The outcome for this field.
        """
        budget = max_attempts if max_attempts is not None else self._config.max_attempts
        if budget < 1:
            raise ValueError(f"max_attempts must be >= 1, got {budget}")

        state = FillState.UNATTEMPTED
        observed: Optional[str] = None
        error: Optional[str] = None

        for attempt in range(1, budget + 1):
            logger.info(f"Attempt {attempt}/{budget} for {field.label!r}")
            state = self._transition(field, state, FillState.FILLING)
            try:
                element = self._filler.fill(field.locator, expected, secret=field.is_secret)
            except AmbiguousElementError as e:
                logger.error(f"{field.label}: {e}, not retrying")
                return FillOutcome(field, expected, None, attempt, False, str(e))
            except FillError as e:
                logger.warning(f"{field.label}: {e}")
                observed, error = None, str(e)
                self._backoff(attempt, budget)
                continue

            state = self._transition(field, state, FillState.VERIFYING)
            try:
                observed = self._verify(field, element, expected)
            except VerificationMismatch as e:
                observed, error = e.observed, str(e)
                logger.warning(f"MISMATCH: {e}")
                self._backoff(attempt, budget)
                continue

            self._transition(field, state, FillState.VERIFIED)
            logger.info(
                f"SUCCESS: {field.label!r} = "
                f"{display_value(observed, field.is_secret)!r}"
            )
            return FillOutcome(field, expected, observed, attempt, True)

        self._transition(field, state, FillState.EXHAUSTED)
        logger.error(f"{field.label!r} not verified after {budget} attempts: {error}")
        return FillOutcome(field, expected, observed, budget, False, error)

    def _verify(self, field: FieldDescriptor, element: Locator, expected: str) -> str:
        """Read the element back; exact match or ``VerificationMismatch``."""
        try:
            self._page.wait(self._config.verify_settle_ms)
            observed = self._page.read_value(element)
        except PlaywrightError as e:
            logger.warning(f"{field.label}: read-back failed: {e}")
            raise VerificationMismatch(field.label, expected, None, field.is_secret) from e
        if observed != expected:
            raise VerificationMismatch(field.label, expected, observed, field.is_secret)
        return observed

    def _backoff(self, attempt: int, budget: int) -> None:
        if attempt < budget:
            logger.info(f"Retrying in {self._config.retry_backoff_ms}ms...")
            try:
                self._page.wait(self._config.retry_backoff_ms)
            except PlaywrightError as e:
                logger.warning(f"Backoff wait interrupted: {e}")

    def _transition(
        self, field: FieldDescriptor, current: FillState, new: FillState
    ) -> FillState:
        logger.debug(f"{field.label}: {current.value} -> {new.value}")
        return new
