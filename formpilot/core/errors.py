"""Error taxonomy for form runs.

Field-level errors (``FillError`` and its subclasses, ``VerificationMismatch``)
are absorbed into a field's ``FillOutcome``. Page-level errors abort only the
page they were raised for.
"""
from typing import Optional


class FormPilotError(Exception):
    """Base class for all form-run errors."""


class UnknownPageError(FormPilotError):
    """Requested page id is not in the schema registry."""

    def __init__(self, page_id: str) -> None:
        self.page_id = page_id
        super().__init__(f"Unknown page: {page_id!r}")


class NavigationError(FormPilotError):
    """Navigation to a page's target URL failed after all retries."""

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"Could not navigate to {url}")


class BrowserUnavailableError(FormPilotError):
    """The browser session could not be acquired."""


class FillError(FormPilotError):
    """A single fill attempt failed."""


class ElementNotFoundError(FillError):
    """Locator resolved to no visible, enabled element within the wait budget."""

    def __init__(self, locator: str, reason: str = "not visible") -> None:
        self.locator = locator
        super().__init__(f"Element {locator} {reason}")


class AmbiguousElementError(FillError):
    """Locator resolved to more than one element."""

    def __init__(self, locator: str, count: int) -> None:
        self.locator = locator
        self.count = count
        super().__init__(f"Locator {locator} matched {count} elements")


class VerificationMismatch(FormPilotError):
    """Read-back value differs from the expected value."""

    def __init__(
        self,
        label: str,
        expected: str,
        observed: Optional[str],
        secret: bool = False,
    ) -> None:
        self.label = label
        self.expected = expected
        self.observed = observed
        if secret:
            expected_text = _mask(expected)
            observed_text = _mask(observed or "")
        else:
            expected_text = expected
            observed_text = observed or ""
        super().__init__(
            f"{label}: expected {expected_text!r} but got {observed_text!r}"
        )


class DiscoveryInspectionError(FormPilotError):
    """A discovery candidate could not be inspected."""

    def __init__(self, index: int, cause: Exception) -> None:
        self.index = index
        self.cause = cause
        super().__init__(f"Candidate #{index} could not be inspected: {cause}")


class SubmitUnavailableError(FormPilotError):
    """Submit control never became actionable."""

    def __init__(self, locator: str, reason: str = "") -> None:
        self.locator = locator
        message = f"Submit control {locator} unavailable"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


def _mask(value: str) -> str:
    return "*" * len(value)
