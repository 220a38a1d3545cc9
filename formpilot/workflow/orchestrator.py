"""Form orchestration: fill, verify, and gate submission for one page at a time."""
import logging
from dataclasses import replace
from pathlib import Path
from typing import Iterable, Mapping, Optional, Union

from playwright.sync_api import Error as PlaywrightError

from ..browser.page import Page
from ..core.config import Settings
from ..core.errors import (
    AmbiguousElementError,
    ElementNotFoundError,
    FillError,
    FormPilotError,
    NavigationError,
    SubmitUnavailableError,
    VerificationMismatch,
)
from ..discovery.discoverer import FieldDiscoverer
from ..feedback.run_logger import RunLogger
from ..filler.values import merge_defaults, resolve
from ..filler.verifier import FieldVerifier
from ..schema.models import FieldDescriptor, FillOutcome, FormResult, PageId, PageSchema
from ..schema.registry import lookup

logger = logging.getLogger(__name__)

Overrides = Mapping[str, str]
PageJob = tuple[Union[PageId, str], Optional[Overrides]]


class FormOrchestrator:
    """Sequences fill/verify/submit for one page of the session.

    The orchestrator owns the session page for the whole run. Fields are
    processed strictly one after another, and pages one after another.
    """

    def __init__(
        self,
        page: Page,
        settings: Optional[Settings] = None,
        verifier: Optional[FieldVerifier] = None,
        discoverer: Optional[FieldDiscoverer] = None,
        run_logger: Optional[RunLogger] = None,
    ) -> None:
        self._page = page
        self._settings = settings or Settings()
        self._verifier = verifier or FieldVerifier(page, self._settings.fill)
        self._discoverer = discoverer or FieldDiscoverer()
        self._defaults = merge_defaults(self._settings.defaults)
        run_log_path = self._settings.run.run_log_path
        if run_logger is None and run_log_path is not None:
            run_logger = RunLogger(run_log_path)
        self._run_logger = run_logger

    def run_page(
        self, page_id: Union[PageId, str], overrides: Optional[Overrides] = None
    ) -> FormResult:
        """Navigate to a page's target URL and process its form.

        Raises:
            UnknownPageError: If the page id is not registered.
            NavigationError: If the page could not be loaded.
        """
        schema = lookup(page_id)
        url = schema.url_for(self._settings.run.base_url)
        logger.info(f"=== Page {schema.page_id.value}: {url} ===")
        if not self._page.goto(url, wait_until=self._settings.browser.wait_until):
            raise NavigationError(url)
        return self.process_form(schema.page_id, overrides)

    def run_all_pages(self, jobs: Iterable[PageJob]) -> list[FormResult]:
        """Run pages in sequence; a page-level failure moves on to the next page."""
        results: list[FormResult] = []
        for page_id, overrides in jobs:
            name = page_id.value if isinstance(page_id, PageId) else str(page_id)
            try:
                result = self.run_page(page_id, overrides)
            except (FormPilotError, PlaywrightError) as e:
                logger.error(f"Page {name} aborted: {e}")
                result = FormResult.failed(name, str(e))
                self._record(result)
            results.append(result)

        submitted = sum(1 for r in results if r.submitted)
        logger.info(f"Batch complete: {submitted}/{len(results)} pages submitted")
        return results

    def process_form(
        self,
        page_id: Union[PageId, str],
        overrides: Optional[Overrides] = None,
        discover: Optional[bool] = None,
    ) -> FormResult:
        """Fill and verify every field of the current page, then maybe submit.

        Only required, declared fields gate submission. Failures on
        discovered fields are recorded but do not block.

        Raises:
            UnknownPageError: If the page id is not registered.
        """
        schema = lookup(page_id)
        overrides = overrides or {}
        run_discovery = self._settings.run.discovery if discover is None else discover

        fields = self._merge_fields(schema, run_discovery)
        logger.info(f"Processing {len(fields)} field(s) on {schema.page_id.value}")

        outcomes: list[FillOutcome] = []
        for field in fields:
            value = resolve(field, overrides, self._defaults)
            logger.info(f"--- Field {field.label!r} ({field.origin.value}) ---")
            outcomes.append(self._verifier.verify_with_retry(field, value))

        all_verified = all(o.verified for o in outcomes if o.field.blocks_submit)
        if all_verified:
            outcomes = self._confirm_values(outcomes)
            all_verified = all(o.verified for o in outcomes if o.field.blocks_submit)
        result = FormResult(
            page_id=schema.page_id.value,
            outcomes=outcomes,
            all_verified=all_verified,
        )
        logger.info(f"Verification summary: {result.summary}")
        self._capture(schema, "filled")

        if not all_verified:
            blocking = [o.field.label for o in result.failed_outcomes if o.field.blocks_submit]
            logger.warning(f"Not submitting, unverified required fields: {blocking}")
        else:
            try:
                self._submit(schema)
                result.submitted = True
                self._capture(schema, "submitted")
            except SubmitUnavailableError as e:
                logger.error(str(e))
                result.error = str(e)

        self._record(result)
        return result

    def _merge_fields(self, schema: PageSchema, run_discovery: bool) -> list[FieldDescriptor]:
        fields = list(schema.fields)
        if run_discovery:
            fields.extend(self._discoverer.discover(self._page, schema.locators))
        return fields

    def _confirm_values(self, outcomes: list[FillOutcome]) -> list[FillOutcome]:
        """Re-read every verified blocking field once the whole form is filled.

        A later fill can reset or reformat an earlier field; such a field is
        marked unverified.
        """
        timeout = self._settings.fill.visible_timeout_ms
        confirmed: list[FillOutcome] = []
        for outcome in outcomes:
            if not (outcome.verified and outcome.field.blocks_submit):
                confirmed.append(outcome)
                continue
            field = outcome.field
            try:
                element = self._page.find_visible(field.locator, timeout, require_enabled=False)
                observed = self._page.read_value(element)
                if observed != outcome.expected_value:
                    raise VerificationMismatch(
                        field.label, outcome.expected_value, observed, field.is_secret
                    )
            except VerificationMismatch as e:
                logger.warning(f"Final check: {e}")
                outcome = replace(outcome, observed_value=e.observed, verified=False, error=str(e))
            except (FillError, PlaywrightError) as e:
                logger.warning(f"Final check: {field.label}: {e}")
                outcome = replace(outcome, observed_value=None, verified=False, error=str(e))
            confirmed.append(outcome)
        return confirmed

    def _submit(self, schema: PageSchema) -> None:
        """Wait for the submit control to be actionable and activate it."""
        timeout = self._settings.run.submit_timeout_ms
        locator = schema.submit_locator
        logger.info(f"Submitting via {locator}")
        try:
            element = self._page.find_visible(locator, timeout, require_enabled=False)
            self._page.click(element, timeout_ms=timeout)
        except (ElementNotFoundError, AmbiguousElementError, PlaywrightError) as e:
            raise SubmitUnavailableError(locator, str(e)) from e
        logger.info(f"Clicked {locator}, now at {self._page.url}")

    def _capture(self, schema: PageSchema, stage: str) -> None:
        directory: Optional[Path] = self._settings.run.screenshot_dir
        if directory is None:
            return
        path = Path(directory) / f"{schema.page_id.value}-{stage}.png"
        try:
            self._page.screenshot(path)
            logger.info(f"Screenshot saved: {path}")
        except (PlaywrightError, OSError) as e:
            logger.warning(f"Screenshot failed: {e}")

    def _record(self, result: FormResult) -> None:
        if self._run_logger is None:
            return
        try:
            self._run_logger.log(result)
        except OSError as e:
            logger.warning(f"Could not write run record: {e}")
