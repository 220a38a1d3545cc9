"""Live discovery of input fields missing from a page schema."""
import logging
import re
from typing import Iterable, Optional

from playwright.sync_api import Locator

from ..browser.page import Page
from ..core.errors import DiscoveryInspectionError
from ..schema.models import FieldDescriptor, FieldOrigin, InputKind

logger = logging.getLogger(__name__)

CANDIDATE_SELECTOR = ", ".join([
    'input[type="text"]',
    'input[type="email"]',
    'input[type="password"]',
    'input[type="tel"]',
    'input[type="number"]',
    "input:not([type])",
    "textarea",
])

_SIMPLE_ID = re.compile(r"^[A-Za-z_][\w-]*$")


def locator_aliases(tag: str, elem_id: str, name: str) -> list[str]:
    """Equivalent locators for an element, preferred one first."""
    aliases: list[str] = []
    if elem_id:
        if _SIMPLE_ID.match(elem_id):
            aliases.append(f"#{elem_id}")
        aliases.append(f'[id="{elem_id}"]')
    if name:
        aliases.append(f'{tag}[name="{name}"]')
        aliases.append(f'[name="{name}"]')
    return aliases


class FieldDiscoverer:
    """Finds visible input-like elements and synthesizes descriptors for them."""

    def discover(
        self, page: Page, known_locators: Iterable[str] = ()
    ) -> list[FieldDescriptor]:
        """Discover fields on the live page not covered by ``known_locators``.

        Output is in document order. Candidates that fail inspection are
        skipped; discovery itself never raises.
        """
        known = set(known_locators)
        try:
            candidates = page.raw.locator(CANDIDATE_SELECTOR).all()
        except Exception as e:
            logger.warning(f"Discovery could not list candidates: {e}")
            return []

        discovered: list[FieldDescriptor] = []
        seen: set[str] = set()
        for index, handle in enumerate(candidates):
            try:
                descriptor = self._inspect(page, handle, index, known)
            except DiscoveryInspectionError as e:
                logger.warning(f"Skipping candidate: {e}")
                continue
            if descriptor is None or descriptor.locator in seen:
                continue
            seen.add(descriptor.locator)
            discovered.append(descriptor)

        if discovered:
            labels = ", ".join(d.label for d in discovered)
            logger.info(f"Discovered {len(discovered)} extra field(s): {labels}")
        return discovered

    def _inspect(
        self, page: Page, handle: Locator, index: int, known: set[str]
    ) -> Optional[FieldDescriptor]:
        try:
            if not handle.is_visible() or not handle.is_enabled():
                return None

            tag = handle.evaluate("el => el.tagName.toLowerCase()")
            elem_id = (handle.get_attribute("id") or "").strip()
            name = (handle.get_attribute("name") or "").strip()
            aliases = locator_aliases(tag, elem_id, name)
            if not aliases:
                logger.debug(f"Candidate #{index} has no id or name, skipping")
                return None
            if any(alias in known for alias in aliases):
                return None

            html_type = "textarea" if tag == "textarea" else handle.get_attribute("type")
            required = (
                handle.get_attribute("required") is not None
                or handle.get_attribute("aria-required") == "true"
            )
            label = self._infer_label(page, handle, elem_id, name)
        except Exception as e:
            raise DiscoveryInspectionError(index, e) from e

        return FieldDescriptor(
            label=label,
            locator=aliases[0],
            input_kind=InputKind.from_html_type(html_type),
            required=required,
            origin=FieldOrigin.DISCOVERED,
        )

    def _infer_label(
        self, page: Page, handle: Locator, elem_id: str, name: str
    ) -> str:
        """First of: label[for], ancestor label, placeholder, id/name."""
        if elem_id:
            label = page.raw.locator(f'label[for="{elem_id}"]')
            if label.count() > 0:
                text = (label.first.text_content() or "").strip()
                if text:
                    return text

        ancestor = handle.locator("xpath=ancestor::label[1]")
        if ancestor.count() > 0:
            text = (ancestor.first.text_content() or "").strip()
            if text:
                return text

        placeholder = (handle.get_attribute("placeholder") or "").strip()
        if placeholder:
            return placeholder

        return elem_id or name
