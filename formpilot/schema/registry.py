"""Registry of page schemas."""
import logging
from typing import Union

from ..core.errors import UnknownPageError
from .models import FieldDescriptor, InputKind, PageId, PageSchema

logger = logging.getLogger(__name__)

BASE_URL = "https://ui.chaicode.com"
SUBMIT_BUTTON = 'button[type="submit"]'


def _field(label: str, locator: str, kind: InputKind = InputKind.TEXT) -> FieldDescriptor:
    return FieldDescriptor(label=label, locator=locator, input_kind=kind)


SCHEMA_REGISTRY: dict[PageId, PageSchema] = {
    PageId.SIGNUP: PageSchema(
        page_id=PageId.SIGNUP,
        target_url=f"{BASE_URL}/auth/signup",
        fields=(
            _field("First Name", "#firstName"),
            _field("Last Name", "#lastName"),
            _field("Email", "#email", InputKind.EMAIL),
            _field("Password", "#password", InputKind.PASSWORD),
            _field("Confirm Password", "#confirmPassword", InputKind.PASSWORD),
        ),
        submit_locator=SUBMIT_BUTTON,
    ),
    PageId.LOGIN: PageSchema(
        page_id=PageId.LOGIN,
        target_url=f"{BASE_URL}/auth/login",
        fields=(
            _field("Email", "#email", InputKind.EMAIL),
            _field("Password", "#password", InputKind.PASSWORD),
        ),
        submit_locator=SUBMIT_BUTTON,
    ),
    PageId.FORGOT_PASSWORD: PageSchema(
        page_id=PageId.FORGOT_PASSWORD,
        target_url=f"{BASE_URL}/auth/forgot-password",
        fields=(_field("Email", "#email", InputKind.EMAIL),),
        submit_locator=SUBMIT_BUTTON,
    ),
    PageId.VERIFY_OTP: PageSchema(
        page_id=PageId.VERIFY_OTP,
        target_url=f"{BASE_URL}/auth/verify-otp",
        fields=(_field("Verification Code", "#otp"),),
        submit_locator=SUBMIT_BUTTON,
    ),
    PageId.PASSWORD_RESET: PageSchema(
        page_id=PageId.PASSWORD_RESET,
        target_url=f"{BASE_URL}/auth/reset-password",
        fields=(
            _field("New Password", "#password", InputKind.PASSWORD),
            _field("Confirm Password", "#confirmPassword", InputKind.PASSWORD),
        ),
        submit_locator=SUBMIT_BUTTON,
    ),
}


def supported_pages() -> list[str]:
    """Page ids in registry order."""
    return [page_id.value for page_id in SCHEMA_REGISTRY]


def lookup(page_id: Union[PageId, str]) -> PageSchema:
    """Get the schema for a page.

    Raises:
        UnknownPageError: If the page id is not registered.
    """
    if isinstance(page_id, PageId):
        key = page_id
    else:
        try:
            key = PageId(str(page_id).strip().lower())
        except ValueError:
            raise UnknownPageError(str(page_id)) from None

    schema = SCHEMA_REGISTRY.get(key)
    if schema is None:
        raise UnknownPageError(key.value)
    return schema
