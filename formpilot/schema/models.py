"""Data models for page schemas and fill results."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional
from urllib.parse import urlsplit, urlunsplit

from pydantic import BaseModel, ConfigDict, field_validator


class PageId(Enum):
    """Supported authentication pages."""
    SIGNUP = "signup"
    LOGIN = "login"
    FORGOT_PASSWORD = "forgot-password"
    VERIFY_OTP = "verify-otp"
    PASSWORD_RESET = "password-reset"


class InputKind(Enum):
    """Input kind, used for fallback value heuristics."""
    TEXT = "text"
    EMAIL = "email"
    PASSWORD = "password"
    TEL = "tel"
    NUMBER = "number"
    OTHER = "other"

    @classmethod
    def from_html_type(cls, html_type: Optional[str]) -> "InputKind":
        """Map an HTML input ``type`` attribute (or ``textarea``) to a kind."""
        value = (html_type or "text").strip().lower()
        if value in ("", "textarea", "search"):
            return cls.TEXT
        try:
            return cls(value)
        except ValueError:
            return cls.OTHER


class FieldOrigin(Enum):
    """Where a field descriptor came from."""
    DECLARED = "declared"
    DISCOVERED = "discovered"


class FieldDescriptor(BaseModel):
    """One form input to be processed."""

    model_config = ConfigDict(frozen=True)

    label: str
    locator: str
    input_kind: InputKind = InputKind.TEXT
    required: bool = True
    origin: FieldOrigin = FieldOrigin.DECLARED

    @property
    def is_secret(self) -> bool:
        """Whether values for this field should be masked in logs."""
        return self.input_kind == InputKind.PASSWORD

    @property
    def blocks_submit(self) -> bool:
        """Whether a failure on this field prevents submission."""
        return self.required and self.origin == FieldOrigin.DECLARED


class PageSchema(BaseModel):
    """Declared fields and submit control for one page."""

    model_config = ConfigDict(frozen=True)

    page_id: PageId
    target_url: str
    fields: tuple[FieldDescriptor, ...]
    submit_locator: str

    @field_validator("fields")
    @classmethod
    def _unique_locators(
        cls, fields: tuple[FieldDescriptor, ...]
    ) -> tuple[FieldDescriptor, ...]:
        seen: set[str] = set()
        for f in fields:
            if f.locator in seen:
                raise ValueError(f"Duplicate locator in schema: {f.locator}")
            seen.add(f.locator)
        return fields

    @property
    def locators(self) -> set[str]:
        """Locators of all declared fields."""
        return {f.locator for f in self.fields}

    def url_for(self, base_url: Optional[str] = None) -> str:
        """Target URL, optionally moved onto another scheme and host.

        The page path and query are kept; only scheme and host are taken
        from ``base_url``.
        """
        if not base_url:
            return self.target_url
        base = urlsplit(base_url)
        target = urlsplit(self.target_url)
        prefix = base.path.rstrip("/")
        return urlunsplit(
            (base.scheme, base.netloc, prefix + target.path, target.query, "")
        )


@dataclass(frozen=True)
class FillOutcome:
    """Result of processing one field."""
    field: FieldDescriptor
    expected_value: str
    observed_value: Optional[str]
    attempts_used: int
    verified: bool
    error: Optional[str] = None


@dataclass
class FormResult:
    """Aggregate of a full page run."""
    page_id: str
    outcomes: list[FillOutcome] = field(default_factory=list)
    all_verified: bool = False
    submitted: bool = False
    error: Optional[str] = None

    @classmethod
    def failed(cls, page_id: str, error: str) -> "FormResult":
        """Result for a page that aborted before any field was processed."""
        return cls(page_id=page_id, error=error)

    @property
    def verified_count(self) -> int:
        return sum(1 for o in self.outcomes if o.verified)

    @property
    def failed_outcomes(self) -> list[FillOutcome]:
        return [o for o in self.outcomes if not o.verified]

    @property
    def summary(self) -> str:
        return f"{self.verified_count}/{len(self.outcomes)} fields verified"
