"""Value resolution for form fields: overrides first, then heuristics."""
import re
from typing import Mapping, Optional

from ..schema.models import FieldDescriptor, InputKind

DEFAULT_VALUES: dict[str, str] = {
    "first_name": "Dnyaneshwar",
    "last_name": "Dimble",
    "email": "mavi@example.com",
    "password": "mySecret123",
    "confirm_password": "mySecret123",
    "otp": "123456",
    "phone": "5551234567",
    "number": "42",
    "tel": "5550100000",
    "fallback": "test",
}

_NON_ALNUM = re.compile(r"[^0-9a-zA-Z]")
_WHITESPACE = re.compile(r"\s+")


def locator_key(locator: str) -> str:
    """Locator with non-alphanumeric characters stripped, lower-cased."""
    return _NON_ALNUM.sub("", locator).lower()


def compact_label(label: str) -> str:
    """Label with whitespace removed, lower-cased."""
    return _WHITESPACE.sub("", label).lower()


def _label_default_key(label: str) -> Optional[str]:
    """Map a label to a defaults key by substring heuristics."""
    text = label.lower()
    if "first" in text and "name" in text:
        return "first_name"
    if "last" in text and "name" in text:
        return "last_name"
    if "email" in text:
        return "email"
    if "password" in text:
        if "confirm" in text or "repeat" in text:
            return "confirm_password"
        return "password"
    if "otp" in text or "code" in text or "verification" in text:
        return "otp"
    if "phone" in text or "mobile" in text:
        return "phone"
    return None


def _kind_default_key(kind: InputKind) -> Optional[str]:
    if kind == InputKind.NUMBER:
        return "number"
    if kind == InputKind.TEL:
        return "tel"
    return None


def resolve(
    field: FieldDescriptor,
    overrides: Optional[Mapping[str, str]] = None,
    defaults: Mapping[str, str] = DEFAULT_VALUES,
) -> str:
    """Resolve the literal value to type into ``field``.

    Override keys are matched case-insensitively against, in order, the
    label, the stripped locator, and the compacted label. Without an
    override, label heuristics apply, then input-kind heuristics, then a
    fallback placeholder. Never raises.

    Args:
        field: Field to resolve a value for.
        overrides: Caller-supplied values keyed by label or locator.
        defaults: Built-in values keyed by heuristic name.

    Returns:
        The string to type.
    """
    if overrides:
        lowered = {str(k).lower(): str(v) for k, v in overrides.items()}
        for key in (
            field.label.lower(),
            locator_key(field.locator),
            compact_label(field.label),
        ):
            if key and key in lowered:
                return lowered[key]

    key = _label_default_key(field.label) or _kind_default_key(field.input_kind)
    if key is not None and key in defaults:
        return defaults[key]
    return defaults.get("fallback", DEFAULT_VALUES["fallback"])


def merge_defaults(extra: Optional[Mapping[str, str]] = None) -> dict[str, str]:
    """Built-in defaults with configured values layered on top."""
    merged = dict(DEFAULT_VALUES)
    if extra:
        merged.update({k: str(v) for k, v in extra.items()})
    return merged
