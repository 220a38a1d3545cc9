"""Tests for value resolution."""
import pytest

from formpilot.filler.values import (
    DEFAULT_VALUES,
    compact_label,
    locator_key,
    merge_defaults,
    resolve,
)
from formpilot.schema.models import FieldDescriptor, FieldOrigin, InputKind


def make_field(
    label: str, locator: str = "#field", kind: InputKind = InputKind.TEXT
) -> FieldDescriptor:
    return FieldDescriptor(label=label, locator=locator, input_kind=kind)


class TestOverridePrecedence:
    """Overrides always beat heuristics."""

    def test_label_override_beats_heuristic(self) -> None:
        """Email override wins over the built-in email default."""
        field = make_field("Email", "#email", InputKind.EMAIL)
        assert resolve(field, {"Email": "a@x.com"}) == "a@x.com"

    def test_label_override_is_case_insensitive(self) -> None:
        field = make_field("Email", "#email")
        assert resolve(field, {"EMAIL": "upper@x.com"}) == "upper@x.com"

    def test_locator_key_override(self) -> None:
        """Locator with punctuation stripped is the second lookup key."""
        field = make_field("Given name", "#first-name")
        assert resolve(field, {"firstname": "Ada"}) == "Ada"

    def test_compact_label_override(self) -> None:
        """Label without whitespace is the third lookup key."""
        field = make_field("Confirm Password", "#pw2", InputKind.PASSWORD)
        assert resolve(field, {"confirmpassword": "s3cret!"}) == "s3cret!"

    def test_label_key_beats_locator_key(self) -> None:
        field = make_field("Email", "#contact")
        overrides = {"contact": "by-locator@x.com", "email": "by-label@x.com"}
        assert resolve(field, overrides) == "by-label@x.com"

    def test_unrelated_override_ignored(self) -> None:
        field = make_field("Email", "#email")
        assert resolve(field, {"Phone": "123"}) == DEFAULT_VALUES["email"]

    def test_override_values_are_stringified(self) -> None:
        field = make_field("Verification Code", "#otp")
        assert resolve(field, {"Verification Code": 123456}) == "123456"


class TestLabelHeuristics:
    """Label substring heuristics."""

    @pytest.mark.parametrize(
        "label,key",
        [
            ("First Name", "first_name"),
            ("Last Name", "last_name"),
            ("Email Address", "email"),
            ("Password", "password"),
            ("New Password", "password"),
            ("Confirm Password", "confirm_password"),
            ("Repeat password", "confirm_password"),
            ("OTP", "otp"),
            ("Verification Code", "otp"),
            ("Phone Number", "phone"),
            ("Mobile", "phone"),
        ],
    )
    def test_label_maps_to_default(self, label: str, key: str) -> None:
        defaults = {k: f"<{k}>" for k in DEFAULT_VALUES}
        assert resolve(make_field(label), {}, defaults) == f"<{key}>"

    def test_confirm_password_uses_its_own_default(self) -> None:
        """Confirm Password and Password resolve through different defaults."""
        defaults = merge_defaults({"password": "main-pass", "confirm_password": "confirm-pass"})
        confirm = make_field("Confirm Password", "#confirmPassword", InputKind.PASSWORD)
        password = make_field("Password", "#password", InputKind.PASSWORD)

        assert resolve(confirm, {}, defaults) == "confirm-pass"
        assert resolve(password, {}, defaults) == "main-pass"

    def test_builtin_password_defaults(self) -> None:
        confirm = make_field("Confirm Password", "#confirmPassword", InputKind.PASSWORD)
        assert resolve(confirm, {}) == DEFAULT_VALUES["confirm_password"]
        assert resolve(make_field("Password"), {}) == DEFAULT_VALUES["password"]

    def test_email_checked_before_code(self) -> None:
        """First matching heuristic wins."""
        field = make_field("Email verification code")
        assert resolve(field, {}) == DEFAULT_VALUES["email"]


class TestKindHeuristics:
    """Input-kind fallbacks when the label says nothing."""

    def test_number_kind(self) -> None:
        field = make_field("Age", kind=InputKind.NUMBER)
        assert resolve(field, {}) == DEFAULT_VALUES["number"]

    def test_tel_kind(self) -> None:
        field = make_field("Contact", kind=InputKind.TEL)
        assert resolve(field, {}) == DEFAULT_VALUES["tel"]

    def test_label_heuristic_beats_kind(self) -> None:
        field = make_field("Phone", kind=InputKind.NUMBER)
        assert resolve(field, {}) == DEFAULT_VALUES["phone"]

    def test_fallback_literal(self) -> None:
        field = FieldDescriptor(
            label="Company", locator="#company", origin=FieldOrigin.DISCOVERED
        )
        assert resolve(field, None) == DEFAULT_VALUES["fallback"]

    def test_fallback_without_defaults_entry(self) -> None:
        """Resolution never fails, even with an empty defaults table."""
        assert resolve(make_field("Email"), {}, {}) == DEFAULT_VALUES["fallback"]


class TestKeys:
    """Key normalisation helpers."""

    def test_locator_key(self) -> None:
        assert locator_key('input[name="user_email"]') == "inputnameuseremail"

    def test_compact_label(self) -> None:
        assert compact_label(" Confirm  Password ") == "confirmpassword"

    def test_merge_defaults_overrides_builtin(self) -> None:
        merged = merge_defaults({"email": "other@x.com"})
        assert merged["email"] == "other@x.com"
        assert merged["password"] == DEFAULT_VALUES["password"]
        assert DEFAULT_VALUES["email"] != "other@x.com"
