"""Field value resolution, slow filling, and verification."""
from .keystrokes import FieldFiller
from .values import DEFAULT_VALUES, merge_defaults, resolve
from .verifier import FieldVerifier, FillState

__all__ = [
    "DEFAULT_VALUES",
    "FieldFiller",
    "FieldVerifier",
    "FillState",
    "merge_defaults",
    "resolve",
]
