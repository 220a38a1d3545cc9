"""Page schemas, field descriptors, and fill results."""
from .models import (
    FieldDescriptor,
    FieldOrigin,
    FillOutcome,
    FormResult,
    InputKind,
    PageId,
    PageSchema,
)
from .registry import SCHEMA_REGISTRY, lookup, supported_pages

__all__ = [
    "FieldDescriptor",
    "FieldOrigin",
    "FillOutcome",
    "FormResult",
    "InputKind",
    "PageId",
    "PageSchema",
    "SCHEMA_REGISTRY",
    "lookup",
    "supported_pages",
]
