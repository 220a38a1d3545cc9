"""Core utilities: configuration, logging, and errors."""
from .config import Settings, BrowserConfig, FillConfig, RunConfig
from .errors import (
    FormPilotError,
    UnknownPageError,
    NavigationError,
    BrowserUnavailableError,
    FillError,
    ElementNotFoundError,
    AmbiguousElementError,
    VerificationMismatch,
    DiscoveryInspectionError,
    SubmitUnavailableError,
)
from .logging import setup_logging

__all__ = [
    "Settings",
    "BrowserConfig",
    "FillConfig",
    "RunConfig",
    "setup_logging",
    "FormPilotError",
    "UnknownPageError",
    "NavigationError",
    "BrowserUnavailableError",
    "FillError",
    "ElementNotFoundError",
    "AmbiguousElementError",
    "VerificationMismatch",
    "DiscoveryInspectionError",
    "SubmitUnavailableError",
]
