"""Live field discovery."""
from .discoverer import CANDIDATE_SELECTOR, FieldDiscoverer, locator_aliases

__all__ = ["CANDIDATE_SELECTOR", "FieldDiscoverer", "locator_aliases"]
