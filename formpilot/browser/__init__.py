"""Browser automation: session connection and page wrapper."""
from .connection import BrowserConnection
from .page import Page

__all__ = ["BrowserConnection", "Page"]
