"""Form-Pilot: verified, keystroke-paced filling of authentication forms."""

__version__ = "0.1.0"
