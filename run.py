"""Form-Pilot launcher - fill and submit authentication forms.

Usage:
    python run.py single --page login --set Email=me@example.com
    python run.py multi --pages signup,login
"""
import sys

from formpilot.cli import main

if __name__ == "__main__":
    sys.exit(main())
