"""Persistent record of page runs."""
from .run_logger import RunLogger, RunRecord

__all__ = ["RunLogger", "RunRecord"]
