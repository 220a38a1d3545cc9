"""Form orchestration across one or more pages."""
from .orchestrator import FormOrchestrator

__all__ = ["FormOrchestrator"]
