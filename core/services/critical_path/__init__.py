from core.services.critical_path.models import CriticalPathSummary, RecalculationOutcome
from core.services.critical_path.queue import RecalculationQueue
from core.services.critical_path.service import CriticalPathService

__all__ = [
    "CriticalPathService",
    "CriticalPathSummary",
    "RecalculationOutcome",
    "RecalculationQueue",
]
