"""
DataInsight Domain Layer

Signal models and the conflict detection / resolution services.
"""

from datainsight.domain.models import (
    Conflict,
    ConflictDetectionResult,
    DataInsight,
    DataInsightInput,
    Verdict,
)
from datainsight.domain.services import ConflictDetector, SignalResolver

__all__ = [
    # Models
    "DataInsightInput",
    "Conflict",
    "ConflictDetectionResult",
    "DataInsight",
    "Verdict",
    # Services
    "ConflictDetector",
    "SignalResolver",
]
