"""
DataInsight - Deterministic resolution of conflicting market signals.

Combines the market regime, smart money flow and sector rotation signals
into one trading verdict with a conviction level and an explanation.
"""

from datainsight.domain.models.insight import ConflictDetectionResult, DataInsight
from datainsight.domain.models.signals import DataInsightInput
from datainsight.domain.services.conflict_detector import detect_conflicts
from datainsight.domain.services.signal_resolver import resolve_signals

__version__ = "0.1.0"

__all__ = [
    "DataInsightInput",
    "DataInsight",
    "ConflictDetectionResult",
    "detect_conflicts",
    "resolve_signals",
    "__version__",
]
