"""
Domain Services

Conflict detection and signal resolution.
"""

from datainsight.domain.services.conflict_detector import ConflictDetector, detect_conflicts
from datainsight.domain.services.conflict_formatter import format_conflict_description, get_conflicts_by_severity
from datainsight.domain.services.signal_resolver import SignalResolver, resolve_signals
from datainsight.domain.services.signal_thresholds import (
    DEFAULT_CONFLICT_THRESHOLDS,
    DEFAULT_RESOLUTION_CONFIG,
    ConflictThresholds,
    ResolutionConfig,
)

__all__ = [
    "ConflictDetector",
    "detect_conflicts",
    "SignalResolver",
    "resolve_signals",
    "format_conflict_description",
    "get_conflicts_by_severity",
    "ConflictThresholds",
    "ResolutionConfig",
    "DEFAULT_CONFLICT_THRESHOLDS",
    "DEFAULT_RESOLUTION_CONFIG",
]
