"""
Domain Models

Upstream signal snapshots and the conflict / verdict value objects.
"""

from datainsight.domain.models.insight import (
    Conflict,
    ConflictDetectionResult,
    ConflictLevel,
    ConflictSeverity,
    ConflictType,
    ConvictionLevel,
    DataInsight,
    PrimaryDriver,
    SectorFocus,
    SignalSource,
    SignalValue,
    Verdict,
)
from datainsight.domain.models.signals import (
    DataInsightInput,
    InvestorBreakdown,
    InvestorFlow,
    InvestorType,
    RegimeSignal,
    RegimeType,
    RiskSignal,
    SectorLeadership,
    SectorPerformance,
    SectorRef,
    SectorRotationSignal,
    SignalStrength,
    SmartMoneySignal,
    strength_score,
)

__all__ = [
    # Inputs
    "RegimeType",
    "SignalStrength",
    "RiskSignal",
    "InvestorType",
    "RegimeSignal",
    "InvestorFlow",
    "InvestorBreakdown",
    "SmartMoneySignal",
    "SectorRef",
    "SectorPerformance",
    "SectorLeadership",
    "SectorRotationSignal",
    "DataInsightInput",
    "strength_score",
    # Outputs
    "ConflictType",
    "ConflictSeverity",
    "ConflictLevel",
    "SignalSource",
    "Verdict",
    "ConvictionLevel",
    "PrimaryDriver",
    "SectorFocus",
    "Conflict",
    "ConflictDetectionResult",
    "SignalValue",
    "DataInsight",
]
