# Copyright 2025 Vijaykumar Singh <singhvjd@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Conflict and verdict models produced by data insight resolution.

``to_dict()`` emits the camelCase shape the dashboard consumes, matching the
shape the upstream signals arrive in.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple


class ConflictType(Enum):
    """Taxonomy of signal conflicts.

    Six base types are reported by the upstream dashboard. DEFENSIVE_SECTOR_LEADERSHIP
    extends them: a Risk-Off regime led by defensive sectors is reported under it
    rather than as BANK_SECTOR_DEFENSIVE.
    """

    REGIME_SMART_MONEY_MISMATCH = "Regime-SmartMoney Mismatch"
    REGIME_SECTOR_MISMATCH = "Regime-Sector Mismatch"
    DEFENSIVE_SECTOR_LEADERSHIP = "Defensive Sector Leadership"
    FOREIGN_DOMESTIC_DIVERGENCE = "Foreign-Domestic Divergence"
    HIGH_PROP_TRADING_NOISE = "High Prop Trading Noise"
    BANK_SECTOR_DEFENSIVE = "Bank Sector Defensive Signal"
    SMART_MONEY_CONTRADICTION = "Smart Money Contradiction"


class ConflictSeverity(Enum):
    """Severity of a single conflict."""

    HIGH = "High"  # Overrides bullish readings
    MEDIUM = "Medium"  # Lowers confidence
    LOW = "Low"  # Informational

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {
    ConflictSeverity.LOW: 1,
    ConflictSeverity.MEDIUM: 2,
    ConflictSeverity.HIGH: 3,
}


class ConflictLevel(Enum):
    """Aggregate conflict level: the maximum severity present."""

    NONE = "None"
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @classmethod
    def from_severity(cls, severity: Optional[ConflictSeverity]) -> "ConflictLevel":
        if severity is None:
            return cls.NONE
        return cls(severity.value)


class SignalSource(Enum):
    """Signals a conflict can involve."""

    REGIME = "regime"
    SMART_MONEY = "smartMoney"
    SECTOR = "sector"
    FOREIGN = "foreign"
    DOMESTIC = "domestic"
    INSTITUTION = "institution"
    PROP = "prop"


class Verdict(Enum):
    """What the trader should do."""

    PROCEED = "PROCEED"
    CAUTION = "CAUTION"
    WAIT = "WAIT"
    NEUTRAL = "NEUTRAL"


class ConvictionLevel(Enum):
    """Confidence bucketed for display."""

    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"

    @classmethod
    def from_confidence(
        cls, confidence: float, high_cutoff: float = 70.0, medium_cutoff: float = 40.0
    ) -> "ConvictionLevel":
        if confidence >= high_cutoff:
            return cls.HIGH
        if confidence >= medium_cutoff:
            return cls.MEDIUM
        return cls.LOW


class PrimaryDriver(Enum):
    """Signal most responsible for the verdict."""

    FOREIGN_FLOW = "Foreign Flow"
    SMART_MONEY = "Smart Money"
    MARKET_REGIME = "Market Regime"
    SECTOR_STRENGTH = "Sector Strength"
    NONE = "None"


class SectorFocus(Enum):
    """Sector positioning recommendation."""

    OVERWEIGHT = "OVERWEIGHT"
    UNDERWEIGHT = "UNDERWEIGHT"
    NEUTRAL = "NEUTRAL"


@dataclass(frozen=True)
class Conflict:
    """A detected disagreement between signals.

    ``data`` holds the structured values that triggered the conflict so a
    presentation layer can render its own wording; ``description`` is the
    default English rendering of the same payload.
    """

    conflict_type: ConflictType
    severity: ConflictSeverity
    signals: Tuple[SignalSource, ...]
    description: str
    impact: str
    data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.conflict_type.value,
            "severity": self.severity.value,
            "description": self.description,
            "signals": [s.value for s in self.signals],
            "impact": self.impact,
            "data": dict(self.data),
        }


@dataclass(frozen=True)
class ConflictDetectionResult:
    """All conflicts in detector order plus their aggregate level."""

    conflicts: Tuple[Conflict, ...] = ()
    conflict_level: ConflictLevel = ConflictLevel.NONE
    has_critical_conflict: bool = False

    @classmethod
    def from_conflicts(cls, conflicts: Sequence[Conflict]) -> "ConflictDetectionResult":
        conflicts = tuple(conflicts)
        highest = max((c.severity for c in conflicts), key=lambda s: s.rank, default=None)
        return cls(
            conflicts=conflicts,
            conflict_level=ConflictLevel.from_severity(highest),
            has_critical_conflict=any(c.severity == ConflictSeverity.HIGH for c in conflicts),
        )

    @property
    def most_severe(self) -> Optional[Conflict]:
        """Highest-severity conflict; the first detected wins ties."""
        best = None
        for conflict in self.conflicts:
            if best is None or conflict.severity.rank > best.severity.rank:
                best = conflict
        return best

    def has_type(self, conflict_type: ConflictType) -> bool:
        return any(c.conflict_type == conflict_type for c in self.conflicts)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "conflicts": [c.to_dict() for c in self.conflicts],
            "conflictLevel": self.conflict_level.value,
            "hasCriticalConflict": self.has_critical_conflict,
        }


@dataclass(frozen=True)
class SignalValue:
    """A signal reading with its confidence (0-100)."""

    value: str
    confidence: float

    def to_dict(self) -> Dict[str, Any]:
        return {"value": self.value, "confidence": self.confidence}


@dataclass(frozen=True)
class DataInsight:
    """Resolved verdict for the dashboard."""

    verdict: Verdict
    conviction: ConvictionLevel
    confidence: int  # 0-100
    primary_driver: PrimaryDriver
    explanation: str
    sector_focus: SectorFocus = SectorFocus.NEUTRAL
    actionable_takeaway: Optional[str] = None
    key_conflict_alert: Optional[str] = None
    conflicting_signals: Dict[str, SignalValue] = field(default_factory=dict)
    reasoning: List[str] = field(default_factory=list)
    conflict_level: ConflictLevel = ConflictLevel.NONE
    missing_inputs: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the dashboard's JSON shape; absent optionals are omitted."""
        result: Dict[str, Any] = {
            "verdict": self.verdict.value,
            "conviction": self.conviction.value,
            "confidence": self.confidence,
            "primaryDriver": self.primary_driver.value,
            "explanation": self.explanation,
            "sectorFocus": self.sector_focus.value,
            "conflictingSignals": {axis: value.to_dict() for axis, value in self.conflicting_signals.items()},
            "reasoning": list(self.reasoning),
            "conflictLevel": self.conflict_level.value,
        }
        if self.actionable_takeaway is not None:
            result["actionableTakeaway"] = self.actionable_takeaway
        if self.key_conflict_alert is not None:
            result["keyConflictAlert"] = self.key_conflict_alert
        if self.missing_inputs:
            result["missingInputs"] = list(self.missing_inputs)
        return result


__all__ = [
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
