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

"""Input signal models for data insight resolution.

The three upstream collaborators (regime classifier, smart money scorer and
sector rotation analyzer) hand their results over as JSON-shaped mappings.
This module turns those mappings into immutable snapshots with closed enums.

Parsing is lenient: a field that is missing or malformed becomes ``None`` and
every consumer treats ``None`` as "no data" for that field. Nothing in this
module raises on bad data.

Example:
    payload = {"regime": {...}, "smartMoney": {...}, "sector": {...}}
    signals = DataInsightInput.from_dict(payload)
    if signals.missing_inputs:
        print(f"Unavailable: {signals.missing_inputs}")
"""

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple, Type, TypeVar

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)


class RegimeType(Enum):
    """Overall market risk posture."""

    RISK_ON = "Risk-On"
    NEUTRAL = "Neutral"
    RISK_OFF = "Risk-Off"


class SignalStrength(Enum):
    """Strength of a flow signal; also used for the combined smart money signal."""

    STRONG_BUY = "Strong Buy"
    BUY = "Buy"
    NEUTRAL = "Neutral"
    SELL = "Sell"
    STRONG_SELL = "Strong Sell"


class RiskSignal(Enum):
    """Risk-on/off reading derived from smart money flow."""

    RISK_ON = "Risk-On"
    RISK_ON_MILD = "Risk-On Mild"
    NEUTRAL = "Neutral"
    RISK_OFF_MILD = "Risk-Off Mild"
    RISK_OFF = "Risk-Off"


class InvestorType(Enum):
    """Investor classes reported by the exchange."""

    FOREIGN = "foreign"
    INSTITUTION = "institution"
    RETAIL = "retail"
    PROP = "prop"


# Canonical strength-to-score mapping. Every heuristic goes through strength_score().
STRENGTH_SCORES: Dict[SignalStrength, int] = {
    SignalStrength.STRONG_BUY: 3,
    SignalStrength.BUY: 1,
    SignalStrength.NEUTRAL: 0,
    SignalStrength.SELL: -1,
    SignalStrength.STRONG_SELL: -3,
}

# The regime classifier reports confidence as a label rather than a percentage
REGIME_CONFIDENCE_LABELS: Dict[str, float] = {
    "high": 85.0,
    "medium": 60.0,
    "low": 30.0,
}


def strength_score(strength: Optional[SignalStrength]) -> Optional[int]:
    """Map a signal strength to its signed score (+3..-3); ``None`` when unknown."""
    if strength is None:
        return None
    return STRENGTH_SCORES[strength]


# ============================================================================
# Parsing helpers
# ============================================================================


def _lookup(data: Mapping[str, Any], *keys: str) -> Any:
    """Return the first present key (camelCase and snake_case spellings)."""
    for key in keys:
        if key in data:
            return data[key]
    return None


def _as_mapping(value: Any, name: str) -> Optional[Mapping[str, Any]]:
    if value is None:
        return None
    if not isinstance(value, Mapping):
        logger.warning(f"Ignoring {name}: expected a mapping, got {type(value).__name__}")
        return None
    return value


def _as_float(value: Any, name: str) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, bool):
        logger.warning(f"Ignoring {name}: boolean is not a number")
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        logger.warning(f"Ignoring {name}: {value!r} is not a number")
        return None
    if math.isnan(number) or math.isinf(number):
        logger.warning(f"Ignoring {name}: {value!r} is not finite")
        return None
    return number


def _regime_confidence(value: Any) -> Optional[float]:
    if isinstance(value, str) and value.strip().lower() in REGIME_CONFIDENCE_LABELS:
        return REGIME_CONFIDENCE_LABELS[value.strip().lower()]
    return _as_float(value, "regime.confidence")


def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _as_text_tuple(value: Any, name: str) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple)):
        logger.warning(f"Ignoring {name}: expected a list")
        return ()
    return tuple(text for text in (_as_text(item) for item in value) if text)


def _as_enum(enum_cls: Type[E], value: Any, name: str) -> Optional[E]:
    if value is None:
        return None
    if isinstance(value, enum_cls):
        return value
    text = str(value).strip()
    for member in enum_cls:
        if member.value.lower() == text.lower() or member.name.lower() == text.lower():
            return member
    logger.warning(f"Ignoring {name}: unknown value {value!r}")
    return None


def parse_strength(value: Any, name: str = "strength") -> Optional[SignalStrength]:
    """Parse a strength label case-insensitively; ``None`` when unknown."""
    return _as_enum(SignalStrength, value, name)


# ============================================================================
# Regime
# ============================================================================


@dataclass(frozen=True)
class RegimeSignal:
    """Market regime snapshot produced once per analysis cycle."""

    type: Optional[RegimeType]
    confidence: Optional[float]  # 0-100
    focus: Optional[str] = None  # What to favor
    caution: Optional[str] = None  # What to avoid

    @property
    def is_complete(self) -> bool:
        return self.type is not None

    @classmethod
    def from_dict(cls, data: Any) -> Optional["RegimeSignal"]:
        """Create from the regime classifier's mapping; ``None`` if not a mapping."""
        data = _as_mapping(data, "regime")
        if data is None:
            return None
        return cls(
            type=_as_enum(RegimeType, _lookup(data, "type", "regime"), "regime.type"),
            confidence=_regime_confidence(data.get("confidence")),
            focus=_as_text(data.get("focus")),
            caution=_as_text(data.get("caution")),
        )


# ============================================================================
# Smart money
# ============================================================================


@dataclass(frozen=True)
class InvestorFlow:
    """Today's net flow and strength for one investor class."""

    today_net: Optional[float]  # Signed; positive = net buying
    strength: Optional[SignalStrength]

    @property
    def score(self) -> Optional[int]:
        return strength_score(self.strength)

    @classmethod
    def from_dict(cls, data: Any, name: str = "investor") -> Optional["InvestorFlow"]:
        data = _as_mapping(data, name)
        if data is None:
            return None
        return cls(
            today_net=_as_float(_lookup(data, "todayNet", "today_net"), f"{name}.todayNet"),
            strength=parse_strength(data.get("strength"), f"{name}.strength"),
        )


@dataclass(frozen=True)
class InvestorBreakdown:
    """Flows for the four investor classes; an absent class is held as ``None``."""

    foreign: Optional[InvestorFlow] = None
    institution: Optional[InvestorFlow] = None
    retail: Optional[InvestorFlow] = None
    prop: Optional[InvestorFlow] = None

    def get(self, investor: InvestorType) -> Optional[InvestorFlow]:
        return getattr(self, investor.value)

    def items(self) -> List[Tuple[InvestorType, Optional[InvestorFlow]]]:
        return [(investor, self.get(investor)) for investor in InvestorType]

    @classmethod
    def from_dict(cls, data: Any) -> "InvestorBreakdown":
        data = _as_mapping(data, "smartMoney.investors") or {}
        return cls(
            **{
                investor.value: InvestorFlow.from_dict(
                    data.get(investor.value), f"smartMoney.investors.{investor.value}"
                )
                for investor in InvestorType
            }
        )


@dataclass(frozen=True)
class SmartMoneySignal:
    """Institutional/foreign flow analysis."""

    score: Optional[float]  # 0-100, higher = more bullish conviction
    combined_signal: Optional[SignalStrength]
    risk_signal: Optional[RiskSignal]
    confidence: Optional[float]  # 0-100
    investors: InvestorBreakdown = field(default_factory=InvestorBreakdown)
    primary_driver: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return self.score is not None

    @classmethod
    def from_dict(cls, data: Any) -> Optional["SmartMoneySignal"]:
        data = _as_mapping(data, "smartMoney")
        if data is None:
            return None
        return cls(
            score=_as_float(data.get("score"), "smartMoney.score"),
            combined_signal=parse_strength(
                _lookup(data, "combinedSignal", "combined_signal"), "smartMoney.combinedSignal"
            ),
            risk_signal=_as_enum(
                RiskSignal, _lookup(data, "riskSignal", "risk_signal"), "smartMoney.riskSignal"
            ),
            confidence=_as_float(data.get("confidence"), "smartMoney.confidence"),
            investors=InvestorBreakdown.from_dict(data.get("investors")),
            primary_driver=_as_text(_lookup(data, "primaryDriver", "primary_driver")),
        )


# ============================================================================
# Sector rotation
# ============================================================================


@dataclass(frozen=True)
class SectorRef:
    """Sector identity; ``id`` is the stable code, ``name`` the display name."""

    name: Optional[str]
    id: Optional[str] = None


@dataclass(frozen=True)
class SectorPerformance:
    """A sector's performance relative to the market."""

    sector: SectorRef
    vs_market: Optional[float] = None  # Signed percentage

    @classmethod
    def from_dict(cls, data: Any, name: str = "sector") -> Optional["SectorPerformance"]:
        data = _as_mapping(data, name)
        if data is None:
            return None
        sector = data.get("sector")
        if isinstance(sector, Mapping):
            ref = SectorRef(
                name=_as_text(sector.get("name")),
                id=_as_text(_lookup(sector, "id", "code", "sectorId")),
            )
        else:
            ref = SectorRef(name=_as_text(sector))
        if ref.name is None and ref.id is None:
            logger.warning(f"Ignoring {name}: no sector name or id")
            return None
        return cls(sector=ref, vs_market=_as_float(_lookup(data, "vsMarket", "vs_market"), f"{name}.vsMarket"))


def _performance_tuple(value: Any, name: str) -> Optional[Tuple[SectorPerformance, ...]]:
    if value is None:
        return None
    if not isinstance(value, (list, tuple)):
        logger.warning(f"Ignoring {name}: expected a list")
        return None
    parsed = (SectorPerformance.from_dict(item, f"{name}[{i}]") for i, item in enumerate(value))
    return tuple(item for item in parsed if item is not None)


@dataclass(frozen=True)
class SectorLeadership:
    """Leading and lagging sectors, strongest first."""

    leaders: Optional[Tuple[SectorPerformance, ...]] = None
    laggards: Optional[Tuple[SectorPerformance, ...]] = None

    @classmethod
    def from_dict(cls, data: Any) -> Optional["SectorLeadership"]:
        data = _as_mapping(data, "sector.leadership")
        if data is None:
            return None
        return cls(
            leaders=_performance_tuple(data.get("leaders"), "sector.leadership.leaders"),
            laggards=_performance_tuple(data.get("laggards"), "sector.leadership.laggards"),
        )


@dataclass(frozen=True)
class SectorRotationSignal:
    """Sector rotation analysis."""

    pattern: Optional[str]  # e.g. "Risk-On Rotation", "Mixed/No Clear Pattern"
    concentration: Optional[float]  # 0-100
    focus_sectors: Tuple[str, ...] = ()
    avoid_sectors: Tuple[str, ...] = ()
    leadership: Optional[SectorLeadership] = None

    @property
    def is_complete(self) -> bool:
        return self.pattern is not None

    @property
    def leaders(self) -> Optional[Tuple[SectorPerformance, ...]]:
        return self.leadership.leaders if self.leadership is not None else None

    @classmethod
    def from_dict(cls, data: Any) -> Optional["SectorRotationSignal"]:
        data = _as_mapping(data, "sector")
        if data is None:
            return None
        leadership = SectorLeadership.from_dict(data.get("leadership"))
        concentration = data.get("concentration")
        # The rotation analyzer nests concentration under leadership
        if concentration is None and isinstance(data.get("leadership"), Mapping):
            concentration = data["leadership"].get("concentration")
        return cls(
            pattern=_as_text(data.get("pattern")),
            concentration=_as_float(concentration, "sector.concentration"),
            focus_sectors=_as_text_tuple(_lookup(data, "focusSectors", "focus_sectors"), "sector.focusSectors"),
            avoid_sectors=_as_text_tuple(_lookup(data, "avoidSectors", "avoid_sectors"), "sector.avoidSectors"),
            leadership=leadership,
        )


# ============================================================================
# Combined input
# ============================================================================


@dataclass(frozen=True)
class DataInsightInput:
    """The three resolved upstream signals; any of them may be absent."""

    regime: Optional[RegimeSignal] = None
    smart_money: Optional[SmartMoneySignal] = None
    sector: Optional[SectorRotationSignal] = None

    @property
    def missing_inputs(self) -> List[str]:
        """Names of inputs that are absent or structurally incomplete."""
        missing = []
        if self.regime is None or not self.regime.is_complete:
            missing.append("regime")
        if self.smart_money is None or not self.smart_money.is_complete:
            missing.append("smartMoney")
        if self.sector is None or not self.sector.is_complete:
            missing.append("sector")
        return missing

    @property
    def is_complete(self) -> bool:
        return not self.missing_inputs

    @classmethod
    def from_dict(cls, data: Any) -> "DataInsightInput":
        """Create from ``{regime, smartMoney, sector}``; ``sectorRotation`` is accepted too."""
        data = _as_mapping(data, "input") or {}
        return cls(
            regime=RegimeSignal.from_dict(data.get("regime")),
            smart_money=SmartMoneySignal.from_dict(_lookup(data, "smartMoney", "smart_money")),
            sector=SectorRotationSignal.from_dict(
                _lookup(data, "sector", "sectorRotation", "sector_rotation")
            ),
        )


__all__ = [
    "RegimeType",
    "SignalStrength",
    "RiskSignal",
    "InvestorType",
    "STRENGTH_SCORES",
    "REGIME_CONFIDENCE_LABELS",
    "strength_score",
    "parse_strength",
    "RegimeSignal",
    "InvestorFlow",
    "InvestorBreakdown",
    "SmartMoneySignal",
    "SectorRef",
    "SectorPerformance",
    "SectorLeadership",
    "SectorRotationSignal",
    "DataInsightInput",
]
