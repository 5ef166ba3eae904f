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

"""Signal Thresholds - Named constants for conflict detection and resolution.

Provides:
1. ConflictThresholds: cutoffs used by the six conflict heuristics
2. ResolutionConfig: weights, penalties and cutoffs used by the resolver
3. Sector category lookup keyed by stable sector codes

Problem being solved:
- Threshold literals scattered through heuristics drift apart over time
- Matching "defensive" sectors by substring on display names breaks when
  the upstream renames or localizes a sector

Solution:
- Frozen dataclasses holding every tunable number, with SET defaults
- A sector-code -> category table, with a keyword fallback on the display
  name for upstreams that only send names

Usage:
    from datainsight.domain.services.signal_thresholds import (
        ConflictThresholds,
        classify_sector,
    )

    thresholds = ConflictThresholds(prop_noise_threshold_pct=35.0)
    category = classify_sector(SectorRef(name="Banking", id="BANK"))
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple

from datainsight.domain.models.signals import SectorPerformance, SectorRef

logger = logging.getLogger(__name__)


class SectorCategory(Enum):
    """Economic category of a sector."""

    BANKING = "banking"
    FINANCIALS = "financials"
    ENERGY = "energy"
    UTILITIES = "utilities"
    FOOD = "food"
    HEALTHCARE = "healthcare"
    AGRICULTURE = "agriculture"
    CONSUMER = "consumer"
    INDUSTRIALS = "industrials"
    PROPERTY = "property"
    TECHNOLOGY = "technology"
    TRANSPORT = "transport"
    OTHER = "other"


# Codes sent by the sector rotation analyzer, plus the SET spellings of the same sectors
SECTOR_CODE_CATEGORIES: Dict[str, SectorCategory] = {
    "BANK": SectorCategory.BANKING,
    "FIN": SectorCategory.FINANCIALS,
    "ENERG": SectorCategory.ENERGY,
    "ENERGY": SectorCategory.ENERGY,
    "UTIL": SectorCategory.UTILITIES,
    "FOOD": SectorCategory.FOOD,
    "HELTH": SectorCategory.HEALTHCARE,
    "HEALTH": SectorCategory.HEALTHCARE,
    "AGRI": SectorCategory.AGRICULTURE,
    "COMM": SectorCategory.CONSUMER,
    "INDUS": SectorCategory.INDUSTRIALS,
    "CONS": SectorCategory.PROPERTY,
    "PROP": SectorCategory.PROPERTY,
    "TRANS": SectorCategory.TRANSPORT,
    "TECH": SectorCategory.TECHNOLOGY,
    "ICT": SectorCategory.TECHNOLOGY,
}

# Checked in order against the lowercased display name
SECTOR_NAME_KEYWORDS: Tuple[Tuple[str, SectorCategory], ...] = (
    ("bank", SectorCategory.BANKING),
    ("financ", SectorCategory.FINANCIALS),
    ("energy", SectorCategory.ENERGY),
    ("utilit", SectorCategory.UTILITIES),
    ("food", SectorCategory.FOOD),
    ("health", SectorCategory.HEALTHCARE),
    ("agri", SectorCategory.AGRICULTURE),
    ("tech", SectorCategory.TECHNOLOGY),
    ("propert", SectorCategory.PROPERTY),
    ("construct", SectorCategory.PROPERTY),
    ("industr", SectorCategory.INDUSTRIALS),
    ("transport", SectorCategory.TRANSPORT),
    ("commerce", SectorCategory.CONSUMER),
    ("consum", SectorCategory.CONSUMER),
)

DEFENSIVE_CATEGORIES: FrozenSet[SectorCategory] = frozenset(
    {
        SectorCategory.BANKING,
        SectorCategory.ENERGY,
        SectorCategory.FOOD,
        SectorCategory.HEALTHCARE,
        SectorCategory.UTILITIES,
    }
)

BANK_CATEGORIES: FrozenSet[SectorCategory] = frozenset({SectorCategory.BANKING, SectorCategory.FINANCIALS})

CYCLICAL_CATEGORIES: FrozenSet[SectorCategory] = frozenset(
    {
        SectorCategory.TECHNOLOGY,
        SectorCategory.INDUSTRIALS,
        SectorCategory.PROPERTY,
        SectorCategory.CONSUMER,
        SectorCategory.TRANSPORT,
    }
)


def classify_sector(sector: SectorRef) -> SectorCategory:
    """Classify a sector by stable code, falling back to its display name."""
    if sector.id:
        category = SECTOR_CODE_CATEGORIES.get(sector.id.strip().upper())
        if category is not None:
            return category
        logger.debug(f"Unknown sector code '{sector.id}', falling back to name")

    if sector.name:
        name_lower = sector.name.lower()
        for keyword, category in SECTOR_NAME_KEYWORDS:
            if keyword in name_lower:
                return category

    return SectorCategory.OTHER


def category_share(leaders: Iterable[SectorPerformance], categories: FrozenSet[SectorCategory]) -> float:
    """Fraction of leaders whose category is in ``categories`` (0.0 for no leaders)."""
    leaders = list(leaders)
    if not leaders:
        return 0.0
    matched = sum(1 for leader in leaders if classify_sector(leader.sector) in categories)
    return matched / len(leaders)


def leader_names(leaders: Iterable[SectorPerformance]) -> List[str]:
    """Display names of leaders, using the code when no name was sent."""
    return [leader.sector.name or leader.sector.id or "?" for leader in leaders]


@dataclass(frozen=True)
class ConflictThresholds:
    """Cutoffs for the conflict heuristics (SET defaults)."""

    # Regime vs smart money: Risk-On below low, Risk-Off above high
    smart_money_low_score: float = 40.0
    smart_money_high_score: float = 60.0
    # Share of leaders that must be defensive for defensive leadership
    defensive_leadership_ratio: float = 0.5
    # |strength score| above this counts as a strong flow (Strong Buy/Sell = 3)
    strong_flow_score: int = 2
    # Foreign vs institution score gap for a contradiction
    contradiction_spread: int = 4
    # Prop share of absolute flow (%) above which all signals are suspect
    prop_noise_threshold_pct: float = 40.0
    # Bank leadership is defensive when regime confidence is below this
    bank_regime_confidence_floor: float = 60.0
    # Banks' weight in the SET index (%)
    bank_index_weight_pct: float = 30.0
    defensive_categories: FrozenSet[SectorCategory] = field(default=DEFENSIVE_CATEGORIES)
    bank_categories: FrozenSet[SectorCategory] = field(default=BANK_CATEGORIES)


@dataclass(frozen=True)
class ResolutionConfig:
    """Weights, penalties and cutoffs for signal resolution (SET defaults)."""

    # Base axis weights for the primary driver
    regime_weight: float = 1.0
    smart_money_weight: float = 1.2
    foreign_weight: float = 1.5
    sector_weight: float = 0.8

    # Foreign Dominance rule: |foreign net| (million THB) above this
    foreign_flow_threshold: float = 1000.0
    # Regime confidence at which the regime overrides other rules
    regime_confidence_override: float = 80.0
    foreign_dominance_weight: float = 2.0
    foreign_dominance_regime_weight: float = 0.5

    # Smart Money Extremes rule
    smart_money_extreme_high: float = 60.0
    smart_money_extreme_low: float = 30.0
    smart_money_extreme_weight: float = 1.8
    smart_money_extreme_regime_weight: float = 0.6

    # Sector Confirmation rule
    sector_confirmation_concentration: float = 60.0
    sector_confirmation_weight: float = 1.2

    # Smart money score fallback when the combined signal is missing
    smart_money_bullish_score: float = 60.0
    smart_money_bearish_score: float = 40.0

    # Confidence penalties per conflict, and their cap
    high_conflict_penalty: float = 20.0
    medium_conflict_penalty: float = 10.0
    low_conflict_penalty: float = 5.0
    max_conflict_penalty: float = 60.0
    # Confidence ceiling when prop noise forces WAIT
    noise_confidence_cap: float = 30.0
    # Used when no input carries a confidence
    default_confidence: float = 50.0

    # Conviction buckets
    high_conviction_cutoff: float = 70.0
    medium_conviction_cutoff: float = 40.0

    # Weighted deviation below which no axis is the primary driver
    primary_driver_floor: float = 0.2

    def base_weights(self) -> Dict[str, float]:
        return {
            "regime": self.regime_weight,
            "smartMoney": self.smart_money_weight,
            "foreign": self.foreign_weight,
            "sector": self.sector_weight,
        }


DEFAULT_CONFLICT_THRESHOLDS = ConflictThresholds()
DEFAULT_RESOLUTION_CONFIG = ResolutionConfig()


__all__ = [
    "SectorCategory",
    "SECTOR_CODE_CATEGORIES",
    "SECTOR_NAME_KEYWORDS",
    "DEFENSIVE_CATEGORIES",
    "BANK_CATEGORIES",
    "CYCLICAL_CATEGORIES",
    "classify_sector",
    "category_share",
    "leader_names",
    "ConflictThresholds",
    "ResolutionConfig",
    "DEFAULT_CONFLICT_THRESHOLDS",
    "DEFAULT_RESOLUTION_CONFIG",
]
