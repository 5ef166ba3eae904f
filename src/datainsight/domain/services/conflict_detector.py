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

"""
Conflict Detector - Rule-based detection of disagreeing market signals.

Evaluates six fixed heuristics against the regime, smart money and sector
rotation signals. Every heuristic that fires is reported with its own
severity; none suppresses another. Aggregation into a verdict is the
resolver's job.

Conflict Types Handled:
- Regime vs smart money score (High / Medium)
- Regime vs defensive sector leadership (Medium)
- Foreign vs domestic flow divergence (High / Medium)
- Prop trading noise (High)
- Bank sector leadership in a cautious regime (Medium)
- Foreign vs institution contradiction (Medium)

Every check is null-safe: missing data short-circuits that single check.
"""

import logging
from typing import Any, Dict, List, Optional, Protocol, Sequence, Union

from datainsight.domain.models.insight import (
    Conflict,
    ConflictDetectionResult,
    ConflictSeverity,
    ConflictType,
    SignalSource,
)
from datainsight.domain.models.signals import DataInsightInput, InvestorType, RegimeType
from datainsight.domain.services.conflict_formatter import describe_conflict, describe_impact
from datainsight.domain.services.signal_thresholds import (
    DEFAULT_CONFLICT_THRESHOLDS,
    ConflictThresholds,
    category_share,
    classify_sector,
    leader_names,
)

logger = logging.getLogger(__name__)


class ConflictCheck(Protocol):
    """Protocol for a single conflict heuristic."""

    def detect(self, signals: DataInsightInput, thresholds: ConflictThresholds) -> Optional[Conflict]:
        """Return the conflict if the heuristic fires, else None."""
        ...


def _build_conflict(
    conflict_type: ConflictType,
    severity: ConflictSeverity,
    signals: Sequence[SignalSource],
    data: Dict[str, Any],
) -> Conflict:
    return Conflict(
        conflict_type=conflict_type,
        severity=severity,
        signals=tuple(signals),
        description=describe_conflict(conflict_type, data),
        impact=describe_impact(conflict_type, data),
        data=data,
    )


# ============================================================================
# Conflict Checks
# ============================================================================


class RegimeSmartMoneyCheck:
    """Regime says go while money says no, or the reverse."""

    def detect(self, signals: DataInsightInput, thresholds: ConflictThresholds) -> Optional[Conflict]:
        regime, smart_money = signals.regime, signals.smart_money
        if regime is None or smart_money is None:
            return None
        if regime.type is None or smart_money.score is None:
            return None

        score = smart_money.score

        # Most dangerous: institutional flow should confirm a risk-on regime
        if regime.type == RegimeType.RISK_ON and score < thresholds.smart_money_low_score:
            return _build_conflict(
                ConflictType.REGIME_SMART_MONEY_MISMATCH,
                ConflictSeverity.HIGH,
                [SignalSource.REGIME, SignalSource.SMART_MONEY],
                {
                    "regime_type": regime.type.value,
                    "smart_money_score": score,
                    "threshold": thresholds.smart_money_low_score,
                    "direction": "risk_on_low_score",
                },
            )

        # Possible early bottom: an opportunity rather than a risk
        if regime.type == RegimeType.RISK_OFF and score > thresholds.smart_money_high_score:
            return _build_conflict(
                ConflictType.REGIME_SMART_MONEY_MISMATCH,
                ConflictSeverity.MEDIUM,
                [SignalSource.REGIME, SignalSource.SMART_MONEY],
                {
                    "regime_type": regime.type.value,
                    "smart_money_score": score,
                    "threshold": thresholds.smart_money_high_score,
                    "direction": "risk_off_high_score",
                },
            )

        return None


class RegimeSectorCheck:
    """Defensive sectors dominating leadership, read against the regime."""

    def detect(self, signals: DataInsightInput, thresholds: ConflictThresholds) -> Optional[Conflict]:
        regime, sector = signals.regime, signals.sector
        if regime is None or sector is None or regime.type is None:
            return None
        leaders = sector.leaders
        if not leaders:
            return None

        defensive_share = category_share(leaders, thresholds.defensive_categories)
        if defensive_share < thresholds.defensive_leadership_ratio:
            return None

        data = {
            "regime_type": regime.type.value,
            "leaders": leader_names(leaders),
            "defensive_leaders": leader_names(
                l for l in leaders if classify_sector(l.sector) in thresholds.defensive_categories
            ),
            "defensive_share": defensive_share,
        }

        if regime.type == RegimeType.RISK_OFF:
            return _build_conflict(
                ConflictType.DEFENSIVE_SECTOR_LEADERSHIP,
                ConflictSeverity.MEDIUM,
                [SignalSource.REGIME, SignalSource.SECTOR],
                data,
            )

        if regime.type == RegimeType.RISK_ON:
            return _build_conflict(
                ConflictType.REGIME_SECTOR_MISMATCH,
                ConflictSeverity.MEDIUM,
                [SignalSource.REGIME, SignalSource.SECTOR],
                data,
            )

        return None


class ForeignDomesticCheck:
    """Foreign flow strongly opposed by retail or prop flow."""

    def detect(self, signals: DataInsightInput, thresholds: ConflictThresholds) -> Optional[Conflict]:
        if signals.smart_money is None:
            return None
        investors = signals.smart_money.investors
        foreign, retail, prop = investors.foreign, investors.retail, investors.prop
        if foreign is None or retail is None or prop is None:
            return None
        if foreign.score is None or retail.score is None or prop.score is None:
            return None

        strong = thresholds.strong_flow_score

        # Foreign leads the market by 1-3 days; the most actionable divergence
        if foreign.score > strong and (retail.score < -strong or prop.score < -strong):
            domestic_type, domestic = ("retail", retail) if retail.score < -strong else ("prop", prop)
            return _build_conflict(
                ConflictType.FOREIGN_DOMESTIC_DIVERGENCE,
                ConflictSeverity.HIGH,
                [SignalSource.FOREIGN, SignalSource.DOMESTIC],
                {
                    "foreign_strength": foreign.strength.value,
                    "domestic_type": domestic_type,
                    "domestic_strength": domestic.strength.value,
                    "foreign_net": foreign.today_net,
                    "domestic_net": domestic.today_net,
                    "direction": "foreign_buying",
                },
            )

        if foreign.score < -strong and (retail.score > strong or prop.score > strong):
            domestic_type, domestic = ("retail", retail) if retail.score > strong else ("prop", prop)
            return _build_conflict(
                ConflictType.FOREIGN_DOMESTIC_DIVERGENCE,
                ConflictSeverity.MEDIUM,
                [SignalSource.FOREIGN, SignalSource.DOMESTIC],
                {
                    "foreign_strength": foreign.strength.value,
                    "domestic_type": domestic_type,
                    "domestic_strength": domestic.strength.value,
                    "foreign_net": foreign.today_net,
                    "domestic_net": domestic.today_net,
                    "direction": "foreign_selling",
                },
            )

        return None


class PropTradingNoiseCheck:
    """Prop desk flow large enough to make every other signal suspect."""

    def detect(self, signals: DataInsightInput, thresholds: ConflictThresholds) -> Optional[Conflict]:
        if signals.smart_money is None:
            return None
        investors = signals.smart_money.investors

        flows = {}
        for investor, flow in investors.items():
            if flow is None or flow.today_net is None:
                return None
            flows[investor] = abs(flow.today_net)

        total_flow = sum(flows.values())
        if total_flow == 0:
            return None

        prop_share_pct = flows[InvestorType.PROP] / total_flow * 100
        if prop_share_pct <= thresholds.prop_noise_threshold_pct:
            return None

        return _build_conflict(
            ConflictType.HIGH_PROP_TRADING_NOISE,
            ConflictSeverity.HIGH,
            [SignalSource.PROP],
            {
                "prop_share_pct": prop_share_pct,
                "prop_net": investors.prop.today_net,
                "total_flow": total_flow,
                "threshold_pct": thresholds.prop_noise_threshold_pct,
            },
        )


class BankSectorDefensiveCheck:
    """Bank leadership does not imply broad risk appetite."""

    def detect(self, signals: DataInsightInput, thresholds: ConflictThresholds) -> Optional[Conflict]:
        regime, sector = signals.regime, signals.sector
        if regime is None or sector is None:
            return None
        if regime.type is None or regime.confidence is None:
            return None
        leaders = sector.leaders
        if not leaders:
            return None

        bank_leaders = [l for l in leaders if classify_sector(l.sector) in thresholds.bank_categories]
        if not bank_leaders:
            return None

        if regime.type != RegimeType.RISK_OFF and regime.confidence >= thresholds.bank_regime_confidence_floor:
            return None

        return _build_conflict(
            ConflictType.BANK_SECTOR_DEFENSIVE,
            ConflictSeverity.MEDIUM,
            [SignalSource.SECTOR, SignalSource.REGIME],
            {
                "regime_type": regime.type.value,
                "regime_confidence": regime.confidence,
                "bank_leaders": leader_names(bank_leaders),
                "bank_index_weight_pct": thresholds.bank_index_weight_pct,
            },
        )


class SmartMoneyContradictionCheck:
    """Foreign and institution flows pulling hard in opposite directions."""

    def detect(self, signals: DataInsightInput, thresholds: ConflictThresholds) -> Optional[Conflict]:
        if signals.smart_money is None:
            return None
        investors = signals.smart_money.investors
        foreign, institution = investors.foreign, investors.institution
        if foreign is None or institution is None:
            return None
        if foreign.score is None or institution.score is None:
            return None

        strong = thresholds.strong_flow_score
        opposed = (foreign.score > strong and institution.score < -strong) or (
            foreign.score < -strong and institution.score > strong
        )
        spread = abs(foreign.score - institution.score)
        if not opposed or spread <= thresholds.contradiction_spread:
            return None

        return _build_conflict(
            ConflictType.SMART_MONEY_CONTRADICTION,
            ConflictSeverity.MEDIUM,
            [SignalSource.FOREIGN, SignalSource.INSTITUTION],
            {
                "foreign_strength": foreign.strength.value,
                "institution_strength": institution.strength.value,
                "spread": spread,
                "direction": "foreign_buying" if foreign.score > 0 else "foreign_selling",
            },
        )


# ============================================================================
# Main Orchestrator
# ============================================================================


class ConflictDetector:
    """
    Runs every conflict check and aggregates the result.

    Usage:
        detector = ConflictDetector()
        result = detector.detect(DataInsightInput.from_dict(payload))
        if result.has_critical_conflict:
            ...
    """

    def __init__(
        self,
        thresholds: Optional[ConflictThresholds] = None,
        checks: Optional[List[ConflictCheck]] = None,
    ):
        self.thresholds = thresholds or DEFAULT_CONFLICT_THRESHOLDS

        # Emission order is part of the contract
        self.checks = checks or [
            RegimeSmartMoneyCheck(),
            RegimeSectorCheck(),
            ForeignDomesticCheck(),
            PropTradingNoiseCheck(),
            BankSectorDefensiveCheck(),
            SmartMoneyContradictionCheck(),
        ]

    def detect(self, signals: DataInsightInput) -> ConflictDetectionResult:
        """
        Detect all conflicts between the signals.

        Args:
            signals: The three upstream signals; any may be absent

        Returns:
            ConflictDetectionResult with conflicts in check order
        """
        conflicts = []

        for check in self.checks:
            try:
                conflict = check.detect(signals, self.thresholds)
            except Exception as e:
                logger.warning(f"Conflict check {type(check).__name__} failed: {e}")
                continue
            if conflict is not None:
                logger.debug(f"{conflict.conflict_type.value} ({conflict.severity.value}): {conflict.description}")
                conflicts.append(conflict)

        return ConflictDetectionResult.from_conflicts(conflicts)


def detect_conflicts(
    signals: Union[DataInsightInput, Dict[str, Any]],
    thresholds: Optional[ConflictThresholds] = None,
) -> ConflictDetectionResult:
    """
    Detect conflicts between market signals.

    Accepts either parsed signals or the raw ``{regime, smartMoney, sector}``
    mapping.
    """
    if not isinstance(signals, DataInsightInput):
        signals = DataInsightInput.from_dict(signals)
    return ConflictDetector(thresholds=thresholds).detect(signals)


__all__ = [
    "ConflictCheck",
    "RegimeSmartMoneyCheck",
    "RegimeSectorCheck",
    "ForeignDomesticCheck",
    "PropTradingNoiseCheck",
    "BankSectorDefensiveCheck",
    "SmartMoneyContradictionCheck",
    "ConflictDetector",
    "detect_conflicts",
]
