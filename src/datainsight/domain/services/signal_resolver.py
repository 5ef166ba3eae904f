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
Signal Resolver - Resolves conflicting market signals into one verdict.

Combines the regime, smart money and sector rotation signals with the
detected conflicts and produces a DataInsight: verdict, confidence,
conviction, primary driver, explanation and takeaway.

Resolution order:
1. Missing inputs degrade to NEUTRAL with low conviction
2. A High conflict overrides any bullish reading (WAIT for noise, else CAUTION)
3. Otherwise a directional tally of regime, smart money and sector decides
4. Prioritized resolution rules re-weight the axes before the primary
   driver is chosen (first matching rule wins)

Usage:
    resolver = SignalResolver()
    insight = resolver.resolve(DataInsightInput.from_dict(payload))
    print(f"{insight.verdict.value} ({insight.conviction.value})")
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Protocol, Tuple, Union

from datainsight.domain.models.insight import (
    ConflictDetectionResult,
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
    RegimeSignal,
    RegimeType,
    SectorRotationSignal,
    SmartMoneySignal,
    strength_score,
)
from datainsight.domain.services.conflict_detector import ConflictDetector
from datainsight.domain.services.signal_thresholds import (
    CYCLICAL_CATEGORIES,
    DEFAULT_CONFLICT_THRESHOLDS,
    DEFAULT_RESOLUTION_CONFIG,
    ConflictThresholds,
    ResolutionConfig,
    category_share,
)

logger = logging.getLogger(__name__)


class SignalDirection(Enum):
    """Directional vote of a single signal."""

    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"


# Rotation analyzer patterns
BULLISH_PATTERNS = {"risk-on rotation", "broad-based advance"}
BEARISH_PATTERNS = {"risk-off rotation", "broad-based decline"}
NEUTRAL_PATTERNS = {"mixed/no clear pattern", "sector-specific"}

# Free-text patterns from other analyzers
BULLISH_PATTERN_KEYWORDS = ("risk-on", "advance", "cyclical", "growth")
BEARISH_PATTERN_KEYWORDS = ("risk-off", "decline", "defensive")

# Conflicts that mean noise rather than directional disagreement
NOISE_CONFLICTS = {ConflictType.HIGH_PROP_TRADING_NOISE}

SEVERITY_PENALTY_FIELDS = {
    ConflictSeverity.HIGH: "high_conflict_penalty",
    ConflictSeverity.MEDIUM: "medium_conflict_penalty",
    ConflictSeverity.LOW: "low_conflict_penalty",
}


# ============================================================================
# Directional votes
# ============================================================================


def regime_direction(regime: Optional[RegimeSignal]) -> Optional[SignalDirection]:
    if regime is None or regime.type is None:
        return None
    return {
        RegimeType.RISK_ON: SignalDirection.BULLISH,
        RegimeType.RISK_OFF: SignalDirection.BEARISH,
        RegimeType.NEUTRAL: SignalDirection.NEUTRAL,
    }[regime.type]


def smart_money_direction(
    smart_money: Optional[SmartMoneySignal], config: ResolutionConfig = DEFAULT_RESOLUTION_CONFIG
) -> Optional[SignalDirection]:
    """Vote from the combined signal, falling back to the score."""
    if smart_money is None:
        return None

    score = strength_score(smart_money.combined_signal)
    if score is not None:
        if score > 0:
            return SignalDirection.BULLISH
        if score < 0:
            return SignalDirection.BEARISH
        return SignalDirection.NEUTRAL

    if smart_money.score is None:
        return None
    if smart_money.score > config.smart_money_bullish_score:
        return SignalDirection.BULLISH
    if smart_money.score < config.smart_money_bearish_score:
        return SignalDirection.BEARISH
    return SignalDirection.NEUTRAL


def sector_direction(
    sector: Optional[SectorRotationSignal], thresholds: ConflictThresholds = DEFAULT_CONFLICT_THRESHOLDS
) -> Optional[SignalDirection]:
    """Vote from the rotation pattern, falling back to leadership bias."""
    if sector is None or sector.pattern is None:
        return None

    pattern = sector.pattern.lower()
    if pattern in BULLISH_PATTERNS:
        return SignalDirection.BULLISH
    if pattern in BEARISH_PATTERNS:
        return SignalDirection.BEARISH
    if pattern in NEUTRAL_PATTERNS:
        return SignalDirection.NEUTRAL

    if any(keyword in pattern for keyword in BEARISH_PATTERN_KEYWORDS):
        return SignalDirection.BEARISH
    if any(keyword in pattern for keyword in BULLISH_PATTERN_KEYWORDS):
        return SignalDirection.BULLISH

    # Unrecognized pattern text: read the leaders instead
    leaders = sector.leaders or ()
    if leaders:
        if category_share(leaders, thresholds.defensive_categories) >= thresholds.defensive_leadership_ratio:
            return SignalDirection.BEARISH
        if category_share(leaders, CYCLICAL_CATEGORIES) >= thresholds.defensive_leadership_ratio:
            return SignalDirection.BULLISH
    return SignalDirection.NEUTRAL


# ============================================================================
# Resolution rules
# ============================================================================


@dataclass
class RuleOutcome:
    """Weight changes and a note produced by a resolution rule."""

    weights: Optional[Dict[str, float]] = None
    special_case: Optional[str] = None


@dataclass
class ResolutionContext:
    """Rules applied while resolving and the resulting axis weights."""

    weights: Dict[str, float]
    applied_rules: List[str] = field(default_factory=list)
    special_cases: List[str] = field(default_factory=list)


class ResolutionRule(Protocol):
    """Protocol for a prioritized weighting rule."""

    name: str
    priority: int

    def applies(
        self, signals: DataInsightInput, conflicts: ConflictDetectionResult, config: ResolutionConfig
    ) -> bool:
        ...

    def apply(
        self, signals: DataInsightInput, config: ResolutionConfig, weights: Dict[str, float]
    ) -> RuleOutcome:
        ...


class ForeignDominanceRule:
    """Large foreign flow outweighs a low-confidence regime."""

    name = "Foreign Dominance"
    priority = 100

    def applies(
        self, signals: DataInsightInput, conflicts: ConflictDetectionResult, config: ResolutionConfig
    ) -> bool:
        if signals.smart_money is None or signals.regime is None:
            return False
        foreign = signals.smart_money.investors.foreign
        if foreign is None or foreign.today_net is None or signals.regime.confidence is None:
            return False
        return (
            abs(foreign.today_net) > config.foreign_flow_threshold
            and signals.regime.confidence < config.regime_confidence_override
        )

    def apply(
        self, signals: DataInsightInput, config: ResolutionConfig, weights: Dict[str, float]
    ) -> RuleOutcome:
        return RuleOutcome(
            weights={
                **weights,
                "foreign": config.foreign_dominance_weight,
                "regime": config.foreign_dominance_regime_weight,
            },
            special_case="Foreign flow dominance detected",
        )


class SmartMoneyExtremesRule:
    """Extreme smart money scores outweigh the regime unless it is very confident."""

    name = "Smart Money Extremes"
    priority = 90

    def applies(
        self, signals: DataInsightInput, conflicts: ConflictDetectionResult, config: ResolutionConfig
    ) -> bool:
        if signals.smart_money is None or signals.smart_money.score is None:
            return False
        score = signals.smart_money.score
        return score > config.smart_money_extreme_high or score < config.smart_money_extreme_low

    def apply(
        self, signals: DataInsightInput, config: ResolutionConfig, weights: Dict[str, float]
    ) -> RuleOutcome:
        regime = signals.regime
        if regime is not None and regime.confidence is not None:
            if regime.confidence >= config.regime_confidence_override:
                return RuleOutcome(special_case="Regime high confidence overrides smart money")
        return RuleOutcome(
            weights={
                **weights,
                "smartMoney": config.smart_money_extreme_weight,
                "regime": config.smart_money_extreme_regime_weight,
            },
            special_case="Smart money at extreme levels",
        )


class BankSectorDefensiveRule:
    """Bank leadership in a cautious regime is read as defensive."""

    name = "Bank Sector Defensive"
    priority = 80

    def applies(
        self, signals: DataInsightInput, conflicts: ConflictDetectionResult, config: ResolutionConfig
    ) -> bool:
        return conflicts.has_type(ConflictType.BANK_SECTOR_DEFENSIVE)

    def apply(
        self, signals: DataInsightInput, config: ResolutionConfig, weights: Dict[str, float]
    ) -> RuleOutcome:
        return RuleOutcome(special_case="Bank sector leadership is defensive, not bullish")


class SectorConfirmationRule:
    """Concentrated sector leadership confirms the trend."""

    name = "Sector Confirmation"
    priority = 70

    def applies(
        self, signals: DataInsightInput, conflicts: ConflictDetectionResult, config: ResolutionConfig
    ) -> bool:
        if signals.sector is None or signals.sector.concentration is None:
            return False
        return signals.sector.concentration > config.sector_confirmation_concentration

    def apply(
        self, signals: DataInsightInput, config: ResolutionConfig, weights: Dict[str, float]
    ) -> RuleOutcome:
        return RuleOutcome(
            weights={**weights, "sector": config.sector_confirmation_weight},
            special_case="High sector concentration confirms trend",
        )


# ============================================================================
# Main resolver
# ============================================================================


class SignalResolver:
    """
    Resolves the three signals and their conflicts into a DataInsight.

    Pure and stateless: the same inputs always give an equal DataInsight.
    """

    def __init__(
        self,
        config: Optional[ResolutionConfig] = None,
        thresholds: Optional[ConflictThresholds] = None,
        rules: Optional[List[ResolutionRule]] = None,
    ):
        self.config = config or DEFAULT_RESOLUTION_CONFIG
        self.thresholds = thresholds or DEFAULT_CONFLICT_THRESHOLDS
        self.detector = ConflictDetector(thresholds=self.thresholds)
        rules = rules or [
            ForeignDominanceRule(),
            SmartMoneyExtremesRule(),
            BankSectorDefensiveRule(),
            SectorConfirmationRule(),
        ]
        self.rules = sorted(rules, key=lambda r: r.priority, reverse=True)

    def resolve(
        self,
        signals: DataInsightInput,
        conflict_result: Optional[ConflictDetectionResult] = None,
    ) -> DataInsight:
        """
        Resolve signals into a verdict.

        Args:
            signals: The three upstream signals; any may be absent
            conflict_result: Precomputed detection result (detected here if None)

        Returns:
            DataInsight; NEUTRAL with low conviction when inputs are missing
        """
        if conflict_result is None:
            conflict_result = self.detector.detect(signals)

        missing = signals.missing_inputs
        votes = self._collect_votes(signals)
        resolution = self._apply_rules(signals, conflict_result)

        verdict, verdict_reason = self._select_verdict(votes, conflict_result, missing)
        confidence, confidence_note = self._calculate_confidence(signals, conflict_result, verdict, missing)
        conviction = ConvictionLevel.from_confidence(
            confidence,
            high_cutoff=self.config.high_conviction_cutoff,
            medium_cutoff=self.config.medium_conviction_cutoff,
        )
        primary_driver = self._determine_primary_driver(signals, resolution.weights)
        sector_focus = self._determine_sector_focus(signals, verdict)

        most_severe = conflict_result.most_severe
        key_conflict_alert = most_severe.description if most_severe is not None else None

        reasoning = self._build_reasoning(votes, conflict_result, resolution, verdict_reason, confidence_note)

        if missing:
            logger.info(f"Resolving with unavailable inputs: {', '.join(missing)}")

        return DataInsight(
            verdict=verdict,
            conviction=conviction,
            confidence=confidence,
            primary_driver=primary_driver,
            explanation=self._generate_explanation(signals, primary_driver, key_conflict_alert, missing),
            sector_focus=sector_focus,
            actionable_takeaway=self._generate_takeaway(
                signals, verdict, primary_driver, sector_focus, conflict_result, missing
            ),
            key_conflict_alert=key_conflict_alert,
            conflicting_signals=self._extract_signal_values(signals, conflict_result),
            reasoning=reasoning,
            conflict_level=conflict_result.conflict_level,
            missing_inputs=missing,
        )

    # ------------------------------------------------------------------
    # Votes and rules
    # ------------------------------------------------------------------

    def _collect_votes(self, signals: DataInsightInput) -> Dict[str, Optional[SignalDirection]]:
        return {
            "regime": regime_direction(signals.regime),
            "smartMoney": smart_money_direction(signals.smart_money, self.config),
            "sector": sector_direction(signals.sector, self.thresholds),
        }

    def _apply_rules(self, signals: DataInsightInput, conflicts: ConflictDetectionResult) -> ResolutionContext:
        """Apply the highest-priority matching rule."""
        context = ResolutionContext(weights=self.config.base_weights())

        for rule in self.rules:
            if not rule.applies(signals, conflicts, self.config):
                continue
            outcome = rule.apply(signals, self.config, context.weights)
            context.applied_rules.append(rule.name)
            if outcome.weights:
                context.weights = dict(outcome.weights)
            if outcome.special_case:
                context.special_cases.append(outcome.special_case)
            break

        return context

    # ------------------------------------------------------------------
    # Verdict, confidence, driver
    # ------------------------------------------------------------------

    def _select_verdict(
        self,
        votes: Dict[str, Optional[SignalDirection]],
        conflicts: ConflictDetectionResult,
        missing: List[str],
    ) -> Tuple[Verdict, str]:
        if missing:
            return Verdict.NEUTRAL, f"Insufficient inputs ({', '.join(missing)}) for a directional verdict"

        if conflicts.has_critical_conflict:
            high_types = {c.conflict_type for c in conflicts.conflicts if c.severity == ConflictSeverity.HIGH}
            if high_types & NOISE_CONFLICTS:
                return Verdict.WAIT, "Critical noise conflict makes signals unreliable"
            return Verdict.CAUTION, "Critical conflict overrides directional tally"

        directions = list(votes.values())
        bullish = directions.count(SignalDirection.BULLISH)
        bearish = directions.count(SignalDirection.BEARISH)

        if bullish == len(directions):
            return Verdict.PROCEED, "All signals bullish"
        if bullish == 0 and bearish >= 2:
            return Verdict.CAUTION, f"Bearish agreement across {bearish} signals"
        if bullish == 0 and bearish == 0:
            return Verdict.NEUTRAL, "No directional signal"
        return Verdict.WAIT, "Signals disagree on direction"

    def _calculate_confidence(
        self,
        signals: DataInsightInput,
        conflicts: ConflictDetectionResult,
        verdict: Verdict,
        missing: List[str],
    ) -> Tuple[int, str]:
        confidences = [
            value
            for value in (
                signals.regime.confidence if signals.regime else None,
                signals.smart_money.confidence if signals.smart_money else None,
                signals.sector.concentration if signals.sector else None,
            )
            if value is not None
        ]
        base = sum(confidences) / len(confidences) if confidences else self.config.default_confidence

        penalty = sum(getattr(self.config, SEVERITY_PENALTY_FIELDS[c.severity]) for c in conflicts.conflicts)
        penalty = min(penalty, self.config.max_conflict_penalty)

        confidence = min(max(base - penalty, 0.0), 100.0)
        note = f"Confidence: base {base:.1f} - conflict penalty {penalty:.1f}"

        noisy = any(c.conflict_type in NOISE_CONFLICTS for c in conflicts.conflicts)
        if missing or (verdict == Verdict.WAIT and noisy):
            if confidence > self.config.noise_confidence_cap:
                confidence = self.config.noise_confidence_cap
                note += f", capped at {self.config.noise_confidence_cap:.0f}"

        confidence_int = int(round(confidence))
        return confidence_int, f"{note} = {confidence_int}"

    def _axis_deviations(self, signals: DataInsightInput) -> Dict[str, float]:
        """How far each axis sits from neutral, 0-1."""
        config = self.config
        deviations = {"foreign": 0.0, "smartMoney": 0.0, "regime": 0.0, "sector": 0.0}

        smart_money = signals.smart_money
        if smart_money is not None:
            foreign = smart_money.investors.foreign
            if foreign is not None and foreign.score is not None:
                deviations["foreign"] = abs(foreign.score) / 3
            elif foreign is not None and foreign.today_net is not None:
                deviations["foreign"] = min(abs(foreign.today_net) / (2 * config.foreign_flow_threshold), 1.0)

            if smart_money.score is not None:
                deviations["smartMoney"] = min(abs(smart_money.score - 50) / 50, 1.0)
            elif smart_money.combined_signal is not None:
                deviations["smartMoney"] = abs(strength_score(smart_money.combined_signal)) / 3

        regime = signals.regime
        # A directional axis without its confidence contributes nothing
        if regime is not None and regime.type not in (None, RegimeType.NEUTRAL) and regime.confidence is not None:
            deviations["regime"] = min(max(regime.confidence, 0.0), 100.0) / 100

        sector = signals.sector
        direction = sector_direction(sector, self.thresholds)
        if direction not in (None, SignalDirection.NEUTRAL) and sector.concentration is not None:
            deviations["sector"] = min(max(sector.concentration, 0.0), 100.0) / 100

        return deviations

    def _determine_primary_driver(self, signals: DataInsightInput, weights: Dict[str, float]) -> PrimaryDriver:
        drivers = {
            "foreign": PrimaryDriver.FOREIGN_FLOW,
            "smartMoney": PrimaryDriver.SMART_MONEY,
            "regime": PrimaryDriver.MARKET_REGIME,
            "sector": PrimaryDriver.SECTOR_STRENGTH,
        }

        best_axis, best_score = None, 0.0
        for axis, deviation in self._axis_deviations(signals).items():
            weighted = deviation * weights.get(axis, 1.0)
            if weighted > best_score:
                best_axis, best_score = axis, weighted

        if best_axis is None or best_score < self.config.primary_driver_floor:
            return PrimaryDriver.NONE
        return drivers[best_axis]

    def _determine_sector_focus(self, signals: DataInsightInput, verdict: Verdict) -> SectorFocus:
        sector, regime = signals.sector, signals.regime
        if sector is None:
            return SectorFocus.NEUTRAL

        if verdict == Verdict.PROCEED:
            if regime is not None and regime.type == RegimeType.RISK_ON and sector.focus_sectors:
                return SectorFocus.OVERWEIGHT

        if verdict == Verdict.CAUTION and sector.avoid_sectors:
            return SectorFocus.UNDERWEIGHT

        return SectorFocus.NEUTRAL

    # ------------------------------------------------------------------
    # Narrative
    # ------------------------------------------------------------------

    def _generate_explanation(
        self,
        signals: DataInsightInput,
        primary_driver: PrimaryDriver,
        key_conflict_alert: Optional[str],
        missing: List[str],
    ) -> str:
        parts = []

        if primary_driver != PrimaryDriver.NONE:
            parts.append(f"{primary_driver.value} is the primary driver.")

        regime = signals.regime
        if regime is not None and regime.type is not None:
            if regime.confidence is not None:
                parts.append(f"Market regime is {regime.type.value} with {regime.confidence:.0f}% confidence.")
            else:
                parts.append(f"Market regime is {regime.type.value}.")

        smart_money = signals.smart_money
        if smart_money is not None and smart_money.score is not None:
            if smart_money.combined_signal is not None:
                parts.append(
                    f"Smart money score is {smart_money.score:.0f}/100 "
                    f"with signal: {smart_money.combined_signal.value}."
                )
            else:
                parts.append(f"Smart money score is {smart_money.score:.0f}/100.")

        sector = signals.sector
        if sector is not None and sector.pattern is not None:
            parts.append(f"Sector pattern shows {sector.pattern}.")

        if key_conflict_alert:
            parts.append(f"Key conflict: {key_conflict_alert}.")

        if missing:
            parts.append(f"Unavailable inputs: {', '.join(missing)}.")

        return " ".join(parts)

    def _generate_takeaway(
        self,
        signals: DataInsightInput,
        verdict: Verdict,
        primary_driver: PrimaryDriver,
        sector_focus: SectorFocus,
        conflicts: ConflictDetectionResult,
        missing: List[str],
    ) -> str:
        sector = signals.sector

        if verdict == Verdict.PROCEED:
            if sector_focus == SectorFocus.OVERWEIGHT and sector is not None and sector.focus_sectors:
                return (
                    f"Consider overweight positions in {', '.join(sector.focus_sectors[:3])}. "
                    f"Driven by {primary_driver.value}."
                )
            return f"Proceed with trades. Driven by {primary_driver.value}. Maintain standard position sizing."

        if verdict == Verdict.CAUTION:
            if sector_focus == SectorFocus.UNDERWEIGHT and sector is not None:
                takeaway = f"Reduce exposure to {', '.join(sector.avoid_sectors[:2])}. Use tighter stops."
            else:
                takeaway = "Exercise caution with new positions. Consider reducing position sizes by 25-50%."
            sellers = self._selling_investors(signals)
            if sellers:
                takeaway += f" Watch selling pressure from {', '.join(sellers)}."
            return takeaway

        if verdict == Verdict.WAIT:
            if any(c.conflict_type in NOISE_CONFLICTS for c in conflicts.conflicts):
                return "Wait for prop trading activity to normalize before making trading decisions."
            return "Wait for clearer signals. Current market conditions are too ambiguous for high-conviction trades."

        if missing:
            return "Insufficient data for a verdict. Hold existing positions until all signals are available."
        return "Market signals are mixed. Hold existing positions and wait for directional clarity."

    def _selling_investors(self, signals: DataInsightInput) -> List[str]:
        if signals.smart_money is None:
            return []
        return [
            investor.value
            for investor, flow in signals.smart_money.investors.items()
            if flow is not None and flow.score is not None and flow.score < 0
        ]

    def _extract_signal_values(
        self, signals: DataInsightInput, conflicts: ConflictDetectionResult
    ) -> Dict[str, SignalValue]:
        """Snapshots of the axes that conflicts touch."""
        touched = set()
        for conflict in conflicts.conflicts:
            for source in conflict.signals:
                if source == SignalSource.REGIME:
                    touched.add("regime")
                elif source == SignalSource.SECTOR:
                    touched.add("sector")
                elif source == SignalSource.FOREIGN:
                    touched.add("foreign")
                else:
                    touched.add("smartMoney")

        values: Dict[str, SignalValue] = {}
        regime, smart_money, sector = signals.regime, signals.smart_money, signals.sector

        if "regime" in touched and regime is not None and regime.type is not None:
            values["regime"] = SignalValue(regime.type.value, regime.confidence or 0.0)

        if "smartMoney" in touched and smart_money is not None and smart_money.score is not None:
            value = (
                smart_money.combined_signal.value
                if smart_money.combined_signal is not None
                else f"Score {smart_money.score:.0f}"
            )
            values["smartMoney"] = SignalValue(value, smart_money.confidence or 0.0)

        if "foreign" in touched and smart_money is not None:
            foreign = smart_money.investors.foreign
            if foreign is not None and foreign.strength is not None:
                net = foreign.today_net or 0.0
                values["foreign"] = SignalValue(foreign.strength.value, min(100.0, abs(net) / 10))

        if "sector" in touched and sector is not None and sector.pattern is not None:
            values["sector"] = SignalValue(sector.pattern, sector.concentration or 0.0)

        return values

    def _build_reasoning(
        self,
        votes: Dict[str, Optional[SignalDirection]],
        conflicts: ConflictDetectionResult,
        resolution: ResolutionContext,
        verdict_reason: str,
        confidence_note: str,
    ) -> List[str]:
        reasoning = [
            "Votes: " + ", ".join(f"{axis}={d.value if d else 'unavailable'}" for axis, d in votes.items())
        ]
        for conflict in conflicts.conflicts:
            reasoning.append(
                f"{conflict.severity.value} conflict: {conflict.conflict_type.value} - {conflict.description}"
            )
        for rule, special_case in zip(resolution.applied_rules, resolution.special_cases):
            reasoning.append(f"Rule '{rule}': {special_case}")
        reasoning.append(
            "Weights: " + ", ".join(f"{axis} {weight:.1f}" for axis, weight in resolution.weights.items())
        )
        reasoning.append(confidence_note)
        reasoning.append(verdict_reason)
        return reasoning


def resolve_signals(
    signals: Union[DataInsightInput, Dict[str, Any]],
    conflict_result: Optional[ConflictDetectionResult] = None,
    allow_partial: bool = False,
    config: Optional[ResolutionConfig] = None,
    thresholds: Optional[ConflictThresholds] = None,
) -> Optional[DataInsight]:
    """
    Resolve conflicting signals into a single verdict.

    Returns None when any of the three inputs is absent or structurally
    incomplete, so the caller can suppress the insight instead of showing a
    broken one. With ``allow_partial`` the degraded NEUTRAL insight is
    returned instead.
    """
    if not isinstance(signals, DataInsightInput):
        signals = DataInsightInput.from_dict(signals)

    if not signals.is_complete and not allow_partial:
        logger.info(f"Insufficient data for insight: missing {', '.join(signals.missing_inputs)}")
        return None

    return SignalResolver(config=config, thresholds=thresholds).resolve(signals, conflict_result)


__all__ = [
    "SignalDirection",
    "regime_direction",
    "smart_money_direction",
    "sector_direction",
    "RuleOutcome",
    "ResolutionContext",
    "ResolutionRule",
    "ForeignDominanceRule",
    "SmartMoneyExtremesRule",
    "BankSectorDefensiveRule",
    "SectorConfirmationRule",
    "SignalResolver",
    "resolve_signals",
]
