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

"""Default English rendering of conflict payloads.

Detectors only decide *that* a conflict fired and with which values; the
wording lives here so a presentation layer can swap it for its own templates
while reading the same ``Conflict.data`` payload.
"""

from typing import Any, Callable, Dict, List, Mapping, Sequence

from datainsight.domain.models.insight import Conflict, ConflictSeverity, ConflictType


def _join(names: Sequence[str]) -> str:
    return ", ".join(names) if names else "none"


def _regime_smart_money(data: Mapping[str, Any]) -> str:
    level = "low" if data.get("direction") == "risk_on_low_score" else "high"
    return (
        f"Market regime is {data.get('regime_type')} but smart money score is "
        f"{level} ({data.get('smart_money_score', 0.0):.2f}/100)"
    )


def _regime_sector(data: Mapping[str, Any]) -> str:
    return f"Regime is {data.get('regime_type')} but defensive sectors are leading ({_join(data.get('leaders', []))})"


def _defensive_leadership(data: Mapping[str, Any]) -> str:
    return f"Risk-off regime with defensive sector leadership ({_join(data.get('leaders', []))})"


def _foreign_domestic(data: Mapping[str, Any]) -> str:
    return (
        f"Foreign investors are {data.get('foreign_strength')} while "
        f"{data.get('domestic_type')} is {data.get('domestic_strength')}"
    )


def _prop_noise(data: Mapping[str, Any]) -> str:
    return f"Prop trading accounts for {data.get('prop_share_pct', 0.0):.1f}% of total flow"


def _bank_defensive(data: Mapping[str, Any]) -> str:
    return (
        f"Banks sector leading but regime suggests {data.get('regime_type')} "
        f"at {data.get('regime_confidence', 0.0):.0f}% confidence "
        f"(Banks = {data.get('bank_index_weight_pct', 0.0):.0f}% of SET)"
    )


def _smart_money_contradiction(data: Mapping[str, Any]) -> str:
    return f"Foreign is {data.get('foreign_strength')} but Institution is {data.get('institution_strength')}"


DESCRIPTION_TEMPLATES: Dict[ConflictType, Callable[[Mapping[str, Any]], str]] = {
    ConflictType.REGIME_SMART_MONEY_MISMATCH: _regime_smart_money,
    ConflictType.REGIME_SECTOR_MISMATCH: _regime_sector,
    ConflictType.DEFENSIVE_SECTOR_LEADERSHIP: _defensive_leadership,
    ConflictType.FOREIGN_DOMESTIC_DIVERGENCE: _foreign_domestic,
    ConflictType.HIGH_PROP_TRADING_NOISE: _prop_noise,
    ConflictType.BANK_SECTOR_DEFENSIVE: _bank_defensive,
    ConflictType.SMART_MONEY_CONTRADICTION: _smart_money_contradiction,
}

# Keyed by (type, direction); direction is None for single-direction conflicts
IMPACT_TEXT: Dict[tuple, str] = {
    (ConflictType.REGIME_SMART_MONEY_MISMATCH, "risk_on_low_score"): (
        "Regime may be lagging; smart money suggests caution"
    ),
    (ConflictType.REGIME_SMART_MONEY_MISMATCH, "risk_off_high_score"): (
        "Smart money may be detecting bottoming opportunity"
    ),
    (ConflictType.REGIME_SECTOR_MISMATCH, None): "Sector rotation may be early or regime signal may be premature",
    (ConflictType.DEFENSIVE_SECTOR_LEADERSHIP, None): "Defensive positioning confirmed, not a bullish signal",
    (ConflictType.FOREIGN_DOMESTIC_DIVERGENCE, "foreign_buying"): "Foreign flow typically leads market by 1-3 days",
    (ConflictType.FOREIGN_DOMESTIC_DIVERGENCE, "foreign_selling"): (
        "Retail as contrarian indicator (sells at bottoms 65% of time)"
    ),
    (ConflictType.HIGH_PROP_TRADING_NOISE, None): "High prop trading noise - WAIT for clearer signals",
    (ConflictType.BANK_SECTOR_DEFENSIVE, None): "Interpret as defensive positioning, not bullish signal",
    (ConflictType.SMART_MONEY_CONTRADICTION, None): (
        "Foreign typically leads institution by 1-2 days in Thai market"
    ),
}


def describe_conflict(conflict_type: ConflictType, data: Mapping[str, Any]) -> str:
    """Render the description for a conflict payload."""
    return DESCRIPTION_TEMPLATES[conflict_type](data)


def describe_impact(conflict_type: ConflictType, data: Mapping[str, Any]) -> str:
    """Render the interpretation guidance for a conflict payload."""
    impact = IMPACT_TEXT.get((conflict_type, data.get("direction")))
    if impact is None:
        impact = IMPACT_TEXT.get((conflict_type, None), "")
    return impact


def get_conflicts_by_severity(conflicts: Sequence[Conflict], severity: ConflictSeverity) -> List[Conflict]:
    """Conflicts of one severity, in detector order."""
    return [c for c in conflicts if c.severity == severity]


def format_conflict_description(conflicts: Sequence[Conflict]) -> str:
    """Summary line for display.

    All High conflicts joined with "; ", otherwise the first conflict's
    description, otherwise an empty string.
    """
    if not conflicts:
        return ""

    high_severity = get_conflicts_by_severity(conflicts, ConflictSeverity.HIGH)
    if high_severity:
        return "; ".join(c.description for c in high_severity)

    return conflicts[0].description


__all__ = [
    "DESCRIPTION_TEMPLATES",
    "IMPACT_TEXT",
    "describe_conflict",
    "describe_impact",
    "get_conflicts_by_severity",
    "format_conflict_description",
]
