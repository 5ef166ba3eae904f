"""
Unit tests for input signal models.

Tests lenient parsing of the upstream regime, smart money and sector
rotation mappings.
"""

import math

import pytest

from datainsight.domain.models.signals import (
    REGIME_CONFIDENCE_LABELS,
    STRENGTH_SCORES,
    DataInsightInput,
    InvestorBreakdown,
    InvestorFlow,
    InvestorType,
    RegimeSignal,
    RegimeType,
    RiskSignal,
    SectorPerformance,
    SectorRef,
    SectorRotationSignal,
    SignalStrength,
    SmartMoneySignal,
    parse_strength,
    strength_score,
)


class TestStrengthScore:
    """Tests for the canonical strength-to-score mapping."""

    @pytest.mark.parametrize(
        "strength,expected",
        [
            (SignalStrength.STRONG_BUY, 3),
            (SignalStrength.BUY, 1),
            (SignalStrength.NEUTRAL, 0),
            (SignalStrength.SELL, -1),
            (SignalStrength.STRONG_SELL, -3),
        ],
    )
    def test_scores(self, strength, expected):
        assert strength_score(strength) == expected

    def test_none_is_unknown(self):
        assert strength_score(None) is None

    def test_mapping_is_symmetric(self):
        assert sum(STRENGTH_SCORES.values()) == 0

    def test_parse_accepts_values_and_names(self):
        assert parse_strength("Strong Buy") == SignalStrength.STRONG_BUY
        assert parse_strength("strong sell") == SignalStrength.STRONG_SELL
        assert parse_strength("STRONG_BUY") == SignalStrength.STRONG_BUY

    def test_parse_unknown_is_none(self):
        assert parse_strength("Moon") is None
        assert parse_strength("Bullish") is None
        assert parse_strength(None) is None


class TestRegimeSignal:
    """Tests for RegimeSignal parsing."""

    def test_from_dict(self):
        regime = RegimeSignal.from_dict({"type": "Risk-Off", "confidence": 72.5, "focus": "Cash"})

        assert regime.type == RegimeType.RISK_OFF
        assert regime.confidence == 72.5
        assert regime.focus == "Cash"
        assert regime.caution is None
        assert regime.is_complete

    def test_regime_key_alias(self):
        regime = RegimeSignal.from_dict({"regime": "risk-on", "confidence": "60"})
        assert regime.type == RegimeType.RISK_ON
        assert regime.confidence == 60.0

    def test_unknown_type_is_incomplete(self):
        regime = RegimeSignal.from_dict({"type": "Sideways", "confidence": 50})
        assert regime.type is None
        assert not regime.is_complete

    def test_non_mapping_is_none(self):
        assert RegimeSignal.from_dict("Risk-On") is None
        assert RegimeSignal.from_dict(None) is None

    @pytest.mark.parametrize("bad", [float("nan"), float("inf"), True, "very high", [80]])
    def test_malformed_confidence_is_none(self, bad):
        regime = RegimeSignal.from_dict({"type": "Neutral", "confidence": bad})
        assert regime.confidence is None
        assert regime.type == RegimeType.NEUTRAL

    @pytest.mark.parametrize(
        "label,expected",
        [("High", 85.0), ("Medium", 60.0), ("Low", 30.0), ("medium", 60.0), (" LOW ", 30.0)],
    )
    def test_confidence_labels(self, label, expected):
        regime = RegimeSignal.from_dict({"regime": "Risk-On", "confidence": label})
        assert regime.confidence == expected

    def test_numeric_string_confidence_still_parses(self):
        assert RegimeSignal.from_dict({"type": "Risk-On", "confidence": "72"}).confidence == 72.0

    def test_label_table(self):
        assert REGIME_CONFIDENCE_LABELS == {"high": 85.0, "medium": 60.0, "low": 30.0}


class TestSmartMoneySignal:
    """Tests for SmartMoneySignal parsing."""

    def test_from_dict(self):
        smart_money = SmartMoneySignal.from_dict(
            {
                "score": 68,
                "combinedSignal": "Buy",
                "riskSignal": "Risk-On Mild",
                "confidence": 75,
                "primaryDriver": "foreign",
                "investors": {
                    "foreign": {"todayNet": 1200.5, "strength": "Strong Buy"},
                    "retail": {"todayNet": -800, "strength": "Sell"},
                },
            }
        )

        assert smart_money.score == 68
        assert smart_money.combined_signal == SignalStrength.BUY
        assert smart_money.risk_signal == RiskSignal.RISK_ON_MILD
        assert smart_money.primary_driver == "foreign"
        assert smart_money.investors.foreign == InvestorFlow(1200.5, SignalStrength.STRONG_BUY)
        assert smart_money.investors.retail.score == -1
        assert smart_money.investors.institution is None
        assert smart_money.investors.prop is None

    def test_snake_case_keys(self):
        smart_money = SmartMoneySignal.from_dict(
            {"score": 40, "combined_signal": "Sell", "investors": {"prop": {"today_net": 10, "strength": "Buy"}}}
        )
        assert smart_money.combined_signal == SignalStrength.SELL
        assert smart_money.investors.prop.today_net == 10

    def test_missing_score_is_incomplete(self):
        smart_money = SmartMoneySignal.from_dict({"combinedSignal": "Buy"})
        assert smart_money.score is None
        assert not smart_money.is_complete

    def test_malformed_investors_are_ignored(self):
        smart_money = SmartMoneySignal.from_dict({"score": 50, "investors": ["foreign"]})
        assert smart_money.investors == InvestorBreakdown()


class TestInvestorBreakdown:
    """Tests for InvestorBreakdown access helpers."""

    def test_get_and_items(self):
        foreign = InvestorFlow(100.0, SignalStrength.BUY)
        breakdown = InvestorBreakdown(foreign=foreign)

        assert breakdown.get(InvestorType.FOREIGN) is foreign
        assert breakdown.get(InvestorType.PROP) is None
        assert [investor for investor, _ in breakdown.items()] == list(InvestorType)


class TestSectorRotationSignal:
    """Tests for SectorRotationSignal parsing."""

    def test_from_dict(self):
        sector = SectorRotationSignal.from_dict(
            {
                "pattern": "Risk-On Rotation",
                "concentration": 62,
                "focusSectors": ["Technology", "", None],
                "avoidSectors": ["Food"],
                "leadership": {
                    "leaders": [
                        {"sector": {"name": "Technology", "id": "TECH"}, "vsMarket": 1.5},
                        {"sector": "Property", "vsMarket": 0.5},
                    ],
                    "laggards": [],
                },
            }
        )

        assert sector.pattern == "Risk-On Rotation"
        assert sector.concentration == 62
        assert sector.focus_sectors == ("Technology",)
        assert sector.avoid_sectors == ("Food",)
        assert sector.leaders == (
            SectorPerformance(SectorRef("Technology", "TECH"), 1.5),
            SectorPerformance(SectorRef("Property"), 0.5),
        )
        assert sector.leadership.laggards == ()

    def test_concentration_nested_under_leadership(self):
        sector = SectorRotationSignal.from_dict({"pattern": "Sector-Specific", "leadership": {"concentration": 44}})
        assert sector.concentration == 44

    def test_sector_code_aliases(self):
        performance = SectorPerformance.from_dict({"sector": {"code": "BANK"}})
        assert performance.sector == SectorRef(name=None, id="BANK")

    def test_unnamed_leader_is_dropped(self):
        sector = SectorRotationSignal.from_dict(
            {"pattern": "Mixed/No Clear Pattern", "leadership": {"leaders": [{"sector": {}}, "Energy"]}}
        )
        assert sector.leaders == ()

    def test_missing_leadership(self):
        sector = SectorRotationSignal.from_dict({"pattern": "Broad-Based Advance"})
        assert sector.leaders is None
        assert sector.concentration is None
        assert sector.is_complete

    def test_string_focus_list_is_ignored(self):
        sector = SectorRotationSignal.from_dict({"pattern": "x", "focusSectors": "Technology"})
        assert sector.focus_sectors == ()


class TestDataInsightInput:
    """Tests for the combined input."""

    def test_complete_input(self, regime_smart_money_mismatch):
        signals = DataInsightInput.from_dict(regime_smart_money_mismatch)

        assert signals.is_complete
        assert signals.missing_inputs == []
        assert signals.regime.type == RegimeType.RISK_ON
        assert signals.smart_money.score == 25
        assert len(signals.sector.leaders) == 2

    def test_everything_missing(self):
        signals = DataInsightInput.from_dict({})
        assert signals.missing_inputs == ["regime", "smartMoney", "sector"]
        assert not signals.is_complete

    def test_structurally_incomplete_inputs(self):
        signals = DataInsightInput.from_dict(
            {"regime": {"confidence": 70}, "smartMoney": {"score": 50}, "sector": {"concentration": 40}}
        )
        assert signals.missing_inputs == ["regime", "sector"]

    def test_sector_rotation_alias(self):
        signals = DataInsightInput.from_dict({"sectorRotation": {"pattern": "Risk-Off Rotation"}})
        assert signals.sector.pattern == "Risk-Off Rotation"

    @pytest.mark.parametrize("payload", [None, "signals", 42, ["regime"]])
    def test_non_mapping_payload(self, payload):
        signals = DataInsightInput.from_dict(payload)
        assert signals == DataInsightInput()

    def test_parsing_does_not_mutate_payload(self, foreign_domestic_divergence):
        import copy

        before = copy.deepcopy(foreign_domestic_divergence)
        DataInsightInput.from_dict(foreign_domestic_divergence)
        assert foreign_domestic_divergence == before

    def test_frozen(self):
        signals = DataInsightInput()
        with pytest.raises(Exception):
            signals.regime = RegimeSignal(RegimeType.RISK_ON, 50.0)

    def test_nan_never_leaks(self):
        signals = DataInsightInput.from_dict({"smartMoney": {"score": float("nan")}})
        assert signals.smart_money.score is None or not math.isnan(signals.smart_money.score)
