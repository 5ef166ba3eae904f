"""
Unit tests for conflict detection.

Tests each heuristic, null-safety and the aggregate conflict level.
"""

import copy
import logging

import pytest

from datainsight.domain.models.insight import ConflictLevel, ConflictSeverity, ConflictType, SignalSource
from datainsight.domain.models.signals import DataInsightInput
from datainsight.domain.services.conflict_detector import (
    BankSectorDefensiveCheck,
    ConflictDetector,
    ForeignDomesticCheck,
    PropTradingNoiseCheck,
    RegimeSectorCheck,
    RegimeSmartMoneyCheck,
    SmartMoneyContradictionCheck,
    detect_conflicts,
)
from datainsight.domain.services.signal_thresholds import ConflictThresholds


def flows(foreign=None, institution=None, retail=None, prop=None):
    investors = {}
    for name, flow in (("foreign", foreign), ("institution", institution), ("retail", retail), ("prop", prop)):
        if flow is not None:
            investors[name] = {"todayNet": flow[0], "strength": flow[1]}
    return {"score": 50, "combinedSignal": "Neutral", "confidence": 50, "investors": investors}


def leaders(*names):
    return {"pattern": "Sector-Specific", "concentration": 50, "leadership": {"leaders": [{"sector": n} for n in names]}}


class TestScenarios:
    """End-to-end detection over representative market days."""

    def test_regime_smart_money_mismatch(self, regime_smart_money_mismatch):
        result = detect_conflicts(regime_smart_money_mismatch)

        types = [c.conflict_type for c in result.conflicts]
        assert types == [ConflictType.REGIME_SMART_MONEY_MISMATCH, ConflictType.REGIME_SECTOR_MISMATCH]
        assert result.conflicts[0].severity == ConflictSeverity.HIGH
        assert result.conflicts[1].severity == ConflictSeverity.MEDIUM
        assert result.has_critical_conflict is True
        assert result.conflict_level == ConflictLevel.HIGH

    def test_foreign_domestic_divergence(self, foreign_domestic_divergence):
        result = detect_conflicts(foreign_domestic_divergence)

        assert len(result.conflicts) == 1
        conflict = result.conflicts[0]
        assert conflict.conflict_type == ConflictType.FOREIGN_DOMESTIC_DIVERGENCE
        assert conflict.severity == ConflictSeverity.HIGH
        assert conflict.signals == (SignalSource.FOREIGN, SignalSource.DOMESTIC)
        assert conflict.description == "Foreign investors are Strong Buy while retail is Strong Sell"
        assert conflict.data["domestic_type"] == "retail"
        assert conflict.data["direction"] == "foreign_buying"

    def test_prop_trading_noise(self, prop_trading_noise):
        result = detect_conflicts(prop_trading_noise)

        assert [c.conflict_type for c in result.conflicts] == [ConflictType.HIGH_PROP_TRADING_NOISE]
        conflict = result.conflicts[0]
        assert conflict.severity == ConflictSeverity.HIGH
        assert conflict.data["prop_share_pct"] == pytest.approx(55.0)
        assert conflict.description == "Prop trading accounts for 55.0% of total flow"

    def test_prop_noise_ignores_flow_signs(self, prop_trading_noise):
        investors = prop_trading_noise["smartMoney"]["investors"]
        for flow in investors.values():
            flow["todayNet"] = -flow["todayNet"]

        result = detect_conflicts(prop_trading_noise)

        assert result.has_type(ConflictType.HIGH_PROP_TRADING_NOISE)

    def test_all_neutral(self, all_neutral):
        result = detect_conflicts(all_neutral)

        assert result.conflicts == ()
        assert result.conflict_level == ConflictLevel.NONE
        assert result.has_critical_conflict is False

    def test_everything_missing(self):
        result = detect_conflicts({})

        assert result.conflicts == ()
        assert result.conflict_level == ConflictLevel.NONE


class TestRegimeSmartMoneyCheck:
    """Tests for regime vs smart money score."""

    @pytest.fixture
    def check(self):
        return RegimeSmartMoneyCheck()

    def test_risk_off_with_high_score(self, check):
        signals = DataInsightInput.from_dict({"regime": {"type": "Risk-Off", "confidence": 70}, "smartMoney": {"score": 72}})

        conflict = check.detect(signals, ConflictThresholds())

        assert conflict.severity == ConflictSeverity.MEDIUM
        assert conflict.data["direction"] == "risk_off_high_score"
        assert conflict.description == "Market regime is Risk-Off but smart money score is high (72.00/100)"
        assert conflict.impact == "Smart money may be detecting bottoming opportunity"

    @pytest.mark.parametrize("score", [40, 50, 60])
    def test_boundaries_do_not_fire(self, check, score):
        for regime in ("Risk-On", "Risk-Off"):
            signals = DataInsightInput.from_dict({"regime": {"type": regime}, "smartMoney": {"score": score}})
            assert check.detect(signals, ConflictThresholds()) is None

    def test_neutral_regime_never_fires(self, check):
        signals = DataInsightInput.from_dict({"regime": {"type": "Neutral"}, "smartMoney": {"score": 5}})
        assert check.detect(signals, ConflictThresholds()) is None

    def test_missing_score(self, check):
        signals = DataInsightInput.from_dict({"regime": {"type": "Risk-On"}, "smartMoney": {"combinedSignal": "Sell"}})
        assert check.detect(signals, ConflictThresholds()) is None


class TestRegimeSectorCheck:
    """Tests for regime vs defensive leadership."""

    @pytest.fixture
    def check(self):
        return RegimeSectorCheck()

    def test_risk_off_defensive_leadership(self, check):
        signals = DataInsightInput.from_dict(
            {"regime": {"type": "Risk-Off"}, "sector": leaders("Food & Beverage", "Health Care", "Technology")}
        )

        conflict = check.detect(signals, ConflictThresholds())

        assert conflict.conflict_type == ConflictType.DEFENSIVE_SECTOR_LEADERSHIP
        assert conflict.severity == ConflictSeverity.MEDIUM
        assert conflict.data["defensive_leaders"] == ["Food & Beverage", "Health Care"]

    def test_risk_on_defensive_leadership(self, check):
        signals = DataInsightInput.from_dict({"regime": {"type": "Risk-On"}, "sector": leaders("Energy", "Bank")})

        conflict = check.detect(signals, ConflictThresholds())

        assert conflict.conflict_type == ConflictType.REGIME_SECTOR_MISMATCH
        assert conflict.description == "Regime is Risk-On but defensive sectors are leading (Energy, Bank)"

    def test_minority_defensive_does_not_fire(self, check):
        signals = DataInsightInput.from_dict(
            {"regime": {"type": "Risk-On"}, "sector": leaders("Energy", "Technology", "Property")}
        )
        assert check.detect(signals, ConflictThresholds()) is None

    def test_neutral_regime(self, check):
        signals = DataInsightInput.from_dict({"regime": {"type": "Neutral"}, "sector": leaders("Energy", "Bank")})
        assert check.detect(signals, ConflictThresholds()) is None

    def test_no_leaders(self, check):
        signals = DataInsightInput.from_dict({"regime": {"type": "Risk-On"}, "sector": {"pattern": "x"}})
        assert check.detect(signals, ConflictThresholds()) is None


class TestForeignDomesticCheck:
    """Tests for foreign vs domestic divergence."""

    @pytest.fixture
    def check(self):
        return ForeignDomesticCheck()

    def test_foreign_selling_prop_buying(self, check):
        signals = DataInsightInput.from_dict(
            {
                "smartMoney": flows(
                    foreign=(-900, "Strong Sell"),
                    retail=(100, "Buy"),
                    prop=(700, "Strong Buy"),
                )
            }
        )

        conflict = check.detect(signals, ConflictThresholds())

        assert conflict.severity == ConflictSeverity.MEDIUM
        assert conflict.data["domestic_type"] == "prop"
        assert conflict.description == "Foreign investors are Strong Sell while prop is Strong Buy"
        assert "contrarian" in conflict.impact

    def test_plain_buy_is_not_strong(self, check):
        signals = DataInsightInput.from_dict(
            {"smartMoney": flows(foreign=(500, "Buy"), retail=(-500, "Strong Sell"), prop=(0, "Neutral"))}
        )
        assert check.detect(signals, ConflictThresholds()) is None

    def test_missing_prop(self, check):
        signals = DataInsightInput.from_dict(
            {"smartMoney": flows(foreign=(1500, "Strong Buy"), retail=(-1200, "Strong Sell"))}
        )
        assert check.detect(signals, ConflictThresholds()) is None


class TestPropTradingNoiseCheck:
    """Tests for prop trading noise."""

    @pytest.fixture
    def check(self):
        return PropTradingNoiseCheck()

    def test_exactly_at_threshold_does_not_fire(self, check):
        signals = DataInsightInput.from_dict(
            {
                "smartMoney": flows(
                    foreign=(300, "Buy"), institution=(100, "Buy"), retail=(200, "Buy"), prop=(400, "Buy")
                )
            }
        )
        assert check.detect(signals, ConflictThresholds()) is None

    def test_zero_total_flow(self, check):
        signals = DataInsightInput.from_dict(
            {"smartMoney": flows(foreign=(0, "Neutral"), institution=(0, "Neutral"), retail=(0, "Neutral"), prop=(0, "Neutral"))}
        )
        assert check.detect(signals, ConflictThresholds()) is None

    def test_missing_class_skips(self, check):
        signals = DataInsightInput.from_dict(
            {"smartMoney": flows(foreign=(10, "Buy"), retail=(10, "Buy"), prop=(900, "Strong Buy"))}
        )
        assert check.detect(signals, ConflictThresholds()) is None

    def test_custom_threshold(self, prop_trading_noise):
        result = detect_conflicts(prop_trading_noise, ConflictThresholds(prop_noise_threshold_pct=60.0))
        assert not result.has_type(ConflictType.HIGH_PROP_TRADING_NOISE)


class TestBankSectorDefensiveCheck:
    """Tests for bank leadership in a cautious regime."""

    @pytest.fixture
    def check(self):
        return BankSectorDefensiveCheck()

    def bank_leading(self, regime_type, confidence):
        return DataInsightInput.from_dict(
            {
                "regime": {"type": regime_type, "confidence": confidence},
                "sector": {
                    "pattern": "Sector-Specific",
                    "leadership": {"leaders": [{"sector": {"name": "Banking", "id": "BANK"}}]},
                },
            }
        )

    def test_low_confidence_neutral(self, check):
        conflict = check.detect(self.bank_leading("Neutral", 50), ConflictThresholds())

        assert conflict.conflict_type == ConflictType.BANK_SECTOR_DEFENSIVE
        assert conflict.severity == ConflictSeverity.MEDIUM
        assert conflict.data["bank_leaders"] == ["Banking"]

    def test_risk_off_fires_at_any_confidence(self, check):
        assert check.detect(self.bank_leading("Risk-Off", 95), ConflictThresholds()) is not None

    def test_confident_risk_on(self, check):
        assert check.detect(self.bank_leading("Risk-On", 75), ConflictThresholds()) is None

    def test_missing_confidence(self, check):
        assert check.detect(self.bank_leading("Neutral", None), ConflictThresholds()) is None

    def test_low_confidence_label(self, check):
        conflict = check.detect(self.bank_leading("Risk-On", "Low"), ConflictThresholds())

        assert conflict.conflict_type == ConflictType.BANK_SECTOR_DEFENSIVE
        assert conflict.severity == ConflictSeverity.MEDIUM

    def test_high_confidence_label(self, check):
        assert check.detect(self.bank_leading("Risk-On", "High"), ConflictThresholds()) is None

    def test_low_label_reaches_detect_conflicts(self):
        payload = {
            "regime": {"regime": "Risk-On", "confidence": "Low"},
            "smartMoney": {"score": 50},
            "sector": {
                "pattern": "Sector-Specific",
                "leadership": {"leaders": [{"sector": {"name": "Banking", "id": "BANK"}}]},
            },
        }

        result = detect_conflicts(payload)

        assert result.has_type(ConflictType.BANK_SECTOR_DEFENSIVE)


class TestSmartMoneyContradictionCheck:
    """Tests for foreign vs institution contradiction."""

    @pytest.fixture
    def check(self):
        return SmartMoneyContradictionCheck()

    def test_opposed_strong_flows(self, check):
        signals = DataInsightInput.from_dict(
            {"smartMoney": flows(foreign=(1000, "Strong Buy"), institution=(-800, "Strong Sell"))}
        )

        conflict = check.detect(signals, ConflictThresholds())

        assert conflict.conflict_type == ConflictType.SMART_MONEY_CONTRADICTION
        assert conflict.severity == ConflictSeverity.MEDIUM
        assert conflict.data["spread"] == 6
        assert conflict.description == "Foreign is Strong Buy but Institution is Strong Sell"

    def test_weak_opposition(self, check):
        signals = DataInsightInput.from_dict({"smartMoney": flows(foreign=(100, "Buy"), institution=(-100, "Sell"))})
        assert check.detect(signals, ConflictThresholds()) is None


class TestConflictDetector:
    """Tests for the orchestrator."""

    def test_default_check_order(self):
        detector = ConflictDetector()
        assert [type(c) for c in detector.checks] == [
            RegimeSmartMoneyCheck,
            RegimeSectorCheck,
            ForeignDomesticCheck,
            PropTradingNoiseCheck,
            BankSectorDefensiveCheck,
            SmartMoneyContradictionCheck,
        ]

    def test_failing_check_is_isolated(self, regime_smart_money_mismatch, caplog):
        class BrokenCheck:
            def detect(self, signals, thresholds):
                raise RuntimeError("boom")

        detector = ConflictDetector(checks=[BrokenCheck(), RegimeSmartMoneyCheck()])

        with caplog.at_level(logging.WARNING):
            result = detector.detect(DataInsightInput.from_dict(regime_smart_money_mismatch))

        assert [c.conflict_type for c in result.conflicts] == [ConflictType.REGIME_SMART_MONEY_MISMATCH]
        assert "BrokenCheck failed: boom" in caplog.text

    @pytest.mark.parametrize(
        "payload",
        [
            {"regime": "Risk-On", "smartMoney": [1, 2], "sector": 7},
            {"regime": {"type": None}, "smartMoney": {"investors": {"foreign": "Strong Buy"}}},
            {"sector": {"leadership": {"leaders": "Energy"}}},
        ],
    )
    def test_malformed_input_never_raises(self, payload):
        result = detect_conflicts(payload)
        assert result.conflict_level == ConflictLevel.NONE

    def test_detection_is_pure(self, regime_smart_money_mismatch):
        before = copy.deepcopy(regime_smart_money_mismatch)

        first = detect_conflicts(regime_smart_money_mismatch)
        second = detect_conflicts(regime_smart_money_mismatch)

        assert regime_smart_money_mismatch == before
        assert first == second

    def test_level_invariants(
        self, regime_smart_money_mismatch, foreign_domestic_divergence, prop_trading_noise, all_neutral
    ):
        for payload in (regime_smart_money_mismatch, foreign_domestic_divergence, prop_trading_noise, all_neutral):
            result = detect_conflicts(payload)
            has_high = any(c.severity == ConflictSeverity.HIGH for c in result.conflicts)
            assert result.has_critical_conflict == has_high
            assert (result.conflict_level == ConflictLevel.HIGH) == has_high
            assert (result.conflict_level == ConflictLevel.NONE) == (len(result.conflicts) == 0)
