"""Test configuration helpers and signal fixtures."""

import sys
from pathlib import Path
from typing import Any, Dict

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

if SRC.exists() and str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


def _flow(today_net: float, strength: str) -> Dict[str, Any]:
    return {"todayNet": today_net, "strength": strength}


@pytest.fixture
def regime_smart_money_mismatch() -> Dict[str, Any]:
    """Risk-On regime while smart money is selling, defensive leaders."""
    return {
        "regime": {"type": "Risk-On", "confidence": 80, "focus": "Growth", "caution": "Leverage"},
        "smartMoney": {"score": 25, "combinedSignal": "Sell", "riskSignal": "Risk-Off", "confidence": 60},
        "sector": {
            "pattern": "Risk-Off Rotation",
            "concentration": 55,
            "focusSectors": ["Energy", "Banking"],
            "avoidSectors": ["Technology", "Property", "Transport"],
            "leadership": {
                "leaders": [
                    {"sector": {"name": "Energy", "id": "ENERG"}, "vsMarket": 1.2},
                    {"sector": "Bank", "vsMarket": 0.8},
                ],
                "laggards": [{"sector": {"name": "Technology", "id": "TECH"}, "vsMarket": -1.5}],
            },
        },
    }


@pytest.fixture
def foreign_domestic_divergence() -> Dict[str, Any]:
    """Foreign strong buying into strong retail selling."""
    return {
        "regime": {"type": "Risk-On", "confidence": 65},
        "smartMoney": {
            "score": 55,
            "combinedSignal": "Buy",
            "confidence": 70,
            "investors": {
                "foreign": _flow(1500, "Strong Buy"),
                "institution": _flow(0, "Neutral"),
                "retail": _flow(-1200, "Strong Sell"),
                "prop": _flow(50, "Neutral"),
            },
        },
        "sector": {
            "pattern": "Risk-On Rotation",
            "concentration": 50,
            "focusSectors": ["Technology"],
            "avoidSectors": ["Banking"],
            "leadership": {
                "leaders": [
                    {"sector": {"name": "Technology", "id": "TECH"}, "vsMarket": 2.1},
                    {"sector": {"name": "Property", "id": "PROP"}, "vsMarket": 1.0},
                ]
            },
        },
    }


@pytest.fixture
def prop_trading_noise() -> Dict[str, Any]:
    """Prop desks account for 55% of absolute flow."""
    return {
        "regime": {"type": "Risk-On", "confidence": 70},
        "smartMoney": {
            "score": 65,
            "combinedSignal": "Buy",
            "confidence": 60,
            "investors": {
                "foreign": _flow(-200, "Sell"),
                "institution": _flow(100, "Buy"),
                "retail": _flow(150, "Buy"),
                "prop": _flow(550, "Strong Buy"),
            },
        },
        "sector": {
            "pattern": "Risk-On Rotation",
            "concentration": 60,
            "leadership": {"leaders": [{"sector": {"name": "Technology", "id": "TECH"}, "vsMarket": 1.4}]},
        },
    }


@pytest.fixture
def all_neutral() -> Dict[str, Any]:
    """Neutral regime, neutral flows, no sector pattern."""
    return {
        "regime": {"type": "Neutral", "confidence": 55},
        "smartMoney": {
            "score": 50,
            "combinedSignal": "Neutral",
            "confidence": 50,
            "investors": {
                "foreign": _flow(0, "Neutral"),
                "institution": _flow(0, "Neutral"),
                "retail": _flow(0, "Neutral"),
                "prop": _flow(0, "Neutral"),
            },
        },
        "sector": {
            "pattern": "Mixed/No Clear Pattern",
            "concentration": 30,
            "leadership": {"leaders": [{"sector": {"name": "Technology", "id": "TECH"}, "vsMarket": 0.1}]},
        },
    }


@pytest.fixture
def broad_risk_on() -> Dict[str, Any]:
    """Every signal agrees on risk-on."""
    return {
        "regime": {"type": "Risk-On", "confidence": 85},
        "smartMoney": {
            "score": 72,
            "combinedSignal": "Strong Buy",
            "confidence": 80,
            "investors": {
                "foreign": _flow(800, "Buy"),
                "institution": _flow(300, "Buy"),
                "retail": _flow(-900, "Sell"),
                "prop": _flow(-200, "Neutral"),
            },
        },
        "sector": {
            "pattern": "Risk-On Rotation",
            "concentration": 70,
            "focusSectors": ["Technology", "Property", "Industrials", "Transport"],
            "avoidSectors": ["Food"],
            "leadership": {
                "leaders": [
                    {"sector": {"name": "Technology", "id": "TECH"}, "vsMarket": 2.5},
                    {"sector": {"name": "Industrials", "id": "INDUS"}, "vsMarket": 1.8},
                ]
            },
        },
    }
