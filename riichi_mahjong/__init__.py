"""
Riichi Mahjong Scoring
Japanese Mahjong with support for EMA, Tenhou and WRC rules
"""

from mahjong_core.rules import register_ruleset

from .scoring import RiichiRuleSet, calculate_fu
from .yaku import Yaku, YakuType, YakuChecker
from .dora import DoraSystem, get_dora_tile
from .rules import RiichiRules, EMA_RULES, TENHOU_RULES, WRC_RULES

register_ruleset(RiichiRuleSet())

__version__ = "0.2.0"
__all__ = [
    "RiichiRuleSet",
    "calculate_fu",
    "Yaku",
    "YakuType",
    "YakuChecker",
    "DoraSystem",
    "get_dora_tile",
    "RiichiRules",
    "EMA_RULES",
    "TENHOU_RULES",
    "WRC_RULES",
]
