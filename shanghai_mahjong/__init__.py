"""
Shanghai Mahjong Scoring
Regional fan table with a fan cap and fixed payments
"""

from mahjong_core.rules import register_ruleset

from .scoring import ShanghaiRuleSet, ShanghaiScorer, FanPattern
from .rules import ShanghaiRules, SHANGHAI_RULES, SHANGHAI_TWO_FAN_RULES

register_ruleset(ShanghaiRuleSet())

__version__ = "0.2.0"
__all__ = [
    "ShanghaiRuleSet",
    "ShanghaiScorer",
    "FanPattern",
    "ShanghaiRules",
    "SHANGHAI_RULES",
    "SHANGHAI_TWO_FAN_RULES",
]
