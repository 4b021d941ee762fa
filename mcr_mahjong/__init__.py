"""
MCR Mahjong Scoring
Chinese Official Mahjong (Mahjong Competition Rules)
"""

from mahjong_core.rules import register_ruleset

from .scoring import MCRRuleSet, MCRScorer, MCRView, ScoringPattern
from .rules import MCRRules, MCR_RULES, MCR_TRAINING_RULES

register_ruleset(MCRRuleSet())

__version__ = "0.2.0"
__all__ = [
    "MCRRuleSet",
    "MCRScorer",
    "MCRView",
    "ScoringPattern",
    "MCRRules",
    "MCR_RULES",
    "MCR_TRAINING_RULES",
]
