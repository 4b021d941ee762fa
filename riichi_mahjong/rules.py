"""
Riichi Mahjong Rule Configurations

Scoring-relevant differences between rule bodies:
- EMA (European Mahjong Association)
- Tenhou (Japanese online platform)
- WRC (World Riichi Championship)
"""

from dataclasses import dataclass


@dataclass
class RiichiRules:
    """
    Rule configuration for Riichi Mahjong scoring.

    Different organizations and platforms use slightly different rules.
    This class encapsulates those differences.
    """

    name: str = "Default"

    # Red dora (akadora): number of red 5s in the set (0, 3 or 4)
    red_fives: int = 0

    # Kuitan (open tanyao)
    allow_kuitan: bool = True

    # Round 4 han 30 fu and 3 han 60 fu up to mangan
    kiriage_mangan: bool = False

    # 13+ han counts as yakuman instead of sanbaiman
    kazoe_yakuman: bool = True

    # Daisuushii, suuankou tanki, kokushi 13-wait, pure nine gates score double
    allow_double_yakuman: bool = False

    # Several yakuman in one hand stack
    allow_yakuman_stacking: bool = True

    # Counter (honba) bonus, total per counter
    honba_value: int = 300

    # Riichi deposit value
    riichi_stick_value: int = 1000

    # Uradora counted on riichi wins
    uradora_on_riichi_win: bool = True

    # Minimum han from yaku (dora excluded) to declare a win
    min_han: int = 1

    def __repr__(self) -> str:
        return f"RiichiRules({self.name})"


# EMA (European Mahjong Association) Rules
EMA_RULES = RiichiRules(
    name="EMA",
    red_fives=0,  # No red dora in EMA
    allow_kuitan=True,
    kiriage_mangan=False,
    kazoe_yakuman=False,
    allow_double_yakuman=False,
    allow_yakuman_stacking=True,
    honba_value=300,
    riichi_stick_value=1000,
    uradora_on_riichi_win=True,
    min_han=1,
)


# Tenhou Rules (Japanese online platform)
TENHOU_RULES = RiichiRules(
    name="Tenhou",
    red_fives=3,  # One red 5 in each suit
    allow_kuitan=True,
    kiriage_mangan=False,
    kazoe_yakuman=True,
    allow_double_yakuman=False,
    allow_yakuman_stacking=True,
    honba_value=300,
    riichi_stick_value=1000,
    uradora_on_riichi_win=True,
    min_han=1,
)


# WRC (World Riichi Championship) Rules
WRC_RULES = RiichiRules(
    name="WRC",
    red_fives=0,
    allow_kuitan=True,
    kiriage_mangan=True,
    kazoe_yakuman=False,
    allow_double_yakuman=False,
    allow_yakuman_stacking=True,
    honba_value=300,
    riichi_stick_value=1000,
    uradora_on_riichi_win=True,
    min_han=1,
)
