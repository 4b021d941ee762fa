"""
Mahjong hand engine
Shape search, tile efficiency and the rule-set interface shared by the
riichi_mahjong, mcr_mahjong and shanghai_mahjong variant packages.
"""

from .tiles import (
    Tile, TileSuit, TileSet, WindType, DragonType, FlowerType,
    parse_tiles, format_tiles,
)
from .melds import Meld, MeldType
from .hand import HandState
from .errors import (
    MahjongError, InvalidHandSize, TileSupplyExceeded, MalformedMeld, UnsupportedShape,
    WinTileNotHeld,
)
from .decomposer import (
    Decomposer, ShapeRules, HandShape, ShantenResult, WinDecomposition,
    classify, enumerate_win_decompositions,
)
from .efficiency import EfficiencyAnalyzer, DiscardOption, analyze, useful_tiles, rank_discards
from .context import WinContext
from .rules import (
    RuleSet, Variant, ScoreResult, PatternMatch, WinAccepted,
    IllegalWinDeclaration, RejectionReason, get_ruleset, register_ruleset,
)

__version__ = "0.2.0"
__all__ = [
    "Tile",
    "TileSuit",
    "TileSet",
    "WindType",
    "DragonType",
    "FlowerType",
    "parse_tiles",
    "format_tiles",
    "Meld",
    "MeldType",
    "HandState",
    "MahjongError",
    "InvalidHandSize",
    "TileSupplyExceeded",
    "MalformedMeld",
    "UnsupportedShape",
    "WinTileNotHeld",
    "Decomposer",
    "ShapeRules",
    "HandShape",
    "ShantenResult",
    "WinDecomposition",
    "classify",
    "enumerate_win_decompositions",
    "EfficiencyAnalyzer",
    "DiscardOption",
    "analyze",
    "useful_tiles",
    "rank_discards",
    "WinContext",
    "RuleSet",
    "Variant",
    "ScoreResult",
    "PatternMatch",
    "WinAccepted",
    "IllegalWinDeclaration",
    "RejectionReason",
    "get_ruleset",
    "register_ruleset",
]
