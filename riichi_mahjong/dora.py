"""
Dora System for Riichi Mahjong

Handles all dora-related counting:
- Regular dora (from indicators)
- Uradora (under-dora, counted for riichi wins)
- Akadora (red fives)
"""

from dataclasses import dataclass, field
from typing import List, Iterable

from mahjong_core.context import WinContext
from mahjong_core.tiles import Tile, TileSet, TileSuit, NUMBERED_SUITS


def get_dora_tile(indicator: Tile) -> Tile:
    """
    Get the actual dora tile from an indicator.

    The dora is the next tile in sequence:
    - Numbers: 1->2->...->9->1
    - Winds: E->S->W->N->E
    - Dragons: White->Green->Red->White
    """
    if indicator.suit in NUMBERED_SUITS:
        return Tile(indicator.suit, indicator.value % 9 + 1)
    elif indicator.suit == TileSuit.WINDS:
        return Tile(TileSuit.WINDS, (indicator.value + 1) % 4)
    else:
        return Tile(TileSuit.DRAGONS, (indicator.value + 2) % 3)


@dataclass
class DoraSystem:
    """
    Dora add han to a winning hand without being yaku themselves.

    Attributes:
        dora_indicators: Revealed indicators (initial plus kandora)
        uradora_indicators: Indicators under the dora, only for riichi wins
        red_fives_enabled: Whether red five instances count as dora
    """

    dora_indicators: List[Tile] = field(default_factory=list)
    uradora_indicators: List[Tile] = field(default_factory=list)
    red_fives_enabled: bool = False

    @classmethod
    def from_context(cls, context: WinContext, red_fives: int = 0) -> 'DoraSystem':
        return cls(
            dora_indicators=list(context.dora_indicators),
            uradora_indicators=list(context.uradora_indicators),
            red_fives_enabled=red_fives > 0,
        )

    def get_all_dora_tiles(self) -> List[Tile]:
        return [get_dora_tile(ind) for ind in self.dora_indicators]

    def get_all_uradora_tiles(self) -> List[Tile]:
        return [get_dora_tile(ind) for ind in self.uradora_indicators]

    def count_dora(self, tiles: Iterable[Tile]) -> int:
        """Regular dora in tiles; an indicator listed twice counts twice"""
        dora_tiles = self.get_all_dora_tiles()
        return sum(1 for tile in tiles for dora in dora_tiles if tile == dora)

    def count_uradora(self, tiles: Iterable[Tile]) -> int:
        uradora_tiles = self.get_all_uradora_tiles()
        return sum(1 for tile in tiles for ura in uradora_tiles if tile == ura)

    def count_akadora(self, tiles: Iterable[Tile]) -> int:
        if not self.red_fives_enabled:
            return 0
        return TileSet(tiles).count_red()

    def __repr__(self) -> str:
        dora_str = ", ".join(str(t) for t in self.get_all_dora_tiles())
        return f"DoraSystem(dora=[{dora_str}], red_fives={self.red_fives_enabled})"
