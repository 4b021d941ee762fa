"""
Win context: the situational facts a scorer needs that are not part of
the hand itself.
"""

from dataclasses import dataclass, field
from typing import List

from .tiles import Tile, WindType, FlowerType


@dataclass
class WinContext:
    """
    Snapshot supplied by the game-flow layer when a win is checked or scored.

    Attributes:
        win_tile: The tile that completed the hand (drawn or claimed)
        is_tsumo: Self-drawn win; False for a claimed discard (ron)
        seat_wind: Winner's seat wind
        round_wind: Prevailing wind
        dora_indicators: Revealed dora indicators
        uradora_indicators: Ura-dora indicators, counted only for riichi wins
        is_riichi / is_double_riichi / is_ippatsu: Declared riichi state
        is_rinshan: Win on a replacement tile after a kong
        is_chankan: Win by robbing a kong
        is_haitei: Win on the last tile (self-draw) or last discard (ron)
        is_tenhou / is_chihou: Dealer / non-dealer win on the first draw
        flowers: Flower tiles the winner has set aside
        is_last_copy: Win tile is the last unseen copy of its kind
        honba: Counter sticks on the table
        riichi_sticks: Riichi deposits on the table
    """
    win_tile: Tile
    is_tsumo: bool = False
    seat_wind: WindType = WindType.EAST
    round_wind: WindType = WindType.EAST
    dora_indicators: List[Tile] = field(default_factory=list)
    uradora_indicators: List[Tile] = field(default_factory=list)
    is_riichi: bool = False
    is_double_riichi: bool = False
    is_ippatsu: bool = False
    is_rinshan: bool = False
    is_chankan: bool = False
    is_haitei: bool = False
    is_tenhou: bool = False
    is_chihou: bool = False
    flowers: List[FlowerType] = field(default_factory=list)
    is_last_copy: bool = False
    honba: int = 0
    riichi_sticks: int = 0

    @property
    def is_dealer(self) -> bool:
        return self.seat_wind == WindType.EAST

    @property
    def is_ron(self) -> bool:
        return not self.is_tsumo

    @property
    def seat_flowers(self) -> List[FlowerType]:
        """Flowers matching the winner's seat"""
        return [f for f in self.flowers if f.seat == self.seat_wind]

    def flower_count(self) -> int:
        return len(self.flowers)

    def describe(self) -> str:
        how = "tsumo" if self.is_tsumo else "ron"
        return f"{how} on {self.win_tile} (seat {self.seat_wind.name}, round {self.round_wind.name})"
