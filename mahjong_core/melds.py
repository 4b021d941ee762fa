"""
Meld Model

Runs, triplets and quads, either declared through a call or found
inside the concealed hand by the decomposer.
"""

from enum import IntEnum
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple
import numpy as np

from .errors import MalformedMeld
from .tiles import Tile, TileSet, NUMBERED_SUITS


class MeldType(IntEnum):
    """Types of melds (combinations) a player can have"""
    CHOW = 0      # 顺子 - Sequence of 3 consecutive tiles in same suit
    PONG = 1      # 刻子 - 3 identical tiles
    KONG = 2      # 杠 - 4 identical tiles (exposed)
    CONCEALED_KONG = 3  # 暗杠 - 4 identical tiles (concealed)


@dataclass
class Meld:
    """
    Represents a meld (combination) of tiles.

    Attributes:
        meld_type: Type of meld (Chow, Pong, Kong, Concealed Kong)
        tiles: List of tiles in the meld
        is_concealed: Whether the meld is concealed (hidden from other players)
        source_player: Index of player the tile was claimed from (for Chow/Pong/Kong)
        source_tile: The tile that was claimed to form this meld
        declared: False for groups the decomposer carved out of concealed tiles
    """
    meld_type: MeldType
    tiles: List[Tile]
    is_concealed: bool = False
    source_player: Optional[int] = None
    source_tile: Optional[Tile] = None
    declared: bool = True

    def __post_init__(self):
        self.tiles = list(self.tiles)
        if self.meld_type == MeldType.CONCEALED_KONG:
            self.is_concealed = True
        self.validate()

    def validate(self) -> None:
        """Raise MalformedMeld unless the tiles match the meld type"""
        if self.meld_type == MeldType.CHOW:
            if len(self.tiles) != 3:
                raise MalformedMeld("Chow must have exactly 3 tiles")
            if not _is_sequence(self.tiles):
                raise MalformedMeld(f"Invalid Chow sequence: {self._tiles_str()}")
        elif self.meld_type == MeldType.PONG:
            if len(self.tiles) != 3:
                raise MalformedMeld("Pong must have exactly 3 tiles")
            if not all(t == self.tiles[0] for t in self.tiles):
                raise MalformedMeld(f"Pong tiles must be identical: {self._tiles_str()}")
        elif self.meld_type in (MeldType.KONG, MeldType.CONCEALED_KONG):
            if len(self.tiles) != 4:
                raise MalformedMeld("Kong must have exactly 4 tiles")
            if not all(t == self.tiles[0] for t in self.tiles):
                raise MalformedMeld(f"Kong tiles must be identical: {self._tiles_str()}")
        if self.source_tile is not None and self.source_tile not in self.tiles:
            raise MalformedMeld(f"Claimed tile {self.source_tile} is not part of the meld")

    @classmethod
    def from_tiles(
        cls,
        tiles: Sequence[Tile],
        is_concealed: bool = False,
        **kwargs,
    ) -> 'Meld':
        """
        Classify a group of tiles into a meld.

        Four identical tiles become a KONG, or a CONCEALED_KONG when
        is_concealed is set.
        """
        meld_type = classify_tiles(tiles)
        if meld_type == MeldType.KONG and is_concealed:
            meld_type = MeldType.CONCEALED_KONG
        return cls(meld_type, list(tiles), is_concealed=is_concealed, **kwargs)

    @classmethod
    def chow(cls, first: Tile, **kwargs) -> 'Meld':
        """Run starting at first"""
        tiles = [Tile(first.suit, first.value + i) for i in range(3)]
        return cls(MeldType.CHOW, tiles, **kwargs)

    @classmethod
    def pong(cls, tile: Tile, **kwargs) -> 'Meld':
        return cls(MeldType.PONG, [tile] * 3, **kwargs)

    @classmethod
    def kong(cls, tile: Tile, concealed: bool = False, **kwargs) -> 'Meld':
        meld_type = MeldType.CONCEALED_KONG if concealed else MeldType.KONG
        return cls(meld_type, [tile] * 4, **kwargs)

    @property
    def base_tile(self) -> Tile:
        """Lowest tile of a run, or the repeated tile"""
        if self.meld_type == MeldType.CHOW:
            return min(self.tiles)
        return self.tiles[0]

    @property
    def is_chow(self) -> bool:
        return self.meld_type == MeldType.CHOW

    @property
    def is_pong_or_kong(self) -> bool:
        return self.meld_type != MeldType.CHOW

    @property
    def is_kong(self) -> bool:
        return self.meld_type in (MeldType.KONG, MeldType.CONCEALED_KONG)

    @property
    def is_open(self) -> bool:
        return not self.is_concealed

    @property
    def key(self) -> Tuple[int, int, bool]:
        """Hashable identity used to compare decompositions"""
        return (int(self.meld_type), self.base_tile.tile_index, self.is_concealed)

    def to_count_array(self) -> np.ndarray:
        """Convert meld to 34-element count array"""
        counts = np.zeros(TileSet.NUM_TILE_TYPES, dtype=np.int8)
        for tile in self.tiles:
            counts[tile.tile_index] += 1
        return counts

    def _tiles_str(self) -> str:
        return " ".join(str(t) for t in sorted(self.tiles))

    def __repr__(self) -> str:
        return f"Meld({self.meld_type.name}, {self.tiles})"

    def __str__(self) -> str:
        concealed = "暗" if self.is_concealed else "明"
        return f"[{concealed}{self.meld_type.name}: {self._tiles_str()}]"


def _is_sequence(tiles: Sequence[Tile]) -> bool:
    if len(tiles) != 3:
        return False
    if tiles[0].suit not in NUMBERED_SUITS:
        return False
    if not all(t.suit == tiles[0].suit for t in tiles):
        return False
    values = sorted(t.value for t in tiles)
    return values[1] == values[0] + 1 and values[2] == values[1] + 1


def classify_tiles(tiles: Sequence[Tile]) -> MeldType:
    """
    Work out which meld type a group of tiles forms.

    Raises:
        MalformedMeld: the tiles are not a run, triplet or quad
    """
    if len(tiles) == 3:
        if all(t == tiles[0] for t in tiles):
            return MeldType.PONG
        if _is_sequence(tiles):
            return MeldType.CHOW
    elif len(tiles) == 4 and all(t == tiles[0] for t in tiles):
        return MeldType.KONG
    raise MalformedMeld(f"Tiles do not form a meld: {' '.join(str(t) for t in tiles)}")
