"""
Hand State

One player's concealed tiles plus declared melds. The engine only reads
hands; the caller owns mutation through add_tile/remove_tile/declare_meld.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Iterable
import numpy as np

from .errors import InvalidHandSize, TileSupplyExceeded, MalformedMeld
from .melds import Meld
from .tiles import Tile, TileSet, parse_tiles

logger = logging.getLogger(__name__)

WAITING_SIZE = 13
COMPLETE_SIZE = 14


@dataclass
class HandState:
    """
    Attributes:
        concealed: Tiles in the player's hand (concealed)
        melds: Declared melds in call order
    """
    concealed: TileSet = field(default_factory=TileSet)
    melds: List[Meld] = field(default_factory=list)

    def add_tile(self, tile: Tile) -> None:
        """Add a drawn or claimed tile to the concealed hand"""
        self.concealed.add(tile)

    def remove_tile(self, tile: Tile) -> bool:
        """
        Remove one copy of a tile from the concealed hand.
        Returns True if removed, False if not held.
        """
        return self.concealed.remove(tile)

    def declare_meld(self, meld: Meld, from_hand: Optional[List[Tile]] = None) -> None:
        """
        Record a declared meld.

        Args:
            meld: The meld being declared
            from_hand: Tiles to take out of the concealed hand for it.
                Defaults to every tile of the meld except source_tile.

        Raises:
            MalformedMeld: the concealed hand does not hold the tiles
        """
        if from_hand is None:
            from_hand = list(meld.tiles)
            if meld.source_tile is not None:
                from_hand.remove(meld.source_tile)
        for tile in from_hand:
            if self.concealed.count(tile) < from_hand.count(tile):
                raise MalformedMeld(f"Cannot declare {meld}: {tile} not held")
        for tile in from_hand:
            self.concealed.remove(tile)
        self.melds.append(meld)
        logger.debug(f"Declared {meld}, {len(self.concealed)} concealed tiles left")

    @property
    def tile_count(self) -> int:
        """Hand size for shape accounting; a kong counts as three"""
        return len(self.concealed) + 3 * len(self.melds)

    @property
    def is_menzen(self) -> bool:
        """No open melds (concealed kongs are allowed)"""
        return all(m.is_concealed for m in self.melds)

    @property
    def all_tiles(self) -> List[Tile]:
        """Concealed tiles plus every tile in declared melds (kongs give four)"""
        tiles = list(self.concealed)
        for meld in self.melds:
            tiles.extend(meld.tiles)
        return tiles

    def to_count_array(self) -> np.ndarray:
        """34-element count of concealed tiles only"""
        return self.concealed.to_count_array()

    def declared_count_array(self) -> np.ndarray:
        """34-element count of the tiles in declared melds"""
        counts = np.zeros(TileSet.NUM_TILE_TYPES, dtype=np.int8)
        for meld in self.melds:
            counts += meld.to_count_array()
        return counts

    def total_count_array(self) -> np.ndarray:
        """34-element count of concealed and melded tiles"""
        return self.concealed.to_count_array() + self.declared_count_array()

    def with_tile(self, tile: Tile) -> 'HandState':
        """Copy of this hand with one more concealed tile"""
        hand = self.copy()
        hand.add_tile(tile)
        return hand

    def without_tile(self, tile: Tile) -> 'HandState':
        """Copy of this hand with one copy of tile removed"""
        hand = self.copy()
        if not hand.remove_tile(tile):
            raise ValueError(f"{tile} is not in the concealed hand")
        return hand

    def copy(self) -> 'HandState':
        return HandState(self.concealed.copy(), list(self.melds))

    @classmethod
    def from_tiles(cls, tiles: Iterable[Tile], melds: Optional[List[Meld]] = None) -> 'HandState':
        return cls(TileSet(tiles), list(melds or []))

    @classmethod
    def from_string(cls, text: str, melds: Optional[List[Meld]] = None) -> 'HandState':
        """
        Build a hand from shorthand, e.g. "123m456p789s11z".
        Declared melds can be given with prefixes separated by spaces:
        "123m456p11z P:777s C:234m K:1z A:9p" where P is pong, C chow,
        K exposed kong and A concealed kong.
        """
        concealed: List[Tile] = []
        declared = list(melds or [])
        for part in text.split():
            if ":" in part:
                prefix, body = part.split(":", 1)
                declared.append(_parse_meld(prefix.upper(), body))
            else:
                concealed.extend(parse_tiles(part))
        return cls(TileSet(concealed), declared)

    def __str__(self) -> str:
        melds = " ".join(str(m) for m in self.melds)
        return f"{self.concealed} {melds}".strip()


def _parse_meld(prefix: str, body: str) -> Meld:
    tiles = parse_tiles(body)
    if prefix in ("P", "C"):
        return Meld.from_tiles(tiles)
    if prefix == "K":
        if len(tiles) == 1:
            tiles = tiles * 4
        return Meld.from_tiles(tiles)
    if prefix == "A":
        if len(tiles) == 1:
            tiles = tiles * 4
        return Meld.from_tiles(tiles, is_concealed=True)
    raise ValueError(f"Unknown meld prefix {prefix!r}")


def as_count_array(tiles) -> np.ndarray:
    """Accept a 34-element count array, a TileSet or a list of tiles"""
    if tiles is None:
        return np.zeros(TileSet.NUM_TILE_TYPES, dtype=np.int8)
    if isinstance(tiles, np.ndarray):
        if tiles.shape != (TileSet.NUM_TILE_TYPES,):
            raise ValueError(f"Count array must have shape (34,), got {tiles.shape}")
        return tiles.astype(np.int8)
    if isinstance(tiles, TileSet):
        return tiles.to_count_array()
    return TileSet(tiles).to_count_array()


def validate_hand(
    hand: HandState,
    expected_sizes=(WAITING_SIZE, COMPLETE_SIZE),
    visible_tiles: Optional[np.ndarray] = None,
    supply: int = TileSet.COPIES_PER_TYPE,
) -> None:
    """
    Structural checks run before any search.

    Raises:
        InvalidHandSize: tile_count not among expected_sizes
        MalformedMeld: a declared meld has inconsistent tiles
        TileSupplyExceeded: concealed + melds + visible exceed supply for a kind
    """
    if isinstance(expected_sizes, int):
        expected_sizes = (expected_sizes,)
    for meld in hand.melds:
        meld.validate()
    if len(hand.melds) > 4:
        raise InvalidHandSize(hand.tile_count, expected_sizes)
    if hand.tile_count not in expected_sizes:
        raise InvalidHandSize(hand.tile_count, expected_sizes if len(expected_sizes) > 1 else expected_sizes[0])

    counts = hand.total_count_array().astype(np.int16)
    if visible_tiles is not None:
        counts = counts + as_count_array(visible_tiles).astype(np.int16)
    over = np.nonzero(counts > supply)[0]
    if len(over):
        idx = int(over[0])
        raise TileSupplyExceeded(Tile.from_index(idx), int(counts[idx]), supply)
