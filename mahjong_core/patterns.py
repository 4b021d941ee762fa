"""
Win-pattern utilities shared by the variant scorers.

A HandView wraps one WinDecomposition, the WinContext and one placement of
the winning tile, and answers the structural questions every pattern table
asks: which groups are pungs or chows, which suits appear, which wait the
win completed, which triplets stay concealed.
"""

from collections import Counter
from dataclasses import dataclass
from enum import IntEnum
from typing import List, Optional, Set, Tuple
import numpy as np

from .context import WinContext
from .decomposer import Decomposer, HandShape, ShapeRules, WinDecomposition
from .hand import HandState
from .melds import Meld, MeldType
from .tiles import Tile, TileSet, TileSuit


class WaitType(IntEnum):
    """How the winning tile fit into the hand"""
    RYANMEN = 0   # two-sided, 两面
    KANCHAN = 1   # closed, 嵌张
    PENCHAN = 2   # edge, 边张
    SHANPON = 3   # dual pung, 对倒
    TANKI = 4     # single, 单钓
    SPECIAL = 5   # thirteen orphans / knitted shapes


@dataclass(frozen=True)
class WinPlacement:
    """
    Attributes:
        wait: Wait shape the winning tile completed
        group_index: Index into decomposition.groups, None for the pair or special shapes
    """
    wait: WaitType
    group_index: Optional[int] = None


def _chow_wait(group: Meld, win_tile: Tile) -> WaitType:
    base = group.base_tile.value
    if win_tile.value == base + 1:
        return WaitType.KANCHAN
    if (base == 1 and win_tile.value == 3) or (base == 7 and win_tile.value == 7):
        return WaitType.PENCHAN
    return WaitType.RYANMEN


def win_placements(decomposition: WinDecomposition, win_tile: Tile) -> List[WinPlacement]:
    """
    Every way the winning tile can be read into a decomposition.
    Only concealed groups and the pair can hold it.
    """
    if decomposition.shape == HandShape.SEVEN_PAIRS:
        return [WinPlacement(WaitType.TANKI)]
    if decomposition.shape in (HandShape.THIRTEEN_ORPHANS, HandShape.HONORS_AND_KNITTED):
        return [WinPlacement(WaitType.SPECIAL)]

    placements: List[WinPlacement] = []
    seen: Set[Tuple[int, int, int]] = set()
    for i, group in enumerate(decomposition.groups):
        if group.declared or win_tile not in group.tiles:
            continue
        if group.is_chow:
            placement = WinPlacement(_chow_wait(group, win_tile), i)
        else:
            placement = WinPlacement(WaitType.SHANPON, i)
        signature = (int(placement.wait), group.meld_type, group.base_tile.tile_index)
        if signature not in seen:
            seen.add(signature)
            placements.append(placement)
    if decomposition.pair is not None and decomposition.pair == win_tile:
        placements.append(WinPlacement(WaitType.TANKI))
    if decomposition.shape == HandShape.KNITTED_STRAIGHT and win_tile in decomposition.knitted:
        placements.append(WinPlacement(WaitType.SPECIAL))
    return placements


class HandView:
    """
    Structural queries over one decomposition with one winning-tile placement.

    Args:
        decomposition: The partition being scored
        context: Situational facts of the win
        placement: How the winning tile completed the hand
        hand_tiles: Physical tiles of the hand (keeps red fives); defaults
            to the decomposition's tiles
        unique_wait: The winning tile was the only tile the hand waited on
    """

    def __init__(
        self,
        decomposition: WinDecomposition,
        context: WinContext,
        placement: Optional[WinPlacement] = None,
        hand_tiles: Optional[List[Tile]] = None,
        unique_wait: bool = False,
    ):
        self.decomposition = decomposition
        self.context = context
        self.placement = placement or WinPlacement(WaitType.SPECIAL)
        self.unique_wait = unique_wait
        self.all_tiles: List[Tile] = list(hand_tiles) if hand_tiles is not None else decomposition.tiles
        self.counts: np.ndarray = TileSet(self.all_tiles).to_count_array()

    # --- groups ---
    @property
    def shape(self) -> HandShape:
        return self.decomposition.shape

    @property
    def groups(self) -> List[Meld]:
        return list(self.decomposition.groups)

    @property
    def pair(self) -> Optional[Tile]:
        return self.decomposition.pair

    @property
    def declared(self) -> List[Meld]:
        return self.decomposition.declared_groups

    @property
    def chows(self) -> List[Meld]:
        return [g for g in self.groups if g.is_chow]

    @property
    def pungs(self) -> List[Meld]:
        """Pungs and kongs"""
        return [g for g in self.groups if g.is_pong_or_kong]

    @property
    def kongs(self) -> List[Meld]:
        return [g for g in self.groups if g.is_kong]

    @property
    def concealed_kongs(self) -> List[Meld]:
        return [g for g in self.groups if g.meld_type == MeldType.CONCEALED_KONG]

    @property
    def melded_kongs(self) -> List[Meld]:
        return [g for g in self.groups if g.meld_type == MeldType.KONG]

    def chow_starts(self) -> List[Tuple[TileSuit, int]]:
        """(suit, lowest value) of every chow"""
        return [(g.base_tile.suit, g.base_tile.value) for g in self.chows]

    def numbered_pungs(self) -> List[Tuple[TileSuit, int]]:
        """(suit, value) of every numbered pung or kong"""
        return [(g.base_tile.suit, g.base_tile.value) for g in self.pungs if g.base_tile.is_numbered]

    def pung_tiles(self) -> List[Tile]:
        return [g.base_tile for g in self.pungs]

    def is_concealed_group(self, index: int) -> bool:
        """
        A group counts as concealed when it was not called and, for a
        triplet, was not completed by a claimed discard.
        """
        group = self.decomposition.groups[index]
        if group.declared:
            return group.is_concealed
        if (
            not self.context.is_tsumo
            and group.is_pong_or_kong
            and self.placement.group_index == index
        ):
            return False
        return True

    def concealed_pung_count(self) -> int:
        return sum(
            1 for i, g in enumerate(self.decomposition.groups)
            if g.is_pong_or_kong and self.is_concealed_group(i)
        )

    # --- whole-hand properties ---
    @property
    def is_menzen(self) -> bool:
        """No called melds; concealed kongs allowed"""
        return all(g.is_concealed for g in self.declared)

    @property
    def win_tile(self) -> Tile:
        return self.context.win_tile

    @property
    def wait(self) -> WaitType:
        return self.placement.wait

    def suits_used(self) -> Set[TileSuit]:
        return {t.suit for t in self.all_tiles if t.is_numbered}

    def has_honors(self) -> bool:
        return any(t.is_honor for t in self.all_tiles)

    def is_full_flush(self) -> bool:
        return len(self.suits_used()) == 1 and not self.has_honors()

    def is_half_flush(self) -> bool:
        return len(self.suits_used()) == 1 and self.has_honors()

    def all_match(self, predicate) -> bool:
        return all(predicate(t) for t in self.all_tiles)

    def count_wind_pungs(self) -> int:
        return sum(1 for t in self.pung_tiles() if t.suit == TileSuit.WINDS)

    def count_dragon_pungs(self) -> int:
        return sum(1 for t in self.pung_tiles() if t.suit == TileSuit.DRAGONS)

    def has_pung_of(self, tile: Tile) -> bool:
        return tile in self.pung_tiles()

    def identical_chow_counts(self) -> Counter:
        return Counter(self.chow_starts())

    def every_block_has(self, predicate) -> bool:
        """Every group and the pair contain a tile matching predicate"""
        if self.shape not in (HandShape.STANDARD,):
            return False
        for group in self.groups:
            if not any(predicate(t) for t in group.tiles):
                return False
        return self.pair is not None and predicate(self.pair)

    def __repr__(self) -> str:
        return f"HandView({self.decomposition}, wait={self.wait.name})"


def hand_from_decomposition(decomposition: WinDecomposition) -> HandState:
    """Rebuild the HandState a decomposition was taken from"""
    declared = decomposition.declared_groups
    counts = decomposition.to_count_array()
    for meld in declared:
        counts -= meld.to_count_array()
    return HandState(TileSet.from_count_array(counts), declared)


def is_unique_wait(
    decomposition: WinDecomposition,
    context: WinContext,
    shape_rules: ShapeRules,
    hand: Optional[HandState] = None,
) -> bool:
    """Whether the winning tile was the only tile the hand waited on"""
    source = hand if hand is not None else hand_from_decomposition(decomposition)
    if not source.concealed.contains(context.win_tile):
        return False
    waiting = source.without_tile(context.win_tile)
    return len(Decomposer(shape_rules).classify(waiting).waits) == 1


def views_for(
    decomposition: WinDecomposition,
    context: WinContext,
    hand_tiles: Optional[List[Tile]] = None,
    unique_wait: bool = False,
) -> List[HandView]:
    """One HandView per distinct placement of the winning tile"""
    placements = win_placements(decomposition, context.win_tile)
    if not placements:
        placements = [WinPlacement(WaitType.SPECIAL)]
    return [HandView(decomposition, context, p, hand_tiles, unique_wait) for p in placements]
