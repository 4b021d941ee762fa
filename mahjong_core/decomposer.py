"""
Decomposer

Computes shanten (number of tile exchanges from a complete hand) and,
for complete hands, every partition into groups and a pair.

Standard hands are searched by peeling groups off the lowest non-empty
tile kind of a 34-slot count array:
- triplet, run, pair as head
- pair or two-tile partial as an incomplete group
- isolated tile

Shanten = 2g - 2*groups - partials - pair, where g is the number of groups
the concealed tiles still have to supply (4 minus declared melds) and
groups + partials <= g. Partials whose completing kinds are all held
four times are not counted, and without a pair one more exchange is
needed when every leftover tile is of such a kind. Residual states already
seen in one call are skipped through a visited set local to that call.

Special shapes are scored with closed forms:
- Seven pairs: 6 - pairs + max(0, 7 - kinds)
- Thirteen orphans: 13 - terminal/honor kinds - (1 if one of them is paired)
- Honors and knitted tiles: 13 - distinct tiles usable for the shape
- Knitted straight: missing knitted tiles + shanten of the rest as 1 group + pair
"""

import logging
from enum import IntEnum
from dataclasses import dataclass, field
from itertools import permutations
from typing import List, Optional, Tuple, Dict, Set
import numpy as np

from .hand import HandState, validate_hand, WAITING_SIZE, COMPLETE_SIZE
from .melds import Meld, MeldType
from .tiles import Tile, TileSet

logger = logging.getLogger(__name__)

NUM_KINDS = TileSet.NUM_TILE_TYPES
HONOR_KINDS = list(range(27, 34))
TERMINAL_HONOR_KINDS = [0, 8, 9, 17, 18, 26] + HONOR_KINDS

# Each knitted layout assigns 147 / 258 / 369 to a permutation of the three suits
KNITTED_LAYOUTS: List[Tuple[int, ...]] = [
    tuple(suit * 9 + offset + 3 * step for suit, offset in zip(order, (0, 1, 2)) for step in range(3))
    for order in permutations(range(3))
]


class HandShape(IntEnum):
    """Winning shapes the decomposer recognises"""
    STANDARD = 0           # 4 groups + pair
    SEVEN_PAIRS = 1        # 七对
    THIRTEEN_ORPHANS = 2   # 十三幺
    KNITTED_STRAIGHT = 3   # 组合龙 + 1 group + pair
    HONORS_AND_KNITTED = 4  # 全不靠


@dataclass(frozen=True)
class ShapeRules:
    """
    Which special shapes a variant accepts.

    Attributes:
        seven_pairs: Seven pairs counts as a winning shape
        thirteen_orphans: Thirteen orphans counts as a winning shape
        seven_pairs_allow_quads: Four identical tiles count as two pairs
        knitted_shapes: Knitted straight and honors-and-knitted are winning shapes
    """
    seven_pairs: bool = True
    thirteen_orphans: bool = True
    seven_pairs_allow_quads: bool = False
    knitted_shapes: bool = False

    def enabled_shapes(self) -> List[HandShape]:
        shapes = [HandShape.STANDARD]
        if self.seven_pairs:
            shapes.append(HandShape.SEVEN_PAIRS)
        if self.thirteen_orphans:
            shapes.append(HandShape.THIRTEEN_ORPHANS)
        if self.knitted_shapes:
            shapes.extend([HandShape.KNITTED_STRAIGHT, HandShape.HONORS_AND_KNITTED])
        return shapes


DEFAULT_SHAPE_RULES = ShapeRules()
STANDARD_ONLY = ShapeRules(seven_pairs=False, thirteen_orphans=False)


@dataclass
class ShantenResult:
    """
    Attributes:
        shanten: Minimum over all enabled shapes (-1 complete, 0 tenpai)
        waits: Tiles that complete a tenpai 13-tile hand
        shape_shanten: Shanten for each enabled shape that is reachable
    """
    shanten: int
    waits: List[Tile] = field(default_factory=list)
    shape_shanten: Dict[HandShape, int] = field(default_factory=dict)

    @property
    def is_complete(self) -> bool:
        return self.shanten == -1

    @property
    def is_tenpai(self) -> bool:
        return self.shanten == 0

    @property
    def best_shapes(self) -> List[HandShape]:
        return [s for s, v in self.shape_shanten.items() if v == self.shanten]


@dataclass(frozen=True, eq=False)
class WinDecomposition:
    """
    One partition of a complete hand.

    Attributes:
        shape: Which winning shape this partition is
        groups: Declared melds first, then concealed groups (declared=False)
        pair: The pair tile for STANDARD and KNITTED_STRAIGHT
        pairs: Seven pair tiles for SEVEN_PAIRS (a quad appears twice)
        singles: Distinct tiles for THIRTEEN_ORPHANS / HONORS_AND_KNITTED,
            for thirteen orphans the paired tile is in pair
        knitted: The nine knitted tiles for KNITTED_STRAIGHT
    """
    shape: HandShape
    groups: Tuple[Meld, ...] = ()
    pair: Optional[Tile] = None
    pairs: Tuple[Tile, ...] = ()
    singles: Tuple[Tile, ...] = ()
    knitted: Tuple[Tile, ...] = ()

    @property
    def declared_groups(self) -> List[Meld]:
        return [g for g in self.groups if g.declared]

    @property
    def concealed_groups(self) -> List[Meld]:
        return [g for g in self.groups if not g.declared]

    @property
    def tiles(self) -> List[Tile]:
        """Every tile in the partition; a kong contributes four"""
        tiles: List[Tile] = []
        for group in self.groups:
            tiles.extend(group.tiles)
        if self.pair is not None:
            tiles.extend([self.pair, self.pair])
        for p in self.pairs:
            tiles.extend([p, p])
        tiles.extend(self.singles)
        tiles.extend(self.knitted)
        return sorted(tiles)

    @property
    def key(self) -> tuple:
        """Identity of the partition, ignoring group order"""
        return (
            int(self.shape),
            tuple(sorted(g.key for g in self.groups)),
            self.pair.tile_index if self.pair is not None else -1,
            tuple(sorted(p.tile_index for p in self.pairs)),
            tuple(sorted(t.tile_index for t in self.singles)),
            tuple(sorted(t.tile_index for t in self.knitted)),
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, WinDecomposition):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)

    def to_count_array(self) -> np.ndarray:
        return TileSet(self.tiles).to_count_array()

    def __str__(self) -> str:
        parts = [str(g) for g in self.groups]
        if self.pair is not None:
            parts.append(f"[PAIR: {self.pair} {self.pair}]")
        if self.pairs:
            parts.append(" ".join(f"{p}{p}" for p in self.pairs))
        if self.knitted:
            parts.append("[KNITTED: " + " ".join(str(t) for t in self.knitted) + "]")
        if self.singles:
            parts.append(" ".join(str(t) for t in self.singles))
        return f"{self.shape.name}: " + " ".join(parts)


def _is_run_start(idx: int) -> bool:
    return idx < 27 and idx % 9 <= 6


# Leftover tiles seen by the search
NO_LEFTOVER, DEAD_ONLY, LIVE = 0, 1, 2


def _completing_kinds(i: int, j: int) -> List[int]:
    """Kinds that turn the partial (i, j) into a group"""
    if i == j:
        return [i]
    if j == i + 2:
        return [i + 1]
    kinds = []
    if i % 9 >= 1:
        kinds.append(i - 1)
    if j % 9 <= 7:
        kinds.append(j + 1)
    return kinds


def standard_shanten(counts: List[int], groups_needed: int, held: Optional[List[int]] = None) -> int:
    """
    Shanten of a concealed count vector that must supply groups_needed
    groups plus a pair.

    A partial whose completing kinds are all held four times does not
    count, and a hand without a pair needs a leftover tile of a kind
    that is not held four times.

    Args:
        counts: 34 tile kind counts (not modified)
        groups_needed: Groups the concealed part has to form (0-4)
        held: Copies of each kind in the whole hand, declared melds
            included; defaults to counts
    """
    counts = list(counts)
    held = list(held) if held is not None else list(counts)
    best = 2 * groups_needed + 1
    visited: Set[tuple] = set()

    def live(i: int, j: int) -> bool:
        return any(held[k] < TileSet.COPIES_PER_TYPE for k in _completing_kinds(i, j))

    def walk(i: int, m: int, t: int, p: int, spare: int) -> None:
        nonlocal best
        if best == -1:
            return
        while i < NUM_KINDS and counts[i] == 0:
            i += 1
        if i == NUM_KINDS:
            score = 2 * groups_needed - 2 * m - t - p
            if p == 0 and spare == DEAD_ONLY:
                score += 1
            if score < best:
                best = score
            return
        key = (bytes(counts), m, t, p, spare)
        if key in visited:
            return
        visited.add(key)

        room = m + t < groups_needed
        c = counts[i]
        if c >= 3 and room:
            counts[i] -= 3
            walk(i, m + 1, t, p, spare)
            counts[i] += 3
        if room and _is_run_start(i) and counts[i + 1] and counts[i + 2]:
            counts[i] -= 1; counts[i + 1] -= 1; counts[i + 2] -= 1
            walk(i, m + 1, t, p, spare)
            counts[i] += 1; counts[i + 1] += 1; counts[i + 2] += 1
        if c >= 2 and p == 0:
            counts[i] -= 2
            walk(i, m, t, 1, spare)
            counts[i] += 2
        if room:
            if c >= 2 and live(i, i):
                counts[i] -= 2
                walk(i, m, t + 1, p, spare)
                counts[i] += 2
            if i < 27 and i % 9 <= 7 and counts[i + 1] and live(i, i + 1):
                counts[i] -= 1; counts[i + 1] -= 1
                walk(i, m, t + 1, p, spare)
                counts[i] += 1; counts[i + 1] += 1
            if i < 27 and i % 9 <= 6 and counts[i + 2] and live(i, i + 2):
                counts[i] -= 1; counts[i + 2] -= 1
                walk(i, m, t + 1, p, spare)
                counts[i] += 1; counts[i + 2] += 1
        counts[i] -= 1
        walk(i, m, t, p, max(spare, LIVE if held[i] < TileSet.COPIES_PER_TYPE else DEAD_ONLY))
        counts[i] += 1

    walk(0, 0, 0, 0, NO_LEFTOVER)
    return best


def seven_pairs_shanten(counts: List[int], allow_quads: bool = False) -> int:
    if allow_quads:
        pairs = sum(c // 2 for c in counts)
        return 6 - min(pairs, 7)
    pairs = sum(1 for c in counts if c >= 2)
    kinds = sum(1 for c in counts if c >= 1)
    return 6 - pairs + max(0, 7 - kinds)


def thirteen_orphans_shanten(counts: List[int]) -> int:
    kinds = sum(1 for i in TERMINAL_HONOR_KINDS if counts[i] >= 1)
    has_pair = any(counts[i] >= 2 for i in TERMINAL_HONOR_KINDS)
    return 13 - kinds - (1 if has_pair else 0)


def honors_and_knitted_shanten(counts: List[int]) -> int:
    best = 13
    for layout in KNITTED_LAYOUTS:
        usable = sum(1 for i in layout + tuple(HONOR_KINDS) if counts[i] >= 1)
        best = min(best, 13 - usable)
    return best


def knitted_straight_shanten(counts: List[int], groups_needed: int, held: Optional[List[int]] = None) -> int:
    best = 99
    for layout in KNITTED_LAYOUTS:
        residual = list(counts)
        placed = 0
        for i in layout:
            if residual[i]:
                residual[i] -= 1
                placed += 1
        best = min(best, (9 - placed) + standard_shanten(residual, groups_needed, held))
    return best


class Decomposer:
    """
    Variant-agnostic shape engine. Stateless; every call builds its own
    search tables.
    """

    def __init__(self, shape_rules: ShapeRules = DEFAULT_SHAPE_RULES):
        self.shape_rules = shape_rules

    def shape_shanten(
        self,
        counts: List[int],
        num_melds: int,
        declared: Optional[List[int]] = None,
    ) -> Dict[HandShape, int]:
        """
        Shanten per enabled shape for a concealed count vector.
        declared counts the tiles of declared melds by kind.
        """
        rules = self.shape_rules
        held = [c + d for c, d in zip(counts, declared)] if declared is not None else list(counts)
        result = {HandShape.STANDARD: standard_shanten(counts, 4 - num_melds, held)}
        if num_melds == 0:
            if rules.seven_pairs:
                result[HandShape.SEVEN_PAIRS] = seven_pairs_shanten(counts, rules.seven_pairs_allow_quads)
            if rules.thirteen_orphans:
                result[HandShape.THIRTEEN_ORPHANS] = thirteen_orphans_shanten(counts)
            if rules.knitted_shapes:
                result[HandShape.HONORS_AND_KNITTED] = honors_and_knitted_shanten(counts)
        if rules.knitted_shapes and num_melds <= 1:
            result[HandShape.KNITTED_STRAIGHT] = knitted_straight_shanten(counts, 1 - num_melds, held)
        return result

    def shanten_of(self, counts: List[int], num_melds: int, declared: Optional[List[int]] = None) -> int:
        return min(self.shape_shanten(counts, num_melds, declared).values())

    def classify(
        self,
        hand: HandState,
        visible_tiles=None,
    ) -> ShantenResult:
        """
        Shanten of a 13- or 14-tile hand, with waits when a 13-tile hand is tenpai.

        Raises:
            InvalidHandSize, TileSupplyExceeded, MalformedMeld
        """
        validate_hand(hand, (WAITING_SIZE, COMPLETE_SIZE), visible_tiles)
        counts = [int(c) for c in hand.to_count_array()]
        num_melds = len(hand.melds)
        declared = [int(c) for c in hand.declared_count_array()]
        per_shape = self.shape_shanten(counts, num_melds, declared)
        shanten = min(per_shape.values())

        waits: List[Tile] = []
        if shanten == 0 and hand.tile_count == WAITING_SIZE:
            waits = self._waits(counts, num_melds, hand.total_count_array())
        logger.debug(f"classify {hand}: shanten={shanten} waits={[str(w) for w in waits]}")
        return ShantenResult(shanten, waits, per_shape)

    def _waits(self, counts: List[int], num_melds: int, held: np.ndarray) -> List[Tile]:
        waits = []
        for idx in range(NUM_KINDS):
            if held[idx] >= TileSet.COPIES_PER_TYPE:
                continue
            counts[idx] += 1
            if self.shanten_of(counts, num_melds) == -1:
                waits.append(Tile.from_index(idx))
            counts[idx] -= 1
        return waits

    def enumerate_win_decompositions(self, hand: HandState) -> List[WinDecomposition]:
        """
        Every distinct partition of a complete 14-tile hand, standard and
        special. Empty when the hand is not complete.

        Raises:
            InvalidHandSize, TileSupplyExceeded, MalformedMeld
        """
        validate_hand(hand, COMPLETE_SIZE)
        counts = [int(c) for c in hand.to_count_array()]
        declared = tuple(hand.melds)
        rules = self.shape_rules
        results: List[WinDecomposition] = []

        for groups, pair in _exact_partitions(counts, 4 - len(declared)):
            results.append(WinDecomposition(HandShape.STANDARD, declared + groups, pair))

        if not declared:
            if rules.seven_pairs:
                decomposition = _seven_pairs(counts, rules.seven_pairs_allow_quads)
                if decomposition is not None:
                    results.append(decomposition)
            if rules.thirteen_orphans:
                decomposition = _thirteen_orphans(counts)
                if decomposition is not None:
                    results.append(decomposition)
            if rules.knitted_shapes:
                results.extend(_honors_and_knitted(counts))

        if rules.knitted_shapes and len(declared) <= 1:
            for layout in KNITTED_LAYOUTS:
                if not all(counts[i] for i in layout):
                    continue
                residual = list(counts)
                for i in layout:
                    residual[i] -= 1
                knitted = tuple(Tile.from_index(i) for i in layout)
                for groups, pair in _exact_partitions(residual, 1 - len(declared)):
                    results.append(WinDecomposition(
                        HandShape.KNITTED_STRAIGHT, declared + groups, pair, knitted=knitted))

        unique: Dict[tuple, WinDecomposition] = {}
        for decomposition in results:
            unique.setdefault(decomposition.key, decomposition)
        logger.debug(f"{hand}: {len(unique)} win decompositions")
        return list(unique.values())


def _exact_partitions(counts: List[int], groups_needed: int) -> List[Tuple[Tuple[Meld, ...], Tile]]:
    """All ways to split counts into exactly groups_needed groups and one pair"""
    if sum(counts) != 3 * groups_needed + 2:
        return []
    counts = list(counts)
    found: List[Tuple[Tuple[Meld, ...], Tile]] = []
    groups: List[Meld] = []

    def walk(i: int, pair: Optional[int]) -> None:
        while i < NUM_KINDS and counts[i] == 0:
            i += 1
        if i == NUM_KINDS:
            if pair is not None and len(groups) == groups_needed:
                found.append((tuple(groups), Tile.from_index(pair)))
            return
        if counts[i] >= 2 and pair is None:
            counts[i] -= 2
            walk(i, i)
            counts[i] += 2
        if counts[i] >= 3:
            counts[i] -= 3
            groups.append(Meld(MeldType.PONG, [Tile.from_index(i)] * 3, is_concealed=True, declared=False))
            walk(i, pair)
            groups.pop()
            counts[i] += 3
        if _is_run_start(i) and counts[i + 1] and counts[i + 2]:
            counts[i] -= 1; counts[i + 1] -= 1; counts[i + 2] -= 1
            groups.append(Meld(MeldType.CHOW, [Tile.from_index(i + k) for k in range(3)],
                               is_concealed=True, declared=False))
            walk(i, pair)
            groups.pop()
            counts[i] += 1; counts[i + 1] += 1; counts[i + 2] += 1

    walk(0, None)
    return found


def _seven_pairs(counts: List[int], allow_quads: bool) -> Optional[WinDecomposition]:
    pairs: List[Tile] = []
    for idx, c in enumerate(counts):
        if c == 2 or (c == 4 and allow_quads):
            pairs.extend([Tile.from_index(idx)] * (c // 2))
        elif c != 0:
            return None
    if len(pairs) != 7:
        return None
    return WinDecomposition(HandShape.SEVEN_PAIRS, pairs=tuple(pairs))


def _thirteen_orphans(counts: List[int]) -> Optional[WinDecomposition]:
    if any(counts[i] == 0 for i in TERMINAL_HONOR_KINDS):
        return None
    if sum(counts[i] for i in TERMINAL_HONOR_KINDS) != COMPLETE_SIZE:
        return None
    pair = next(i for i in TERMINAL_HONOR_KINDS if counts[i] == 2)
    singles = tuple(Tile.from_index(i) for i in TERMINAL_HONOR_KINDS if i != pair)
    return WinDecomposition(HandShape.THIRTEEN_ORPHANS, pair=Tile.from_index(pair), singles=singles)


def _honors_and_knitted(counts: List[int]) -> List[WinDecomposition]:
    if any(c > 1 for c in counts) or sum(counts) != COMPLETE_SIZE:
        return []
    found = []
    for layout in KNITTED_LAYOUTS:
        allowed = set(layout) | set(HONOR_KINDS)
        if all(i in allowed for i, c in enumerate(counts) if c):
            singles = tuple(Tile.from_index(i) for i, c in enumerate(counts) if c)
            found.append(WinDecomposition(HandShape.HONORS_AND_KNITTED, singles=singles))
    return found


def classify(hand: HandState, shape_rules: ShapeRules = DEFAULT_SHAPE_RULES, visible_tiles=None) -> ShantenResult:
    """Shanten of a 13- or 14-tile hand under shape_rules"""
    return Decomposer(shape_rules).classify(hand, visible_tiles)


def enumerate_win_decompositions(hand: HandState, shape_rules: ShapeRules = DEFAULT_SHAPE_RULES) -> List[WinDecomposition]:
    """All partitions of a complete 14-tile hand under shape_rules"""
    return Decomposer(shape_rules).enumerate_win_decompositions(hand)
