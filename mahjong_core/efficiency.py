"""
Efficiency Analyzer

For each discard candidate of a 14-tile hand, reports the resulting shanten
and every tile kind that would strictly lower it, with how many copies are
still unseen. Purely a function of its inputs.
"""

import logging
from concurrent.futures import Executor
from dataclasses import dataclass, field
from typing import Dict, List, Optional
import numpy as np

from .decomposer import Decomposer, ShapeRules, DEFAULT_SHAPE_RULES, NUM_KINDS
from .hand import HandState, validate_hand, as_count_array, WAITING_SIZE, COMPLETE_SIZE
from .tiles import Tile, TileSet

logger = logging.getLogger(__name__)


@dataclass
class Acceptance:
    """
    Attributes:
        shanten: Shanten of the 13-tile hand
        useful_tiles: Tile kind -> copies not yet seen, for kinds that lower shanten
    """
    shanten: int
    useful_tiles: Dict[Tile, int] = field(default_factory=dict)

    @property
    def useful_kinds(self) -> int:
        return len(self.useful_tiles)

    @property
    def useful_count(self) -> int:
        """Total unseen copies of useful tiles (ukeire)"""
        return sum(self.useful_tiles.values())


@dataclass
class DiscardOption(Acceptance):
    discard: Optional[Tile] = None

    def __str__(self) -> str:
        tiles = " ".join(str(t) for t in sorted(self.useful_tiles))
        return f"discard {self.discard}: shanten={self.shanten} ukeire={self.useful_count} [{tiles}]"


class EfficiencyAnalyzer:
    """
    Runs the decomposer over every discard and draw candidate.

    An optional concurrent.futures executor evaluates discard candidates
    in parallel; each evaluation only reads its inputs.
    """

    def __init__(self, shape_rules: ShapeRules = DEFAULT_SHAPE_RULES):
        self.decomposer = Decomposer(shape_rules)

    def _acceptance(
        self,
        counts: List[int],
        num_melds: int,
        unseen: np.ndarray,
        declared: List[int],
    ) -> Acceptance:
        """
        counts is the 13-tile concealed vector, unseen the copies left per
        kind and declared the tiles of declared melds per kind
        """
        shanten = self.decomposer.shanten_of(counts, num_melds, declared)
        useful: Dict[Tile, int] = {}
        for idx in range(NUM_KINDS):
            remaining = int(unseen[idx])
            if remaining <= 0:
                continue
            counts[idx] += 1
            if self.decomposer.shanten_of(counts, num_melds, declared) < shanten:
                useful[Tile.from_index(idx)] = remaining
            counts[idx] -= 1
        return Acceptance(shanten, useful)

    @staticmethod
    def _unseen(hand: HandState, visible: np.ndarray) -> np.ndarray:
        held = hand.total_count_array().astype(np.int16)
        unseen = TileSet.COPIES_PER_TYPE - visible.astype(np.int16) - held
        return np.clip(unseen, 0, TileSet.COPIES_PER_TYPE)

    def useful_tiles(self, hand: HandState, visible_tiles=None) -> Acceptance:
        """
        Useful tiles of a 13-tile hand.

        Args:
            hand: 13-tile hand
            visible_tiles: Tiles seen outside the hand (discards, other
                players' melds, indicators) as a count array or tile list

        Raises:
            InvalidHandSize, TileSupplyExceeded, MalformedMeld
        """
        visible = as_count_array(visible_tiles)
        validate_hand(hand, WAITING_SIZE, visible)
        counts = [int(c) for c in hand.to_count_array()]
        declared = [int(c) for c in hand.declared_count_array()]
        return self._acceptance(counts, len(hand.melds), self._unseen(hand, visible), declared)

    def _evaluate_discard(
        self,
        counts: List[int],
        discard_idx: int,
        num_melds: int,
        unseen: np.ndarray,
        declared: List[int],
    ) -> DiscardOption:
        counts = list(counts)
        counts[discard_idx] -= 1
        acceptance = self._acceptance(counts, num_melds, unseen, declared)
        return DiscardOption(acceptance.shanten, acceptance.useful_tiles, Tile.from_index(discard_idx))

    def analyze(
        self,
        hand: HandState,
        visible_tiles=None,
        executor: Optional[Executor] = None,
    ) -> Dict[Tile, DiscardOption]:
        """
        Evaluate every distinct discard of a 14-tile hand.

        The discarded copy counts as seen, so remaining copies of a useful
        kind are 4 - visible - copies held before the discard.

        Args:
            hand: 14-tile hand
            visible_tiles: Tiles seen outside the hand
            executor: Optional executor to evaluate discards in parallel

        Returns:
            Mapping from discard tile kind to its DiscardOption

        Raises:
            InvalidHandSize, TileSupplyExceeded, MalformedMeld
        """
        visible = as_count_array(visible_tiles)
        validate_hand(hand, COMPLETE_SIZE, visible)
        counts = [int(c) for c in hand.to_count_array()]
        num_melds = len(hand.melds)
        unseen = self._unseen(hand, visible)
        declared = [int(c) for c in hand.declared_count_array()]
        candidates = [idx for idx in range(NUM_KINDS) if counts[idx]]

        if executor is None:
            options = [self._evaluate_discard(counts, idx, num_melds, unseen, declared) for idx in candidates]
        else:
            futures = [
                executor.submit(self._evaluate_discard, counts, idx, num_melds, unseen, declared)
                for idx in candidates
            ]
            options = [f.result() for f in futures]

        report = {option.discard: option for option in options}
        logger.debug(f"analyze {hand}: {len(report)} discard candidates")
        return report


def rank_discards(report: Dict[Tile, DiscardOption]) -> List[DiscardOption]:
    """
    Order discard options from best to worst: lowest shanten, then most
    useful kinds, then most useful copies. Ties keep tile order.
    """
    return sorted(
        report.values(),
        key=lambda o: (o.shanten, -o.useful_kinds, -o.useful_count, o.discard.tile_index),
    )


def analyze(
    hand: HandState,
    visible_tiles=None,
    shape_rules: ShapeRules = DEFAULT_SHAPE_RULES,
    executor: Optional[Executor] = None,
) -> Dict[Tile, DiscardOption]:
    """Per-discard efficiency report for a 14-tile hand"""
    return EfficiencyAnalyzer(shape_rules).analyze(hand, visible_tiles, executor)


def useful_tiles(
    hand: HandState,
    visible_tiles=None,
    shape_rules: ShapeRules = DEFAULT_SHAPE_RULES,
) -> Acceptance:
    """Useful tiles of a 13-tile hand"""
    return EfficiencyAnalyzer(shape_rules).useful_tiles(hand, visible_tiles)
