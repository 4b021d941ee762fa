"""
Shanghai Mahjong Scoring

Regional fan table. Fan are capped and converted to payment units with
a fixed table; a self-drawn win is paid by all three opponents.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Union

from mahjong_core.context import WinContext
from mahjong_core.decomposer import HandShape, ShapeRules, WinDecomposition
from mahjong_core.hand import HandState
from mahjong_core.patterns import HandView, WaitType, is_unique_wait, views_for
from mahjong_core.rules import (
    RuleSet, Variant, ScoreResult, PatternMatch,
    WinAccepted, IllegalWinDeclaration, RejectionReason, WinCheck,
)
from mahjong_core.tiles import Tile, TileSuit

from .rules import ShanghaiRules, SHANGHAI_RULES

logger = logging.getLogger(__name__)


@dataclass
class FanPattern:
    name: str
    chinese_name: str
    fan: int
    check_func: Callable[[HandView], Union[bool, int]]
    excludes: List[str] = field(default_factory=list)


class ShanghaiScorer:
    """Shanghai fan table with exclusions"""

    def __init__(self, rules: ShanghaiRules):
        self.rules = rules
        self.patterns = self._create_patterns()

    def _create_patterns(self) -> List[FanPattern]:
        F = FanPattern
        return [
            F("All Honors", "字一色", 8, self._check_all_honors,
              ["All Pungs", "Half Flush", "Dragon Pung", "Seat Wind", "Prevalent Wind"]),
            F("Full Flush", "清一色", 4, lambda v: v.is_full_flush(), []),
            F("Half Flush", "混一色", 2, lambda v: v.is_half_flush(), []),
            F("All Pungs", "碰碰和", 2, self._check_all_pungs, []),
            F("Seven Pairs", "七对", 2, lambda v: v.shape == HandShape.SEVEN_PAIRS,
              ["Concealed Hand", "Single Wait"]),
            F("Big Single Wait", "大吊车", 1, self._check_big_single_wait, ["Single Wait"]),
            F("Single Wait", "单钓", 1, self._check_single_wait, []),
            F("Dragon Pung", "箭刻", 1, lambda v: v.count_dragon_pungs(), []),
            F("Seat Wind", "门风", 1,
              lambda v: v.has_pung_of(Tile(TileSuit.WINDS, v.context.seat_wind)), []),
            F("Prevalent Wind", "圈风", 1,
              lambda v: v.has_pung_of(Tile(TileSuit.WINDS, v.context.round_wind)), []),
            F("Concealed Hand", "门清", 1, lambda v: v.is_menzen, []),
            F("Self-Drawn", "自摸", 1, lambda v: v.context.is_tsumo, []),
            F("Out with Replacement Tile", "杠上开花", 1,
              lambda v: v.context.is_tsumo and v.context.is_rinshan, []),
            F("Last Tile", "海底捞月", 1, lambda v: v.context.is_haitei, []),
            F("Robbing the Kong", "抢杠", 1, lambda v: v.context.is_chankan, []),
            F("Seat Flowers", "正花", 1, self._check_seat_flowers, []),
        ]

    def get_matching_patterns(self, v: HandView) -> List[PatternMatch]:
        """Patterns after exclusions; Base Win when nothing else applies"""
        matching = []
        for pattern in self.patterns:
            count = int(pattern.check_func(v))
            if count:
                matching.append((pattern, count))

        excluded = set()
        for pattern, _ in matching:
            excluded.update(pattern.excludes)
        final = [
            PatternMatch(p.name, p.chinese_name, p.fan, count)
            for p, count in matching if p.name not in excluded
        ]
        if not final:
            final.append(PatternMatch("Base Win", "底和", 1))
        return final

    def _check_all_honors(self, v: HandView) -> bool:
        return v.all_match(lambda t: t.is_honor)

    def _check_all_pungs(self, v: HandView) -> bool:
        return v.shape == HandShape.STANDARD and not v.chows

    def _check_single_wait(self, v: HandView) -> bool:
        """Won on the pair tile, and it was the only tile the hand waited on"""
        return v.shape == HandShape.STANDARD and v.wait == WaitType.TANKI and v.unique_wait

    def _check_big_single_wait(self, v: HandView) -> bool:
        """Four called melds, won on the pair tile"""
        called = [g for g in v.declared if not g.is_concealed]
        return len(called) == 4 and v.wait == WaitType.TANKI

    def _check_seat_flowers(self, v: HandView) -> int:
        if not self.rules.count_seat_flowers:
            return 0
        return len(v.context.seat_flowers)


class ShanghaiRuleSet(RuleSet):
    """
    Shanghai regional rules. Standard hands and, when enabled, seven pairs.
    """

    variant = Variant.SHANGHAI

    def __init__(self, rules: Optional[ShanghaiRules] = None):
        self.rules = rules or SHANGHAI_RULES
        self.name = self.rules.name
        self.shape_rules = ShapeRules(seven_pairs=self.rules.seven_pairs, thirteen_orphans=False)
        self.scorer = ShanghaiScorer(self.rules)

    def score(
        self,
        decomposition: WinDecomposition,
        context: WinContext,
        hand: Optional[HandState] = None,
    ) -> ScoreResult:
        tiles = hand.all_tiles if hand is not None else None
        unique_wait = is_unique_wait(decomposition, context, self.shape_rules, hand)
        best: Optional[ScoreResult] = None
        for v in views_for(decomposition, context, tiles, unique_wait):
            patterns = self.scorer.get_matching_patterns(v)
            fan = sum(p.total for p in patterns)
            capped = min(fan, self.rules.fan_cap)
            unit = self.rules.payment_for(capped)
            if context.is_tsumo:
                payments = {"each": unit}
                total = unit * 3
            else:
                payments = {"discarder": unit}
                total = unit
            if best is None or capped > best.units:
                best = ScoreResult(
                    variant=self.variant,
                    value=total,
                    units=capped,
                    patterns=patterns,
                    decomposition=decomposition,
                    payments=payments,
                    limit_name="Capped" if fan > self.rules.fan_cap else None,
                )
        logger.debug(f"shanghai {decomposition}: {best.units} fan -> {best.value}")
        return best

    def refine_win_legality(
        self,
        decomposition: WinDecomposition,
        context: WinContext,
        hand: Optional[HandState] = None,
    ) -> WinCheck:
        if decomposition.shape not in self.shape_rules.enabled_shapes():
            return IllegalWinDeclaration(
                RejectionReason.SHAPE_NOT_ALLOWED,
                f"{decomposition.shape.name} is not played under {self.name}",
            )
        result = self.score(decomposition, context, hand)
        if result.units < self.rules.min_fan:
            return IllegalWinDeclaration(
                RejectionReason.VALUE_FLOOR_NOT_MET,
                f"{result.units} fan, {self.rules.min_fan} required",
                result,
            )
        return WinAccepted(decomposition)
