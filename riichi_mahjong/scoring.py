"""
Riichi Mahjong Scoring System

Han and fu calculation, limit hands and payments, exposed as the RIICHI
RuleSet.
"""

import logging
from typing import List, Optional, Tuple

from mahjong_core.context import WinContext
from mahjong_core.decomposer import HandShape, ShapeRules, WinDecomposition
from mahjong_core.hand import HandState
from mahjong_core.patterns import HandView, WaitType, views_for
from mahjong_core.rules import (
    RuleSet, Variant, ScoreResult, PatternMatch,
    WinAccepted, IllegalWinDeclaration, RejectionReason, WinCheck,
)
from mahjong_core.tiles import TileSuit

from .dora import DoraSystem
from .rules import RiichiRules, TENHOU_RULES
from .yaku import Yaku, YakuChecker

logger = logging.getLogger(__name__)

RIICHI_SHAPES = ShapeRules(seven_pairs=True, thirteen_orphans=True, seven_pairs_allow_quads=False)

DORA_NAMES = {"Dora", "Uradora", "Akadora"}

LIMITS = [
    # (minimum han, base points, name)
    (13, 8000, "Kazoe Yakuman"),
    (11, 6000, "Sanbaiman"),
    (8, 4000, "Baiman"),
    (6, 3000, "Haneman"),
    (5, 2000, "Mangan"),
]


def round_up_100(points: float) -> int:
    return int(-(-points // 100) * 100)


def calculate_fu(v: HandView, is_pinfu: bool) -> int:
    """
    Calculate fu (minipoints) for one reading of the hand.

    Chiitoitsu is a flat 25. Pinfu tsumo is 20 and pinfu ron 30.
    Otherwise 20 base, +10 closed ron, +2 tsumo, group, pair and wait fu,
    rounded up to 10; an open hand never scores less than 30.
    """
    if v.shape == HandShape.SEVEN_PAIRS:
        return 25
    ctx = v.context
    if is_pinfu:
        return 20 if ctx.is_tsumo else 30

    fu = 20
    if v.is_menzen and not ctx.is_tsumo:
        fu += 10
    if ctx.is_tsumo:
        fu += 2

    for i, group in enumerate(v.groups):
        if group.is_chow:
            continue
        group_fu = 4 if group.base_tile.is_terminal_or_honor else 2
        if v.is_concealed_group(i):
            group_fu *= 2
        if group.is_kong:
            group_fu *= 4
        fu += group_fu

    pair = v.pair
    if pair is not None:
        if pair.suit == TileSuit.DRAGONS:
            fu += 2
        elif pair.suit == TileSuit.WINDS:
            if pair.value == ctx.seat_wind:
                fu += 2
            if pair.value == ctx.round_wind:
                fu += 2

    if v.wait in (WaitType.KANCHAN, WaitType.PENCHAN, WaitType.TANKI):
        fu += 2

    fu = ((fu + 9) // 10) * 10
    return max(fu, 30)


class RiichiRuleSet(RuleSet):
    """
    Riichi Mahjong Scorer

    Evaluates every reading of the winning tile in a decomposition and
    keeps the one worth the most.
    """

    variant = Variant.RIICHI
    shape_rules = RIICHI_SHAPES

    def __init__(self, rules: Optional[RiichiRules] = None):
        self.rules = rules or TENHOU_RULES
        self.name = f"Riichi ({self.rules.name})"
        self.checker = YakuChecker(self.rules)

    # --- RuleSet interface ---

    def score(
        self,
        decomposition: WinDecomposition,
        context: WinContext,
        hand: Optional[HandState] = None,
    ) -> ScoreResult:
        best: Optional[ScoreResult] = None
        for v in views_for(decomposition, context, hand.all_tiles if hand is not None else None):
            result = self._score_view(v)
            if best is None or (result.value, result.units, result.fu or 0) > (best.value, best.units, best.fu or 0):
                best = result
        return best

    def refine_win_legality(
        self,
        decomposition: WinDecomposition,
        context: WinContext,
        hand: Optional[HandState] = None,
    ) -> WinCheck:
        if decomposition.shape not in (HandShape.STANDARD, HandShape.SEVEN_PAIRS, HandShape.THIRTEEN_ORPHANS):
            return IllegalWinDeclaration(RejectionReason.SHAPE_NOT_ALLOWED, decomposition.shape.name)
        result = self.score(decomposition, context, hand)
        yaku = [p for p in result.patterns if p.name not in DORA_NAMES]
        if not yaku:
            return IllegalWinDeclaration(RejectionReason.NO_YAKU, "no yaku (dora do not count)", result)
        yaku_han = sum(p.total for p in yaku)
        if yaku_han < self.rules.min_han:
            return IllegalWinDeclaration(
                RejectionReason.VALUE_FLOOR_NOT_MET,
                f"{yaku_han} han from yaku, {self.rules.min_han} required",
                result,
            )
        return WinAccepted(decomposition)

    # --- Riichi helpers ---

    def can_declare_riichi(self, hand: HandState) -> bool:
        """Closed hand that is tenpai (13 tiles) or can discard into tenpai (14 tiles)"""
        if not hand.is_menzen:
            return False
        return self.decomposer.classify(hand).shanten <= 0

    def _score_view(self, v: HandView) -> ScoreResult:
        ctx = v.context
        yaku_list = self.checker.find_yaku(v)
        if yaku_list and yaku_list[0].is_yakuman:
            return self._yakuman_result(v, yaku_list)

        is_open = not v.is_menzen
        patterns = [PatternMatch(y.name, y.japanese_name, y.han(is_open)) for y in yaku_list]
        han = sum(p.value for p in patterns)

        if patterns:
            patterns.extend(self._dora_patterns(v))
            han = sum(p.total for p in patterns)

        is_pinfu = any(y.name == "Pinfu" for y in yaku_list)
        fu = calculate_fu(v, is_pinfu)
        base, limit_name = self._base_points(han, fu)
        if limit_name == "Kazoe Yakuman" and not self.rules.kazoe_yakuman:
            base, limit_name = 6000, "Sanbaiman"
        payments, total = self._payments(base, ctx) if patterns else ({}, 0)
        result = ScoreResult(
            variant=self.variant,
            value=total,
            units=han,
            fu=fu,
            patterns=patterns,
            decomposition=v.decomposition,
            payments=payments,
            limit_name=limit_name,
        )
        logger.debug(f"riichi {v}: {han} han {fu} fu -> {total}")
        return result

    def _dora_patterns(self, v: HandView) -> List[PatternMatch]:
        ctx = v.context
        dora = DoraSystem.from_context(ctx, self.rules.red_fives)
        found = []
        count = dora.count_dora(v.all_tiles)
        if count:
            found.append(PatternMatch("Dora", "ドラ", 1, count))
        if (ctx.is_riichi or ctx.is_double_riichi) and self.rules.uradora_on_riichi_win:
            count = dora.count_uradora(v.all_tiles)
            if count:
                found.append(PatternMatch("Uradora", "裏ドラ", 1, count))
        count = dora.count_akadora(v.all_tiles)
        if count:
            found.append(PatternMatch("Akadora", "赤ドラ", 1, count))
        return found

    def _yakuman_result(self, v: HandView, yaku_list: List[Yaku]) -> ScoreResult:
        multiplier = sum(y.yakuman_multiplier for y in yaku_list)
        patterns = [PatternMatch(y.name, y.japanese_name, 13 * y.yakuman_multiplier) for y in yaku_list]
        payments, total = self._payments(8000 * multiplier, v.context)
        name = "Yakuman" if multiplier == 1 else f"{multiplier}x Yakuman"
        return ScoreResult(
            variant=self.variant,
            value=total,
            units=13 * multiplier,
            fu=None,
            patterns=patterns,
            decomposition=v.decomposition,
            payments=payments,
            limit_name=name,
        )

    def _base_points(self, han: int, fu: int) -> Tuple[int, Optional[str]]:
        """Base points from han and fu, with limit hand name if one applies"""
        for min_han, base, name in LIMITS:
            if han >= min_han:
                return base, name
        if self.rules.kiriage_mangan and (han, fu) in ((4, 30), (3, 60)):
            return 2000, "Mangan"
        base = fu * 2 ** (han + 2)
        if base >= 2000:
            return 2000, "Mangan"
        return base, None

    def _payments(self, base: int, ctx: WinContext) -> Tuple[dict, int]:
        """
        Who pays what. Ron: the discarder pays 6x (dealer) or 4x base.
        Tsumo: 2x base from everyone (dealer win) or 2x from the dealer
        and 1x from the others. Each payment rounds up to 100.
        """
        honba = ctx.honba * self.rules.honba_value
        payments = {}
        if ctx.is_tsumo:
            per_payer_honba = honba // 3
            if ctx.is_dealer:
                each = round_up_100(base * 2) + per_payer_honba
                payments["non_dealer"] = each
                total = each * 3
            else:
                dealer = round_up_100(base * 2) + per_payer_honba
                other = round_up_100(base) + per_payer_honba
                payments["dealer"] = dealer
                payments["non_dealer"] = other
                total = dealer + other * 2
        else:
            multiplier = 6 if ctx.is_dealer else 4
            payments["discarder"] = round_up_100(base * multiplier) + honba
            total = payments["discarder"]
        if ctx.riichi_sticks:
            payments["riichi_sticks"] = ctx.riichi_sticks * self.rules.riichi_stick_value
            total += payments["riichi_sticks"]
        return payments, total
