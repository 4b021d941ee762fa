"""
MCR Mahjong Scoring System

Implements all 81 scoring patterns according to Chinese Official Mahjong rules (MCR).
Patterns are organized by point value from 88 down to 1.

MCR uses an exclusion principle where higher-scoring patterns exclude
patterns they imply (e.g., Big Four Winds excludes All Pungs).
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Set, Union

from mahjong_core.context import WinContext
from mahjong_core.decomposer import HandShape, ShapeRules, WinDecomposition
from mahjong_core.hand import HandState
from mahjong_core.patterns import HandView, WaitType, is_unique_wait, win_placements
from mahjong_core.rules import (
    RuleSet, Variant, ScoreResult, PatternMatch,
    WinAccepted, IllegalWinDeclaration, RejectionReason, WinCheck,
)
from mahjong_core.tiles import Tile, TileSuit, DragonType, NUMBERED_SUITS

from .rules import MCRRules, MCR_RULES

logger = logging.getLogger(__name__)

MCR_SHAPES = ShapeRules(
    seven_pairs=True,
    thirteen_orphans=True,
    seven_pairs_allow_quads=True,
    knitted_shapes=True,
)

REVERSIBLE = {
    (TileSuit.DOTS, 1), (TileSuit.DOTS, 2), (TileSuit.DOTS, 3),
    (TileSuit.DOTS, 4), (TileSuit.DOTS, 5), (TileSuit.DOTS, 8),
    (TileSuit.DOTS, 9), (TileSuit.BAMBOOS, 2), (TileSuit.BAMBOOS, 4),
    (TileSuit.BAMBOOS, 5), (TileSuit.BAMBOOS, 6), (TileSuit.BAMBOOS, 8),
    (TileSuit.BAMBOOS, 9), (TileSuit.DRAGONS, DragonType.WHITE),
}


class MCRView(HandView):
    """HandView with the MCR shape shortcuts"""

    @property
    def is_standard(self) -> bool:
        return self.shape == HandShape.STANDARD


@dataclass
class ScoringPattern:
    """Represents a scoring pattern"""
    name: str
    chinese_name: str
    points: int
    check_func: Callable[[MCRView], Union[bool, int]]
    excludes: List[str] = field(default_factory=list)  # Patterns this one excludes


def _has_run(values: List[int], length: int, step: int) -> bool:
    present = set(values)
    return any(all(v + step * k in present for k in range(length)) for v in present)


class MCRScorer:
    """
    MCR Mahjong Scorer

    Implements all 81 scoring patterns and the exclusion principle.
    Check functions return a bool, or an int for patterns that can be
    counted more than once.
    """

    def __init__(self):
        self.patterns = self._create_patterns()
        self.by_name = {p.name: p for p in self.patterns}

    def get_matching_patterns(self, v: MCRView) -> List[PatternMatch]:
        """
        Matching patterns after applying exclusion rules. Chicken Hand is
        added when nothing but flowers scored.
        """
        matching = []
        for pattern in self.patterns:
            count = int(pattern.check_func(v))
            if count:
                matching.append((pattern, count))

        excluded_names: Set[str] = set()
        for pattern, _ in matching:
            excluded_names.update(pattern.excludes)

        final = [
            PatternMatch(p.name, p.chinese_name, p.points, count)
            for p, count in matching if p.name not in excluded_names
        ]
        if not any(m.name != "Flower Tiles" for m in final):
            chicken = self.by_name["Chicken Hand"]
            final.insert(0, PatternMatch(chicken.name, chicken.chinese_name, chicken.points))
        return final

    def _create_patterns(self) -> List[ScoringPattern]:
        """Create all 81 scoring patterns"""
        P = ScoringPattern
        return [
            # ========== 88 Points ==========
            P("Big Four Winds", "大四喜", 88, self._check_big_four_winds,
              ["All Pungs", "Prevalent Wind", "Seat Wind", "Pung of Terminals or Honors",
               "Big Three Winds", "Little Four Winds"]),
            P("Big Three Dragons", "大三元", 88, self._check_big_three_dragons,
              ["Two Dragon Pungs", "Dragon Pung", "Little Three Dragons"]),
            P("All Green", "绿一色", 88, self._check_all_green,
              ["Half Flush", "One Voided Suit"]),
            P("Nine Gates", "九莲宝灯", 88, self._check_nine_gates,
              ["Full Flush", "Concealed Hand", "Pung of Terminals or Honors",
               "One Voided Suit", "No Honors"]),
            P("Four Kongs", "四杠", 88, self._check_four_kongs,
              ["Three Kongs", "Two Concealed Kongs", "Two Melded Kongs", "Melded Kong",
               "Concealed Kong", "Single Wait", "All Pungs"]),
            P("Seven Shifted Pairs", "连七对", 88, self._check_seven_shifted_pairs,
              ["Full Flush", "Concealed Hand", "Single Wait", "Seven Pairs", "One Voided Suit",
               "No Honors"]),
            P("Thirteen Orphans", "十三幺", 88, self._check_thirteen_orphans,
              ["All Types", "Concealed Hand", "Single Wait"]),

            # ========== 64 Points ==========
            P("All Terminals", "清幺九", 64, self._check_all_terminals,
              ["All Pungs", "Outside Hand", "Pung of Terminals or Honors", "No Honors",
               "All Terminals and Honors", "Double Pung"]),
            P("Little Four Winds", "小四喜", 64, self._check_little_four_winds,
              ["Big Three Winds", "Pung of Terminals or Honors"]),
            P("Little Three Dragons", "小三元", 64, self._check_little_three_dragons,
              ["Two Dragon Pungs", "Dragon Pung"]),
            P("All Honors", "字一色", 64, self._check_all_honors,
              ["All Pungs", "Pung of Terminals or Honors", "Outside Hand",
               "All Terminals and Honors"]),
            P("Four Concealed Pungs", "四暗刻", 64, self._check_four_concealed_pungs,
              ["Concealed Hand", "All Pungs", "Three Concealed Pungs", "Two Concealed Pungs"]),
            P("Pure Terminal Chows", "一色双龙会", 64, self._check_pure_terminal_chows,
              ["Full Flush", "All Chows", "Pure Double Chow", "Two Terminal Chows", "Seven Pairs"]),

            # ========== 48 Points ==========
            P("Quadruple Chow", "一色四同顺", 48, self._check_quadruple_chow,
              ["Pure Triple Chow", "Tile Hog", "Pure Double Chow", "Pure Shifted Pungs"]),
            P("Four Pure Shifted Pungs", "一色四节高", 48, self._check_four_pure_shifted_pungs,
              ["Pure Shifted Pungs", "All Pungs"]),

            # ========== 32 Points ==========
            P("Four Shifted Chows", "一色四步高", 32, self._check_four_shifted_chows,
              ["Short Straight", "Two Terminal Chows", "Pure Shifted Chows"]),
            P("Three Kongs", "三杠", 32, self._check_three_kongs,
              ["Two Melded Kongs", "Two Concealed Kongs", "Melded Kong", "Concealed Kong"]),
            P("All Terminals and Honors", "混幺九", 32, self._check_all_terminals_and_honors,
              ["All Pungs", "Outside Hand", "Pung of Terminals or Honors"]),

            # ========== 24 Points ==========
            P("Seven Pairs", "七对", 24, self._check_seven_pairs,
              ["Concealed Hand", "Single Wait"]),
            P("Greater Honors and Knitted Tiles", "七星不靠", 24, self._check_greater_honors_knitted,
              ["All Types", "Concealed Hand", "Lesser Honors and Knitted Tiles"]),
            P("All Even Pungs", "全双刻", 24, self._check_all_even_pungs,
              ["All Pungs", "All Simples", "No Honors"]),
            P("Full Flush", "清一色", 24, self._check_full_flush,
              ["Half Flush", "One Voided Suit", "No Honors"]),
            P("Pure Triple Chow", "一色三同顺", 24, self._check_pure_triple_chow,
              ["Pure Double Chow", "Pure Shifted Pungs"]),
            P("Pure Shifted Pungs", "一色三节高", 24, self._check_pure_shifted_pungs,
              ["Pure Triple Chow"]),
            P("Upper Tiles", "全大", 24, self._check_upper_tiles,
              ["No Honors", "Upper Four"]),
            P("Middle Tiles", "全中", 24, self._check_middle_tiles,
              ["All Simples", "No Honors"]),
            P("Lower Tiles", "全小", 24, self._check_lower_tiles,
              ["No Honors", "Lower Four"]),

            # ========== 16 Points ==========
            P("Pure Straight", "清龙", 16, self._check_pure_straight,
              ["Short Straight", "Two Terminal Chows"]),
            P("Three-Suited Terminal Chows", "三色双龙会", 16, self._check_three_suited_terminal_chows,
              ["All Chows", "Mixed Double Chow", "Two Terminal Chows", "No Honors"]),
            P("Pure Shifted Chows", "一色三步高", 16, self._check_pure_shifted_chows, []),
            P("All Fives", "全带五", 16, self._check_all_fives,
              ["All Simples", "No Honors"]),
            P("Triple Pung", "三同刻", 16, self._check_triple_pung,
              ["Double Pung"]),
            P("Three Concealed Pungs", "三暗刻", 16, self._check_three_concealed_pungs,
              ["Two Concealed Pungs"]),

            # ========== 12 Points ==========
            P("Lesser Honors and Knitted Tiles", "全不靠", 12, self._check_lesser_honors_knitted,
              ["All Types", "Concealed Hand"]),
            P("Knitted Straight", "组合龙", 12, self._check_knitted_straight, []),
            P("Upper Four", "大于五", 12, self._check_upper_four, ["No Honors"]),
            P("Lower Four", "小于五", 12, self._check_lower_four, ["No Honors"]),
            P("Big Three Winds", "大三风", 12, self._check_big_three_winds, []),

            # ========== 8 Points ==========
            P("Mixed Straight", "花龙", 8, self._check_mixed_straight, []),
            P("Reversible Tiles", "推不倒", 8, self._check_reversible_tiles, ["One Voided Suit"]),
            P("Mixed Triple Chow", "三色三同顺", 8, self._check_mixed_triple_chow,
              ["Mixed Double Chow"]),
            P("Mixed Shifted Pungs", "三色三节高", 8, self._check_mixed_shifted_pungs, []),
            P("Chicken Hand", "无番和", 8, self._check_chicken_hand, []),
            P("Last Tile Draw", "妙手回春", 8, self._check_last_tile_draw, ["Self-Drawn"]),
            P("Last Tile Claim", "海底捞月", 8, self._check_last_tile_claim, []),
            P("Out with Replacement Tile", "杠上开花", 8, self._check_out_with_replacement,
              ["Self-Drawn"]),
            P("Robbing the Kong", "抢杠和", 8, self._check_robbing_kong, ["Last Tile"]),
            P("Two Concealed Kongs", "双暗杠", 8, self._check_two_concealed_kongs,
              ["Concealed Kong"]),

            # ========== 6 Points ==========
            P("All Pungs", "碰碰和", 6, self._check_all_pungs, []),
            P("Half Flush", "混一色", 6, self._check_half_flush, ["One Voided Suit"]),
            P("Mixed Shifted Chows", "三色三步高", 6, self._check_mixed_shifted_chows, []),
            P("All Types", "五门齐", 6, self._check_all_types, []),
            P("Melded Hand", "全求人", 6, self._check_melded_hand, ["Single Wait"]),
            P("Two Dragon Pungs", "双箭刻", 6, self._check_two_dragon_pungs, ["Dragon Pung"]),

            # ========== 4 Points ==========
            P("Outside Hand", "全带幺", 4, self._check_outside_hand, []),
            P("Fully Concealed Hand", "不求人", 4, self._check_fully_concealed_hand,
              ["Self-Drawn", "Concealed Hand"]),
            P("Two Melded Kongs", "双明杠", 4, self._check_two_melded_kongs, ["Melded Kong"]),
            P("Last Tile", "和绝张", 4, self._check_last_tile, []),

            # ========== 2 Points ==========
            P("Dragon Pung", "箭刻", 2, self._check_dragon_pung, []),
            P("Prevalent Wind", "圈风刻", 2, self._check_prevalent_wind, []),
            P("Seat Wind", "门风刻", 2, self._check_seat_wind, []),
            P("Concealed Hand", "门前清", 2, self._check_concealed_hand, []),
            P("All Chows", "平和", 2, self._check_all_chows, ["No Honors"]),
            P("Tile Hog", "四归一", 2, self._check_tile_hog, []),
            P("Double Pung", "双同刻", 2, self._check_double_pung, []),
            P("Two Concealed Pungs", "双暗刻", 2, self._check_two_concealed_pungs, []),
            P("Concealed Kong", "暗杠", 2, self._check_concealed_kong, []),
            P("All Simples", "断幺", 2, self._check_all_simples, ["No Honors"]),

            # ========== 1 Point ==========
            P("Pure Double Chow", "一般高", 1, self._check_pure_double_chow, []),
            P("Mixed Double Chow", "喜相逢", 1, self._check_mixed_double_chow, []),
            P("Short Straight", "连六", 1, self._check_short_straight, []),
            P("Two Terminal Chows", "老少副", 1, self._check_two_terminal_chows, []),
            P("Pung of Terminals or Honors", "幺九刻", 1, self._check_pung_terminals_honors, []),
            P("Melded Kong", "明杠", 1, self._check_melded_kong, []),
            P("One Voided Suit", "缺一门", 1, self._check_one_voided_suit, []),
            P("No Honors", "无字", 1, self._check_no_honors, []),
            P("Edge Wait", "边张", 1, self._check_edge_wait, []),
            P("Closed Wait", "嵌张", 1, self._check_closed_wait, []),
            P("Single Wait", "单钓将", 1, self._check_single_wait, []),
            P("Self-Drawn", "自摸", 1, self._check_self_drawn, []),
            P("Flower Tiles", "花牌", 1, self._check_flower_tiles, []),
        ]

    # ========== Pattern Check Functions ==========

    # --- 88 Points ---
    def _check_big_four_winds(self, v: MCRView) -> bool:
        return v.count_wind_pungs() == 4

    def _check_big_three_dragons(self, v: MCRView) -> bool:
        return v.count_dragon_pungs() == 3

    def _check_all_green(self, v: MCRView) -> bool:
        """All tiles are green (2,3,4,6,8 bamboo + green dragon)"""
        return v.all_match(lambda t: t.is_green)

    def _check_nine_gates(self, v: MCRView) -> bool:
        """1112345678999 held concealed, winning on any tile of the suit"""
        if not v.is_standard or not v.is_menzen or v.kongs or not v.is_full_flush():
            return False
        values = [0] * 10
        for t in v.all_tiles:
            values[t.value] += 1
        values[v.win_tile.value] -= 1
        return values[1:] == [3, 1, 1, 1, 1, 1, 1, 1, 3]

    def _check_four_kongs(self, v: MCRView) -> bool:
        return len(v.kongs) == 4

    def _check_seven_shifted_pairs(self, v: MCRView) -> bool:
        """Seven consecutive pairs in same suit"""
        if v.shape != HandShape.SEVEN_PAIRS:
            return False
        pairs = sorted(p.tile_index for p in v.decomposition.pairs)
        if len(set(pairs)) != 7 or pairs[0] >= 27:
            return False
        same_suit = pairs[0] // 9 == pairs[-1] // 9
        return same_suit and pairs == list(range(pairs[0], pairs[0] + 7))

    def _check_thirteen_orphans(self, v: MCRView) -> bool:
        return v.shape == HandShape.THIRTEEN_ORPHANS

    # --- 64 Points ---
    def _check_all_terminals(self, v: MCRView) -> bool:
        return v.all_match(lambda t: t.is_terminal)

    def _check_little_four_winds(self, v: MCRView) -> bool:
        """Three wind pungs + wind pair"""
        return v.count_wind_pungs() == 3 and v.pair is not None and v.pair.suit == TileSuit.WINDS

    def _check_little_three_dragons(self, v: MCRView) -> bool:
        """Two dragon pungs + dragon pair"""
        return v.count_dragon_pungs() == 2 and v.pair is not None and v.pair.suit == TileSuit.DRAGONS

    def _check_all_honors(self, v: MCRView) -> bool:
        return v.all_match(lambda t: t.is_honor)

    def _check_four_concealed_pungs(self, v: MCRView) -> bool:
        return v.concealed_pung_count() == 4

    def _check_pure_terminal_chows(self, v: MCRView) -> bool:
        """123+789 twice in same suit + 5 pair of that suit"""
        if not v.is_standard or v.pair is None or v.pair.value != 5 or not v.pair.is_numbered:
            return False
        starts = v.identical_chow_counts()
        suit = v.pair.suit
        return starts.get((suit, 1), 0) == 2 and starts.get((suit, 7), 0) == 2

    # --- 48 Points ---
    def _check_quadruple_chow(self, v: MCRView) -> bool:
        return any(c >= 4 for c in v.identical_chow_counts().values())

    def _check_four_pure_shifted_pungs(self, v: MCRView) -> bool:
        """Four pungs in sequence in same suit (e.g., 2222-3333-4444-5555)"""
        pungs = v.numbered_pungs()
        return any(_has_run([val for s, val in pungs if s == suit], 4, 1) for suit in NUMBERED_SUITS)

    # --- 32 Points ---
    def _check_four_shifted_chows(self, v: MCRView) -> bool:
        """Four chows in sequence (by 1 or 2) in same suit"""
        for suit in NUMBERED_SUITS:
            values = [val for s, val in v.chow_starts() if s == suit]
            if len(values) >= 4 and (_has_run(values, 4, 1) or _has_run(values, 4, 2)):
                return True
        return False

    def _check_three_kongs(self, v: MCRView) -> bool:
        return len(v.kongs) == 3

    def _check_all_terminals_and_honors(self, v: MCRView) -> bool:
        """All tiles are terminals or honors, both present"""
        return (
            v.all_match(lambda t: t.is_terminal_or_honor)
            and v.has_honors()
            and not v.all_match(lambda t: t.is_honor)
        )

    # --- 24 Points ---
    def _check_seven_pairs(self, v: MCRView) -> bool:
        return v.shape == HandShape.SEVEN_PAIRS

    def _check_greater_honors_knitted(self, v: MCRView) -> bool:
        """All 7 honors + 7 knitted tiles"""
        if v.shape != HandShape.HONORS_AND_KNITTED:
            return False
        return sum(1 for t in v.decomposition.singles if t.is_honor) == 7

    def _check_all_even_pungs(self, v: MCRView) -> bool:
        """All pungs of even numbers (2,4,6,8)"""
        if not self._check_all_pungs(v):
            return False
        return v.all_match(lambda t: t.is_numbered and t.value % 2 == 0)

    def _check_full_flush(self, v: MCRView) -> bool:
        return v.is_full_flush()

    def _check_pure_triple_chow(self, v: MCRView) -> bool:
        return any(c == 3 for c in v.identical_chow_counts().values())

    def _check_pure_shifted_pungs(self, v: MCRView) -> bool:
        """Three pungs in sequence in same suit"""
        if self._check_four_pure_shifted_pungs(v):
            return False
        pungs = v.numbered_pungs()
        return any(_has_run([val for s, val in pungs if s == suit], 3, 1) for suit in NUMBERED_SUITS)

    def _check_upper_tiles(self, v: MCRView) -> bool:
        return v.all_match(lambda t: t.is_numbered and t.value >= 7)

    def _check_middle_tiles(self, v: MCRView) -> bool:
        return v.all_match(lambda t: t.is_numbered and 4 <= t.value <= 6)

    def _check_lower_tiles(self, v: MCRView) -> bool:
        return v.all_match(lambda t: t.is_numbered and t.value <= 3)

    # --- 16 Points ---
    def _check_pure_straight(self, v: MCRView) -> bool:
        """123-456-789 in same suit"""
        starts = v.chow_starts()
        return any({1, 4, 7} <= {val for s, val in starts if s == suit} for suit in NUMBERED_SUITS)

    def _check_three_suited_terminal_chows(self, v: MCRView) -> bool:
        """123+789 in two suits + 5 pair in the third suit"""
        if not v.is_standard or v.pair is None or not v.pair.is_numbered or v.pair.value != 5:
            return False
        starts = set(v.chow_starts())
        suits = [s for s in NUMBERED_SUITS if (s, 1) in starts and (s, 7) in starts]
        return len(suits) == 2 and v.pair.suit not in suits

    def _check_pure_shifted_chows(self, v: MCRView) -> bool:
        """Three chows in sequence (by 1 or 2) in same suit"""
        if self._check_four_shifted_chows(v):
            return False
        for suit in NUMBERED_SUITS:
            values = [val for s, val in v.chow_starts() if s == suit]
            if _has_run(values, 3, 1) or _has_run(values, 3, 2):
                return True
        return False

    def _check_all_fives(self, v: MCRView) -> bool:
        """Every set and pair contains a 5"""
        return v.every_block_has(lambda t: t.is_numbered and t.value == 5)

    def _check_triple_pung(self, v: MCRView) -> bool:
        """Three pungs of same number in different suits"""
        by_value = defaultdict(set)
        for suit, val in v.numbered_pungs():
            by_value[val].add(suit)
        return any(len(suits) >= 3 for suits in by_value.values())

    def _check_three_concealed_pungs(self, v: MCRView) -> bool:
        return v.concealed_pung_count() == 3

    # --- 12 Points ---
    def _check_lesser_honors_knitted(self, v: MCRView) -> bool:
        return v.shape == HandShape.HONORS_AND_KNITTED

    def _check_knitted_straight(self, v: MCRView) -> bool:
        return v.shape == HandShape.KNITTED_STRAIGHT

    def _check_upper_four(self, v: MCRView) -> bool:
        return v.all_match(lambda t: t.is_numbered and t.value >= 6)

    def _check_lower_four(self, v: MCRView) -> bool:
        return v.all_match(lambda t: t.is_numbered and t.value <= 4)

    def _check_big_three_winds(self, v: MCRView) -> bool:
        return v.count_wind_pungs() == 3

    # --- 8 Points ---
    def _check_mixed_straight(self, v: MCRView) -> bool:
        """123-456-789 from three different suits"""
        starts = set(v.chow_starts())
        for s1 in NUMBERED_SUITS:
            for s4 in NUMBERED_SUITS:
                for s7 in NUMBERED_SUITS:
                    if len({s1, s4, s7}) == 3 and {(s1, 1), (s4, 4), (s7, 7)} <= starts:
                        return True
        return False

    def _check_reversible_tiles(self, v: MCRView) -> bool:
        """All tiles look same upside down"""
        return v.all_match(lambda t: (t.suit, t.value) in REVERSIBLE)

    def _check_mixed_triple_chow(self, v: MCRView) -> bool:
        """Three chows of same numbers in different suits"""
        by_value = defaultdict(set)
        for suit, val in v.chow_starts():
            by_value[val].add(suit)
        return any(len(suits) >= 3 for suits in by_value.values())

    def _check_mixed_shifted_pungs(self, v: MCRView) -> bool:
        """Three pungs in sequence from three suits"""
        pungs = v.numbered_pungs()
        for i in range(len(pungs)):
            for j in range(i + 1, len(pungs)):
                for k in range(j + 1, len(pungs)):
                    suits = {pungs[i][0], pungs[j][0], pungs[k][0]}
                    vals = sorted([pungs[i][1], pungs[j][1], pungs[k][1]])
                    if len(suits) == 3 and vals == list(range(vals[0], vals[0] + 3)):
                        return True
        return False

    def _check_chicken_hand(self, v: MCRView) -> bool:
        """Applied by get_matching_patterns when nothing else scores"""
        return False

    def _check_last_tile_draw(self, v: MCRView) -> bool:
        return v.context.is_tsumo and v.context.is_haitei

    def _check_last_tile_claim(self, v: MCRView) -> bool:
        return not v.context.is_tsumo and v.context.is_haitei

    def _check_out_with_replacement(self, v: MCRView) -> bool:
        return v.context.is_tsumo and v.context.is_rinshan

    def _check_robbing_kong(self, v: MCRView) -> bool:
        return v.context.is_chankan

    def _check_two_concealed_kongs(self, v: MCRView) -> bool:
        return len(v.concealed_kongs) == 2

    # --- 6 Points ---
    def _check_all_pungs(self, v: MCRView) -> bool:
        """Four pungs/kongs + pair"""
        return v.is_standard and not v.chows

    def _check_half_flush(self, v: MCRView) -> bool:
        return v.is_half_flush()

    def _check_mixed_shifted_chows(self, v: MCRView) -> bool:
        """Three chows in sequence from three suits"""
        chows = v.chow_starts()
        for i in range(len(chows)):
            for j in range(i + 1, len(chows)):
                for k in range(j + 1, len(chows)):
                    suits = {chows[i][0], chows[j][0], chows[k][0]}
                    vals = sorted([chows[i][1], chows[j][1], chows[k][1]])
                    if len(suits) == 3 and vals == list(range(vals[0], vals[0] + 3)):
                        return True
        return False

    def _check_all_types(self, v: MCRView) -> bool:
        """All five tile types present (3 suits + winds + dragons)"""
        return {t.suit for t in v.all_tiles} == set(TileSuit)

    def _check_melded_hand(self, v: MCRView) -> bool:
        """Four called melds, winning on a discarded pair tile"""
        called = [g for g in v.declared if not g.is_concealed]
        return len(called) == 4 and not v.context.is_tsumo and v.wait == WaitType.TANKI

    def _check_two_dragon_pungs(self, v: MCRView) -> bool:
        return v.count_dragon_pungs() == 2

    # --- 4 Points ---
    def _check_outside_hand(self, v: MCRView) -> bool:
        """Every set and the pair contain a terminal or honor"""
        return v.every_block_has(lambda t: t.is_terminal_or_honor)

    def _check_fully_concealed_hand(self, v: MCRView) -> bool:
        return v.is_menzen and v.context.is_tsumo

    def _check_two_melded_kongs(self, v: MCRView) -> bool:
        return len(v.melded_kongs) == 2

    def _check_last_tile(self, v: MCRView) -> bool:
        """Win on the last unseen copy of a tile"""
        return v.context.is_last_copy

    # --- 2 Points ---
    def _check_dragon_pung(self, v: MCRView) -> int:
        return v.count_dragon_pungs()

    def _check_prevalent_wind(self, v: MCRView) -> bool:
        return v.has_pung_of(Tile(TileSuit.WINDS, v.context.round_wind))

    def _check_seat_wind(self, v: MCRView) -> bool:
        return v.has_pung_of(Tile(TileSuit.WINDS, v.context.seat_wind))

    def _check_concealed_hand(self, v: MCRView) -> bool:
        """No called melds, winning on a discard"""
        return v.is_menzen and not v.context.is_tsumo

    def _check_all_chows(self, v: MCRView) -> bool:
        """Four chows + numbered pair"""
        return v.is_standard and not v.pungs and v.pair is not None and v.pair.is_numbered

    def _check_tile_hog(self, v: MCRView) -> int:
        """Four of a tile kind used without declaring a kong"""
        kong_kinds = {g.base_tile.tile_index for g in v.kongs}
        return sum(1 for idx, c in enumerate(v.counts) if c == 4 and idx not in kong_kinds)

    def _check_double_pung(self, v: MCRView) -> bool:
        """Two pungs of same number in different suits"""
        if self._check_triple_pung(v):
            return False
        by_value = defaultdict(set)
        for suit, val in v.numbered_pungs():
            by_value[val].add(suit)
        return any(len(suits) >= 2 for suits in by_value.values())

    def _check_two_concealed_pungs(self, v: MCRView) -> bool:
        return v.concealed_pung_count() == 2

    def _check_concealed_kong(self, v: MCRView) -> bool:
        return len(v.concealed_kongs) == 1

    def _check_all_simples(self, v: MCRView) -> bool:
        return v.all_match(lambda t: t.is_simple)

    # --- 1 Point ---
    def _check_pure_double_chow(self, v: MCRView) -> int:
        return sum(1 for c in v.identical_chow_counts().values() if c == 2)

    def _check_mixed_double_chow(self, v: MCRView) -> bool:
        """Two chows of same numbers in different suits"""
        by_value = defaultdict(set)
        for suit, val in v.chow_starts():
            by_value[val].add(suit)
        return any(len(suits) == 2 for suits in by_value.values())

    def _check_short_straight(self, v: MCRView) -> bool:
        """Two consecutive chows in same suit (e.g., 123-456)"""
        for suit in NUMBERED_SUITS:
            values = [val for s, val in v.chow_starts() if s == suit]
            if _has_run(values, 2, 3):
                return True
        return False

    def _check_two_terminal_chows(self, v: MCRView) -> bool:
        """123 and 789 in same suit"""
        starts = set(v.chow_starts())
        return any((s, 1) in starts and (s, 7) in starts for s in NUMBERED_SUITS)

    def _check_pung_terminals_honors(self, v: MCRView) -> int:
        """Pungs of terminals, and of winds that score no wind pattern"""
        scoring_winds = {v.context.seat_wind, v.context.round_wind}
        count = 0
        for t in v.pung_tiles():
            if t.is_terminal:
                count += 1
            elif t.suit == TileSuit.WINDS and t.value not in scoring_winds:
                count += 1
        return count

    def _check_melded_kong(self, v: MCRView) -> bool:
        return len(v.melded_kongs) == 1

    def _check_one_voided_suit(self, v: MCRView) -> bool:
        return len(v.suits_used()) == 2

    def _check_no_honors(self, v: MCRView) -> bool:
        return not v.has_honors()

    def _check_edge_wait(self, v: MCRView) -> bool:
        return v.unique_wait and v.wait == WaitType.PENCHAN

    def _check_closed_wait(self, v: MCRView) -> bool:
        return v.unique_wait and v.wait == WaitType.KANCHAN

    def _check_single_wait(self, v: MCRView) -> bool:
        return v.unique_wait and v.wait == WaitType.TANKI

    def _check_self_drawn(self, v: MCRView) -> bool:
        return v.context.is_tsumo

    def _check_flower_tiles(self, v: MCRView) -> int:
        return v.context.flower_count()


class MCRRuleSet(RuleSet):
    """
    Mahjong Competition Rules. A hand needs 8 points before flowers to
    be declared.
    """

    variant = Variant.MCR
    shape_rules = MCR_SHAPES

    def __init__(self, rules: Optional[MCRRules] = None):
        self.rules = rules or MCR_RULES
        self.name = self.rules.name
        self.scorer = MCRScorer()

    def score(
        self,
        decomposition: WinDecomposition,
        context: WinContext,
        hand: Optional[HandState] = None,
    ) -> ScoreResult:
        unique_wait = is_unique_wait(decomposition, context, self.shape_rules, hand)
        tiles = hand.all_tiles if hand is not None else None
        best: Optional[ScoreResult] = None
        for placement in win_placements(decomposition, context.win_tile) or [None]:
            v = MCRView(decomposition, context, placement, tiles, unique_wait=unique_wait)
            patterns = self.scorer.get_matching_patterns(v)
            if not self.rules.count_flowers:
                patterns = [p for p in patterns if p.name != "Flower Tiles"]
            points = sum(p.total for p in patterns)
            if best is None or points > best.value:
                best = ScoreResult(
                    variant=self.variant,
                    value=points,
                    units=points,
                    patterns=patterns,
                    decomposition=decomposition,
                    payments=self._payments(points, context),
                )
        logger.debug(f"mcr {decomposition}: {best.value} points")
        return best

    def _payments(self, points: int, context: WinContext) -> dict:
        base = self.rules.base_payment
        if context.is_tsumo:
            return {"each": points + base}
        return {"discarder": points + base, "other": base}

    def refine_win_legality(
        self,
        decomposition: WinDecomposition,
        context: WinContext,
        hand: Optional[HandState] = None,
    ) -> WinCheck:
        result = self.score(decomposition, context, hand)
        points = sum(p.total for p in result.patterns if p.name != "Flower Tiles")
        if points < self.rules.min_points:
            return IllegalWinDeclaration(
                RejectionReason.VALUE_FLOOR_NOT_MET,
                f"{points} points before flowers, {self.rules.min_points} required",
                result,
            )
        return WinAccepted(decomposition)
