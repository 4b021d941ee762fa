"""
Riichi Mahjong Yaku

The yaku catalogue and its checks. Every check reads one HandView, so a
hand with several decompositions or several readings of the winning tile
is judged one reading at a time.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, List, Tuple

from mahjong_core.decomposer import HandShape
from mahjong_core.patterns import HandView, WaitType
from mahjong_core.tiles import Tile, TileSuit, DragonType, WindType, NUMBERED_SUITS

from .rules import RiichiRules


class YakuType(IntEnum):
    """Categories of Yaku"""
    NORMAL = 0      # Regular yaku
    YAKUMAN = 1     # Limit hand (yakuman)
    DOUBLE_YAKUMAN = 2  # Double yakuman (optional rule)


@dataclass
class Yaku:
    """Represents a Yaku (winning pattern)"""
    name: str
    japanese_name: str
    han_closed: int        # Han value when closed
    han_open: int          # Han value when open (0 = not allowed open)
    yaku_type: YakuType = YakuType.NORMAL

    @property
    def is_yakuman(self) -> bool:
        return self.yaku_type in (YakuType.YAKUMAN, YakuType.DOUBLE_YAKUMAN)

    @property
    def yakuman_multiplier(self) -> int:
        return 2 if self.yaku_type == YakuType.DOUBLE_YAKUMAN else 1

    def han(self, is_open: bool) -> int:
        return self.han_open if is_open else self.han_closed


def _yakuman(name: str, japanese_name: str, double: bool = False) -> Yaku:
    return Yaku(name, japanese_name, 13, 13, YakuType.DOUBLE_YAKUMAN if double else YakuType.YAKUMAN)


class YakuChecker:
    """
    Finds the yaku of one HandView under a RiichiRules configuration.
    """

    def __init__(self, rules: RiichiRules):
        self.rules = rules
        self.yaku_checks = self._create_yaku_checks()

    def find_yaku(self, v: HandView) -> List[Yaku]:
        """
        Yakuman if any apply, otherwise regular yaku with exclusions applied.
        """
        yakuman = self._check_yakuman(v)
        if yakuman:
            if not self.rules.allow_yakuman_stacking:
                yakuman = [max(yakuman, key=lambda y: y.yakuman_multiplier)]
            return yakuman

        is_open = not v.is_menzen
        found = []
        for yaku, check_func in self.yaku_checks:
            if is_open and yaku.han_open == 0:
                continue
            if check_func(v):
                found.append(yaku)

        names = {y.name for y in found}
        excluded = set()
        if "Ryanpeikou" in names:
            excluded.add("Iipeikou")
        if "Chinitsu" in names:
            excluded.add("Honitsu")
        if "Junchan" in names:
            excluded.add("Chanta")
        if "Honroutou" in names:
            excluded.update({"Chanta", "Junchan"})
        return [y for y in found if y.name not in excluded]

    def _create_yaku_checks(self) -> List[Tuple[Yaku, Callable[[HandView], bool]]]:
        """Create list of yaku with their check functions"""
        return [
            # 1 Han
            (Yaku("Riichi", "立直", 1, 0), self._check_riichi),
            (Yaku("Ippatsu", "一発", 1, 0), self._check_ippatsu),
            (Yaku("Menzen Tsumo", "門前清自摸和", 1, 0), self._check_menzen_tsumo),
            (Yaku("Tanyao", "断幺九", 1, 1 if self.rules.allow_kuitan else 0), self._check_tanyao),
            (Yaku("Pinfu", "平和", 1, 0), self._check_pinfu),
            (Yaku("Iipeikou", "一盃口", 1, 0), self._check_iipeikou),
            (Yaku("Yakuhai (Seat Wind)", "自風牌", 1, 1), self._check_seat_wind),
            (Yaku("Yakuhai (Round Wind)", "場風牌", 1, 1), self._check_round_wind),
            (Yaku("Yakuhai (Haku)", "役牌 白", 1, 1), lambda v: self._check_dragon(v, DragonType.WHITE)),
            (Yaku("Yakuhai (Hatsu)", "役牌 發", 1, 1), lambda v: self._check_dragon(v, DragonType.GREEN)),
            (Yaku("Yakuhai (Chun)", "役牌 中", 1, 1), lambda v: self._check_dragon(v, DragonType.RED)),
            (Yaku("Rinshan Kaihou", "嶺上開花", 1, 1), self._check_rinshan),
            (Yaku("Chankan", "槍槓", 1, 1), self._check_chankan),
            (Yaku("Haitei", "海底摸月", 1, 1), self._check_haitei),
            (Yaku("Houtei", "河底撈魚", 1, 1), self._check_houtei),

            # 2 Han
            (Yaku("Double Riichi", "両立直", 2, 0), self._check_double_riichi),
            (Yaku("Chiitoitsu", "七対子", 2, 0), self._check_chiitoitsu),
            (Yaku("Sanshoku Doujun", "三色同順", 2, 1), self._check_sanshoku_doujun),
            (Yaku("Ittsu", "一気通貫", 2, 1), self._check_ittsu),
            (Yaku("Toitoi", "対々和", 2, 2), self._check_toitoi),
            (Yaku("Sanankou", "三暗刻", 2, 2), self._check_sanankou),
            (Yaku("Sanshoku Doukou", "三色同刻", 2, 2), self._check_sanshoku_doukou),
            (Yaku("Sankantsu", "三槓子", 2, 2), self._check_sankantsu),
            (Yaku("Chanta", "混全帯幺九", 2, 1), self._check_chanta),
            (Yaku("Honroutou", "混老頭", 2, 2), self._check_honroutou),
            (Yaku("Shousangen", "小三元", 2, 2), self._check_shousangen),

            # 3 Han
            (Yaku("Honitsu", "混一色", 3, 2), self._check_honitsu),
            (Yaku("Junchan", "純全帯幺九", 3, 2), self._check_junchan),
            (Yaku("Ryanpeikou", "二盃口", 3, 0), self._check_ryanpeikou),

            # 6 Han
            (Yaku("Chinitsu", "清一色", 6, 5), self._check_chinitsu),
        ]

    def _check_yakuman(self, v: HandView) -> List[Yaku]:
        """Check for yakuman hands"""
        double = self.rules.allow_double_yakuman
        yakuman = []

        if v.context.is_tenhou and v.context.is_dealer and v.context.is_tsumo:
            yakuman.append(_yakuman("Tenhou", "天和"))
        if v.context.is_chihou and not v.context.is_dealer and v.context.is_tsumo:
            yakuman.append(_yakuman("Chihou", "地和"))
        if v.shape == HandShape.THIRTEEN_ORPHANS:
            if v.decomposition.pair == v.win_tile:
                yakuman.append(_yakuman("Kokushi Musou Juusanmen", "国士無双十三面", double))
            else:
                yakuman.append(_yakuman("Kokushi Musou", "国士無双"))
            return yakuman
        if v.shape == HandShape.SEVEN_PAIRS:
            if v.all_match(lambda t: t.is_honor):
                yakuman.append(_yakuman("Tsuuiisou", "字一色"))
            return yakuman
        if v.shape != HandShape.STANDARD:
            return yakuman

        if v.is_menzen and v.concealed_pung_count() == 4:
            if v.wait == WaitType.TANKI:
                yakuman.append(_yakuman("Suuankou Tanki", "四暗刻単騎", double))
            else:
                yakuman.append(_yakuman("Suuankou", "四暗刻"))
        if v.count_dragon_pungs() == 3:
            yakuman.append(_yakuman("Daisangen", "大三元"))
        if v.count_wind_pungs() == 4:
            yakuman.append(_yakuman("Daisuushii", "大四喜", double))
        elif v.count_wind_pungs() == 3 and v.pair.suit == TileSuit.WINDS:
            yakuman.append(_yakuman("Shousuushii", "小四喜"))
        if v.all_match(lambda t: t.is_honor):
            yakuman.append(_yakuman("Tsuuiisou", "字一色"))
        if v.all_match(lambda t: t.is_terminal):
            yakuman.append(_yakuman("Chinroutou", "清老頭"))
        if v.all_match(lambda t: t.is_green):
            yakuman.append(_yakuman("Ryuuiisou", "緑一色"))
        if len(v.kongs) == 4:
            yakuman.append(_yakuman("Suukantsu", "四槓子"))
        nine_gates = self._check_chuuren(v)
        if nine_gates:
            yakuman.append(nine_gates)
        return yakuman

    # === Yaku Check Functions ===

    def _check_riichi(self, v: HandView) -> bool:
        return v.context.is_riichi and not v.context.is_double_riichi

    def _check_ippatsu(self, v: HandView) -> bool:
        return v.context.is_ippatsu and (v.context.is_riichi or v.context.is_double_riichi)

    def _check_menzen_tsumo(self, v: HandView) -> bool:
        return v.is_menzen and v.context.is_tsumo

    def _check_tanyao(self, v: HandView) -> bool:
        """All simples (no terminals/honors)"""
        return v.all_match(lambda t: t.is_simple)

    def _check_pinfu(self, v: HandView) -> bool:
        """All sequences, valueless pair, two-sided wait"""
        if v.shape != HandShape.STANDARD or not v.is_menzen:
            return False
        if v.pungs:
            return False
        if self._pair_is_yakuhai(v):
            return False
        return v.wait == WaitType.RYANMEN

    def _pair_is_yakuhai(self, v: HandView) -> bool:
        pair = v.pair
        if pair is None:
            return False
        if pair.suit == TileSuit.DRAGONS:
            return True
        return pair.suit == TileSuit.WINDS and pair.value in (v.context.seat_wind, v.context.round_wind)

    def _check_iipeikou(self, v: HandView) -> bool:
        """Two identical sequences"""
        if not v.is_menzen:
            return False
        return any(c >= 2 for c in v.identical_chow_counts().values())

    def _check_seat_wind(self, v: HandView) -> bool:
        return v.has_pung_of(Tile(TileSuit.WINDS, WindType(v.context.seat_wind)))

    def _check_round_wind(self, v: HandView) -> bool:
        return v.has_pung_of(Tile(TileSuit.WINDS, WindType(v.context.round_wind)))

    def _check_dragon(self, v: HandView, dragon: DragonType) -> bool:
        return v.has_pung_of(Tile(TileSuit.DRAGONS, dragon))

    def _check_rinshan(self, v: HandView) -> bool:
        return v.context.is_rinshan and v.context.is_tsumo

    def _check_chankan(self, v: HandView) -> bool:
        return v.context.is_chankan and not v.context.is_tsumo

    def _check_haitei(self, v: HandView) -> bool:
        return v.context.is_haitei and v.context.is_tsumo and not v.context.is_rinshan

    def _check_houtei(self, v: HandView) -> bool:
        return v.context.is_haitei and not v.context.is_tsumo

    def _check_double_riichi(self, v: HandView) -> bool:
        return v.context.is_double_riichi

    def _check_chiitoitsu(self, v: HandView) -> bool:
        return v.shape == HandShape.SEVEN_PAIRS

    def _check_sanshoku_doujun(self, v: HandView) -> bool:
        """Three suits, same sequence"""
        by_value = {}
        for suit, value in v.chow_starts():
            by_value.setdefault(value, set()).add(suit)
        return any(len(suits) >= 3 for suits in by_value.values())

    def _check_ittsu(self, v: HandView) -> bool:
        """1-2-3, 4-5-6, 7-8-9 in same suit"""
        starts = v.chow_starts()
        return any({1, 4, 7} <= {value for s, value in starts if s == suit} for suit in NUMBERED_SUITS)

    def _check_toitoi(self, v: HandView) -> bool:
        """All triplets/quads"""
        return v.shape == HandShape.STANDARD and not v.chows

    def _check_sanankou(self, v: HandView) -> bool:
        """Three concealed triplets (a triplet completed by ron does not count)"""
        return v.shape == HandShape.STANDARD and v.concealed_pung_count() == 3

    def _check_sanshoku_doukou(self, v: HandView) -> bool:
        """Same triplet in three suits"""
        by_value = {}
        for suit, value in v.numbered_pungs():
            by_value.setdefault(value, set()).add(suit)
        return any(len(suits) >= 3 for suits in by_value.values())

    def _check_sankantsu(self, v: HandView) -> bool:
        return len(v.kongs) == 3

    def _check_chanta(self, v: HandView) -> bool:
        """All sets contain terminal or honor, with honors and a sequence"""
        if not v.chows or not v.has_honors():
            return False
        return v.every_block_has(lambda t: t.is_terminal_or_honor)

    def _check_honroutou(self, v: HandView) -> bool:
        """All terminals and honors, with both present"""
        return (
            v.all_match(lambda t: t.is_terminal_or_honor)
            and v.has_honors()
            and not v.all_match(lambda t: t.is_honor)
        )

    def _check_shousangen(self, v: HandView) -> bool:
        """Small 3 dragons (2 pongs + pair)"""
        return v.count_dragon_pungs() == 2 and v.pair is not None and v.pair.suit == TileSuit.DRAGONS

    def _check_honitsu(self, v: HandView) -> bool:
        return v.is_half_flush()

    def _check_junchan(self, v: HandView) -> bool:
        """All sets contain terminal, no honors"""
        if not v.chows or v.has_honors():
            return False
        return v.every_block_has(lambda t: t.is_terminal)

    def _check_ryanpeikou(self, v: HandView) -> bool:
        """Two sets of identical sequences"""
        if not v.is_menzen:
            return False
        return sum(c // 2 for c in v.identical_chow_counts().values()) >= 2

    def _check_chinitsu(self, v: HandView) -> bool:
        return v.is_full_flush()

    def _check_chuuren(self, v: HandView):
        """Nine gates (1112345678999 + any in same suit), closed with no kong"""
        if not v.is_menzen or v.kongs or not v.is_full_flush():
            return None
        values = [0] * 10
        for t in v.all_tiles:
            values[t.value] += 1
        required = [0, 3, 1, 1, 1, 1, 1, 1, 1, 3]
        if any(values[i] < required[i] for i in range(1, 10)):
            return None
        values[v.win_tile.value] -= 1
        if values[1:] == required[1:]:
            return _yakuman("Junsei Chuuren Poutou", "純正九蓮宝燈", self.rules.allow_double_yakuman)
        return _yakuman("Chuuren Poutou", "九蓮宝燈")
