"""
Tests for Riichi scoring
"""

import pytest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from mahjong_core.context import WinContext
from mahjong_core.decomposer import HandShape
from mahjong_core.hand import HandState
from mahjong_core.rules import WinAccepted, IllegalWinDeclaration, RejectionReason
from mahjong_core.tiles import (
    Tile, char, dot, bam, EAST, SOUTH, WindType, DragonType, dragon,
)
from riichi_mahjong import RiichiRuleSet, EMA_RULES, TENHOU_RULES, WRC_RULES, get_dora_tile


def hand(text: str) -> HandState:
    return HandState.from_string(text)


@pytest.fixture
def tenhou():
    return RiichiRuleSet(TENHOU_RULES)


# Triplet, two runs, triplet and an East pair
TRIPLETS_AND_RUNS = "555m234p567s888p11z"
# Riichi + tanyao + pinfu shape, completed by 6m
TANYAO_PINFU = "234456m345p22678s"


class TestDora:
    """Test dora indicator successors"""

    def test_numbered_wraps(self):
        assert get_dora_tile(char(1)) == char(2)
        assert get_dora_tile(dot(9)) == dot(1)

    def test_winds_cycle(self):
        assert get_dora_tile(EAST) == SOUTH
        assert get_dora_tile(Tile(EAST.suit, WindType.NORTH)) == EAST

    def test_dragons_cycle(self):
        assert get_dora_tile(dragon(DragonType.WHITE)) == dragon(DragonType.GREEN)
        assert get_dora_tile(dragon(DragonType.GREEN)) == dragon(DragonType.RED)
        assert get_dora_tile(dragon(DragonType.RED)) == dragon(DragonType.WHITE)


class TestLegality:
    """Test yaku requirements"""

    def test_no_yaku_rejected(self, tenhou):
        """Triplets and runs with a guest-free pair have no yaku without riichi"""
        verdict = tenhou.check_win(hand(TRIPLETS_AND_RUNS), WinContext(win_tile=EAST))
        assert isinstance(verdict, IllegalWinDeclaration)
        assert verdict.reason == RejectionReason.NO_YAKU

    def test_riichi_makes_it_legal(self, tenhou):
        ctx = WinContext(win_tile=EAST, is_riichi=True)
        assert isinstance(tenhou.check_win(hand(TRIPLETS_AND_RUNS), ctx), WinAccepted)

    def test_dora_are_not_yaku(self, tenhou):
        ctx = WinContext(win_tile=EAST, dora_indicators=[char(4)])
        verdict = tenhou.check_win(hand(TRIPLETS_AND_RUNS), ctx)
        assert verdict.reason == RejectionReason.NO_YAKU

    def test_open_hand_without_yaku(self, tenhou):
        h = hand("234m567p11z P:789s C:345s")
        verdict = tenhou.check_win(h, WinContext(win_tile=char(2), seat_wind=WindType.SOUTH))
        assert verdict.reason == RejectionReason.NO_YAKU

    def test_seven_pairs_needs_distinct_pairs(self, tenhou):
        verdict = tenhou.check_win(hand("1111m3344p5566s77z"), WinContext(win_tile=char(1)))
        assert verdict.reason == RejectionReason.NOT_COMPLETE

    def test_tenpai_on_pair_tile(self, tenhou):
        h = hand(TRIPLETS_AND_RUNS).without_tile(EAST)
        result = tenhou.decomposer.classify(h)
        assert result.is_tenpai
        assert result.waits == [EAST]

    def test_can_declare_riichi(self, tenhou):
        assert tenhou.can_declare_riichi(hand("555m234p567s888p1z"))
        assert not tenhou.can_declare_riichi(hand("5m234p567s888p1z P:555m"))
        assert not tenhou.can_declare_riichi(hand("159m234p567s888p1z"))


class TestScoring:
    """Test han, fu and payments"""

    def test_riichi_tanki_fu(self, tenhou):
        """20 base + 10 closed ron + two closed simple triplets + double wind pair + tanki"""
        ctx = WinContext(win_tile=EAST, is_riichi=True)
        result = tenhou.evaluate(hand(TRIPLETS_AND_RUNS), ctx)
        assert result.units == 1
        assert result.fu == 50
        assert result.value == 2400
        assert result.payments == {"discarder": 2400}

    def test_pinfu_tsumo(self, tenhou):
        ctx = WinContext(win_tile=char(4), is_tsumo=True, seat_wind=WindType.SOUTH)
        result = tenhou.evaluate(hand("123456m678p23499s"), ctx)
        assert set(result.pattern_names) == {"Menzen Tsumo", "Pinfu"}
        assert result.fu == 20
        assert result.payments == {"dealer": 700, "non_dealer": 400}
        assert result.value == 1500

    def test_chiitoitsu(self, tenhou):
        ctx = WinContext(win_tile=char(1), seat_wind=WindType.WEST)
        result = tenhou.evaluate(hand("1122m3344p5566s77z"), ctx)
        assert result.decomposition.shape == HandShape.SEVEN_PAIRS
        assert result.has_pattern("Chiitoitsu")
        assert result.fu == 25
        assert result.value == 1600

    def test_ron_completed_triplet_is_open(self, tenhou):
        """A triplet finished by a claimed tile does not count as concealed"""
        h = hand("111m789m333p555s22z")
        ron = tenhou.evaluate(h, WinContext(win_tile=bam(5), is_riichi=True, seat_wind=WindType.WEST))
        assert not ron.has_pattern("Sanankou")
        tsumo = tenhou.evaluate(h, WinContext(win_tile=bam(5), is_tsumo=True, seat_wind=WindType.WEST))
        assert tsumo.has_pattern("Sanankou")

    def test_dora_pair_reaches_mangan(self, tenhou):
        ctx = WinContext(
            win_tile=char(6), is_tsumo=True, seat_wind=WindType.SOUTH, dora_indicators=[bam(1)],
        )
        result = tenhou.evaluate(hand(TANYAO_PINFU), ctx)
        assert result.has_pattern("Tanyao")
        dora = [p for p in result.patterns if p.name == "Dora"]
        assert dora[0].count == 2
        assert result.units == 5
        assert result.limit_name == "Mangan"
        assert result.payments == {"dealer": 4000, "non_dealer": 2000}
        assert result.value == 8000

    def test_red_five_depends_on_rules(self):
        ctx = WinContext(
            win_tile=char(6), is_tsumo=True, seat_wind=WindType.SOUTH, dora_indicators=[bam(1)],
        )
        h = hand("234406m345p22678s")
        tenhou = RiichiRuleSet(TENHOU_RULES).evaluate(h, ctx)
        assert tenhou.has_pattern("Akadora")
        assert tenhou.limit_name == "Haneman"
        assert tenhou.value == 12000
        ema = RiichiRuleSet(EMA_RULES).evaluate(h, ctx)
        assert not ema.has_pattern("Akadora")
        assert ema.value == 8000

    def test_kiriage_mangan(self):
        """4 han 30 fu rounds up to mangan only under WRC"""
        ctx = WinContext(win_tile=char(6), is_riichi=True, seat_wind=WindType.SOUTH,
                         dora_indicators=[dot(3)])
        h = hand(TANYAO_PINFU)
        plain = RiichiRuleSet(EMA_RULES).evaluate(h, ctx)
        assert (plain.units, plain.fu) == (4, 30)
        assert plain.value == 7700
        wrc = RiichiRuleSet(WRC_RULES).evaluate(h, ctx)
        assert wrc.limit_name == "Mangan"
        assert wrc.value == 8000

    def test_honba_and_riichi_sticks(self, tenhou):
        ctx = WinContext(win_tile=char(6), is_riichi=True, seat_wind=WindType.SOUTH,
                         dora_indicators=[dot(3)], honba=2, riichi_sticks=1)
        result = tenhou.evaluate(hand(TANYAO_PINFU), ctx)
        assert result.payments == {"discarder": 8300, "riichi_sticks": 1000}
        assert result.value == 9300

    def test_daisangen(self, tenhou):
        ctx = WinContext(win_tile=dot(1), is_tsumo=True, seat_wind=WindType.SOUTH)
        result = tenhou.evaluate(hand("555666777z123m11p"), ctx)
        assert result.pattern_names == ["Daisangen"]
        assert result.limit_name == "Yakuman"
        assert result.payments == {"dealer": 16000, "non_dealer": 8000}
        assert result.value == 32000

    def test_kokushi(self, tenhou):
        ctx = WinContext(win_tile=char(9))
        result = tenhou.evaluate(hand("119m19p19s1234567z"), ctx)
        assert result.has_pattern("Kokushi Musou")
        assert result.value == 48000
