"""
Tests for Shanghai scoring
"""

import pytest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from mahjong_core.context import WinContext
from mahjong_core.hand import HandState
from mahjong_core.rules import WinAccepted, IllegalWinDeclaration, RejectionReason
from mahjong_core.tiles import FlowerType, WindType, char, RED_DRAGON, EAST
from shanghai_mahjong import ShanghaiRuleSet, SHANGHAI_RULES, SHANGHAI_TWO_FAN_RULES


def hand(text: str) -> HandState:
    return HandState.from_string(text)


@pytest.fixture
def shanghai():
    return ShanghaiRuleSet()


TRIPLETS_AND_RUNS = "555m234p567s888p11z"
PLAIN_OPEN = "456m11z P:333p C:234m C:678s"


class TestRules:
    """Test the rule configuration"""

    def test_payment_table(self):
        assert SHANGHAI_RULES.payment_for(1) == 1
        assert SHANGHAI_RULES.payment_for(4) == 6
        assert SHANGHAI_RULES.payment_for(8) == 15
        assert SHANGHAI_RULES.payment_for(12) == 15

    def test_presets_do_not_share_tables(self):
        assert SHANGHAI_RULES.payment_table is not SHANGHAI_TWO_FAN_RULES.payment_table


class TestScoring:
    """Test fan counting and payments"""

    def test_concealed_single_wait(self, shanghai):
        result = shanghai.evaluate(hand(TRIPLETS_AND_RUNS), WinContext(win_tile=EAST))
        assert set(result.pattern_names) == {"Single Wait", "Concealed Hand"}
        assert result.units == 2
        assert result.value == 2
        assert result.payments == {"discarder": 2}

    def test_single_wait_needs_only_wait(self, shanghai):
        """A pair wait that shared the hand with a second wait is not a single wait"""
        ctx = WinContext(win_tile=char(1), seat_wind=WindType.SOUTH, round_wind=WindType.SOUTH)
        result = shanghai.evaluate(hand("11234m456p789s111z"), ctx)
        assert not result.has_pattern("Single Wait")
        assert result.pattern_names == ["Concealed Hand"]
        assert result.value == 1

    def test_self_draw_paid_by_three(self, shanghai):
        ctx = WinContext(win_tile=EAST, is_tsumo=True)
        result = shanghai.evaluate(hand(TRIPLETS_AND_RUNS), ctx)
        assert result.units == 3
        assert result.payments == {"each": 4}
        assert result.value == 12

    def test_base_win(self, shanghai):
        ctx = WinContext(win_tile=char(6), seat_wind=WindType.SOUTH)
        result = shanghai.evaluate(hand(PLAIN_OPEN), ctx)
        assert result.pattern_names == ["Base Win"]
        assert result.value == 1

    def test_fan_cap(self, shanghai):
        result = shanghai.evaluate(hand("111222z555666z77z"), WinContext(win_tile=RED_DRAGON))
        assert result.has_pattern("All Honors")
        assert not result.has_pattern("Half Flush")
        assert not result.has_pattern("All Pungs")
        assert result.units == 8
        assert result.limit_name == "Capped"
        assert result.value == 15

    def test_seat_flowers(self, shanghai):
        ctx = WinContext(win_tile=EAST, flowers=[FlowerType.SPRING, FlowerType.SUMMER, FlowerType.PLUM])
        result = shanghai.evaluate(hand(TRIPLETS_AND_RUNS), ctx)
        flowers = [p for p in result.patterns if p.name == "Seat Flowers"]
        assert flowers[0].count == 2
        assert result.units == 4

    def test_full_flush(self, shanghai):
        result = shanghai.evaluate(hand("123345567789m55m"), WinContext(win_tile=char(9)))
        assert result.has_pattern("Full Flush")
        assert not result.has_pattern("Half Flush")

    def test_seven_pairs(self, shanghai):
        result = shanghai.evaluate(hand("1122m3344p5566s77z"), WinContext(win_tile=char(1)))
        assert result.has_pattern("Seven Pairs")
        assert not result.has_pattern("Concealed Hand")


class TestLegality:
    """Test the minimum fan and allowed shapes"""

    def test_one_fan_accepted(self, shanghai):
        ctx = WinContext(win_tile=char(6), seat_wind=WindType.SOUTH)
        assert isinstance(shanghai.check_win(hand(PLAIN_OPEN), ctx), WinAccepted)

    def test_two_fan_floor(self):
        rules = ShanghaiRuleSet(SHANGHAI_TWO_FAN_RULES)
        ctx = WinContext(win_tile=char(6), seat_wind=WindType.SOUTH)
        verdict = rules.check_win(hand(PLAIN_OPEN), ctx)
        assert isinstance(verdict, IllegalWinDeclaration)
        assert verdict.reason == RejectionReason.VALUE_FLOOR_NOT_MET

    def test_thirteen_orphans_not_played(self, shanghai):
        verdict = shanghai.check_win(hand("119m19p19s1234567z"), WinContext(win_tile=char(1)))
        assert verdict.reason == RejectionReason.NOT_COMPLETE
