"""
Tests for MCR scoring
"""

import pytest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from mahjong_core.context import WinContext
from mahjong_core.hand import HandState
from mahjong_core.rules import WinAccepted, IllegalWinDeclaration, RejectionReason
from mahjong_core.tiles import FlowerType, WindType, char, dot, bam, EAST
from mcr_mahjong import MCRRuleSet, MCRScorer, MCR_TRAINING_RULES


def hand(text: str) -> HandState:
    return HandState.from_string(text)


@pytest.fixture
def mcr():
    return MCRRuleSet()


TRIPLETS_AND_RUNS = "555m234p567s888p11z"
# Open hand with no scoring element: chicken hand
PLAIN_OPEN = "456m11z P:333p C:234m C:678s"


class TestPatternTable:
    """Test the pattern catalogue itself"""

    def test_eighty_one_patterns(self):
        scorer = MCRScorer()
        assert len(scorer.patterns) == 81
        assert len(scorer.by_name) == 81

    def test_exclusions_name_real_patterns(self):
        scorer = MCRScorer()
        for pattern in scorer.patterns:
            for name in pattern.excludes:
                assert name in scorer.by_name, f"{pattern.name} excludes unknown {name}"


class TestFloor:
    """Test the 8-point minimum"""

    def test_triplets_and_runs_below_floor(self, mcr):
        verdict = mcr.check_win(hand(TRIPLETS_AND_RUNS), WinContext(win_tile=EAST))
        assert isinstance(verdict, IllegalWinDeclaration)
        assert verdict.reason == RejectionReason.VALUE_FLOOR_NOT_MET
        assert verdict.score.value == 5
        assert set(verdict.score.pattern_names) == {"Single Wait", "Concealed Hand", "Two Concealed Pungs"}

    def test_flowers_do_not_reach_floor(self, mcr):
        ctx = WinContext(win_tile=EAST, flowers=list(FlowerType))
        verdict = mcr.check_win(hand(TRIPLETS_AND_RUNS), ctx)
        assert verdict.reason == RejectionReason.VALUE_FLOOR_NOT_MET
        assert verdict.score.value == 13

    def test_training_rules_accept(self):
        rules = MCRRuleSet(MCR_TRAINING_RULES)
        verdict = rules.check_win(hand(TRIPLETS_AND_RUNS), WinContext(win_tile=EAST))
        assert isinstance(verdict, WinAccepted)

    def test_tenpai_on_pair_tile(self, mcr):
        result = mcr.decomposer.classify(hand(TRIPLETS_AND_RUNS).without_tile(EAST))
        assert result.waits == [EAST]


class TestPatterns:
    """Test individual scoring patterns"""

    def test_chicken_hand(self, mcr):
        h = hand(PLAIN_OPEN)
        ctx = WinContext(win_tile=char(6), seat_wind=WindType.SOUTH, round_wind=WindType.SOUTH)
        result = mcr.evaluate(h, ctx)
        assert result.pattern_names == ["Chicken Hand"]
        assert result.value == 8
        assert result.payments == {"discarder": 16, "other": 8}
        assert isinstance(mcr.check_win(h, ctx), WinAccepted)

    def test_chicken_hand_with_flowers(self, mcr):
        ctx = WinContext(win_tile=char(6), seat_wind=WindType.SOUTH,
                         flowers=[FlowerType.PLUM, FlowerType.ORCHID])
        result = mcr.evaluate(hand(PLAIN_OPEN), ctx)
        assert set(result.pattern_names) == {"Chicken Hand", "Flower Tiles"}
        assert result.value == 10

    def test_two_sided_wait_scores_no_wait_pattern(self, mcr):
        ctx = WinContext(win_tile=char(6), seat_wind=WindType.SOUTH)
        result = mcr.evaluate(hand(PLAIN_OPEN), ctx)
        for name in ("Edge Wait", "Closed Wait", "Single Wait"):
            assert not result.has_pattern(name)

    def test_self_drawn_payment(self, mcr):
        h = hand("555666777z123m11p")
        result = mcr.evaluate(h, WinContext(win_tile=dot(1), is_tsumo=True))
        assert result.payments == {"each": result.value + 8}

    def test_big_three_dragons_excludes(self, mcr):
        result = mcr.evaluate(hand("555666777z123m11p"), WinContext(win_tile=dot(1)))
        assert result.has_pattern("Big Three Dragons")
        assert not result.has_pattern("Dragon Pung")
        assert not result.has_pattern("Two Dragon Pungs")
        assert result.value >= 88

    def test_seven_pairs(self, mcr):
        result = mcr.evaluate(hand("1122m3344p5566s77z"), WinContext(win_tile=char(1)))
        assert result.has_pattern("Seven Pairs")
        assert not result.has_pattern("Concealed Hand")
        assert not result.has_pattern("Single Wait")
        assert result.value >= 24

    def test_seven_pairs_with_quad(self, mcr):
        verdict = mcr.check_win(hand("1111m3344p5566s77z"), WinContext(win_tile=char(1)))
        assert isinstance(verdict, WinAccepted)
        assert result_shape(verdict) == "SEVEN_PAIRS"

    def test_thirteen_orphans(self, mcr):
        result = mcr.evaluate(hand("119m19p19s1234567z"), WinContext(win_tile=char(9)))
        assert result.has_pattern("Thirteen Orphans")
        assert not result.has_pattern("All Types")
        assert result.value >= 88

    def test_knitted_straight(self, mcr):
        h = hand("147m258p233469s11z")
        result = mcr.evaluate(h, WinContext(win_tile=EAST, is_tsumo=True))
        assert result.has_pattern("Knitted Straight")
        assert isinstance(mcr.check_win(h, WinContext(win_tile=EAST, is_tsumo=True)), WinAccepted)

    def test_lesser_honors_and_knitted(self, mcr):
        result = mcr.evaluate(hand("147m258p369s12345z"), WinContext(win_tile=EAST))
        assert result.has_pattern("Lesser Honors and Knitted Tiles")
        assert not result.has_pattern("Greater Honors and Knitted Tiles")

    def test_greater_honors_and_knitted(self, mcr):
        result = mcr.evaluate(hand("14m258p36s1234567z"), WinContext(win_tile=EAST))
        assert result.has_pattern("Greater Honors and Knitted Tiles")
        assert not result.has_pattern("Lesser Honors and Knitted Tiles")

    def test_nine_gates(self, mcr):
        result = mcr.evaluate(hand("11123455678999m"), WinContext(win_tile=char(5), is_tsumo=True))
        assert result.has_pattern("Nine Gates")
        assert not result.has_pattern("Full Flush")

    def test_full_flush_all_chows(self, mcr):
        result = mcr.evaluate(hand("123345567789m55m"), WinContext(win_tile=char(9)))
        assert result.has_pattern("Full Flush")
        assert not result.has_pattern("Half Flush")
        assert not result.has_pattern("No Honors")

    def test_pure_straight(self, mcr):
        ctx = WinContext(win_tile=bam(9), seat_wind=WindType.SOUTH)
        result = mcr.evaluate(hand("123456789s234p55m"), ctx)
        assert result.has_pattern("Pure Straight")
        assert not result.has_pattern("Short Straight")
        assert not result.has_pattern("Two Terminal Chows")
        assert result.has_pattern("All Chows")

    def test_all_pungs_with_dragon(self, mcr):
        h = hand("222m888p99s P:444s P:777z")
        ctx = WinContext(win_tile=dot(8), is_tsumo=True)
        result = mcr.evaluate(h, ctx)
        assert result.has_pattern("All Pungs")
        assert result.has_pattern("Dragon Pung")

    def test_edge_wait_when_unique(self, mcr):
        """12m waiting on 3m alone scores Edge Wait"""
        h = hand("123m456p789s55z P:777p")
        result = mcr.evaluate(h, WinContext(win_tile=char(3)))
        assert result.has_pattern("Edge Wait")

    def test_dragon_pungs_counted(self, mcr):
        result = mcr.evaluate(hand("123m456p555z789s22s"), WinContext(win_tile=bam(2)))
        pungs = [p for p in result.patterns if p.name == "Dragon Pung"]
        assert pungs and pungs[0].count == 1


def result_shape(verdict: WinAccepted) -> str:
    return verdict.decomposition.shape.name
