"""
Tests for the RuleSet interface and variant registry
"""

import logging
import pytest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

import riichi_mahjong
import mcr_mahjong
import shanghai_mahjong
from mahjong_core import rules
from mahjong_core.context import WinContext
from mahjong_core.errors import UnsupportedShape, WinTileNotHeld
from mahjong_core.hand import HandState
from mahjong_core.rules import (
    RuleSet, Variant, ScoreResult, PatternMatch, WinAccepted,
    IllegalWinDeclaration, RejectionReason, get_ruleset, registered_variants,
)
from mahjong_core.tiles import char, dot, EAST, FlowerType, WindType


class ChowCounter(RuleSet):
    """Scores a decomposition by its number of chows; rejects all-chow readings"""

    variant = Variant.RIICHI
    name = "chow counter"

    def score(self, decomposition, context, hand=None):
        chows = sum(1 for g in decomposition.groups if g.is_chow)
        return ScoreResult(self.variant, chows, chows, decomposition=decomposition)

    def refine_win_legality(self, decomposition, context, hand=None):
        if all(g.is_chow for g in decomposition.groups):
            return IllegalWinDeclaration(RejectionReason.VALUE_FLOOR_NOT_MET, "all chows")
        return WinAccepted(decomposition)


class TestRegistry:
    """Test variant dispatch"""

    def test_variants_registered_on_import(self):
        assert set(registered_variants()) == {Variant.RIICHI, Variant.MCR, Variant.SHANGHAI}
        assert isinstance(get_ruleset(Variant.RIICHI), riichi_mahjong.RiichiRuleSet)
        assert isinstance(get_ruleset(Variant.MCR), mcr_mahjong.MCRRuleSet)
        assert isinstance(get_ruleset(Variant.SHANGHAI), shanghai_mahjong.ShanghaiRuleSet)

    def test_lookup_by_value(self):
        assert get_ruleset(1).variant == Variant.MCR

    def test_unregistered_variant(self, monkeypatch):
        monkeypatch.setattr(rules, "_REGISTRY", {})
        with pytest.raises(UnsupportedShape):
            get_ruleset(Variant.MCR)

    def test_unsupported_is_lookup_error(self, monkeypatch):
        monkeypatch.setattr(rules, "_REGISTRY", {})
        with pytest.raises(LookupError):
            get_ruleset(Variant.SHANGHAI)


class TestRuleSetInterface:
    """Test evaluate / check_win on top of score and refine_win_legality"""

    def test_evaluate_keeps_best(self):
        hand = HandState.from_string("111222333m456p11z")
        result = ChowCounter().evaluate(hand, WinContext(win_tile=char(1)))
        assert result.value == 4

    def test_evaluate_incomplete(self):
        hand = HandState.from_string("123m456p789s11234z")
        assert ChowCounter().evaluate(hand, WinContext(win_tile=EAST)) is None

    def test_check_win_picks_legal_reading(self):
        hand = HandState.from_string("111222333m456p11z")
        verdict = ChowCounter().check_win(hand, WinContext(win_tile=char(1)))
        assert isinstance(verdict, WinAccepted)
        assert verdict.accepted
        assert sum(1 for g in verdict.decomposition.groups if g.is_chow) == 1

    def test_check_win_not_complete(self):
        hand = HandState.from_string("123m456p789s11234z")
        verdict = ChowCounter().check_win(hand, WinContext(win_tile=EAST))
        assert isinstance(verdict, IllegalWinDeclaration)
        assert not verdict.accepted
        assert verdict.reason == RejectionReason.NOT_COMPLETE

    def test_win_tile_must_be_held(self):
        """A winning tile missing from the concealed hand is an error"""
        hand = HandState.from_string("111222333m456p11z")
        with pytest.raises(WinTileNotHeld) as info:
            ChowCounter().evaluate(hand, WinContext(win_tile=dot(9)))
        assert info.value.tile == dot(9)
        with pytest.raises(ValueError):
            ChowCounter().check_win(hand, WinContext(win_tile=dot(9)))

    def test_check_win_rejection_is_logged(self, caplog):
        hand = HandState.from_string("123456789m123p11z")
        with caplog.at_level(logging.WARNING, logger="mahjong_core.rules"):
            verdict = ChowCounter().check_win(hand, WinContext(win_tile=char(9)))
        assert verdict.reason == RejectionReason.VALUE_FLOOR_NOT_MET
        assert "rejected win" in caplog.text


class TestResults:
    """Test result value types"""

    def test_pattern_total(self):
        match = PatternMatch("Flower Tiles", "花牌", 1, 3)
        assert match.total == 3
        assert "x3" in str(match)

    def test_score_result_names(self):
        result = ScoreResult(Variant.MCR, 8, 8, patterns=[PatternMatch("Chicken Hand", "无番和", 8)])
        assert result.pattern_names == ["Chicken Hand"]
        assert result.has_pattern("Chicken Hand")
        assert not result.has_pattern("All Pungs")

    def test_context(self):
        ctx = WinContext(
            win_tile=EAST,
            seat_wind=WindType.SOUTH,
            flowers=[FlowerType.SUMMER, FlowerType.ORCHID, FlowerType.SPRING],
        )
        assert not ctx.is_dealer
        assert ctx.is_ron
        assert ctx.flower_count() == 3
        assert ctx.seat_flowers == [FlowerType.SUMMER, FlowerType.ORCHID]
        assert "ron" in ctx.describe()
