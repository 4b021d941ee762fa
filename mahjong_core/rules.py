"""
RuleSet abstraction

Each variant module subclasses RuleSet and registers itself under a
Variant. Decomposer and EfficiencyAnalyzer never import a variant; the
game layer looks one up with get_ruleset().
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, List, Optional, Union

from .context import WinContext
from .decomposer import Decomposer, ShapeRules, WinDecomposition, DEFAULT_SHAPE_RULES
from .errors import UnsupportedShape, WinTileNotHeld
from .hand import HandState

logger = logging.getLogger(__name__)


class Variant(IntEnum):
    """Supported rule families"""
    RIICHI = 0    # Japanese riichi
    MCR = 1       # Mahjong Competition Rules (国标)
    SHANGHAI = 2  # Shanghai regional rules


class RejectionReason(IntEnum):
    NOT_COMPLETE = 0          # No decomposition exists
    NO_YAKU = 1               # Riichi: complete but no yaku
    VALUE_FLOOR_NOT_MET = 2   # Below the variant's minimum value
    SHAPE_NOT_ALLOWED = 3     # Shape recognised by the decomposer but not this variant


@dataclass
class PatternMatch:
    """
    A named scoring element.

    Attributes:
        name: English name
        local_name: Name in the variant's own language
        value: Han / fan / points contributed
        count: Times the element applies (dora, flowers)
    """
    name: str
    local_name: str
    value: int
    count: int = 1

    @property
    def total(self) -> int:
        return self.value * self.count

    def __str__(self) -> str:
        times = f" x{self.count}" if self.count > 1 else ""
        return f"{self.name} ({self.local_name}) {self.value}{times}"


@dataclass
class ScoreResult:
    """
    Attributes:
        variant: Rule family that produced the score
        value: Points the hand is worth (base payment unit of the variant)
        units: Han or fan count
        fu: Riichi minipoints, None elsewhere
        patterns: Elements that justify the value, all from one decomposition
        decomposition: The partition the score was computed on
        payments: Who pays what, keyed by payer role
        limit_name: Named limit (mangan, yakuman, ...) if one applies
    """
    variant: Variant
    value: int
    units: int
    fu: Optional[int] = None
    patterns: List[PatternMatch] = field(default_factory=list)
    decomposition: Optional[WinDecomposition] = None
    payments: Dict[str, int] = field(default_factory=dict)
    limit_name: Optional[str] = None

    @property
    def pattern_names(self) -> List[str]:
        return [p.name for p in self.patterns]

    def has_pattern(self, name: str) -> bool:
        return name in self.pattern_names

    def __str__(self) -> str:
        fu = f" {self.fu}fu" if self.fu is not None else ""
        limit = f" [{self.limit_name}]" if self.limit_name else ""
        return f"{self.variant.name}: {self.units}{fu} -> {self.value}{limit}"


@dataclass
class WinAccepted:
    decomposition: WinDecomposition
    accepted: bool = True


@dataclass
class IllegalWinDeclaration:
    """
    A shape-complete hand the variant will not let the player declare.
    Returned as a value, never raised.
    """
    reason: RejectionReason
    detail: str = ""
    score: Optional[ScoreResult] = None
    accepted: bool = False

    def __str__(self) -> str:
        return f"{self.reason.name}: {self.detail}"


WinCheck = Union[WinAccepted, IllegalWinDeclaration]


class RuleSet(ABC):
    """
    Variant capability interface.

    Subclasses set variant and shape_rules and implement score() and
    refine_win_legality().
    """

    variant: Variant
    name: str = "RuleSet"
    shape_rules: ShapeRules = DEFAULT_SHAPE_RULES

    @property
    def decomposer(self) -> Decomposer:
        return Decomposer(self.shape_rules)

    @abstractmethod
    def score(
        self,
        decomposition: WinDecomposition,
        context: WinContext,
        hand: Optional[HandState] = None,
    ) -> ScoreResult:
        """Value of one decomposition. hand supplies physical tiles (red fives)."""

    @abstractmethod
    def refine_win_legality(
        self,
        decomposition: WinDecomposition,
        context: WinContext,
        hand: Optional[HandState] = None,
    ) -> WinCheck:
        """Accept the decomposition or say why it cannot be declared"""

    def evaluate(self, hand: HandState, context: WinContext) -> Optional[ScoreResult]:
        """
        Score every decomposition of a complete 14-tile hand and keep the best.
        Ties keep the first decomposition found. None when the hand is not complete.

        Raises:
            InvalidHandSize, TileSupplyExceeded, MalformedMeld, WinTileNotHeld
        """
        decompositions = self.decomposer.enumerate_win_decompositions(hand)
        _check_win_tile(hand, context)
        best: Optional[ScoreResult] = None
        for decomposition in decompositions:
            result = self.score(decomposition, context, hand)
            if best is None or result.value > best.value or (
                result.value == best.value and result.units > best.units
            ):
                best = result
        if best is not None:
            logger.debug(f"{self.name}: best of hand {hand} is {best}")
        return best

    def check_win(self, hand: HandState, context: WinContext) -> WinCheck:
        """
        Whether a 14-tile hand may be declared as a win. Among legal
        decompositions the highest scoring one is reported.

        Raises:
            InvalidHandSize, TileSupplyExceeded, MalformedMeld, WinTileNotHeld
        """
        decompositions = self.decomposer.enumerate_win_decompositions(hand)
        _check_win_tile(hand, context)
        if not decompositions:
            return IllegalWinDeclaration(RejectionReason.NOT_COMPLETE, "hand is not complete")

        best_accept: Optional[WinAccepted] = None
        best_score: Optional[ScoreResult] = None
        rejection: Optional[IllegalWinDeclaration] = None
        for decomposition in decompositions:
            verdict = self.refine_win_legality(decomposition, context, hand)
            if isinstance(verdict, IllegalWinDeclaration):
                if rejection is None:
                    rejection = verdict
                continue
            result = self.score(decomposition, context, hand)
            if best_score is None or result.value > best_score.value:
                best_accept, best_score = verdict, result

        if best_accept is None:
            logger.warning(f"{self.name}: rejected win {context.describe()}: {rejection}")
            return rejection
        return best_accept


def _check_win_tile(hand: HandState, context: WinContext) -> None:
    if not hand.concealed.contains(context.win_tile):
        raise WinTileNotHeld(context.win_tile)


_REGISTRY: Dict[Variant, RuleSet] = {}


def register_ruleset(ruleset: RuleSet) -> RuleSet:
    """Register the RuleSet instance used for its variant"""
    _REGISTRY[ruleset.variant] = ruleset
    return ruleset


def get_ruleset(variant: Variant) -> RuleSet:
    """
    Raises:
        UnsupportedShape: no module registered for variant
    """
    try:
        return _REGISTRY[Variant(variant)]
    except KeyError:
        raise UnsupportedShape(f"No rule set registered for {Variant(variant).name}") from None


def registered_variants() -> List[Variant]:
    return sorted(_REGISTRY)
