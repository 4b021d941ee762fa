#!/usr/bin/env python3
"""
Analyze a hand from the command line.

Usage:
    # Shanten and useful tiles of a 13-tile hand
    python analyze_hand.py 123m456p789s1122z

    # Discard ranking of a 14-tile hand, with tiles already seen
    python analyze_hand.py 123m456p789s11223z --visible 1z2z

    # Score a complete hand under MCR, self-drawn on 6m
    python analyze_hand.py "456m11z P:333p C:234m C:678s" --variant mcr --win-tile 6m --tsumo
"""

import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

import riichi_mahjong  # noqa: F401  (registers the variant)
import mcr_mahjong  # noqa: F401
import shanghai_mahjong  # noqa: F401
from mahjong_core import (
    HandState, Tile, WindType, WinContext, Variant, MahjongError,
    get_ruleset, parse_tiles, rank_discards,
)
from mahjong_core.efficiency import EfficiencyAnalyzer
from mahjong_core.hand import COMPLETE_SIZE

logger = logging.getLogger(__name__)

VARIANTS = {
    "riichi": Variant.RIICHI,
    "mcr": Variant.MCR,
    "shanghai": Variant.SHANGHAI,
}
WINDS = {w.name.lower(): w for w in WindType}


def show_waiting_hand(hand: HandState, ruleset, visible) -> None:
    result = ruleset.decomposer.classify(hand, visible)
    print(f"Shanten: {result.shanten}")
    for shape, value in result.shape_shanten.items():
        print(f"  {shape.name:<20} {value}")
    if result.waits:
        print(f"Waits: {' '.join(str(t) for t in result.waits)}")
    acceptance = EfficiencyAnalyzer(ruleset.shape_rules).useful_tiles(hand, visible)
    tiles = " ".join(f"{t}x{n}" for t, n in sorted(acceptance.useful_tiles.items()))
    print(f"Useful: {acceptance.useful_kinds} kinds, {acceptance.useful_count} tiles [{tiles}]")


def show_complete_hand(hand: HandState, ruleset, visible, context: WinContext) -> None:
    report = EfficiencyAnalyzer(ruleset.shape_rules).analyze(hand, visible)
    print("Discards:")
    for option in rank_discards(report)[:5]:
        print(f"  {option}")

    verdict = ruleset.check_win(hand, context)
    if not verdict.accepted:
        print(f"\nNo win: {verdict}")
        return
    result = ruleset.evaluate(hand, context)
    print(f"\n{result}")
    print(f"Decomposition: {result.decomposition}")
    for pattern in result.patterns:
        print(f"  {pattern}")
    for payer, amount in result.payments.items():
        print(f"  {payer}: {amount}")


def main():
    parser = argparse.ArgumentParser(
        description="Shanten, tile efficiency and scoring for one hand",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("hand", type=str,
                        help="Hand shorthand, melds as P:/C:/K:/A: groups")
    parser.add_argument("--variant", type=str, default="riichi", choices=sorted(VARIANTS))
    parser.add_argument("--visible", type=str, default="",
                        help="Tiles seen outside the hand")
    parser.add_argument("--win-tile", type=str, default=None,
                        help="Winning tile (defaults to the last concealed tile)")
    parser.add_argument("--tsumo", action="store_true", help="Self-drawn win")
    parser.add_argument("--riichi", action="store_true", help="Riichi was declared")
    parser.add_argument("--seat", type=str, default="east", choices=sorted(WINDS))
    parser.add_argument("--round", type=str, default="east", choices=sorted(WINDS))
    parser.add_argument("--dora", type=str, default="", help="Dora indicators")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    ruleset = get_ruleset(VARIANTS[args.variant])
    try:
        hand = HandState.from_string(args.hand)
        visible = parse_tiles(args.visible) if args.visible else None
        print(f"{ruleset.name}: {hand}")
        if hand.tile_count == COMPLETE_SIZE:
            if args.win_tile:
                win_tile = Tile.from_string(args.win_tile)
            else:
                win_tile = hand.concealed.tiles[-1]
            context = WinContext(
                win_tile=win_tile,
                is_tsumo=args.tsumo,
                is_riichi=args.riichi,
                seat_wind=WINDS[args.seat],
                round_wind=WINDS[args.round],
                dora_indicators=parse_tiles(args.dora) if args.dora else [],
            )
            show_complete_hand(hand, ruleset, visible, context)
        else:
            show_waiting_hand(hand, ruleset, visible)
    except (MahjongError, ValueError) as e:
        logger.error(f"Invalid hand: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
