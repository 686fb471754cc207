"""
Command-line interface for the home-game engines.

Usage examples (after installing in editable mode):

    homegame gin-sim --hands 200 --seed 1
    homegame scc-sim --turns 1000
    homegame eval-hand Ks Kd 3h 7c 9s 2d 5h --round 3
    homegame melds 3h 4h 5h 7s 7d 7c Kc Qd 2s 9h
"""
from __future__ import annotations

import argparse
import logging
from typing import Optional

from .cards import format_cards, parse_cards
from .config import MATCH_MODES, GinRummyConfig
from .hand_eval import evaluate_hand, format_hand_rank, format_hand_rank_detailed, wild_rank_for_round
from .melds import find_optimal_melds
from .simulate import simulate_gin_hands, simulate_scc_turns


def _add_gin_sim_parser(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser(
        "gin-sim",
        help="Play random Gin Rummy hands and report outcome rates.",
    )
    parser.add_argument(
        "--hands",
        type=int,
        default=100,
        help="Number of hands to play.",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Random seed for dealing and move choice.",
    )
    parser.add_argument(
        "--mode",
        choices=sorted(MATCH_MODES),
        default="standard",
        help="Match mode preset (sets points to win).",
    )
    parser.set_defaults(func=_cmd_gin_sim)


def _cmd_gin_sim(args: argparse.Namespace) -> None:
    config = GinRummyConfig.for_match_mode(args.mode)
    stats = simulate_gin_hands(args.hands, seed=args.seed, config=config)
    print(
        f"hands={stats['hands']} "
        f"knock={stats['knock_rate']:.3f} "
        f"gin={stats['gin_rate']:.3f} "
        f"undercut={stats['undercut_rate']:.3f} "
        f"void={stats['void_rate']:.3f} "
        f"mean_points={stats['mean_points']:.2f}"
    )


def _add_scc_sim_parser(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser(
        "scc-sim",
        help="Roll random Ship-Captain-Crew turns and report qualification and cargo.",
    )
    parser.add_argument(
        "--turns",
        type=int,
        default=1000,
        help="Number of turns to roll.",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Random seed for the dice.",
    )
    parser.set_defaults(func=_cmd_scc_sim)


def _cmd_scc_sim(args: argparse.Namespace) -> None:
    stats = simulate_scc_turns(args.turns, seed=args.seed)
    line = f"turns={stats['turns']} qualified={stats['qualified_rate']:.3f} cargo_mean={stats['cargo_mean']:.2f}"
    if "cargo_median" in stats:
        line += f" cargo_p25={stats['cargo_p25']:.1f} cargo_median={stats['cargo_median']:.1f} cargo_p75={stats['cargo_p75']:.1f}"
    print(line)


def _add_eval_hand_parser(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser(
        "eval-hand",
        help="Evaluate a poker hand (best five cards), optionally with wilds.",
    )
    parser.add_argument("cards", nargs="+", help='Cards such as "Ks", "10h", "Td".')
    wild = parser.add_mutually_exclusive_group()
    wild.add_argument(
        "--wild",
        type=str,
        default=None,
        help='Wild rank, e.g. "3".',
    )
    wild.add_argument(
        "--round",
        type=int,
        default=None,
        help="3-5-7 round number (1-3); its rank is wild.",
    )
    parser.set_defaults(func=_cmd_eval_hand)


def _cmd_eval_hand(args: argparse.Namespace) -> None:
    cards = parse_cards(args.cards)
    wild_rank = args.wild
    if args.round is not None:
        wild_rank = wild_rank_for_round(args.round)
    use_wild = wild_rank is not None
    ev = evaluate_hand(cards, use_wild=use_wild, wild_rank=wild_rank)
    detail = format_hand_rank_detailed(cards, use_wild=use_wild, wild_rank=wild_rank)
    suffix = f" ({wild_rank}s wild)" if use_wild else ""
    print(f"{format_cards(cards)}{suffix}: {detail} [{format_hand_rank(ev.rank)}, value={ev.value}]")


def _add_melds_parser(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser(
        "melds",
        help="Show the deadwood-minimizing meld arrangement of a Gin Rummy hand.",
    )
    parser.add_argument("cards", nargs="+", help='Cards such as "Ks", "10h", "Td".')
    parser.set_defaults(func=_cmd_melds)


def _cmd_melds(args: argparse.Namespace) -> None:
    grouping = find_optimal_melds(parse_cards(args.cards))
    for meld in grouping.melds:
        print(meld)
    print(f"Deadwood: {format_cards(grouping.deadwood) or '-'} ({grouping.deadwood_value})")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="homegame", description="Home card and dice game engines.")
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging from the engines.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_gin_sim_parser(subparsers)
    _add_scc_sim_parser(subparsers)
    _add_eval_hand_parser(subparsers)
    _add_melds_parser(subparsers)
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s %(levelname)s %(message)s")
    if hasattr(args, "func"):
        args.func(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
