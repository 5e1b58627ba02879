from __future__ import annotations

import argparse
import json
import logging
import random
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from game.Core import DEFAULT_PILE_COUNT, GameConfig, InvalidCardToken, cutDeck, parseDeck, pilesToRanks, randomDeck
from solver.render import format_choices, format_state, format_summary
from solver.render_image import render_state_image
from solver.rules import SolverState, build_initial_state
from solver.search import SearchLimits, SolveResult, find_optimal

DECK_SIZE = 52


@dataclass(slots=True)
class AnalyzeResult:
    initial: SolverState
    solved: SolveResult
    elapsed_ms: float
    seed: Optional[int] = None

    def to_dict(self) -> dict:
        payload = {"seed": self.seed, "piles": [list(pile) for pile in self.initial.piles]}
        payload.update(self.solved.to_dict())
        payload["metrics"]["elapsed_ms"] = round(self.elapsed_ms, 3)
        return payload

    def to_text(self) -> str:
        best = self.solved.best
        return "\n".join(
            [
                format_state(self.initial),
                format_choices(self.solved.moves),
                "",
                format_summary(best, self.solved.moves, self.elapsed_ms / 1000.0, self.solved.status),
            ]
        )


def build_state_from_tokens(tokens: Sequence[str], pile_count: int = DEFAULT_PILE_COUNT) -> SolverState:
    if len(tokens) != DECK_SIZE:
        raise InvalidCardToken(f"expected {DECK_SIZE} card tokens, got {len(tokens)}")
    return build_initial_state(pilesToRanks(cutDeck(parseDeck(tokens), pile_count)))


def build_state_from_config(config: GameConfig) -> SolverState:
    return build_initial_state(pilesToRanks(config.initPiles()))


def analyze_state(
    initial_state: SolverState,
    limits: SearchLimits = SearchLimits(),
    seed: Optional[int] = None,
) -> AnalyzeResult:
    """Run the search and time it."""

    start = time.perf_counter()
    solved = find_optimal(initial_state, limits)
    elapsed_ms = (time.perf_counter() - start) * 1000.0
    return AnalyzeResult(initial=initial_state, solved=solved, elapsed_ms=elapsed_ms, seed=seed)


def analyze_seed(
    seed: int,
    pile_count: int = DEFAULT_PILE_COUNT,
    limits: SearchLimits = SearchLimits(),
) -> AnalyzeResult:
    state = build_initial_state(pilesToRanks(cutDeck(randomDeck(seed), pile_count)))
    return analyze_state(state, limits=limits, seed=seed)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Find the best-scoring play order for a dealt deck.")
    parser.add_argument("cards", nargs="*", help="52 rank tokens in deal order (a, 2-10, j, q, k).")
    parser.add_argument("--config", type=str, default="", help="Optional key=value config file.")
    parser.add_argument("--seed", type=int, default=None, help="Seed for a random deal when no cards are given.")
    parser.add_argument("--piles", type=int, default=None, help="Number of piles the deck is cut into.")
    parser.add_argument("--max-steps", type=int, default=None, help="Search step budget.")
    parser.add_argument("--json", action="store_true", help="Print a json report instead of text.")
    parser.add_argument("--pretty", action="store_true", help="Pretty-print json output.")
    parser.add_argument("--image", type=str, default="", help="Optional PNG path for the dealt piles.")
    parser.add_argument("--verbose", action="store_true", help="Log search progress.")
    return parser


def _resolve_config(args: argparse.Namespace) -> GameConfig:
    config = GameConfig.loadFromFile(args.config) if args.config else GameConfig()
    if args.seed is not None:
        config.seed = args.seed
        config.deckCode = None
    if args.piles is not None:
        config.pileCount = args.piles
    if args.max_steps is not None:
        config.maxSteps = args.max_steps
    return config


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    config = _resolve_config(args)
    random_deal = not args.cards and config.deckCode is None
    if random_deal and config.seed is None:
        config.seed = random.SystemRandom().randrange(0, 2_147_483_647)
    try:
        if args.cards:
            state = build_state_from_tokens(args.cards, config.pileCount)
        else:
            state = build_state_from_config(config)
    except ValueError as exc:
        parser.error(str(exc))

    if args.image:
        render_state_image(state, Path(args.image).expanduser())

    seed = config.seed if random_deal else None
    result = analyze_state(state, limits=SearchLimits(max_steps=config.maxSteps), seed=seed)
    if args.json or args.pretty:
        print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2 if args.pretty else None))
    else:
        print(result.to_text())


if __name__ == "__main__":
    main()
