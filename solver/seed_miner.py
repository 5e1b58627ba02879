from __future__ import annotations

import argparse
import json
import logging
import os
import time
from concurrent.futures import ProcessPoolExecutor, ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from game.Core import DEFAULT_PILE_COUNT
from solver.analyzer import analyze_seed
from solver.search import SearchLimits


def _default_workers() -> int:
    return max(1, (os.cpu_count() or 1) - 1)


@dataclass(frozen=True, slots=True)
class SeedRow:
    seed: int
    status: str
    score: int
    moves: int
    elapsed_ms: float
    expanded_nodes: int
    unique_states: int

    def to_dict(self) -> dict:
        return {
            "seed": self.seed,
            "status": self.status,
            "score": self.score,
            "moves": self.moves,
            "elapsed_ms": self.elapsed_ms,
            "expanded_nodes": self.expanded_nodes,
            "unique_states": self.unique_states,
        }


def mine_one(seed: int, pile_count: int, max_steps: int) -> SeedRow:
    result = analyze_seed(seed=seed, pile_count=pile_count, limits=SearchLimits(max_steps=max_steps))
    solved = result.solved
    return SeedRow(
        seed=seed,
        status=solved.status,
        score=solved.best.score,
        moves=len(solved.moves),
        elapsed_ms=round(result.elapsed_ms, 3),
        expanded_nodes=solved.expanded_nodes,
        unique_states=solved.unique_states,
    )


def mine_seeds(seeds: Sequence[int], pile_count: int, max_steps: int, workers: int = 1) -> list[SeedRow]:
    """Solve each seeded deal; rows come back sorted by seed."""

    if workers <= 1:
        rows = [mine_one(seed, pile_count, max_steps) for seed in seeds]
    else:
        rows = _mine_parallel(seeds, pile_count, max_steps, workers)
    rows.sort(key=lambda r: r.seed)
    return rows


def _mine_parallel(seeds: Sequence[int], pile_count: int, max_steps: int, workers: int) -> list[SeedRow]:
    rows: list[SeedRow] = []
    try:
        with ProcessPoolExecutor(max_workers=workers) as exe:
            futures = [exe.submit(mine_one, seed, pile_count, max_steps) for seed in seeds]
            for fut in as_completed(futures):
                rows.append(fut.result())
        return rows
    except PermissionError:
        print("process pool unavailable in current environment; fallback to thread pool")

    rows = []
    with ThreadPoolExecutor(max_workers=workers) as exe:
        futures = [exe.submit(mine_one, seed, pile_count, max_steps) for seed in seeds]
        for fut in as_completed(futures):
            rows.append(fut.result())
    return rows


def summarize(rows: Sequence[SeedRow]) -> dict:
    if not rows:
        return {"scanned": 0, "complete": 0, "best_seed": None, "best_score": None, "mean_score": None}
    best = max(rows, key=lambda r: (r.score, -r.seed))
    return {
        "scanned": len(rows),
        "complete": sum(1 for r in rows if r.status == "exhausted"),
        "best_seed": best.seed,
        "best_score": best.score,
        "mean_score": round(sum(r.score for r in rows) / len(rows), 3),
    }


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Batch-solve seeded random deals and report best scores.")
    parser.add_argument("--start-seed", type=int, required=True, help="Start seed (inclusive).")
    parser.add_argument("--count", type=int, required=True, help="How many seeds to scan.")
    parser.add_argument("--piles", type=int, default=DEFAULT_PILE_COUNT, help="Number of piles per deal.")
    parser.add_argument("--max-steps", type=int, default=200_000, help="Per-seed search step budget.")
    parser.add_argument("--workers", type=int, default=_default_workers(), help="Parallel workers.")
    parser.add_argument("--jsonl", type=str, default="", help="Optional output jsonl path.")
    parser.add_argument("--verbose", action="store_true", help="Log search progress.")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    out_path = Path(args.jsonl).expanduser() if args.jsonl else None
    if out_path is not None:
        out_path.parent.mkdir(parents=True, exist_ok=True)

    started = time.perf_counter()
    seeds = list(range(args.start_seed, args.start_seed + args.count))
    rows = mine_seeds(seeds, args.piles, args.max_steps, workers=max(1, args.workers))

    for row in rows:
        print(
            f"seed={row.seed} status={row.status} score={row.score} moves={row.moves} "
            f"solver_ms={row.elapsed_ms} expanded={row.expanded_nodes} unique={row.unique_states}"
        )
    if out_path is not None:
        with out_path.open("a", encoding="utf-8") as f:
            for row in rows:
                f.write(json.dumps(row.to_dict(), ensure_ascii=False) + "\n")

    stats = summarize(rows)
    total_ms = (time.perf_counter() - started) * 1000.0
    print(
        f"summary scanned={stats['scanned']} complete={stats['complete']} best_seed={stats['best_seed']} "
        f"best_score={stats['best_score']} mean_score={stats['mean_score']} total_ms={total_ms:.1f}"
    )


if __name__ == "__main__":
    main()
