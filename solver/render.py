from __future__ import annotations

from typing import Iterable, Optional

from game.Core import formatCard
from solver.rules import SolverState, capped_sum
from solver.search import Choice


def _cell(cards: tuple[int, ...], row: int) -> str:
    return formatCard(cards[row] if row < len(cards) else None)


def format_state(state: SolverState, min_rows: int = 13) -> str:
    """Piles side by side (bottom card first), then the stack column."""

    rows = max([min_rows, len(state.stack)] + [len(pile) for pile in state.piles])
    lines = []
    for row in range(rows):
        piles = " ".join(_cell(pile, row) for pile in state.piles)
        lines.append(f"{piles}    {_cell(state.stack, row)}".rstrip())
    lines.append("")
    lines.append(f"Stack: {capped_sum(state.stack)}")
    lines.append(f"Score: {state.score}")
    return "\n".join(lines) + "\n"


def format_choice(choice: Choice) -> str:
    return f"{choice.pile_index + 1} ({formatCard(choice.card)}): {choice.score}"


def format_choices(moves: Iterable[Choice]) -> str:
    """One line per move; a blank line follows every stack reset."""

    lines = []
    for move in moves:
        lines.append(format_choice(move))
        if move.stack_reset:
            lines.append("")
    return "\n".join(lines)


def format_summary(best: SolverState, moves: tuple[Choice, ...], elapsed_s: Optional[float] = None, status: str = "") -> str:
    lines = [f"Score: {best.score}, choices ({len(moves)}):"]
    if status:
        lines.append(f"Status: {status}")
    if elapsed_s is not None:
        lines.append(f"Elapsed: {elapsed_s:.3f}s")
    return "\n".join(lines)
