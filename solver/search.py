from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from solver.frontier import PriorityQueue
from solver.rules import CardAtom, SolverState, StateKey, attempt_move, is_done, state_key

logger = logging.getLogger(__name__)

ROOT_PARENT = -1


@dataclass(frozen=True, slots=True)
class SearchLimits:
    max_steps: int = 1_000_000
    # Emit a debug progress line every N dequeued states; 0 disables it.
    progress_every: int = 100_000


@dataclass(frozen=True, slots=True)
class Choice:
    """One move of a solution, in play order."""

    pile_index: int
    score: int
    card: CardAtom
    stack_reset: bool

    def to_dict(self) -> dict:
        return {
            "pile": self.pile_index,
            "score": self.score,
            "card": self.card,
            "stack_reset": self.stack_reset,
        }


@dataclass(frozen=True, slots=True)
class _Node:
    state: SolverState
    parent: int
    choice: int
    depth: int


@dataclass(slots=True)
class SolveResult:
    status: str
    best: SolverState
    moves: tuple[Choice, ...]
    max_steps: int
    expanded_nodes: int
    generated_nodes: int
    unique_states: int
    duplicate_states_skipped: int
    max_frontier: int
    max_depth: int

    @property
    def complete(self) -> bool:
        """True when the whole reachable space was explored."""
        return self.status == "exhausted"

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "complete": self.complete,
            "score": self.best.score,
            "moves": [move.to_dict() for move in self.moves],
            "metrics": {
                "max_steps": self.max_steps,
                "expanded_nodes": self.expanded_nodes,
                "generated_nodes": self.generated_nodes,
                "unique_states": self.unique_states,
                "duplicate_states_skipped": self.duplicate_states_skipped,
                "max_frontier": self.max_frontier,
                "max_depth": self.max_depth,
            },
        }


def reconstruct(arena: list[_Node], handle: int) -> tuple[Choice, ...]:
    """Walk parent handles back to the root and return the moves root-first."""

    moves: list[Choice] = []
    node = arena[handle]
    while node.parent != ROOT_PARENT:
        parent = arena[node.parent]
        pile = parent.state.piles[node.choice]
        moves.append(
            Choice(
                pile_index=node.choice,
                score=node.state.score,
                card=pile[-1],
                stack_reset=len(node.state.stack) == 0,
            )
        )
        node = parent
    moves.reverse()
    return tuple(moves)


def replay(initial: SolverState, moves: Iterable[Choice]) -> SolverState:
    """Apply ``moves`` from ``initial``; raises ValueError on an illegal move."""

    state = initial
    for step, move in enumerate(moves):
        tr = attempt_move(state, move.pile_index)
        if tr is None:
            raise ValueError(f"move {step} (pile {move.pile_index}) is not legal")
        state = tr.state
    return state


def find_optimal(initial: SolverState, limits: SearchLimits = SearchLimits()) -> SolveResult:
    """
    Best-first search ordered by current score, bounded by ``limits.max_steps``.

    The result is the best state seen within the budget, not a proven optimum
    unless ``status == "exhausted"``.
    """

    arena: list[_Node] = [_Node(state=initial, parent=ROOT_PARENT, choice=-1, depth=0)]
    seen_keys: set[StateKey] = {state_key(initial)}

    frontier: PriorityQueue[int] = PriorityQueue()
    frontier.enqueue(0, initial.score)

    best_handle = 0
    steps = 0
    generated = 1
    duplicates = 0
    max_frontier = 1
    max_depth = 0

    while frontier and steps < limits.max_steps:
        steps += 1
        handle = frontier.dequeue()
        node = arena[handle]
        state = node.state

        if state.score > arena[best_handle].state.score:
            best_handle = handle

        if limits.progress_every > 0 and steps % limits.progress_every == 0:
            logger.debug(
                "step=%d frontier=%d top=%s unique=%d best=%d",
                steps,
                len(frontier),
                frontier.peek_priority() if frontier else None,
                len(seen_keys),
                arena[best_handle].state.score,
            )

        if is_done(state):
            continue

        for pile_index in range(len(state.piles)):
            tr = attempt_move(state, pile_index)
            if tr is None:
                continue
            key = state_key(tr.state)
            if key in seen_keys:
                duplicates += 1
                continue

            seen_keys.add(key)
            arena.append(_Node(state=tr.state, parent=handle, choice=pile_index, depth=node.depth + 1))
            frontier.enqueue(len(arena) - 1, tr.state.score)
            generated += 1
            max_depth = max(max_depth, node.depth + 1)

        if len(frontier) > max_frontier:
            max_frontier = len(frontier)

    status = "budget_exhausted" if frontier else "exhausted"
    best = arena[best_handle].state
    logger.info(
        "search finished status=%s steps=%d unique=%d best=%d",
        status,
        steps,
        len(seen_keys),
        best.score,
    )
    return SolveResult(
        status=status,
        best=best,
        moves=reconstruct(arena, best_handle),
        max_steps=limits.max_steps,
        expanded_nodes=steps,
        generated_nodes=generated,
        unique_states=len(seen_keys),
        duplicate_states_skipped=duplicates,
        max_frontier=max_frontier,
        max_depth=max_depth,
    )


def best_next_move(state: SolverState, limits: SearchLimits = SearchLimits()) -> Optional[Choice]:
    """First move of the best line found from ``state``; None if no move improves on it."""

    result = find_optimal(state, limits)
    if not result.moves:
        return None
    return result.moves[0]
