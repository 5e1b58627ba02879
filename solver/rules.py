from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

CardAtom = int
PileAtom = tuple[CardAtom, ...]
StateKey = tuple[tuple[PileAtom, ...], PileAtom, int]

STACK_MAX = 31
FACE_CAP = 10
OPENING_RANK = 11
TARGET_SUMS = (15, STACK_MAX)
# Points for 1, 2 and 3 matching cards already on top of the stack.
SET_POINTS = (0, 2, 6, 12)
MIN_RUN = 3
MAX_RUN = 7


@dataclass(frozen=True, slots=True)
class SolverState:
    """Immutable state used by the solver; identity is (piles, stack, score)."""

    piles: tuple[PileAtom, ...]
    stack: PileAtom = ()
    score: int = 0


@dataclass(frozen=True, slots=True)
class Transition:
    """Outcome of drawing from one pile."""

    state: SolverState
    pile_index: int
    card: CardAtom
    points: int
    stack_reset: bool


def capped_value(card: CardAtom) -> int:
    return min(FACE_CAP, card)


def capped_sum(stack: Iterable[CardAtom]) -> int:
    return sum(capped_value(card) for card in stack)


def build_initial_state(piles: Iterable[Sequence[CardAtom]]) -> SolverState:
    """Root state: the dealt piles, an empty stack and zero score."""

    return SolverState(piles=tuple(tuple(pile) for pile in piles), stack=(), score=0)


def state_key(state: SolverState) -> StateKey:
    return state.piles, state.stack, state.score


def is_done(state: SolverState) -> bool:
    return all(len(pile) == 0 for pile in state.piles)


def _set_points(stack: PileAtom, card: CardAtom) -> int:
    matched = 0
    for idx in range(len(stack) - 1, -1, -1):
        if stack[idx] != card:
            break
        matched += 1
    return SET_POINTS[min(matched, len(SET_POINTS) - 1)]


def _is_contiguous(ranks: list[int]) -> bool:
    ranks.sort()
    for i in range(1, len(ranks)):
        if ranks[i] != ranks[i - 1] + 1:
            return False
    return True


def _run_points(stack: PileAtom, card: CardAtom) -> int:
    result = stack + (card,)
    points = 0
    for run_length in range(MIN_RUN, MAX_RUN + 1):
        if len(stack) < run_length - 1:
            break
        if _is_contiguous(list(result[-run_length:])):
            points = run_length
    return points


def score_card(stack: Sequence[CardAtom], card: CardAtom) -> int:
    """Points awarded for putting ``card`` on top of ``stack``."""

    stack = tuple(stack)
    points = 0
    if not stack and card == OPENING_RANK:
        points += 2

    total = capped_sum(stack) + capped_value(card)
    if total in TARGET_SUMS:
        points += 2

    points += _set_points(stack, card)
    points += _run_points(stack, card)
    return points


def _stack_ends(piles: Sequence[PileAtom], new_sum: int) -> bool:
    remainder = STACK_MAX - new_sum
    if remainder <= 0:
        return True
    tops = [capped_value(pile[-1]) for pile in piles if pile]
    # No cards left at all also closes the stack.
    return all(top > remainder for top in tops)


def attempt_move(state: SolverState, pile_index: int) -> Optional[Transition]:
    """Draw the top card of ``state.piles[pile_index]``; None if the move is illegal."""

    pile = state.piles[pile_index]
    if not pile:
        return None
    current_sum = capped_sum(state.stack)
    card = pile[-1]
    new_sum = current_sum + capped_value(card)
    if new_sum > STACK_MAX:
        return None

    piles = list(state.piles)
    piles[pile_index] = pile[:-1]
    points = score_card(state.stack, card)
    stack_reset = _stack_ends(piles, new_sum)

    child = SolverState(
        piles=tuple(piles),
        stack=() if stack_reset else state.stack + (card,),
        score=state.score + points,
    )
    return Transition(state=child, pile_index=pile_index, card=card, points=points, stack_reset=stack_reset)


def legal_moves(state: SolverState) -> list[Transition]:
    """All successful transitions from ``state`` in pile index order."""

    out: list[Transition] = []
    for idx in range(len(state.piles)):
        tr = attempt_move(state, idx)
        if tr is not None:
            out.append(tr)
    return out
