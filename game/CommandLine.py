import argparse
import random

from game.Core import GameConfig, pilesToRanks
from solver.render import format_choices, format_state, format_summary
from solver.rules import attempt_move, build_initial_state, is_done, legal_moves
from solver.search import SearchLimits, best_next_move, find_optimal

HINT_STEPS = 50_000


class Table:
    """A single human-played deal with undo."""

    def __init__(self, state):
        self.state = state
        self.history = []

    def play(self, pileIndex):
        if pileIndex < 0 or pileIndex >= len(self.state.piles):
            return None
        tr = attempt_move(self.state, pileIndex)
        if tr is None:
            return None
        self.history.append(self.state)
        self.state = tr.state
        return tr

    def undo(self):
        if not self.history:
            return False
        self.state = self.history.pop()
        return True

    def hint(self, maxSteps=HINT_STEPS):
        move = best_next_move(self.state, SearchLimits(max_steps=maxSteps))
        if move is not None:
            return move.pile_index
        moves = legal_moves(self.state)
        if not moves:
            return None
        return moves[0].pile_index


def run(table, read=input, write=print, maxSteps=HINT_STEPS):
    write(format_state(table.state))
    while not is_done(table.state):
        try:
            command = read("? ").strip().lower()
        except EOFError:
            break
        if command in ("q", "quit", "exit"):
            break
        if command == "undo":
            if not table.undo():
                write("Cannot undo!")
                continue
        elif command == "hint":
            pile = table.hint(maxSteps)
            if pile is None:
                write("No move left!")
            else:
                write(f"Try pile {pile + 1}")
            continue
        elif command == "solve":
            result = find_optimal(table.state, SearchLimits(max_steps=maxSteps))
            write(format_choices(result.moves))
            write(format_summary(result.best, result.moves, status=result.status))
            continue
        else:
            try:
                pile = int(command) - 1
            except ValueError:
                write("Invalid command!")
                continue
            tr = table.play(pile)
            if tr is None:
                write("Invalid choice!")
                continue
            write(format_choice_line(tr))
        write(format_state(table.state))
    write(f"Final score: {table.state.score}")
    return table.state


def format_choice_line(tr):
    line = f"{tr.pile_index + 1}: +{tr.points}"
    if tr.stack_reset:
        line += " (stack reset)"
    return line


def main(argv=None):
    parser = argparse.ArgumentParser(description="Play a deal by hand.")
    parser.add_argument("--config", type=str, default="", help="Optional key=value config file.")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the random deal.")
    args = parser.parse_args(argv)

    config = GameConfig.loadFromFile(args.config) if args.config else GameConfig()
    if args.seed is not None:
        config.seed = args.seed
        config.deckCode = None
    if config.deckCode is None and config.seed is None:
        config.seed = random.SystemRandom().randrange(0, 2_147_483_647)
        print(f"seed={config.seed}")
    try:
        piles = config.initPiles()
    except ValueError as exc:
        parser.error(str(exc))
    table = Table(build_initial_state(pilesToRanks(piles)))
    run(table)


if __name__ == '__main__':
    main()
