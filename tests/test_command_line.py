import io
import tempfile
import unittest
from contextlib import redirect_stderr
from pathlib import Path

from game.CommandLine import Table, main, run
from solver.rules import build_initial_state


def scripted(commands):
    it = iter(commands)

    def read(prompt):
        try:
            return next(it)
        except StopIteration:
            raise EOFError from None

    return read


class TableTestCase(unittest.TestCase):
    def test_play_and_undo(self):
        table = Table(build_initial_state([[5], [10]]))
        tr = table.play(0)
        self.assertIsNotNone(tr)
        self.assertEqual((5,), table.state.stack)
        self.assertTrue(table.undo())
        self.assertEqual(((5,), (10,)), table.state.piles)
        self.assertFalse(table.undo())

    def test_play_rejects_bad_index(self):
        table = Table(build_initial_state([[5], []]))
        self.assertIsNone(table.play(1))
        self.assertIsNone(table.play(7))
        self.assertIsNone(table.play(-1))

    def test_hint_points_at_a_pile(self):
        table = Table(build_initial_state([[5], [10]]))
        self.assertIn(table.hint(100), (0, 1))
        table.play(0)
        table.play(1)
        self.assertIsNone(table.hint(100))


class RunTestCase(unittest.TestCase):
    def test_scripted_game(self):
        output = []
        table = Table(build_initial_state([[5], [10]]))
        final = run(table, read=scripted(["x", "9", "1", "undo", "hint", "1", "2"]), write=output.append)

        self.assertEqual(2, final.score)
        self.assertIn("Invalid command!", output)
        self.assertIn("Invalid choice!", output)
        self.assertTrue(any(line.startswith("Try pile ") for line in output))
        self.assertIn("2: +2 (stack reset)", output)
        self.assertEqual("Final score: 2", output[-1])

    def test_quit_and_eof(self):
        output = []
        table = Table(build_initial_state([[5], [10]]))
        run(table, read=scripted(["q"]), write=output.append)
        self.assertEqual("Final score: 0", output[-1])

        output = []
        run(table, read=scripted([]), write=output.append)
        self.assertEqual("Final score: 0", output[-1])

    def test_solve_command(self):
        output = []
        table = Table(build_initial_state([[5], [10]]))
        run(table, read=scripted(["solve", "q"]), write=output.append)
        self.assertTrue(any("Score: 2, choices (2):" in line for line in output))


class MainTestCase(unittest.TestCase):
    def test_bad_deck_code_is_a_usage_error(self):
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "game.cfg"
            path.write_text("deckCode=x,1\n", encoding="utf-8")
            err = io.StringIO()
            with redirect_stderr(err), self.assertRaises(SystemExit) as ctx:
                main(["--config", str(path)])
        self.assertEqual(2, ctx.exception.code)
        self.assertIn("invalid card token", err.getvalue())


if __name__ == "__main__":
    unittest.main()
