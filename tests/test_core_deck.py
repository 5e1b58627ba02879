import tempfile
import unittest
from collections import Counter
from pathlib import Path

from game.Core import (
    Card,
    GameConfig,
    InvalidCardToken,
    createDeck,
    cutDeck,
    decodeDeck,
    encodeDeck,
    formatCard,
    parseDeck,
    randomDeck,
)


class DeckTestCase(unittest.TestCase):
    def test_create_deck_has_four_of_each_rank(self):
        deck = createDeck()
        self.assertEqual(52, len(deck))
        counts = Counter(card.rank for card in deck)
        self.assertEqual({rank: 4 for rank in range(1, 14)}, dict(counts))

    def test_cut_deck_into_equal_piles(self):
        piles = cutDeck(createDeck(), 4)
        self.assertEqual([13, 13, 13, 13], [len(p) for p in piles])

    def test_cut_deck_last_pile_takes_remainder(self):
        piles = cutDeck(list(range(10)), 3)
        self.assertEqual([[0, 1, 2], [3, 4, 5], [6, 7, 8, 9]], piles)

    def test_cut_deck_rejects_zero_groups(self):
        with self.assertRaises(ValueError):
            cutDeck(createDeck(), 0)

    def test_random_deck_is_seeded(self):
        self.assertEqual(encodeDeck(randomDeck(20260210)), encodeDeck(randomDeck(20260210)))
        self.assertNotEqual(encodeDeck(randomDeck(1)), encodeDeck(randomDeck(2)))
        self.assertEqual(52, len(randomDeck(5)))

    def test_parse_tokens(self):
        deck = parseDeck(["a", "J", "q", "K", "10", "2"])
        self.assertEqual([1, 11, 12, 13, 10, 2], [card.rank for card in deck])

    def test_invalid_tokens(self):
        for token in ("x", "0", "14", ""):
            with self.assertRaises(InvalidCardToken):
                Card.fromToken(token)
        self.assertTrue(issubclass(InvalidCardToken, ValueError))

    def test_encode_decode(self):
        deck = parseDeck(["a", "5", "k"])
        self.assertEqual("1,5,13", encodeDeck(deck))
        self.assertEqual(deck, decodeDeck("1,5,13"))
        self.assertEqual([], decodeDeck(""))

    def test_format_card(self):
        self.assertEqual(" A", formatCard(Card(1)))
        self.assertEqual("10", formatCard(10))
        self.assertEqual(" Q", formatCard(12))
        self.assertEqual(" 7", formatCard(7))
        self.assertEqual("  ", formatCard(None))


class GameConfigTestCase(unittest.TestCase):
    def test_missing_file_gives_defaults(self):
        config = GameConfig.loadFromFile("/nonexistent/thirty_one.cfg")
        self.assertEqual(4, config.pileCount)
        self.assertIsNone(config.seed)

    def test_save_and_load(self):
        config = GameConfig()
        config.pileCount = 3
        config.seed = 42
        config.deckCode = "1,2,3,4,5,6"
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "game.cfg"
            config.saveToFile(str(path))
            loaded = GameConfig.loadFromFile(str(path))
        self.assertEqual(3, loaded.pileCount)
        self.assertEqual(42, loaded.seed)
        self.assertEqual("1,2,3,4,5,6", loaded.deckCode)
        self.assertEqual([[1, 2], [3, 4], [5, 6]], [[c.rank for c in p] for p in loaded.initPiles()])

    def test_load_skips_comments_and_unknown_keys(self):
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "game.cfg"
            path.write_text("# comment\nbogus=1\nmaxSteps=500\nnot a pair\nseed=None\n", encoding="utf-8")
            config = GameConfig.loadFromFile(str(path))
        self.assertEqual(500, config.maxSteps)
        self.assertIsNone(config.seed)
        self.assertFalse(hasattr(config, "bogus"))

    def test_load_skips_values_of_the_wrong_type(self):
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "game.cfg"
            path.write_text("pileCount=four\nmaxSteps=None\nseed=abc\ndeckCode=None\n", encoding="utf-8")
            config = GameConfig.loadFromFile(str(path))
        self.assertEqual(4, config.pileCount)
        self.assertEqual(3_000_000, config.maxSteps)
        self.assertIsNone(config.seed)
        self.assertIsNone(config.deckCode)
        self.assertEqual(4, len(config.initPiles()))

    def test_seeded_deck(self):
        config = GameConfig()
        config.seed = 7
        self.assertEqual(encodeDeck(randomDeck(7)), encodeDeck(config.initDeck()))


if __name__ == "__main__":
    unittest.main()
