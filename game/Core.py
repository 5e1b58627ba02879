import random

DEFAULT_PILE_COUNT = 4
DEFAULT_MAX_STEPS = 3_000_000


class InvalidCardToken(ValueError):
    pass


class Card:
    MIN_RANK = 1
    MAX_RANK = 13
    SUIT_COUNT = 4
    NUMS = (" A", " 2", " 3", " 4", " 5", " 6", " 7", " 8", " 9", "10", " J", " Q", " K")
    TOKENS = {"a": 1, "j": 11, "q": 12, "k": 13}

    def __init__(self, rank):
        if not Card.MIN_RANK <= rank <= Card.MAX_RANK:
            raise InvalidCardToken(f"rank out of range: {rank}")
        self.rank = rank

    def __eq__(self, other):
        return isinstance(other, Card) and self.rank == other.rank

    def __hash__(self):
        return hash(self.rank)

    def __str__(self):
        return self.gameStr().strip()

    def __repr__(self):
        return f"Card({self.rank})"

    def gameStr(self):
        return Card.NUMS[self.rank - 1]

    @staticmethod
    def fromToken(token: str):
        text = token.strip().lower()
        if text in Card.TOKENS:
            return Card(Card.TOKENS[text])
        try:
            rank = int(text)
        except ValueError:
            raise InvalidCardToken(f"invalid card token: {token!r}") from None
        return Card(rank)


def formatCard(card):
    """Two-character cell for a card; blank for None."""
    if card is None:
        return "  "
    if isinstance(card, Card):
        return card.gameStr()
    return Card.NUMS[card - 1]


def createDeck():
    deck = []
    for _ in range(Card.SUIT_COUNT):
        for rank in range(Card.MIN_RANK, Card.MAX_RANK + 1):
            deck.append(Card(rank))
    return deck


def shuffleDeck(deck, rng=None):
    pick = rng if rng is not None else random
    pick.shuffle(deck)


def cutDeck(deck, groupCount=DEFAULT_PILE_COUNT):
    """Split into equal groups; the last group takes the remainder."""
    if groupCount < 1:
        raise ValueError("groupCount must be positive")
    groupSize = len(deck) // groupCount
    groups = []
    for i in range(groupCount - 1):
        groups.append(deck[groupSize * i: groupSize * (i + 1)])
    groups.append(deck[groupSize * (groupCount - 1):])
    return groups


def parseDeck(tokens):
    return [Card.fromToken(t) for t in tokens]


def decodeDeck(code: str):
    if not code.strip():
        return []
    return parseDeck(code.split(","))


def encodeDeck(deck):
    return ",".join(str(card.rank) for card in deck)


def randomDeck(seed=None):
    deck = createDeck()
    shuffleDeck(deck, random.Random(seed))
    return deck


def pilesToRanks(piles):
    return [[card.rank for card in pile] for pile in piles]


class GameConfig:
    # Parsers for known keys; a line whose value fails to parse is skipped.
    FIELD_PARSERS = {
        "pileCount": int,
        "maxSteps": int,
        "seed": lambda v: None if v in ("", "None") else int(v),
        "deckCode": lambda v: None if v in ("", "None") else v,
    }

    def __init__(self):
        self.pileCount = DEFAULT_PILE_COUNT
        self.maxSteps = DEFAULT_MAX_STEPS
        self.seed = None
        self.deckCode = None

    @staticmethod
    def loadFromFile(path):
        config = GameConfig()
        try:
            with open(path, encoding="utf-8") as f:
                lines = f.readlines()
        except OSError:
            return config
        for l in lines:
            l = l.strip()
            if len(l) == 0 or l.startswith("#") or "=" not in l:
                continue
            (k, v) = l.split("=", 1)
            k = k.strip()
            parse = GameConfig.FIELD_PARSERS.get(k)
            if parse is None:
                continue
            try:
                v = parse(v.strip())
            except ValueError:
                continue
            config.__setattr__(k, v)
        return config

    def saveToFile(self, path):
        with open(path, "w", encoding="utf-8") as f:
            for k, v in self.__dict__.items():
                f.write(f"{k}={str(v)}\n")

    def initDeck(self):
        if self.deckCode is not None:
            return decodeDeck(str(self.deckCode))
        return randomDeck(self.seed)

    def initPiles(self):
        return cutDeck(self.initDeck(), self.pileCount)
