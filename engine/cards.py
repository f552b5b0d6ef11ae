from __future__ import annotations

import random
from dataclasses import dataclass, replace
from typing import Optional

NUM_PER_SUIT = 13
SUB_DECKS = 8
DECK_SIZE = NUM_PER_SUIT * SUB_DECKS

SPADES = "♠"
HEARTS = "♥"
DIAMONDS = "♦"
CLUBS = "♣"
SUITS = (SPADES, HEARTS, DIAMONDS, CLUBS)

ACE = 1
KING = 13
RANK_NAMES = ("A", "2", "3", "4", "5", "6", "7", "8", "9", "10", "J", "Q", "K")

EASY = "easy"
MEDIUM = "medium"
HARD = "hard"
DIFFICULTY_ORDER = (EASY, MEDIUM, HARD)

# Suit assigned to each of the eight sub-decks.
DIFFICULTY_SUIT_PATTERN = {
    EASY: (SPADES,) * 8,
    MEDIUM: (SPADES,) * 4 + (HEARTS,) * 4,
    HARD: (SPADES, SPADES, HEARTS, HEARTS, DIAMONDS, DIAMONDS, CLUBS, CLUBS),
}


class CardIdSource:
    """Hands out card ids; one source per process or per test keeps them unique."""

    def __init__(self, start: int = 0):
        self._next = start

    def next_id(self) -> int:
        value = self._next
        self._next += 1
        return value


@dataclass(frozen=True, slots=True)
class Card:
    id: int
    suit: str
    rank: int
    face_up: bool = False

    def turned(self, face_up: bool) -> Card:
        if self.face_up == face_up:
            return self
        return replace(self, face_up=face_up)

    def rank_name(self) -> str:
        return RANK_NAMES[self.rank - 1]

    def game_str(self) -> str:
        if not self.face_up:
            return "---"
        return f"{self.suit}{self.rank_name():<2}"


def suit_counts(difficulty: str) -> int:
    return len(set(DIFFICULTY_SUIT_PATTERN[difficulty]))


def create_deck(difficulty: str = EASY, ids: Optional[CardIdSource] = None) -> list[Card]:
    """Build the 104 face-down cards, sub-deck by sub-deck, ranks A..K."""

    if difficulty not in DIFFICULTY_SUIT_PATTERN:
        raise ValueError(f"unknown difficulty: {difficulty!r}")
    id_source = ids if ids is not None else CardIdSource()
    deck = []
    for suit in DIFFICULTY_SUIT_PATTERN[difficulty]:
        for rank in range(ACE, KING + 1):
            deck.append(Card(id=id_source.next_id(), suit=suit, rank=rank))
    return deck


def shuffle_deck(deck: list[Card], rng: Optional[random.Random] = None) -> list[Card]:
    """Fisher-Yates over a copy; the input list is left untouched."""

    pick_rng = rng if rng is not None else random
    shuffled = list(deck)
    for i in range(len(shuffled) - 1, 0, -1):
        j = pick_rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled
