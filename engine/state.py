from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Optional

from engine.cards import EASY, SUB_DECKS, Card, CardIdSource, create_deck, shuffle_deck

Pile = tuple[Card, ...]

PILE_COUNT = 10
DEAL_SIZE = PILE_COUNT
INITIAL_PILE_SIZES = (6, 6, 6, 6, 5, 5, 5, 5, 5, 5)
SEQUENCES_TO_WIN = SUB_DECKS


@dataclass(frozen=True, slots=True)
class CompletedSequence:
    id: int
    suit: str


@dataclass(frozen=True, slots=True)
class GameState:
    """
    Immutable snapshot of a game. Every container is a tuple and every card a
    frozen value, so a snapshot kept in history can never change under it.
    """

    tableau: tuple[Pile, ...]
    stock: tuple[Card, ...]
    completed_sequences: tuple[CompletedSequence, ...] = ()
    moves: int = 0
    game_won: bool = False
    difficulty: str = EASY

    def top_card(self, pile: int) -> Optional[Card]:
        cards = self.tableau[pile]
        if not cards:
            return None
        return cards[-1]

    def is_valid_pile(self, pile: int) -> bool:
        return 0 <= pile < len(self.tableau)

    def card_count(self) -> int:
        """Cards in play, including the ones locked away in completed sequences."""
        in_tableau = sum(len(pile) for pile in self.tableau)
        return in_tableau + len(self.stock) + len(self.completed_sequences) * 13


def initialize_game(
    difficulty: str = EASY,
    rng: Optional[random.Random] = None,
    ids: Optional[CardIdSource] = None,
) -> GameState:
    deck = shuffle_deck(create_deck(difficulty, ids), rng)
    piles = []
    cursor = 0
    for size in INITIAL_PILE_SIZES:
        dealt = deck[cursor:cursor + size]
        cursor += size
        # Only the last dealt card of each pile starts face up.
        piles.append(tuple(card.turned(i == size - 1) for i, card in enumerate(dealt)))
    return GameState(
        tableau=tuple(piles),
        stock=tuple(deck[cursor:]),
        difficulty=difficulty,
    )
