from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from engine.cards import KING, NUM_PER_SUIT, Card


@dataclass(frozen=True, slots=True)
class SequenceMatch:
    completed: bool
    start_index: int = -1
    suit: Optional[str] = None


NO_SEQUENCE = SequenceMatch(completed=False)


def rank_value(card: Card) -> int:
    return card.rank


def can_place_card(card: Card, target: Optional[Card]) -> bool:
    """Empty piles take anything; otherwise the card must sit one rank below. Suit is ignored."""
    if target is None:
        return True
    return rank_value(card) == rank_value(target) - 1


def get_movable_cards(pile: Sequence[Card], start_index: int) -> tuple[Card, ...]:
    """
    The run from start_index to the top of the pile, or () when it cannot be
    carried: out of range, a face-down card in it, or a break in the rank chain.
    Consecutive cards may differ in suit.
    """
    if start_index < 0 or start_index >= len(pile):
        return ()
    run = tuple(pile[start_index:])
    lower = run[0]
    if not lower.face_up:
        return ()
    for upper in run[1:]:
        if not upper.face_up or rank_value(lower) != rank_value(upper) + 1:
            return ()
        lower = upper
    return run


def _is_full_suit(window: Sequence[Card]) -> bool:
    suit = window[0].suit
    for offset, card in enumerate(window):
        if not card.face_up or card.suit != suit or card.rank != KING - offset:
            return False
    return True


def check_for_completed_sequence(pile: Sequence[Card]) -> SequenceMatch:
    """Find a face-up same-suit K..A window; the one nearest the bottom wins."""
    if len(pile) < NUM_PER_SUIT:
        return NO_SEQUENCE
    found = NO_SEQUENCE
    for start in range(len(pile) - NUM_PER_SUIT, -1, -1):
        window = pile[start:start + NUM_PER_SUIT]
        if _is_full_suit(window):
            found = SequenceMatch(completed=True, start_index=start, suit=window[0].suit)
    return found
