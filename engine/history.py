from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import ClassVar, Optional, Union

from engine.cards import Card
from engine.state import SEQUENCES_TO_WIN, GameState, Pile

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FlippedCard:
    """A card that was turned face up as a side effect and must go back down on undo."""

    pile: int
    card_id: int


@dataclass(frozen=True, slots=True)
class SequenceRemoval:
    pile: int
    start_index: int
    cards: tuple[Card, ...]
    suit: str
    flipped: Optional[FlippedCard] = None


@dataclass(frozen=True, slots=True)
class MoveRecord:
    kind: ClassVar[str] = "MOVE"

    source: int
    dest: int
    # Copies of the moved run as it looked when it left the source pile.
    cards: tuple[Card, ...]
    flipped: Optional[FlippedCard] = None
    removals: tuple[SequenceRemoval, ...] = ()


@dataclass(frozen=True, slots=True)
class DealRecord:
    kind: ClassVar[str] = "DEAL"

    # One card per pile, in pile order, as they sat face down in the stock.
    cards: tuple[Card, ...]
    removals: tuple[SequenceRemoval, ...] = ()


HistoryRecord = Union[MoveRecord, DealRecord]


@dataclass(frozen=True, slots=True)
class History:
    records: tuple[HistoryRecord, ...] = ()

    def __len__(self) -> int:
        return len(self.records)

    def push(self, record: HistoryRecord) -> History:
        return History(records=self.records + (record,))

    def pop(self) -> tuple[HistoryRecord, History]:
        return self.records[-1], History(records=self.records[:-1])

    def last(self) -> Optional[HistoryRecord]:
        if not self.records:
            return None
        return self.records[-1]


class StaleRecordError(Exception):
    """A history record no longer matches the state it is applied to."""


def _index_of(pile: list[Card], card_id: int) -> int:
    for i, card in enumerate(pile):
        if card.id == card_id:
            return i
    raise StaleRecordError(f"card {card_id} not found")


def _checked_pile(piles: list[list[Card]], index: int) -> list[Card]:
    if index < 0 or index >= len(piles):
        raise StaleRecordError(f"pile {index} out of range")
    return piles[index]


def _turn_down(pile: list[Card], flipped: Optional[FlippedCard]):
    if flipped is None:
        return
    i = _index_of(pile, flipped.card_id)
    pile[i] = pile[i].turned(False)


def _restore_removals(piles: list[list[Card]], removals: tuple[SequenceRemoval, ...]):
    # Last removal first: a later removal may have happened on a pile an earlier one touched.
    for removal in reversed(removals):
        pile = _checked_pile(piles, removal.pile)
        _turn_down(pile, removal.flipped)
        at = min(removal.start_index, len(pile))
        pile[at:at] = removal.cards


def _undo_move(piles: list[list[Card]], record: MoveRecord):
    source = _checked_pile(piles, record.source)
    dest = _checked_pile(piles, record.dest)
    moved_ids = {card.id for card in record.cards}
    remaining = [card for card in dest if card.id not in moved_ids]
    if len(dest) - len(remaining) != len(record.cards):
        raise StaleRecordError("moved run is not on the destination pile")
    dest[:] = remaining
    _turn_down(source, record.flipped)
    source.extend(record.cards)


def _undo_deal(piles: list[list[Card]], record: DealRecord):
    if len(record.cards) != len(piles):
        raise StaleRecordError("deal does not cover every pile")
    for pile, card in zip(piles, record.cards):
        if not pile or pile[-1].id != card.id:
            raise StaleRecordError(f"dealt card {card.id} is not on top")
        pile.pop()


def revert(state: GameState, record: HistoryRecord) -> GameState:
    """Apply the exact inverse of one record. Raises StaleRecordError if it does not fit."""

    piles = [list(pile) for pile in state.tableau]
    removed = len(record.removals)
    if removed > len(state.completed_sequences):
        raise StaleRecordError("more removals than completed sequences")
    _restore_removals(piles, record.removals)
    completed = state.completed_sequences[:len(state.completed_sequences) - removed]

    stock = state.stock
    if isinstance(record, MoveRecord):
        _undo_move(piles, record)
    else:
        _undo_deal(piles, record)
        stock = record.cards + stock

    tableau: tuple[Pile, ...] = tuple(tuple(pile) for pile in piles)
    return replace(
        state,
        tableau=tableau,
        stock=stock,
        completed_sequences=completed,
        moves=state.moves - 1,
        game_won=len(completed) >= SEQUENCES_TO_WIN,
    )


def undo(state: GameState, history: History) -> tuple[GameState, History]:
    if not history:
        logger.debug("undo ignored: history is empty")
        return state, history
    record, rest = history.pop()
    try:
        previous = revert(state, record)
    except StaleRecordError as exc:
        logger.debug("undo ignored: stale %s record (%s)", record.kind, exc)
        return state, history
    return previous, rest
