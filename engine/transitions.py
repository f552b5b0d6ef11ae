from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Iterable, Optional

from engine.cards import NUM_PER_SUIT, Card
from engine.history import DealRecord, FlippedCard, MoveRecord, SequenceRemoval
from engine.rules import can_place_card, check_for_completed_sequence, get_movable_cards
from engine.state import DEAL_SIZE, SEQUENCES_TO_WIN, CompletedSequence, GameState

logger = logging.getLogger(__name__)

INVALID_PILE = "invalid_pile"
SAME_PILE = "same_pile"
NOT_MOVABLE = "not_movable"
ILLEGAL_PLACEMENT = "illegal_placement"
STOCK_EXHAUSTED = "stock_exhausted"
EMPTY_PILE = "empty_pile"


@dataclass(frozen=True, slots=True)
class MoveResult:
    state: GameState
    record: Optional[MoveRecord] = None
    reason: Optional[str] = None

    @property
    def accepted(self) -> bool:
        return self.record is not None


@dataclass(frozen=True, slots=True)
class DealResult:
    state: GameState
    record: Optional[DealRecord] = None
    reason: Optional[str] = None

    @property
    def accepted(self) -> bool:
        return self.record is not None


def _flip_top(piles: list[list[Card]], index: int) -> Optional[FlippedCard]:
    pile = piles[index]
    if not pile or pile[-1].face_up:
        return None
    pile[-1] = pile[-1].turned(True)
    return FlippedCard(pile=index, card_id=pile[-1].id)


def _remove_completed(
    piles: list[list[Card]],
    completed: list[CompletedSequence],
    candidates: Iterable[int],
) -> tuple[SequenceRemoval, ...]:
    """Take every finished K..A run off the candidate piles, recording what undo needs."""

    removals = []
    for index in candidates:
        while len(completed) < SEQUENCES_TO_WIN:
            match = check_for_completed_sequence(piles[index])
            if not match.completed:
                break
            pile = piles[index]
            start = match.start_index
            cards = tuple(pile[start:start + NUM_PER_SUIT])
            del pile[start:start + NUM_PER_SUIT]
            flipped = _flip_top(piles, index)
            completed.append(CompletedSequence(id=len(completed) + 1, suit=match.suit))
            removals.append(SequenceRemoval(pile=index, start_index=start, cards=cards, suit=match.suit, flipped=flipped))
            logger.info("completed %s sequence on pile %d (%d/%d)", match.suit, index, len(completed), SEQUENCES_TO_WIN)
    return tuple(removals)


def _rejected_move(state: GameState, reason: str, source: int, index: int, dest: int) -> MoveResult:
    logger.debug("move rejected (%s): pile %d card %d -> pile %d", reason, source, index, dest)
    return MoveResult(state=state, reason=reason)


def move_cards(state: GameState, source_pile: int, card_index: int, dest_pile: int) -> MoveResult:
    """
    Carry the run starting at card_index of source_pile onto dest_pile.

    Illegal requests come back as a MoveResult with no record and the state
    untouched. A legal one turns up the newly exposed source card and removes
    any sequence the move completed on the destination.
    """
    if not state.is_valid_pile(source_pile) or not state.is_valid_pile(dest_pile):
        return _rejected_move(state, INVALID_PILE, source_pile, card_index, dest_pile)
    if source_pile == dest_pile:
        return _rejected_move(state, SAME_PILE, source_pile, card_index, dest_pile)
    run = get_movable_cards(state.tableau[source_pile], card_index)
    if not run:
        return _rejected_move(state, NOT_MOVABLE, source_pile, card_index, dest_pile)
    if not can_place_card(run[0], state.top_card(dest_pile)):
        return _rejected_move(state, ILLEGAL_PLACEMENT, source_pile, card_index, dest_pile)

    piles = [list(pile) for pile in state.tableau]
    del piles[source_pile][card_index:]
    piles[dest_pile].extend(run)
    flipped = _flip_top(piles, source_pile)

    completed = list(state.completed_sequences)
    removals = _remove_completed(piles, completed, (dest_pile,))

    new_state = replace(
        state,
        tableau=tuple(tuple(pile) for pile in piles),
        completed_sequences=tuple(completed),
        moves=state.moves + 1,
        game_won=len(completed) >= SEQUENCES_TO_WIN,
    )
    if new_state.game_won and not state.game_won:
        logger.info("game won after %d moves", new_state.moves)
    record = MoveRecord(source=source_pile, dest=dest_pile, cards=run, flipped=flipped, removals=removals)
    return MoveResult(state=new_state, record=record)


def deal_blocker(state: GameState) -> Optional[str]:
    if len(state.stock) < max(DEAL_SIZE, len(state.tableau)):
        return STOCK_EXHAUSTED
    if any(len(pile) == 0 for pile in state.tableau):
        return EMPTY_PILE
    return None


def can_deal(state: GameState) -> bool:
    return deal_blocker(state) is None


def deal_from_stock(state: GameState) -> DealResult:
    reason = deal_blocker(state)
    if reason is not None:
        logger.debug("deal rejected (%s): stock=%d", reason, len(state.stock))
        return DealResult(state=state, reason=reason)

    count = len(state.tableau)
    dealt = state.stock[:count]
    piles = [list(pile) + [card.turned(True)] for pile, card in zip(state.tableau, dealt)]

    completed = list(state.completed_sequences)
    removals = _remove_completed(piles, completed, range(len(piles)))

    new_state = replace(
        state,
        tableau=tuple(tuple(pile) for pile in piles),
        stock=state.stock[count:],
        completed_sequences=tuple(completed),
        moves=state.moves + 1,
        game_won=len(completed) >= SEQUENCES_TO_WIN,
    )
    if new_state.game_won and not state.game_won:
        logger.info("game won after %d moves", new_state.moves)
    return DealResult(state=new_state, record=DealRecord(cards=dealt, removals=removals))
