from __future__ import annotations

import argparse
import json
import random
from dataclasses import asdict, dataclass
from typing import Optional, Sequence

from engine.cards import DIFFICULTY_ORDER, EASY, Card, CardIdSource
from engine.rules import can_place_card, get_movable_cards, rank_value
from engine.state import GameState, initialize_game
from engine.transitions import can_deal

MOVE = "MOVE"
DEAL = "DEAL"

EMPTY_AND_FLIP = 80
EMPTY_PILE = 50
FLIP_SAME_SUIT = 100
FLIP_OTHER_SUIT = 70
BUILD_SEQUENCE = 60


@dataclass(frozen=True, slots=True)
class MeaningfulMove:
    """A suggested action; higher priority is better."""

    source_pile: int
    card_index: int
    target_pile: int
    priority: int
    reason: str
    kind: str = MOVE

    def to_notation(self) -> str:
        if self.kind == DEAL:
            return "DEAL"
        return f"MOVE(P{self.source_pile}:{self.card_index}->P{self.target_pile})"


DEAL_HINT = MeaningfulMove(
    source_pile=-1,
    card_index=-1,
    target_pile=-1,
    priority=100,
    reason="Deal new cards from stock",
    kind=DEAL,
)


def _same_suit_tail_length(pile: Sequence[Card]) -> int:
    """Length of the face-up same-suit descending run at the top of the pile."""
    if not pile or not pile[-1].face_up:
        return 0
    suit = pile[-1].suit
    length = 1
    for i in range(len(pile) - 2, -1, -1):
        lower = pile[i]
        upper = pile[i + 1]
        if not lower.face_up or lower.suit != suit:
            break
        if rank_value(lower) != rank_value(upper) + 1:
            break
        length += 1
    return length


def _continues_same_suit_run(pile: Sequence[Card], index: int) -> bool:
    # If the card below already holds this one in a same-suit run, moving would only split it.
    if index <= 0:
        return False
    below = pile[index - 1]
    card = pile[index]
    return below.face_up and below.suit == card.suit and rank_value(below) == rank_value(card) + 1


def _score(
    source: Sequence[Card],
    index: int,
    run: Sequence[Card],
    target: Sequence[Card],
) -> Optional[tuple[int, str]]:
    first = run[0]
    would_flip = index > 0 and not source[index - 1].face_up

    if not target:
        if would_flip:
            return EMPTY_AND_FLIP, "Move to empty & flip card"
        return EMPTY_PILE, "Move to empty column"

    top = target[-1]
    if would_flip:
        if first.suit == top.suit:
            return FLIP_SAME_SUIT, "Join same suit & flip card"
        return FLIP_OTHER_SUIT, "Flip a face-down card"

    if first.suit != top.suit:
        return None
    if _continues_same_suit_run(source, index):
        return None
    target_run = _same_suit_tail_length(target)
    if target_run > 0:
        return BUILD_SEQUENCE, "Build longer sequence"
    return None


def find_meaningful_moves(state: GameState) -> list[MeaningfulMove]:
    moves = []
    for source_idx, source in enumerate(state.tableau):
        for card_idx, card in enumerate(source):
            if not card.face_up:
                continue
            run = get_movable_cards(source, card_idx)
            if not run:
                continue
            for target_idx, target in enumerate(state.tableau):
                if target_idx == source_idx:
                    continue
                if not can_place_card(run[0], target[-1] if target else None):
                    continue
                scored = _score(source, card_idx, run, target)
                if scored is None:
                    continue
                priority, reason = scored
                moves.append(MeaningfulMove(source_idx, card_idx, target_idx, priority, reason))
    # sorted() is stable: equal priorities keep discovery order.
    return sorted(moves, key=lambda m: -m.priority)


def has_valid_moves(state: GameState) -> bool:
    if can_deal(state):
        return True
    return len(find_meaningful_moves(state)) > 0


def best_hint(state: GameState) -> Optional[MeaningfulMove]:
    moves = find_meaningful_moves(state)
    if moves:
        return moves[0]
    if can_deal(state):
        return DEAL_HINT
    return None


def _ordered_tail(pile: Sequence[Card]) -> tuple[int, bool]:
    """(ordered card count at the top regardless of suit, whether the order breaks below it)."""
    if not pile:
        return 0, False
    ordered = 1
    broken = False
    for j in range(len(pile) - 1, 0, -1):
        upper = pile[j]
        lower = pile[j - 1]
        if not upper.face_up or not lower.face_up:
            broken = True
            break
        if rank_value(lower) != rank_value(upper) + 1:
            broken = True
            break
        ordered += 1
    return ordered, broken


def find_best_destination(state: GameState, source_pile: int, card_index: int) -> Optional[int]:
    """Pile an auto-move should go to: longest ordered tail first, unbroken tails before broken ones."""
    if not state.is_valid_pile(source_pile):
        return None
    run = get_movable_cards(state.tableau[source_pile], card_index)
    if not run:
        return None

    candidates = []
    for target_idx, target in enumerate(state.tableau):
        if target_idx == source_pile:
            continue
        if not can_place_card(run[0], state.top_card(target_idx)):
            continue
        ordered, broken = _ordered_tail(target)
        candidates.append((-ordered, broken, target_idx))
    if not candidates:
        return None
    return min(candidates)[2]


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="List ranked Spider hints for a seeded deal.")
    parser.add_argument("--seed", type=int, required=True, help="Shuffle seed.")
    parser.add_argument("--difficulty", choices=DIFFICULTY_ORDER, default=EASY, help="Suit difficulty.")
    parser.add_argument("--limit", type=int, default=0, help="Only print the first N hints (0 = all).")
    parser.add_argument("--pretty", action="store_true", help="Pretty-print json output.")
    return parser.parse_args()


def main() -> None:
    args = _parse_args()
    state = initialize_game(args.difficulty, rng=random.Random(args.seed), ids=CardIdSource())
    moves = find_meaningful_moves(state)
    if args.limit > 0:
        moves = moves[:args.limit]

    payload = {
        "seed": args.seed,
        "difficulty": args.difficulty,
        "can_deal": can_deal(state),
        "has_valid_moves": has_valid_moves(state),
        "hints": [dict(asdict(m), notation=m.to_notation()) for m in moves],
    }
    if args.pretty:
        print(json.dumps(payload, ensure_ascii=False, indent=2))
    else:
        print(json.dumps(payload, ensure_ascii=False))


if __name__ == "__main__":
    main()
