import random
import unittest

from engine.cards import EASY, HARD, HEARTS, SPADES, Card, CardIdSource
from engine.history import DealRecord, FlippedCard, History, MoveRecord, revert, undo
from engine.state import GameState, initialize_game
from engine.transitions import deal_from_stock, move_cards

_ids = CardIdSource(3000)


def up(rank, suit=SPADES):
    return Card(id=_ids.next_id(), suit=suit, rank=rank, face_up=True)


def down(rank, suit=SPADES):
    return Card(id=_ids.next_id(), suit=suit, rank=rank, face_up=False)


def table(*piles, stock=()):
    tableau = [tuple(p) for p in piles]
    tableau.extend(() for _ in range(10 - len(tableau)))
    return GameState(tableau=tuple(tableau), stock=tuple(stock), difficulty=EASY)


def all_moves(state):
    for src, pile in enumerate(state.tableau):
        for idx in range(len(pile)):
            for dest in range(len(state.tableau)):
                result = move_cards(state, src, idx, dest)
                if result.accepted:
                    yield result


class HistoryStackTestCase(unittest.TestCase):
    def test_push_and_pop_do_not_mutate(self):
        record = DealRecord(cards=())
        empty = History()
        pushed = empty.push(record)
        self.assertEqual(0, len(empty))
        self.assertEqual(1, len(pushed))
        self.assertIs(record, pushed.last())
        popped, rest = pushed.pop()
        self.assertIs(record, popped)
        self.assertEqual(empty, rest)
        self.assertIsNone(empty.last())

    def test_records_are_tagged(self):
        self.assertEqual("MOVE", MoveRecord(source=0, dest=1, cards=()).kind)
        self.assertEqual("DEAL", DealRecord(cards=()).kind)


class UndoTestCase(unittest.TestCase):
    def test_undo_on_empty_history_is_a_no_op(self):
        state = initialize_game(EASY, random.Random(1), CardIdSource())
        history = History()
        self.assertEqual((state, history), undo(state, history))

    def test_move_then_undo_restores_state(self):
        hidden = down(9)
        state = table([hidden, up(5)], [up(6, HEARTS)], *[[up(13)] for _ in range(8)])
        result = move_cards(state, 0, 1, 1)
        history = History().push(result.record)
        restored, rest = undo(result.state, history)
        self.assertEqual(state, restored)
        self.assertEqual(0, len(rest))

    def test_every_legal_move_from_a_real_deal_round_trips(self):
        for seed in range(5):
            start = initialize_game(HARD, random.Random(seed), CardIdSource())
            state = deal_from_stock(deal_from_stock(start).state).state
            for result in all_moves(state):
                restored, _ = undo(result.state, History().push(result.record))
                self.assertEqual(state, restored)

    def test_deal_then_undo_restores_stock_and_tableau(self):
        state = initialize_game(EASY, random.Random(11), CardIdSource())
        result = deal_from_stock(state)
        restored, rest = undo(result.state, History().push(result.record))
        self.assertEqual(state, restored)
        self.assertEqual(50, len(restored.stock))
        self.assertTrue(all(not card.face_up for card in restored.stock))
        self.assertEqual(0, len(rest))

    def test_undo_of_completing_move_restores_sequence_and_flip(self):
        hidden = down(4, HEARTS)
        run = [up(rank) for rank in range(13, 1, -1)]
        state = table([hidden] + run, [down(6), up(1)], *[[up(13)] for _ in range(8)])
        result = move_cards(state, 1, 1, 0)
        self.assertEqual(1, len(result.state.completed_sequences))
        self.assertIsNotNone(result.record.flipped)
        restored, _ = undo(result.state, History().push(result.record))
        self.assertEqual(state, restored)
        self.assertEqual((), restored.completed_sequences)
        self.assertFalse(restored.game_won)

    def test_undo_of_completing_deal(self):
        run = [up(rank, HEARTS) for rank in range(13, 1, -1)]
        piles = [[down(2)] + run] + [[up(13)] for _ in range(9)]
        stock = [down(1, HEARTS)] + [down(5) for _ in range(19)]
        state = table(*piles, stock=stock)
        result = deal_from_stock(state)
        self.assertEqual(1, len(result.state.completed_sequences))
        self.assertTrue(result.state.tableau[0][0].face_up)
        restored, _ = undo(result.state, History().push(result.record))
        self.assertEqual(state, restored)

    def test_multiple_undos_walk_back_to_the_start(self):
        start = initialize_game(HARD, random.Random(3), CardIdSource())
        state, history = start, History()
        for _ in range(3):
            result = deal_from_stock(state)
            if not result.accepted:
                break
            state, history = result.state, history.push(result.record)
            moves = list(all_moves(state))
            if moves:
                state, history = moves[0].state, history.push(moves[0].record)
        while len(history):
            state, history = undo(state, history)
        self.assertEqual(start, state)

    def test_stale_record_is_ignored(self):
        state = table([up(5)], [up(9)], *[[up(13)] for _ in range(8)])
        stale = MoveRecord(source=0, dest=1, cards=(up(4),))
        history = History().push(stale)
        self.assertEqual((state, history), undo(state, history))

    def test_stale_flip_reference_is_ignored(self):
        moved = up(4)
        state = table([up(9)], [up(5), moved], *[[up(13)] for _ in range(8)])
        stale = MoveRecord(source=0, dest=1, cards=(moved,), flipped=FlippedCard(pile=0, card_id=-1))
        history = History().push(stale)
        self.assertEqual((state, history), undo(state, history))

    def test_revert_of_out_of_range_pile_is_ignored(self):
        state = table([up(5)])
        history = History().push(MoveRecord(source=0, dest=14, cards=()))
        self.assertEqual((state, history), undo(state, history))

    def test_revert_decrements_moves(self):
        state = initialize_game(EASY, random.Random(4), CardIdSource())
        dealt = deal_from_stock(state)
        self.assertEqual(1, dealt.state.moves)
        self.assertEqual(0, revert(dealt.state, dealt.record).moves)


if __name__ == "__main__":
    unittest.main()
