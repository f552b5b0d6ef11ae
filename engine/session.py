from __future__ import annotations

import logging
import random
from typing import Optional

from advisor.hints import MeaningfulMove, best_hint, find_best_destination, has_valid_moves
from engine.cards import CardIdSource
from engine.config import GameConfig
from engine.history import History, HistoryRecord, undo
from engine.interface import Interface
from engine.rules import get_movable_cards
from engine.state import GameState, initialize_game
from engine.transitions import can_deal, deal_from_stock, move_cards

logger = logging.getLogger(__name__)


class Game:
    """
    One player's table: current state, undo history, pending selection and hint.

    Front ends call the public methods and read ``state``; each method applies a
    pure engine transition, keeps history in step and notifies the interface.
    All of them return False instead of raising when nothing happened.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        interface: Optional[Interface] = None,
        rng: Optional[random.Random] = None,
        ids: Optional[CardIdSource] = None,
    ):
        self.config = config if config is not None else GameConfig()
        self.rng = rng if rng is not None else self.config.make_rng()
        self.ids = ids if ids is not None else CardIdSource()
        self.interface: Optional[Interface] = None

        self.state: GameState = None
        self.initial_state: GameState = None
        self.history = History()
        self.selected_pile: Optional[int] = None
        self.selected_card_index: Optional[int] = None
        self.hint: Optional[MeaningfulMove] = None

        if interface is not None:
            self.register_interface(interface)
        self.new_game(self.config.difficulty)

    def register_interface(self, interface: Interface):
        self.interface = interface
        interface.game = self

    @property
    def can_deal(self) -> bool:
        return can_deal(self.state)

    @property
    def no_moves_left(self) -> bool:
        return not self.state.game_won and self.state.moves > 0 and not has_valid_moves(self.state)

    @property
    def has_selection(self) -> bool:
        return self.selected_pile is not None and self.selected_card_index is not None

    def new_game(self, difficulty: Optional[str] = None):
        diff = difficulty if difficulty is not None else self.state.difficulty
        self.state = initialize_game(diff, rng=self.rng, ids=self.ids)
        self.initial_state = self.state
        self._reset_table()
        logger.debug("new %s game", diff)
        if self.interface is not None:
            self.interface.on_start()

    def restart_game(self) -> bool:
        if self.initial_state is None:
            return False
        self.state = self.initial_state
        self._reset_table()
        if self.interface is not None:
            self.interface.on_start()
        return True

    def _reset_table(self):
        self.history = History()
        self.hint = None
        self.clear_selection()

    def clear_selection(self):
        self.selected_pile = None
        self.selected_card_index = None

    def select_cards(self, pile: int, card_index: int) -> bool:
        """
        Pick up the run starting at card_index. If some pile can take it the run
        is moved there at once, otherwise it stays selected for move_selected.
        """
        if not self.state.is_valid_pile(pile):
            return False
        cards = self.state.tableau[pile]
        if card_index < 0 or card_index >= len(cards) or not cards[card_index].face_up:
            return False
        if not get_movable_cards(cards, card_index):
            return False

        self.selected_pile = pile
        self.selected_card_index = card_index
        best = find_best_destination(self.state, pile, card_index)
        if best is not None:
            return self.move_selected(best)
        return True

    def move_selected(self, target_pile: int) -> bool:
        if not self.has_selection:
            return False
        source, index = self.selected_pile, self.selected_card_index
        self.clear_selection()
        return self.move(source, index, target_pile)

    def move(self, source_pile: int, card_index: int, target_pile: int) -> bool:
        result = move_cards(self.state, source_pile, card_index, target_pile)
        self.clear_selection()
        if not result.accepted:
            return False
        self._commit(result.state, result.record)
        return True

    def deal(self) -> bool:
        result = deal_from_stock(self.state)
        self.clear_selection()
        if not result.accepted:
            return False
        self._commit(result.state, result.record)
        return True

    def undo(self) -> bool:
        record = self.history.last()
        state, history = undo(self.state, self.history)
        self.clear_selection()
        if history is self.history:
            return False
        self.state = state
        self.history = history
        self.hint = None
        if self.interface is not None:
            self.interface.on_undo_event(record)
        return True

    def _commit(self, state: GameState, record: HistoryRecord):
        self.history = self.history.push(record)
        self.state = state
        self.hint = None
        if self.interface is not None:
            self.interface.on_event(record)
            if state.game_won:
                self.interface.on_win()
            elif self.no_moves_left:
                self.interface.on_no_moves()

    def show_hint(self) -> Optional[MeaningfulMove]:
        self.hint = best_hint(self.state)
        return self.hint

    def clear_hint(self):
        self.hint = None
