from engine.history import HistoryRecord, SequenceRemoval


class Interface:
    """What a Game tells its front end. Hooks that are not overridden just ask for a redraw."""

    def __init__(self):
        self.game = None

    def on_start(self):
        self.notify_redraw()

    def on_event(self, record: HistoryRecord):
        # Completions ride on the move or deal that caused them.
        for removal in record.removals:
            self.on_sequence_completed(removal)
        self.notify_redraw()

    def on_undo_event(self, record: HistoryRecord):
        self.notify_redraw()

    def on_sequence_completed(self, removal: SequenceRemoval):
        pass

    def on_no_moves(self):
        """Called after a move or deal that leaves nothing worth doing and no deal available."""

    def notify_redraw(self):
        pass

    def on_win(self):
        pass
