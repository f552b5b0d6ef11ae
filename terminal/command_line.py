import argparse
import logging

from engine.cards import DIFFICULTY_ORDER, suit_counts
from engine.config import GameConfig, load_config
from engine.interface import Interface
from engine.session import Game


class CommandLineInterface(Interface):

    def render(self) -> list[str]:
        state = self.game.state
        lines = [
            f"Completed: {len(state.completed_sequences)}    Stock: {len(state.stock)}    Moves: {state.moves}",
            "-" + "".join(f"---{i}-" for i in range(len(state.tableau))),
        ]
        i = 0
        while True:
            has = False
            line = f"{i:>2}: "
            for pile in state.tableau:
                if len(pile) <= i:
                    line += "     "
                    continue
                has = True
                line += pile[i].game_str() + "  "
            if not has:
                break
            lines.append(line.rstrip())
            i += 1
        return lines

    def notify_redraw(self):
        print("\n".join(self.render()))
        print()

    def on_start(self):
        difficulty = self.game.state.difficulty
        print(f"Game started! ({difficulty}, {suit_counts(difficulty)} suit(s))")
        super().on_start()

    def on_sequence_completed(self, removal):
        print(f"Completed a {removal.suit} sequence!")

    def on_no_moves(self):
        print("No moves left. Undo, restart or start a new game.")

    def on_win(self):
        print("You win!")


def parse_position(text: str, game: Game) -> tuple[int, int]:
    """'3' means the top card of pile 3, '3:5' the card at index 5 of pile 3."""
    if ":" in text:
        pile, index = text.split(":", 1)
        return int(pile), int(index)
    pile = int(text)
    return pile, len(game.state.tableau[pile]) - 1


def handle_command(game: Game, command: str) -> bool:
    """Run one console command; returns False when the player asked to quit."""
    parts = command.split()
    if not parts:
        return True
    verb = parts[0]
    try:
        if verb == "mv" and len(parts) == 3:
            src, idx = parse_position(parts[1], game)
            if not game.move(src, idx, int(parts[2])):
                print("Cannot move!")
        elif verb == "sel" and len(parts) == 3:
            if not game.select_cards(int(parts[1]), int(parts[2])):
                print("Cannot select!")
            elif game.has_selection:
                print("Selected; use 'to <pile>' to place it.")
        elif verb == "to" and len(parts) == 2:
            if not game.move_selected(int(parts[1])):
                print("Cannot move!")
        elif verb == "deal":
            if not game.deal():
                print("Cannot deal!")
        elif verb == "undo":
            if not game.undo():
                print("Cannot undo!")
        elif verb == "hint":
            hint = game.show_hint()
            if hint is None:
                print("No moves left.")
            else:
                print(f"{hint.to_notation()}: {hint.reason}")
        elif verb == "new":
            difficulty = parts[1] if len(parts) > 1 else None
            if difficulty is not None and difficulty not in DIFFICULTY_ORDER:
                print("Unknown difficulty!")
            else:
                game.new_game(difficulty)
        elif verb == "restart":
            game.restart_game()
        elif verb == "quit":
            return False
        else:
            print("Invalid command!")
    except (ValueError, IndexError):
        print("Invalid index!")
    return True


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Play Spider Solitaire in the terminal.")
    parser.add_argument("--config", type=str, default="", help="Optional ini file with a [game] section.")
    parser.add_argument("--difficulty", choices=DIFFICULTY_ORDER, default=None, help="Suit difficulty.")
    parser.add_argument("--seed", type=int, default=None, help="Shuffle seed.")
    return parser.parse_args()


def main():
    args = _parse_args()
    config = load_config(args.config) if args.config else GameConfig()
    if args.difficulty is not None:
        config.difficulty = args.difficulty
    if args.seed is not None:
        config.seed = args.seed
    logging.basicConfig(level=config.log_level, format="%(levelname)s %(name)s: %(message)s")

    game = Game(config=config, interface=CommandLineInterface())
    while not game.state.game_won:
        try:
            command = input()
        except EOFError:
            break
        if not handle_command(game, command):
            break


if __name__ == '__main__':
    main()
