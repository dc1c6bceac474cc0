"""
The Game class will be the entrypoint into the domain layer for the service layer.
It owns the current Position (and replaces it wholesale after every accepted move), the move history and the
UI-transient selection, and it notifies collaborators through plain callbacks.

Inbound:
* start()          -- a new game is started
* reset()          -- back to the initial position, waiting for a new start
* click(row, col)  -- a square on the board was clicked
* voice_command()  -- a transcribed phrase arrived

Outbound:
* on_move_accepted(MoveRecord)
* on_selection_changed(origin, legal destinations)
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional, Self

from src.chess.moves import Move, is_legal, legal_destinations, legal_moves
from src.chess.position import MoveRecord, Position, execute
from src.chess.square import Square
from src.chess.voice import resolve
from src.core.config import SETTINGS
from src.core.exceptions import GameStateError, IllegalMoveError, OutOfRangeError
from src.core.models import GameModel
from src.core.shared_types import Status

logger = logging.getLogger(__name__)

MoveAcceptedFn = Callable[[MoveRecord], None]
SelectionChangedFn = Callable[[Optional[Square], frozenset[Square]], None]


@dataclass(frozen=True)
class Selection:
    """Square clicked first + where that piece could go (used to highlight squares)"""

    origin: Square
    destinations: frozenset[Square]


@dataclass
class Game:
    # --- DOMAIN LAYER API CALLED BY SERVICE---

    position: Position = field(default_factory=Position.starting_position)
    history: list[MoveRecord] = field(default_factory=list)
    status: Status = Status.NOT_STARTED
    selection: Optional[Selection] = None
    on_move_accepted: Optional[MoveAcceptedFn] = field(default=None, repr=False, compare=False)
    on_selection_changed: Optional[SelectionChangedFn] = field(
        default=None, repr=False, compare=False
    )
    spoken_ranks: bool = field(default=SETTINGS.voice_spoken_ranks, repr=False)

    @classmethod
    def from_model(cls, model: GameModel) -> Self:
        """Define how to construct a Game from the information the Service layer actually has"""

        # Validation
        if model.status not in {status.value for status in Status}:
            raise GameStateError(
                f"Invalid status code: {model.status!r}. \nPick one from {','.join([status.value for status in Status])}"
            )

        position = Position.from_fen(model.current_fen)
        history = [MoveRecord.from_dict(data) for data in model.move_history]
        selection = (
            Selection(
                origin=Square.from_algebraic(model.selected_square),
                destinations=frozenset(
                    Square.from_algebraic(sq) for sq in model.highlighted_squares
                ),
            )
            if model.selected_square
            else None
        )
        return cls(position, history, Status(model.status), selection)

    def to_model(self) -> GameModel:
        """Encode back into a format the Service layer uses"""
        return GameModel(
            current_fen=self.position.to_fen(),
            move_history=[record.to_dict() for record in self.history],
            status=self.status.value,
            selected_square=(
                self.selection.origin.to_algebraic() if self.selection else None
            ),
            highlighted_squares=(
                [sq.to_algebraic() for sq in sorted(self.selection.destinations)]
                if self.selection
                else []
            ),
        )

    # --- GAME LIFECYCLE ---
    def start(self) -> None:
        """Start a fresh game from the initial position. White moves first."""
        self._reset_position()
        self.status = Status.IN_PROGRESS
        logger.info("New game started")

    def reset(self) -> None:
        """Back to the initial position. No moves are accepted until the next start()."""
        self._reset_position()
        self.status = Status.NOT_STARTED
        logger.info("Game reset")

    # --- INPUT HANDLING ---
    def click(self, row: int, col: int) -> Optional[MoveRecord]:
        """
        Handle a click on a square.
        ----

        * nothing selected: select one of your own pieces (and compute where it can go)
        * clicking the selected square again: deselect
        * clicking a legal destination: make the move
        * anything else: select the clicked square if it holds one of your pieces, otherwise clear the selection.
        """
        square = Square(row, col)
        if not square.is_within_bounds():
            raise OutOfRangeError(f"Clicked square ({row}, {col}) does not lie on the board.")

        if self.status != Status.IN_PROGRESS:
            return None

        if self.selection is None:
            self._select(square)
            return None

        origin = self.selection.origin
        if square == origin:
            self._clear_selection()
            return None

        if is_legal(self.position.board, self.position.color_to_move, origin, square):
            return self._apply(origin, square)

        # illegal target: maybe the player just wants to move another piece
        self._select(square)
        return None

    def voice_command(self, text: str) -> Optional[MoveRecord]:
        """Best-effort: unparseable or illegal commands are silently dropped."""
        if self.status != Status.IN_PROGRESS:
            return None

        move = resolve(self.position, text, self.spoken_ranks)
        if move is None:
            logger.info("Could not execute voice command: %r", text)
            return None
        return self._apply(move.from_square, move.to_square)

    def make_move(self, from_square: Square, to_square: Square) -> MoveRecord:
        """
        Attempt to make an explicit move (ex. from a move request).
        Contrary to clicks/voice commands, a rejected move raises an error.
        """
        if self.status != Status.IN_PROGRESS:
            raise GameStateError(f"Game is not in progress. status: {self.status}")

        if not is_legal(self.position.board, self.position.color_to_move, from_square, to_square):
            raise IllegalMoveError(
                f"Move not allowed: {Move(from_square, to_square).to_uci()}"
            )
        return self._apply(from_square, to_square)

    # --- QUERIES ---
    def legal_destinations(self, square: Square) -> set[Square]:
        return legal_destinations(self.position.board, self.position.color_to_move, square)

    def legal_moves(self) -> list[Move]:
        return legal_moves(self.position.board, self.position.color_to_move)

    # -- PRIVATE HELPERS ---
    def _apply(self, from_square: Square, to_square: Square) -> MoveRecord:
        """The one place where the position changes during a game. Legality must have been checked."""
        self.position, record = execute(self.position, from_square, to_square)
        self.history.append(record)
        logger.info("Move accepted: %s", record.notation)
        self._clear_selection()
        if self.on_move_accepted:
            self.on_move_accepted(record)
        return record

    def _select(self, square: Square) -> None:
        """Select your own piece, or clear the selection if the square holds anything else."""
        piece = self.position.board.piece(square)
        if piece is None or piece.color != self.position.color_to_move:
            self._clear_selection()
            return

        destinations = frozenset(self.legal_destinations(square))
        self.selection = Selection(square, destinations)
        self._notify_selection()

    def _clear_selection(self) -> None:
        if self.selection is None:
            return
        self.selection = None
        self._notify_selection()

    def _notify_selection(self) -> None:
        if not self.on_selection_changed:
            return
        if self.selection is None:
            self.on_selection_changed(None, frozenset())
        else:
            self.on_selection_changed(self.selection.origin, self.selection.destinations)

    def _reset_position(self) -> None:
        self.position = Position.starting_position()
        self.history = []
        self._clear_selection()
