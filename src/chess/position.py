"""
Representation of a single position (the board + whose turn it is), and the executor that moves from one position to the next.

Positions are values: executing a move returns a new Position instead of changing the old one.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Optional, Self

from src.chess.board import Board
from src.chess.fen import STARTING_FEN, is_valid_fen
from src.chess.pieces import PIECE_TO_NOTATION, Color, PieceType
from src.chess.square import Square
from src.core.exceptions import IllegalMoveError, InvalidFENError

COLOR_TO_FEN: dict[Color, str] = {Color.WHITE: "w", Color.BLACK: "b"}
FEN_TO_COLOR: dict[str, Color] = {value: key for key, value in COLOR_TO_FEN.items()}


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Position:
    """
    Data that can be constructed from a (reduced) FEN string: <board position string> <active color>
    """

    board: Board
    color_to_move: Color = Color.WHITE

    @classmethod
    def from_fen(cls, fen: str) -> Self:
        """Parse the FEN into data"""
        if not is_valid_fen(fen):
            raise InvalidFENError(f"Cannot interpret supplied string as FEN: {fen}")

        placement, active_color = fen.split(" ")
        return cls(Board.from_fen(placement), FEN_TO_COLOR[active_color])

    def to_fen(self) -> str:
        return f"{self.board.to_fen()} {COLOR_TO_FEN[self.color_to_move]}"

    @classmethod
    def starting_position(cls) -> Self:
        return cls.from_fen(STARTING_FEN)


@dataclass(frozen=True)
class MoveRecord:
    """Log entry of a move that has been played. Never changed afterwards."""

    from_square: str
    to_square: str
    piece: PieceType
    notation: str
    timestamp: datetime = field(default_factory=utc_now)
    captured: Optional[PieceType] = None

    def to_dict(self) -> dict[str, str]:
        data = {
            "from": self.from_square,
            "to": self.to_square,
            "piece": self.piece.value,
            "notation": self.notation,
            "timestamp": self.timestamp.isoformat(),
        }
        if self.captured is not None:
            data["captured"] = self.captured.value
        return data

    @classmethod
    def from_dict(cls, data: dict[str, str]) -> Self:
        captured = data.get("captured")
        return cls(
            from_square=data["from"],
            to_square=data["to"],
            piece=PieceType(data["piece"]),
            notation=data["notation"],
            timestamp=datetime.fromisoformat(data["timestamp"]),
            captured=PieceType(captured) if captured else None,
        )


def build_notation(
    piece_type: PieceType,
    from_square: Square,
    to_square: Square,
    is_capture: bool,
) -> str:
    """
    Long algebraic notation: <piece letter><from><- or x><to>

    ex) "e2-e4", "Ng1-f3", "e4xd5"
    """
    separator = "x" if is_capture else "-"
    return f"{PIECE_TO_NOTATION[piece_type]}{from_square.to_algebraic()}{separator}{to_square.to_algebraic()}"


def execute(
    position: Position,
    from_square: Square,
    to_square: Square,
    clock: Callable[[], datetime] = utc_now,
) -> tuple[Position, MoveRecord]:
    """
    Apply a move and hand the turn to the opponent.
    ----

    NOTE: Does NOT check legality. Callers must have validated the move with `is_legal()` first.
    """
    piece = position.board.piece(from_square)
    if piece is None:
        raise IllegalMoveError(f"There is no piece on {from_square} to move.")

    captured = position.board.piece(to_square)
    record = MoveRecord(
        from_square=from_square.to_algebraic(),
        to_square=to_square.to_algebraic(),
        piece=piece.type,
        notation=build_notation(
            piece.type, from_square, to_square, is_capture=captured is not None
        ),
        timestamp=clock(),
        captured=captured.type if captured else None,
    )
    new_position = Position(
        board=position.board.move_piece(from_square, to_square),
        color_to_move=position.color_to_move.opponent,
    )
    return new_position, record
