"""
Type definitions used across layers
"""

from enum import StrEnum


class Status(StrEnum):
    NOT_STARTED = "not started"
    IN_PROGRESS = "in progress"


# NOTE: no EMPTY members. An empty square is simply the absence of a Piece (Optional[Piece]).


class Color(StrEnum):
    WHITE = "white"
    BLACK = "black"

    @property
    def opponent(self) -> "Color":
        return Color.BLACK if self == Color.WHITE else Color.WHITE


class PieceType(StrEnum):
    PAWN = "pawn"
    KNIGHT = "knight"
    BISHOP = "bishop"
    ROOK = "rook"
    QUEEN = "queen"
    KING = "king"
