"""Defines the types of chess pieces"""

from dataclasses import dataclass
from typing import Self

from src.core.shared_types import Color, PieceType

FEN_TO_PIECE: dict[str, PieceType] = {
    "p": PieceType.PAWN,
    "n": PieceType.KNIGHT,
    "b": PieceType.BISHOP,
    "r": PieceType.ROOK,
    "q": PieceType.QUEEN,
    "k": PieceType.KING,
}

PIECE_TO_FEN: dict[PieceType, str] = {value: key for key, value in FEN_TO_PIECE.items()}

# Letter used in move notation. Pawns go without a letter.
PIECE_TO_NOTATION: dict[PieceType, str] = {
    piece_type: ("" if piece_type == PieceType.PAWN else fen.upper())
    for piece_type, fen in PIECE_TO_FEN.items()
}


@dataclass(frozen=True)
class Piece:
    """Pieces have no identity: moving a piece relocates the value on the board."""

    type: PieceType
    color: Color

    @classmethod
    def from_fen(cls, character: str) -> Self:
        # lower case: Black pieces, upper case: White pieces
        color = Color.WHITE if character.isupper() else Color.BLACK
        piece_type = FEN_TO_PIECE[character.lower()]
        return cls(piece_type, color)

    def to_fen(self) -> str:
        return (
            PIECE_TO_FEN[self.type].upper()
            if self.color == Color.WHITE
            else PIECE_TO_FEN[self.type].lower()
        )
