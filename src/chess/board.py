"""The Game board: which piece stands on which square. Pure data, never mutated in place."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Self

from src.chess.fen import EMPTY_POSITION, STARTING_POSITION, is_valid_position
from src.chess.pieces import Color, Piece, PieceType
from src.chess.square import ALL_SQUARES, BOARD_DIMENSIONS, Square
from src.core.exceptions import InvalidFENError


@dataclass(frozen=True)
class Board:
    """
    Only occupied squares are stored. Any square missing from `position` is empty.
    """

    position: Mapping[Square, Piece] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # read-only view, so a board can safely be shared between successive positions
        object.__setattr__(self, "position", MappingProxyType(dict(self.position)))

    def __hash__(self) -> int:
        return hash(frozenset(self.position.items()))

    @classmethod
    def starting_position(cls) -> Self:
        return cls.from_fen(STARTING_POSITION)

    @classmethod
    def empty(cls) -> Self:
        return cls.from_fen(EMPTY_POSITION)

    @classmethod
    def from_fen(cls, fen_str: str) -> Self:
        """Construct a board using the placement part of a FEN string.

        ex. standard starting position:
        rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
        means:
        * black pieces are on the 8th rank (row 0), starting with rook on a8, knight on b8, etc.
        * pawns cover 7th rank entirely
        * ranks 6 through 3 have 8 consecutive empty squares
        * rank 2 are the white pawns (capital letters)
        * 1st rank (row 7) are the white pieces.
        """
        if not is_valid_position(fen_str):
            raise InvalidFENError(f"Cannot interpret supplied string as FEN position: {fen_str}")

        position: dict[Square, Piece] = {}
        # FEN string is read from top rank (8th) to bottom rank (1st), which matches the row index
        for row, fen_one_rank in enumerate(fen_str.split("/")):
            col = 0
            for character in fen_one_rank:
                if character.isalpha():
                    position[Square(row, col)] = Piece.from_fen(character)
                    col += 1
                else:
                    # A number denotes the amount of empty squares after each other
                    col += int(character)
        return cls(position)

    def to_fen(self) -> str:
        """Ranks are separated by slashes in FEN string."""
        return "/".join(self._row_to_fen(row) for row in range(BOARD_DIMENSIONS[0]))

    def _row_to_fen(self, row: int) -> str:
        """FEN string of a single rank"""
        fen_characters: list[str] = []
        empty_count = 0
        for col in range(BOARD_DIMENSIONS[1]):
            piece = self.piece(Square(row, col))

            if piece is not None:
                if empty_count > 0:
                    fen_characters.append(str(empty_count))
                    empty_count = 0
                fen_characters.append(piece.to_fen())
            else:
                empty_count += 1

        # if the entire rank is empty, then we still place this number in the string
        if empty_count > 0:
            fen_characters.append(str(empty_count))
        return "".join(fen_characters)

    def piece(self, square: Square) -> Optional[Piece]:
        """Squares off the board are reported as empty as well."""
        return self.position.get(square)

    def is_empty(self, square: Square) -> bool:
        return square not in self.position

    def locate_pieces(self, piece_type: PieceType, color: Color) -> list[Square]:
        return [
            square
            for square in self.locate_color(color)
            if self.position[square].type == piece_type
        ]

    def locate_color(self, color: Color) -> list[Square]:
        """All squares holding a piece of the given color, in row-major scan order."""
        return [
            square
            for square in ALL_SQUARES
            if square in self.position and self.position[square].color == color
        ]

    def move_piece(self, from_square: Square, to_square: Square) -> Self:
        """Return the board after relocating the piece. Whatever stood on the target square is removed (captured)."""
        position = dict(self.position)
        position[to_square] = position.pop(from_square)
        return type(self)(position)

    def __str__(self) -> str:
        """Plain text diagram. Rank 8 on top."""
        lines: list[str] = []
        for row in range(BOARD_DIMENSIONS[0]):
            symbols = [
                piece.to_fen() if (piece := self.piece(Square(row, col))) else "."
                for col in range(BOARD_DIMENSIONS[1])
            ]
            lines.append(f"{BOARD_DIMENSIONS[0] - row} {' '.join(symbols)}")
        lines.append("  a b c d e f g h")
        return "\n".join(lines)
