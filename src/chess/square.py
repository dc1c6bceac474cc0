"""
A square on the board + conversions to/from algebraic notation

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass

from src.core.exceptions import MalformedNotationError, OutOfRangeError

# Chess board is always 8x8: (rows, columns)
BOARD_DIMENSIONS = (8, 8)

# column 0 is the a-file, row 0 is the 8th rank (black's back rank)
FILES = "abcdefgh"
RANKS = "87654321"


@dataclass(frozen=True, order=True)
class Square:
    """
    Grid coordinate. Ordering is row-major, which is the scan order used to break ties when searching for pieces.
    """

    row: int
    col: int

    @classmethod
    def from_algebraic(cls, sq: str) -> Square:
        """Algebraic notation: 'a8' - 'h1' get converted to (0,0) - (7,7)"""
        if len(sq) != 2 or sq[0] not in FILES or sq[1] not in RANKS:
            raise MalformedNotationError(
                f"Cannot interpret {sq!r} as a square name. Expected a file a-h followed by a rank 1-8."
            )
        return cls(RANKS.index(sq[1]), FILES.index(sq[0]))

    def to_algebraic(self) -> str:
        if not self.is_within_bounds():
            raise OutOfRangeError(f"Square {self} does not lie on the board.")
        return f"{FILES[self.col]}{RANKS[self.row]}"

    def is_within_bounds(self) -> bool:
        return (0 <= self.row < BOARD_DIMENSIONS[0]) and (
            0 <= self.col < BOARD_DIMENSIONS[1]
        )

    def offset(self, d_row: int, d_col: int) -> Square:
        return Square(self.row + d_row, self.col + d_col)

    def __str__(self) -> str:
        return self.to_algebraic() if self.is_within_bounds() else repr(self)


ALL_SQUARES: tuple[Square, ...] = tuple(
    Square(row, col)
    for row in range(BOARD_DIMENSIONS[0])
    for col in range(BOARD_DIMENSIONS[1])
)


def to_algebraic(row: int, col: int) -> str:
    return Square(row, col).to_algebraic()


def from_algebraic(name: str) -> tuple[int, int]:
    square = Square.from_algebraic(name)
    return square.row, square.col
