"""
Geometry/Base movement rules and the legality check built on top of them

Key idea: Use strategy pattern to define the movement rule for each piece type.

NOTE: Legality only covers piece geometry and path occupancy. Check, castling, en passant and promotion are not modelled.
"""

from dataclasses import dataclass
from typing import Callable, Optional, Protocol, Self

from src.chess.pieces import Color, Piece, PieceType
from src.chess.square import ALL_SQUARES, BOARD_DIMENSIONS, Square


class Board(Protocol):
    """Just the parts the movement rules and the voice resolver need"""

    def piece(self, square: Square) -> Optional[Piece]: ...
    def is_empty(self, square: Square) -> bool: ...
    def locate_color(self, color: Color) -> list[Square]: ...
    def locate_pieces(self, piece_type: PieceType, color: Color) -> list[Square]: ...


Vector = tuple[int, int]


@dataclass(frozen=True)
class Move:
    """basic definition of a move to be made"""

    from_square: Square
    to_square: Square

    @classmethod
    def from_uci(cls, uci: str) -> Self:
        """
        Universal Chess Interface:
        ---
        One of the standard chess notations for moves

        example:
        * "e2e4": move the piece that was on e2 to e4
        """
        from_sq = Square.from_algebraic(uci[:2])
        to_sq = Square.from_algebraic(uci[2:])
        return cls(from_sq, to_sq)

    def to_uci(self) -> str:
        """Convert into UCI notation"""
        return f"{self.from_square.to_algebraic()}{self.to_square.to_algebraic()}"


# --- PAWN DIRECTIONS ---
# White moves UP the board (towards row 0), black moves DOWN.
PAWN_DIRECTION: dict[Color, int] = {Color.WHITE: -1, Color.BLACK: 1}
PAWN_START_ROW: dict[Color, int] = {
    Color.WHITE: BOARD_DIMENSIONS[0] - 2,
    Color.BLACK: 1,
}


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def _deltas(from_square: Square, to_square: Square) -> Vector:
    return to_square.row - from_square.row, to_square.col - from_square.col


# --- PATH CLEARANCE ---
def squares_between(from_square: Square, to_square: Square) -> list[Square]:
    """
    Find the squares strictly in between the two squares specified (both endpoints excluded).

    Walks one square at a time along the unit direction (the sign of each delta).
    Only defined for squares on the same rank, file or diagonal.
    """
    d_row, d_col = _deltas(from_square, to_square)
    is_straight = d_row == 0 or d_col == 0
    is_diagonal = abs(d_row) == abs(d_col)
    if not (is_straight or is_diagonal):
        raise ValueError(
            f"squares_between requires both squares to lie on one line. \n from: {from_square}\n to:{to_square}"
        )

    step: Vector = (_sign(d_row), _sign(d_col))
    squares_found: list[Square] = []
    square = from_square.offset(*step)
    while square != to_square:
        squares_found.append(square)
        square = square.offset(*step)
    return squares_found


def is_path_clear(board: Board, from_square: Square, to_square: Square) -> bool:
    """Sliding pieces cannot jump: every square in between must be empty"""
    return all(
        board.is_empty(square) for square in squares_between(from_square, to_square)
    )


# --- MOVEMENT RULES ---
def pawn_rule(board: Board, from_square: Square, to_square: Square) -> bool:
    """
    A pawn:
    - moves by a single square forward onto an empty square.
    - It can move by two in their first move (so when on their starting row), if both squares are empty
    - takes diagonally (one square forward, one file aside), but only an opponent's piece
    """
    pawn = board.piece(from_square)
    if pawn is None:
        return False
    direction = PAWN_DIRECTION[pawn.color]
    d_row, d_col = _deltas(from_square, to_square)

    if d_col == 0 and d_row == direction:
        return board.is_empty(to_square)

    if d_col == 0 and d_row == 2 * direction:
        intermediate = from_square.offset(direction, 0)
        return (
            from_square.row == PAWN_START_ROW[pawn.color]
            and board.is_empty(intermediate)
            and board.is_empty(to_square)
        )

    if abs(d_col) == 1 and d_row == direction:
        target = board.piece(to_square)
        return target is not None and target.color == pawn.color.opponent

    return False


def knight_rule(board: Board, from_square: Square, to_square: Square) -> bool:
    """Knights jump: the pair of absolute deltas is {1, 2}"""
    d_row, d_col = _deltas(from_square, to_square)
    return {abs(d_row), abs(d_col)} == {1, 2}


def bishop_rule(board: Board, from_square: Square, to_square: Square) -> bool:
    """Bishops move diagonally: |delta_row| = |delta_col|"""
    d_row, d_col = _deltas(from_square, to_square)
    return abs(d_row) == abs(d_col) and is_path_clear(board, from_square, to_square)


def rook_rule(board: Board, from_square: Square, to_square: Square) -> bool:
    """Rooks move either horizontally or vertically"""
    d_row, d_col = _deltas(from_square, to_square)
    return (d_row == 0 or d_col == 0) and is_path_clear(board, from_square, to_square)


def queen_rule(board: Board, from_square: Square, to_square: Square) -> bool:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    return rook_rule(board, from_square, to_square) or bishop_rule(
        board, from_square, to_square
    )


def king_rule(board: Board, from_square: Square, to_square: Square) -> bool:
    """
    The king can move by a single square at the time. No castling.
    """
    d_row, d_col = _deltas(from_square, to_square)
    return max(abs(d_row), abs(d_col)) == 1


# -- STRATEGY PATTERN: MOVEMENT RULES ---
MovementRuleFn = Callable[[Board, Square, Square], bool]
MOVEMENT_RULES: dict[PieceType, MovementRuleFn] = {
    PieceType.PAWN: pawn_rule,
    PieceType.KNIGHT: knight_rule,
    PieceType.BISHOP: bishop_rule,
    PieceType.ROOK: rook_rule,
    PieceType.QUEEN: queen_rule,
    PieceType.KING: king_rule,
}


# --- LEGALITY ---
def is_legal(
    board: Board, turn_color: Color, from_square: Square, to_square: Square
) -> bool:
    """
    Is the move allowed for the piece standing on `from_square`?
    ----

    Checks, in order (first failing check rejects the move):
    1. target lies on the board
    2. the piece actually moves
    3. there is a piece to move
    4. it is your own piece
    5. you do not capture your own piece
    6. the geometry of the piece type allows it
    """
    if not to_square.is_within_bounds():
        return False

    if from_square == to_square:
        return False

    piece = board.piece(from_square)
    if piece is None:
        return False

    if piece.color != turn_color:
        return False

    target = board.piece(to_square)
    if target is not None and target.color == turn_color:
        return False

    movement_rule = MOVEMENT_RULES[piece.type]
    return movement_rule(board, from_square, to_square)


# --- MOVE GENERATION ---
def legal_destinations(
    board: Board, turn_color: Color, from_square: Square
) -> set[Square]:
    """Probe every square of the board. Used to highlight the options of a selected piece."""
    return {
        square
        for square in ALL_SQUARES
        if is_legal(board, turn_color, from_square, square)
    }


def legal_moves(board: Board, color: Color) -> list[Move]:
    """Every legal move of one side. Sorted by origin, then destination (both row-major)."""
    moves: list[Move] = []
    for from_square in board.locate_color(color):
        destinations = legal_destinations(board, color, from_square)
        moves.extend(Move(from_square, to_square) for to_square in sorted(destinations))
    return moves
