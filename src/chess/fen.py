"""
Validation of the (reduced) FEN strings used to describe a position.

Only the first two fields of a full FEN are meaningful here, as castling, en passant and move counters are not modelled:
<board position string> <active color>

ex) The standard starting position:
rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w
"""

from src.chess.pieces import FEN_TO_PIECE
from src.chess.square import BOARD_DIMENSIONS

STARTING_POSITION = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"
STARTING_FEN = f"{STARTING_POSITION} w"
EMPTY_POSITION = "/".join(["8"] * BOARD_DIMENSIONS[0])

# No promotion is modelled, so neither side can ever hold more than its initial set of pieces
MAX_PIECES_PER_COLOR = 16
EMPTY_SQUARE_COUNTS = "12345678"


def is_valid_fen(fen: str) -> bool:
    """
    Check if given string follows the reduced FEN notation.
    """
    parts = fen.split(" ")
    if len(parts) != 2:
        return False

    position, color = parts
    return is_valid_position(position) and is_valid_color_code(color)


def is_valid_position(position: str) -> bool:
    """Only check the part of the FEN encoding for the board position."""
    num_ranks, num_files = BOARD_DIMENSIONS
    rank_fens = position.split("/")
    if len(rank_fens) != num_ranks:
        return False

    white_count = 0
    black_count = 0
    for rank_fen in rank_fens:
        file_count = 0
        for character in rank_fen:
            # make sure every character is valid
            if character in EMPTY_SQUARE_COUNTS:
                file_count += int(character)
            elif character.lower() in FEN_TO_PIECE:
                file_count += 1
                if character.isupper():
                    white_count += 1
                else:
                    black_count += 1
            else:
                # immediately invalidate if the character is anything else
                return False

        # make sure you are creating a correctly sized board
        if file_count != num_files:
            return False

    return max(white_count, black_count) <= MAX_PIECES_PER_COLOR


def is_valid_color_code(color: str) -> bool:
    return color in {"w", "b"}
