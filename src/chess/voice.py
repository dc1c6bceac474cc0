"""
Turn loosely structured (spoken, then transcribed) text into a concrete, legal move.

The resolver is best-effort: speech-to-text output is noisy, so anything it cannot turn into a legal move is
silently dropped (returns None). Nothing in here raises on bad user input.

Parsing rules, tried in order (first one that matches wins):
1. bare destination: "e4" --> first own piece (row-major scan order) that can legally go there
2. from/to pair anywhere in the text: "e2 to e4", "e2e4", "d4 takes e5"
3. piece name + destination: "knight f3", "bishop takes f7" --> first own piece of that type that can go there
"""

import logging
import re
from typing import Optional, Sequence

from src.chess.moves import Board, Move, is_legal
from src.chess.pieces import Color, PieceType
from src.chess.position import Position
from src.chess.square import Square
from src.core.exceptions import MalformedNotationError

logger = logging.getLogger(__name__)

BARE_DESTINATION = re.compile(r"^[a-h][1-8]$")
FROM_TO_PAIR = re.compile(r"([a-h][1-8]).*?([a-h][1-8])")
SQUARE_PATTERN = re.compile(r"[a-h][1-8]")
PIECE_NAME = re.compile(r"\b(pawn|knight|bishop|rook|queen|king)\b")

RANK_WORDS: dict[str, str] = {
    "one": "1",
    "two": "2",
    "three": "3",
    "four": "4",
    "five": "5",
    "six": "6",
    "seven": "7",
    "eight": "8",
}

# (pattern, replacement): common mishearings of the piece names
PIECE_MISHEARINGS: Sequence[tuple[str, str]] = (
    (r"\bk?nite\b", "knight"),
    (r"\bnight\b", "knight"),
    (r"\bbee\s*shop\b", "bishop"),
    (r"\brock\b", "rook"),
    (r"\bquin\b", "queen"),
    (r"\bprawn\b", "pawn"),
)

# a file letter followed by a separate rank ("e 4", "e four"), joined into one square token
SPOKEN_SQUARE = re.compile(rf"\b([a-h])\s+({'|'.join(RANK_WORDS)}|[1-8])\b")


def normalize_transcript(text: str, spoken_ranks: bool = True) -> str:
    """
    Clean up a transcript before parsing.

    ex) "E two to E four." --> "e2 to e4"
    """
    cleaned = re.sub(r"[^a-z0-9\s-]", " ", text.lower())
    cleaned = " ".join(cleaned.split())
    for pattern, replacement in PIECE_MISHEARINGS:
        cleaned = re.sub(pattern, replacement, cleaned)
    if spoken_ranks:
        cleaned = SPOKEN_SQUARE.sub(
            lambda match: match.group(1) + RANK_WORDS.get(match.group(2), match.group(2)),
            cleaned,
        )
    return cleaned


def find_mover(
    board: Board,
    turn_color: Color,
    target: Square,
    piece_type: Optional[PieceType] = None,
) -> Optional[Square]:
    """
    Search the own pieces in row-major scan order, return the first one that can legally reach the target.

    NOTE: ambiguous commands (two pieces that can reach the same square) are decided by scan order only.
    """
    if piece_type is None:
        candidates = board.locate_color(turn_color)
    else:
        candidates = board.locate_pieces(piece_type, turn_color)
    for square in candidates:
        if is_legal(board, turn_color, square, target):
            return square
    return None


def parse_candidate(board: Board, turn_color: Color, command: str) -> Optional[Move]:
    """Apply the parsing rules to an already normalized command. Raises MalformedNotationError on bad square names."""

    if BARE_DESTINATION.match(command):
        target = Square.from_algebraic(command)
        mover = find_mover(board, turn_color, target)
        return Move(mover, target) if mover is not None else None

    pair = FROM_TO_PAIR.search(command)
    if pair:
        return Move(
            Square.from_algebraic(pair.group(1)), Square.from_algebraic(pair.group(2))
        )

    piece_name = PIECE_NAME.search(command)
    square_name = SQUARE_PATTERN.search(command)
    if piece_name and square_name:
        target = Square.from_algebraic(square_name.group(0))
        mover = find_mover(board, turn_color, target, PieceType(piece_name.group(1)))
        return Move(mover, target) if mover is not None else None

    return None


def resolve(position: Position, text: str, spoken_ranks: bool = True) -> Optional[Move]:
    """
    Resolve a transcript into a legal move for the side to move, or None.
    ----

    The candidate is validated exactly like a clicked move would be.
    """
    command = normalize_transcript(text, spoken_ranks)
    board = position.board
    turn_color = position.color_to_move

    try:
        candidate = parse_candidate(board, turn_color, command)
    except MalformedNotationError as exc:
        logger.debug("Discarding voice command %r: %s", text, exc)
        return None

    if candidate is None:
        logger.debug("No move found in voice command %r", text)
        return None

    if not is_legal(board, turn_color, candidate.from_square, candidate.to_square):
        logger.debug("Voice command %r resolved to illegal move %s", text, candidate.to_uci())
        return None

    logger.debug("Voice command %r resolved to %s", text, candidate.to_uci())
    return candidate
