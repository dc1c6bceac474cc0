"""Requests and Response models"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from src.chess.square import BOARD_DIMENSIONS, FILES, RANKS
from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Color, PieceType, Status


def _is_algebraic_notation(value: str) -> bool:
    return len(value) == 2 and value[0] in FILES and value[1] in RANKS


# --- REQUEST MODELS ---
class GameRequest(BaseModel):
    """Any request that only needs to identify the game (start, reset, get state, delete)."""

    game_id: UUID


class ClickRequest(BaseModel):
    game_id: UUID
    row: int
    col: int

    @field_validator("row", "col")
    @classmethod
    def validate_coordinate(cls, value: int) -> int:
        if not 0 <= value < BOARD_DIMENSIONS[0]:
            raise InvalidRequestError(
                f"Coordinate {value} does not lie on the board (0-{BOARD_DIMENSIONS[0] - 1})."
            )
        return value


class VoiceCommandRequest(BaseModel):
    game_id: UUID
    transcript: str

    @field_validator("transcript")
    @classmethod
    def normalize_transcript(cls, value: str) -> str:
        """Callers hand over the transcript as recognized, we only lower-case and trim it."""
        return value.lower().strip()


class MoveRequest(BaseModel):
    game_id: UUID
    from_square: str
    to_square: str

    @field_validator("from_square", "to_square")
    @classmethod
    def validate_square(cls, value: str) -> str:
        if not _is_algebraic_notation(value):
            raise InvalidRequestError(
                f"Cannot interpret {value!r} as a valid square name."
            )
        return value


class LegalMovesRequest(BaseModel):
    """Without a square: all legal moves of the side to move."""

    game_id: UUID
    square: Optional[str] = None

    @field_validator("square")
    @classmethod
    def validate_square(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        if not _is_algebraic_notation(value):
            raise InvalidRequestError(
                f"Cannot interpret {value!r} as a valid square name."
            )
        return value


# --- RESPONSE MODELS ---
class MoveRecordResponse(BaseModel):
    from_square: str
    to_square: str
    piece: PieceType
    notation: str
    timestamp: datetime
    captured: Optional[PieceType] = None


class GameResponse(BaseModel):
    game_id: UUID
    status: Status
    fen_state: str
    color_to_move: Color
    selected_square: Optional[str]
    highlighted_squares: list[str]
    move_history: list[MoveRecordResponse]


class LegalMovesResponse(BaseModel):
    game_id: UUID
    color: Color
    square: Optional[str]
    legal_moves: list[str]
