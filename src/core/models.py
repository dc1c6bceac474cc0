"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Hence, both the API layer (higher) and domain/db layers (lower) will use model(s) defined here to send to/receive from the Service
(Decouples the data model specific to the storage, API layer, or domain layer from the information needed to send across boundaries)
"""

from dataclasses import dataclass, field
from typing import Optional

# Type aliases to make GameModel easier to read
MoveRecordData = dict[str, str]


@dataclass
class GameModel:
    """Transport-safe representation of a chess game used between API, Service, storage, and Game layers."""

    current_fen: str
    move_history: list[MoveRecordData]
    status: str
    selected_square: Optional[str] = None
    highlighted_squares: list[str] = field(default_factory=list)
