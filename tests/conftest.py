"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from typing import Callable

import pytest

from src.chess.board import Board
from src.chess.pieces import Piece
from src.chess.square import Square

BoardFactory = Callable[[dict[str, str]], Board]


@pytest.fixture
def empty_board() -> Board:
    return Board.empty()


@pytest.fixture
def starting_board() -> Board:
    return Board.starting_position()


@pytest.fixture
def board_with_pieces() -> BoardFactory:
    """Call the inner function with {square name: FEN character}, ex. {"d4": "N", "e5": "p"}"""

    def _create_board(pieces: dict[str, str]) -> Board:
        return Board(
            {
                Square.from_algebraic(square): Piece.from_fen(character)
                for square, character in pieces.items()
            }
        )

    return _create_board
