"""Unit tests for src/services/chess_service.py"""

from typing import Generator
from unittest.mock import Mock
from uuid import UUID, uuid4

import pytest

from src.core.exceptions import GameError, IllegalMoveError, RepositoryError
from src.core.models import GameModel
from src.core.shared_types import Color, PieceType, Status
from src.services.chess_service import (
    ChessService,
    ClickRequest,
    GameRequest,
    GameResponse,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveRequest,
    VoiceCommandRequest,
)

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w"


# --- MOCK DEPENDENCIES ----
class MockRepository:
    """Mock the GameRepository using a dictionary of game models."""

    def __init__(self) -> None:
        self._games: dict[UUID, GameModel] = {}

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        game_id = uuid4()
        self._games[game_id] = game
        return game, game_id

    def get_game(self, game_id: UUID) -> GameModel | None:
        return self._games.get(game_id)

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        if game_id not in self._games:
            return None
        self._games[game_id] = game
        return game

    def delete_game(self, game_id: UUID) -> GameModel | None:
        return self._games.pop(game_id, None)

    def clear(self) -> None:
        """Clear the repository (useful in between tests)"""
        self._games.clear()


@pytest.fixture
def mock_repository() -> Generator[MockRepository, None, None]:
    """Ensures to clear the repository between tests"""
    repo = MockRepository()
    try:
        yield repo
    finally:
        repo.clear()


@pytest.fixture
def service(mock_repository: MockRepository) -> ChessService:
    return ChessService(mock_repository)


@pytest.fixture
def started_game_id(service: ChessService) -> UUID:
    game_id = service.create_game().game_id
    service.start_game(GameRequest(game_id=game_id))
    return game_id


# --- CREATE / START / RESET ---
def test_create_game(service: ChessService, mock_repository: MockRepository) -> None:
    response = service.create_game()

    assert isinstance(response, GameResponse)
    assert isinstance(response.game_id, UUID)
    assert response.status == Status.NOT_STARTED
    assert response.fen_state == STARTING_FEN
    assert response.color_to_move == Color.WHITE
    assert response.move_history == []

    stored_game = mock_repository.get_game(response.game_id)
    assert stored_game is not None
    assert stored_game.current_fen == STARTING_FEN
    assert stored_game.status == Status.NOT_STARTED


def test_start_game(service: ChessService, started_game_id: UUID) -> None:
    response = service.get_game_state(GameRequest(game_id=started_game_id))
    assert response.status == Status.IN_PROGRESS


def test_reset_and_start(service: ChessService, started_game_id: UUID) -> None:
    service.voice_command(VoiceCommandRequest(game_id=started_game_id, transcript="e4"))
    response = service.reset_game(GameRequest(game_id=started_game_id))
    assert response.status == Status.NOT_STARTED

    response = service.start_game(GameRequest(game_id=started_game_id))
    assert response.fen_state == STARTING_FEN
    assert response.move_history == []


def test_unknown_game(service: ChessService) -> None:
    with pytest.raises(RepositoryError):
        service.get_game_state(GameRequest(game_id=uuid4()))


# --- VOICE ---
def test_voice_command(service: ChessService, started_game_id: UUID) -> None:
    response = service.voice_command(
        VoiceCommandRequest(game_id=started_game_id, transcript="  E4 ")
    )
    assert response.color_to_move == Color.BLACK
    assert len(response.move_history) == 1
    record = response.move_history[0]
    assert record.from_square == "e2"
    assert record.to_square == "e4"
    assert record.piece == PieceType.PAWN
    assert record.notation == "e2-e4"


def test_voice_command_not_understood(service: ChessService, started_game_id: UUID) -> None:
    response = service.voice_command(
        VoiceCommandRequest(game_id=started_game_id, transcript="hello there")
    )
    assert response.fen_state == STARTING_FEN
    assert response.move_history == []


def test_voice_command_before_start(service: ChessService) -> None:
    game_id = service.create_game().game_id
    response = service.voice_command(VoiceCommandRequest(game_id=game_id, transcript="e4"))
    assert response.fen_state == STARTING_FEN


def test_move_callback(mock_repository: MockRepository) -> None:
    on_move = Mock()
    service = ChessService(mock_repository, on_move_accepted=on_move)
    game_id = service.create_game().game_id
    service.start_game(GameRequest(game_id=game_id))
    service.voice_command(VoiceCommandRequest(game_id=game_id, transcript="knight f3"))

    on_move.assert_called_once()
    record = on_move.call_args.args[0]
    assert record.notation == "Ng1-f3"


# --- CLICKS ---
def test_click_select_then_move(service: ChessService, started_game_id: UUID) -> None:
    # g1
    response = service.click_square(ClickRequest(game_id=started_game_id, row=7, col=6))
    assert response.selected_square == "g1"
    assert response.highlighted_squares == ["f3", "h3"]

    # f3
    response = service.click_square(ClickRequest(game_id=started_game_id, row=5, col=5))
    assert response.selected_square is None
    assert response.highlighted_squares == []
    assert response.move_history[0].notation == "Ng1-f3"
    assert response.color_to_move == Color.BLACK


# --- EXPLICIT MOVES ---
def test_make_move(service: ChessService, started_game_id: UUID) -> None:
    response = service.make_move(
        MoveRequest(game_id=started_game_id, from_square="d2", to_square="d4")
    )
    assert response.fen_state == "rnbqkbnr/pppppppp/8/8/3P4/8/PPP1PPPP/RNBQKBNR b"


def test_make_illegal_move(service: ChessService, started_game_id: UUID) -> None:
    """Test any top-level custom exception is raised (specific exception types are responsibility of other layers)"""
    with pytest.raises(GameError):
        service.make_move(
            MoveRequest(game_id=started_game_id, from_square="d2", to_square="d5")
        )
    with pytest.raises(IllegalMoveError):
        service.make_move(
            MoveRequest(game_id=started_game_id, from_square="d7", to_square="d5")
        )


# --- LEGAL MOVES ---
def test_legal_moves_all(service: ChessService, started_game_id: UUID) -> None:
    response = service.legal_moves(LegalMovesRequest(game_id=started_game_id))
    assert isinstance(response, LegalMovesResponse)
    assert response.color == Color.WHITE
    assert response.square is None
    assert len(response.legal_moves) == 20
    assert "e2e4" in response.legal_moves


def test_legal_moves_of_square(service: ChessService, started_game_id: UUID) -> None:
    response = service.legal_moves(LegalMovesRequest(game_id=started_game_id, square="b1"))
    assert response.legal_moves == ["a3", "c3"]


# --- DELETE ---
def test_delete_game(service: ChessService, started_game_id: UUID) -> None:
    service.delete_game(GameRequest(game_id=started_game_id))
    with pytest.raises(RepositoryError):
        service.get_game_state(GameRequest(game_id=started_game_id))


def test_delete_unknown_game(service: ChessService) -> None:
    with pytest.raises(RepositoryError):
        service.delete_game(GameRequest(game_id=uuid4()))


def test_store_deleted_game(service: ChessService, mock_repository: MockRepository, started_game_id: UUID) -> None:
    """A game that disappears from the repository mid-request cannot be written back"""
    mock_repository.update_game = Mock(return_value=None)
    with pytest.raises(RepositoryError):
        service.voice_command(VoiceCommandRequest(game_id=started_game_id, transcript="e4"))
