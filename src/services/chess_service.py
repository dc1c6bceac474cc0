"""Orchestration of communication from the API layer to the game logic and storage layers (and the reverse direction)."""

import logging
from typing import Optional
from uuid import UUID

from src.api.models import (
    ClickRequest,
    GameRequest,
    GameResponse,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveRecordResponse,
    MoveRequest,
    VoiceCommandRequest,
)
from src.chess.game import Game, MoveAcceptedFn
from src.chess.position import Position
from src.chess.square import Square
from src.core.exceptions import RepositoryError
from src.core.models import GameModel, MoveRecordData
from src.db.repository import GameRepository

logger = logging.getLogger(__name__)


class ChessService:
    """Orchestration of layers for chess game."""

    def __init__(
        self,
        repository: GameRepository,
        on_move_accepted: Optional[MoveAcceptedFn] = None,
    ) -> None:
        self.repo = repository
        self.on_move_accepted = on_move_accepted

    # -- API routes logic ---
    def create_game(self) -> GameResponse:
        """Create a board in the initial position. Moves are accepted once the game is started."""
        new_game = Game()
        stored_game, game_id = self.repo.create_game(new_game.to_model())
        logger.info("Created game %s", game_id)
        return self._create_game_response(game_id, stored_game)

    def start_game(self, request: GameRequest) -> GameResponse:
        game = self._load_game(request.game_id)
        game.start()
        return self._store_game(request.game_id, game)

    def reset_game(self, request: GameRequest) -> GameResponse:
        game = self._load_game(request.game_id)
        game.reset()
        return self._store_game(request.game_id, game)

    def click_square(self, request: ClickRequest) -> GameResponse:
        """Select / deselect / move, depending on the current selection."""
        game = self._load_game(request.game_id)
        game.click(request.row, request.col)
        return self._store_game(request.game_id, game)

    def voice_command(self, request: VoiceCommandRequest) -> GameResponse:
        """Unrecognized commands leave the game unchanged (the response simply shows the same state)."""
        game = self._load_game(request.game_id)
        game.voice_command(request.transcript)
        return self._store_game(request.game_id, game)

    def make_move(self, request: MoveRequest) -> GameResponse:
        """Make a move attempt. Illegal moves raise IllegalMoveError."""
        game = self._load_game(request.game_id)
        game.make_move(
            Square.from_algebraic(request.from_square),
            Square.from_algebraic(request.to_square),
        )
        return self._store_game(request.game_id, game)

    def legal_moves(self, request: LegalMovesRequest) -> LegalMovesResponse:
        """retrieve set of legal moves (of one piece, or of the side to move)."""
        game = self._load_game(request.game_id)
        if request.square is None:
            legal_moves = [move.to_uci() for move in game.legal_moves()]
        else:
            destinations = game.legal_destinations(Square.from_algebraic(request.square))
            legal_moves = [square.to_algebraic() for square in sorted(destinations)]

        return LegalMovesResponse(
            game_id=request.game_id,
            color=game.position.color_to_move,
            square=request.square,
            legal_moves=legal_moves,
        )

    def get_game_state(self, request: GameRequest) -> GameResponse:
        game_model = self._fetch_game(request.game_id)
        return self._create_game_response(request.game_id, game_model)

    def delete_game(self, request: GameRequest) -> None:
        """Handle a request to delete a Game record."""
        game_id = request.game_id
        if self.repo.delete_game(game_id) is None:
            raise RepositoryError(f"Game with {game_id=} not found.")

    # -- Internal helpers --
    def _load_game(self, game_id: UUID) -> Game:
        game = Game.from_model(self._fetch_game(game_id))
        game.on_move_accepted = self.on_move_accepted
        return game

    def _store_game(self, game_id: UUID, game: Game) -> GameResponse:
        model = game.to_model()
        if self.repo.update_game(game_id, model) is None:
            raise RepositoryError(f"Game with {game_id=} could not be updated.")
        return self._create_game_response(game_id, model)

    def _create_game_response(self, game_id: UUID, model: GameModel) -> GameResponse:
        """Convert info in GameModel to a GameResponse (for game with given ID.)"""
        return GameResponse(
            game_id=game_id,
            status=model.status,
            fen_state=model.current_fen,
            color_to_move=Position.from_fen(model.current_fen).color_to_move,
            selected_square=model.selected_square,
            highlighted_squares=model.highlighted_squares,
            move_history=[_to_move_record_response(data) for data in model.move_history],
        )

    def _fetch_game(self, game_id: UUID) -> GameModel:
        """Attempt to find the game in the repository and raise error if it fails."""
        game_model = self.repo.get_game(game_id)
        if game_model is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        return game_model


def _to_move_record_response(data: MoveRecordData) -> MoveRecordResponse:
    return MoveRecordResponse(
        from_square=data["from"],
        to_square=data["to"],
        piece=data["piece"],
        notation=data["notation"],
        timestamp=data["timestamp"],
        captured=data.get("captured"),
    )
