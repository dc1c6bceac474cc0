"""Unit tests for /src/chess/game.py"""

from unittest.mock import Mock

import pytest

from src.chess.game import Game, Selection
from src.chess.pieces import Color, Piece, PieceType
from src.chess.position import Position
from src.chess.square import Square
from src.core.exceptions import GameStateError, IllegalMoveError, OutOfRangeError
from src.core.models import GameModel
from src.core.shared_types import Status

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w"


def sq(name: str) -> Square:
    return Square.from_algebraic(name)


def click(game: Game, name: str):
    square = sq(name)
    return game.click(square.row, square.col)


@pytest.fixture
def game() -> Game:
    """A started game with mocked collaborators"""
    new_game = Game(on_move_accepted=Mock(), on_selection_changed=Mock())
    new_game.start()
    return new_game


# -- LIFECYCLE --
def test_new_game_is_not_started() -> None:
    game = Game()
    assert game.status == Status.NOT_STARTED
    assert game.position == Position.starting_position()
    assert game.history == []


def test_input_ignored_before_start() -> None:
    game = Game(on_move_accepted=Mock())
    assert game.voice_command("e4") is None
    assert click(game, "e2") is None
    assert game.selection is None
    assert game.position == Position.starting_position()
    game.on_move_accepted.assert_not_called()


def test_make_move_before_start_raises() -> None:
    with pytest.raises(GameStateError):
        Game().make_move(sq("e2"), sq("e4"))


def test_start(game: Game) -> None:
    assert game.status == Status.IN_PROGRESS
    assert game.position.color_to_move == Color.WHITE


def test_reset_then_start_gives_initial_board(game: Game) -> None:
    game.voice_command("e4")
    game.voice_command("e5")
    click(game, "g1")

    game.reset()
    assert game.status == Status.NOT_STARTED
    game.start()

    assert game.position == Position.starting_position()
    assert game.history == []
    assert game.selection is None
    assert game.status == Status.IN_PROGRESS


def test_start_twice_restarts(game: Game) -> None:
    game.voice_command("d4")
    game.start()
    assert game.position == Position.starting_position()
    assert game.history == []


# -- CLICKS --
def test_select_own_piece(game: Game) -> None:
    assert click(game, "g1") is None
    assert game.selection == Selection(sq("g1"), frozenset({sq("f3"), sq("h3")}))
    game.on_selection_changed.assert_called_once_with(sq("g1"), frozenset({sq("f3"), sq("h3")}))


@pytest.mark.parametrize("name", ["e7", "e4"])
def test_cannot_select_opponent_piece_or_empty_square(game: Game, name: str) -> None:
    click(game, name)
    assert game.selection is None
    game.on_selection_changed.assert_not_called()


def test_click_selected_square_deselects(game: Game) -> None:
    click(game, "e2")
    click(game, "e2")
    assert game.selection is None
    game.on_selection_changed.assert_called_with(None, frozenset())


def test_click_legal_destination_moves(game: Game) -> None:
    click(game, "e2")
    record = click(game, "e4")

    assert record is not None
    assert record.notation == "e2-e4"
    assert game.position.board.is_empty(sq("e2"))
    assert game.position.board.piece(sq("e4")) == Piece(PieceType.PAWN, Color.WHITE)
    assert game.position.color_to_move == Color.BLACK
    assert game.history == [record]
    assert game.selection is None
    game.on_move_accepted.assert_called_once_with(record)


def test_illegal_click_on_own_piece_reselects(game: Game) -> None:
    click(game, "e2")
    click(game, "d2")
    assert game.selection is not None
    assert game.selection.origin == sq("d2")
    assert game.selection.destinations == frozenset({sq("d3"), sq("d4")})
    assert game.history == []


@pytest.mark.parametrize("name", ["e5", "e7"])
def test_illegal_click_elsewhere_clears(game: Game, name: str) -> None:
    click(game, "e2")
    click(game, name)
    assert game.selection is None
    assert game.history == []
    assert game.position == Position.starting_position()


def test_click_out_of_range(game: Game) -> None:
    with pytest.raises(OutOfRangeError):
        game.click(8, 0)
    with pytest.raises(OutOfRangeError):
        game.click(0, -1)


def test_clicks_alternate_turns(game: Game) -> None:
    click(game, "e2")
    click(game, "e4")
    # white piece cannot be selected now
    click(game, "d2")
    assert game.selection is None
    click(game, "e7")
    click(game, "e5")
    assert game.position.color_to_move == Color.WHITE
    assert [record.notation for record in game.history] == ["e2-e4", "e7-e5"]


# -- VOICE --
def test_voice_e4(game: Game) -> None:
    record = game.voice_command("e4")
    assert record is not None
    assert "e2" in record.notation and "e4" in record.notation
    assert len(game.history) == 1
    game.on_move_accepted.assert_called_once_with(record)


def test_voice_unrecognized_leaves_game_unchanged(game: Game) -> None:
    assert game.voice_command("hello there") is None
    assert game.position == Position.starting_position()
    assert game.history == []
    game.on_move_accepted.assert_not_called()


def test_voice_move_clears_selection(game: Game) -> None:
    click(game, "b1")
    game.voice_command("e2 to e4")
    assert game.selection is None
    game.on_selection_changed.assert_called_with(None, frozenset())


def test_voice_game(game: Game) -> None:
    for command in ["e4", "e5", "knight f3", "b8 to c6", "bishop c4", "knight f6"]:
        assert game.voice_command(command) is not None, command
    assert [record.notation for record in game.history] == [
        "e2-e4",
        "e7-e5",
        "Ng1-f3",
        "Nb8-c6",
        "Bf1-c4",
        "Ng8-f6",
    ]
    assert game.voice_command("bishop takes f7").notation == "Bc4xf7"


# -- ACCEPTED MOVES --
def test_each_accepted_move_flips_turn_once(game: Game) -> None:
    for command in ["d4", "d5", "c4"]:
        before = game.position.color_to_move
        count = len(game.history)
        game.voice_command(command)
        assert game.position.color_to_move == before.opponent
        assert len(game.history) == count + 1


def test_make_move(game: Game) -> None:
    record = game.make_move(sq("g1"), sq("f3"))
    assert record.piece == PieceType.KNIGHT
    assert game.position.color_to_move == Color.BLACK


def test_make_illegal_move(game: Game) -> None:
    with pytest.raises(IllegalMoveError):
        game.make_move(sq("a1"), sq("a3"))
    assert game.history == []


def test_legal_moves(game: Game) -> None:
    assert len(game.legal_moves()) == 20
    assert game.legal_destinations(sq("e2")) == {sq("e3"), sq("e4")}


# -- CONVERSION FROM/TO GameModel --
def test_model_roundtrip(game: Game) -> None:
    game.voice_command("e4")
    click(game, "g8")
    model = game.to_model()

    assert model.current_fen == "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b"
    assert model.status == "in progress"
    assert model.selected_square == "g8"
    assert model.highlighted_squares == ["f6", "h6"]
    assert model.move_history[0]["notation"] == "e2-e4"

    restored = Game.from_model(model)
    assert restored.position == game.position
    assert restored.history == game.history
    assert restored.selection == game.selection
    assert restored.to_model() == model


def test_from_model_new_game() -> None:
    model = GameModel(current_fen=STARTING_FEN, move_history=[], status="not started")
    game = Game.from_model(model)
    assert game.status == Status.NOT_STARTED
    assert game.selection is None


def test_from_model_invalid_status() -> None:
    model = GameModel(current_fen=STARTING_FEN, move_history=[], status="checkmate")
    with pytest.raises(GameStateError):
        Game.from_model(model)
