"""
Console front-end: play a game by typing what you would otherwise say.

Every line is treated as a voice transcript, except for a few commands:
  click <row> <col>    click a square (0-7, row 0 is the 8th rank)
  moves [square]       list legal moves (of one piece)
  board                show the board
  new / reset          start a new game / reset the board
  quit

Usage: python -m src.cli [--log-level DEBUG]
"""

import argparse
import logging
import sys
from dataclasses import replace
from typing import Optional, TextIO
from uuid import UUID

from src.api.models import (
    ClickRequest,
    GameRequest,
    GameResponse,
    LegalMovesRequest,
    VoiceCommandRequest,
)
from src.chess.position import MoveRecord, Position
from src.core.config import SETTINGS, configure_logging
from src.core.exceptions import GameError
from src.db.memory_repository import InMemoryGameRepository
from src.services.chess_service import ChessService

logger = logging.getLogger(__name__)


def render(response: GameResponse) -> str:
    board = Position.from_fen(response.fen_state).board
    header = f"{response.color_to_move.value} to move ({response.status.value})"
    if response.selected_square:
        header += f" | selected {response.selected_square}: {' '.join(response.highlighted_squares) or '-'}"
    return f"{board}\n{header}"


def handle_line(service: ChessService, game_id: UUID, line: str, out: TextIO) -> bool:
    """Returns False once the user wants to quit."""
    words = line.split()
    if not words:
        return True

    command = words[0].lower()
    if command in {"quit", "exit"}:
        return False

    if command == "new":
        response = service.start_game(GameRequest(game_id=game_id))
    elif command == "reset":
        response = service.reset_game(GameRequest(game_id=game_id))
    elif command == "board":
        response = service.get_game_state(GameRequest(game_id=game_id))
    elif command == "click" and len(words) == 3:
        response = service.click_square(
            ClickRequest(game_id=game_id, row=int(words[1]), col=int(words[2]))
        )
    elif command == "moves":
        square = words[1] if len(words) > 1 else None
        legal = service.legal_moves(LegalMovesRequest(game_id=game_id, square=square))
        print(" ".join(legal.legal_moves) or "(none)", file=out)
        return True
    else:
        response = service.voice_command(
            VoiceCommandRequest(game_id=game_id, transcript=line)
        )

    print(render(response), file=out)
    return True


def main(argv: Optional[list[str]] = None, stdin: TextIO = sys.stdin, out: TextIO = sys.stdout) -> int:
    parser = argparse.ArgumentParser(description="Voice-command chess board (typed transcripts).")
    parser.add_argument("--log-level", default=None, help="overrides CHESS_LOG_LEVEL")
    args = parser.parse_args(argv)

    settings = SETTINGS
    if args.log_level:
        settings = replace(settings, log_level=args.log_level.upper())
    configure_logging(settings)

    def _print_move(record: MoveRecord) -> None:
        print(f"played {record.notation}", file=out)

    service = ChessService(InMemoryGameRepository(), on_move_accepted=_print_move)
    game_id = service.create_game().game_id
    print(render(service.start_game(GameRequest(game_id=game_id))), file=out)

    for line in stdin:
        try:
            if not handle_line(service, game_id, line.strip(), out):
                break
        except (GameError, ValueError) as exc:
            # ValueError: pydantic validation of the typed input / non-numeric click coordinates
            logger.warning("Rejected input %r: %s", line.strip(), exc)
    return 0


if __name__ == "__main__":
    sys.exit(main())
