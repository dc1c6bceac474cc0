"""
Custom exceptions shared by all layers.

Everything derives from GameError so the service (and its callers) can catch a single top-level type.
NOTE: none of these subclass ValueError on purpose: pydantic would otherwise wrap them into a ValidationError.
"""


class GameError(Exception):
    """Top-level error for anything raised by this application."""


class OutOfRangeError(GameError):
    """A (row, col) coordinate that does not lie on the 8x8 grid. Indicates a programming error."""


class MalformedNotationError(GameError):
    """Text that claims to be a square name but is not a file letter a-h followed by a rank digit 1-8."""


class InvalidFENError(GameError):
    """Cannot interpret the string as a FEN position."""


class IllegalMoveError(GameError):
    """A move that the legality engine rejects (only raised on the explicit move path)."""


class GameStateError(GameError):
    """The game is not in a state that accepts the requested action."""


class InvalidRequestError(GameError):
    """Request data failed validation at the boundary layer."""


class RepositoryError(GameError):
    """Requested record could not be found / stored."""
