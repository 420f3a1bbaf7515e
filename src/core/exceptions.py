"""
Custom exceptions shared by all layers.

Everything derives from GameError so the outer layers can catch a single type.
"""


class GameError(Exception):
    """Top-level error for anything that goes wrong while handling a game."""


class InvalidRequestError(GameError):
    """Input from outside could not be interpreted (malformed square, unknown color, ...)

    NOTE: NOT a ValueError. Pydantic wraps ValueErrors raised in validators into a ValidationError,
    whereas other exceptions propagate as they are.
    """


class GameStateError(GameError):
    """The requested action does not fit the current state of the game (not started, already finished, ...)"""


class NotYourTurnError(GameError):
    """A player tried to act while it is the opponent's turn."""


class IllegalMoveError(GameError):
    """No piece on the starting square, or the destination is not among the legal destinations."""


class KingNotFoundError(GameError):
    """The board has no king of the requested color. Cannot happen in a legal game."""


class RepositoryError(GameError):
    """Persistence layer could not find or store a record."""


class ConcurrentUpdateError(RepositoryError):
    """The stored record changed since it was fetched. The caller should fetch again and redo the request."""
