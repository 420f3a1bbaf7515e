"""
Attack and check detection.

A square is attacked when any piece of the attacking color has it among its attack-only destinations.
All simulations run on new Board values: the board passed in is never changed.
"""

import logging

from src.chess.board import Board
from src.chess.en_passant import apply_en_passant, is_en_passant_move
from src.chess.moves import MOVEMENT_RULES
from src.chess.pieces import Color
from src.chess.square import Square
from src.core.exceptions import KingNotFoundError

_LOGGER = logging.getLogger(__name__)


def is_square_attacked(board: Board, square: Square, by_color: Color) -> bool:
    """O(pieces x generator cost). Boards are small, so no attack maps are maintained."""
    for origin, piece in board.locate_color(by_color):
        movement_rule = MOVEMENT_RULES[piece.type]
        if square in movement_rule(origin, board, by_color, None, True):
            return True
    return False


def is_any_square_attacked(board: Board, squares: list[Square], by_color: Color) -> bool:
    return any(is_square_attacked(board, square, by_color) for square in squares)


def is_in_check(board: Board, color: Color) -> bool:
    """
    Is the king of `color` attacked by the opponent?

    NOTE: A board without that king cannot come out of a legal game. Rather than crashing the caller, such a board
    is treated as 'in check' so nothing further is allowed on it.
    """
    try:
        king_square = board.locate_king(color)
    except KingNotFoundError:
        _LOGGER.warning("No %s king on board %s, treating as check", color.value, board.to_fen())
        return True
    return is_square_attacked(board, king_square, color.opponent)


def would_result_in_check(
    board: Board, from_square: Square, to_square: Square, color: Color
) -> bool:
    """Return True if making the move leaves (or puts) your own king in check

    plan:
    1. make the candidate move on a new board (en passant also removes the taken pawn, which can uncover the king)
    2. determine if king is in check on the new board
    """
    if is_en_passant_move(board, from_square, to_square):
        scratch = apply_en_passant(board, from_square, to_square)
    else:
        scratch = board.move_piece(from_square, to_square)
    return is_in_check(scratch, color)
