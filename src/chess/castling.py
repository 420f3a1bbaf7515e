"""Helpers for implementing Castling rules."""

from dataclasses import dataclass
from typing import Optional, Self

from src.chess.board import Board
from src.chess.check import is_any_square_attacked, is_in_check
from src.chess.moves import CastlingSide
from src.chess.pieces import Piece, PieceType
from src.chess.square import Square
from src.core.exceptions import IllegalMoveError

ROOK_COLUMN: dict[CastlingSide, int] = {
    CastlingSide.KINGSIDE: 7,
    CastlingSide.QUEENSIDE: 0,
}
# The king always travels two files towards the rook
KING_STEP: dict[CastlingSide, int] = {
    CastlingSide.KINGSIDE: 1,
    CastlingSide.QUEENSIDE: -1,
}


@dataclass(frozen=True)
class CastlingSquares:
    """
    Store the squares where king/rook start from/end up in by castling.
    """

    king_from: Square
    king_to: Square
    rook_from: Square
    rook_to: Square

    @classmethod
    def for_king(cls, king_square: Square, side: CastlingSide) -> Self:
        """King moves two squares towards the rook, the rook lands on the square the king passed over."""
        step = KING_STEP[side]
        king_to = king_square.offset(0, 2 * step)
        rook_from = Square(king_square.row, ROOK_COLUMN[side])
        rook_to = king_to.offset(0, -step)
        return cls(king_square, king_to, rook_from, rook_to)


def squares_between_on_row(from_square: Square, to_square: Square) -> list[Square]:
    """
    Find the squares strictly in between the two squares specified that are on the same row

    Needed for checking if you can still castle (the squares between king and rook must be empty)
    """
    if from_square.row != to_square.row:
        raise ValueError(
            f"squares_between_on_row requires both squares to lie on the same row. \n from: {from_square}\n to:{to_square}"
        )

    step = 1 if to_square.col > from_square.col else -1
    return [
        Square(from_square.row, col)
        for col in range(from_square.col + step, to_square.col, step)
    ]


def can_castle(board: Board, king_square: Square, side: CastlingSide) -> bool:
    """
    **you are allowed to castle if**

    * The king has not moved yet (and is not currently in check: you cannot castle out of a check).
    * The rook of the same color is in the corner of the king's row and has not moved either.
    * All squares in between king and rook are empty.
    * The king does not pass through or land on a square that is under attack.
    """
    king = board.piece(king_square)
    if king is None or king.type != PieceType.KING or king.has_moved:
        return False

    squares = CastlingSquares.for_king(king_square, side)
    if not squares.king_to.is_within_bounds():
        return False

    rook = board.piece(squares.rook_from)
    if rook != Piece(PieceType.ROOK, king.color, has_moved=False):
        return False

    path = squares_between_on_row(king_square, squares.rook_from)
    if any(not board.is_empty(square) for square in path):
        return False

    if is_in_check(board, king.color):
        return False

    passes_through = squares.rook_to
    return not is_any_square_attacked(
        board, [passes_through, squares.king_to], king.color.opponent
    )


def castling_destinations(board: Board, king_square: Square) -> set[Square]:
    """Squares the king on `king_square` may castle to (the destinations get added to its normal moves)."""
    return {
        CastlingSquares.for_king(king_square, side).king_to
        for side in CastlingSide
        if can_castle(board, king_square, side)
    }


def castling_side_of(
    from_square: Square, to_square: Square, piece: Optional[Piece]
) -> Optional[CastlingSide]:
    """A king moving exactly two files along its row is castling"""
    if piece is None or piece.type != PieceType.KING:
        return None
    if from_square.row != to_square.row or abs(from_square.col - to_square.col) != 2:
        return None
    return CastlingSide.KINGSIDE if to_square.col > from_square.col else CastlingSide.QUEENSIDE


def apply_castling(board: Board, king_square: Square, side: CastlingSide) -> Board:
    """Move both the King and the Rook, and mark both as having moved"""
    squares = CastlingSquares.for_king(king_square, side)
    king = board.piece(squares.king_from)
    rook = board.piece(squares.rook_from)
    if king is None or rook is None:
        raise IllegalMoveError(f"Cannot castle {side.value}: king or rook missing from its square.")
    return (
        board.remove_piece(squares.king_from)
        .remove_piece(squares.rook_from)
        .place_piece(king.moved(), squares.king_to)
        .place_piece(rook.moved(), squares.rook_to)
    )