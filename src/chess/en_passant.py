"""Helpers for implementing the en passant rule."""

from typing import Optional, Protocol

from src.chess.board import Board
from src.chess.pieces import Color, Piece, PieceType
from src.chess.square import Square

# Row a pawn must stand on to capture en passant (its own 5th rank)
EN_PASSANT_ROW: dict[Color, int] = {Color.WHITE: 3, Color.BLACK: 4}


class LastMove(Protocol):
    """Just the parts of a Move the en passant rule needs"""

    @property
    def from_square(self) -> Square: ...
    @property
    def to_square(self) -> Square: ...
    @property
    def piece(self) -> Piece: ...


def pawn_direction(color: Color) -> int:
    """White moves UP the board (towards row 0), black moves DOWN"""
    return -1 if color == Color.WHITE else 1


def is_double_pawn_push(move: LastMove) -> bool:
    return (
        move.piece.type == PieceType.PAWN
        and abs(move.from_square.row - move.to_square.row) == 2
    )


def en_passant_capture_square(
    board: Board, square: Square, color: Color, last_move: Optional[LastMove]
) -> Optional[Square]:
    """
    Where the pawn on `square` can take en passant, if anywhere.

    * the pawn stands on its own 5th rank
    * the previous move pushed an enemy pawn by two squares
    * ... and that pawn landed right next to ours (adjacent file, same rank)

    The capture lands on the square directly 'ahead' of our pawn, in the file of the enemy pawn.
    """
    if last_move is None or square.row != EN_PASSANT_ROW[color]:
        return None

    if last_move.piece.color == color or not is_double_pawn_push(last_move):
        return None

    passed_pawn = board.piece(last_move.to_square)
    if passed_pawn != Piece(PieceType.PAWN, color.opponent):
        return None

    landed = last_move.to_square
    if landed.row != square.row or abs(landed.col - square.col) != 1:
        return None

    return Square(square.row + pawn_direction(color), landed.col)


def is_en_passant_move(board: Board, from_square: Square, to_square: Square) -> bool:
    """A pawn moving diagonally onto an empty square can only be taking en passant."""
    piece = board.piece(from_square)
    if piece is None or piece.type != PieceType.PAWN:
        return False
    moves_diagonally = from_square.col != to_square.col
    return moves_diagonally and board.is_empty(to_square)


def captured_pawn_square(from_square: Square, to_square: Square) -> Square:
    """The pawn taken en passant stands on the rank the capturing pawn came from, in the file it moves to."""
    return Square(from_square.row, to_square.col)


def apply_en_passant(board: Board, from_square: Square, to_square: Square) -> Board:
    """
    1. Move the pawn diagonally
    2. Remove the opponent's pawn that gets taken (NOT standing on the target square)
    """
    moved = board.move_piece(from_square, to_square)
    return moved.remove_piece(captured_pawn_square(from_square, to_square))


def en_passant_target(move: Optional[LastMove]) -> Optional[Square]:
    """The square a double-pushed pawn skipped over: part of what makes two positions equal."""
    if move is None or not is_double_pawn_push(move):
        return None
    return Square(
        (move.from_square.row + move.to_square.row) // 2, move.from_square.col
    )
