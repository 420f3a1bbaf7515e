"""
Applying a selected move to a board.

The caller has already checked the destination is legal (see rules.legal_destinations). Here we only work out which
kind of move it is, build the resulting board and record what happened.
"""

from dataclasses import replace
from typing import Optional

from src.chess.board import Board
from src.chess.castling import apply_castling, castling_side_of
from src.chess.check import is_in_check
from src.chess.en_passant import apply_en_passant, captured_pawn_square, is_en_passant_move
from src.chess.moves import Move
from src.chess.promotion import PromotionChoice, is_promotion_move, promoted_piece
from src.chess.rules import has_legal_moves
from src.chess.square import Square
from src.core.exceptions import IllegalMoveError


def apply_move(
    board: Board,
    from_square: Square,
    to_square: Square,
    last_move: Optional[Move] = None,
    promotion_choice: PromotionChoice = None,
) -> tuple[Board, Move]:
    """
    Make the move and return the new board plus the record of the move.
    ----

    Classification, first match wins:
    1. castling: the king moves two files --> the rook moves along
    2. en passant: a pawn moves diagonally onto an empty square --> the passed pawn gets removed
    3. an ordinary move (promotion substitutes the pawn if it reaches the final rank)

    Afterwards the record gets flagged with check / checkmate for the opponent.
    """
    piece = board.piece(from_square)
    if piece is None:
        raise IllegalMoveError(
            f"No piece on {from_square.to_algebraic()} to move to {to_square.to_algebraic()}"
        )

    castling_side = castling_side_of(from_square, to_square, piece)
    if castling_side is not None:
        new_board = apply_castling(board, from_square, castling_side)
        move = Move(from_square, to_square, piece, castling_side=castling_side)

    elif is_en_passant_move(board, from_square, to_square):
        captured = board.piece(captured_pawn_square(from_square, to_square))
        new_board = apply_en_passant(board, from_square, to_square)
        move = Move(from_square, to_square, piece, captured=captured, is_en_passant=True)

    else:
        captured = board.piece(to_square)
        if is_promotion_move(to_square, piece):
            arriving = promoted_piece(piece, promotion_choice)
            promote_to = arriving.type
        else:
            arriving = piece.moved()
            promote_to = None
        new_board = board.remove_piece(from_square).place_piece(arriving, to_square)
        move = Move(from_square, to_square, piece, captured=captured, promote_to=promote_to)

    return new_board, _flag_check(new_board, move)


def _flag_check(board: Board, move: Move) -> Move:
    """Did the move put the opponent in check, or even checkmate?"""
    opponent = move.piece.color.opponent
    if not is_in_check(board, opponent):
        return move
    is_checkmate = not has_legal_moves(board, opponent, move)
    return replace(move, is_check=True, is_checkmate=is_checkmate)
