"""
Standard algebraic notation for the move list shown to the players.

One-way display transform: it is never parsed back.
"""

from typing import Optional

from src.chess.board import Board
from src.chess.moves import CastlingSide, Move
from src.chess.pieces import PIECE_TO_FEN, PieceType
from src.chess.rules import legal_moves_by_square

CASTLING_NOTATION: dict[CastlingSide, str] = {
    CastlingSide.KINGSIDE: "O-O",
    CastlingSide.QUEENSIDE: "O-O-O",
}


def piece_letter(piece_type: PieceType) -> str:
    """Pawns have no letter, the other pieces use their (capital) FEN letter"""
    if piece_type == PieceType.PAWN:
        return ""
    return PIECE_TO_FEN[piece_type].upper()


def move_to_algebraic(
    move: Move, board_before: Optional[Board] = None, last_move: Optional[Move] = None
) -> str:
    """
    <piece letter><disambiguation><x if capture><destination><=promotion><+ or #>

    ex) e4, Nf3, exd5, Qxf7#, e8=Q+, O-O-O

    Disambiguation needs the board before the move was made: without it, it is left out.
    """
    if move.castling_side is not None:
        return CASTLING_NOTATION[move.castling_side] + _check_suffix(move)

    notation = piece_letter(move.piece.type)
    if move.piece.type == PieceType.PAWN:
        # A capturing pawn is identified by the file it came from
        if move.is_capture:
            notation += move.from_square.to_algebraic()[0]
    elif board_before is not None:
        notation += _disambiguation(move, board_before, last_move)

    if move.is_capture:
        notation += "x"

    notation += move.to_square.to_algebraic()

    if move.promote_to is not None:
        notation += "=" + piece_letter(move.promote_to)

    return notation + _check_suffix(move)


def _check_suffix(move: Move) -> str:
    if move.is_checkmate:
        return "#"
    if move.is_check:
        return "+"
    return ""


def _disambiguation(move: Move, board: Board, last_move: Optional[Move]) -> str:
    """Other pieces of the same type and color that could also go there? --> add file, rank, or both"""
    same_type = {
        square
        for square, piece in board.locate_color(move.piece.color)
        if piece.type == move.piece.type and square != move.from_square
    }
    rivals = [
        square
        for square, destinations in legal_moves_by_square(board, move.piece.color, last_move).items()
        if square in same_type and move.to_square in destinations
    ]
    if not rivals:
        return ""

    from_label = move.from_square.to_algebraic()
    if all(square.col != move.from_square.col for square in rivals):
        return from_label[0]
    if all(square.row != move.from_square.row for square in rivals):
        return from_label[1]
    return from_label
