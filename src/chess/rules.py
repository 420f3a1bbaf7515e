"""
Legal moves: pseudo-legal destinations, filtered so that you never leave your own king in check.
"""

from typing import Optional

from src.chess.board import Board
from src.chess.castling import castling_destinations
from src.chess.check import would_result_in_check
from src.chess.moves import MOVEMENT_RULES, Move
from src.chess.pieces import Color, Piece, PieceType
from src.chess.square import Square


def candidate_destinations(
    board: Board, square: Square, piece: Piece, last_move: Optional[Move] = None
) -> set[Square]:
    """
    Before knowing the set of legal moves, we use the movement rules to find candidate moves,
    which will later be tested for legality.

    The king additionally gets its castling destinations.
    """
    movement_rule = MOVEMENT_RULES[piece.type]
    destinations = movement_rule(square, board, piece.color, last_move, False)
    if piece.type == PieceType.KING:
        destinations |= castling_destinations(board, square)
    return destinations


def legal_destinations(
    board: Board,
    square: Square,
    piece: Optional[Piece] = None,
    last_move: Optional[Move] = None,
) -> set[Square]:
    """
    Squares the piece on `square` may legally move to
    ----

    1. generate candidate moves, using the basic movement rules for the piece (incl. castling, en passant)
    2. remove illegal options --> a move that would put you in check or you are in check and the move does not get you out of it.
    """
    piece = piece or board.piece(square)
    if piece is None:
        return set()

    return {
        destination
        for destination in candidate_destinations(board, square, piece, last_move)
        if not would_result_in_check(board, square, destination, piece.color)
    }


def legal_moves_by_square(
    board: Board, color: Color, last_move: Optional[Move] = None
) -> dict[Square, set[Square]]:
    """All legal moves of one player, grouped by the square the piece stands on."""
    moves: dict[Square, set[Square]] = {}
    for square, piece in board.locate_color(color):
        destinations = legal_destinations(board, square, piece, last_move)
        if destinations:
            moves[square] = destinations
    return moves


def has_legal_moves(board: Board, color: Color, last_move: Optional[Move] = None) -> bool:
    """Stops at the first move found that does not leave the king in check."""
    for square, piece in board.locate_color(color):
        for destination in candidate_destinations(board, square, piece, last_move):
            if not would_result_in_check(board, square, destination, color):
                return True
    return False
