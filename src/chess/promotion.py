"""Pawn promotion rules."""

import logging
from typing import Optional, Union

from src.chess.pieces import FEN_TO_PIECE, Color, Piece, PieceType
from src.chess.square import Square

_LOGGER = logging.getLogger(__name__)

PROMOTION_OPTIONS: list[PieceType] = [
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
]
DEFAULT_PROMOTION = PieceType.QUEEN
# Farthest row for each color: white moves up the board, black moves down
PROMOTION_ROW: dict[Color, int] = {Color.WHITE: 0, Color.BLACK: 7}

PromotionChoice = Union[PieceType, str, None]


def is_promotion_move(to_square: Square, piece: Optional[Piece]) -> bool:
    """check if the move is a pawn move that reaches the farthest rank for its color"""
    if piece is None or piece.type != PieceType.PAWN:
        return False
    return to_square.row == PROMOTION_ROW[piece.color]


def normalize_promotion_choice(choice: PromotionChoice) -> PieceType:
    """
    Interpret whatever the caller picked: a PieceType, a name ('knight') or a FEN letter ('n').

    Nothing picked means queen. An invalid choice also becomes a queen instead of failing the move.
    """
    if choice is None:
        return DEFAULT_PROMOTION

    if isinstance(choice, PieceType):
        piece_type: Optional[PieceType] = choice
    else:
        text = choice.strip().lower()
        piece_type = FEN_TO_PIECE.get(text) or next(
            (option for option in PieceType if option.value == text), None
        )

    if piece_type not in PROMOTION_OPTIONS:
        _LOGGER.warning(
            "Invalid promotion choice %r, promoting to %s", choice, DEFAULT_PROMOTION.value
        )
        return DEFAULT_PROMOTION
    return piece_type


def promoted_piece(pawn: Piece, choice: PromotionChoice) -> Piece:
    """The piece replacing the pawn. A promoted rook counts as moved (it can never castle)."""
    return pawn.promote_to(normalize_promotion_choice(choice)).moved()
