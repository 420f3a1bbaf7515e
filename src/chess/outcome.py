"""
Has the game ended after the last move, and if so: who won and why?
"""

from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

from src.chess.board import Board
from src.chess.check import is_in_check
from src.chess.moves import Move
from src.chess.pieces import Color, PieceType
from src.chess.position import PositionSnapshot
from src.chess.rules import has_legal_moves

# 50 moves by each player = 100 half-moves
FIFTY_MOVE_RULE_HALF_MOVES = 100
REPETITIONS_FOR_DRAW = 3
MINOR_PIECES = frozenset({PieceType.BISHOP, PieceType.KNIGHT})


class Winner(Enum):
    WHITE = "white"
    BLACK = "black"
    DRAW = "draw"

    @classmethod
    def from_color(cls, color: Color) -> "Winner":
        return cls(color.value)


class OutcomeReason(Enum):
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"
    INSUFFICIENT_MATERIAL = "insufficient material"
    FIFTY_MOVE_RULE = "fifty-move rule"
    THREEFOLD_REPETITION = "threefold repetition"
    # These two never come out of board analysis: the players decide them (see Game)
    RESIGNATION = "resignation"
    AGREEMENT = "agreement"


@dataclass(frozen=True)
class Outcome:
    winner: Winner
    reason: OutcomeReason


def has_insufficient_material(board: Board) -> bool:
    """
    Neither side can ever deliver mate:
    * King vs King
    * King + Bishop or King + Knight vs King
    * King + Bishop vs King + Bishop, with both bishops on squares of the same color
    """
    non_kings = {
        color: [
            (square, piece)
            for square, piece in board.locate_color(color)
            if piece.type != PieceType.KING
        ]
        for color in Color
    }
    white, black = non_kings[Color.WHITE], non_kings[Color.BLACK]

    if not white and not black:
        return True

    lone_minor = [
        pieces for pieces in (white, black) if len(pieces) == 1 and pieces[0][1].type in MINOR_PIECES
    ]
    if len(lone_minor) == 1 and not (white and black):
        return True

    if len(white) == 1 and len(black) == 1:
        (white_square, white_piece), (black_square, black_piece) = white[0], black[0]
        both_bishops = white_piece.type == black_piece.type == PieceType.BISHOP
        return both_bishops and white_square.shade == black_square.shade

    return False


def count_moves_without_progress(move_history: Sequence[Move]) -> int:
    """Counting back from the last move: half-moves without a pawn move or a capture"""
    count = 0
    for move in reversed(move_history):
        if move.is_pawn_move or move.is_capture:
            break
        count += 1
    return count


def is_fifty_move_rule(move_history: Sequence[Move]) -> bool:
    return count_moves_without_progress(move_history) >= FIFTY_MOVE_RULE_HALF_MOVES


def is_threefold_repetition(position_history: Sequence[PositionSnapshot]) -> bool:
    """Some position occurred (at least) 3 times"""
    counts = Counter(snapshot.key() for snapshot in position_history)
    return any(count >= REPETITIONS_FOR_DRAW for count in counts.values())


def evaluate_outcome(
    board: Board,
    color_to_move: Color,
    last_move: Optional[Move] = None,
    move_history: Sequence[Move] = (),
    position_history: Sequence[PositionSnapshot] = (),
) -> Optional[Outcome]:
    """
    Decide if the game is over. The first rule that applies wins:
    1. no legal moves: checkmate (if in check) or stalemate
    2. insufficient material
    3. fifty-move rule
    4. threefold repetition

    Returns None while the game continues.
    """
    if not has_legal_moves(board, color_to_move, last_move):
        if is_in_check(board, color_to_move):
            return Outcome(Winner.from_color(color_to_move.opponent), OutcomeReason.CHECKMATE)
        return Outcome(Winner.DRAW, OutcomeReason.STALEMATE)

    if has_insufficient_material(board):
        return Outcome(Winner.DRAW, OutcomeReason.INSUFFICIENT_MATERIAL)

    if is_fifty_move_rule(move_history):
        return Outcome(Winner.DRAW, OutcomeReason.FIFTY_MOVE_RULE)

    if is_threefold_repetition(position_history):
        return Outcome(Winner.DRAW, OutcomeReason.THREEFOLD_REPETITION)

    return None
