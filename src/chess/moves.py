"""
Geometry/Base movement and capturing/attacking rules

Key idea: Use strategy pattern to define the pseudo-legal destination sets for each piece type.

Every generator can run in 'attack only' mode: then it reports the squares the piece attacks instead of the squares
it may move to. (Only differs for pawns, which do not attack forward but do attack empty diagonals.)

Legality (not leaving your own king in check) is checked later, see rules.py
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Self

from src.chess.board import Board
from src.chess.en_passant import en_passant_capture_square, pawn_direction
from src.chess.pieces import Color, Piece, PieceRecord, PieceType
from src.chess.square import Square

Vector = tuple[int, int]
MoveRecord = dict[str, Any]

STRAIGHTS: list[Vector] = [(1, 0), (-1, 0), (0, 1), (0, -1)]
DIAGONALS: list[Vector] = [(1, 1), (-1, 1), (1, -1), (-1, -1)]
KNIGHT_DELTAS: list[Vector] = [
    (2, 1),
    (2, -1),
    (-2, 1),
    (-2, -1),
    (1, 2),
    (1, -2),
    (-1, 2),
    (-1, -2),
]
KING_DELTAS: list[Vector] = STRAIGHTS + DIAGONALS

# Row a pawn of that color starts on (may push by two from here)
PAWN_START_ROW: dict[Color, int] = {Color.WHITE: 6, Color.BLACK: 1}


class CastlingSide(Enum):
    KINGSIDE = "kingside"
    QUEENSIDE = "queenside"


@dataclass(frozen=True)
class Move:
    """
    Record of a move that has been applied (created by the applicator, not by callers).
    ----

    Callers only select (from, to, promotion choice). Everything else is filled in when the move gets made.
    """

    from_square: Square
    to_square: Square
    piece: Piece
    captured: Optional[Piece] = None
    castling_side: Optional[CastlingSide] = None
    is_en_passant: bool = False
    promote_to: Optional[PieceType] = None
    is_check: bool = False
    is_checkmate: bool = False

    @property
    def is_capture(self) -> bool:
        return self.captured is not None

    @property
    def is_pawn_move(self) -> bool:
        return self.piece.type == PieceType.PAWN

    def to_record(self) -> MoveRecord:
        return {
            "from": self.from_square.to_algebraic(),
            "to": self.to_square.to_algebraic(),
            "piece": self.piece.to_record(),
            "captured": self.captured.to_record() if self.captured else None,
            "castling_side": self.castling_side.value if self.castling_side else None,
            "is_en_passant": self.is_en_passant,
            "promote_to": self.promote_to.value if self.promote_to else None,
            "is_check": self.is_check,
            "is_checkmate": self.is_checkmate,
        }

    @classmethod
    def from_record(cls, record: MoveRecord) -> Self:
        captured: Optional[PieceRecord] = record.get("captured")
        castling_side = record.get("castling_side")
        promote_to = record.get("promote_to")
        return cls(
            from_square=Square.from_algebraic(record["from"]),
            to_square=Square.from_algebraic(record["to"]),
            piece=Piece.from_record(record["piece"]),
            captured=Piece.from_record(captured) if captured else None,
            castling_side=CastlingSide(castling_side) if castling_side else None,
            is_en_passant=bool(record.get("is_en_passant", False)),
            promote_to=PieceType(promote_to) if promote_to else None,
            is_check=bool(record.get("is_check", False)),
            is_checkmate=bool(record.get("is_checkmate", False)),
        )


# --- MOVEMENT RULES ---
def raycasting_move(
    square: Square, board: Board, color: Color, directions: list[Vector]
) -> set[Square]:
    """
    Raycasting algorithm
    -----

    ---
    The main trick we use to check the 'line of sight of a piece'.
    We define move directions and move along them until we hit another piece or
    the edge of the board.

    NOTE: The attacked squares of a sliding piece are exactly its destinations, so no attack-only variant is needed.
    """
    destinations: set[Square] = set()
    for d_row, d_col in directions:
        target_square = square.offset(d_row, d_col)
        while target_square.is_within_bounds():
            occupant = board.piece(target_square)
            if occupant is not None:
                # only need to add the first occupied square found if it is the opponent's: then it can be captured.
                if occupant.color != color:
                    destinations.add(target_square)
                break

            destinations.add(target_square)
            target_square = target_square.offset(d_row, d_col)
    return destinations


def single_step_move(
    square: Square, board: Board, color: Color, deltas: list[Vector]
) -> set[Square]:
    """Raycasting is for sliding pieces. This is the equivalent for kings and knights that just can move a single step along a direction"""
    destinations: set[Square] = set()
    for d_row, d_col in deltas:
        target_square = square.offset(d_row, d_col)
        if not target_square.is_within_bounds():
            continue

        occupant = board.piece(target_square)
        if occupant is None or occupant.color != color:
            destinations.add(target_square)

    return destinations


def candidate_pawn_moves(
    square: Square,
    board: Board,
    color: Color,
    last_move: Optional[Move] = None,
    attack_only: bool = False,
) -> set[Square]:
    """
    A pawn:
    - moves by a single square forward, onto an empty square.
    - It can move by two in their first move (so when on their starting rank), if both squares are empty
    - takes diagonally (an enemy piece, or en passant)

    In attack only mode both diagonals count, occupied or not: a king may not step next to a pawn that would take it.
    """
    direction = pawn_direction(color)
    diagonals = [
        target
        for target in (square.offset(direction, -1), square.offset(direction, 1))
        if target.is_within_bounds()
    ]
    if attack_only:
        return set(diagonals)

    destinations: set[Square] = set()
    for target_square in diagonals:
        occupant = board.piece(target_square)
        if occupant is not None and occupant.color != color:
            destinations.add(target_square)

    en_passant_square = en_passant_capture_square(board, square, color, last_move)
    if en_passant_square is not None:
        destinations.add(en_passant_square)

    # Pawn pushes : Black moves down the board, White moves up the board
    one_step = square.offset(direction, 0)
    if one_step.is_within_bounds() and board.is_empty(one_step):
        destinations.add(one_step)
        two_steps = square.offset(2 * direction, 0)
        if square.row == PAWN_START_ROW[color] and board.is_empty(two_steps):
            destinations.add(two_steps)

    return destinations


def candidate_knight_moves(
    square: Square,
    board: Board,
    color: Color,
    last_move: Optional[Move] = None,
    attack_only: bool = False,
) -> set[Square]:
    """Knights always move such that |delta_rank| + |delta_file| = 3"""
    return single_step_move(square, board, color, KNIGHT_DELTAS)


def candidate_bishop_moves(
    square: Square,
    board: Board,
    color: Color,
    last_move: Optional[Move] = None,
    attack_only: bool = False,
) -> set[Square]:
    """Bishops move diagonally: |delta_rank| = |delta_file|"""
    return raycasting_move(square, board, color, DIAGONALS)


def candidate_rook_moves(
    square: Square,
    board: Board,
    color: Color,
    last_move: Optional[Move] = None,
    attack_only: bool = False,
) -> set[Square]:
    """Rooks move either horizontally or vertically"""
    return raycasting_move(square, board, color, STRAIGHTS)


def candidate_queen_moves(
    square: Square,
    board: Board,
    color: Color,
    last_move: Optional[Move] = None,
    attack_only: bool = False,
) -> set[Square]:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    diagonal_moves = candidate_bishop_moves(square, board, color)
    horizontal_and_vertical_moves = candidate_rook_moves(square, board, color)
    return diagonal_moves | horizontal_and_vertical_moves


def candidate_king_moves(
    square: Square,
    board: Board,
    color: Color,
    last_move: Optional[Move] = None,
    attack_only: bool = False,
) -> set[Square]:
    """
    The king can move by a single square at the time.

    Castling is modelled as a special king move: castling.py decides when it is allowed, rules.py adds it.
    """
    return single_step_move(square, board, color, KING_DELTAS)


# -- STRATEGY PATTERN: MOVEMENT RULES ---
CandidateMovesFn = Callable[
    [Square, Board, Color, Optional[Move], bool], set[Square]
]
MOVEMENT_RULES: dict[PieceType, CandidateMovesFn] = {
    PieceType.PAWN: candidate_pawn_moves,
    PieceType.KNIGHT: candidate_knight_moves,
    PieceType.BISHOP: candidate_bishop_moves,
    PieceType.ROOK: candidate_rook_moves,
    PieceType.QUEEN: candidate_queen_moves,
    PieceType.KING: candidate_king_moves,
}
