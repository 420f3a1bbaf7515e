"""The Game board: an immutable value holding the piece (or nothing) on every one of the 64 squares"""

from dataclasses import dataclass
from typing import Any, Optional, Self

from src.chess.pieces import Color, Piece, PieceRecord, PieceType
from src.chess.square import BOARD_DIMENSIONS, Square
from src.core.exceptions import KingNotFoundError

NUM_SQUARES = BOARD_DIMENSIONS[0] * BOARD_DIMENSIONS[1]
STARTING_POSITION_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"
BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)
# Squares on which an unmoved king / rook can stand. Used to infer has_moved flags from a FEN string
HOME_ROW: dict[Color, int] = {Color.WHITE: 7, Color.BLACK: 0}
HOME_COLS: dict[PieceType, tuple[int, ...]] = {
    PieceType.KING: (4,),
    PieceType.ROOK: (0, 7),
}

BoardRecord = dict[str, Optional[PieceRecord]]


def all_squares() -> list[Square]:
    return [
        Square(row, col)
        for row in range(BOARD_DIMENSIONS[0])
        for col in range(BOARD_DIMENSIONS[1])
    ]


@dataclass(frozen=True)
class Board:
    """
    Flat representation: entry row * 8 + col holds the occupant of that square.

    NOTE: Every "mutation" returns a new Board. Check detection simulates hypothetical moves all the time,
    so the real game state must never be touched by it.
    """

    squares: tuple[Optional[Piece], ...]

    def __post_init__(self) -> None:
        if len(self.squares) != NUM_SQUARES:
            raise ValueError(
                f"A board needs exactly {NUM_SQUARES} entries, got {len(self.squares)}"
            )

    # --- CREATION ---
    @classmethod
    def empty(cls) -> Self:
        return cls((None,) * NUM_SQUARES)

    @classmethod
    def starting_position(cls) -> Self:
        """Pawns on the 2nd / 7th rank, back rank pieces behind them. Nobody has moved yet."""
        squares: list[Optional[Piece]] = [None] * NUM_SQUARES
        for color, back_row in HOME_ROW.items():
            pawn_row = back_row - 1 if color == Color.WHITE else back_row + 1
            for col, piece_type in enumerate(BACK_RANK):
                squares[Square(back_row, col).index] = Piece(piece_type, color)
                squares[Square(pawn_row, col).index] = Piece(PieceType.PAWN, color)
        return cls(tuple(squares))

    @classmethod
    def from_fen(cls, fen_str: str) -> Self:
        """Construct a board using the piece placement part of a FEN string.

        ex. standard starting position:
        rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
        means:
        * black pieces are on the 8th rank (row 0), read from the a-file to the h-file
        * pawns cover 7th rank entirely
        * ranks 6 through 3 have 8 consecutive empty squares
        * rank 2 are the white pawns (capital letters)
        * 1st rank (row 7) are the white pieces.

        FEN carries no has_moved flags: a king or rook counts as unmoved only when standing on its original square.
        """
        squares: list[Optional[Piece]] = [None] * NUM_SQUARES
        for row, fen_one_rank in enumerate(fen_str.split("/")):
            col = 0
            for character in fen_one_rank:
                if character.isalpha():
                    piece = Piece.from_fen(character)
                    if not _on_home_square(piece, Square(row, col)):
                        piece = piece.moved()
                    squares[Square(row, col).index] = piece
                    col += 1
                else:
                    # A number denotes the amount of empty squares after each other
                    col += int(character)
        return cls(tuple(squares))

    def to_fen(self) -> str:
        """Ranks are separated by slashes in FEN string."""
        return "/".join(self._rank_to_fen(row) for row in range(BOARD_DIMENSIONS[0]))

    def _rank_to_fen(self, row: int) -> str:
        """FEN string of a single rank"""
        fen_characters: list[str] = []
        empty_count = 0
        for col in range(BOARD_DIMENSIONS[1]):
            piece = self.piece(Square(row, col))
            if piece is None:
                empty_count += 1
                continue
            if empty_count > 0:
                fen_characters.append(str(empty_count))
                empty_count = 0
            fen_characters.append(piece.to_fen())

        # if the entire rank is empty, then we still place this number in the string
        if empty_count > 0:
            fen_characters.append(str(empty_count))
        return "".join(fen_characters)

    # --- PERSISTENCE RECORDS ---
    def to_records(self) -> BoardRecord:
        """64 entries: algebraic label -> piece record (or None for an empty square)"""
        return {
            square.to_algebraic(): (piece.to_record() if piece else None)
            for square, piece in zip(all_squares(), self.squares)
        }

    @classmethod
    def from_records(cls, records: dict[str, Any]) -> Self:
        squares: list[Optional[Piece]] = [None] * NUM_SQUARES
        for label, record in records.items():
            if record is not None:
                squares[Square.from_algebraic(label).index] = Piece.from_record(record)
        return cls(tuple(squares))

    # --- QUERIES ---
    def piece(self, square: Square) -> Optional[Piece]:
        return self.squares[square.index]

    def is_empty(self, square: Square) -> bool:
        return self.squares[square.index] is None

    def pieces(self) -> list[tuple[Square, Piece]]:
        return [
            (square, piece)
            for square, piece in zip(all_squares(), self.squares)
            if piece is not None
        ]

    def locate_color(self, color: Color) -> list[tuple[Square, Piece]]:
        return [(square, piece) for square, piece in self.pieces() if piece.color == color]

    def locate_king(self, color: Color) -> Square:
        for square, piece in self.locate_color(color):
            if piece.type == PieceType.KING:
                return square
        raise KingNotFoundError(f"No {color.value} king on the board: {self.to_fen()}")

    # --- NEW BOARDS ---
    def place_piece(self, piece: Optional[Piece], square: Square) -> Self:
        """New board with the occupant of a single square replaced."""
        squares = list(self.squares)
        squares[square.index] = piece
        return type(self)(tuple(squares))

    def remove_piece(self, square: Square) -> Self:
        return self.place_piece(None, square)

    def move_piece(self, from_square: Square, to_square: Square) -> Self:
        """Plain relocation (captures whatever stands on the target square). Special moves are handled elsewhere."""
        piece_that_moved = self.piece(from_square)
        return self.remove_piece(from_square).place_piece(piece_that_moved, to_square)


def _on_home_square(piece: Piece, square: Square) -> bool:
    if piece.type not in HOME_COLS:
        return True
    return square.row == HOME_ROW[piece.color] and square.col in HOME_COLS[piece.type]
