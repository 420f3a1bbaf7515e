"""
A square on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass

# Chess board is always 8x8. Rows count down from the 8th rank, columns count from the a-file.
BOARD_DIMENSIONS = (8, 8)
FILES = "abcdefgh"


def algebraic_to_indices(label: str) -> tuple[int, int]:
    """'a8' -> (0, 0), 'h1' -> (7, 7)"""
    col = ord(label[0]) - ord("a")
    row = BOARD_DIMENSIONS[0] - int(label[1])
    return row, col


def indices_to_algebraic(row: int, col: int) -> str:
    """(0, 0) -> 'a8', (7, 7) -> 'h1'"""
    return f"{chr(col + ord('a'))}{BOARD_DIMENSIONS[0] - row}"


@dataclass(frozen=True)
class Square:
    row: int
    col: int

    @classmethod
    def from_algebraic(cls, sq: str) -> Square:
        """Algebraic notation: 'a8' - 'h1' get converted to (0,0) - (7,7)"""
        return cls(*algebraic_to_indices(sq))

    def to_algebraic(self) -> str:
        return indices_to_algebraic(self.row, self.col)

    def is_within_bounds(self) -> bool:
        return (0 <= self.row < BOARD_DIMENSIONS[0]) and (
            0 <= self.col < BOARD_DIMENSIONS[1]
        )

    def offset(self, d_row: int, d_col: int) -> Square:
        """May step off the board: check with is_within_bounds()"""
        return Square(self.row + d_row, self.col + d_col)

    @property
    def shade(self) -> int:
        """Light (0) or dark (1) square. Two bishops on equal shades can never attack each other."""
        return (self.row + self.col) % 2

    @property
    def index(self) -> int:
        """Position in the flat board representation"""
        return self.row * BOARD_DIMENSIONS[1] + self.col

    def __str__(self) -> str:
        return self.to_algebraic()


def is_valid_square_name(label: str) -> bool:
    """Valid square should be a letter for the file + a number for the rank"""
    if len(label) != 2:
        return False
    file_char, rank_char = label[0], label[1]
    if file_char not in FILES[: BOARD_DIMENSIONS[1]]:
        return False
    return rank_char.isdigit() and 1 <= int(rank_char) <= BOARD_DIMENSIONS[0]
