"""Unit tests for /src/chess/moves.py"""

from typing import Callable

import pytest

from src.chess.board import Board
from src.chess.moves import (
    DIAGONALS,
    MOVEMENT_RULES,
    STRAIGHTS,
    CastlingSide,
    Move,
    candidate_bishop_moves,
    candidate_king_moves,
    candidate_knight_moves,
    candidate_pawn_moves,
    candidate_queen_moves,
    candidate_rook_moves,
    raycasting_move,
    single_step_move,
)
from src.chess.pieces import Color, Piece, PieceType
from src.chess.square import Square

BoardFactory = Callable[[dict[str, str]], Board]


def labels(squares: set[Square]) -> set[str]:
    return {square.to_algebraic() for square in squares}


# --- MOVE RECORD ---
def test_move_properties() -> None:
    pawn = Piece(PieceType.PAWN, Color.WHITE)
    move = Move(
        Square.from_algebraic("e7"),
        Square.from_algebraic("d8"),
        pawn,
        captured=Piece(PieceType.ROOK, Color.BLACK),
        promote_to=PieceType.QUEEN,
    )
    assert move.is_capture
    assert move.is_pawn_move
    knight_move = Move(Square.from_algebraic("g1"), Square.from_algebraic("f3"), Piece(PieceType.KNIGHT, Color.WHITE))
    assert not knight_move.is_pawn_move


def test_move_record_roundtrip() -> None:
    """Everything that happened survives storage: capture, special move flags, check flags"""
    move = Move(
        Square.from_algebraic("e1"),
        Square.from_algebraic("g1"),
        Piece(PieceType.KING, Color.WHITE),
        captured=None,
        castling_side=CastlingSide.KINGSIDE,
        is_check=True,
    )
    record = move.to_record()
    assert record["from"] == "e1"
    assert record["castling_side"] == "kingside"
    assert Move.from_record(record) == move


# --- MOVEMENT RULES ---
def test_raycasting_move_empty_board() -> None:
    """On an empty board, movements should be unrestricted. Should only be restricted by board dimensions"""
    destinations = raycasting_move(Square.from_algebraic("a5"), Board.empty(), Color.WHITE, STRAIGHTS)
    assert len(destinations) == 14


def test_raycasting_move_w_blockers(board_with: BoardFactory) -> None:
    """
    Stop at the first piece along a line: include it when it is the enemy's, exclude it when it is your own.
    """
    board = board_with({"d2": "R", "d5": "p", "b2": "N"})
    destinations = raycasting_move(Square.from_algebraic("d2"), board, Color.WHITE, STRAIGHTS)
    assert labels(destinations) == {"d1", "d3", "d4", "d5", "c2", "e2", "f2", "g2", "h2"}


def test_single_step_move_w_blockers(board_with: BoardFactory) -> None:
    board = board_with({"a1": "K", "a2": "P", "b2": "p"})
    destinations = single_step_move(
        Square.from_algebraic("a1"), board, Color.WHITE, STRAIGHTS + DIAGONALS
    )
    assert labels(destinations) == {"b1", "b2"}


def test_rook_in_center_of_empty_board(board_with: BoardFactory) -> None:
    """A rook on d4 reaches 14 squares"""
    board = board_with({"d4": "R"})
    destinations = candidate_rook_moves(Square.from_algebraic("d4"), board, Color.WHITE)
    assert len(destinations) == 14


def test_candidate_bishop_moves(board_with: BoardFactory) -> None:
    board = board_with({"c1": "B", "e3": "P", "a3": "p"})
    destinations = candidate_bishop_moves(Square.from_algebraic("c1"), board, Color.WHITE)
    assert labels(destinations) == {"d2", "b2", "a3"}


def test_candidate_queen_moves(board_with: BoardFactory) -> None:
    """Queen = rook + bishop"""
    board = board_with({"d4": "Q"})
    square = Square.from_algebraic("d4")
    destinations = candidate_queen_moves(square, board, Color.WHITE)
    assert len(destinations) == 27
    assert destinations == candidate_rook_moves(square, board, Color.WHITE) | candidate_bishop_moves(
        square, board, Color.WHITE
    )


@pytest.mark.parametrize(
    "label, expected",
    [
        ("d4", {"b3", "b5", "c2", "c6", "e2", "e6", "f3", "f5"}),
        ("a1", {"b3", "c2"}),
        ("h8", {"g6", "f7"}),
    ],
)
def test_candidate_knight_moves(board_with: BoardFactory, label: str, expected: set[str]) -> None:
    board = board_with({label: "n"})
    destinations = candidate_knight_moves(Square.from_algebraic(label), board, Color.BLACK)
    assert labels(destinations) == expected


def test_knight_jumps_over_pieces() -> None:
    board = Board.starting_position()
    destinations = candidate_knight_moves(Square.from_algebraic("g1"), board, Color.WHITE)
    assert labels(destinations) == {"f3", "h3"}


def test_candidate_king_moves(board_with: BoardFactory) -> None:
    board = board_with({"e1": "K", "d1": "Q", "f2": "p"})
    destinations = candidate_king_moves(Square.from_algebraic("e1"), board, Color.WHITE)
    assert labels(destinations) == {"d2", "e2", "f2", "f1"}


def test_white_pawn_push() -> None:
    """From the starting rank: one or two squares forward"""
    board = Board.starting_position()
    destinations = candidate_pawn_moves(Square.from_algebraic("e2"), board, Color.WHITE)
    assert labels(destinations) == {"e3", "e4"}


def test_black_pawn_push() -> None:
    board = Board.starting_position()
    destinations = candidate_pawn_moves(Square.from_algebraic("c7"), board, Color.BLACK)
    assert labels(destinations) == {"c6", "c5"}


def test_pawn_push_blocked(board_with: BoardFactory) -> None:
    """A blocked pawn cannot jump either: both pushes need empty squares"""
    board = board_with({"e2": "P", "e3": "n", "d7": "p", "d5": "N"})
    assert candidate_pawn_moves(Square.from_algebraic("e2"), board, Color.WHITE) == set()
    assert labels(candidate_pawn_moves(Square.from_algebraic("d7"), board, Color.BLACK)) == {"d6"}


def test_pawn_single_push_off_starting_rank(board_with: BoardFactory) -> None:
    board = board_with({"e3": "P"})
    assert labels(candidate_pawn_moves(Square.from_algebraic("e3"), board, Color.WHITE)) == {"e4"}


def test_white_pawn_takes(board_with: BoardFactory) -> None:
    """Diagonal forward only when an enemy piece stands there"""
    board = board_with({"e4": "P", "d5": "p", "f5": "N", "e5": "p"})
    destinations = candidate_pawn_moves(Square.from_algebraic("e4"), board, Color.WHITE)
    assert labels(destinations) == {"d5"}


def test_black_pawn_takes(board_with: BoardFactory) -> None:
    board = board_with({"b4": "p", "a3": "R", "c3": "B"})
    destinations = candidate_pawn_moves(Square.from_algebraic("b4"), board, Color.BLACK)
    assert labels(destinations) == {"a3", "b3", "c3"}


def test_pawn_attacks_empty_diagonals(board_with: BoardFactory) -> None:
    """In attack only mode the pawn covers both diagonals, occupied or not, but never the square ahead"""
    board = board_with({"a2": "P", "e4": "P"})
    assert labels(candidate_pawn_moves(Square.from_algebraic("e4"), board, Color.WHITE, None, True)) == {
        "d5",
        "f5",
    }
    assert labels(candidate_pawn_moves(Square.from_algebraic("a2"), board, Color.WHITE, None, True)) == {"b3"}


def test_pawn_en_passant_destination(board_with: BoardFactory) -> None:
    """Right after the black pawn's double push next to it, the white pawn may take it in passing"""
    board = board_with({"e5": "P", "d5": "p"})
    last_move = Move(
        Square.from_algebraic("d7"), Square.from_algebraic("d5"), Piece(PieceType.PAWN, Color.BLACK)
    )
    destinations = candidate_pawn_moves(Square.from_algebraic("e5"), board, Color.WHITE, last_move)
    assert labels(destinations) == {"e6", "d6"}


def test_movement_rules_cover_all_piece_types() -> None:
    assert set(MOVEMENT_RULES) == set(PieceType)


def test_twenty_moves_in_starting_position() -> None:
    """16 pawn moves + 4 knight moves"""
    board = Board.starting_position()
    total = sum(
        len(MOVEMENT_RULES[piece.type](square, board, Color.WHITE, None, False))
        for square, piece in board.locate_color(Color.WHITE)
    )
    assert total == 20
