"""Unit tests for /src/chess/position.py"""

from src.chess.board import Board
from src.chess.pieces import Color, Piece, PieceType
from src.chess.position import PositionSnapshot
from src.chess.square import Square


def test_equal_positions_share_key() -> None:
    first = PositionSnapshot(Board.starting_position(), None, Color.WHITE)
    second = PositionSnapshot(Board.from_fen("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"), None, Color.WHITE)
    assert first.key() == second.key()


def test_color_to_move_is_part_of_key() -> None:
    board = Board.starting_position()
    assert PositionSnapshot(board, None, Color.WHITE).key() != PositionSnapshot(board, None, Color.BLACK).key()


def test_en_passant_target_is_part_of_key() -> None:
    board = Board.starting_position()
    with_target = PositionSnapshot(board, Square.from_algebraic("e3"), Color.BLACK)
    without_target = PositionSnapshot(board, None, Color.BLACK)
    assert with_target.key() != without_target.key()


def test_castling_rights_are_part_of_key() -> None:
    """Same occupancy, but a king that has moved (and came back) cannot castle anymore"""
    board = Board.starting_position()
    moved_king = board.place_piece(Piece(PieceType.KING, Color.WHITE, has_moved=True), Square.from_algebraic("e1"))
    assert PositionSnapshot(board, None, Color.WHITE).key() != PositionSnapshot(moved_king, None, Color.WHITE).key()


def test_record_conversion() -> None:
    snapshot = PositionSnapshot(Board.starting_position(), Square.from_algebraic("d6"), Color.WHITE)
    record = snapshot.to_record()
    assert record["en_passant_target"] == "d6"
    assert record["color_to_move"] == "white"
    assert PositionSnapshot.from_record(record) == snapshot


def test_record_without_target() -> None:
    snapshot = PositionSnapshot(Board.empty(), None, Color.BLACK)
    assert PositionSnapshot.from_record(snapshot.to_record()) == snapshot
