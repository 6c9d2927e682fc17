"""Unit tests for src/checkers/board.py"""

import pytest

from src.checkers.board import Board, Color, Move, Piece, Position, board_to_grid
from src.checkers.fen import STARTING_FEN, FENState
from src.checkers.moves import moves_for_piece


@pytest.fixture
def initial_board() -> Board:
    return Board.initial()


# -- CREATION LOGIC --
def test_initial_setup(initial_board: Board) -> None:
    """12 men per color: black on the dark squares of rows 0-2, white on rows 5-7, rows 3-4 empty."""
    assert initial_board.count_pieces() == {Color.WHITE: 12, Color.BLACK: 12}

    for piece in initial_board.pieces():
        assert not piece.is_king
        assert piece.position.is_dark()
        if piece.color == Color.BLACK:
            assert piece.position.row in range(0, 3)
        else:
            assert piece.position.row in range(5, 8)

    empty_rows = [
        initial_board.piece_at(row, col) for row in (3, 4) for col in range(8)
    ]
    assert all(square is None for square in empty_rows)


def test_initial_piece_ids(initial_board: Board) -> None:
    """Ids follow creation order, row by row: b-0 ... b-11 followed by w-12 ... w-23."""
    ids = [piece.id for piece in initial_board.pieces()]
    assert ids == [f"b-{i}" for i in range(12)] + [f"w-{i}" for i in range(12, 24)]

    first_black = initial_board.piece_at(0, 1)
    first_white = initial_board.piece_at(5, 0)
    assert first_black is not None and first_black.id == "b-0"
    assert first_white is not None and first_white.id == "w-12"


def test_initial_board_as_fen(initial_board: Board) -> None:
    assert initial_board.to_fen(Color.WHITE) == STARTING_FEN


def test_from_state() -> None:
    board = Board.from_state(FENState.from_fen("B:W18,K32:BK1,14"))
    assert board.count_pieces() == {Color.WHITE: 2, Color.BLACK: 2}

    king = board.piece_at(7, 6)
    assert king is not None and king.color == Color.WHITE and king.is_king

    man = board.piece_at(4, 3)
    assert man is not None and man.color == Color.WHITE and not man.is_king

    black_king = board.piece_at(0, 1)
    assert black_king is not None and black_king.color == Color.BLACK and black_king.is_king

    assert board.to_fen(Color.BLACK) == "B:W18,K32:BK1,14"


MoveKey = tuple[Position, Position, bool, Position | None]


def move_sets(board: Board) -> dict[Position, set[MoveKey]]:
    """Moves of every piece, without the captured piece id (ids are renumbered by a FEN round trip)."""
    return {
        piece.position: {
            (move.from_position, move.to_position, move.is_capture, move.captured_position)
            for move in moves_for_piece(piece, board)
        }
        for piece in board.pieces()
    }


def test_round_trips_keep_the_legal_moves() -> None:
    """Mid-game position with kings on both sides and captures pending for both colors."""
    board = Board.empty()
    for piece in [
        Piece("w-0", Color.WHITE, Position(7, 0), is_king=True),
        Piece("w-1", Color.WHITE, Position(5, 2)),
        Piece("w-2", Color.WHITE, Position(5, 6)),
        Piece("w-3", Color.WHITE, Position(2, 5)),
        Piece("b-0", Color.BLACK, Position(0, 7), is_king=True),
        Piece("b-1", Color.BLACK, Position(4, 3)),
        Piece("b-2", Color.BLACK, Position(3, 4)),
        Piece("b-3", Color.BLACK, Position(1, 2)),
    ]:
        board.place_piece(piece)
    expected = move_sets(board)
    assert any(
        is_capture for moves in expected.values() for (_, _, is_capture, _) in moves
    )

    via_fen = Board.from_state(FENState.from_fen(board.to_fen(Color.WHITE)))
    via_records = Board.from_records(board.to_records())

    assert move_sets(via_fen) == expected
    assert move_sets(via_records) == expected


def test_records_keep_piece_identity(initial_board: Board) -> None:
    records = initial_board.to_records()
    assert records[0] == {"id": "b-0", "color": "black", "row": 0, "col": 1, "is_king": False}

    rebuilt = Board.from_records(records)
    assert rebuilt == initial_board


# -- QUERIES --
def test_piece_at(initial_board: Board) -> None:
    piece = initial_board.piece_at(2, 1)
    assert piece is not None
    assert piece.color == Color.BLACK
    assert initial_board.piece_at(3, 0) is None


def test_locate_color_is_row_major() -> None:
    board = Board.empty()
    board.place_piece(Piece("w-1", Color.WHITE, Position(6, 1)))
    board.place_piece(Piece("w-0", Color.WHITE, Position(3, 2)))
    board.place_piece(Piece("b-0", Color.BLACK, Position(4, 1)))
    assert board.locate_color(Color.WHITE) == [Position(3, 2), Position(6, 1)]
    assert [piece.id for piece in board.pieces_of(Color.WHITE)] == ["w-0", "w-1"]


# -- UPDATES --
def test_place_piece_on_light_square_raises() -> None:
    board = Board.empty()
    with pytest.raises(ValueError):
        board.place_piece(Piece("w-0", Color.WHITE, Position(4, 0)))


def test_place_piece_on_occupied_square_raises(initial_board: Board) -> None:
    with pytest.raises(ValueError):
        initial_board.place_piece(Piece("w-99", Color.WHITE, Position(5, 0)))


def test_remove_from_empty_square_raises(initial_board: Board) -> None:
    with pytest.raises(ValueError):
        initial_board.remove_piece(Position(3, 0))


def test_move_piece_relocates_the_same_piece(initial_board: Board) -> None:
    piece = initial_board.piece_at(5, 0)
    moved = initial_board.move_piece(Move(Position(5, 0), Position(4, 1)))
    assert moved is piece
    assert initial_board.piece_at(5, 0) is None
    assert initial_board.piece_at(4, 1) is piece
    assert piece.position == Position(4, 1)


def test_move_piece_removes_the_captured_piece() -> None:
    board = Board.empty()
    board.place_piece(Piece("w-0", Color.WHITE, Position(5, 2)))
    board.place_piece(Piece("b-0", Color.BLACK, Position(4, 3)))
    capture = Move(
        Position(5, 2),
        Position(3, 4),
        is_capture=True,
        captured_piece_id="b-0",
        captured_position=Position(4, 3),
    )
    board.move_piece(capture)
    assert board.count_pieces() == {Color.WHITE: 1, Color.BLACK: 0}
    assert board.piece_at(3, 4) is not None


# -- GRID ADAPTER --
def test_board_to_grid() -> None:
    board = Board.empty()
    board.place_piece(Piece("w-0", Color.WHITE, Position(5, 2)))
    board.place_piece(Piece("b-0", Color.BLACK, Position(2, 1), is_king=True))
    grid = board_to_grid(board)

    assert len(grid) == 8 and all(len(row) == 8 for row in grid)
    assert grid[5][2] == "w"
    assert grid[2][1] == "B"
    assert sum(cell is not None for row in grid for cell in row) == 2
