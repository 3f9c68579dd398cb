import pytest

from bitboard import BitBoard, OccupancyError


def test_empty_board_reports_first_cell_open():
    board = BitBoard(3, 2)
    assert board.size == 6
    assert board.lowest_open_cell() == 0
    assert not board.is_complete()
    assert board.occupied_count() == 0


def test_lowest_open_cell_skips_filled_prefix():
    board = BitBoard(4, 4)
    board.occupy([0, 1, 2, 4])
    assert board.lowest_open_cell() == 3
    board.occupy([3])
    assert board.lowest_open_cell() == 5


def test_lowest_open_cell_with_holes():
    board = BitBoard(4, 1)
    board.occupy([1, 2, 3])
    assert board.lowest_open_cell() == 0


def test_full_board_has_no_open_cell():
    board = BitBoard(2, 2)
    board.occupy(range(4))
    assert board.lowest_open_cell() is None
    assert board.is_complete()


def test_release_restores_previous_state():
    board = BitBoard(4, 4)
    board.occupy([0, 1])
    before = board.bits
    board.occupy([4, 5, 6, 7])
    board.release([4, 5, 6, 7])
    assert board.bits == before
    assert board.is_free([4, 5, 6, 7])


def test_is_free_rejects_occupied_and_out_of_bounds():
    board = BitBoard(2, 2)
    board.occupy([3])
    assert not board.is_free([2, 3])
    assert not board.is_free([4])
    assert not board.is_free([-1])
    assert board.is_free([0, 1, 2])


def test_overlapping_occupy_raises():
    board = BitBoard(4, 4)
    board.occupy([0, 1, 2, 3])
    with pytest.raises(OccupancyError):
        board.occupy([3, 4])


def test_releasing_free_cells_raises():
    board = BitBoard(4, 4)
    board.occupy([0])
    with pytest.raises(OccupancyError):
        board.release([0, 1])


def test_boards_wider_than_a_machine_word():
    board = BitBoard(20, 20)
    board.occupy(range(399))
    assert board.lowest_open_cell() == 399
    board.occupy([399])
    assert board.is_complete()


@pytest.mark.parametrize("width,height", [(0, 3), (3, 0), (-1, 2)])
def test_non_positive_dimensions(width, height):
    with pytest.raises(ValueError):
        BitBoard(width, height)
