from models import PieceInstance, Placement
from render import marker, marker_grid, render_pretty, render_result, render_text
from solver.orchestrator import solve


def _placement(family, index, width, cells_rc, orientation_index=0):
    cells = tuple(sorted(r * width + c for r, c in cells_rc))
    r0, c0 = min(cells_rc)
    orient = tuple(sorted((r - min(r for r, _ in cells_rc), c - min(c for _, c in cells_rc)) for r, c in cells_rc))
    return Placement(PieceInstance(family, index), orientation_index, orient, r0 * width + c0, cells)


def test_markers_cycle_through_letters():
    assert marker(0) == "A"
    assert marker(25) == "Z"
    assert marker(26) == "a"


def test_text_render_single_piece():
    result = solve(4, 1, "I")
    assert render_text(4, 1, result.placements) == "AAAA\n"


def test_text_render_square():
    result = solve(2, 2, "O")
    assert render_text(2, 2, result.placements) == "AA\nAA\n"


def test_text_render_marks_empty_cells():
    placed = [_placement("I", 0, 5, [(0, 0), (0, 1), (0, 2), (0, 3)])]
    assert render_text(5, 2, placed) == "AAAA.\n.....\n"
    assert marker_grid(5, 2, placed)[1] == ["."] * 5


def test_pretty_empty_board():
    expected = (
        "┌─────────┐\n"
        "│░░░░░░░░░│\n"
        "│░░░░░░░░░│\n"
        "│░░░░░░░░░│\n"
        "└─────────┘\n"
    )
    assert render_pretty(5, 4, []) == expected


def test_pretty_z_piece():
    z = _placement("Z", 0, 5, [(0, 0), (0, 1), (1, 1), (1, 2)])
    expected = (
        "┌───┬─────┐\n"
        "├─┐ └─┐░░░│\n"
        "│░└───┘░░░│\n"
        "│░░░░░░░░░│\n"
        "└─────────┘\n"
    )
    assert render_pretty(5, 4, [z]) == expected


def test_pretty_vertical_piece():
    i = _placement("I", 0, 5, [(0, 0), (1, 0), (2, 0), (3, 0)], orientation_index=1)
    expected = (
        "┌─┬───────┐\n"
        "│ │░░░░░░░│\n"
        "│ │░░░░░░░│\n"
        "│ │░░░░░░░│\n"
        "└─┴───────┘\n"
    )
    assert render_pretty(5, 4, [i]) == expected


def test_pretty_horizontal_piece():
    i = _placement("I", 0, 4, [(0, 0), (0, 1), (0, 2), (0, 3)])
    expected = (
        "┌───────┐\n"
        "├───────┤\n"
        "│░░░░░░░│\n"
        "│░░░░░░░│\n"
        "│░░░░░░░│\n"
        "└───────┘\n"
    )
    assert render_pretty(4, 5, [i]) == expected


def test_svg_render_includes_every_cell_and_legend():
    result = solve(4, 4, "LLZZ")
    svg, legend = render_result(result.placements, 4, 4)
    assert svg.startswith("<svg")
    assert svg.count("<rect") == 16 + 1
    assert "L" in legend and "Z" in legend
    assert legend.count("<li>") == 2


def test_pretty_keeps_boundary_between_pieces_sharing_a_letter():
    rows = [0] + list(range(2, 63)) + [1]
    placed = [_placement("I", i, 4, [(r, c) for c in range(4)]) for i, r in enumerate(rows)]
    assert marker(0) == marker(62)
    lines = render_pretty(4, 63, placed).splitlines()
    assert lines[1] == "├───────┤"
    assert all(line == "├───────┤" for line in lines[1:63])
