import pytest

pytest.importorskip("ortools.sat.python.cp_model")

from models import NO_SOLUTION, SOLVED  # noqa: E402
from solver.cp_sat import build_options, try_pack_exact_cover  # noqa: E402
from solver.orchestrator import solve, verify_tiling  # noqa: E402


def test_exact_cover_model_finds_a_tiling():
    ok, placed, reason, meta = try_pack_exact_cover(4, 4, "LLZZ", mirror=True, max_seconds=10)
    assert ok is True
    assert reason == "Solved"
    assert verify_tiling(4, 4, placed, mirror=True) == (True, None)
    assert meta["option_count"] > 0
    assert [p.anchor for p in placed] == sorted(p.anchor for p in placed)


def test_each_piece_instance_is_used_once():
    ok, placed, _reason, _meta = try_pack_exact_cover(4, 5, "ITTLZ", mirror=False, max_seconds=10)
    assert ok is True
    assert sorted(p.piece.index for p in placed) == [0, 1, 2, 3, 4]
    assert sorted(p.family for p in placed) == sorted("ITTLZ")


def test_infeasible_model_is_proven():
    ok, placed, reason, meta = try_pack_exact_cover(2, 4, "LJ", mirror=True, max_seconds=10)
    assert ok is False
    assert placed == []
    assert "infeasible" in reason.lower()


def test_piece_without_any_placement_short_circuits():
    ok, _placed, _reason, meta = try_pack_exact_cover(2, 2, "I", mirror=True)
    assert ok is False
    assert meta["status"] == "INFEASIBLE"


def test_options_are_cached_per_geometry():
    assert build_options(4, 4, "T", True) is build_options(4, 4, "T", True)
    assert len(build_options(4, 4, "O", True)) == 9


def test_orchestrator_dispatches_to_cp_sat():
    result = solve(5, 4, "JLSZZ", engine="cp_sat", max_seconds=10)
    assert result.status == SOLVED
    assert result.engine == "cp_sat"
    assert verify_tiling(5, 4, result.placements) == (True, None)


def test_orchestrator_reports_cp_sat_infeasible():
    result = solve(2, 4, "LJ", engine="cp_sat", max_seconds=10)
    assert result.status == NO_SOLUTION
    assert result.reason == "No tiling exists (proven infeasible)"


def test_option_cache_is_bounded():
    build_options.cache_clear()
    for width in range(4, 4 + build_options.cache_info().maxsize + 10):
        build_options(width, 1, "I", False)
    info = build_options.cache_info()
    assert info.currsize == info.maxsize
    assert build_options(4, 1, "I", False) == build_options(4, 1, "I", False)
