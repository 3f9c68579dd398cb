import queue

from models import INVALID_INPUT, SOLVED, STOPPED
from solver import isolate
from solver.isolate import run_isolated


def test_child_process_returns_solution():
    result = run_isolated(4, 4, "LLZZ", max_seconds=30, engine="backtracking")
    assert result.status == SOLVED
    assert len(result.placements) == 4
    assert sorted(c for p in result.placements for c in p.cells) == list(range(16))


def test_child_process_passes_back_invalid_input():
    result = run_isolated(0, 4, "LLZZ", max_seconds=30)
    assert result.status == INVALID_INPUT


def test_worker_reports_exceptions_on_queue():
    q = queue.Queue()
    isolate._solve_worker(q, 4, 4, "LLZZ", {"no_such_option": True})
    tag, payload = q.get_nowait()
    assert tag == "exc"
    assert "no_such_option" in payload


def test_worker_solves_in_process():
    q = queue.Queue()
    isolate._solve_worker(q, 2, 2, "O", {"report_progress": True})
    tag, payload = q.get_nowait()
    assert tag == "ok"
    assert payload.status == SOLVED


def test_failed_results_are_stopped():
    result = isolate._failed(4, 4, STOPPED, "Stopped before solution (timebox 1s)", "killed: timeout")
    assert result.status == STOPPED
    assert result.meta == {"crash_note": "killed: timeout"}
    assert result.placements == []
