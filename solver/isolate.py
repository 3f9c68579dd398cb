# solver/isolate.py
import multiprocessing as mp
import queue
import traceback
from typing import Any, Dict, Optional

from models import STOPPED, SolveResult


# Worker must be top-level (picklable on Windows spawn)
def _solve_worker(q, width, height, pieces, options: Dict[str, Any]):
    try:
        from solver.orchestrator import solve  # import inside child
        if options.pop("report_progress", False):
            from progress import set_search

            total = len(pieces)
            options["progress_callback"] = lambda s: set_search(s.stats.nodes, len(s.stack), total)
        q.put(("ok", solve(width, height, pieces, **options)))
    except MemoryError:
        q.put(("err", "Child ran out of memory"))
    except Exception as e:
        q.put(("exc", f"{e}\n{traceback.format_exc()}"))


def _failed(width, height, status: str, reason: str, crash_note: Optional[str]) -> SolveResult:
    return SolveResult(
        status=status,
        width=width if isinstance(width, int) else 0,
        height=height if isinstance(height, int) else 0,
        reason=reason,
        meta={"crash_note": crash_note} if crash_note else {},
    )


def run_isolated(width, height, pieces, max_seconds: float, **options: Any) -> SolveResult:
    """Solve in a spawned child process, killing it after ``max_seconds``.

    The child runs :func:`solver.orchestrator.solve` with ``options``. A
    timeout, crash or missing result comes back as a ``stopped`` result whose
    ``meta["crash_note"]`` says what happened. ``report_progress=True``
    makes the child publish its search counters through :mod:`progress`.
    """
    opts = dict(options)
    # The child stops itself at the same timebox; the kill is the fallback
    opts.setdefault("max_seconds", max_seconds)

    ctx = mp.get_context("spawn")  # safest on Windows
    q = ctx.Queue()
    p = ctx.Process(target=_solve_worker, args=(q, width, height, pieces, opts))
    p.daemon = True
    p.start()

    # Allow a small buffer for interpreter start-up and teardown
    timeout = float(max_seconds) + 5.0
    try:
        tag, payload = q.get(timeout=timeout)
    except queue.Empty:
        tag, payload = None, None

    killed = tag is None and p.is_alive()
    if killed:
        p.terminate()
    p.join(2.0)

    if tag is None:
        if not killed and p.exitcode not in (0, None):
            return _failed(width, height, STOPPED,
                           f"Stopped before solution (child exit {p.exitcode})", "child crashed")
        return _failed(width, height, STOPPED,
                       f"Stopped before solution (timebox {float(max_seconds):g}s)", "killed: timeout")

    if tag == "ok":
        return payload
    if tag == "err":
        return _failed(width, height, STOPPED, f"Stopped before solution ({payload})", "child error")
    return _failed(width, height, STOPPED, f"Stopped before solution (child raised: {payload})", "child exception")
