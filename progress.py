"""Live progress of the current solve, shared with the web page.

One process-wide snapshot guarded by a lock. Every update is written to a
JSON state file so that a solver running in a child process and the Flask
process polling ``/progress`` see the same counters. Noteworthy events also
go to a plain attempt log next to the state file.
"""
from __future__ import annotations

import json
import logging
import os
import threading
import time
from pathlib import Path
from typing import Any, Dict, Optional

PROGRESS_LOCK = threading.Lock()

_DEFAULT_STATE = Path(__file__).resolve().parent / "logs" / "progress_state.json"
STATE_FILE = Path(os.environ.get("TT_PROGRESS_STATE_FILE") or _DEFAULT_STATE)


class _StateFile:
    """Atomic JSON persistence that only re-reads when the file changed."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self.tmp = path.with_name(path.name + ".tmp")
        self.seen_mtime = 0.0

    def save(self, state: Dict[str, Any]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.tmp.write_text(json.dumps(state, ensure_ascii=False), encoding="utf-8")
            self.tmp.replace(self.path)
            self.seen_mtime = self.path.stat().st_mtime
        except OSError:
            # Progress is advisory; a read-only disk must not fail the solve.
            pass

    def load_into(self, state: Dict[str, Any], force: bool = False) -> None:
        try:
            mtime = self.path.stat().st_mtime
            if not force and mtime <= self.seen_mtime:
                return
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            return
        if isinstance(data, dict):
            state.update((k, data[k]) for k in state.keys() & data.keys())
        self.seen_mtime = mtime


_STORE = _StateFile(STATE_FILE)


def _attempt_logger() -> logging.Logger:
    log = logging.getLogger("tiler.attempt_log")
    if log.handlers:
        return log
    try:
        STATE_FILE.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(STATE_FILE.parent / "solver_attempts.log", encoding="utf-8")
    except OSError:
        return log
    handler.setFormatter(logging.Formatter("%(asctime)s %(message)s", "%Y-%m-%d %H:%M:%S"))
    log.addHandler(handler)
    log.setLevel(logging.INFO)
    log.propagate = False
    return log


ATTEMPT_LOGGER = _attempt_logger()


def log_attempt_detail(event: str, **fields: Any) -> None:
    """Append one ``event | key=value ...`` line; empty fields are skipped."""
    if not ATTEMPT_LOGGER.handlers:
        return
    pairs = " ".join(f"{k}={v}" for k, v in fields.items() if v not in (None, ""))
    if pairs:
        ATTEMPT_LOGGER.info("%s | %s", event, pairs)
    else:
        ATTEMPT_LOGGER.info("%s", event)


def _idle_state(run_id: int = 0) -> Dict[str, Any]:
    return {
        "status": "Idle",      # Idle | Solving | Solved | No solution | Stopped | Error
        "board": "",
        "pieces": "",
        "engine": "",
        "nodes": 0,
        "placed": 0,           # pieces on the board at the last report
        "percent": 0.0,
        "started_at": None,    # wall clock of start_timer()
        "elapsed": 0.0,
        "message": "",
        "done": False,
        "ok": None,
        "result_url": "",
        "run_id": run_id,
    }


PROGRESS: Dict[str, Any] = _idle_state()


def _update(**changes: Any) -> None:
    with PROGRESS_LOCK:
        PROGRESS.update(changes)
        _STORE.save(PROGRESS)


def _refresh_elapsed_locked() -> None:
    started = PROGRESS.get("started_at")
    if started is not None:
        PROGRESS["elapsed"] = time.time() - float(started)


def _human_duration(seconds: float) -> str:
    total = int(max(0.0, float(seconds)))
    if total < 60:
        return f"{total}s"
    m, s = divmod(total, 60)
    if m < 60:
        return f"{m}m {s}s"
    h, m = divmod(m, 60)
    return f"{h}h {m}m"


def reset() -> None:
    with PROGRESS_LOCK:
        run_id = int(PROGRESS.get("run_id") or 0) + 1
        PROGRESS.clear()
        PROGRESS.update(_idle_state(run_id))
        _STORE.save(PROGRESS)
    log_attempt_detail("Progress reset", run_id=run_id)


def start_timer() -> None:
    _update(started_at=time.time(), elapsed=0.0)


def set_status(status: Any) -> None:
    _update(status=str(status))


def set_puzzle(width: int, height: int, pieces: str, engine: str = "") -> None:
    board = f"{width} × {height}"
    _update(board=board, pieces=str(pieces), engine=str(engine))
    log_attempt_detail("Puzzle", board=board, pieces=pieces, engine=engine)


def set_search(nodes: Any, placed: Any, total: Any = None) -> None:
    """Record search counters; ``percent`` tracks placed/total pieces, capped below 100."""
    try:
        n, k = max(0, int(nodes)), max(0, int(placed))
        t = int(total) if total is not None else 0
    except (TypeError, ValueError):
        return
    with PROGRESS_LOCK:
        PROGRESS["nodes"] = n
        PROGRESS["placed"] = k
        if t > 0:
            PROGRESS["percent"] = min(99.0, 100.0 * k / t)
        _refresh_elapsed_locked()
        _STORE.save(PROGRESS)


def set_elapsed(seconds: Any) -> None:
    try:
        value = max(0.0, float(seconds))
    except (TypeError, ValueError):
        value = 0.0
    _update(elapsed=value)


def set_result_url(url: Any) -> None:
    _update(result_url="" if url is None else str(url))


def set_done(ok: Optional[bool] = None, *, status: Optional[str] = None, message: Any = None) -> None:
    """Mark the run complete.

    ``status`` wins when given; otherwise ``ok`` picks ``Solved``/``Error``;
    with neither a still-idle run counts as solved.
    """
    with PROGRESS_LOCK:
        # a solver child may have written newer counters
        _STORE.load_into(PROGRESS)
        _refresh_elapsed_locked()
        if status is not None:
            PROGRESS["status"] = str(status)
        elif ok is not None:
            PROGRESS["status"] = "Solved" if ok else "Error"
        elif PROGRESS.get("status") in ("", "Idle", None):
            PROGRESS["status"] = "Solved"
        PROGRESS["ok"] = bool(ok) if ok is not None else PROGRESS["status"] == "Solved"
        PROGRESS["percent"] = 100.0
        PROGRESS["done"] = True
        if message is not None:
            PROGRESS["message"] = str(message)
        _STORE.save(PROGRESS)
        summary = dict(PROGRESS)
    log_attempt_detail(
        "Run finished",
        status=summary["status"],
        ok=summary["ok"],
        elapsed=f"{summary['elapsed']:.2f}s",
        nodes=summary["nodes"],
        message=summary["message"],
    )


def snapshot() -> Dict[str, Any]:
    with PROGRESS_LOCK:
        _STORE.load_into(PROGRESS)
        _refresh_elapsed_locked()
        snap = {k: v for k, v in PROGRESS.items() if k != "started_at"}
    snap["elapsed_str"] = _human_duration(snap["elapsed"])
    return snap


with PROGRESS_LOCK:
    _STORE.load_into(PROGRESS, force=True)
