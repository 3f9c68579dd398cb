# config.py
import os

# ======= Shape catalog =======
# One-sided puzzles (no flipping) set TT_ALLOW_MIRROR=0.
ALLOW_MIRROR         = int(os.getenv("TT_ALLOW_MIRROR", "1")) != 0

# ======= Engine selection =======
ENGINE               = os.getenv("TT_ENGINE", "backtracking").strip().lower()
AREA_PRECHECK        = int(os.getenv("TT_AREA_PRECHECK", "1")) != 0

# ======= Search budgets (0 = unlimited) =======
NODE_LIMIT           = int(os.getenv("TT_NODE_LIMIT", "0"))
TIME_LIMIT           = float(os.getenv("TT_TIME_LIMIT", "0"))
PROGRESS_EVERY       = int(os.getenv("TT_PROGRESS_EVERY", "5000"))

# ======= CP-SAT knobs =======
WORKERS              = int(os.getenv("TT_WORKERS", "1"))
MAX_MEMORY_MB        = int(os.getenv("TT_MAX_MEMORY_MB", "2048"))
RANDOM_SEED          = int(os.getenv("TT_RANDOM_SEED", "0"))

# ======= Web driver =======
# Each web solve runs in a child process killed after this many seconds.
WEB_TIME_LIMIT       = float(os.getenv("TT_WEB_TIME_LIMIT", "60"))

# ======= Output names =======
COORDS_OUT  = os.getenv("TT_COORDS_OUT", "coords.txt")
LAYOUT_HTML = os.getenv("TT_LAYOUT_HTML", "layout_view.html")


class CFG:
    ALLOW_MIRROR = ALLOW_MIRROR

    ENGINE        = ENGINE
    AREA_PRECHECK = AREA_PRECHECK

    NODE_LIMIT     = NODE_LIMIT
    TIME_LIMIT     = TIME_LIMIT
    PROGRESS_EVERY = PROGRESS_EVERY

    WORKERS       = WORKERS
    MAX_MEMORY_MB = MAX_MEMORY_MB
    RANDOM_SEED   = RANDOM_SEED

    WEB_TIME_LIMIT = WEB_TIME_LIMIT

    COORDS_OUT  = COORDS_OUT
    LAYOUT_HTML = LAYOUT_HTML


ENGINES = ("backtracking", "cp_sat")

__all__ = ["CFG", "ENGINES"]
