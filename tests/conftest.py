import os
import tempfile

# Keep progress state and attempt logs out of the working tree during tests.
_STATE_DIR = tempfile.mkdtemp(prefix="tiler-tests-")
os.environ.setdefault("TT_PROGRESS_STATE_FILE", os.path.join(_STATE_DIR, "progress_state.json"))
