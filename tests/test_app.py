import pytest

pytest.importorskip("flask")

import app as app_module  # noqa: E402
from config import CFG  # noqa: E402
from models import STOPPED, SolveResult  # noqa: E402
from progress import snapshot  # noqa: E402
from solver.orchestrator import solve as solve_in_process  # noqa: E402


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.setattr(CFG, "COORDS_OUT", str(tmp_path / "coords.txt"))
    monkeypatch.setattr(CFG, "LAYOUT_HTML", str(tmp_path / "layout_view.html"))
    calls = []

    def fake_run_isolated(width, height, pieces, max_seconds, **options):
        calls.append({"width": width, "height": height, "pieces": pieces, "max_seconds": max_seconds, **options})
        options.pop("report_progress", None)
        return solve_in_process(width, height, pieces, **options)

    monkeypatch.setattr(app_module, "run_isolated", fake_run_isolated)
    app_module.app.config["TESTING"] = True
    with app_module.app.test_client() as c:
        c.calls = calls
        yield c


def test_index_lists_engines(client):
    resp = client.get("/")
    assert resp.status_code == 200
    body = resp.get_data(as_text=True)
    assert "backtracking" in body and "cp_sat" in body


def test_solve_form_renders_result_and_writes_files(client, tmp_path):
    resp = client.post("/solve", data={"rows": "4", "cols": "4", "pieces": "LLZZ", "engine": "backtracking"})
    assert resp.status_code == 200
    body = resp.get_data(as_text=True)
    assert "Solved" in body
    assert "<svg" in body

    call = client.calls[-1]
    assert (call["width"], call["height"], call["pieces"]) == (4, 4, "LLZZ")
    assert call["mirror"] is True
    assert call["report_progress"] is True
    assert call["max_seconds"] == CFG.WEB_TIME_LIMIT

    coords = (tmp_path / "coords.txt").read_text(encoding="utf-8")
    assert coords.startswith("# 4 x 4 LLZZ")
    assert (tmp_path / "layout_view.html").exists()

    snap = snapshot()
    assert snap["done"] is True
    assert snap["ok"] is True
    assert snap["result_url"].endswith("/result/latest")


def test_one_sided_checkbox_disables_mirror(client):
    client.post("/solve", data={"rows": "4", "cols": "4", "pieces": "LLZZ", "one_sided": "1"})
    assert client.calls[-1]["mirror"] is False


def test_json_payload_is_accepted(client):
    resp = client.post("/solve", json={"rows": 2, "cols": 4, "pieces": "LJ", "mirror": True})
    assert resp.status_code == 200
    assert "No tiling" in resp.get_data(as_text=True)
    assert snapshot()["status"] == "No solution"


def test_bad_input_skips_the_solver(client):
    resp = client.post("/solve", data={"rows": "0", "cols": "4", "pieces": "LLZZ"})
    assert resp.status_code == 400
    assert "Bad grid" in resp.get_data(as_text=True)
    assert client.calls == []
    assert snapshot()["status"] == "Error"


def test_bad_letters_are_rejected(client):
    resp = client.post("/solve", data={"rows": "4", "cols": "4", "pieces": "LLQZ"})
    assert resp.status_code == 400
    assert "Bad pieces" in resp.get_data(as_text=True)


def test_stopped_run_is_reported(client, monkeypatch):
    def timed_out(width, height, pieces, max_seconds, **options):
        return SolveResult(status=STOPPED, width=width, height=height, reason="Stopped before solution (timebox 1s)")

    monkeypatch.setattr(app_module, "run_isolated", timed_out)
    resp = client.post("/solve", data={"rows": "4", "cols": "4", "pieces": "LLZZ"})
    assert resp.status_code == 200
    assert "timebox" in resp.get_data(as_text=True)
    assert snapshot()["status"] == "Stopped"


def test_latest_result_and_downloads(client):
    client.post("/solve", data={"rows": "2", "cols": "2", "pieces": "O"})
    latest = client.get("/result/latest")
    assert latest.status_code == 200
    assert "AA\nAA" in latest.get_data(as_text=True)

    coords = client.get("/download/coords")
    assert coords.status_code == 200
    assert b"AA\nAA\n" in coords.data
    coords.close()

    html = client.get("/download/html")
    assert html.status_code == 200
    html.close()


def test_progress_endpoint_is_not_cached(client):
    resp = client.get("/progress")
    assert resp.status_code == 200
    assert resp.headers["Cache-Control"].startswith("no-store")
    assert "status" in resp.get_json()
