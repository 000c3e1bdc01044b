from datetime import date, timedelta

import pytest

from app.core.exceptions import ComputationError
from app.models.chart_data import ActivityChartData
from app.models.overtraining import OvertrainingBatchLog, OvertrainingScore
from app.schemas.analytics import PipelineStep
from app.services import batch
from app.services.analytics import PipelineResult
from conftest import straight_track

AS_OF = date(2025, 3, 31)


def test_chunked():
    assert batch.chunked([1, 2, 3, 4, 5], 2) == [[1, 2], [3, 4], [5]]
    with pytest.raises(ValueError):
        batch.chunked([1], 0)


def test_backfill_isolates_failures(db, make_activity):
    make_activity("a1", samples=straight_track(40, 50, 15, hr=150))
    make_activity("a2", distance_meters=3000)  # no samples
    make_activity("a3", samples=straight_track(40, 50, 15, hr=150))
    pauses = []

    summary = batch.run_backfill(
        db,
        [("u1", "a1"), ("u1", "a2"), ("u1", "a3")],
        steps=[PipelineStep.chart_data, PipelineStep.best_segment],
        batch_size=2,
        delay_s=0.5,
        sleep=pauses.append,
    )

    assert summary["processed"] == 3
    assert summary["successful"] == 2
    assert summary["failed"] == 1
    by_id = {r["activity_id"]: r for r in summary["results"]}
    assert by_id["a2"]["success"] is False
    assert "No detail rows" in by_id["a2"]["error"]
    assert by_id["a1"]["steps"] == {"chart_data": "ok", "best_segment": "ok"}
    # two chunks, one pause between them
    assert pauses == [0.5]
    assert db.query(ActivityChartData).count() == 2


def test_backfill_continues_after_computation_error(db, make_activity, monkeypatch):
    make_activity("a1", samples=straight_track(20, 50, 15, hr=150))
    make_activity("a2", samples=straight_track(20, 50, 15, hr=150))

    def broken(db, user_id, activity_id):
        if activity_id == "a1":
            raise ComputationError("pace is not a finite number (nan)", activity_id, user_id)
        return batch.STEP_FUNCTIONS[PipelineStep.chart_data](db, user_id, activity_id)

    monkeypatch.setitem(batch.STEP_FUNCTIONS, PipelineStep.variation, broken)
    summary = batch.run_backfill(
        db, [("u1", "a1"), ("u1", "a2")], steps=[PipelineStep.variation], delay_s=0
    )
    assert [r["success"] for r in summary["results"]] == [False, True]
    assert summary["results"][0]["error"] == "pace is not a finite number (nan)"


def test_backfill_chunk_runs_items_in_order(db, make_activity, monkeypatch):
    for activity_id in ("a1", "a2", "a3"):
        make_activity(activity_id, samples=straight_track(20, 50, 15, hr=150))
    calls = []

    def record(db, user_id, activity_id):
        calls.append(activity_id)
        return PipelineResult({})

    monkeypatch.setitem(batch.STEP_FUNCTIONS, PipelineStep.variation, record)
    batch.run_backfill(
        db,
        [("u1", "a1"), ("u1", "a2"), ("u1", "a3")],
        steps=[PipelineStep.variation],
        batch_size=2,
        delay_s=1.0,
        sleep=lambda s: calls.append("pause"),
    )
    # a chunk only sets where the pause goes
    assert calls == ["a1", "a2", "pause", "a3"]


def test_backfill_endpoint(client, make_activity):
    make_activity("a1", samples=straight_track(40, 50, 15, hr=150))
    make_activity("a2", samples=straight_track(40, 50, 15, hr=150), user_id="u2")
    r = client.post("/analytics/backfill", json={"user_id": "u1", "delay_seconds": 0})
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["processed"] == 1
    steps = body["results"][0]["steps"]
    assert list(steps) == [s.value for s in PipelineStep]
    assert steps["best_segment"] == "ok"


def test_overtraining_batch_logs_run(db, make_activity, monkeypatch):
    for user in ("u1", "u2"):
        make_activity("r1", user_id=user, activity_date=AS_OF - timedelta(days=1),
                      distance_meters=8000, duration_seconds=2400, average_heart_rate=145)
    # inactive user
    make_activity("old", user_id="u3", activity_date=AS_OF - timedelta(days=90),
                  distance_meters=8000, duration_seconds=2400)

    real = batch.compute_overtraining_risk

    def flaky(db, user_id, days, as_of=None):
        if user_id == "u2":
            raise RuntimeError("store unavailable")
        return real(db, user_id, days, as_of=as_of)

    monkeypatch.setattr(batch, "compute_overtraining_risk", flaky)
    summary = batch.run_overtraining_batch(db, batch_size=1, delay_s=0, as_of=AS_OF)

    assert summary["total_users"] == 2
    assert summary["successful"] == 1
    assert summary["failed"] == 1
    assert summary["errors"] == [{"user_id": "u2", "error": "store unavailable"}]

    log = db.query(OvertrainingBatchLog).one()
    assert log.status == "completed"
    assert log.successful_calculations == 1
    assert log.metadata_json["errors"][0]["user_id"] == "u2"
    assert db.query(OvertrainingScore).count() == 1


def test_overtraining_batch_endpoint(client, make_activity):
    make_activity("r1", activity_date=AS_OF, distance_meters=8000, duration_seconds=2400)
    r = client.post(
        "/analytics/overtraining-batch",
        json={"as_of": AS_OF.isoformat(), "delay_seconds": 0},
    )
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["success"] is True
    assert body["successful"] == 1
