import os
from datetime import date, datetime, timezone

# Use in-memory sqlite for tests; must be set before the app is imported
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.db import Base, SessionLocal, engine  # noqa: E402
from app.main import app  # noqa: E402
from app.schemas.activity import ActivityCreate, SampleIn  # noqa: E402
from app.services.activities import save_activity  # noqa: E402

START = datetime(2025, 3, 1, 7, 0, tzinfo=timezone.utc)
METERS_PER_DEG_LAT = 6371000.0 * 3.141592653589793 / 180


@pytest.fixture(autouse=True)
def reset_tables():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def straight_track(n_points, step_m, dt_s, hr=None, lat0=-23.5, lon0=-46.6):
    """Samples heading due north: `step_m` meters and `dt_s` seconds apart."""
    samples = []
    for i in range(n_points):
        samples.append(SampleIn(
            timestamp_seconds=START.timestamp() + i * dt_s,
            latitude=lat0 + i * step_m / METERS_PER_DEG_LAT,
            longitude=lon0,
            distance_meters=i * step_m,
            heart_rate=hr(i) if callable(hr) else hr,
            speed_mps=step_m / dt_s,
        ))
    return samples


@pytest.fixture
def make_activity(db):
    def _make(
        activity_id="a1",
        user_id="u1",
        samples=(),
        activity_date=date(2025, 3, 1),
        **aggregates,
    ):
        samples = list(samples)
        if samples and "distance_meters" not in aggregates:
            aggregates["distance_meters"] = samples[-1].distance_meters
        if samples and "duration_seconds" not in aggregates:
            aggregates["duration_seconds"] = int(
                samples[-1].timestamp_seconds - samples[0].timestamp_seconds
            )
        return save_activity(db, ActivityCreate(
            user_id=user_id,
            activity_id=activity_id,
            activity_date=activity_date,
            samples=samples,
            **aggregates,
        ))

    return _make
