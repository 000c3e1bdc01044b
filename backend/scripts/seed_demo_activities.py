from datetime import date, datetime, time, timedelta, timezone
import math
import random

from app.db import Base, SessionLocal, engine
from app.models.activity import Activity
from app.schemas.activity import ActivityCreate, SampleIn
from app.services.activities import delete_activity, save_activity
from app.services.batch import run_backfill, run_overtraining_batch, select_activities

DEMO_USER = "demo-user"

# Start point of every demo track (Ibirapuera park loop)
START_LAT = -23.5874
START_LON = -46.6576


def synthetic_track(distance_km: float, pace_min_km: float, avg_hr: int, start: datetime) -> list[SampleIn]:
    """1 Hz samples on an out-and-back line with some pace and HR noise."""
    samples = []
    distance_m = 0.0
    t = 0
    total_m = distance_km * 1000
    while distance_m < total_m:
        speed = 1000 / (pace_min_km * 60) * random.uniform(0.9, 1.1)
        distance_m = min(total_m, distance_m + speed)
        # walk north-east for the first half, then back
        leg = distance_m if distance_m <= total_m / 2 else total_m - distance_m
        offset_deg = leg / 111_320
        samples.append(SampleIn(
            timestamp_seconds=start.timestamp() + t,
            latitude=START_LAT + offset_deg,
            longitude=START_LON + offset_deg / math.cos(math.radians(START_LAT)),
            distance_meters=round(distance_m, 1),
            heart_rate=int(avg_hr + random.uniform(-6, 6) + 8 * t / max(1, total_m / speed)),
            speed_mps=round(speed, 3),
        ))
        t += 1
    return samples


def clear_demo_activities(db) -> None:
    """Delete the demo user's activities so we can reseed cleanly."""
    for activity in db.query(Activity).filter(Activity.user_id == DEMO_USER).all():
        delete_activity(db, activity)


def seed_demo_activities(db, weeks: int = 4) -> int:
    """Insert a block of demo runs (easy, workout, long) for the last few weeks."""
    today = date.today()
    start_day = today - timedelta(weeks=weeks - 1)
    count = 0

    for week in range(weeks):
        week_start = start_day + timedelta(weeks=week)

        # Example: Tue easy, Thu tempo, Sun long run
        for offset, name, dist_km, pace, hr in [
            (1, "Easy run", random.uniform(5.0, 8.0), 6.3, 140),
            (3, "Tempo", random.uniform(6.0, 10.0), 4.8, 165),
            (6, "Long run", random.uniform(15.0, 20.0), 5.6, 148),
        ]:
            d = week_start + timedelta(days=offset)
            # Skip future days
            if d > today:
                continue
            start = datetime.combine(d, time(7, 0), tzinfo=timezone.utc)
            samples = synthetic_track(dist_km, pace, hr, start)
            hrs = [s.heart_rate for s in samples]
            save_activity(db, ActivityCreate(
                user_id=DEMO_USER,
                activity_id=f"demo-{d.isoformat()}",
                activity_source="manual",
                activity_type="RUNNING",
                name=name,
                activity_date=d,
                start_time=start,
                distance_meters=samples[-1].distance_meters,
                duration_seconds=len(samples),
                average_heart_rate=round(sum(hrs) / len(hrs)),
                max_heart_rate=max(hrs),
                average_speed_mps=round(samples[-1].distance_meters / len(samples), 3),
                active_kilocalories=round(dist_km * 65, 1),
                samples=samples,
            ))
            count += 1
    return count


def main():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        clear_demo_activities(db)
        n = seed_demo_activities(db)
        print(f"Seeded {n} demo activities")
        summary = run_backfill(db, select_activities(db, DEMO_USER), delay_s=0)
        print(f"Backfill: {summary['successful']} ok, {summary['failed']} failed")
        batch = run_overtraining_batch(db, delay_s=0)
        print(f"Overtraining batch {batch['batch_id']}: {batch['successful']} users scored")
    finally:
        db.close()


if __name__ == "__main__":
    main()
