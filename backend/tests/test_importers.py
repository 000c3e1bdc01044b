import pytest

from app.services.importers import parse_activity_file, parse_gpx

NS = 'xmlns:gpxtpx="http://www.garmin.com/xmlschemas/TrackPointExtension/v1"'


def make_gpx(n=12, step_m=100, dt_s=30, hr=150):
    pts = []
    for i in range(n):
        lat = -23.5 + i * step_m / 111194.93
        minute, second = divmod(i * dt_s, 60)
        pts.append(
            f'<trkpt lat="{lat:.7f}" lon="-46.6"><ele>760</ele>'
            f"<time>2025-03-01T12:{minute:02d}:{second:02d}Z</time>"
            f"<extensions><gpxtpx:TrackPointExtension><gpxtpx:hr>{hr + i}</gpxtpx:hr>"
            f"</gpxtpx:TrackPointExtension></extensions></trkpt>"
        )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        f'<gpx version="1.1" creator="test" xmlns="http://www.topografix.com/GPX/1/1" {NS}>'
        f"<trk><name>Morning Run</name><trkseg>{''.join(pts)}</trkseg></trk></gpx>"
    )


def test_parse_gpx_samples_and_aggregates():
    activity = parse_gpx(make_gpx(), "u1", "g1")
    assert activity.name == "Morning Run"
    assert activity.activity_source == "strava_gpx"
    assert len(activity.samples) == 12
    assert [s.heart_rate for s in activity.samples[:3]] == [150, 151, 152]
    assert activity.samples[0].distance_meters == 0
    assert activity.distance_meters == pytest.approx(1100, abs=1)
    assert activity.duration_seconds == 330
    assert activity.max_heart_rate == 161
    assert activity.average_heart_rate == 156


def test_unsupported_extension():
    with pytest.raises(ValueError):
        parse_activity_file("run.tcx", b"", "u1")


def test_import_endpoint(client):
    files = {"file": ("morning.gpx", make_gpx().encode("utf-8"), "application/gpx+xml")}
    r = client.post("/activities/import", files=files, data={"user_id": "u1", "activity_source": "zepp_gpx"})
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["activity_id"] == "morning"
    assert body["activity_source"] == "zepp_gpx"
    assert body["activity_date"] == "2025-03-01"
    assert body["samples_count"] == 12

    # imported samples feed the pipeline directly
    c = client.post("/analytics/chart-data", json={"activity_id": "morning", "user_id": "u1"})
    assert c.status_code == 200
    assert c.json()["coordinates"] == 12


def test_import_rejects_bad_files(client):
    files = {"file": ("notes.txt", b"hello", "text/plain")}
    assert client.post("/activities/import", files=files, data={"user_id": "u1"}).status_code == 400
    files = {"file": ("broken.gpx", b"<gpx", "application/gpx+xml")}
    assert client.post("/activities/import", files=files, data={"user_id": "u1"}).status_code == 400
