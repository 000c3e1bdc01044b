from conftest import straight_track


def test_root_ok(client):
    r = client.get("/")
    assert r.status_code == 200
    data = r.json()
    assert "message" in data


def test_create_and_list_activity(client):
    samples = [s.model_dump() for s in straight_track(11, 100, 30, hr=150)]
    payload = {
        "user_id": "u1",
        "activity_id": "run-1",
        "activity_source": "garmin",
        "activity_date": "2025-01-01",
        "name": "Test Run",
        "distance_meters": 1000,
        "duration_seconds": 300,
        "samples": samples,
    }
    cr = client.post("/activities/", json=payload)
    assert cr.status_code == 200, cr.text
    activity = cr.json()
    assert activity["pace"] == "5:00/km"
    assert activity["duration"] == "00:05:00"
    assert activity["samples_count"] == 11

    # list within range
    lr = client.get("/activities/", params={"user_id": "u1", "start_date": "2024-12-30", "end_date": "2025-01-02"})
    assert lr.status_code == 200
    arr = lr.json()
    assert any(a["name"] == "Test Run" for a in arr)

    # other users see nothing
    assert client.get("/activities/", params={"user_id": "u2"}).json() == []


def test_create_replaces_samples(client):
    payload = {
        "user_id": "u1",
        "activity_id": "run-1",
        "activity_date": "2025-01-01",
        "samples": [s.model_dump() for s in straight_track(11, 100, 30)],
    }
    client.post("/activities/", json=payload)
    payload["samples"] = payload["samples"][:5]
    r = client.post("/activities/", json=payload)
    assert r.json()["samples_count"] == 5
    assert len(client.get("/activities/", params={"user_id": "u1"}).json()) == 1


def test_get_and_delete_activity(client, make_activity):
    make_activity("run-1", samples=straight_track(11, 100, 30))
    r = client.get("/activities/run-1", params={"user_id": "u1"})
    assert r.status_code == 200
    assert r.json()["activity_id"] == "run-1"

    d = client.delete("/activities/run-1", params={"user_id": "u1"})
    assert d.status_code == 200
    assert client.get("/activities/run-1", params={"user_id": "u1"}).status_code == 404


def test_rejects_negative_distance(client):
    payload = {"user_id": "u1", "activity_id": "x", "activity_date": "2025-01-01", "distance_meters": -5}
    assert client.post("/activities/", json=payload).status_code == 422


def test_rejects_unknown_source(client):
    payload = {"user_id": "u1", "activity_id": "x", "activity_date": "2025-01-01", "activity_source": "fitbit"}
    assert client.post("/activities/", json=payload).status_code == 422
