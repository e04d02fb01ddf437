from datetime import datetime


def test_health_ok(client):
    r = client.get("/health")
    assert r.status_code == 200
    data = r.json()
    assert data["status"] == "ok"
    assert data["message"] == "Server is healthy and ready to receive blob uploads"
    assert data["timestamp"].endswith("Z")
    datetime.fromisoformat(data["timestamp"].replace("Z", "+00:00"))


def test_health_has_no_side_effects(client, upload_dir):
    for _ in range(3):
        assert client.get("/health").json()["status"] == "ok"
    assert not upload_dir.exists()


def test_request_id_is_echoed(client):
    r = client.get("/health", headers={"X-Request-ID": "abc123"})
    assert r.headers["X-Request-ID"] == "abc123"

    generated = client.get("/health").headers["X-Request-ID"]
    assert len(generated) == 32


def test_cors_allows_any_origin(client):
    r = client.options(
        "/upload",
        headers={
            "Origin": "http://192.168.1.20:5173",
            "Access-Control-Request-Method": "POST",
        },
    )
    assert r.status_code == 200
    assert r.headers["access-control-allow-origin"] in ("*", "http://192.168.1.20:5173")


def test_metrics_exposed(client):
    client.post("/upload", files={"file": ("m.txt", b"metrics", "text/plain")})
    r = client.get("/metrics")
    assert r.status_code == 200
    assert "blobcheck_upload_total" in r.text
    assert "blobcheck_upload_size_bytes" in r.text


def test_unknown_route_uses_error_shape(client):
    r = client.get("/does-not-exist")
    assert r.status_code == 404
    assert r.json() == {"error": "Not Found"}
