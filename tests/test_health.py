def test_live(client):
    assert client.get("/health").json() == {"status": "healthy"}
    assert client.get("/health/live").json() == {"status": "ok"}
    assert client.get("/api/v1/health/live").json() == {"status": "alive"}


def test_ready_with_builtin_declaration(client):
    r = client.get("/api/v1/health/ready")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "ready"
    assert body["units"] == 1
    assert len(body["conventions_fingerprint"]) == 16


def test_not_ready_when_declaration_missing(client, tmp_path, monkeypatch):
    monkeypatch.setenv("BUILDCONV_DECLARATION_FILE", str(tmp_path / "missing.yaml"))
    r = client.get("/api/v1/health/ready")
    assert r.status_code == 503
    body = r.json()
    assert body["status"] == "not_ready"
    assert body["problems"][0].startswith("FileNotFoundError")


def test_not_ready_when_declaration_invalid(client, tmp_path, monkeypatch):
    p = tmp_path / "conventions.yaml"
    p.write_text("conventions:\n  - {kind: DEPENDENCY, coordinate: 'lib:x', scope: COMPILE_ONLY}\n", encoding="utf-8")
    monkeypatch.setenv("BUILDCONV_DECLARATION_FILE", str(p))
    r = client.get("/api/v1/health/ready")
    assert r.status_code == 503
    assert "InvalidEntryError" in r.json()["problems"][0]
