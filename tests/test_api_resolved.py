import json

import yaml


def test_units_lists_builtin_subunit(client):
    r = client.get("/api/v1/units")
    assert r.status_code == 200
    body = r.json()
    assert body["root"] == "spring-multimodule"
    assert body["count"] == 1
    assert body["units"][0] == {
        "name": "spring-web",
        "group": "com.wck",
        "version": "0.0.1-SNAPSHOT",
        "path": ":spring-web",
    }


def test_conventions_are_substituted_and_filterable(client):
    r = client.get("/api/v1/conventions")
    assert r.status_code == 200
    body = r.json()
    assert body["properties"]["junitVersion"] == "5.9.2"
    assert "${" not in json.dumps(body["entries"])

    plugins = client.get("/api/v1/conventions", params={"kind": "PLUGIN"}).json()
    assert plugins["count"] == 4
    assert [e["plugin_id"] for e in plugins["entries"]][0] == "java"
    assert plugins["fingerprint"] == body["fingerprint"]


def test_conventions_rejects_unknown_kind(client):
    r = client.get("/api/v1/conventions", params={"kind": "NOPE"})
    assert r.status_code == 422


def test_resolved_matches_conventions_fingerprint(client):
    fp = client.get("/api/v1/conventions").json()["fingerprint"]
    body = client.get("/api/v1/resolved").json()
    assert body["count"] == 1
    assert body["conventions_fingerprint"] == fp
    assert body["configurations"][0]["conventions_fingerprint"] == fp


def test_resolved_unit_shape(client):
    r = client.get("/api/v1/resolved/spring-web")
    assert r.status_code == 200
    body = r.json()
    assert body["path"] == ":spring-web"
    assert body["plugins"] == [
        "java",
        "org.springframework.boot",
        "io.spring.dependency-management",
        "com.diffplug.spotless",
    ]
    assert body["format_rule"] == {"formatter": "google-java-format", "version": "1.15.0", "target": "java"}
    assert body["test_platform"] == "junit-platform"
    assert body["scope_extensions"] == {"COMPILE_ONLY": ["ANNOTATION_PROCESSING"]}
    assert body["repositories"][0]["name"] == "mavenCentral"
    assert body["source_compatibility"] == "17"


def test_per_unit_accessors(client):
    assert client.get("/api/v1/resolved/spring-web/plugins").json()["plugins"][0] == "java"
    assert client.get("/api/v1/resolved/spring-web/test-platform").json()["test_platform"] == "junit-platform"
    rule = client.get("/api/v1/resolved/spring-web/format-rule").json()["format_rule"]
    assert rule["formatter"] == "google-java-format"


def test_dependencies_by_scope(client):
    r = client.get("/api/v1/resolved/spring-web/dependencies", params={"scope": "TEST_IMPLEMENTATION"})
    assert r.status_code == 200
    body = r.json()
    assert body["scope"] == "TEST_IMPLEMENTATION"
    assert body["effective"] is False
    assert [d["coordinate"] for d in body["dependencies"]] == [
        "org.assertj:assertj-core",
        "org.junit.jupiter:junit-jupiter-api",
        "org.springframework.boot:spring-boot-starter-test",
    ]
    assert body["dependencies"][0]["version"] == "3.24.2"


def test_dependencies_effective_scope_deduplicates(client):
    r = client.get(
        "/api/v1/resolved/spring-web/dependencies",
        params={"scope": "COMPILE_ONLY", "effective": "true"},
    )
    deps = r.json()["dependencies"]
    assert [d["coordinate"] for d in deps] == ["org.projectlombok:lombok"]
    assert deps[0]["scope"] == "COMPILE_ONLY"


def test_dependencies_without_scope_returns_all(client):
    deps = client.get("/api/v1/resolved/spring-web/dependencies").json()["dependencies"]
    assert len(deps) == 7


def test_dependencies_rejects_unknown_scope(client):
    r = client.get("/api/v1/resolved/spring-web/dependencies", params={"scope": "RUNTIME"})
    assert r.status_code == 422


def test_unknown_unit_is_404(client):
    r = client.get("/api/v1/resolved/nope")
    assert r.status_code == 404
    body = r.json()
    assert body["error"] == "UnknownUnitError"
    assert body["unit"] == "nope"

    r2 = client.get("/api/v1/resolved/nope/plugins")
    assert r2.status_code == 404


def test_post_resolve_declaration(client, declaration_dict):
    r = client.post("/api/v1/resolve", json=declaration_dict)
    assert r.status_code == 200
    body = r.json()
    assert body["count"] == 2
    core, web = body["configurations"]
    assert core["unit"] == {"name": "core", "group": "org.demo", "version": "2.0.0"}
    assert web["unit"]["version"] == "2.1.0"
    assert core["dependencies"] == [
        {
            "coordinate": "org.junit.jupiter:junit-jupiter-api",
            "version": "5.9.2",
            "scope": "TEST_IMPLEMENTATION",
        }
    ]
    assert core["plugins"] == web["plugins"] == ["java"]


def test_post_resolve_rejects_missing_version(client, declaration_dict):
    declaration_dict["conventions"].append({"kind": "DEPENDENCY", "coordinate": "lib:x", "scope": "COMPILE_ONLY"})
    r = client.post("/api/v1/resolve", json=declaration_dict, headers={"X-Request-Id": "rid-422"})
    assert r.status_code == 422
    body = r.json()
    assert body["error"] == "InvalidEntryError"
    assert body["coordinate"] == "lib:x"
    assert body["parameter"] == "version"
    assert body["request_id"] == "rid-422"


def test_post_resolve_rejects_conflicting_version(client, declaration_dict):
    declaration_dict["conventions"].append(
        {
            "kind": "DEPENDENCY",
            "coordinate": "org.junit.jupiter:junit-jupiter-api",
            "version": "5.8.0",
            "scope": "TEST_IMPLEMENTATION",
        }
    )
    r = client.post("/api/v1/resolve", json=declaration_dict)
    assert r.status_code == 422
    body = r.json()
    assert body["error"] == "ConflictingEntryError"
    assert body["existing"] == "5.9.2"
    assert body["requested"] == "5.8.0"


def test_post_resolve_rejects_duplicate_unit(client, declaration_dict):
    declaration_dict["units"].append("core")
    r = client.post("/api/v1/resolve", json=declaration_dict)
    assert r.status_code == 422
    assert r.json()["error"] == "DuplicateUnitError"


def test_post_resolve_does_not_touch_served_declaration(client, declaration_dict):
    client.post("/api/v1/resolve", json=declaration_dict)
    assert client.get("/api/v1/units").json()["root"] == "spring-multimodule"


def test_declaration_file_from_env(client, tmp_path, monkeypatch, declaration_dict):
    p = tmp_path / "conventions.yaml"
    p.write_text(yaml.safe_dump(declaration_dict), encoding="utf-8")
    monkeypatch.setenv("BUILDCONV_DECLARATION_FILE", str(p))

    body = client.get("/api/v1/units").json()
    assert body["root"] == "demo"
    assert [u["name"] for u in body["units"]] == ["core", "web"]
    assert client.get("/api/v1/resolved/web/test-platform").json()["test_platform"] == "junit-platform"
