def test_root(client):
    assert client.get("/").json()["service"] == "pipeline-canvas"


def test_parse_yaml(client):
    script = "- name: Checkout\n  uses: actions/checkout@v4\n- name: Test\n  run: npm test\n"
    resp = client.post("/api/parse", json={"script": script, "dialect": "yaml"})
    assert resp.status_code == 200
    stages = resp.json()["stages"]
    assert [s["kind"] for s in stages] == ["start", "git_clone", "run_tests"]
    assert stages[2] == {"label": "Run Tests", "kind": "run_tests", "testType": "unit", "command": "npm test"}


def test_parse_shell(client):
    resp = client.post("/api/parse", json={"script": "docker build -t web:1 .", "dialect": "shell"})
    stages = resp.json()["stages"]
    assert stages[1] == {"label": "Docker Build", "kind": "docker_build", "dockerfile": "Dockerfile", "tag": "web:1"}


def test_parse_rejects_unknown_dialect(client):
    resp = client.post("/api/parse", json={"script": "x", "dialect": "toml"})
    assert resp.status_code == 422


def test_parse_rejects_oversized_script(client, monkeypatch):
    from pipeline_canvas.api import routes

    monkeypatch.setattr(routes, "MAX_SCRIPT_CHARS", 10)
    resp = client.post("/api/parse", json={"script": "npm ci\n" * 5, "dialect": "shell"})
    assert resp.status_code == 413


def test_palette(client):
    items = client.get("/api/palette").json()["items"]
    assert len(items) == 13
    assert items[0] == {
        "label": "Git Clone",
        "data": {"label": "Git Clone", "kind": "git_clone", "repoUrl": "https://github.com/user/repo.git", "branch": "main"},
    }
    assert "start" not in [i["data"]["kind"] for i in items]


def test_templates_round_trip_through_parsers(client):
    templates = client.get("/api/templates").json()
    for dialect in ("yaml", "shell"):
        stages = client.post("/api/parse", json={"script": templates[dialect], "dialect": dialect}).json()["stages"]
        assert [s["kind"] for s in stages][-3:] == ["prebuild_node", "run_tests", "build_npm"]
