from pathlib import Path

from fastapi.testclient import TestClient

from modrewrite.main import app


def _client() -> TestClient:
    return TestClient(app)


def test_api_status() -> None:
    resp = _client().get("/api-status")

    assert resp.status_code == 200
    assert "running" in resp.json()["message"]


def test_transform_source() -> None:
    resp = _client().post("/api/transform", json={"source": 'import "a";\n'})

    assert resp.status_code == 200
    assert resp.json() == {"code": 'require("a");\n'}


def test_transform_source_unsupported_syntax_is_422() -> None:
    resp = _client().post("/api/transform", json={"source": 'import d, { a } from "m";'})

    assert resp.status_code == 422
    assert "default+named" in resp.json()["detail"]


def test_transform_source_parse_error_is_422() -> None:
    resp = _client().post("/api/transform", json={"source": "export {"})

    assert resp.status_code == 422


def test_get_transformed_file(tmp_path: Path) -> None:
    js = tmp_path / "mod.js"
    js.write_text("export default 1;\n", encoding="utf-8")

    resp = _client().get(f"/api/files/transformed?path={js}")

    assert resp.status_code == 200
    assert resp.text == "module.exports = 1;\n"
    assert resp.headers["content-type"].startswith("text/plain")
    # Never written back.
    assert js.read_text(encoding="utf-8") == "export default 1;\n"


def test_get_transformed_file_not_found(tmp_path: Path) -> None:
    resp = _client().get(f"/api/files/transformed?path={tmp_path / 'missing.js'}")

    assert resp.status_code == 404
    assert resp.json()["detail"] == "File not found"


def test_get_transformed_file_directory_is_400(tmp_path: Path) -> None:
    resp = _client().get(f"/api/files/transformed?path={tmp_path}")

    assert resp.status_code == 400


def test_transform_directory(tmp_path: Path) -> None:
    root = tmp_path / "repo"
    root.mkdir()
    (root / ".git").mkdir()
    (root / "ok.js").write_text('import "x";\n', encoding="utf-8")
    (root / "broken.js").write_text("export interface I {}\n", encoding="utf-8")
    out_dir = tmp_path / "out"

    resp = _client().post(
        "/api/transform/directory",
        json={"path": str(root), "out_dir": str(out_dir)},
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["transformed"] == 1
    assert body["failed"] == 1
    assert (out_dir / "ok.js").read_text(encoding="utf-8") == 'require("x");\n'


def test_transform_directory_missing_path(tmp_path: Path) -> None:
    resp = _client().post("/api/transform/directory", json={"path": str(tmp_path / "nope")})

    assert resp.status_code == 404
