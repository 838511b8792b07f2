"""Tests for the HTTP API."""

import shutil
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from jsonl_editor.config import EditorConfig
from jsonl_editor.jsonl import parse_jsonl, serialize_jsonl
from jsonl_editor.editing import edit_record
from jsonl_editor.server import create_app

FIXTURE_PATH = Path(__file__).parent / "fixtures" / "claude_code_session.jsonl"


@pytest.fixture
def session_dir(tmp_path):
    root = tmp_path / "sessions"
    root.mkdir()
    shutil.copy(FIXTURE_PATH, root / "chat.jsonl")
    (root / "other.jsonl").write_text('{"type":"user","uuid":"u9"}\n', encoding="utf-8")
    return root


def make_client(**kwargs) -> TestClient:
    return TestClient(create_app(EditorConfig(**kwargs)))


class TestUnconfigured:
    """Tests for a server started without --jsonl-path."""

    @pytest.fixture
    def client(self):
        return make_client()

    def test_config_reports_error(self, client):
        response = client.get("/api/config")
        assert response.status_code == 200
        assert response.json() == {"error": "No --jsonl-path specified"}

    def test_list_files_400(self, client):
        response = client.get("/api/files")
        assert response.status_code == 400
        assert "jsonl-path" in response.json()["error"]

    def test_read_file_400(self, client):
        """Test reading without a root is a descriptive 400, not a crash."""
        response = client.get("/api/files/chat.jsonl")
        assert response.status_code == 400
        assert response.json() == {"error": "No --jsonl-path specified"}

    def test_save_file_400(self, client):
        response = client.post("/api/files/chat.jsonl", json={"content": "x\n"})
        assert response.status_code == 400


class TestDirectoryRoot:
    """Tests for a directory root."""

    @pytest.fixture
    def client(self, session_dir):
        return make_client(jsonl_path=session_dir)

    def test_config(self, client, session_dir):
        data = client.get("/api/config").json()

        assert data["jsonlPath"] == str(session_dir)
        assert data["isDirectory"] is True
        assert [f["name"] for f in data["files"]] == ["chat.jsonl", "other.jsonl"]
        assert "filePath" not in data

    def test_list_files(self, client, session_dir):
        data = client.get("/api/files").json()

        assert data["files"][0] == {
            "name": "chat.jsonl",
            "path": str(session_dir / "chat.jsonl"),
            "isFile": True,
        }

    def test_read_file(self, client):
        response = client.get("/api/files/chat.jsonl")

        assert response.status_code == 200
        data = response.json()
        assert data["content"] == FIXTURE_PATH.read_text(encoding="utf-8")
        assert data["filePath"].endswith("chat.jsonl")

    def test_read_missing_file_404(self, client):
        response = client.get("/api/files/missing.jsonl")
        assert response.status_code == 404
        assert "error" in response.json()

    def test_save_creates_backup(self, client, session_dir):
        """Test saving edited content writes the file and a backup of the old one."""
        original = (session_dir / "chat.jsonl").read_text(encoding="utf-8")
        content = client.get("/api/files/chat.jsonl").json()["content"]
        entries = edit_record(parse_jsonl(content).entries, "u1", "edited")
        new_content = serialize_jsonl(entries)

        response = client.post("/api/files/chat.jsonl", json={"content": new_content})

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert (session_dir / "chat.jsonl").read_text(encoding="utf-8") == new_content
        backups = list(session_dir.glob("chat.jsonl.backup.*"))
        assert len(backups) == 1
        assert backups[0].read_text(encoding="utf-8") == original

        reloaded = parse_jsonl(client.get("/api/files/chat.jsonl").json()["content"])
        assert reloaded.messages[0].message["content"] == "edited"

    def test_save_bad_body_400(self, client):
        response = client.post("/api/files/chat.jsonl", json={"text": "x"})
        assert response.status_code == 400
        assert "error" in response.json()

    def test_save_write_failure_500(self, client, session_dir):
        """Test an I/O failure on write surfaces as a 500 with an error body."""
        (session_dir / "blocked.jsonl").mkdir()

        response = client.post("/api/files/blocked.jsonl", json={"content": "x\n"})

        assert response.status_code == 500
        assert "error" in response.json()
        assert (session_dir / "blocked.jsonl").is_dir()

    def test_save_non_jsonl_400(self, client, session_dir):
        """Test a save cannot create arbitrary files under the root."""
        response = client.post("/api/files/run.sh", json={"content": "echo hi\n"})

        assert response.status_code == 400
        assert "error" in response.json()
        assert not (session_dir / "run.sh").exists()


class TestNoBackup:
    """Tests for --no-backup."""

    def test_save_without_backup(self, session_dir):
        client = make_client(jsonl_path=session_dir, backup=False)
        response = client.post("/api/files/other.jsonl", json={"content": "new\n"})

        assert response.status_code == 200
        assert (session_dir / "other.jsonl").read_text(encoding="utf-8") == "new\n"
        assert list(session_dir.glob("*.backup.*")) == []


class TestFileRoot:
    """Tests for a single-file root."""

    @pytest.fixture
    def client(self, session_dir):
        return make_client(jsonl_path=session_dir / "chat.jsonl")

    def test_config(self, client, session_dir):
        data = client.get("/api/config").json()

        assert data["isDirectory"] is False
        assert data["filePath"] == str(session_dir / "chat.jsonl")
        assert "files" not in data

    def test_list_files(self, client):
        data = client.get("/api/files").json()
        assert [f["name"] for f in data["files"]] == ["chat.jsonl"]

    def test_read_uses_root_file(self, client):
        data = client.get("/api/files/chat.jsonl").json()
        assert parse_jsonl(data["content"]).messages[0].id == "u1"


class TestMissingRoot:
    """Tests for a configured root that does not exist."""

    @pytest.fixture
    def client(self, tmp_path):
        return make_client(jsonl_path=tmp_path / "gone")

    def test_config_404(self, client):
        response = client.get("/api/config")
        assert response.status_code == 404
        assert "Path not found" in response.json()["error"]

    def test_list_files_404(self, client):
        assert client.get("/api/files").status_code == 404


class TestBrowserUI:
    """Tests for the static editor page."""

    def test_index(self):
        response = make_client().get("/")
        assert response.status_code == 200
        assert "JSONL Editor" in response.text

    def test_static_asset(self):
        response = make_client().get("/static/app.js")
        assert response.status_code == 200
        assert "serializeJSONL" in response.text

    def test_id_less_records_are_not_editable(self):
        """Test the page hides edit/delete for records without a uuid."""
        script = make_client().get("/static/app.js").text
        assert "hasUuid(entry.uuid)" in script
