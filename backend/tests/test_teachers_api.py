"""
API tests for the teacher admin endpoints, including photo upload end to end.
"""

import io
import re
from unittest.mock import patch

from conftest import FACE_BYTES, PHOTO_PATH_PATTERN
from teacher_admin.core.config import AppConfig, ApplicationConfig, StorageConfig, reset_config
from teacher_admin.services.upload_source import IncomingPhoto

BASE = "/api/v1/teachers"


def _photo(content: bytes = FACE_BYTES, filename: str = "face.png"):
    return {"photo": (filename, io.BytesIO(content), "image/png")}


def _create(client, name="Ana", **kwargs):
    response = client.post(BASE, data={"name": name}, **kwargs)
    assert response.status_code == 201, response.text
    return response.json()["teacher"]


def _stored_files(public_root):
    photo_dir = public_root / "teachers"
    if not photo_dir.exists():
        return []
    return sorted(p for p in photo_dir.iterdir() if p.is_file())


class TestHealthEndpoint:
    """Test health check endpoint."""

    def test_health_check(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestCreateTeacher:
    """POST /teachers"""

    def test_create_with_photo(self, client, public_root):
        response = client.post(BASE, data={"name": "Ana", "email": "ana@example.com"}, files=_photo())

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Teacher created successfully!"
        teacher = body["teacher"]
        assert re.match(PHOTO_PATH_PATTERN, teacher["photo"])
        assert teacher["photo_url"] == f"/storage/{teacher['photo']}"

        files = _stored_files(public_root)
        assert len(files) == 1
        assert files[0].read_bytes() == FACE_BYTES

        served = client.get(teacher["photo_url"])
        assert served.status_code == 200
        assert served.content == FACE_BYTES

    def test_create_without_photo(self, client, public_root):
        teacher = _create(client)

        assert teacher["photo"] is None
        assert teacher["photo_url"] is None
        assert _stored_files(public_root) == []

    def test_create_with_empty_photo(self, client, public_root):
        teacher = _create(client, files=_photo(content=b""))

        assert teacher["photo"] is None
        assert _stored_files(public_root) == []

    def test_create_without_temp_path_still_creates(self, client, public_root):
        with patch.object(IncomingPhoto, "real_path", return_value=""), patch.object(
            IncomingPhoto, "pathname", return_value=""
        ):
            teacher = _create(client, files=_photo())

        assert teacher["photo"] is None
        assert _stored_files(public_root) == []

    def test_staged_upload_is_cleaned_up(self, client, app_env, tmp_path):
        _create(client, files=_photo())

        assert list((tmp_path / "uploads").glob("upload-tmp-*")) == []

    def test_missing_name_is_rejected_with_input(self, client):
        response = client.post(BASE, data={"name": "", "email": "ana@example.com"})

        assert response.status_code == 422
        body = response.json()
        assert "name" in body["detail"]
        assert body["input"]["email"] == "ana@example.com"

    def test_bad_email_is_rejected(self, client):
        response = client.post(BASE, data={"name": "Ana", "email": "not-an-email"})

        assert response.status_code == 422
        assert "email" in response.json()["detail"]

    def test_wrong_photo_type_is_rejected(self, client, public_root):
        response = client.post(BASE, data={"name": "Ana"}, files=_photo(filename="notes.txt"))

        assert response.status_code == 422
        assert "photo" in response.json()["detail"]
        assert _stored_files(public_root) == []

    def test_oversized_photo_is_rejected(self, client):
        big = b"x" * (2 * 1024 * 1024 + 1)

        response = client.post(BASE, data={"name": "Ana"}, files=_photo(content=big))

        assert response.status_code == 422
        assert "photo" in response.json()["detail"]

    def test_duplicate_email_conflicts(self, client):
        client.post(BASE, data={"name": "Ana", "email": "ana@example.com"})

        response = client.post(BASE, data={"name": "Other", "email": "ana@example.com"})

        assert response.status_code == 409


class TestListAndShow:
    """GET /teachers and GET /teachers/{id}"""

    def test_pagination(self, client):
        for i in range(12):
            _create(client, name=f"Teacher {i}")

        first = client.get(BASE).json()
        second = client.get(BASE, params={"page": 2}).json()

        assert first["total"] == 12
        assert first["per_page"] == 10
        assert first["pages"] == 2
        assert len(first["items"]) == 10
        assert first["items"][0]["name"] == "Teacher 11"
        assert len(second["items"]) == 2

    def test_show(self, client):
        teacher = _create(client)

        response = client.get(f"{BASE}/{teacher['id']}")

        assert response.status_code == 200
        assert response.json()["name"] == "Ana"

    def test_show_missing(self, client):
        assert client.get(f"{BASE}/999").status_code == 404


class TestUpdateTeacher:
    """PUT /teachers/{id}"""

    def test_replace_photo_removes_old_file(self, client, public_root):
        teacher = _create(client, files=_photo())
        old_file = public_root / teacher["photo"]
        assert old_file.exists()

        response = client.put(
            f"{BASE}/{teacher['id']}", data={"name": "Ana"}, files=_photo(b"new-bytes!", "new.png")
        )

        assert response.status_code == 200
        updated = response.json()["teacher"]
        assert updated["photo"] != teacher["photo"]
        assert not old_file.exists()
        assert (public_root / updated["photo"]).read_bytes() == b"new-bytes!"
        assert len(_stored_files(public_root)) == 1

    def test_update_without_photo_keeps_it(self, client, public_root):
        teacher = _create(client, files=_photo())

        response = client.put(f"{BASE}/{teacher['id']}", data={"name": "Ana Maria"})

        assert response.status_code == 200
        updated = response.json()["teacher"]
        assert updated["name"] == "Ana Maria"
        assert updated["photo"] == teacher["photo"]
        assert (public_root / teacher["photo"]).exists()

    def test_form_post_updates(self, client):
        teacher = _create(client)

        response = client.post(f"{BASE}/{teacher['id']}", data={"subject": "Math"})

        assert response.status_code == 200
        assert response.json()["teacher"]["subject"] == "Math"

    def test_missing_temp_path_is_reported(self, client, public_root):
        teacher = _create(client, files=_photo())

        with patch.object(IncomingPhoto, "real_path", return_value=""), patch.object(
            IncomingPhoto, "pathname", return_value=""
        ):
            response = client.put(
                f"{BASE}/{teacher['id']}", data={"name": "Changed"}, files=_photo(b"new-bytes!", "new.png")
            )

        assert response.status_code == 422
        body = response.json()
        assert body["detail"]["photo"] == [
            "Failed to upload photo: the upload has no usable temporary location on the server. "
            "Try again or use another file."
        ]
        assert body["input"]["name"] == "Changed"

        unchanged = client.get(f"{BASE}/{teacher['id']}").json()
        assert unchanged["name"] == "Ana"
        assert unchanged["photo"] == teacher["photo"]
        assert (public_root / teacher["photo"]).exists()

    def test_update_missing(self, client):
        assert client.put(f"{BASE}/999", data={"name": "X"}).status_code == 404


class TestDeleteTeacher:
    """DELETE /teachers/{id}"""

    def test_delete_removes_photo_and_record(self, client, public_root):
        teacher = _create(client, files=_photo())
        photo_file = public_root / teacher["photo"]

        response = client.delete(f"{BASE}/{teacher['id']}")

        assert response.status_code == 200
        assert response.json()["message"] == "Teacher deleted successfully!"
        assert not photo_file.exists()
        assert client.get(f"{BASE}/{teacher['id']}").status_code == 404

    def test_delete_when_photo_already_gone(self, client, public_root):
        teacher = _create(client, files=_photo())
        (public_root / teacher["photo"]).unlink()

        response = client.delete(f"{BASE}/{teacher['id']}")

        assert response.status_code == 200
        assert client.get(f"{BASE}/{teacher['id']}").status_code == 404


class TestLocalizedNotices:
    """Notices follow app.locale."""

    def test_indonesian_notice(self, client, app_env):
        reset_config(
            AppConfig(
                storage=StorageConfig(upload_tmp_dir=app_env.storage.upload_tmp_dir),
                app=ApplicationConfig(locale="id"),
            )
        )

        response = client.post(BASE, data={"name": "Budi"})

        assert response.json()["message"] == "Guru berhasil ditambahkan!"
