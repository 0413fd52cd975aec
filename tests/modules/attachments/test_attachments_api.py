"""Tests for the attachments API (list, upload, metadata, download, delete)."""

from httpx import AsyncClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.config import settings
from src.core.storage import LocalBlobStore
from src.modules.bookmarks.models import Bookmark


class TestAttachmentEndpoints:
    """Tests for attachment API endpoints."""

    async def _upload(self, client: AsyncClient, bookmark_id: int, name: str, body: bytes, content_type: str):
        return await client.post(
            f"/api/attachments/bookmark/{bookmark_id}",
            files={"file": (name, body, content_type)},
        )

    async def test_upload_attachment_image(self, client: AsyncClient, bookmark: Bookmark, storage_tmp_path):
        """POST /attachments/bookmark/{id} with image returns 201 and the attachment."""
        image_content = b"\xff\xd8\xff fake jpeg"
        response = await self._upload(client, bookmark.id, "proof.jpg", image_content, "image/jpeg")

        assert response.status_code == 201
        data = response.json()
        assert data["id"] is not None
        assert data["bookmark_id"] == bookmark.id
        assert data["original_name"] == "proof.jpg"
        assert data["file_type"] == "image/jpeg"
        assert data["file_size"] == len(image_content)
        assert data["created_at"]
        assert (storage_tmp_path / data["filename"]).read_bytes() == image_content

    async def test_upload_without_file(self, client: AsyncClient, bookmark: Bookmark, storage_tmp_path):
        response = await client.post(
            f"/api/attachments/bookmark/{bookmark.id}",
            data={"note": "no file here"},
        )

        assert response.status_code == 400
        assert response.json()["success"] is False
        assert response.json()["message"] == "No file uploaded"

    async def test_upload_blank_filename(self, client: AsyncClient, bookmark: Bookmark, storage_tmp_path):
        """Browser form submitted with no file chosen."""
        response = await client.post(
            f"/api/attachments/bookmark/{bookmark.id}",
            files={"file": ("", b"abc", "image/png")},
        )

        assert response.status_code == 400
        assert response.json()["message"] == "No file uploaded"
        assert list(storage_tmp_path.iterdir()) == []

    async def test_upload_text_field_instead_of_file(
        self, client: AsyncClient, bookmark: Bookmark, storage_tmp_path
    ):
        response = await client.post(
            f"/api/attachments/bookmark/{bookmark.id}",
            data={"file": "not a file"},
            files={"other": ("x.txt", b"x", "text/plain")},
        )

        assert response.status_code == 400
        assert response.json()["message"] == "No file uploaded"
        assert response.json()["errors"][0]["field"] == "file"

    async def test_upload_invalid_type(self, client: AsyncClient, bookmark: Bookmark, storage_tmp_path):
        response = await self._upload(client, bookmark.id, "run.exe", b"MZ", "application/x-msdownload")

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "file"
        assert list(storage_tmp_path.iterdir()) == []

    async def test_upload_too_large(self, client: AsyncClient, bookmark: Bookmark, storage_tmp_path, monkeypatch):
        monkeypatch.setattr(settings, "max_upload_size", 16)

        response = await self._upload(client, bookmark.id, "big.pdf", b"%PDF" + b"x" * 32, "application/pdf")

        assert response.status_code == 400
        listed = await client.get(f"/api/attachments/bookmark/{bookmark.id}")
        assert listed.json() == []

    async def test_upload_missing_bookmark(self, client: AsyncClient, storage_tmp_path):
        response = await self._upload(client, 404404, "a.pdf", b"%PDF", "application/pdf")

        assert response.status_code == 404
        assert "Bookmark" in response.json()["message"]
        assert list(storage_tmp_path.iterdir()) == []

    async def test_list_attachments(self, client: AsyncClient, bookmark: Bookmark, storage_tmp_path):
        first = await self._upload(client, bookmark.id, "one.txt", b"1", "text/plain")
        second = await self._upload(client, bookmark.id, "two.txt", b"2", "text/plain")

        response = await client.get(f"/api/attachments/bookmark/{bookmark.id}")

        assert response.status_code == 200
        assert [a["id"] for a in response.json()] == [second.json()["id"], first.json()["id"]]

    async def test_list_unknown_bookmark(self, client: AsyncClient):
        response = await client.get("/api/attachments/bookmark/777")

        assert response.status_code == 200
        assert response.json() == []

    async def test_get_attachment_info(self, client: AsyncClient, bookmark: Bookmark, storage_tmp_path):
        upload_resp = await self._upload(client, bookmark.id, "x.png", b"\x89PNG", "image/png")
        att_id = upload_resp.json()["id"]

        response = await client.get(f"/api/attachments/{att_id}")

        assert response.status_code == 200
        assert response.json()["original_name"] == "x.png"

    async def test_download_attachment(self, client: AsyncClient, bookmark: Bookmark, storage_tmp_path):
        """GET /attachments/{id}/file returns the uploaded bytes."""
        body = b"\x89PNG fake png"
        upload_resp = await self._upload(client, bookmark.id, "p.png", body, "image/png")
        att_id = upload_resp.json()["id"]

        response = await client.get(f"/api/attachments/{att_id}/file")

        assert response.status_code == 200
        assert response.content == body
        assert response.headers["content-type"] == "image/png"
        assert "p.png" in response.headers["content-disposition"]

    async def test_download_missing_attachment(self, client: AsyncClient):
        response = await client.get("/api/attachments/9999/file")

        assert response.status_code == 404
        assert response.json()["message"] == "Attachment with id=9999 not found"

    async def test_download_missing_file(self, client: AsyncClient, bookmark: Bookmark, storage_tmp_path):
        upload_resp = await self._upload(client, bookmark.id, "gone.pdf", b"%PDF", "application/pdf")
        (storage_tmp_path / upload_resp.json()["filename"]).unlink()

        response = await client.get(f"/api/attachments/{upload_resp.json()['id']}/file")

        assert response.status_code == 404
        assert response.json()["message"] == "File not found"

    async def test_delete_attachment(self, client: AsyncClient, bookmark: Bookmark, storage_tmp_path):
        upload_resp = await self._upload(client, bookmark.id, "d.zip", b"PK\x03\x04", "application/zip")
        att_id = upload_resp.json()["id"]

        response = await client.delete(f"/api/attachments/{att_id}")

        assert response.status_code == 200
        assert response.json() == {"message": "Attachment deleted successfully", "blob_deleted": True}
        assert list(storage_tmp_path.iterdir()) == []
        assert (await client.get(f"/api/attachments/{att_id}/file")).status_code == 404
        listed = await client.get(f"/api/attachments/bookmark/{bookmark.id}")
        assert att_id not in [a["id"] for a in listed.json()]

    async def test_delete_missing_attachment(self, client: AsyncClient):
        response = await client.delete("/api/attachments/31337")

        assert response.status_code == 404

    async def test_health(self, client: AsyncClient):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}


async def _raise_db_error(*args, **kwargs):
    raise OperationalError("SELECT 1", {}, Exception("database is locked"))


async def _raise_disk_full(self, name: str, content: bytes) -> str:
    raise OSError(28, "No space left on device")


class TestAttachmentErrorResponses:
    """Storage failures and malformed requests use the error envelope."""

    async def test_upload_blob_write_error(
        self, client: AsyncClient, bookmark: Bookmark, storage_tmp_path, monkeypatch
    ):
        monkeypatch.setattr(LocalBlobStore, "put", _raise_disk_full)

        response = await client.post(
            f"/api/attachments/bookmark/{bookmark.id}",
            files={"file": ("a.png", b"\x89PNG", "image/png")},
        )

        assert response.status_code == 500
        assert response.json()["success"] is False
        assert response.json()["message"].startswith("Could not store file")

    async def test_list_database_error(
        self, client: AsyncClient, db_session: AsyncSession, bookmark: Bookmark, monkeypatch
    ):
        monkeypatch.setattr(db_session, "execute", _raise_db_error)

        response = await client.get(f"/api/attachments/bookmark/{bookmark.id}")

        assert response.status_code == 500
        assert response.json()["message"].startswith("Could not list attachments")

    async def test_unhandled_database_error(
        self, client: AsyncClient, db_session: AsyncSession, monkeypatch
    ):
        monkeypatch.setattr(settings, "debug", False)
        monkeypatch.setattr(db_session, "execute", _raise_db_error)

        response = await client.get("/api/attachments/1")

        assert response.status_code == 500
        assert response.json()["message"] == "Database error"

    async def test_invalid_path_parameter(self, client: AsyncClient):
        response = await client.get("/api/attachments/bookmark/not-a-number")

        assert response.status_code == 422
        assert response.json()["message"] == "Validation error"
        assert response.json()["errors"][0]["field"] == "bookmark_id"
