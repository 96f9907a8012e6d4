"""Tests for image upload and deletion."""

from pathlib import Path

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


class TestUpload:
    def test_upload_image(self, client, user_headers, settings):
        resp = client.post(
            "/api/upload/image",
            files={"image": ("logo.png", PNG_BYTES, "image/png")},
            headers=user_headers,
        )
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["filename"].startswith("logo-")
        assert data["filename"].endswith(".png")
        assert data["originalName"] == "logo.png"
        assert data["size"] == len(PNG_BYTES)
        assert data["url"] == f"/uploads/{data['filename']}"
        assert data["fullUrl"] == f"{settings.host}{data['url']}"
        assert (Path(settings.upload_dir) / data["filename"]).read_bytes() == PNG_BYTES

        served = client.get(data["url"])
        assert served.status_code == 200
        assert served.content == PNG_BYTES

    def test_rejects_non_images(self, client, user_headers):
        resp = client.post(
            "/api/upload/image",
            files={"image": ("notes.txt", b"hello", "text/plain")},
            headers=user_headers,
        )
        assert resp.status_code == 400

    def test_rejects_oversized_files(self, client, user_headers, settings):
        resp = client.post(
            "/api/upload/image",
            files={"image": ("big.jpg", b"\xff" * (settings.max_file_size + 1), "image/jpeg")},
            headers=user_headers,
        )
        assert resp.status_code == 400
        assert list(Path(settings.upload_dir).iterdir()) == []

    def test_missing_file(self, client, user_headers):
        assert client.post("/api/upload/image", headers=user_headers).status_code == 400

    def test_requires_auth(self, client):
        resp = client.post("/api/upload/image", files={"image": ("logo.png", PNG_BYTES, "image/png")})
        assert resp.status_code == 401


class TestDelete:
    def test_delete_by_url(self, client, user_headers, settings):
        uploaded = client.post(
            "/api/upload/image",
            files={"image": ("logo.png", PNG_BYTES, "image/png")},
            headers=user_headers,
        ).json()["data"]

        resp = client.post("/api/upload/delete", json={"url": uploaded["fullUrl"]}, headers=user_headers)
        assert resp.status_code == 200
        assert not (Path(settings.upload_dir) / uploaded["filename"]).exists()

    def test_delete_missing_file(self, client, user_headers):
        resp = client.post("/api/upload/delete", json={"url": "/uploads/nope.png"}, headers=user_headers)
        assert resp.status_code == 404

    def test_delete_without_url(self, client, user_headers):
        assert client.post("/api/upload/delete", json={}, headers=user_headers).status_code == 400
