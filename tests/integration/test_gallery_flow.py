"""
End-to-end gallery flows through the HTTP application.

Exercises login, upload, listing, editing, image delivery and deletion against
real DuckDB and local blob stores.
"""

import pytest
from fastapi.testclient import TestClient

from photogallery.api import create_app
from photogallery.services.auth import SessionAuthService


@pytest.fixture
def session_headers(client, gallery_config):
    response = client.post("/api/login", data={"password": gallery_config.admin_password})
    assert response.status_code == 200
    token = response.headers["set-cookie"].split(";", 1)[0].split("=", 1)[1]
    return {"Cookie": f"session={token}"}


class TestGalleryFlow:
    """Admin workflow from login to delete."""

    def test_sunset_scenario(self, client, session_headers, sample_image_data):
        # Upload
        response = client.post(
            "/api/photos",
            files={"file": ("sunset.jpg", sample_image_data, "image/jpeg")},
            data={"title": "Sunset"},
            headers=session_headers,
        )
        assert response.status_code == 201
        photo_id = response.json()["photoId"]
        file_name = response.json()["metadata"]["fileName"]
        assert file_name == f"{photo_id}.jpg"

        # Listing shows the new photo
        photos = client.get("/api/photos").json()
        assert [photo["id"] for photo in photos] == [photo_id]
        assert photos[0]["title"] == "Sunset"
        assert photos[0]["originalName"] == "sunset.jpg"

        # The image is served with the resize hints
        image = client.get(f"/images/originals/{file_name}", params={"size": "thumbnail"})
        assert image.status_code == 200
        assert image.content == sample_image_data
        assert image.headers["cf-image-width"] == "300"

        # Edit
        response = client.put(
            f"/api/photos/{photo_id}",
            json={"description": "Over the bay"},
            headers=session_headers,
        )
        assert response.status_code == 200
        listed = client.get("/api/photos").json()[0]
        assert listed["title"] == "Sunset"
        assert listed["description"] == "Over the bay"
        assert listed["updatedAt"] > listed["uploadedAt"]

        # Delete
        response = client.delete(f"/api/photos/{photo_id}", headers=session_headers)
        assert response.status_code == 200
        assert client.get("/api/photos").json() == []
        assert client.get(f"/images/originals/{file_name}").status_code == 404
        assert client.put(f"/api/photos/{photo_id}", json={"title": "x"}, headers=session_headers).status_code == 404

    def test_newest_upload_listed_first(self, client, session_headers, sample_image_data):
        ids = []
        for name in ("a.jpg", "b.png", "c.gif"):
            response = client.post(
                "/api/photos",
                files={"file": (name, sample_image_data, "application/octet-stream")},
                headers=session_headers,
            )
            ids.append(response.json()["photoId"])

        listed = client.get("/api/photos").json()

        assert [photo["id"] for photo in listed] == list(reversed(ids))
        assert [photo["title"] for photo in listed] == ["c.gif", "b.png", "a.jpg"]

    def test_successive_edits_move_updated_at_forward(self, client, session_headers, sample_image_data):
        response = client.post(
            "/api/photos",
            files={"file": ("a.jpg", sample_image_data, "image/jpeg")},
            headers=session_headers,
        )
        photo_id = response.json()["photoId"]

        stamps = []
        for title in ("one", "two", "three"):
            body = client.put(f"/api/photos/{photo_id}", json={"title": title}, headers=session_headers).json()
            stamps.append(body["metadata"]["updatedAt"])

        assert stamps == sorted(stamps)
        assert len(set(stamps)) == 3

    def test_logout_then_mutation_is_rejected_without_cookie(self, client, session_headers, sample_image_data):
        assert client.post("/api/logout", headers=session_headers).status_code == 200

        response = client.post(
            "/api/photos",
            files={"file": ("a.jpg", sample_image_data, "image/jpeg")},
        )

        assert response.status_code == 401
        assert client.get("/api/photos").json() == []

    def test_session_from_another_instance_is_rejected(
        self, gallery_config, photo_service, test_data_factory, tmp_path, sample_image_data
    ):
        other_auth = SessionAuthService(test_data_factory.create_config(tmp_path, session_secret="another-secret"))
        app = create_app(gallery_config, photo_service=photo_service, auth_service=SessionAuthService(gallery_config))
        foreign = {"Cookie": f"session={other_auth.issue_token().value}"}

        with TestClient(app) as test_client:
            response = test_client.post(
                "/api/photos",
                files={"file": ("a.jpg", sample_image_data, "image/jpeg")},
                headers=foreign,
            )

        assert response.status_code == 401
