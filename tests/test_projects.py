"""
Projects editor tests: CRUD through the admin API plus image storage.
Run with: pytest tests/test_projects.py -v
"""

import io
import os

import pytest

from portfolio_admin.core.storage import (
    ImageStorageError, allowed_file, preview_image, save_image,
)

API = "/admin/projects-editor/api/projects"


def _create(client, **fields):
    payload = {"title": "Portfolio Site", "description": "Flask + sqlite"}
    payload.update(fields)
    return client.post(API, json=payload)


def _stored_files(app):
    image_dir = app.config["PROJECT_IMAGE_DIR"]
    if not os.path.isdir(image_dir):
        return []
    return os.listdir(image_dir)


# ---------------------------------------------------------------------------
# Create / list
# ---------------------------------------------------------------------------

def test_create_then_list(auth_client):
    response = _create(auth_client, link="https://example.com")
    assert response.status_code == 201
    body = response.get_json()
    assert body["success"] is True
    assert body["image_url"] is None
    assert "warning" not in body

    projects = auth_client.get(API).get_json()
    assert len(projects) == 1
    assert projects[0]["id"] == body["id"]
    assert projects[0]["title"] == "Portfolio Site"
    assert projects[0]["link"] == "https://example.com"


def test_list_newest_first(auth_client):
    first = _create(auth_client, title="First").get_json()["id"]
    second = _create(auth_client, title="Second").get_json()["id"]

    ids = [p["id"] for p in auth_client.get(API).get_json()]
    assert ids == [second, first]


def test_listing_twice_is_identical(auth_client):
    _create(auth_client)
    assert auth_client.get(API).get_json() == auth_client.get(API).get_json()


def test_empty_link_is_stored_as_null(auth_client):
    project_id = _create(auth_client, link="   ").get_json()["id"]
    assert auth_client.get(f"{API}/{project_id}").get_json()["link"] is None


@pytest.mark.parametrize("fields, message", [
    ({"title": ""}, "Title is required"),
    ({"title": "   "}, "Title is required"),
    ({"description": ""}, "Description is required"),
])
def test_missing_required_field_writes_nothing(auth_client, fields, message):
    response = _create(auth_client, **fields)
    assert response.status_code == 400
    assert response.get_json()["error"] == message
    assert auth_client.get(API).get_json() == []


def test_get_missing_project_is_404(auth_client):
    assert auth_client.get(f"{API}/999").status_code == 404


# ---------------------------------------------------------------------------
# Image uploads
# ---------------------------------------------------------------------------

def test_create_with_image_stores_url(app, auth_client, png_bytes):
    response = auth_client.post(API, data={
        "title": "With image",
        "description": "Has a screenshot",
        "image": (io.BytesIO(png_bytes), "shot.png"),
    }, content_type="multipart/form-data")

    assert response.status_code == 201
    image_url = response.get_json()["image_url"]
    assert image_url.startswith(app.config["PROJECT_IMAGE_BASE_URL"])
    assert image_url.endswith(".png")

    files = _stored_files(app)
    assert len(files) == 1
    assert image_url.endswith(files[0])


def test_unreadable_image_still_saves_project(app, auth_client):
    response = auth_client.post(API, data={
        "title": "Broken image",
        "description": "Upload is not an image",
        "image": (io.BytesIO(b"definitely not a png"), "shot.png"),
    }, content_type="multipart/form-data")

    assert response.status_code == 201
    body = response.get_json()
    assert body["image_url"] is None
    assert "warning" in body

    projects = auth_client.get(API).get_json()
    assert [p["title"] for p in projects] == ["Broken image"]
    assert projects[0]["image_url"] is None
    assert _stored_files(app) == []


def test_update_without_image_keeps_existing(auth_client, png_bytes):
    project_id = auth_client.post(API, data={
        "title": "Keep image",
        "description": "Original",
        "image": (io.BytesIO(png_bytes), "shot.png"),
    }, content_type="multipart/form-data").get_json()["id"]
    original = auth_client.get(f"{API}/{project_id}").get_json()["image_url"]

    response = auth_client.put(f"{API}/{project_id}", json={
        "title": "Keep image", "description": "Edited",
    })
    assert response.status_code == 200

    project = auth_client.get(f"{API}/{project_id}").get_json()
    assert project["description"] == "Edited"
    assert project["image_url"] == original


def test_update_with_new_image_replaces_url(auth_client, png_bytes, make_image):
    project_id = auth_client.post(API, data={
        "title": "Swap image",
        "description": "Original",
        "image": (io.BytesIO(png_bytes), "shot.png"),
    }, content_type="multipart/form-data").get_json()["id"]
    original = auth_client.get(f"{API}/{project_id}").get_json()["image_url"]

    response = auth_client.put(f"{API}/{project_id}", data={
        "title": "Swap image",
        "description": "New picture",
        "image": (io.BytesIO(make_image("JPEG")), "photo.jpg"),
    }, content_type="multipart/form-data")
    assert response.status_code == 200

    updated = auth_client.get(f"{API}/{project_id}").get_json()["image_url"]
    assert updated != original
    assert updated.endswith(".jpg")


def test_unreadable_image_on_update_keeps_prior_image(auth_client, png_bytes):
    project_id = auth_client.post(API, data={
        "title": "Keep on failure",
        "description": "Original",
        "image": (io.BytesIO(png_bytes), "shot.png"),
    }, content_type="multipart/form-data").get_json()["id"]
    original = auth_client.get(f"{API}/{project_id}").get_json()["image_url"]

    response = auth_client.put(f"{API}/{project_id}", data={
        "title": "Keep on failure",
        "description": "Edited",
        "image": (io.BytesIO(b"not an image at all"), "broken.png"),
    }, content_type="multipart/form-data")

    assert response.status_code == 200
    assert "warning" in response.get_json()
    project = auth_client.get(f"{API}/{project_id}").get_json()
    assert project["description"] == "Edited"
    assert project["image_url"] == original


def test_update_missing_project_writes_no_image(app, auth_client, png_bytes):
    response = auth_client.put(f"{API}/999", data={
        "title": "Ghost",
        "description": "Does not exist",
        "image": (io.BytesIO(png_bytes), "shot.png"),
    }, content_type="multipart/form-data")

    assert response.status_code == 404
    assert _stored_files(app) == []


def test_update_validation_and_missing(auth_client):
    project_id = _create(auth_client).get_json()["id"]
    assert auth_client.put(f"{API}/{project_id}", json={
        "title": "", "description": "x",
    }).status_code == 400
    assert auth_client.put(f"{API}/999", json={
        "title": "t", "description": "d",
    }).status_code == 404


# ---------------------------------------------------------------------------
# Delete
# ---------------------------------------------------------------------------

def test_delete_requires_confirmation(auth_client):
    project_id = _create(auth_client).get_json()["id"]

    declined = auth_client.delete(f"{API}/{project_id}")
    assert declined.status_code == 400
    assert len(auth_client.get(API).get_json()) == 1

    confirmed = auth_client.delete(f"{API}/{project_id}", json={"confirm": True})
    assert confirmed.status_code == 200
    assert auth_client.get(API).get_json() == []


def test_delete_missing_project_is_404(auth_client):
    assert auth_client.delete(f"{API}/999", json={"confirm": True}).status_code == 404


# ---------------------------------------------------------------------------
# Preview
# ---------------------------------------------------------------------------

def test_preview_endpoint_bounds_size(app, auth_client, make_image):
    response = auth_client.post("/admin/projects-editor/preview-image", data={
        "image": (io.BytesIO(make_image("PNG", (1000, 500))), "big.png"),
    }, content_type="multipart/form-data")

    assert response.status_code == 200
    body = response.get_json()
    assert body["data_uri"].startswith("data:image/png;base64,")
    assert (body["width"], body["height"]) == (250, 125)
    assert _stored_files(app) == []


def test_preview_without_file_is_400(auth_client):
    response = auth_client.post("/admin/projects-editor/preview-image",
                                data={}, content_type="multipart/form-data")
    assert response.status_code == 400


# ---------------------------------------------------------------------------
# Storage helpers
# ---------------------------------------------------------------------------

def test_allowed_file():
    assert allowed_file("a.PNG")
    assert allowed_file("photo.jpeg")
    assert not allowed_file("notes.txt")
    assert not allowed_file("noextension")
    assert not allowed_file("")


def test_save_image_rejects_unsupported_extension(app, png_bytes):
    with app.app_context():
        with pytest.raises(ImageStorageError):
            save_image(png_bytes, "shot.bmp")


def test_save_image_gives_unique_names(app, png_bytes):
    with app.app_context():
        first = save_image(png_bytes, "same.png")
        second = save_image(png_bytes, "same.png")
    assert first != second
    assert len(_stored_files(app)) == 2


def test_preview_image_small_image_is_not_enlarged(app, make_image):
    with app.app_context():
        preview = preview_image(make_image("GIF", (40, 30)), "tiny.gif")
    assert (preview["width"], preview["height"]) == (40, 30)
