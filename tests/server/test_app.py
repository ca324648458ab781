"""Tests for the HTTP interface."""

import hashlib

import pytest
from fastapi.testclient import TestClient
from unittest.mock import patch

from itemcatalog.config import ServerSettings
from itemcatalog.errors import StorageWriteError
from itemcatalog.server.app import create_app


@pytest.fixture
def settings(tmp_path):
    """Create settings pointing at temporary storage."""
    return ServerSettings(
        catalog_path=tmp_path / "items.json",
        images_dir=tmp_path / "images",
        max_upload_bytes=1024,
    )


@pytest.fixture
def client(settings):
    """Create a TestClient with the application started."""
    with TestClient(create_app(settings)) as client:
        yield client


def post_item(client, name="Shoe", category="Fashion", content=b"shoe image", filename="shoe.jpg"):
    files = {"image": (filename, content, "image/jpeg")} if content is not None else None
    return client.post("/items", data={"name": name, "category": category}, files=files)


class TestItemsEndpoints:
    """Test cases for /items."""

    def test_root(self, client):
        """Test the service information endpoint."""
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["service"] == "Item Catalog"

    def test_list_empty(self, client):
        """Test listing before anything was added."""
        response = client.get("/items")
        assert response.status_code == 200
        assert response.json() == {"items": []}

    def test_post_item(self, client):
        """Test submitting an item."""
        response = post_item(client)

        assert response.status_code == 201
        assert response.json() == {"message": "item received: Shoe"}

        items = client.get("/items").json()["items"]
        assert len(items) == 1
        assert items[0]["name"] == "Shoe"
        assert items[0]["category"] == "Fashion"
        assert items[0]["image_name"] == hashlib.sha256(b"shoe image").hexdigest() + ".jpg"

    def test_post_without_image(self, client):
        """Test a submission without an image is rejected."""
        response = post_item(client, content=None)

        assert response.status_code == 400
        assert "image" in response.json()["detail"]
        assert client.get("/items").json() == {"items": []}

    def test_post_image_too_large(self, client):
        """Test oversized uploads are rejected."""
        response = post_item(client, content=b"x" * 1025)
        assert response.status_code == 413

    @pytest.mark.parametrize("filename", ["shoe.jpg-2", "shoe.jpég"])
    def test_post_unusual_extension(self, client, filename):
        """Test the extension of the uploaded filename is kept as-is."""
        response = post_item(client, filename=filename)
        assert response.status_code == 201

        image_name = client.get("/items").json()["items"][0]["image_name"]
        assert image_name.endswith(filename[len("shoe"):])
        assert client.get(f"/images/{image_name}").content == b"shoe image"

    def test_post_empty_name(self, client):
        """Test submissions with an empty name are accepted."""
        response = post_item(client, name="")

        assert response.status_code == 201
        assert client.get("/items").json()["items"][0]["name"] == ""

    def test_post_image_optional(self, settings):
        """Test submissions without an image when images are optional."""
        settings.require_image = False
        with TestClient(create_app(settings)) as client:
            response = post_item(client, content=None)
            assert response.status_code == 201
            assert "image_name" not in client.get("/items").json()["items"][0]

    def test_get_item(self, client):
        """Test fetching one item by id."""
        post_item(client)
        item = client.get("/items").json()["items"][0]

        response = client.get(f"/items/{item['id']}")
        assert response.status_code == 200
        assert response.json() == item

    def test_get_item_not_found(self, client):
        """Test fetching an unknown item."""
        response = client.get("/items/nonexistent")
        assert response.status_code == 404

    def test_storage_failure(self, client, settings):
        """Test storage failures are reported as 500."""
        settings.catalog_path.write_text("{broken", encoding="utf-8")

        assert client.get("/items").status_code == 500
        assert client.get("/search", params={"keyword": "Shoe"}).status_code == 500
        assert post_item(client).status_code == 500

    def test_write_failure(self, client):
        """Test write failures are reported as 500."""
        with patch(
            "itemcatalog.store.document.write_bytes_atomic",
            side_effect=OSError("disk full"),
        ):
            response = post_item(client)

        assert response.status_code == 500
        assert response.json() == {"detail": "storage failure"}


class TestSearchEndpoint:
    """Test cases for /search."""

    @pytest.fixture
    def populated(self, client):
        """Client with the Shoe and Book items."""
        post_item(client, "Shoe", "Fashion", b"shoe")
        post_item(client, "Book", "Media", b"book")
        return client

    def test_search_match(self, populated):
        """Test a keyword matching one item."""
        response = populated.get("/search", params={"keyword": "Sho"})
        assert response.status_code == 200
        assert [item["name"] for item in response.json()["items"]] == ["Shoe"]

    def test_search_no_match(self, populated):
        """Test a keyword matching nothing."""
        response = populated.get("/search", params={"keyword": "xyz"})
        assert response.status_code == 200
        assert response.json() == {"items": []}

    @pytest.mark.parametrize("params", [{}, {"keyword": ""}])
    def test_search_missing_keyword(self, populated, params):
        """Test a missing or empty keyword is rejected."""
        response = populated.get("/search", params=params)
        assert response.status_code == 400


class TestImagesEndpoint:
    """Test cases for /images."""

    def test_get_image(self, client):
        """Test stored images are served with a guessed media type."""
        post_item(client, content=b"jpeg bytes")
        image_name = client.get("/items").json()["items"][0]["image_name"]

        response = client.get(f"/images/{image_name}")
        assert response.status_code == 200
        assert response.content == b"jpeg bytes"
        assert response.headers["content-type"] == "image/jpeg"

    def test_get_missing_image(self, client):
        """Test unknown images return 404."""
        response = client.get(f"/images/{'0' * 64}.jpg")
        assert response.status_code == 404


class TestDatabaseBackend:
    """Run the HTTP interface on the relational backend."""

    def test_post_and_search(self, tmp_path):
        """Test items submitted over HTTP are stored in the database."""
        settings = ServerSettings(
            storage_backend="database",
            database_url=f"sqlite:///{tmp_path / 'catalog.db'}",
            images_dir=tmp_path / "images",
        )
        with TestClient(create_app(settings)) as client:
            assert post_item(client).status_code == 201

        with TestClient(create_app(settings)) as client:
            response = client.get("/search", params={"keyword": "Fash"})
            assert [item["name"] for item in response.json()["items"]] == ["Shoe"]

    def test_write_failure_leaves_nothing(self, tmp_path):
        """Test a failing database write is reported and rolled back."""
        settings = ServerSettings(
            storage_backend="database",
            database_url=f"sqlite:///{tmp_path / 'catalog.db'}",
            images_dir=tmp_path / "images",
        )
        with TestClient(create_app(settings)) as client:
            with patch(
                "itemcatalog.store.relational.DatabaseCatalogStore._replace",
                side_effect=StorageWriteError("disk full"),
            ):
                assert post_item(client).status_code == 500
            assert client.get("/items").json() == {"items": []}
