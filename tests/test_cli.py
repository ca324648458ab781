"""Tests for the command-line interface."""

import json

import pytest
from typer.testing import CliRunner
from unittest.mock import patch

from itemcatalog.cli import app


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def storage_env(monkeypatch, tmp_path):
    """Point the CLI at temporary storage through environment variables."""
    monkeypatch.setenv("ITEMCATALOG_CATALOG_PATH", str(tmp_path / "items.json"))
    monkeypatch.setenv("ITEMCATALOG_IMAGES_DIR", str(tmp_path / "images"))
    return tmp_path


@pytest.fixture
def image_file(tmp_path):
    """Create an image file to upload."""
    path = tmp_path / "shoe.jpg"
    path.write_bytes(b"shoe image")
    return path


def add(runner, *args):
    return runner.invoke(app, ["add", *args])


class TestCli:
    """Test cases for the typer application."""

    def test_add_and_list(self, runner, image_file):
        """Test adding an item and listing it."""
        result = add(runner, "Shoe", "Fashion", "--image", str(image_file))
        assert result.exit_code == 0, result.output

        listing = runner.invoke(app, ["list"])
        assert listing.exit_code == 0
        items = json.loads(listing.stdout)["items"]
        assert [item["name"] for item in items] == ["Shoe"]
        assert items[0]["image_name"].endswith(".jpg")

    def test_add_without_image(self, runner):
        """Test the image is required by default."""
        result = add(runner, "Shoe", "Fashion")
        assert result.exit_code == 1
        assert "image is required" in result.output

    def test_add_without_image_when_optional(self, runner, monkeypatch):
        """Test items without images when the policy allows it."""
        monkeypatch.setenv("ITEMCATALOG_REQUIRE_IMAGE", "false")
        result = add(runner, "Shoe", "Fashion")
        assert result.exit_code == 0, result.output

    def test_get(self, runner, image_file):
        """Test showing an item by id."""
        add(runner, "Shoe", "Fashion", "--image", str(image_file))
        item_id = json.loads(runner.invoke(app, ["list"]).stdout)["items"][0]["id"]

        result = runner.invoke(app, ["get", item_id])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["name"] == "Shoe"

    def test_get_missing(self, runner):
        """Test showing an unknown item fails."""
        result = runner.invoke(app, ["get", "nonexistent"])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_search(self, runner, image_file):
        """Test searching by keyword."""
        add(runner, "Shoe", "Fashion", "--image", str(image_file))

        result = runner.invoke(app, ["search", "Fash"])
        assert result.exit_code == 0
        assert [item["name"] for item in json.loads(result.stdout)["items"]] == ["Shoe"]

    def test_corrupt_catalog(self, runner, storage_env):
        """Test a corrupt catalog document is reported as an error."""
        (storage_env / "items.json").write_text("{broken", encoding="utf-8")

        result = runner.invoke(app, ["list"])
        assert result.exit_code == 1
        assert "invalid catalog document" in result.output

    def test_serve(self, runner):
        """Test serve starts the server."""
        with patch("itemcatalog.cli.run_server") as run_server:
            result = runner.invoke(app, ["serve"])

        assert result.exit_code == 0
        run_server.assert_called_once_with()
