"""Shared fixtures and fakes for the catalog tests."""

import os
import posixpath
import tempfile
from typing import Iterable, List, Optional, Set, Tuple
from urllib.parse import urlsplit

import pytest

from catalog.clients import SqliteClient
from catalog.errors import DeleteError, UploadError
from catalog.models import ImageFile
from catalog.repositories import ProductRepository

HOST = "https://res.cloudinary.com/demo/image/upload"


class FakeAssetStore:
    """In-memory media service recording every call in order."""

    def __init__(
        self,
        assets: Optional[Set[str]] = None,
        upload_url: Optional[str] = None,
        hostnames: Iterable[str] = ("host", "res.cloudinary.com"),
    ):
        self.assets: Set[str] = set(assets or ())
        self.calls: List[Tuple[str, str]] = []
        self.upload_url = upload_url
        self.hostnames = set(hostnames)
        self.fail_upload = False
        self.fail_delete = False
        self.delete_error: Optional[Exception] = None
        self._version = 100

    def upload(self, content: bytes, content_type: str, filename: str = "") -> str:
        self.calls.append(("upload", filename))
        if self.fail_upload:
            raise UploadError("Image upload failed: service unavailable")

        if self.upload_url:
            return self.upload_url

        self._version += 1
        name = posixpath.splitext(filename)[0] or f"image{self._version}"
        self.assets.add(f"products/{name}")
        return f"{HOST}/v{self._version}/products/{name}.png"

    def delete(self, asset_id: str) -> bool:
        self.calls.append(("delete", asset_id))
        if self.fail_delete:
            raise DeleteError(f"Failed to delete image {asset_id}: timeout")
        if self.delete_error is not None:
            raise self.delete_error
        if asset_id in self.assets:
            self.assets.remove(asset_id)
            return True
        return False

    def hosts(self, url: str) -> bool:
        return urlsplit(url).hostname in self.hostnames

    @property
    def deleted(self) -> List[str]:
        return [target for kind, target in self.calls if kind == "delete"]

    @property
    def uploads(self) -> List[str]:
        return [target for kind, target in self.calls if kind == "upload"]


def make_image(filename: str = "photo.png", content_type: str = "image/png", size: int = 64) -> ImageFile:
    return ImageFile(content=b"\x89PNG" + b"0" * max(size - 4, 0), filename=filename, content_type=content_type)


@pytest.fixture
def temp_db_path():
    """Create a temporary database file for testing."""
    fd, path = tempfile.mkstemp(suffix=".db")
    os.close(fd)
    yield path
    # Cleanup
    if os.path.exists(path):
        os.remove(path)


@pytest.fixture
def sqlite_client(temp_db_path):
    client = SqliteClient(temp_db_path)
    yield client
    client.close()


@pytest.fixture
def repository(sqlite_client):
    return ProductRepository(sqlite_client)


@pytest.fixture
def asset_store():
    return FakeAssetStore()
