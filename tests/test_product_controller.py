"""HTTP tests for the product API.

Runs the ASGI app in-process with the service wired to a temporary
database and an in-memory media service.
"""

import httpx
import pytest
import pytest_asyncio

from catalog.api import create_app
from catalog.api.dependencies import get_product_service
from catalog.services import ProductService

from conftest import HOST

PRODUCT_FORM = {"name": "Desk Lamp", "description": "Warm light", "price": "19.99"}
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"0" * 32


@pytest.fixture
def service(repository, asset_store):
    return ProductService(repository, asset_store)


@pytest.fixture
def app(service):
    app = create_app()
    app.dependency_overrides[get_product_service] = lambda: service
    yield app
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


async def _create(client, files=None, **overrides):
    data = {**PRODUCT_FORM, **overrides}
    return await client.post("/api/products", data=data, files=files)


class TestProductReadEndpoints:
    """Test health, list and get."""

    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    @pytest.mark.asyncio
    async def test_list_empty(self, client):
        response = await client.get("/api/products")

        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_get_missing_returns_404(self, client):
        response = await client.get("/api/products/42")

        assert response.status_code == 404
        assert "42" in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_get_with_non_integer_id_is_bad_request(self, client):
        response = await client.get("/api/products/abc")

        assert response.status_code == 400


class TestProductCreateEndpoint:
    """Test POST /api/products."""

    @pytest.mark.asyncio
    async def test_create_without_image(self, client):
        response = await _create(client)

        assert response.status_code == 201
        body = response.json()
        assert body["id"] >= 1
        assert body["name"] == "Desk Lamp"
        assert body["price"] == 19.99
        assert body["image"] == ""

        listed = await client.get("/api/products")
        assert [p["id"] for p in listed.json()] == [body["id"]]

    @pytest.mark.asyncio
    async def test_create_with_image_url(self, client, asset_store):
        response = await _create(client, imageUrl="http://external.example/x.png")

        assert response.status_code == 201
        assert response.json()["image"] == "http://external.example/x.png"
        assert asset_store.calls == []

    @pytest.mark.asyncio
    async def test_create_with_image_file(self, client, asset_store):
        response = await _create(client, files={"imageFile": ("lamp.png", PNG_BYTES, "image/png")})

        assert response.status_code == 201
        assert response.json()["image"].endswith("/products/lamp.png")
        assert asset_store.uploads == ["lamp.png"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "overrides",
        [
            {"name": ""},
            {"name": "x" * 101},
            {"description": ""},
            {"description": "x" * 501},
            {"price": "0"},
            {"price": "-3"},
            {"price": "abc"},
            {"imageUrl": "not-a-url"},
        ],
    )
    async def test_create_rejects_invalid_fields(self, client, repository, overrides):
        response = await _create(client, **overrides)

        assert response.status_code == 400
        assert response.json()["detail"]
        assert repository.list_all() == []

    @pytest.mark.asyncio
    async def test_create_rejects_non_image_file(self, client, asset_store):
        response = await _create(client, files={"imageFile": ("notes.txt", b"hello", "text/plain")})

        assert response.status_code == 400
        assert asset_store.calls == []

    @pytest.mark.asyncio
    async def test_create_upload_failure_is_bad_gateway(self, client, asset_store, repository):
        asset_store.fail_upload = True

        response = await _create(client, files={"imageFile": ("lamp.png", PNG_BYTES, "image/png")})

        assert response.status_code == 502
        assert repository.list_all() == []


class TestProductUpdateEndpoint:
    """Test PUT /api/products/{id}."""

    @pytest.mark.asyncio
    async def test_update_fields_keeps_image(self, client, asset_store):
        created = (await _create(client, imageUrl="http://external.example/x.png")).json()

        response = await client.put(
            f"/api/products/{created['id']}",
            data={**PRODUCT_FORM, "name": "Desk Lamp XL", "price": "24.5"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["id"] == created["id"]
        assert body["name"] == "Desk Lamp XL"
        assert body["price"] == 24.5
        assert body["image"] == "http://external.example/x.png"
        assert asset_store.calls == []

    @pytest.mark.asyncio
    async def test_remove_image(self, client, asset_store):
        created = (await _create(client, files={"imageFile": ("lamp.png", PNG_BYTES, "image/png")})).json()

        response = await client.put(
            f"/api/products/{created['id']}",
            data={**PRODUCT_FORM, "removeImage": "true", "imageUrl": "http://external.example/x.png"},
        )

        assert response.status_code == 200
        assert response.json()["image"] == ""
        assert asset_store.deleted == ["products/lamp"]

    @pytest.mark.asyncio
    async def test_replace_with_file(self, client, asset_store):
        created = (await _create(client, files={"imageFile": ("old.png", PNG_BYTES, "image/png")})).json()

        response = await client.put(
            f"/api/products/{created['id']}",
            data=PRODUCT_FORM,
            files={"imageFile": ("new.png", PNG_BYTES, "image/png")},
        )

        assert response.status_code == 200
        assert response.json()["image"].endswith("/products/new.png")
        assert asset_store.calls[-2:] == [("upload", "new.png"), ("delete", "products/old")]

    @pytest.mark.asyncio
    async def test_update_missing_product(self, client, asset_store):
        response = await client.put(
            "/api/products/999",
            data=PRODUCT_FORM,
            files={"imageFile": ("new.png", PNG_BYTES, "image/png")},
        )

        assert response.status_code == 404
        assert asset_store.calls == []

    @pytest.mark.asyncio
    async def test_upload_failure_keeps_stored_product(self, client, asset_store):
        created = (await _create(client, imageUrl=f"{HOST}/v1/products/keep.png")).json()
        asset_store.fail_upload = True

        response = await client.put(
            f"/api/products/{created['id']}",
            data={**PRODUCT_FORM, "name": "Changed"},
            files={"imageFile": ("new.png", PNG_BYTES, "image/png")},
        )

        assert response.status_code == 502
        stored = (await client.get(f"/api/products/{created['id']}")).json()
        assert stored == created

    @pytest.mark.asyncio
    async def test_cleanup_failure_is_not_reported(self, client, asset_store):
        created = (await _create(client, files={"imageFile": ("old.png", PNG_BYTES, "image/png")})).json()
        asset_store.fail_delete = True

        response = await client.put(
            f"/api/products/{created['id']}",
            data=PRODUCT_FORM,
            files={"imageFile": ("new.png", PNG_BYTES, "image/png")},
        )

        assert response.status_code == 200
        assert response.json()["image"].endswith("/products/new.png")

    @pytest.mark.asyncio
    async def test_update_rejects_invalid_fields(self, client):
        created = (await _create(client)).json()

        response = await client.put(f"/api/products/{created['id']}", data={**PRODUCT_FORM, "price": "0"})

        assert response.status_code == 400
        stored = (await client.get(f"/api/products/{created['id']}")).json()
        assert stored["price"] == 19.99


class TestProductDeleteEndpoint:
    """Test DELETE /api/products/{id}."""

    @pytest.mark.asyncio
    async def test_delete_then_get(self, client):
        created = (await _create(client)).json()

        response = await client.delete(f"/api/products/{created['id']}")
        assert response.status_code == 204

        missing = await client.get(f"/api/products/{created['id']}")
        assert missing.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_missing(self, client):
        response = await client.delete("/api/products/7")

        assert response.status_code == 404
