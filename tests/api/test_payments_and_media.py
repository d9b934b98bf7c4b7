"""API tests for /api/v1/payments and /api/v1/media."""

import hashlib
import hmac
from collections.abc import Iterator

import httpx
import pytest
from httpx import AsyncClient

from udhyogunity.api.v1.dependencies import get_cloudinary_uploader, get_settings_dep
from udhyogunity.core.config import Settings
from udhyogunity.infrastructure.external.media import CloudinaryUploader
from udhyogunity.main import app

SECRET = "rzp_test_secret"


@pytest.fixture
def overrides() -> Iterator[dict]:
    """app.dependency_overrides, cleared after the test."""
    yield app.dependency_overrides
    app.dependency_overrides.clear()


@pytest.fixture
def payments_configured(overrides: dict) -> None:
    overrides[get_settings_dep] = lambda: Settings(database_backend="memory", razorpay_key_secret=SECRET)


async def test_verify_without_secret_returns_503(client: AsyncClient, overrides: dict) -> None:
    overrides[get_settings_dep] = lambda: Settings(database_backend="memory")
    response = await client.post("/api/v1/payments/verify", json={"razorpay_payment_id": "pay_1"})
    assert response.status_code == 503


async def test_verify_signed_settlement(client: AsyncClient, payments_configured: None) -> None:
    signature = hmac.new(SECRET.encode(), b"order_1|pay_1", hashlib.sha256).hexdigest()
    response = await client.post(
        "/api/v1/payments/verify",
        json={"razorpay_payment_id": "pay_1", "razorpay_order_id": "order_1", "razorpay_signature": signature},
    )
    assert response.status_code == 200
    assert response.json() == {"result": "success", "verified": True, "payment_id": "pay_1", "order_id": "order_1"}


async def test_verify_forged_signature_returns_400(client: AsyncClient, payments_configured: None) -> None:
    response = await client.post(
        "/api/v1/payments/verify",
        json={"razorpay_payment_id": "pay_1", "razorpay_order_id": "order_1", "razorpay_signature": "forged"},
    )
    assert response.status_code == 400
    assert response.json()["error"] == "PAYMENT_VERIFICATION_ERROR"


@pytest.mark.parametrize(
    ("payload", "result"),
    [({}, "dismissed"), ({"error": {"code": "BAD_REQUEST_ERROR"}}, "failed")],
)
async def test_verify_non_settlements_are_not_verified(
    client: AsyncClient, payments_configured: None, payload: dict, result: str
) -> None:
    response = await client.post("/api/v1/payments/verify", json=payload)
    assert response.status_code == 200
    assert response.json()["result"] == result
    assert response.json()["verified"] is False


async def test_upload_not_configured_returns_503(client: AsyncClient, overrides: dict) -> None:
    overrides[get_settings_dep] = lambda: Settings(database_backend="memory")
    response = await client.post("/api/v1/media", files={"file": ("tea.jpg", b"jpeg", "image/jpeg")})
    assert response.status_code == 503


async def test_upload_forwards_to_cloudinary(client: AsyncClient, overrides: dict) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={
                "secure_url": "https://res.cloudinary.com/demo/image/upload/v1/products/shop1/tea.jpg",
                "public_id": "products/shop1/tea",
                "original_filename": "tea",
            },
        )

    mock_http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    overrides[get_cloudinary_uploader] = lambda: CloudinaryUploader("demo", "preset", http_client=mock_http)

    response = await client.post(
        "/api/v1/media",
        files={"file": ("tea.jpg", b"jpeg", "image/jpeg")},
        data={"folder": "products/shop1", "public_id": "tea"},
    )
    assert response.status_code == 201
    assert response.json()["folder"] == "products/shop1"
    assert response.json()["file_name"] == "tea"
    await mock_http.aclose()


async def test_upload_cloudinary_error_returns_502(client: AsyncClient, overrides: dict) -> None:
    mock_http = httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(401, text="Unknown API key")))
    overrides[get_cloudinary_uploader] = lambda: CloudinaryUploader("demo", "preset", http_client=mock_http)

    response = await client.post("/api/v1/media", files={"file": ("tea.jpg", b"jpeg", "image/jpeg")})
    assert response.status_code == 502
    assert response.json()["error"] == "UPLOAD_ERROR"
    await mock_http.aclose()
