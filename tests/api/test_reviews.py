"""API tests for /api/v1/reviews."""

from httpx import AsyncClient

from udhyogunity.infrastructure.firebase.memory_client import InMemoryFirestoreClient
from tests.factories import docs_under, seed_business, seed_product

OWNER = "owner@shop.com"
BASE = "/api/v1/reviews"


def _body(**overrides) -> dict:
    body = {
        "type": "business",
        "business_id": OWNER,
        "user_id": "u1",
        "user_name": "Asha",
        "rating": 4,
        "comment": "Lovely chai",
    }
    body.update(overrides)
    return body


async def _create(client: AsyncClient, **overrides) -> dict:
    response = await client.post(BASE, json=_body(**overrides))
    assert response.status_code == 201, response.text
    return response.json()


async def test_create_review_returns_201_and_updates_aggregate(
    client: AsyncClient, store: InMemoryFirestoreClient
) -> None:
    seed_business(store, OWNER)
    data = await _create(client)
    assert data["id"]
    assert data["type"] == "business"
    assert data["rating"] == 4.0
    assert data["status"] == "active"
    assert data["created_at"] is not None
    assert store.peek(f"Businesses/{OWNER}")["reviewCount"] == 1


async def test_create_review_out_of_range_rating_returns_400(
    client: AsyncClient, store: InMemoryFirestoreClient
) -> None:
    seed_business(store, OWNER)
    response = await client.post(BASE, json=_body(rating=6))
    assert response.status_code == 400
    assert response.json()["error"] == "VALIDATION_ERROR"
    assert response.json()["details"] == {"field": "rating"}


async def test_create_review_fractional_rating_is_rejected(
    client: AsyncClient, store: InMemoryFirestoreClient
) -> None:
    seed_business(store, OWNER)
    response = await client.post(BASE, json=_body(rating=4.5))
    assert response.status_code == 422
    assert docs_under(store, "Reviews") == []


async def test_create_review_unknown_type_returns_422(client: AsyncClient) -> None:
    response = await client.post(BASE, json=_body(type="shop"))
    assert response.status_code == 422


async def test_create_product_review_for_missing_product_returns_404(
    client: AsyncClient, store: InMemoryFirestoreClient
) -> None:
    seed_business(store, OWNER)
    response = await client.post(BASE, json=_body(type="product", item_id="missing"))
    assert response.status_code == 404
    assert response.json()["error"] == "RESOURCE_NOT_FOUND"


async def test_create_review_storage_failure_returns_503(
    client: AsyncClient, store: InMemoryFirestoreClient
) -> None:
    seed_business(store, OWNER)
    store.fail_on("Businesses", reads=False, writes=True)
    response = await client.post(BASE, json=_body())
    assert response.status_code == 503
    assert response.json()["error"] == "STORAGE_ERROR"


async def test_list_reviews_paginates(client: AsyncClient, store: InMemoryFirestoreClient) -> None:
    seed_business(store, OWNER)
    first = await _create(client, user_id="u1")
    second = await _create(client, user_id="u2", rating=5)

    page = (await client.get(f"{BASE}/business/{OWNER}", params={"page_size": 1})).json()
    assert [r["id"] for r in page["reviews"]] == [second["id"]]
    assert page["next_cursor"] == second["id"]

    page = (await client.get(f"{BASE}/business/{OWNER}", params={"page_size": 1, "cursor": page["next_cursor"]})).json()
    assert [r["id"] for r in page["reviews"]] == [first["id"]]


async def test_list_reviews_unknown_cursor_returns_400(client: AsyncClient) -> None:
    response = await client.get(f"{BASE}/business/{OWNER}", params={"cursor": "nope"})
    assert response.status_code == 400


async def test_product_reviews_require_item_id(client: AsyncClient) -> None:
    response = await client.get(f"{BASE}/product/{OWNER}")
    assert response.status_code == 400
    assert response.json()["details"] == {"field": "item_id"}


async def test_review_stats(client: AsyncClient, store: InMemoryFirestoreClient) -> None:
    seed_business(store, OWNER)
    seed_product(store, OWNER, "p1")
    for user_id, rating in (("u1", 5), ("u2", 4), ("u3", 4)):
        await _create(client, type="product", item_id="p1", user_id=user_id, rating=rating)

    response = await client.get(f"{BASE}/product/{OWNER}/stats", params={"item_id": "p1"})
    assert response.status_code == 200
    stats = response.json()
    assert stats["average_rating"] == 4.3
    assert stats["review_count"] == 3
    assert stats["rating_counts"]["4"] == 2


async def test_review_stats_unreadable_returns_zeros(
    client: AsyncClient, store: InMemoryFirestoreClient
) -> None:
    store.fail_on("Reviews")
    response = await client.get(f"{BASE}/business/{OWNER}/stats")
    assert response.status_code == 200
    assert response.json()["review_count"] == 0


async def test_recalculate(client: AsyncClient, store: InMemoryFirestoreClient) -> None:
    seed_business(store, OWNER, rating=1.0, reviewCount=40)
    store.put(f"Reviews/Businesses/{OWNER}/r1", {"rating": 5})
    store.put(f"Reviews/Businesses/{OWNER}/r2", {"rating": 4})
    response = await client.post(f"{BASE}/business/{OWNER}/recalculate")
    assert response.status_code == 200
    assert response.json() == {"average_rating": 4.5, "review_count": 2}
    assert store.peek(f"Businesses/{OWNER}")["reviewCount"] == 2


async def test_get_update_respond_delete(client: AsyncClient, store: InMemoryFirestoreClient) -> None:
    seed_business(store, OWNER)
    review_id = (await _create(client))["id"]
    url = f"{BASE}/business/{OWNER}/{review_id}"

    assert (await client.get(url)).json()["user_name"] == "Asha"

    response = await client.patch(url, json={"rating": 2, "comment": "Cold chai"})
    assert response.status_code == 200
    assert response.json()["comment"] == "Cold chai"
    assert store.peek(f"Businesses/{OWNER}")["rating"] == 2.0

    response = await client.patch(url, json={"status": "hidden"})
    assert response.status_code == 400

    response = await client.post(f"{url}/response", json={"text": "Sorry, we will do better"})
    assert response.status_code == 200
    assert response.json()["business_response"]["text"] == "Sorry, we will do better"

    response = await client.delete(url)
    assert response.status_code == 204
    assert (await client.get(url)).status_code == 404
    assert store.peek(f"Businesses/{OWNER}")["reviewCount"] == 0


async def test_blank_response_text_returns_400(client: AsyncClient, store: InMemoryFirestoreClient) -> None:
    seed_business(store, OWNER)
    review_id = (await _create(client))["id"]
    response = await client.post(f"{BASE}/business/{OWNER}/{review_id}/response", json={"text": "  "})
    assert response.status_code == 400
