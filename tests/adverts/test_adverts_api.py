"""
Tests d'intégration pour les endpoints des annonces.
"""
import re

import pytest
from fastapi import status
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from haggle.adverts.models import Advert
from haggle.users.models import User
from tests.conftest import PNG_BYTES

pytestmark = pytest.mark.asyncio


async def _count_adverts(db_session: AsyncSession) -> int:
    return (await db_session.execute(select(func.count(Advert.id)))).scalar_one()


async def _publish(test_client: AsyncClient, headers, form, files):
    return await test_client.post("/adverts", data=form, files=files, headers=headers)


# --- Publication (POST /adverts) ---

async def test_alice_registers_publishes_and_fetches(test_client: AsyncClient, image_storage, advert_form, image_file):
    registered = await test_client.post(
        "/users", json={"name": "alice", "email": "alice@example.com", "password": "password1"}
    )
    assert registered.status_code == status.HTTP_201_CREATED
    user_id = registered.json()["userId"]
    token = registered.json()["accessToken"]
    assert re.fullmatch(r"[0-9a-f]{256}", token)

    published = await _publish(test_client, {"Authorization": token}, advert_form, image_file)
    assert published.status_code == status.HTTP_201_CREATED
    body = published.json()
    assert body["created"] is True
    assert body["linked"] is True
    ad_id = body["adId"]

    fetched = await test_client.get(f"/adverts/{ad_id}")
    assert fetched.status_code == status.HTTP_200_OK
    advert = fetched.json()
    assert advert["seller"] == user_id
    assert advert["title"] == "Lampe"
    assert advert["price"] == 120
    assert advert["currency"] == "SEK"
    assert advert["sold"] is False
    assert advert["delivery"] == ["Pick up"]
    assert advert["imageUrl"] == "https://images.test/img-1.png"
    assert advert["imageId"] == "img-1"
    assert advert["publishedDate"]
    assert len(image_storage.uploads) == 1

    seller_adverts = await test_client.get("/users/current/adverts", headers={"Authorization": token})
    assert seller_adverts.status_code == status.HTTP_200_OK
    assert seller_adverts.json()["advertIds"] == [ad_id]
    assert seller_adverts.json()["relinked"] == []


async def test_publish_without_token_creates_nothing(
    test_client: AsyncClient, db_session: AsyncSession, image_storage, advert_form, image_file
):
    response = await _publish(test_client, {}, advert_form, image_file)
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["authorized"] is False
    assert image_storage.uploads == []
    assert await _count_adverts(db_session) == 0


async def test_publish_with_unknown_token_creates_nothing(
    test_client: AsyncClient, db_session: AsyncSession, test_user: User, image_storage, advert_form, image_file
):
    response = await _publish(test_client, {"Authorization": "f" * 256}, advert_form, image_file)
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert image_storage.uploads == []
    assert await _count_adverts(db_session) == 0


async def test_publish_upload_failure_leaves_count_unchanged(
    test_client: AsyncClient, db_session: AsyncSession, auth_headers, image_storage, advert_form, image_file
):
    image_storage.fail_upload = True
    response = await _publish(test_client, auth_headers, advert_form, image_file)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    body = response.json()
    assert body["created"] is False
    assert body["uploadFailed"] is True
    assert await _count_adverts(db_session) == 0


@pytest.mark.parametrize(
    "override, field",
    [
        ({"price": "0"}, "price"),
        ({"price": "10001"}, "price"),
        ({"title": "Lam"}, "title"),
        ({"description": "abc"}, "description"),
        ({"category": "Books"}, "category"),
        ({"condition": "Broken"}, "condition"),
        ({"delivery": ["Teleport"]}, "delivery.0"),
        ({"title": None}, "title"),
    ],
)
async def test_publish_invalid_fields_does_not_upload(
    test_client: AsyncClient,
    db_session: AsyncSession,
    auth_headers,
    image_storage,
    advert_form,
    image_file,
    override,
    field,
):
    form = {**advert_form, **override}
    form = {key: value for key, value in form.items() if value is not None}
    response = await _publish(test_client, auth_headers, form, image_file)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    body = response.json()
    assert body["created"] is False
    assert field in body["errors"]
    assert image_storage.uploads == []
    assert await _count_adverts(db_session) == 0


async def test_publish_without_delivery_is_rejected(test_client: AsyncClient, auth_headers, advert_form, image_file):
    form = {key: value for key, value in advert_form.items() if key != "delivery"}
    response = await _publish(test_client, auth_headers, form, image_file)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "delivery" in response.json()["errors"]


async def test_publish_without_image_is_rejected(test_client: AsyncClient, auth_headers, image_storage, advert_form):
    response = await test_client.post("/adverts", data=advert_form, headers=auth_headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    body = response.json()
    assert body["created"] is False
    assert "image" in body["errors"]
    assert image_storage.uploads == []


async def test_publish_rejects_non_image_file(test_client: AsyncClient, auth_headers, image_storage, advert_form):
    files = {"image": ("notes.txt", b"hello", "text/plain")}
    response = await _publish(test_client, auth_headers, advert_form, files)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "image" in response.json()["errors"]
    assert image_storage.uploads == []


async def test_publish_rejects_oversized_image(test_client: AsyncClient, auth_headers, image_storage, advert_form):
    files = {"image": ("big.png", PNG_BYTES * 100, "image/png")}
    response = await _publish(test_client, auth_headers, advert_form, files)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert image_storage.uploads == []


async def test_publish_delivery_comma_separated_is_deduplicated(
    test_client: AsyncClient, auth_headers, advert_form, image_file
):
    form = {**advert_form, "delivery": "Pick up, Ship, Pick up", "currency": "eur"}
    response = await _publish(test_client, auth_headers, form, image_file)
    assert response.status_code == status.HTTP_201_CREATED

    advert = (await test_client.get(f"/adverts/{response.json()['adId']}")).json()
    assert advert["delivery"] == ["Pick up", "Ship"]
    assert advert["currency"] == "EUR"


async def test_publish_with_bearer_prefix(test_client: AsyncClient, test_user: User, advert_form, image_file):
    headers = {"Authorization": f"Bearer {test_user.access_token}"}
    response = await _publish(test_client, headers, advert_form, image_file)
    assert response.status_code == status.HTTP_201_CREATED


# --- Lecture (GET /adverts, GET /adverts/{id}) ---

async def test_list_adverts_spans_batches_in_id_order(test_client: AsyncClient, auth_headers, advert_form, image_file):
    ad_ids = []
    for _ in range(3):
        response = await _publish(test_client, auth_headers, advert_form, image_file)
        ad_ids.append(response.json()["adId"])

    response = await test_client.get("/adverts")
    assert response.status_code == status.HTTP_200_OK
    assert [advert["id"] for advert in response.json()] == sorted(ad_ids)


async def test_list_adverts_empty(test_client: AsyncClient):
    response = await test_client.get("/adverts")
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == []


async def test_get_advert_repeated_reads_are_identical(test_client: AsyncClient, auth_headers, advert_form, image_file):
    ad_id = (await _publish(test_client, auth_headers, advert_form, image_file)).json()["adId"]
    first = await test_client.get(f"/adverts/{ad_id}")
    second = await test_client.get(f"/adverts/{ad_id}")
    assert first.content == second.content


async def test_get_advert_not_found(test_client: AsyncClient):
    response = await test_client.get("/adverts/999")
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["notFound"] is True


@pytest.mark.parametrize("raw_id", ["not-an-id", "\u00b2", "\u0661", "0", "9" * 30, str(2**63)])
async def test_get_advert_malformed_id(test_client: AsyncClient, raw_id):
    response = await test_client.get(f"/adverts/{raw_id}")
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "advertId" in response.json()["errors"]


async def test_get_advert_largest_id_is_not_found(test_client: AsyncClient):
    response = await test_client.get(f"/adverts/{2**63 - 1}")
    assert response.status_code == status.HTTP_404_NOT_FOUND


# --- Annonces du vendeur (GET /users/current/adverts) ---

async def test_seller_adverts_relinks_missing_index_entries(
    test_client: AsyncClient, db_session: AsyncSession, test_user: User, auth_headers
):
    # Annonce écrite sans passer par la publication : absente de l'index
    advert = Advert(
        title="Chaise en rotin",
        description="Chaise des années 70",
        price=450,
        image_url="https://images.test/chaise.png",
        image_id="chaise",
        condition="Used",
        category="Furniture",
        delivery=["Pick up"],
        seller=test_user.id,
    )
    db_session.add(advert)
    await db_session.commit()
    await db_session.refresh(advert)

    response = await test_client.get("/users/current/adverts", headers=auth_headers)
    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert [item["id"] for item in body["adverts"]] == [advert.id]
    assert body["relinked"] == [advert.id]
    assert body["advertIds"] == [advert.id]

    again = await test_client.get("/users/current/adverts", headers=auth_headers)
    assert again.json()["relinked"] == []


async def test_seller_adverts_requires_token(test_client: AsyncClient):
    response = await test_client.get("/users/current/adverts")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
