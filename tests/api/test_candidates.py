"""
Candidate API tests
"""
import pytest
from httpx import AsyncClient

from questhire.core.config import settings

API = settings.api_prefix


@pytest.mark.asyncio
async def test_list_and_search_candidates(client: AsyncClient, factory, agency):
    await factory.apply(full_name="Marie Curie", email="marie@example.com")
    await factory.apply(full_name="Pierre Curie", email="pierre@example.com")
    await factory.apply(full_name="Niels Bohr", email="niels@example.com")

    response = await client.get(f"{API}/candidates")
    assert response.status_code == 200
    assert response.json()["data"]["total"] == 3

    response = await client.get(f"{API}/candidates", params={"q": "curie"})
    page = response.json()["data"]
    assert page["total"] == 2
    assert {c["full_name"] for c in page["items"]} == {"Marie Curie", "Pierre Curie"}

    response = await client.get(f"{API}/candidates", params={"page_size": 2, "page": 2})
    page = response.json()["data"]
    assert page["pages"] == 2
    assert len(page["items"]) == 1


@pytest.mark.asyncio
async def test_candidates_are_tenant_scoped(client: AsyncClient, factory, agency):
    application = await factory.apply()
    await factory.create_agency(slug="rival")
    headers = factory.headers(slug="rival")

    response = await client.get(f"{API}/candidates", headers=headers)
    assert response.json()["data"]["total"] == 0

    response = await client.get(f"{API}/candidates/{application['candidate_id']}", headers=headers)
    assert response.status_code == 404
