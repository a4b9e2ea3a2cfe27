"""
Public application form tests
"""
import pytest
from httpx import AsyncClient

from questhire.core.config import settings

API = settings.api_prefix


def apply_url(job_id: str) -> str:
    return f"{API}/public/jobs/{job_id}/apply"


@pytest.mark.asyncio
async def test_apply_creates_new_application(client: AsyncClient, factory, agency):
    job = await factory.create_job()

    response = await client.post(
        apply_url(job["id"]),
        json={
            "full_name": "Alan Turing",
            "email": "alan@example.com",
            "tags": ["python"],
            "message": "I like machines",
            "source_metadata": {"utm_source": "newsletter"},
        },
        headers={settings.tenant_header: "", settings.user_header: ""},
    )
    assert response.status_code == 200
    application = response.json()["data"]
    assert application["status"] == "NEW"
    assert application["job_id"] == job["id"]
    assert application["agency_id"] == agency["id"]
    assert application["note"] == "I like machines"
    assert application["source"] == "public_form"
    assert application["source_metadata"] == {"utm_source": "newsletter"}
    assert application["candidate_id"]


@pytest.mark.asyncio
async def test_apply_to_inactive_job(client: AsyncClient, factory, agency):
    job = await factory.create_job(status="DRAFT")
    response = await client.post(apply_url(job["id"]), json={"full_name": "Someone"})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_apply_to_unknown_job(client: AsyncClient):
    response = await client.post(apply_url("missing"), json={"full_name": "Someone"})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_apply_twice_with_same_email(client: AsyncClient, factory, agency):
    job = await factory.create_job()
    await factory.apply(job["id"], email="twice@example.com")

    response = await client.post(
        apply_url(job["id"]),
        json={"full_name": "Again", "email": "Twice@Example.com"},
    )
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_apply_requires_name(client: AsyncClient, factory, agency):
    job = await factory.create_job()
    response = await client.post(apply_url(job["id"]), json={"email": "x@example.com"})
    assert response.status_code == 422
    assert "errors" in response.json()["data"]


@pytest.mark.asyncio
async def test_repeat_candidate_profile_is_merged(client: AsyncClient, factory, agency):
    first = await factory.apply(full_name="Linus", email="linus@example.com", tags=["c"])
    second = await factory.apply(
        full_name="Linus T.",
        email="linus@example.com",
        location="Portland",
        tags=["git", "c"],
    )
    assert first["candidate_id"] == second["candidate_id"]

    response = await client.get(f"{API}/candidates/{first['candidate_id']}")
    candidate = response.json()["data"]
    assert candidate["full_name"] == "Linus"
    assert candidate["location"] == "Portland"
    assert candidate["tags"] == ["c", "git"]
