"""
Job API tests
"""
import pytest
from httpx import AsyncClient

from questhire.core.config import settings

API = settings.api_prefix


@pytest.mark.asyncio
async def test_job_crud_flow(client: AsyncClient, factory, agency):
    # Create
    job = await factory.create_job(title="Data Engineer", status="DRAFT")
    assert job["status"] == "DRAFT"
    assert job["agency_id"] == agency["id"]
    job_id = job["id"]

    # Read
    response = await client.get(f"{API}/jobs/{job_id}")
    assert response.status_code == 200
    assert response.json()["data"]["title"] == "Data Engineer"
    assert response.json()["data"]["application_count"] == 0

    # Update
    response = await client.patch(f"{API}/jobs/{job_id}", json={"status": "ACTIVE", "location": "Lyon"})
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["status"] == "ACTIVE"
    assert data["location"] == "Lyon"
    assert data["title"] == "Data Engineer"

    # List
    response = await client.get(f"{API}/jobs")
    assert response.status_code == 200
    page = response.json()["data"]
    assert page["total"] == 1
    assert page["items"][0]["id"] == job_id


@pytest.mark.asyncio
async def test_list_jobs_by_status(client: AsyncClient, factory, agency):
    await factory.create_job(status="ACTIVE")
    await factory.create_job(status="ACTIVE")
    await factory.create_job(status="ARCHIVED")

    response = await client.get(f"{API}/jobs", params={"status": "ACTIVE"})
    assert response.json()["data"]["total"] == 2

    response = await client.get(f"{API}/jobs", params={"status": "ARCHIVED", "page_size": 1})
    page = response.json()["data"]
    assert page["total"] == 1
    assert page["pages"] == 1


@pytest.mark.asyncio
async def test_viewer_cannot_create_job(client: AsyncClient, factory, agency):
    await factory.add_member("viewer-1", "VIEWER")
    response = await client.post(
        f"{API}/jobs",
        json={"title": "Nope"},
        headers=factory.headers(user_id="viewer-1"),
    )
    assert response.status_code == 403

    response = await client.get(f"{API}/jobs", headers=factory.headers(user_id="viewer-1"))
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_job_of_other_agency_is_not_found(client: AsyncClient, factory, agency):
    job = await factory.create_job()
    await factory.create_agency(slug="other")

    response = await client.get(f"{API}/jobs/{job['id']}", headers=factory.headers(slug="other"))
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_job_activity(client: AsyncClient, factory, agency):
    job = await factory.create_job()
    application = await factory.apply(job["id"])
    await client.patch(
        f"{API}/applications/{application['id']}/status",
        json={"status": "CONTACTED"},
    )

    response = await client.get(f"{API}/jobs/{job['id']}/activity")
    assert response.status_code == 200
    types = {e["type"] for e in response.json()["data"]["items"]}
    assert types == {"JOB_CREATED", "APPLICATION_CREATED", "APPLICATION_STATUS_CHANGED"}


@pytest.mark.asyncio
async def test_matching_candidates(client: AsyncClient, factory, agency):
    source_job = await factory.create_job(tags=["sales"])
    await factory.apply(source_job["id"], full_name="Python Dev", email="py@example.com", tags=["Python", "Django"])
    await factory.apply(source_job["id"], full_name="Full Stack", email="fs@example.com", tags=["python", "fastapi"])
    await factory.apply(source_job["id"], full_name="Sales Rep", email="sales@example.com", tags=["sales"])

    target_job = await factory.create_job(tags=["python", "fastapi"])
    # already applied to the target job, must not be suggested
    await factory.apply(target_job["id"], full_name="Applied", email="applied@example.com", tags=["python"])

    response = await client.get(f"{API}/jobs/{target_job['id']}/matching-candidates")
    assert response.status_code == 200
    items = response.json()["data"]["items"]
    assert [c["full_name"] for c in items] == ["Full Stack", "Python Dev"]
    assert items[0]["matched_tags"] == ["python", "fastapi"]
    assert items[1]["matched_tags"] == ["python"]
