"""
Client feedback on shared shortlists
"""
from datetime import datetime

import pytest
from httpx import AsyncClient

from questhire.core.config import settings
from questhire.models.application import ApplicationStatus
from questhire.services.feedback import blocked_sync_reason, sync_note

API = settings.api_prefix
PUBLIC = {settings.tenant_header: "", settings.user_header: ""}


async def share(client: AsyncClient, job_id: str, application_ids: list) -> str:
    response = await client.post(
        f"{API}/shortlists",
        json={"job_id": job_id, "name": "Client picks", "application_ids": application_ids},
    )
    assert response.status_code == 200, response.text
    return response.json()["data"]["share_token"]


async def send_feedback(client: AsyncClient, token: str, application_id: str, decision: str, **extra):
    return await client.post(
        f"{API}/public/shortlists/{token}/feedback",
        json={"application_id": application_id, "decision": decision, **extra},
        headers=PUBLIC,
    )


async def get_status(client: AsyncClient, application_id: str) -> dict:
    response = await client.get(f"{API}/applications/{application_id}")
    return response.json()["data"]


@pytest.mark.asyncio
async def test_submit_and_read_feedback(client: AsyncClient, factory, agency):
    job = await factory.create_job()
    application = await factory.apply(job["id"])
    token = await share(client, job["id"], [application["id"]])

    response = await send_feedback(client, token, application["id"], "APPROVED", comment="Strong profile")
    assert response.status_code == 200
    body = response.json()["data"]
    assert body["feedback"]["decision"] == "APPROVED"
    assert body["feedback"]["comment"] == "Strong profile"
    assert body["sync"]["synced"] is False

    response = await client.get(f"{API}/public/shortlists/{token}/feedback", headers=PUBLIC)
    assert response.status_code == 200
    feedback = response.json()["data"]["feedback"]
    assert list(feedback) == [application["id"]]
    assert feedback[application["id"]]["decision"] == "APPROVED"

    # sync is off by default
    assert (await get_status(client, application["id"]))["status"] == "NEW"


@pytest.mark.asyncio
async def test_second_submission_replaces_first(client: AsyncClient, factory, agency):
    job = await factory.create_job()
    application = await factory.apply(job["id"])
    token = await share(client, job["id"], [application["id"]])

    await send_feedback(client, token, application["id"], "APPROVED", comment="Maybe")
    response = await send_feedback(client, token, application["id"], "REJECTED")
    assert response.status_code == 200

    response = await client.get(f"{API}/public/shortlists/{token}/feedback", headers=PUBLIC)
    feedback = response.json()["data"]["feedback"]
    assert len(feedback) == 1
    assert feedback[application["id"]]["decision"] == "REJECTED"
    assert feedback[application["id"]]["comment"] is None


@pytest.mark.asyncio
async def test_feedback_for_application_outside_shortlist(client: AsyncClient, factory, agency):
    job = await factory.create_job()
    listed = await factory.apply(job["id"])
    other = await factory.apply(job["id"])
    token = await share(client, job["id"], [listed["id"]])

    response = await send_feedback(client, token, other["id"], "APPROVED")
    assert response.status_code == 400
    assert response.json()["error"] == "Application not found in this shortlist"


@pytest.mark.asyncio
async def test_feedback_unknown_token(client: AsyncClient, factory, agency):
    application = await factory.apply()

    response = await send_feedback(client, "not-a-token", application["id"], "APPROVED")
    assert response.status_code == 404

    response = await client.get(f"{API}/public/shortlists/not-a-token/feedback", headers=PUBLIC)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_feedback_validation(client: AsyncClient, factory, agency):
    job = await factory.create_job()
    application = await factory.apply(job["id"])
    token = await share(client, job["id"], [application["id"]])

    response = await send_feedback(client, token, application["id"], "MAYBE")
    assert response.status_code == 422

    response = await send_feedback(client, token, application["id"], "APPROVED", comment="x" * 1001)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_sync_moves_application_forward(client: AsyncClient, factory, agency, monkeypatch):
    monkeypatch.setattr(settings, "feedback_sync_enabled", True)
    job = await factory.create_job()
    approved = await factory.apply(job["id"])
    rejected = await factory.apply(job["id"])
    token = await share(client, job["id"], [approved["id"], rejected["id"]])

    response = await send_feedback(client, token, approved["id"], "APPROVED")
    assert response.json()["data"]["sync"] == {
        "synced": True,
        "previous_status": "NEW",
        "new_status": "QUALIFIED",
        "reason": "Status updated successfully",
    }
    application = await get_status(client, approved["id"])
    assert application["status"] == "QUALIFIED"
    assert 'Status auto-updated from client feedback on shortlist "Client picks"' in application["note"]

    response = await send_feedback(client, token, rejected["id"], "REJECTED")
    assert response.json()["data"]["sync"]["synced"] is True
    assert (await get_status(client, rejected["id"]))["status"] == "REJECTED"

    response = await client.get(f"{API}/jobs/{job['id']}/activity")
    types = [e["type"] for e in response.json()["data"]["items"]]
    assert types.count("APPLICATION_STATUS_SYNCED_FROM_FEEDBACK") == 2
    assert types.count("CLIENT_FEEDBACK_SUBMITTED") == 2


@pytest.mark.asyncio
async def test_sync_leaves_terminal_and_later_statuses(client: AsyncClient, factory, agency, monkeypatch):
    job = await factory.create_job()
    placed = await factory.apply(job["id"])
    ahead = await factory.apply(job["id"])
    await client.patch(f"{API}/applications/{placed['id']}/status", json={"status": "PLACED"})
    await client.patch(f"{API}/applications/{ahead['id']}/status", json={"status": "QUALIFIED"})
    token = await share(client, job["id"], [placed["id"], ahead["id"]])

    monkeypatch.setattr(settings, "feedback_sync_enabled", True)

    response = await send_feedback(client, token, placed["id"], "REJECTED")
    sync = response.json()["data"]["sync"]
    assert sync["synced"] is False
    assert sync["previous_status"] == "PLACED"
    assert sync["reason"] == "Cannot change status of a placed candidate"
    assert (await get_status(client, placed["id"]))["status"] == "PLACED"

    response = await send_feedback(client, token, ahead["id"], "APPROVED")
    sync = response.json()["data"]["sync"]
    assert sync["synced"] is False
    assert sync["reason"] == "Cannot regress status from QUALIFIED to QUALIFIED"
    assert (await get_status(client, ahead["id"]))["status"] == "QUALIFIED"


def test_blocked_sync_reason():
    assert blocked_sync_reason("NEW", ApplicationStatus.QUALIFIED) is None
    assert blocked_sync_reason("CONTACTED", ApplicationStatus.QUALIFIED) is None
    assert blocked_sync_reason("QUALIFIED", ApplicationStatus.REJECTED) is None
    assert blocked_sync_reason("REJECTED", ApplicationStatus.QUALIFIED) == (
        "Cannot change status of a rejected candidate"
    )
    assert blocked_sync_reason("PLACED", ApplicationStatus.REJECTED) == (
        "Cannot change status of a placed candidate"
    )


def test_sync_note_format():
    at = datetime(2024, 5, 1, 12, 30)
    assert sync_note(None, "Picks", at=at) == (
        'Status auto-updated from client feedback on shortlist "Picks" at 2024-05-01T12:30:00'
    )
    assert sync_note("old", "Picks", at=at).startswith("old\n\n")
