"""
Test fixtures

In-memory database per test, an HTTP client bound to the app, and a data
factory that builds agencies, jobs and applications through the API.
"""
from typing import AsyncGenerator, Optional
from dataclasses import dataclass, field

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from questhire.core.config import settings
from questhire.core.database import Base, get_db
from questhire.main import create_app
from questhire.models.application import STATUS_LABELS

API = settings.api_prefix

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


# ========== Data factory ==========

@dataclass
class DataFactory:
    """
    Builds test data through the API

    The first agency created becomes the client's default tenant, acting as
    its owner.
    """
    client: AsyncClient
    owner_id: str = "owner-1"
    slug: Optional[str] = None
    _counter: int = field(default=0, repr=False)

    def _next_id(self) -> str:
        self._counter += 1
        return str(self._counter)

    def headers(self, user_id: Optional[str] = None, slug: Optional[str] = None) -> dict:
        return {
            settings.tenant_header: slug or self.slug or "",
            settings.user_header: user_id or self.owner_id,
        }

    async def create_agency(self, slug: Optional[str] = None, owner_id: Optional[str] = None, **overrides) -> dict:
        suffix = self._next_id()
        slug = slug or f"agency-{suffix}"
        data = {"name": f"Agency {suffix}", "slug": slug, **overrides}
        resp = await self.client.post(
            f"{API}/agencies",
            json=data,
            headers={settings.user_header: owner_id or self.owner_id},
        )
        assert resp.status_code == 200, f"create agency failed: {resp.text}"
        if self.slug is None:
            self.slug = slug
            self.client.headers.update(self.headers())
        return resp.json()["data"]

    async def add_member(self, user_id: str, role: str = "RECRUITER") -> dict:
        resp = await self.client.post(f"{API}/team", json={"user_id": user_id, "role": role})
        assert resp.status_code == 200, f"add member failed: {resp.text}"
        return resp.json()["data"]

    async def create_job(self, **overrides) -> dict:
        suffix = self._next_id()
        data = {
            "title": f"Backend Engineer {suffix}",
            "location": "Paris",
            "description": "Python, FastAPI",
            "tags": ["python", "fastapi"],
            "status": "ACTIVE",
            **overrides
        }
        resp = await self.client.post(f"{API}/jobs", json=data)
        assert resp.status_code == 200, f"create job failed: {resp.text}"
        return resp.json()["data"]

    async def apply(self, job_id: Optional[str] = None, **overrides) -> dict:
        """Submit the public application form, creating a job when none is given"""
        if job_id is None:
            job_id = (await self.create_job())["id"]
        suffix = self._next_id()
        data = {
            "full_name": f"Candidate {suffix}",
            "email": f"candidate{suffix}@example.com",
            "phone": f"+3360000{suffix.zfill(4)}",
            "tags": ["python"],
            **overrides
        }
        resp = await self.client.post(f"{API}/public/jobs/{job_id}/apply", json=data)
        assert resp.status_code == 200, f"apply failed: {resp.text}"
        return resp.json()["data"]


# ========== Database and client ==========

@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    A fresh in-memory database for every test
    """
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )
    async with session_factory() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def app(db_session: AsyncSession) -> AsyncGenerator[FastAPI, None]:
    """
    The app with get_db routed to the test session
    """
    application = create_app()

    async def override_get_db():
        try:
            yield db_session
            await db_session.commit()
        except Exception:
            await db_session.rollback()
            raise

    application.dependency_overrides[get_db] = override_get_db
    yield application
    application.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac


@pytest_asyncio.fixture
async def factory(client: AsyncClient) -> DataFactory:
    return DataFactory(client=client)


@pytest_asyncio.fixture
async def agency(factory: DataFactory) -> dict:
    """Default agency; the client acts as its owner"""
    return await factory.create_agency(slug="acme")


# ========== Board payloads ==========

def build_pipeline_payload(
    cards: Optional[dict] = None,
    *,
    job_id: str = "job-1",
    can_edit: bool = True
) -> dict:
    """
    Pipeline response body as the API returns it

    `cards` maps a status to the application ids in that column, top first.
    """
    cards = cards or {}
    columns = []
    for status, label in STATUS_LABELS.items():
        applications = [
            {
                "id": app_id,
                "candidate_name": f"Candidate {app_id}",
                "candidate_email": f"{app_id}@example.com",
                "status": status.value,
                "created_at": "2024-05-01T09:00:00",
                "updated_at": "2024-05-01T09:00:00",
                "tags": ["python"],
            }
            for app_id in cards.get(status.value, [])
        ]
        columns.append({
            "status": status.value,
            "label": label,
            "count": len(applications),
            "applications": applications,
        })
    return {
        "success": True,
        "code": 200,
        "message": "OK",
        "data": {
            "job": {"id": job_id, "title": "Backend Engineer", "location": "Paris", "status": "ACTIVE"},
            "columns": columns,
            "total_applications": sum(c["count"] for c in columns),
            "can_edit": can_edit,
        },
    }


@pytest.fixture
def pipeline_payload():
    return build_pipeline_payload
