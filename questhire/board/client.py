"""
HTTP client for the pipeline API

Thin httpx wrapper; every failure, network or non-2xx, surfaces as a
`BoardError` subclass.
"""
from typing import Any, Dict, List, Optional, Type

import httpx
from loguru import logger

from questhire.models.application import ApplicationStatus
from .exceptions import BoardError, LoadError, MoveError, ShortlistError
from .state import PipelineSnapshot

DEFAULT_API_PREFIX = "/api/v1"


def _error_message(response: httpx.Response, fallback: str) -> str:
    try:
        body = response.json()
    except ValueError:
        return fallback
    if isinstance(body, dict):
        return body.get("error") or body.get("message") or fallback
    return fallback


class PipelineClient:
    """
    Pipeline API client

    Usage:
        async with PipelineClient("https://api.example.com", tenant_slug="acme", user_id="u1") as client:
            snapshot = await client.load_pipeline(job_id)
    """

    def __init__(
        self,
        base_url: str,
        *,
        tenant_slug: Optional[str] = None,
        user_id: Optional[str] = None,
        api_prefix: str = DEFAULT_API_PREFIX,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        tenant_header: str = "X-Tenant-Slug",
        user_header: str = "X-User-Id",
    ):
        headers = {}
        if tenant_slug:
            headers[tenant_header] = tenant_slug
        if user_id:
            headers[user_header] = user_id
        self.api_prefix = api_prefix.rstrip("/")
        self._client = httpx.AsyncClient(base_url=base_url, headers=headers, transport=transport)

    async def __aenter__(self) -> "PipelineClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        error_cls: Type[BoardError],
        fallback: str,
        **kwargs
    ) -> Any:
        try:
            response = await self._client.request(method, f"{self.api_prefix}{path}", **kwargs)
        except httpx.HTTPError as exc:
            logger.warning(f"{method} {path} failed: {exc}")
            raise error_cls(fallback) from exc

        if response.is_error:
            message = _error_message(response, fallback)
            logger.warning(f"{method} {path} -> {response.status_code}: {message}")
            raise error_cls(message, status_code=response.status_code)

        try:
            body = response.json()
        except ValueError as exc:
            raise error_cls(fallback, status_code=response.status_code) from exc
        return body.get("data") if isinstance(body, dict) else body

    async def load_pipeline(self, job_id: str) -> PipelineSnapshot:
        data = await self._request(
            "GET", f"/jobs/{job_id}/applications", LoadError, "Could not load the pipeline"
        )
        if not isinstance(data, dict):
            raise LoadError("Could not load the pipeline")
        try:
            return PipelineSnapshot.from_dict(data)
        except (KeyError, ValueError, TypeError, AttributeError) as exc:
            raise LoadError("Malformed pipeline response") from exc

    async def update_status(
        self,
        application_id: str,
        status: ApplicationStatus,
        note: Optional[str] = None
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"status": ApplicationStatus(status).value}
        if note:
            payload["note"] = note
        return await self._request(
            "PATCH",
            f"/applications/{application_id}/status",
            MoveError,
            "Could not update the status",
            json=payload,
        )

    async def create_shortlist(
        self,
        job_id: str,
        application_ids: List[str],
        *,
        name: str,
        note: Optional[str] = None,
        client_id: Optional[str] = None
    ) -> Dict[str, Any]:
        return await self._request(
            "POST",
            "/shortlists",
            ShortlistError,
            "Could not create the shortlist",
            json={
                "job_id": job_id,
                "name": name,
                "note": note,
                "client_id": client_id,
                "application_ids": list(application_ids),
            },
        )
