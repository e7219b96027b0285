"""
Async HTTP client for the Questify API.

Every non-2xx answer, and every body carrying an "error" field, becomes a
ServiceError whose message is the server's own.
"""

import logging
from typing import Any, List, Optional

import httpx
from pydantic import ValidationError as SchemaError

from questify.config import QUESTIFY_API_URL
from questify.generation.errors import INVALID_FORMAT_MESSAGE
from questify.generation.schemas import GenerateRequest, QuestionPaper
from questify.workflow.errors import ServiceError

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT = httpx.Timeout(120.0, connect=10.0)


def _error_message(data: Any, fallback: str) -> str:
    if isinstance(data, dict):
        if data.get("error"):
            return str(data["error"])
        detail = data.get("detail")
        if isinstance(detail, str):
            return detail
        if isinstance(detail, list) and detail:
            first = detail[0]
            return str(first.get("msg", first)) if isinstance(first, dict) else str(first)
    return fallback


class QuestifyClient:
    """Thin wrapper over httpx.AsyncClient. Use as an async context manager or call aclose()."""

    def __init__(self, base_url: str = QUESTIFY_API_URL, client: Optional[httpx.AsyncClient] = None):
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=DEFAULT_TIMEOUT)

    async def __aenter__(self) -> "QuestifyClient":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, token: Optional[str] = None, json: Any = None) -> Any:
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        try:
            response = await self._client.request(method, path, json=json, headers=headers)
        except httpx.HTTPError as e:
            log.error("[API] %s %s failed: %s", method, path, e)
            raise ServiceError(str(e) or "Network error")

        try:
            data = response.json() if response.content else None
        except ValueError:
            data = None

        if response.is_error or (isinstance(data, dict) and data.get("error")):
            message = _error_message(data, f"Request failed with status {response.status_code}")
            raise ServiceError(message, status_code=response.status_code)
        return data

    # ── Auth ──────────────────────────────────────────────────────────────────

    async def sign_up(self, email: str, password: str) -> dict:
        return await self._request("POST", "/api/auth/signup", json={"email": email, "password": password})

    async def sign_in(self, email: str, password: str) -> dict:
        return await self._request("POST", "/api/auth/login", json={"email": email, "password": password})

    async def sign_out(self, token: str) -> None:
        await self._request("POST", "/api/auth/logout", token=token)

    # ── Generation ────────────────────────────────────────────────────────────

    async def generate(self, request: GenerateRequest) -> QuestionPaper:
        data = await self._request("POST", "/api/generate", json=request.model_dump(by_alias=True))
        try:
            return QuestionPaper.model_validate(data)
        except SchemaError:
            raise ServiceError(INVALID_FORMAT_MESSAGE)

    # ── History ───────────────────────────────────────────────────────────────

    async def save_paper(self, token: str, domain: str, sub_domain: str, paper: QuestionPaper) -> QuestionPaper:
        body = {"domain": domain, "subDomain": sub_domain, "content": paper.to_content()}
        data = await self._request("POST", "/api/papers", token=token, json=body)
        try:
            return QuestionPaper.model_validate(data)
        except SchemaError:
            raise ServiceError("Saved paper came back in an unexpected format")

    async def list_papers(self, token: str) -> List[QuestionPaper]:
        data = await self._request("GET", "/api/papers", token=token)
        try:
            return [QuestionPaper.model_validate(p) for p in data or []]
        except SchemaError as e:
            log.error("[HISTORY] Malformed paper in history: %s", e.errors(include_url=False))
            raise ServiceError("History came back in an unexpected format")
