"""
QuestifyClient against a mocked transport.
"""

import asyncio

import httpx
import pytest

from questify.generation.schemas import GenerateRequest
from questify.workflow.api_client import QuestifyClient, _error_message
from questify.workflow.errors import ServiceError


def _client(handler) -> QuestifyClient:
    transport = httpx.MockTransport(handler)
    return QuestifyClient(client=httpx.AsyncClient(transport=transport, base_url="http://test"))


async def _call(handler, method, *args):
    async with _client(handler) as client:
        return await getattr(client, method)(*args)


class TestErrorMessage:
    @pytest.mark.parametrize("data,expected", [
        ({"error": "Invalid response format from AI"}, "Invalid response format from AI"),
        ({"detail": "Not authenticated"}, "Not authenticated"),
        ({"detail": [{"msg": "field required"}]}, "field required"),
        (None, "fallback"),
        ({}, "fallback"),
    ])
    def test_extraction(self, data, expected):
        assert _error_message(data, "fallback") == expected


class TestGenerate:
    def test_returns_paper(self, sample_paper_data):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["body"] = request.content
            return httpx.Response(200, json=sample_paper_data)

        paper = asyncio.run(_call(handler, "generate", GenerateRequest(domain="School", sub_domain="Class 6")))

        assert seen["path"] == "/api/generate"
        assert b'"subDomain":"Class 6"' in seen["body"].replace(b" ", b"")
        assert paper.sections[0].questions[0].answer == "4"

    def test_server_error_message_surfaced(self):
        def handler(request):
            return httpx.Response(500, json={"error": "GEMINI_API_KEY or GOOGLE_API_KEY must be set"})

        with pytest.raises(ServiceError) as exc:
            asyncio.run(_call(handler, "generate", GenerateRequest()))

        assert exc.value.status_code == 500
        assert "GEMINI_API_KEY" in exc.value.message

    def test_malformed_paper_is_format_error(self):
        def handler(request):
            return httpx.Response(200, json={"sections": "nope"})

        with pytest.raises(ServiceError) as exc:
            asyncio.run(_call(handler, "generate", GenerateRequest()))

        assert exc.value.message == "Invalid response format from AI"

    def test_network_failure(self):
        def handler(request):
            raise httpx.ConnectError("connection refused")

        with pytest.raises(ServiceError) as exc:
            asyncio.run(_call(handler, "generate", GenerateRequest()))

        assert "connection refused" in exc.value.message


class TestHistory:
    def test_token_sent_and_papers_parsed(self, sample_paper_data):
        seen = {}

        def handler(request):
            seen["auth"] = request.headers.get("authorization")
            return httpx.Response(200, json=[{**sample_paper_data, "id": 7, "created_at": "2026-01-01T10:00:00"}])

        papers = asyncio.run(_call(handler, "list_papers", "abc"))

        assert seen["auth"] == "Bearer abc"
        assert papers[0].id == 7
        assert papers[0].created_at is not None

    def test_unauthorised(self):
        def handler(request):
            return httpx.Response(401, json={"detail": "Not authenticated"})

        with pytest.raises(ServiceError) as exc:
            asyncio.run(_call(handler, "list_papers", "bad"))

        assert exc.value.message == "Not authenticated"

    def test_malformed_history_is_service_error(self):
        def handler(request):
            return httpx.Response(200, json=[{"sections": "not a list"}])

        with pytest.raises(ServiceError) as exc:
            asyncio.run(_call(handler, "list_papers", "abc"))

        assert exc.value.message == "History came back in an unexpected format"

    def test_malformed_save_response_is_service_error(self, sample_paper):
        def handler(request):
            return httpx.Response(201, json={"sections": 5})

        with pytest.raises(ServiceError):
            asyncio.run(_call(handler, "save_paper", "abc", "School", "Class 6", sample_paper))
