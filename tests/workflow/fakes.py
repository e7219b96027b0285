"""In-memory stand-in for QuestifyClient."""

import asyncio
from datetime import datetime, timedelta

from questify.generation.schemas import QuestionPaper
from questify.workflow.errors import ServiceError


class FakeClient:
    def __init__(self, paper=None, generate_error=None, save_error=None, sign_in_error=None):
        self.paper = paper
        self.generate_error = generate_error
        self.save_error = save_error
        self.sign_in_error = sign_in_error
        self.generate_calls = []
        self.stored = []
        self.signed_out_tokens = []
        self.saved_tokens = []

    def _session(self, email):
        return {"access_token": f"token-{email}", "refresh_token": "r", "user": {"id": 1, "email": email}}

    async def sign_in(self, email, password):
        if self.sign_in_error:
            raise ServiceError(self.sign_in_error, status_code=401)
        return self._session(email)

    async def sign_up(self, email, password):
        return self._session(email)

    async def sign_out(self, token):
        self.signed_out_tokens.append(token)

    async def generate(self, request):
        self.generate_calls.append(request)
        if self.generate_error:
            raise ServiceError(self.generate_error, status_code=500)
        return self.paper

    async def save_paper(self, token, domain, sub_domain, paper):
        if self.save_error:
            raise ServiceError(self.save_error, status_code=500)
        n = len(self.stored) + 1
        record = paper.model_copy(update={
            "id": n,
            "created_at": datetime(2026, 1, 1) + timedelta(hours=n),
            "domain": domain,
            "sub_domain": sub_domain,
        })
        self.saved_tokens.append(token)
        self.stored.append(record)
        return record

    async def list_papers(self, token):
        # Insertion order (oldest first); the controller sorts
        return list(self.stored)


class BlockingClient(FakeClient):
    """generate() waits until `release` is set."""

    def __init__(self, paper):
        super().__init__(paper=paper)
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    async def generate(self, request):
        self.generate_calls.append(request)
        self.started.set()
        await self.release.wait()
        return self.paper


class MalformedHistoryClient(FakeClient):
    """list_papers() fails schema validation."""

    async def list_papers(self, token):
        return [QuestionPaper.model_validate({"sections": "not a list"})]
