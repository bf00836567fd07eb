# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-12
# Updated: 2026-02-14
# Description: conftest.py
# -----------------------------------------------------------------------------

import sys
from pathlib import Path

# add project root to sys.path
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

import copy
import json
from typing import Any, Dict, List, Optional

import httpx
import pytest
from starlette.testclient import TestClient

from api.dependencies import get_cfg, get_embedding_service
from api.main import app
from config.Config import Config
from embedding.OpenAIEmbedder import OpenAIEmbedder
from services.EmbeddingService import EmbeddingService
from vectorstore.InMemoryEmbeddingVectorStore import InMemoryEmbeddingVectorStore

AUTH = {"Authorization": "Bearer test-api-key"}

# Mock OpenAI embeddings response
MOCK_EMBEDDING_RESPONSE: Dict[str, Any] = {
    "data": [{
        "embedding": [0.1, 0.2, 0.3, -0.1, -0.2],
        "index": 0,
        "object": "embedding",
    }],
    "model": "text-embedding-3-small",
    "object": "list",
    "usage": {"prompt_tokens": 5, "total_tokens": 5},
}


class MockOpenAI:
    """
    httpx transport handler standing in for https://api.openai.com/v1/embeddings.
    Captures every request; replies with the configured status/body.
    """

    def __init__(self) -> None:
        self.status = 200
        self.body: Any = copy.deepcopy(MOCK_EMBEDDING_RESPONSE)
        self.connect_error = False
        self.requests: List[httpx.Request] = []

    def reply(self, status: int, body: Any) -> None:
        self.status = status
        self.body = body

    def reply_vector(self, vector: List[float]) -> None:
        body = copy.deepcopy(MOCK_EMBEDDING_RESPONSE)
        body["data"][0]["embedding"] = vector
        self.reply(200, body)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.connect_error:
            raise httpx.ConnectError("connection refused", request=request)
        assert request.url.path == "/v1/embeddings"
        return httpx.Response(self.status, json=self.body)

    @property
    def last_json(self) -> Optional[Dict[str, Any]]:
        return json.loads(self.requests[-1].content) if self.requests else None


class FailingStore:
    """Store whose every backend call blows up."""

    def test_connection(self) -> bool:
        return False

    def upsert(self, records):
        raise RuntimeError("backend down")

    def get_by_ids(self, ids):
        raise RuntimeError("backend down")

    def query(self, vector, top_k=5, filter=None, return_metadata=True, return_values=False):
        raise RuntimeError("backend down")

    def delete_by_ids(self, ids):
        raise RuntimeError("backend down")


@pytest.fixture
def cfg() -> Config:
    return Config(vector_backend="memory")


@pytest.fixture
def mock_openai() -> MockOpenAI:
    return MockOpenAI()


@pytest.fixture
def embedder(cfg: Config, mock_openai: MockOpenAI) -> OpenAIEmbedder:
    http_client = httpx.Client(transport=httpx.MockTransport(mock_openai.handler))
    return OpenAIEmbedder(cfg, http_client=http_client)


@pytest.fixture
def store() -> InMemoryEmbeddingVectorStore:
    return InMemoryEmbeddingVectorStore()


@pytest.fixture
def service(embedder: OpenAIEmbedder, store: InMemoryEmbeddingVectorStore, cfg: Config) -> EmbeddingService:
    return EmbeddingService(embedder=embedder, store=store, id_length=cfg.id_length)


@pytest.fixture
def client(service: EmbeddingService, cfg: Config):
    app.dependency_overrides[get_embedding_service] = lambda: service
    app.dependency_overrides[get_cfg] = lambda: cfg
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def failing_client(embedder: OpenAIEmbedder, cfg: Config):
    svc = EmbeddingService(embedder=embedder, store=FailingStore(), id_length=cfg.id_length)
    app.dependency_overrides[get_embedding_service] = lambda: svc
    app.dependency_overrides[get_cfg] = lambda: cfg
    yield TestClient(app)
    app.dependency_overrides.clear()
