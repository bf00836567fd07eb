# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-15
# Description: test_chroma_vector_store.py
# -----------------------------------------------------------------------------
import json
import os
import uuid

import chromadb
import pytest
from starlette.testclient import TestClient

from api.dependencies import get_cfg, get_embedding_service
from api.main import app
from conftest import AUTH
from config.Config import Config
from embedding.EmbeddingRecord import EmbeddingRecord
from services.EmbeddingService import EmbeddingService
from vectorstore.ChromaEmbeddingVectorStore import (
    ChromaEmbeddingVectorStore,
    decode_document,
    decode_metadata,
    encode_document,
    encode_metadata,
    to_chroma_where,
)


def _record(rid, vector, **metadata):
    return EmbeddingRecord(
        id=rid,
        vector=vector,
        text=f"text-{rid}",
        timestamp="2026-02-15T00:00:00.000Z",
        metadata={"text": f"text-{rid}", "timestamp": "2026-02-15T00:00:00.000Z", **metadata},
    )


@pytest.fixture(scope="module")
def chroma_client():
    return chromadb.EphemeralClient()


@pytest.fixture
def chroma_store(chroma_client):
    # Ephemeral clients share one in-process system; isolate by collection
    return ChromaEmbeddingVectorStore(
        cfg=Config(vector_backend="chroma", chroma_mode="persistent"),
        collection_name=f"test-{uuid.uuid4().hex[:12]}",
        client=chroma_client,
    )


@pytest.fixture
def chroma_api(embedder, chroma_store, cfg):
    svc = EmbeddingService(embedder=embedder, store=chroma_store, id_length=cfg.id_length)
    app.dependency_overrides[get_embedding_service] = lambda: svc
    app.dependency_overrides[get_cfg] = lambda: cfg
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_encode_decode_metadata():
    metadata = {"s": "x", "i": 3, "f": 0.5, "b": True, "tags": ["a", "b"], "obj": {"k": 1}, "none": None}

    encoded, json_keys = encode_metadata(metadata)

    assert encoded["tags"] == '["a", "b"]'
    assert encoded["i"] == 3
    assert sorted(json_keys) == ["none", "obj", "tags"]
    assert decode_metadata(encoded, json_keys) == metadata


def test_encode_scalars_only_has_no_json_keys():
    assert encode_metadata({"a": 1}) == ({"a": 1}, [])
    assert decode_metadata(None) == {}


def test_document_keeps_exact_vector():
    vector = [0.1, 0.2, 0.30000000000000004, -1e-08, 1.0000001]

    doc = decode_document(encode_document("hello", vector, ["tags"]))

    assert doc == {"text": "hello", "vector": vector, "json_keys": ["tags"]}


@pytest.mark.parametrize("document", ["plain text", json.dumps({"text": "x"}), json.dumps([1, 2])])
def test_foreign_document_is_plain_text(document):
    doc = decode_document(document)

    assert doc["text"] == document
    assert doc["vector"] is None
    assert doc["json_keys"] == []


@pytest.mark.parametrize(
    "flt, expected",
    [
        (None, None),
        ({}, None),
        ({"genre": "drama"}, {"genre": "drama"}),
        ({"$or": [{"a": 1}, {"b": 2}]}, {"$or": [{"a": 1}, {"b": 2}]}),
        (
            {"genre": "drama", "year": {"$gte": 2020}},
            {"$and": [{"genre": "drama"}, {"year": {"$gte": 2020}}]},
        ),
    ],
)
def test_to_chroma_where(flt, expected):
    assert to_chroma_where(flt) == expected


def test_connection(chroma_store):
    assert chroma_store.test_connection() is True


def test_upsert_and_get_round_trip(chroma_store):
    vector = [0.1, 0.2, 0.3, -0.1, -0.2]
    chroma_store.upsert([_record("r1", vector, tags=["x"], source="unit")])

    [rec] = chroma_store.get_by_ids(["r1"])

    assert rec.id == "r1"
    assert rec.text == "text-r1"
    assert rec.timestamp == "2026-02-15T00:00:00.000Z"
    # not float32-representable; must still come back bit-for-bit
    assert rec.vector == vector
    assert rec.metadata["tags"] == ["x"]
    assert rec.metadata["source"] == "unit"


def test_caller_keys_are_never_reinterpreted(chroma_store):
    chroma_store.upsert([_record("k", [1.0, 0.0], _json_keys="note", looks_like_json='["a"]')])

    [rec] = chroma_store.get_by_ids(["k"])
    [match] = chroma_store.query([1.0, 0.0], top_k=1)

    for md in (rec.metadata, match.metadata):
        assert md["_json_keys"] == "note"
        assert md["looks_like_json"] == '["a"]'


def test_get_unknown_returns_empty(chroma_store):
    assert chroma_store.get_by_ids(["does-not-exist"]) == []


def test_query_ranks_and_filters(chroma_store):
    chroma_store.upsert([
        _record("same", [1.0, 0.0], genre="drama"),
        _record("near", [1.0, 0.2], genre="comedy"),
        _record("far", [0.1, 1.0], genre="drama"),
    ])

    matches = chroma_store.query([1.0, 0.0], top_k=3)
    assert [m.id for m in matches] == ["same", "near", "far"]
    assert matches[0].score == pytest.approx(1.0, abs=1e-4)
    assert matches[0].text == "text-same"
    assert matches[0].values is None

    dramas = chroma_store.query([1.0, 0.0], top_k=3, filter={"genre": "drama"}, return_values=True)
    assert [m.id for m in dramas] == ["same", "far"]
    assert dramas[1].values == [0.1, 1.0]


def test_delete_is_idempotent(chroma_store):
    chroma_store.upsert([_record("gone", [1.0, 0.0])])

    chroma_store.delete_by_ids(["gone"])
    chroma_store.delete_by_ids(["gone"])

    assert chroma_store.get_by_ids(["gone"]) == []


def test_api_round_trip_returns_provider_vector_exactly(chroma_api, mock_openai):
    vector = [0.1, 0.2, 0.3, -0.1, -0.2]
    mock_openai.reply_vector(vector)

    created = chroma_api.post("/embed", headers=AUTH, json={"text": "exact"})
    fetched = chroma_api.get(f"/embed/{created.json()['id']}")

    assert fetched.status_code == 200
    assert fetched.json()["embedding"] == vector


def test_api_accepts_any_caller_metadata_key(chroma_api):
    metadata = {"_json_keys": "note", "tags": ["a"]}

    created = chroma_api.post("/embed", headers=AUTH, json={"text": "hi", "metadata": metadata})
    assert created.status_code == 200

    fetched = chroma_api.get(f"/embed/{created.json()['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["metadata"]["_json_keys"] == "note"
    assert fetched.json()["metadata"]["tags"] == ["a"]

    found = chroma_api.post("/search", headers=AUTH, json={"query": "hi"})
    assert found.status_code == 200
    assert found.json()["results"][0]["metadata"]["_json_keys"] == "note"


def _missing_chroma_cloud_env_vars() -> list[str]:
    return [name for name in Config.CHROMA_CLOUD_ENV_VARS if not os.getenv(name)]


@pytest.mark.integration
def test_chroma_cloud_round_trip():
    missing = _missing_chroma_cloud_env_vars()
    if missing:
        pytest.skip(f"Missing env vars for Chroma Cloud: {', '.join(missing)}")

    cfg = Config.from_env()
    cloud_cfg = Config(**{**{f: getattr(cfg, f) for f in Config.ENV_VARS}, "vector_backend": "chroma", "chroma_mode": "cloud"})
    store = ChromaEmbeddingVectorStore(cfg=cloud_cfg, collection_name="embed-api-integration")
    assert store.test_connection()

    rid = f"it-{uuid.uuid4().hex[:8]}"
    store.upsert([_record(rid, [0.25, 0.5, 0.75])])
    try:
        [rec] = store.get_by_ids([rid])
        assert rec.text == f"text-{rid}"
    finally:
        store.delete_by_ids([rid])
