"""Tests for embedding providers, the retry policy and the client: no network calls."""

from __future__ import annotations

import json
from types import SimpleNamespace
from unittest.mock import MagicMock

import httpx
import openai
import pytest

from conftest import FailingProvider, HashEmbedder, ScriptedProvider
from legal_ingest.config import EmbeddingSettings
from legal_ingest.embeddings.base import EmbeddingProvider
from legal_ingest.embeddings.client import EmbeddingClient
from legal_ingest.embeddings.factory import (
    available_providers,
    build_embedding_client,
    clear_cache,
    get_embedding_provider,
)
from legal_ingest.embeddings.ollama_provider import OllamaEmbeddingProvider
from legal_ingest.embeddings.openai_provider import OpenAIEmbeddingProvider
from legal_ingest.embeddings.retry import RetryPolicy
from legal_ingest.errors import ConfigurationError, EmbeddingError, RateLimitError

_OPENAI_URL = "https://api.openai.com/v1/embeddings"


def _openai_status_error(cls: type, status: int) -> Exception:
    response = httpx.Response(status, request=httpx.Request("POST", _OPENAI_URL))
    return cls(f"status {status}", response=response, body=None)


def _embedding_response(vector: list[float]) -> SimpleNamespace:
    return SimpleNamespace(data=[SimpleNamespace(index=0, embedding=vector)])


# ---------------------------------------------------------------------------
# Retry policy
# ---------------------------------------------------------------------------


class TestRetryPolicy:
    def test_returns_first_success(self):
        sleeps: list[float] = []
        policy = RetryPolicy(sleep=sleeps.append)
        assert policy.call(lambda: 42) == 42
        assert sleeps == []

    def test_retries_rate_limit_once(self):
        sleeps: list[float] = []
        outcomes = [RateLimitError(), "ok"]

        def flaky():
            result = outcomes.pop(0)
            if isinstance(result, Exception):
                raise result
            return result

        policy = RetryPolicy(max_attempts=2, backoff_seconds=5.0, sleep=sleeps.append)
        assert policy.call(flaky) == "ok"
        assert sleeps == [5.0]

    def test_gives_up_after_max_attempts(self):
        calls = []

        def always_limited():
            calls.append(1)
            raise RateLimitError()

        policy = RetryPolicy(sleep=lambda _: None)
        with pytest.raises(RateLimitError):
            policy.call(always_limited)
        assert len(calls) == 2

    def test_other_errors_not_retried(self):
        calls = []
        sleeps: list[float] = []

        def broken():
            calls.append(1)
            raise EmbeddingError("bad request", status_code=400)

        policy = RetryPolicy(sleep=sleeps.append)
        with pytest.raises(EmbeddingError, match="bad request"):
            policy.call(broken)
        assert len(calls) == 1
        assert sleeps == []

    def test_passes_arguments(self):
        policy = RetryPolicy(sleep=lambda _: None)
        assert policy.call(lambda a, b=0: a + b, 1, b=2) == 3


# ---------------------------------------------------------------------------
# Embedding client
# ---------------------------------------------------------------------------


class TestEmbeddingClient:
    def test_embed(self, hash_embedder: HashEmbedder):
        client = EmbeddingClient(hash_embedder)
        vec = client.embed("The parties agree.")
        assert len(vec) == hash_embedder.dimension
        assert client.dimension == hash_embedder.dimension

    def test_rate_limited_once_then_succeeds(self, rate_limit_once: ScriptedProvider):
        sleeps: list[float] = []
        client = EmbeddingClient(rate_limit_once, RetryPolicy(sleep=sleeps.append))

        vec = client.embed("chunk text")

        assert vec == HashEmbedder().embed_text("chunk text")
        assert rate_limit_once.calls == ["chunk text", "chunk text"]
        assert sleeps == [5.0]

    def test_rate_limited_twice_fails(self):
        provider = ScriptedProvider([RateLimitError(), RateLimitError()])
        client = EmbeddingClient(provider, RetryPolicy(sleep=lambda _: None))
        with pytest.raises(RateLimitError):
            client.embed("chunk text")
        assert len(provider.calls) == 2

    def test_rate_limit_then_server_error_fails(self):
        provider = ScriptedProvider([RateLimitError(), EmbeddingError("boom", status_code=500)])
        client = EmbeddingClient(provider, RetryPolicy(sleep=lambda _: None))
        with pytest.raises(EmbeddingError, match="boom"):
            client.embed("chunk text")
        assert len(provider.calls) == 2

    def test_server_error_not_retried(self):
        provider = FailingProvider()
        client = EmbeddingClient(provider, RetryPolicy(sleep=lambda _: None))
        with pytest.raises(EmbeddingError):
            client.embed("chunk text")
        assert len(provider.calls) == 1


# ---------------------------------------------------------------------------
# OpenAI provider
# ---------------------------------------------------------------------------


class TestOpenAIProvider:
    @pytest.fixture
    def provider(self) -> OpenAIEmbeddingProvider:
        p = OpenAIEmbeddingProvider(api_key="sk-test")
        p._client = MagicMock()
        return p

    def test_is_embedding_provider(self):
        assert issubclass(OpenAIEmbeddingProvider, EmbeddingProvider)

    def test_missing_key(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        with pytest.raises(ConfigurationError, match="API key"):
            OpenAIEmbeddingProvider()

    def test_key_from_env(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
        assert OpenAIEmbeddingProvider().dimension == 1536

    def test_dimension_map(self):
        assert OpenAIEmbeddingProvider("text-embedding-3-large", api_key="k").dimension == 3072

    def test_embed_text(self, provider: OpenAIEmbeddingProvider):
        provider._client.embeddings.create.return_value = _embedding_response([0.1, 0.2])
        assert provider.embed_text("hello") == [0.1, 0.2]
        provider._client.embeddings.create.assert_called_once_with(
            model="text-embedding-3-small", input="hello",
        )

    def test_rate_limit_mapped(self, provider: OpenAIEmbeddingProvider):
        provider._client.embeddings.create.side_effect = _openai_status_error(
            openai.RateLimitError, 429,
        )
        with pytest.raises(RateLimitError) as info:
            provider.embed_text("hello")
        assert info.value.status_code == 429

    def test_status_error_mapped(self, provider: OpenAIEmbeddingProvider):
        provider._client.embeddings.create.side_effect = _openai_status_error(
            openai.InternalServerError, 500,
        )
        with pytest.raises(EmbeddingError) as info:
            provider.embed_text("hello")
        assert not isinstance(info.value, RateLimitError)
        assert info.value.status_code == 500

    def test_connection_error_mapped(self, provider: OpenAIEmbeddingProvider):
        provider._client.embeddings.create.side_effect = openai.APIConnectionError(
            request=httpx.Request("POST", _OPENAI_URL),
        )
        with pytest.raises(EmbeddingError):
            provider.embed_text("hello")

    def test_malformed_response(self, provider: OpenAIEmbeddingProvider):
        provider._client.embeddings.create.return_value = SimpleNamespace(data=[])
        with pytest.raises(EmbeddingError, match="Malformed"):
            provider.embed_text("hello")

    @pytest.mark.parametrize("vector", [None, "abc", []])
    def test_non_vector_embedding(self, provider: OpenAIEmbeddingProvider, vector):
        provider._client.embeddings.create.return_value = _embedding_response(vector)
        with pytest.raises(EmbeddingError, match="Malformed"):
            provider.embed_text("hello")

    def test_retry_through_client(self, provider: OpenAIEmbeddingProvider):
        provider._client.embeddings.create.side_effect = [
            _openai_status_error(openai.RateLimitError, 429),
            _embedding_response([0.5, 0.5]),
        ]
        client = EmbeddingClient(provider, RetryPolicy(sleep=lambda _: None))
        assert client.embed("hello") == [0.5, 0.5]
        assert provider._client.embeddings.create.call_count == 2


# ---------------------------------------------------------------------------
# Ollama provider
# ---------------------------------------------------------------------------


def _ollama(handler) -> OllamaEmbeddingProvider:
    client = httpx.Client(
        base_url="http://ollama.test",
        transport=httpx.MockTransport(handler),
    )
    return OllamaEmbeddingProvider(client=client, dimension=3)


class TestOllamaProvider:
    def test_embed_text(self):
        seen: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(json.loads(request.content))
            assert request.url.path == "/api/embed"
            return httpx.Response(200, json={"embeddings": [[0.1, 0.2, 0.3]]})

        provider = _ollama(handler)
        assert provider.embed_text("hello") == [0.1, 0.2, 0.3]
        assert seen == [{"model": "nomic-embed-text", "input": "hello"}]
        assert provider.dimension == 3

    def test_rate_limit(self):
        provider = _ollama(lambda request: httpx.Response(429, text="slow down"))
        with pytest.raises(RateLimitError):
            provider.embed_text("hello")

    def test_server_error(self):
        provider = _ollama(lambda request: httpx.Response(500, text="oops"))
        with pytest.raises(EmbeddingError) as info:
            provider.embed_text("hello")
        assert info.value.status_code == 500

    def test_malformed_payload(self):
        provider = _ollama(lambda request: httpx.Response(200, json={"embedding": []}))
        with pytest.raises(EmbeddingError, match="Malformed"):
            provider.embed_text("hello")

    @pytest.mark.parametrize("vector", [None, "abc", [], ["a", "b"], [0.1, None], [True, False]])
    def test_non_vector_payload(self, vector):
        provider = _ollama(lambda request: httpx.Response(200, json={"embeddings": [vector]}))
        with pytest.raises(EmbeddingError, match="Malformed"):
            provider.embed_text("hello")

    def test_integer_components_become_floats(self):
        provider = _ollama(lambda request: httpx.Response(200, json={"embeddings": [[1, 0, 2]]}))
        vector = provider.embed_text("hello")
        assert vector == [1.0, 0.0, 2.0]
        assert all(isinstance(x, float) for x in vector)

    def test_transport_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(EmbeddingError, match="request failed"):
            _ollama(handler).embed_text("hello")

    def test_retry_once_on_429(self):
        responses = [
            httpx.Response(429, text="slow down"),
            httpx.Response(200, json={"embeddings": [[1.0, 0.0, 0.0]]}),
        ]
        provider = _ollama(lambda request: responses.pop(0))
        sleeps: list[float] = []
        client = EmbeddingClient(provider, RetryPolicy(sleep=sleeps.append))
        assert client.embed("hello") == [1.0, 0.0, 0.0]
        assert sleeps == [5.0]
        assert responses == []


# ---------------------------------------------------------------------------
# Factory tests
# ---------------------------------------------------------------------------


class TestEmbeddingFactory:
    def setup_method(self):
        clear_cache()

    def test_available_providers(self):
        assert available_providers() == ["openai", "ollama"]

    def test_unknown_provider_raises(self):
        with pytest.raises(ConfigurationError, match="Unknown embedding provider"):
            get_embedding_provider("nonexistent")

    def test_factory_caching(self):
        p1 = get_embedding_provider("ollama")
        p2 = get_embedding_provider("ollama")
        assert p1 is p2

    def test_factory_kwargs_bypass_cache(self):
        p1 = get_embedding_provider("ollama")
        p2 = get_embedding_provider("ollama", dimension=512)
        assert p1 is not p2
        assert p2.dimension == 512

    def test_build_client_from_settings(self):
        settings = EmbeddingSettings(
            provider="ollama", model="mxbai-embed-large", dimension=1024,
            max_attempts=3, backoff_seconds=1.5,
        )
        client = build_embedding_client(settings)
        assert isinstance(client.provider, OllamaEmbeddingProvider)
        assert client.provider.model == "mxbai-embed-large"
        assert client.dimension == 1024
        assert client.policy.max_attempts == 3
        assert client.policy.backoff_seconds == 1.5

    def test_build_client_without_key(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        with pytest.raises(ConfigurationError):
            build_embedding_client(EmbeddingSettings(provider="openai"))
