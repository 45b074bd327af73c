"""
Unit tests for the named-entity service client.
"""

from __future__ import annotations

import httpx
import pytest

from articlequarry.config import EntityServiceConfig
from articlequarry.metadata.entities import HttpEntityRecognizer, NamedEntity
from articlequarry.models import EntityType


def _recognizer(handler, **kwargs) -> HttpEntityRecognizer:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return HttpEntityRecognizer("http://ner.local/", client=client, **kwargs)


class TestHttpEntityRecognizer:
    def test_request_and_payload(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["path"] = request.url.path
            seen["text"] = request.url.params["text"]
            seen["auth"] = request.headers.get("Authorization", "")
            return httpx.Response(
                200,
                json={
                    "entities": [
                        {"representative": "Jane Doe", "type": "person", "salience_score": 0.8},
                        {"representative": "Paris", "type": "LOCATION", "salience_score": None},
                    ]
                },
            )

        entities = _recognizer(handler, username="user", password="secret").get_entities("Jane Doe")

        assert seen["method"] == "POST"
        assert seen["path"] == "/entities"
        assert seen["text"] == "Jane Doe"
        assert seen["auth"].startswith("Basic ")
        assert entities == [
            NamedEntity(representative="Jane Doe", type=EntityType.PERSON, salience=0.8),
            NamedEntity(representative="Paris", type=None, salience=0.0),
        ]

    def test_no_auth_without_username(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert "Authorization" not in request.headers
            return httpx.Response(200, json={"entities": []})

        assert _recognizer(handler).get_entities("x") == []

    def test_null_entities(self):
        assert _recognizer(lambda request: httpx.Response(200, json={"entities": None})).get_entities("x") == []

    @pytest.mark.parametrize(
        "response",
        [
            httpx.Response(500, text="boom"),
            httpx.Response(404),
            httpx.Response(200, content=b"not json"),
            httpx.Response(200, json={"entities": "nope"}),
        ],
    )
    def test_failures_return_none(self, response):
        assert _recognizer(lambda request: response).get_entities("x") is None

    def test_transport_error_returns_none(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        assert _recognizer(handler).get_entities("x") is None

    def test_custom_entity_path(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/api/v2/ner"
            return httpx.Response(200, json={"entities": []})

        assert _recognizer(handler, entity_path="/api/v2/ner").get_entities("x") == []

    def test_injected_client_is_not_closed(self):
        client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(200)))
        HttpEntityRecognizer("http://ner.local", client=client).close()
        assert not client.is_closed

    def test_from_config(self):
        config = EntityServiceConfig(enabled=True, base_url="http://ner.local", entity_path="people", timeout=2.0)
        recognizer = HttpEntityRecognizer.from_config(config)
        try:
            assert recognizer.url == "http://ner.local/people"
        finally:
            recognizer.close()
