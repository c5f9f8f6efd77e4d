from __future__ import annotations

import pytest
from opensearchpy.exceptions import RequestError

from autocomplete.config import OpenSearchSettings, Settings
from autocomplete.exceptions import BackendError
from autocomplete.services.opensearch.client import OpenSearchClient
from autocomplete.services.opensearch.factory import make_opensearch_client, make_opensearch_client_fresh


class DummyLowLevelClient:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def _record(self, name, kwargs):
        self.calls.append((name, kwargs))
        if self.error is not None:
            raise self.error
        return self.response or {"result": "ok"}

    def index(self, **kwargs):
        return self._record("index", kwargs)

    def update(self, **kwargs):
        return self._record("update", kwargs)

    def delete(self, **kwargs):
        return self._record("delete", kwargs)

    def search(self, **kwargs):
        return self._record("search", kwargs)


def make_client(low_level):
    settings = Settings(opensearch=OpenSearchSettings(refresh=True))
    return OpenSearchClient(host="http://test:9200", settings=settings, client=low_level)


def test_document_writes():
    low_level = DummyLowLevelClient()
    client = make_client(low_level)

    client.index_document("cities", 1, {"name": "Berlin"})
    client.update_document("cities", 1, {"name": "Bern"})
    client.delete_document("cities", 1)

    assert low_level.calls == [
        ("index", {"index": "cities", "id": 1, "body": {"name": "Berlin"}, "refresh": True}),
        ("update", {"index": "cities", "id": 1, "body": {"doc": {"name": "Bern"}}, "refresh": True}),
        ("delete", {"index": "cities", "id": 1, "refresh": True}),
    ]


def test_search_returns_page_of_sources():
    response = {
        "hits": {
            "total": {"value": 121, "relation": "eq"},
            "hits": [
                {"_id": "7", "_score": 2.5, "_source": {"id": 7, "name": "Berlin"}},
                {"_id": "9", "_score": 1.0, "_source": {"name": "Bern"}},
            ],
        }
    }
    client = make_client(DummyLowLevelClient(response=response))

    page = client.search("cities", {"query": {"match_all": {}}, "from": 100, "size": 50})

    assert page.total == 121
    assert page.page == 3
    assert page.per_page == 50
    assert page.total_pages == 3
    assert page.hits == [
        {"id": 7, "name": "Berlin", "score": 2.5},
        {"id": "9", "name": "Bern", "score": 1.0},
    ]


def test_search_accepts_legacy_integer_total():
    response = {"hits": {"total": 0, "hits": []}}
    page = make_client(DummyLowLevelClient(response=response)).search("cities", {"from": 0, "size": 10})
    assert page.total == 0
    assert page.hits == []


def test_backend_errors_propagate():
    error = RequestError(400, "search_phase_execution_exception", {})
    client = make_client(DummyLowLevelClient(error=error))

    with pytest.raises(BackendError):
        client.search("cities", {"query": {"bool": {"filter": [{"terms": {"nope": [1]}}]}}})


def test_factories():
    settings = Settings(opensearch=OpenSearchSettings(host="http://search:9200"))
    fresh = make_opensearch_client_fresh(settings)
    assert fresh.host == "http://search:9200"
    assert make_opensearch_client_fresh(settings, host="http://other:9200").host == "http://other:9200"
    assert make_opensearch_client() is make_opensearch_client()


def test_cached_factory_accepts_explicit_settings():
    settings = Settings(opensearch=OpenSearchSettings(host="http://cached:9200"))

    client = make_opensearch_client(settings)

    assert client.host == "http://cached:9200"
    assert make_opensearch_client(settings) is client
