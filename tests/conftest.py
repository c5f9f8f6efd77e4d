from __future__ import annotations

import pytest

from autocomplete.services.opensearch.client import SearchPage


class RecordingClient:
    """Stands in for OpenSearchClient and records every call."""

    def __init__(self):
        self.calls = []
        self.searches = []

    def index_document(self, index, doc_id, body):
        self.calls.append(("index", index, doc_id, body))

    def update_document(self, index, doc_id, body):
        self.calls.append(("update", index, doc_id, body))

    def delete_document(self, index, doc_id):
        self.calls.append(("delete", index, doc_id, None))

    def search(self, index, body):
        self.searches.append((index, body))
        return SearchPage(total=0, hits=[], page=1, per_page=body["size"])


@pytest.fixture
def recorder() -> RecordingClient:
    return RecordingClient()
