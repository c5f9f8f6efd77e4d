import logging
from typing import Any, Dict, List, Optional

from opensearchpy import OpenSearch
from pydantic import BaseModel, Field

from autocomplete.config import Settings, get_settings

logger = logging.getLogger(__name__)


class SearchPage(BaseModel):
    """One page of search hits."""

    total: int = 0
    hits: List[Dict[str, Any]] = Field(default_factory=list)
    page: int = 1
    per_page: int = 50

    @property
    def total_pages(self) -> int:
        return -(-self.total // self.per_page) if self.per_page else 0


class OpenSearchClient:
    """
    Client for OpenSearch document writes and autocomplete search.

    Errors reported by OpenSearch are not caught here; callers receive the
    ``opensearchpy`` exception as raised.
    """

    def __init__(self, host: str = "http://localhost:9200", settings: Optional[Settings] = None, client: Any = None):
        """Initialize OpenSearch client."""
        self.host = host
        self.settings = settings or get_settings()

        # Create the low-level client
        self.client = client or OpenSearch(
            hosts=[host],
            http_compress=True,
            use_ssl=self.settings.opensearch.use_ssl,
            verify_certs=self.settings.opensearch.verify_certs,
            ssl_assert_hostname=False,
            ssl_show_warn=False,
        )
        logger.info(f"OpenSearch client initialized with host: {host}")

    # ============================================================
    # DOCUMENT WRITES
    # ============================================================

    def index_document(self, index: str, doc_id: Any, body: Dict[str, Any]) -> Dict[str, Any]:
        response = self.client.index(
            index=index,
            id=doc_id,
            body=body,
            refresh=self.settings.opensearch.refresh,
        )
        logger.debug(f"Indexed document {doc_id} into {index}: {response.get('result')}")
        return response

    def update_document(self, index: str, doc_id: Any, body: Dict[str, Any]) -> Dict[str, Any]:
        """Partial update of an indexed document."""
        response = self.client.update(
            index=index,
            id=doc_id,
            body={"doc": body},
            refresh=self.settings.opensearch.refresh,
        )
        logger.debug(f"Updated document {doc_id} in {index}: {response.get('result')}")
        return response

    def delete_document(self, index: str, doc_id: Any) -> Dict[str, Any]:
        response = self.client.delete(
            index=index,
            id=doc_id,
            refresh=self.settings.opensearch.refresh,
        )
        logger.debug(f"Deleted document {doc_id} from {index}: {response.get('result')}")
        return response

    # ============================================================
    # SEARCH
    # ============================================================

    def search(self, index: str, body: Dict[str, Any]) -> SearchPage:
        """
        Run a compiled autocomplete query.

        Args:
            index: Index to search
            body: Query body with ``from`` and ``size`` set

        Returns:
            Page of hits, each the document source plus ``id`` and ``score``
        """
        response = self.client.search(index=index, body=body)

        total = response["hits"]["total"]
        if isinstance(total, dict):
            total = total["value"]

        hits = []
        for hit in response["hits"]["hits"]:
            document = dict(hit.get("_source") or {})
            document.setdefault("id", hit.get("_id"))
            document["score"] = hit.get("_score")
            hits.append(document)

        per_page = body.get("size") or 50
        page = body.get("from", 0) // per_page + 1
        logger.info(f"Autocomplete search on {index} returned {total} results")
        return SearchPage(total=total, hits=hits, page=page, per_page=per_page)
