"""Remote search index access: permission check, clear and batch writes."""

from collections.abc import Sequence
from typing import Any, Protocol

import structlog
from elasticsearch import ApiError, Elasticsearch, SerializationError, TransportError
from elasticsearch.helpers import BulkIndexError, bulk

from search_sync.ingestion.models import BatchAction, BatchOperation
from search_sync.utils.exceptions import ChunkSubmitError, FlushError, PermissionDeniedError


class RemoteIndex(Protocol):
    """Operations the synchronizer needs from a remote index."""

    index_name: str

    def verify_permissions(self) -> None:
        """Raise PermissionDeniedError unless the credential may write to the index."""
        ...

    def clear_index(self) -> None:
        """Remove every record from the index, raising FlushError on failure."""
        ...

    def batch(self, actions: Sequence[BatchAction]) -> None:
        """Submit actions as one request, raising ChunkSubmitError on failure."""
        ...


# Bulk op type per batch operation; "index" replaces the whole document or creates it
BULK_OP_TYPES: dict[BatchOperation, str] = {
    BatchOperation.UPDATE: "index",
}


def _first_bulk_error(errors: list[dict[str, Any]]) -> str:
    for item in errors:
        for result in item.values():
            error = result.get("error") if isinstance(result, dict) else None
            if isinstance(error, dict):
                return f"{error.get('type', 'error')}: {error.get('reason', '')}"
            if error:
                return str(error)
    return "unknown error"


class ElasticsearchIndex:
    """Remote index backed by an Elasticsearch index.

    A single client is reused for the permission check, the clear call and
    every batch; calls are made one at a time.

    Attributes:
        client: Elasticsearch client
        index_name: Target index name
    """

    DEFAULT_REQUEST_TIMEOUT = 120

    def __init__(
        self,
        service_url: str,
        api_key: str,
        index_name: str,
        client: Elasticsearch | None = None,
        request_timeout: int = DEFAULT_REQUEST_TIMEOUT,
    ) -> None:
        """Initialize remote index.

        Args:
            service_url: Elasticsearch endpoint URL
            api_key: Encoded API key used for indexing
            index_name: Target index name
            client: Pre-built client (mainly for tests)
            request_timeout: Per-request timeout in seconds
        """
        self.index_name = index_name
        self.logger = structlog.get_logger(__name__).bind(index_name=index_name)
        self.client = client or Elasticsearch(
            service_url,
            api_key=api_key,
            request_timeout=request_timeout,
            http_compress=True,
        )

    def verify_permissions(self) -> None:
        """Check that the API key is valid, can write to the index and is not an admin key.

        Raises:
            PermissionDeniedError: If the key is rejected or has the wrong privileges
        """
        try:
            identity = self.client.security.authenticate()
            privileges = self.client.security.has_privileges(
                cluster=["all"],
                index=[{"names": [self.index_name], "privileges": ["write"]}],
            )
        except (ApiError, TransportError) as e:
            raise PermissionDeniedError(f"Indexing key check failed: {e}") from e

        if privileges["cluster"].get("all"):
            raise PermissionDeniedError(
                "Indexing key has full cluster privileges; use a key restricted to writing "
                f"'{self.index_name}' instead of an admin key"
            )

        if not privileges["index"].get(self.index_name, {}).get("write"):
            raise PermissionDeniedError(f"Indexing key cannot write to index '{self.index_name}'")

        self.logger.debug("indexing_key_verified", username=identity.get("username"))

    def clear_index(self) -> None:
        """Delete every document in the index, keeping its settings and mappings.

        Raises:
            FlushError: If the request fails
        """
        try:
            response = self.client.delete_by_query(
                index=self.index_name,
                query={"match_all": {}},
                conflicts="proceed",
                ignore_unavailable=True,
                refresh=True,
            )
        except (ApiError, TransportError) as e:
            raise FlushError(f"Failed to clear index '{self.index_name}': {e}") from e

        self.logger.debug("index_cleared", deleted=response.get("deleted"))

    def batch(self, actions: Sequence[BatchAction]) -> None:
        """Submit actions in a single bulk request.

        Raises:
            ChunkSubmitError: If the request fails or any document is rejected
        """
        if not actions:
            return

        operations = [self._to_bulk_operation(action) for action in actions]
        try:
            bulk(
                self.client,
                operations,
                chunk_size=len(operations),
                raise_on_error=True,
                refresh=False,
            )
        except BulkIndexError as e:
            raise ChunkSubmitError(
                f"{len(e.errors)} of {len(actions)} documents rejected: {_first_bulk_error(e.errors)}"
            ) from e
        except (ApiError, TransportError, SerializationError) as e:
            raise ChunkSubmitError(f"Batch request failed: {e}") from e

    @staticmethod
    def _to_bulk_operation(action: BatchAction) -> dict[str, Any]:
        document = action.document
        return {
            "_op_type": BULK_OP_TYPES[action.operation],
            "_index": action.index_name,
            "_id": document.object_id,
            "_source": document.to_dict(),
        }
