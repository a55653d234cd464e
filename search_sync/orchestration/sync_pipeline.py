"""End-to-end synchronization of site content into the remote search index."""

from collections.abc import Mapping
from typing import Any

import structlog

from search_sync.ingestion.content_store import SiteContentStore
from search_sync.ingestion.models import BatchAction, ContentItem, IndexDocument
from search_sync.ingestion.profiles import IndexProfile, resolve_profile
from search_sync.ingestion.transformer import DocumentTransformer
from search_sync.sync.options import SyncOptions, resolve_options
from search_sync.sync.remote_index import ElasticsearchIndex, RemoteIndex
from search_sync.sync.synchronizer import IndexSynchronizer, SyncReport
from search_sync.utils.config import Config

logger = structlog.get_logger(__name__)


class SyncPipeline:
    """Runs the synchronization stages in order.

    Stages:
    1. Resolve run options
    2. Verify the indexing key's permissions
    3. Load published posts and pages
    4. Filter to the items the target index accepts
    5. Transform items into index documents
    6. Wrap documents in batch actions
    7. Synchronize actions with the remote index

    Fatal errors (permission, content loading, flush) propagate to the caller
    and stop the run; a failed chunk only shows up in the returned report.
    """

    def __init__(
        self,
        config: Config,
        content_store: SiteContentStore | None = None,
        remote_index: RemoteIndex | None = None,
        show_progress: bool = False,
    ) -> None:
        """Initialize pipeline components.

        Args:
            config: Resolved application configuration
            content_store: Content store (defaults to the site directory from config)
            remote_index: Remote index (defaults to Elasticsearch from config)
            show_progress: Display a progress bar while submitting chunks
        """
        self.config = config
        self.index_name = config.index_name
        self.content_store = content_store or SiteContentStore(config.site_dir, config.site)
        self.remote_index = remote_index or ElasticsearchIndex(
            service_url=config.service_url,
            api_key=config.indexing_key,
            index_name=config.index_name,
        )
        self.profile: IndexProfile = resolve_profile(
            config.index_name, config.site.search_sync.profiles
        )
        self.transformer = DocumentTransformer(
            profile=self.profile,
            default_author=config.default_author,
        )
        self.synchronizer = IndexSynchronizer(self.remote_index, show_progress=show_progress)
        self.logger = logger.bind(index_name=self.index_name)

    def run(self, options: Mapping[str, Any] | None = None) -> SyncReport:
        """Run the full pipeline.

        Args:
            options: Run options (dry_run, flush, chunk_size) merged over defaults

        Returns:
            SyncReport for the run

        Raises:
            PermissionDeniedError: If the indexing key is rejected
            ContentLoadError: If site content cannot be loaded
            InvalidChunkSizeError: If chunk_size is not positive
            FlushError: If clearing the index fails
        """
        resolved = resolve_options(options)
        self.logger.info(
            "sync_run_started",
            dry_run=resolved.dry_run,
            flush=resolved.flush,
            chunk_size=resolved.chunk_size,
        )

        self.verify_permissions()
        items = self.load_content()
        items = self.filter_items(items)
        documents = self.transform(items)
        self.logger.info("content_items_identified", count=len(documents))
        actions = self.build_actions(documents)
        return self.synchronize(actions, resolved)

    def verify_permissions(self) -> None:
        self.logger.info("testing_indexing_key_permissions")
        self.remote_index.verify_permissions()

    def load_content(self) -> list[ContentItem]:
        return self.content_store.load_all()

    def filter_items(self, items: list[ContentItem]) -> list[ContentItem]:
        """Keep items the target index accepts (indexable, profile path rule)."""
        kept = [item for item in items if self.profile.accepts(item)]
        if len(kept) != len(items):
            self.logger.debug("items_filtered_out", count=len(items) - len(kept))
        return kept

    def transform(self, items: list[ContentItem]) -> list[IndexDocument]:
        return self.transformer.transform_all(items)

    def build_actions(self, documents: list[IndexDocument]) -> list[BatchAction]:
        return [BatchAction(index_name=self.index_name, document=doc) for doc in documents]

    def synchronize(self, actions: list[BatchAction], options: SyncOptions) -> SyncReport:
        return self.synchronizer.sync(actions, options)
