"""Sequential submission of batch actions to the remote index."""

import time
from dataclasses import dataclass, field
from typing import Any

import structlog
from tqdm import tqdm

from search_sync.ingestion.models import BatchAction
from search_sync.sync.chunker import chunk_actions
from search_sync.sync.options import SyncOptions
from search_sync.sync.remote_index import RemoteIndex
from search_sync.utils.exceptions import ChunkSubmitError

logger = structlog.get_logger(__name__)


@dataclass
class SyncReport:
    """Outcome of one synchronization run.

    Attributes:
        total_actions: Number of batch actions planned
        total_chunks: Number of chunks attempted
        chunks_succeeded: Chunks accepted by the remote index
        chunks_failed: Chunks whose submission failed
        dry_run: Whether the run skipped all writes
        flushed: Whether the index was cleared first
        failures: (chunk number, error message) per failed chunk
        start_time: Start time as unix timestamp
        end_time: End time as unix timestamp
        duration_seconds: Total duration
    """

    total_actions: int = 0
    total_chunks: int = 0
    chunks_succeeded: int = 0
    chunks_failed: int = 0
    dry_run: bool = False
    flushed: bool = False
    failures: list[tuple[int, str]] = field(default_factory=list)
    start_time: float = 0.0
    end_time: float = 0.0
    duration_seconds: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        """Convert report to dictionary for JSON serialization."""
        return {
            "total_actions": self.total_actions,
            "total_chunks": self.total_chunks,
            "chunks_succeeded": self.chunks_succeeded,
            "chunks_failed": self.chunks_failed,
            "dry_run": self.dry_run,
            "flushed": self.flushed,
            "failures": [{"chunk": number, "error": message} for number, message in self.failures],
            "duration_seconds": round(self.duration_seconds, 3),
            "start_time": time.strftime("%Y-%m-%d %H:%M:%S", time.localtime(self.start_time)),
            "end_time": time.strftime("%Y-%m-%d %H:%M:%S", time.localtime(self.end_time)),
        }


class IndexSynchronizer:
    """Drives the write phase against a remote index.

    1. Dry run: report the action count and stop, with no write calls
    2. Split actions into chunks (rejects a bad chunk size before any write)
    3. Flush: clear the index once; a failure aborts the run
    4. Submit chunks strictly one after another
    5. A failed chunk is logged and the run moves on; nothing is retried
    """

    def __init__(self, remote_index: RemoteIndex, show_progress: bool = False) -> None:
        """Initialize synchronizer.

        Args:
            remote_index: Permission-checked remote index
            show_progress: Display a progress bar while submitting chunks
        """
        self.remote_index = remote_index
        self.show_progress = show_progress
        self.logger = logger.bind(index_name=remote_index.index_name)

    def sync(self, actions: list[BatchAction], options: SyncOptions) -> SyncReport:
        """Write actions to the remote index.

        Args:
            actions: Ordered batch actions
            options: Resolved run options

        Returns:
            SyncReport for the run

        Raises:
            InvalidChunkSizeError: If options.chunk_size is not positive
            FlushError: If clearing the index fails
        """
        report = SyncReport(total_actions=len(actions), dry_run=options.dry_run)
        report.start_time = time.time()

        if options.dry_run:
            self.logger.info("dry_run_skipping", total_actions=len(actions))
            return self._finish(report)

        chunks = chunk_actions(actions, options.chunk_size)
        report.total_chunks = len(chunks)

        if options.flush:
            self.logger.info("clearing_index")
            self.remote_index.clear_index()
            report.flushed = True

        with tqdm(
            desc="Indexing",
            unit="chunk",
            total=len(chunks),
            disable=not self.show_progress,
        ) as pbar:
            for number, chunk in enumerate(chunks, start=1):
                self.logger.info(
                    "indexing_chunk",
                    chunk_number=number,
                    total_chunks=len(chunks),
                    chunk_size=len(chunk),
                )
                try:
                    self.remote_index.batch(chunk)
                    report.chunks_succeeded += 1
                except ChunkSubmitError as e:
                    self.logger.error("chunk_submit_failed", chunk_number=number, error=e.message)
                    report.chunks_failed += 1
                    report.failures.append((number, e.message))
                pbar.update(1)

        return self._finish(report)

    def _finish(self, report: SyncReport) -> SyncReport:
        report.end_time = time.time()
        report.duration_seconds = report.end_time - report.start_time
        self.logger.info(
            "sync_run_completed",
            total_actions=report.total_actions,
            total_chunks=report.total_chunks,
            chunks_failed=report.chunks_failed,
            dry_run=report.dry_run,
        )
        return report
