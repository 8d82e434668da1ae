"""
Semantic Memory - Ingestion Pipeline

Turns content sources into stored memory records:

    source -> metadata -> preconditions -> extractor -> chunking strategy
           -> fragments (pulled one at a time) -> record store

Every failure inside ``process_source`` is converted into a ProcessResult.
``process_batch`` runs many sources under a concurrency cap and aggregates
their results without ever raising for a single source's failure.
"""

from __future__ import annotations

import asyncio
from contextlib import aclosing
from fnmatch import fnmatch
from typing import Callable, Iterable, Optional, Sequence, Union

from semantic_memory.core.config import ChunkingConfig
from semantic_memory.core.exceptions import (
    ConfigurationError,
    NoMatchingExtractorError,
    NoMatchingStrategyError,
    PreconditionFailedError,
    ProcessingCancelledError,
    StorageError,
)
from semantic_memory.core.logging import LoggerMixin
from semantic_memory.core.types import (
    BatchError,
    BatchResult,
    MemoryRecord,
    ProcessResult,
    ProcessStatus,
    SourceMetadata,
)
from semantic_memory.ingestion.chunking.base import ChunkingStrategy
from semantic_memory.ingestion.chunking.registry import StrategyRegistry
from semantic_memory.ingestion.extractors.base import ContentExtractor
from semantic_memory.ingestion.extractors.registry import ExtractorRegistry
from semantic_memory.ingestion.metadata import build_fragment_metadata, chunk_id
from semantic_memory.ingestion.sources.base import ContentSource, ContentStream
from semantic_memory.ingestion.sources.local_file import LOCAL_FILE
from semantic_memory.storage.base import RecordStore


BYTES_PER_MB = 1024 * 1024

CANCELLED_MESSAGE = "Processing cancelled."

# (completed, total, uri); uri is None once a source has finished
ProgressCallback = Callable[[int, int, Optional[str]], None]


class IngestionPipeline(LoggerMixin):
    """Processes content sources into memory records."""

    def __init__(
        self,
        config: ChunkingConfig,
        extractors: Union[ExtractorRegistry, Sequence[ContentExtractor]],
        strategies: Union[StrategyRegistry, Sequence[ChunkingStrategy]],
        record_store: RecordStore,
    ):
        self.config = config
        self.extractors = (
            extractors if isinstance(extractors, ExtractorRegistry) else ExtractorRegistry(extractors)
        )
        self.strategies = (
            strategies if isinstance(strategies, StrategyRegistry) else StrategyRegistry(strategies)
        )
        if len(self.extractors) == 0:
            raise ConfigurationError("IngestionPipeline requires at least one content extractor")
        if len(self.strategies) == 0:
            raise ConfigurationError("IngestionPipeline requires at least one chunking strategy")
        self.record_store = record_store

        self.logger.info(
            "Ingestion pipeline initialized",
            extractors=self.extractors.names,
            strategies=self.strategies.names,
            chunk_size=config.default_chunk_size,
            chunk_overlap=config.default_chunk_overlap,
            concurrency_limit=config.concurrency_limit,
        )

    # -------------------------------------------------------------------------
    # Batch
    # -------------------------------------------------------------------------

    async def process_batch(
        self,
        sources: Iterable[ContentSource],
        on_progress: Optional[ProgressCallback] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> BatchResult:
        """
        Process sources concurrently, at most ``concurrency_limit`` at a time.

        Args:
            sources: Sources to ingest
            on_progress: Called with ``(completed, total, uri)`` as a source
                starts and ``(completed, total, None)`` once it finishes
            cancel_event: When set, sources stop at their next checkpoint

        Returns:
            BatchResult with one ProcessResult per source, in submission order
        """
        sources = list(sources)
        total = len(sources)
        semaphore = asyncio.Semaphore(self.config.concurrency_limit)
        completed = 0

        self.logger.info(
            "Starting batch",
            total_sources=total,
            concurrency_limit=self.config.concurrency_limit,
        )

        async def run(source: ContentSource) -> ProcessResult:
            nonlocal completed
            async with semaphore:
                self._notify(on_progress, completed, total, source.uri)
                result = await self.process_source(source, cancel_event)
                completed += 1
                self._notify(on_progress, completed, total, None)
                self.logger.debug(
                    "Finished source",
                    uri=source.uri,
                    status=result.status.value,
                    completed=completed,
                    total=total,
                )
                return result

        outcomes = await asyncio.gather(
            *(run(source) for source in sources),
            return_exceptions=True,
        )

        results: list[ProcessResult] = []
        for source, outcome in zip(sources, outcomes):
            if isinstance(outcome, ProcessResult):
                results.append(outcome)
            elif isinstance(outcome, Exception):
                self.logger.error("Source raised outside processing", uri=_safe_uri(source), error=str(outcome))
                results.append(ProcessResult(
                    source_uri=_safe_uri(source),
                    success=False,
                    status=ProcessStatus.ERROR,
                    message=str(outcome) or outcome.__class__.__name__,
                ))
            else:
                raise outcome

        batch = self._aggregate(results)

        self.logger.info(
            "Batch completed",
            processed=batch.processed_sources,
            skipped=batch.skipped_sources,
            failed=batch.failed_sources,
            chunks_added=batch.total_chunks_added,
        )
        if batch.failed_sources:
            self.logger.warning("Batch finished with errors", failed=batch.failed_sources)
        return batch

    def _aggregate(self, results: list[ProcessResult]) -> BatchResult:
        by_status = {status: 0 for status in ProcessStatus}
        for result in results:
            by_status[result.status] += 1

        return BatchResult(
            total_sources=len(results),
            processed_sources=by_status[ProcessStatus.PROCESSED],
            skipped_sources=by_status[ProcessStatus.SKIPPED],
            failed_sources=by_status[ProcessStatus.ERROR],
            total_chunks_added=sum(r.chunk_count for r in results),
            results=results,
            errors=[
                BatchError(uri=r.source_uri, error=r.message or "Unknown error")
                for r in results
                if r.status is ProcessStatus.ERROR
            ],
        )

    def _notify(
        self,
        on_progress: Optional[ProgressCallback],
        completed: int,
        total: int,
        uri: Optional[str],
    ) -> None:
        if on_progress is None:
            return
        try:
            on_progress(completed, total, uri)
        except Exception as e:
            self.logger.warning("Progress callback failed", error=str(e))

    # -------------------------------------------------------------------------
    # Single source
    # -------------------------------------------------------------------------

    async def process_source(
        self,
        source: ContentSource,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> ProcessResult:
        """
        Extract, chunk and store one source.

        Never raises for processing failures; the returned result's status is
        ``processed``, ``skipped`` or ``error``. The source's ``cleanup`` and
        any opened stream are released exactly once before returning.
        """
        uri = source.uri
        result = ProcessResult(
            source_uri=uri,
            success=False,
            status=ProcessStatus.ERROR,
            message="Processing did not complete.",
        )
        stream: Optional[ContentStream] = None
        added: list[MemoryRecord] = []
        log = self.logger.bind(uri=uri)

        try:
            self._check_cancelled(uri, cancel_event)

            metadata = await source.get_metadata()
            result.metadata = metadata.model_dump(mode="json")

            self._check_preconditions(metadata)

            extractor = self.extractors.find(metadata)
            if extractor is None:
                raise NoMatchingExtractorError(uri, metadata.mime_type)
            log.debug("Using extractor", extractor=extractor.name)

            self._check_cancelled(uri, cancel_event)
            stream = await source.open_stream()
            extracted = await extractor.extract(stream, metadata)
            result.extracted_content_type = extracted.content_type

            if extracted.is_empty:
                log.info("Extracted content is empty, skipping")
                result.success = True
                result.status = ProcessStatus.SKIPPED
                result.message = "Extracted content is empty."
                return result

            strategy = self.strategies.find(extracted.content_type)
            if strategy is None:
                raise NoMatchingStrategyError(extracted.content_type)
            result.chunking_strategy_used = strategy.name
            log.debug("Using chunking strategy", strategy=strategy.name)

            max_chunks = self.config.max_chunks_per_source
            fragments = strategy.chunk(extracted.content, self.config, metadata)
            async with aclosing(fragments):
                iterator = aiter(fragments)
                while len(added) < max_chunks:
                    self._check_cancelled(uri, cancel_event)
                    try:
                        fragment = await anext(iterator)
                    except StopAsyncIteration:
                        break

                    if fragment.is_blank:
                        continue

                    index = len(added)
                    entry_metadata = build_fragment_metadata(
                        metadata, extracted, fragment.metadata, index,
                    )
                    try:
                        record = await self.record_store.store_memory(
                            fragment.content, entry_metadata,
                        )
                    except Exception as e:
                        log.error("Failed to store chunk", chunk_index=index, error=str(e))
                        raise StorageError(
                            f"Failed to store chunk {index}: {e}",
                            details={"uri": uri, "chunk_index": index},
                        ) from e

                    added.append(self._finalize_record(record, fragment.content, entry_metadata, uri, index))
                else:
                    log.warning("Reached maximum chunk limit", max_chunks=max_chunks)

            log.info("Source processed", chunk_count=len(added))
            result.success = True
            result.status = ProcessStatus.PROCESSED
            result.message = f"Processed successfully with {len(added)} chunks."
            return result

        except (PreconditionFailedError, NoMatchingExtractorError, NoMatchingStrategyError) as e:
            log.info("Skipping source", reason=e.message)
            result.status = ProcessStatus.SKIPPED
            result.message = e.message
            return result

        except ProcessingCancelledError as e:
            log.warning("Processing cancelled", chunk_count=len(added))
            result.status = ProcessStatus.ERROR
            result.message = e.message
            return result

        except Exception as e:
            log.error("Failed to process source", error=str(e), error_type=e.__class__.__name__)
            result.status = ProcessStatus.ERROR
            result.message = str(e) or "Unknown processing error."
            return result

        finally:
            # Committed records are reported even when a later one failed
            result.chunk_count = len(added)
            result.added_entries = added
            await self._release(source, stream, log)

    def _check_preconditions(self, metadata: SourceMetadata) -> None:
        """Raise PreconditionFailedError for local files that should not be read."""
        if metadata.source_type != LOCAL_FILE:
            return

        limits = self.config.local_file
        if metadata.size is not None:
            if metadata.size > limits.max_file_size_mb * BYTES_PER_MB:
                raise PreconditionFailedError(
                    f"File size exceeds limit ({limits.max_file_size_mb:g}MB)",
                    details={"size": metadata.size},
                )
            if metadata.size == 0:
                raise PreconditionFailedError("Source is empty.")

        extension = metadata.extension
        if limits.allowed_extensions and extension not in limits.allowed_extensions:
            raise PreconditionFailedError(
                f"File extension {extension or '(none)'} is not allowed",
                details={"extension": extension},
            )

        path = str(metadata.extra_fields.get("file_path") or metadata.uri)
        name = metadata.file_name or ""
        for pattern in limits.excluded_patterns:
            if fnmatch(name, pattern) or fnmatch(path, pattern):
                raise PreconditionFailedError(
                    f"File matches excluded pattern {pattern}",
                    details={"pattern": pattern},
                )

    def _check_cancelled(self, uri: str, cancel_event: Optional[asyncio.Event]) -> None:
        if cancel_event is not None and cancel_event.is_set():
            raise ProcessingCancelledError(uri)

    def _finalize_record(
        self,
        record: Optional[MemoryRecord],
        content,
        entry_metadata: dict,
        uri: str,
        index: int,
    ) -> MemoryRecord:
        """Give the stored record an id and the full fragment metadata."""
        fallback_id = chunk_id(uri, index)
        if record is None:
            self.logger.warning("Record store returned nothing, assigning fallback id", uri=uri, chunk_index=index)
            return MemoryRecord(id=fallback_id, content=content, metadata=entry_metadata)

        updates: dict = {"metadata": {**entry_metadata, **record.metadata}}
        if not record.id:
            self.logger.warning("Record store returned no id, assigning fallback", uri=uri, chunk_index=index)
            updates["id"] = fallback_id
        return record.model_copy(update=updates)

    async def _release(self, source: ContentSource, stream: Optional[ContentStream], log) -> None:
        try:
            await source.cleanup()
        except Exception as e:
            log.warning("Source cleanup failed", error=str(e))

        if stream is not None:
            try:
                await stream.aclose()
            except Exception as e:
                log.warning("Failed to close content stream", error=str(e))


def _safe_uri(source: ContentSource) -> str:
    try:
        return source.uri
    except Exception:
        return repr(source)
