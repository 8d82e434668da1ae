"""
Semantic Memory - Vector Memory Manager

The semantic index over a record store. It keeps one embedding per text
record in a vector store, follows the record store's change channel to stay
in step with it, and answers similarity queries. Without a usable embedding
provider every query is answered by the record store's lexical search.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional, Union

from semantic_memory.core.config import settings
from semantic_memory.core.events import ChangeChannel, Subscription
from semantic_memory.core.exceptions import ProviderUnavailableError, VectorStoreError
from semantic_memory.core.logging import LoggerMixin
from semantic_memory.core.types import MemoryRecord, StoreChange, VectorEntry
from semantic_memory.embeddings.base import EmbeddingProvider
from semantic_memory.memory.filters import MemoryFilter, apply_filter
from semantic_memory.storage.base import RecordStore, VectorStore
from semantic_memory.storage.vector.memory import InMemoryVectorStore


class IndexState(str, Enum):
    """Lifecycle of the semantic index."""
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"
    SYNCING = "syncing"
    DISPOSED = "disposed"


class SearchMode(str, Enum):
    """How ``search_similar_memories`` answers queries."""
    SEMANTIC = "semantic"
    LEXICAL = "lexical"


@dataclass(frozen=True)
class SyncResult:
    """What one reconciliation pass changed."""
    removed: int
    embedded: int


NewMemory = Union[str, bytes, Mapping[str, Any]]


class VectorMemoryManager(LoggerMixin):
    """Keeps a vector table in step with a record store and searches it."""

    def __init__(
        self,
        record_store: RecordStore,
        vector_store: Optional[VectorStore] = None,
        embedding_provider: Optional[EmbeddingProvider] = None,
        relevance_threshold: Optional[float] = None,
        batch_size: Optional[int] = None,
        default_source: Optional[str] = None,
        default_type: Optional[str] = None,
        default_limit: Optional[int] = None,
    ):
        self.record_store = record_store
        self.vector_store = vector_store if vector_store is not None else InMemoryVectorStore()
        self.embedding_provider = embedding_provider

        self.relevance_threshold = (
            settings.RELEVANCE_THRESHOLD if relevance_threshold is None else relevance_threshold
        )
        self.batch_size = max(1, batch_size or settings.VECTOR_BATCH_SIZE)
        self.default_source = default_source or settings.DEFAULT_MEMORY_SOURCE
        self.default_type = default_type or settings.DEFAULT_MEMORY_TYPE
        self.default_limit = default_limit or settings.DEFAULT_SEARCH_LIMIT

        self.changes: ChangeChannel[StoreChange] = ChangeChannel("VectorMemoryManager.changes")

        self._state = IndexState.UNINITIALIZED
        self._mode = SearchMode.SEMANTIC if embedding_provider else SearchMode.LEXICAL
        self._init_lock = asyncio.Lock()
        self._sync_lock = asyncio.Lock()
        self._subscription: Optional[Subscription] = None
        self._sync_tasks: set[asyncio.Task] = set()
        # Records with an embedding call in flight
        self._pending: set[str] = set()

    @property
    def state(self) -> IndexState:
        return self._state

    @property
    def search_mode(self) -> SearchMode:
        return self._mode

    @property
    def is_initialized(self) -> bool:
        return self._state in (IndexState.READY, IndexState.SYNCING)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def initialize(self) -> None:
        """
        Embed every existing record, then follow the record store's changes.

        Records that already have a vector are left alone and vectors without
        a record are removed, so restarting over a persistent vector store
        only embeds what is missing. Records are embedded in batches of
        ``batch_size``; batches run in order, records inside a batch run
        concurrently. Calling this again once initialized does nothing.
        """
        if self.is_initialized:
            return

        async with self._init_lock:
            if self._state is not IndexState.UNINITIALIZED:
                return

            self._state = IndexState.INITIALIZING
            try:
                if not self.record_store.is_connected:
                    await self.record_store.connect()
                if not self.vector_store.is_connected:
                    await self.vector_store.connect()

                self.logger.info("Initializing vector memory", mode=self._mode.value)
                # Changes made during the initial sync queue a follow-up sync
                self._subscription = self.record_store.changes.subscribe(self._on_store_change)
                async with self._sync_lock:
                    synced = await self.sync_with_store()

                self._state = IndexState.READY
                self.logger.info(
                    "Vector memory initialized",
                    embedded=synced.embedded,
                    removed=synced.removed,
                )
            except Exception as e:
                if self._subscription is not None:
                    self._subscription.dispose()
                    self._subscription = None
                self._state = IndexState.UNINITIALIZED
                self.logger.error("Failed to initialize vector memory", error=str(e))
                raise

    async def dispose(self) -> None:
        """Stop following the record store and release the vector store."""
        if self._state is IndexState.DISPOSED:
            return

        if self._subscription is not None:
            self._subscription.dispose()
            self._subscription = None

        if self._sync_tasks:
            await asyncio.gather(*self._sync_tasks, return_exceptions=True)

        await self.vector_store.disconnect()
        self._state = IndexState.DISPOSED
        self.logger.info("Vector memory disposed")

    # -------------------------------------------------------------------------
    # Records
    # -------------------------------------------------------------------------

    async def add_memory(self, memory: NewMemory) -> MemoryRecord:
        """
        Store a record, then embed it.

        Bare text or bytes get the default source and type. A mapping may
        carry ``content``, ``metadata`` and optionally ``id``. A failed
        embedding is logged; the record is still returned.
        """
        if isinstance(memory, (str, bytes)):
            content = memory
            metadata: dict[str, Any] = {"source": self.default_source, "type": self.default_type}
            memory_id = None
        else:
            content = memory["content"]
            metadata = dict(memory.get("metadata") or {})
            metadata.setdefault("source", self.default_source)
            metadata.setdefault("type", self.default_type)
            memory_id = memory.get("id")

        record = await self.record_store.store_memory(content, metadata, id=memory_id)
        await self._embed_record(record)
        return record

    async def get_memories(self) -> list[MemoryRecord]:
        return await self.record_store.get_memories()

    async def get_memory(self, memory_id: str) -> Optional[MemoryRecord]:
        return await self.record_store.get_memory(memory_id)

    async def delete_memory(self, memory_id: str) -> bool:
        """Remove a record's vector, then the record itself."""
        try:
            await self.vector_store.delete(memory_id)
        except VectorStoreError as e:
            # The next sync removes the orphan
            self.logger.warning("Failed to delete vector", memory_id=memory_id, error=str(e))
        return await self.record_store.delete_memory(memory_id)

    async def clear_memories(self) -> None:
        await self.vector_store.clear()
        await self.record_store.clear_memories()

    # -------------------------------------------------------------------------
    # Search
    # -------------------------------------------------------------------------

    async def search_memories(
        self,
        query: str,
        limit: Optional[int] = None,
        memory_filter: Optional[MemoryFilter] = None,
    ) -> list[MemoryRecord]:
        """Case-insensitive substring search over record content."""
        return await self.record_store.search_memories(
            query, self.default_limit if limit is None else limit, memory_filter,
        )

    async def search_similar_memories(
        self,
        query: str,
        limit: Optional[int] = None,
        memory_filter: Optional[MemoryFilter] = None,
        threshold: Optional[float] = None,
    ) -> list[MemoryRecord]:
        """
        Records most similar to ``query``, best first.

        Scores below the relevance threshold are dropped first, then the
        metadata filter applies, then the result is cut to ``limit``. Each
        returned record carries its score in ``relevance``. Falls back to
        ``search_memories`` when no embedding can be computed or scoring
        fails.
        """
        limit = self.default_limit if limit is None else limit
        threshold = self.relevance_threshold if threshold is None else threshold

        if self._state is IndexState.UNINITIALIZED:
            await self.initialize()

        if self.embedding_provider is None or self._mode is SearchMode.LEXICAL:
            self.logger.debug("No embedding provider, using lexical search")
            return await self.search_memories(query, limit, memory_filter)

        try:
            query_vector = await self.embedding_provider.embed_query(query)
        except ProviderUnavailableError as e:
            self._degrade(e)
            return await self.search_memories(query, limit, memory_filter)
        except Exception as e:
            self.logger.warning("Query embedding failed, using lexical search", error=str(e))
            return await self.search_memories(query, limit, memory_filter)

        try:
            hits = await self.vector_store.search(query_vector)
        except Exception as e:
            self.logger.error("Similarity search failed, using lexical search", error=str(e))
            return await self.search_memories(query, limit, memory_filter)

        relevant: list[MemoryRecord] = []
        for hit in hits:
            if hit.score < threshold:
                continue
            record = await self.record_store.get_memory(hit.memory_id)
            if record is None:
                continue
            relevant.append(record.model_copy(update={"relevance": hit.score}))

        results = apply_filter(relevant, memory_filter)[:limit]
        self.logger.debug(
            "Semantic search completed",
            candidates=len(hits),
            relevant=len(relevant),
            returned=len(results),
        )
        return results

    # -------------------------------------------------------------------------
    # Synchronization
    # -------------------------------------------------------------------------

    async def sync_with_store(self) -> SyncResult:
        """
        Reconcile the vector table with the record store.

        Vectors whose record is gone are removed. Text records without a
        vector are embedded, except those already being embedded.
        """
        records = await self.record_store.get_memories()
        record_ids = {record.id for record in records}
        vector_ids = await self.vector_store.ids()

        removed = 0
        for orphan in vector_ids - record_ids:
            if await self.vector_store.delete(orphan):
                removed += 1

        missing = [
            record for record in records
            if record.id not in vector_ids and record.id not in self._pending
        ]
        embedded = await self._embed_in_batches(missing)

        self.logger.debug(
            "Synced vector memory",
            records=len(records),
            removed=removed,
            embedded=embedded,
        )
        return SyncResult(removed=removed, embedded=embedded)

    def _on_store_change(self, event: StoreChange) -> None:
        if self._state is IndexState.DISPOSED:
            return
        try:
            task = asyncio.get_running_loop().create_task(self._sync_and_notify(event))
        except RuntimeError:
            self.logger.warning("Store change outside an event loop, sync deferred", kind=event.kind.value)
            return
        self._sync_tasks.add(task)
        task.add_done_callback(self._sync_tasks.discard)

    async def _sync_and_notify(self, event: StoreChange) -> None:
        async with self._sync_lock:
            if self._state is IndexState.DISPOSED:
                return
            if self._state is IndexState.READY:
                self._state = IndexState.SYNCING
            try:
                await self.sync_with_store()
            except Exception as e:
                self.logger.error("Failed to sync vector memory", error=str(e))
            finally:
                if self._state is IndexState.SYNCING:
                    self._state = IndexState.READY
        self.changes.emit(event)

    async def wait_for_sync(self) -> None:
        """Wait until every scheduled sync has finished."""
        while self._sync_tasks:
            await asyncio.gather(*list(self._sync_tasks), return_exceptions=True)

    # -------------------------------------------------------------------------
    # Embedding
    # -------------------------------------------------------------------------

    async def _embed_in_batches(self, records: list[MemoryRecord]) -> int:
        embedded = 0
        for start in range(0, len(records), self.batch_size):
            batch = records[start:start + self.batch_size]
            outcomes = await asyncio.gather(*(self._embed_record(r) for r in batch))
            embedded += sum(1 for ok in outcomes if ok)
            self.logger.debug(
                "Processed vector batch",
                batch=start // self.batch_size + 1,
                batches=-(-len(records) // self.batch_size),
            )
        return embedded

    async def _embed_record(self, record: MemoryRecord) -> bool:
        """Embed one record. Failures are logged and reported as False."""
        if self.embedding_provider is None or self._mode is SearchMode.LEXICAL:
            return False
        if not record.is_text:
            self.logger.debug("Skipping binary record", memory_id=record.id)
            return False
        if record.id in self._pending:
            return False

        self._pending.add(record.id)
        try:
            vector = await self.embedding_provider.embed_text(record.content)
            await self.vector_store.upsert(VectorEntry(record.id, vector))
            self.logger.debug("Added vector for memory", memory_id=record.id)
            return True
        except ProviderUnavailableError as e:
            self._degrade(e)
            return False
        except Exception as e:
            self.logger.error("Failed to add vector for memory", memory_id=record.id, error=str(e))
            return False
        finally:
            self._pending.discard(record.id)

    def _degrade(self, error: ProviderUnavailableError) -> None:
        if self._mode is SearchMode.LEXICAL:
            return
        self._mode = SearchMode.LEXICAL
        self.logger.error(
            "Embedding provider unavailable, switching to lexical search",
            error=error.message,
        )
