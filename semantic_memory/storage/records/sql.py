"""
Semantic Memory - SQL Record Store
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Optional

from sqlalchemy import JSON, DateTime, Integer, LargeBinary, String, Text, delete, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from semantic_memory.core.exceptions import StorageError
from semantic_memory.core.types import ChangeKind, Content, MemoryRecord, StoreChange, utc_now
from semantic_memory.memory.filters import MemoryFilter, apply_filter
from semantic_memory.storage.base import RecordStore
from semantic_memory.storage.records.memory import new_memory_id


class Base(DeclarativeBase):
    """Base class for all database models."""

    pass


class MemoryRecordModel(Base):
    """Database model for memory records."""

    __tablename__ = "memory_records"

    # Insertion order; ids are random and timestamps can tie
    seq: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id: Mapped[str] = mapped_column(String(512), unique=True, index=True, nullable=False)

    # Exactly one of these is set
    text_content: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    binary_content: Mapped[Optional[bytes]] = mapped_column(LargeBinary, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    record_metadata: Mapped[dict] = mapped_column("metadata", JSON, default=dict, nullable=False)


class SqlRecordStore(RecordStore):
    """Records persisted through async SQLAlchemy."""

    def __init__(self, url: str, echo: bool = False) -> None:
        super().__init__()
        self._url = url
        self._echo = echo
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None

    @property
    def is_connected(self) -> bool:
        return self._engine is not None

    async def connect(self) -> None:
        """Create the engine and the ``memory_records`` table."""
        if self._engine is not None:
            return

        try:
            self._engine = create_async_engine(self._url, echo=self._echo)
            self._session_factory = async_sessionmaker(
                bind=self._engine,
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=False,
            )
            async with self._engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            self.logger.info("Record database ready", url=self._url.split("@")[-1])
        except SQLAlchemyError as e:
            self._engine = None
            self._session_factory = None
            raise StorageError(f"Failed to connect record database: {e}") from e

    async def disconnect(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
            self.logger.info("Record database disposed")

    async def health_check(self) -> dict[str, Any]:
        if not self._engine:
            return {"status": "disconnected"}

        try:
            async with self._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return {"status": "healthy"}
        except SQLAlchemyError as e:
            return {"status": "unhealthy", "error": str(e)}

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        """Transactional session; commits on success, rolls back on error."""
        if self._session_factory is None:
            await self.connect()

        session = self._session_factory()
        try:
            yield session
            await session.commit()
        except SQLAlchemyError as e:
            await session.rollback()
            raise StorageError(f"Record database operation failed: {e}") from e
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def store_memory(
        self,
        content: Content,
        metadata: Optional[dict[str, Any]] = None,
        id: Optional[str] = None,
    ) -> MemoryRecord:
        record = MemoryRecord(
            id=id or new_memory_id(),
            content=content,
            timestamp=utc_now(),
            metadata=dict(metadata or {}),
        )
        async with self._session() as session:
            session.add(MemoryRecordModel(
                id=record.id,
                text_content=record.content if record.is_text else None,
                binary_content=None if record.is_text else bytes(record.content),
                created_at=record.timestamp,
                record_metadata=record.metadata,
            ))

        self.changes.emit(StoreChange(ChangeKind.ADDED, record.id))
        return record

    async def get_memories(self) -> list[MemoryRecord]:
        async with self._session() as session:
            result = await session.execute(
                select(MemoryRecordModel).order_by(MemoryRecordModel.seq)
            )
            return [self._to_domain(model) for model in result.scalars().all()]

    async def get_memory(self, memory_id: str) -> Optional[MemoryRecord]:
        async with self._session() as session:
            result = await session.execute(
                select(MemoryRecordModel).where(MemoryRecordModel.id == memory_id)
            )
            model = result.scalar_one_or_none()
            return self._to_domain(model) if model else None

    async def delete_memory(self, memory_id: str) -> bool:
        async with self._session() as session:
            result = await session.execute(
                delete(MemoryRecordModel).where(MemoryRecordModel.id == memory_id)
            )
            deleted = result.rowcount > 0

        if deleted:
            self.changes.emit(StoreChange(ChangeKind.DELETED, memory_id))
        return deleted

    async def clear_memories(self) -> None:
        async with self._session() as session:
            await session.execute(delete(MemoryRecordModel))

        self.changes.emit(StoreChange(ChangeKind.CLEARED))

    async def search_memories(
        self,
        query: str,
        limit: int = 10,
        memory_filter: Optional[MemoryFilter] = None,
    ) -> list[MemoryRecord]:
        async with self._session() as session:
            result = await session.execute(
                select(MemoryRecordModel)
                .where(MemoryRecordModel.text_content.is_not(None))
                .where(MemoryRecordModel.text_content.icontains(query, autoescape=True))
                .order_by(MemoryRecordModel.seq)
            )
            matches = [self._to_domain(model) for model in result.scalars().all()]

        return apply_filter(matches, memory_filter)[:limit]

    def _to_domain(self, model: MemoryRecordModel) -> MemoryRecord:
        created_at = model.created_at
        # SQLite drops the offset
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        content = model.text_content if model.text_content is not None else model.binary_content
        return MemoryRecord(
            id=model.id,
            content=content if content is not None else "",
            timestamp=created_at,
            metadata=dict(model.record_metadata or {}),
        )
