from __future__ import annotations
from typing import Any, Mapping
from sqlalchemy import select, delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine
from modgate.db import Base, build_sessionmaker
from modgate.errors import StorageError, ValidationError
from modgate.models.submission import Submission, PENDING, REQUIRED_COLUMNS

_WRITABLE = ("user_id", "user_name", "server", "car", "price", "photo_reference", "file_path_hint")


class SubmissionStore:
    """Pending submissions table.

    Each call opens its own session and closes it before returning, so no
    connection is held across an upstream request. Writes commit on their own.
    """

    def __init__(self, engine: AsyncEngine):
        self._engine = engine
        self._sessions = build_sessionmaker(engine)

    async def create_schema(self) -> None:
        try:
            async with self._engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except SQLAlchemyError as e:
            raise StorageError(f"Could not create schema: {e}") from e

    async def create(self, fields: Mapping[str, Any]) -> int:
        missing = [c for c in REQUIRED_COLUMNS if fields.get(c) is None]
        if missing:
            raise ValidationError(f"Bad Request: Missing fields: {', '.join(missing)}")
        row = Submission(**{k: fields.get(k) for k in _WRITABLE}, status=PENDING)
        try:
            async with self._sessions() as session:
                session.add(row)
                await session.commit()
                return row.id
        except SQLAlchemyError as e:
            raise StorageError(str(e)) from e

    async def list_pending(self) -> list[Submission]:
        q = (
            select(Submission)
            .where(Submission.status == PENDING)
            .order_by(Submission.created_at.desc(), Submission.id.desc())
        )
        try:
            async with self._sessions() as session:
                return list((await session.execute(q)).scalars().all())
        except SQLAlchemyError as e:
            raise StorageError(str(e)) from e

    async def get(self, submission_id: int) -> Submission | None:
        try:
            async with self._sessions() as session:
                return await session.get(Submission, submission_id)
        except SQLAlchemyError as e:
            raise StorageError(str(e)) from e

    async def delete(self, submission_id: int) -> bool:
        """Remove the row. False means it was already gone."""
        try:
            async with self._sessions() as session:
                result = await session.execute(delete(Submission).where(Submission.id == submission_id))
                await session.commit()
                return (result.rowcount or 0) > 0
        except SQLAlchemyError as e:
            raise StorageError(str(e)) from e
