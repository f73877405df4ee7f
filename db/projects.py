"""Project store adapter over the remote ``projects`` table.

The only access path to saved projects. Each call is one round trip in
its own session; nothing is cached between calls.

    load_projects()      → newest first, tone text parsed per row
    upsert_project(p)    → insert-or-replace on ``id``, absent fields → NULL
    delete_project(id)   → hard delete

Every database failure is raised as :class:`ProjectStoreError`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from core.projects import (
    Project,
    messages_from_list,
    messages_to_list,
    parse_tone,
    serialize_tone,
)
from db.models import ProjectRecord

logger = logging.getLogger(__name__)

# Dialects with native INSERT ... ON CONFLICT DO UPDATE support.
_UPSERT_INSERTS: dict[str, Callable[..., Any]] = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


class ProjectStoreError(RuntimeError):
    """Raised when a project store query, upsert or delete fails."""


def _record_to_project(record: ProjectRecord) -> Project:
    """Convert a ProjectRecord row to a Project. Bad tone text yields ``tone=None``."""
    return Project(
        id=record.id,
        name=record.name,
        messages=messages_from_list(record.messages),
        mode=record.mode,
        preset_id=record.preset_id,
        tone=parse_tone(record.tone),
        mix_file_name=record.mix_file_name,
        created_at=record.created_at,
    )


class ProjectStore:
    """Adapter translating ``Project`` values to and from ``projects`` rows.

    Args:
        session_factory: Sessionmaker bound to the target database.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def load_projects(self) -> list[Project]:
        """Return all projects, newest ``created_at`` first.

        Raises:
            ProjectStoreError: If the list query fails.
        """
        stmt = select(ProjectRecord).order_by(ProjectRecord.created_at.desc())
        try:
            with self._session_factory() as session:
                records = session.scalars(stmt).all()
                return [_record_to_project(r) for r in records]
        except SQLAlchemyError as exc:
            raise ProjectStoreError(f"Failed to load projects: {exc}") from exc

    def upsert_project(self, project: Project, *, now: datetime | None = None) -> Project:
        """Insert or fully replace the row keyed by ``project.id``.

        Args:
            project: Snapshot to store. Fields left as None are written as NULL.
            now: Timestamp for ``created_at`` on first insert. Defaults to
                the current UTC time. Kept unchanged on replace.

        Returns:
            The stored project as read back from the table.

        Raises:
            ProjectStoreError: If the upsert fails.
        """
        project_id = str(project.id)
        tone = project.tone
        columns = ProjectRecord.__mapper__.columns
        values = {
            columns["name"]: project.name,
            columns["messages"]: messages_to_list(project.messages),
            columns["mode"]: project.mode,
            columns["preset_id"]: project.preset_id,
            columns["tone"]: serialize_tone(tone),
            columns["brightness"]: tone.brightness if tone else None,
            columns["aggression"]: tone.aggression if tone else None,
            columns["tightness"]: tone.tightness if tone else None,
            columns["mix_file_name"]: project.mix_file_name,
        }

        try:
            with self._session_factory() as session:
                dialect = session.get_bind().dialect.name
                insert = _UPSERT_INSERTS.get(dialect)
                if insert is None:
                    raise ProjectStoreError(f"Upsert not supported on dialect {dialect!r}")

                stmt = insert(ProjectRecord.__table__).values(
                    {
                        columns["id"]: project_id,
                        columns["created_at"]: now or datetime.now(UTC),
                        **values,
                    }
                )
                stmt = stmt.on_conflict_do_update(
                    index_elements=[columns["id"]],
                    set_={col: stmt.excluded[col.key] for col in values},
                )
                session.execute(stmt)
                session.commit()

                stored = session.get(ProjectRecord, project_id, populate_existing=True)
                if stored is None:
                    raise ProjectStoreError(f"Project {project_id!r} missing after upsert")
                return _record_to_project(stored)
        except SQLAlchemyError as exc:
            raise ProjectStoreError(f"Failed to save project {project_id!r}: {exc}") from exc

    def delete_project(self, project_id: object) -> None:
        """Permanently delete the project whose id equals ``str(project_id)``.

        Deleting an id that does not exist is not an error.

        Raises:
            ProjectStoreError: If the delete fails.
        """
        pid = str(project_id)
        try:
            with self._session_factory() as session:
                result = session.execute(delete(ProjectRecord).where(ProjectRecord.id == pid))
                session.commit()
        except SQLAlchemyError as exc:
            raise ProjectStoreError(f"Failed to delete project {pid!r}: {exc}") from exc
        logger.info("Deleted project %s (%d row(s))", pid, result.rowcount)
