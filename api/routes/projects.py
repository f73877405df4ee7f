"""REST endpoints for saved projects."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path, Response

from api.deps import get_project_store
from api.schemas.projects import ProjectIn, ProjectListResponse, ProjectOut
from db.projects import ProjectStore, ProjectStoreError
from infrastructure.metrics import record_store_error

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/projects", tags=["projects"])

Store = Annotated[ProjectStore, Depends(get_project_store)]
ProjectId = Annotated[str, Path(min_length=1)]

STORE_UNAVAILABLE = "Project storage is unavailable. Try again in a moment."


def _store_failure(operation: str, exc: ProjectStoreError) -> HTTPException:
    logger.error("Project store %s failed: %s", operation, exc)
    record_store_error(operation)
    return HTTPException(status_code=503, detail=STORE_UNAVAILABLE)


@router.get("", response_model=ProjectListResponse)
def list_projects(store: Store) -> ProjectListResponse:
    """List all saved projects, newest first."""
    try:
        projects = store.load_projects()
    except ProjectStoreError as exc:
        raise _store_failure("load", exc) from exc
    return ProjectListResponse(
        projects=[ProjectOut.from_project(p) for p in projects], total=len(projects)
    )


@router.put("/{project_id}", response_model=ProjectOut)
def upsert_project(project_id: ProjectId, body: ProjectIn, store: Store) -> ProjectOut:
    """Create the project or replace every field of an existing one."""
    try:
        stored = store.upsert_project(body.to_project(project_id))
    except ProjectStoreError as exc:
        raise _store_failure("upsert", exc) from exc
    return ProjectOut.from_project(stored)


@router.delete("/{project_id}", status_code=204)
def delete_project(project_id: ProjectId, store: Store) -> Response:
    """Permanently delete a project. Unknown ids are not an error."""
    try:
        store.delete_project(project_id)
    except ProjectStoreError as exc:
        raise _store_failure("delete", exc) from exc
    return Response(status_code=204)
