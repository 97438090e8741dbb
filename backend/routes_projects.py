"""
backend/routes_projects.py

Projects CRUD endpoint. One collection path, operation chosen by HTTP method:

- GET     /api/projects          -> 200 {"projects": [...]}
- POST    /api/projects          -> 201 {"project": {...}}
- PUT     /api/projects?id=...   -> 200 {"project": {...}}
- DELETE  /api/projects?id=...   -> 200 {"success": true}
- OPTIONS /api/projects          -> 200, empty body

The router does no business logic: it validates request shape, delegates to
ProjectStore and maps store errors to status codes (400/404/500). Error bodies
are {"error": "..."} (see the exception handlers in main.py).
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response

# Import local modules (robust fallback for different run contexts)
try:
    from backend.config import IS_DEV
    from backend.errors import NotFoundError, ProjectStoreError, ValidationError
    from backend.project_store import ProjectStore, get_project_store
    from backend.schemas_projects import (
        DeleteResponse,
        ErrorResponse,
        ProjectCreateRequest,
        ProjectListResponse,
        ProjectResponse,
        ProjectUpdateRequest,
    )
except ModuleNotFoundError:
    from config import IS_DEV
    from errors import NotFoundError, ProjectStoreError, ValidationError
    from project_store import ProjectStore, get_project_store
    from schemas_projects import (
        DeleteResponse,
        ErrorResponse,
        ProjectCreateRequest,
        ProjectListResponse,
        ProjectResponse,
        ProjectUpdateRequest,
    )


PROJECTS_PATH = "/api/projects"

router = APIRouter(
    prefix=PROJECTS_PATH,
    tags=["projects"],
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)


def to_http_exception(error: ProjectStoreError) -> HTTPException:
    """Map a store error to an HTTP error with a short, safe message."""
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=404, detail="Project not found")
    if isinstance(error, ValidationError):
        return HTTPException(status_code=400, detail=error.message)
    # StorageError (and anything else from the store): never leak paths/OS errors
    print(f"[PROJECTS] Storage failure: {error.message}")
    return HTTPException(status_code=500, detail="Storage error")


def require_project_id(project_id: Optional[str]) -> str:
    if project_id is None or not project_id.strip():
        raise HTTPException(status_code=400, detail="Project ID is required")
    return project_id.strip()


@router.get("", response_model=ProjectListResponse)
def list_projects(store: ProjectStore = Depends(get_project_store)) -> ProjectListResponse:
    """
    Return the full project collection.

    Raises:
        HTTPException(500): backing file unreadable
    """
    try:
        projects = store.list()
    except ProjectStoreError as e:
        raise to_http_exception(e) from e

    if IS_DEV:
        print(f"[PROJECTS] List: results={len(projects)}")
    return ProjectListResponse(projects=projects)


@router.post("", response_model=ProjectResponse, status_code=201)
def create_project(
    request: ProjectCreateRequest,
    store: ProjectStore = Depends(get_project_store),
) -> ProjectResponse:
    """
    Create a project from a partial record.

    Raises:
        HTTPException(400): name/address/city missing, bad enum value, duplicate id
        HTTPException(500): backing file unwritable
    """
    try:
        project = store.create(request.to_partial())
    except ProjectStoreError as e:
        raise to_http_exception(e) from e

    if IS_DEV:
        print(f"[PROJECTS] Created: id={project['id']}")
    return ProjectResponse(project=project)


@router.put("", response_model=ProjectResponse)
def update_project(
    request: Optional[ProjectUpdateRequest] = None,
    project_id: Optional[str] = Query(None, alias="id", description="Project ID"),
    store: ProjectStore = Depends(get_project_store),
) -> ProjectResponse:
    """
    Merge the supplied fields onto an existing project.

    Raises:
        HTTPException(400): id query parameter missing
        HTTPException(404): unknown id
        HTTPException(500): backing file unreadable/unwritable
    """
    project_id = require_project_id(project_id)
    partial = request.to_partial() if request is not None else {}

    try:
        project = store.update(project_id, partial)
    except ProjectStoreError as e:
        raise to_http_exception(e) from e

    if IS_DEV:
        print(f"[PROJECTS] Updated: id={project_id}")
    return ProjectResponse(project=project)


@router.delete("", response_model=DeleteResponse)
def delete_project(
    project_id: Optional[str] = Query(None, alias="id", description="Project ID"),
    store: ProjectStore = Depends(get_project_store),
) -> DeleteResponse:
    """
    Remove a project.

    Raises:
        HTTPException(400): id query parameter missing
        HTTPException(404): unknown id (collection untouched)
        HTTPException(500): backing file unreadable/unwritable
    """
    project_id = require_project_id(project_id)

    try:
        store.delete(project_id)
    except ProjectStoreError as e:
        raise to_http_exception(e) from e

    if IS_DEV:
        print(f"[PROJECTS] Deleted: id={project_id}")
    return DeleteResponse(success=True)


@router.options("")
def projects_options() -> Response:
    """Bare OPTIONS (non-preflight): 200 with an empty body."""
    return Response(status_code=200)
