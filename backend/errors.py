"""
backend/errors.py

Error taxonomy for the project store.

The HTTP layer (routes_projects.py) maps these to status codes:
- ValidationError -> 400
- NotFoundError   -> 404
- StorageError    -> 500
"""


class ProjectStoreError(Exception):
    """Base class for all project store failures."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ProjectStoreError):
    """Raised when a record is missing required fields or is otherwise malformed."""


class NotFoundError(ProjectStoreError):
    """Raised when an update/delete references an unknown project id."""

    def __init__(self, project_id: str):
        super().__init__("Project not found")
        self.project_id = project_id


class StorageError(ProjectStoreError):
    """Raised when the backing file cannot be read, parsed or written."""
