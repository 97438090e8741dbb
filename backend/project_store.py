"""
backend/project_store.py

File-backed project store.

The whole collection lives in a single JSON array (DATA_DIR/projects.json).

Guarantees:
- Reads never fail for a missing directory or file (both are created with [])
- Every mutation is a read-modify-write of the entire collection
- Writes go to a temp file in the same directory and are swapped in with
  os.replace, so readers never see a half-written file
- Read-modify-write cycles are serialized by a process-local lock

Known boundary: two processes writing the same file are last-writer-wins.
"""

from __future__ import annotations

import json
import os
import tempfile
import threading
import uuid
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from pydantic import ValidationError as PydanticValidationError

# Import local modules (robust fallback for different run contexts)
try:
    from backend.config import PROJECTS_FILE, IS_DEV
    from backend.errors import NotFoundError, StorageError, ValidationError
    from backend.models import IMMUTABLE_FIELDS, REQUIRED_FIELDS, Project
except ModuleNotFoundError:
    from config import PROJECTS_FILE, IS_DEV
    from errors import NotFoundError, StorageError, ValidationError
    from models import IMMUTABLE_FIELDS, REQUIRED_FIELDS, Project

Record = Dict[str, Any]


# ---------------------------------------------------------
# Timestamp helpers
# ---------------------------------------------------------
def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """Format as ISO-8601 UTC with millisecond precision and a Z suffix."""
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: str) -> datetime:
    """
    Parse an ISO-8601 timestamp. Naive values are taken as UTC.

    Raises:
        ValueError: if value is not an ISO-8601 string
    """
    if not isinstance(value, str):
        raise ValueError(f"Expected ISO timestamp string, got {type(value).__name__}")
    text = value.strip()
    if text[-1:] in ("Z", "z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def next_timestamp(after: Optional[str] = None) -> str:
    """
    Current time as a timestamp string, strictly later than `after` when given.

    The clock can repeat at millisecond resolution (or step backwards), so the
    result is bumped one millisecond past `after` when needed.
    """
    current = now_utc()
    current = current.replace(microsecond=(current.microsecond // 1000) * 1000)
    if after:
        try:
            previous = parse_timestamp(after)
        except ValueError:
            previous = None
        if previous is not None and current <= previous:
            current = previous + timedelta(milliseconds=1)
    return format_timestamp(current)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


# ---------------------------------------------------------
# Store
# ---------------------------------------------------------
class ProjectStore:
    """Durable CRUD over the project collection backed by one JSON file."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = threading.RLock()

    def init(self) -> None:
        """
        Create the data directory and an empty collection if absent.

        Idempotent; called at startup and before every operation so a file
        removed at runtime is recreated rather than reported as an error.
        """
        with self._lock:
            if self.path.exists():
                return
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                print(f"[STORE] Cannot create data directory {self.path.parent}: {type(e).__name__}")
                raise StorageError("Could not initialize project storage") from e
            self._write([])
            print(f"[STORE] Initialized empty project collection at {self.path}")

    # -- persistence -------------------------------------------------------

    def _read(self) -> List[Record]:
        self.init()
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
        except (OSError, json.JSONDecodeError) as e:
            print(f"[STORE] Failed to read {self.path}: {type(e).__name__}")
            raise StorageError("Could not read project storage") from e

        if not isinstance(data, list):
            print(f"[STORE] {self.path} does not contain a JSON array")
            raise StorageError("Project storage is corrupt")
        if not all(isinstance(record, dict) for record in data):
            print(f"[STORE] {self.path} contains non-object entries")
            raise StorageError("Project storage is corrupt")
        return data

    def _write(self, records: List[Record]) -> None:
        try:
            fd, tmp_name = tempfile.mkstemp(prefix=".projects-", suffix=".tmp", dir=str(self.path.parent))
        except OSError as e:
            print(f"[STORE] Cannot create temp file in {self.path.parent}: {type(e).__name__}")
            raise StorageError("Could not write project storage") from e

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(records, handle, indent=2)
            os.replace(tmp_name, self.path)
        except OSError as e:
            Path(tmp_name).unlink(missing_ok=True)
            print(f"[STORE] Failed to write {self.path}: {type(e).__name__}")
            raise StorageError("Could not write project storage") from e

    # -- helpers -----------------------------------------------------------

    @staticmethod
    def _index_of(records: List[Record], project_id: str) -> int:
        for index, record in enumerate(records):
            if record.get("id") == project_id:
                return index
        raise NotFoundError(project_id)

    @staticmethod
    def _normalize(record: Record) -> Record:
        """Validate against the Project schema and return the wire (camelCase) form."""
        try:
            return Project.model_validate(record).model_dump(by_alias=True, mode="json")
        except PydanticValidationError as e:
            fields = sorted({str(err["loc"][0]) for err in e.errors() if err.get("loc")})
            raise ValidationError(f"Invalid project fields: {', '.join(fields)}") from e

    @staticmethod
    def _new_project_id(taken: set) -> str:
        project_id = str(uuid.uuid4())
        while project_id in taken:
            project_id = str(uuid.uuid4())
        return project_id

    # -- operations --------------------------------------------------------

    def list(self) -> List[Record]:
        """Return the full persisted collection in stored order."""
        with self._lock:
            return self._read()

    def get(self, project_id: str) -> Record:
        with self._lock:
            records = self._read()
            return records[self._index_of(records, project_id)]

    def create(self, partial: Mapping[str, Any]) -> Record:
        """
        Validate, stamp and append a new project.

        - name, address, city are required (non-blank)
        - id is generated unless supplied; a supplied id must be unused
        - createdAt/updatedAt default to now; updatedAt is never earlier than createdAt

        Raises:
            ValidationError: missing/invalid fields or duplicate id
            StorageError: backing file unreadable/unwritable
        """
        draft = dict(partial)
        missing = [field for field in REQUIRED_FIELDS if _is_blank(draft.get(field))]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

        with self._lock:
            records = self._read()
            taken = {r.get("id") for r in records}

            if _is_blank(draft.get("id")):
                draft["id"] = self._new_project_id(taken)
            else:
                draft["id"] = str(draft["id"]).strip()
                if draft["id"] in taken:
                    raise ValidationError("Project ID already exists")

            stamp = next_timestamp()
            created_at = draft.get("createdAt") or stamp
            updated_at = draft.get("updatedAt") or stamp
            try:
                if parse_timestamp(updated_at) < parse_timestamp(created_at):
                    updated_at = created_at
            except ValueError as e:
                raise ValidationError("Timestamps must be ISO-8601 strings") from e
            draft["createdAt"] = created_at
            draft["updatedAt"] = updated_at

            record = self._normalize(draft)
            records.append(record)
            self._write(records)

        if IS_DEV:
            print(f"[STORE] Created project id={record['id']} total={len(records)}")
        return record

    def update(self, project_id: str, partial: Mapping[str, Any]) -> Record:
        """
        Shallow-merge `partial` onto an existing project.

        id and createdAt are preserved whatever the caller sends; updatedAt is
        always forced to now (strictly after its previous value).

        Raises:
            NotFoundError: unknown project_id
            ValidationError: merged record fails schema validation
            StorageError: backing file unreadable/unwritable
        """
        changes = {k: v for k, v in dict(partial).items() if k not in IMMUTABLE_FIELDS}

        with self._lock:
            records = self._read()
            index = self._index_of(records, project_id)
            existing = records[index]

            merged = {**existing, **changes}
            merged["id"] = existing["id"]
            previous = existing.get("updatedAt") or existing.get("createdAt")
            merged["updatedAt"] = next_timestamp(after=previous)
            merged["createdAt"] = existing.get("createdAt") or merged["updatedAt"]

            record = self._normalize(merged)
            records[index] = record
            self._write(records)

        if IS_DEV:
            print(f"[STORE] Updated project id={project_id} fields={sorted(changes)}")
        return record

    def delete(self, project_id: str) -> None:
        """
        Remove a project. An unknown id leaves the collection untouched.

        Raises:
            NotFoundError: unknown project_id
            StorageError: backing file unreadable/unwritable
        """
        with self._lock:
            records = self._read()
            self._index_of(records, project_id)
            remaining = [r for r in records if r.get("id") != project_id]
            self._write(remaining)

        if IS_DEV:
            print(f"[STORE] Deleted project id={project_id} total={len(remaining)}")


# ---------------------------------------------------------
# Process-wide instance
# ---------------------------------------------------------
_store: Optional[ProjectStore] = None
_store_lock = threading.Lock()


def get_project_store() -> ProjectStore:
    """Return the process-wide store (FastAPI dependency; tests patch `_store`)."""
    global _store
    if _store is None:
        with _store_lock:
            if _store is None:
                _store = ProjectStore(PROJECTS_FILE)
    return _store
