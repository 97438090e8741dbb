"""
frontend/refresh.py
"Mutate then refetch" orchestration for the projects table.

States: IDLE -> LOADING -> READY | ERROR

- Mutations (create/update/delete) are issued directly. Only a successful
  mutation triggers a refetch; a failed one leaves the snapshot and state alone
  and reports False so the originating dialog stays open.
- Every fetch takes a ticket. A result is applied only if no newer fetch has
  already been applied, so the displayed snapshot is always one whole fetch and
  a slow stale fetch cannot overwrite a newer one.
- A fetch never leaves the view in LOADING: once no fetch is in flight the state
  resolves to READY, or ERROR (last good snapshot kept) if the newest outcome
  was a failure.
"""

from __future__ import annotations

import threading
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

# Import local modules (robust fallback for different run contexts)
try:
    from frontend import api_client
    from frontend.api_client import ApiError, NetworkError
    from frontend.config import IS_DEV
    from frontend.dev_observability import track_event
    from frontend.drafts import ProjectDraft
    from frontend.list_engine import SortConfig, derive_view
except ModuleNotFoundError:
    import api_client
    from api_client import ApiError, NetworkError
    from config import IS_DEV
    from dev_observability import track_event
    from drafts import ProjectDraft
    from list_engine import SortConfig, derive_view


class ViewState(str, Enum):
    idle = "idle"
    loading = "loading"
    ready = "ready"
    error = "error"


class RefreshController:
    """
    Holds the fetched project snapshot and keeps it in step with the backend.

    Args:
        client: object exposing fetch_projects/create_project/update_project/
            delete_project (defaults to frontend.api_client)
        events: dict receiving the DEV event timeline (normally st.session_state)
    """

    def __init__(self, client: Any = None, events: Optional[dict] = None):
        self.client = client if client is not None else api_client
        self.events = events if events is not None else {}
        self.state = ViewState.idle
        self.projects: List[Dict[str, Any]] = []
        self.last_error: Optional[str] = None
        self.mutation_error: Optional[str] = None

        self._lock = threading.Lock()
        self._issued = 0
        self._applied = 0
        self._in_flight = 0

    # ------------------------------------------------------------------
    # Fetch
    # ------------------------------------------------------------------

    def refresh(self) -> bool:
        """
        Refetch the full collection.

        Returns:
            True if this fetch's result is now displayed
        """
        with self._lock:
            self._issued += 1
            ticket = self._issued
            self._in_flight += 1
            self.state = ViewState.loading
        self._track("refresh_started", {"ticket": ticket})

        projects: Optional[List[Dict[str, Any]]] = None
        error: Optional[str] = None
        try:
            projects = self.client.fetch_projects()
        except (NetworkError, ApiError) as e:
            error = str(e)
            print(f"[REFRESH] Error fetching projects: {error}")
        finally:
            applied = self._complete(ticket, projects, error)

        return applied

    def _complete(self, ticket: int, projects: Optional[List[Dict[str, Any]]], error: Optional[str]) -> bool:
        applied = False
        with self._lock:
            self._in_flight -= 1

            if ticket > self._applied:
                if projects is not None:
                    self.projects = list(projects)
                    self._applied = ticket
                    self.last_error = None
                    applied = True
                else:
                    # Failure (or unexpected exception): keep last good snapshot
                    self.last_error = error or "Unexpected error while fetching projects"

            if self._in_flight == 0:
                self.state = ViewState.error if self.last_error else ViewState.ready
            state = self.state

        if applied:
            self._track("refresh_ready", {"ticket": ticket, "count": len(self.projects)})
        elif projects is not None:
            self._track("refresh_discarded", {"ticket": ticket, "applied": self._applied})
        else:
            self._track("refresh_failed", {"ticket": ticket, "error": self.last_error})

        if IS_DEV:
            print(f"[REFRESH] ticket={ticket} applied={applied} state={state.value}")
        return applied

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create(self, draft: ProjectDraft) -> bool:
        return self._mutate("create", lambda: self.client.create_project(draft.to_payload()))

    def update(self, draft: ProjectDraft) -> bool:
        if not draft.id:
            self.mutation_error = "Project ID is required"
            self._track("mutation_failed", {"operation": "update", "error": self.mutation_error})
            return False
        return self._mutate("update", lambda: self.client.update_project(draft.id, draft.to_payload()))

    def delete(self, project_id: str) -> bool:
        return self._mutate("delete", lambda: self.client.delete_project(project_id))

    def _mutate(self, operation: str, call: Callable[[], Any]) -> bool:
        """
        Run one mutation; on success refetch, on failure leave everything as is.

        Returns:
            True if the mutation succeeded (the dialog may close)
        """
        try:
            call()
        except (NetworkError, ApiError) as e:
            self.mutation_error = e.message if isinstance(e, ApiError) else str(e)
            print(f"[REFRESH] Error on {operation} project: {e}")
            self._track("mutation_failed", {"operation": operation, "error": self.mutation_error})
            return False

        self.mutation_error = None
        self._track("mutation_succeeded", {"operation": operation})
        self.refresh()
        return True

    # ------------------------------------------------------------------
    # View
    # ------------------------------------------------------------------

    def view(self, sort_config: Optional[SortConfig] = None, search_term: str = "") -> List[Dict[str, Any]]:
        """Rows to display for the current snapshot."""
        return derive_view(self.projects, sort_config, search_term)

    @property
    def is_loading(self) -> bool:
        return self.state == ViewState.loading

    def _track(self, name: str, details: Dict[str, Any]) -> None:
        # Timeline trim is a read-then-assign; concurrent fetches must not interleave it
        with self._lock:
            track_event(self.events, name, details)
