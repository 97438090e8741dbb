# frontend/dev_observability.py
# DEV-only event timeline for debugging the dashboard refresh cycle

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

EVENTS_KEY = "_dev_events"
MAX_EVENTS = 100


def now_iso() -> str:
    """Return current timestamp in ISO format."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def track_event(session_state: dict, event_name: str, details: Optional[Dict[str, Any]] = None) -> None:
    """
    Append an event to the session event timeline.

    Args:
        session_state: Streamlit session_state (or any dict)
        event_name: Short descriptive name (e.g., "refresh_ready", "mutation_failed")
        details: Optional dict of additional context
    """
    if EVENTS_KEY not in session_state:
        session_state[EVENTS_KEY] = []

    event: Dict[str, Any] = {
        "ts": now_iso(),
        "name": event_name,
    }
    if details:
        event["details"] = dict(details)

    session_state[EVENTS_KEY].append(event)

    # Keep only last MAX_EVENTS events to prevent memory bloat
    if len(session_state[EVENTS_KEY]) > MAX_EVENTS:
        session_state[EVENTS_KEY] = session_state[EVENTS_KEY][-MAX_EVENTS:]


def get_recent_events(session_state: dict, limit: int = 30) -> List[Dict[str, Any]]:
    """
    Get the most recent events from the timeline.

    Returns:
        List of event dicts (most recent first)
    """
    events = session_state.get(EVENTS_KEY, [])
    return list(reversed(events[-limit:]))


def clear_debug_history(session_state: dict) -> None:
    """Clear the event timeline without affecting app state."""
    if EVENTS_KEY in session_state:
        session_state[EVENTS_KEY] = []


def export_snapshot_json(session_state: dict, keys_of_interest: List[str]) -> str:
    """
    Export a diagnostic snapshot as formatted JSON string.

    Args:
        session_state: Streamlit session_state (or any dict)
        keys_of_interest: Keys to include in the state snapshot

    Returns:
        JSON string with selected state and recent events
    """
    state = {}
    for key in keys_of_interest:
        if key in session_state:
            state[key] = {"exists": True, "value": session_state[key]}
        else:
            state[key] = {"exists": False}

    export = {
        "timestamp": now_iso(),
        "state": state,
        "recent_events": get_recent_events(session_state, limit=50),
    }
    return json.dumps(export, indent=2, default=str)
