"""
frontend/api_client.py
Centralized API client for all backend requests.

This module ensures:
1. Centralized API base URL configuration (local/staging/prod)
2. Consistent error handling: transport failures raise NetworkError,
   non-2xx responses raise ApiError carrying the server's {"error"} message
3. No duplicate request logic scattered across the dashboard

It never touches Streamlit; the page decides how to show errors.
"""

from typing import Any, Dict, List, Literal, Mapping, Optional

import requests

# Import config (robust fallback for different run contexts)
try:
    from frontend.config import ENABLE_VERBOSE_LOGGING, PROJECTS_PATH, REQUEST_TIMEOUT, get_backend_url
except ModuleNotFoundError:
    from config import ENABLE_VERBOSE_LOGGING, PROJECTS_PATH, REQUEST_TIMEOUT, get_backend_url


__all__ = [
    "ApiError",
    "NetworkError",
    "api_request",
    "create_project",
    "delete_project",
    "fetch_projects",
    "update_project",
]


class NetworkError(Exception):
    """Backend unreachable, timed out, misconfigured, or returned an unreadable body."""


class ApiError(Exception):
    """Backend answered with a non-2xx status."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message

    def __str__(self) -> str:
        return f"{self.status_code}: {self.message}"


def api_request(
    method: Literal["GET", "POST", "PUT", "DELETE"],
    path: str,
    json: Optional[Dict[str, Any]] = None,
    params: Optional[Dict[str, Any]] = None,
    timeout: int = REQUEST_TIMEOUT,
) -> requests.Response:
    """
    Make an API request against the configured backend.

    Args:
        method: HTTP method (GET, POST, PUT, DELETE)
        path: API endpoint path (e.g., "/api/projects")
        json: JSON body for POST/PUT requests
        params: Query parameters
        timeout: Request timeout in seconds

    Returns:
        Response object (any status code; callers decide what is an error)

    Raises:
        NetworkError: configuration error, timeout, connection failure
    """
    try:
        base_url = get_backend_url()
    except (RuntimeError, ValueError) as e:
        print(f"[API] Configuration error: {e}")
        raise NetworkError(f"Configuration error: {e}") from e

    url = f"{base_url}{path}"

    headers = {"Accept": "application/json"}
    if json is not None:
        headers["Content-Type"] = "application/json"

    try:
        if method == "GET":
            resp = requests.get(url, headers=headers, params=params, timeout=timeout)
        elif method == "POST":
            resp = requests.post(url, json=json, headers=headers, params=params, timeout=timeout)
        elif method == "PUT":
            resp = requests.put(url, json=json, headers=headers, params=params, timeout=timeout)
        elif method == "DELETE":
            resp = requests.delete(url, headers=headers, params=params, timeout=timeout)
        else:
            raise ValueError(f"Unsupported HTTP method: {method}")

    except requests.exceptions.Timeout as e:
        print(f"[API] Timeout on {method} {path}")
        raise NetworkError(f"Request timed out after {timeout}s. Please try again.") from e

    except requests.exceptions.ConnectionError as e:
        print(f"[API] Connection error on {method} {path}")
        raise NetworkError(f"Cannot connect to backend at {base_url}. Please check your connection.") from e

    except requests.exceptions.RequestException as e:
        print(f"[API] Unexpected error on {method} {path}: {type(e).__name__}")
        raise NetworkError(f"Request failed: {type(e).__name__}") from e

    if ENABLE_VERBOSE_LOGGING:
        print(f"[API] {method} {path} -> {resp.status_code}")
    return resp


def _read_payload(resp: requests.Response, operation: str) -> Dict[str, Any]:
    """
    Decode a JSON envelope, raising ApiError for non-2xx responses.

    The backend reports failures as {"error": "..."}; that message is surfaced
    as-is, otherwise a generic one is used.
    """
    try:
        data = resp.json()
    except ValueError as e:
        if resp.ok:
            raise NetworkError(f"Malformed response from {operation}") from e
        data = None

    if not resp.ok:
        message = data.get("error") if isinstance(data, dict) else None
        raise ApiError(resp.status_code, message or f"Backend error {resp.status_code} on {operation}")

    if not isinstance(data, dict):
        raise NetworkError(f"Malformed response from {operation}")
    return data


def _read_project(resp: requests.Response, operation: str) -> Dict[str, Any]:
    project = _read_payload(resp, operation).get("project")
    if not isinstance(project, dict):
        raise NetworkError(f"Malformed response from {operation}")
    return project


def fetch_projects() -> List[Dict[str, Any]]:
    """GET the full collection."""
    resp = api_request("GET", PROJECTS_PATH)
    data = _read_payload(resp, "list projects")
    projects = data.get("projects")
    if not isinstance(projects, list):
        raise NetworkError("Malformed response from list projects")
    return projects


def create_project(draft: Mapping[str, Any]) -> Dict[str, Any]:
    """POST a new project; returns the stored record (with id and timestamps)."""
    resp = api_request("POST", PROJECTS_PATH, json=dict(draft))
    return _read_project(resp, "create project")


def update_project(project_id: str, draft: Mapping[str, Any]) -> Dict[str, Any]:
    """PUT changes onto an existing project; returns the merged record."""
    resp = api_request("PUT", PROJECTS_PATH, json=dict(draft), params={"id": project_id})
    return _read_project(resp, "update project")


def delete_project(project_id: str) -> None:
    """DELETE a project."""
    resp = api_request("DELETE", PROJECTS_PATH, params={"id": project_id})
    _read_payload(resp, "delete project")
