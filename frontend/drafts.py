"""
frontend/drafts.py
The value the add/edit dialogs hand back on submit.

Dialogs know nothing about the backend: they fill a ProjectDraft and call the
save callback they were given (or cancel). RefreshController turns the draft
into an API call.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional

# Options shown in the dialog selects (must match the backend enums)
ASSET_TYPES = ["Multi Family", "Retail", "Self Storage", "Office", "Industrial"]
MODELS = ["", "CLIK IRR", "CREFC", "Self Storage template loan sizer"]

DEFAULT_ASSET_TYPE = ASSET_TYPES[0]
REQUIRED_FIELDS = ("name", "address", "city")


@dataclass
class ProjectDraft:
    name: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    zip: str = ""
    asset_type: str = DEFAULT_ASSET_TYPE
    model: str = ""
    id: Optional[str] = None
    created_at: Optional[str] = None

    @classmethod
    def from_project(cls, project: Mapping[str, Any]) -> "ProjectDraft":
        """Prefill the edit dialog from a displayed record."""
        return cls(
            name=project.get("name") or "",
            address=project.get("address") or "",
            city=project.get("city") or "",
            state=project.get("state") or "",
            zip=project.get("zip") or "",
            asset_type=project.get("assetType") or DEFAULT_ASSET_TYPE,
            model=project.get("model") or "",
            id=project.get("id"),
            created_at=project.get("createdAt"),
        )

    def missing_fields(self) -> List[str]:
        return [field for field in REQUIRED_FIELDS if not getattr(self, field).strip()]

    def to_payload(self) -> Dict[str, Any]:
        """Wire (camelCase) body. id/createdAt are sent only when known; the server ignores them on update."""
        data = asdict(self)
        payload: Dict[str, Any] = {
            "name": data["name"].strip(),
            "address": data["address"].strip(),
            "city": data["city"].strip(),
            "state": data["state"].strip(),
            "zip": data["zip"].strip(),
            "assetType": data["asset_type"],
            "model": data["model"],
        }
        if self.id:
            payload["id"] = self.id
        if self.created_at:
            payload["createdAt"] = self.created_at
        return payload


@dataclass
class DialogActions:
    """Save/cancel pair given to a dialog. on_save returns True when the dialog may close."""
    on_save: Callable[[ProjectDraft], bool]
    on_cancel: Callable[[], None]
