# frontend/app.py
# Property Manager – Projects Dashboard
#
# Run from repo root: streamlit run frontend/app.py
# Or from frontend folder: streamlit run app.py

from __future__ import annotations

from typing import Any, Dict, List, Optional

import pandas as pd
import streamlit as st

# Import environment config (robust fallback for different run contexts)
try:
    from frontend.config import ENABLE_DEBUG_UI, ENV, IS_DEV
    from frontend.drafts import ASSET_TYPES, MODELS, DialogActions, ProjectDraft
    from frontend.list_engine import SortConfig, SortKey, format_date, request_sort, sort_indicator
    from frontend.refresh import RefreshController, ViewState
except ModuleNotFoundError:
    from config import ENABLE_DEBUG_UI, ENV, IS_DEV
    from drafts import ASSET_TYPES, MODELS, DialogActions, ProjectDraft
    from list_engine import SortConfig, SortKey, format_date, request_sort, sort_indicator
    from refresh import RefreshController, ViewState

# Import DEV-only observability tools
if IS_DEV:
    try:
        from frontend.dev_observability import clear_debug_history, export_snapshot_json, get_recent_events
    except ModuleNotFoundError:
        from dev_observability import clear_debug_history, export_snapshot_json, get_recent_events


st.set_page_config(page_title="Dashboard | Property Manager", layout="wide")

# --------------------------------------------------------------------
# Table layout
# --------------------------------------------------------------------

COLUMNS = [
    (SortKey.name, "Property Name"),
    (SortKey.asset_type, "Asset Type"),
    (SortKey.model, "Model Used"),
    (SortKey.created_at, "Created On"),
    (SortKey.updated_at, "Updated On"),
]
DATE_KEYS = {SortKey.created_at, SortKey.updated_at}
COLUMN_WIDTHS = [3, 2, 3, 2, 2, 1, 1]

# DEV Observability - Keys to track
KEYS_OF_INTEREST = [
    "sort_config",
    "search_term",
    "dialog",
    "current_project",
]

# --------------------------------------------------------------------
# State helpers
# --------------------------------------------------------------------


def init_state() -> None:
    ss = st.session_state
    ss.setdefault("sort_config", SortConfig())
    ss.setdefault("search_term", "")
    ss.setdefault("dialog", None)  # None | "add" | "edit" | "delete"
    ss.setdefault("current_project", None)
    ss.setdefault("controller", None)


def get_controller() -> RefreshController:
    """One controller per browser session; first access triggers the initial fetch."""
    ss = st.session_state
    if ss.get("controller") is None:
        ss["controller"] = RefreshController(events=ss)
        ss["controller"].refresh()
    return ss["controller"]


def open_dialog(kind: str, project: Optional[Dict[str, Any]] = None) -> None:
    st.session_state["dialog"] = kind
    st.session_state["current_project"] = project


def close_dialog() -> None:
    st.session_state["dialog"] = None
    st.session_state["current_project"] = None


def on_sort(key: SortKey) -> None:
    ss = st.session_state
    ss["sort_config"] = request_sort(ss["sort_config"], key)


def on_retry() -> None:
    get_controller().refresh()


# --------------------------------------------------------------------
# Dialogs (communicate only through ProjectDraft + save/cancel)
# --------------------------------------------------------------------


def render_project_form(title: str, draft: ProjectDraft, actions: DialogActions, form_key: str) -> None:
    with st.form(form_key):
        st.subheader(title)
        name = st.text_input("Property Name *", value=draft.name)
        address = st.text_input("Address *", value=draft.address)

        c1, c2, c3 = st.columns(3)
        city = c1.text_input("City *", value=draft.city)
        state = c2.text_input("State", value=draft.state)
        zip_code = c3.text_input("ZIP", value=draft.zip)

        c4, c5 = st.columns(2)
        asset_index = ASSET_TYPES.index(draft.asset_type) if draft.asset_type in ASSET_TYPES else 0
        asset_type = c4.selectbox("Asset Type", ASSET_TYPES, index=asset_index)
        model_index = MODELS.index(draft.model) if draft.model in MODELS else 0
        model = c5.selectbox("Model Used", MODELS, index=model_index, format_func=lambda m: m or "None")

        b1, b2 = st.columns(2)
        save = b1.form_submit_button("Save", type="primary")
        cancel = b2.form_submit_button("Cancel")

    if cancel:
        actions.on_cancel()
        return

    if save:
        submitted = ProjectDraft(
            name=name,
            address=address,
            city=city,
            state=state,
            zip=zip_code,
            asset_type=asset_type,
            model=model,
            id=draft.id,
            created_at=draft.created_at,
        )
        missing = submitted.missing_fields()
        if missing:
            st.error(f"Please fill in: {', '.join(missing)}")
            return
        actions.on_save(submitted)


def save_and_close(controller: RefreshController, operation: str):
    def on_save(draft: ProjectDraft) -> bool:
        ok = controller.create(draft) if operation == "create" else controller.update(draft)
        if not ok:
            # Dialog stays open; list untouched
            st.error(f"❌ Could not {operation} property: {controller.mutation_error}")
            return False
        close_dialog()
        st.rerun()
        return True
    return on_save


def cancel_and_close() -> None:
    close_dialog()
    st.rerun()


def render_delete_dialog(controller: RefreshController, project: Dict[str, Any]) -> None:
    with st.container(border=True):
        st.subheader("Delete Property")
        st.write(f"Are you sure you want to delete **{project.get('name', '')}**? This cannot be undone.")
        b1, b2 = st.columns(2)
        if b1.button("Delete", type="primary", key="confirm_delete"):
            if controller.delete(project["id"]):
                close_dialog()
                st.rerun()
            else:
                st.error(f"❌ Could not delete property: {controller.mutation_error}")
        if b2.button("Cancel", key="cancel_delete"):
            cancel_and_close()


def render_dialogs(controller: RefreshController) -> None:
    ss = st.session_state
    dialog = ss.get("dialog")
    project = ss.get("current_project")

    if dialog == "add":
        render_project_form(
            "Add Property",
            ProjectDraft(),
            DialogActions(on_save=save_and_close(controller, "create"), on_cancel=cancel_and_close),
            form_key="add_project_form",
        )
    elif dialog == "edit" and project:
        render_project_form(
            "Edit Property",
            ProjectDraft.from_project(project),
            DialogActions(on_save=save_and_close(controller, "update"), on_cancel=cancel_and_close),
            form_key=f"edit_project_form_{project.get('id')}",
        )
    elif dialog == "delete" and project:
        render_delete_dialog(controller, project)


# --------------------------------------------------------------------
# Table
# --------------------------------------------------------------------


def render_table(rows: List[Dict[str, Any]]) -> None:
    sort_config: SortConfig = st.session_state["sort_config"]

    header = st.columns(COLUMN_WIDTHS)
    for col, (key, label) in zip(header, COLUMNS):
        col.button(
            f"{label} {sort_indicator(sort_config, key)}".strip(),
            key=f"sort_{key.value}",
            on_click=on_sort,
            args=(key,),
            use_container_width=True,
        )
    header[-2].markdown("**Actions**")

    if not rows:
        st.info("No properties found")
        return

    for project in rows:
        cells = st.columns(COLUMN_WIDTHS)
        for cell, (key, _label) in zip(cells, COLUMNS):
            value = project.get(key.value) or ""
            cell.write(format_date(value) if key in DATE_KEYS else value)
        cells[-2].button("✏️", key=f"edit_{project['id']}", help="Edit", on_click=open_dialog, args=("edit", project))
        cells[-1].button("🗑️", key=f"delete_{project['id']}", help="Delete", on_click=open_dialog, args=("delete", project))

    df = pd.DataFrame(rows, columns=[key.value for key, _label in COLUMNS])
    st.download_button(
        "Download visible properties as CSV",
        df.to_csv(index=False),
        file_name="properties.csv",
        mime="text/csv",
    )


def render_debug_panel(controller: RefreshController) -> None:
    with st.expander("🛠 Debug (DEV only)"):
        st.caption(f"ENV={ENV} | state={controller.state.value} | rows={len(controller.projects)}")
        st.json(get_recent_events(st.session_state, limit=20))
        c1, c2 = st.columns(2)
        if c1.button("Clear history", key="debug_clear"):
            clear_debug_history(st.session_state)
        c2.download_button(
            "Export snapshot",
            export_snapshot_json(st.session_state, KEYS_OF_INTEREST),
            file_name="dashboard_snapshot.json",
            mime="application/json",
        )


# --------------------------------------------------------------------
# Page
# --------------------------------------------------------------------


def main() -> None:
    init_state()
    controller = get_controller()
    ss = st.session_state

    st.title("Property Manager")

    top_left, top_mid, top_right = st.columns([4, 1, 1])
    top_left.text_input("Search", key="search_term", placeholder="Search...", label_visibility="collapsed")
    top_mid.button("Add Property", type="primary", on_click=open_dialog, args=("add",), use_container_width=True)
    top_right.button("Refresh", on_click=on_retry, use_container_width=True)

    render_dialogs(controller)

    st.header("Property List")

    if controller.state == ViewState.loading:
        st.info("Loading projects...")
    elif controller.state == ViewState.error:
        st.error(f"🔌 Could not load projects: {controller.last_error}")
        st.button("Retry", key="retry_fetch", on_click=on_retry)

    render_table(controller.view(ss["sort_config"], ss["search_term"]))

    if ENABLE_DEBUG_UI:
        render_debug_panel(controller)


if __name__ == "__main__":
    main()
