"""
Dashboard data access — the UI seam for backend errors.

Loaders call the API client, and on ApiClientError show a transient toast
and return an empty-but-valid value so the page still renders.
"""

import logging
from typing import Any, Callable, Optional

import streamlit as st
from streamlit import runtime
from streamlit.runtime.scriptrunner import get_script_run_ctx

from inventory_engine.config import settings
from inventory_engine.connectors.api_client import ApiClientError, InventoryApiClient
from inventory_engine.connectors.bundle import fetch_report_bundle
from inventory_engine.processors.reports import ReportAnalyzer
from inventory_engine.state import AppState

logger = logging.getLogger(__name__)


def get_client() -> InventoryApiClient:
    if "api_client" not in st.session_state:
        st.session_state["api_client"] = InventoryApiClient()
    return st.session_state["api_client"]


def session_alive_check() -> Optional[Callable[[], bool]]:
    """
    A thread-safe "is this browser session still open?" check for pollers.

    None outside a running Streamlit server (bare script or tests).
    """
    ctx = get_script_run_ctx()
    if ctx is None or not runtime.exists():
        return None
    session_id = ctx.session_id

    def alive() -> bool:
        return runtime.exists() and runtime.get_instance().is_active_session(session_id)

    return alive


def get_app_state() -> AppState:
    if "app_state" not in st.session_state:
        st.session_state["app_state"] = AppState(owner_alive=session_alive_check())
    return st.session_state["app_state"]


def load(what: str, call: Callable[[], Any], fallback: Any) -> Any:
    """Run *call*; on a backend error toast and return *fallback*."""
    try:
        return call()
    except ApiClientError as e:
        logger.warning("Loading %s failed: %s", what, e)
        st.toast(f"Failed to load {what}: {e.message}", icon="⚠️")
        return fallback


def submit(what: str, call: Callable[[], Any]) -> Any:
    """Run a write call; on a backend error toast and return None."""
    try:
        return call()
    except ApiClientError as e:
        logger.warning("%s failed: %s", what, e)
        st.toast(f"{what} failed: {e.message}", icon="❌")
        return None


def build_report_snapshot() -> dict:
    """
    Fetch the report collections and aggregate them.

    Runs on a polling thread, so no Streamlit calls here. Collections that
    failed to load are listed under snapshot["meta"]["errors"].
    """
    bundle = fetch_report_bundle(**get_client_config())
    snapshot = ReportAnalyzer(
        window_days=settings.TREND_WINDOW_DAYS,
        top_n=settings.TOP_PRODUCTS_LIMIT,
    ).analyze(bundle.sales, bundle.products, bundle.warehouses, bundle.purchases)
    snapshot["meta"]["errors"] = list(bundle.errors)
    return snapshot


def get_client_config() -> dict:
    return {
        "base_url": settings.API_BASE_URL,
        "token": settings.API_TOKEN,
        "timeout": settings.REQUEST_TIMEOUT,
    }


def toast_task_error(task, what: str) -> None:
    """Toast a polling failure once, not on every fragment redraw."""
    key = f"_toasted_error_{task.name}"
    error = str(task.last_error) if task.last_error is not None else None
    if error and error != st.session_state.get(key):
        st.toast(f"Failed to refresh {what}: {error}", icon="⚠️")
    st.session_state[key] = error
