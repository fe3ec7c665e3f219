"""Expected Returns — customer-declared returns and their status actions."""

import streamlit as st

from inventory_engine.config import settings
from inventory_engine.dashboard.components.top_bar import render_top_bar
from inventory_engine.dashboard.data import get_app_state, get_client, submit, toast_task_error
from inventory_engine.models import ExpectedReturn
from inventory_engine.processors.reports.core.status import (
    InvalidTransitionError,
    ReturnStatus,
    return_actions,
    status_update_payload,
)

PAGE = "Expected Returns"

_STATUS_FILTERS = ["all"] + [s.value for s in ReturnStatus]


def render_returns_page() -> None:
    client = get_client()
    state = get_app_state()
    status_filter = st.selectbox("Status", _STATUS_FILTERS, key="returns_status_filter")

    # One poller per filter value; switching filter replaces it
    task = state.poller(
        PAGE, f"returns:{status_filter}",
        lambda: client.list_expected_returns(status_filter),
        settings.LIST_POLL_SECONDS,
    )
    for name in list(state.pollers.get(PAGE, {})):
        if name != f"returns:{status_filter}":
            state.pollers[PAGE].pop(name).cancel()

    render_top_bar(PAGE, task)

    @st.fragment(run_every=settings.LIST_POLL_SECONDS)
    def _live():
        toast_task_error(task, "expected returns")
        data = task.latest or {"items": [], "stats": {}}
        _render_returns(data, task)

    _live()


def _render_returns(data: dict, task) -> None:
    stats = data.get("stats") or {}
    s1, s2, s3, s4 = st.columns(4)
    s1.metric("Total", stats.get("total", len(data["items"])))
    s2.metric("Pending", stats.get("pending", 0))
    s3.metric("In Transit", stats.get("inTransit", 0))
    s4.metric("Received", stats.get("received", 0))

    if not data["items"]:
        st.caption("No expected returns.")
        return

    for raw in data["items"]:
        record = ExpectedReturn.model_validate(raw)
        with st.container(border=True):
            col_info, col_actions = st.columns([3, 2])
            with col_info:
                st.markdown(f"**{record.order_number or 'N/A'}** · {record.customer_name or 'Unknown'} · `{record.status}`")
                for item in record.items:
                    condition = f" ({item.condition})" if item.condition else ""
                    st.caption(f"{item.display_name} x {item.quantity:g}{condition}")
                if record.return_reason:
                    st.caption(f"Reason: {record.return_reason}")
            with col_actions:
                actions = return_actions(record.status)
                for target, label in actions:
                    if st.button(label, key=f"return_{record.id}_{target.value}"):
                        _change_status(record, target, task)


def _change_status(record: ExpectedReturn, target: ReturnStatus, task) -> None:
    try:
        payload = status_update_payload(record.status, target)
    except InvalidTransitionError as e:
        st.toast(str(e), icon="❌")
        return
    if submit("Status update", lambda: get_client().update_return_status(record.id, payload)) is not None:
        st.toast(f"Return {record.order_number} -> {target.value}", icon="✅")
        task.refresh_now()
