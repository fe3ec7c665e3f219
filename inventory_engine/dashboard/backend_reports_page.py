"""Backend Reports — reports computed server-side, shown tab by tab."""

from datetime import date, timedelta

import pandas as pd
import streamlit as st

from inventory_engine.dashboard.components.top_bar import render_top_bar
from inventory_engine.dashboard.data import get_client, load


def _show(payload) -> None:
    """Tables for lists of records, JSON for everything else."""
    if payload in (None, {}, []):
        st.caption("No data.")
    elif isinstance(payload, list) and all(isinstance(r, dict) for r in payload):
        st.dataframe(pd.json_normalize(payload), hide_index=True, use_container_width=True)
    else:
        st.json(payload)


def render_backend_reports_page() -> None:
    client = get_client()
    if render_top_bar("Backend Reports", subtitle="Server-side reports from the inventory API."):
        st.rerun()

    tab_dash, tab_weekly, tab_inv, tab_supp, tab_ret = st.tabs([
        "Dashboard", "Weekly Sales", "Monthly Inventory", "Supplier Performance", "Return Analysis",
    ])

    with tab_dash:
        col_sum, col_main = st.columns(2)
        with col_sum:
            st.subheader("Summary")
            _show(load("dashboard summary", client.dashboard_summary, {}))
        with col_main:
            st.subheader("Main report")
            _show(load("dashboard report", client.dashboard_main, {}))

    with tab_weekly:
        _show(load("weekly sales", client.weekly_sales, {}))

    with tab_inv:
        _show(load("monthly inventory", client.monthly_inventory, {}))

    with tab_supp:
        _render_ranged("supplier performance", client.supplier_performance, "supplier_range")

    with tab_ret:
        _render_ranged("return analysis", client.return_analysis, "returns_range")


def _render_ranged(what: str, call, key: str) -> None:
    today = date.today()
    picked = st.date_input("Date range", (today - timedelta(days=30), today), key=key)
    if len(picked) != 2:
        st.caption("Pick an end date.")
        return
    start, end = picked
    _show(load(what, lambda: call(start.isoformat(), end.isoformat()), {}))
