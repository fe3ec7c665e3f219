"""
Advanced Reports — client-side aggregated report, refreshed every few seconds.

A PollingTask owned by this page fetches the four collections and runs the
ReportAnalyzer on its own thread; the fragment below redraws from the latest
snapshot on a timer and never blocks on the network.
"""

import pandas as pd
import streamlit as st

from inventory_engine.config import settings
from inventory_engine.dashboard.components.top_bar import render_top_bar
from inventory_engine.dashboard.data import build_report_snapshot, get_app_state
from inventory_engine.processors.exports import export_records
from inventory_engine.processors.reports.analyzer import empty_snapshot

PAGE = "Advanced Reports"


def render_reports_page() -> None:
    state = get_app_state()
    task = state.poller(PAGE, "snapshot", build_report_snapshot, settings.REPORTS_POLL_SECONDS)
    render_top_bar(PAGE, task, "Revenue, profit and stock computed from live sales, purchases and warehouses.")

    @st.fragment(run_every=settings.REPORTS_POLL_SECONDS)
    def _live():
        snapshot = task.latest
        if snapshot is None:
            st.info("Loading report data...")
            snapshot = empty_snapshot()
        errors = list(snapshot["meta"].get("errors", []))
        if task.last_error is not None:
            errors.append(f"report refresh: {task.last_error}")
        # Toast once per distinct failure, not on every redraw
        if errors and errors != st.session_state.get("reports_errors"):
            for error in errors:
                st.toast(f"Could not load {error}", icon="⚠️")
        st.session_state["reports_errors"] = errors
        _render_snapshot(snapshot)

    _live()


def _render_snapshot(snapshot: dict) -> None:
    currency = settings.CURRENCY
    ov = snapshot["overview"]

    # --- KPI cards ---
    k1, k2, k3, k4 = st.columns(4)
    k1.metric("Total Revenue", f"{currency} {ov['total_revenue']:,.0f}")
    k2.metric("Total Profit", f"{currency} {ov['total_profit']:,.0f}", f"{ov['profit_margin']:.1f}% margin")
    k3.metric("Total Orders", f"{ov['total_orders']:,}")
    k4.metric("Avg Order Value", f"{currency} {ov['average_order_value']:,.0f}")

    k5, k6, k7, k8 = st.columns(4)
    k5.metric("Total Cost", f"{currency} {ov['total_cost']:,.0f}")
    k6.metric("Products", f"{ov['total_products']:,}")
    k7.metric("Delivered", f"{ov['delivered_orders']:,}")
    k8.metric("Return Rate", f"{ov['return_rate']:.1f}%")

    st.divider()

    # --- Daily series ---
    daily = pd.DataFrame(snapshot["sales"]["daily_sales"])
    st.subheader(f"Last {snapshot['meta']['window_days']} days")
    if daily.empty:
        st.caption("No daily data.")
    else:
        daily = daily.set_index("date")
        st.line_chart(daily[["revenue", "profit"]])
        st.bar_chart(daily[["orders"]])
        st.caption("Daily profit is estimated from the overall profit margin.")

    # --- Top products / warehouses ---
    col_left, col_right = st.columns(2)
    with col_left:
        st.subheader("Top Products")
        top = pd.DataFrame(snapshot["sales"]["top_products"])
        if top.empty:
            st.caption("No sales yet.")
        else:
            st.dataframe(top.drop(columns=["product_id"]), hide_index=True, use_container_width=True)
            st.caption("Product profit is estimated at a flat 18% margin.")
    with col_right:
        st.subheader("Sales by Warehouse")
        by_wh = pd.DataFrame(snapshot["sales"]["sales_by_warehouse"])
        if by_wh.empty:
            st.caption("No warehouses.")
        else:
            st.dataframe(by_wh.drop(columns=["warehouse_id"]), hide_index=True, use_container_width=True)

    st.divider()

    # --- Inventory ---
    inv = snapshot["inventory"]
    st.subheader("Inventory")
    c1, c2 = st.columns(2)
    with c1:
        st.markdown(f"**Low stock** ({len(inv['low_stock_products'])})")
        if inv["low_stock_products"]:
            st.dataframe(
                pd.DataFrame(inv["low_stock_products"])[["product_name", "warehouse_name", "available"]],
                hide_index=True, use_container_width=True,
            )
    with c2:
        st.markdown(f"**Out of stock** ({len(inv['out_of_stock_products'])})")
        if inv["out_of_stock_products"]:
            st.dataframe(
                pd.DataFrame(inv["out_of_stock_products"])[["product_name", "warehouse_name", "available"]],
                hide_index=True, use_container_width=True,
            )

    util = inv["warehouse_utilization"]
    if util:
        st.markdown("**Warehouse utilization**")
        for row in util:
            st.progress(min(row["usage"], 100) / 100, text=f"{row['name']}: {row['usage']:.1f}% ({row['level']})")

    # --- Export ---
    with st.expander("Export"):
        fmt = st.selectbox("Format", ["csv", "xlsx", "json"], key="reports_export_fmt")
        table = st.selectbox("Table", ["daily_sales", "top_products"], key="reports_export_table")
        filename, payload = export_records(table, snapshot["sales"][table], fmt)
        st.download_button("Download", payload, file_name=filename, key="reports_export_btn")
