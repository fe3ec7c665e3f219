"""
Sales — order list with lifecycle actions and the new-order form.

The list refreshes every LIST_POLL_SECONDS on a page-owned poller. Orders
created here are shown immediately from the optimistic cache until the
refetched list contains them.
"""

import pandas as pd
import streamlit as st

from inventory_engine.config import settings
from inventory_engine.dashboard.components.top_bar import render_top_bar
from inventory_engine.dashboard.data import get_app_state, get_client, load, submit, toast_task_error
from inventory_engine.processors.exports import export_records
from inventory_engine.processors.reports.core.status import (
    InvalidTransitionError,
    sales_actions,
    status_update_payload,
)
from inventory_engine.processors.reports.metrics.inventory import (
    SALES_PERIODS,
    calculate_sales_stats,
    filter_sales_by_period,
)
from inventory_engine.processors.validation import (
    filled_item_rows,
    order_final_amount,
    order_subtotal,
    stock_check,
    validate_sales_order,
)

PAGE = "Sales"

_PERIOD_LABELS = {
    "day": "Today",
    "week": "Last 7 Days",
    "month": "This Month",
    "90days": "Last 90 Days",
    "year": "This Year",
    "all": "All Time",
}


def render_sales_page() -> None:
    client = get_client()
    state = get_app_state()
    task = state.poller(PAGE, "orders", client.list_sales, settings.LIST_POLL_SECONDS)
    render_top_bar(PAGE, task)

    tab_list, tab_new = st.tabs(["Orders", "New Sale"])
    with tab_new:
        _render_new_sale_form()

    with tab_list:
        period = st.selectbox(
            "Period", SALES_PERIODS, index=SALES_PERIODS.index("all"),
            format_func=_PERIOD_LABELS.get, key="sales_period",
        )

        @st.fragment(run_every=settings.LIST_POLL_SECONDS)
        def _live():
            toast_task_error(task, "sales")
            if task.latest is None and task.last_error is None:
                st.info("Loading sales...")
            orders = state.cache("sales").merge(task.latest or [])
            _render_orders(filter_sales_by_period(orders, period), task)

        _live()


def _render_orders(orders: list, task) -> None:
    stats = calculate_sales_stats(orders)
    s1, s2, s3, s4 = st.columns(4)
    s1.metric("Total Sales", f"{stats['total_sales']:,}")
    s2.metric("Delivered", f"{stats['total_delivered']:,}")
    s3.metric("Returns", f"{stats['total_returns']:,}")
    s4.metric("Revenue", f"{settings.CURRENCY} {stats['total_revenue']:,.0f}")

    if not orders:
        st.caption("No sales in this period.")
        return

    for order in orders:
        order_id = order.get("_id")
        customer = (order.get("customerInfo") or {}).get("name") or "Unknown"
        col_info, col_status, col_actions = st.columns([3, 1, 3])
        with col_info:
            st.markdown(f"**{order.get('orderNumber') or 'Pending...'}** · {customer}")
            st.caption(f"{settings.CURRENCY} {float(order.get('totalAmount') or 0):,.2f} · {order.get('createdAt') or ''}")
        with col_status:
            st.markdown(f"`{order.get('status') or 'unknown'}`")
        with col_actions:
            actions = sales_actions(order.get("status") or "")
            if actions and order_id:
                cols = st.columns(len(actions))
                for col, (target, label) in zip(cols, actions):
                    if col.button(label, key=f"sale_{order_id}_{target.value}"):
                        _change_status(order, target, task)

    with st.expander("Export"):
        fmt = st.selectbox("Format", ["csv", "xlsx", "json"], key="sales_export_fmt")
        filename, payload = export_records("sales", orders, fmt)
        st.download_button("Download", payload, file_name=filename, key="sales_export_btn")


def _change_status(order: dict, target, task) -> None:
    try:
        payload = status_update_payload(order.get("status"), target)
    except InvalidTransitionError as e:
        st.toast(str(e), icon="❌")
        return
    if submit("Status update", lambda: get_client().update_sale_status(order["_id"], payload)) is not None:
        st.toast(f"Order {order.get('orderNumber')} -> {target.value}", icon="✅")
        task.refresh_now()


def _render_new_sale_form() -> None:
    client = get_client()
    products = load("products", client.list_products, [])
    product_by_id = {p.get("_id"): p for p in products}

    with st.form("new_sale_form"):
        st.markdown("**Customer**")
        c1, c2, c3 = st.columns(3)
        name = c1.text_input("Name")
        email = c2.text_input("Email")
        phone = c3.text_input("Phone")

        st.markdown("**Delivery address**")
        a1, a2 = st.columns(2)
        street = a1.text_input("Street")
        city = a2.text_input("City")

        st.markdown("**Items**")
        items = st.data_editor(
            pd.DataFrame([{"productId": None, "variantId": "", "quantity": 1, "unitPrice": 0.0}]),
            num_rows="dynamic",
            column_config={
                "productId": st.column_config.SelectboxColumn(
                    "Product", options=list(product_by_id),
                    help="Product id (see the Products page)",
                ),
            },
            key="new_sale_items",
        )
        c_tax, c_disc = st.columns(2)
        tax = c_tax.number_input("Tax", min_value=0.0, value=0.0)
        discount = c_disc.number_input("Discount", min_value=0.0, value=0.0)
        submitted = st.form_submit_button("Create Sale")

    if not submitted:
        return

    rows = filled_item_rows(items.to_dict("records"))
    form = {
        "customerInfo": {"name": name, "email": email, "phone": phone},
        "deliveryAddress": {"street": street, "city": city},
        "items": rows,
    }
    checks = {}
    for row in rows:
        if row.get("productId"):
            levels = load("stock levels", lambda: client.stock_levels(row["productId"]), [])
            checks[row["productId"]] = stock_check(levels, row["productId"], row.get("quantity"))

    errors = validate_sales_order(form, products, checks)
    if errors:
        for message in errors.values():
            st.error(message)
        return

    form.update({
        "totalAmount": order_subtotal(rows),
        "taxAmount": tax,
        "discountAmount": discount,
        "finalAmount": order_final_amount(rows, tax, discount),
    })
    created = submit("Create sale", lambda: client.create_sale(form))
    if created:
        record = created.get("salesOrder") if isinstance(created.get("salesOrder"), dict) else created
        get_app_state().cache("sales").add(record)
        st.success(f"Sales order {record.get('orderNumber', '')} created")
