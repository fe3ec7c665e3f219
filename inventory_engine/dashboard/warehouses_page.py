"""Warehouses — capacity overview, stock lines, add-stock and delete."""

import pandas as pd
import streamlit as st

from inventory_engine.dashboard.components.top_bar import render_top_bar
from inventory_engine.dashboard.data import get_client, load, submit
from inventory_engine.models import Warehouse
from inventory_engine.processors.reports.metrics.inventory import (
    available_capacity,
    capacity_level,
    capacity_usage,
)
from inventory_engine.processors.validation import STOCK_TAGS, validate_add_stock

_LEVEL_ICONS = {"critical": "\U0001f534", "warning": "\U0001f7e1", "ok": "\U0001f7e2"}


def render_warehouses_page() -> None:
    client = get_client()
    if render_top_bar("Warehouses"):
        st.rerun()

    warehouses = [Warehouse.model_validate(w) for w in load("warehouses", client.list_warehouses, [])]
    if not warehouses:
        st.info("No warehouses found.")
        return
    products = load("products", client.list_products, [])

    for wh in warehouses:
        total = wh.stock_total
        usage = wh.capacity_usage if wh.capacity_usage is not None else capacity_usage(total, wh.capacity)
        level = capacity_level(usage)
        free = wh.available_capacity if wh.available_capacity is not None else available_capacity(total, wh.capacity)

        with st.expander(f"{_LEVEL_ICONS[level]} {wh.name or 'Unnamed'} · {usage:.0f}% full"):
            m1, m2, m3 = st.columns(3)
            m1.metric("Capacity", f"{wh.capacity:,.0f}")
            m2.metric("Total Stock", f"{total:,.0f}")
            m3.metric("Available", f"{free:,.0f}")
            st.progress(min(usage, 100) / 100)

            if wh.current_stock:
                st.dataframe(
                    pd.DataFrame([
                        {
                            "Product": e.product_name,
                            "Quantity": e.quantity,
                            "Reserved": e.reserved_quantity,
                            "Available": e.available,
                            "Tags": ", ".join(e.tags),
                        }
                        for e in wh.current_stock
                    ]),
                    hide_index=True, use_container_width=True,
                )
            else:
                st.caption("No stock in this warehouse.")

            _render_add_stock(wh, products)
            _render_delete(wh)


def _render_add_stock(wh: Warehouse, products: list) -> None:
    client = get_client()
    options = {p.get("_id"): f"{p.get('name')} ({p.get('sku')})" for p in products}

    with st.form(f"add_stock_{wh.id}"):
        st.markdown("**Add stock**")
        product_id = st.selectbox("Product", list(options), format_func=options.get, index=None)
        quantity = st.number_input("Quantity", min_value=0, step=1, value=0)
        tags = st.multiselect("Tags", STOCK_TAGS)
        submitted = st.form_submit_button("Add Stock")

    if not submitted:
        return
    form = {"productId": product_id, "quantity": quantity, "tags": tags}
    errors = validate_add_stock(form)
    if errors:
        for message in errors.values():
            st.error(message)
        return
    if submit("Add stock", lambda: client.add_stock(wh.id, product_id, quantity, tags)) is not None:
        refreshed = submit("Reload warehouse", lambda: client.get_warehouse(wh.id))
        total = Warehouse.model_validate(refreshed).stock_total if refreshed else wh.stock_total + quantity
        st.toast(f"Added {quantity} to {wh.name} ({total:,.0f} in stock)", icon="✅")
        st.rerun()


def _render_delete(wh: Warehouse) -> None:
    confirmed = st.checkbox(f"I understand deleting {wh.name} cannot be undone", key=f"del_confirm_{wh.id}")
    if st.button("Delete Warehouse", key=f"del_{wh.id}", disabled=not confirmed):
        if submit("Delete warehouse", lambda: get_client().delete_warehouse(wh.id) or True):
            st.toast(f"Deleted {wh.name}", icon="\U0001f5d1️")
            st.rerun()
