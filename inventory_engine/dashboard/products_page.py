"""Products — searchable catalogue with stock status, plus create, edit and delete."""

import pandas as pd
import streamlit as st

from inventory_engine.config import settings
from inventory_engine.dashboard.components.top_bar import render_top_bar
from inventory_engine.dashboard.data import get_app_state, get_client, load, submit
from inventory_engine.processors.exports import export_records
from inventory_engine.processors.reports.metrics.inventory import (
    PRODUCT_SORTS,
    filter_products,
    product_overall_stock,
    sort_products,
    stock_status,
)
from inventory_engine.processors.validation import validate_product

_SORT_LABELS = {"name": "Sort by Name", "stock": "Sort by Stock", "price": "Sort by Price"}


def render_products_page() -> None:
    client = get_client()
    if render_top_bar("Products"):
        st.rerun()

    products = get_app_state().cache("products").merge(load("products", client.list_products, []))

    tab_list, tab_new = st.tabs(["Catalogue", "New Product"])
    with tab_new:
        _render_product_form()
    with tab_list:
        _render_catalogue(products)


def _render_catalogue(products: list) -> None:
    categories = sorted({p.get("category") for p in products if p.get("category")})
    f1, f2, f3 = st.columns([3, 2, 2])
    search = f1.text_input("Search", placeholder="Name or SKU", key="product_search")
    category = f2.selectbox("Category", [""] + categories, format_func=lambda c: c or "All categories")
    sort_by = f3.selectbox("Sort", PRODUCT_SORTS, format_func=_SORT_LABELS.get)

    shown = sort_products(filter_products(products, search, category), sort_by)
    st.caption(f"Showing {len(shown)} of {len(products)} products")
    if not shown:
        st.info("No products match.")
        return

    rows = []
    for p in shown:
        stock = product_overall_stock(p)
        rows.append({
            "Name": p.get("name"),
            "SKU": p.get("sku"),
            "Category": p.get("category"),
            "Price": float(p.get("sellingPrice") or 0),
            "Stock": stock,
            "Status": stock_status(stock),
            "Warehouses": ", ".join(f"{w.get('name')}: {w.get('stock', 0)}" for w in p.get("warehouses") or []),
        })
    st.dataframe(
        pd.DataFrame(rows), hide_index=True, use_container_width=True,
        column_config={"Price": st.column_config.NumberColumn(format=f"{settings.CURRENCY} %.2f")},
    )

    with st.expander("Delete a product"):
        by_label = {f"{p.get('name')} ({p.get('sku')})": p for p in shown if p.get("_id")}
        label = st.selectbox("Product", list(by_label), index=None, key="product_delete_select")
        if label and st.button("Delete", key="product_delete_btn"):
            product = by_label[label]
            if submit("Delete product", lambda: get_client().delete_product(product["_id"]) or True):
                st.toast(f"Deleted {product.get('name')}", icon="\U0001f5d1️")
                st.rerun()

    with st.expander("Edit a product"):
        _render_edit(shown)

    with st.expander("Export"):
        fmt = st.selectbox("Format", ["csv", "xlsx", "json"], key="products_export_fmt")
        filename, payload = export_records("products", shown, fmt)
        st.download_button("Download", payload, file_name=filename, key="products_export_btn")


def _render_edit(products: list) -> None:
    by_id = {p.get("_id"): p for p in products if p.get("_id")}
    product_id = st.selectbox(
        "Product", list(by_id), index=None, key="product_edit_select",
        format_func=lambda pid: f"{by_id[pid].get('name')} ({by_id[pid].get('sku')})",
    )
    if not product_id:
        return

    # Edit the server copy, the list may still hold an optimistic record
    current = load("product", lambda: get_client().get_product(product_id), by_id[product_id])
    with st.form(f"edit_product_{product_id}"):
        name = st.text_input("Name", value=current.get("name") or "")
        category = st.text_input("Category", value=current.get("category") or "")
        e1, e2 = st.columns(2)
        selling_price = e1.number_input("Selling price", min_value=0.0, value=float(current.get("sellingPrice") or 0))
        cost_price = e2.number_input("Cost price", min_value=0.0, value=float(current.get("costPrice") or 0))
        saved = st.form_submit_button("Save Changes")

    if not saved:
        return
    form = {
        "name": name.strip(),
        "sku": current.get("sku"),
        "category": category.strip(),
        "sellingPrice": selling_price,
        "costPrice": cost_price or None,
    }
    errors = validate_product(form, is_admin=current.get("costPrice") is not None)
    if errors:
        for message in errors.values():
            st.error(message)
        return
    if submit("Update product", lambda: get_client().update_product(product_id, form)) is not None:
        st.toast(f"Updated {form['name']}", icon="✅")
        st.rerun()


def _render_product_form() -> None:
    client = get_client()
    is_admin = st.toggle("Admin (cost price required)", value=True, key="product_form_admin")

    name = st.text_input("Name", key="product_form_name")
    col_sku, col_gen = st.columns([3, 1])
    with col_gen:
        if st.button("Generate SKU", use_container_width=True):
            if not name.strip():
                st.error("Please enter a product name first")
            else:
                sku = submit("Generate SKU", lambda: client.generate_sku(name))
                if sku:
                    st.session_state["product_form_sku"] = sku
    with col_sku:
        sku = st.text_input("SKU", key="product_form_sku")

    c1, c2 = st.columns(2)
    category = c1.text_input("Category", key="product_form_category")
    unit = c2.text_input("Unit", value="pcs", key="product_form_unit")
    p1, p2 = st.columns(2)
    selling_price = p1.number_input("Selling price", min_value=0.0, key="product_form_price")
    cost_price = p2.number_input("Cost price", min_value=0.0, key="product_form_cost")

    if st.button("Create Product", type="primary"):
        form = {
            "name": name.strip(),
            "sku": sku.strip(),
            "category": category.strip(),
            "unit": unit.strip(),
            "sellingPrice": selling_price,
            "costPrice": cost_price if is_admin else None,
        }
        errors = validate_product(form, is_admin=is_admin)
        if errors:
            for message in errors.values():
                st.error(message)
            return
        created = submit("Create product", lambda: client.create_product(form))
        if created:
            record = created.get("product") if isinstance(created.get("product"), dict) else created
            get_app_state().cache("products").add(record)
            st.success(f"Product {record.get('name', form['name'])} created")
