"""
Purchases — purchase orders, the new-order form, and invoice / receipt
downloads built by the document generator.
"""

import pandas as pd
import streamlit as st

from inventory_engine.config import DOCUMENTS_DIR, settings
from inventory_engine.dashboard.components.top_bar import render_top_bar
from inventory_engine.dashboard.data import get_app_state, get_client, load, submit
from inventory_engine.models import Purchase
from inventory_engine.processors.documents import generate_document
from inventory_engine.processors.exports import export_records
from inventory_engine.processors.validation import (
    filled_item_rows,
    order_final_amount,
    order_subtotal,
    validate_purchase_order,
)

_PAYMENT_METHODS = ["cash", "bank_transfer", "cheque", "credit"]


def render_purchases_page() -> None:
    client = get_client()
    if render_top_bar("Purchases"):
        st.rerun()

    purchases = get_app_state().cache("purchases").merge(load("purchases", client.list_purchases, []))

    tab_list, tab_new = st.tabs(["Purchase Orders", "New Purchase"])
    with tab_new:
        _render_new_purchase_form()
    with tab_list:
        _render_purchases(purchases)


def _render_purchases(purchases: list) -> None:
    if not purchases:
        st.info("No purchase orders yet.")
        return

    models = [Purchase.model_validate(p) for p in purchases]
    st.dataframe(
        pd.DataFrame([
            {
                "Number": p.purchase_number,
                "Supplier": p.supplier.name if hasattr(p.supplier, "name") else p.supplier,
                "Items": len(p.items),
                "Total": p.final_amount or p.total_amount,
                "Payment": p.payment_status,
                "Date": p.purchase_date or p.created_at,
            }
            for p in models
        ]),
        hide_index=True, use_container_width=True,
        column_config={"Total": st.column_config.NumberColumn(format=f"{settings.CURRENCY} %.2f")},
    )

    # --- Documents ---
    st.subheader("Invoice / Receipt")
    by_number = {p.purchase_number or p.id: p for p in models}
    d1, d2, d3 = st.columns(3)
    number = d1.selectbox("Purchase", list(by_number), key="doc_purchase")
    doc_type = d2.selectbox("Document", ["invoice", "receipt"], key="doc_type")
    fmt = d3.selectbox("Format", ["pdf", "xlsx"], key="doc_fmt")
    save_copy = st.checkbox("Also save a copy on the server", key="doc_save")

    purchase = by_number[number]
    # Generated files are kept per selection, the download always matches what is shown
    documents = st.session_state.setdefault("documents", {})
    selection = (number, doc_type, fmt)
    if doc_type == "receipt" and purchase.payment_status != "paid":
        st.warning("Receipts are only issued for paid purchases.")
    elif st.button("Generate", key="doc_generate"):
        result = generate_document(purchase, fmt, doc_type, output_dir=DOCUMENTS_DIR if save_copy else None)
        if result.success:
            documents[selection] = result
        else:
            st.toast(f"Document generation failed: {result.error}", icon="❌")

    result = documents.get(selection)
    if result is not None:
        st.download_button(f"Download {result.filename}", result.content, file_name=result.filename)
        if result.layout == "simple":
            st.caption("Generated with the simple layout.")

    with st.expander("Export"):
        fmt = st.selectbox("Format", ["csv", "xlsx", "json"], key="purchases_export_fmt")
        filename, payload = export_records("purchases", purchases, fmt)
        st.download_button("Download", payload, file_name=filename, key="purchases_export_btn")


def _render_new_purchase_form() -> None:
    client = get_client()
    suppliers = load("suppliers", client.list_suppliers, [])
    products = load("products", client.list_products, [])
    supplier_names = {s.get("_id"): s.get("name") for s in suppliers}
    product_names = {p.get("_id"): f"{p.get('name')} ({p.get('sku')})" for p in products}

    with st.form("new_purchase_form"):
        supplier_id = st.selectbox("Supplier", list(supplier_names), format_func=supplier_names.get, index=None)
        items = st.data_editor(
            pd.DataFrame([{"productId": None, "quantity": 1, "unitPrice": 0.0}]),
            num_rows="dynamic",
            column_config={
                "productId": st.column_config.SelectboxColumn("Product", options=list(product_names)),
            },
            key="new_purchase_items",
        )
        c1, c2, c3 = st.columns(3)
        tax = c1.number_input("Tax", min_value=0.0, value=0.0)
        discount = c2.number_input("Discount", min_value=0.0, value=0.0)
        method = c3.selectbox("Payment method", _PAYMENT_METHODS)
        notes = st.text_area("Notes")
        submitted = st.form_submit_button("Create Purchase Order")

    if not submitted:
        return

    rows = filled_item_rows(items.to_dict("records"))
    form = {"supplierId": supplier_id, "items": rows}
    errors = validate_purchase_order(form)
    if errors:
        for message in errors.values():
            st.error(message)
        return

    form.update({
        "totalAmount": order_subtotal(rows),
        "taxAmount": tax,
        "discountAmount": discount,
        "finalAmount": order_final_amount(rows, tax, discount),
        "paymentMethod": method,
        "notes": notes,
    })
    created = submit("Create purchase order", lambda: client.create_purchase(form))
    if created:
        record = created.get("purchase") if isinstance(created.get("purchase"), dict) else created
        get_app_state().cache("purchases").add(record)
        st.success(f"Purchase order {record.get('purchaseNumber', '')} created")
