"""
Inventory Pilot — Dashboard (Navigation Hub).

Pure UI layer. All business logic comes from the engine:
    - InventoryApiClient -> products, warehouses, sales, purchases, returns
    - fetch_report_bundle -> the four report collections, concurrently
    - ReportAnalyzer      -> produces the Report Snapshot dict
    - generate_document   -> invoice / receipt PDF and XLSX
    - AppState            -> optimistic inserts and page-owned pollers

Usage:
    streamlit run inventory_engine/dashboard/app.py
"""

import logging
import os
import sys

# Load .env before the settings object reads the environment
from dotenv import load_dotenv
load_dotenv()

import streamlit as st

# ---------------------------------------------------------------------------
# Path setup
# ---------------------------------------------------------------------------
_PROJECT_ROOT = os.path.dirname(
    os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
)
if _PROJECT_ROOT not in sys.path:
    sys.path.insert(0, _PROJECT_ROOT)

from inventory_engine.config import settings
from inventory_engine.dashboard.data import get_app_state

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# ---------------------------------------------------------------------------
# Page config
# ---------------------------------------------------------------------------
st.set_page_config(
    page_title="Inventory Pilot",
    page_icon="\U0001f4e6",
    layout="wide",
    initial_sidebar_state="expanded",
)

# ---------------------------------------------------------------------------
# Sidebar — Navigation
# ---------------------------------------------------------------------------
with st.sidebar:
    st.title("Inventory Pilot")
    st.caption("Inventory & Sales Dashboard")
    st.divider()

    nav = st.radio(
        "Navigation",
        [
            "Advanced Reports",
            "Backend Reports",
            "Products",
            "Warehouses",
            "Sales",
            "Purchases",
            "Expected Returns",
        ],
        key="nav_radio",
    )
    st.divider()
    st.caption(f"Backend: {settings.API_BASE_URL}")

# Leaving a page stops its background refresh
_state = get_app_state()
_state.enter_page(nav)

# ===================================================================
# Routing
# ===================================================================
if nav == "Advanced Reports":
    from inventory_engine.dashboard.reports_page import render_reports_page
    render_reports_page()
elif nav == "Backend Reports":
    from inventory_engine.dashboard.backend_reports_page import render_backend_reports_page
    render_backend_reports_page()
elif nav == "Products":
    from inventory_engine.dashboard.products_page import render_products_page
    render_products_page()
elif nav == "Warehouses":
    from inventory_engine.dashboard.warehouses_page import render_warehouses_page
    render_warehouses_page()
elif nav == "Sales":
    from inventory_engine.dashboard.sales_page import render_sales_page
    render_sales_page()
elif nav == "Purchases":
    from inventory_engine.dashboard.purchases_page import render_purchases_page
    render_purchases_page()
elif nav == "Expected Returns":
    from inventory_engine.dashboard.returns_page import render_returns_page
    render_returns_page()
