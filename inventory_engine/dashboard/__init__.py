"""
Dashboard — Streamlit UI layer. Renders what connectors and processors return.

Run with:
    streamlit run inventory_engine/dashboard/app.py
"""
