"""
inventory_engine — Inventory Pilot dashboard engine.

Submodules:
    - config:      Paths + environment-driven settings
    - connectors:  REST API client, response normalization, polling
    - models:      Pydantic record schemas (Product, SalesOrder, ...)
    - processors:  Pure business logic (reports, documents, exports, validation)
    - state:       Explicit app state + optimistic insert cache
    - dashboard:   Streamlit UI pages
"""
