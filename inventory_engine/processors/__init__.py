"""
Processors — pure business logic. No Streamlit, no HTTP.

Packages:
    reports    — Metric aggregation over sales / purchases / stock
    documents  — Invoice & receipt generation (PDF / XLSX)
    exports    — Collection exports ({entity}.{format})
    validation — Field-level form validation
"""
