"""
Metrics — Pure-function aggregation modules for the reports view.

Each module takes raw API records (dicts) and returns dictionaries or lists.
No UI, no HTTP, no side effects.

Modules:
    overview   — Revenue, cost, profit, margin, order value, return rate
    trends     — Trailing daily sales series
    products   — Top products by revenue
    inventory  — Stock alerts, warehouse capacity, list filters and stats
"""
