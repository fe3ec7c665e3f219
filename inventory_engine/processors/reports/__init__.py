"""
Reports — client-side aggregation over sales, purchases and stock.

Entry point:
    analyzer.ReportAnalyzer — builds the report snapshot the dashboard renders
"""

from .analyzer import ReportAnalyzer

__all__ = ["ReportAnalyzer"]
