"""
State — explicit application state for the dashboard session.

Modules:
    app_state — OptimisticCache for just-created records, AppState holding
                caches and the active polling tasks
"""

from .app_state import AppState, OptimisticCache

__all__ = ["AppState", "OptimisticCache"]
