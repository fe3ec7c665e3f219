"""
Top Status Bar — rendered at the top of every main-panel page.

Layout:
    ## {title}                          [Refresh]
    caption: backend URL · last refresh time · auto-refresh interval

Called from each page via:
    from inventory_engine.dashboard.components.top_bar import render_top_bar
    if render_top_bar("Sales", task):
        ...
"""

from datetime import datetime

import streamlit as st

from inventory_engine.config import settings


def render_top_bar(title: str, task=None, subtitle: str = "") -> bool:
    """
    Render the page header with a manual refresh button.

    Args:
        title:    Page title.
        task:     PollingTask feeding the page, if any. Refresh wakes it.
        subtitle: Optional caption under the title.

    Returns:
        True when the user pressed Refresh on this run.
    """
    col_title, col_btn = st.columns([5, 1])
    with col_title:
        st.header(title)
        if subtitle:
            st.caption(subtitle)
    with col_btn:
        refreshed = st.button("Refresh", key=f"refresh_{title}", use_container_width=True)

    if refreshed and task is not None:
        task.refresh_now()

    parts = [f"Backend: `{settings.API_BASE_URL}`"]
    if task is not None:
        parts.append(f"auto-refresh every {task.interval:g}s")
    parts.append(f"rendered {datetime.now().strftime('%H:%M:%S')}")
    st.caption(" · ".join(parts))
    return refreshed
