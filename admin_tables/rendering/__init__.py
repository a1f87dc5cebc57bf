"""Rendering utilities for drawing tables and screens with Streamlit."""

from .bridge import get_session_object, render_table

__all__ = [
    "render_table",
    "get_session_object",
]
