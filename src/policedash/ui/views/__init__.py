"""Section renderers for the Streamlit dashboard."""

from .alerts import render_alerts
from .complaints import render_complaints
from .criminals import render_criminals
from .diagnostics import render_diagnostics
from .enrollment import render_bulk_enroll, render_enroll
from .login import admin_session, render_login
from .match import render_match
from .overview import render_analytics, render_dashboard

__all__ = [
    "admin_session",
    "render_alerts",
    "render_analytics",
    "render_bulk_enroll",
    "render_complaints",
    "render_criminals",
    "render_dashboard",
    "render_diagnostics",
    "render_enroll",
    "render_login",
    "render_match",
]
