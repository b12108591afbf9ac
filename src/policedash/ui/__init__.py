"""Streamlit dashboard for police administrators."""
