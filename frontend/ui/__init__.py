"""Streamlit UI for Spinet."""
