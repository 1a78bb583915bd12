"""Gradio user interface for Postcraft."""
