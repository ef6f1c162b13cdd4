"""Reflex configuration for the Collections UI application."""

import reflex as rx

config = rx.Config(
    app_name="collections_ui",
    # Use the src directory structure
    app_module_import="collections_ui.app",
)
