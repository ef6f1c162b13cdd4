"""
Reflex UI components for the Collections application.

This package provides composable building blocks shared by the views:
- data_table: sortable table over a list state's display rows
- filter_panel: debounced filter controls bound to the criteria
- results: loading, error and empty states around the infinite scroll
- exclusion_panel: excluded customers list and the exclude dialog
- saved_filters_panel: named filter presets
- notes_dialog: notes of an invoice, ticket or customer
"""
