"""
Collections UI: A Reflex application for accounts receivable collections.

This package provides a web interface over customers, invoices, payments
and collection tickets stored in Supabase. Every view is a paginated,
filterable list with infinite scroll, deep links and saved filters.

Subpackages:
- listing: Framework-free paging, exclusion, saved filter and deep link logic
- state: Reflex state classes wiring the listing logic to events
- components: Reusable Reflex UI components
- pages: One page per list view
- models: Data models and serialization
- services: Data access layer (demo and Supabase implementations)
- data: Demo fixtures

Main entry points:
- app.main(): Start the development server
- app.app: The Reflex application instance
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
